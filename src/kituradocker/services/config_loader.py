"""Configuration loader for kituradocker."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from kituradocker.errors import ConfigurationError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults and the version table."""

    SUPPORTED_KEYS = {
        "versions",
        "aliases",
        "image",
        "registry",
        "verbose",
        "dry_run",
        "enable_build",
        "enable_push",
        "enable_aliases",
        "log_file",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        if "versions" in parsed and not isinstance(parsed["versions"], list):
            raise ConfigurationError("`versions` must be a YAML list.")
        if "aliases" in parsed:
            aliases = parsed["aliases"]
            if not isinstance(aliases, dict) or not all(
                isinstance(values, list) for values in aliases.values()
            ):
                raise ConfigurationError("`aliases` must map each version to a YAML list.")

        return parsed
