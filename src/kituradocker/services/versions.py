"""Version table validation and alias derivation."""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from packaging import version

from kituradocker.constants import LATEST_ALIAS, SWIFT_ALIASES, SWIFT_VERSIONS
from kituradocker.errors import ConfigurationError
from kituradocker.errors_catalog import actionable_error
from kituradocker.models import VersionTable


def parse_version(value: str) -> version.Version:
    try:
        return version.Version(value)
    except version.InvalidVersion as exc:
        raise ConfigurationError(actionable_error("invalid_version", version=value)) from exc


def derive_aliases(versions: Iterable[str]) -> Dict[str, Tuple[str, ...]]:
    """Derives convenience aliases from a list of versions.

    The newest release of each minor line gets ``major.minor``, the newest of
    each major line gets ``major`` and the newest overall gets ``latest``.
    """
    parsed = [(value, parse_version(value)) for value in versions]
    if not parsed:
        return {}

    newest_minor: Dict[Tuple[int, int], Tuple[str, version.Version]] = {}
    newest_major: Dict[int, Tuple[str, version.Version]] = {}
    for value, ver in parsed:
        minor_key = (ver.major, ver.minor)
        if minor_key not in newest_minor or ver > newest_minor[minor_key][1]:
            newest_minor[minor_key] = (value, ver)
        if ver.major not in newest_major or ver > newest_major[ver.major][1]:
            newest_major[ver.major] = (value, ver)
    newest_value = max(parsed, key=lambda item: item[1])[0]

    aliases: Dict[str, List[str]] = {}
    for (major, minor), (value, _) in newest_minor.items():
        aliases.setdefault(value, []).append(f"{major}.{minor}")
    for major, (value, _) in newest_major.items():
        aliases.setdefault(value, []).append(str(major))
    aliases.setdefault(newest_value, []).append(LATEST_ALIAS)

    return {value: tuple(aliases[value]) for value, _ in parsed if value in aliases}


def build_version_table(
    versions: Iterable[str],
    aliases: Optional[Mapping[str, Iterable[str]]] = None,
) -> VersionTable:
    """Validates versions and aliases and returns an immutable table.

    When ``aliases`` is None they are derived from ``versions``.
    """
    ordered = tuple(str(value) for value in versions)
    seen = set()
    for value in ordered:
        parse_version(value)
        if value in seen:
            raise ConfigurationError(f"Version {value} is listed more than once.")
        seen.add(value)

    if aliases is None:
        resolved = derive_aliases(ordered)
    else:
        resolved = {
            str(key): tuple(str(alias) for alias in values) for key, values in aliases.items()
        }

    owners: Dict[str, str] = {}
    for key, values in resolved.items():
        if key not in seen:
            raise ConfigurationError(actionable_error("unknown_alias_version", version=key))
        for alias in values:
            if alias in owners:
                raise ConfigurationError(
                    actionable_error("duplicate_alias", alias=alias, first=owners[alias], second=key)
                )
            owners[alias] = key

    return VersionTable(versions=ordered, aliases=resolved)


def default_version_table() -> VersionTable:
    return build_version_table(SWIFT_VERSIONS, SWIFT_ALIASES)
