"""Actionable error catalog for kituradocker."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "registry_missing_host": {
        "what": "Registry URL has no host: {url}",
        "next": "Use the form `https://[user[:password]@]registry.url`.",
    },
    "registry_missing_password": {
        "what": "Registry user '{user}' was given without a password.",
        "next": "Embed it in the URL, pass `--registry-password` or use `--registry-password-stdin`.",
    },
    "invalid_version": {
        "what": "Invalid version in version table: {version}",
        "next": "Use semantic versions such as `5.3.3` and quote them in YAML files.",
    },
    "unknown_alias_version": {
        "what": "Aliases declared for unknown version: {version}",
        "next": "Add {version} to `versions` or remove its alias entry.",
    },
    "duplicate_alias": {
        "what": "Alias '{alias}' is declared for both {first} and {second}.",
        "next": "Give every alias exactly one canonical version.",
    },
    "command_not_found": {
        "what": "Required command not found: {command}",
        "next": "Install it and make sure it is on PATH, or use `--dry-run`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
