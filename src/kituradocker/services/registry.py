"""Private registry settings for kituradocker."""

from typing import List, Optional, TextIO
from urllib.parse import unquote, urlparse

from kituradocker.errors import ConfigurationError
from kituradocker.errors_catalog import actionable_error
from kituradocker.models import RegistryTarget


def read_password(stream: TextIO) -> Optional[str]:
    """Returns the first line of ``stream`` without its line ending."""
    line = stream.readline()
    if not line:
        return None
    return line.rstrip("\r\n")


def resolve_registry_target(
    url: str,
    password_from_arg: Optional[str] = None,
    password_from_stdin: Optional[str] = None,
) -> RegistryTarget:
    """Parses ``https://[user[:password]@]registry.url`` into a target.

    The password is taken from stdin first, then the explicit option, then the
    URL itself. It is only kept when the URL names a user.
    """
    parsed = urlparse(url)
    if not parsed.hostname:
        raise ConfigurationError(actionable_error("registry_missing_host", url=url))

    try:
        port = parsed.port
    except ValueError as exc:
        raise ConfigurationError(f"Registry URL has an invalid port: {url}") from exc

    host = f"{parsed.hostname}:{port}" if port else parsed.hostname
    user = unquote(parsed.username) if parsed.username else None
    if not user:
        return RegistryTarget(host=host)

    url_password = unquote(parsed.password) if parsed.password is not None else None
    password = next(
        (
            candidate
            for candidate in (password_from_stdin, password_from_arg, url_password)
            if candidate is not None
        ),
        None,
    )
    if not password:
        raise ConfigurationError(actionable_error("registry_missing_password", user=user))

    return RegistryTarget(host=host, user=user, password=password)


def login_command(target: RegistryTarget) -> List[str]:
    if not target.user or not target.password:
        raise ConfigurationError(f"Registry {target.host} has no credentials to log in with.")
    return ["docker", "login", target.host, "-u", target.user, "-p", target.password]
