"""Shared domain models for kituradocker."""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class ImageDescriptor:
    """A runtime version and the canonical image tag built for it."""

    version: str
    docker_tag: str

    @property
    def base_tag(self) -> str:
        return self.docker_tag.split(":")[0]


@dataclass(frozen=True)
class RegistryTarget:
    """Private registry host and optional credentials."""

    host: str
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    def qualify(self, tag: str) -> str:
        return f"{self.host}/{tag}"


@dataclass(frozen=True)
class VersionTable:
    """Ordered runtime versions and the aliases each one owns."""

    versions: Tuple[str, ...]
    aliases: Mapping[str, Tuple[str, ...]]

    def aliases_for(self, version: str) -> Tuple[str, ...]:
        return tuple(self.aliases.get(version, ()))
