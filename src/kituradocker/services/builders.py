"""Docker image builders for the Swift runtime images."""

import os
import tempfile
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

from kituradocker.constants import (
    MANIFEST_NAME,
    SWIFT_BASE_IMAGE,
    SWIFT_CI_REPOSITORY,
    SWIFT_DEV_REPOSITORY,
)
from kituradocker.models import ImageDescriptor
from kituradocker.services.actions import ActionExecutor


class ImageBuilder(ABC):
    """Builds, pushes and aliases the image of one runtime version.

    Subclasses only choose the repository and the Dockerfile content; every
    side effect goes through ``executor``.
    """

    repository: str = ""

    def __init__(self, version: str, executor: ActionExecutor, temp_root: Optional[str] = None):
        self.version = version
        self.executor = executor
        self.temp_root = temp_root or tempfile.gettempdir()
        self.docker_tag = f"{self.repository}:{version}"

    @property
    def descriptor(self) -> ImageDescriptor:
        return ImageDescriptor(version=self.version, docker_tag=self.docker_tag)

    @abstractmethod
    def render_manifest(self) -> str:
        """Returns the Dockerfile content for this image."""

    def materialize(self, path: str):
        self.executor.create_file(path, self.render_manifest())

    def build(self) -> str:
        """Builds the image from a fresh build context and returns its path."""
        context_dir = os.path.join(self.temp_root, uuid.uuid4().hex)
        self.executor.create_directory(context_dir)
        self.materialize(os.path.join(context_dir, MANIFEST_NAME))
        self.executor.run(["docker", "build", "-t", self.docker_tag, context_dir], cwd=context_dir)
        return context_dir

    def push(self, host: Optional[str] = None):
        tag = f"{host}/{self.docker_tag}" if host else self.docker_tag
        self.executor.run(["docker", "push", tag])

    def alias(self, version: str, alias_name: str, host: Optional[str] = None):
        """Tags ``base:version`` as ``base:alias_name``, then pushes the alias."""
        base_tag = self.descriptor.base_tag
        if host:
            base_tag = f"{host}/{base_tag}"

        existing_tag = f"{base_tag}:{version}"
        alias_tag = f"{base_tag}:{alias_name}"

        self.executor.run(["docker", "tag", existing_tag, alias_tag])
        self.executor.run(["docker", "push", alias_tag])


class SwiftCIBuilder(ImageBuilder):
    """Image suitable for CI builds."""

    repository = SWIFT_CI_REPOSITORY

    def render_manifest(self) -> str:
        return f"""FROM {SWIFT_BASE_IMAGE}:{self.version}

RUN apt-get update && apt-get install -y \\
    git sudo wget pkg-config libcurl4-openssl-dev libssl-dev \\
    && rm -rf /var/lib/apt/lists/*

RUN mkdir /project

WORKDIR /project
"""


class SwiftDevBuilder(ImageBuilder):
    """Image suitable for local (non-CI) development, layered on the CI image."""

    repository = SWIFT_DEV_REPOSITORY

    def render_manifest(self) -> str:
        return f"""FROM {SWIFT_CI_REPOSITORY}:{self.version}

RUN apt-get update && apt-get install -y \\
    curl net-tools iproute2 netcat \\
    && rm -rf /var/lib/apt/lists/*

WORKDIR /project
"""


BUILDERS: Dict[str, Type[ImageBuilder]] = {
    "ci": SwiftCIBuilder,
    "dev": SwiftDevBuilder,
}
