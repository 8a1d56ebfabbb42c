import logging
from typing import Optional, Type

from rich.console import Console

from .errors import ConfigurationError, KituraDockerError
from .models import RegistryTarget, VersionTable
from .services.actions import ActionExecutor
from .services.builders import ImageBuilder, SwiftCIBuilder
from .services.registry import login_command
from .services.versions import default_version_table

console = Console()
logger = logging.getLogger("kituradocker")


class ImagePublisher:
    """Builds, pushes and aliases one image per version in the version table."""

    def __init__(
        self,
        executor: ActionExecutor,
        version_table: Optional[VersionTable] = None,
        builder_class: Type[ImageBuilder] = SwiftCIBuilder,
        enable_build: bool = False,
        enable_push: bool = False,
        enable_aliases: bool = False,
        registry: Optional[RegistryTarget] = None,
        temp_root: Optional[str] = None,
    ):
        self.executor = executor
        self.version_table = version_table or default_version_table()
        self.builder_class = builder_class
        self.enable_build = enable_build
        self.enable_push = enable_push
        self.enable_aliases = enable_aliases
        self.registry = registry
        self.temp_root = temp_root

        if self.registry is not None:
            self._validate_registry(self.registry)

    def _validate_registry(self, registry: RegistryTarget):
        if not registry.host:
            raise ConfigurationError("Registry target has no host.")
        if registry.user:
            login_command(registry)

    def create_builder(self, version: str) -> ImageBuilder:
        return self.builder_class(version, self.executor, temp_root=self.temp_root)

    def publish_version(self, version: str):
        builder = self.create_builder(version)
        aliases = self.version_table.aliases_for(version)
        logger.info("Processing %s", builder.docker_tag)

        if self.enable_build:
            self.executor.phase("Build docker image")
            builder.build()

        if self.enable_push:
            self.executor.phase("Push docker image to public registry")
            builder.push()

        if self.enable_aliases and aliases:
            self.executor.phase("Create public aliases")
            for alias_name in aliases:
                builder.alias(version, alias_name)

        if self.registry is not None:
            self.publish_private(builder, aliases)

    def publish_private(self, builder: ImageBuilder, aliases):
        registry = self.registry
        if registry.user:
            self.executor.phase("Log in to private registry")
            logger.info("Logging in to %s as %s", registry.host, registry.user)
            self.executor.run(login_command(registry))

        self.executor.phase("Push docker image to private registry")
        self.executor.run(["docker", "tag", builder.docker_tag, registry.qualify(builder.docker_tag)])
        builder.push(host=registry.host)

        if aliases:
            self.executor.phase("Create private aliases")
            for alias_name in aliases:
                builder.alias(builder.version, alias_name, host=registry.host)

    def publish(self):
        """Runs every version in order. The first failure aborts the run."""
        for version in self.version_table.versions:
            self.publish_version(version)

    def run(self) -> int:
        try:
            self.publish()
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except KituraDockerError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1

        console.print(
            f"[green]Processed {len(self.version_table.versions)} image version(s).[/green]"
        )
        return 0
