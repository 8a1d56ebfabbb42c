import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE, SWIFT_ALIASES, SWIFT_VERSIONS
from .core import ImagePublisher, console
from .errors import KituraDockerError
from .services.actions import build_action_executor
from .services.builders import BUILDERS
from .services.config_loader import ConfigLoader
from .services.registry import read_password, resolve_registry_target
from .services.versions import build_version_table


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def _load_version_table(config_values):
    versions = config_values.get("versions")
    aliases = config_values.get("aliases")
    if versions is None:
        return build_version_table(SWIFT_VERSIONS, aliases if aliases is not None else SWIFT_ALIASES)
    return build_version_table(versions, aliases)


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option("-v", "--verbose", is_flag=True, default=None, help="Enable verbose mode")
@click.option("--enable-build", is_flag=True, default=None, help="Build docker images")
@click.option("--enable-push", is_flag=True, default=None, help="Push docker images")
@click.option(
    "--enable-aliases",
    is_flag=True,
    default=None,
    help="Tag and push convenience aliases",
)
@click.option(
    "-n",
    "--dry-run",
    is_flag=True,
    default=None,
    help="Dry-run (print but do not execute commands)",
)
@click.option(
    "--registry",
    required=False,
    help="Specify a private registry (https://[user[:password]@]registry.url)",
)
@click.option("--registry-password", required=False, help="Registry password")
@click.option(
    "--registry-password-stdin",
    is_flag=True,
    default=False,
    help="Read registry password from stdin",
)
@click.option(
    "--image",
    required=False,
    type=click.Choice(sorted(BUILDERS)),
    help="Image flavor to process (default: ci)",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    verbose,
    enable_build,
    enable_push,
    enable_aliases,
    dry_run,
    registry,
    registry_password,
    registry_password_stdin,
    image,
    config,
    log_file,
):
    """A utility to initialize Docker images used by the Kitura project."""
    logger = logging.getLogger("kituradocker")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
        version_table = _load_version_table(config_values)
    except KituraDockerError as exc:
        raise click.ClickException(str(exc)) from exc

    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    enable_build = bool(_resolve_option(enable_build, config_values, "enable_build", default=False))
    enable_push = bool(_resolve_option(enable_push, config_values, "enable_push", default=False))
    enable_aliases = bool(
        _resolve_option(enable_aliases, config_values, "enable_aliases", default=False)
    )
    registry = _resolve_option(registry, config_values, "registry")
    image = _resolve_option(image, config_values, "image", default="ci")
    log_file = _resolve_option(log_file, config_values, "log_file")

    if image not in BUILDERS:
        raise click.ClickException(
            f"Unknown image flavor '{image}'. Choose one of: {', '.join(sorted(BUILDERS))}."
        )

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    # Read eagerly when asked, even if the registry URL carries no user.
    password_from_stdin = None
    if registry_password_stdin:
        click.echo("Enter password: ", err=True)
        password_from_stdin = read_password(click.get_text_stream("stdin"))

    try:
        registry_target = None
        if registry:
            registry_target = resolve_registry_target(
                registry,
                password_from_arg=registry_password,
                password_from_stdin=password_from_stdin,
            )

        secrets = [registry_target.password] if registry_target and registry_target.password else []
        executor = build_action_executor(
            dry_run=dry_run,
            verbose=verbose,
            console=console,
            logger=logger,
            secrets=secrets,
        )
        publisher = ImagePublisher(
            executor=executor,
            version_table=version_table,
            builder_class=BUILDERS[image],
            enable_build=enable_build,
            enable_push=enable_push,
            enable_aliases=enable_aliases,
            registry=registry_target,
        )
    except KituraDockerError as exc:
        raise click.ClickException(str(exc)) from exc

    file_handler = None
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        exit_code = publisher.run()
    finally:
        if file_handler is not None:
            logger.removeHandler(file_handler)
            file_handler.close()

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
