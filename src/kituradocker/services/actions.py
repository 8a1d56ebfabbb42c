"""Side-effect executors for kituradocker.

Every filesystem write, directory creation and external command issued while
building images goes through an :class:`ActionExecutor`. Swapping the executor
is what turns a real run into a dry run, or into a run that both prints and
performs each step.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from kituradocker.services.command_runner import CommandRunner, redact_command
from kituradocker.services.filesystem import FileSystemService


class ActionExecutor(ABC):
    """High level operations the image pipeline may perform on the system."""

    @abstractmethod
    def phase(self, name: str):
        """Announces a logical phase boundary. Must never raise."""

    @abstractmethod
    def create_directory(self, path: str):
        """Ensures ``path`` and its parents exist."""

    @abstractmethod
    def create_file(self, path: str, content: str):
        """Creates ``path`` with ``content``, replacing any existing file."""

    @abstractmethod
    def run(self, command: Sequence[str], cwd: Optional[str] = None):
        """Runs ``command[0]`` with the remaining items as arguments."""


class RealActionExecutor(ActionExecutor):
    """Actually performs each action."""

    def __init__(self, filesystem_service: FileSystemService, command_runner: CommandRunner):
        self.filesystem_service = filesystem_service
        self.command_runner = command_runner

    def phase(self, name: str):
        pass

    def create_directory(self, path: str):
        self.filesystem_service.ensure_dir(path)

    def create_file(self, path: str, content: str):
        self.filesystem_service.write_file(path, content)

    def run(self, command: Sequence[str], cwd: Optional[str] = None):
        self.command_runner.run(list(command), cwd=cwd)


class PrintActionExecutor(ActionExecutor):
    """Only prints the actions."""

    def __init__(self, console: Console, secrets: Iterable[str] = ()):
        self.console = console
        self.secrets = frozenset(secret for secret in secrets if secret)

    def phase(self, name: str):
        self.console.print(f"[bold cyan] == Phase: {escape(name)}[/bold cyan]")

    def create_directory(self, path: str):
        self.console.print(f"[bold] > Creating directory at path: {escape(path)}[/bold]")

    def create_file(self, path: str, content: str):
        self.console.print(f"[bold] > Creating file at path: {escape(path)}[/bold]")
        indented = "\n".join(f"    {line}" for line in content.splitlines())
        self.console.print(f"[yellow]{escape(indented)}[/yellow]")

    def run(self, command: Sequence[str], cwd: Optional[str] = None):
        shown = " ".join(redact_command(command, self.secrets))
        self.console.print(f"[bold] > Executing command: {escape(shown)}[/bold]")
        if cwd:
            self.console.print(f"[bold]   Working Directory: {escape(cwd)}[/bold]")


class CompositeActionExecutor(ActionExecutor):
    """Performs every action on each member, in the order given.

    A failing member stops the call: members after it never receive that
    action, and the error propagates to the caller. List the printing
    executor first so a failing step is still traced.
    """

    def __init__(self, executors: Iterable[ActionExecutor] = ()):
        self.executors = tuple(executors)

    def phase(self, name: str):
        for executor in self.executors:
            executor.phase(name)

    def create_directory(self, path: str):
        for executor in self.executors:
            executor.create_directory(path)

    def create_file(self, path: str, content: str):
        for executor in self.executors:
            executor.create_file(path, content)

    def run(self, command: Sequence[str], cwd: Optional[str] = None):
        for executor in self.executors:
            executor.run(command, cwd=cwd)


def build_action_executor(
    dry_run: bool,
    verbose: bool,
    console: Console,
    logger: logging.Logger,
    secrets: Iterable[str] = (),
) -> CompositeActionExecutor:
    """Builds the run-wide executor for the requested mode.

    dry-run prints only, verbose prints then performs, otherwise actions are
    performed silently.
    """
    secrets = tuple(secrets)
    members: List[ActionExecutor] = []
    if dry_run or verbose:
        members.append(PrintActionExecutor(console=console, secrets=secrets))
    if not dry_run:
        members.append(
            RealActionExecutor(
                filesystem_service=FileSystemService(logger=logger),
                command_runner=CommandRunner(logger=logger, secrets=secrets),
            )
        )
    return CompositeActionExecutor(members)
