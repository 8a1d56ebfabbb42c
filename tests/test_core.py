import io

import pytest
from rich.console import Console

import kituradocker.core as core_module
import kituradocker.services.command_runner as command_runner_module
from kituradocker.core import ImagePublisher
from kituradocker.errors import CommandError, ConfigurationError
from kituradocker.models import RegistryTarget
from kituradocker.services.actions import ActionExecutor, build_action_executor
from kituradocker.services.builders import SwiftDevBuilder
from kituradocker.services.versions import build_version_table


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


class RecordingExecutor(ActionExecutor):
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def phase(self, name):
        self.calls.append(("phase", name))

    def create_directory(self, path):
        self.calls.append(("create_directory", path))

    def create_file(self, path, content):
        self.calls.append(("create_file", path))

    def run(self, command, cwd=None):
        self.calls.append(("run",) + tuple(command))
        if self.fail_on and self.fail_on == list(command):
            raise CommandError(command, 1, f"Command failed (1): {' '.join(command)}")

    def commands(self):
        return [call[1:] for call in self.calls if call[0] == "run"]


@pytest.fixture
def single_version():
    return build_version_table(["5.3.3"], {"5.3.3": ["5.3", "5", "latest"]})


@pytest.fixture
def two_versions():
    return build_version_table(["5.2.5", "5.3.3"], {"5.2.5": ["5.2"], "5.3.3": ["5.3"]})


def test_publish_end_to_end_public_registry(tmp_path, single_version):
    executor = RecordingExecutor()
    publisher = ImagePublisher(
        executor=executor,
        version_table=single_version,
        enable_build=True,
        enable_push=True,
        enable_aliases=True,
        temp_root=str(tmp_path),
    )

    publisher.publish()

    effects = [call for call in executor.calls if call[0] != "phase"]
    context_dir = effects[0][1]
    assert effects[0] == ("create_directory", context_dir)
    assert effects[1] == ("create_file", f"{context_dir}/Dockerfile")
    assert effects[2:] == [
        ("run", "docker", "build", "-t", "kitura/swift-ci:5.3.3", context_dir),
        ("run", "docker", "push", "kitura/swift-ci:5.3.3"),
        ("run", "docker", "tag", "kitura/swift-ci:5.3.3", "kitura/swift-ci:5.3"),
        ("run", "docker", "push", "kitura/swift-ci:5.3"),
        ("run", "docker", "tag", "kitura/swift-ci:5.3.3", "kitura/swift-ci:5"),
        ("run", "docker", "push", "kitura/swift-ci:5"),
        ("run", "docker", "tag", "kitura/swift-ci:5.3.3", "kitura/swift-ci:latest"),
        ("run", "docker", "push", "kitura/swift-ci:latest"),
    ]


def test_publish_announces_phases_before_operations(single_version):
    executor = RecordingExecutor()
    ImagePublisher(
        executor=executor,
        version_table=single_version,
        enable_push=True,
        enable_aliases=True,
    ).publish()

    assert executor.calls[0] == ("phase", "Push docker image to public registry")
    assert executor.calls[2] == ("phase", "Create public aliases")


def test_publish_skips_disabled_steps(single_version):
    executor = RecordingExecutor()

    ImagePublisher(executor=executor, version_table=single_version).publish()

    assert executor.calls == []


def test_publish_follows_version_order(two_versions):
    executor = RecordingExecutor()

    ImagePublisher(executor=executor, version_table=two_versions, enable_push=True).publish()

    assert executor.commands() == [
        ("docker", "push", "kitura/swift-ci:5.2.5"),
        ("docker", "push", "kitura/swift-ci:5.3.3"),
    ]


def test_publish_uses_selected_builder(single_version):
    executor = RecordingExecutor()

    ImagePublisher(
        executor=executor,
        version_table=single_version,
        builder_class=SwiftDevBuilder,
        enable_push=True,
    ).publish()

    assert executor.commands() == [("docker", "push", "kitura/swift-dev:5.3.3")]


def test_private_registry_flow_logs_in_once_per_version(two_versions):
    executor = RecordingExecutor()
    registry = RegistryTarget(host="registry.example.com", user="bob", password="s3cret")

    ImagePublisher(executor=executor, version_table=two_versions, registry=registry).publish()

    login = ("docker", "login", "registry.example.com", "-u", "bob", "-p", "s3cret")
    assert executor.commands() == [
        login,
        ("docker", "tag", "kitura/swift-ci:5.2.5", "registry.example.com/kitura/swift-ci:5.2.5"),
        ("docker", "push", "registry.example.com/kitura/swift-ci:5.2.5"),
        (
            "docker",
            "tag",
            "registry.example.com/kitura/swift-ci:5.2.5",
            "registry.example.com/kitura/swift-ci:5.2",
        ),
        ("docker", "push", "registry.example.com/kitura/swift-ci:5.2"),
        login,
        ("docker", "tag", "kitura/swift-ci:5.3.3", "registry.example.com/kitura/swift-ci:5.3.3"),
        ("docker", "push", "registry.example.com/kitura/swift-ci:5.3.3"),
        (
            "docker",
            "tag",
            "registry.example.com/kitura/swift-ci:5.3.3",
            "registry.example.com/kitura/swift-ci:5.3",
        ),
        ("docker", "push", "registry.example.com/kitura/swift-ci:5.3"),
    ]


def test_private_registry_never_touches_public_tags(single_version):
    executor = RecordingExecutor()
    registry = RegistryTarget(host="registry.example.com")

    ImagePublisher(executor=executor, version_table=single_version, registry=registry).publish()

    pushed = [command[2] for command in executor.commands() if command[1] == "push"]
    assert pushed
    assert all(tag.startswith("registry.example.com/") for tag in pushed)
    assert not any(command[1] == "login" for command in executor.commands())


def test_registry_user_without_password_fails_before_any_work(single_version):
    executor = RecordingExecutor()

    with pytest.raises(ConfigurationError):
        ImagePublisher(
            executor=executor,
            version_table=single_version,
            enable_build=True,
            registry=RegistryTarget(host="registry.example.com", user="bob"),
        )

    assert executor.calls == []


def test_failure_aborts_remaining_versions(two_versions):
    executor = RecordingExecutor(fail_on=["docker", "push", "kitura/swift-ci:5.2.5"])
    publisher = ImagePublisher(
        executor=executor,
        version_table=two_versions,
        enable_push=True,
        enable_aliases=True,
    )

    with pytest.raises(CommandError):
        publisher.publish()

    assert executor.commands() == [("docker", "push", "kitura/swift-ci:5.2.5")]


def test_run_returns_exit_code(monkeypatch, two_versions):
    monkeypatch.setattr(core_module, "console", Console(file=io.StringIO()))

    failing = ImagePublisher(
        executor=RecordingExecutor(fail_on=["docker", "push", "kitura/swift-ci:5.2.5"]),
        version_table=two_versions,
        enable_push=True,
    )
    passing = ImagePublisher(
        executor=RecordingExecutor(), version_table=two_versions, enable_push=True
    )

    assert failing.run() == 1
    assert passing.run() == 0


def test_run_reports_cancellation(monkeypatch, two_versions):
    class InterruptingExecutor(RecordingExecutor):
        def run(self, command, cwd=None):
            super().run(command, cwd=cwd)
            raise KeyboardInterrupt

    output = io.StringIO()
    monkeypatch.setattr(core_module, "console", Console(file=output, width=400, color_system=None))
    executor = InterruptingExecutor()

    exit_code = ImagePublisher(
        executor=executor, version_table=two_versions, enable_push=True
    ).run()

    assert exit_code == 1
    assert "Operation cancelled by user." in output.getvalue()
    assert executor.commands() == [("docker", "push", "kitura/swift-ci:5.2.5")]


def test_dry_run_never_launches_processes(monkeypatch, tmp_path, two_versions):
    def fail_run(*_args, **_kwargs):
        raise AssertionError("subprocess must not be called during a dry run")

    monkeypatch.setattr(command_runner_module.subprocess, "run", fail_run)
    console = Console(file=io.StringIO(), width=400, color_system=None)
    executor = build_action_executor(
        dry_run=True,
        verbose=False,
        console=console,
        logger=DummyLogger(),
        secrets=["s3cret"],
    )

    ImagePublisher(
        executor=executor,
        version_table=two_versions,
        enable_build=True,
        enable_push=True,
        enable_aliases=True,
        registry=RegistryTarget(host="registry.example.com", user="bob", password="s3cret"),
        temp_root=str(tmp_path),
    ).publish()

    output = console.file.getvalue()
    assert list(tmp_path.iterdir()) == []
    assert "docker build -t kitura/swift-ci:5.3.3" in output
    assert "docker push registry.example.com/kitura/swift-ci:5.3" in output
    assert "s3cret" not in output
