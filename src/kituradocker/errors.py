"""Domain errors for kituradocker."""

from typing import Optional, Sequence


class KituraDockerError(RuntimeError):
    """Raised when an image run cannot continue safely."""


class ConfigurationError(KituraDockerError):
    """Raised when registry settings or the version table are invalid."""


class DirectoryError(KituraDockerError):
    """Raised when a build context directory cannot be created."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class FileWriteError(KituraDockerError):
    """Raised when a manifest cannot be written."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class CommandError(KituraDockerError):
    """Raised when an external command fails or cannot be launched."""

    def __init__(self, command: Sequence[str], exit_code: Optional[int], message: str):
        super().__init__(message)
        self.command = list(command)
        self.exit_code = exit_code
