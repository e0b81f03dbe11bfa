"""
Exceptions raised by the deployment workflow.
"""
from typing import List, Optional


class DeployError(Exception):
    """Base class for every error the deployer reports to the operator."""


class UserAbort(DeployError):
    """The operator declined a confirmation prompt."""


class PasswordValidationError(DeployError):
    """A database password was too short or did not match its confirmation."""


class ConfigError(DeployError):
    """The configuration file is missing, unreadable or incomplete."""


class CommandError(DeployError):
    """
    An external command exited with a non-zero status.
    """
    def __init__(self, command: List[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"Command '{' '.join(command)}' failed with exit code {returncode}{detail}")


class PrerequisiteError(DeployError):
    """A required tool is missing and could not be installed."""


class BackupError(DeployError):
    """The database dump could not be written to the backup directory."""


class DeploymentError(DeployError):
    """
    A topology step (network, volume, image or container) failed.

    :param stage: Name of the step that failed, e.g. ``image:backend`` or ``start:backend``.
    """
    def __init__(self, stage: str, message: str, cause: Optional[Exception] = None):
        self.stage = stage
        self.cause = cause
        super().__init__(f"[{stage}] {message}")
