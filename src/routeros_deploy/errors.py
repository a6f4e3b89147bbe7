from __future__ import annotations

from typing import Optional


class DeployError(Exception):
    """Base class for errors raised by routeros-deploy."""


class UsageError(DeployError):
    """Bad command line: missing or unknown flag, invalid value."""


class ConfigurationError(DeployError):
    """Referenced files are missing or the inputs describe no usable targets."""


class DeploymentError(DeployError):
    """A single target failed; the run continues with the next one."""

    stage = "deploy"

    def __init__(self, message: str, *, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class TransferError(DeploymentError):
    stage = "upload"


class RemoteExecutionError(DeploymentError):
    stage = "execute"
