from __future__ import annotations

from abc import ABC, abstractmethod

from ..executors import SecureShellExecutor
from ..types import DeploymentResult, HostSpec


class Operation(ABC):
    """Shared surface for per-host deployment steps."""

    @abstractmethod
    def apply(self, host: HostSpec, executor: SecureShellExecutor) -> DeploymentResult:
        """Perform the operation against ``host`` using ``executor``.

        Failures are raised as :class:`~routeros_deploy.errors.DeploymentError`
        subclasses rather than returned.
        """
