from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import ConfigurationError, DeploymentError, RemoteExecutionError
from .executors import SecureShellExecutor
from .inventory import DEFAULT_PORT, DEFAULT_USER, HostsFileLoader, parse_host_spec
from .operations import Operation
from .types import DeploymentResult, HostSpec, Outcome

logger = logging.getLogger(__name__)


def collect_targets(
    host: Optional[str] = None,
    hosts_file: Optional[Path] = None,
    *,
    default_user: str = DEFAULT_USER,
    default_port: int = DEFAULT_PORT,
    loader: Optional[HostsFileLoader] = None,
) -> list[HostSpec]:
    """Single ``host`` first, then every hosts-file entry in file order.

    Every token is parsed here so a bad specifier stops the run before any
    device is contacted.
    """

    tokens: list[str] = []
    if host:
        tokens.append(host)
    if hosts_file is not None:
        tokens.extend((loader or HostsFileLoader()).load(hosts_file))
    if not tokens:
        raise ConfigurationError("No target hosts given")
    return [
        parse_host_spec(token, default_user=default_user, default_port=default_port)
        for token in tokens
    ]


class DeploymentRunner:
    """Applies one operation to each target in turn."""

    def __init__(
        self,
        targets: Sequence[HostSpec],
        operation: Operation,
        *,
        timeout: int,
        identity: Optional[Path] = None,
        dry_run: bool = False,
        progress_callback: Optional[Callable[[HostSpec], None]] = None,
        result_callback: Optional[Callable[[DeploymentResult], None]] = None,
    ):
        self.targets = list(targets)
        self.operation = operation
        self.timeout = timeout
        self.identity = identity
        self.dry_run = dry_run
        self.progress_callback = progress_callback
        self.result_callback = result_callback

    def run(self) -> list[DeploymentResult]:
        results: list[DeploymentResult] = []
        for host in self.targets:
            result = self._run_host(host)
            if self.result_callback:
                self.result_callback(result)
            results.append(result)
        return results

    def _run_host(self, host: HostSpec) -> DeploymentResult:
        if self.progress_callback:
            self.progress_callback(host)
        executor = self._executor_for(host)
        try:
            result = self.operation.apply(host, executor)
        except DeploymentError as exc:
            logger.warning("stage=%s host=%s failed: %s", exc.stage, host.target, exc)
            outcome = (
                Outcome.EXECUTE_FAILED
                if isinstance(exc, RemoteExecutionError)
                else Outcome.UPLOAD_FAILED
            )
            return DeploymentResult(token=host.token, outcome=outcome, details=str(exc))
        logger.debug("host=%s outcome=%s", host.target, result.outcome.value)
        return result

    def _executor_for(self, host: HostSpec) -> SecureShellExecutor:
        return SecureShellExecutor(
            host,
            timeout=self.timeout,
            identity=self.identity,
            dry_run=self.dry_run,
        )
