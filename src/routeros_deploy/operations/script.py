from __future__ import annotations

from pathlib import Path
from typing import Optional
import logging

from .base import Operation
from ..errors import RemoteExecutionError, TransferError
from ..executors import CommandResult, SecureShellExecutor
from ..types import DeploymentResult, HostSpec, Outcome

logger = logging.getLogger(__name__)


class ScriptDeployOperation(Operation):
    """Upload a RouterOS script, then import and remove it in one ssh call."""

    def __init__(self, script: Path):
        self.script = Path(script).resolve()
        self.remote_name = self.script.name

    @property
    def remote_command(self) -> str:
        name = self._quote(self.remote_name)
        return f"/import verbose=no {name}; /file/remove {name}"

    def apply(self, host: HostSpec, executor: SecureShellExecutor) -> DeploymentResult:
        logger.info("uploading %s to %s", self.remote_name, host.target)
        try:
            upload = executor.upload(self.script, self.remote_name)
        except OSError as exc:
            raise TransferError(f"scp could not be started: {exc}") from exc
        if not upload.ok:
            raise TransferError(_error_detail(upload), returncode=upload.returncode)
        logger.info("uploaded %s, executing on %s", self.remote_name, host.target)

        # the file stays on the device if this fails
        try:
            run = executor.execute(self.remote_command)
        except OSError as exc:
            raise RemoteExecutionError(f"ssh could not be started: {exc}") from exc
        if not run.ok:
            raise RemoteExecutionError(_error_detail(run), returncode=run.returncode)

        detail = "dry-run" if executor.dry_run else "executed"
        return DeploymentResult(token=host.token, outcome=Outcome.SUCCESS, details=detail)

    @staticmethod
    def _quote(name: str) -> str:
        if any(ch.isspace() for ch in name) or ";" in name:
            escaped = name.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return name


def _error_detail(result: CommandResult) -> str:
    message = _summarize_output(result)
    prefix = f"rc={result.returncode}"
    if message:
        return f"{prefix}: {message}"
    return prefix


def _summarize_output(result: CommandResult) -> Optional[str]:
    for text in (result.stderr, result.stdout):
        if not text:
            continue
        stripped = text.strip()
        if not stripped:
            continue
        line = stripped.splitlines()[0]
        return (line[:157] + "...") if len(line) > 160 else line
    return None
