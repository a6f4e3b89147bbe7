from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence
import logging
import shlex
import subprocess

from .types import HostSpec

logger = logging.getLogger(__name__)

NO_AGENT_KEY = "No SSH key loaded in agent"


@dataclass
class CommandResult:
    command: list[str]
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Executor:
    """Runs local commands, optionally skipping them during dry-runs."""

    def __init__(self, *, dry_run: bool = False):
        self.dry_run = dry_run

    def run(
        self,
        command: Sequence[str],
        *,
        mutable: bool = True,
    ) -> CommandResult:
        """Run ``command``; mutable commands are only logged when ``dry_run`` is set."""

        cmd_list = [str(part) for part in command]
        if self.dry_run and mutable:
            logger.info("dry-run: %s", shlex.join(cmd_list))
            return CommandResult(cmd_list, "", "skipped (dry-run)", 0)

        logger.debug("run: %s", shlex.join(cmd_list))
        proc = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        if proc.stdout.strip():
            logger.debug("stdout rc=%s:\n%s", proc.returncode, proc.stdout.rstrip())
        if proc.stderr.strip():
            logger.debug("stderr rc=%s:\n%s", proc.returncode, proc.stderr.rstrip())
        return CommandResult(cmd_list, proc.stdout, proc.stderr, proc.returncode)


class SecureShellExecutor(Executor):
    """Drives the system ``scp`` and ``ssh`` clients against one host."""

    def __init__(
        self,
        host: HostSpec,
        *,
        timeout: int,
        identity: Optional[Path] = None,
        dry_run: bool = False,
    ):
        super().__init__(dry_run=dry_run)
        self.host = host
        self.timeout = timeout
        self.identity = identity

    def upload(self, local_path: Path, remote_path: str) -> CommandResult:
        command = [
            "scp",
            *self._options("-P"),
            str(local_path),
            self.host.remote(remote_path),
        ]
        return self.run(command)

    def execute(self, remote_command: str) -> CommandResult:
        command = ["ssh", *self._options("-p"), self.host.target, remote_command]
        return self.run(command)

    def _options(self, port_flag: str) -> list[str]:
        # scp spells the port flag -P, ssh spells it -p
        options = [
            "-o", "BatchMode=yes",
            "-o", f"ConnectTimeout={self.timeout}",
            "-o", "StrictHostKeyChecking=accept-new",
            port_flag, str(self.host.port),
        ]
        if self.identity is not None:
            options.extend(["-i", str(self.identity)])
        return options


def agent_identities(executor: Optional[Executor] = None) -> str:
    """Return ``ssh-add -l`` output for display, or a placeholder."""

    executor = executor or Executor()
    try:
        result = executor.run(["ssh-add", "-l"], mutable=False)
    except OSError:
        logger.debug("ssh-add is not available", exc_info=True)
        return NO_AGENT_KEY
    listing = result.stdout.strip()
    if result.returncode != 0 or not listing:
        return NO_AGENT_KEY
    return listing
