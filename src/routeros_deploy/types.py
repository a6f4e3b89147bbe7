from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Outcome(str, Enum):
    SUCCESS = "success"
    UPLOAD_FAILED = "upload-failed"
    EXECUTE_FAILED = "execute-failed"


@dataclass(frozen=True)
class HostSpec:
    token: str
    host: str
    user: str = "admin"
    port: int = 22

    @property
    def target(self) -> str:
        return f"{self.user}@{self.host}"

    def remote(self, path: str) -> str:
        """scp destination for ``path``; IPv6 literals need brackets there."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.user}@{host}:{path}"


@dataclass
class DeploymentResult:
    token: str
    outcome: Outcome
    details: str = ""

    @property
    def failed(self) -> bool:
        return self.outcome is not Outcome.SUCCESS


@dataclass
class Summary:
    total: int = 0
    succeeded: int = 0
    failures: list[str] = field(default_factory=list)

    def add(self, result: DeploymentResult) -> None:
        self.total += 1
        if result.failed:
            self.failures.append(result.token)
        else:
            self.succeeded += 1

    @property
    def exit_code(self) -> int:
        return 1 if self.failures else 0
