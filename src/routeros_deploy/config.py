from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

from .errors import ConfigurationError
from .inventory import DEFAULT_PORT, DEFAULT_USER

DEFAULT_CONFIG = Path("/etc/routeros-deploy/main.conf")
DEFAULT_CONNECT_TIMEOUT = 5


@dataclass
class DeployConfig:
    user: str = DEFAULT_USER
    port: int = DEFAULT_PORT
    timeout: int = DEFAULT_CONNECT_TIMEOUT
    identity: Optional[Path] = None


def load_config(path: Path) -> DeployConfig:
    if not path.exists():
        return DeployConfig()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read config file '{path}': {exc}") from None
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"{path}: {exc}") from None
    defaults = data.get("defaults", {})
    if not isinstance(defaults, dict):
        raise ConfigurationError(f"{path}: [defaults] must be a table")
    user = defaults.get("user", DEFAULT_USER)
    port = defaults.get("port", DEFAULT_PORT)
    timeout = defaults.get("timeout", DEFAULT_CONNECT_TIMEOUT)
    identity = defaults.get("identity")
    if not isinstance(user, str) or not user:
        raise ConfigurationError(f"{path}: defaults.user must be a non-empty string")
    if identity is not None and (not isinstance(identity, str) or not identity):
        raise ConfigurationError(f"{path}: defaults.identity must be a non-empty string")
    return DeployConfig(
        user=user,
        port=_positive_int(path, "port", port, upper=65535),
        timeout=_positive_int(path, "timeout", timeout),
        identity=Path(identity).expanduser() if identity else None,
    )


def _positive_int(path: Path, key: str, value: Any, *, upper: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{path}: defaults.{key} must be a positive integer")
    if upper is not None and value > upper:
        raise ConfigurationError(f"{path}: defaults.{key} must not exceed {upper}")
    return value
