from __future__ import annotations

from pathlib import Path
import re

from .errors import ConfigurationError
from .types import HostSpec

DEFAULT_USER = "admin"
DEFAULT_PORT = 22

PORT_RE = re.compile(r"^[0-9]+$")


def parse_host_spec(
    token: str,
    *,
    default_user: str = DEFAULT_USER,
    default_port: int = DEFAULT_PORT,
) -> HostSpec:
    """Parse ``[user@]host[:port]`` into a :class:`HostSpec`.

    The user is split off at the first ``@`` and the port at the last ``:``.
    A bracketed IPv6 literal such as ``[2001:db8::1]:2222`` keeps its colons
    in the host part.
    """

    user = default_user
    rest = token
    if "@" in token:
        user, rest = token.split("@", 1)
        if not user:
            raise ConfigurationError(f"Invalid host '{token}': empty user before '@'")

    port_text = None
    if rest.startswith("[") and "]" in rest:
        host, _, tail = rest[1:].partition("]")
        if tail:
            if not tail.startswith(":"):
                raise ConfigurationError(f"Invalid host '{token}': unexpected text after ']'")
            port_text = tail[1:]
    elif ":" in rest:
        host, port_text = rest.rsplit(":", 1)
    else:
        host = rest

    if not host:
        raise ConfigurationError(f"Invalid host '{token}': hostname is empty")

    port = default_port
    if port_text is not None:
        port = _parse_port(token, port_text)
    return HostSpec(token=token, host=host, user=user, port=port)


def _parse_port(token: str, text: str) -> int:
    if not PORT_RE.match(text):
        raise ConfigurationError(f"Invalid host '{token}': port '{text}' is not a number")
    port = int(text)
    if not 0 < port < 65536:
        raise ConfigurationError(f"Invalid host '{token}': port {port} is out of range")
    return port


class HostsFileLoader:
    """Reads host tokens from a plain text list, one per line."""

    COMMENT = "#"

    def load(self, path: Path) -> list[str]:
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError(
                f"Hosts file '{path}' not found; expected one [user@]hostname[:port] per line"
            )
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Cannot read hosts file '{path}': {exc}") from None

        tokens = self.parse_lines(text.splitlines())
        if not tokens:
            raise ConfigurationError(f"No valid hosts found in {path}")
        return tokens

    @classmethod
    def parse_lines(cls, lines) -> list[str]:
        tokens: list[str] = []
        for line in lines:
            stripped = line.split(cls.COMMENT, 1)[0].strip()
            if stripped:
                tokens.append(stripped)
        return tokens
