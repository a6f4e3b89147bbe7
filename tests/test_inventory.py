from pathlib import Path

import pytest

from routeros_deploy.errors import ConfigurationError
from routeros_deploy.inventory import HostsFileLoader, parse_host_spec


def test_parses_user_host_and_port() -> None:
    spec = parse_host_spec("admin@10.0.0.1:2222")

    assert spec.user == "admin"
    assert spec.host == "10.0.0.1"
    assert spec.port == 2222
    assert spec.token == "admin@10.0.0.1:2222"


def test_defaults_user_and_port() -> None:
    spec = parse_host_spec("10.0.0.1")
    assert (spec.user, spec.host, spec.port) == ("admin", "10.0.0.1", 22)

    spec = parse_host_spec("user@host")
    assert (spec.user, spec.host, spec.port) == ("user", "host", 22)


def test_user_splits_on_first_at_and_port_on_last_colon() -> None:
    spec = parse_host_spec("ops@edge@core:host:8022")

    assert spec.user == "ops"
    assert spec.host == "edge@core:host"
    assert spec.port == 8022


def test_parsing_is_repeatable() -> None:
    assert parse_host_spec("ops@r1.example.net:2200") == parse_host_spec("ops@r1.example.net:2200")


def test_configured_defaults_apply() -> None:
    spec = parse_host_spec("r1.example.net", default_user="deploy", default_port=2200)
    assert spec.target == "deploy@r1.example.net"
    assert spec.port == 2200


def test_bracketed_ipv6_literal() -> None:
    spec = parse_host_spec("admin@[2001:db8::1]:2222")

    assert spec.host == "2001:db8::1"
    assert spec.port == 2222
    assert spec.remote("config.rsc") == "admin@[2001:db8::1]:config.rsc"
    assert spec.target == "admin@2001:db8::1"


@pytest.mark.parametrize(
    "token",
    ["router:abc", "router:", "router:0", "router:70000", "@router", "admin@:22", "[::1]x"],
)
def test_malformed_specifiers_raise(token: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_host_spec(token)


def test_loader_strips_comments_and_blank_lines(tmp_path: Path) -> None:
    hosts = tmp_path / "routers.txt"
    hosts.write_text("# comment\n\nfoo.example.com\n  bar.example.com  # trailing\n")

    assert HostsFileLoader().load(hosts) == ["foo.example.com", "bar.example.com"]


def test_loader_keeps_order_and_duplicates(tmp_path: Path) -> None:
    hosts = tmp_path / "routers.txt"
    hosts.write_text("b.example\na.example\nb.example\n")

    assert HostsFileLoader().load(hosts) == ["b.example", "a.example", "b.example"]


def test_loader_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        HostsFileLoader().load(tmp_path / "missing.txt")


def test_loader_rejects_file_without_hosts(tmp_path: Path) -> None:
    hosts = tmp_path / "routers.txt"
    hosts.write_text("# only comments\n   \n# here\n")

    with pytest.raises(ConfigurationError, match="No valid hosts"):
        HostsFileLoader().load(hosts)
