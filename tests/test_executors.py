import subprocess
import sys
from pathlib import Path

from routeros_deploy import executors as executors_mod
from routeros_deploy.executors import Executor, SecureShellExecutor, agent_identities
from routeros_deploy.inventory import parse_host_spec


class FakeRun:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = ""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[list[str]] = []

    def __call__(self, command, **kwargs):
        self.calls.append(list(command))
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, self.stderr)


def test_upload_builds_scp_command(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(executors_mod.subprocess, "run", fake)
    host = parse_host_spec("admin@10.0.0.1:2222")
    executor = SecureShellExecutor(host, timeout=5, identity=Path("/keys/id_ed25519"))

    result = executor.upload(Path("/srv/scripts/config.rsc"), "config.rsc")

    assert result.ok is True
    assert fake.calls == [
        [
            "scp",
            "-o", "BatchMode=yes",
            "-o", "ConnectTimeout=5",
            "-o", "StrictHostKeyChecking=accept-new",
            "-P", "2222",
            "-i", "/keys/id_ed25519",
            "/srv/scripts/config.rsc",
            "admin@10.0.0.1:config.rsc",
        ]
    ]


def test_execute_builds_ssh_command(monkeypatch):
    fake = FakeRun(returncode=255, stderr="ssh: connect to host r1 port 22: Connection timed out\n")
    monkeypatch.setattr(executors_mod.subprocess, "run", fake)
    executor = SecureShellExecutor(parse_host_spec("ops@r1"), timeout=3)

    result = executor.execute("/import verbose=no config.rsc; /file/remove config.rsc")

    assert result.ok is False
    assert result.returncode == 255
    assert fake.calls == [
        [
            "ssh",
            "-o", "BatchMode=yes",
            "-o", "ConnectTimeout=3",
            "-o", "StrictHostKeyChecking=accept-new",
            "-p", "22",
            "ops@r1",
            "/import verbose=no config.rsc; /file/remove config.rsc",
        ]
    ]


def test_dry_run_skips_mutable_commands(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(executors_mod.subprocess, "run", fake)
    executor = SecureShellExecutor(parse_host_spec("r1"), timeout=5, dry_run=True)

    result = executor.upload(Path("/tmp/config.rsc"), "config.rsc")

    assert result.ok is True
    assert result.stderr == "skipped (dry-run)"
    assert fake.calls == []


def test_agent_identities_lists_loaded_keys(monkeypatch):
    listing = "256 SHA256:abc deploy@workstation (ED25519)\n"
    monkeypatch.setattr(executors_mod.subprocess, "run", FakeRun(stdout=listing))

    assert agent_identities() == listing.strip()


def test_agent_identities_placeholder_when_agent_empty(monkeypatch):
    monkeypatch.setattr(executors_mod.subprocess, "run", FakeRun(returncode=1, stdout="The agent has no identities.\n"))

    assert agent_identities() == executors_mod.NO_AGENT_KEY


def test_agent_identities_placeholder_when_ssh_add_missing(monkeypatch):
    def missing(command, **kwargs):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(executors_mod.subprocess, "run", missing)

    assert agent_identities(Executor(dry_run=True)) == executors_mod.NO_AGENT_KEY


def test_undecodable_output_is_replaced():
    emit = "import sys; sys.stdout.buffer.write(b'Gr\\xff\\xfe'); sys.stderr.buffer.write(b'\\xff')"

    result = Executor().run([sys.executable, "-c", emit])

    assert result.ok is True
    assert result.stdout.startswith("Gr")
    assert "�" in result.stdout
    assert result.stderr == "�"


def test_failed_command_returns_result(monkeypatch):
    monkeypatch.setattr(executors_mod.subprocess, "run", FakeRun(returncode=2, stderr="nope"))

    result = Executor().run(["false"])

    assert result.ok is False
    assert result.returncode == 2
    assert result.stderr == "nope"
