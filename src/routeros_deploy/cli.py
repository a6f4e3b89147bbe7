from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, DEFAULT_CONNECT_TIMEOUT, DeployConfig, load_config
from .errors import ConfigurationError, UsageError
from .executors import agent_identities
from .inventory import PORT_RE
from .operations import ScriptDeployOperation
from .runner import DeploymentRunner, collect_targets
from .types import DeploymentResult, HostSpec, Outcome, Summary


class Ansi:
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BLUE = "\033[94m"
    RESET = "\033[0m"


_color_enabled = True


def colorize(text: str, color: Optional[str]) -> str:
    if not color or not _color_enabled:
        return text
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        return text
    return f"{color}{text}{Ansi.RESET}"


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def positive_int(value: str) -> int:
    if not PORT_RE.match(value):
        raise argparse.ArgumentTypeError(f"'{value}' is not a positive integer")
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"'{value}' is not a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="routeros-deploy",
        description="Deploy RouterOS scripts to multiple devices",
        epilog="Example: routeros-deploy --hosts routers.txt --script config.rsc --timeout 3",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument(
        "-h",
        "--host",
        help="Single device, format: [user@]hostname[:port]",
    )
    parser.add_argument(
        "-H",
        "--hosts",
        type=Path,
        help="File listing devices, one [user@]hostname[:port] per line",
    )
    parser.add_argument(
        "-s",
        "--script",
        type=Path,
        required=True,
        help="RouterOS script file to execute",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=positive_int,
        default=None,
        help=f"Connection timeout in seconds (default: {DEFAULT_CONNECT_TIMEOUT})",
    )
    parser.add_argument(
        "-i",
        "--identity",
        type=Path,
        help="Private key passed to scp/ssh",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to defaults file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log scp/ssh commands without running them")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser


def parse_args(
    argv: Optional[Sequence[str]] = None,
    parser: Optional[argparse.ArgumentParser] = None,
) -> argparse.Namespace:
    parser = parser or build_parser()
    args = parser.parse_args(argv)
    if not args.host and args.hosts is None:
        parser.error("one of --host or --hosts is required")
    return args


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s - %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    global _color_enabled
    parser = build_parser()
    try:
        args = parse_args(argv, parser)
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1
    configure_logging(args.log_level)
    _color_enabled = not args.no_color

    try:
        cfg = load_config(args.config)
        timeout = args.timeout or cfg.timeout
        identity = _resolve_identity(args.identity, cfg)
        script = _require_file(args.script, "RouterOS script file")
        targets = collect_targets(
            args.host,
            args.hosts,
            default_user=cfg.user,
            default_port=cfg.port,
        )
    except ConfigurationError as exc:
        print(colorize(f"Error: {exc}", Ansi.RED), file=sys.stderr)
        return 1

    print_banner(args, script=script, timeout=timeout, targets=targets)

    runner = DeploymentRunner(
        targets,
        ScriptDeployOperation(script),
        timeout=timeout,
        identity=identity,
        dry_run=args.dry_run,
        progress_callback=print_progress,
        result_callback=print_result,
    )
    try:
        results = runner.run()
    except Exception as exc:  # noqa: BLE001
        if logging.getLogger().isEnabledFor(logging.DEBUG):
            raise
        print(colorize(f"Execution failed: {exc}", Ansi.RED), file=sys.stderr)
        return 1

    summary = Summary()
    for result in results:
        summary.add(result)
    print(render_summary(summary))
    return summary.exit_code


def _resolve_identity(flag: Optional[Path], cfg: DeployConfig) -> Optional[Path]:
    identity = flag or cfg.identity
    if identity is None:
        return None
    return _require_file(identity, "Identity file")


def _require_file(path: Path, label: str) -> Path:
    path = Path(path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"{label} '{path}' not found")
    return path


def print_banner(args: argparse.Namespace, *, script: Path, timeout: int, targets: list[HostSpec]) -> None:
    print("Starting RouterOS deployment...")
    if args.host:
        print(f"Host:            {args.host}")
    if args.hosts is not None:
        print(f"Hosts file:      {args.hosts}")
    print(f"Script file:     {script}")
    print(f"Connect timeout: {timeout} seconds")
    print(f"SSH Key:         {agent_identities()}")
    if args.dry_run:
        print(colorize("Dry run:         commands are logged, not executed", Ansi.YELLOW))
    print("-" * 40)
    print(f"Found {len(targets)} host(s) to process")


def print_progress(host: HostSpec) -> None:
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    line = f"=== [{stamp}] Processing {host.target} (port {host.port}) ==="
    print()
    print(colorize(line, Ansi.BLUE), flush=True)


def print_result(result: DeploymentResult) -> None:
    print(format_result(result), flush=True)


def format_result(result: DeploymentResult) -> str:
    if result.outcome is Outcome.SUCCESS:
        line = f"{result.token} ok - {result.details}"
        return colorize(line, Ansi.GREEN)
    stage = "upload" if result.outcome is Outcome.UPLOAD_FAILED else "execute"
    line = f"{result.token} {stage} failed - {result.details}"
    return colorize(line, Ansi.RED)


def render_summary(summary: Summary) -> str:
    lines = [
        "",
        "=== Deployment Summary ===",
        f"Total hosts:    {summary.total}",
        f"Successful:     {summary.succeeded}",
        f"Failed:         {len(summary.failures)}",
    ]
    if summary.failures:
        lines.append("")
        lines.append("Failed hosts:")
        lines.extend(f"  - {token}" for token in summary.failures)
        return colorize("\n".join(lines), Ansi.RED)
    lines.append("")
    lines.append("All deployments completed successfully!")
    return colorize("\n".join(lines), Ansi.GREEN)


if __name__ == "__main__":
    raise SystemExit(main())
