"""RugGuard CLI — analyze transaction traces locally.

Usage:
    rugguard detect <file>          Analyze a detection request (or bare trace) JSON file
    rugguard detect -               Read the JSON document from stdin
    rugguard rules                  List the suspicious function signatures
    rugguard config                 Show current configuration
    rugguard serve                  Run the HTTP API

Examples:
    rugguard detect ./request.json
    rugguard detect ./trace.json --chain-id 56 --format json
    rugguard detect ./request.json --severity high
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rugguard import __version__
from rugguard.core.types import DetectionRequest, DetectionResponse, Finding, Trace


# ── Coloured output helpers ──────────────────────────────────────────────────

_RESET = "\033[0m"
_BOLD = "\033[1m"
_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"

_SEV_COLOR = {
    "HIGH": _RED,
    "MEDIUM": _YELLOW,
    "LOW": _CYAN,
}


def _c(text: str, code: str) -> str:
    return f"{code}{text}{_RESET}"


BANNER = f"{_BOLD}{_CYAN}RugGuard{_RESET} {_DIM}— rugpull heuristics for EVM traces, v{__version__}{_RESET}"


# ── CLI argument parser ─────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rugguard",
        description="RugGuard — rugpull heuristics detector for EVM transaction traces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--no-banner", action="store_true", help="Suppress the startup banner")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log analyzer activity to stderr")

    sub = parser.add_subparsers(dest="command")

    # ── detect ───────────────────────────────────────────────────────────────
    detect_p = sub.add_parser("detect", help="Analyze a transaction trace")
    detect_p.add_argument("path", help="Path to a request or trace JSON file ('-' for stdin)")
    detect_p.add_argument(
        "--chain-id",
        type=int,
        default=1,
        help="Chain ID used when the input is a bare trace (default: 1)",
    )
    detect_p.add_argument(
        "--severity",
        choices=["high", "medium", "low"],
        help="Minimum severity to print",
    )
    detect_p.add_argument(
        "--format",
        "-f",
        default="table",
        choices=["table", "json"],
        help="Output format (default: table)",
    )
    detect_p.add_argument("--output", "-o", help="Write JSON output to file instead of stdout")

    # ── rules ────────────────────────────────────────────────────────────────
    sub.add_parser("rules", help="List suspicious function signatures")

    # ── config ───────────────────────────────────────────────────────────────
    sub.add_parser("config", help="Show current configuration")

    # ── serve ────────────────────────────────────────────────────────────────
    serve_p = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve_p.add_argument("--host", help="Bind address (default: settings.host)")
    serve_p.add_argument("--port", type=int, help="Bind port (default: settings.port)")

    return parser


# ── Detect command ───────────────────────────────────────────────────────────

_SEV_ORDER = ["HIGH", "MEDIUM", "LOW"]


def _sev_index(sev: str) -> int:
    try:
        return _SEV_ORDER.index(sev.upper())
    except ValueError:
        return 99


def _filter_findings(findings: list[Finding], min_severity: str | None) -> list[Finding]:
    result = list(findings)
    if min_severity:
        cutoff = _sev_index(min_severity)
        result = [f for f in result if _sev_index(f.severity.value) <= cutoff]
    result.sort(key=lambda f: _sev_index(f.severity.value))
    return result


def _load_request(raw: str, chain_id: int) -> DetectionRequest:
    """Parse a detection request; a bare trace is wrapped into one."""
    data: Any = json.loads(raw)
    if isinstance(data, dict) and "trace" in data:
        return DetectionRequest.model_validate(data)

    trace = Trace.model_validate(data)
    return DetectionRequest(
        chain_id=chain_id,
        hash=trace.transaction_hash or "0x",
        trace=trace,
    )


def _print_table(findings: list[Finding], response: DetectionResponse, quiet: bool = False) -> None:
    """Pretty-print the verdict and findings."""
    if not quiet:
        verdict = _c("RUGPULL RISK", _RED + _BOLD) if response.detected else _c("clean", _GREEN)
        print(f"\n{_BOLD}Analysis complete{_RESET} — tx {response.hash} on chain {response.chain_id}")
        print(f"  Verdict: {verdict}\n")

    if response.error:
        print(_c(f"  ! {response.message.splitlines()[0]}", _YELLOW))

    if not findings:
        print(_c("  ✓ No findings at the requested severity level.", _GREEN))
        return

    for i, f in enumerate(findings, 1):
        sev_col = _SEV_COLOR.get(f.severity.value, "")
        badge = _c(f" {f.severity.value} ", sev_col + _BOLD)
        print(f"  {_DIM}{i:>3}.{_RESET} {badge} {_c(f.risk_type, _BOLD)}")
        if not quiet:
            print(f"       {_DIM}{f.description}{_RESET}")
            if f.details:
                print(f"       {_DIM}{json.dumps(f.details)}{_RESET}")
        print()


def _run_detect(args: argparse.Namespace) -> int:
    """Analyze one request and print the verdict.

    Exit code: 0 clean, 1 rugpull risk detected, 2 invalid input or error verdict.
    """
    from rugguard.analyzer.detector import RugpullDetector
    from rugguard.core.logging import RequestLogFilter

    try:
        if args.path == "-":
            raw = sys.stdin.read()
        else:
            raw = Path(args.path).read_text(encoding="utf-8")
        request = _load_request(raw, args.chain_id)
    except OSError as exc:
        print(_c(f"Error: cannot read '{args.path}': {exc}", _RED), file=sys.stderr)
        return 2
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        print(_c(f"Error: invalid input: {exc}", _RED), file=sys.stderr)
        return 2

    log_filter = RequestLogFilter(request_id=request.request_id or "", tx_hash=request.hash)
    for handler in logging.getLogger().handlers:
        handler.addFilter(log_filter)

    response = RugpullDetector().detect(request)

    if args.format == "json":
        output = response.model_dump_json(by_alias=True, exclude_none=True, indent=2)
        if args.output:
            Path(args.output).write_text(output)
            if not args.quiet:
                print(f"  Written to {_c(args.output, _CYAN)}")
        else:
            print(output)
    else:
        findings = _filter_findings(response.risk_details, args.severity)
        _print_table(findings, response, quiet=args.quiet)

    if response.error:
        return 2
    return 1 if response.detected else 0


# ── Rules command ────────────────────────────────────────────────────────────


def _run_rules() -> int:
    """Print the signature table."""
    from rugguard.analyzer.signatures import SIGNATURE_RULES

    print(f"\n{_BOLD}Suspicious function signatures{_RESET}\n")
    for rule in SIGNATURE_RULES:
        sev_col = _SEV_COLOR.get(rule.severity.value, "")
        check = ""
        if rule.check is not None:
            check = _c(f"  [> {rule.check.threshold_setting}]", _DIM)
        print(
            f"  {rule.selector}  {_c(f'{rule.severity.value:<6}', sev_col)}  "
            f"{rule.key:<20} {rule.signature}{check}"
        )
    print()
    return 0


# ── Config command ───────────────────────────────────────────────────────────


def _run_config() -> int:
    """Print current settings."""
    from rugguard.core.config import get_settings

    s = get_settings()
    print(f"\n{_BOLD}RugGuard Configuration{_RESET}\n")
    for field_name in sorted(type(s).model_fields.keys()):
        val = getattr(s, field_name, "")
        print(f"  {_DIM}{field_name}:{_RESET}  {val}")
    print()
    return 0


# ── Serve command ────────────────────────────────────────────────────────────


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from rugguard.core.config import get_settings

    s = get_settings()
    uvicorn.run(
        "rugguard.api.main:app",
        host=args.host or s.host,
        port=args.port or s.port,
        log_config=None,
    )
    return 0


# ── Entrypoint ───────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"rugguard {__version__}")
        return 0

    if not args.no_banner and not args.quiet:
        print(BANNER, file=sys.stderr)

    if not args.command:
        parser.print_help()
        return 0

    from rugguard.core.config import get_settings
    from rugguard.core.logging import setup_logging

    settings = get_settings()
    setup_logging(
        env=settings.app_env,
        log_level="DEBUG" if args.verbose else ("INFO" if args.command == "serve" else "WARNING"),
        stream=sys.stderr,
    )

    if args.command == "detect":
        return _run_detect(args)

    if args.command == "rules":
        return _run_rules()

    if args.command == "config":
        return _run_config()

    if args.command == "serve":
        return _run_serve(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
