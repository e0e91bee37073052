"""psyscript command line interface.

Usage:
  psyscript compile SCRIPT [--output PATH] [--validate] [--strict-identifiers] [--json] [-v]
  psyscript check SCRIPT [--strict-identifiers] [--json] [-v]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any

from .api import compile_file, document_provenance, serialize_document, write_document
from .errors import ScriptError
from .options import CompileOptions

logger = logging.getLogger(__name__)


def setup_logging(verbose: int) -> None:
    """Set up logging based on verbosity level."""
    if verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s", stream=sys.stderr)


def _print_output(payload: dict[str, Any], *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, sort_keys=True))
        return

    if "ok" in payload:
        print(f"ok: {payload['ok']}")
    if "output_path" in payload:
        print(f"output_path: {payload['output_path']}")
    if "document_hash" in payload:
        print(f"document_hash: {payload['document_hash']}")
    if "stimulus_count" in payload:
        print(f"stimuli: {payload['stimulus_count']}")
    for name, count in payload.get("step_counts", {}).items():
        print(f"{name}: {count}")

    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        print("errors:")
        for item in errors:
            code = item.get("error_code", "<unknown>")
            message = item.get("description", "")
            line_number = item.get("line_number")
            if line_number is not None:
                print(f"  - {code} (line {line_number}): {message}")
            else:
                print(f"  - {code}: {message}")
            if item.get("remediation_hint"):
                print(f"    hint: {item['remediation_hint']}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="psyscript")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Compile a script to a JSON document")
    compile_parser.add_argument("script", help="Path to the experiment script")
    compile_parser.add_argument("--output", "-o", help="Output JSON path (stdout when omitted)")
    compile_parser.add_argument(
        "--validate", action="store_true", help="Check the document against its schema"
    )

    check_parser = subparsers.add_parser("check", help="Compile a script and report a summary")
    check_parser.add_argument("script", help="Path to the experiment script")

    for sub in (compile_parser, check_parser):
        sub.add_argument(
            "--strict-identifiers",
            action="store_true",
            help="Reject repeated stimulus identifiers",
        )
        sub.add_argument("--json", action="store_true", help="Emit JSON output")
        sub.add_argument(
            "--verbose",
            "-v",
            action="count",
            default=0,
            help="Increase verbosity (-v for INFO, -vv for DEBUG)",
        )

    return parser


def _options(args: argparse.Namespace) -> CompileOptions:
    options = CompileOptions.from_env()
    if args.strict_identifiers:
        options = replace(options, strict_identifiers=True)
    if getattr(args, "validate", False):
        options = replace(options, validate_output=True)
    return options


def _run(args: argparse.Namespace) -> int:
    document = compile_file(args.script, options=_options(args))

    if args.command == "compile":
        if args.output is None:
            sys.stdout.write(serialize_document(document) + "\n")
            return 0
        path = write_document(document, args.output)
        logger.info("wrote %s", path)
        payload = {"ok": True, "output_path": str(path)}
        _print_output(payload, as_json=bool(args.json))
        return 0

    payload = {"ok": True, **document_provenance(document)}
    _print_output(payload, as_json=bool(args.json))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        return _run(args)
    except ScriptError as exc:
        payload = {"ok": False, "errors": [exc.to_dict()]}
    except UnicodeDecodeError as exc:
        payload = {
            "ok": False,
            "errors": [
                {
                    "error_code": "IO_001",
                    "description": f"{args.script} is not valid UTF-8 ({exc.reason} at byte {exc.start}).",
                    "line_number": None,
                }
            ],
        }
    except OSError as exc:
        payload = {
            "ok": False,
            "errors": [{"error_code": "IO_001", "description": str(exc), "line_number": None}],
        }
    _print_output(payload, as_json=bool(args.json))
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
