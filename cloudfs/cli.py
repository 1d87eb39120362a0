"""Cloudfs CLI: quick file-system operations from the command line.

Usage examples::

    cloudfs --provider cos --config @cos.json read-dir reports/
    cloudfs -c '{"bucket": "b-125", ...}' write notes.txt "hello"
    cloudfs -c @cos.json build-presigned-url reports/a.csv --kwargs '{"expires": 600}'
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from cloudfs.base.exceptions import CloudfsError, FileSystemError


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``cloudfs`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="cloudfs",
        description="File-system operations on object storage",
    )
    parser.add_argument(
        "--provider", "-p",
        default="cos",
        choices=["cos"],
        help="Storage provider",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string, or @path to a JSON file',
    )
    parser.add_argument(
        "operation",
        help="Operation to perform (method name, e.g. read-dir)",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Positional arguments for the operation",
    )
    parser.add_argument(
        "--kwargs", "-k",
        type=str,
        default="{}",
        help="JSON keyword arguments for the operation",
    )
    return parser


def _load_json(raw: str) -> Any:
    if raw.startswith("@"):
        raw = Path(raw[1:]).read_text(encoding="utf-8")
    return json.loads(raw)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, creates an adapter via the factory, and invokes the
    requested operation.  Results are printed as JSON (lists), decoded
    text (bytes) or plain text.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    try:
        config: dict[str, Any] = _load_json(ns.config)
    except (json.JSONDecodeError, OSError) as e:
        print(f"Invalid --config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        kwargs: dict[str, Any] = json.loads(ns.kwargs)
    except json.JSONDecodeError as e:
        print(f"Invalid --kwargs JSON: {e}", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading the SDK for --help
    from cloudfs.factory import filesystem_factory

    try:
        fs = filesystem_factory(ns.provider, config)
    except (ValueError, CloudfsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    method_name = ns.operation.replace("-", "_")
    method = getattr(fs, method_name, None)
    if method_name.startswith("_") or method is None or not callable(method):
        print(f"Unknown operation '{ns.operation}' for {ns.provider}", file=sys.stderr)
        sys.exit(1)

    try:
        result = method(*ns.args, **kwargs)
    except FileSystemError as e:
        detail = f" ({e.error_message})" if e.error_message else ""
        print(f"Operation failed: {e}{detail}", file=sys.stderr)
        sys.exit(1)
    except (CloudfsError, TypeError) as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("OK")
    elif isinstance(result, bytes):
        sys.stdout.write(result.decode("utf-8", errors="replace"))
    elif isinstance(result, (dict, list, bool)):
        print(json.dumps(result, indent=2, default=str))
    else:
        print(result)


if __name__ == "__main__":
    main()
