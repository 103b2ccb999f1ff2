from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from crissync.adapters.orcid import (
    activities_document,
    export_report_document,
    invalid_imports_document,
    load_activities,
)
from crissync.app import (
    KIND_NAMES,
    count_imports,
    export_activities,
    import_activities,
    import_updates,
    invalid_imports,
)
from crissync.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from crissync.domain.model import ActivitySummary

log = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--kind",
        choices=KIND_NAMES,
        default="works",
        help="Activity kind to synchronise (default: %(default)s)",
    )
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="JSON file holding the local activities as a list of ORCID records",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="File to write the JSON result to (defaults to stdout)",
    )
    parser.add_argument(
        "--type",
        dest="types",
        action="append",
        help="Only consider activities of this type (repeatable)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile CRIS activities with ORCID")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Push local activities to the ORCID record")
    _add_common_arguments(export)
    export.add_argument(
        "--force",
        action="store_true",
        help="Update remote entries even when their identifiers already match",
    )

    imports = subparsers.add_parser("import", help="List remote activities unknown locally")
    _add_common_arguments(imports)

    updates = subparsers.add_parser(
        "import-updates",
        help="List remote records carrying identifiers new to local activities",
    )
    _add_common_arguments(updates)

    counter = subparsers.add_parser("import-count", help="Count importable remote activities")
    _add_common_arguments(counter)

    invalid = subparsers.add_parser(
        "import-invalid",
        help="List remote activities new to the local side that fail validation",
    )
    _add_common_arguments(invalid)

    return parser.parse_args(list(argv))


def _read_local(args: argparse.Namespace) -> list[ActivitySummary]:
    try:
        document = json.loads(args.input.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read {args.input}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {args.input}: {exc}") from exc
    return load_activities(args.kind, document)


def _write_result(args: argparse.Namespace, document: object) -> None:
    text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    if args.output is None:
        sys.stdout.write(text)
    else:
        args.output.write_text(text, encoding="utf-8")
        log.info("Wrote result to %s", args.output)


def _run(args: argparse.Namespace, local: list[ActivitySummary]) -> object:
    kind = args.kind
    if args.command == "export":
        report = export_activities(kind, local, force=args.force, types=args.types)
        return export_report_document(report)
    if args.command == "import":
        return activities_document(import_activities(kind, local, types=args.types))
    if args.command == "import-updates":
        return activities_document(import_updates(kind, local, types=args.types))
    if args.command == "import-count":
        return {"count": count_imports(kind, local, types=args.types)}
    if args.command == "import-invalid":
        return invalid_imports_document(invalid_imports(kind, local, types=args.types))
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        local = _read_local(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        document = _run(parsed_args, local)
    except (ValueError, ConfigurationError):
        log.exception("Invalid configuration or arguments")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)
    _write_result(parsed_args, document)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
