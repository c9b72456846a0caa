#!/usr/bin/env python3
"""CLI Entrypoint - dashboard numbers and report exports from the command line

Usage:
    python -m sgrvias.entrypoints.cli stats
    python -m sgrvias.entrypoints.cli export-csv relatorio.csv --zone NORTH
    python -m sgrvias.entrypoints.cli export-pdf relatorio.pdf --request-id req_001

Environment:
    SGR_BACKEND, PROJECT_ID, SGR_DATA_PATH, ... (see sgrvias.config)
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    LOG_FORMAT: json or text (see sgrvias.logging_config)
"""

import argparse
import logging
import sys
from pathlib import Path

from sgrvias.adapters.csv_report import CsvReportRenderer
from sgrvias.adapters.pdf_report import PdfReportRenderer
from sgrvias.domain.errors import SgrViasError
from sgrvias.domain.models import RequestStatus, Zone
from sgrvias.domain.ports import RequestReportRenderer
from sgrvias.entrypoints.factory import create_store
from sgrvias.logging_config import setup_logging
from sgrvias.services import views
from sgrvias.services.domain_store import DomainStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sgr-vias",
        description="SGR-Vias: repair request statistics and report exports",
    )
    filters = argparse.ArgumentParser(add_help=False)
    filters.add_argument("--search", default="", help="protocol/address/description text")
    filters.add_argument(
        "--status",
        choices=[s.name for s in RequestStatus],
        help="only requests with this status",
    )
    filters.add_argument(
        "--zone", choices=[z.value for z in Zone], help="only requests in this zone"
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("stats", parents=[filters], help="print status and zone counts")

    csv_cmd = sub.add_parser("export-csv", parents=[filters], help="export a CSV sheet")
    csv_cmd.add_argument("output", type=Path)

    pdf_cmd = sub.add_parser("export-pdf", parents=[filters], help="export a PDF report")
    pdf_cmd.add_argument("output", type=Path)
    pdf_cmd.add_argument("--request-id", help="report a single request")
    return parser


def _selected_requests(store: DomainStore, args: argparse.Namespace) -> list:
    if getattr(args, "request_id", None):
        request = store.get_request(args.request_id)
        if request is None:
            raise SgrViasError(f"Solicitação {args.request_id} não encontrada.")
        return [request]
    return views.filter_requests(
        store.requests,
        search=args.search,
        status=RequestStatus[args.status] if args.status else None,
        zone=Zone(args.zone) if args.zone else None,
    )


def _print_stats(store: DomainStore, args: argparse.Namespace) -> None:
    snapshot = store.snapshot()
    requests = _selected_requests(store, args)
    counts = views.status_counts(requests)
    print(f"Total Geral: {counts.total}")
    for status, total in counts.by_status.items():
        print(f"  {status.value}: {total}")
    print("Por zonal:")
    for row in views.zone_counts(requests, snapshot.zones):
        print(f"  {row.name}: {row.total}")


def _export(
    store: DomainStore, args: argparse.Namespace, renderer: RequestReportRenderer
) -> None:
    snapshot = store.snapshot()
    requests = _selected_requests(store, args)
    content = renderer.render(
        requests, snapshot.users, snapshot.zones, snapshot.role_labels
    )
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(content)
    logger.info("Exported %d request(s) to %s", len(requests), args.output)


def main(argv: list[str] | None = None) -> None:
    """Main entrypoint"""
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        store = create_store()

        if args.command == "stats":
            _print_stats(store, args)
        elif args.command == "export-csv":
            _export(store, args, CsvReportRenderer())
        elif args.command == "export-pdf":
            _export(store, args, PdfReportRenderer())

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except SgrViasError as e:
        logger.error("%s", e)
        sys.exit(1)

    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
