"""Command line bulk import of questions from CSV."""
import argparse
import os
import sys
from pathlib import Path

from portal.client import BackendClient, BackendError
from portal.logging_setup import setup_console_logging
from portal.services.auth_context import AuthContext
from portal.services.bulk_import import CSVImportError, import_questions, template_csv
from portal.services.catalog import load_categories


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import questions from a CSV file")
    parser.add_argument("file", type=Path, nargs="?", help="Path to .csv file")
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Backend bearer token (defaults to PORTAL_TOKEN)",
    )
    parser.add_argument(
        "--backend",
        type=str,
        default=None,
        help="Backend base URL (defaults to BACKEND_API_URL)",
    )
    parser.add_argument(
        "--template",
        action="store_true",
        help="Print the CSV template and exit",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    setup_console_logging()
    args = parse_args(argv)

    if args.template:
        sys.stdout.write(template_csv())
        return 0
    if args.file is None:
        print("A CSV file is required", file=sys.stderr)
        return 2

    token = args.token or os.environ.get("PORTAL_TOKEN")
    if not token:
        print("A backend token is required (--token or PORTAL_TOKEN)", file=sys.stderr)
        return 2

    client = BackendClient(base_url=args.backend, auth=AuthContext(token=token))
    try:
        categories = load_categories(client)
        report = import_questions(client, categories, args.file.read_bytes())
    except (BackendError, CSVImportError) as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1

    print(report.message)
    for failure in report.failures:
        print(f"  row {failure.row_number}: {failure.reason}")
    return 0 if report.status != "error" else 1


if __name__ == "__main__":
    sys.exit(main())
