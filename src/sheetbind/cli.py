"""Command-line interface for sheetbind."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from .config import settings
from .sheets import InvalidAddressError


def main(argv: Optional[list[str]] = None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="sheetbind - Bind query results to spreadsheet templates and back"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Forward command
    forward_parser = subparsers.add_parser(
        "forward", help="Populate an .xlsx template with query results"
    )
    forward_parser.add_argument("template", help="Path to the .xlsx template")
    forward_parser.add_argument(
        "results", help="JSON file mapping query names to lists of records"
    )
    forward_parser.add_argument(
        "--output", "-o", required=True, help="Path of the populated .xlsx file"
    )

    # Reverse command
    reverse_parser = subparsers.add_parser(
        "reverse", help="Generate statements from a workbook and templates"
    )
    reverse_parser.add_argument(
        "workbook", nargs="?", help="Path to the .xlsx workbook (omit with --spreadsheet)"
    )
    reverse_parser.add_argument(
        "templates", help="Templates file: a JSON list, or one template per line"
    )
    reverse_parser.add_argument(
        "--spreadsheet", "-s", help="Read from this Google Sheets spreadsheet ID instead"
    )
    reverse_parser.add_argument(
        "--output", "-o", help="Write statements to this file instead of stdout"
    )

    # Scan command
    scan_parser = subparsers.add_parser(
        "scan", help="List the cell references found in templates"
    )
    scan_parser.add_argument("templates", help="Templates file")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Auth command
    subparsers.add_parser("auth", help="Authenticate with Google Sheets API")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "forward":
            run_forward(Path(args.template), Path(args.results), Path(args.output))
        elif args.command == "reverse":
            if not args.workbook and not args.spreadsheet:
                parser.error("reverse needs a workbook path or --spreadsheet")
            run_reverse(args.workbook, Path(args.templates), args.spreadsheet, args.output)
        elif args.command == "scan":
            run_scan(Path(args.templates))
        elif args.command == "serve":
            run_server(args.host, args.port, args.reload)
        elif args.command == "auth":
            run_auth()
        else:
            parser.print_help()
            sys.exit(1)
    except (InvalidAddressError, FileNotFoundError, RuntimeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def read_templates(path: Path) -> list[str]:
    """Read templates from a JSON list or from non-blank lines."""
    text = path.read_text(encoding=settings.templates_encoding)
    if path.suffix.lower() == ".json":
        templates = json.loads(text)
        if not isinstance(templates, list) or not all(isinstance(t, str) for t in templates):
            raise ValueError(f"{path} must contain a JSON list of strings")
        return templates
    return [line for line in text.splitlines() if line.strip()]


def run_forward(template_path: Path, results_path: Path, output_path: Path):
    """Populate an .xlsx template and write the result."""
    from .engine import sql_to_workbook
    from .sheets.xlsx import XlsxCodec

    query_results = json.loads(results_path.read_text(encoding=settings.templates_encoding))
    if not isinstance(query_results, dict):
        raise ValueError(f"{results_path} must contain a JSON object of query results")

    codec = XlsxCodec()
    workbook = sql_to_workbook(codec.load(template_path), query_results)
    codec.save(workbook, output_path)
    print(f"Wrote {output_path}")


def run_reverse(
    workbook_path: Optional[str],
    templates_path: Path,
    spreadsheet_id: Optional[str] = None,
    output_path: Optional[str] = None,
):
    """Generate statements and print or write them."""
    from .engine import workbook_to_sql

    if spreadsheet_id:
        from .sheets.client import GoogleSheetsCodec

        workbook = GoogleSheetsCodec().load(spreadsheet_id)
    else:
        from .sheets.xlsx import XlsxCodec

        workbook = XlsxCodec().load(workbook_path)

    statements = workbook_to_sql(workbook, read_templates(templates_path))
    output = "\n".join(statements)

    if output_path:
        Path(output_path).write_text(output + "\n", encoding=settings.templates_encoding)
        print(f"Wrote {len(statements)} statements to {output_path}")
    else:
        print(output)


def run_scan(templates_path: Path):
    """Print the references found in each template."""
    from .placeholders import ReferenceScanner

    scanner = ReferenceScanner()
    for number, template in enumerate(read_templates(templates_path), start=1):
        print(f"Template {number}: {template}")
        for reference in scanner.extract_cell_references(template):
            kind = "open range" if reference.is_open_range else (
                "range" if reference.end_address else "cell"
            )
            print(f"  {reference.syntax} ({kind}, sheet '{reference.sheet_name}')")
        validation = scanner.validate_template(template)
        for error in validation.errors:
            print(f"  error: {error}")
        for warning in validation.warnings:
            print(f"  warning: {warning}")


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetbind.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_auth():
    """Run the Google authentication flow."""
    from .sheets.client import GoogleSheetsCodec

    print("Authenticating with Google Sheets API...")
    codec = GoogleSheetsCodec()
    # Accessing the service property triggers auth
    _ = codec.service
    print("Authentication successful!")
    print("Token saved. You can now read Google Sheets spreadsheets.")


if __name__ == "__main__":
    main()
