# main.py

"""Entry point for the storefront client (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from storefront.config.logging_config import setup_logging
from storefront.config.settings import Settings

logger = logging.getLogger("storefront.main")


def _add_product_fields(
    parser: argparse.ArgumentParser, required: bool,
) -> None:
    """Attach the product field options shared by add and update."""
    parser.add_argument("--name", required=required, default=None)
    parser.add_argument(
        "--category",
        required=required,
        choices=Settings.CATEGORIES,
        default=None,
    )
    parser.add_argument("--price", type=float, required=required, default=None)
    parser.add_argument("--stock", type=int, required=required, default=None)
    parser.add_argument("--description", default=None)
    parser.add_argument("--url", default=None, help="Optional product URL.")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Storefront catalog and admin client.",
        epilog=f"Backend: {Settings.API_BASE_URL}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Also echo INFO log records to stderr.",
    )
    sub = parser.add_subparsers(dest="command")

    list_cmd = sub.add_parser("list", help="List products.")
    list_cmd.add_argument(
        "-q", "--search", default="", help="Case-insensitive name filter.",
    )
    list_cmd.add_argument(
        "-c", "--category", default="", choices=["", *Settings.CATEGORIES],
    )
    list_cmd.add_argument(
        "--sort", default="", choices=["", *Settings.SORT_KEYS],
    )
    list_cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )

    add_cmd = sub.add_parser("add", help="Add a product (admin).")
    _add_product_fields(add_cmd, required=True)

    update_cmd = sub.add_parser("update", help="Update a product (admin).")
    update_cmd.add_argument("product_id")
    _add_product_fields(update_cmd, required=False)

    delete_cmd = sub.add_parser("delete", help="Delete a product (admin).")
    delete_cmd.add_argument("product_id")

    import_cmd = sub.add_parser("import", help="Bulk import a CSV (admin).")
    import_cmd.add_argument("path")
    import_cmd.add_argument(
        "--naive",
        action="store_true",
        default=False,
        help="Split on raw commas, ignoring CSV quoting.",
    )

    export_cmd = sub.add_parser("export", help="Export the catalog (admin).")
    export_cmd.add_argument(
        "kind", choices=["csv", "document"], nargs="?", default="csv",
    )

    dash_cmd = sub.add_parser("dashboard", help="Admin summary metrics.")
    dash_cmd.add_argument(
        "--chart",
        action="store_true",
        default=False,
        help="Also export the category chart as HTML.",
    )

    describe_cmd = sub.add_parser(
        "describe", help="Generate a product description.",
    )
    describe_cmd.add_argument("--name", required=True)
    describe_cmd.add_argument(
        "--category", required=True, choices=Settings.CATEGORIES,
    )

    login_cmd = sub.add_parser("login", help="Log in.")
    login_cmd.add_argument("username")
    login_cmd.add_argument("password")

    sub.add_parser("logout", help="Log out.")
    sub.add_parser("whoami", help="Show the current session.")
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from storefront.ui.app import StorefrontApp

    try:
        app = StorefrontApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("storefront TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Dispatch a CLI subcommand and return its exit code."""
    from storefront.cli import runner

    command = args.command
    if command == "list":
        return asyncio.run(runner.cli_list(
            args.search, args.category, args.sort, args.output_format,
        ))
    if command == "add":
        return asyncio.run(runner.cli_add(
            args.name,
            args.category,
            args.price,
            args.stock,
            args.description or "",
            args.url or "",
        ))
    if command == "update":
        return asyncio.run(runner.cli_update(
            args.product_id,
            args.name,
            args.category,
            args.price,
            args.stock,
            args.description,
            args.url,
        ))
    if command == "delete":
        return asyncio.run(runner.cli_delete(args.product_id))
    if command == "import":
        return asyncio.run(runner.cli_import(args.path, args.naive))
    if command == "export":
        return asyncio.run(runner.cli_export(args.kind))
    if command == "dashboard":
        return asyncio.run(runner.cli_dashboard(args.chart))
    if command == "describe":
        return asyncio.run(runner.cli_describe(args.name, args.category))
    if command == "login":
        return asyncio.run(runner.cli_login(args.username, args.password))
    if command == "logout":
        return runner.cli_logout()
    return runner.cli_whoami()


def main() -> None:
    """Route to TUI (no command) or a headless CLI subcommand."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("storefront starting, log file: %s", log_file)

    if args.command is None:
        _run_tui()
    else:
        sys.exit(_run_cli(args))


if __name__ == "__main__":
    main()
