"""Command-line argument parsers for kindle2notion."""

import argparse

from .. import __version__

DEFAULT_CLIPPINGS_PATH = "My Clippings.txt"


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Publish Kindle clippings ('My Clippings.txt') to Notion.", prog="kindle2notion"
    )

    _setup_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    _setup_export_command(subparsers)
    _setup_preview_command(subparsers)
    _setup_config_command(subparsers)
    _setup_devices_command(subparsers)
    _setup_version_command(subparsers)

    return parser


def _setup_global_options(parser):
    """Set up global options for the CLI."""
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show program's version number and exit."
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from config, else INFO).",
    )
    parser.add_argument(
        "--log-file", type=str, default=None, help="Log output to a specified file in addition to the console."
    )


def _add_file_argument(parser):
    parser.add_argument(
        "file",
        type=str,
        nargs="?",
        default=None,
        help=f"Path to the clippings file (default: detected Kindle, then ./{DEFAULT_CLIPPINGS_PATH})",
    )


def _setup_export_command(subparsers):
    """Set up the export command and its options."""
    from .commands.export import handle_export

    parser_export = subparsers.add_parser("export", help="Export Kindle clippings to Notion")
    _add_file_argument(parser_export)
    parser_export.add_argument(
        "--api-token", "-t", type=str, help="Notion integration token (or use the NOTION_API_KEY environment variable)."
    )
    parser_export.add_argument(
        "--page-id", "-p", type=str, help="Parent Notion page ID (or use the NOTION_PAGE_ID environment variable)."
    )
    parser_export.add_argument(
        "--dry-run", "-d", action="store_true", help="Parse and report without sending anything to Notion."
    )
    parser_export.add_argument(
        "--no-marker", action="store_true", help="Do not append a resume marker to the clippings file after upload."
    )
    parser_export.add_argument("--archive-dir", type=str, help="Copy the clippings file here after upload.")
    parser_export.set_defaults(func=handle_export)


def _setup_preview_command(subparsers):
    """Set up the preview command and its options."""
    from .commands.preview import handle_preview

    parser_preview = subparsers.add_parser("preview", help="Parse the clippings file and show the books found")
    _add_file_argument(parser_preview)
    parser_preview.add_argument(
        "--format", type=str, choices=["text", "json"], default="text", help="Output format (default: text)"
    )
    parser_preview.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Report malformed records instead of stopping at the first one.",
    )
    parser_preview.set_defaults(func=handle_preview)


def _setup_config_command(subparsers):
    """Set up the config command and its subcommands."""
    from .commands.config import handle_configure

    parser_config = subparsers.add_parser("config", help="Configure the application")
    config_subparsers = parser_config.add_subparsers(dest="config_command", help="Configuration commands")

    parser_config_show = config_subparsers.add_parser("show", help="Show current configuration")
    parser_config_show.set_defaults(func=handle_configure)

    parser_config_token = config_subparsers.add_parser("token", help="Set the Notion integration token")
    parser_config_token.add_argument(
        "token", nargs="?", type=str, help="The Notion integration token (omit for interactive prompt)"
    )
    parser_config_token.set_defaults(func=handle_configure)

    parser_config_set = config_subparsers.add_parser("set", help="Set a configuration value")
    parser_config_set.add_argument("key", type=str, help="Configuration key to set")
    parser_config_set.add_argument("value", type=str, help="Value to set")
    parser_config_set.set_defaults(func=handle_configure)

    parser_config_paths = config_subparsers.add_parser("paths", help="Show configuration and data paths")
    parser_config_paths.set_defaults(func=handle_configure)

    parser_config.set_defaults(func=handle_configure)


def _setup_devices_command(subparsers):
    """Set up the devices command."""
    from .commands.devices import handle_devices

    parser_devices = subparsers.add_parser("devices", help="List detected Kindle devices")
    parser_devices.set_defaults(func=handle_devices)


def _setup_version_command(subparsers):
    """Set up the version command."""
    from .commands.version import handle_version

    parser_version = subparsers.add_parser("version", help="Show version information")
    parser_version.set_defaults(func=handle_version)
