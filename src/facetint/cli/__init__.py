"""Command-line interface for facetint."""

import sys
import argparse
import logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="facetint - Eye color, hair color and skin tone from face landmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  facetint analyze photo.jpg                   # Report to ~/.facetint/output/photo/
  facetint analyze photo.jpg -o report.json    # Report to a given file
  facetint analyze photo.jpg --faces-dir faces --debug-dir debug
  facetint info                                # Versions and configuration
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show versions, paths and the active configuration",
    )
    info_parser.add_argument("--config", type=str, metavar="FILE", help="Config file (YAML) to display")

    # analyze command
    an_parser = subparsers.add_parser("analyze", help="Analyze faces in an image")
    an_parser.add_argument("path", help="Path to image file")
    an_parser.add_argument("--output", "-o", type=str, help="Output JSON report path")
    an_parser.add_argument("--faces-dir", type=str, metavar="DIR", help="Save tight face crops here")
    an_parser.add_argument("--debug-dir", type=str, metavar="DIR", help="Save eye/skin/hair region crops here")
    an_parser.add_argument("--config", type=str, metavar="FILE", help="Config file (YAML)")
    an_parser.add_argument("--seed", type=int, help="Seed for k-means initialization")
    an_parser.add_argument(
        "--print", dest="print_json", action="store_true",
        help="Also print the report JSON to stdout",
    )

    args = parser.parse_args(argv)

    from facetint.cli.utils import configure_log_levels, suppress_thirdparty_noise

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)
    else:
        suppress_thirdparty_noise()
        logging.basicConfig(level=logging.INFO)
        configure_log_levels()

    from facetint.cli import commands

    if args.command == "info":
        return commands.run_info(args)

    elif args.command == "analyze":
        return commands.run_analyze(args)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
