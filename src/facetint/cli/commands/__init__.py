"""CLI command implementations."""

from facetint.cli.commands.analyze import run_analyze
from facetint.cli.commands.info import run_info

__all__ = ["run_analyze", "run_info"]
