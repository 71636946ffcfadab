"""Info command for facetint CLI.

Shows library versions, the home/models directories and the active
configuration.
"""

import yaml

from facetint.cli.utils import BOLD, DIM, RESET


def _version(module_name):
    try:
        module = __import__(module_name)
    except ImportError:
        return None
    return getattr(module, "__version__", "unknown")


def run_info(args):
    """Show system information."""
    import facetint
    from facetint.config import AnalyzerConfig
    from facetint.paths import get_home_dir, get_models_dir

    print(f"{BOLD}facetint - System Information{RESET}")
    print("=" * 60)
    print(f"{'facetint':<12}{facetint.__version__}")
    for name in ("numpy", "cv2", "matplotlib", "yaml", "mediapipe"):
        version = _version(name)
        shown = version if version is not None else f"{DIM}not installed{RESET}"
        print(f"{name:<12}{shown}")

    print()
    print(f"{'home':<12}{get_home_dir()}")
    print(f"{'models':<12}{get_models_dir()}")

    config = AnalyzerConfig.from_file(args.config) if getattr(args, "config", None) else AnalyzerConfig()
    print()
    print(f"{BOLD}Configuration{RESET}")
    print(yaml.safe_dump(config.to_dict(), sort_keys=False, default_flow_style=None).rstrip())
    return 0
