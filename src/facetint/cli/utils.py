"""CLI helpers: log noise control and terminal styling."""

import logging
import os

BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

# Third-party loggers that are chatty at INFO
_NOISY_LOGGERS = ("matplotlib", "PIL", "absl", "urllib3")


def suppress_thirdparty_noise():
    """Quiet native-library logging before the libraries are imported."""
    os.environ.setdefault("OPENCV_LOG_LEVEL", "ERROR")
    os.environ.setdefault("GLOG_minloglevel", "2")
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")


def configure_log_levels():
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def format_attribute(label: str, attr: dict) -> str:
    """One summary line for an eyeColor / hairColor / skinTone dict."""
    category = attr.get("color", attr.get("tone", "unknown"))
    if category == "unknown":
        return f"  {label:<6} {DIM}unknown ({attr.get('reason', 'no data')}){RESET}"
    extra = ""
    if "fitzpatrick" in attr:
        extra = f", {attr['undertone']}, {attr['fitzpatrick']}"
    return (
        f"  {label:<6} {BOLD}{category}{RESET}{extra} "
        f"{DIM}{attr['colorName']} {attr['hex']} conf={attr['confidence']}{RESET}"
    )
