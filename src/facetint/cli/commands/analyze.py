"""Analyze command for facetint CLI."""

import json
import logging
import sys
from pathlib import Path

from facetint.cli.utils import BOLD, DIM, RESET, format_attribute

logger = logging.getLogger(__name__)


def _load_config(args):
    from facetint.config import AnalyzerConfig

    config = AnalyzerConfig.from_file(args.config) if args.config else AnalyzerConfig()
    if args.seed is not None:
        config.seed = args.seed
    if args.debug_dir:
        config.debug_dir = args.debug_dir
    return config


def run_analyze(args, backend=None):
    """Detect faces in one image, write the report, print a summary.

    Returns:
        Process exit code (0 on success).
    """
    from facetint.analyzer import FaceColorAnalyzer, load_image
    from facetint.paths import get_output_dir
    from facetint.persistence import save_face_crops, save_report

    try:
        config = _load_config(args)
        pixels = load_image(args.path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)

    _ = "          "  # 10-char indent
    print()
    print(f"{BOLD}{'Analyze':<10}{RESET}{args.path}")
    print(f"{_}{DIM}{pixels.width}x{pixels.height} · seed {config.seed}{RESET}")
    print()

    with FaceColorAnalyzer(backend=backend, config=config) as analyzer:
        result = analyzer.analyze(pixels)

    output = Path(args.output) if args.output else get_output_dir(args.path) / "report.json"
    save_report(result.report, output)

    if args.faces_dir:
        written = save_face_crops(result.face_crops, args.faces_dir)
        logger.info("Saved %d face crop(s) to %s", len(written), args.faces_dir)

    data = result.report.to_dict()
    for person in data["people"]:
        print(f"{BOLD}Person {person['personIndex']}{RESET}")
        face = person.get("face")
        if face is not None:
            print(format_attribute("eyes", face["eyeColor"]))
            print(format_attribute("hair", face["hairColor"]))
            print(format_attribute("skin", face["skinTone"]))
        if "error" in person:
            print(f"  {DIM}error: {person['error']}{RESET}")
        if "note" in person:
            print(f"  {DIM}{person['note']}{RESET}")
    if not data["people"]:
        print(f"{DIM}No faces detected{RESET}")

    print()
    print(f"{'Report':<10}{output}")

    if args.print_json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0
