"""Command-line entry point.

Usage:
  iconpack tags                 # parse in/tag_trees/*.txt -> in/tag_trees/generated.json
  iconpack lint                 # report taxonomy concerns
  iconpack compile              # render every palette/theme/category/scale/item
  iconpack compile --out DIR --workers 8 --offline
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from iconpack.config import Settings, settings as default_settings
from iconpack.diagnostics.api_dump import report_missing_icons
from iconpack.diagnostics.reflection import REFLECTION_FILE_NAME, write_reflection_metadata
from iconpack.engine import IconRegistry, compile_pack
from iconpack.engine.orchestrator import THEME_DESCRIPTOR_NAME
from iconpack.errors import IconPackError
from iconpack.taxonomy.system import SNAPSHOT_NAME, TagSystem

logger = logging.getLogger("iconpack")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _tag_tree_dir(input_dir: Path) -> Path:
    return input_dir / "tag_trees"


def _default_out_root(output_dir: Path) -> Path:
    return output_dir / datetime.now().strftime("%Y-%m-%d_at_%H-%M")


def _lint(tag_system: TagSystem) -> list[str]:
    concerns = tag_system.lint()
    for concern in concerns:
        logger.warning("(lint) %s", concern)
    return concerns


def cmd_tags(args: argparse.Namespace, settings: Settings) -> int:
    tree_dir = _tag_tree_dir(settings.input_dir)
    tag_system = TagSystem.from_directory(tree_dir)
    snapshot_path = tree_dir / SNAPSHOT_NAME
    tag_system.save(snapshot_path)
    logger.info(
        "Wrote %d tags, %d instance and %d general assignments to %s",
        len(tag_system.all_tags),
        len(tag_system.instance_tags),
        len(tag_system.general_tags),
        snapshot_path,
    )
    return 0


def cmd_lint(args: argparse.Namespace, settings: Settings) -> int:
    tag_system = TagSystem.from_directory(_tag_tree_dir(settings.input_dir))
    concerns = _lint(tag_system)
    logger.info("%d lint concern(s)", len(concerns))
    return 0


def cmd_compile(args: argparse.Namespace, settings: Settings) -> int:
    start = time.perf_counter()
    input_dir = settings.input_dir

    tree_dir = _tag_tree_dir(input_dir)
    if args.rebuild_tags:
        tag_system = TagSystem.from_directory(tree_dir)
        tag_system.save(tree_dir / SNAPSHOT_NAME)
    else:
        tag_system = TagSystem.load(tree_dir / SNAPSHOT_NAME)
    logger.info("Loaded icon tags")
    _lint(tag_system)

    out_root = Path(args.out) if args.out else _default_out_root(settings.output_dir)
    write_reflection_metadata(input_dir / REFLECTION_FILE_NAME, out_root, tag_system)

    registry = IconRegistry.load(input_dir, settings, tag_system=tag_system)

    if not args.offline:
        if report_missing_icons(settings.api_dump_url, registry.mappings, timeout=settings.api_timeout) is None:
            logger.info("Skipped missing-icon report")

    outcome = compile_pack(
        registry,
        out_root,
        workers=settings.workers,
        theme_descriptor=input_dir / THEME_DESCRIPTOR_NAME,
    )
    outcome.raise_for_failure()

    logger.info("Wrote %d icons to %s", outcome.written, out_root)
    logger.info("Completed in %d milliseconds.", int((time.perf_counter() - start) * 1000))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iconpack", description="Compile vector icons into themed PNG icon packs")
    parser.add_argument("-i", "--input", help="Input directory (default: settings input_dir)")
    parser.add_argument("--log-level", help="Logging level (default: settings log_level)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("tags", help="Compile taxonomy files into the tag snapshot").set_defaults(func=cmd_tags)
    sub.add_parser("lint", help="Report taxonomy consistency concerns").set_defaults(func=cmd_lint)

    compile_parser = sub.add_parser("compile", help="Render the icon packs")
    compile_parser.add_argument("-o", "--out", help="Output root (default: <output_dir>/<timestamp>)")
    compile_parser.add_argument("-w", "--workers", type=int, help="Worker threads (default: cpu count)")
    compile_parser.add_argument("--rebuild-tags", action="store_true", help="Re-parse taxonomy files first")
    compile_parser.add_argument("--offline", action="store_true", help="Skip the missing-icon report")
    compile_parser.set_defaults(func=cmd_compile)
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    overrides: dict = {}
    if args.input:
        overrides["input_dir"] = Path(args.input)
    if args.log_level:
        overrides["log_level"] = args.log_level
    if getattr(args, "workers", None):
        overrides["workers"] = args.workers
    settings = default_settings.model_copy(update=overrides)

    _configure_logging(settings.log_level)
    try:
        return args.func(args, settings)
    except IconPackError as e:
        logger.error("%s", e)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
