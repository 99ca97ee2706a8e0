# src/main.py — v2
"""CLI entry point — roadmap, resources, recommend, stats, sweep commands.

Usage:
    careerpath roadmap <career_id> --domain <domain> --name <career name>
    careerpath resources <topic> --domain <domain>
    careerpath recommend --education <level> --interests a,b --skills x,y [--goals ...]
    careerpath stats
    careerpath sweep

Results are printed to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from careerpath.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from careerpath.config.settings import Settings

    settings = Settings()
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


async def _run(args: argparse.Namespace, settings: Any) -> int:
    from careerpath.api.facade import build_app
    from careerpath.logging.context import set_request_context

    set_request_context()
    app = build_app(settings)
    try:
        return await args.func(args, app)
    finally:
        await app.aclose()


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="careerpath",
        description=f"careerpath v{__version__}: cached AI career roadmaps and resources",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- roadmap ---
    p_roadmap = subparsers.add_parser(
        "roadmap", help="Get (or generate) the learning roadmap for a career",
    )
    p_roadmap.add_argument("career_id", help="Career id, e.g. data-scientist")
    p_roadmap.add_argument("--domain", required=True, help="Career domain, e.g. technology")
    p_roadmap.add_argument("--name", dest="career_name", default=None,
                           help="Career display name (default: career id)")
    p_roadmap.set_defaults(func=_cmd_roadmap)

    # --- resources ---
    p_resources = subparsers.add_parser(
        "resources", help="Get free learning resources for a topic",
    )
    p_resources.add_argument("topic", help="Topic name, e.g. 'Linear Regression'")
    p_resources.add_argument("--domain", required=True, help="Career domain")
    p_resources.set_defaults(func=_cmd_resources)

    # --- recommend ---
    p_recommend = subparsers.add_parser(
        "recommend", help="Recommend careers for an assessment profile (never cached)",
    )
    p_recommend.add_argument("--education", required=True, help="Education level")
    p_recommend.add_argument("--interests", default="", help="Comma-separated interests")
    p_recommend.add_argument("--skills", default="", help="Comma-separated skills")
    p_recommend.add_argument("--goals", default="", help="Career goals")
    p_recommend.set_defaults(func=_cmd_recommend)

    # --- stats ---
    p_stats = subparsers.add_parser("stats", help="Show cache statistics per artifact type")
    p_stats.set_defaults(func=_cmd_stats)

    # --- sweep ---
    p_sweep = subparsers.add_parser("sweep", help="Purge expired cache entries now")
    p_sweep.set_defaults(func=_cmd_sweep)

    return parser


async def _cmd_roadmap(args: argparse.Namespace, app: Any) -> int:
    roadmap = await app.obtain_roadmap(
        args.career_id, args.domain, args.career_name or args.career_id,
    )
    _print_json(roadmap.to_document())
    return 2 if roadmap.is_degraded else 0


async def _cmd_resources(args: argparse.Namespace, app: Any) -> int:
    resources = await app.obtain_topic_resources(args.topic, args.domain)
    _print_json([r.to_document() for r in resources])
    return 0


async def _cmd_recommend(args: argparse.Namespace, app: Any) -> int:
    from careerpath.core.errors import GenerationFailed, GeneratorUnavailable

    profile = {
        "education": args.education,
        "interests": _split_csv(args.interests),
        "skills": _split_csv(args.skills),
        "goals": args.goals,
    }
    try:
        recommendations = await app.obtain_career_recommendations(profile)
    except (GeneratorUnavailable, GenerationFailed) as exc:
        logger.error("AI temporarily unavailable, try again: %s", exc)
        return 2
    _print_json([r.to_document() for r in recommendations])
    return 0


async def _cmd_stats(args: argparse.Namespace, app: Any) -> int:
    stats = await app.get_cache_stats()
    _print_json({name: value.model_dump() for name, value in sorted(stats.items())})
    return 0


async def _cmd_sweep(args: argparse.Namespace, app: Any) -> int:
    removed = await app.store.sweep_expired()
    _print_json({"removed": removed})
    return 0


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _setup_logging(settings: Any, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from careerpath.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format="text",
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
