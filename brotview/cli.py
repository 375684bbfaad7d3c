from __future__ import annotations

import argparse
import statistics
import time
from typing import Optional

from brotview.compute import warmup_jit
from brotview.config import INTERIOR_POLICIES, ViewerSettings
from brotview.engine import MandelbrotEngine
from brotview.renderer import resolve_threads
from brotview.util.logging_setup import configure_logging, get_logger, parse_level


def _add_view_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--width", type=int, default=None, help="Display width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Display height in pixels.")
    p.add_argument("--max-iter", dest="max_iterations", type=int, default=None, help="Maximum iteration count.")
    p.add_argument("--threads", type=int, default=None, help="Render threads (default: all available).")
    p.add_argument("--interior", type=str, default=None, choices=sorted(INTERIOR_POLICIES),
                   help="Shading of points that never escape.")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="brotview", description="Interactive Mandelbrot set viewer.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default=None, help="Rotating log file path (default: console only).")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("view", help="Open the interactive viewer window.")
    _add_view_options(v)

    b = sub.add_parser("bench", help="Render the default view headless and report timings.")
    _add_view_options(b)
    b.add_argument("--repeat", type=int, default=5, help="Number of timed render passes.")

    return p


def settings_from_args(args: argparse.Namespace) -> ViewerSettings:
    return ViewerSettings().with_overrides(
        width=args.width,
        height=args.height,
        max_iterations=args.max_iterations,
        threads=args.threads,
        interior=args.interior,
    ).validate()


def run_bench(settings: ViewerSettings, repeat: int) -> dict:
    logger = get_logger(__name__)
    if repeat < 1:
        raise ValueError("repeat must be >= 1.")

    warmup_jit()
    engine = MandelbrotEngine.from_settings(settings)
    engine.on_display_size_changed(settings.width, settings.height)

    timings = []
    for i in range(repeat):
        start = time.perf_counter()
        engine.render()
        timings.append(time.perf_counter() - start)
        logger.debug("Bench pass %s/%s: %.4fs", i + 1, repeat, timings[-1])

    result = {
        "width": settings.width,
        "height": settings.height,
        "max_iterations": settings.max_iterations,
        "threads": resolve_threads(settings.threads),
        "min_seconds": min(timings),
        "mean_seconds": statistics.fmean(timings),
    }
    logger.info("Bench %sx%s max_iter=%s threads=%s: min=%.4fs mean=%.4fs",
                result["width"], result["height"], result["max_iterations"],
                result["threads"], result["min_seconds"], result["mean_seconds"])
    return result


def main(argv: Optional[list] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    configure_logging(level=parse_level(args.log_level), console=True, log_file=args.log_file)
    logger = get_logger(__name__)

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.cmd == "view":
            from brotview.app import run

            logger.info("Starting viewer %sx%s max_iter=%s", settings.width, settings.height, settings.max_iterations)
            run(settings)
            return 0

        if args.cmd == "bench":
            run_bench(settings, args.repeat)
            return 0

        raise RuntimeError("Unknown command.")
    except Exception:
        logger.exception("Command %s failed", args.cmd)
        return 1
