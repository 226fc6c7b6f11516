"""CLI entry point: run a scene headless and print or save frames."""

import argparse
import logging
import time
from pathlib import Path

import structlog
from pydantic import ValidationError

from .config import Config, find_config, list_configs, load_config
from .exceptions import ConfigNotFoundError
from .render import render_ascii, render_image
from .simulation import Simulation
from .types import TickPolicy


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for console output."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sandbase - falling sand, earth and water on a voxel grid"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path or name of scene TOML config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Number of ticks to run (overrides config)",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in TickPolicy],
        default=None,
        help="Tick policy (overrides config)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Print an ASCII frame every N ticks (0 prints only the final frame)",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=0,
        help="Pause between printed frames, for watching a run",
    )
    parser.add_argument(
        "--until-settled",
        action="store_true",
        help="Stop early once a tick would move nothing",
    )
    parser.add_argument(
        "--image",
        type=str,
        default=None,
        help="Write the final frame to this PNG path",
    )
    parser.add_argument(
        "--scale", type=int, default=4, help="Pixels per cell in --image (default: 4)"
    )
    parser.add_argument(
        "--list-configs", action="store_true", help="List bundled scene configs"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run a scene."""
    args = build_parser().parse_args(argv)

    configure_logging(args.verbose)
    logger = structlog.get_logger()

    if args.list_configs:
        for name in list_configs():
            print(name)
        return

    if args.config:
        try:
            config_path = find_config(args.config)
            config = load_config(config_path)
        except ConfigNotFoundError as e:
            logger.error("config_not_found", path=args.config, error=str(e))
            raise SystemExit(1)
        except ValidationError as e:
            logger.error("config_invalid", path=args.config, error=str(e))
            raise SystemExit(1)
        logger.info("config_loaded", path=str(config_path))
    else:
        config = Config()
        logger.info("using_default_config")

    # Apply CLI overrides
    if args.ticks is not None:
        config.simulation.ticks = args.ticks
    if args.policy:
        config.simulation.policy = TickPolicy(args.policy)

    sim = Simulation.from_config(config)

    ticks_run = 0
    for _ in range(config.simulation.ticks):
        if args.until_settled and sim.is_settled():
            logger.info("simulation_settled", tick_id=sim.tick_id)
            break
        sim.step()
        ticks_run += 1
        if args.frames and ticks_run % args.frames == 0:
            print(f"tick {sim.tick_id}")
            print(render_ascii(sim.grid))
            print()
            if args.delay_ms:
                time.sleep(args.delay_ms / 1000)

    if not args.frames:
        print(render_ascii(sim.grid))

    counts = sim.grid.material_counts()
    logger.info(
        "simulation_finished",
        ticks=ticks_run,
        **{material.value: count for material, count in counts.items()},
    )

    if args.image:
        path = render_image(sim.grid, Path(args.image), scale=args.scale)
        logger.info("image_written", path=str(path))


if __name__ == "__main__":
    main()
