"""Entry point for ``python -m pigworld``.

Loads the YAML config, builds a world (with its starting scenario), and
either opens a Pygame window or runs a fixed number of ticks headless.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from pigworld.simulation.config import SimulationConfig
from pigworld.simulation.engine import PLACEABLE_KINDS, World

_CONFIG_DIR = pathlib.Path(__file__).resolve().parent.parent / "config"
_DEFAULT_CONFIG = _CONFIG_DIR / "default.yaml"
_DEMO_DIR = _CONFIG_DIR / "demos"

logger = logging.getLogger("pigworld")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pigworld",
        description="PigWorld - pigs, wolves and trees on a walled grid",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--scenario",
        type=pathlib.Path,
        default=None,
        help="Scenario YAML to load instead of the config's scenario",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=64,
        help="Pixel size per grid cell (default: 64)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Simulation ticks per second (default: from config)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and log a population summary",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=100,
        help="Ticks to run in headless mode (default: 100)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def population_summary(world: World) -> str:
    counts = ", ".join(f"{kind.label}: {world.count(kind)}" for kind in PLACEABLE_KINDS)
    return f"Tick {world.now}: {counts}"


def run_headless(world: World, ticks: int) -> None:
    """Advance the world ``ticks`` times and log where everything ended up."""
    logger.info(population_summary(world))
    world.run(ticks)
    logger.info(population_summary(world))


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, build the world, launch the viewer or run headless."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    if args.scenario is not None:
        config.scenario = args.scenario
    world = World.from_config(config)

    if args.headless:
        run_headless(world, args.ticks)
        print(population_summary(world))
        return

    from pigworld.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(
        world=world,
        cell_size=args.cell_size,
        ticks_per_second=args.speed if args.speed is not None else config.ticks_per_second,
        demo_dir=_DEMO_DIR,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
