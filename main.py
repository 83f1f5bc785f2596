"""
Entry point for the fallblock game.

Usage:
    python main.py
    python main.py --config config/game.yaml
    python main.py --seed 42 --fall-interval 0.5
"""

from __future__ import annotations

import argparse
import sys

from fallblock.config import DEFAULT_CONFIG_PATH, load_config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with config, fps, seed and fall_interval attributes.
    """
    parser = argparse.ArgumentParser(
        description="Fallblock: a falling-block puzzle game.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=None,
        help="Frames per second (overrides the config file).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the piece randomizer (overrides the config file).",
    )
    parser.add_argument(
        "--fall-interval",
        type=float,
        default=None,
        help="Seconds between automatic drops (overrides the config file).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point: parse args, load config, and start manual play."""
    args = parse_args(argv)
    try:
        config = load_config(args.config).with_overrides(
            fps=args.fps,
            seed=args.seed,
            fall_interval=args.fall_interval,
        )
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    from fallblock.play import play_manual
    play_manual(config)


if __name__ == "__main__":
    main()
