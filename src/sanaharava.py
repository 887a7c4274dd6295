#!/usr/bin/env python3
# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Daily word grid command-line interface.

Usage:
    # Generate today's puzzle
    sanaharava generate

    # Generate an English puzzle for a specific date
    sanaharava --config config.yaml generate --date 2024-11-01 --language english

    # Inspect and play a stored puzzle
    sanaharava show --date 2024-11-01 --solution
    sanaharava check-word kettu --date 2024-11-01
    sanaharava check-complete KETTU ORAVA KUUSI --date 2024-11-01
    sanaharava dates
"""

import asyncio
import logging
import sys
from typing import Optional

from config import (
    create_argument_parser, load_config, ConfigValidationError
)
from game_generator import GenerationFailed
from game_service import GameService, create_service
from grid_packer import InvalidGeneratorParameters
from logging_config import setup_logging
from models import GameData
from storage import AlreadyExists, GameNotFoundError, StorageError
from word_selector import NoValidCombination


logger = logging.getLogger(__name__)


def print_game(game: GameData, show_solution: bool = False) -> None:
    print(f"Game {game.id} ({game.rows}x{game.columns})")
    print(game.to_string())
    if show_solution:
        print(f"Solution: {', '.join(game.solution_words)}")


def run_command(args, service: GameService) -> int:
    """Run one subcommand; returns the process exit code."""
    if args.command == "generate":
        game = asyncio.run(service.create_game(args.date))
        print_game(game)
        return 0

    if args.command == "show":
        game = service.require_game(args.date)
        print_game(game, show_solution=args.solution)
        return 0

    if args.command == "check-word":
        result = service.check_word(args.date, args.word)
        if result.valid:
            print(f"{result.word}: valid ({result.word_type.value})")
        else:
            print(f"{result.word}: invalid ({result.reason})")
        return 0

    if args.command == "check-complete":
        result = service.check_completion(args.date, args.words)
        status = "complete" if result.complete else "not complete"
        print(f"{status} ({result.letters_used}/{result.grid_cells} letters)")
        if result.reward:
            print(f"Reward: {result.reward}")
        return 0

    if args.command == "dates":
        for game_id in service.list_game_dates():
            print(game_id)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        config.logging.directory,
        log_level=config.logging.log_level,
        log_file_prefix=config.logging.log_file_prefix,
        enable_console=config.logging.enable_console,
    )

    try:
        service = create_service(config)
        return run_command(args, service)
    except AlreadyExists as e:
        logger.error(str(e))
    except GameNotFoundError as e:
        logger.error(str(e))
    except (GenerationFailed, NoValidCombination, InvalidGeneratorParameters) as e:
        logger.error(f"Generation failed: {e}")
    except StorageError as e:
        logger.error(f"Storage error: {e}")
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
