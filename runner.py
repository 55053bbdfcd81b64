#!/usr/bin/env python3
# keywords: [runner, cli, challenge run, trace export]
"""
Command-line runner for block programs.

Loads a challenge from a catalog and a compiled program from JSON, replays the
program through the interpreter and reports the verdict. Configuration comes
from defaults, an optional JSON file and command-line flags, in that order.
"""

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from interfaces import ActorState, NO_PACING, PacingConfig, RunConfig
from interpreter import CommandInterpreter, count_blocks, normalize_program
from interpreter.normalize import MalformedProgramError
from world.challenge_grid import ChallengeGridWorld, ConfigurationError, load_catalog, within_block_limit
from export import RunRecorder, RunTrace, TraceExporter

logger = logging.getLogger("runner")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_REJECTED = 2


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path, "r") as f:
        return json.load(f)


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override config into base config."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def create_run_config(args) -> RunConfig:
    """Create a final RunConfig from defaults, a JSON file, and CLI args."""
    config_dict = RunConfig(
        catalog_path=str(args.catalog),
        challenge_id=args.challenge,
        program_path=str(args.program),
    ).to_dict()

    if args.config:
        config_dict = merge_configs(config_dict, load_config(args.config))

    # Command-line overrides
    config_dict["catalog_path"] = str(args.catalog)
    config_dict["challenge_id"] = args.challenge
    config_dict["program_path"] = str(args.program)
    if args.fast:
        config_dict["pacing"] = NO_PACING._asdict()
    if args.move_delay is not None:
        config_dict["pacing"]["move_delay"] = args.move_delay
    if args.turn_delay is not None:
        config_dict["pacing"]["turn_delay"] = args.turn_delay
    if args.export_dir:
        config_dict["export_dir"] = str(args.export_dir)
    if args.quiet:
        config_dict["log_to_console"] = False
    if args.log_level:
        config_dict["log_level"] = args.log_level
    if args.ignore_block_limit:
        config_dict["enforce_block_limit"] = False

    return RunConfig(
        pacing=PacingConfig(**config_dict["pacing"]),
        **{k: v for k, v in config_dict.items() if k != "pacing"},
    )


def print_state(state: ActorState) -> None:
    line = f"  step {state.step_count:3d}  at ({state.row}, {state.col}) facing {state.direction}"
    if state.body or state.collected:
        line += f"  trail={len(state.body)} collected={len(state.collected)}"
    print(line)


async def run_challenge(
    world: ChallengeGridWorld,
    commands: Any,
    pacing: PacingConfig,
    log_to_console: bool = True,
) -> Tuple[RunTrace, bool]:
    """Replay ``commands`` in ``world`` once and return the trace and verdict."""
    verdicts: List[bool] = []
    recorder = RunRecorder(
        on_state_change=print_state if log_to_console else None,
        on_execution_complete=verdicts.append,
    )
    interpreter = CommandInterpreter(recorder.on_state_change, recorder.on_execution_complete, pacing=pacing)
    initial_state = interpreter.reset(world)

    program = normalize_program(commands)
    recorder.begin(world.challenge_id, initial_state, program)
    await interpreter.start(program, world)
    trace = recorder.finish(interpreter.last_outcome)
    return trace, bool(verdicts and verdicts[-1])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the runner."""
    parser = argparse.ArgumentParser(
        description="Run a block program against a challenge.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Inputs
    parser.add_argument("catalog", type=Path, help="Challenge catalog JSON file.")
    parser.add_argument("challenge", help="Challenge id within the catalog.")
    parser.add_argument("program", type=Path, help="Compiled program JSON file.")

    # Configuration
    parser.add_argument("--config", type=Path, help="Path to a base JSON config file.")

    # Pacing
    parser.add_argument("--fast", action="store_true", help="Run without animation delays.")
    parser.add_argument("--move-delay", type=float, help="Seconds before each unit step.")
    parser.add_argument("--turn-delay", type=float, help="Seconds before each turn.")
    parser.add_argument(
        "--ignore-block-limit", action="store_true", help="Run even if the program exceeds maxBlocks."
    )

    # Output control
    parser.add_argument("--export-dir", type=Path, help="Write the run trace to this directory.")
    parser.add_argument("--quiet", action="store_true", help="Suppress console output.")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level.")

    args = parser.parse_args(argv)
    try:
        config = create_run_config(args)
    except (OSError, TypeError, ValueError) as e:
        # Unreadable config file, unknown keys or negative delays
        logger.error(f"Invalid configuration: {e}")
        return EXIT_REJECTED
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.WARNING))

    # --- Setup ---
    try:
        catalog = load_catalog(config.catalog_path)
        spec = catalog.get(config.challenge_id)
        world = ChallengeGridWorld.from_challenge(spec)
        with open(config.program_path, "r") as f:
            commands = json.load(f)
        program = normalize_program(commands)
    except (ConfigurationError, KeyError, MalformedProgramError, json.JSONDecodeError, OSError) as e:
        logger.error(f"Cannot start run: {e}")
        return EXIT_REJECTED

    blocks_used = count_blocks(program)
    if config.enforce_block_limit and not within_block_limit(blocks_used, spec):
        logger.error(f"Program uses {blocks_used} blocks but the limit is {spec.max_blocks}")
        if config.log_to_console:
            print(f"Too many blocks: {blocks_used} / {spec.max_blocks}. Try using repeat.")
        return EXIT_REJECTED

    if config.log_to_console:
        print("=" * 60)
        print(f"Challenge: {spec.id} - {spec.title}")
        print(f"World: {world.rows}x{world.cols} ({world.variant}) | Interpreter v{CommandInterpreter.VERSION}")
        limit = spec.max_blocks if spec.max_blocks is not None else "-"
        print(f"Blocks: {blocks_used} / {limit}")
        print("-" * 60)

    # --- Execution ---
    start_time = time.perf_counter()
    trace, success = asyncio.run(run_challenge(world, program, config.pacing, config.log_to_console))
    duration = time.perf_counter() - start_time

    # --- Export ---
    if config.export_dir:
        with TraceExporter(session_name=config.run_name, output_base_dir=config.export_dir) as exporter:
            exporter.save_world(world.get_config())
            exporter.write_trace(trace)
        if config.log_to_console:
            print(f"Trace saved to: {exporter.output_dir}")

    # --- Summary ---
    if config.log_to_console:
        print("-" * 60)
        print(f"Result: {'SUCCESS' if success else 'FAILURE'} ({trace.outcome})")
        print(f"State changes: {len(trace.states)} in {duration:.2f} seconds")
        print("=" * 60)

    return EXIT_SUCCESS if success else EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
