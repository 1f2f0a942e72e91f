#!/usr/bin/env python3
"""Run the fleet simulator.

Modes:
    interactive   Seed a simulated fleet and read commands from stdin
    demo          Scripted sequence: circle, star, heart, individual tasks
    demo-circle   Six units take off and form a circle
    demo-heart    Twelve units take off and form a heart

Usage:
    python scripts/run_sim.py
    python scripts/run_sim.py interactive --num-units 10 --seed 7 --display
    python scripts/run_sim.py demo --fast
    python scripts/run_sim.py demo-heart
"""

import argparse
import logging
import sys
import threading
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dronefleet.core import EngineConfig, SimulatorConfig
from dronefleet.simulation import CommandShell, FleetSimulator

logger = logging.getLogger(__name__)


def start_display(sim: FleetSimulator, stop_event: threading.Event) -> threading.Thread:
    """Print the status screen every display_interval seconds."""

    def loop():
        while not stop_event.wait(sim.config.display_interval):
            print("\033[2J\033[H" + sim.render(), flush=True)

    thread = threading.Thread(target=loop, name="fleet-display", daemon=True)
    thread.start()
    return thread


def run_interactive(sim: FleetSimulator, display: bool) -> int:
    """Read shell commands until quit or EOF."""
    sim.initialize()
    sim.start()

    stop_event = threading.Event()
    if display:
        start_display(sim, stop_event)

    shell = CommandShell(sim.engine, sim.scheduler, sim.random_spawn_position)
    print('Interactive mode started. Type "help" for commands.')

    try:
        while not shell.should_exit:
            try:
                line = input("> ")
            except EOFError:
                break
            output = shell.execute(line)
            if output:
                print(output)
    except KeyboardInterrupt:
        print()
    finally:
        stop_event.set()
        sim.shutdown()
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Fleet simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=["interactive", "demo", "demo-circle", "demo-heart"],
        default="interactive",
        help="Run mode (default: interactive)",
    )
    parser.add_argument(
        "-n", "--num-units",
        type=int,
        default=None,
        help="Number of simulated units (default: 8, or FLEET_NUM_UNITS)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for spawn positions")
    parser.add_argument(
        "--display",
        action="store_true",
        help="Refresh the status screen periodically in interactive mode",
    )
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Run demos with synchronous ticks instead of real time",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = SimulatorConfig.from_env()
    if args.num_units is not None:
        config.num_units = args.num_units
    if args.seed is not None:
        config.seed = args.seed

    sim = FleetSimulator(config, EngineConfig.from_env())
    realtime = not args.fast

    if args.mode == "interactive":
        return run_interactive(sim, args.display)

    try:
        if args.mode == "demo":
            sim.run_demo(realtime=realtime)
        elif args.mode == "demo-circle":
            sim.run_formation_demo("circle", 6, {"radius": 20}, realtime=realtime)
            sim.advance(3.0, realtime)
        else:
            sim.run_formation_demo("heart", 12, {"scale": 10}, realtime=realtime)
            sim.advance(3.0, realtime)
        print(sim.render())
    finally:
        sim.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
