"""Fleet simulator: seeds simulated units and runs scripted demos.

Example:
    from dronefleet.simulation import FleetSimulator

    sim = FleetSimulator()
    sim.initialize()
    sim.start()
    sim.engine.execute_formation("star", {"outer_radius": 20})
    ...
    sim.shutdown()
"""

import logging
import random
import time
from typing import Callable, List, Optional

from ..core.config import EngineConfig, SimulatorConfig
from ..core.engine import FleetEngine, FleetStatus
from ..core.geometry import Position
from ..core.tasks import TaskSpec
from .display import render_status
from .scheduler import TickScheduler

logger = logging.getLogger(__name__)


class FleetSimulator:
    """Owns an engine and its tick scheduler for interactive or demo runs.

    Attributes:
        config: Simulator configuration.
        engine: The fleet engine.
        scheduler: Background tick driver.
    """

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        engine_config: Optional[EngineConfig] = None,
        engine: Optional[FleetEngine] = None,
    ):
        self.config = config or SimulatorConfig()
        self.engine = engine or FleetEngine(engine_config)
        self.scheduler = TickScheduler(self.engine)
        self._rng = random.Random(self.config.seed)

    def random_spawn_position(self) -> Position:
        """Random ground position within the spawn extent."""
        extent = self.config.spawn_extent
        return (
            self._rng.uniform(-extent, extent),
            self._rng.uniform(-extent, extent),
            0.0,
        )

    def initialize(self, add_test_units: bool = True) -> List[str]:
        """Populate the fleet with simulated units.

        Args:
            add_test_units: Create config.num_units units at random spawn points

        Returns:
            Ids of the units created.
        """
        logger.info("Initializing fleet simulator...")
        created = []
        if add_test_units:
            for i in range(1, self.config.num_units + 1):
                unit_id = self.config.unit_id(i)
                x, y, z = self.random_spawn_position()
                self.engine.add_unit(unit_id, x, y, z, simulated=True)
                created.append(unit_id)
            logger.info(f"Added {len(created)} simulated units")
        return created

    def start(self) -> None:
        """Start ticking in the background."""
        self.scheduler.start()

    def stop(self) -> None:
        """Stop background ticking."""
        self.scheduler.stop()

    def status(self) -> FleetStatus:
        return self.engine.status()

    def render(self, show_grid: bool = True) -> str:
        """Status screen for the display loop."""
        return render_status(self.engine.status(), show_grid=show_grid)

    def advance(self, seconds: float, realtime: bool = True) -> None:
        """Let ``seconds`` of simulated time pass.

        With realtime the scheduler does the ticking and this just sleeps;
        otherwise the equivalent number of ticks run synchronously.
        """
        if realtime:
            time.sleep(seconds)
        else:
            ticks = round(seconds / self.engine.config.tick_interval)
            self.engine.run_ticks(ticks)

    def demo_steps(self) -> List[Callable[[], None]]:
        """The scripted demo sequence, one callable per step."""
        engine = self.engine

        def circle():
            logger.info("Demo 1: Circle formation")
            engine.execute_formation("circle", {"radius": 15})

        def star():
            logger.info("Demo 2: Star formation")
            engine.execute_formation("star", {"outer_radius": 20, "points": 5})

        def heart():
            logger.info("Demo 3: Heart formation")
            engine.execute_formation("heart", {"scale": 8})

        def individual_tasks():
            logger.info("Demo 4: Individual tasks")
            ids = engine.unit_ids
            if ids:
                engine.assign_task(ids[0], TaskSpec.move(30, 30, 20))
            if len(ids) > 1:
                engine.assign_task(ids[1], TaskSpec.hover(3000))

        return [circle, star, heart, individual_tasks]

    def run_demo(self, step_seconds: float = 5.0, realtime: bool = True) -> FleetStatus:
        """Run the scripted demo on a freshly seeded fleet.

        Returns:
            Fleet status after the last step.
        """
        logger.info("Running automated demo...")
        if len(self.engine) == 0:
            self.initialize()
        if realtime:
            self.start()

        try:
            for step in self.demo_steps():
                step()
                self.advance(step_seconds, realtime)
            logger.info("Demo completed")
            return self.engine.status()
        finally:
            if realtime:
                self.stop()

    def run_formation_demo(
        self,
        pattern: str,
        num_units: int,
        options: Optional[dict] = None,
        altitude: float = 15.0,
        id_prefix: str = "demo_",
        settle_seconds: float = 2.0,
        realtime: bool = True,
    ) -> FleetStatus:
        """Take off a fleet from the origin and form a pattern.

        Units are added at the origin only if the fleet is empty.

        Returns:
            Fleet status right after the formation is commanded.
        """
        logger.info(f"Running {pattern} formation demo...")
        if len(self.engine) == 0:
            for i in range(1, num_units + 1):
                self.engine.add_unit(f"{id_prefix}{i}", 0.0, 0.0, 0.0, simulated=True)

        for unit_id in self.engine.unit_ids:
            self.engine.assign_task(unit_id, TaskSpec.takeoff(altitude))

        if realtime:
            self.start()
        self.advance(settle_seconds, realtime)
        self.engine.execute_formation(pattern, options or {})
        return self.engine.status()

    def shutdown(self) -> None:
        """Stop everything."""
        self.stop()
        logger.info("Simulator shutdown complete")
