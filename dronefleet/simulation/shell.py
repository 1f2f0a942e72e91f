"""Text command interpreter for the interactive simulator.

Each input line maps onto one engine operation. Errors the engine reports
are turned into a printable message; the shell keeps running.
"""

import logging
from typing import Callable, Optional

from ..core.engine import FleetEngine
from ..core.errors import FleetError
from ..core.geometry import Position
from ..core.tasks import TaskSpec, TaskType
from .display import render_status
from .scheduler import TickScheduler

logger = logging.getLogger(__name__)

HELP_TEXT = """Available Commands:
formation <pattern>     - Execute formation ({patterns})
task <id> move x y z    - Move unit to position
task <id> takeoff [alt] - Take off to altitude
task <id> land          - Land unit
task <id> hover [sec]   - Hover for seconds
add <id> [x y z]        - Add new unit
remove <id>             - Remove unit
start                   - Start fleet
stop                    - Stop fleet
emergency               - Emergency land all
status                  - Show fleet status
quit                    - Exit simulator"""


class CommandShell:
    """Parses shell commands and applies them to an engine."""

    def __init__(
        self,
        engine: FleetEngine,
        scheduler: Optional[TickScheduler] = None,
        spawn_position: Optional[Callable[[], Position]] = None,
    ):
        """Initialize shell.

        Args:
            engine: Engine that receives the commands
            scheduler: Tick driver started/stopped by ``start``/``stop``.
                Only the engine's running flag is toggled if None.
            spawn_position: Position for ``add <id>`` without coordinates.
                Origin if None.
        """
        self.engine = engine
        self.scheduler = scheduler
        self.spawn_position = spawn_position or (lambda: (0.0, 0.0, 0.0))
        self.should_exit = False

        self._commands = {
            "formation": self._cmd_formation,
            "task": self._cmd_task,
            "add": self._cmd_add,
            "remove": self._cmd_remove,
            "start": self._cmd_start,
            "stop": self._cmd_stop,
            "emergency": self._cmd_emergency,
            "status": self._cmd_status,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    def execute(self, line: str) -> str:
        """Run one command line.

        Returns:
            Text to show the user (empty for blank input).
        """
        parts = line.strip().split()
        if not parts:
            return ""
        logger.debug(f"Shell command: {line.strip()}")

        command, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(command)
        if handler is None:
            return f'Unknown command: {command}. Type "help" for available commands.'

        try:
            return handler(args)
        except (FleetError, ValueError) as e:
            return f"Error: {e}"

    def _cmd_formation(self, args: list) -> str:
        if not args:
            return "Available formations: " + ", ".join(self.engine.available_patterns())
        self.engine.execute_formation(args[0])
        return f"Formation '{args[0]}' executed"

    def _cmd_task(self, args: list) -> str:
        if len(args) < 2:
            return (
                "Usage: task <unitId> <type> [params]\n"
                "Types: move x y z | takeoff [altitude] | land | hover [seconds]"
            )

        unit_id, task_type, params = args[0], TaskType.parse(args[1]), args[2:]
        if task_type == TaskType.MOVE:
            if len(params) < 3:
                return "Usage: task <unitId> move x y z"
            spec = TaskSpec.move(*(float(p) for p in params[:3]))
        elif task_type == TaskType.TAKEOFF:
            spec = TaskSpec.takeoff(float(params[0]) if params else None)
        elif task_type == TaskType.HOVER:
            spec = TaskSpec.hover(float(params[0]) * 1000 if params else None)
        else:
            spec = TaskSpec.land()

        task = self.engine.assign_task(unit_id, spec)
        return f"Task assigned to unit {unit_id}: {task.summary()}"

    def _cmd_add(self, args: list) -> str:
        if not args:
            return "Usage: add <unitId> [x y z]"
        if len(args) >= 4:
            x, y, z = (float(a) for a in args[1:4])
        else:
            x, y, z = self.spawn_position()
        self.engine.add_unit(args[0], x, y, z)
        return f"Unit {args[0]} added at ({x:.1f}, {y:.1f}, {z:.1f})"

    def _cmd_remove(self, args: list) -> str:
        if not args:
            return "Usage: remove <unitId>"
        self.engine.remove_unit(args[0])
        return f"Unit {args[0]} removed"

    def _cmd_start(self, args: list) -> str:
        if self.engine.running:
            return "Fleet is already running"
        if self.scheduler is not None:
            self.scheduler.start()
        else:
            self.engine.start()
        return "Fleet started"

    def _cmd_stop(self, args: list) -> str:
        if not self.engine.running:
            return "Fleet is not running"
        if self.scheduler is not None:
            self.scheduler.stop()
        else:
            self.engine.stop()
        return "Fleet stopped"

    def _cmd_emergency(self, args: list) -> str:
        self.engine.emergency_land_all()
        return "EMERGENCY LANDING ALL UNITS"

    def _cmd_status(self, args: list) -> str:
        return render_status(self.engine.status())

    def _cmd_help(self, args: list) -> str:
        return HELP_TEXT.format(patterns=", ".join(self.engine.available_patterns()))

    def _cmd_quit(self, args: list) -> str:
        self.should_exit = True
        return "Exiting"
