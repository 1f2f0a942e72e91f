"""Errors raised by the fleet engine.

All of them are local, caller-recoverable conditions. A command that raises
leaves the fleet unchanged.
"""


class FleetError(Exception):
    """Base class for fleet engine errors."""


class DuplicateIdError(FleetError):
    """A unit with the given id already exists."""

    def __init__(self, unit_id: str):
        self.unit_id = unit_id
        super().__init__(f"Unit with ID {unit_id} already exists")


class UnitNotFoundError(FleetError, KeyError):
    """No unit with the given id is tracked."""

    def __init__(self, unit_id: str):
        self.unit_id = unit_id
        super().__init__(f"Unit {unit_id} not found")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class UnknownTaskTypeError(FleetError):
    """A task spec carries an unrecognized discriminator."""

    def __init__(self, task_type):
        self.task_type = task_type
        super().__init__(f"Unknown task type: {task_type}")


class UnknownPatternError(FleetError, KeyError):
    """No formation generator is registered under the given name."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Formation pattern '{pattern}' not found")

    def __str__(self) -> str:
        return self.args[0]


class EmptyFleetError(FleetError):
    """A formation was requested while no units exist."""

    def __init__(self):
        super().__init__("No units available for formation")


class InvalidCoordinateError(FleetError, ValueError):
    """A coordinate or altitude is not a finite number."""
