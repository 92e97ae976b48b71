"""Domain errors raised by the planner services.

Routes translate these into HTTP responses; nothing here carries transport or
parsing details from the advisory collaborator.
"""


class PlannerError(Exception):
    """Base class for recoverable planner errors."""


class TaskValidationError(PlannerError):
    """A task could not be created from the supplied fields."""


class EmptyPlanError(PlannerError):
    """An optimization was requested for a day with nothing to schedule."""


class AdvisorBusyError(PlannerError):
    """A request of the same kind is already in flight."""


class ScheduleResponseError(PlannerError):
    """The advisor returned a schedule that failed structural validation."""


class ScheduleOptimizationFailed(PlannerError):
    """The optimization did not produce a usable result."""


class ImportFormatError(PlannerError):
    """Pasted or uploaded data is not a task array."""
