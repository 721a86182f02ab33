"""Models for mabl deployment events and their execution results."""

from collections.abc import Sequence
from datetime import datetime

from pydantic import Field

from mabl_deployment.models.base import Model

COMPLETE_STATUSES = frozenset(
    {
        "succeeded",
        "failed",
        "cancelled",
        "completed",
        "terminated",
    }
)

UNKNOWN_PLAN_NAME = "<Unknown Plan>"


class DeploymentHandle(Model):
    """Deployment event created in mabl."""

    id: str = Field(..., description="Deployment event identifier assigned by mabl")


class PlanDescriptor(Model):
    """Summary of the plan an execution belongs to."""

    id: str | None = None
    name: str | None = None


class JourneyExecution(Model):
    """Status of a single journey run within a plan execution."""

    id: str | None = None
    journey_id: str | None = None
    status: str | None = None
    success: bool | None = None


class PlanExecution(Model):
    """Status of one plan run triggered by a deployment event."""

    status: str
    success: bool
    status_cause: str | None = None
    start_time: datetime | None = None
    stop_time: datetime | None = None
    plan: PlanDescriptor | None = None
    journey_executions: Sequence[JourneyExecution] = Field(default_factory=list)

    @property
    def plan_name(self) -> str:
        """Plan name, or a placeholder when mabl did not send one."""
        if self.plan is not None and self.plan.name is not None:
            return self.plan.name
        return UNKNOWN_PLAN_NAME

    @property
    def is_terminal(self) -> bool:
        """Whether the plan execution reached a terminal status."""
        return self.status.lower() in COMPLETE_STATUSES


class ExecutionSnapshot(Model):
    """Point-in-time view of all plan executions for a deployment event."""

    executions: Sequence[PlanExecution] = Field(default_factory=list)

    def is_complete(self) -> bool:
        """Check whether every plan execution reached a terminal status.

        Statuses outside COMPLETE_STATUSES are treated as still running, so a
        status introduced later by mabl keeps the runner polling.
        """
        # Evaluate every plan, no short circuit.
        return all([execution.is_terminal for execution in self.executions])

    def is_successful(self) -> bool:
        """Check whether every plan execution succeeded."""
        return all([execution.success for execution in self.executions])
