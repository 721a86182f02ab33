"""Outcomes of a trigger and poll cycle."""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, kw_only=True)
class Success:
    """Every plan execution completed successfully."""


@dataclass(frozen=True, kw_only=True)
class MablSystemError:
    """mabl or the transport to it failed; the run could not be followed."""

    message: str
    cause: BaseException | None = None


@dataclass(frozen=True, kw_only=True)
class PlanExecutionFailure:
    """Executions completed but one or more plans did not succeed."""

    message: str


Outcome: TypeAlias = Success | MablSystemError | PlanExecutionFailure
