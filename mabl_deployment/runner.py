"""Deployment runner: trigger a mabl deployment event and follow it to the end.

The runner polls until every plan execution is complete. It has no deadline
of its own; the caller bounds the run by cancelling the task.
"""

import asyncio
import logging
import traceback
from dataclasses import dataclass
from typing import TextIO

from mabl_deployment.client.base import ExecutionClient, ExecutionClientError
from mabl_deployment.models.execution import ExecutionSnapshot
from mabl_deployment.models.outcome import (
    MablSystemError,
    Outcome,
    PlanExecutionFailure,
    Success,
)

log = logging.getLogger(__name__)

PLUGIN_NAME = "mabl"


@dataclass(frozen=True, kw_only=True)
class DeploymentRunner:
    """Runs all plans for a given environment and application in mabl."""

    client: ExecutionClient
    output: TextIO
    polling_interval: float
    environment_id: str | None
    application_id: str | None
    continue_on_plan_failure: bool
    continue_on_mabl_error: bool

    async def run(self) -> bool:
        """Trigger the deployment event and wait for every plan to finish.

        Returns:
            True on success, or when the failure that occurred is tolerated by
            the matching continue flag; False otherwise.

        Raises:
            asyncio.CancelledError: If the run is cancelled by the caller. The
                client is still released.

        """
        try:
            self._print("\nmabl Jenkins plugging running...")
            outcome = await self._execute()
        except Exception as e:
            self._print(f"Unexpected {PLUGIN_NAME} exception")
            traceback.print_exception(e, file=self.output)
            return self.continue_on_mabl_error
        else:
            return self._resolve(outcome)
        finally:
            self._print("mabl journey execution step complete.\n")

    def _resolve(self, outcome: Outcome) -> bool:
        match outcome:
            case Success():
                return True
            case MablSystemError(message=message, cause=cause):
                self._print(message)
                if cause is not None:
                    traceback.print_exception(cause, file=self.output)
                return self.continue_on_mabl_error
            case PlanExecutionFailure(message=message):
                self._print(message)
                return self.continue_on_plan_failure
            case _:
                self._print(f"Unexpected {PLUGIN_NAME} outcome: {outcome!r}")
                return self.continue_on_mabl_error

    async def _execute(self) -> Outcome:
        """Create the deployment event and poll until all plans complete."""
        # TODO: retry on 5xx responses (proxy errors, mabl redeploys)
        self._print(
            "mabl is creating a deployment event:\n"
            f"  environment_id: {self.environment_id}\n"
            f"  application_id: {self.application_id}"
        )

        try:
            deployment = await self.client.create_deployment_event(
                self.environment_id, self.application_id
            )
            self._print(
                f"Deployment event was created with id [{deployment.id}] in mabl."
            )

            polls = 0
            while True:
                await asyncio.sleep(self.polling_interval)
                snapshot = await self.client.get_execution_results(deployment.id)
                polls += 1

                if snapshot is None:
                    return MablSystemError(
                        message=(
                            "Oh snap! No deployment event found for id "
                            f"[{deployment.id}] in mabl."
                        )
                    )

                self._print_journey_statuses(snapshot)
                if snapshot.is_complete():
                    break

            log.info("Deployment %s complete after %d poll(s)", deployment.id, polls)
            self._print_final_statuses(snapshot)

            if not snapshot.is_successful():
                return PlanExecutionFailure(
                    message="One or more plans were unsuccessful running in mabl."
                )
            return Success()

        except ExecutionClientError as e:
            log.debug("mabl API error", exc_info=e)
            return MablSystemError(
                message="Oh no!. There was an API error trying to run journeys in mabl.",
                cause=e,
            )

        except asyncio.CancelledError:
            log.warning("mabl deployment run cancelled, releasing client")
            raise

        finally:
            if self.client is not None:
                await self.client.close()

    def _print_journey_statuses(self, snapshot: ExecutionSnapshot) -> None:
        self._print("Running mabl journey(s) status update:")
        for execution in snapshot.executions:
            self._print(f"  Plan [{execution.plan_name}] is [{execution.status}]")
            for journey in execution.journey_executions:
                self._print(f"  Journey [{journey.id}] is [{journey.status}]")

    def _print_final_statuses(self, snapshot: ExecutionSnapshot) -> None:
        self._print("The Final Plan states in mabl:")
        for execution in snapshot.executions:
            state = "SUCCESSFUL" if execution.success else "FAILED"
            self._print(
                f"  Plan [{execution.plan_name}] is {state} "
                f"in state [{execution.status}]"
            )

    def _print(self, line: str) -> None:
        print(line, file=self.output, flush=True)
