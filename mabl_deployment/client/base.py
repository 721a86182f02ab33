"""Abstract capability for talking to the mabl execution service."""

from abc import ABC, abstractmethod

from mabl_deployment.models.execution import DeploymentHandle, ExecutionSnapshot


class ExecutionClientError(Exception):
    """Raised when the mabl API cannot be reached or answers unexpectedly."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ExecutionClient(ABC):
    """Client for creating deployment events and reading their results.

    Implementations raise ExecutionClientError for network, server and
    payload faults.
    """

    @abstractmethod
    async def create_deployment_event(
        self,
        environment_id: str | None,
        application_id: str | None,
    ) -> DeploymentHandle:
        """Create a deployment event, triggering the matching plans.

        Args:
            environment_id: mabl environment identifier
            application_id: mabl application identifier

        Returns:
            Handle holding the deployment event id

        """

    @abstractmethod
    async def get_execution_results(
        self,
        deployment_id: str,
    ) -> ExecutionSnapshot | None:
        """Fetch the current execution results of a deployment event.

        Args:
            deployment_id: Identifier returned by create_deployment_event

        Returns:
            Snapshot of all plan executions, None if mabl does not know the id

        """

    @abstractmethod
    async def close(self) -> None:
        """Release the client's resources. Safe to call more than once."""
