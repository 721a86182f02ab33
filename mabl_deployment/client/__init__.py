"""mabl execution service clients."""

from mabl_deployment.client.base import ExecutionClient, ExecutionClientError
from mabl_deployment.client.config import MablApiConfig
from mabl_deployment.client.rest import MablRestApiClient

__all__ = [
    "ExecutionClient",
    "ExecutionClientError",
    "MablApiConfig",
    "MablRestApiClient",
]
