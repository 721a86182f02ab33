"""mabl REST API client implementation."""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, TypeVar

import aiohttp
from pydantic import ValidationError

from mabl_deployment.client.base import ExecutionClient, ExecutionClientError
from mabl_deployment.client.config import MablApiConfig
from mabl_deployment.models.base import Model
from mabl_deployment.models.execution import DeploymentHandle, ExecutionSnapshot

log = logging.getLogger(__name__)

DEPLOYMENT_EVENT_PATH = "/events/deployment"
EXECUTION_RESULT_PATH = "/execution/result/event/{deployment_id}"
USER_AGENT = "mabl-deployment-runner"

M = TypeVar("M", bound=Model)


@dataclass(frozen=True, kw_only=True)
class MablRestApiClient(ExecutionClient):
    """Execution client backed by the mabl REST API."""

    config: MablApiConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    def create(cls, config: MablApiConfig) -> "MablRestApiClient":
        """Create a client with its own session.

        Must be called from a running event loop. The session is released by
        close().
        """
        # mabl uses Basic Auth with "key" as username and the API key as password
        auth_string = f"key:{config.api_key.get_secret_value()}"
        auth_bytes = base64.b64encode(auth_string.encode("ascii")).decode("ascii")
        session = aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers={
                "Authorization": f"Basic {auth_bytes}",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=aiohttp.ClientTimeout(total=config.request_timeout),
        )
        return cls(config=config, session=session)

    async def create_deployment_event(
        self,
        environment_id: str | None,
        application_id: str | None,
    ) -> DeploymentHandle:
        """Create a deployment event for the environment and application."""
        payload: dict[str, str] = {}
        if environment_id:
            payload["environment_id"] = environment_id
        if application_id:
            payload["application_id"] = application_id

        log.info(
            "Creating deployment event: api_base_url=%s, environment_id=%s, "
            "application_id=%s",
            self.config.api_base_url,
            environment_id,
            application_id,
        )

        data = await self._request("POST", DEPLOYMENT_EVENT_PATH, json=payload)
        return _parse(DeploymentHandle, data)

    async def get_execution_results(
        self,
        deployment_id: str,
    ) -> ExecutionSnapshot | None:
        """Fetch execution results, None when the deployment id is unknown."""
        url = EXECUTION_RESULT_PATH.format(deployment_id=deployment_id)
        log.debug("Fetching execution results for deployment %s", deployment_id)

        data = await self._request("GET", url, allow_missing=True)
        if data is None:
            return None
        return _parse(ExecutionSnapshot, data)

    async def close(self) -> None:
        """Close the underlying HTTP session if it is still open."""
        if not self.session.closed:
            await self.session.close()

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> Any:
        try:
            async with self.session.request(method, url, json=json) as response:
                if allow_missing and response.status == 404:
                    return None
                if response.status not in {200, 201}:
                    text = await response.text()
                    raise ExecutionClientError(
                        f"mabl API call {method} {url} failed: {response.status} {text}",
                        status_code=response.status,
                    )
                return await response.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as e:
            raise ExecutionClientError(
                f"mabl API call {method} {url} failed: {e!r}"
            ) from e


def _parse(model_cls: type[M], data: Any) -> M:
    """Validate a response payload, reporting malformed payloads as API errors."""
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise ExecutionClientError(
            f"Unexpected {model_cls.__name__} payload from mabl: {e}"
        ) from e
