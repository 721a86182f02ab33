"""CLI entry point for running mabl deployment events from a CI pipeline."""

import argparse
import asyncio
import logging
import os
import sys
from typing import TextIO

from pydantic import SecretStr

from mabl_deployment.client import MablApiConfig, MablRestApiClient
from mabl_deployment.runner import DeploymentRunner

DEFAULT_POLLING_INTERVAL = 10.0
DEFAULT_TIMEOUT = 3600.0


async def run(
    config: MablApiConfig,
    environment_id: str | None,
    application_id: str | None,
    *,
    polling_interval: float = DEFAULT_POLLING_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
    continue_on_plan_failure: bool = False,
    continue_on_mabl_error: bool = False,
    output: TextIO | None = None,
) -> int:
    """Run the deployment event within the timeout and return exit code."""
    log = logging.getLogger("mabl_deployment")

    if output is None:
        output = sys.stdout

    runner = DeploymentRunner(
        client=MablRestApiClient.create(config),
        output=output,
        polling_interval=polling_interval,
        environment_id=environment_id,
        application_id=application_id,
        continue_on_plan_failure=continue_on_plan_failure,
        continue_on_mabl_error=continue_on_mabl_error,
    )

    try:
        async with asyncio.timeout(timeout):
            success = await runner.run()
    except TimeoutError:
        log.error("mabl deployment run did not complete within %s seconds", timeout)
        return 1

    return 0 if success else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Trigger a mabl deployment event and wait for its plans"
    )
    parser.add_argument(
        "--api-key",
        default=os.environ.get("MABL_API_KEY"),
        help="mabl API key (default: $MABL_API_KEY)",
    )
    parser.add_argument(
        "--api-base-url",
        default="https://api.mabl.com",
        help="mabl REST API base URL",
    )
    parser.add_argument("--environment-id", help="mabl environment ID")
    parser.add_argument("--application-id", help="mabl application ID")
    parser.add_argument(
        "--polling-interval",
        type=float,
        default=DEFAULT_POLLING_INTERVAL,
        help="Seconds between execution status polls",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Maximum seconds to wait for all plans to complete",
    )
    parser.add_argument(
        "--continue-on-plan-failure",
        action="store_true",
        help="Exit successfully even if a plan fails",
    )
    parser.add_argument(
        "--continue-on-mabl-error",
        action="store_true",
        help="Exit successfully even if mabl cannot be reached",
    )

    args = parser.parse_args()

    if not args.api_key:
        parser.error("--api-key or MABL_API_KEY is required")
    if not args.environment_id and not args.application_id:
        parser.error("at least one of --environment-id or --application-id is required")
    if args.polling_interval <= 0:
        parser.error("--polling-interval must be positive")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = MablApiConfig(
        api_key=SecretStr(args.api_key),
        api_base_url=args.api_base_url,
    )

    exit_code = asyncio.run(
        run(
            config,
            args.environment_id,
            args.application_id,
            polling_interval=args.polling_interval,
            timeout=args.timeout,
            continue_on_plan_failure=args.continue_on_plan_failure,
            continue_on_mabl_error=args.continue_on_mabl_error,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
