"""Workflow trigger client

Starts durable workflows (e.g. member onboarding) by POSTing a JSON payload to
the workflow's HTTP route. The workflow engine behind the route owns retries
and execution; this client makes a single attempt.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

ONBOARDING_WORKFLOW_PATH = "/api/workflows/onboarding"


def onboarding_url(api_endpoint: str) -> str:
    """Build the onboarding workflow URL from the application base URL"""
    return f"{api_endpoint.rstrip('/')}{ONBOARDING_WORKFLOW_PATH}"


class WorkflowTriggerError(Exception):
    """Workflow could not be triggered."""
    pass


class WorkflowClient:
    """HTTP client for triggering workflows

    Args:
        token: Optional bearer token sent with every trigger
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def trigger(self, url: str, body: Dict[str, Any]) -> Optional[str]:
        """Trigger a workflow run.

        Args:
            url: Workflow route URL
            body: JSON payload delivered to the workflow

        Returns:
            Workflow run id if the endpoint reports one

        Raises:
            WorkflowTriggerError: On transport failure or non-2xx response
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=body, headers=self._headers())
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise WorkflowTriggerError(
                f"Workflow trigger rejected: {e.response.status_code} from {url}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise WorkflowTriggerError(f"Workflow trigger failed for {url}: {e}") from e

        run_id = None
        if response.content:
            try:
                run_id = response.json().get("workflowRunId")
            except (ValueError, AttributeError):
                run_id = None

        logger.info(f"Workflow triggered: {url} (run: {run_id})")
        return run_id
