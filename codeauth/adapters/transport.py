"""
HTTP transport for the CodeAuth service.
"""

import json
from typing import Dict, Any, Optional

import httpx

from ..models import ErrorCode
from ..shared.logging import get_logger
from ..shared.metrics import MetricsCollector


CONNECTION_ERROR = ErrorCode.CONNECTION_ERROR.value
NO_ERROR = ErrorCode.NO_ERROR.value


class CodeAuthTransport:
    """Client for communicating with the CodeAuth service.

    One blocking POST per call. Failures below the HTTP layer never raise;
    they come back as ``{"error": "connection_error"}``.
    """

    def __init__(self, base_url: str, http_client: Optional[httpx.Client] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger("codeauth.transport")
        self.metrics = metrics
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client()

    def post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``body`` as JSON to ``path`` and return the decoded response object."""
        if self.metrics is None:
            return self._post(path, body)

        with self.metrics.time_request(path) as outcome:
            result = self._post(path, body)
            if result.get("error") == CONNECTION_ERROR:
                outcome["value"] = "connection_error"
            elif result.get("error") != NO_ERROR:
                outcome["value"] = "remote_error"
            return result

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"

        if self._client.is_closed:
            self.logger.error("CodeAuth transport is closed", path=path)
            return {"error": CONNECTION_ERROR}

        try:
            content = json.dumps(body)
        except (TypeError, ValueError) as e:
            self.logger.error("Failed to encode request body", path=path, error=str(e))
            return {"error": CONNECTION_ERROR}

        try:
            response = self._client.post(
                url,
                content=content,
                headers={"Content-Type": "application/json"}
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.error("CodeAuth service HTTP error", path=path, error=str(e))
            return {"error": CONNECTION_ERROR}

        try:
            result = response.json()
        except ValueError as e:
            self.logger.error(
                "CodeAuth service returned invalid JSON",
                path=path,
                status_code=response.status_code,
                error=str(e)
            )
            return {"error": CONNECTION_ERROR}

        if not isinstance(result, dict):
            self.logger.error(
                "CodeAuth service returned a non-object response",
                path=path,
                status_code=response.status_code
            )
            return {"error": CONNECTION_ERROR}

        if response.status_code == 200:
            result["error"] = NO_ERROR
        elif "error" not in result:
            result["error"] = ErrorCode.INTERNAL_ERROR.value

        if result["error"] != NO_ERROR:
            self.logger.warning(
                "CodeAuth service reported an error",
                path=path,
                status_code=response.status_code,
                error=result["error"]
            )

        return result

    def close(self):
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()
