"""
Fitbit Client Wrapper
---------------------
Authenticated HTTP session for the Fitbit API and web API.
"""
import logging
from typing import Optional

import requests

from .base import ConfigError, RequestError
from .config import REQUEST_HEADERS


class FitbitClient:
    """requests.Session carrying the bearer token and browser headers."""

    def __init__(
        self,
        bearer_token: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if not bearer_token:
            raise ConfigError("Missing Fitbit bearer token (FITBIT_BEARER_TOKEN)")

        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.session = session or requests.Session()
        self.session.headers.update(REQUEST_HEADERS)
        self.session.headers["Authorization"] = f"Bearer {bearer_token}"

    def get(self, url: str, stream: bool = False) -> requests.Response:
        """
        Issue a GET request and fail on non-success status.

        Args:
            url: Absolute URL to fetch.
            stream: Defer downloading the body (for file downloads).

        Returns:
            The successful response.

        Raises:
            RequestError: If the response status is not 2xx.
        """
        self.logger.debug(f"GET {url}")
        response = self.session.get(url, stream=stream, timeout=self.timeout)

        if not response.ok:
            self._log_not_ok(response)
            response.close()
            raise RequestError(
                "Fitbit request failed",
                status=response.status_code,
                status_text=response.reason or "",
                body=response.text,
                url=url,
            )
        return response

    def get_json(self, url: str) -> dict:
        """GET a URL and decode its JSON body."""
        response = self.get(url)
        return response.json()

    def close(self) -> None:
        self.session.close()

    def _log_not_ok(self, response: requests.Response) -> None:
        self.logger.error(
            f"❌ Request failed: status={response.status_code} status_text={response.reason}"
        )
        self.logger.error(response.text)
