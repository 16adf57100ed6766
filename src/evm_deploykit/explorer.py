"""Block explorer API client for evm-deploykit."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests

from .constants import CHECK_STATUS_ACTION, VERIFY_MODULE
from .exceptions import ExplorerRequestError


@dataclass(frozen=True)
class ExplorerResponse:
    """Envelope returned by Etherscan-family APIs."""

    status: str
    message: str
    result: Any

    @property
    def ok(self) -> bool:
        return self.status == "1"

    @property
    def result_text(self) -> str:
        """The result as text ("" when absent)."""
        return "" if self.result is None else str(self.result)


class ExplorerClient:
    """Client for the contract verification endpoints of an explorer API."""

    def __init__(
        self,
        api_base: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            api_base: Explorer API base URL (e.g. https://api-testnet.bscscan.com/api)
            api_key: Explorer API key
            session: HTTP session (a new one is created if None)
            timeout: Per-request timeout in seconds (None waits indefinitely)
        """
        self.api_base = api_base
        self.api_key = api_key
        self._session = session or requests.Session()
        self._timeout = timeout

    def submit_verification(self, payload: Mapping[str, str]) -> ExplorerResponse:
        """
        Submit a source verification request (action=verifysourcecode).

        Args:
            payload: Form fields, including apikey/module/action

        Returns:
            Parsed explorer response; result is the GUID when ok

        Raises:
            ExplorerRequestError: If the request fails or the body is not JSON
        """
        try:
            response = self._session.post(self.api_base, data=dict(payload), timeout=self._timeout)
        except requests.RequestException as e:
            raise ExplorerRequestError(f"Network error submitting verification: {e}") from e
        return self._parse(response)

    def check_status(self, guid: str) -> ExplorerResponse:
        """
        Query the status of a verification submission (action=checkverifystatus).

        Args:
            guid: Submission GUID

        Returns:
            Parsed explorer response; result is a human-readable status

        Raises:
            ExplorerRequestError: If the request fails or the body is not JSON
        """
        params = {
            "module": VERIFY_MODULE,
            "action": CHECK_STATUS_ACTION,
            "guid": guid,
            "apikey": self.api_key,
        }
        try:
            response = self._session.get(self.api_base, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise ExplorerRequestError(f"Network error checking verification status: {e}") from e
        return self._parse(response)

    @staticmethod
    def _parse(response: requests.Response) -> ExplorerResponse:
        if response.status_code != 200:
            raise ExplorerRequestError(
                f"Explorer request failed with status {response.status_code}"
            )
        try:
            body: Dict[str, Any] = response.json()
        except ValueError as e:
            raise ExplorerRequestError(f"Explorer returned a non-JSON body: {e}") from e
        if not isinstance(body, dict):
            raise ExplorerRequestError(f"Explorer returned unexpected body: {body!r}")
        return ExplorerResponse(
            status=str(body.get("status", "")),
            message=str(body.get("message", "")),
            result=body.get("result"),
        )
