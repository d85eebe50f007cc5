from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

import requests

from ..core.constants import DEFAULT_BRIGADE_ID, DEFAULT_DLB_TIMEOUT_SECONDS
from ..core.exceptions import ExternalApiError

logger = logging.getLogger(__name__)

USER_AGENT = "BrigadePortal/1.0"


@dataclass(frozen=True)
class DlbConfig:
    base_url: str
    api_token: str
    webhook_secret: str = ""
    timeout: int = DEFAULT_DLB_TIMEOUT_SECONDS
    brigade_id: int = DEFAULT_BRIGADE_ID

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_token)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DlbConfig":
        return cls(
            base_url=str(data.get("base_url") or "").rstrip("/"),
            api_token=str(data.get("api_token") or ""),
            webhook_secret=str(data.get("webhook_secret") or ""),
            timeout=int(data.get("timeout") or DEFAULT_DLB_TIMEOUT_SECONDS),
            brigade_id=int(data.get("brigade_id") or DEFAULT_BRIGADE_ID),
        )


class DlbClient:
    """Thin client for the DLB attendance API.

    Every failure surfaces as ExternalApiError: transport errors (with
    http_code 0), non-2xx responses and bodies that are not JSON.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        *,
        timeout: int = DEFAULT_DLB_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    @classmethod
    def from_config(cls, config: DlbConfig) -> "DlbClient":
        return cls(config.base_url, config.api_token, timeout=config.timeout)

    def get_attendance_history(self, from_date: date, to_date: date) -> list[dict]:
        """Musters in [from_date, to_date], each as {"muster": {...}, "attendance": [...]}."""

        response = self._request(
            "GET",
            "/api/v1/attendance/history",
            params={"from": from_date.isoformat(), "to": to_date.isoformat()},
        )
        history = response.get("history")
        if not isinstance(history, list):
            raise ExternalApiError("DLB attendance history response has no 'history' list", 200, response)
        return history

    def list_musters(self, from_date: date, to_date: date, status: Optional[str] = None) -> list[dict]:
        params = {"from": from_date.isoformat(), "to": to_date.isoformat()}
        if status is not None:
            params["status"] = status
        return self._request("GET", "/api/v1/musters", params=params).get("musters") or []

    def get_muster_attendance(self, muster_id: int) -> dict:
        return self._request("GET", f"/api/v1/musters/{int(muster_id)}/attendance")

    def get_members(self) -> list[dict]:
        return self._request("GET", "/api/v1/members").get("members") or []

    def test_connection(self) -> bool:
        self.get_members()
        return True

    def _request(self, method: str, endpoint: str, *, params: Optional[dict] = None, json: Any = None) -> dict:
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"DLB {method} {url} params={params}")

        try:
            response = self._session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.Timeout as e:
            logger.warning(f"DLB request timed out after {self.timeout}s: {method} {endpoint}")
            raise ExternalApiError.from_transport_error(e, timeout=True) from e
        except requests.RequestException as e:
            logger.warning(f"DLB request failed: {method} {endpoint}: {e}")
            raise ExternalApiError.from_transport_error(e) from e

        body: Optional[dict] = None
        if response.content:
            try:
                body = response.json()
            except ValueError as e:
                raise ExternalApiError(
                    f"Invalid JSON response from DLB API: {e}",
                    response.status_code,
                    {"raw_response": response.text[:1000]},
                ) from e

        if response.status_code >= 400:
            raise ExternalApiError.from_response(response.status_code, body if isinstance(body, dict) else None)

        if body is None:
            return {}
        if not isinstance(body, dict):
            raise ExternalApiError("Unexpected DLB API response shape", response.status_code, {"raw_response": body})
        return body
