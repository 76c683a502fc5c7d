"""Automower Connect device API client."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from .errors import AuthorizationExpired, OperationError

logger = logging.getLogger(__name__)

JSON_API = "application/vnd.api+json"
AUTHORIZATION_PROVIDER = "husqvarna"

ENVELOPE_JSONAPI = "jsonapi"
ENVELOPE_BARE = "bare"


@dataclass(frozen=True)
class Mower:
    """The parts of a mower resource shown on the dashboard."""

    id: str
    name: Optional[str] = None
    model: Optional[str] = None
    activity: Optional[str] = None
    state: Optional[str] = None
    battery_percent: Optional[int] = None

    @classmethod
    def from_resource(cls, resource: Any) -> "Mower":
        if not isinstance(resource, dict) or not resource.get("id"):
            raise ValueError("mower resource has no id")
        attributes = resource.get("attributes") or {}
        system = attributes.get("system") or {}
        mower = attributes.get("mower") or {}
        battery = attributes.get("battery") or {}
        return cls(
            id=str(resource["id"]),
            name=system.get("name"),
            model=system.get("model"),
            activity=mower.get("activity"),
            state=mower.get("state"),
            battery_percent=battery.get("batteryPercent"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "activity": self.activity,
            "state": self.state,
            "battery_percent": self.battery_percent,
        }


@dataclass(frozen=True)
class MowerAction:
    """A command for the mower actions endpoint."""

    kind: str
    duration_minutes: Optional[int] = None

    START = "Start"
    PARK = "Park"

    @classmethod
    def start(cls, duration_minutes: int) -> "MowerAction":
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        return cls(cls.START, duration_minutes)

    @classmethod
    def park(cls, duration_minutes: Optional[int] = None) -> "MowerAction":
        if duration_minutes is not None and duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        return cls(cls.PARK, duration_minutes)

    def payload(self) -> Dict[str, Any]:
        if self.kind == self.PARK and self.duration_minutes is None:
            return {"data": {"type": "ParkUntilFurtherNotice"}}
        return {
            "data": {
                "type": self.kind,
                "attributes": {"duration": self.duration_minutes},
            }
        }


class AutomowerClient:
    """Thin wrapper over the two device API calls the dashboard needs.

    Each method takes the access token to use; token handling is the
    caller's business. A 401 becomes ``AuthorizationExpired``, every other
    failure becomes ``OperationError``.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_base: str,
        api_key: str,
        envelope: str = ENVELOPE_JSONAPI,
    ) -> None:
        if envelope not in {ENVELOPE_JSONAPI, ENVELOPE_BARE}:
            raise ValueError(f"Unknown payload envelope: {envelope}")
        self._http = http
        self._api_base = api_base.rstrip("/")
        self._api_key = api_key
        self._envelope = envelope

    async def list_mowers(self, access_token: str) -> List[Mower]:
        response = await self._send("GET", "/mowers", access_token)
        try:
            items = self._unwrap(response.json())
            return [Mower.from_resource(item) for item in items]
        except ValueError as exc:
            raise OperationError(
                f"Malformed mower list: {exc}", response.status_code, response.text
            ) from exc

    async def send_action(
        self, access_token: str, mower_id: str, action: MowerAction
    ) -> None:
        await self._send(
            "POST",
            f"/mowers/{mower_id}/actions",
            access_token,
            content=json.dumps(action.payload()),
            headers={"Content-Type": JSON_API},
        )
        logger.info("Sent %s to mower %s", action.kind, mower_id)

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Authorization-Provider": AUTHORIZATION_PROVIDER,
            "X-Api-Key": self._api_key,
            "Accept": JSON_API,
        }

    async def _send(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        request_headers = self._headers(access_token)
        request_headers.update(headers or {})
        try:
            response = await self._http.request(
                method,
                f"{self._api_base}{path}",
                content=content,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise OperationError(f"Request to device API failed: {exc}") from exc

        if response.status_code == 401:
            raise AuthorizationExpired(
                "Access token rejected", response.status_code, response.text
            )
        if not response.is_success:
            logger.warning("%s %s returned HTTP %s", method, path, response.status_code)
            raise OperationError(
                "Device API request failed", response.status_code, response.text
            )
        return response

    def _unwrap(self, body: Any) -> List[Any]:
        if self._envelope == ENVELOPE_JSONAPI:
            if not isinstance(body, dict):
                raise ValueError("expected a JSON:API document")
            body = body.get("data")
        if not isinstance(body, list):
            raise ValueError("expected a list of mowers")
        return body


__all__ = [
    "AutomowerClient",
    "ENVELOPE_BARE",
    "ENVELOPE_JSONAPI",
    "Mower",
    "MowerAction",
]
