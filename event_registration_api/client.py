"""Event registration API client.

A thin wrapper around the REST API served by
``event_registration_api.app``.  It uses the ``requests`` library and
keeps the bearer token returned by :meth:`EventRegistrationClient.register_user`
or :meth:`EventRegistrationClient.login`, sending it with every later
request.

Every operation returns a tuple ``(data, error)``.  On success ``data``
holds the parsed JSON body and ``error`` is ``None``; on failure
``data`` is ``None`` and ``error`` is a dictionary with the keys
``status_code`` and ``message`` (``status_code`` is ``None`` when the
server could not be reached).

Example::

    client = EventRegistrationClient(base_url="http://localhost:3000/api/v1")
    client.login("jane@example.com", "password123")
    events, error = client.list_events()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class EventRegistrationClient:
    """Client for the event registration API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the versioned API, e.g.
                ``https://example.com/api/v1``.
            token: Optional bearer token from an earlier login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/events``).
            json_body: JSON body to send with the request.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._error_from_response(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _error_from_response(exc: requests.HTTPError) -> Dict[str, Any]:
        response = exc.response
        status = response.status_code if response is not None else None
        message = ""
        if response is not None:
            try:
                body = response.json()
            except ValueError:
                message = response.text
            else:
                if isinstance(body, dict):
                    errors = body.get("errors")
                    message = "; ".join(errors) if errors else body.get("error") or str(body)
                else:
                    message = str(body)
        if not message:
            message = str(exc)
        logger.error("API request failed (%s): %s", status, message)
        return {"status_code": status, "message": message}

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def _store_token(self, result: Result) -> Result:
        data, error = result
        if data and data.get("token"):
            self.token = data["token"]
        return data, error

    def register_user(
        self,
        name: str,
        email: str,
        password: str,
        role: Optional[str] = None,
    ) -> Result:
        """Create an account and remember the returned token."""
        payload: Dict[str, Any] = {"name": name, "email": email, "password": password}
        if role:
            payload["role"] = role
        return self._store_token(self._request("POST", "/register", json_body=payload))

    def login(self, email: str, password: str) -> Result:
        """Log in and remember the returned token."""
        return self._store_token(
            self._request("POST", "/login", json_body={"email": email, "password": password})
        )

    # ------------------------------------------------------------------
    # Event operations
    # ------------------------------------------------------------------
    def list_events(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Retrieve all events.

        Returns an empty list together with the error on failure.
        """
        data, error = self._request("GET", "/events")
        if error:
            return [], error
        return (data or {}).get("events", []), None

    def get_event(self, event_id: str) -> Result:
        data, error = self._request("GET", f"/events/{event_id}")
        if error:
            return None, error
        return data.get("event"), None

    def create_event(self, payload: Dict[str, Any]) -> Result:
        """Create an event (organizers only)."""
        data, error = self._request("POST", "/events", json_body=payload)
        if error:
            return None, error
        return data.get("event"), None

    def update_event(self, event_id: str, changes: Dict[str, Any]) -> Result:
        """Apply a partial update.

        Only the keys present in ``changes`` are sent; pass
        ``{"capacity": None}`` to make the event unlimited.
        """
        data, error = self._request("PUT", f"/events/{event_id}", json_body=changes)
        if error:
            return None, error
        return data.get("event"), None

    def delete_event(self, event_id: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/events/{event_id}")
        if error:
            return False, error
        return True, None

    def register_for_event(self, event_id: str) -> Result:
        """Register the logged-in user for an event.

        On success returns the event summary (id, title, date, time).
        """
        data, error = self._request("POST", f"/events/{event_id}/register")
        if error:
            return None, error
        return data.get("event"), None
