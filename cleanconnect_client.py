"""CleanConnect API client.

A thin wrapper around the CleanConnect REST API for scripts, seeding
tools and integration tests.  It mirrors the calls the mobile app makes:
authentication, the client address book, the provider workspace (profile,
availability, job inbox) and the public catalog.

Every public method returns a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is ``None`` (or an empty list
for listings) and ``error`` is a dictionary with ``status_code`` and
``message``.  The client never raises for HTTP or network errors.

After a successful registration or login the bearer token is kept on
the instance and sent with every following request::

    api = CleanConnectAPI(base_url="http://localhost:8000/api/v1")
    api.login("dana@example.com", "secret1")
    jobs, error = api.get_jobs()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class CleanConnectAPI:
    """Client for the CleanConnect API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL including the version prefix, e.g.
                ``http://localhost:8000/api/v1``.
            token: Optional bearer token from an earlier login.
            session: Optional requests session.  If not supplied a
                session is created automatically.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.role: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to :attr:`base_url` (e.g. ``/auth/me``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(body, error)`` where ``body`` is the parsed JSON
            envelope.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _data(self, method: str, path: str, **kwargs: Any) -> Result:
        """Like :meth:`_request` but return only the ``data`` member of the envelope."""
        body, error = self._request(method, path, **kwargs)
        if error:
            return None, error
        return (body or {}).get("data"), None

    def _listing(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._data("GET", path, params=params)
        if error:
            return [], error
        return data or [], None

    def _remember(self, body: Dict[str, Any], role: str, key: str) -> None:
        self.token = body.get("token")
        self.user = body.get(key)
        self.role = (self.user or {}).get("role", role)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def register_client(self, payload: Dict[str, Any]) -> Result:
        """Register a client and keep its token.

        Args:
            payload: ``firstName``, ``lastName``, ``email``, ``phone``,
                ``password`` and optionally ``addresses`` and ``language``.
        """
        body, error = self._request("POST", "/auth/register/client", json_body=payload)
        if error:
            return None, error
        self._remember(body, "client", "user")
        return body, None

    def register_provider(self, payload: Dict[str, Any]) -> Result:
        """Register a provider and keep its token."""
        body, error = self._request("POST", "/auth/register/provider", json_body=payload)
        if error:
            return None, error
        self._remember(body, "provider", "provider")
        return body, None

    def login(self, email: str, password: str, role: Optional[str] = None) -> Result:
        """Log in and keep the token.

        Args:
            email: Account e‑mail.
            password: Account password.
            role: ``"client"`` or ``"provider"`` to search a single store.
        """
        payload: Dict[str, Any] = {"email": email, "password": password}
        if role:
            payload["role"] = role
        body, error = self._request("POST", "/auth/login", json_body=payload)
        if error:
            return None, error
        self._remember(body, role or "", "user")
        return body, None

    def logout(self) -> None:
        """Forget the stored token.  Tokens are not revoked server side."""
        self.token = None
        self.role = None
        self.user = None

    def get_me(self) -> Result:
        return self._data("GET", "/auth/me")

    # ------------------------------------------------------------------
    # Client profile and addresses
    # ------------------------------------------------------------------
    def get_client_profile(self) -> Result:
        return self._data("GET", "/users/profile")

    def update_client_profile(self, payload: Dict[str, Any]) -> Result:
        return self._data("PUT", "/users/profile", json_body=payload)

    def add_address(self, payload: Dict[str, Any]) -> Result:
        """Add an address; returns the updated address list."""
        return self._data("POST", "/users/addresses", json_body=payload)

    def update_address(self, address_id: str, payload: Dict[str, Any]) -> Result:
        return self._data("PUT", f"/users/addresses/{address_id}", json_body=payload)

    def delete_address(self, address_id: str) -> Result:
        return self._data("DELETE", f"/users/addresses/{address_id}")

    # ------------------------------------------------------------------
    # Provider workspace
    # ------------------------------------------------------------------
    def list_providers(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._listing("/providers")

    def get_provider_profile(self) -> Result:
        return self._data("GET", "/providers/profile")

    def update_provider_profile(self, payload: Dict[str, Any]) -> Result:
        return self._data("PUT", "/providers/profile", json_body=payload)

    def update_availability(self, slots: List[Dict[str, Any]]) -> Result:
        """Replace the weekly availability.

        Args:
            slots: Items of the form ``{"day": 1, "startTime": "08:00",
                "endTime": "12:00"}``.
        """
        return self._data("PUT", "/providers/availability", json_body={"availability": slots})

    def get_jobs(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._listing("/providers/jobs")

    def get_job(self, job_id: Any) -> Result:
        return self._data("GET", f"/providers/jobs/{job_id}")

    def accept_job(self, job_id: Any) -> Result:
        return self._data("PUT", f"/providers/jobs/{job_id}/accept")

    def decline_job(self, job_id: Any, reason: Optional[str] = None) -> Result:
        return self._data("PUT", f"/providers/jobs/{job_id}/decline", json_body={"reason": reason})

    def complete_job(self, job_id: Any, notes: Optional[str] = None) -> Result:
        return self._data("PUT", f"/providers/jobs/{job_id}/complete", json_body={"notes": notes})

    # ------------------------------------------------------------------
    # Public catalog
    # ------------------------------------------------------------------
    def search_providers(
        self,
        service_type: Optional[str] = None,
        service_area: Optional[str] = None,
        min_rating: Optional[float] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Search the public catalog; filters left as ``None`` are not sent."""
        params = {"serviceType": service_type, "serviceArea": service_area, "minRating": min_rating}
        return self._listing("/public/providers", params=params)

    def get_provider_details(self, provider_id: Any) -> Result:
        return self._data("GET", f"/public/providers/{provider_id}")

    def submit_review(self, provider_id: Any, rating: int, comment: Optional[str] = None) -> Result:
        """Create or update the logged in client's review of a provider."""
        payload: Dict[str, Any] = {"rating": rating}
        if comment is not None:
            payload["comment"] = comment
        return self._data("POST", f"/public/providers/{provider_id}/reviews", json_body=payload)

    # ------------------------------------------------------------------
    # Bookings (placeholder routes)
    # ------------------------------------------------------------------
    def create_booking(self, payload: Dict[str, Any] | None = None) -> Result:
        return self._data("POST", "/bookings", json_body=payload or {})

    def get_booking(self, booking_id: Any) -> Result:
        return self._data("GET", f"/bookings/{booking_id}")

    def get_client_bookings(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        return self._listing("/bookings/client")

    def cancel_booking(self, booking_id: Any) -> Result:
        return self._request("PUT", f"/bookings/{booking_id}/cancel")
