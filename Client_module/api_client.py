"""
HTTP client for the members REST API.

Every call is independent: failures surface immediately as ApiError carrying
the server-provided message (or a generic fallback) and nothing is retried.
"""
import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urljoin, urlsplit

import requests

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
NETWORK_ERROR_MESSAGE = "Could not reach the server. Check your connection and try again."

Attachment = Union[str, Path]


class ApiError(Exception):
    """A failed API call. status_code is None for network failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def _error_message(response: requests.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message.strip():
            return message
    return fallback


class AssemblyApiClient:
    """Thin wrapper around the REST endpoints; one method per endpoint."""

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout

    # Attachments ---------------------------------------------------------

    @property
    def origin(self) -> str:
        """Scheme and host of the API, e.g. "http://127.0.0.1:5000"."""
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"

    def resolve_media_url(self, path: Optional[str]) -> Optional[str]:
        """
        Resolve a stored attachment reference to a fetchable URL.
        Absolute URLs are returned unchanged; relative paths are joined to the API origin.
        """
        if not path:
            return None
        if urlsplit(path).scheme in ("http", "https"):
            return path
        return urljoin(self.origin + "/", path.lstrip("/"))

    # Transport -----------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, fallback: str = GENERIC_ERROR_MESSAGE, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, headers=self._headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiError(NETWORK_ERROR_MESSAGE) from e

        if not response.ok:
            message = _error_message(response, fallback)
            logger.warning(f"{method} {url} -> {response.status_code}: {message}")
            raise ApiError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(GENERIC_ERROR_MESSAGE, status_code=response.status_code) from e

    def _send_member(
        self,
        method: str,
        path: str,
        fields: Dict[str, Any],
        image: Optional[Attachment],
        party_logo: Optional[Attachment],
        fallback: str,
    ) -> Dict[str, Any]:
        """JSON when there are no attachments, multipart form data otherwise."""
        if image is None and party_logo is None:
            return self._request(method, path, fallback=fallback, json=fields)

        with ExitStack() as stack:
            files = {}
            for part_name, attachment in (("image", image), ("partyLogo", party_logo)):
                if attachment is not None:
                    attachment_path = Path(attachment)
                    try:
                        handle = stack.enter_context(attachment_path.open("rb"))
                    except OSError as e:
                        raise ApiError(f"Could not read {attachment_path.name}: {e.strerror}") from e
                    files[part_name] = (attachment_path.name, handle)
            data = {key: "" if value is None else str(value) for key, value in fields.items()}
            return self._request(method, path, fallback=fallback, data=data, files=files)

    # Endpoints -----------------------------------------------------------

    def list_members(
        self,
        session_name: Optional[str] = None,
        session_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {}
        if session_name:
            params["sessionName"] = session_name
        if session_date:
            params["sessionDate"] = session_date
        return self._request("GET", "/members", fallback="Failed to load members", params=params)

    def get_filter_options(self) -> Dict[str, List[str]]:
        return self._request("GET", "/members/filters", fallback="Failed to load filters")

    def get_member(self, member_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/members/{member_id}", fallback="Failed to load member")

    def create_member(
        self,
        fields: Dict[str, Any],
        image: Optional[Attachment] = None,
        party_logo: Optional[Attachment] = None,
    ) -> Dict[str, Any]:
        return self._send_member("POST", "/members", fields, image, party_logo, "Operation failed")

    def update_member(
        self,
        member_id: int,
        fields: Dict[str, Any],
        image: Optional[Attachment] = None,
        party_logo: Optional[Attachment] = None,
    ) -> Dict[str, Any]:
        return self._send_member(
            "PUT", f"/members/{member_id}", fields, image, party_logo, "Operation failed"
        )

    def delete_member(self, member_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/members/{member_id}", fallback="Failed to delete member")

    def login(self, email: str, password: str) -> str:
        body = self._request(
            "POST", "/admin/login", fallback="Login failed",
            json={"email": email, "password": password},
        )
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise ApiError("Login failed")
        return token

    def whoami(self) -> Dict[str, Any]:
        return self._request("GET", "/admin/me", fallback="Session check failed")
