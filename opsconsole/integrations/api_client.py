"""
LOGISTICS API CLIENT

Purpose:
- Thin wrapper over the remote REST service
- Attach the bearer credential to every call except login
- Normalize transport / HTTP failures into one error hierarchy
- Force a global logout on any 401 (single middleware, not per call site)

Requirements:
• Token is read from the session store on EVERY request
• Timeout protection on every call
• Server-provided messages are surfaced verbatim
"""

import functools
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


# ==================================================
# ERROR TAXONOMY
# ==================================================

class ApiError(Exception):
    """Base class for every failure coming out of the API boundary."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 server_message: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class TransportError(ApiError):
    """Network unreachable, timeout, or server-side 5xx."""
    pass


class UnauthorizedError(ApiError):
    """HTTP 401. Handled globally by forced logout."""
    pass


class NotFoundError(ApiError):
    """HTTP 404. Callers treat it as absent data, not as an error banner."""
    pass


class ApiRequestError(ApiError):
    """Other 4xx responses, usually validation failures."""
    pass


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


def _raise_for_response(response: requests.Response) -> None:
    status = response.status_code
    if status < 400:
        return

    message = _server_message(response)
    text = message or f"HTTP {status}"

    if status == 401:
        raise UnauthorizedError(text, status, message)
    if status == 404:
        raise NotFoundError(text, status, message)
    if status >= 500:
        raise TransportError(text, status, message)
    raise ApiRequestError(text, status, message)


def _expect_object(data: Any, method: str, path: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        logger.error(f"Expected an object from {method} {path}, got {type(data).__name__}")
        raise TransportError("Malformed response from server")
    return data


def _expect_list(data: Any, method: str, path: str) -> List[Dict[str, Any]]:
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
        logger.error(f"Expected a list of objects from {method} {path}")
        raise TransportError("Malformed response from server")
    return data


# ==================================================
# UNAUTHORIZED MIDDLEWARE
# ==================================================

def logout_on_unauthorized(func):
    """
    Decorator around the single request path of ApiClient.

    Any 401 on a call that carried the credential invokes the client's
    unauthorized handler (session logout + redirect) before the error
    propagates to the caller.
    """
    @functools.wraps(func)
    def wrapper(self, method, path, *, auth=True, **kwargs):
        try:
            return func(self, method, path, auth=auth, **kwargs)
        except UnauthorizedError:
            if auth and self.unauthorized_handler is not None:
                logger.warning(f"Unauthorized response for {method} {path}, forcing logout")
                self.unauthorized_handler()
            raise
    return wrapper


# ==================================================
# CLIENT
# ==================================================

class ApiClient:
    """
    Typed access to the logistics API.

    Args:
        base_url: API root, e.g. http://localhost:5001/api
        token_provider: returns the current bearer token or None
        timeout: per-request timeout in seconds
        http: requests.Session to issue calls with
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], Optional[str]],
        timeout: float = 10,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self.http = http or requests.Session()
        self.unauthorized_handler: Optional[Callable[[], None]] = None

    def set_unauthorized_handler(self, handler: Optional[Callable[[], None]]) -> None:
        self.unauthorized_handler = handler

    @logout_on_unauthorized
    def request(self, method: str, path: str, *, auth: bool = True,
                json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}

        if auth:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        logger.info(f"{method} {path}")

        try:
            response = self.http.request(
                method, url, json=json, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"API timeout for {method} {path}")
            raise TransportError("Request timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"API error for {method} {path}: {str(e)}")
            raise TransportError("Network error") from e

        _raise_for_response(response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Malformed response from server", response.status_code) from e

    # ------------------------------
    # AUTH
    # ------------------------------

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self.request("POST", "/auth/login", auth=False,
                            json={"email": email, "password": password})
        return _expect_object(data, "POST", "/auth/login")

    def get_current_user(self) -> Dict[str, Any]:
        return _expect_object(self.request("GET", "/auth/me"), "GET", "/auth/me")

    # ------------------------------
    # GENERIC RESOURCE CRUD
    # ------------------------------

    def list_resources(self, endpoint: str) -> List[Dict[str, Any]]:
        path = f"/{endpoint}"
        return _expect_list(self.request("GET", path), "GET", path)

    def get_resource(self, endpoint: str, resource_id: str) -> Dict[str, Any]:
        path = f"/{endpoint}/{resource_id}"
        return _expect_object(self.request("GET", path), "GET", path)

    def create_resource(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        path = f"/{endpoint}"
        return _expect_object(self.request("POST", path, json=payload), "POST", path)

    def update_resource(self, endpoint: str, resource_id: str,
                        payload: Dict[str, Any]) -> Any:
        return self.request("PUT", f"/{endpoint}/{resource_id}", json=payload)

    def delete_resource(self, endpoint: str, resource_id: str) -> None:
        self.request("DELETE", f"/{endpoint}/{resource_id}")

    # ------------------------------
    # SIMULATION
    # ------------------------------

    def run_simulation(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return _expect_object(self.request("POST", "/simulate", json=params), "POST", "/simulate")

    def get_simulations(self) -> List[Dict[str, Any]]:
        return _expect_list(self.request("GET", "/simulate"), "GET", "/simulate")

    def get_latest_simulation(self) -> Dict[str, Any]:
        path = "/simulate/latest"
        return _expect_object(self.request("GET", path), "GET", path)

    def get_simulation(self, simulation_id: str) -> Dict[str, Any]:
        path = f"/simulate/{simulation_id}"
        return _expect_object(self.request("GET", path), "GET", path)
