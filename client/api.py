"""
HTTP client for the DevConnector API.

`ConnectorClient` wraps an `httpx.AsyncClient`. Once a session token is set
with `set_auth_token`, it is sent as `x-auth-token` on every later request
until it is cleared. Any non-2xx response raises `ClientError`, which carries
the status code and the server's error messages. Transport failures (refused
connections, timeouts) raise `ClientError` with status code 0.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"


class ClientError(Exception):
    """Raised when the API answers with an error status or cannot be reached"""

    def __init__(self, status_code: int, messages: List[str], code: Optional[str] = None):
        self.status_code = status_code
        self.messages = messages or ["Request failed"]
        self.code = code
        super().__init__(f"{status_code}: {'; '.join(self.messages)}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ClientError":
        try:
            body = response.json()
        except ValueError:
            return cls(response.status_code, [response.text or response.reason_phrase])

        if not isinstance(body, dict):
            return cls(response.status_code, [str(body)])

        messages = [error.get("msg", "") for error in body.get("errors", []) if error.get("msg")]
        if not messages and body.get("message"):
            messages = [body["message"]]
        return cls(response.status_code, messages, body.get("code"))


class ConnectorClient:
    """Async client for the DevConnector REST API"""

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    @property
    def auth_token(self) -> Optional[str]:
        return self._http.headers.get(AUTH_HEADER)

    def set_auth_token(self, token: Optional[str]):
        """Attach (or with None, remove) the session token on all requests"""
        if token:
            self._http.headers[AUTH_HEADER] = token
        elif AUTH_HEADER in self._http.headers:
            del self._http.headers[AUTH_HEADER]

    async def close(self):
        await self._http.aclose()

    async def __aenter__(self) -> "ConnectorClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            raise ClientError(0, [str(e) or type(e).__name__]) from e

        if response.is_error:
            error = ClientError.from_response(response)
            logger.debug(f"{method} {path} failed: {error}")
            raise error
        return response.json()

    # Users & auth

    async def register(self, name: str, email: str, password: str) -> str:
        body = await self.request(
            "POST", "/api/users", {"name": name, "email": email, "password": password}
        )
        return body["token"]

    async def login(self, email: str, password: str) -> str:
        body = await self.request("POST", "/api/auth", {"email": email, "password": password})
        return body["token"]

    async def get_current_user(self) -> Dict[str, Any]:
        return await self.request("GET", "/api/auth")

    # Profiles

    async def get_my_profile(self) -> Dict[str, Any]:
        return await self.request("GET", "/api/profile/me")

    async def save_profile(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("PUT", "/api/profile", fields)

    async def delete_profile(self) -> Dict[str, Any]:
        return await self.request("DELETE", "/api/profile")

    async def get_profiles(self) -> List[Dict[str, Any]]:
        return await self.request("GET", "/api/profile")

    async def get_profile_by_user(self, user_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/api/profile/user/{user_id}")

    async def add_experience(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("PUT", "/api/profile/experience", entry)

    async def delete_experience(self, exp_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/api/profile/experience/{exp_id}")

    async def add_education(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("PUT", "/api/profile/education", entry)

    async def delete_education(self, edu_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/api/profile/education/{edu_id}")

    # Posts

    async def get_posts(self) -> List[Dict[str, Any]]:
        return await self.request("GET", "/api/posts")

    async def get_post(self, post_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/api/posts/{post_id}")

    async def add_post(self, text: str) -> Dict[str, Any]:
        return await self.request("POST", "/api/posts", {"text": text})

    async def delete_post(self, post_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/api/posts/{post_id}")

    async def like(self, post_id: str) -> List[Dict[str, Any]]:
        return await self.request("PUT", f"/api/posts/like/{post_id}")

    async def unlike(self, post_id: str) -> List[Dict[str, Any]]:
        return await self.request("PUT", f"/api/posts/unlike/{post_id}")

    async def add_comment(self, post_id: str, text: str) -> List[Dict[str, Any]]:
        return await self.request("POST", f"/api/posts/comment/{post_id}", {"text": text})

    async def delete_comment(self, post_id: str, comment_id: str) -> List[Dict[str, Any]]:
        return await self.request("DELETE", f"/api/posts/comment/{post_id}/{comment_id}")
