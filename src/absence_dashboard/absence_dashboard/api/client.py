from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS
from ..core.exceptions import ApiError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout: float = DEFAULT_API_TIMEOUT_SECONDS


class ApiClient:
    """JSON client for the remote absence API.

    One `requests.Session` is shared by the app; `with_token` returns a client
    bound to the caller's bearer token that reuses the same session.
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        session: Optional[requests.Session] = None,
        access_token: Optional[str] = None,
    ):
        self._config = config
        self._session = session or requests.Session()
        self._access_token = access_token

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    def with_token(self, access_token: Optional[str]) -> "ApiClient":
        return ApiClient(self._config, session=self._session, access_token=access_token)

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = self._url(path)
        headers = {"Content-Type": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"

        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("%s %s params=%s", method, url, clean_params)
        try:
            resp = self._session.request(
                method,
                url,
                params=clean_params or None,
                json=json,
                headers=headers,
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"Could not reach the absence API: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.ok:
            message = "Request failed"
            if isinstance(data, dict):
                message = data.get("erro") or data.get("message") or message
            logger.warning("%s %s -> %s: %s", method, url, resp.status_code, message)
            raise ApiError(message, status_code=resp.status_code)
        return data

    def get(self, path: str, *, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, payload: Any = None) -> Any:
        return self.request("POST", path, json=payload)

    def put(self, path: str, payload: Any = None) -> Any:
        return self.request("PUT", path, json=payload)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
