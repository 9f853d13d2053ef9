import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .observability import log_event

DEFAULT_BASE_URL = "https://app.asana.com/api/1.0"


class AsanaClientError(Exception):
    """Base error for client failures."""


class AsanaValidationError(AsanaClientError, ValueError):
    """Input rejected before any request was issued."""


class AsanaParseError(AsanaValidationError):
    """A JSON-encoded parameter could not be decoded."""

    def __init__(self, message: str, *, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter


class AsanaResponseParseError(AsanaClientError):
    """The backend answered with something that is not a JSON object."""


class AsanaHTTPError(AsanaClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
    ):
        super().__init__(f"{status_code} {method} {url}: {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.message = message
        self.response_json = response_json
        self.response_text = response_text


class AsanaNotFoundError(AsanaHTTPError):
    pass


class PartialAssemblyWarning(UserWarning):
    """A secondary fetch failed and was replaced by a default value."""


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 2  # total extra attempts
    backoff_base_seconds: float = 0.3  # 0.3, 0.6, 1.2...
    retry_statuses: frozenset[int] = frozenset({502, 503, 504})
    retry_on_429: bool = False
    # POST is excluded: creates and relationship adds are single-shot.
    retry_methods: frozenset[str] = frozenset({"GET", "PUT", "DELETE"})


class AsanaClient:
    """
    Shared HTTP client for the Asana REST API.
    - Handles bearer auth, base URL, timeouts, retries
    - Returns raw dict payloads (the {"data": ...} envelope is left intact)
    - No business logic; tools own domain decisions
    """

    def __init__(
        self,
        *,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        retry: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        access_token = access_token or ""

        if not access_token:
            raise ValueError("access_token must be provided.")

        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.retry = retry if retry is not None else RetryConfig()
        self.log = logger or logging.getLogger("asana_mcp.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "AsanaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _can_retry(self, method: str, attempt: int) -> bool:
        return method in self.retry.retry_methods and attempt < self.retry.max_retries

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Core request method.
        - Retries idempotent methods on transient failures
          (network/timeouts + 502/503/504; optionally 429)
        - Raises AsanaNotFoundError on 404, AsanaHTTPError on other non-2xx
        - Raises AsanaClientError on network/timeout errors after retries
        - Raises AsanaResponseParseError if response isn't a JSON object
        - Returns parsed JSON dict on success
        """
        method = method.upper()
        start = time.perf_counter()
        attempt = 0

        while True:
            try:
                resp = await self.http.request(method, url, params=params, json=json)
                duration_ms = int((time.perf_counter() - start) * 1000)

                self.log.debug(
                    "asana.request",
                    extra={
                        "tool": tool,
                        "method": method,
                        "url": str(resp.request.url),
                        "status": resp.status_code,
                        "duration_ms": duration_ms,
                        "attempt": attempt,
                    },
                )

                if resp.status_code in self.retry.retry_statuses or (
                    self.retry.retry_on_429 and resp.status_code == 429
                ):
                    if self._can_retry(method, attempt):
                        await asyncio.sleep(
                            self.retry.backoff_base_seconds * (2**attempt)
                        )
                        attempt += 1
                        continue

                log_event(
                    "op_call",
                    tool=tool,
                    method=method,
                    endpoint=url,
                    status=resp.status_code,
                    duration_ms=duration_ms,
                    attempt=attempt,
                )

                if resp.status_code < 200 or resp.status_code >= 300:
                    raise self._to_http_error(resp, method=method)

                return self._safe_json(resp)

            except (httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout) as exc:
                if self._can_retry(method, attempt):
                    await asyncio.sleep(self.retry.backoff_base_seconds * (2**attempt))
                    attempt += 1
                    continue
                log_event(
                    "op_call",
                    tool=tool,
                    method=method,
                    endpoint=url,
                    status="exception",
                    duration_ms=int((time.perf_counter() - start) * 1000),
                    attempt=attempt,
                    error_type=type(exc).__name__,
                )
                raise AsanaClientError(
                    f"Network/timeout error calling {method} {url}: {exc}"
                ) from exc

            except httpx.HTTPError as exc:
                # Other httpx exceptions (rare) - do not blindly retry
                raise AsanaClientError(
                    f"HTTPX error calling {method} {url}: {exc}"
                ) from exc

    def _safe_json(self, resp: httpx.Response) -> Dict[str, Any]:
        if not resp.content:
            return {}

        try:
            data = resp.json()
        except Exception as exc:
            snippet = (resp.text or "")[:500]
            raise AsanaResponseParseError(
                f"Expected JSON from {resp.request.method} "
                f"{resp.request.url}, got non-JSON body snippet: "
                f"{snippet!r}"
            ) from exc

        if not isinstance(data, dict):
            raise AsanaResponseParseError(
                f"Expected top-level JSON object from "
                f"{resp.request.method} {resp.request.url}, "
                f"got {type(data).__name__}"
            )
        return data

    def _to_http_error(self, resp: httpx.Response, *, method: str) -> AsanaHTTPError:
        url = str(resp.request.url)
        response_json: Optional[Dict[str, Any]] = None
        response_text: Optional[str] = None
        message = "request failed"

        try:
            parsed = resp.json()
            if isinstance(parsed, dict):
                response_json = parsed
                # Asana errors: {"errors": [{"message": "...", "help": "..."}]}
                errors = parsed.get("errors")
                if isinstance(errors, list):
                    messages = [
                        e.get("message")
                        for e in errors
                        if isinstance(e, dict) and e.get("message")
                    ]
                    if messages:
                        message = "; ".join(messages)
                elif parsed.get("message"):
                    message = parsed["message"]
        except Exception:
            response_text = (resp.text or "")[:500]

        error_cls = AsanaNotFoundError if resp.status_code == 404 else AsanaHTTPError
        return error_cls(
            status_code=resp.status_code,
            method=method,
            url=url,
            message=message,
            response_json=response_json,
            response_text=response_text,
        )

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request("GET", url, params=params, tool=tool)

    async def post(
        self,
        url: str,
        *,
        json: Dict[str, Any],
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request("POST", url, params=params, json=json, tool=tool)

    async def put(
        self,
        url: str,
        *,
        json: Dict[str, Any],
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request("PUT", url, params=params, json=json, tool=tool)

    async def delete(self, url: str, *, tool: Optional[str] = None) -> Dict[str, Any]:
        return await self.request("DELETE", url, tool=tool)

