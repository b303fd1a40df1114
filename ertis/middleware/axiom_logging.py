"""Axiom API 로깅 미들웨어 — 요청 수명주기 호출을 구조화 이벤트로 기록.

Axiom API logging middleware.
Sends one structured event per API call to Axiom. Calls that touch a
service request carry its id (``request_id``) and, for status changes, the
requested target (``target_status``), so a request's history can be
followed across the admin and app surfaces. Failed calls carry the error
kind (``forbidden``, ``conflict``...) and the detail message.
Sensitive fields (password, token, secret) are masked.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ertis.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 — Body/query keys whose values are never shipped
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

# /requests/{id}, /tasks/{id} 에서 요청 ID 추출
_REQUEST_ID_PATH = re.compile(r"/(?:requests|tasks)/([0-9a-fA-F-]{36})(?:/|$)")

# 상태 코드 → 오류 종류 — HTTP status to lifecycle error kind
_ERROR_KINDS: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "validation",
}


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹 — Recursively mask sensitive keys."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _surface(path: str) -> str:
    if path.startswith("/api/v1/admin"):
        return "admin"
    if path.startswith("/api/v1/app"):
        return "app"
    return "other"


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """API 호출을 Axiom에 기록하는 미들웨어.

    Logs every API call to Axiom. A pass-through when
    ``AXIOM_API_TOKEN`` / ``AXIOM_DATASET`` are not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = None
        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)
            logger.info("Axiom request logging enabled (dataset=%s)", self._dataset)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _mask(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def _capture_error(self, response: Response) -> tuple[Response, str]:
        """오류 응답 본문에서 detail 추출 후 응답을 다시 구성합니다.

        Drain the error response to read its ``detail`` and return a new
        response carrying the same bytes.
        """
        body = b""
        async for chunk in response.body_iterator:
            body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

        try:
            detail = json.loads(body).get("detail", "")
            if not isinstance(detail, str):
                detail = json.dumps(detail, ensure_ascii=False)
        except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
            detail = body.decode("utf-8", errors="replace")

        rebuilt = Response(
            content=body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
        return rebuilt, detail[:500]

    def _build_event(
        self,
        request: Request,
        body: Any,
        status_code: int,
        duration_ms: float,
        error: str | None,
    ) -> dict[str, Any]:
        path = request.url.path
        event: dict[str, Any] = {
            "method": request.method,
            "path": path,
            "surface": _surface(path),
            "status_code": status_code,
            "duration_ms": duration_ms,
        }
        match = _REQUEST_ID_PATH.search(path)
        if match:
            event["request_id"] = match.group(1)
        if isinstance(body, dict) and isinstance(body.get("status"), str):
            event["target_status"] = body["status"]
        if request.query_params:
            event["query_params"] = _mask(dict(request.query_params))
        if body is not None:
            event["request_body"] = body
        if status_code >= 400:
            event["error_kind"] = _ERROR_KINDS.get(status_code, "server_error")
        if error:
            event["error"] = error
        return event

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._client is None or request.url.path in _SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        body = await self._read_body(request)
        status_code = 500
        error: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            if status_code >= 400:
                response, error = await self._capture_error(response)
        except Exception as exc:
            error = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 2)
            event = self._build_event(request, body, status_code, duration_ms, error)
            try:
                self._client.ingest_events(self._dataset, [event])
            except Exception:
                logger.warning("Axiom ingest failed for %s %s", request.method, request.url.path, exc_info=True)

        return response
