"""
HTTP 요청 로깅 미들웨어

- 요청마다 request_id 부여 (X-Request-ID 헤더가 있으면 재사용)
- 요청 완료/실패 로깅
- 스트리밍 응답은 헤더 전송 시점까지만 측정
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from diff_digest.core.context import clear_context, set_request_id
from diff_digest.core.logging import get_logger

logger = get_logger(__name__)

SKIP_PATHS = {"/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"}
REQUEST_ID_HEADER = "X-Request-ID"


def get_client_ip(request: Request) -> str:
    """클라이언트 IP 추출, 프록시 헤더 우선"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """HTTP 요청 로깅 및 request_id 관리 미들웨어"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "요청 완료 method=%s path=%s status_code=%d client_ip=%s duration_ms=%.2f",
                request.method,
                request.url.path,
                response.status_code,
                get_client_ip(request),
                (time.perf_counter() - start_time) * 1000,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        except Exception as e:
            logger.error(
                "요청 실패 method=%s path=%s error=%s duration_ms=%.2f",
                request.method,
                request.url.path,
                type(e).__name__,
                (time.perf_counter() - start_time) * 1000,
            )
            raise

        finally:
            clear_context()
