"""테스트 공통 fixture"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from diff_digest.core.limiter import limiter
from diff_digest.domain.notes.schemas import DiffItem, DiffPage
from diff_digest.main import app
from helpers import DONE_LINE, sse_line


@pytest.fixture(autouse=True)
def disable_rate_limit():
    """테스트 간 요청 횟수 누적 방지"""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def async_client():
    """비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def sample_diff() -> str:
    """테스트용 diff"""
    return (
        "diff --git a/src/client.ts b/src/client.ts\n"
        "--- a/src/client.ts\n"
        "+++ b/src/client.ts\n"
        "@@ -1,3 +1,3 @@\n"
        "-const timeout = 1000;\n"
        "+const timeout = 5000;\n"
    )


@pytest.fixture
def sample_notes_chunks() -> list[bytes]:
    """두 섹션을 포함한 스트림 청크"""
    return [
        sse_line(role="assistant", content=""),
        sse_line("Developer Notes:\n"),
        sse_line("- Raised default timeout to 5s.\n"),
        sse_line("Marketing Notes:\n"),
        sse_line("- Fewer failed requests on slow networks.\n##"),
        sse_line(finish_reason="stop"),
        DONE_LINE,
    ]


@pytest.fixture
def sample_diff_page() -> DiffPage:
    """테스트용 merged PR 목록"""
    return DiffPage(
        diffs=[
            DiffItem(
                id="101",
                description="Raise default timeout",
                diff="diff --git a/x b/x\n",
                url="https://github.com/openai/openai-node/pull/101",
            )
        ],
        next_page=2,
        current_page=1,
        per_page=1,
    )


@pytest.fixture
def create_http_error():
    """HTTPStatusError 생성 helper"""

    def _create(status_code: int, message: str = "Error"):
        return httpx.HTTPStatusError(
            message,
            request=httpx.Request("POST", "https://test.com"),
            response=httpx.Response(status_code),
        )

    return _create
