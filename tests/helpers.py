"""스트림 테스트용 helper"""

import json
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

DONE_LINE = b"data: [DONE]\n\n"


def sse_line(content: str | None = None, role: str | None = None, finish_reason=None) -> bytes:
    """OpenAI 스트리밍 envelope 한 줄 생성"""
    delta = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    envelope = {
        "id": "chatcmpl-test",
        "object": "chat.completion.chunk",
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
    return f"data: {json.dumps(envelope, ensure_ascii=False)}\n\n".encode()


async def iter_chunks(chunks: list[bytes], error: Exception | None = None):
    """청크 목록을 순서대로 내보내고, error가 있으면 마지막에 발생"""
    for chunk in chunks:
        yield chunk
    if error is not None:
        raise error


def make_stream_opener(chunks: list[bytes], error: Exception | None = None):
    """open_completion_stream 대체용 컨텍스트 매니저 팩토리"""
    calls = []

    @asynccontextmanager
    async def _open(diff: str, client=None):
        calls.append(diff)
        response = MagicMock()
        response.aiter_bytes = lambda: iter_chunks(chunks, error)
        yield response

    _open.calls = calls
    return _open
