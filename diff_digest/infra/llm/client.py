from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from diff_digest.core.config import settings
from diff_digest.core.exceptions import LLMError
from diff_digest.core.logging import get_logger
from diff_digest.domain.notes.prompts import NOTES_GENERATOR_HUMAN, NOTES_GENERATOR_SYSTEM

logger = get_logger(__name__)


def _get_headers() -> dict[str, str]:
    """OpenAI API 요청 헤더 생성"""
    if not settings.openai_api_key:
        raise LLMError("OPENAI_API_KEY가 설정되지 않았습니다")

    return {
        "Content-Type": "application/json",
        "Accept": "text/event-stream",
        "Authorization": f"Bearer {settings.openai_api_key}",
    }


def build_messages(diff: str) -> list[dict[str, str]]:
    """시스템/사용자 프롬프트 쌍 생성"""
    return [
        {"role": "system", "content": NOTES_GENERATOR_SYSTEM},
        {"role": "user", "content": NOTES_GENERATOR_HUMAN.format(diff=diff)},
    ]


def build_completion_payload(diff: str, model: str | None = None) -> dict:
    """스트리밍 채팅 완성 요청 본문 생성"""
    return {
        "model": model or settings.openai_model,
        "stream": True,
        "messages": build_messages(diff),
    }


@asynccontextmanager
async def open_completion_stream(
    diff: str,
    client: httpx.AsyncClient | None = None,
) -> AsyncIterator[httpx.Response]:
    """diff에 대한 릴리즈 노트 생성 스트림 열기

    Args:
        diff: Git diff 텍스트
        client: 재사용할 httpx 클라이언트, 없으면 요청 단위로 생성

    Yields:
        본문을 아직 읽지 않은 스트리밍 응답

    Raises:
        LLMError: API 키가 설정되지 않은 경우
        httpx.HTTPStatusError: 2xx가 아닌 응답
        httpx.RequestError: 연결 실패
    """
    headers = _get_headers()
    payload = build_completion_payload(diff)

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.openai_timeout)

    logger.info("노트 생성 스트림 요청 model=%s diff_length=%d", payload["model"], len(diff))
    try:
        async with client.stream(
            "POST", settings.openai_api_url, headers=headers, json=payload
        ) as response:
            if response.is_error:
                await response.aread()
                logger.warning(
                    "노트 생성 스트림 응답 오류 status_code=%d", response.status_code
                )
            response.raise_for_status()
            yield response
    finally:
        if owns_client:
            await client.aclose()
