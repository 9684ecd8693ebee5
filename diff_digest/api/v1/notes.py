from contextlib import AsyncExitStack

import httpx
from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from diff_digest.api.v1.schemas import NotesRequest, NotesResponse
from diff_digest.core.config import settings
from diff_digest.core.exceptions import GitHubAPIError, LLMError, ValidationError
from diff_digest.core.logging import get_logger
from diff_digest.domain.notes.schemas import DiffPage
from diff_digest.domain.notes.service import generate_release_notes
from diff_digest.infra.github.client import get_merged_pull_diffs
from diff_digest.infra.llm.client import open_completion_stream

router = APIRouter(prefix="/sample-diffs", tags=["sample-diffs"])
logger = get_logger(__name__)

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


@router.get("", response_model=DiffPage, response_model_by_alias=True)
async def list_sample_diffs(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=settings.sample_diffs_per_page, ge=1, le=100),
) -> DiffPage:
    try:
        return await get_merged_pull_diffs(
            settings.github_repo_url,
            page=page,
            per_page=per_page,
            token=settings.github_token or None,
        )
    except (httpx.HTTPError, ValueError) as e:
        logger.error("merged PR 목록 조회 실패 page=%d error=%s", page, type(e).__name__)
        raise GitHubAPIError(str(e)) from e


@router.post("/notes-generator")
async def notes_generator(request: NotesRequest) -> StreamingResponse:
    """업스트림 SSE 본문을 그대로 전달, 클라이언트가 직접 디코딩"""
    if not request.diff:
        raise ValidationError("Missing diff")

    stack = AsyncExitStack()
    try:
        upstream = await stack.enter_async_context(open_completion_stream(request.diff))
    except httpx.HTTPError as e:
        await stack.aclose()
        raise LLMError(f"{type(e).__name__}: {e}") from e
    except Exception:
        await stack.aclose()
        raise

    async def relay():
        try:
            async for chunk in upstream.aiter_bytes():
                yield chunk
        finally:
            await stack.aclose()

    return StreamingResponse(relay(), media_type=EVENT_STREAM_MEDIA_TYPE)


@router.post("/release-notes", response_model=NotesResponse, response_model_by_alias=True)
async def release_notes(request: NotesRequest) -> NotesResponse:
    """서버에서 스트림을 끝까지 읽고 두 섹션으로 분리해 반환"""
    if not request.diff:
        raise ValidationError("Missing diff")

    notes = await generate_release_notes(request.diff)
    return NotesResponse(
        developer_notes=notes.developer_notes,
        marketing_notes=notes.marketing_notes,
    )
