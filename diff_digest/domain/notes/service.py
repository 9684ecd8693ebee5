import httpx

from diff_digest.core.context import set_generation_id
from diff_digest.core.exceptions import GenerationError, ValidationError
from diff_digest.core.logging import get_logger
from diff_digest.domain.notes.schemas import ReleaseNotes
from diff_digest.domain.notes.sections import NotesBuffer
from diff_digest.domain.notes.stream import FragmentSink, read_stream
from diff_digest.infra.llm.client import open_completion_stream

logger = get_logger(__name__)


async def generate_release_notes(
    diff: str,
    on_fragment: FragmentSink | None = None,
    client: httpx.AsyncClient | None = None,
) -> ReleaseNotes:
    """diff로 릴리즈 노트를 스트리밍 생성한 뒤 두 섹션으로 분리

    Args:
        diff: Git diff 텍스트
        on_fragment: content 조각마다 호출되는 콜백, 점진적 렌더링용
        client: 재사용할 httpx 클라이언트

    Returns:
        developer/marketing 섹션

    Raises:
        ValidationError: diff가 비어 있는 경우
        GenerationError: 스트림 요청 또는 수신 실패 (연결 종료 포함), 부분 결과는 반환하지 않음
    """
    if not diff or not diff.strip():
        raise ValidationError("diff가 비어 있습니다")

    generation_id = set_generation_id()
    buffer = NotesBuffer()

    def sink(fragment: str) -> None:
        buffer.append(fragment)
        if on_fragment is not None:
            on_fragment(fragment)

    logger.info("릴리즈 노트 생성 시작 generation_id=%s", generation_id)
    try:
        async with open_completion_stream(diff, client=client) as response:
            done = await read_stream(response.aiter_bytes(), sink)
    except (httpx.HTTPError, httpx.StreamError) as e:
        logger.error(
            "릴리즈 노트 생성 실패 error=%s received=%d",
            type(e).__name__,
            len(buffer.text),
        )
        raise GenerationError(f"{type(e).__name__}: {e}") from e

    notes = buffer.close()
    logger.info(
        "릴리즈 노트 생성 완료 sentinel=%s length=%d developer=%d marketing=%d",
        done,
        len(buffer.text),
        len(notes.developer_notes),
        len(notes.marketing_notes),
    )
    return notes
