"""
채팅 완성 SSE 스트림 디코더

청크 단위로 들어오는 바이트를 줄 단위 이벤트로 복원하고,
각 이벤트의 choices[0].delta.content 조각을 도착 순서대로 sink에 전달
"""

import codecs
import json
from collections.abc import AsyncIterable, Callable

from diff_digest.core.logging import get_logger

logger = get_logger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"
LINE_TERMINATOR = "\n"

PAYLOAD_PREVIEW_LENGTH = 80

FragmentSink = Callable[[str], None]


def extract_content(envelope: object) -> str | None:
    """envelope에서 choices[0].delta.content 추출, 경로가 없으면 None

    role만 있거나 finish_reason만 있는 envelope는 content가 없다
    """
    if not isinstance(envelope, dict):
        return None

    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    choice = choices[0]
    if not isinstance(choice, dict):
        return None

    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None

    content = delta.get("content")
    if not isinstance(content, str):
        return None
    return content


class StreamReader:
    """SSE 바이트 스트림을 content 조각으로 변환

    인스턴스 하나가 스트림 하나를 담당하며, 디코딩 버퍼는 read() 호출마다 초기화된다.
    """

    def __init__(self, on_fragment: FragmentSink):
        self._on_fragment = on_fragment
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.records = 0
        self.fragments = 0
        self.skipped = 0

    def _reset(self) -> None:
        self._decoder.reset()
        self._buffer = ""
        self.records = 0
        self.fragments = 0
        self.skipped = 0

    def feed(self, chunk: bytes) -> bool:
        """청크 하나를 처리하고 종료 sentinel을 만났으면 True 반환

        마지막 줄바꿈 이후의 나머지는 다음 청크까지 버퍼에 남긴다.
        """
        self._buffer += self._decoder.decode(chunk)

        *lines, self._buffer = self._buffer.split(LINE_TERMINATOR)
        for line in lines:
            if self._handle_line(line):
                self._buffer = ""
                return True
        return False

    def _handle_line(self, line: str) -> bool:
        if not line.startswith(DATA_PREFIX):
            return False

        payload = line[len(DATA_PREFIX) :].strip()
        if payload == DONE_SENTINEL:
            return True

        self.records += 1
        try:
            envelope = json.loads(payload)
        except (json.JSONDecodeError, RecursionError) as e:
            self.skipped += 1
            logger.warning(
                "스트림 레코드 파싱 실패 error=%s payload=%s",
                type(e).__name__,
                payload[:PAYLOAD_PREVIEW_LENGTH],
            )
            return False

        content = extract_content(envelope)
        if content:
            self.fragments += 1
            self._on_fragment(content)
        return False

    async def read(self, chunks: AsyncIterable[bytes]) -> bool:
        """청크가 소진되거나 sentinel을 만날 때까지 읽기

        Returns:
            sentinel로 종료되었으면 True, 전송 종료로 끝났으면 False

        Raises:
            청크 수신 중 발생한 전송 예외는 그대로 전파
        """
        self._reset()
        done = False

        async for chunk in chunks:
            if chunk and self.feed(chunk):
                done = True
                break

        if not done and self._buffer:
            logger.debug("미완성 줄 폐기 length=%d", len(self._buffer))
        self._buffer = ""

        logger.debug(
            "스트림 읽기 완료 sentinel=%s records=%d fragments=%d skipped=%d",
            done,
            self.records,
            self.fragments,
            self.skipped,
        )
        return done


async def read_stream(chunks: AsyncIterable[bytes], on_fragment: FragmentSink) -> bool:
    """chunks를 끝까지 읽으며 content 조각마다 on_fragment 호출"""
    return await StreamReader(on_fragment).read(chunks)
