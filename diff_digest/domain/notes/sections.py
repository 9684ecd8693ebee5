"""
생성된 메시지를 Developer Notes / Marketing Notes 섹션으로 분리

정규식 없이 첫 번째 마커 위치 검색과 슬라이싱만 사용
"""

from diff_digest.domain.notes.schemas import ReleaseNotes

DEVELOPER_MARKER = "Developer Notes:"
MARKETING_MARKER = "Marketing Notes:"

# 생성 모델이 가끔 끝에 붙이는 구분자 문자
HEADING_CHAR = "#"


def strip_heading_artifact(section: str) -> str:
    """끝에 붙은 '\\n' + '#' 반복 + 공백 꼬리를 제거하고 다시 trim"""
    stripped = section.rstrip()
    body = stripped.rstrip(HEADING_CHAR)
    if len(body) < len(stripped) and body.endswith("\n"):
        return body[:-1].strip()
    return stripped.strip()


def _capture(text: str, marker: str, stop_marker: str | None = None) -> str:
    start = text.find(marker)
    if start == -1:
        return ""
    start += len(marker)

    end = len(text)
    if stop_marker is not None:
        stop = text.find(stop_marker, start)
        if stop != -1:
            end = stop

    return strip_heading_artifact(text[start:end].strip())


def extract_sections(message: str) -> ReleaseNotes:
    """완료된 메시지에서 두 섹션 추출

    각 마커의 첫 번째 등장만 기준으로 삼으며, 마커가 없으면 해당 섹션은 빈 문자열
    """
    return ReleaseNotes(
        developer_notes=_capture(message, DEVELOPER_MARKER, MARKETING_MARKER),
        marketing_notes=_capture(message, MARKETING_MARKER),
    )


class NotesBuffer:
    """스트림 하나의 content 조각 누적 버퍼"""

    def __init__(self):
        self._parts: list[str] = []
        self._closed = False

    def append(self, fragment: str) -> None:
        if self._closed:
            raise RuntimeError("종료된 버퍼에는 조각을 추가할 수 없습니다")
        self._parts.append(fragment)

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def closed(self) -> bool:
        return self._closed

    def preview(self) -> ReleaseNotes:
        """스트리밍 도중 지금까지의 내용으로 섹션 미리보기"""
        return extract_sections(self.text)

    def close(self) -> ReleaseNotes:
        """버퍼를 확정하고 최종 섹션 반환"""
        self._closed = True
        return extract_sections(self.text)
