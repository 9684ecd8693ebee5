"""릴리즈 노트 API 스키마."""

from pydantic import BaseModel, ConfigDict, Field


class NotesRequest(BaseModel):
    """릴리즈 노트 생성 요청."""

    # 누락되면 빈 문자열, 라우트에서 400 처리
    diff: str = ""


class NotesResponse(BaseModel):
    """릴리즈 노트 생성 응답."""

    model_config = ConfigDict(populate_by_name=True)

    developer_notes: str = Field(alias="developerNotes")
    marketing_notes: str = Field(alias="marketingNotes")
