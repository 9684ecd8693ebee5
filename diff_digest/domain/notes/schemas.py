from pydantic import BaseModel, ConfigDict, Field


class DiffItem(BaseModel):
    """merged PR 한 건과 그 diff"""

    id: str
    description: str
    diff: str
    url: str


class DiffPage(BaseModel):
    """merged PR 목록 한 페이지"""

    model_config = ConfigDict(populate_by_name=True)

    diffs: list[DiffItem]
    next_page: int | None = Field(default=None, alias="nextPage")
    current_page: int = Field(alias="currentPage")
    per_page: int = Field(alias="perPage")


class ReleaseNotes(BaseModel):
    """스트림 종료 후 추출된 두 섹션, 생성 이후 변경 불가"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    developer_notes: str = Field(default="", alias="developerNotes")
    marketing_notes: str = Field(default="", alias="marketingNotes")
