import asyncio
import re

import httpx

from diff_digest.core.config import settings
from diff_digest.core.logging import get_logger
from diff_digest.domain.notes.schemas import DiffItem, DiffPage

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"

GITHUB_URL_PATTERN = re.compile(r"github\.com/([a-zA-Z0-9_.-]+)/([a-zA-Z0-9_.-]+)")

JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"

MAX_PER_PAGE = 100

_client = httpx.AsyncClient(timeout=settings.github_timeout)
_request_semaphore = asyncio.Semaphore(settings.github_max_concurrent_requests)


def _get_headers(token: str | None = None, accept: str = JSON_MEDIA_TYPE) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub 토큰
        accept: 응답 미디어 타입

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {"Accept": accept}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


def parse_repo_url(repo_url: str) -> tuple[str, str]:
    """GitHub URL에서 owner와 repo 추출

    Args:
        repo_url: GitHub 레포지토리 URL

    Returns:
        owner, repo 튜플

    Raises:
        ValueError: 유효하지 않은 GitHub URL인 경우
    """
    match = GITHUB_URL_PATTERN.search(repo_url)
    if not match:
        raise ValueError(f"유효하지 않은 GitHub URL: {repo_url}")
    owner = match.group(1)
    repo = match.group(2).removesuffix(".git")
    return owner, repo


def clamp_per_page(per_page: int) -> int:
    return max(1, min(per_page, MAX_PER_PAGE))


async def get_closed_pulls(
    repo_url: str,
    page: int = 1,
    per_page: int = 10,
    token: str | None = None,
) -> list[dict]:
    """레포지토리의 closed PR 한 페이지 조회 (merge 여부 무관)"""
    owner, repo = parse_repo_url(repo_url)
    url = f"{GITHUB_API_BASE}/repos/{owner}/{repo}/pulls"

    params = {
        "state": "closed",
        "sort": "updated",
        "direction": "desc",
        "page": page,
        "per_page": clamp_per_page(per_page),
    }

    response = await _client.get(url, headers=_get_headers(token), params=params)
    response.raise_for_status()
    data = response.json()

    logger.info("closed PR 조회 완료 repo=%s/%s page=%d count=%d", owner, repo, page, len(data))
    return data


async def get_pull_diff(repo_url: str, pull_number: int, token: str | None = None) -> str:
    """PR의 unified diff 텍스트 조회

    Args:
        repo_url: GitHub 레포지토리 URL
        pull_number: PR 번호
        token: GitHub 토큰

    Returns:
        diff 텍스트
    """
    owner, repo = parse_repo_url(repo_url)
    url = f"{GITHUB_API_BASE}/repos/{owner}/{repo}/pulls/{pull_number}"

    response = await _client.get(url, headers=_get_headers(token, accept=DIFF_MEDIA_TYPE))
    response.raise_for_status()

    logger.debug("PR diff 조회 완료 repo=%s/%s pr=%d", owner, repo, pull_number)
    return response.text


async def get_merged_pull_diffs(
    repo_url: str,
    page: int = 1,
    per_page: int = 10,
    token: str | None = None,
) -> DiffPage:
    """merged PR과 diff 목록 한 페이지 조회

    Args:
        repo_url: GitHub 레포지토리 URL
        page: 1부터 시작하는 페이지 번호
        per_page: 페이지 크기, 1..100으로 보정
        token: GitHub 토큰

    Returns:
        merged PR diff 목록과 다음 페이지 번호, 마지막 페이지면 next_page=None

    Raises:
        httpx.HTTPError: GitHub API 호출 실패 시
    """
    per_page = clamp_per_page(per_page)
    pulls = await get_closed_pulls(repo_url, page=page, per_page=per_page, token=token)
    merged = [pr for pr in pulls if pr.get("merged_at")]

    async def fetch_with_limit(pr: dict) -> DiffItem:
        async with _request_semaphore:
            diff = await get_pull_diff(repo_url, pr["number"], token)
        return DiffItem(
            id=str(pr["number"]),
            description=pr.get("title") or "",
            diff=diff,
            url=pr["html_url"],
        )

    diffs = await asyncio.gather(*(fetch_with_limit(pr) for pr in merged))

    next_page = page + 1 if len(pulls) == per_page else None
    logger.info(
        "merged PR diff 조회 완료 page=%d merged=%d next_page=%s",
        page,
        len(diffs),
        next_page,
    )
    return DiffPage(
        diffs=list(diffs),
        next_page=next_page,
        current_page=page,
        per_page=per_page,
    )
