"""GitHub 클라이언트 테스트"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from diff_digest.infra.github.client import (
    DIFF_MEDIA_TYPE,
    _get_headers,
    clamp_per_page,
    get_merged_pull_diffs,
    get_pull_diff,
    parse_repo_url,
)

REPO_URL = "https://github.com/openai/openai-node"


def make_pull(number: int, merged: bool = True) -> dict:
    return {
        "number": number,
        "title": f"PR {number}",
        "html_url": f"{REPO_URL}/pull/{number}",
        "merged_at": "2024-01-01T00:00:00Z" if merged else None,
    }


def fake_github(pulls: list[dict]):
    """목록/ diff 요청에 응답하는 _client.get 대체"""

    def _get(url, headers=None, params=None):
        response = MagicMock()
        response.raise_for_status = MagicMock()
        if url.endswith("/pulls"):
            response.json.return_value = pulls
        else:
            response.text = f"diff of {url.rsplit('/', 1)[1]}"
        return response

    return AsyncMock(side_effect=_get)


class TestParseRepoUrl:
    """parse_repo_url 함수 테스트"""

    @pytest.mark.parametrize(
        "url,expected_owner,expected_repo",
        [
            ("https://github.com/openai/openai-node", "openai", "openai-node"),
            ("https://github.com/user/my-repo.git", "user", "my-repo"),
            ("https://github.com/user/my-repo/", "user", "my-repo"),
            ("https://github.com/User123/Repo.Name", "User123", "Repo.Name"),
        ],
    )
    def test_valid_urls(self, url, expected_owner, expected_repo):
        """유효한 GitHub URL 파싱"""
        assert parse_repo_url(url) == (expected_owner, expected_repo)

    @pytest.mark.parametrize(
        "invalid_url",
        ["invalid-url", "https://gitlab.com/user/repo", "https://github.com/user", ""],
    )
    def test_invalid_urls(self, invalid_url):
        """유효하지 않은 URL은 ValueError 발생"""
        with pytest.raises(ValueError, match="유효하지 않은 GitHub URL"):
            parse_repo_url(invalid_url)


class TestGetHeaders:
    """_get_headers 함수 테스트"""

    def test_without_token(self):
        """토큰 없이 헤더 생성"""
        headers = _get_headers()
        assert headers["Accept"] == "application/vnd.github.v3+json"
        assert "Authorization" not in headers

    def test_with_token_and_diff_media_type(self):
        """토큰과 diff 미디어 타입"""
        headers = _get_headers("test-token", accept=DIFF_MEDIA_TYPE)
        assert headers["Accept"] == DIFF_MEDIA_TYPE
        assert headers["Authorization"] == "Bearer test-token"


class TestClampPerPage:
    """clamp_per_page 함수 테스트"""

    @pytest.mark.parametrize("value,expected", [(0, 1), (-5, 1), (10, 10), (100, 100), (500, 100)])
    def test_clamp(self, value, expected):
        """1..100 범위로 보정"""
        assert clamp_per_page(value) == expected


class TestGetPullDiff:
    """get_pull_diff 함수 테스트"""

    @pytest.mark.asyncio
    async def test_requests_diff_media_type(self):
        """diff 미디어 타입으로 요청"""
        mock_get = fake_github([])

        with patch("diff_digest.infra.github.client._client") as mock_client:
            mock_client.get = mock_get
            result = await get_pull_diff(REPO_URL, 42, "token")

        assert result == "diff of 42"
        _, kwargs = mock_get.call_args
        assert kwargs["headers"]["Accept"] == DIFF_MEDIA_TYPE


class TestGetMergedPullDiffs:
    """get_merged_pull_diffs 함수 테스트"""

    @pytest.mark.asyncio
    async def test_skips_unmerged_and_keeps_order(self):
        """merge되지 않은 PR 제외, 순서 유지"""
        pulls = [make_pull(3), make_pull(2, merged=False), make_pull(1)]

        with patch("diff_digest.infra.github.client._client") as mock_client:
            mock_client.get = fake_github(pulls)
            page = await get_merged_pull_diffs(REPO_URL, page=1, per_page=10)

        assert [item.id for item in page.diffs] == ["3", "1"]
        assert page.diffs[0].diff == "diff of 3"
        assert page.diffs[0].description == "PR 3"
        assert page.diffs[0].url == f"{REPO_URL}/pull/3"

    @pytest.mark.asyncio
    async def test_full_page_has_next_page(self):
        """꽉 찬 페이지면 다음 페이지 존재"""
        pulls = [make_pull(2), make_pull(1, merged=False)]

        with patch("diff_digest.infra.github.client._client") as mock_client:
            mock_client.get = fake_github(pulls)
            page = await get_merged_pull_diffs(REPO_URL, page=3, per_page=2)

        assert page.next_page == 4
        assert page.current_page == 3
        assert page.per_page == 2

    @pytest.mark.asyncio
    async def test_last_page(self):
        """덜 찬 페이지면 next_page 없음"""
        with patch("diff_digest.infra.github.client._client") as mock_client:
            mock_client.get = fake_github([make_pull(1)])
            page = await get_merged_pull_diffs(REPO_URL, page=1, per_page=10)

        assert page.next_page is None

    @pytest.mark.asyncio
    async def test_pagination_params(self):
        """closed PR을 페이지 단위로 요청"""
        mock_get = fake_github([])

        with patch("diff_digest.infra.github.client._client") as mock_client:
            mock_client.get = mock_get
            await get_merged_pull_diffs(REPO_URL, page=2, per_page=500)

        _, kwargs = mock_get.call_args
        assert kwargs["params"]["state"] == "closed"
        assert kwargs["params"]["page"] == 2
        assert kwargs["params"]["per_page"] == 100

    @pytest.mark.asyncio
    async def test_http_error_propagates(self, create_http_error):
        """GitHub API 오류는 그대로 전파"""
        mock_response = MagicMock()
        mock_response.raise_for_status = MagicMock(side_effect=create_http_error(403))

        with patch("diff_digest.infra.github.client._client") as mock_client:
            mock_client.get = AsyncMock(return_value=mock_response)
            with pytest.raises(httpx.HTTPStatusError):
                await get_merged_pull_diffs(REPO_URL)
