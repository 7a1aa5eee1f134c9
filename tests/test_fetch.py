"""Tests for pagination and the fetch operations."""

import httpx
import pytest
from conftest import FakeGitHub, json_response, make_items

from extractum.exceptions import GitHubAPIError
from extractum.models import Issue, IssueDetails, PullRequest, Repository


def pages_of(*sizes: int) -> list[httpx.Response]:
    """Build consecutive pages with the given item counts."""
    responses = []
    start = 1
    for size in sizes:
        responses.append(json_response(make_items(size, start=start)))
        start += size
    return responses


class TestPagination:
    """Tests for the pagination driver."""

    @pytest.mark.asyncio
    async def test_short_last_page(self, make_client):
        server = FakeGitHub(pages_of(100, 100, 37))
        async with make_client(server) as client:
            items = await client.get_paginated("/repos/o/r/issues")

        assert len(items) == 237
        assert server.pages == ["1", "2", "3"]
        assert all(r.url.params["per_page"] == "100" for r in server.requests)

    @pytest.mark.asyncio
    async def test_empty_first_page(self, make_client):
        server = FakeGitHub(pages_of(0))
        async with make_client(server) as client:
            items = await client.get_paginated("/repos/o/r/issues")

        assert items == []
        assert len(server.requests) == 1

    @pytest.mark.asyncio
    async def test_full_pages_then_empty(self, make_client):
        server = FakeGitHub(pages_of(100, 100, 100, 0))
        async with make_client(server) as client:
            items = await client.get_paginated("/repos/o/r/issues")

        assert len(items) == 300
        assert server.pages == ["1", "2", "3", "4"]

    @pytest.mark.asyncio
    async def test_exactly_full_last_page_needs_one_more_request(self, make_client):
        # A full page cannot be told apart from "more pages exist"
        server = FakeGitHub(pages_of(100, 0))
        async with make_client(server) as client:
            items = await client.get_paginated("/repos/o/r/issues")

        assert len(items) == 100
        assert len(server.requests) == 2

    @pytest.mark.asyncio
    async def test_order_preserved(self, make_client):
        server = FakeGitHub(pages_of(100, 5))
        async with make_client(server) as client:
            items = await client.get_paginated("/repos/o/r/issues", item_model=Issue)

        assert [i.number for i in items] == list(range(1, 106))

    @pytest.mark.asyncio
    async def test_keep_predicate_filters_but_not_termination(self, make_client):
        server = FakeGitHub(pages_of(100, 3))
        async with make_client(server) as client:
            items = await client.get_paginated(
                "/repos/o/r/issues",
                item_model=Issue,
                keep=lambda issue: issue.number % 2 == 0,
            )

        # Page 1 is still a full page even though half of it was dropped
        assert len(server.requests) == 2
        assert [i.number for i in items][:3] == [2, 4, 6]
        assert len(items) == 51

    @pytest.mark.asyncio
    async def test_caller_params_sent_on_every_page(self, make_client):
        server = FakeGitHub(pages_of(100, 1))
        async with make_client(server) as client:
            await client.get_paginated("/repos/o/r/pulls", {"state": "open"})

        assert [r.url.params["state"] for r in server.requests] == ["open", "open"]

    @pytest.mark.asyncio
    async def test_error_discards_partial_results(self, make_client):
        server = FakeGitHub(pages_of(100) + [httpx.Response(500, text="boom")])
        async with make_client(server) as client:
            with pytest.raises(GitHubAPIError) as exc_info:
                await client.get_paginated("/repos/o/r/issues")

        assert exc_info.value.status_code == 500
        assert len(server.requests) == 2


class TestFetchRepository:
    """Tests for fetch_repository."""

    @pytest.mark.asyncio
    async def test_single_request(self, make_client):
        server = FakeGitHub(
            [json_response({"name": "hello", "full_name": "octocat/hello", "stargazers_count": 5})]
        )
        async with make_client(server) as client:
            repo = await client.fetch_repository("octocat", "hello")

        assert isinstance(repo, Repository)
        assert repo.full_name == "octocat/hello"
        assert repo.stars == 5
        assert len(server.requests) == 1
        assert server.requests[0].url.path == "/repos/octocat/hello"
        assert "page" not in server.requests[0].url.params


class TestFetchIssues:
    """Tests for fetch_issues."""

    @pytest.mark.asyncio
    async def test_default_state_all(self, make_client):
        server = FakeGitHub([json_response([])])
        async with make_client(server) as client:
            await client.fetch_issues("o", "r")

        request = server.requests[0]
        assert request.url.path == "/repos/o/r/issues"
        assert request.url.params["state"] == "all"
        assert request.url.params["page"] == "1"

    @pytest.mark.asyncio
    async def test_state_override(self, make_client):
        server = FakeGitHub([json_response([])])
        async with make_client(server) as client:
            await client.fetch_issues("o", "r", state="open")

        assert server.requests[0].url.params["state"] == "open"

    @pytest.mark.asyncio
    async def test_pull_requests_are_dropped(self, make_client):
        payload = [
            {"id": 1, "number": 1, "title": "Real issue"},
            {
                "id": 2,
                "number": 2,
                "title": "Actually a PR",
                "pull_request": {"url": "https://api.github.com/repos/o/r/pulls/2"},
            },
            {"id": 3, "number": 3, "title": "Null linkage", "pull_request": None},
        ]
        server = FakeGitHub([json_response(payload)])
        async with make_client(server) as client:
            issues = await client.fetch_issues("o", "r")

        assert [i.number for i in issues] == [1, 3]
        assert all(isinstance(i, Issue) for i in issues)

    @pytest.mark.asyncio
    async def test_full_page_of_prs_keeps_paging(self, make_client):
        prs = make_items(100, pull_request={"url": "x"})
        server = FakeGitHub([json_response(prs), json_response(make_items(2, start=101))])
        async with make_client(server) as client:
            issues = await client.fetch_issues("o", "r")

        assert [i.number for i in issues] == [101, 102]
        assert len(server.requests) == 2


class TestFetchPullRequests:
    """Tests for fetch_pull_requests."""

    PAYLOAD = [
        {"id": 1, "number": 1, "title": "Merged", "merged_at": "2024-03-01T12:00:00Z"},
        {"id": 2, "number": 2, "title": "Closed unmerged", "merged_at": None},
        {"id": 3, "number": 3, "title": "No field"},
    ]

    @pytest.mark.asyncio
    async def test_default_state_closed(self, make_client):
        server = FakeGitHub([json_response([])])
        async with make_client(server) as client:
            await client.fetch_pull_requests("o", "r")

        request = server.requests[0]
        assert request.url.path == "/repos/o/r/pulls"
        assert request.url.params["state"] == "closed"

    @pytest.mark.asyncio
    async def test_all_kept_without_merged_option(self, make_client):
        server = FakeGitHub([json_response(self.PAYLOAD)])
        async with make_client(server) as client:
            prs = await client.fetch_pull_requests("o", "r")

        assert [pr.number for pr in prs] == [1, 2, 3]
        assert all(isinstance(pr, PullRequest) for pr in prs)

    @pytest.mark.asyncio
    async def test_merged_only(self, make_client):
        server = FakeGitHub([json_response(self.PAYLOAD)])
        async with make_client(server) as client:
            prs = await client.fetch_pull_requests("o", "r", state="all", merged=True)

        assert [pr.number for pr in prs] == [1]
        assert prs[0].is_merged
        assert server.requests[0].url.params["state"] == "all"


class TestFetchComments:
    """Tests for fetch_issue_comments and fetch_issue_details."""

    @pytest.mark.asyncio
    async def test_comments_endpoint(self, make_client):
        comments = [
            {"id": 10, "body": "First", "user": {"login": "alice", "id": 1, "type": "User"}},
            {"id": 11, "body": "Second", "user": {"login": "bob", "id": 2, "type": "User"}},
        ]
        server = FakeGitHub([json_response(comments)])
        async with make_client(server) as client:
            result = await client.fetch_issue_comments("o", "r", 7)

        request = server.requests[0]
        assert request.url.path == "/repos/o/r/issues/7/comments"
        assert "state" not in request.url.params
        assert request.url.params["per_page"] == "100"
        assert [c.author.username for c in result] == ["alice", "bob"]

    @pytest.mark.asyncio
    async def test_comments_paginate(self, make_client):
        server = FakeGitHub(pages_of(100, 20))
        async with make_client(server) as client:
            result = await client.fetch_issue_comments("o", "r", 1)

        assert len(result) == 120
        assert server.pages == ["1", "2"]

    @pytest.mark.asyncio
    async def test_issue_details(self, make_client):
        issue = Issue(id=1, number=42, title="Crash")
        server = FakeGitHub([json_response([{"id": 5, "body": "Same here"}])])
        async with make_client(server) as client:
            details = await client.fetch_issue_details("o", "r", issue)

        assert isinstance(details, IssueDetails)
        assert details.issue is issue
        assert [c.body for c in details.comments] == ["Same here"]
        assert server.requests[0].url.path == "/repos/o/r/issues/42/comments"


class TestFetchRateLimit:
    """Tests for fetch_rate_limit."""

    @pytest.mark.asyncio
    async def test_returns_updated_status(self, make_client, fake_clock):
        reset = fake_clock.now + 120
        server = FakeGitHub(
            [
                json_response(
                    {"resources": {}},
                    headers={"X-RateLimit-Remaining": "4321", "X-RateLimit-Reset": str(int(reset))},
                )
            ]
        )
        async with make_client(server) as client:
            status = await client.fetch_rate_limit()

        assert status["remaining"] == 4321
        assert status["reset_in"] == pytest.approx(120)
        assert server.requests[0].url.path == "/rate_limit"
