from __future__ import annotations

import httpx
import pytest

from hyperhive.config import get_settings
from hyperhive.dependencies import get_github_service
from hyperhive.github_client import GitHubClient, GitHubService


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/repos/acme/hive/pulls":
        return httpx.Response(
            200,
            json=[
                {"id": 1, "number": 10, "title": "Add login page", "user": {"login": "octocat"}},
                {"id": 2, "number": 11, "title": "Not mine", "user": {"login": "hubot"}},
            ],
        )
    if request.url.path == "/repos/acme/hive/commits":
        return httpx.Response(500)
    return httpx.Response(404)


async def _fake_service():
    async with httpx.AsyncClient(transport=httpx.MockTransport(_handler), base_url="https://api.github.com") as http:
        yield GitHubService(GitHubClient(get_settings(), client=http))


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({"owner": "", "repository": "hive", "username": "octocat"}, "Owner is required"),
        ({"owner": "acme", "repository": " ", "username": "octocat"}, "Repository is required"),
        ({"owner": "acme", "repository": "hive"}, "Username is required"),
    ],
)
def test_analyze_developer_requires_fields(client, body, message) -> None:
    response = client.post("/api/github/analyze-developer", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": message}


@pytest.mark.parametrize("path", ["/api/github/commits", "/api/github/pull-requests"])
def test_listing_requires_all_query_parameters(client, path) -> None:
    response = client.get(path, params={"owner": "acme", "repository": "hive"})
    assert response.status_code == 400
    assert response.json() == {"error": "Owner, Repository, and Username are required"}


def test_pull_requests_for_user(client) -> None:
    client.app.dependency_overrides[get_github_service] = _fake_service
    response = client.get(
        "/api/github/pull-requests", params={"owner": "acme", "repository": "hive", "username": "OctoCat"}
    )
    assert response.status_code == 200
    assert [pr["number"] for pr in response.json()] == [10]


def test_upstream_failures_become_server_errors(client) -> None:
    client.app.dependency_overrides[get_github_service] = _fake_service
    commits = client.get("/api/github/commits", params={"owner": "acme", "repository": "hive", "username": "octocat"})
    assert commits.status_code == 500
    assert commits.json() == {"error": "An error occurred while fetching commits"}

    analysis = client.post(
        "/api/github/analyze-developer", json={"owner": "acme", "repository": "hive", "username": "octocat"}
    )
    assert analysis.status_code == 500
    assert analysis.json() == {"error": "An error occurred while analyzing developer data"}
