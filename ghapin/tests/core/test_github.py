"""
test_github.py - Tests for the GitHub API client
"""

from unittest.mock import MagicMock

import pytest
import requests

from ghapin.core.github import GitHubAPIError, GitHubClient, Release

API = "https://api.github.com"
SHA = "11bd71901bbe5b1630ceea73d27597364c9af683"


def make_response(status=200, json_data=None, headers=None, reason="OK"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.headers = headers or {}
    response.reason = reason
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def session():
    session = requests.Session()
    session.get = MagicMock()
    return session


def test_headers(session):
    """A token is sent as a bearer token."""
    GitHubClient(token="secret", session=session)

    assert session.headers["Authorization"] == "Bearer secret"
    assert session.headers["Accept"] == "application/vnd.github+json"


def test_no_token(session):
    """Without a token no Authorization header is sent."""
    GitHubClient(session=session)

    assert "Authorization" not in session.headers


def test_get_latest_release(session):
    """Test looking up the latest release."""
    session.get.return_value = make_response(
        json_data={"tag_name": "v4.2.2", "target_commitish": "main"}
    )
    client = GitHubClient(session=session, timeout=5)

    release = client.get_latest_release("actions", "checkout")

    assert release == Release(tag="v4.2.2", target_commitish="main")
    session.get.assert_called_once_with(
        f"{API}/repos/actions/checkout/releases/latest", timeout=5
    )


def test_get_latest_release_not_found(session):
    """A 404 means the repository has no release."""
    session.get.return_value = make_response(status=404, json_data={"message": "Not Found"})

    assert GitHubClient(session=session).get_latest_release("o", "r") is None


def test_get_tag_sha_lightweight(session):
    """Lightweight tags point directly at a commit."""
    session.get.return_value = make_response(
        json_data={"ref": "refs/tags/v4.2.2", "object": {"type": "commit", "sha": SHA}}
    )
    client = GitHubClient(session=session)

    assert client.get_tag_sha("actions", "checkout", "v4.2.2") == SHA
    session.get.assert_called_once_with(
        f"{API}/repos/actions/checkout/git/ref/tags/v4.2.2", timeout=10
    )


def test_get_tag_sha_annotated(session):
    """Annotated tags are dereferenced to their commit."""
    tag_object_sha = "f" * 40
    session.get.side_effect = [
        make_response(json_data={"object": {"type": "tag", "sha": tag_object_sha}}),
        make_response(json_data={"object": {"type": "commit", "sha": SHA}}),
    ]
    client = GitHubClient(session=session)

    assert client.get_tag_sha("actions", "checkout", "v4.2.2") == SHA
    assert session.get.call_args_list[1].args[0] == (
        f"{API}/repos/actions/checkout/git/tags/{tag_object_sha}"
    )


def test_get_tag_sha_annotated_object_missing(session):
    """An unreadable tag object never yields the tag object SHA as a commit."""
    session.get.side_effect = [
        make_response(json_data={"object": {"type": "tag", "sha": "f" * 40}}),
        make_response(status=404),
    ]

    assert GitHubClient(session=session).get_tag_sha("actions", "checkout", "v4.2.2") is None


def test_get_tag_sha_not_found(session):
    """A missing tag is not an error."""
    session.get.return_value = make_response(status=404)

    assert GitHubClient(session=session).get_tag_sha("o", "r", "v1") is None


def test_server_error(session):
    """Error responses raise GitHubAPIError with the API's message."""
    session.get.return_value = make_response(
        status=500, json_data={"message": "Server Error"}, reason="Internal Server Error"
    )

    with pytest.raises(GitHubAPIError) as exc_info:
        GitHubClient(session=session).get_latest_release("o", "r")

    assert exc_info.value.status == 500
    assert "Server Error" in str(exc_info.value)


def test_rate_limit(session):
    """An exhausted rate limit is reported as such."""
    session.get.return_value = make_response(
        status=403, headers={"X-RateLimit-Remaining": "0"}, json_data={}
    )

    with pytest.raises(GitHubAPIError, match="rate limit"):
        GitHubClient(session=session).get_latest_release("o", "r")


def test_transport_failure(session):
    """Connection problems raise GitHubAPIError."""
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(GitHubAPIError, match="connection refused"):
        GitHubClient(session=session).get_tag_sha("o", "r", "v1")


def test_invalid_json(session):
    """Test a successful response without a JSON body."""
    session.get.return_value = make_response(json_data=ValueError("no json"))

    with pytest.raises(GitHubAPIError, match="Invalid JSON"):
        GitHubClient(session=session).get_latest_release("o", "r")


def test_custom_api_url(session):
    """GitHub Enterprise style base URLs are honored."""
    session.get.return_value = make_response(json_data={"tag_name": "v1.0.0"})
    client = GitHubClient(api_url="https://ghe.example.com/api/v3/", session=session)

    release = client.get_latest_release("o", "r")

    assert release.target_commitish == ""
    session.get.assert_called_once_with(
        "https://ghe.example.com/api/v3/repos/o/r/releases/latest", timeout=10
    )
