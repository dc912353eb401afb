"""Tests for application orchestration in the main module."""

import io
import sys
from pathlib import Path
from unittest.mock import Mock, patch

from rich.console import Console

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ogh.config import Config
from ogh.errors import ApiError, AuthenticationError, ConfigurationError
from ogh.main import orchestrate

CONFIG = Config(owner="apache", repo="hadoop-ozone", token="secret")


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def _pr_node(number: int, mergeable: str, author: str = "dave") -> dict:
    return {
        "number": number,
        "title": f"HDDS-{number}. Change",
        "mergeable": mergeable,
        "author": {"login": author},
        "participants": {"edges": [{"node": {"login": "carol"}}]},
    }


PAYLOAD = {
    "data": {
        "repository": {
            "pullRequests": {
                "edges": [
                    {"node": _pr_node(101, "MERGEABLE")},
                    {"node": _pr_node(202, "CONFLICTING")},
                ]
            }
        }
    }
}


def _client_mock() -> Mock:
    client = Mock()
    client.fetch_open_pull_requests.return_value = PAYLOAD
    client.list_workflow_runs.return_value = {
        "workflow_runs": [{"id": 555, "name": "build-branch", "status": "completed", "conclusion": "success"}]
    }
    return client


def test_orchestrate_review_shows_only_ready_pull_requests():
    """Verify the review command filters out pull requests that are not ready."""
    console = _console()
    client = _client_mock()

    with patch("ogh.main.load_config", return_value=CONFIG) as load_config_mock, patch(
        "ogh.main.GitHubClient", return_value=client
    ):
        exit_code = orchestrate(["--repo", "apache/hadoop-ozone", "review"], console=console)

    assert exit_code == 0
    load_config_mock.assert_called_once_with("apache/hadoop-ozone")
    output = console.file.getvalue()
    assert "101" in output
    assert "202" not in output


def test_orchestrate_pull_requests_shows_all_with_conflict_mark():
    """Verify the pull-requests command lists everything and marks conflicts."""
    console = _console()

    with patch("ogh.main.load_config", return_value=CONFIG), patch(
        "ogh.main.GitHubClient", return_value=_client_mock()
    ):
        exit_code = orchestrate(["pr"], console=console)

    assert exit_code == 0
    output = console.file.getvalue()
    assert "101" in output
    assert "[C] HDDS-202" in output
    assert "CAROL" in output


def test_orchestrate_builds_master_queries_upstream_branch():
    """Verify the master build listing queries the configured owner."""
    console = _console()
    client = _client_mock()

    with patch("ogh.main.load_config", return_value=CONFIG), patch(
        "ogh.main.GitHubClient", return_value=client
    ):
        exit_code = orchestrate(["builds", "master", "--workflow", "8247"], console=console)

    assert exit_code == 0
    client.list_workflow_runs.assert_called_once_with("apache", branch="master", workflow_id=8247)
    assert "555" in console.file.getvalue()


def test_orchestrate_builds_fork_queries_user():
    """Verify the fork build listing queries the given user."""
    client = _client_mock()

    with patch("ogh.main.load_config", return_value=CONFIG), patch(
        "ogh.main.GitHubClient", return_value=client
    ):
        exit_code = orchestrate(["b", "fork", "--user", "elek"], console=_console())

    assert exit_code == 0
    client.list_workflow_runs.assert_called_once_with("elek")


def test_orchestrate_number_opens_browser(monkeypatch):
    """Verify 'ogh <number>' opens the pull request without loading config."""
    monkeypatch.delenv("OGH_REPO", raising=False)

    with patch("ogh.main.webbrowser.open") as open_mock, patch("ogh.main.load_config") as load_config_mock:
        exit_code = orchestrate(["1234"])

    assert exit_code == 0
    open_mock.assert_called_once_with("https://github.com/apache/hadoop-ozone/pull/1234")
    load_config_mock.assert_not_called()


def test_orchestrate_malformed_timestamp_returns_data_exit_code():
    """Verify a malformed review timestamp aborts the run."""
    node = _pr_node(101, "MERGEABLE")
    node["reviews"] = {
        "nodes": [
            {"author": {"login": "alice"}, "state": "APPROVED", "updatedAt": "2020-01-01T00:00:00Z"},
            {"author": {"login": "alice"}, "state": "APPROVED", "updatedAt": "garbage"},
        ]
    }
    client = Mock()
    client.fetch_open_pull_requests.return_value = {
        "data": {"repository": {"pullRequests": {"edges": [{"node": node}]}}}
    }

    with patch("ogh.main.load_config", return_value=CONFIG), patch(
        "ogh.main.GitHubClient", return_value=client
    ):
        exit_code = orchestrate(["review"], console=_console())

    assert exit_code == 5


def test_orchestrate_configuration_error_returns_configuration_exit_code():
    """Verify configuration failures return exit code 2."""
    with patch("ogh.main.load_config", side_effect=ConfigurationError("bad repo")):
        exit_code = orchestrate(["review"])

    assert exit_code == 2


def test_orchestrate_missing_token_returns_auth_error():
    """Verify missing credentials return the authentication exit code."""
    with patch("ogh.main.load_config", side_effect=AuthenticationError("Missing required GitHub token.")):
        exit_code = orchestrate(["review"])

    assert exit_code == 3


def test_orchestrate_api_error_returns_api_exit_code():
    """Verify GitHub API failures return the API error exit code."""
    client = Mock()
    client.fetch_open_pull_requests.side_effect = ApiError("GraphQL failed")

    with patch("ogh.main.load_config", return_value=CONFIG), patch(
        "ogh.main.GitHubClient", return_value=client
    ):
        exit_code = orchestrate(["review"], console=_console())

    assert exit_code == 4


def test_orchestrate_unexpected_error_returns_generic_exit_code():
    """Verify unexpected exceptions are mapped to the generic non-zero exit code."""
    with patch("ogh.main.parse_args", side_effect=RuntimeError("boom")):
        exit_code = orchestrate(["review"])

    assert exit_code == 1
