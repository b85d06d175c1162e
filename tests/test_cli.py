from __future__ import annotations

import json

import pytest

from easy8cli.cli import main

ISSUE = {
    "id": 101,
    "subject": "Fix onboarding",
    "status": {"id": 1, "name": "New"},
    "assigned_to": {"id": 2, "name": "Alice"},
    "updated_on": "2024-01-01",
}


def _router(fake_response):
    def handler(method, url, call):
        if url.endswith("/issues.json") and method == "GET":
            return fake_response(200, {"issues": [ISSUE], "total_count": 1, "offset": 0, "limit": 25})
        if url.endswith("/issues.json") and method == "POST":
            return fake_response(201, {"issue": {"id": 202, "subject": "New task"}})
        if url.endswith("/issues/101.json") and method == "PUT":
            return fake_response(
                200,
                {"issue": {"id": 101, "subject": "Fix onboarding", "status": {"id": 2, "name": "In Progress"}}},
            )
        if url.endswith("/search.json"):
            return fake_response(
                200,
                {
                    "results": [
                        {
                            "id": 101,
                            "type": "issue",
                            "title": "Fix onboarding",
                            "url": "https://example.com/issues/101",
                        }
                    ],
                    "total_count": 1,
                },
            )
        if url.endswith("/users.json"):
            return fake_response(
                200,
                {
                    "users": [{"id": 51, "login": "alice", "firstname": "Alice", "lastname": "Doe"}],
                    "total_count": 1,
                    "limit": 100,
                },
            )
        if url.endswith("/issue_statuses.json"):
            return fake_response(200, {"issue_statuses": [{"id": 2, "name": "New"}]})
        return fake_response(404, "")

    return handler


@pytest.fixture
def session(monkeypatch, fake_session, fake_response):
    monkeypatch.setenv("EASY8_BASE_URL", "https://tracker.example")
    monkeypatch.setenv("EASY8_API_KEY", "test-key")
    fake = fake_session(_router(fake_response))
    monkeypatch.setattr("easy8cli.client.requests.Session", lambda: fake)
    return fake


def test_no_args_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_unknown_command_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main(["nope"])
    assert excinfo.value.code == 2


def test_issue_list_table_output(session, capsys):
    code = main(["issue", "list"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Subject" in out
    assert "Fix onboarding" in out
    assert session.request_log[0][2]["params"] == {"limit": "25"}


def test_issue_list_json_output(session, capsys):
    code = main(["issue", "list", "--json", "--q", "onboarding", "--include", "journals, relations"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert [i["id"] for i in data["issues"]] == [101]
    params = session.request_log[0][2]["params"]
    assert params["easy_query_q"] == "onboarding"
    assert params["set_filter"] == "1"
    assert params["include"] == "journals,relations"


def test_issue_search_requires_a_filter(session, capsys):
    code = main(["issue", "search"])
    assert code == 2
    assert "at least one filter is required" in capsys.readouterr().err
    assert session.request_log == []


def test_issue_search_resolves_names(session, capsys):
    code = main(["issue", "search", "--assignee", " alice doe ", "--status", "NEW", "--json"])
    assert code == 0
    paths = [url.rsplit("/", 1)[-1] for _, url, _ in session.request_log]
    assert paths == ["users.json", "issue_statuses.json", "issues.json"]
    params = session.request_log[-1][2]["params"]
    assert params["assigned_to_id"] == "51"
    assert params["status_id"] == "2"
    assert params["set_filter"] == "1"


def test_issue_search_conflicting_id(session, capsys):
    code = main(["issue", "search", "--status", "New", "--status-id", "3"])
    assert code == 2
    assert "status-id does not match status name" in capsys.readouterr().err


def test_issue_search_unknown_name(session, capsys):
    code = main(["issue", "search", "--status", "Closed"])
    assert code == 2
    assert "status not found: Closed" in capsys.readouterr().err


def test_issue_fulltext(session, capsys):
    code = main(["issue", "fulltext", "--q", "onboarding", "--open-issues"])
    out = capsys.readouterr().out
    assert code == 0
    assert "issue" in out and "Fix onboarding" in out
    params = session.request_log[0][2]["params"]
    assert params["q"] == "onboarding"
    assert params["open_issues"] == "1"


def test_issue_create_missing_subject(session, capsys):
    code = main(["issue", "create", "--project-id", "1"])
    assert code == 2
    assert "--subject is required" in capsys.readouterr().err


def test_issue_create_uses_config_defaults(session, monkeypatch, capsys):
    for name, value in (
        ("PROJECT", "1"),
        ("TRACKER", "2"),
        ("STATUS", "3"),
        ("PRIORITY", "4"),
        ("AUTHOR", "5"),
    ):
        monkeypatch.setenv(f"EASY8_DEFAULT_{name}_ID", value)

    code = main(
        ["issue", "create", "--subject", "New task", "--assigned-to-id", "6", "--json"]
    )

    assert code == 0
    assert json.loads(capsys.readouterr().out)["issue"]["id"] == 202
    body = session.request_log[0][2]["json"]
    assert body == {
        "issue": {
            "subject": "New task",
            "project_id": 1,
            "tracker_id": 2,
            "status_id": 3,
            "priority_id": 4,
            "author_id": 5,
            "assigned_to_id": 6,
        }
    }


def test_issue_create_missing_default_id(session, capsys):
    code = main(["issue", "create", "--subject", "New task"])
    assert code == 2
    assert "--project-id is required" in capsys.readouterr().err
    assert session.request_log == []


def test_issue_update_sends_only_given_fields(session, capsys):
    code = main(["issue", "update", "--id", "101", "--status-id", "2", "--done-ratio", "0"])
    assert code == 0
    assert "Fix onboarding" in capsys.readouterr().out
    method, url, call = session.request_log[0]
    assert method == "PUT"
    assert call["json"] == {"issue": {"status_id": 2, "done_ratio": 0}}


def test_issue_update_requires_id(session, capsys):
    code = main(["issue", "update", "--status-id", "2"])
    assert code == 2
    assert "--id is required" in capsys.readouterr().err


def test_lookup_users(session, capsys):
    code = main(["lookup", "users"])
    out = capsys.readouterr().out
    assert code == 0
    assert "alice" in out and "Alice Doe" in out


def test_api_error_exit_code(monkeypatch, fake_session, fake_response, capsys):
    monkeypatch.setenv("EASY8_API_KEY", "test-key")
    fake = fake_session([fake_response(500, "boom")])
    monkeypatch.setattr("easy8cli.client.requests.Session", lambda: fake)

    code = main(["issue", "list"])

    assert code == 1
    assert "api error 500: boom" in capsys.readouterr().err


def test_missing_api_key(monkeypatch, fake_session, capsys):
    fake = fake_session([])
    monkeypatch.setattr("easy8cli.client.requests.Session", lambda: fake)

    code = main(["issue", "list"])

    assert code == 1
    assert "missing API key" in capsys.readouterr().err
    assert fake.request_log == []


def test_bad_config_file(tmp_path, capsys):
    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n")

    code = main(["--config", str(bad), "issue", "list"])

    assert code == 1
    assert "config error" in capsys.readouterr().err


def test_bad_defaults_section(tmp_path, capsys):
    bad = tmp_path / "c.yaml"
    bad.write_text("defaults: 5\n")

    code = main(["--config", str(bad), "lookup", "statuses"])

    assert code == 1
    assert "config error" in capsys.readouterr().err


def test_api_error_redacts_api_key(monkeypatch, fake_session, fake_response, capsys):
    monkeypatch.setenv("EASY8_API_KEY", "test-key")
    fake = fake_session([fake_response(401, "bad key test-key")])
    monkeypatch.setattr("easy8cli.client.requests.Session", lambda: fake)

    code = main(["issue", "list"])

    err = capsys.readouterr().err
    assert code == 1
    assert "test-key" not in err
    assert "api error 401: bad key <redacted>" in err
