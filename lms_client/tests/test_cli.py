"""
CLI commands against the fake backend (click's CliRunner, no network).
"""
from __future__ import annotations

import pytest
from click.testing import CliRunner

from lms_client.cli import CliContext, main
from lms_client.config import ClientConfig
from lms_client.identity_access.stores import LEARNER_ID_KEY, TOKEN_KEY
from utils.fake_backend import course, login_routes


BASE_URL = "http://lms.test"


@pytest.fixture
def cli_ctx(backend, store, tmp_path) -> CliContext:
    cfg = ClientConfig(api_url=BASE_URL, timeout_seconds=15, state_file=tmp_path / "state.json", log_level="INFO")
    return CliContext(config=cfg, store=store, transport=backend.transport())


@pytest.fixture
def invoke(cli_ctx):
    runner = CliRunner()

    def _invoke(*args: str):
        return runner.invoke(main, list(args), obj=cli_ctx)

    return _invoke


def test_login_persists_token_and_prints_role(backend, store, invoke):
    login_routes(backend, role="AUTHOR")

    result = invoke("login", "-u", "ann", "-p", "pw")

    assert result.exit_code == 0, result.output
    assert "Login Successful" in result.output
    assert "Role: AUTHOR" in result.output
    assert store.get(TOKEN_KEY) == "tok-123"


def test_whoami_resumes_from_stored_token(backend, store, invoke):
    login_routes(backend)
    store.set(TOKEN_KEY, "tok-123")

    result = invoke("whoami")

    assert result.exit_code == 0, result.output
    assert "alice (LEARNER)" in result.output
    assert backend.requests[-1].headers["Authorization"] == "Bearer tok-123"


def test_commands_require_login(backend, invoke):
    result = invoke("courses")

    assert result.exit_code == 1
    assert "Not logged in" in result.output
    assert backend.requests == []


def test_courses_marks_enrolled_and_filters(backend, store, invoke):
    login_routes(backend)
    store.set(TOKEN_KEY, "tok-123")
    backend.on("GET", "/course/getAllCourses", json=[course(5, "Python Basics"), course(6, "Data Science")])
    backend.on("GET", "/learner/courses", json=[{"id": 6, "learnerId": "L-1", "progress": 10}])

    listing = invoke("courses")
    filtered = invoke("courses", "--search", "python")
    empty = invoke("courses", "-s", "rust")

    assert "[ ] 5  Python Basics (3 credits)" in listing.output
    assert "[x] 6  Data Science (3 credits)" in listing.output
    assert "Data Science" not in filtered.output
    assert "No courses found." in empty.output


def test_enroll_uses_learner_id_from_enrollments(backend, store, invoke):
    login_routes(backend)
    store.set(TOKEN_KEY, "tok-123")
    backend.on("GET", "/course/getAllCourses", json=[course(5, "Python Basics"), course(6, "Data Science")])
    backend.on("GET", "/learner/courses", json=[{"id": 6, "learnerId": "L-1"}])
    backend.on("POST", "/learner/enroll/course/L-1/5", status=200)

    result = invoke("enroll", "5")

    assert result.exit_code == 0, result.output
    assert "Enrolled in Python Basics" in result.output
    assert "POST /learner/enroll/course/L-1/5" in backend.paths
    assert store.get(LEARNER_ID_KEY) == "L-1"


def test_enroll_without_learner_id_reports_error(backend, store, invoke):
    login_routes(backend)
    store.set(TOKEN_KEY, "tok-123")
    backend.on("GET", "/course/getAllCourses", json=[course(5, "Python Basics")])
    backend.on("GET", "/learner/courses", json=[])

    result = invoke("enroll", "5")

    assert result.exit_code == 1
    assert "Unable to determine learner ID." in result.output
    assert not any(p.startswith("POST") for p in backend.paths)


def test_author_command_rejected_for_learner(backend, store, invoke):
    login_routes(backend, role="LEARNER")
    store.set(TOKEN_KEY, "tok-123")

    result = invoke("add-course", "--title", "Go", "--credits", "3")

    assert result.exit_code == 1
    assert "not available for role LEARNER" in result.output


def test_expired_token_clears_state(backend, store, invoke):
    backend.on("GET", "/user/details", status=401)
    store.set(TOKEN_KEY, "stale")
    store.set(LEARNER_ID_KEY, "L-1")

    result = invoke("whoami")

    assert result.exit_code == 1
    assert store.get(TOKEN_KEY) is None
    assert store.get(LEARNER_ID_KEY) is None


def test_logout_clears_token(store, invoke):
    store.set(TOKEN_KEY, "tok-123")

    result = invoke("logout")

    assert result.exit_code == 0
    assert "Logged out" in result.output
    assert store.get(TOKEN_KEY) is None
