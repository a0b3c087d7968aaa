"""
Shared test fixtures for the Teacher's Notebook.
Settings live in a temp directory; the spreadsheet endpoint and Gemini are
replaced with in-process fakes. Zero network calls.
"""
import os
import json
import pytest
import requests

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

ENDPOINT_URL = "https://script.google.com/macros/s/abc123/exec"
AI_KEY = "AIzaTestKey-0123456789"


def load_fixture(name):
    with open(os.path.join(FIXTURES_DIR, name), encoding="utf-8") as f:
        return json.load(f)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.text is not None:
            return json.loads(self.text)
        return self.payload


class FakeHttp:
    """Stands in for the requests module. Queue responses or exceptions."""

    def __init__(self):
        self.get_results = []
        self.post_results = []
        self.calls = []

    def _next(self, queue):
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, params, timeout))
        return self._next(self.get_results)

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append(("POST", url, data, timeout))
        if not self.post_results:
            return FakeResponse(status_code=200)
        return self._next(self.post_results)

    def count(self, method):
        return sum(1 for c in self.calls if c[0] == method)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fixtures_dir():
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def roster_payload():
    return load_fixture("roster.json")


@pytest.fixture
def settings_file(tmp_path):
    return str(tmp_path / "notebook_settings.json")


@pytest.fixture
def config_store(settings_file):
    """Empty store with environment defaults switched off."""
    from backend.config_store import ConfigStore
    return ConfigStore(settings_file, default_endpoint_url="", default_ai_credential="")


@pytest.fixture
def configured_store(config_store):
    from backend.config_store import Configuration
    config_store.save(Configuration(ENDPOINT_URL, AI_KEY))
    return config_store


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def directory(fake_http, roster_payload):
    """Directory already loaded with the fixture roster."""
    from backend.student_directory import StudentDirectory
    fake_http.get_results = [FakeResponse(roster_payload)]
    d = StudentDirectory(http=fake_http)
    d.refresh(ENDPOINT_URL)
    return d


@pytest.fixture
def fake_gemini(monkeypatch):
    """Replace the Gemini call. Set .reply to a string or an exception."""
    from backend.services.ai_draft_service import AiDraftService

    class _Gemini:
        reply = '"Great effort today!"'
        prompts = []

    def _complete(self, credential, prompt):
        _Gemini.prompts.append(prompt)
        if isinstance(_Gemini.reply, Exception):
            raise _Gemini.reply
        return _Gemini.reply

    _Gemini.prompts = []
    monkeypatch.setattr(AiDraftService, "_generate_completion", _complete)
    return _Gemini


@pytest.fixture
def session(configured_store, fake_http, roster_payload, clock, fake_gemini):
    """Configured session with the fixture roster loaded."""
    from backend.rate_limiter import RateLimiter
    from backend.student_directory import StudentDirectory
    from backend.services.ai_draft_service import AiDraftService
    from backend.services.notebook_session import NotebookSession
    from backend.services.submission_service import EvaluationSubmitter

    fake_http.get_results = [FakeResponse(roster_payload)]
    s = NotebookSession(
        config_store=configured_store,
        directory=StudentDirectory(http=fake_http),
        ai_service=AiDraftService(configured_store, rate_limiter=RateLimiter(4.0, clock=clock)),
        submitter=EvaluationSubmitter(http=fake_http),
        clock=clock,
    )
    s.refresh_roster(silent=True)
    return s


@pytest.fixture
def client(session):
    from backend.app import create_app
    app = create_app(session, sync_on_start=False)
    app.config["TESTING"] = True
    return app.test_client()
