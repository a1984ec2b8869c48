# tests/conftest.py
# Shared fixtures: a fake HTTP session (no network), a recording dialogue
# view, config-file helpers and a clean environment for every test.

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import requests

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api_config import APIConfiguration, GlobalSettings, ProviderConfig  # noqa: E402
from dialogue_ui import RecordingDialogueView  # noqa: E402
from llm_manager import LlmManager  # noqa: E402


ENV_VARS = [
    "MODEL_PROVIDER", "MODEL", "TEMP", "MAX_TOKENS", "LLM_TIMEOUT", "LLM_CONFIG_PATH",
    "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY",
]


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Stands in for requests.Session; records each POST and replays queued answers."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Any] = []

    def queue(self, response) -> "FakeSession":
        self.responses.append(response)
        return self

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if not self.responses:
            raise AssertionError("FakeSession got an unexpected request")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # keep load_dotenv()/api-config.json lookups away from the repo checkout
    monkeypatch.chdir(tmp_path)
    LlmManager.reset_instance()
    yield
    LlmManager.reset_instance()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def view() -> RecordingDialogueView:
    return RecordingDialogueView()


@pytest.fixture
def write_config(tmp_path):
    def _write(data: Any, name: str = "api-config.json") -> str:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write


def make_config(provider: str = "openai", api_key: str = "test-key", **provider_fields) -> APIConfiguration:
    providers = {name: ProviderConfig() for name in ("openai", "claude", "gemini")}
    providers[provider] = ProviderConfig(api_key=api_key, **provider_fields)
    return APIConfiguration(
        active_provider=provider,
        global_settings=GlobalSettings(max_tokens=150, temperature=0.7),
        providers=providers,
    )


@pytest.fixture
def make_manager(session):
    def _make(provider: str = "openai", api_key: str = "test-key", **provider_fields) -> LlmManager:
        return LlmManager(make_config(provider, api_key, **provider_fields), session=session)
    return _make


OPENAI_OK = {"choices": [{"message": {"role": "assistant", "content": "Hello there, traveler."}}]}
CLAUDE_OK = {"content": [{"type": "text", "text": "Well met!"}]}
GEMINI_OK = {"candidates": [{"content": {"role": "model", "parts": [{"text": "Greetings."}]}}]}

CONNECTION_ERROR = requests.ConnectionError("connection refused")
