# tests/test_llm_manager.py
from __future__ import annotations

import asyncio
import logging

import pytest

import llm_manager
from llm_manager import LlmManager

from conftest import CLAUDE_OK, CONNECTION_ERROR, GEMINI_OK, OPENAI_OK, FakeResponse, make_config


def ask(manager: LlmManager, message: str = "Hello") -> str:
    return asyncio.run(manager.get_ai_response(message))


@pytest.mark.parametrize(
    "provider, payload, expected",
    [
        ("openai", OPENAI_OK, "Hello there, traveler."),
        ("claude", CLAUDE_OK, "Well met!"),
        ("gemini", GEMINI_OK, "Greetings."),
    ],
)
def test_success_per_provider(make_manager, session, provider, payload, expected):
    manager = make_manager(provider)
    session.queue(FakeResponse(200, payload))

    assert ask(manager, "Say hi") == expected
    assert len(session.calls) == 1


def test_sends_single_user_message(make_manager, session):
    manager = make_manager("openai")
    session.queue(FakeResponse(200, OPENAI_OK))
    ask(manager, "What do you sell?")
    assert session.calls[0]["json"]["messages"] == [{"role": "user", "content": "What do you sell?"}]


def test_missing_key_short_circuits(make_manager, session, caplog):
    manager = make_manager("openai", api_key="")
    with caplog.at_level(logging.ERROR):
        assert ask(manager) == llm_manager.NO_KEY_REPLY
    assert session.calls == []
    assert "No API key" in caplog.text


def test_http_error_gives_connect_fallback(make_manager, session, caplog):
    manager = make_manager("claude")
    session.queue(FakeResponse(500, text="upstream exploded"))
    with caplog.at_level(logging.ERROR):
        assert ask(manager) == llm_manager.CONNECT_FAILED_REPLY
    assert "upstream exploded" in caplog.text


def test_connection_error_gives_connect_fallback(make_manager, session):
    manager = make_manager("gemini")
    session.queue(CONNECTION_ERROR)
    assert ask(manager) == llm_manager.CONNECT_FAILED_REPLY


def test_bad_shape_gives_parse_fallback(make_manager, session, caplog):
    manager = make_manager("openai")
    session.queue(FakeResponse(200, {"choices": []}))
    with caplog.at_level(logging.ERROR):
        assert ask(manager) == llm_manager.PARSE_FAILED_REPLY
    assert "Raw response" in caplog.text


def test_unexpected_exception_gives_generic_fallback(make_manager, session):
    manager = make_manager("openai")
    session.queue(RuntimeError("boom"))
    assert ask(manager) == llm_manager.UNEXPECTED_ERROR_REPLY


def test_no_retry_on_failure(make_manager, session):
    manager = make_manager("openai")
    session.queue(FakeResponse(503, text="busy")).queue(FakeResponse(200, OPENAI_OK))
    assert ask(manager) == llm_manager.CONNECT_FAILED_REPLY
    assert len(session.calls) == 1


def test_info_properties(make_manager):
    manager = make_manager("gemini", model="gemini-x")
    assert manager.provider == "gemini"
    assert manager.model == "gemini-x"
    assert manager.has_api_key


def test_default_model_when_config_has_none(make_manager):
    assert make_manager("openai").model == "gpt-3.5-turbo"


def test_get_instance_is_shared(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    first = LlmManager.get_instance()
    assert LlmManager.get_instance() is first
    assert first.has_api_key


def test_first_registered_instance_wins(session):
    a = LlmManager(make_config("openai"), session=session)
    b = LlmManager(make_config("claude"), session=session)
    assert LlmManager.set_instance(a)
    assert not LlmManager.set_instance(b)
    assert LlmManager.get_instance() is a

    LlmManager.reset_instance()
    assert LlmManager.set_instance(b)
    assert LlmManager.get_instance() is b


@pytest.mark.parametrize(
    "provider, payload",
    [
        ("openai", {"choices": [{"message": {"role": "assistant", "content": None}}]}),
        ("claude", {"content": [{"type": "text", "text": None}]}),
        ("gemini", {"candidates": [{"content": {"parts": [{"text": ""}]}}]}),
    ],
)
def test_null_reply_text_gives_parse_fallback(make_manager, session, provider, payload):
    manager = make_manager(provider)
    session.queue(FakeResponse(200, payload))
    assert ask(manager) == llm_manager.PARSE_FAILED_REPLY


def test_missing_endpoint_gives_connect_fallback(make_manager, session, monkeypatch, caplog):
    from backends_openai import OpenAIClient

    monkeypatch.setattr(OpenAIClient, "default_url", "")
    manager = make_manager("openai")
    with caplog.at_level(logging.ERROR):
        assert ask(manager) == llm_manager.CONNECT_FAILED_REPLY
    assert session.calls == []
    assert "No API URL configured" in caplog.text
