# backends_factory.py
from typing import Optional

import requests

from api_config import APIConfiguration, load_configuration, normalize_provider
from backends import LLMConfig, BaseLLMClient
from backends_openai import OpenAIClient
from backends_anthropic import AnthropicClient
from backends_gemini import GeminiClient

CLIENTS = {
    "openai": OpenAIClient,
    "claude": AnthropicClient,
    "gemini": GeminiClient,
}

__all__ = ["CLIENTS", "normalize_provider", "make_client", "make_client_from_env"]


def make_client(
    config: APIConfiguration, session: Optional[requests.Session] = None
) -> tuple[BaseLLMClient, LLMConfig]:
    provider = normalize_provider(config.active_provider)
    client_cls = CLIENTS[provider]
    provider_cfg = config.provider_config(provider)

    settings = config.global_settings
    cfg = LLMConfig(
        provider=provider,
        model=provider_cfg.model or client_cls.default_model,
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
        timeout=settings.timeout,
    )
    return client_cls(provider_cfg, session=session), cfg


def make_client_from_env(path: Optional[str] = None) -> tuple[BaseLLMClient, LLMConfig]:
    return make_client(load_configuration(path))
