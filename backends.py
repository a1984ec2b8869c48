# backends.py
from dataclasses import dataclass
from typing import List, Dict, Any, Optional

import requests

from api_config import ProviderConfig
from llm_errors import ConfigurationError, ProviderConnectionError, ProviderHTTPError, ResponseParseError

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}

@dataclass
class LLMConfig:
    provider: str                  # "openai", "claude", "gemini"
    model: str
    temperature: float = 0.7
    max_tokens: int = 150
    timeout: Optional[float] = 30

class BaseLLMClient:
    """
    One subclass per provider. Subclasses only describe the wire format
    (url, headers, body, reply path); chat() does the POST for all of them.
    """
    name = "base"
    default_url = ""
    default_model = ""

    def __init__(self, provider_cfg: Optional[ProviderConfig] = None, session: Optional[requests.Session] = None):
        self.provider_cfg = provider_cfg or ProviderConfig()
        self.http = session or requests.Session()

    @property
    def api_key(self) -> str:
        return self.provider_cfg.api_key

    def endpoint(self, cfg: LLMConfig) -> str:
        url = self.provider_cfg.api_url or self.default_url
        if not url:
            raise ConfigurationError(f"No API URL configured for provider {self.name}")
        if "{model}" in url:
            url = url.replace("{model}", cfg.model)
        return url

    def require_text(self, value: Any) -> str:
        # refusals and tool calls come back as "content": null
        if not isinstance(value, str) or not value:
            raise ResponseParseError(self.name)
        return value

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def build_body(self, messages: List[Message], cfg: LLMConfig) -> Dict[str, Any]:
        raise NotImplementedError

    def parse_response(self, data: Any) -> str:
        raise NotImplementedError

    def chat(self, messages: List[Message], cfg: LLMConfig) -> str:
        url = self.endpoint(cfg)
        payload = self.build_body(messages, cfg)
        try:
            r = self.http.post(url, json=payload, headers=self.headers(), timeout=cfg.timeout)
        except requests.RequestException as e:
            raise ProviderConnectionError(self.name, e) from e

        if not 200 <= r.status_code < 300:
            raise ProviderHTTPError(self.name, r.status_code, r.text)

        try:
            data = r.json()
        except ValueError as e:
            raise ResponseParseError(self.name, r.text, e) from e

        try:
            return self.parse_response(data)
        except ResponseParseError as e:
            e.raw = e.raw or r.text
            raise
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ResponseParseError(self.name, r.text, e) from e
