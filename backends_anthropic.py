# backends_anthropic.py
from typing import Any, Dict, List

from backends import BaseLLMClient, LLMConfig, Message
from llm_errors import ResponseParseError

DEFAULT_API_VERSION = "2023-06-01"

class AnthropicClient(BaseLLMClient):
    name = "claude"
    default_url = "https://api.anthropic.com/v1/messages"
    default_model = "claude-3-haiku-20240307"

    def headers(self) -> Dict[str, str]:
        h = super().headers()
        h["x-api-key"] = self.api_key
        h["anthropic-version"] = self.provider_cfg.api_version or DEFAULT_API_VERSION
        return h

    def build_body(self, messages: List[Message], cfg: LLMConfig) -> Dict[str, Any]:
        # Claude takes the system prompt outside the message list;
        # keep only the latest one, as the chat API only has one slot
        system_prompt = ""
        converted = []
        for m in messages:
            if m["role"] == "system":
                system_prompt = m["content"]
            elif m["role"] in ("user", "assistant"):
                converted.append({"role": m["role"], "content": m["content"]})

        body: Dict[str, Any] = {
            "model": cfg.model,
            "messages": converted,
            "max_tokens": cfg.max_tokens,
        }
        if system_prompt:
            body["system"] = system_prompt
        return body

    def parse_response(self, data: Any) -> str:
        # Anthropic returns a list of content blocks; the first one carries the text
        content = data.get("content") or []
        if not content:
            raise ResponseParseError(self.name)
        return self.require_text(content[0]["text"])
