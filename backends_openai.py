# backends_openai.py
from typing import Any, Dict, List
from backends import BaseLLMClient, LLMConfig, Message
from llm_errors import ResponseParseError

class OpenAIClient(BaseLLMClient):
    name = "openai"
    default_url = "https://api.openai.com/v1/chat/completions"
    default_model = "gpt-3.5-turbo"

    def headers(self) -> Dict[str, str]:
        h = super().headers()
        h["Authorization"] = f"Bearer {self.api_key}"
        return h

    def build_body(self, messages: List[Message], cfg: LLMConfig) -> Dict[str, Any]:
        return {
            "model": cfg.model,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "temperature": cfg.temperature,
            "max_tokens": cfg.max_tokens,
        }

    def parse_response(self, data: Any) -> str:
        # { "choices": [ { "message": { "role": "assistant", "content": "..." } } ] }
        choices = data.get("choices") or []
        if not choices:
            raise ResponseParseError(self.name)
        return self.require_text(choices[0]["message"]["content"])
