# backends_gemini.py
from typing import Any, Dict, List

from backends import BaseLLMClient, LLMConfig, Message
from llm_errors import ResponseParseError

# Gemini calls the assistant "model"
ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiClient(BaseLLMClient):
    """
    Google Gemini generateContent over plain REST.

    The endpoint is a template: "{model}" in the configured apiUrl is
    replaced by the model id, e.g.
    https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent
    """

    name = "gemini"
    default_url = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
    default_model = "gemini-1.5-flash"

    def headers(self) -> Dict[str, str]:
        h = super().headers()
        h["x-goog-api-key"] = self.api_key
        return h

    def build_body(self, messages: List[Message], cfg: LLMConfig) -> Dict[str, Any]:
        sys = "\n".join(m["content"] for m in messages if m["role"] == "system")
        contents = [
            {"role": ROLE_MAP[m["role"]], "parts": [{"text": m["content"]}]}
            for m in messages
            if m["role"] in ROLE_MAP
        ]

        body: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "maxOutputTokens": cfg.max_tokens,
                "temperature": cfg.temperature,
            },
        }
        if sys:
            body["systemInstruction"] = {"parts": [{"text": sys}]}
        return body

    def parse_response(self, data: Any) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            raise ResponseParseError(self.name)
        return self.require_text(candidates[0]["content"]["parts"][0]["text"])
