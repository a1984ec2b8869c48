# llm_manager.py
"""
Process-wide access point for the configured LLM provider.

Every NPC talks through one LlmManager. get_ai_response() never raises:
each failure is logged and turned into a short fallback line the game
can show as-is.
"""
import asyncio
import functools
import logging
from typing import ClassVar, Optional

import requests

from api_config import APIConfiguration, load_configuration
from backends import LLMConfig, Message
from backends_factory import make_client
from llm_errors import (
    ConfigurationError,
    ProviderConnectionError,
    ProviderHTTPError,
    ResponseParseError,
)

logger = logging.getLogger(__name__)

NO_KEY_REPLY = "Error: No API key"
CONNECT_FAILED_REPLY = "Sorry, I couldn't connect to the AI."
PARSE_FAILED_REPLY = "Error parsing response."
UNEXPECTED_ERROR_REPLY = "Sorry, something went wrong."


class LlmManager:
    _instance: ClassVar[Optional["LlmManager"]] = None

    def __init__(
        self,
        config: Optional[APIConfiguration] = None,
        session: Optional[requests.Session] = None,
        show_debug_logs: bool = True,
    ):
        self.config = config if config is not None else load_configuration()
        self.show_debug_logs = show_debug_logs
        self.client, self.llm_cfg = make_client(self.config, session=session)
        if self.show_debug_logs:
            logger.info("LLM manager ready. Provider: %s  Model: %s", self.provider, self.model)

    # ---- process-wide instance ----

    @classmethod
    def get_instance(cls) -> "LlmManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def set_instance(cls, manager: "LlmManager") -> bool:
        """Register `manager` as the shared instance. The first one wins."""
        if cls._instance is not None and cls._instance is not manager:
            logger.warning("An LlmManager is already registered; ignoring the new one.")
            return False
        cls._instance = manager
        return True

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    # ---- info ----

    @property
    def provider(self) -> str:
        return self.llm_cfg.provider

    @property
    def model(self) -> str:
        return self.llm_cfg.model

    @property
    def has_api_key(self) -> bool:
        return bool(self.client.api_key)

    # ---- calls ----

    def _chat(self, message: str, cfg: LLMConfig) -> str:
        messages: list[Message] = [{"role": "user", "content": message}]
        return self.client.chat(messages, cfg)

    async def get_ai_response(self, message: str) -> str:
        """Send a single user message and return the reply text (or a fallback line)."""
        if not self.has_api_key:
            logger.error("No API key set for %s! Add it to api-config.json or the environment.", self.provider)
            return NO_KEY_REPLY

        loop = asyncio.get_running_loop()
        try:
            # requests blocks; keep the event loop free while we wait
            response = await loop.run_in_executor(None, functools.partial(self._chat, message, self.llm_cfg))
        except ProviderHTTPError as e:
            logger.error("API Error: %s", e)
            logger.error("Response: %s", e.body)
            return CONNECT_FAILED_REPLY
        except (ProviderConnectionError, ConfigurationError) as e:
            logger.error("API Error: %s", e)
            return CONNECT_FAILED_REPLY
        except ResponseParseError as e:
            logger.error("Failed to parse response: %s", e)
            logger.error("Raw response: %s", e.raw)
            return PARSE_FAILED_REPLY
        except Exception as e:
            logger.exception("Exception while calling %s: %s", self.provider, e)
            return UNEXPECTED_ERROR_REPLY

        if self.show_debug_logs:
            logger.info("AI Response: %s", response)
        return response
