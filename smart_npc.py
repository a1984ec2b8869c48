# smart_npc.py
"""
An NPC whose lines come from the LLM.

The prompt is the NPC's name and personality, the last few things it said,
and who the player is. Each interaction shows a "thinking" line, asks the
LlmManager, shows the reply for `display_time` seconds and hides the panel.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from dialogue_ui import DialogueView
from llm_manager import LlmManager

logger = logging.getLogger(__name__)

DEFAULT_PERSONALITY = (
    "A friendly merchant who loves to tell stories about his adventuring days. "
    "Always tries to get the best deal but has a soft spot for new adventurers."
)


@dataclass
class NpcProfile:
    name: str = "Bob the Merchant"
    personality: str = DEFAULT_PERSONALITY
    memory_size: int = 5             # how many past lines to keep
    display_time: float = 5.0        # seconds the reply stays on screen
    show_thinking_text: bool = True
    allow_interrupt: bool = False    # may the player re-trigger while it talks?
    show_debug_logs: bool = False


class SmartNpc:
    def __init__(
        self,
        profile: Optional[NpcProfile] = None,
        manager: Optional[LlmManager] = None,
        view: Optional[DialogueView] = None,
    ):
        self.profile = profile or NpcProfile()
        self.manager = manager
        self.view = view
        self._memory: List[str] = []
        self.currently_talking = False

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def memory(self) -> List[str]:
        return list(self._memory)

    def start(self) -> None:
        if self.manager is None:
            try:
                self.manager = LlmManager.get_instance()
            except Exception as e:
                logger.error("[%s] No LlmManager available: %s", self.name, e)

        if self.view is not None:
            self.view.set_speaker(self.name)
            self.view.hide()

    # ---- interaction ----

    def on_player_interact(self) -> Optional["asyncio.Task[str]"]:
        """Start a conversation. Must be called from a running event loop."""
        if self.currently_talking and not self.profile.allow_interrupt:
            if self.profile.show_debug_logs:
                logger.info("[%s] Already talking, interaction ignored.", self.name)
            return None

        return asyncio.get_running_loop().create_task(self.have_conversation())

    def on_trigger_enter(self, tag: str) -> Optional["asyncio.Task[str]"]:
        if tag == "Player":
            return self.on_player_interact()
        return None

    def on_mouse_down(self) -> Optional["asyncio.Task[str]"]:
        return self.on_player_interact()

    async def have_conversation(self) -> str:
        self.currently_talking = True
        try:
            self._show()

            if self.profile.show_thinking_text and self.view is not None:
                self.view.set_text(f"{self.name} is thinking...")

            response = await self.get_ai_response(self.create_prompt())

            self.remember_conversation(response)

            if self.view is not None:
                self.view.set_text(response)

            await asyncio.sleep(self.profile.display_time)
            self._hide()
        finally:
            self.currently_talking = False

        return response

    async def get_ai_response(self, prompt: str) -> str:
        if self.manager is None:
            return self.get_fallback_response()

        try:
            return await self.manager.get_ai_response(prompt)
        except Exception as e:
            logger.error("[%s] AI Error: %s", self.name, e)
            return self.get_fallback_response()

    # ---- prompt & memory ----

    def create_prompt(self) -> str:
        player_name = self.get_player_name()
        player_level = self.get_player_level()

        memory_context = ""
        if self._memory:
            memory_context = "Previous conversations:\n" + "\n".join(self._memory) + "\n\n"

        return (
            f"You are {self.name}. {self.profile.personality}\n\n"
            f"{memory_context}"
            f"The player ({player_name}, Level {player_level}) approaches you.\n\n"
            f"Respond as {self.name} would, staying in character. "
            f"Keep your response under 50 words. Be conversational and natural."
        )

    def remember_conversation(self, what_was_said: str) -> None:
        self._memory.append(f"{self.name}: {what_was_said}")
        while len(self._memory) > max(self.profile.memory_size, 0):
            self._memory.pop(0)

    def get_fallback_response(self) -> str:
        fallbacks = [
            f"Greetings, traveler! I'm {self.name}.",
            "Welcome to my humble shop!",
            "What can I do for you today?",
            "Ah, another adventurer! How can I help?",
            "Good to see you again!",
        ]
        return fallbacks[min(len(self._memory), len(fallbacks) - 1)]

    # Override in a game to read the real player
    def get_player_name(self) -> str:
        return "Adventurer"

    def get_player_level(self) -> int:
        return 5

    # ---- view ----

    def _show(self) -> None:
        if self.view is not None:
            self.view.show()

    def _hide(self) -> None:
        if self.view is not None:
            self.view.hide()
