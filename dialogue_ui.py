# dialogue_ui.py
from typing import List, Optional, Protocol, TextIO, Tuple
import sys

from colorama import Fore, Style


class DialogueView(Protocol):
    """What an NPC needs from its speech bubble / dialogue panel."""

    visible: bool

    def set_speaker(self, name: str) -> None: ...
    def set_text(self, text: str) -> None: ...
    def show(self) -> None: ...
    def hide(self) -> None: ...


class ConsoleDialogueView:
    """Dialogue panel drawn in the terminal. Text is only printed while shown."""

    def __init__(self, stream: Optional[TextIO] = None, width: int = 80):
        self.stream = stream or sys.stdout
        self.width = width
        self.speaker = ""
        self.text = ""
        self.visible = False

    def _print(self, line: str) -> None:
        print(line, file=self.stream)

    def set_speaker(self, name: str) -> None:
        self.speaker = name

    def set_text(self, text: str) -> None:
        self.text = text
        if self.visible:
            self._print(f"{Fore.CYAN}{Style.BRIGHT}{self.speaker}:{Style.RESET_ALL} {Fore.YELLOW}{text}")

    def show(self) -> None:
        if not self.visible:
            self.visible = True
            self._print(f"{Fore.WHITE}{'-' * self.width}")

    def hide(self) -> None:
        if self.visible:
            self.visible = False
            self._print(f"{Fore.WHITE}{'-' * self.width}")


class RecordingDialogueView:
    """Headless view; keeps every call as (action, value) for inspection."""

    def __init__(self):
        self.speaker = ""
        self.text = ""
        self.visible = False
        self.events: List[Tuple[str, str]] = []

    def set_speaker(self, name: str) -> None:
        self.speaker = name
        self.events.append(("speaker", name))

    def set_text(self, text: str) -> None:
        self.text = text
        self.events.append(("text", text))

    def show(self) -> None:
        self.visible = True
        self.events.append(("show", ""))

    def hide(self) -> None:
        self.visible = False
        self.events.append(("hide", ""))

    @property
    def texts(self) -> List[str]:
        return [v for action, v in self.events if action == "text"]
