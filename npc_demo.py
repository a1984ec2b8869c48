# npc_demo.py
"""
Talk to one LLM-driven NPC from the terminal.

    python npc_demo.py --turns 3
    MODEL_PROVIDER=gemini python npc_demo.py --config api-config.json
"""
import argparse
import asyncio
import logging
from typing import Optional, Sequence

from colorama import init, Fore
from dotenv import load_dotenv

from api_config import load_configuration
from dialogue_ui import ConsoleDialogueView
from llm_manager import LlmManager
from smart_npc import DEFAULT_PERSONALITY, NpcProfile, SmartNpc

load_dotenv()
init(autoreset=True)

LEVEL_COLORS = {
    logging.DEBUG: Fore.WHITE,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED,
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{super().format(record)}"


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter("[%(levelname)s] %(name)s: %(message)s"))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chat with an LLM-driven NPC.")
    parser.add_argument("--config", help="Path to api-config.json (defaults to LLM_CONFIG_PATH or ./api-config.json)")
    parser.add_argument("--name", default="Bob the Merchant", help="NPC name")
    parser.add_argument("--personality", default=DEFAULT_PERSONALITY, help="A few sentences describing the NPC")
    parser.add_argument("--turns", type=int, default=3, help="How many times the player talks to the NPC")
    parser.add_argument("--display-time", type=float, default=1.0, help="Seconds each reply stays on screen")
    parser.add_argument("--memory-size", type=int, default=5, help="How many past lines the NPC remembers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


async def run(npc: SmartNpc, turns: int) -> None:
    for i in range(1, turns + 1):
        print(f"{Fore.MAGENTA}Interaction {i} of {turns}")
        task = npc.on_player_interact()
        if task is not None:
            await task


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    manager = LlmManager(load_configuration(args.config))
    LlmManager.set_instance(manager)
    print(f"Provider: {manager.provider}  Model: {manager.model}")

    profile = NpcProfile(
        name=args.name,
        personality=args.personality,
        memory_size=args.memory_size,
        display_time=args.display_time,
        show_debug_logs=args.verbose,
    )
    npc = SmartNpc(profile, manager=manager, view=ConsoleDialogueView())
    npc.start()

    asyncio.run(run(npc, args.turns))

    print(f"{Fore.BLUE}{npc.name} remembers:")
    for line in npc.memory:
        print(f"  {line}")


if __name__ == "__main__":
    main()
