"""REPL command keywords."""
from enum import Enum
from typing import Dict, List


class Command(str, Enum):
    """Commands understood by the REPL, valued by their canonical keyword."""

    EVAL = "eval"
    SIMPLIFY = "simplify"
    CLEAR = "clear"
    HELP = "help"
    HISTORY = "history"
    EXIT = "exit"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, word: str) -> "Command":
        """
        Look up the command for a keyword or alias.

        :param str word: First word of the input line

        :return: Matching command, UNKNOWN if the word is not a keyword
        :rtype: Command
        """
        return ALIASES.get(word, cls.UNKNOWN)

    def render(self) -> str:
        return self.value

    @staticmethod
    def help() -> str:
        """Help text listing every command with its aliases."""
        lines: List[str] = ["Commands"]
        for command in Command:
            if command is Command.UNKNOWN:
                continue
            aliases = [alias for alias, target in ALIASES.items() if target is command and alias != command.value]
            name = f"{command.value} ({', '.join(aliases)})" if aliases else command.value
            lines.append(f"- {name}: {DESCRIPTIONS[command]}")
        return "\n".join(lines)


# Every keyword the REPL accepts, mapped to its command
ALIASES: Dict[str, Command] = {
    "eval": Command.EVAL,
    "e": Command.EVAL,
    "simplify": Command.SIMPLIFY,
    "s": Command.SIMPLIFY,
    "clear": Command.CLEAR,
    "help": Command.HELP,
    "history": Command.HISTORY,
    "h": Command.HISTORY,
    "exit": Command.EXIT,
    "quit": Command.EXIT,
    "q": Command.EXIT,
}

DESCRIPTIONS: Dict[Command, str] = {
    Command.EVAL: "Evaluate an expression",
    Command.SIMPLIFY: "Simplify an expression",
    Command.CLEAR: "Clear the screen",
    Command.HELP: "Display this help message",
    Command.HISTORY: "Show previously entered lines",
    Command.EXIT: "Exit the program",
}
