"""Interactive command loop feeding input lines to the expression parser."""
import sys
from typing import List, Optional, TextIO

from pydantic import BaseModel, Field

from mathproof.common.errors import MathProofError
from mathproof.common.expression import parse_expression
from mathproof.common.logger import logger
from mathproof.repl.commands import Command

# Erase the display and move the cursor to the top-left corner
CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"


class ReplExit(Exception):
    """Raised by the exit command to leave the loop."""


class Repl(BaseModel):
    """
    Line-oriented command loop.

    Each line starts with a command keyword (see Command), the rest of the
    line is the command argument. Parse and evaluation errors are reported
    as messages and never end the loop.
    """

    prompt: str = Field(default="mathproof> ", description="Prompt written before each line")
    history_size: int = Field(default=100, ge=1, description="Maximum number of remembered lines")
    history: List[str] = Field(default_factory=list, description="Previously entered lines, oldest first")

    def _remember(self, line: str) -> None:
        self.history.append(line)
        # Drop the oldest entries beyond the limit
        del self.history[:-self.history_size]

    def _render_history(self) -> str:
        return "\n".join(f"{number}: {entry}" for number, entry in enumerate(self.history, start=1))

    def handle(self, line: str) -> Optional[str]:
        """
        Process one input line.

        :param str line: Raw input line

        :return: Text to display, None if there is nothing to display
        :rtype: Optional[str]
        :raises ReplExit: On the exit command
        """
        line = line.strip()
        if not line:
            return None

        self._remember(line)

        parts: List[str] = line.split(maxsplit=1)
        word: str = parts[0]
        argument: str = parts[1] if len(parts) > 1 else ""

        command: Command = Command.parse(word)
        logger.debug(f"Dispatching {command.render()} command: {argument!r}")

        if command is Command.EXIT:
            raise ReplExit()
        if command is Command.CLEAR:
            return CLEAR_SCREEN
        if command is Command.HELP:
            return Command.help()
        if command is Command.HISTORY:
            return self._render_history()
        if command is Command.UNKNOWN:
            return f"Unknown command: {word}"

        if not argument:
            return f"Usage: {command.render()} <expression>"

        try:
            expression = parse_expression(argument)
            if command is Command.EVAL:
                return expression.evaluate().render()
            # No algebraic rewriting, only the normalised form
            return expression.render()
        except MathProofError as exc:
            logger.info(f"{command.render()} failed for {argument!r}: {exc}")
            return str(exc)

    def run(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        """
        Read and process lines until end of input or the exit command.

        :param TextIO stdin: Input stream, defaults to sys.stdin
        :param TextIO stdout: Output stream, defaults to sys.stdout
        """
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout

        while True:
            stdout.write(self.prompt)
            stdout.flush()

            line: str = stdin.readline()
            if not line:
                # End of input, finish the prompt line
                stdout.write("\n")
                break

            try:
                response = self.handle(line)
            except ReplExit:
                break

            if response is not None:
                stdout.write(f"{response}\n")
            stdout.flush()

        stdout.write("Bye!\n")
        stdout.flush()
