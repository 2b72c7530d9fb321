"""Message value type and digest formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Message:
    """A single log/event message submitted to the relay."""

    text: str
    sender: str = ""
    level: str = ""

    def format_line(self) -> str:
        """Render the message as one Markdown line, newline included.

        Sender and level are passed through unescaped, so Markdown markers in
        user input reach the chat as-is.
        """
        line = ""
        if self.sender:
            line += f"From: *{self.sender}*: "
        if self.level:
            line += f"`[{self.level}]` "
        return line + self.text + "\n"


def format_digest(messages: Iterable[Message]) -> str:
    """Concatenate formatted messages in arrival order."""
    return "".join(m.format_line() for m in messages)
