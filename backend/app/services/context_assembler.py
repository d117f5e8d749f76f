"""Builds the bounded notes block embedded in prompts."""

from collections.abc import Sequence
from typing import Literal, Protocol

BLOCK_SEPARATOR = "\n\n---\n\n"

TruncationStrategy = Literal["prefix", "proportional"]


class NoteLike(Protocol):
    filename: str
    content: str


def file_header(filename: str) -> str:
    return f"[File: {filename}]\n"


class ContextAssembler:
    """
    Concatenates notes into one text blob that never exceeds max_chars.

    Every block starts with its `[File: name]` tag and blocks keep the
    order they were given in.
    """

    def __init__(self, max_chars: int, strategy: TruncationStrategy = "prefix"):
        if max_chars <= 0:
            raise ValueError("max_chars must be positive")
        if strategy not in ("prefix", "proportional"):
            raise ValueError(f"Unknown truncation strategy: {strategy}")
        self.max_chars = max_chars
        self.strategy = strategy

    def assemble(self, notes: Sequence[NoteLike]) -> str:
        """
        Build the context string for a list of notes.

        Args:
            notes: Notes in the order they should appear

        Returns:
            Labeled, separator-joined note contents within the budget
        """
        if not notes:
            return ""

        joined = BLOCK_SEPARATOR.join(file_header(n.filename) + n.content for n in notes)
        if len(joined) <= self.max_chars:
            return joined

        if self.strategy == "proportional":
            shares = self._proportional_shares(notes)
            if shares is not None:
                return BLOCK_SEPARATOR.join(
                    file_header(n.filename) + n.content[:share] for n, share in zip(notes, shares)
                )

        # Hard prefix cut: later notes and the tail of long notes are dropped
        return joined[: self.max_chars]

    def _proportional_shares(self, notes: Sequence[NoteLike]) -> list[int] | None:
        """
        Split the content budget fairly between notes.

        Short notes keep their whole content and the remainder is divided
        evenly among the longer ones. Returns None when the tags and
        separators alone do not fit.
        """
        overhead = sum(len(file_header(n.filename)) for n in notes) + len(BLOCK_SEPARATOR) * (len(notes) - 1)
        budget = self.max_chars - overhead
        if budget < 0:
            return None

        shares = [0] * len(notes)
        pending = sorted(range(len(notes)), key=lambda i: len(notes[i].content))
        while pending:
            fair = budget // len(pending)
            index = pending[0]
            length = len(notes[index].content)
            if length <= fair:
                shares[index] = length
                budget -= length
                pending.pop(0)
                continue
            # Everything left is longer than the fair share
            for index in pending:
                shares[index] = fair
            break
        return shares
