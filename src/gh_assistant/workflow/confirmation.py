"""Human confirmation of a proposed commit message.

The orchestrator only sees `Decision` values, so tests can drive it with canned
answers instead of a console.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .models import CommitProposal, UnpushedCommit

ACCEPT_ANSWERS = frozenset({"", "y", "yes"})
REJECT_ANSWERS = frozenset({"n", "no"})
EDIT_ANSWERS = frozenset({"e", "edit"})


class DecisionKind(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    EDIT = "edit"


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of a confirmation prompt.

    `text` is only meaningful for EDIT; an empty edit keeps the original proposal.
    `invalid` marks a rejection caused by an unrecognised answer.
    """

    kind: DecisionKind
    text: str = ""
    invalid: bool = False

    @classmethod
    def accept(cls) -> Decision:
        return cls(kind=DecisionKind.ACCEPT)

    @classmethod
    def reject(cls, *, invalid: bool = False) -> Decision:
        return cls(kind=DecisionKind.REJECT, invalid=invalid)

    @classmethod
    def edit(cls, text: str) -> Decision:
        return cls(kind=DecisionKind.EDIT, text=text)


class Confirmer(Protocol):
    """Asks a human whether to proceed."""

    def confirm_message(self, proposal: CommitProposal) -> Decision: ...

    def confirm_push(self, commits: Sequence[UnpushedCommit]) -> bool: ...


class ConsoleConfirmer:
    """Blocking line-based prompts on the terminal.

    End of input counts as an empty answer, which accepts the default.
    """

    def __init__(
        self,
        *,
        read_line: Callable[[str], str] = input,
        echo: Callable[[str], None] = print,
    ) -> None:
        self._read_line = read_line
        self._echo = echo

    def _read(self, prompt: str) -> str | None:
        try:
            return self._read_line(prompt)
        except EOFError:
            return None

    def confirm_message(self, proposal: CommitProposal) -> Decision:
        answer = (self._read("Proceed with this message? [Y/n/e(dit)]: ") or "").strip().lower()

        if answer in ACCEPT_ANSWERS:
            return Decision.accept()
        if answer in REJECT_ANSWERS:
            self._echo("Aborted")
            return Decision.reject()
        if answer in EDIT_ANSWERS:
            return Decision.edit(self._read_message())

        self._echo("Invalid input, aborted")
        return Decision.reject(invalid=True)

    def _read_message(self) -> str:
        self._echo("Enter your commit message (finish with an empty line):")
        lines: list[str] = []
        while True:
            line = self._read("")
            if line is None or not line.strip():
                break
            lines.append(line.rstrip("\r\n"))
        return "\n".join(lines)

    def confirm_push(self, commits: Sequence[UnpushedCommit]) -> bool:
        answer = (self._read("Push these commits? [Y/n]: ") or "").strip().lower()
        if answer in REJECT_ANSWERS:
            self._echo("Aborted")
            return False
        return True
