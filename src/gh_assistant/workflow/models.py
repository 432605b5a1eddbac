from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .state_machine import PushState


@dataclass(frozen=True, slots=True)
class UnpushedCommit:
    short_hash: str
    subject: str

    def __str__(self) -> str:
        return f"{self.short_hash} - {self.subject}"


@dataclass(frozen=True, slots=True)
class WorkingTreeState:
    """What the inspection step observed. Derived fresh on every run.

    Staged changes and unpushed commits are observed independently: both may be
    present at once.
    """

    has_staged_changes: bool
    unpushed_commits: tuple[UnpushedCommit, ...] = ()
    has_unstaged_changes: bool = False
    staged_diff: str = ""
    unpushed_diff: str = ""
    changed_files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BranchContext:
    """Branch facts captured before pushing.

    `has_upstream=False` is the only signal for "first push to this branch".
    """

    name: str
    has_upstream: bool
    is_main_branch: bool


class ProposalSource(str, Enum):
    GENERATED = "generated"
    EDITED = "edited"


@dataclass(frozen=True, slots=True)
class CommitProposal:
    text: str
    source: ProposalSource = ProposalSource.GENERATED


@dataclass(frozen=True, slots=True)
class PushOutcome:
    pushed: bool
    used_set_upstream: bool = False


@dataclass(frozen=True, slots=True)
class TicketRecord:
    key: str
    title: str
    url: str


@dataclass(frozen=True, slots=True)
class PushRequest:
    """Caller options for one run.

    Keep this explicit. Avoid implicit global flags.
    """

    stage_all: bool = False
    auto_confirm: bool = False
    summarize_unpushed: bool = False


@dataclass(frozen=True, slots=True)
class PushResult:
    state: PushState
    proposal: CommitProposal | None = None
    message: str | None = None
    committed: bool = False
    outcome: PushOutcome | None = None
    branch: BranchContext | None = None
    ticket: TicketRecord | None = None
    ticket_error: str | None = None
    unpushed_commits: tuple[UnpushedCommit, ...] = field(default_factory=tuple)

    @property
    def aborted(self) -> bool:
        return self.state == PushState.ABORTED
