"""The push workflow.

One run inspects the working tree, picks what to summarize, asks the generator
for a message, lets a human confirm or edit it, commits, pushes (retrying once
with upstream tracking) and, on the first push of a feature branch, opens a
ticket. Everything happens sequentially; no state survives a run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from gh_assistant.git.repository import GitRepository, VcsMutationError, VcsQueryError

from .confirmation import Confirmer, DecisionKind
from .errors import EmptyDiffError, NoChangesError, NoStagedChangesError, PushError
from .models import (
    BranchContext,
    CommitProposal,
    ProposalSource,
    PushOutcome,
    PushRequest,
    PushResult,
    TicketRecord,
    UnpushedCommit,
    WorkingTreeState,
)
from .state_machine import PushState, transition

logger = logging.getLogger(__name__)

RULE = "-" * 52


class MessageGenerator(Protocol):
    def generate(self, diff_text: str, changed_files: Sequence[str]) -> str: ...


class TicketService(Protocol):
    def is_configured(self) -> bool: ...

    def create_with_title(self, message: str) -> str: ...

    def issue_url(self, issue_key: str) -> str: ...


def should_create_ticket(branch: BranchContext) -> bool:
    """Tickets are opened only on the first push of a non-main branch."""

    return not branch.has_upstream and not branch.is_main_branch


def ticket_key_from_title(title: str) -> str:
    key, sep, _ = title.partition(" - ")
    return key if sep else title


class PushOrchestrator:
    """Drives a single commit-and-push run."""

    def __init__(
        self,
        *,
        repository: GitRepository,
        generator: MessageGenerator,
        confirmer: Confirmer,
        tickets: TicketService | None = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self._repo = repository
        self._generator = generator
        self._confirmer = confirmer
        self._tickets = tickets
        self._echo = echo

    def run(self, request: PushRequest) -> PushResult:
        state = transition(current=PushState.IDLE, to=PushState.INSPECTING)
        self._echo("Analyzing your changes...")

        if request.stage_all:
            self._echo("Staging all changes...")
            self._repo.stage_all()

        tree, state = self._inspect(request, state)

        proposal: CommitProposal | None = None
        if tree.has_staged_changes or request.summarize_unpushed:
            diff = tree.staged_diff if tree.has_staged_changes else tree.unpushed_diff
            if not diff.strip():
                raise EmptyDiffError()

            state = transition(current=state, to=PushState.GENERATING)
            self._echo("Generating commit message...")
            proposal = CommitProposal(text=self._generator.generate(diff, tree.changed_files))
            self._show_proposal(proposal)

            state = transition(current=state, to=PushState.CONFIRMING)
            if not request.auto_confirm:
                decision = self._confirmer.confirm_message(proposal)
                if decision.kind == DecisionKind.REJECT:
                    return self._abort(state, tree, proposal, invalid=decision.invalid)
                if decision.kind == DecisionKind.EDIT and decision.text.strip():
                    proposal = CommitProposal(text=decision.text, source=ProposalSource.EDITED)
            message = proposal.text
        else:
            state = transition(current=state, to=PushState.CONFIRMING)
            self._echo(RULE)
            self._echo("No new changes to commit. Ready to push existing commits.")
            self._echo(RULE)
            if not request.auto_confirm and not self._confirmer.confirm_push(
                tree.unpushed_commits
            ):
                return self._abort(state, tree, None)
            # Most recent commit first.
            message = tree.unpushed_commits[0].subject

        committed = False
        if tree.has_staged_changes:
            state = transition(current=state, to=PushState.COMMITTING)
            self._echo("Creating commit...")
            self._repo.commit(message)
            committed = True
            self._echo(f"Committed: {message}")

        state = transition(current=state, to=PushState.PUSHING)
        # Must be read before pushing: an upstream-setting push makes has_upstream true.
        branch = self._repo.branch_context()
        outcome = self._push()
        self._echo("Successfully pushed!")

        ticket: TicketRecord | None = None
        ticket_error: str | None = None
        if (
            should_create_ticket(branch)
            and self._tickets is not None
            and self._tickets.is_configured()
        ):
            state = transition(current=state, to=PushState.TICKET_CREATION)
            ticket, ticket_error = self._create_ticket(self._tickets, message)

        state = transition(current=state, to=PushState.DONE)
        logger.info(
            "Push run completed",
            extra={
                "branch": branch.name,
                "committed": committed,
                "used_set_upstream": outcome.used_set_upstream,
                "ticket": ticket.key if ticket else None,
            },
        )
        return PushResult(
            state=state,
            proposal=proposal,
            message=message,
            committed=committed,
            outcome=outcome,
            branch=branch,
            ticket=ticket,
            ticket_error=ticket_error,
            unpushed_commits=tree.unpushed_commits,
        )

    def _inspect(
        self, request: PushRequest, state: PushState
    ) -> tuple[WorkingTreeState, PushState]:
        has_staged = self._repo.has_staged_changes()
        has_unstaged = self._repo.has_unstaged_changes()
        unpushed = self._repo.unpushed_commit_summaries()
        if unpushed:
            self._show_unpushed(unpushed)

        if has_staged:
            self._echo("Found staged changes to commit")
            if has_unstaged:
                self._echo("Unstaged changes will not be included (use -a to stage everything)")
            tree = WorkingTreeState(
                has_staged_changes=True,
                unpushed_commits=unpushed,
                has_unstaged_changes=has_unstaged,
                staged_diff=self._repo.staged_diff(),
                changed_files=self._repo.changed_files(),
            )
            return tree, transition(current=state, to=PushState.STAGED)

        if request.summarize_unpushed:
            diff = self._unpushed_diff()
            if diff.strip():
                self._echo("Found unpushed commits")
                tree = WorkingTreeState(
                    has_staged_changes=False,
                    unpushed_commits=unpushed,
                    has_unstaged_changes=has_unstaged,
                    unpushed_diff=diff,
                )
                return tree, transition(current=state, to=PushState.UNPUSHED_ONLY)
        elif unpushed:
            tree = WorkingTreeState(
                has_staged_changes=False,
                unpushed_commits=unpushed,
                has_unstaged_changes=has_unstaged,
            )
            return tree, transition(current=state, to=PushState.UNPUSHED_ONLY)

        transition(current=state, to=PushState.NO_CHANGES)
        if has_unstaged:
            raise NoStagedChangesError()
        raise NoChangesError()

    def _unpushed_diff(self) -> str:
        try:
            return self._repo.unpushed_diff()
        except VcsQueryError as e:
            # No HEAD to diff from an empty tree, or a dangling upstream.
            logger.info(
                "Unpushed diff unavailable; using working tree diff", extra={"error": str(e)}
            )
            return self._repo.all_diff()

    def _push(self) -> PushOutcome:
        self._echo("Pushing to remote...")
        try:
            self._repo.push()
            return PushOutcome(pushed=True)
        except VcsMutationError as plain:
            logger.info("Plain push failed; retrying with upstream", extra={"error": str(plain)})
            try:
                self._repo.push_set_upstream()
            except VcsMutationError as upstream:
                raise PushError(plain=plain, upstream=upstream) from upstream
            return PushOutcome(pushed=True, used_set_upstream=True)

    def _create_ticket(
        self, tickets: TicketService, message: str
    ) -> tuple[TicketRecord | None, str | None]:
        self._echo("")
        self._echo("Creating ticket...")
        try:
            title = tickets.create_with_title(message)
            key = ticket_key_from_title(title)
            record = TicketRecord(key=key, title=title, url=tickets.issue_url(key))
        except Exception as e:
            # The push already succeeded; a ticket failure must not change the outcome.
            logger.warning("Ticket creation failed", extra={"error": str(e)}, exc_info=True)
            self._echo(f"Warning: failed to create ticket: {e}")
            return None, str(e)

        self._echo(f"Ticket created: {record.title}")
        self._echo(record.url)
        return record, None

    def _abort(
        self,
        state: PushState,
        tree: WorkingTreeState,
        proposal: CommitProposal | None,
        *,
        invalid: bool = False,
    ) -> PushResult:
        state = transition(current=state, to=PushState.ABORTED)
        logger.info("Run aborted by user", extra={"invalid_input": invalid})
        return PushResult(
            state=state,
            proposal=proposal,
            unpushed_commits=tree.unpushed_commits,
        )

    def _show_unpushed(self, commits: Sequence[UnpushedCommit]) -> None:
        self._echo(f"Found {len(commits)} existing unpushed commit(s):")
        for commit in commits:
            self._echo(f"   * {commit}")
        self._echo("")

    def _show_proposal(self, proposal: CommitProposal) -> None:
        self._echo("")
        self._echo(RULE)
        self._echo("Generated commit message:")
        self._echo("")
        for line in proposal.text.splitlines():
            self._echo(f"   {line}")
        self._echo("")
        self._echo(RULE)
        self._echo("")
