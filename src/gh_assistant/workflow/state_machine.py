from __future__ import annotations

from enum import Enum


class PushState(str, Enum):
    IDLE = "idle"
    INSPECTING = "inspecting"
    STAGED = "staged"
    UNPUSHED_ONLY = "unpushed_only"
    NO_CHANGES = "no_changes"
    GENERATING = "generating"
    CONFIRMING = "confirming"
    COMMITTING = "committing"
    PUSHING = "pushing"
    TICKET_CREATION = "ticket_creation"
    DONE = "done"
    ABORTED = "aborted"


ALLOWED_TRANSITIONS: dict[PushState, set[PushState]] = {
    PushState.IDLE: {PushState.INSPECTING},
    PushState.INSPECTING: {
        PushState.STAGED,
        PushState.UNPUSHED_ONLY,
        PushState.NO_CHANGES,
    },
    PushState.STAGED: {PushState.GENERATING},
    # Unpushed commits are either pushed as-is (push confirmation only) or,
    # when summarizing, described by a freshly generated message.
    PushState.UNPUSHED_ONLY: {PushState.CONFIRMING, PushState.GENERATING},
    PushState.NO_CHANGES: set(),
    PushState.GENERATING: {PushState.CONFIRMING},
    PushState.CONFIRMING: {PushState.COMMITTING, PushState.PUSHING, PushState.ABORTED},
    PushState.COMMITTING: {PushState.PUSHING},
    PushState.PUSHING: {PushState.TICKET_CREATION, PushState.DONE},
    PushState.TICKET_CREATION: {PushState.DONE},
    PushState.DONE: set(),
    PushState.ABORTED: set(),
}


class IllegalTransitionError(ValueError):
    pass


def transition(*, current: PushState, to: PushState) -> PushState:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to
