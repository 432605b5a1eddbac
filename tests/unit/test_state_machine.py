import pytest

from gh_assistant.workflow.state_machine import (
    ALLOWED_TRANSITIONS,
    IllegalTransitionError,
    PushState,
    transition,
)


def test_every_state_has_a_transition_entry() -> None:
    assert set(ALLOWED_TRANSITIONS) == set(PushState)


@pytest.mark.parametrize(
    "path",
    [
        # Staged changes on a new branch.
        [
            PushState.IDLE,
            PushState.INSPECTING,
            PushState.STAGED,
            PushState.GENERATING,
            PushState.CONFIRMING,
            PushState.COMMITTING,
            PushState.PUSHING,
            PushState.TICKET_CREATION,
            PushState.DONE,
        ],
        # Existing commits only.
        [
            PushState.IDLE,
            PushState.INSPECTING,
            PushState.UNPUSHED_ONLY,
            PushState.CONFIRMING,
            PushState.PUSHING,
            PushState.DONE,
        ],
        # Summarized unpushed commits.
        [
            PushState.IDLE,
            PushState.INSPECTING,
            PushState.UNPUSHED_ONLY,
            PushState.GENERATING,
            PushState.CONFIRMING,
            PushState.PUSHING,
            PushState.DONE,
        ],
        # Rejected.
        [
            PushState.IDLE,
            PushState.INSPECTING,
            PushState.STAGED,
            PushState.GENERATING,
            PushState.CONFIRMING,
            PushState.ABORTED,
        ],
    ],
)
def test_valid_paths(path: list[PushState]) -> None:
    state = path[0]
    for nxt in path[1:]:
        state = transition(current=state, to=nxt)
    assert state == path[-1]


@pytest.mark.parametrize(
    ("current", "to"),
    [
        (PushState.IDLE, PushState.PUSHING),
        (PushState.STAGED, PushState.COMMITTING),
        (PushState.GENERATING, PushState.COMMITTING),
        (PushState.COMMITTING, PushState.ABORTED),
        (PushState.PUSHING, PushState.COMMITTING),
        (PushState.DONE, PushState.IDLE),
        (PushState.ABORTED, PushState.PUSHING),
        (PushState.NO_CHANGES, PushState.GENERATING),
    ],
)
def test_illegal_transitions(current: PushState, to: PushState) -> None:
    with pytest.raises(IllegalTransitionError):
        transition(current=current, to=to)


@pytest.mark.parametrize("terminal", [PushState.NO_CHANGES, PushState.DONE, PushState.ABORTED])
def test_terminal_states(terminal: PushState) -> None:
    assert ALLOWED_TRANSITIONS[terminal] == set()
