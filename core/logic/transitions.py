"""
Step Transition Logic for the Workflow.

Contains business rules for valid step transitions.
Separated from data models for clean architecture.

State machine:
    Unlocked{step 1..4} -> Locked (absorbing)

    - Forward: one step at a time, only while unlocked
    - Back: to any earlier step, only while unlocked
    - Locked: no transition of any kind

Exports:
    can_advance: Check if the workflow may move to the next step
    can_go_back: Check if the workflow may move to the previous step
    can_jump_to_step: Check if a user-selected step is reachable
    can_redirect_to_step: Check if an internal redirect is allowed
    get_reachable_steps: Steps reachable from the current one
    is_terminal: Check if the workflow is in its absorbing state

Dependencies:
    core.models.enums: WorkflowStep
"""

from typing import List

from ..models.enums import WorkflowStep


FIRST_STEP = WorkflowStep.UPLOAD.value
LAST_STEP = WorkflowStep.REVIEW.value


def _is_valid_step(step: int) -> bool:
    return isinstance(step, int) and FIRST_STEP <= step <= LAST_STEP


def can_advance(current_step: int, locked: bool) -> bool:
    """
    Check if the workflow can move forward one step.

    Args:
        current_step: Current step (1..4)
        locked: Whether the job is locked

    Returns:
        True if unlocked and not on the last step
    """
    if locked:
        return False
    return _is_valid_step(current_step) and current_step < LAST_STEP


def can_go_back(current_step: int, locked: bool) -> bool:
    """
    Check if the workflow can move back one step.

    Args:
        current_step: Current step (1..4)
        locked: Whether the job is locked

    Returns:
        True if unlocked and not on the first step
    """
    if locked:
        return False
    return _is_valid_step(current_step) and current_step > FIRST_STEP


def can_jump_to_step(current_step: int, target_step: int, locked: bool) -> bool:
    """
    Check if a user-selected step is reachable from the current step.

    Any earlier step is reachable. The next step is reachable with no
    further precondition. Everything else (the current step itself,
    steps further ahead, out-of-range values) is rejected.

    Args:
        current_step: Current step (1..4)
        target_step: Requested step
        locked: Whether the job is locked

    Returns:
        True if the jump is allowed, False otherwise
    """
    if locked:
        return False
    if not (_is_valid_step(current_step) and _is_valid_step(target_step)):
        return False

    if target_step < current_step:
        return True
    return target_step == current_step + 1


def can_redirect_to_step(target_step: int, locked: bool) -> bool:
    """
    Check if an internal redirect (e.g. lock validation failure) is allowed.

    Redirects are not bound by the one-step-forward rule but still
    never move a locked workflow.
    """
    return not locked and _is_valid_step(target_step)


def get_reachable_steps(current_step: int, locked: bool) -> List[int]:
    """
    Get the steps a user can select from the current step.

    Returns:
        Sorted list of reachable steps (empty when locked)
    """
    return [
        step.value for step in WorkflowStep
        if can_jump_to_step(current_step, step.value, locked)
    ]


def is_terminal(locked: bool) -> bool:
    """
    Check if the workflow is in its absorbing state.

    Args:
        locked: Whether the job is locked

    Returns:
        True once the job has been locked
    """
    return bool(locked)
