"""
Core Business Logic Package.

Contains business logic that operates on pure data models.
Separated from models to maintain clean architecture.

Exports:
    Step transitions: can_advance, can_go_back, can_jump_to_step, is_terminal
    Stack grouping: group_assets, classify_stack, stack_id_for
"""

# Step transitions
from .transitions import (
    can_advance,
    can_go_back,
    can_jump_to_step,
    can_redirect_to_step,
    get_reachable_steps,
    is_terminal
)

# Stack grouping
from .grouping import (
    group_assets,
    classify_stack,
    stack_id_for
)

__all__ = [
    # Step transitions
    'can_advance',
    'can_go_back',
    'can_jump_to_step',
    'can_redirect_to_step',
    'get_reachable_steps',
    'is_terminal',

    # Stack grouping
    'group_assets',
    'classify_stack',
    'stack_id_for'
]
