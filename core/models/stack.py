# ============================================================================
# STACK MODELS
# ============================================================================
# STATUS: Core - Production unit handed to the editing team
# PURPOSE: Ordered asset group with room annotation, plus the Stacks-fetch snapshot
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Stack, StackSnapshot
# DEPENDENCIES: pydantic, core.models.asset, core.models.enums
# ============================================================================
"""
Stack Models.

A Stack is an ordered group of Assets (a single frame, an exposure
bracket, a video or a 360° panorama) that the editing team processes as
one unit. Room type and comment are the only fields the user edits.

StackSnapshot is the authoritative answer of a Stacks-fetch: the stacks
the server has already grouped plus the assets it has not.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .asset import Asset
from .enums import RoomType, StackType


class Stack(BaseModel):
    """
    Group of assets processed as one production unit.

    room_type must be set on every stack before the job can be locked.
    """

    model_config = ConfigDict(validate_assignment=True)

    stack_id: str = Field(..., min_length=1, description="Server id or deterministic engine id (stk-...)")
    assets: List[Asset] = Field(..., min_length=1, description="Member assets in capture order")
    room_type: Optional[RoomType] = Field(default=None, description="Room annotation, required before lock")
    stack_type: StackType = Field(default=StackType.SINGLE, description="Stack classification")
    comment: Optional[str] = Field(default=None, description="Free-text note for the editor")
    sequence_index: int = Field(default=0, ge=0, description="Position in the displayed collection")

    @field_validator("room_type", mode="before")
    @classmethod
    def blank_room_type_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def asset_ids(self) -> List[str]:
        return [asset.asset_id for asset in self.assets]

    @property
    def size(self) -> int:
        return len(self.assets)

    @property
    def has_room_type(self) -> bool:
        return self.room_type is not None


class StackSnapshot(BaseModel):
    """
    Authoritative result of a Stacks-fetch.

    Local collections are replaced wholesale from this snapshot; they are
    never merged with what was held before.
    """

    stacks: List[Stack] = Field(default_factory=list, description="Server-grouped stacks in server order")
    unsorted_assets: List[Asset] = Field(default_factory=list, description="Assets the server has not grouped")

    @property
    def all_assets(self) -> List[Asset]:
        assets = [asset for stack in self.stacks for asset in stack.assets]
        assets.extend(self.unsorted_assets)
        return assets
