# ============================================================================
# ROOM & METADATA ANNOTATOR
# ============================================================================
# STATUS: Core - Step 2 of the workflow
# PURPOSE: Room type / comment per stack and the 360° tour connection graph
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: RoomAnnotator, PanoramaGraph
# DEPENDENCIES: core.models, core.collection, core.errors, core.utils, exceptions, util_logger
# ============================================================================
"""
Room & Metadata Annotator.

Records user intent only. Whether every stack is annotated is checked
exclusively by the lock gate.

Lock conflicts are a silent guard: every mutator returns False (or None)
on a locked job without changing anything. Invalid input raises
InvalidAnnotationError.

Annotation intent is kept by stack id. Stacks are rebuilt wholesale on
every refresh, so the recorded intent is re-applied to every stack whose
id survives the refresh.
"""

from typing import Any, Dict, List, Optional

from exceptions import InvalidAnnotationError
from util_logger import LoggerFactory, ComponentType
from .collection import StackCollection
from .errors import ErrorCode
from .models import (
    Floor,
    Panorama,
    PanoramaCategory,
    RoomType,
    Stack,
    StackType,
    TourGraph,
    WorkflowState,
)
from .utils import coerce_enum


class RoomAnnotator:
    """
    Attaches room type and comment to stacks.

    Usage:
        annotator = RoomAnnotator(state, collection)
        annotator.set_room_type("stk-1a2b3c4d5e6f7a8b", RoomType.KUECHE)
        annotator.set_comment("stk-1a2b3c4d5e6f7a8b", "Bitte Fenster aufhellen")
    """

    def __init__(self, state: WorkflowState, collection: StackCollection):
        self.state = state
        self.collection = collection
        self._intent: Dict[str, Dict[str, Any]] = {}
        self.logger = LoggerFactory.create_with_context(
            ComponentType.SERVICE, "RoomAnnotator", job_id=state.job_id
        )

    def _guard_locked(self, operation: str) -> bool:
        if self.state.locked:
            self.logger.debug(f"Ignoring {operation}: job is locked")
            return True
        return False

    def _require_stack(self, stack_id: str) -> None:
        if not self.collection.has_stack(stack_id):
            raise InvalidAnnotationError(
                f"Unknown stack '{stack_id}'", error_code=ErrorCode.UNKNOWN_STACK
            )

    def _record(self, stack_id: str, **changes: Any) -> None:
        self._intent.setdefault(stack_id, {}).update(changes)
        self.collection.update_stack(stack_id, **changes)

    def set_room_type(self, stack_id: str, room_type) -> bool:
        """
        Assign a room type to a stack.

        Args:
            stack_id: Stack in the current collection
            room_type: RoomType member or its label (e.g. "Küche")

        Returns:
            True if applied, False if the job is locked

        Raises:
            InvalidAnnotationError: Unknown stack or room type outside the vocabulary
        """
        if self._guard_locked("set_room_type"):
            return False
        room = coerce_enum(RoomType, room_type, "room_type", ErrorCode.INVALID_ROOM_TYPE)
        self._require_stack(stack_id)
        self._record(stack_id, room_type=room)
        self.logger.debug(f"Stack {stack_id} -> {room.value}")
        return True

    def clear_room_type(self, stack_id: str) -> bool:
        """Remove a stack's room type. Returns False if the job is locked."""
        if self._guard_locked("clear_room_type"):
            return False
        self._require_stack(stack_id)
        self._record(stack_id, room_type=None)
        return True

    def set_comment(self, stack_id: str, text: Optional[str]) -> bool:
        """Attach a free-text comment; empty text clears it."""
        if self._guard_locked("set_comment"):
            return False
        self._require_stack(stack_id)
        comment = text.strip() if text else None
        self._record(stack_id, comment=comment or None)
        return True

    def unassigned_stacks(self) -> List[str]:
        """Ids of stacks without a room type, in display order."""
        return [stack.stack_id for stack in self.collection.stacks if stack.room_type is None]

    def reapply(self, stacks: List[Stack]) -> List[Stack]:
        """
        Re-apply recorded intent to freshly rebuilt stacks.

        Intent for ids that did not survive is kept; an id can reappear
        after a later refresh.
        """
        for stack in stacks:
            changes = self._intent.get(stack.stack_id)
            if not changes:
                continue
            for field_name, value in changes.items():
                setattr(stack, field_name, value)
        return stacks


class PanoramaGraph:
    """
    Undirected connection graph between 360° panoramas.

    Integrity rules:
        - Connections are symmetric (A lists B iff B lists A)
        - No panorama connects to itself
        - The start panorama always resolves to an existing node
    """

    DEFAULT_CATEGORY = PanoramaCategory.INTERIOR
    DEFAULT_FLOOR = Floor.EG

    def __init__(self, state: WorkflowState, collection: StackCollection):
        self.state = state
        self.collection = collection
        self._panoramas: Dict[str, Panorama] = {}
        self._start_id: Optional[str] = None
        self._floorplan_asset_id: Optional[str] = None
        self.logger = LoggerFactory.create_with_context(
            ComponentType.SERVICE, "PanoramaGraph", job_id=state.job_id
        )

    # ========================================================================
    # QUERIES
    # ========================================================================

    @property
    def panoramas(self) -> List[Panorama]:
        return [p.model_copy(deep=True) for p in self._panoramas.values()]

    @property
    def start_panorama_id(self) -> Optional[str]:
        return self._start_id

    @property
    def floorplan_asset_id(self) -> Optional[str]:
        return self._floorplan_asset_id

    def get(self, panorama_id: str) -> Optional[Panorama]:
        panorama = self._panoramas.get(panorama_id)
        return panorama.model_copy(deep=True) if panorama else None

    def _require(self, panorama_id: str) -> Panorama:
        panorama = self._panoramas.get(panorama_id)
        if panorama is None:
            raise InvalidAnnotationError(
                f"Unknown panorama '{panorama_id}'", error_code=ErrorCode.UNKNOWN_PANORAMA
            )
        return panorama

    def _guard_locked(self, operation: str) -> bool:
        if self.state.locked:
            self.logger.debug(f"Ignoring {operation}: job is locked")
            return True
        return False

    # ========================================================================
    # NODES
    # ========================================================================

    def add_panorama(
        self,
        asset_id: str,
        name: Optional[str] = None,
        category=DEFAULT_CATEGORY,
        floor=DEFAULT_FLOOR,
        panorama_id: Optional[str] = None
    ) -> Optional[Panorama]:
        """
        Add a tour node for a 360° asset.

        Args:
            asset_id: Asset that belongs to a pano360 stack
            name: Display name (defaults to the asset's file name)
            category: PanoramaCategory member or label
            floor: Floor member or label
            panorama_id: Explicit id (defaults to pano-{asset_id})

        Returns:
            The new Panorama, or None if the job is locked

        Raises:
            InvalidAnnotationError: Asset is not a panorama, or the id is taken
        """
        if self._guard_locked("add_panorama"):
            return None

        stack = self.collection.stack_for_asset(asset_id)
        if stack is None or stack.stack_type != StackType.PANO360:
            raise InvalidAnnotationError(f"Asset '{asset_id}' is not a 360° panorama")

        panorama_id = panorama_id or f"pano-{asset_id}"
        if panorama_id in self._panoramas:
            raise InvalidAnnotationError(f"Panorama '{panorama_id}' already exists")

        asset = next(a for a in stack.assets if a.asset_id == asset_id)
        panorama = Panorama(
            panorama_id=panorama_id,
            asset_id=asset_id,
            name=name if name is not None else asset.name,
            category=coerce_enum(PanoramaCategory, category, "category"),
            floor=coerce_enum(Floor, floor, "floor"),
        )
        self._panoramas[panorama_id] = panorama
        self.logger.debug(f"Added panorama {panorama_id}")
        return panorama.model_copy(deep=True)

    def remove_panorama(self, panorama_id: str) -> bool:
        """Remove a node together with its edges."""
        if self._guard_locked("remove_panorama"):
            return False
        self._require(panorama_id)
        del self._panoramas[panorama_id]
        for other in self._panoramas.values():
            other.connections.discard(panorama_id)
        if self._start_id == panorama_id:
            self._start_id = None
        return True

    def detect_panoramas(self) -> List[Panorama]:
        """
        Create a node for every pano360 asset not yet in the graph.

        New nodes get the default category and floor.

        Returns:
            Newly created panoramas (empty when locked)
        """
        if self._guard_locked("detect_panoramas"):
            return []
        known_assets = {p.asset_id for p in self._panoramas.values()}
        created = []
        for stack in self.collection.stacks:
            if stack.stack_type != StackType.PANO360:
                continue
            for asset in stack.assets:
                if asset.asset_id in known_assets or f"pano-{asset.asset_id}" in self._panoramas:
                    continue
                created.append(self.add_panorama(asset.asset_id))
                known_assets.add(asset.asset_id)
        if created:
            self.logger.info(f"Detected {len(created)} new panoramas")
        return created

    def set_category(self, panorama_id: str, category) -> bool:
        if self._guard_locked("set_category"):
            return False
        self._require(panorama_id).category = coerce_enum(PanoramaCategory, category, "category")
        return True

    def set_floor(self, panorama_id: str, floor) -> bool:
        if self._guard_locked("set_floor"):
            return False
        self._require(panorama_id).floor = coerce_enum(Floor, floor, "floor")
        return True

    def rename(self, panorama_id: str, name: str) -> bool:
        if self._guard_locked("rename"):
            return False
        self._require(panorama_id).name = name
        return True

    # ========================================================================
    # EDGES
    # ========================================================================

    def connect(self, a: str, b: str) -> bool:
        """
        Connect two panoramas in both directions.

        Raises:
            InvalidAnnotationError: Self-loop or unknown panorama
        """
        if self._guard_locked("connect"):
            return False
        if a == b:
            raise InvalidAnnotationError(
                f"Panorama '{a}' cannot connect to itself", error_code=ErrorCode.INVALID_CONNECTION
            )
        first = self._require(a)
        second = self._require(b)
        first.connections.add(b)
        second.connections.add(a)
        return True

    def disconnect(self, a: str, b: str) -> bool:
        if self._guard_locked("disconnect"):
            return False
        self._require(a).connections.discard(b)
        self._require(b).connections.discard(a)
        return True

    def suggest_connections(self, floor) -> int:
        """
        Chain the panoramas of one floor in insertion order.

        Returns:
            Number of edges that did not exist before
        """
        if self._guard_locked("suggest_connections"):
            return 0
        floor = coerce_enum(Floor, floor, "floor")
        on_floor = [p for p in self._panoramas.values() if p.floor == floor]
        added = 0
        for current, following in zip(on_floor, on_floor[1:]):
            if following.panorama_id not in current.connections:
                added += 1
            self.connect(current.panorama_id, following.panorama_id)
        return added

    # ========================================================================
    # TOUR SETTINGS
    # ========================================================================

    def set_start_panorama(self, panorama_id: str) -> bool:
        """Rejected with InvalidAnnotationError if the panorama does not exist."""
        if self._guard_locked("set_start_panorama"):
            return False
        self._require(panorama_id)
        self._start_id = panorama_id
        return True

    def set_floorplan_asset(self, asset_id: Optional[str]) -> bool:
        """Attach (or with None, detach) the floorplan image."""
        if self._guard_locked("set_floorplan_asset"):
            return False
        if asset_id is not None and not self.collection.has_asset(asset_id):
            raise InvalidAnnotationError(f"Unknown floorplan asset '{asset_id}'")
        self._floorplan_asset_id = asset_id
        return True

    # ========================================================================
    # SERIALIZATION
    # ========================================================================

    def seed(self, tour: Optional[TourGraph]) -> None:
        """
        Load a previously saved tour.

        Edges to unknown nodes and self-loops are dropped, missing reverse
        edges are added, and a start id that does not resolve is cleared.
        """
        self._panoramas = {}
        self._start_id = None
        self._floorplan_asset_id = None
        if tour is None:
            return

        for panorama in tour.panoramas:
            self._panoramas[panorama.panorama_id] = panorama.model_copy(deep=True)

        for panorama in self._panoramas.values():
            panorama.connections = {
                other for other in panorama.connections
                if other != panorama.panorama_id and other in self._panoramas
            }
        for panorama in self._panoramas.values():
            for other in panorama.connections:
                self._panoramas[other].connections.add(panorama.panorama_id)

        if tour.start_panorama_id in self._panoramas:
            self._start_id = tour.start_panorama_id
        self._floorplan_asset_id = tour.floorplan_asset_id
        self.logger.debug(f"Seeded tour with {len(self._panoramas)} panoramas")

    def serialize(self) -> Optional[TourGraph]:
        """
        Snapshot of the tour for the lock commit.

        Returns:
            TourGraph, or None when the graph has no panoramas
        """
        if not self._panoramas:
            return None
        return TourGraph(
            panoramas=self.panoramas,
            start_panorama_id=self._start_id,
            floorplan_asset_id=self._floorplan_asset_id,
        )
