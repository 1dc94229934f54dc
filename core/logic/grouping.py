"""
Stack Grouping Engine.

Pure, deterministic partition of uploaded assets into production stacks.

Rules:
    - Video assets become a size-1 video stack
    - 360° assets become a size-1 pano360 stack
    - Remaining stills are sorted by (captured_at, name, asset_id) and
      clustered by adjacency: a frame joins the running cluster when its
      capture gap to the previous frame is within the bracket window and
      both frames share a scene signature (media type, known dimensions)
    - Cluster of 1 -> single, 3 -> bracket3, 5 -> bracket5; other sizes
      keep one bracket of the largest fitting width (the declared job
      bracket width when it fits) and fold the remainder into singles

The same asset set produces the same partition regardless of input
order. Assets are never mutated. Any failure inside the engine is a
defect and surfaces as ContractViolationError.

Exports:
    group_assets: Partition assets into stacks
    classify_stack: Stack type for a server-grouped asset list
    stack_id_for: Deterministic id for an ordered member list
    split_cluster: Cluster size -> stack sizes

Dependencies:
    core.models: Asset, Stack, StackType
    config.defaults: IngestionDefaults
"""

import hashlib
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from config.defaults import IngestionDefaults
from exceptions import ContractViolationError
from util_logger import LoggerFactory, ComponentType
from ..models.asset import Asset
from ..models.enums import StackType
from ..models.stack import Stack


logger = LoggerFactory.create_logger(ComponentType.ENGINE, "StackGrouping")

_BRACKET_TYPES = {
    3: StackType.BRACKET3,
    5: StackType.BRACKET5,
}


def stack_id_for(asset_ids: Sequence[str]) -> str:
    """
    Generate a deterministic stack id from ordered member asset ids.

    Examples:
        >>> stack_id_for(["img-1", "img-2", "img-3"])
        'stk-...'  # 16 hex chars, stable across runs
    """
    composite = "|".join(asset_ids)
    return f"stk-{hashlib.sha256(composite.encode()).hexdigest()[:16]}"


def _epoch(captured_at: Optional[datetime]) -> Optional[float]:
    # Naive timestamps are treated as UTC so aware and naive values compare
    if captured_at is None:
        return None
    if captured_at.tzinfo is None:
        captured_at = captured_at.replace(tzinfo=timezone.utc)
    return captured_at.timestamp()


def _sort_key(asset: Asset) -> Tuple:
    epoch = _epoch(asset.captured_at)
    return (epoch is None, epoch if epoch is not None else 0.0, asset.name, asset.asset_id)


def _same_scene(a: Asset, b: Asset) -> bool:
    if a.media_type.lower() != b.media_type.lower():
        return False
    if a.width and b.width and a.width != b.width:
        return False
    if a.height and b.height and a.height != b.height:
        return False
    return True


def _cluster(stills: List[Asset], window_seconds: float) -> List[List[Asset]]:
    clusters: List[List[Asset]] = []
    current: List[Asset] = []
    for asset in stills:
        if current:
            previous = current[-1]
            prev_epoch = _epoch(previous.captured_at)
            this_epoch = _epoch(asset.captured_at)
            joins = (
                prev_epoch is not None
                and this_epoch is not None
                and this_epoch - prev_epoch <= window_seconds
                and _same_scene(previous, asset)
            )
            if not joins:
                clusters.append(current)
                current = []
        current.append(asset)
    if current:
        clusters.append(current)
    return clusters


def split_cluster(
    size: int,
    bracket_size: Optional[int] = None,
    bracket_widths: Sequence[int] = IngestionDefaults.BRACKET_WIDTHS
) -> List[int]:
    """
    Split a cluster size into stack sizes.

    Args:
        size: Number of frames in the cluster
        bracket_size: Job's declared bracket width, if any
        bracket_widths: Recognized bracket widths

    Returns:
        Stack sizes summing to size

    Examples:
        >>> split_cluster(6)
        [5, 1]
        >>> split_cluster(7)
        [5, 1, 1]
        >>> split_cluster(6, bracket_size=3)
        [3, 1, 1, 1]
    """
    if size <= 0:
        raise ContractViolationError(f"Cluster size must be positive, got {size}")
    if size == 1 or size in bracket_widths:
        return [size]

    if bracket_size == 1:
        return [1] * size

    # One bracket of the largest fitting width, the rest become singles
    candidates = sorted((w for w in bracket_widths if w <= size), reverse=True)
    if bracket_size in candidates:
        candidates.remove(bracket_size)
        candidates.insert(0, bracket_size)
    if not candidates:
        return [1] * size

    width = candidates[0]
    return [width] + [1] * (size - width)


def classify_stack(assets: Sequence[Asset]) -> StackType:
    """
    Derive a stack type for a server-grouped asset list.

    Args:
        assets: Member assets in order

    Returns:
        bracket3 / bracket5 by size, video when the first asset is a
        video, pano360 when the first asset is 360°, otherwise single
    """
    if not assets:
        raise ContractViolationError("Cannot classify an empty stack")
    if len(assets) in _BRACKET_TYPES:
        return _BRACKET_TYPES[len(assets)]
    first = assets[0]
    if first.is_motion:
        return StackType.VIDEO
    if first.is_360:
        return StackType.PANO360
    return StackType.SINGLE


def _build_stack(members: List[Asset], stack_type: StackType) -> Stack:
    return Stack(
        stack_id=stack_id_for([a.asset_id for a in members]),
        assets=members,
        stack_type=stack_type,
    )


def _group(
    assets: List[Asset],
    window_seconds: float,
    bracket_size: Optional[int],
    bracket_widths: Sequence[int]
) -> List[Stack]:
    ordered = sorted(assets, key=_sort_key)

    stacks: List[Stack] = []
    stills: List[Asset] = []
    for asset in ordered:
        if asset.is_motion:
            stacks.append(_build_stack([asset], StackType.VIDEO))
        elif asset.is_360:
            stacks.append(_build_stack([asset], StackType.PANO360))
        else:
            stills.append(asset)

    for cluster in _cluster(stills, window_seconds):
        offset = 0
        for width in split_cluster(len(cluster), bracket_size, bracket_widths):
            members = cluster[offset:offset + width]
            offset += width
            stack_type = StackType.SINGLE if width == 1 else _BRACKET_TYPES[width]
            stacks.append(_build_stack(members, stack_type))

    stacks.sort(key=lambda s: _sort_key(s.assets[0]))
    return stacks


def group_assets(
    assets: Iterable[Asset],
    bracket_window_seconds: float = IngestionDefaults.BRACKET_WINDOW_SECONDS,
    bracket_size: Optional[int] = None,
    bracket_widths: Sequence[int] = IngestionDefaults.BRACKET_WIDTHS,
    start_index: int = 0
) -> List[Stack]:
    """
    Partition assets into stacks.

    Args:
        assets: Assets to group (any order)
        bracket_window_seconds: Max capture gap inside one bracket
        bracket_size: Job's declared bracket width (1, 3 or 5)
        bracket_widths: Recognized bracket widths
        start_index: sequence_index of the first returned stack

    Returns:
        Stacks ordered by their first asset's (captured_at, name, asset_id);
        every input asset appears in exactly one stack

    Raises:
        ContractViolationError: Non-Asset input, duplicate asset ids, or
            any internal inconsistency
    """
    assets = list(assets)
    for asset in assets:
        if not isinstance(asset, Asset):
            raise ContractViolationError(
                f"group_assets expects Asset instances, got {type(asset).__name__}"
            )

    asset_ids = [a.asset_id for a in assets]
    if len(set(asset_ids)) != len(asset_ids):
        raise ContractViolationError("group_assets received duplicate asset ids")

    try:
        stacks = _group(assets, bracket_window_seconds, bracket_size, bracket_widths)
    except ContractViolationError:
        raise
    except Exception as e:
        logger.error(f"Grouping engine failed on {len(assets)} assets: {e}", exc_info=True)
        raise ContractViolationError(f"Grouping engine failed: {e}") from e

    grouped_ids = [a.asset_id for s in stacks for a in s.assets]
    if sorted(grouped_ids) != sorted(asset_ids):
        raise ContractViolationError(
            f"Grouping lost or duplicated assets: {len(asset_ids)} in, {len(grouped_ids)} out"
        )

    for offset, stack in enumerate(stacks):
        stack.sequence_index = start_index + offset

    logger.debug(
        f"Grouped {len(assets)} assets into {len(stacks)} stacks",
        extra={'custom_dimensions': {'asset_count': len(assets), 'stack_count': len(stacks)}}
    )
    return stacks
