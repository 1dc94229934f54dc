"""
Stack grouping engine tests - partition, classification, determinism.
"""

import random

import pytest

from core.logic.grouping import classify_stack, group_assets, split_cluster, stack_id_for
from core.models import StackType
from exceptions import ContractViolationError
from tests.factories.model_factories import (
    at,
    make_asset,
    make_bracket,
    make_pano,
    make_video,
)


def _partition(stacks):
    return [stack.asset_ids for stack in stacks]


class TestSplitCluster:

    @pytest.mark.parametrize("size,expected", [
        (1, [1]),
        (2, [1, 1]),
        (3, [3]),
        (4, [3, 1]),
        (5, [5]),
        (6, [5, 1]),
        (7, [5, 1, 1]),
        (8, [5, 1, 1, 1]),
        (9, [5, 1, 1, 1, 1]),
        (10, [5, 1, 1, 1, 1, 1]),
    ])
    def test_default_widths(self, size, expected):
        assert split_cluster(size) == expected

    @pytest.mark.parametrize("size", [6, 8, 9, 11, 14])
    def test_remainder_folds_into_singles(self, size):
        sizes = split_cluster(size)
        assert sizes[0] == 5
        assert sizes[1:] == [1] * (size - 5)

    def test_declared_bracket_size_preferred(self):
        assert split_cluster(6, bracket_size=3) == [3, 1, 1, 1]
        assert split_cluster(7, bracket_size=5) == [5, 1, 1]

    def test_declared_width_too_wide_falls_back(self):
        assert split_cluster(4, bracket_size=5) == [3, 1]

    def test_declared_single_frame(self):
        assert split_cluster(4, bracket_size=1) == [1, 1, 1, 1]

    def test_exact_width_kept_even_when_declared_single(self):
        assert split_cluster(3, bracket_size=1) == [3]

    @pytest.mark.parametrize("size", range(1, 30))
    def test_sizes_sum_to_cluster(self, size):
        assert sum(split_cluster(size)) == size

    def test_non_positive_size_is_contract_violation(self):
        with pytest.raises(ContractViolationError):
            split_cluster(0)


class TestGroupAssets:

    def test_three_frame_bracket(self):
        stacks = group_assets(make_bracket(3))
        assert len(stacks) == 1
        assert stacks[0].stack_type == StackType.BRACKET3

    def test_five_frame_bracket(self):
        stacks = group_assets(make_bracket(5))
        assert [s.stack_type for s in stacks] == [StackType.BRACKET5]

    def test_frames_outside_window_are_singles(self):
        assets = make_bracket(3, step=10.0)
        stacks = group_assets(assets)
        assert [s.stack_type for s in stacks] == [StackType.SINGLE] * 3

    def test_window_is_configurable(self):
        assets = make_bracket(3, step=10.0)
        stacks = group_assets(assets, bracket_window_seconds=15.0)
        assert [s.stack_type for s in stacks] == [StackType.BRACKET3]

    def test_missing_capture_time_never_brackets(self):
        assets = [make_asset(f"n{i}") for i in range(3)]
        stacks = group_assets(assets)
        assert len(stacks) == 3

    def test_scene_change_breaks_bracket(self):
        a = make_asset("a", captured_at=at(0), width=6000, height=4000)
        b = make_asset("b", captured_at=at(0.5), width=6000, height=4000)
        c = make_asset("c", captured_at=at(1.0), width=4000, height=6000)
        stacks = group_assets([a, b, c])
        assert len(stacks) == 3

    def test_video_and_pano_are_their_own_stacks(self):
        video = make_video("v1", captured_at=at(0.1))
        pano = make_pano("p1", captured_at=at(0.2))
        stills = make_bracket(3, start=0.0, step=0.5, prefix="s")
        stacks = group_assets(stills + [video, pano])
        types = sorted(s.stack_type.value for s in stacks)
        assert types == ["bracket3", "pano360", "video"]

    def test_every_asset_in_exactly_one_stack(self):
        assets = make_bracket(7) + make_bracket(4, start=100) + [make_video("v"), make_pano("p")]
        stacks = group_assets(assets)
        grouped = [aid for s in stacks for aid in s.asset_ids]
        assert sorted(grouped) == sorted(a.asset_id for a in assets)

    def test_order_independent(self):
        assets = make_bracket(5) + make_bracket(3, start=50) + make_bracket(2, start=200)
        shuffled = list(assets)
        random.shuffle(shuffled)
        assert _partition(group_assets(assets)) == _partition(group_assets(shuffled))
        assert [s.stack_id for s in group_assets(assets)] == [s.stack_id for s in group_assets(shuffled)]

    def test_sequence_index_from_start_index(self):
        stacks = group_assets(make_bracket(3, step=10.0), start_index=4)
        assert [s.sequence_index for s in stacks] == [4, 5, 6]

    def test_stacks_ordered_by_capture_time(self):
        late = make_asset("late", captured_at=at(500))
        early = make_asset("early", captured_at=at(0))
        stacks = group_assets([late, early])
        assert _partition(stacks) == [["early"], ["late"]]

    def test_empty_input(self):
        assert group_assets([]) == []

    def test_inputs_not_mutated(self):
        assets = make_bracket(3)
        before = [a.model_dump() for a in assets]
        group_assets(assets)
        assert [a.model_dump() for a in assets] == before

    def test_duplicate_ids_are_contract_violation(self):
        a = make_asset("dup", captured_at=at(0))
        with pytest.raises(ContractViolationError):
            group_assets([a, a])

    def test_non_asset_is_contract_violation(self):
        with pytest.raises(ContractViolationError):
            group_assets([{"asset_id": "x"}])

    def test_declared_bracket_size_applied(self):
        stacks = group_assets(make_bracket(6), bracket_size=3)
        assert [s.stack_type for s in stacks] == [StackType.BRACKET3] + [StackType.SINGLE] * 3

    def test_uneven_cluster_keeps_first_frames_bracketed(self):
        assets = make_bracket(8, prefix="run")
        stacks = group_assets(assets)
        assert [s.stack_type for s in stacks] == [StackType.BRACKET5] + [StackType.SINGLE] * 3
        assert stacks[0].asset_ids == [f"run-{i}" for i in range(5)]
        assert [s.asset_ids for s in stacks[1:]] == [["run-5"], ["run-6"], ["run-7"]]


class TestStackIds:

    def test_deterministic(self):
        assert stack_id_for(["a", "b"]) == stack_id_for(["a", "b"])

    def test_order_sensitive(self):
        assert stack_id_for(["a", "b"]) != stack_id_for(["b", "a"])

    def test_format(self):
        sid = stack_id_for(["a"])
        assert sid.startswith("stk-")
        assert len(sid) == 20


class TestClassifyStack:

    def test_by_size(self):
        assert classify_stack(make_bracket(3)) == StackType.BRACKET3
        assert classify_stack(make_bracket(5)) == StackType.BRACKET5

    def test_by_first_asset(self):
        assert classify_stack([make_video()]) == StackType.VIDEO
        assert classify_stack([make_pano()]) == StackType.PANO360
        assert classify_stack([make_asset(), make_asset()]) == StackType.SINGLE

    def test_empty_is_contract_violation(self):
        with pytest.raises(ContractViolationError):
            classify_stack([])
