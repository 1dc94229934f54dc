"""
RoomAnnotator and PanoramaGraph tests.
"""

import pytest

from core.annotator import PanoramaGraph, RoomAnnotator
from core.errors import ErrorCode
from core.models import Floor, PanoramaCategory, Panorama, RoomType, StackType, TourGraph
from exceptions import InvalidAnnotationError
from tests.factories.model_factories import make_asset, make_pano, make_stack


@pytest.fixture
def stacks():
    return [
        make_stack("s1", [make_asset("a1")]),
        make_stack("s2", [make_asset("a2")]),
        make_stack("p1", [make_pano("pa1")], stack_type=StackType.PANO360),
        make_stack("p2", [make_pano("pa2")], stack_type=StackType.PANO360),
        make_stack("p3", [make_pano("pa3")], stack_type=StackType.PANO360),
    ]


@pytest.fixture
def loaded(collection, stacks):
    collection.replace([a for s in stacks for a in s.assets], stacks)
    return collection


@pytest.fixture
def annotator(state, loaded):
    return RoomAnnotator(state, loaded)


@pytest.fixture
def graph(state, loaded):
    return PanoramaGraph(state, loaded)


class TestRoomAnnotator:

    def test_set_room_type(self, annotator, loaded):
        assert annotator.set_room_type("s1", RoomType.KUECHE) is True
        assert loaded.get_stack("s1").room_type is RoomType.KUECHE

    def test_set_room_type_by_label(self, annotator, loaded):
        annotator.set_room_type("s1", "Wohnzimmer")
        assert loaded.get_stack("s1").room_type is RoomType.WOHNZIMMER

    def test_set_room_type_by_member_name(self, annotator, loaded):
        annotator.set_room_type("s1", "kueche")
        assert loaded.get_stack("s1").room_type is RoomType.KUECHE

    def test_invalid_room_type_rejected(self, annotator, loaded):
        with pytest.raises(InvalidAnnotationError) as exc_info:
            annotator.set_room_type("s1", "Ballsaal")
        assert exc_info.value.error_code is ErrorCode.INVALID_ROOM_TYPE
        assert loaded.get_stack("s1").room_type is None

    def test_unknown_stack_rejected(self, annotator):
        with pytest.raises(InvalidAnnotationError) as exc_info:
            annotator.set_room_type("nope", RoomType.FLUR)
        assert exc_info.value.error_code is ErrorCode.UNKNOWN_STACK

    def test_clear_room_type(self, annotator, loaded):
        annotator.set_room_type("s1", RoomType.FLUR)
        annotator.clear_room_type("s1")
        assert loaded.get_stack("s1").room_type is None

    def test_comment_trimmed_and_blank_cleared(self, annotator, loaded):
        annotator.set_comment("s1", "  Fenster aufhellen ")
        assert loaded.get_stack("s1").comment == "Fenster aufhellen"
        annotator.set_comment("s1", "   ")
        assert loaded.get_stack("s1").comment is None

    def test_unassigned_stacks(self, annotator):
        annotator.set_room_type("s1", RoomType.FLUR)
        assert annotator.unassigned_stacks() == ["s2", "p1", "p2", "p3"]

    def test_locked_is_silent_noop(self, annotator, state, loaded):
        state.locked = True
        assert annotator.set_room_type("s1", RoomType.FLUR) is False
        assert annotator.set_comment("s1", "x") is False
        assert annotator.clear_room_type("s1") is False
        assert loaded.get_stack("s1").room_type is None

    def test_locked_ignores_invalid_input(self, annotator, state):
        state.locked = True
        assert annotator.set_room_type("nope", "Ballsaal") is False

    def test_reapply_after_rebuild(self, annotator):
        annotator.set_room_type("s1", RoomType.BALKON)
        annotator.set_comment("s1", "Geländer")
        rebuilt = [make_stack("s1", [make_asset("a1")]), make_stack("s9", [make_asset("a9")])]
        annotator.reapply(rebuilt)
        assert rebuilt[0].room_type is RoomType.BALKON
        assert rebuilt[0].comment == "Geländer"
        assert rebuilt[1].room_type is None


class TestPanoramaNodes:

    def test_add_panorama(self, graph):
        pano = graph.add_panorama("pa1", name="Wohnzimmer 360")
        assert pano.panorama_id == "pano-pa1"
        assert pano.category == PanoramaCategory.INTERIOR
        assert pano.floor == Floor.EG

    def test_add_non_panorama_asset_rejected(self, graph):
        with pytest.raises(InvalidAnnotationError):
            graph.add_panorama("a1")

    def test_duplicate_id_rejected(self, graph):
        graph.add_panorama("pa1")
        with pytest.raises(InvalidAnnotationError):
            graph.add_panorama("pa1")

    def test_detect_panoramas(self, graph):
        graph.add_panorama("pa1")
        created = graph.detect_panoramas()
        assert sorted(p.asset_id for p in created) == ["pa2", "pa3"]
        assert graph.detect_panoramas() == []

    def test_category_floor_and_name(self, graph):
        graph.add_panorama("pa1")
        graph.set_category("pano-pa1", "Drohne 360° (hoch)")
        graph.set_floor("pano-pa1", Floor.OG)
        graph.rename("pano-pa1", "Dachterrasse")
        pano = graph.get("pano-pa1")
        assert pano.category == PanoramaCategory.DRONE_HIGH
        assert pano.floor == Floor.OG
        assert pano.name == "Dachterrasse"

    def test_invalid_floor_rejected(self, graph):
        graph.add_panorama("pa1")
        with pytest.raises(InvalidAnnotationError):
            graph.set_floor("pano-pa1", "5. OG")

    def test_remove_drops_edges_and_start(self, graph):
        graph.detect_panoramas()
        graph.connect("pano-pa1", "pano-pa2")
        graph.set_start_panorama("pano-pa1")
        graph.remove_panorama("pano-pa1")
        assert graph.get("pano-pa2").connections == set()
        assert graph.start_panorama_id is None


class TestPanoramaEdges:

    @pytest.fixture(autouse=True)
    def nodes(self, graph):
        graph.detect_panoramas()

    def test_connect_is_symmetric(self, graph):
        graph.connect("pano-pa1", "pano-pa2")
        assert "pano-pa2" in graph.get("pano-pa1").connections
        assert "pano-pa1" in graph.get("pano-pa2").connections

    def test_self_loop_rejected(self, graph):
        with pytest.raises(InvalidAnnotationError) as exc_info:
            graph.connect("pano-pa1", "pano-pa1")
        assert exc_info.value.error_code is ErrorCode.INVALID_CONNECTION

    def test_unknown_endpoint_rejected(self, graph):
        with pytest.raises(InvalidAnnotationError):
            graph.connect("pano-pa1", "pano-missing")
        assert graph.get("pano-pa1").connections == set()

    def test_disconnect_is_symmetric(self, graph):
        graph.connect("pano-pa1", "pano-pa2")
        graph.disconnect("pano-pa2", "pano-pa1")
        assert graph.get("pano-pa1").connections == set()
        assert graph.get("pano-pa2").connections == set()

    def test_suggest_connections_chains_floor(self, graph):
        assert graph.suggest_connections(Floor.EG) == 2
        assert graph.suggest_connections(Floor.EG) == 0
        assert graph.get("pano-pa2").connections == {"pano-pa1", "pano-pa3"}

    def test_start_panorama_must_exist(self, graph):
        with pytest.raises(InvalidAnnotationError) as exc_info:
            graph.set_start_panorama("pano-missing")
        assert exc_info.value.error_code is ErrorCode.UNKNOWN_PANORAMA
        graph.set_start_panorama("pano-pa2")
        assert graph.start_panorama_id == "pano-pa2"

    def test_floorplan_must_be_known_asset(self, graph):
        with pytest.raises(InvalidAnnotationError):
            graph.set_floorplan_asset("unknown")
        graph.set_floorplan_asset("a1")
        assert graph.floorplan_asset_id == "a1"
        graph.set_floorplan_asset(None)
        assert graph.floorplan_asset_id is None

    def test_locked_is_silent_noop(self, graph, state):
        state.locked = True
        assert graph.connect("pano-pa1", "pano-pa2") is False
        assert graph.add_panorama("pa1") is None
        assert graph.detect_panoramas() == []
        assert graph.get("pano-pa1").connections == set()


class TestTourSerialization:

    def test_empty_graph_serializes_to_none(self, graph):
        assert graph.serialize() is None

    def test_serialize_round_trip_through_seed(self, graph, state, loaded):
        graph.detect_panoramas()
        graph.connect("pano-pa1", "pano-pa3")
        graph.set_start_panorama("pano-pa3")
        tour = graph.serialize()

        other = PanoramaGraph(state, loaded)
        other.seed(tour)
        assert other.serialize().model_dump() == tour.model_dump()

    def test_seed_repairs_graph(self, graph):
        tour = TourGraph(
            panoramas=[
                Panorama(panorama_id="x", asset_id="pa1", connections={"x", "y", "ghost"}),
                Panorama(panorama_id="y", asset_id="pa2"),
            ],
            start_panorama_id="ghost",
        )
        graph.seed(tour)
        assert graph.get("x").connections == {"y"}
        assert graph.get("y").connections == {"x"}
        assert graph.start_panorama_id is None

    def test_seed_none_clears(self, graph):
        graph.detect_panoramas()
        graph.seed(None)
        assert graph.panoramas == []
