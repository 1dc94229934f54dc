"""
End-to-end workflow scenarios on the in-memory backend.
"""

import pytest

from core.models import RoomType, StackType
from core.workflow_controller import WorkflowController
from exceptions import UnsupportedAssetError, ValidationError
from tests.factories.model_factories import at, make_asset, make_stack, make_upload


class TestScenarios:

    def test_a_three_frames_within_two_seconds_make_bracket3(self, controller):
        uploads = [make_upload(f"DSC_000{i}.jpg", captured_at=at(i * 0.9)) for i in range(3)]
        controller.ingestion.submit_batch(uploads)

        stacks = controller.collection.stacks
        assert len(stacks) == 1
        assert stacks[0].stack_type == StackType.BRACKET3
        assert stacks[0].size == 3

    def test_b_single_360_upload_is_panorama(self, controller):
        controller.ingestion.submit_batch([make_upload("PANO_0001.jpg", is_360=True)])

        stacks = controller.collection.stacks
        assert len(stacks) == 1
        assert stacks[0].stack_type == StackType.PANO360
        assert stacks[0].size == 1

        created = controller.panoramas.detect_panoramas()
        assert [p.asset_id for p in created] == stacks[0].asset_ids

    def test_c_blank_room_type_blocks_lock(self, controller, backend):
        backend.add_server_stack("job-test", make_stack("k", [make_asset("k1")], room_type="Küche"))
        backend.add_server_stack("job-test", make_stack("e", [make_asset("e1")], room_type=""))
        controller.ingestion.refresh()
        for _ in range(3):
            controller.advance_step()

        with pytest.raises(ValidationError) as exc_info:
            controller.lock()

        assert exc_info.value.count == 1
        assert exc_info.value.offending_stack_ids == ["e"]
        assert controller.state.current_step == 2
        assert controller.state.locked is False

    def test_d_lock_then_comment_is_noop(self, controller):
        controller.ingestion.submit_batch([make_upload("a.jpg"), make_upload("b.jpg")])
        for stack in controller.collection.stacks:
            controller.annotator.set_room_type(stack.stack_id, RoomType.SCHLAFZIMMER)

        result = controller.lock()
        assert result.locked is True
        assert controller.state.locked is True

        stack_id = controller.collection.stacks[0].stack_id
        assert controller.annotator.set_comment(stack_id, "zu spät") is False
        assert controller.collection.get_stack(stack_id).comment is None

    def test_e_only_unsupported_files(self, controller, backend):
        version = controller.collection.version
        with pytest.raises(UnsupportedAssetError):
            controller.ingestion.submit_batch([make_upload("a.pdf"), make_upload("b.zip")])

        assert controller.collection.version == version
        assert controller.collection.assets == []
        assert controller.state.current_step == 1
        assert backend.upload_calls == 0


class TestLockMonotonicity:

    def test_nothing_changes_after_lock(self, controller):
        controller.ingestion.submit_batch([make_upload("a.jpg"), make_upload("p.jpg", is_360=True)])
        for stack in controller.collection.stacks:
            controller.annotator.set_room_type(stack.stack_id, RoomType.FLUR)
        controller.panoramas.detect_panoramas()
        controller.lock()
        before = controller.snapshot().model_dump(exclude={'advisories'})

        stack_id = controller.collection.stacks[0].stack_id
        controller.annotator.set_room_type(stack_id, RoomType.GARTEN)
        controller.directives.select_editing_style("D")
        controller.directives.set_retouch("addFireplace", True)
        controller.panoramas.rename(controller.panoramas.panoramas[0].panorama_id, "neu")
        assert controller.ingestion.submit_batch([make_upload("c.jpg")]) is None

        assert controller.snapshot().model_dump(exclude={'advisories'}) == before

    def test_reconciliation_equals_fetch(self, controller, backend):
        controller.ingestion.submit_batch([make_upload("a.jpg"), make_upload("b.mp4")])
        snapshot = backend.list_stacks("job-test")
        assert sorted(a.asset_id for a in controller.collection.assets) == sorted(
            a.asset_id for a in snapshot.all_assets
        )

    def test_locked_job_reloads_with_its_annotations(self, controller, backend, app_config):
        controller.ingestion.submit_batch([
            make_upload("a.jpg"),
            make_upload("b.jpg"),
            *[make_upload(f"br_{i}.jpg", captured_at=at(i * 0.5)) for i in range(3)],
        ])
        for stack in controller.collection.stacks:
            controller.annotator.set_room_type(stack.stack_id, RoomType.KUECHE)
            controller.annotator.set_comment(stack.stack_id, "hell")
        controller.lock()
        before = [
            (s.stack_id, s.asset_ids, s.stack_type, s.room_type, s.comment)
            for s in controller.collection.stacks
        ]

        reloaded = WorkflowController("job-test", backend, backend, backend, config=app_config)
        reloaded.load()
        try:
            after = [
                (s.stack_id, s.asset_ids, s.stack_type, s.room_type, s.comment)
                for s in reloaded.collection.stacks
            ]
            assert reloaded.state.locked is True
            assert after == before
            assert reloaded.lock_gate.find_unassigned() == []
            assert backend.list_stacks("job-test").unsorted_assets == []
        finally:
            reloaded.close()

    def test_refresh_after_lock_keeps_collections(self, controller, backend):
        controller.ingestion.submit_batch([make_upload("a.jpg")])
        controller.annotator.set_room_type(controller.collection.stacks[0].stack_id, RoomType.FLUR)
        controller.lock()
        version = controller.collection.version
        calls = backend.list_calls

        backend.add_assets("job-test", [make_asset("late")])
        assert controller.ingestion.refresh() == 1

        assert controller.collection.version == version
        assert backend.list_calls == calls
        assert not controller.collection.has_asset("late")
