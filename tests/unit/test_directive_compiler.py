"""
DirectiveCompiler tests - single-select, retouch advisories, seeding, compile.
"""

import pytest

from core.directive_compiler import DirectiveCompiler, RETOUCH_LABELS
from core.models import (
    CompiledDirectives,
    EditingStyle,
    RetouchFlag,
    SkyStyle,
    WindowStyle,
)
from exceptions import InvalidAnnotationError
from tests.factories.model_factories import make_job_record


@pytest.fixture
def compiler(state):
    return DirectiveCompiler(state)


class TestSingleSelect:

    def test_latest_selection_wins(self, compiler):
        compiler.select_editing_style("B")
        compiler.select_editing_style(EditingStyle.D)
        assert compiler.directives.editing_style is EditingStyle.D

    def test_style_prefix_accepted(self, compiler):
        compiler.select_editing_style("styleC")
        assert compiler.directives.editing_style is EditingStyle.C

    def test_window_and_sky(self, compiler):
        compiler.select_window_style("remove-glare")
        compiler.select_sky_style(SkyStyle.SUNSET)
        d = compiler.directives
        assert d.window_style is WindowStyle.REMOVE_GLARE
        assert d.sky_style is SkyStyle.SUNSET

    def test_unknown_value_rejected(self, compiler):
        with pytest.raises(InvalidAnnotationError):
            compiler.select_sky_style("aurora")
        assert compiler.directives.sky_style is SkyStyle.NONE


class TestRetouch:

    def test_enable_returns_advisory(self, compiler):
        advisory = compiler.set_retouch(RetouchFlag.ADD_FIREPLACE, True)
        assert advisory.flag is RetouchFlag.ADD_FIREPLACE
        assert RETOUCH_LABELS[RetouchFlag.ADD_FIREPLACE] in advisory.message
        assert compiler.directives.add_fireplace is True

    def test_flags_are_independent(self, compiler):
        compiler.set_retouch("removeBins", True)
        compiler.set_retouch("neutralizeTV", True)
        compiler.set_retouch("removeBins", False)
        d = compiler.directives
        assert d.remove_bins is False
        assert d.neutralize_tv is True
        assert [a.flag for a in compiler.advisories()] == [RetouchFlag.NEUTRALIZE_TV]

    def test_disable_returns_none(self, compiler):
        assert compiler.set_retouch(RetouchFlag.OPTIMIZE_LAWN, False) is None
        assert compiler.advisories() == []

    def test_every_flag_has_a_label(self):
        assert set(RETOUCH_LABELS) == set(RetouchFlag)


class TestNotesAndDeliverables:

    def test_notes(self, compiler):
        compiler.set_notes("Bitte Himmel dezent")
        assert compiler.directives.notes == "Bitte Himmel dezent"
        compiler.set_notes(None)
        assert compiler.directives.notes == ""

    def test_deliverables_partial_update(self, compiler):
        compiler.set_deliverables(alt_texts=True)
        compiler.set_deliverables(captions=True)
        compiler.set_deliverables(alt_texts=False)
        d = compiler.directives
        assert d.deliver_alt_texts is False
        assert d.deliver_captions is True


class TestLocking:

    def test_mutators_noop_when_locked(self, compiler, state):
        state.locked = True
        assert compiler.select_editing_style("D") is False
        assert compiler.select_window_style("clear") is False
        assert compiler.select_sky_style("sunset") is False
        assert compiler.set_retouch("removeBins", True) is None
        assert compiler.set_notes("x") is False
        assert compiler.set_deliverables(alt_texts=True) is False
        d = compiler.directives
        assert d.editing_style is EditingStyle.A
        assert d.remove_bins is False
        assert d.notes == ""


class TestSeedAndCompile:

    def test_apply_defaults_from_job(self, compiler):
        job = make_job_record(
            editing_style="C",
            window_style="clear",
            sky_style="blue-sky",
            retouch_profile={"removeOutlets": True, "somethingNew": True},
            notes="Altbau",
            deliver_captions=True,
        )
        compiler.apply_defaults(job)
        d = compiler.directives
        assert d.editing_style is EditingStyle.C
        assert d.window_style is WindowStyle.CLEAR
        assert d.sky_style is SkyStyle.BLUE_SKY
        assert d.remove_outlets is True
        assert d.notes == "Altbau"
        assert d.deliver_captions is True
        assert [a.flag for a in compiler.advisories()] == [RetouchFlag.REMOVE_OUTLETS]

    def test_apply_defaults_ignores_lock(self, compiler, state):
        state.locked = True
        compiler.apply_defaults(make_job_record(editing_style="B"))
        assert compiler.directives.editing_style is EditingStyle.B

    def test_compile_is_snapshot(self, compiler):
        compiler.set_notes("vorher")
        compiled = compiler.compile()
        compiler.set_notes("nachher")
        assert isinstance(compiled, CompiledDirectives)
        assert compiled.notes == "vorher"

    def test_directives_property_returns_copy(self, compiler):
        copy = compiler.directives
        copy.notes = "changed outside"
        assert compiler.directives.notes == ""
