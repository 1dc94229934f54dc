# ============================================================================
# EDITING DIRECTIVE COMPILER
# ============================================================================
# STATUS: Core - Step 3 of the workflow
# PURPOSE: Single-select styles, independent retouch flags, notes, deliverables
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: DirectiveCompiler, RETOUCH_LABELS
# DEPENDENCIES: core.models, core.utils, util_logger
# ============================================================================
"""
Editing Directive Compiler.

Before lock the directives are live and mutable with no retained
history. compile() produces the immutable snapshot the lock gate commits.
Enabling a retouch flag yields a non-blocking cost advisory; advisories
never block step progression.
"""

from typing import Dict, List, Optional

from util_logger import LoggerFactory, ComponentType
from .models import (
    CompiledDirectives,
    CostAdvisory,
    EditingDirectives,
    EditingStyle,
    JobRecord,
    RETOUCH_FIELDS,
    RetouchFlag,
    SkyStyle,
    WindowStyle,
    WorkflowState,
)
from .utils import coerce_enum


RETOUCH_LABELS: Dict[RetouchFlag, str] = {
    RetouchFlag.REMOVE_OUTLETS: "Störende Kabel und sichtbare Steckdosen entfernen",
    RetouchFlag.REMOVE_BINS: "Mülleimer, Wäschekörbe und Reinigungsartikel entfernen",
    RetouchFlag.REDUCE_PERSONAL_ITEMS: "Persönliche Gegenstände reduzieren",
    RetouchFlag.NEUTRALIZE_TV: "Fernsehbild neutral darstellen (schwarzer Bildschirm)",
    RetouchFlag.OPTIMIZE_LAWN: "Rasen optisch verbessern (gleichmäßiger, grüner, gepflegter)",
    RetouchFlag.ADD_FIREPLACE: "Kaminfeuer einfügen (falls Kamin vorhanden)",
}


def _advisory_for(flag: RetouchFlag) -> CostAdvisory:
    return CostAdvisory(flag=flag, message=f"'{RETOUCH_LABELS[flag]}' wird gesondert berechnet.")


def _normalize_style(value):
    # Accepts "styleA" as well as "A"
    if isinstance(value, str) and value.lower().startswith("style") and len(value) == 6:
        return value[-1].upper()
    return value


class DirectiveCompiler:
    """
    Holds the live editing directives for one job.

    Usage:
        compiler = DirectiveCompiler(state)
        compiler.select_editing_style("B")
        advisory = compiler.set_retouch(RetouchFlag.REMOVE_BINS, True)
        snapshot = compiler.compile()
    """

    def __init__(self, state: WorkflowState):
        self.state = state
        self._directives = EditingDirectives()
        self._advisories: Dict[RetouchFlag, CostAdvisory] = {}
        self.logger = LoggerFactory.create_with_context(
            ComponentType.SERVICE, "DirectiveCompiler", job_id=state.job_id
        )

    @property
    def directives(self) -> EditingDirectives:
        return self._directives.model_copy()

    def advisories(self) -> List[CostAdvisory]:
        """Advisories for the retouch flags currently enabled."""
        return list(self._advisories.values())

    def _guard_locked(self, operation: str) -> bool:
        if self.state.locked:
            self.logger.debug(f"Ignoring {operation}: job is locked")
            return True
        return False

    # ========================================================================
    # SINGLE-SELECT CATEGORIES
    # ========================================================================

    def select_editing_style(self, style) -> bool:
        if self._guard_locked("select_editing_style"):
            return False
        self._directives.editing_style = coerce_enum(EditingStyle, _normalize_style(style), "editing_style")
        return True

    def select_window_style(self, style) -> bool:
        if self._guard_locked("select_window_style"):
            return False
        self._directives.window_style = coerce_enum(WindowStyle, style, "window_style")
        return True

    def select_sky_style(self, style) -> bool:
        if self._guard_locked("select_sky_style"):
            return False
        self._directives.sky_style = coerce_enum(SkyStyle, style, "sky_style")
        return True

    # ========================================================================
    # RETOUCH FLAGS
    # ========================================================================

    def set_retouch(self, flag, enabled: bool) -> Optional[CostAdvisory]:
        """
        Toggle one retouch flag.

        Args:
            flag: RetouchFlag member or wire name (e.g. "removeBins")
            enabled: New state

        Returns:
            CostAdvisory when the flag was enabled, otherwise None
        """
        if self._guard_locked("set_retouch"):
            return None
        flag = coerce_enum(RetouchFlag, flag, "retouch flag")
        setattr(self._directives, RETOUCH_FIELDS[flag], bool(enabled))

        if not enabled:
            self._advisories.pop(flag, None)
            return None

        advisory = _advisory_for(flag)
        self._advisories[flag] = advisory
        self.logger.debug(f"Retouch flag {flag.value} enabled")
        return advisory

    # ========================================================================
    # FREE TEXT AND DELIVERABLES
    # ========================================================================

    def set_notes(self, text: Optional[str]) -> bool:
        if self._guard_locked("set_notes"):
            return False
        self._directives.notes = text or ""
        return True

    def set_deliverables(self, alt_texts: Optional[bool] = None, captions: Optional[bool] = None) -> bool:
        """Set either deliverable flag; None leaves it unchanged."""
        if self._guard_locked("set_deliverables"):
            return False
        if alt_texts is not None:
            self._directives.deliver_alt_texts = bool(alt_texts)
        if captions is not None:
            self._directives.deliver_captions = bool(captions)
        return True

    # ========================================================================
    # SEEDING AND COMPILATION
    # ========================================================================

    def apply_defaults(self, job: JobRecord) -> None:
        """
        Seed directives from the job record.

        Runs on load regardless of the lock flag so a locked job still
        shows what was committed. Unknown retouch keys are ignored.
        """
        flags = {}
        for key, value in job.retouch_profile.items():
            try:
                flags[RETOUCH_FIELDS[RetouchFlag(key)]] = bool(value)
            except ValueError:
                self.logger.debug(f"Ignoring unknown retouch key '{key}'")

        self._directives = EditingDirectives(
            editing_style=job.editing_style,
            window_style=job.window_style,
            sky_style=job.sky_style,
            notes=job.notes,
            deliver_alt_texts=job.deliver_alt_texts,
            deliver_captions=job.deliver_captions,
            **flags,
        )
        self._advisories = {
            flag: _advisory_for(flag)
            for flag in self._directives.enabled_retouch_flags
        }

    def compile(self) -> CompiledDirectives:
        """Immutable snapshot of the current directives."""
        return CompiledDirectives(**self._directives.model_dump())
