"""
Pure Enumeration Types for the Workflow Engine.

Defines workflow steps, stack types and the closed vocabularies the
user picks from while annotating and choosing editing directives.
No business logic - pure type definitions only.

Exports:
    WorkflowStep: Four-step workflow enumeration
    StackType: Stack classification
    RoomType: Closed 25-value room vocabulary
    EditingStyle: Editing style A-D
    WindowStyle: Window treatment presets
    SkyStyle: Sky replacement presets
    RetouchFlag: Independent retouch operations
    PanoramaCategory: 360° tour node categories
    Floor: Floor labels for tour nodes
"""

from enum import Enum


class WorkflowStep(int, Enum):
    """
    Workflow steps, in order.

    State transitions:
    - UPLOAD -> STACKS -> EDITING -> REVIEW (forward, one at a time)
    - Any step -> any earlier step (back navigation while unlocked)
    - REVIEW -> locked (absorbing, via the lock gate)
    """

    UPLOAD = 1
    STACKS = 2
    EDITING = 3
    REVIEW = 4

    @property
    def label(self) -> str:
        return _STEP_LABELS[self]


_STEP_LABELS = {
    WorkflowStep.UPLOAD: "Upload",
    WorkflowStep.STACKS: "Stapel & Raumtypen",
    WorkflowStep.EDITING: "Editing-Optionen",
    WorkflowStep.REVIEW: "Überprüfung",
}


class StackType(str, Enum):
    """Stack classification produced by the grouping engine."""

    SINGLE = "single"
    BRACKET3 = "bracket3"
    BRACKET5 = "bracket5"
    VIDEO = "video"
    PANO360 = "pano360"


class RoomType(str, Enum):
    """
    Closed room vocabulary.

    Values are the German labels the editing team works with and are
    sent to the backend verbatim.
    """

    WOHNZIMMER = "Wohnzimmer"
    KUECHE = "Küche"
    SCHLAFZIMMER = "Schlafzimmer"
    BADEZIMMER = "Badezimmer"
    FLUR = "Flur"
    ARBEITSZIMMER = "Arbeitszimmer/Büro"
    ABSTELLRAUM = "Abstellraum"
    KELLERRAUM = "Kellerraum"
    HAUSWIRTSCHAFTSRAUM = "Hauswirtschaftsraum"
    BALKON = "Balkon"
    TERRASSE = "Terrasse"
    GARTEN = "Garten"
    DACHTERRASSE = "Dachterrasse"
    DACHBODEN = "Dachboden"
    WINTERGARTEN = "Wintergarten"
    AUSSENBEREICH = "Außenbereich"
    HOBBYRAUM = "Hobbyraum"
    GARAGE = "Garage/Carport"
    POOLBEREICH = "Poolbereich"
    WELLNESS = "Wellness/Sauna"
    FITNESSRAUM = "Fitnessraum"
    GEMEINSCHAFTSRAUM = "Gemeinschaftsraum/Lobby"
    KONFERENZRAUM = "Konferenzraum"
    GEWERBEFLAECHE = "Gewerbefläche"
    SONSTIGER_RAUM = "Sonstiger Raum"


class EditingStyle(str, Enum):
    """Editing style; the backend receives the bare letter."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"


class WindowStyle(str, Enum):
    """Window treatment presets."""

    NEUTRAL = "neutral"
    CLEAR = "clear"
    ENHANCE = "enhance"
    DRAMATIC = "dramatic"
    REMOVE_GLARE = "remove-glare"


class SkyStyle(str, Enum):
    """Sky replacement presets."""

    NONE = "none"
    NATURAL = "natural"
    BLUE_SKY = "blue-sky"
    SUNSET = "sunset"
    CLOUDY = "cloudy"


class RetouchFlag(str, Enum):
    """
    Independent retouch operations.

    Values match the retouch profile keys on the wire. Any enabled flag
    triggers a cost advisory.
    """

    REMOVE_OUTLETS = "removeOutlets"
    REMOVE_BINS = "removeBins"
    REDUCE_PERSONAL_ITEMS = "reducePersonalItems"
    NEUTRALIZE_TV = "neutralizeTV"
    OPTIMIZE_LAWN = "optimizeLawn"
    ADD_FIREPLACE = "addFireplace"


class PanoramaCategory(str, Enum):
    """360° tour node categories."""

    INTERIOR = "Innenraum 360°"
    EXTERIOR = "Außenbereich 360°"
    DRONE_LOW = "Drohne 360° (Bodenlevel / niedrig)"
    DRONE_HIGH = "Drohne 360° (hoch)"
    PROPERTY = "Grundstück Panorama"
    STREET = "Straßenansicht Panorama"
    VIEWPOINT = "Aussichtspunkt Panorama"
    OTHER = "Sonstiger Raum (Freie Eingabe)"


class Floor(str, Enum):
    """Floor labels for tour nodes."""

    EG = "EG"
    OG = "OG"
    DG = "DG"
    KELLER = "Keller"
    AUSSEN = "Außen"
    DROHNE = "Drohne"
