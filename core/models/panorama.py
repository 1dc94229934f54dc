# ============================================================================
# PANORAMA TOUR MODELS
# ============================================================================
# STATUS: Core - Virtual tour connection graph
# PURPOSE: Panorama nodes with undirected connections and the serialized tour graph
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Panorama, TourGraph
# DEPENDENCIES: pydantic, core.models.enums
# ============================================================================
"""
Panorama Tour Models.

Each Panorama wraps one 360° asset. Connections are undirected: if A
lists B then B lists A. No panorama connects to itself.
"""

from typing import List, Optional, Set
from pydantic import BaseModel, Field, ConfigDict

from .enums import PanoramaCategory, Floor


class Panorama(BaseModel):
    """
    Node in the 360° tour.
    """

    model_config = ConfigDict(validate_assignment=True)

    panorama_id: str = Field(..., min_length=1)
    asset_id: str = Field(..., min_length=1, description="360° asset shown at this node")
    name: str = Field(default="", description="Display name")
    category: PanoramaCategory = Field(default=PanoramaCategory.INTERIOR)
    floor: Floor = Field(default=Floor.EG)
    connections: Set[str] = Field(default_factory=set, description="Ids of directly reachable panoramas")


class TourGraph(BaseModel):
    """
    Serialized tour: every node, the entry node and the floorplan.
    """

    panoramas: List[Panorama] = Field(default_factory=list)
    start_panorama_id: Optional[str] = Field(default=None)
    floorplan_asset_id: Optional[str] = Field(default=None)

    def get(self, panorama_id: str) -> Optional[Panorama]:
        for panorama in self.panoramas:
            if panorama.panorama_id == panorama_id:
                return panorama
        return None
