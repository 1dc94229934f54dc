# ============================================================================
# ASSET MODEL
# ============================================================================
# STATUS: Core - Uploaded file acknowledged by storage
# PURPOSE: Immutable record of one uploaded photo, video or 360° file
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Asset, UploadFile
# DEPENDENCIES: pydantic
# ============================================================================
"""
Asset Model.

An Asset exists only once the storage collaborator has acknowledged the
upload. Assets are never mutated; the grouping engine and annotator only
read them. Once grouped, every Asset is owned by exactly one Stack.
"""

import mimetypes
import os
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class Asset(BaseModel):
    """
    Uploaded file as reported by the backend.

    Examples:
        Asset(
            asset_id="img-0001",
            name="DSC_0001.CR3",
            size=24117248,
            media_type="image/x-canon-cr3",
            captured_at=datetime(2026, 10, 1, 9, 30, 0),
        )
    """

    model_config = ConfigDict(frozen=True)

    asset_id: str = Field(..., min_length=1, description="Backend asset identifier")
    name: str = Field(..., description="Original file name")
    size: int = Field(default=0, ge=0, description="File size in bytes")
    media_type: str = Field(default="image/jpeg", description="MIME type reported by storage")
    url: Optional[str] = Field(default=None, description="Thumbnail or preview URL")
    captured_at: Optional[datetime] = Field(default=None, description="Capture timestamp (EXIF or upload time)")
    width: Optional[int] = Field(default=None, ge=1, description="Pixel width when known")
    height: Optional[int] = Field(default=None, ge=1, description="Pixel height when known")
    is_360: bool = Field(default=False, description="Equirectangular 360° panorama")

    @property
    def is_motion(self) -> bool:
        """True for video assets."""
        return self.media_type.lower().startswith("video/")

    @property
    def extension(self) -> str:
        return os.path.splitext(self.name)[1].lower()


class UploadFile(BaseModel):
    """
    File selected for upload, before the storage collaborator accepts it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="File name including extension")
    content: bytes = Field(default=b"", repr=False, description="Raw file bytes")
    media_type: Optional[str] = Field(default=None, description="MIME type, guessed from the name when omitted")

    # Client-side hints read before upload (EXIF, panorama detection)
    captured_at: Optional[datetime] = Field(default=None)
    width: Optional[int] = Field(default=None, ge=1)
    height: Optional[int] = Field(default=None, ge=1)
    is_360: bool = Field(default=False)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.name)[1].lower()

    @property
    def resolved_media_type(self) -> str:
        if self.media_type:
            return self.media_type
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or "application/octet-stream"

    @classmethod
    def from_path(cls, path: str) -> "UploadFile":
        """Read a local file into an UploadFile."""
        with open(path, "rb") as handle:
            return cls(name=os.path.basename(path), content=handle.read())
