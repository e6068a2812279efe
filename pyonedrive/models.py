"""Pydantic models for OneDrive API resources."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class OneDriveModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON aliases."""

    model_config = {"populate_by_name": True}

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body, leaving out unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# =============================================================================
# Identities
# =============================================================================


class Identity(OneDriveModel):
    """An actor: a user, an application or a device."""

    id: str = Field(default="", description="Unique identifier of the actor")
    display_name: str = Field(
        default="",
        alias="displayName",
        description="Human readable name of the actor",
    )


class IdentitySet(OneDriveModel):
    """Keyed collection of identities, e.g. who created an item.

    Any subset of the three keys may be absent.
    """

    user: Identity | None = None
    application: Identity | None = None
    device: Identity | None = None


# =============================================================================
# Facets
# =============================================================================


class HashesFacet(OneDriveModel):
    sha1_hash: str | None = Field(default=None, alias="sha1Hash")
    crc32_hash: str | None = Field(default=None, alias="crc32Hash")


class FileFacet(OneDriveModel):
    """Present on items that are files."""

    mime_type: str | None = Field(default=None, alias="mimeType")
    hashes: HashesFacet | None = None


class FolderFacet(OneDriveModel):
    """Present on items that are folders."""

    child_count: int | None = Field(default=None, alias="childCount")


class ImageFacet(OneDriveModel):
    width: int | None = None
    height: int | None = None


class PhotoFacet(OneDriveModel):
    """EXIF style metadata of a photo."""

    taken_date_time: datetime | None = Field(default=None, alias="takenDateTime")
    camera_make: str | None = Field(default=None, alias="cameraMake")
    camera_model: str | None = Field(default=None, alias="cameraModel")
    f_number: float | None = Field(default=None, alias="fNumber")
    exposure_denominator: float | None = Field(
        default=None, alias="exposureDenominator"
    )
    exposure_numerator: float | None = Field(default=None, alias="exposureNumerator")
    focal_length: float | None = Field(default=None, alias="focalLength")
    iso: int | None = None


class AudioFacet(OneDriveModel):
    album: str | None = None
    album_artist: str | None = Field(default=None, alias="albumArtist")
    artist: str | None = None
    bitrate: int | None = None
    composers: str | None = None
    copyright: str | None = None
    disc: int | None = None
    disc_count: int | None = Field(default=None, alias="discCount")
    duration: int | None = Field(default=None, description="Duration in milliseconds")
    genre: str | None = None
    has_drm: bool | None = Field(default=None, alias="hasDrm")
    is_variable_bitrate: bool | None = Field(default=None, alias="isVariableBitrate")
    title: str | None = None
    track: int | None = None
    track_count: int | None = Field(default=None, alias="trackCount")
    year: int | None = None


class VideoFacet(OneDriveModel):
    bitrate: int | None = None
    duration: int | None = Field(default=None, description="Duration in milliseconds")
    height: int | None = None
    width: int | None = None


class LocationFacet(OneDriveModel):
    altitude: float | None = None
    latitude: float | None = None
    longitude: float | None = None


class DeletedFacet(OneDriveModel):
    """Marks a deleted item. Only its presence carries meaning."""


class SpecialFolder(OneDriveModel):
    """How a folder can be reached through the special folders collection."""

    name: str | None = None


class SharingLink(OneDriveModel):
    """A link that grants access to an item."""

    token: str | None = None
    web_url: str | None = Field(default=None, alias="webUrl")
    type: str | None = Field(default=None, description="view, edit or embed")
    application: Identity | None = None


# =============================================================================
# Items
# =============================================================================


class ItemKind(str, Enum):
    """Which facet defines what an item is."""

    FILE = "file"
    FOLDER = "folder"
    IMAGE = "image"
    PHOTO = "photo"
    AUDIO = "audio"
    VIDEO = "video"
    DELETED = "deleted"
    NONE = "none"


class ItemReference(OneDriveModel):
    """Location of an item: parent of an item, or target of a move/copy."""

    drive_id: str | None = Field(default=None, alias="driveId")
    id: str | None = None
    path: str | None = None


class Thumbnail(OneDriveModel):
    width: int | None = None
    height: int | None = None
    url: str | None = None


class ThumbnailSet(OneDriveModel):
    id: str | None = None
    small: Thumbnail | None = None
    medium: Thumbnail | None = None
    large: Thumbnail | None = None


class Item(OneDriveModel):
    """A file or folder in a drive.

    Facets are optional; normally exactly one of ``file`` or ``folder`` is
    set. ``kind`` gives the discriminated view over them.
    """

    id: str | None = None
    name: str | None = None
    e_tag: str | None = Field(default=None, alias="eTag")
    c_tag: str | None = Field(default=None, alias="cTag")
    created_by: IdentitySet | None = Field(default=None, alias="createdBy")
    last_modified_by: IdentitySet | None = Field(default=None, alias="lastModifiedBy")
    created_date_time: datetime | None = Field(default=None, alias="createdDateTime")
    last_modified_date_time: datetime | None = Field(
        default=None, alias="lastModifiedDateTime"
    )
    size: int | None = None
    parent_reference: ItemReference | None = Field(
        default=None, alias="parentReference"
    )
    web_url: str | None = Field(default=None, alias="webUrl")

    # Facets
    file: FileFacet | None = None
    folder: FolderFacet | None = None
    image: ImageFacet | None = None
    photo: PhotoFacet | None = None
    audio: AudioFacet | None = None
    video: VideoFacet | None = None
    location: LocationFacet | None = None
    deleted: DeletedFacet | None = None
    special_folder: SpecialFolder | None = Field(default=None, alias="specialFolder")

    # Instance attributes
    conflict_behavior: str | None = Field(
        default=None, alias="@name.conflictBehavior"
    )
    download_url: str | None = Field(default=None, alias="@content.downloadUrl")
    source_url: str | None = Field(default=None, alias="@content.sourceUrl")

    # Relationships
    children: list[Item] | None = None
    thumbnails: ThumbnailSet | None = None
    content: bytes | None = Field(
        default=None,
        exclude=True,
        description="Downloaded content, never sent to the service",
    )

    @model_validator(mode="after")
    def warn_on_conflicting_facets(self) -> Item:
        # Kept as is so the item still round-trips; kind prefers the folder
        if self.file is not None and self.folder is not None:
            logger.warning("Item %s has both file and folder facets", self.id)
        return self

    @property
    def kind(self) -> ItemKind:
        if self.folder is not None:
            return ItemKind.FOLDER
        if self.file is not None:
            return ItemKind.FILE
        if self.image is not None:
            return ItemKind.IMAGE
        if self.photo is not None:
            return ItemKind.PHOTO
        if self.audio is not None:
            return ItemKind.AUDIO
        if self.video is not None:
            return ItemKind.VIDEO
        if self.deleted is not None:
            return ItemKind.DELETED
        return ItemKind.NONE

    @property
    def is_folder(self) -> bool:
        """Check if this item is a folder."""
        return self.kind == ItemKind.FOLDER

    @property
    def is_file(self) -> bool:
        """Check if this item is a file."""
        return self.kind == ItemKind.FILE

    @classmethod
    def new_folder(cls, name: str) -> Item:
        """Build a folder item with no file facet."""
        return cls(name=name, folder=FolderFacet())

    @classmethod
    def new_file(cls, name: str, mime_type: str | None = None) -> Item:
        """Build a file item with no folder facet."""
        return cls(name=name, file=FileFacet(mime_type=mime_type))


class ItemCollection(OneDriveModel):
    """A page of items."""

    value: list[Item] = Field(default_factory=list)
    next_link: str | None = Field(default=None, alias="@odata.nextLink")


# =============================================================================
# Drives
# =============================================================================


class QuotaState(str, Enum):
    NORMAL = "normal"
    NEARING = "nearing"
    CRITICAL = "critical"
    EXCEEDED = "exceeded"


class Quota(OneDriveModel):
    """Storage quota of a drive, in bytes."""

    total: int | None = None
    used: int | None = None
    remaining: int | None = None
    deleted: int | None = None
    state: QuotaState | None = None


class Drive(OneDriveModel):
    """A drive: owner, quota, and a tree of items under one root."""

    id: str | None = None
    drive_type: str | None = Field(
        default=None,
        alias="driveType",
        description="personal or business",
    )
    owner: IdentitySet | None = None
    quota: Quota | None = None

    # Relationships
    items: list[Item] | None = None
    root: Item | None = None
    special: list[Item] | None = None
    shares: list[Item] | None = None


class DriveCollection(OneDriveModel):
    value: list[Drive] = Field(default_factory=list)
    next_link: str | None = Field(default=None, alias="@odata.nextLink")


# =============================================================================
# Errors and async jobs
# =============================================================================


class ErrorDetail(OneDriveModel):
    """One level of an error: code, message and an optional inner error.

    The outermost ``message`` is the one to show; inner codes narrow the
    outer code down.
    """

    code: str = ""
    message: str = ""
    inner_error: ErrorDetail | None = Field(default=None, alias="innererror")

    def codes(self) -> list[str]:
        """Codes of the whole chain, outermost first."""
        chain: list[str] = []
        current: ErrorDetail | None = self
        while current is not None:
            chain.append(current.code)
            current = current.inner_error
        return chain


class ErrorEnvelope(OneDriveModel):
    """Body of an error response."""

    error: ErrorDetail


class AsyncJobStatus(OneDriveModel):
    """Progress report of a long running operation such as a copy."""

    operation: str = ""
    percentage_complete: float = Field(default=0.0, alias="percentageComplete")
    status: str = ""
    resource_id: str | None = Field(default=None, alias="resourceId")
    resource_location: str | None = Field(
        default=None,
        alias="resourceLocation",
        description="URL of the finished resource, from the monitor redirect",
    )
