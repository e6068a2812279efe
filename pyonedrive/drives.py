"""Drive endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .models import Drive, DriveCollection, ItemCollection
from .paths import drive_children_uri, drive_uri

if TYPE_CHECKING:
    from .client import OneDrive

LIST_DRIVES_ENDPOINT = "/drives"


class DriveService:
    """Operations on drives, reached through ``OneDrive.drives``."""

    def __init__(self, client: OneDrive) -> None:
        self._od = client

    def get(self, drive_id: str = "") -> Drive:
        """Get a drive by ID.

        A user always has at least one drive; an empty ID (or "default",
        "root") returns it.

        Raises:
            APIError: If the service rejects the request, e.g. unknown drive.
        """
        request = self._od.new_request("GET", drive_uri(drive_id))
        drive, _ = self._od.do(request, Drive)
        return drive

    async def get_async(self, drive_id: str = "") -> Drive:
        request = self._od.new_async_request("GET", drive_uri(drive_id))
        drive, _ = await self._od.do_async(request, Drive)
        return drive

    def get_default(self) -> Drive:
        """Get the default drive of the authenticated user."""
        return self.get("")

    async def get_default_async(self) -> Drive:
        return await self.get_async("")

    def list_all(self) -> DriveCollection:
        """List all drives available to the authenticated user."""
        request = self._od.new_request("GET", LIST_DRIVES_ENDPOINT)
        drives, _ = self._od.do(request, DriveCollection)
        return drives

    async def list_all_async(self) -> DriveCollection:
        request = self._od.new_async_request("GET", LIST_DRIVES_ENDPOINT)
        drives, _ = await self._od.do_async(request, DriveCollection)
        return drives

    def list_children(self, drive_id: str = "") -> ItemCollection:
        """List the items under a drive's root folder.

        Args:
            drive_id: ID of the drive; empty for the default drive.
        """
        request = self._od.new_request("GET", drive_children_uri(drive_id))
        items, _ = self._od.do(request, ItemCollection)
        return items

    async def list_children_async(self, drive_id: str = "") -> ItemCollection:
        request = self._od.new_async_request("GET", drive_children_uri(drive_id))
        items, _ = await self._od.do_async(request, ItemCollection)
        return items
