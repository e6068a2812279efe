"""Item endpoints: browse, create, update, move, copy, delete and upload.

Operations that the service runs in the background (copy, upload from URL)
return an ``AsyncJob`` to poll instead of the final item.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from .errors import FileTooLargeError, InvalidRequestError, MalformedResponseError
from .jobs import AsyncJob
from .models import FileFacet, Item, ItemCollection, ItemReference
from .paths import (
    item_child_uri,
    item_children_uri,
    item_content_uri,
    item_copy_uri,
    item_uri,
)

if TYPE_CHECKING:
    from .client import OneDrive

# Simple upload only accepts files below 100MB
SIMPLE_UPLOAD_LIMIT = 104857600

RESPOND_ASYNC = {"Prefer": "respond-async"}

logger = logging.getLogger(__name__)


def _if_match(e_tag: str | None) -> dict[str, str]:
    return {"if-match": e_tag} if e_tag else {}


def _relocation_payload(
    parent_reference: ItemReference, name: str | None
) -> dict[str, Any]:
    payload: dict[str, Any] = {"parentReference": parent_reference.to_payload()}
    if name:
        payload["name"] = name
    return payload


def _web_upload_payload(name: str, url: str) -> dict[str, Any]:
    return {"@content.sourceUrl": url, "name": name, "file": FileFacet().to_payload()}


class ItemService:
    """Operations on items, reached through ``OneDrive.items``."""

    def __init__(self, client: OneDrive) -> None:
        self._od = client

    def _job(self, response: httpx.Response) -> AsyncJob:
        location = response.headers.get("Location")
        if not location:
            raise MalformedResponseError(
                f"Async operation response has no Location header: "
                f"{response.status_code}",
                response.status_code,
            )
        logger.debug("Async job started at %s", location)
        return AsyncJob(self._od, location)

    # -------------------------------------------------------------------------
    # Browsing
    # -------------------------------------------------------------------------

    def get(self, item_id: str) -> Item:
        """Get an item by ID.

        Args:
            item_id: ID of the item; empty or "root" for the default drive root.

        Returns:
            The item.

        Raises:
            APIError: If the item does not exist or cannot be read.
        """
        request = self._od.new_request("GET", item_uri(item_id))
        item, _ = self._od.do(request, Item)
        return item

    async def get_async(self, item_id: str) -> Item:
        request = self._od.new_async_request("GET", item_uri(item_id))
        item, _ = await self._od.do_async(request, Item)
        return item

    def get_default_drive_root_folder(self) -> Item:
        """Get the root folder of the default drive."""
        return self.get("root")

    async def get_default_drive_root_folder_async(self) -> Item:
        return await self.get_async("root")

    def list_children(self, item_id: str) -> ItemCollection:
        """List the items directly under a folder."""
        request = self._od.new_request("GET", item_children_uri(item_id))
        items, _ = self._od.do(request, ItemCollection)
        return items

    async def list_children_async(self, item_id: str) -> ItemCollection:
        request = self._od.new_async_request("GET", item_children_uri(item_id))
        items, _ = await self._od.do_async(request, ItemCollection)
        return items

    # -------------------------------------------------------------------------
    # Changes
    # -------------------------------------------------------------------------

    def create_folder(self, parent_id: str, name: str) -> Item:
        """Create a folder.

        Args:
            parent_id: ID of the parent folder ("root" for the drive root).
            name: Name of the new folder.

        Returns:
            The created folder.
        """
        path = item_child_uri(parent_id, name)
        request = self._od.new_request("PUT", path, json=Item.new_folder(name))
        item, _ = self._od.do(request, Item)
        return item

    async def create_folder_async(self, parent_id: str, name: str) -> Item:
        path = item_child_uri(parent_id, name)
        request = self._od.new_async_request("PUT", path, json=Item.new_folder(name))
        item, _ = await self._od.do_async(request, Item)
        return item

    def _update_request_args(
        self, item: Item, if_match: bool
    ) -> tuple[str, dict[str, str]]:
        if not item.id:
            raise InvalidRequestError("Cannot update an item without an ID")
        if if_match and not item.e_tag:
            raise InvalidRequestError(f"Item {item.id} has no eTag to match")
        return item_uri(item.id), _if_match(item.e_tag if if_match else None)

    def update(self, item: Item, if_match: bool = False) -> Item:
        """Update an item's metadata.

        Args:
            item: Item with the new values; its ID selects the target.
            if_match: Only update if the item still has ``item.e_tag``.

        Returns:
            The updated item, as returned by the service.

        Raises:
            InvalidRequestError: If the item has no ID, or no eTag to match.
            APIError: If the update is rejected (412 when the eTag is stale).
        """
        path, headers = self._update_request_args(item, if_match)
        request = self._od.new_request("PATCH", path, headers, json=item)
        updated, _ = self._od.do(request, Item)
        return updated

    async def update_async(self, item: Item, if_match: bool = False) -> Item:
        path, headers = self._update_request_args(item, if_match)
        request = self._od.new_async_request("PATCH", path, headers, json=item)
        updated, _ = await self._od.do_async(request, Item)
        return updated

    def delete(self, item_id: str, e_tag: str = "") -> bool:
        """Delete an item (it goes to the recycle bin).

        Args:
            item_id: ID of the item.
            e_tag: When given, only delete if the item still has this eTag.

        Returns:
            True only when the service confirms with 204 No Content.
        """
        request = self._od.new_request("DELETE", item_uri(item_id), _if_match(e_tag))
        _, response = self._od.do(request)
        return response.status_code == httpx.codes.NO_CONTENT

    async def delete_async(self, item_id: str, e_tag: str = "") -> bool:
        request = self._od.new_async_request(
            "DELETE", item_uri(item_id), _if_match(e_tag)
        )
        _, response = await self._od.do_async(request)
        return response.status_code == httpx.codes.NO_CONTENT

    def move(
        self,
        item_id: str,
        parent_reference: ItemReference,
        name: str | None = None,
    ) -> Item:
        """Move an item to a new parent folder, optionally renaming it.

        Returns:
            The moved item.
        """
        request = self._od.new_request(
            "PATCH",
            item_uri(item_id),
            json=_relocation_payload(parent_reference, name),
        )
        item, _ = self._od.do(request, Item)
        return item

    async def move_async(
        self,
        item_id: str,
        parent_reference: ItemReference,
        name: str | None = None,
    ) -> Item:
        request = self._od.new_async_request(
            "PATCH",
            item_uri(item_id),
            json=_relocation_payload(parent_reference, name),
        )
        item, _ = await self._od.do_async(request, Item)
        return item

    def copy(
        self,
        item_id: str,
        parent_reference: ItemReference,
        name: str | None = None,
    ) -> AsyncJob:
        """Start copying an item into another folder.

        Returns:
            The copy job; poll it for completion.

        Raises:
            MalformedResponseError: If the response has no job location.
        """
        request = self._od.new_request(
            "POST",
            item_copy_uri(item_id),
            RESPOND_ASYNC,
            json=_relocation_payload(parent_reference, name),
        )
        _, response = self._od.do(request)
        return self._job(response)

    async def copy_async(
        self,
        item_id: str,
        parent_reference: ItemReference,
        name: str | None = None,
    ) -> AsyncJob:
        request = self._od.new_async_request(
            "POST",
            item_copy_uri(item_id),
            RESPOND_ASYNC,
            json=_relocation_payload(parent_reference, name),
        )
        _, response = await self._od.do_async(request)
        return self._job(response)

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def upload_from_url(self, parent_id: str, name: str, url: str) -> AsyncJob:
        """Have the service download a file from ``url`` into a folder.

        Returns:
            The upload job; poll it for completion.
        """
        request = self._od.new_request(
            "POST",
            item_children_uri(parent_id),
            RESPOND_ASYNC,
            json=_web_upload_payload(name, url),
        )
        _, response = self._od.do(request)
        return self._job(response)

    async def upload_from_url_async(
        self, parent_id: str, name: str, url: str
    ) -> AsyncJob:
        request = self._od.new_async_request(
            "POST",
            item_children_uri(parent_id),
            RESPOND_ASYNC,
            json=_web_upload_payload(name, url),
        )
        _, response = await self._od.do_async(request)
        return self._job(response)

    def _read_upload(self, file_path: str | Path, name: str | None) -> tuple[str, bytes]:
        file_path = Path(file_path)

        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        size = file_path.stat().st_size
        if size >= SIMPLE_UPLOAD_LIMIT:
            raise FileTooLargeError(size, SIMPLE_UPLOAD_LIMIT)

        return name or file_path.name, file_path.read_bytes()

    def simple_upload(
        self,
        folder_id: str,
        file_path: str | Path,
        name: str | None = None,
    ) -> Item:
        """Upload a file of less than 100MB in a single request.

        Creates the file, or replaces the content of an existing one.

        Args:
            folder_id: ID of the destination folder.
            file_path: Local file to upload.
            name: Name in the folder (defaults to the local file name).

        Returns:
            The uploaded item.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            FileTooLargeError: If the file is 100MB or more.
        """
        name, data = self._read_upload(file_path, name)
        request = self._od.new_request(
            "PUT",
            item_content_uri(folder_id, name),
            {"Content-Type": "application/octet-stream"},
            content=data,
        )
        item, _ = self._od.do(request, Item)
        return item

    async def simple_upload_async(
        self,
        folder_id: str,
        file_path: str | Path,
        name: str | None = None,
    ) -> Item:
        name, data = self._read_upload(file_path, name)
        request = self._od.new_async_request(
            "PUT",
            item_content_uri(folder_id, name),
            {"Content-Type": "application/octet-stream"},
            content=data,
        )
        item, _ = await self._od.do_async(request, Item)
        return item
