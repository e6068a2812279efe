"""Request URIs for drives and items, relative to the API base URL."""

from __future__ import annotations

from urllib.parse import quote

# Identifiers that stand for the default drive or its root folder
DEFAULT_IDS = frozenset({"", "root", "default"})


def _segment(value: str) -> str:
    return quote(value, safe="!")


def drive_uri(drive_id: str) -> str:
    """Return the URI of a drive; the default drive for empty/root/default."""
    if drive_id in DEFAULT_IDS:
        return "/drive"
    return f"/drives/{_segment(drive_id)}"


def drive_children_uri(drive_id: str) -> str:
    """Return the URI listing the items under a drive's root folder."""
    if drive_id in DEFAULT_IDS:
        return "/drive/root/children"
    return f"/drives/{_segment(drive_id)}/root/children"


def item_uri(item_id: str) -> str:
    """Return the URI of an item; the default drive root for empty/root/default."""
    if item_id in DEFAULT_IDS:
        return "/drive/root"
    return f"/drive/items/{_segment(item_id)}"


def item_children_uri(item_id: str) -> str:
    return f"{item_uri(item_id)}/children"


def item_copy_uri(item_id: str) -> str:
    return f"{item_uri(item_id)}/action.copy"


def item_child_uri(parent_id: str, name: str) -> str:
    """Return the URI addressing a child of a folder by name."""
    return f"{item_children_uri(parent_id)}/{_segment(name)}"


def item_content_uri(folder_id: str, name: str) -> str:
    """Return the URI for uploading ``name`` into a folder."""
    return f"{item_child_uri(folder_id, name)}/content"
