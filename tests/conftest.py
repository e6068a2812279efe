"""Shared fixtures for the OneDrive client tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest

from pyonedrive import OneDrive, ThrottleGate


class FrozenClock:
    """Clock for the throttle gate that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2015, 3, 8, 12, 0, tzinfo=UTC))


@pytest.fixture
def od() -> Iterator[OneDrive]:
    """Client with default transports, intercepted by httpx_mock."""
    client = OneDrive()
    yield client
    client.close()


@pytest.fixture
def frozen_od(clock: FrozenClock) -> Iterator[OneDrive]:
    """Client whose throttle gate runs on a frozen clock."""
    client = OneDrive(throttle=ThrottleGate(clock=clock))
    yield client
    client.close()


@pytest.fixture
def user_identity() -> dict:
    return {"id": "0123456789abc", "displayName": "Gordan Grasarevic"}


@pytest.fixture
def sample_file_data(user_identity: dict) -> dict:
    """A photo file as returned by the API."""
    return {
        "id": "0123456789abc!104",
        "name": "beach.jpg",
        "eTag": "aMDEyMzQ1Njc4OWFiYyExMDQuMA",
        "cTag": "adDowMTIzNDU2Nzg5YWJjITEwNC42MzU2MTU2NzQ0NjMzMDAwMDA",
        "createdBy": {
            "user": user_identity,
            "application": {"id": "44048800", "displayName": "OneDrive website"},
        },
        "lastModifiedBy": {"user": user_identity},
        "createdDateTime": "2015-03-08T03:26:46.443Z",
        "lastModifiedDateTime": "2015-03-09T12:05:17.333Z",
        "size": 2748166,
        "parentReference": {
            "driveId": "0123456789abc",
            "id": "0123456789abc!103",
            "path": "/drive/root:/Pictures",
        },
        "webUrl": "https://onedrive.live.com/redir?page=self&resid=0123456789abc!104",
        "file": {
            "mimeType": "image/jpeg",
            "hashes": {"sha1Hash": "F2B1E2B8", "crc32Hash": "4E1E8C7A"},
        },
        "image": {"width": 4000, "height": 3000},
        "photo": {
            "takenDateTime": "2015-03-01T10:00:00Z",
            "cameraMake": "Nokia",
            "cameraModel": "Lumia 930",
            "fNumber": 2.4,
            "exposureDenominator": 120.0,
            "exposureNumerator": 1.0,
            "focalLength": 3.6,
            "iso": 100,
        },
        "location": {"altitude": 12.5, "latitude": 47.6, "longitude": -122.3},
        "@content.downloadUrl": "https://public.dm.files.1drv.com/y2m/beach.jpg",
    }


@pytest.fixture
def sample_folder_data(user_identity: dict) -> dict:
    """A folder as returned by the API."""
    return {
        "id": "0123456789abc!103",
        "name": "Pictures",
        "eTag": "aMDEyMzQ1Njc4OWFiYyExMDMuMA",
        "cTag": "adDowMTIzNDU2Nzg5YWJjITEwMy42MzU2MTU2NzQ0NjMzMDAwMDA",
        "createdBy": {"user": user_identity},
        "createdDateTime": "2015-03-08T03:26:46.443Z",
        "lastModifiedDateTime": "2015-03-09T12:05:17.333Z",
        "size": 10655823,
        "parentReference": {"driveId": "0123456789abc", "id": "0123456789abc!101"},
        "folder": {"childCount": 3},
    }


@pytest.fixture
def sample_drive_data(user_identity: dict) -> dict:
    return {
        "id": "0123456789abc",
        "driveType": "personal",
        "owner": {"user": user_identity},
        "quota": {
            "total": 16106127360,
            "used": 1342177280,
            "remaining": 14763950080,
            "deleted": 0,
            "state": "normal",
        },
    }


@pytest.fixture
def not_found_error() -> dict:
    """Nested error envelope for a missing item."""
    return {
        "error": {
            "code": "itemNotFound",
            "message": "Item Does Not Exist",
            "innererror": {
                "code": "itemDoesNotExist",
                "innererror": {"code": "folderDoesNotExist"},
            },
        }
    }


@pytest.fixture
def throttled_error() -> dict:
    return {
        "error": {
            "code": "activityLimitReached",
            "message": "The app or user has been throttled",
        }
    }
