"""Tests for polling async jobs."""

from __future__ import annotations

import pytest
from pytest_httpx import HTTPXMock

from pyonedrive import APIError, AsyncJob, MalformedResponseError, OneDrive

MONITOR_URL = "https://api.onedrive.com/monitor/4A3407B5"
ITEM_URL = "https://api.onedrive.com/v1.0/drive/items/new-id"


class TestAsyncJob:
    """Tests for job status checks."""

    def test_check_status(self, od: OneDrive, httpx_mock: HTTPXMock) -> None:
        """Test the monitor URL is requested as is."""
        httpx_mock.add_response(
            url=MONITOR_URL,
            method="GET",
            json={
                "operation": "ItemCopy",
                "percentageComplete": 27.8,
                "status": "inProgress",
            },
        )

        status = AsyncJob(od, MONITOR_URL).check_status()

        assert status.operation == "ItemCopy"
        assert status.percentage_complete == 27.8
        assert status.status == "inProgress"

    def test_completed_job_redirect(self, od: OneDrive, httpx_mock: HTTPXMock) -> None:
        """Test a finished job's redirect is reported as completed, not followed."""
        httpx_mock.add_response(
            url=MONITOR_URL,
            status_code=303,
            headers={"Location": ITEM_URL},
            json={"id": "new-id", "name": "copy.txt", "file": {}},
        )

        status = AsyncJob(od, MONITOR_URL).check_status()

        assert status.status == "completed"
        assert status.percentage_complete == 100.0
        assert status.resource_id == "new-id"
        assert status.resource_location == ITEM_URL
        assert len(httpx_mock.get_requests()) == 1

    def test_redirect_outside_items(self, od: OneDrive, httpx_mock: HTTPXMock) -> None:
        location = "https://api.onedrive.com/v1.0/drive/root"
        httpx_mock.add_response(
            url=MONITOR_URL, status_code=303, headers={"Location": location}
        )

        status = AsyncJob(od, MONITOR_URL).check_status()

        assert status.status == "completed"
        assert status.resource_id is None
        assert status.resource_location == location

    def test_item_body_is_not_a_status(
        self, od: OneDrive, httpx_mock: HTTPXMock
    ) -> None:
        """Test a non-redirect answer is still decoded as a status record."""
        httpx_mock.add_response(url=MONITOR_URL, text="<html>gone</html>")

        with pytest.raises(MalformedResponseError):
            AsyncJob(od, MONITOR_URL).check_status()

    def test_failed_status_check(self, od: OneDrive, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=MONITOR_URL,
            status_code=500,
            json={"error": {"code": "generalException", "message": "Failed"}},
        )

        with pytest.raises(APIError):
            AsyncJob(od, MONITOR_URL).check_status()

    @pytest.mark.asyncio
    async def test_check_status_async(self, od: OneDrive, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            url=MONITOR_URL,
            json={"operation": "DownloadUrl", "percentageComplete": 100.0},
        )

        status = await AsyncJob(od, MONITOR_URL).check_status_async()

        assert status.percentage_complete == 100.0
        await od.aclose()

    @pytest.mark.asyncio
    async def test_completed_job_redirect_async(
        self, od: OneDrive, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=MONITOR_URL, status_code=303, headers={"Location": ITEM_URL}
        )

        status = await AsyncJob(od, MONITOR_URL).check_status_async()

        assert status.status == "completed"
        assert status.resource_id == "new-id"
        await od.aclose()
