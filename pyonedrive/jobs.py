"""Polling of long running operations.

Copy and upload-from-URL answer with the location of a job instead of the
final item. ``AsyncJob.check_status`` asks for its progress once; when and
how often to poll is up to the caller.

While the job runs the monitor returns a status record. Once it is done the
monitor redirects to the resulting resource instead, so the poll does not
follow redirects and reports that answer as a completed status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from .models import AsyncJobStatus

if TYPE_CHECKING:
    from .client import OneDrive

COMPLETED = "completed"


def _resource_id(location: str) -> str | None:
    segments = httpx.URL(location).path.split("/")
    if "items" not in segments:
        return None
    index = segments.index("items") + 1
    if index < len(segments) and segments[index]:
        return segments[index]
    return None


def _job_status(
    status: AsyncJobStatus | None, response: httpx.Response
) -> AsyncJobStatus:
    if status is not None:
        return status
    location = response.headers["Location"]
    return AsyncJobStatus(
        status=COMPLETED,
        percentage_complete=100.0,
        resource_id=_resource_id(location),
        resource_location=location,
    )


@dataclass(frozen=True)
class AsyncJob:
    """A server side job that can be polled for progress.

    Attributes:
        client: Client used to send the status request.
        location: URL of the job monitor, from the ``Location`` header.
    """

    client: OneDrive
    location: str

    def check_status(self) -> AsyncJobStatus:
        """Fetch the current status of the job.

        Returns:
            The reported progress, or a ``completed`` status carrying the
            location (and item ID) of the result once the job is done.

        Raises:
            RateLimitedError: If the throttle gate refuses the request.
            APIError: If the service rejects the request.
        """
        request = self.client.new_request("GET", self.location)
        status, response = self.client.do(
            request, AsyncJobStatus, follow_redirects=False
        )
        return _job_status(status, response)

    async def check_status_async(self) -> AsyncJobStatus:
        request = self.client.new_async_request("GET", self.location)
        status, response = await self.client.do_async(
            request, AsyncJobStatus, follow_redirects=False
        )
        return _job_status(status, response)
