"""Python client for the OneDrive REST API."""

from .client import VERSION, OneDrive
from .config import ClientConfig, ConfigError, load_config, save_config
from .drives import DriveService
from .errors import (
    APIError,
    FileTooLargeError,
    InvalidRequestError,
    MalformedResponseError,
    MalformedThrottleHeaderError,
    OneDriveError,
    RateLimitedError,
    TransportError,
)
from .items import ItemService
from .jobs import AsyncJob
from .models import (
    AsyncJobStatus,
    Drive,
    DriveCollection,
    ErrorDetail,
    ErrorEnvelope,
    FileFacet,
    FolderFacet,
    Identity,
    IdentitySet,
    Item,
    ItemCollection,
    ItemKind,
    ItemReference,
    Quota,
    QuotaState,
    SharingLink,
)
from .throttle import ThrottleGate

__version__ = VERSION

__all__ = [
    # Client
    "OneDrive",
    "DriveService",
    "ItemService",
    "AsyncJob",
    "ThrottleGate",
    # Config
    "ClientConfig",
    "ConfigError",
    "load_config",
    "save_config",
    # Errors
    "APIError",
    "FileTooLargeError",
    "InvalidRequestError",
    "MalformedResponseError",
    "MalformedThrottleHeaderError",
    "OneDriveError",
    "RateLimitedError",
    "TransportError",
    # Models
    "AsyncJobStatus",
    "Drive",
    "DriveCollection",
    "ErrorDetail",
    "ErrorEnvelope",
    "FileFacet",
    "FolderFacet",
    "Identity",
    "IdentitySet",
    "Item",
    "ItemCollection",
    "ItemKind",
    "ItemReference",
    "Quota",
    "QuotaState",
    "SharingLink",
]
