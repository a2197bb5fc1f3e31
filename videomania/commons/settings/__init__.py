"""Settings management module."""

from videomania.commons.settings.loader import (
    SettingsLoader,
    get_settings,
    reset_settings,
)
from videomania.commons.settings.models import (
    AppSettings,
    BlobStorageSettings,
    ContainerSettings,
    DocumentCollectionSettings,
    DocumentDBSettings,
    ProcessingSettings,
    ServerSettings,
    Settings,
    TelemetrySettings,
    UploadSettings,
)

__all__ = [
    # Loader
    "SettingsLoader",
    "get_settings",
    "reset_settings",
    # Main settings
    "Settings",
    "AppSettings",
    "ServerSettings",
    # Storage
    "BlobStorageSettings",
    "ContainerSettings",
    "DocumentDBSettings",
    "DocumentCollectionSettings",
    # Uploads & processing
    "UploadSettings",
    "ProcessingSettings",
    # Telemetry
    "TelemetrySettings",
]
