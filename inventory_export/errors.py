"""
Failure taxonomy for the export pipeline.

Every error carries the user-facing message and the HTTP status it maps to.
Only the message ever reaches the caller.
"""
from typing import Optional


class InventoryExportError(Exception):
    status_code = 500
    default_message = "An internal server error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(InventoryExportError):
    status_code = 500
    default_message = "Steam API key is not configured on the server."


class ValidationError(InventoryExportError):
    status_code = 400
    default_message = "Invalid Steam profile URL format."


class ResolutionError(InventoryExportError):
    status_code = 404
    default_message = "Could not find a Steam ID for this profile URL."


class AccessError(InventoryExportError):
    status_code = 403
    default_message = "Inventory is private or the profile is invalid."


class NotFoundError(InventoryExportError):
    status_code = 404
    default_message = "Could not read inventory data. It might be empty or private."


class EmptyResultError(InventoryExportError):
    status_code = 404
    default_message = "This inventory appears to be empty."


class UpstreamError(InventoryExportError):
    status_code = 500
    default_message = "Steam could not be reached. Please try again later."


class UpstreamGoneError(UpstreamError):
    # 410 means Steam has withdrawn the endpoint for this app, not a transient outage
    default_message = "The Steam item service no longer serves this inventory (HTTP 410)."
