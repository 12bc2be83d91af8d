"""Error kinds raised by the inventory core.

Store and capture failures are recoverable at the session level: the
repository and scan session turn them into degraded outcomes or user-facing
messages instead of letting them escape to the process.
"""


class InventoryError(Exception):
    """Base exception for inventory errors."""


class StoreError(InventoryError):
    """Base for Inventory Store failures."""


class StoreReadFailure(StoreError):
    """Reading the collection failed (network, storage or parse error)."""


class StoreWriteFailure(StoreError):
    """Writing the collection failed or the store rejected it."""


class SuggestionFailure(InventoryError):
    """The tag suggestion service could not produce tags."""


class CaptureStartFailure(InventoryError):
    """The camera could not be started (permission denied, device busy)."""


class CaptureStopFailure(InventoryError):
    """Releasing the camera failed after a scan."""


class InvalidScanPayload(InventoryError, ValueError):
    """A scanned or typed box identifier was blank."""
