"""Scan resolver - turns decoded QR payloads or typed ids into box ids.

Also models the camera capture lifecycle as a scoped acquisition of a
capture device::

    idle -> requesting-permission -> scanning -> stopped
                                              -> stopped-with-error

The device itself (camera access, QR decoding) lives outside this package
and is reached through the :class:`CaptureDevice` protocol.
"""
import enum
import logging
from typing import Optional, Protocol

from boxinventory.exceptions import CaptureStartFailure, CaptureStopFailure, InvalidScanPayload

logger = logging.getLogger(__name__)


def normalize_box_id(raw: str) -> str:
    """Trim whitespace and uppercase. No format validation beyond non-empty."""
    box_id = (raw or "").strip().upper()
    if not box_id:
        raise InvalidScanPayload("Box id must not be empty")
    return box_id


class CaptureState(str, enum.Enum):
    """Camera capture lifecycle states."""
    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting-permission"
    SCANNING = "scanning"
    STOPPED = "stopped"
    STOPPED_WITH_ERROR = "stopped-with-error"


class CaptureDevice(Protocol):
    """A camera that decodes QR codes."""

    async def start(self) -> None:
        """Acquire the camera. Raises on permission denial or a busy device."""

    async def read(self) -> Optional[str]:
        """One decode attempt; ``None`` when no code was recognised."""

    async def stop(self) -> None:
        """Release the camera."""


class ScanSession:
    """Single-use capture session that yields exactly one box id.

    Use as an async context manager so the device is released on success,
    error or teardown::

        async with ScanSession(camera) as session:
            box_id = await session.scan()
    """

    def __init__(self, device: CaptureDevice):
        self.device = device
        self.state = CaptureState.IDLE
        self.error: Optional[str] = None
        self._holding = False

    async def __aenter__(self) -> "ScanSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self._release()

    async def scan(self) -> str:
        """Start the device, read until a non-blank payload decodes, then stop."""
        if self.state != CaptureState.IDLE:
            raise RuntimeError(f"Scan session already used (state: {self.state.value})")

        self.state = CaptureState.REQUESTING_PERMISSION
        try:
            await self.device.start()
        except Exception as e:
            self.state = CaptureState.STOPPED_WITH_ERROR
            self.error = f"Could not start camera: {e}"
            logger.warning("Camera start failed: %s", e)
            raise CaptureStartFailure(self.error) from e
        self._holding = True

        self.state = CaptureState.SCANNING
        while True:
            try:
                payload = await self.device.read()
            except Exception:
                self.state = CaptureState.STOPPED_WITH_ERROR
                self.error = "Camera stopped while scanning"
                await self._release()
                raise
            if payload is None:
                continue
            try:
                box_id = normalize_box_id(payload)
            except InvalidScanPayload:
                continue
            break

        await self._release()
        self.state = CaptureState.STOPPED
        return box_id

    async def _stop_device(self) -> None:
        try:
            await self.device.stop()
        except CaptureStopFailure:
            raise
        except Exception as e:
            raise CaptureStopFailure(f"Could not release camera: {e}") from e

    async def _release(self) -> None:
        # A failing stop must never block delivery of the scanned id
        if not self._holding:
            return
        self._holding = False
        try:
            await self._stop_device()
        except CaptureStopFailure as e:
            logger.warning("Camera stop failed: %s", e)
