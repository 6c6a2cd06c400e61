"""Transport interfaces."""

from __future__ import annotations

from typing import Any, Protocol

from lampctl.core.model import DetectedLamp


class HidTransport(Protocol):
    def open(self, vendor_id: int, product_id: int) -> Any | None:
        """Open the first matching device; return None when it is absent."""

    def send_feature_report(self, handle: Any, data: bytes) -> int:
        """Write one feature report; a negative result signals failure."""

    def close(self, handle: Any) -> None:
        """Release a handle returned by open()."""

    def enumerate(self, vendor_id: int, product_id: int) -> list[DetectedLamp]:
        """List attached devices with the given IDs."""
