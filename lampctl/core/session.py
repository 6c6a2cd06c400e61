"""Exclusive ownership of the open lamp handle."""

from __future__ import annotations

import logging
from typing import Any

from lampctl.core.codec import PRODUCT_ID, VENDOR_ID, stamp
from lampctl.core.errors import DeviceNotFoundError, TransportError, TransportSendError
from lampctl.core.model import Frame
from lampctl.transports.base import HidTransport

LOGGER = logging.getLogger(__name__)


class DeviceSession:
    """Opens the lamp on first send and releases it exactly once.

    Any send failure closes the handle before the error propagates; the
    session cannot be reopened afterwards.
    """

    def __init__(
        self,
        transport: HidTransport,
        *,
        vendor_id: int = VENDOR_ID,
        product_id: int = PRODUCT_ID,
    ) -> None:
        self.transport = transport
        self.vendor_id = vendor_id
        self.product_id = product_id
        self._handle: Any = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def __enter__(self) -> DeviceSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_open(self) -> Any:
        if self._closed:
            raise TransportError("Device session is already closed")
        if self._handle is None:
            handle = self.transport.open(self.vendor_id, self.product_id)
            if handle is None:
                raise DeviceNotFoundError(
                    f"Lamp {self.vendor_id:04x}:{self.product_id:04x} not found. "
                    "Check the USB connection and hidraw permissions."
                )
            LOGGER.debug("Opened lamp %04x:%04x", self.vendor_id, self.product_id)
            self._handle = handle
        return self._handle

    def send(self, frame: Frame) -> None:
        handle = self._ensure_open()
        payload = stamp(frame).to_bytes()
        LOGGER.debug("Sending feature report %s", payload.hex())
        try:
            written = self.transport.send_feature_report(handle, payload)
        except TransportError:
            self.close()
            raise
        except (OSError, ValueError) as exc:
            self.close()
            raise TransportSendError(f"Feature report write failed: {exc}") from exc
        if written < 0:
            self.close()
            raise TransportSendError(f"Feature report write failed with status {written}")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        handle, self._handle = self._handle, None
        if handle is not None:
            self.transport.close(handle)
            LOGGER.debug("Closed lamp %04x:%04x", self.vendor_id, self.product_id)
