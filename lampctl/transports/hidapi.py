"""HID transport implementation using the hidapi bindings."""

from __future__ import annotations

from typing import Any

from lampctl.core.errors import TransportConnectError, TransportSendError
from lampctl.core.model import DetectedLamp


def _hid_module() -> Any:
    try:
        import hid  # type: ignore
    except Exception as exc:  # pragma: no cover - import failure path
        raise TransportConnectError(
            "HID transport requires 'hidapi' (and the system hidapi library). Install dependency and retry."
        ) from exc
    return hid


class HidApiTransport:
    def open(self, vendor_id: int, product_id: int) -> Any | None:
        hid = _hid_module()
        device = hid.device()
        try:
            device.open(vendor_id, product_id)
        except OSError:
            return None
        return device

    def send_feature_report(self, handle: Any, data: bytes) -> int:
        # byte 0 is the major command, which the device also uses as report ID
        try:
            return int(handle.send_feature_report(list(data)))
        except (OSError, ValueError) as exc:
            raise TransportSendError(f"hid send_feature_report failed: {exc}") from exc

    def close(self, handle: Any) -> None:
        handle.close()

    def enumerate(self, vendor_id: int, product_id: int) -> list[DetectedLamp]:
        hid = _hid_module()
        lamps: list[DetectedLamp] = []
        for info in hid.enumerate(vendor_id, product_id):
            path = info.get("path") or b""
            if isinstance(path, bytes):
                path = path.decode("utf-8", errors="replace")
            lamps.append(
                DetectedLamp(
                    path=path,
                    serial=info.get("serial_number") or "",
                    product=info.get("product_string") or "<unknown-lamp>",
                )
            )
        return lamps
