"""Domain-specific errors for lampctl."""


class LampctlError(Exception):
    """Base error for lampctl."""


class ValidationError(LampctlError):
    """Raised when a command argument is outside the range the device accepts."""


class ConfigLoadError(LampctlError):
    """Raised when reading the user configuration fails."""


class ConfigValidationError(LampctlError):
    """Raised when the user configuration does not conform to schema or semantics."""


class DeviceNotFoundError(LampctlError):
    """Raised when the lamp cannot be opened."""


class TransportError(LampctlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the HID backend is unavailable."""


class TransportSendError(TransportError):
    """Raised when a feature report write fails."""
