"""Exceptions raised at the importer boundary."""


def build_error_message(component: str, message: str) -> str:
    """Prefix a message with the component that raised it."""
    return f"{component}: {message}"


class VmUsageError(Exception):
    """Base class for vmusage errors."""


class ConfigValidationError(VmUsageError, ValueError):
    """Importer configuration is missing or invalid."""


class InputValidationError(VmUsageError, ValueError):
    """An importer input is missing fields or has invalid values."""
