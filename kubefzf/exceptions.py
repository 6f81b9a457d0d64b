"""Exceptions related to kubefzf."""

__all__ = [
    "KubeFzfException",
    "InputException",
    "StoreSetupError",
    "DumpException",
    "CodecException",
]


class KubeFzfException(Exception):
    """Generic base exception used for this library."""


class InputException(KubeFzfException):
    """Raised when resource documents or watch events are not formatted as expected."""


class StoreSetupError(KubeFzfException):
    """Raised when the destination directory of a Store is missing or unwritable."""


class DumpException(KubeFzfException):
    """Raised when a snapshot of the cache could not be written."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Failed to dump {path}: {message}")
        self.path = path
        self.message = message


class CodecException(KubeFzfException):
    """Raised when a snapshot file can't be read or decoded."""
