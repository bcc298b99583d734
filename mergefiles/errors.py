"""Exceptions raised by the merge pipeline."""

from __future__ import annotations

from typing import Optional


class MergeError(Exception):
    """Base class for every error raised by :mod:`mergefiles`."""


class DirectoryNotFound(MergeError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Input folder does not exist or is not a directory: {path}")
        self.path = path


class EmptyInput(MergeError):
    """No PDF or image candidates were found. Informational, not a failure."""

    def __init__(self, source: str) -> None:
        super().__init__(f"No PDF or image files found in {source}")
        self.source = source


class InvalidDimensions(MergeError, ValueError):
    def __init__(self, width: float, height: float, what: str = "Image") -> None:
        super().__init__(f"{what} dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height


class SourceOpenError(MergeError):
    """A PDF candidate could not be opened or parsed."""


class PageCopyError(MergeError):
    """A single page of a PDF candidate could not be copied."""

    def __init__(self, page_number: int, cause: Optional[BaseException] = None) -> None:
        message = f"Could not copy page {page_number}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.page_number = page_number


class ImageDecodeError(MergeError):
    """An image candidate is corrupt or in an unsupported format."""


class OutputWriteError(MergeError):
    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Failed to write output '{path}': {cause}")
        self.path = path
