"""Merge a folder of PDFs and images into one PDF."""

from .core import (
    KIND_IMAGE,
    KIND_PDF,
    Candidate,
    CandidateResult,
    MergeConfig,
    MergeOutput,
    MergeReport,
    SourceInput,
    classify,
    compose_image,
    discover_files,
    merge_candidates,
    merge_directory,
    merge_streams,
    order_candidates,
    process_candidate,
    sort_key,
    transplant_pdf,
    try_decrypt,
    write_output,
)
from .errors import (
    DirectoryNotFound,
    EmptyInput,
    ImageDecodeError,
    InvalidDimensions,
    MergeError,
    OutputWriteError,
    PageCopyError,
    SourceOpenError,
)
from .geometry import Placement, fit_image, position_on_page, usable_area

__all__ = [
    "KIND_IMAGE",
    "KIND_PDF",
    "Candidate",
    "CandidateResult",
    "DirectoryNotFound",
    "EmptyInput",
    "ImageDecodeError",
    "InvalidDimensions",
    "MergeConfig",
    "MergeError",
    "MergeOutput",
    "MergeReport",
    "OutputWriteError",
    "PageCopyError",
    "Placement",
    "SourceInput",
    "SourceOpenError",
    "classify",
    "compose_image",
    "discover_files",
    "fit_image",
    "merge_candidates",
    "merge_directory",
    "merge_streams",
    "order_candidates",
    "position_on_page",
    "process_candidate",
    "sort_key",
    "transplant_pdf",
    "try_decrypt",
    "usable_area",
    "write_output",
]
