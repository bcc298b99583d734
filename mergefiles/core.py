"""Merge pipeline shared by the CLI and the web app."""

from __future__ import annotations

import io
import os
import sys
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .errors import (
    DirectoryNotFound,
    EmptyInput,
    ImageDecodeError,
    OutputWriteError,
    PageCopyError,
    SourceOpenError,
)
from .geometry import DEFAULT_MARGIN, fit_image, position_on_page, usable_area

try:
    from PyPDF2 import PdfReader, PdfWriter
    from PyPDF2.generic import NameObject, NumberObject
except ImportError as exc:  # pragma: no cover - the CLI should fail with an install hint
    raise RuntimeError(
        "mergefiles needs PyPDF2 to read and write PDFs. Install with: python -m pip install PyPDF2"
    ) from exc

KIND_PDF = "pdf"
KIND_IMAGE = "image"

Source = Union[str, BinaryIO]


@dataclass(frozen=True)
class MergeConfig:
    """Settings for one merge run."""

    input_dir: str = "files"
    output_path: str = "merged_output.pdf"
    image_suffixes: Tuple[str, ...] = (".jpg", ".jpeg", ".png")
    pdf_suffix: str = ".pdf"
    page_size: Tuple[float, float] = A4
    margin: float = DEFAULT_MARGIN
    password: Optional[str] = None


@dataclass(frozen=True)
class Candidate:
    """A file eligible for merging, read either from *path* or *stream*."""

    name: str
    kind: str
    path: Optional[str] = None
    stream: Optional[BinaryIO] = field(default=None, compare=False, repr=False)

    @property
    def source(self) -> Source:
        if self.path is not None:
            return self.path
        if self.stream is None:
            raise ValueError(f"Candidate {self.name!r} has neither a path nor a stream")
        return self.stream


@dataclass
class SourceInput:
    """An uploaded file stream to be merged."""

    name: str
    stream: BinaryIO


@dataclass(frozen=True)
class CandidateResult:
    candidate: Candidate
    pages: int = 0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MergeReport:
    """Result of merging a directory into a file."""

    output_path: str
    results: List[CandidateResult]

    @property
    def succeeded(self) -> List[CandidateResult]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> List[CandidateResult]:
        return [result for result in self.results if not result.ok]

    @property
    def page_count(self) -> int:
        return sum(result.pages for result in self.succeeded)


@dataclass
class MergeOutput:
    """Result from merging uploaded streams in memory."""

    buffer: Optional[io.BytesIO]
    results: List[CandidateResult]
    skipped_files: List[str]

    @property
    def failed_files(self) -> List[str]:
        return [result.candidate.name for result in self.results if not result.ok]

    @property
    def merged_count(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def page_count(self) -> int:
        return sum(result.pages for result in self.results if result.ok)

    @property
    def has_output(self) -> bool:
        return self.buffer is not None and self.page_count > 0


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def classify(name: str, config: MergeConfig) -> Optional[str]:
    """Return the candidate kind for *name*, or ``None`` if unsupported."""

    lowered = name.lower()
    if lowered.endswith(config.pdf_suffix.lower()):
        return KIND_PDF
    if lowered.endswith(tuple(suffix.lower() for suffix in config.image_suffixes)):
        return KIND_IMAGE
    return None


def sort_key(name: str) -> Tuple[str, bytes]:
    """Case-insensitive ordering; exact bytes break ties so the order is total."""

    return name.lower(), name.encode("utf-8", "surrogateescape")


def order_candidates(candidates: Iterable[Candidate]) -> List[Candidate]:
    return sorted(candidates, key=lambda candidate: sort_key(candidate.name))


def discover_files(folder: str, config: MergeConfig) -> List[Candidate]:
    """Return the PDFs and images directly inside *folder*, ordered by name."""

    if not os.path.isdir(folder):
        raise DirectoryNotFound(folder)

    folder = os.path.abspath(folder)
    output = os.path.abspath(config.output_path)
    candidates: List[Candidate] = []

    with os.scandir(folder) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            kind = classify(entry.name, config)
            if kind is None:
                continue
            path = os.path.join(folder, entry.name)
            # A previous run's output must not be merged into the next one.
            if path == output:
                continue
            candidates.append(Candidate(name=entry.name, kind=kind, path=path))

    return order_candidates(candidates)


# ---------------------------------------------------------------------------
# Per-type handlers
# ---------------------------------------------------------------------------


@contextmanager
def _open_source(source: Source) -> Iterator[BinaryIO]:
    if isinstance(source, str):
        # Readers resolve objects lazily, so the bytes must outlive the handle.
        with open(source, "rb") as handle:
            data = handle.read()
        yield io.BytesIO(data)
        return

    try:
        source.seek(0)
    except Exception:
        # Non-seekable uploads are buffered so they can be read from the start.
        source = io.BytesIO(source.read())
    yield source


def try_decrypt(reader: PdfReader, password: str) -> bool:
    """Return True if *password* unlocks *reader*.

    ``decrypt`` returns a ``PasswordType`` whose zero value means "not decrypted".
    """

    try:
        return bool(int(reader.decrypt(password)))
    except Exception:
        return False


def _passwords_to_try(password: Optional[str]) -> List[str]:
    # Many "encrypted" PDFs only carry an owner password.
    passwords = [""]
    if password:
        passwords.append(password)
    return passwords


def transplant_pdf(source: Source, writer: PdfWriter, password: Optional[str] = None) -> int:
    """Append every page of the PDF at *source* to *writer*, in order.

    Returns the number of pages appended. Pages are resolved before any is
    appended, so a page that cannot be read leaves none of this file's pages
    in *writer*. If appending fails part-way, the pages already appended stay
    in *writer*; :func:`process_candidate` removes them.
    """

    with _open_source(source) as stream:
        try:
            reader = PdfReader(stream)
        except Exception as exc:
            raise SourceOpenError(f"Not a readable PDF: {exc}") from exc

        if getattr(reader, "is_encrypted", False):
            if not any(try_decrypt(reader, attempt) for attempt in _passwords_to_try(password)):
                raise SourceOpenError("Could not decrypt (wrong/unknown password)")

        try:
            page_count = len(reader.pages)
        except Exception as exc:
            raise SourceOpenError(f"Could not read page tree: {exc}") from exc

        pages = []
        for index in range(page_count):
            try:
                pages.append(reader.pages[index])
            except Exception as exc:
                raise PageCopyError(index + 1, exc) from exc

        for number, page in enumerate(pages, start=1):
            try:
                writer.add_page(page)
            except Exception as exc:
                raise PageCopyError(number, exc) from exc

    return page_count


def compose_image(
    source: Source,
    writer: PdfWriter,
    page_size: Tuple[float, float] = A4,
    margin: float = DEFAULT_MARGIN,
) -> int:
    """Append one page holding the image at *source*, scaled to fit and centred."""

    with _open_source(source) as stream:
        try:
            image = Image.open(stream)
        except Exception as exc:
            raise ImageDecodeError(f"Unsupported or corrupt image: {exc}") from exc

        with image:
            try:
                image.load()
            except Exception as exc:
                raise ImageDecodeError(f"Unsupported or corrupt image: {exc}") from exc

            placement = fit_image(*usable_area(page_size, margin), *image.size)
            x, y = position_on_page(placement, page_size, margin)

            buffer = io.BytesIO()
            page = canvas.Canvas(buffer, pagesize=page_size)
            page.drawImage(
                ImageReader(image),
                x,
                y,
                width=placement.width,
                height=placement.height,
                mask="auto",
            )
            page.showPage()
            page.save()

    buffer.seek(0)
    writer.add_page(PdfReader(buffer).pages[0])
    return 1


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def process_candidate(candidate: Candidate, writer: PdfWriter, config: MergeConfig) -> CandidateResult:
    """Merge one candidate into *writer*; failures are returned, not raised.

    A failed candidate leaves *writer* with exactly the pages it had before.
    """

    start = len(writer.pages)
    try:
        if candidate.kind == KIND_PDF:
            pages = transplant_pdf(candidate.source, writer, password=config.password)
        elif candidate.kind == KIND_IMAGE:
            pages = compose_image(candidate.source, writer, config.page_size, config.margin)
        else:
            raise ValueError(f"Unknown candidate kind: {candidate.kind!r}")
    except Exception as exc:
        truncate_pages(writer, start)
        return CandidateResult(candidate=candidate, error=exc)
    return CandidateResult(candidate=candidate, pages=pages)


def truncate_pages(writer: PdfWriter, count: int) -> None:
    """Drop every page of *writer* after the first *count*.

    Pages added with :meth:`PdfWriter.add_page` all hang off the root page
    tree, so trimming its ``/Kids`` removes them from the output.
    """

    total = len(writer.pages)
    if total <= count:
        return
    tree = writer.pages[total - 1][NameObject("/Parent")]
    kids = tree[NameObject("/Kids")]
    del kids[count:]
    tree[NameObject("/Count")] = NumberObject(len(kids))


def merge_candidates(
    candidates: Sequence[Candidate],
    config: MergeConfig,
    verbose: bool = False,
) -> Tuple[PdfWriter, List[CandidateResult]]:
    """Merge *candidates* in order into a new writer."""

    writer = PdfWriter()
    results: List[CandidateResult] = []

    for candidate in candidates:
        if verbose:
            print(f"Processing: {candidate.name}")
        result = process_candidate(candidate, writer, config)
        results.append(result)
        if not verbose:
            continue
        if result.ok:
            print(f"  Added {result.pages} page(s)")
        else:
            print(f"  Failed to merge '{candidate.name}': {result.error}", file=sys.stderr)

    return writer, results


def write_output(writer: PdfWriter, output_path: str) -> str:
    """Write *writer* to *output_path*, replacing any existing file.

    The PDF is written to a ``.part`` sibling first and moved into place, so a
    failed write leaves neither a truncated output nor the partial file.
    """

    partial_path = f"{output_path}.part"
    try:
        os.makedirs(os.path.dirname(os.path.abspath(output_path)) or ".", exist_ok=True)
        with open(partial_path, "wb") as out_file:
            writer.write(out_file)
        os.replace(partial_path, output_path)
    except Exception as exc:
        with suppress(OSError):
            os.remove(partial_path)
        raise OutputWriteError(output_path, exc) from exc
    return output_path


def merge_directory(config: Optional[MergeConfig] = None) -> MergeReport:
    """Merge the PDFs and images in ``config.input_dir`` into ``config.output_path``.

    Raises :class:`DirectoryNotFound` before anything is written and
    :class:`EmptyInput` when there is nothing to merge; no output file is
    created in either case. Failed candidates are reported in the returned
    :class:`MergeReport`. The output is written even if every candidate
    failed.
    """

    config = config or MergeConfig()
    candidates = discover_files(config.input_dir, config)
    if not candidates:
        raise EmptyInput(config.input_dir)

    print(f"Found {len(candidates)} file(s) to process:")
    for candidate in candidates:
        print(f"  - {candidate.name}")

    writer, results = merge_candidates(candidates, config, verbose=True)
    write_output(writer, config.output_path)
    return MergeReport(output_path=config.output_path, results=results)


def merge_streams(inputs: Iterable[SourceInput], config: Optional[MergeConfig] = None) -> MergeOutput:
    """Merge uploaded PDFs and images in memory and return a :class:`MergeOutput`."""

    config = config or MergeConfig()
    candidates: List[Candidate] = []
    skipped_files: List[str] = []

    for source_input in inputs:
        kind = classify(source_input.name, config)
        if kind is None:
            skipped_files.append(source_input.name)
            continue
        candidates.append(Candidate(name=source_input.name, kind=kind, stream=source_input.stream))

    if not candidates:
        raise EmptyInput("the uploaded files")

    writer, results = merge_candidates(order_candidates(candidates), config)

    if not any(result.ok for result in results):
        return MergeOutput(buffer=None, results=results, skipped_files=skipped_files)

    output_buffer = io.BytesIO()
    writer.write(output_buffer)
    output_buffer.seek(0)
    return MergeOutput(buffer=output_buffer, results=results, skipped_files=skipped_files)
