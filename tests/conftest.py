from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence, Tuple

import pytest
from PIL import Image
from PyPDF2 import PdfWriter

PageSizes = Sequence[Tuple[float, float]]


def pdf_bytes(sizes: PageSizes) -> bytes:
    """Build a PDF with one blank page per entry of *sizes*."""

    writer = PdfWriter()
    for width, height in sizes:
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def image_bytes(size: Tuple[int, int], fmt: str = "PNG", mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    color = 128 if mode in ("L", "P") else (200, 30, 30, 128)[: len(mode)]
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_pdf() -> Callable[[Path, PageSizes], Path]:
    def _make(path: Path, sizes: PageSizes) -> Path:
        path.write_bytes(pdf_bytes(sizes))
        return path

    return _make


@pytest.fixture
def make_image() -> Callable[..., Path]:
    def _make(path: Path, size: Tuple[int, int], mode: str = "RGB") -> Path:
        fmt = "JPEG" if path.suffix.lower() in (".jpg", ".jpeg") else "PNG"
        path.write_bytes(image_bytes(size, fmt=fmt, mode=mode))
        return path

    return _make


@pytest.fixture
def sample_folder(tmp_path: Path, make_pdf, make_image) -> Path:
    """``b.png`` (100x200), ``a.pdf`` (2 pages), ``c.jpg`` (300x100)."""

    folder = tmp_path / "files"
    folder.mkdir()
    make_image(folder / "b.png", (100, 200))
    make_pdf(folder / "a.pdf", [(101, 201), (102, 202)])
    make_image(folder / "c.jpg", (300, 100))
    return folder
