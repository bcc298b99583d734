"""Page geometry for placing images onto fixed-size pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidDimensions

DEFAULT_MARGIN = 25.0
ALIGN_CENTER = "center"


@dataclass(frozen=True)
class Placement:
    """Scaled size of an image and how it is aligned on the page."""

    width: float
    height: float
    scale: float
    align: str = ALIGN_CENTER


def usable_area(page_size: Tuple[float, float], margin: float = DEFAULT_MARGIN) -> Tuple[float, float]:
    """Return the page size with *margin* removed from every side."""

    page_width, page_height = page_size
    return page_width - 2 * margin, page_height - 2 * margin


def fit_image(
    area_width: float,
    area_height: float,
    image_width: float,
    image_height: float,
) -> Placement:
    """Scale an image uniformly so it fits inside the usable area.

    The scale factor is not clamped, so images smaller than the area are
    enlarged until one side touches the margin.
    """

    if area_width <= 0 or area_height <= 0:
        raise InvalidDimensions(area_width, area_height, what="Usable page area")
    if image_width <= 0 or image_height <= 0:
        raise InvalidDimensions(image_width, image_height)

    scale = min(area_width / image_width, area_height / image_height)
    return Placement(width=image_width * scale, height=image_height * scale, scale=scale)


def position_on_page(
    placement: Placement,
    page_size: Tuple[float, float],
    margin: float = DEFAULT_MARGIN,
) -> Tuple[float, float]:
    """Return the lower-left corner for drawing *placement* on a page.

    Images are centred horizontally and hang from the top margin; they are
    not centred vertically.
    """

    page_width, page_height = page_size
    x = (page_width - placement.width) / 2
    y = page_height - margin - placement.height
    return x, y
