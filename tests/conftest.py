import asyncio
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add src to sys.path so we can import answer_spacer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from answer_spacer.render.rasterizer import (  # noqa: E402
    ImagePageSource,
    PageSize,
    PageSource,
    RasterizationError,
)
from answer_spacer.store.spacer_store import SpacerStore  # noqa: E402


def row_coded_page(width: int, height: int, page_tag: int = 0) -> Image.Image:
    """Page whose row y is coloured (y % 256, y // 256, page_tag)."""
    rows = np.arange(height, dtype=np.int64)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = (rows % 256)[:, None]
    arr[:, :, 1] = (rows // 256)[:, None]
    arr[:, :, 2] = page_tag
    return Image.fromarray(arr, "RGB")


def decode_rows(image: Image.Image) -> np.ndarray:
    """Inverse of row_coded_page for column 0: source row of every image row."""
    arr = np.asarray(image.convert("RGB"), dtype=np.int64)
    return arr[:, 0, 0] + arr[:, 0, 1] * 256


class FailingPageSource(PageSource):
    """Wraps a source and fails to rasterize one page."""

    def __init__(self, inner: PageSource, fail_on: int):
        self.inner = inner
        self.fail_on = fail_on
        self.rendered: list[int] = []

    @property
    def page_count(self) -> int:
        return self.inner.page_count

    def page_size(self, index: int) -> PageSize:
        return self.inner.page_size(index)

    async def rasterize(self, index: int, scale: float) -> Image.Image:
        if index == self.fail_on:
            raise RasterizationError(f"decode error on page {index}", page_index=index)
        self.rendered.append(index)
        return await self.inner.rasterize(index, scale)


class GatedPageSource(PageSource):
    """Source whose rasterizations wait until released, for ordering tests."""

    def __init__(self, inner: PageSource):
        self.inner = inner
        self.gates: list[asyncio.Event] = []

    @property
    def page_count(self) -> int:
        return self.inner.page_count

    def page_size(self, index: int) -> PageSize:
        return self.inner.page_size(index)

    async def rasterize(self, index: int, scale: float) -> Image.Image:
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return await self.inner.rasterize(index, scale)


@pytest.fixture
def make_source():
    """Factory for in-memory page sources with row-coded pages."""

    def _make(*sizes: tuple[int, int]) -> ImagePageSource:
        images = [row_coded_page(w, h, page_tag=i) for i, (w, h) in enumerate(sizes)]
        return ImagePageSource(images)

    return _make


@pytest.fixture
def store() -> SpacerStore:
    return SpacerStore()
