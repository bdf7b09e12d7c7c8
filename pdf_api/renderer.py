"""
PDF rasterisation and image encoding.

Parsing and rendering are delegated to PyMuPDF, encoding to Pillow.
Everything here is blocking; callers on the event loop should run
render_document in a worker thread.
"""

import base64
import io
from dataclasses import dataclass, field
from typing import List, Optional

import fitz  # PyMuPDF
from PIL import Image

from pdf_api.errors import RenderError
from pdf_api.logging_config import get_logger
from pdf_api.schemas import ImageFormat

logger = get_logger(__name__)


@dataclass
class RenderedPage:
    """One encoded page image."""

    page: int
    data: bytes
    mime_type: str
    width: int
    height: int

    @property
    def data_url(self) -> str:
        return to_data_url(self.data, self.mime_type)


@dataclass
class RenderResult:
    """Outcome of rendering a document."""

    total_pages: int
    pages: List[RenderedPage] = field(default_factory=list)

    @property
    def rendered_pages(self) -> int:
        return len(self.pages)


def open_document(data: bytes) -> fitz.Document:
    """Open PDF bytes, rejecting unreadable and password-protected files."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise RenderError(f"Invalid PDF: {e}")

    if doc.needs_pass:
        doc.close()
        raise RenderError("Password-protected PDFs are not supported")
    if len(doc) == 0:
        doc.close()
        raise RenderError("Invalid PDF: document has no pages")
    return doc


def render_page(page: fitz.Page, scale: float) -> Image.Image:
    """Rasterise a single page at the given zoom on a white background."""
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
    return Image.frombytes("RGB", [pix.width, pix.height], pix.samples)


def encode_image(image: Image.Image, fmt: ImageFormat, quality: int = 85) -> bytes:
    """Encode a PIL image as PNG or JPEG bytes."""
    buffer = io.BytesIO()
    if fmt.is_jpeg:
        image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    else:
        image.save(buffer, format="PNG")
    return buffer.getvalue()


def to_data_url(data: bytes, mime_type: str) -> str:
    """Wrap binary image data in a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def render_document(
    data: bytes,
    fmt: ImageFormat = ImageFormat.PNG,
    quality: int = 85,
    scale: float = 2.0,
    max_pages: Optional[int] = None,
) -> RenderResult:
    """Render pages 1..N of a PDF to encoded images.

    Args:
        data: Raw PDF bytes
        fmt: Output image format
        quality: JPEG quality (ignored for PNG)
        scale: Zoom factor, 1.0 = 72 dpi
        max_pages: Render at most this many pages (None or 0 renders all)

    Returns:
        RenderResult with total page count and the rendered pages in order

    Raises:
        RenderError: if the document cannot be opened or any page fails
    """
    doc = open_document(data)
    try:
        total_pages = len(doc)
        count = min(total_pages, max_pages) if max_pages else total_pages
        result = RenderResult(total_pages=total_pages)

        for index in range(count):
            try:
                image = render_page(doc.load_page(index), scale)
                encoded = encode_image(image, fmt, quality)
            except Exception as e:
                logger.error(f"Rendering page {index + 1}/{count} failed: {e}", exc_info=True)
                raise RenderError(f"Failed to render page {index + 1}: {e}")

            # Dimensions of the encoded image, not the page box
            with Image.open(io.BytesIO(encoded)) as decoded:
                width, height = decoded.size

            result.pages.append(RenderedPage(
                page=index + 1,
                data=encoded,
                mime_type=fmt.mime_type,
                width=width,
                height=height,
            ))

        logger.debug(f"Rendered {count}/{total_pages} pages at scale {scale} as {fmt.value}")
        return result
    finally:
        doc.close()
