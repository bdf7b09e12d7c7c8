"""Unit tests for pdf_api.renderer."""

import base64
import io
from unittest.mock import patch

import fitz  # PyMuPDF
import pytest
from PIL import Image

from pdf_api.errors import RenderError
from pdf_api.renderer import encode_image, open_document, render_document, to_data_url
from pdf_api.schemas import ImageFormat

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8"


class TestOpenDocument:

    def test_opens_valid_pdf(self, make_pdf):
        doc = open_document(make_pdf(pages=2))
        assert len(doc) == 2
        doc.close()

    def test_rejects_garbage(self):
        with pytest.raises(RenderError, match="Invalid PDF"):
            open_document(b"this is not a pdf")

    def test_rejects_password_protected(self, make_pdf):
        doc = fitz.open(stream=make_pdf(), filetype="pdf")
        encrypted = doc.tobytes(
            encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="user"
        )
        doc.close()
        with pytest.raises(RenderError, match="Password-protected"):
            open_document(encrypted)


class TestEncodeImage:

    @pytest.fixture
    def gradient(self) -> Image.Image:
        return Image.linear_gradient("L").convert("RGB")

    def test_png(self, gradient):
        assert encode_image(gradient, ImageFormat.PNG).startswith(PNG_MAGIC)

    @pytest.mark.parametrize("fmt", [ImageFormat.JPG, ImageFormat.JPEG])
    def test_jpeg(self, gradient, fmt):
        assert encode_image(gradient, fmt).startswith(JPEG_MAGIC)

    def test_jpeg_quality_affects_size(self, gradient):
        low = encode_image(gradient, ImageFormat.JPEG, quality=10)
        high = encode_image(gradient, ImageFormat.JPEG, quality=95)
        assert len(low) < len(high)


def test_to_data_url():
    assert to_data_url(b"abc", "image/png") == "data:image/png;base64,YWJj"


class TestRenderDocument:

    def test_renders_every_page_in_order(self, make_pdf):
        result = render_document(make_pdf(pages=3))
        assert result.total_pages == 3
        assert result.rendered_pages == 3
        assert [p.page for p in result.pages] == [1, 2, 3]

    def test_scale_sets_pixel_dimensions(self, make_pdf):
        """A 200x100pt page at scale 2 is 400x200 pixels."""
        result = render_document(make_pdf(width=200, height=100), scale=2)
        page = result.pages[0]
        assert (page.width, page.height) == (400, 200)

        result = render_document(make_pdf(width=200, height=100), scale=1)
        assert (result.pages[0].width, result.pages[0].height) == (200, 100)

    def test_dimensions_match_encoded_image(self, make_pdf):
        page = render_document(make_pdf(), fmt=ImageFormat.JPEG, scale=1.5).pages[0]
        with Image.open(io.BytesIO(page.data)) as img:
            assert img.format == "JPEG"
            assert img.size == (page.width, page.height)

    def test_png_data_url(self, make_pdf):
        page = render_document(make_pdf()).pages[0]
        assert page.mime_type == "image/png"
        prefix = "data:image/png;base64,"
        assert page.data_url.startswith(prefix)
        assert base64.b64decode(page.data_url[len(prefix):]).startswith(PNG_MAGIC)

    def test_jpeg_data_url(self, make_pdf):
        page = render_document(make_pdf(), fmt=ImageFormat.JPG).pages[0]
        assert page.data_url.startswith("data:image/jpeg;base64,")
        assert page.data.startswith(JPEG_MAGIC)

    def test_white_background(self, make_pdf):
        page = render_document(make_pdf(), scale=1).pages[0]
        with Image.open(io.BytesIO(page.data)) as img:
            assert img.mode == "RGB"
            assert img.getpixel((img.width - 1, img.height - 1)) == (255, 255, 255)

    @pytest.mark.parametrize("max_pages, expected", [
        (None, 3),
        (0, 3),
        (1, 1),
        (2, 2),
        (10, 3),
    ])
    def test_max_pages(self, make_pdf, max_pages, expected):
        result = render_document(make_pdf(pages=3), max_pages=max_pages)
        assert result.total_pages == 3
        assert result.rendered_pages == expected

    def test_failure_on_any_page_aborts(self, make_pdf):
        """A page failing mid-document raises instead of returning the pages so far."""
        good = Image.new("RGB", (10, 10), "white")
        with patch("pdf_api.renderer.render_page", side_effect=[good, RuntimeError("bad glyph")]):
            with pytest.raises(RenderError, match="Failed to render page 2: bad glyph"):
                render_document(make_pdf(pages=3))
