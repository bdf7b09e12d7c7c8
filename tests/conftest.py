"""
Shared test fixtures for the PDF to Image API test suite.
"""

from typing import Callable, Optional

import fitz  # PyMuPDF
import httpx
import pytest
from starlette.testclient import TestClient

from main import create_app
from pdf_api.downloader import PdfDownloader


class FakePdfHost:
    """In-memory stand-in for the remote server hosting a PDF.

    Records every request it receives so tests can assert on the URL
    and headers the downloader actually sent.
    """

    def __init__(self, body: bytes = b"", status_code: int = 200, headers: Optional[dict] = None):
        self.body = body
        self.status_code = status_code
        self.headers = headers or {"content-type": "application/pdf"}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.body, headers=self.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_url(self) -> str:
        return str(self.requests[-1].url)


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Build a real PDF with the given number of pages and page size (points)."""

    def _make(pages: int = 1, width: float = 200, height: float = 100) -> bytes:
        doc = fitz.open()
        for i in range(pages):
            page = doc.new_page(width=width, height=height)
            page.insert_text((20, 40), f"Page {i + 1}")
        data = doc.tobytes()
        doc.close()
        return data

    return _make


@pytest.fixture
def pdf_host(make_pdf) -> FakePdfHost:
    """A host serving a three-page 200x100pt PDF."""
    return FakePdfHost(body=make_pdf(pages=3))


@pytest.fixture
def make_client() -> Callable[..., TestClient]:
    """Build a TestClient whose downloader talks to the given fake host."""

    def _make(host: FakePdfHost, **downloader_kwargs) -> TestClient:
        downloader = PdfDownloader(transport=host.transport, **downloader_kwargs)
        return TestClient(create_app(downloader=downloader))

    return _make


@pytest.fixture
def client(make_client, pdf_host) -> TestClient:
    return make_client(pdf_host)


@pytest.fixture
def make_host() -> Callable[..., FakePdfHost]:
    """Build a fake PDF host with a custom body, status or headers."""
    return FakePdfHost
