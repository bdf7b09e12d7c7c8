"""
Remote PDF download with timeout and size caps.
"""

import asyncio
import logging
from typing import Optional

import httpx

from pdf_api.config import get
from pdf_api.errors import PdfDownloadError, PdfTooLargeError
from pdf_api.logging_config import get_logger


class PdfDownloader:
    """Fetch PDF bytes over HTTP(S).

    The whole exchange (connect, redirects, body) is bounded by a single
    timeout. Bodies larger than max_size are rejected without being fully
    buffered.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize downloader.

        Args:
            timeout: Total download budget in seconds
            max_size: Maximum accepted body size in bytes
            transport: Optional httpx transport (used by tests to stub the network)
            logger: Optional logger instance
        """
        self._timeout = timeout if timeout is not None else get("download", "timeout_seconds")
        self._max_size = (
            max_size if max_size is not None
            else get("download", "max_pdf_size_mb") * 1024 * 1024
        )
        self._transport = transport
        self._headers = {
            "User-Agent": get("download", "user_agent"),
            "Accept": get("download", "accept"),
        }
        self._logger = logger or get_logger(__name__)

    @property
    def max_size(self) -> int:
        """Maximum file size in bytes."""
        return self._max_size

    @property
    def timeout(self) -> float:
        return self._timeout

    def size_limit_message(self) -> str:
        mb = self._max_size / 1024 / 1024
        return f"PDF exceeds {mb:g}MB limit"

    async def fetch(self, url: str) -> bytes:
        """Download url and return the body.

        Raises:
            PdfDownloadError: non-2xx status, timeout or transport failure
            PdfTooLargeError: body larger than max_size
        """
        try:
            return await asyncio.wait_for(self._fetch(url), timeout=self._timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            self._logger.warning(f"Download timed out after {self._timeout}s: {url}")
            raise PdfDownloadError(
                f"Failed to download PDF: timed out after {self._timeout:g}s"
            )
        except httpx.HTTPError as e:
            self._logger.warning(f"Download failed for {url}: {e}")
            raise PdfDownloadError(f"Failed to download PDF: {e}")

    async def _fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(
            transport=self._transport,
            follow_redirects=get("download", "follow_redirects"),
            headers=self._headers,
            timeout=self._timeout,
        ) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    raise PdfDownloadError(
                        f"Failed to download PDF: {response.status_code}"
                    )

                content_length = response.headers.get("content-length")
                if content_length and content_length.isdigit() and int(content_length) > self._max_size:
                    self._logger.warning(f"Rejected by Content-Length: {content_length} bytes")
                    raise PdfTooLargeError(self.size_limit_message())

                buffer = bytearray()
                async for chunk in response.aiter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) > self._max_size:
                        self._logger.warning(
                            f"Download aborted after {len(buffer)} bytes (limit {self._max_size})"
                        )
                        raise PdfTooLargeError(self.size_limit_message())

        self._logger.info(
            f"Downloaded {len(buffer)} bytes from {url}",
            extra={"data": {"bytes": len(buffer)}},
        )
        return bytes(buffer)
