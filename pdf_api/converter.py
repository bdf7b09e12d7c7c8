"""
Conversion pipeline: resolve URL -> download -> render -> assemble.
"""

from datetime import datetime, timezone
from typing import Optional

from starlette.concurrency import run_in_threadpool

from pdf_api.downloader import PdfDownloader
from pdf_api.logging_config import get_logger
from pdf_api.renderer import render_document
from pdf_api.schemas import ConversionData, ConversionMetadata, ConvertRequest, PageImage
from pdf_api.url_resolver import resolve_pdf_url, validate_source_url

logger = get_logger(__name__)


async def convert(
    request: ConvertRequest,
    downloader: Optional[PdfDownloader] = None,
) -> ConversionData:
    """Run the full conversion for one request.

    Any ConversionError raised along the way aborts the pipeline;
    no partial page list is ever returned.
    """
    downloader = downloader or PdfDownloader()

    source_url = validate_source_url(request.url)
    pdf_url = resolve_pdf_url(source_url)
    logger.info(f"Converting {source_url} (fetching {pdf_url})")

    pdf_bytes = await downloader.fetch(pdf_url)

    result = await run_in_threadpool(
        render_document,
        pdf_bytes,
        request.format,
        request.quality,
        request.scale,
        request.max_pages,
    )

    logger.info(
        f"Rendered {result.rendered_pages}/{result.total_pages} pages "
        f"as {request.format.value} at scale {request.scale:g}",
        extra={"data": {
            "totalPages": result.total_pages,
            "renderedPages": result.rendered_pages,
            "format": request.format.value,
            "scale": request.scale,
        }},
    )

    return ConversionData(
        total_pages=result.total_pages,
        rendered_pages=result.rendered_pages,
        pages=[
            PageImage(page=p.page, data_url=p.data_url, width=p.width, height=p.height)
            for p in result.pages
        ],
        metadata=ConversionMetadata(
            source_url=request.url,
            format=request.format.value,
            scale=request.scale,
            processed_at=datetime.now(timezone.utc),
        ),
    )
