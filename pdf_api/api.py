"""
API route handlers.

Provides:
- Service info (GET / and GET /api/index)
- PDF to image conversion (POST /api/convert)
"""

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from pdf_api import __version__
from pdf_api.config import get
from pdf_api.converter import convert
from pdf_api.errors import (
    ConversionError,
    InvalidRequestError,
    InvalidUrlError,
    MethodNotAllowedError,
    RenderError,
)
from pdf_api.logging_config import get_logger
from pdf_api.schemas import ConvertRequest, ConvertResponse, ErrorResponse, ServiceInfo

logger = get_logger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def error_response(error: ConversionError) -> JSONResponse:
    """Render a ConversionError as the failure envelope."""
    body = ErrorResponse(error=error.to_dict())
    return JSONResponse(body.model_dump(mode="json"), status_code=error.status_code)


def _format_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{loc}: {first.get('msg', 'invalid value')}"


async def _read_body(request: Request) -> dict:
    """Parse the JSON body; a missing or malformed body counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# =============================================================================
# Endpoints
# =============================================================================

async def api_index(request: Request) -> JSONResponse:
    """Static service description."""
    info = ServiceInfo(
        name=get("service", "name"),
        version=__version__,
        status=get("service", "status"),
        endpoints={"convert": "POST /api/convert"},
    )
    return JSONResponse(info.model_dump())


async def api_convert(request: Request) -> Response:
    """
    Convert a remote PDF into per-page base64 image data URLs.

    POST /api/convert
    Body: {"url": str, "format"?: "png"|"jpg"|"jpeg", "quality"?: int,
           "scale"?: float, "maxPages"?: int}
    """
    if request.method == "OPTIONS":
        return Response(status_code=200)

    if request.method != "POST":
        logger.warning(f"Rejected {request.method} on /api/convert")
        return error_response(MethodNotAllowedError())

    body = await _read_body(request)
    if not body.get("url"):
        return error_response(InvalidUrlError())

    try:
        convert_request = ConvertRequest.model_validate(body)
    except ValidationError as e:
        message = _format_validation_error(e)
        logger.warning(f"Invalid convert request: {message}")
        return error_response(InvalidRequestError(message))

    downloader = getattr(request.app.state, "downloader", None)

    try:
        data = await convert(convert_request, downloader=downloader)
    except ConversionError as e:
        logger.warning(f"Conversion failed [{e.code}]: {e.message}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Convert error: {e}", exc_info=True)
        return error_response(RenderError(str(e) or None))

    response = ConvertResponse(data=data)
    return JSONResponse(response.model_dump(mode="json", by_alias=True))


# =============================================================================
# Route Registration
# =============================================================================

routes = [
    Route("/", api_index, methods=["GET"]),
    Route("/api/index", api_index, methods=["GET"]),
    Route("/api/convert", api_convert, methods=ALL_METHODS),
]
