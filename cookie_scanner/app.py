"""
Server entry point — FastAPI app setup and route configuration.
Sets up the FastAPI server with CORS, static file serving, and the scan API.
"""

from __future__ import annotations

import contextlib
import pathlib
from collections.abc import AsyncGenerator

import dotenv
import fastapi
from fastapi.middleware import cors
from starlette import responses

from cookie_scanner import config
from cookie_scanner.models import cookies
from cookie_scanner.pipeline import scanner as scanner_mod
from cookie_scanner.routes import scan_helpers
from cookie_scanner.utils import errors, logger
from cookie_scanner.utils import url as url_mod

dotenv.load_dotenv()

log = logger.create_logger("Server")


@contextlib.asynccontextmanager
async def lifespan(_app: fastapi.FastAPI) -> AsyncGenerator[None]:
    """Log server start on startup."""
    settings = config.get_settings()
    log.section("Cookie Scanner Server Started")
    log.info("Environment", {"env": settings.environment, "publicDir": str(settings.public_dir)})
    yield


app = fastapi.FastAPI(title="Cookie Scanner", lifespan=lifespan)


def get_scanner() -> scanner_mod.CookieScanner:
    """Dependency returning the scanner used by the API."""
    return scanner_mod.CookieScanner(config.get_settings())


# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    cors.CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# API Routes
# ============================================================================


async def _read_body(request: fastapi.Request, limit: int) -> bytes | None:
    """Read the request body, or return None once it exceeds *limit* bytes."""
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        return None

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            return None
    return bytes(body)


def _error(status_code: int, body: cookies.ErrorResponse) -> responses.JSONResponse:
    return responses.JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/healthz")
async def healthz() -> dict[str, bool]:
    """Liveness probe."""
    return {"ok": True}


@app.post("/api/scan", response_model=cookies.ScanResult)
async def scan_endpoint(
    request: fastapi.Request,
    scanner: scanner_mod.CookieScanner = fastapi.Depends(get_scanner),
) -> cookies.ScanResult | responses.JSONResponse:
    """
    Scan a URL and return cookies before consent, after consent, and the difference.
    """
    raw = await _read_body(request, scan_helpers.MAX_BODY_BYTES)
    if raw is None:
        return _error(413, cookies.ErrorResponse(error="Request body too large"))

    target = scan_helpers.extract_target_url(
        raw.decode("utf-8", errors="replace"),
        request.headers.get("content-type"),
        request.query_params,
    )
    if not target:
        return _error(
            400,
            cookies.ErrorResponse(error=scan_helpers.MISSING_URL_ERROR, hint=scan_helpers.MISSING_URL_HINT),
        )

    try:
        target = url_mod.validate_scan_url(target)
    except errors.InvalidUrl as exc:
        log.warn("Rejected scan request", {"reason": str(exc)})
        return _error(400, cookies.ErrorResponse(error=scan_helpers.INVALID_URL_ERROR))

    log.info("Incoming scan request", {"url": target})
    try:
        return await scanner.scan(target)
    except errors.ScanFailure as exc:
        return _error(scan_helpers.failure_status(exc), scan_helpers.failure_body(exc))


# ============================================================================
# Static File Serving
# ============================================================================


def _resolve_static(public_dir: pathlib.Path, full_path: str) -> pathlib.Path | None:
    """Map a request path to a file inside *public_dir*, refusing traversal."""
    root = public_dir.resolve()
    candidate = (root / full_path).resolve()
    if not candidate.is_relative_to(root):
        return None
    if candidate.is_file():
        return candidate
    index = root / "index.html"
    return index if index.is_file() else None


@app.get("/{full_path:path}", include_in_schema=False)
async def serve_frontend(full_path: str) -> responses.Response:
    """Serve the front-end, falling back to index.html for unknown paths."""
    file_path = _resolve_static(config.get_settings().public_dir, full_path)
    if file_path is None:
        return _error(404, cookies.ErrorResponse(error="Not found"))
    return responses.FileResponse(str(file_path))
