"""HTTP server for the PDF page selection service using FastAPI."""

import asyncio
import base64
import json
import logging
import time
from typing import Dict, Any, List, Optional

from fastapi import FastAPI, HTTPException, UploadFile, File, Form
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .backends.base import Backend
from .backends.document_info import DocumentInfoBackend
from .backends.page_selection import PageSelectionBackend
from .config import get_config
from .ranges.errors import PageRangeError

logging.basicConfig(
    level=get_config().server.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


# Pydantic models
class ProcessRequest(BaseModel):
    """Request body for POST /process (base64 mode)."""
    operation: str = Field(..., description="Operation: select, extract_text, page_count, page_labels, grep")
    data: str = Field(..., description="Base64-encoded PDF data")
    options: Dict[str, str] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response body for GET /health."""
    status: str = "ok"
    operations: List[str]
    version: str = VERSION


def _error_detail(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def _bad_request(e: ValueError) -> HTTPException:
    if isinstance(e, PageRangeError):
        return HTTPException(status_code=400, detail={"success": False, "error": e.to_dict()})
    return HTTPException(status_code=400, detail=_error_detail("VALIDATION_ERROR", str(e)))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="PDF Page Selection Service",
        description="Select, reorder and rotate PDF pages with a page range grammar, and extract or search their text",
        version=VERSION,
    )

    backends: List[Backend] = [
        PageSelectionBackend(),
        DocumentInfoBackend(),
    ]

    supported_operations = set()
    for backend in backends:
        supported_operations.update(backend.SUPPORTED_OPERATIONS)

    def find_backend(operation: str) -> Optional[Backend]:
        for backend in backends:
            if backend.supports(operation):
                return backend
        return None

    def check_size(pdf_data: bytes) -> None:
        config = get_config()
        max_bytes = config.selection.max_file_size_mb * 1024 * 1024
        if len(pdf_data) > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=_error_detail(
                    "FILE_TOO_LARGE",
                    f"File exceeds {config.selection.max_file_size_mb}MB limit",
                ),
            )

    async def run(operation: str, pdf_data: bytes, options: Dict[str, str]):
        backend = find_backend(operation)
        if backend is None:
            raise HTTPException(
                status_code=400,
                detail=_error_detail(
                    "INVALID_OPERATION",
                    f"Operation '{operation}' is not supported",
                    {"supported_operations": sorted(supported_operations)},
                ),
            )

        try:
            return await asyncio.to_thread(backend.process, pdf_data, operation, options)
        except ValueError as e:
            logger.info(f"Rejected {operation} request: {e}")
            raise _bad_request(e)
        except Exception as e:
            logger.exception(f"{operation} failed: {e}")
            raise HTTPException(
                status_code=500,
                detail=_error_detail("PROCESSING_FAILED", str(e)),
            )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            operations=sorted(supported_operations),
            version=VERSION,
        )

    @app.get("/ready")
    async def readiness_check():
        return {"status": "ready"}

    @app.post("/api/select")
    async def select(
        file: UploadFile = File(...),
        pages: str = Form(...),
    ):
        """Return a new PDF holding the selected pages in the requested order."""
        pdf_data = await file.read()
        check_size(pdf_data)
        logger.info(f"Select request: size={len(pdf_data)} bytes, pages={pages!r}")

        output_data, _, metadata = await run("select", pdf_data, {"pages": pages})
        return Response(
            content=output_data,
            media_type="application/pdf",
            headers={
                "X-Page-Count": metadata["output_pages"],
                "X-Source-Page-Count": metadata["source_pages"],
            },
        )

    @app.post("/api/text")
    async def extract_text(
        file: UploadFile = File(...),
        pages: str = Form(""),
    ):
        """Extract text of the selected pages (all pages when empty)."""
        start_time = time.time()

        pdf_data = await file.read()
        check_size(pdf_data)
        logger.info(f"Text request: size={len(pdf_data)} bytes, pages={pages!r}")

        output_data, _, metadata = await run("extract_text", pdf_data, {"pages": pages})
        return {
            "success": True,
            "result": json.loads(output_data.decode("utf-8")),
            "metadata": metadata,
            "processing_time_ms": int((time.time() - start_time) * 1000),
        }

    @app.post("/api/grep")
    async def grep(
        file: UploadFile = File(...),
        pattern: str = Form(...),
        max_results: str = Form(""),
        ignore_case: str = Form("false"),
    ):
        """Search page text for a regular expression."""
        start_time = time.time()

        pdf_data = await file.read()
        check_size(pdf_data)

        options = {"pattern": pattern, "ignore_case": ignore_case}
        if max_results:
            options["max_results"] = max_results

        output_data, _, metadata = await run("grep", pdf_data, options)
        return {
            "success": True,
            "result": json.loads(output_data.decode("utf-8")),
            "metadata": metadata,
            "processing_time_ms": int((time.time() - start_time) * 1000),
        }

    @app.post("/process")
    async def process_document(request: ProcessRequest) -> Dict[str, Any]:
        """Process a PDF via base64-encoded payload."""
        start_time = time.time()

        try:
            document_data = base64.b64decode(request.data, validate=True)
        except Exception as e:
            raise HTTPException(
                status_code=400,
                detail=_error_detail("INVALID_BASE64", str(e)),
            )

        check_size(document_data)

        output_data, output_format, metadata = await run(
            request.operation, document_data, request.options
        )
        processing_time_ms = int((time.time() - start_time) * 1000)

        if output_format == "pdf":
            result: Any = base64.b64encode(output_data).decode("ascii")
            media_type = "application/pdf"
        else:
            result = json.loads(output_data.decode("utf-8"))
            media_type = "application/json"

        return {
            "success": True,
            "result": result,
            "format": media_type,
            "metadata": {str(k): str(v) for k, v in metadata.items()},
            "processing_time_ms": processing_time_ms,
        }

    return app


# Create app instance for uvicorn
app = create_app()


def run_server():
    """Run the HTTP server."""
    import uvicorn
    config = get_config()
    logger.info(f"Starting HTTP server on {config.server.host}:{config.server.port}")
    uvicorn.run(
        "pdfpages.http_server:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
