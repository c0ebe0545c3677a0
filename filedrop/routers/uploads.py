# filedrop/routers/uploads.py
from time import perf_counter

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from filedrop.core.logging_config import logger
from filedrop.core.settings import Settings, get_settings
from filedrop.observability.metrics import (
    files_saved_counter,
    latency_hist,
    saved_bytes_hist,
    upload_requests_counter,
)
from filedrop.schemas.uploads import ErrorOut, UploadFilesOut, build_response
from filedrop.services.multipart_stream import InvalidMultipartBody, iter_form_parts
from filedrop.services.upload_orchestrator import UploadOrchestrator

router = APIRouter(prefix="/upload", tags=["upload"])


def get_orchestrator(settings: Settings = Depends(get_settings)) -> UploadOrchestrator:
    return UploadOrchestrator.from_settings(settings)


@router.post(
    "/{identifier}/{category}",
    response_model=UploadFilesOut,
    responses={
        400: {"model": ErrorOut},
        408: {"model": ErrorOut},
        413: {"model": ErrorOut},
        500: {"model": ErrorOut},
    },
)
async def upload_files(
    identifier: str,
    category: str,
    request: Request,
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """
    Sla alle bestandsdelen van een multipart upload op.

    Retourneert {"files": [...]} met de opgeslagen namen, of {"error": ...}.
    """
    t0 = perf_counter()
    # parts worden pas gelezen als de orchestrator erom vraagt, binnen de deadline
    parts = iter_form_parts(request.headers.get("content-type", ""), request.stream())
    try:
        outcome = await orchestrator.handle_upload(identifier, category, parts)
    except InvalidMultipartBody as e:
        upload_requests_counter.labels(result="invalid_body").inc()
        logger.info("upload_invalid_body", error=str(e))
        return JSONResponse(status_code=400, content={"error": "Invalid multipart body"})
    finally:
        await parts.aclose()
        latency_hist.observe(perf_counter() - t0)

    upload_requests_counter.labels(result=outcome.kind.value).inc()
    for saved in outcome.files:
        files_saved_counter.inc()
        saved_bytes_hist.observe(saved.size)

    logger.info(
        "upload_finished",
        identifier=identifier,
        category=category,
        result=outcome.kind.value,
        files=len(outcome.files),
    )

    status_code, body = build_response(outcome)
    return JSONResponse(status_code=status_code, content=body.model_dump())
