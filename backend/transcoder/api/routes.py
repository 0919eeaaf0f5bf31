"""API routes for scheduling conversions of files already in the input directory."""
import asyncio
import logging

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import JSONResponse

from transcoder.conversion.models import ConversionRequest
from transcoder.conversion.service import ConversionService

logger = logging.getLogger("transcoder.api")
router = APIRouter(prefix="/api", tags=["transcoder"])


def _service(request: Request) -> ConversionService:
    return request.app.state.conversion_service


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/convert")
async def convert(request: Request, payload: dict = Body(...)):
    """Convert one input file. Waits for the task and returns its single result."""
    try:
        conversion = ConversionRequest.from_payload(payload)
    except ValueError as e:
        logger.info("Rejected conversion request: %s", e)
        raise HTTPException(400, str(e))
    future = _service(request).submit(conversion)
    result = await asyncio.wrap_future(future)
    if not result.success:
        return JSONResponse(status_code=422, content=result.to_dict())
    return result.to_dict()
