"""Source upload endpoint."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from ..services.dispatcher import get_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/save-code/{remix_file_path:path}", response_class=PlainTextResponse)
async def save_code(remix_file_path: str, request: Request):
    """Store the raw request body under the project root.

    POST /save-code/proj/src/lib.cairo - returns the absolute path written,
    or an empty body if the upload was rejected or could not be stored.
    """
    dispatcher = get_dispatcher()
    limit = dispatcher.settings.max_upload_bytes

    data = bytearray()
    async for chunk in request.stream():
        data.extend(chunk)
        if len(data) > limit:
            logger.warning("Upload to %s exceeds %d bytes", remix_file_path, limit)
            return ""

    return await dispatcher.save_code(remix_file_path, bytes(data))
