"""Compiler version endpoint."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from ..errors import VersionQueryError
from ..services.dispatcher import get_dispatcher

router = APIRouter()


@router.get("/cairo-version", response_class=PlainTextResponse)
async def cairo_version():
    """Return the version string printed by cairo-compile --version."""
    dispatcher = get_dispatcher()
    try:
        return await dispatcher.cairo_version()
    except VersionQueryError as e:
        raise HTTPException(status_code=500, detail=e.message)
