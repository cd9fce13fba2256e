"""Compile endpoints."""

from fastapi import APIRouter

from ..models import CompileResponse, ScarbCompileResponse
from ..services.dispatcher import get_dispatcher

router = APIRouter()


@router.get("/compile-to-sierra/{remix_file_path:path}", response_model=CompileResponse)
async def compile_to_sierra(remix_file_path: str):
    """Compile an uploaded .cairo file to Sierra.

    GET /compile-to-sierra/proj/src/lib.cairo
    """
    dispatcher = get_dispatcher()
    return await dispatcher.compile_to_sierra(remix_file_path)


@router.get("/compile-to-casm/{remix_file_path:path}", response_model=CompileResponse)
async def compile_to_casm(remix_file_path: str):
    """Compile a .sierra file to CASM.

    GET /compile-to-casm/proj/src/lib.sierra
    """
    dispatcher = get_dispatcher()
    return await dispatcher.compile_to_casm(remix_file_path)


@router.get("/scarb-compile/{remix_file_path:path}", response_model=ScarbCompileResponse)
async def scarb_compile(remix_file_path: str):
    """Build an uploaded Scarb project directory.

    GET /scarb-compile/proj - every text file under proj/target/dev is returned.
    """
    dispatcher = get_dispatcher()
    return await dispatcher.scarb_build(remix_file_path)
