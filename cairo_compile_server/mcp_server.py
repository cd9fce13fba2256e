"""MCP server for the Cairo compile server.

Exposes the compile pipeline as MCP tools so editor agents can upload
sources and compile them without going through HTTP.

Uses STDIO transport (standard for desktop MCP clients).
"""

from mcp.server.fastmcp import FastMCP

from cairo_compile_server.errors import VersionQueryError
from cairo_compile_server.models import CompileResponse, ScarbCompileResponse
from cairo_compile_server.services.dispatcher import get_dispatcher

mcp = FastMCP("cairo-compile")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_compile_response(path: str, response: CompileResponse) -> str:
    """Format a Sierra/CASM compile response as readable text."""
    parts = [f"## {path}: {response.status.value}"]
    if response.message:
        parts.append("\n## Compiler Output")
        parts.append(f"```\n{response.message.rstrip()}\n```")
    if response.file_content:
        parts.append("\n## Artifact")
        parts.append(f"```\n{response.file_content}\n```")
    return "\n".join(parts)


def _format_scarb_response(path: str, response: ScarbCompileResponse) -> str:
    """Format a Scarb build response as readable text."""
    files = response.file_content_map_array
    parts = [f"## {path}: {response.status.value}  ({len(files)} artifact(s))"]
    if response.message:
        parts.append("\n## Build Output")
        parts.append(f"```\n{response.message.rstrip()}\n```")
    for f in files:
        parts.append(f"\n### {f.file_name}")
        parts.append(f"```\n{f.file_content}\n```")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
async def cairo_version() -> str:
    """Get the version of the Cairo compiler used by this server."""
    try:
        return await get_dispatcher().cairo_version()
    except VersionQueryError as e:
        return f"Version query failed ({e.status.value}): {e.message}"


@mcp.tool()
async def save_code(path: str, source: str) -> str:
    """Upload a source file into the project storage.

    Args:
        path: Project relative file path (e.g. "hello/src/lib.cairo").
        source: File contents.
    """
    saved = await get_dispatcher().save_code(path, source.encode("utf-8"))
    if not saved:
        return f"Could not save {path}"
    return f"Saved {path}"


@mcp.tool()
async def compile_to_sierra(path: str) -> str:
    """Compile a previously uploaded .cairo file to Sierra.

    Args:
        path: Project relative path of the .cairo file.
    """
    response = await get_dispatcher().compile_to_sierra(path)
    return _format_compile_response(path, response)


@mcp.tool()
async def compile_to_casm(path: str) -> str:
    """Compile a Sierra file to CASM.

    Args:
        path: Project relative path of the .sierra file.
    """
    response = await get_dispatcher().compile_to_casm(path)
    return _format_compile_response(path, response)


@mcp.tool()
async def scarb_compile(path: str) -> str:
    """Build a Scarb project and return the files under target/dev.

    Args:
        path: Project relative path of the directory containing Scarb.toml.
    """
    response = await get_dispatcher().scarb_build(path)
    return _format_scarb_response(path, response)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """Run the Cairo compile MCP server on STDIO transport."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
