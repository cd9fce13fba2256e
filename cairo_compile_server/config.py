"""Server configuration."""

from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class ToolchainMode(str, Enum):
    """How the Cairo compiler tools are launched."""
    cargo = "cargo"     # cargo run --release --bin <tool> inside cairo_dir
    binary = "binary"   # prebuilt executables on PATH or in tool_bin_dir


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables with CAIRO_API_ prefix.
    Example: CAIRO_API_TOOLCHAIN_MODE=binary CAIRO_API_COMPILE_TIMEOUT=60 uv run cairo-compile-server
    """

    model_config = SettingsConfigDict(env_prefix="CAIRO_API_")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Storage roots
    project_root: Path = Path("upload")
    sierra_root: Path = Path("compile/sierra")
    casm_root: Path = Path("compile/casm")

    # Toolchain
    cairo_dir: Path = Path("cairo")
    toolchain_mode: ToolchainMode = ToolchainMode.cargo
    cargo_bin: str = "cargo"
    scarb_bin: str = "scarb"
    tool_bin_dir: Optional[Path] = None

    # Limits (seconds / bytes); None disables
    compile_timeout: Optional[float] = 300.0
    max_upload_bytes: int = 128 * 1024 * 1024


settings = Settings()
