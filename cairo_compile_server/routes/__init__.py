from .compile import router as compile_router
from .files import router as files_router
from .version import router as version_router

__all__ = ["compile_router", "files_router", "version_router"]
