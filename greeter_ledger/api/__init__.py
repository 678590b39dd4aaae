"""
Greeter Ledger API Application Factory
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .ownership import router as ownership_router
from .greetings import router as greetings_router
from .treasury import router as treasury_router
from .portfolio import router as portfolio_router
from .. import __version__
from ..config import get_config
from ..errors import UnauthorizedAccount, InvalidOwner, TransferFailed
from ..logging_config import setup_logging


def _error(status_code: int, exc: Exception, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Greeter Ledger API",
        description="Single-owner greeting ledger with deterministic portfolio queries",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(UnauthorizedAccount)
    async def unauthorized_handler(request: Request, exc: UnauthorizedAccount):
        return _error(403, exc, "UnauthorizedAccount")

    @app.exception_handler(InvalidOwner)
    async def invalid_owner_handler(request: Request, exc: InvalidOwner):
        return _error(400, exc, "InvalidOwner")

    @app.exception_handler(TransferFailed)
    async def transfer_failed_handler(request: Request, exc: TransferFailed):
        return _error(502, exc, "TransferFailed")

    @app.exception_handler(OverflowError)
    async def overflow_handler(request: Request, exc: OverflowError):
        return _error(400, exc, "Overflow")

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error(400, exc, "InvalidRequest")

    app.include_router(ownership_router, prefix="/ownership", tags=["Ownership"])
    app.include_router(greetings_router, prefix="/greetings", tags=["Greetings"])
    app.include_router(treasury_router, prefix="/treasury", tags=["Treasury"])
    app.include_router(portfolio_router, prefix="/portfolio", tags=["Portfolio"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "greeter_ledger_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Greeter Ledger API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "ownership": "/ownership",
                "greetings": "/greetings",
                "treasury": "/treasury",
                "portfolio": "/portfolio"
            }
        }

    return app


def run_server(host: str = None, port: int = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)
    uvicorn.run(
        "greeter_ledger.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level="info"
    )
