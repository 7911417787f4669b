"""
Nettoria Storefront - Main FastAPI Application

Single entry point for the cart API used by the storefront pages.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from nettoria.cart import build_backend
from nettoria.errors import ERROR_INVALID_REQUEST, CartError
from nettoria.logging import get_logger
from nettoria.routers import router as api_router

logger = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"message": message}},
    )


def create_app(backend=None) -> FastAPI:
    """
    Build the application.

    Args:
        backend: Key-value backend for carts; defaults to the one named
            by CART_STORAGE.
    """
    app = FastAPI(
        title="Nettoria Storefront",
        description="Cart and pricing API for the hosting storefront",
        version="1.0.0",
    )
    app.state.cart_backend = backend if backend is not None else build_backend()
    logger.info(f"Cart backend: {type(app.state.cart_backend).__name__}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CartError)
    async def cart_error_handler(request: Request, exc: CartError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in errors
        )
        return _error(422, detail or ERROR_INVALID_REQUEST)

    app.include_router(api_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "nettoria"}

    return app


app = create_app()
