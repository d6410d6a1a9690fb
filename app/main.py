import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from postgrest.exceptions import APIError
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.route_guard import PageGuardMiddleware
from app.modules.auth import routes as auth_routes
from app.modules.navigation import routes as navigation_routes
from app.modules.categories import routes as categories_routes
from app.modules.cover import routes as cover_routes
from app.modules.selling_links import routes as selling_links_routes
from app.modules.users import routes as users_routes
from app.modules.profile import routes as profile_routes
from app.modules.products import routes as products_routes
from app.modules.products import brand_routes as brand_products_routes
from app.modules.uploads import routes as uploads_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Richiesta non valida") if errors else "Richiesta non valida"
    return JSONResponse(status_code=400, content={"error": message.removeprefix("Value error, ")})


@app.exception_handler(APIError)
async def postgrest_exception_handler(request: Request, exc: APIError):
    logger.warning("Backend query error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=400, content={"error": exc.message or "Errore del database"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": "Errore interno del server"})
    return JSONResponse(status_code=500, content={"error": str(exc) or "Errore interno del server"})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"] = list(message["headers"]) + [
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ]
            await send(message)

        await self.app(scope, receive, send_with_headers)


# Last added runs first: CORS, security headers, rate limit, page guard
app.add_middleware(PageGuardMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api")
app.include_router(navigation_routes.router, prefix="/api")
app.include_router(categories_routes.router, prefix="/api")
app.include_router(cover_routes.router, prefix="/api")
app.include_router(selling_links_routes.router, prefix="/api")
app.include_router(selling_links_routes.brand_router, prefix="/api")
app.include_router(users_routes.router, prefix="/api")
app.include_router(profile_routes.router, prefix="/api")
app.include_router(products_routes.router, prefix="/api")
app.include_router(brand_products_routes.router, prefix="/api")
app.include_router(uploads_routes.router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    if not settings.supabase_service_role_key:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set: user management and bans will fail")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: configuration present"""
    if not settings.supabase_url or not settings.supabase_key:
        return JSONResponse(status_code=503, content={"status": "not ready", "error": "Supabase non configurato"})
    return {"status": "ready"}


if settings.frontend_dir:
    # Built frontend behind the page guard; mounted last so API routes win
    app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")
else:
    @app.get("/")
    async def root():
        return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}
