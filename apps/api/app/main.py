import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from app.api.routes import router as api_router
from app.core.config import get_settings
from app.logging import configure_logging
from app.metrics import observe_unauthorized_identity, resolve_http_path_label
from app.middleware.correlation_id import CorrelationIdMiddleware
from app.middleware.request_logging import RequestLoggingMiddleware
from app.middleware.security_context import SecurityContextMiddleware
from app.otel import get_fastapi_server_request_hook, setup_otel
from app.platform.security.context import ContextVarContextProvider, initialize
from app.platform.security.errors import UnauthorizedError
from app.platform.security.rating import configure_rating_security


configure_logging()
logger = logging.getLogger("app.lifecycle")

app = FastAPI(title="Hockey Pickup API", version="0.1.0")
app.add_middleware(SecurityContextMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.include_router(api_router)


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    observe_unauthorized_identity(resolve_http_path_label(request))
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": exc.message})


settings = get_settings()
configure_rating_security(max_entries=settings.rating_cache_max_entries)
initialize(ContextVarContextProvider())
logger.info("security_context.initialized")

if settings.otel_enabled:
    setup_otel("api", True)

if not getattr(app, "_is_instrumented_by_opentelemetry", False):
    FastAPIInstrumentor().instrument_app(app, server_request_hook=get_fastapi_server_request_hook())
