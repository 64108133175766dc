from dotenv import load_dotenv

# .env must be loaded before modules read their settings at import time
load_dotenv()

import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.utils import logging as _log_setup  # noqa: F401  (installs the loguru file sink)
from app.utils import slog
from app.utils.metrics import record_request
from app.db.repo import init_db
from app.routers import admin, cart, catalog, functions, metrics, orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("[startup] tables ready")
    yield


app = FastAPI(
    lifespan=lifespan,
    title="LuxeAura Storefront API",
    description="Catalog, cart, orders, admin dashboard and AI-assisted shopping (recommendations, virtual try-on).",
)

_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials="*" not in _origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    req_id = slog.new_request_id()
    client_ip = request.client.host if request.client else None
    try:
        response = await call_next(request)
    except Exception as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        ctx = getattr(request.state, "log_context", {})
        slog.log_event(
            "request.error",
            request_id=req_id,
            path=str(request.url.path),
            method=request.method,
            latency_ms=latency_ms,
            client_ip=client_ip,
            error=str(e),
            **(ctx or {}),
        )
        raise
    latency_ms = int((time.perf_counter() - start) * 1000)
    ctx = getattr(request.state, "log_context", {}) or {}
    slog.finalize_request_log(
        request_id=req_id,
        method=request.method,
        path=str(request.url.path),
        status=response.status_code,
        latency_ms=latency_ms,
        client_ip=client_ip,
        ctx=ctx,
    )
    # route template keeps /products/{slug} to one metrics key
    route = request.scope.get("route")
    record_request(method=request.method, path=getattr(route, "path", None) or str(request.url.path), latency_ms=latency_ms)
    response.headers["X-Request-ID"] = req_id
    return response


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", include_in_schema=False)
def root():
    return {"message": "LuxeAura API running"}


app.include_router(catalog.router)
app.include_router(cart.router)
app.include_router(orders.router)
app.include_router(admin.router)
app.include_router(functions.router)
app.include_router(metrics.router)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
