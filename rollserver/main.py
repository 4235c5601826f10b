from fastapi import FastAPI, Depends, Header, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.routing import Mount
import os, time
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from .config import Settings
from .deps import AdminUnauthorized, require_admin_token, get_store
from .roller import RollGenerationError, generate_roll, resolve_client_id
from .schemas import RollResponse, StoredRollsResponse, HealthResponse, ErrorResponse
from .state import RollLogStore
from .metrics import REQUESTS, LATENCY, ROLLS, ADMIN_DENIED
from .logging_utils import log_event, dump_logs, new_req_id, logger

SERVICE = "server-roll"
VERSION = "0.1.0"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class NoCacheStaticFiles(StaticFiles):
    """Static files without validators, so browsers always refetch."""

    def is_not_modified(self, response_headers, request_headers) -> bool:
        return False

    def file_response(self, *args, **kwargs):
        resp = super().file_response(*args, **kwargs)
        for name in ("etag", "last-modified"):
            if name in resp.headers:
                del resp.headers[name]
        resp.headers.update(NO_CACHE_HEADERS)
        return resp


def route_label(scope) -> str:
    """Metric label for a request: the route template, never the raw path."""
    route = scope.get("route")
    if route is None:
        return "unmatched"
    if isinstance(route, Mount):
        return "static"
    return getattr(route, "path", "unmatched")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Server Roll API", version=VERSION)
    app.state.settings = settings
    app.state.store = RollLogStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ALLOW_ORIGIN],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request, exc):
        return PlainTextResponse("Too Many Requests", status_code=429)

    @app.exception_handler(AdminUnauthorized)
    def unauthorized_handler(request, exc):
        ADMIN_DENIED.inc()
        return JSONResponse(status_code=401, content={"error": "unauthorized"})

    @app.exception_handler(RollGenerationError)
    def roll_failed_handler(request, exc):
        rid = getattr(request.state, "request_id", None)
        logger.error("roll generation failed (request_id=%s): %s", rid, exc)
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    @app.get("/healthz", response_model=HealthResponse)
    def healthz(store: RollLogStore = Depends(get_store)):
        return {
            "ok": True,
            "service": SERVICE,
            "version": VERSION,
            "store_rolls": settings.STORE_ROLLS,
            "clients": store.client_count(),
            "records": store.total_records(),
        }

    @app.get("/roll", response_model=RollResponse, responses={500: {"model": ErrorResponse}})
    @limiter.limit(settings.ROLL_RATE_LIMIT)
    def roll(
        request: Request,
        response: Response,
        client_id: str | None = Query(default=None),
        x_client_id: str | None = Header(default=None),
        store: RollLogStore = Depends(get_store),
    ):
        response.headers.update(NO_CACHE_HEADERS)
        response.headers["Surrogate-Control"] = "no-store"

        cid = resolve_client_id(client_id, x_client_id)
        record = generate_roll(cid)
        ROLLS.labels(number=str(record.number)).inc()
        if settings.STORE_ROLLS:
            store.record(cid, record)
        return {"number": record.number, "info": "server-roll", "ts": record.ts}

    @app.get("/admin/rolls", response_model=StoredRollsResponse, responses={401: {"model": ErrorResponse}})
    @limiter.limit(settings.ADMIN_RATE_LIMIT)
    def admin_rolls(
        request: Request,
        x_admin_token: str | None = Header(default=None),
        token: str | None = Query(default=None),
        store: RollLogStore = Depends(get_store),
    ):
        require_admin_token(request, x_admin_token, token)
        stored = store.inspect()
        return {"stored": {cid: [r.as_dict() for r in records] for cid, records in stored.items()}}

    @app.get("/admin/logs", responses={401: {"model": ErrorResponse}})
    @limiter.limit(settings.ADMIN_RATE_LIMIT)
    def admin_logs(
        request: Request,
        limit: int = 100,
        x_admin_token: str | None = Header(default=None),
        token: str | None = Query(default=None),
    ):
        require_admin_token(request, x_admin_token, token)
        return dump_logs(limit=limit)

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        rid = new_req_id()
        request.state.request_id = rid
        start = time.time()
        try:
            log_event("request", request_id=rid, method=request.method, path=str(request.url.path))
            resp = await call_next(request)
            dur = time.time() - start
            log_event("response", request_id=rid, code=resp.status_code, duration_ms=int(dur * 1000), path=str(request.url.path))
            resp.headers["X-Request-ID"] = rid
            return resp
        except Exception as e:
            dur = time.time() - start
            log_event("error", request_id=rid, error=str(e), duration_ms=int(dur * 1000), path=str(request.url.path))
            logger.exception("unhandled error (request_id=%s)", rid)
            raise

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        elapsed = time.time() - start
        endpoint = route_label(request.scope)
        LATENCY.labels(endpoint=endpoint, method=request.method).observe(elapsed)
        REQUESTS.labels(endpoint=endpoint, method=request.method, code=str(response.status_code)).inc()
        return response

    # Mounted last so the API routes above take precedence.
    if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
        app.mount("/", NoCacheStaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app


app = create_app()
