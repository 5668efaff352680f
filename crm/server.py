"""Aggregate app for the CRM API and the operator chat."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crm.bootstrap import configure_services
from crm.common.clock import now_iso
from crm.common.error_envelope import CrmError, build_error_envelope
from crm.config import runtime_config
from crm.design.routes import router as design_router
from crm.operator.routes import router as operator_router
from crm.records.routes import router as records_router
from crm.runtime.routes import router as runtime_router
from crm.store.indexes import ensure_indexes
from crm.store.mongo import MongoStore
from crm.tts.routes import router as tts_router

logger = logging.getLogger(__name__)


# --- Error Handling ---

async def _crm_exception_handler(request: Request, exc: CrmError):
    return JSONResponse(content=exc.to_envelope().model_dump(), status_code=exc.status_code)


async def _http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return JSONResponse(content=detail, status_code=exc.status_code, headers=exc.headers)
    envelope = build_error_envelope(
        code="http.exception",
        message=str(detail) if detail else "HTTP exception",
        status_code=exc.status_code,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=exc.status_code, headers=exc.headers)


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    envelope = build_error_envelope(
        code="validation.error",
        message="Validation failed",
        status_code=400,
        details={"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]},
    )
    return JSONResponse(content=envelope.model_dump(), status_code=400)


async def _generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    envelope = build_error_envelope(
        code="internal.error",
        message=str(exc) or "Internal server error",
        status_code=500,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=500)


def register_error_handlers(target_app: FastAPI) -> None:
    target_app.add_exception_handler(CrmError, _crm_exception_handler)
    target_app.add_exception_handler(HTTPException, _http_exception_handler)
    target_app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    target_app.add_exception_handler(Exception, _generic_exception_handler)


# --- Lifecycle ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting CRM API with config %s", runtime_config.config_snapshot())
    store: Optional[MongoStore] = None
    if runtime_config.get_store_backend() == runtime_config.STORE_BACKEND_MONGO:
        store = MongoStore()
        ensure_indexes(store.database)
        configure_services(store.database)
    else:
        logger.warning("CRM_STORE_BACKEND=memory: data is not persisted")
        configure_services()
    try:
        yield
    finally:
        if store is not None:
            store.close()


# --- App Factory ---

def create_app() -> FastAPI:
    app = FastAPI(title="Max Operator CRM", version="0.1.0", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    register_error_handlers(app)

    app.include_router(design_router)
    app.include_router(records_router)
    app.include_router(runtime_router)
    app.include_router(operator_router)
    app.include_router(tts_router)

    @app.get("/__health")
    def health():
        return {"ok": True, "time": now_iso()}

    return app


def main() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(create_app(), host="0.0.0.0", port=runtime_config.get_port())


if __name__ == "__main__":
    main()
