from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from crm.common.identity import RequestContext, get_request_context
from crm.runtime.service import get_runtime_service

router = APIRouter(prefix="/runtime", tags=["runtime"])


@router.get("/bootstrap")
def bootstrap(response: Response, context: RequestContext = Depends(get_request_context)):
    payload = get_runtime_service().bootstrap(context)
    response.headers["ETag"] = payload["versionHash"]
    return payload
