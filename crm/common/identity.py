"""Request context for the CRM engines.

Authentication is not enforced: every request gets the dev context, with the
tenant optionally overridden by ``X-Tenant-Id``.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import Header

from crm.config import runtime_config


@dataclass
class RequestContext:
    tenant_id: str
    user_id: str
    role: Optional[str] = None
    caps: List[str] = field(default_factory=list)
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise ValueError("tenant_id is required")
        if not self.user_id:
            raise ValueError("user_id is required")
        if not self.request_id:
            raise ValueError("request_id is required")

    @property
    def actor_id(self) -> str:
        return self.user_id


def dev_context(tenant_id: Optional[str] = None, request_id: Optional[str] = None) -> RequestContext:
    tenant = (tenant_id or "").strip() or runtime_config.get_dev_tenant_id()
    ctx = RequestContext(
        tenant_id=tenant,
        user_id=runtime_config.get_dev_user_id(),
        role="admin",
        caps=["*"],
    )
    if request_id:
        ctx.request_id = request_id
    return ctx


def get_request_context(
    header_tenant: Optional[str] = Header(default=None, alias="X-Tenant-Id"),
    header_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RequestContext:
    return dev_context(tenant_id=header_tenant, request_id=header_request_id)
