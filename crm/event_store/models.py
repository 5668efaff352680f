from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from crm.common.clock import now_iso

RECORD_CREATED = "record.created"


class Event(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tenant_id: str = Field(alias="tenantId")
    type: str
    model: str
    actor: str
    after: Dict[str, Any] = Field(default_factory=dict)
    ts: str = Field(default_factory=now_iso)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
