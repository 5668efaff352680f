from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from crm.common.clock import now_iso

DEFAULT_SESSION_ID = "default"


class MessageRole(str, Enum):
    system = "system"
    user = "user"
    model = "model"


class Message(BaseModel):
    role: MessageRole
    text: str
    ts: str = Field(default_factory=now_iso)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


@dataclass(frozen=True)
class SessionKey:
    tenant_id: str
    user_id: str
    session_id: str = DEFAULT_SESSION_ID

    def to_query(self) -> Dict[str, str]:
        return {"tenantId": self.tenant_id, "userId": self.user_id, "sessionId": self.session_id}


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tenant_id: str = Field(alias="tenantId")
    user_id: str = Field(alias="userId")
    session_id: str = Field(alias="sessionId")
    messages: List[Message] = Field(default_factory=list)
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=now_iso, alias="updatedAt")

    @property
    def key(self) -> SessionKey:
        return SessionKey(self.tenant_id, self.user_id, self.session_id)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
