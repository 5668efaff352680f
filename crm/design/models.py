from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from crm.common.clock import now_iso


class ModelDefInput(BaseModel):
    """Permissive shape check for a posted model definition; unknown keys are kept.

    Entries of ``fields`` are stored as given. Only object entries shaped like
    ``{name, type, required?, refModel?}`` take part in record validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(min_length=1)
    collection: str = Field(min_length=1)
    field_defs: List[Any] = Field(alias="fields")
    version: Optional[Union[int, float]] = None
    active: Optional[bool] = None


class ModelDef(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    collection: str
    field_defs: List[Any] = Field(default_factory=list, alias="fields")
    indexes: Optional[List[Dict[str, Any]]] = None
    policies: Optional[Dict[str, Any]] = None
    tenant_id: str = Field(alias="tenantId")
    created_at: str = Field(default_factory=now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=now_iso, alias="updatedAt")
    created_by: Optional[str] = Field(default=None, alias="createdBy")
    updated_by: Optional[str] = Field(default=None, alias="updatedBy")
    version: Union[int, float] = 1
    active: bool = True

    def required_fields(self) -> List[str]:
        # bare strings and other non-object entries never mark a field required
        return [
            f["name"]
            for f in self.field_defs
            if isinstance(f, dict) and isinstance(f.get("name"), str) and f.get("required") is True
        ]

    def missing_fields(self, data: Mapping[str, Any]) -> List[str]:
        return [name for name in self.required_fields() if name not in data]

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc.pop("_id", None)
        return doc

    def to_summary(self) -> Dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc.pop("fields", None)
        return doc
