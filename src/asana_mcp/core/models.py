from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Input Models (Tool Payloads) ---


class TaskCreateInput(BaseModel):
    name: str
    notes: Optional[str] = None
    html_notes: Optional[str] = None
    due_on: Optional[str] = None
    assignee: Optional[str] = None
    followers: Optional[List[str]] = None
    parent: Optional[str] = None
    projects: Optional[List[str]] = None

    model_config = ConfigDict(extra="forbid")

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TaskUpdateInput(BaseModel):
    name: Optional[str] = None
    notes: Optional[str] = None
    due_on: Optional[str] = None
    assignee: Optional[str] = None
    completed: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    def to_body(self) -> Dict[str, Any]:
        # Only explicitly provided fields are changed.
        return self.model_dump(exclude_unset=True)


class SubtaskCreateInput(BaseModel):
    name: str
    notes: Optional[str] = None
    due_on: Optional[str] = None
    assignee: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ParentSpec(BaseModel):
    """Body of a setParent call; parent=None removes the task from its parent."""

    parent: Optional[str] = Field(...)
    insert_after: Optional[str] = None
    insert_before: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("parent", "insert_after", "insert_before", mode="before")
    @classmethod
    def _gid_as_string(cls, value: Any) -> Any:
        if isinstance(value, dict) and "gid" in value:
            value = value["gid"]
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"parent": self.parent}
        if self.insert_after is not None:
            body["insert_after"] = self.insert_after
        if self.insert_before is not None:
            body["insert_before"] = self.insert_before
        return body


# --- Typed views over backend records ---


class EnumOption(BaseModel):
    gid: Optional[str] = None
    name: Optional[str] = None
    enabled: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")

    def to_summary(self) -> Dict[str, Optional[str]]:
        return {"gid": self.gid or None, "name": self.name or None}


class CustomFieldDefinition(BaseModel):
    gid: Optional[str] = None
    name: Optional[str] = None
    resource_type: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    enum_options: Optional[List[EnumOption]] = None
    precision: Optional[int] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def enabled_options(self) -> List[EnumOption]:
        return [o for o in self.enum_options or [] if o.enabled is not False]
