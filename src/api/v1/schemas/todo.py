"""Pydantic schemas for Todo API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TodoCreate(BaseModel):
    """Schema for creating a Todo.

    Whitespace-only text passes here and is rejected by the service.
    """

    text: str = Field(..., min_length=1, max_length=500)


class TodoUpdate(BaseModel):
    """Schema for updating a Todo (all fields optional)."""

    text: str | None = Field(None, min_length=1, max_length=500)
    completed: bool | None = None


class TodoMove(BaseModel):
    """Schema for moving a Todo to a new position.

    Negative positions reach the service so they are reported with the same
    VALIDATION_ERROR shape as blank text; large ones are clamped.
    """

    position: int


class TodoResponse(BaseModel):
    """Schema for Todo response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 42,
                "text": "Buy milk",
                "completed": False,
                "position": 0,
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
            }
        },
    )

    id: int
    text: str
    completed: bool
    position: int
    created_at: datetime
    updated_at: datetime


class TodoListResponse(BaseModel):
    """Schema for list of Todos response."""

    data: list[TodoResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class TodoDetailResponse(BaseModel):
    """Schema for single Todo response."""

    data: TodoResponse


class ClearCompletedResponse(BaseModel):
    """Schema for the clear-completed result."""

    removed: int
