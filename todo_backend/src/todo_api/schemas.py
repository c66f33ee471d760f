from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

TODO_NOT_FOUND = "TODO not found"


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Only ``title`` is read; a ``completed`` flag sent by the client is ignored
    because new todos always start out open. A missing title is forwarded to
    the store as NULL and the table's constraints decide the outcome.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk"}})

    title: Optional[str] = Field(default=None, description="Free-text title, stored as sent")


# PUBLIC_INTERFACE
class TodoReplace(BaseModel):
    """
    Schema for replacing an existing Todo item. Both fields are required.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk", "completed": True}})

    title: str = Field(..., description="New title, replaces the stored one")
    completed: bool = Field(..., description="New completion status")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 1, "title": "Buy milk", "completed": False}}
    )

    id: int = Field(..., description="Unique identifier assigned by the store")
    title: Optional[str] = Field(default=None, description="Title as stored")
    completed: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """Error body used for 404 and 500 responses."""

    model_config = ConfigDict(json_schema_extra={"example": {"error": TODO_NOT_FOUND}})

    error: str = Field(..., description="Short, fixed error message")
