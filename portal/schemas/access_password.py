"""Schemas for the per-panel access password endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

PanelType = Literal["visitors", "prayers", "raffles"]


class AccessPasswordSet(BaseModel):
    password: str = Field(..., min_length=1, max_length=255)


class AccessPasswordVerify(BaseModel):
    password: str = Field(..., max_length=255)


class AccessPasswordResponse(BaseModel):
    """Stored panel password (authenticated callers only)."""

    panel_type: PanelType
    password: str

    class Config:
        from_attributes = True
