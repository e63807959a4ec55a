# chuk_ai_credit_manager/models/model_profile.py
from __future__ import annotations

from pydantic import BaseModel, Field


class ModelProfile(BaseModel):
    """Static pricing entry for one model."""

    key: str
    display_name: str
    credit_cost: int = Field(gt=0)
    description: str = ""

    model_config = {"frozen": True}
