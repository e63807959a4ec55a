# chuk_ai_credit_manager/models/credit_package.py
from __future__ import annotations

from pydantic import BaseModel, Field


class CreditPackage(BaseModel):
    """A purchasable bundle of credits."""

    id: str
    name: str
    credits: int = Field(gt=0)
    price: float = Field(ge=0)
    description: str = ""
    cost_per_credit: float = 0.0
    popular: bool = False
    savings: str | None = None
    badge: str | None = None

    model_config = {"frozen": True}
