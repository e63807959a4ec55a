# chuk_ai_credit_manager/packages.py
"""Catalog of purchasable credit packages."""

from __future__ import annotations

from chuk_ai_credit_manager.exceptions import NotFound
from chuk_ai_credit_manager.models.credit_package import CreditPackage

CREDIT_PACKAGES: tuple[CreditPackage, ...] = (
    CreditPackage(
        id="starter",
        name="Starter Pack",
        credits=1000,
        price=5.00,
        description="1,000 credits - Perfect for trying things out",
        cost_per_credit=0.005,
    ),
    CreditPackage(
        id="professional",
        name="Professional",
        credits=5000,
        price=20.00,
        description="5,000 credits - Great for regular users",
        cost_per_credit=0.004,
        popular=True,
        savings="20% savings",
    ),
    CreditPackage(
        id="business",
        name="Business",
        credits=15000,
        price=50.00,
        description="15,000 credits - Best for power users",
        cost_per_credit=0.0033,
        savings="33% savings",
    ),
    CreditPackage(
        id="enterprise",
        name="Enterprise",
        credits=50000,
        price=150.00,
        description="50,000 credits - Great for teams",
        cost_per_credit=0.003,
        savings="40% savings",
    ),
    CreditPackage(
        id="mega",
        name="Mega Enterprise",
        credits=1000000,
        price=2500.00,
        description="1,000,000 credits - Ultimate package for large organizations",
        cost_per_credit=0.0025,
        savings="50% savings",
        badge="Best Value",
    ),
)


def get_package(package_id: str) -> CreditPackage:
    """Look up a package by id; raises NotFound for unknown ids."""
    for package in CREDIT_PACKAGES:
        if package.id == package_id:
            return package
    raise NotFound("credit package", package_id, detail="Invalid package selected")
