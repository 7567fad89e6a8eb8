"""
Rental Pricing SQLAlchemy Models
================================

Central import point for all ORM models. Import ``Base`` from here for
Alembic auto-generation and for the ``create_all`` convenience in tests.

Usage::

    from src.models import Base, Property, Reservation, PropertyPricingConfig
"""

# -- Base & Mixins --
from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

# -- 001: Properties --
from .property import Property

# -- 002: Reservations --
from .reservation import Reservation

# -- 003: Pricing --
from .pricing import MonthlyCostEventRecord, PropertyPricingConfig

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "Property",
    "Reservation",
    "PropertyPricingConfig",
    "MonthlyCostEventRecord",
]
