"""
Jewel Kernel - shared foundation for the costing and reconciliation engine.

Provides:
- Structured JSON logging with request-scoped context
- Typed exception hierarchy with machine-readable codes
- Injectable clock
- Inventory domain types (items, enums)
- SQLAlchemy declarative base, session scope and ORM models
"""

__version__ = "0.1.0"
