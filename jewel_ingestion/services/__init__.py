"""Import pipeline orchestration (pure)."""

from jewel_ingestion.services.import_validator import ImportValidator

__all__ = ["ImportValidator"]
