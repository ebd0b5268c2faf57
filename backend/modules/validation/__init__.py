"""
modules/validation package: input guards and fallback policy for the engine.
"""
from modules.validation.errors import ItineraryValidationError
from modules.validation.ingestion_validator import (
    ValidationResult,
    validate_poi,
    validate_pois,
    validate_day_number,
)

__all__ = [
    "ItineraryValidationError",
    "ValidationResult",
    "validate_poi",
    "validate_pois",
    "validate_day_number",
]
