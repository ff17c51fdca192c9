"""
Shared validation module.

Key Components:
- ValidationResult: Result container with errors/warnings
- Validator: Base class for validators
- Common validators: Required, Range, Custom
- validate(): Convenience function for validation chains
"""
from .validation_framework import (
    ValidationResult,
    Validator,
    RequiredValidator,
    RangeValidator,
    CustomValidator,
    All,
    validate,
    validate_field,
)

__all__ = [
    'ValidationResult',
    'Validator',
    'RequiredValidator',
    'RangeValidator',
    'CustomValidator',
    'All',
    'validate',
    'validate_field',
]
