"""
Validation Framework

Composable validation pattern used by the per-kind component validators.
Validators never stop at the first problem: every violated invariant is
collected so callers can report the complete list.

Usage:
    result = validate_field("position.width", width, [
        RequiredValidator(),
        RangeValidator(min_value=0, min_exclusive=True),
    ])
    if not result.valid:
        report(result.errors)

    # Combine results of several fields
    result = ValidationResult()
    result.merge(validate_field("id", component_id, RequiredValidator()))
    result.merge(validate_field("label_position", pos, RangeValidator(0, 1)))

    # Custom validators
    result = validate(data, CustomValidator(lambda v: v % 2 == 0, "must be even"))
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, List, Callable, Union


# =============================================================================
# Validation Result
# =============================================================================

@dataclass
class ValidationResult:
    """
    Result of validation operations.

    Attributes:
        valid: True if all validations passed
        errors: List of error messages (validation failures)
        warnings: List of warning messages (non-blocking issues)
        field_name: Optional field name for context

    Can be used in boolean context:
        if result:
            print("Valid!")
    """
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    field_name: Optional[str] = None

    def add_error(self, message: str) -> None:
        """Add an error and mark as invalid."""
        if self.field_name and not message.startswith(self.field_name):
            message = f"{self.field_name}: {message}"
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (doesn't affect validity)."""
        if self.field_name and not message.startswith(self.field_name):
            message = f"{self.field_name}: {message}"
        self.warnings.append(message)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Merge another ValidationResult into this one."""
        if not other.valid:
            self.valid = False
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True)

    @classmethod
    def failure(cls, message: str, field_name: Optional[str] = None) -> 'ValidationResult':
        """Create a failed validation result."""
        result = cls(valid=False, field_name=field_name)
        result.errors.append(f"{field_name}: {message}" if field_name else message)
        return result


# =============================================================================
# Base Validator
# =============================================================================

class Validator(ABC):
    """
    Abstract base class for validators.

    Subclass and implement validate() to create custom validators.
    """

    @abstractmethod
    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        """
        Validate a value.

        Args:
            value: The value to validate
            field_name: Optional field name for error messages

        Returns:
            ValidationResult with any errors/warnings
        """
        pass

    def __call__(self, value: Any, field_name: str = "") -> ValidationResult:
        return self.validate(value, field_name)


# =============================================================================
# Common Validators
# =============================================================================

class RequiredValidator(Validator):
    """
    Validates that a value is not None/empty.

    Strings made of whitespace and empty collections count as empty.
    """

    def __init__(self, message: str = "is required"):
        self.message = message

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)

        if value is None:
            result.add_error(self.message)
        elif isinstance(value, str) and not value.strip():
            result.add_error(self.message)
        elif isinstance(value, (list, tuple, dict, set, frozenset)) and len(value) == 0:
            result.add_error(self.message)

        return result


class RangeValidator(Validator):
    """
    Validates that a numeric value is within a range.

    Only int and float values are accepted (no string coercion, no bool), and
    they must be finite. Bounds are inclusive unless min_exclusive/max_exclusive
    is set.

    Usage:
        RangeValidator(min_value=0, max_value=1)              # [0, 1]
        RangeValidator(min_value=0, min_exclusive=True)       # (0, inf)
    """

    def __init__(
        self,
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None,
        min_exclusive: bool = False,
        max_exclusive: bool = False,
        message: Optional[str] = None,
    ):
        self.min_value = min_value
        self.max_value = max_value
        self.min_exclusive = min_exclusive
        self.max_exclusive = max_exclusive
        self.message = message

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)

        if value is None:
            return result  # None is handled by RequiredValidator

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            result.add_error(f"must be a number, got {type(value).__name__}")
            return result

        num_value = float(value)
        if not math.isfinite(num_value):
            result.add_error(f"must be a finite number, got {value}")
            return result

        if self.min_value is not None:
            too_low = num_value <= self.min_value if self.min_exclusive else num_value < self.min_value
            if too_low:
                bound = "greater than" if self.min_exclusive else "at least"
                result.add_error(self.message or f"must be {bound} {self.min_value}, got {value}")

        if self.max_value is not None:
            too_high = num_value >= self.max_value if self.max_exclusive else num_value > self.max_value
            if too_high:
                bound = "less than" if self.max_exclusive else "at most"
                result.add_error(self.message or f"must be {bound} {self.max_value}, got {value}")

        return result


class CustomValidator(Validator):
    """
    Validator with a custom validation function.

    Usage:
        validator = CustomValidator(lambda v: v % 2 == 0, "must be even")
    """

    def __init__(
        self,
        func: Callable[[Any], bool],
        message: str = "validation failed",
    ):
        self.func = func
        self.message = message

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)

        if value is None:
            return result  # None is handled by RequiredValidator

        if not self.func(value):
            result.add_error(self.message)

        return result


# =============================================================================
# Composable Validators
# =============================================================================

class All(Validator):
    """
    Composes multiple validators with AND logic.

    All validators must pass for the result to be valid.
    """

    def __init__(self, *validators: Validator, stop_on_first_error: bool = False):
        self.validators = validators
        self.stop_on_first_error = stop_on_first_error

    def validate(self, value: Any, field_name: str = "") -> ValidationResult:
        result = ValidationResult(field_name=field_name)

        for validator in self.validators:
            sub_result = validator.validate(value, field_name)
            result.merge(sub_result)

            if self.stop_on_first_error and not sub_result.valid:
                break

        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def validate(
    value: Any,
    validators: Union[Validator, List[Validator]],
    field_name: str = "",
) -> ValidationResult:
    """
    Validate a value against one or more validators.

    Args:
        value: The value to validate
        validators: Single validator or list of validators
        field_name: Optional field name for error messages

    Returns:
        ValidationResult with any errors/warnings
    """
    if isinstance(validators, Validator):
        return validators.validate(value, field_name)

    return All(*validators).validate(value, field_name)


def validate_field(
    field_name: str,
    value: Any,
    validators: Union[Validator, List[Validator]],
) -> ValidationResult:
    """Validate a field value (field_name first for readability)."""
    return validate(value, validators, field_name)
