"""
Input validation utilities for the BAES SDK.
"""

from typing import Any, Callable, List, Mapping, Optional, Type, Union
from dataclasses import dataclass
import json
import re

from .errors import ValidationError


ADDRESS_PATTERN = re.compile(r'^0x[a-fA-F0-9]{40}$')


@dataclass
class ValidationRule:
    """Represents a validation rule."""
    name: str
    validator: Callable[[Any], bool]
    message: str
    code: str


class Validator:
    """Chainable field validator; the first failing rule raises."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        self.rules: List[ValidationRule] = []

    def add_rule(self, rule: ValidationRule) -> 'Validator':
        """Add a validation rule."""
        self.rules.append(rule)
        return self

    def required(self, message: Optional[str] = None) -> 'Validator':
        """Require field to be present and not None."""
        rule = ValidationRule(
            name="required",
            validator=lambda x: x is not None,
            message=message or f"{self.field_name} is required",
            code="REQUIRED"
        )
        return self.add_rule(rule)

    def not_empty(self, message: Optional[str] = None) -> 'Validator':
        """Require field to not be empty."""
        def is_not_empty(value: Any) -> bool:
            if value is None:
                return False
            if isinstance(value, str):
                return len(value.strip()) > 0
            if isinstance(value, (list, dict)):
                return len(value) > 0
            return True

        rule = ValidationRule(
            name="not_empty",
            validator=is_not_empty,
            message=message or f"{self.field_name} cannot be empty",
            code="NOT_EMPTY"
        )
        return self.add_rule(rule)

    def pattern(self, regex: Union[str, re.Pattern], message: Optional[str] = None) -> 'Validator':
        """Require a string field to match regex pattern."""
        if isinstance(regex, str):
            regex = re.compile(regex)

        rule = ValidationRule(
            name="pattern",
            validator=lambda x: x is None or (isinstance(x, str) and bool(regex.fullmatch(x))),
            message=message or f"{self.field_name} format is invalid",
            code="PATTERN"
        )
        return self.add_rule(rule)

    def type_check(self, expected_type: Union[Type, tuple], message: Optional[str] = None) -> 'Validator':
        """Require field to be of specific type."""
        type_name = getattr(expected_type, "__name__", str(expected_type))
        rule = ValidationRule(
            name="type_check",
            validator=lambda x: x is None or isinstance(x, expected_type),
            message=message or f"{self.field_name} must be of type {type_name}",
            code="TYPE_CHECK"
        )
        return self.add_rule(rule)

    def custom(self, validator_fn: Callable[[Any], bool],
               message: str, code: str = "CUSTOM") -> 'Validator':
        """Add custom validation rule."""
        rule = ValidationRule(
            name="custom",
            validator=validator_fn,
            message=message,
            code=code
        )
        return self.add_rule(rule)

    def validate(self, value: Any) -> None:
        """Validate value against all rules."""
        for rule in self.rules:
            if not rule.validator(value):
                raise ValidationError(
                    field=self.field_name,
                    value=value,
                    constraint=rule.message
                )


# Pre-built validators for checkpoint inputs

def owner_validator(field_name: str = "owner") -> Validator:
    """Blockchain account address validator (0x + 40 hex characters)."""
    return (Validator(field_name)
            .required()
            .type_check(str, f"{field_name} must be a string")
            .pattern(ADDRESS_PATTERN, f"{field_name} must be a valid Ethereum address"))


def application_validator(field_name: str = "application") -> Validator:
    """Application identifier validator."""
    return (Validator(field_name)
            .required()
            .type_check(str, f"{field_name} must be a string")
            .not_empty(f"{field_name} is required and must be a non-empty string"))


def payload_validator(field_name: str = "payload") -> Validator:
    """Checkpoint payload validator; payloads are opaque mappings."""
    return (Validator(field_name)
            .required(f"{field_name} is required and must be an object")
            .type_check(Mapping, f"{field_name} must be an object")
            .custom(_is_json_serializable, f"{field_name} must be JSON-serializable", "JSON_SERIALIZABLE"))


def _is_json_serializable(value: Any) -> bool:
    if value is None:
        return True
    try:
        json.dumps(dict(value))
    except (TypeError, ValueError):
        return False
    return True


def positive_integer_validator(field_name: str = "value") -> Validator:
    """Positive integer validator; booleans are rejected."""
    return (Validator(field_name)
            .custom(
                lambda x: x is None or (isinstance(x, int) and not isinstance(x, bool) and x > 0),
                f"{field_name} must be a positive integer",
                "POSITIVE_INTEGER"
            ))


def validate_identity(owner: Any, application: Any) -> None:
    """Validate the (owner, application) pair shared by every operation."""
    application_validator().validate(application)
    owner_validator().validate(owner)


__all__ = [
    'ValidationRule',
    'Validator',
    'owner_validator',
    'application_validator',
    'payload_validator',
    'positive_integer_validator',
    'validate_identity',
    'ADDRESS_PATTERN',
]
