"""
Unit tests for input validators.
"""

import pytest

from baes_sdk.utils.errors import ValidationError
from baes_sdk.utils.validators import (
    Validator,
    owner_validator,
    application_validator,
    payload_validator,
    positive_integer_validator,
    validate_identity,
)

from fixtures import OWNER, APPLICATION


class TestValidator:
    """Test the chainable Validator."""

    def test_rules_run_in_order(self):
        validator = (Validator("name")
                     .required()
                     .type_check(str)
                     .not_empty())

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(None)
        assert "name is required" in exc_info.value.message

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(5)
        assert "must be of type str" in exc_info.value.message

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("  ")
        assert "cannot be empty" in exc_info.value.message

        validator.validate("ok")

    def test_custom_rule(self):
        validator = Validator("even").custom(lambda x: x % 2 == 0, "even must be even")

        validator.validate(4)
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(3)

        assert exc_info.value.field == "even"
        assert exc_info.value.value == 3
        assert exc_info.value.constraint == "even must be even"

    def test_pattern_accepts_compiled_and_string(self):
        Validator("code").pattern(r"^[A-Z]{3}$").validate("ABC")

        with pytest.raises(ValidationError):
            Validator("code").pattern(r"^[A-Z]{3}$").validate("abc")


class TestOwnerValidator:
    """Test account address validation."""

    @pytest.mark.parametrize("address", [
        OWNER,
        "0xabcdefABCDEF0123456789abcdefABCDEF012345",
        "0x0000000000000000000000000000000000000000",
    ])
    def test_valid_addresses(self, address):
        owner_validator().validate(address)

    @pytest.mark.parametrize("address", [
        "0x123",
        "111111111111111111111111111111111111111111",
        "0X1111111111111111111111111111111111111111",
        "0x111111111111111111111111111111111111111z",
        " 0x1111111111111111111111111111111111111111",
        "0x1111111111111111111111111111111111111111\n",
    ])
    def test_invalid_addresses(self, address):
        with pytest.raises(ValidationError) as exc_info:
            owner_validator().validate(address)

        assert exc_info.value.field == "owner"

    def test_non_string_owner(self):
        with pytest.raises(ValidationError) as exc_info:
            owner_validator().validate(0x1111)

        assert "must be a string" in exc_info.value.constraint


class TestOtherValidators:
    """Test application, payload and timestamp validators."""

    def test_application(self):
        application_validator().validate(APPLICATION)

        for bad in (None, "", "\t", 12):
            with pytest.raises(ValidationError):
                application_validator().validate(bad)

    def test_payload_accepts_any_mapping(self):
        payload_validator().validate({})
        payload_validator().validate({"nested": {"list": [1, 2, 3]}})

        with pytest.raises(ValidationError) as exc_info:
            payload_validator().validate([("a", 1)])
        assert exc_info.value.constraint == "payload must be an object"

    @pytest.mark.parametrize("payload", [
        {"items": {1, 2}},
        {"when": object()},
        {"nested": {"raw": b"bytes"}},
    ])
    def test_payload_must_be_json_serializable(self, payload):
        with pytest.raises(ValidationError) as exc_info:
            payload_validator().validate(payload)

        assert exc_info.value.constraint == "payload must be JSON-serializable"

    def test_positive_integer(self):
        validator = positive_integer_validator("timestamp")

        validator.validate(None)
        validator.validate(1)
        validator.validate(1_700_000_000_000)

        for bad in (0, -1, 2.0, True, "5"):
            with pytest.raises(ValidationError):
                validator.validate(bad)

    def test_validate_identity_checks_application_first(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_identity("bad-owner", "")

        assert exc_info.value.field == "application"

        with pytest.raises(ValidationError) as exc_info:
            validate_identity("bad-owner", APPLICATION)

        assert exc_info.value.field == "owner"
