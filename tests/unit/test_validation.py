"""Unit tests for strict tool argument validation."""

import math

import pytest

from toolloop_server.errors import (
    ArgumentValidationError,
    InvalidArgumentsError,
    MissingRequiredArgumentError,
    TypeMismatchError,
    UnknownArgumentError,
)
from toolloop_server.tools import (
    ParameterSchema,
    ParameterType,
    ToolContract,
    validate_arguments,
)
from toolloop_server.tools.builtin import SUM_OF_TWO_NUMBERS, UNIT_CONVERSION


async def _noop(**kwargs):
    return kwargs


WEATHER_LIKE = ToolContract(
    name="weather_like",
    description="Test contract with an optional enum",
    parameters={
        "location": ParameterSchema(ParameterType.STRING, "City"),
        "unit": ParameterSchema(
            ParameterType.ENUM, "Unit", enum=("celsius", "fahrenheit")
        ),
    },
    required=frozenset({"location"}),
    handler=_noop,
)


class TestRequiredAndUnknown:
    """Tests for required-argument and unknown-argument rules."""

    def test_valid_arguments(self):
        result = validate_arguments(
            SUM_OF_TWO_NUMBERS, {"firstNumber": 2, "secondNumber": 3}
        )
        assert result == {"firstNumber": 2, "secondNumber": 3}

    def test_missing_required(self):
        with pytest.raises(MissingRequiredArgumentError) as exc_info:
            validate_arguments(SUM_OF_TWO_NUMBERS, {"firstNumber": 2})

        assert exc_info.value.name == "secondNumber"
        assert exc_info.value.code == "missing_required_argument"

    def test_unknown_argument(self):
        with pytest.raises(UnknownArgumentError) as exc_info:
            validate_arguments(
                SUM_OF_TWO_NUMBERS,
                {"firstNumber": 2, "secondNumber": 3, "thirdNumber": 4},
            )

        assert exc_info.value.name == "thirdNumber"

    def test_missing_checked_before_unknown(self):
        with pytest.raises(MissingRequiredArgumentError):
            validate_arguments(SUM_OF_TWO_NUMBERS, {"firstNumber": 2, "extra": 1})

    def test_optional_argument_may_be_omitted(self):
        assert validate_arguments(WEATHER_LIKE, {"location": "Oslo"}) == {
            "location": "Oslo"
        }

    def test_result_is_a_copy_in_declaration_order(self):
        raw = {"unit": "celsius", "location": "Oslo"}
        result = validate_arguments(WEATHER_LIKE, raw)

        assert list(result) == ["location", "unit"]
        assert result is not raw


class TestTypes:
    """Tests for strict, non-coercing type checks."""

    def test_numeric_string_is_not_an_integer(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            validate_arguments(
                SUM_OF_TWO_NUMBERS, {"firstNumber": 2, "secondNumber": "3"}
            )

        error = exc_info.value
        assert error.name == "secondNumber"
        assert error.expected == "integer"
        assert error.actual == "string"

    def test_float_is_not_an_integer(self):
        with pytest.raises(TypeMismatchError):
            validate_arguments(
                SUM_OF_TWO_NUMBERS, {"firstNumber": 2, "secondNumber": 3.0}
            )

    def test_bool_is_not_an_integer(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            validate_arguments(
                SUM_OF_TWO_NUMBERS, {"firstNumber": True, "secondNumber": 3}
            )
        assert exc_info.value.actual == "boolean"

    def test_null_is_rejected(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            validate_arguments(
                SUM_OF_TWO_NUMBERS, {"firstNumber": None, "secondNumber": 3}
            )
        assert exc_info.value.actual == "null"

    @pytest.mark.parametrize("value", [5, 2.5, -1e3])
    def test_number_accepts_int_and_float(self, value):
        result = validate_arguments(
            UNIT_CONVERSION, {"value": value, "fromUnit": "meters", "toUnit": "feet"}
        )
        assert result["value"] == value

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_number_must_be_finite(self, value):
        with pytest.raises(TypeMismatchError) as exc_info:
            validate_arguments(
                UNIT_CONVERSION,
                {"value": value, "fromUnit": "meters", "toUnit": "feet"},
            )
        assert exc_info.value.expected == "finite number"

    def test_enum_accepts_declared_value(self):
        result = validate_arguments(
            WEATHER_LIKE, {"location": "Oslo", "unit": "fahrenheit"}
        )
        assert result["unit"] == "fahrenheit"

    def test_enum_rejects_other_value(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            validate_arguments(WEATHER_LIKE, {"location": "Oslo", "unit": "kelvin"})

        assert exc_info.value.actual == "'kelvin'"
        assert "celsius" in exc_info.value.expected

    def test_enum_rejects_non_string(self):
        with pytest.raises(TypeMismatchError):
            validate_arguments(WEATHER_LIKE, {"location": "Oslo", "unit": 1})


class TestPayloadShape:
    """Tests for payloads that are not objects at all."""

    @pytest.mark.parametrize("payload", ["{not json", None, [1, 2], 42])
    def test_non_object_payload(self, payload):
        with pytest.raises(InvalidArgumentsError):
            validate_arguments(SUM_OF_TWO_NUMBERS, payload)

    def test_all_errors_share_a_base(self):
        with pytest.raises(ArgumentValidationError):
            validate_arguments(SUM_OF_TWO_NUMBERS, {})
