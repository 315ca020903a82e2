from decimal import Decimal
from unittest.mock import patch

import pytest

from apps.pricing import validation
from apps.pricing.validation import validate_pricing_breakdown, validate_pricing_breakdown_detailed
from shared.domain.exceptions import PricingValidationError, ValidationError

VALID = {
    "subtotal": "100",
    "discount_percent": "10",
    "discount_amount": "10",
    "tax": "9",
    "final_total": "99",
}


def breakdown(**overrides):
    data = dict(VALID)
    data.update(overrides)
    return data


def test_consistent_breakdown_passes():
    assert validate_pricing_breakdown(VALID, strict=True) is True


def test_wrong_discount_amount_is_reported_first():
    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(breakdown(discount_amount="5"), strict=True)

    error = exc_info.value
    assert error.pricing_field == "discount_amount"
    assert error.expected_value == Decimal("10.00")
    assert error.actual_value == Decimal("5")
    assert error.field == "discount_amount"


def test_values_within_tolerance_pass():
    assert validate_pricing_breakdown(breakdown(final_total="99.01"), strict=True)


def test_wrong_final_total():
    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(breakdown(final_total="98"), strict=True)

    assert exc_info.value.pricing_field == "final_total"


def test_negative_amount_rejected():
    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(breakdown(tax="-1", final_total="89"), strict=True)

    assert exc_info.value.pricing_field == "tax"


def test_discount_percent_out_of_range():
    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(breakdown(discount_percent="120"), strict=True)

    assert exc_info.value.pricing_field == "discount_percent"


def test_amount_without_percent():
    data = breakdown(discount_percent="0", discount_amount="10")

    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(data, strict=True)

    assert exc_info.value.pricing_field == "discount_percent"


def test_discount_exceeding_subtotal():
    data = breakdown(discount_percent="100", discount_amount="150", tax="0", final_total="0")

    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(data, strict=True)

    assert exc_info.value.pricing_field == "discount_amount"


def test_deposit_checked_only_when_present():
    assert validate_pricing_breakdown(breakdown(deposit="19.80"), strict=True)

    with pytest.raises(PricingValidationError) as exc_info:
        validate_pricing_breakdown(breakdown(deposit="30"), strict=True)

    assert exc_info.value.pricing_field == "deposit"


def test_deposit_rate_override():
    assert validate_pricing_breakdown(breakdown(deposit="49.50"), strict=True, deposit_rate="0.5")


def test_non_strict_logs_and_returns_false():
    with patch.object(validation.logger, "warning") as warning:
        result = validate_pricing_breakdown(breakdown(discount_amount="5"), strict=False)

    assert result is False
    messages = [call.args[0] for call in warning.call_args_list]
    assert any("discount_amount" in message for message in messages)
    assert any("final_total" in message for message in messages)


def test_strictness_follows_settings(settings):
    settings.PRICING = {"STRICT_VALIDATION": False}

    assert validate_pricing_breakdown(breakdown(final_total="50")) is False


def test_detailed_report_collects_every_violation():
    report = validate_pricing_breakdown_detailed(breakdown(discount_amount="5"))

    assert report.is_valid is False
    assert len(report.errors) == 2
    assert "discount_amount: expected 10.00, got 5" in report.errors[0]
    assert "final_total" in report.errors[1]


def test_detailed_report_warnings():
    report = validate_pricing_breakdown_detailed({
        "subtotal": "0",
        "discount_percent": "10",
        "discount_amount": "0",
        "tax": "0.001",
        "final_total": "0.001",
    })

    assert report.is_valid is True
    assert len(report.warnings) == 3
    assert any("zero subtotal" in warning for warning in report.warnings)


def test_missing_required_amount_raises_validation_error():
    with pytest.raises(ValidationError) as exc_info:
        validate_pricing_breakdown({"subtotal": "100"}, strict=True)

    assert exc_info.value.field == "final_total"
    assert not isinstance(exc_info.value, PricingValidationError)


def test_malformed_breakdown_non_strict_returns_false():
    with patch.object(validation.logger, "warning") as warning:
        assert validate_pricing_breakdown(breakdown(tax="abc"), strict=False) is False

    warning.assert_called_once()


def test_detailed_report_for_malformed_breakdown():
    report = validate_pricing_breakdown_detailed({"subtotal": 100})

    assert report.is_valid is False
    assert report.errors == ["Pricing breakdown is missing final_total"]


@pytest.mark.parametrize("data", [VALID, breakdown(discount_amount="5")], ids=["valid", "invalid"])
def test_validating_twice_gives_same_result(data):
    original = dict(data)

    first = validate_pricing_breakdown_detailed(data)
    second = validate_pricing_breakdown_detailed(data)

    assert first == second
    with patch.object(validation.logger, "warning"):
        assert validate_pricing_breakdown(data, strict=False) == validate_pricing_breakdown(data, strict=False)
    assert data == original
