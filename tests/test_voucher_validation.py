"""Alan ve alanlar arası voucher doğrulama kuralları."""
from datetime import date, datetime, timezone

import pytest

from storefront_admin.schemas import VoucherInput, VoucherPayload
from storefront_admin.services.voucher_validation import (
    validate_cross_fields,
    validate_field,
    validate_voucher_input,
)


def _fixed(valid_input, **changes):
    data = dict(valid_input, discountType="fixed", discountValue=20000, minOrderValue=30000)
    data.pop("maxDiscount")
    data.update(changes)
    return data


def test_valid_create(valid_input, now):
    result = validate_voucher_input(valid_input, "create", now=now)
    assert result.valid
    assert result.errors == {}
    assert result.payload.code == "SUMMER10"
    assert result.payload.max_discount == 50000
    assert result.payload.start_date == datetime(2024, 6, 16, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "code, message",
    [
        ("", "Voucher code is required"),
        ("AB", "Voucher code must be at least 3 characters"),
        ("A" * 31, "Voucher code must be at most 30 characters"),
        ("abc123", "Voucher code may only contain uppercase letters and digits"),
        ("SALE-10", "Voucher code may only contain uppercase letters and digits"),
    ],
)
def test_code_rules(code, message):
    assert validate_field("code", code, "percentage") == message


def test_code_accepts_30_chars():
    assert validate_field("code", "A" * 30, "fixed") is None


@pytest.mark.parametrize(
    "raw, message",
    [
        (None, "Discount value is required"),
        ("", "Discount value is required"),
        ("ten", "Discount value must be a number"),
        (True, "Discount value must be a number"),
        (float("nan"), "Discount value must be a number"),
        (0, "Discount value must be greater than 0"),
        ("-5", "Discount value must be greater than 0"),
        (100.5, "Percentage must be less than or equal to 100"),
    ],
)
def test_discount_value_rules_for_percentage(raw, message):
    assert validate_field("discountValue", raw, "percentage") == message


def test_discount_value_percentage_ceiling_is_inclusive():
    assert validate_field("discountValue", 100, "percentage") is None
    assert validate_field("discountValue", "100", "percentage") is None


def test_fixed_discount_has_no_field_level_ceiling():
    assert validate_field("discountValue", 5_000_000, "fixed") is None


def test_min_order_value_rules():
    assert validate_field("minOrderValue", 0, "fixed") is None
    assert validate_field("minOrderValue", "0", "fixed") is None
    assert validate_field("minOrderValue", "", "fixed") == "Minimum order value is required"
    assert validate_field("minOrderValue", None, "fixed") == "Minimum order value is required"
    assert validate_field("minOrderValue", -1, "fixed") == "Minimum order value cannot be negative"


def test_max_discount_only_required_for_percentage():
    assert validate_field("maxDiscount", "", "percentage") == "Maximum discount is required for percentage vouchers"
    assert validate_field("maxDiscount", 0, "percentage") == "Maximum discount must be greater than 0"
    assert validate_field("maxDiscount", "", "fixed") is None
    assert validate_field("maxDiscount", -10, "fixed") is None


def test_start_date_rules(now):
    assert validate_field("startDate", "", "fixed", now=now) == "Start date is required"
    assert validate_field("startDate", "15/06/2024", "fixed", now=now) == "Invalid date format"
    assert validate_field("startDate", "2024-06-14", "fixed", now=now) == "Start date cannot be in the past"
    # bugün geçerli
    assert validate_field("startDate", "2024-06-15", "fixed", now=now) is None
    assert validate_field("startDate", date(2024, 6, 15), "fixed", now=now) is None


def test_past_start_date_allowed_on_update(now):
    assert validate_field("startDate", "2024-01-01", "fixed", mode="update", now=now) is None


def test_end_date_rules(now):
    payload = {"startDate": "2024-06-20"}
    assert validate_field("endDate", None, "fixed", payload=payload) == "End date is required"
    assert validate_field("endDate", "not-a-date", "fixed", payload=payload) == "Invalid date format"
    assert validate_field("endDate", "2024-06-20", "fixed", payload=payload) == "End date must be after start date"
    assert validate_field("endDate", "2024-06-19", "fixed", payload=payload) == "End date must be after start date"
    assert validate_field("endDate", "2024-06-21", "fixed", payload=payload) is None
    # başlangıç geçersizse bitiş kendi formatı dışında hata vermez
    assert validate_field("endDate", "2024-06-21", "fixed", payload={"startDate": "??"}) is None


def test_iso_instants_with_z_suffix(valid_input, now):
    data = dict(valid_input, startDate="2024-06-16T08:00:00Z", endDate="2024-06-16T09:00:00.000Z")
    result = validate_voucher_input(data, "create", now=now)
    assert result.valid, result.errors
    assert result.payload.end_date.hour == 9


@pytest.mark.parametrize(
    "raw, message",
    [
        ("", "Usage limit is required"),
        ("1.5", "Usage limit must be a whole number"),
        (False, "Usage limit must be a whole number"),
        (0, "Usage limit must be at least 1"),
    ],
)
def test_usage_limit_rules(raw, message):
    assert validate_field("usageLimit", raw, "fixed") == message


def test_usage_limit_accepts_integer_text():
    assert validate_field("usageLimit", "3", "fixed") is None
    assert validate_field("usageLimit", 3.0, "fixed") is None


def test_unknown_field_is_ignored():
    assert validate_field("color", "red", "fixed") is None


def test_discount_type_is_checked(valid_input, now):
    result = validate_voucher_input(dict(valid_input, discountType="bogo"), "create", now=now)
    assert result.errors == {"discountType": "Discount type must be percentage or fixed"}


def test_all_field_errors_reported_together(now):
    result = validate_voucher_input({"discountType": "percentage"}, "create", now=now)
    assert not result.valid
    assert set(result.errors) == {
        "code",
        "discountValue",
        "minOrderValue",
        "maxDiscount",
        "startDate",
        "endDate",
        "usageLimit",
    }


def test_fixed_discount_cannot_exceed_min_order_value(valid_input, now):
    rejected = validate_voucher_input(_fixed(valid_input, discountValue=50000), "create", now=now)
    assert not rejected.valid
    assert rejected.errors == {"discountValue": "Fixed discount cannot exceed the minimum order value"}

    accepted = validate_voucher_input(_fixed(valid_input, discountValue=20000), "create", now=now)
    assert accepted.valid
    # fixed voucher için maxDiscount gönderilmez
    assert "maxDiscount" not in accepted.payload.to_wire()


def test_fixed_discount_equal_to_min_order_value_is_allowed(valid_input, now):
    assert validate_voucher_input(_fixed(valid_input, discountValue=30000), "create", now=now).valid


def test_fixed_discount_without_min_order_value_has_no_ceiling(valid_input, now):
    assert validate_voucher_input(_fixed(valid_input, discountValue=50000, minOrderValue=0), "create", now=now).valid


def test_percentage_requires_max_discount(valid_input, now):
    rejected = validate_voucher_input(dict(valid_input, maxDiscount=""), "create", now=now)
    assert not rejected.valid
    assert "maxDiscount" in rejected.errors

    accepted = validate_voucher_input(dict(valid_input, maxDiscount=50000), "create", now=now)
    assert accepted.valid


def test_cross_field_gate_for_percentage_without_max_discount():
    payload = VoucherPayload(
        discount_type="percentage",
        discount_value=10,
        min_order_value=0,
        start_date=datetime(2024, 6, 16, tzinfo=timezone.utc),
        end_date=datetime(2024, 6, 30, tzinfo=timezone.utc),
        usage_limit=1,
    )
    assert validate_cross_fields(payload) == {"maxDiscount": "Maximum discount is required for percentage vouchers"}


def test_usage_limit_floor_on_update(valid_input, now):
    rejected = validate_voucher_input(dict(valid_input, usageLimit=5), "update", {"currentUsedCount": 7}, now=now)
    assert not rejected.valid
    assert rejected.errors["usageLimit"] == "Usage limit cannot be less than the current used count (7)"

    accepted = validate_voucher_input(dict(valid_input, usageLimit=7), "update", {"currentUsedCount": 7}, now=now)
    assert accepted.valid


def test_usage_limit_floor_does_not_apply_on_create(valid_input, now):
    result = validate_voucher_input(dict(valid_input, usageLimit=5), "create", {"currentUsedCount": 7}, now=now)
    assert result.valid


def test_cross_field_rules_wait_for_field_rules(valid_input, now):
    data = _fixed(valid_input, discountValue=50000, usageLimit="")
    result = validate_voucher_input(data, "create", now=now)
    assert result.errors == {"usageLimit": "Usage limit is required"}


def test_update_ignores_code(valid_input, now):
    result = validate_voucher_input(dict(valid_input, code="lowercase", startDate="2024-01-01"), "update", now=now)
    assert result.valid
    assert result.payload.code is None
    assert "code" not in result.payload.to_wire()


def test_accepts_pydantic_input(valid_input, now):
    result = validate_voucher_input(VoucherInput.model_validate(valid_input), "create", now=now)
    assert result.valid


def test_unknown_mode(valid_input, now):
    with pytest.raises(ValueError):
        validate_voucher_input(valid_input, "upsert", now=now)


def test_code_is_uppercased_on_input(valid_input, now):
    result = validate_voucher_input(dict(valid_input, code=" summer 10"), "create", now=now)
    assert result.valid
    assert result.payload.code == "SUMMER10"
    assert VoucherInput(code="abc1").code == "ABC1"


def test_uppercasing_does_not_hide_invalid_characters(valid_input, now):
    result = validate_voucher_input(dict(valid_input, code="sale-10"), "create", now=now)
    assert result.errors == {"code": "Voucher code may only contain uppercase letters and digits"}
