"""
Voucher girdi doğrulama: alan bazlı kurallar + alanlar arası iş kuralları.

Alan kuralları birbirinden bağımsız çalışır (tüm hatalar tek seferde gösterilebilsin);
alanlar arası kurallar sadece tüm alan kuralları geçince çalışır. Hatalar kablo
formatındaki alan adına (discountValue, usageLimit...) bağlanır.
"""
import math
import re
from collections.abc import Mapping
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Callable, NamedTuple

from pydantic import BaseModel

from storefront_admin.models import DISCOUNT_FIXED, DISCOUNT_PERCENTAGE, DISCOUNT_TYPES
from storefront_admin.schemas import ValidationContext, ValidationResult, VoucherInput, VoucherPayload

MODE_CREATE = "create"
MODE_UPDATE = "update"
MODES = (MODE_CREATE, MODE_UPDATE)

FIELD_CODE = "code"
FIELD_DISCOUNT_TYPE = "discountType"
FIELD_DISCOUNT_VALUE = "discountValue"
FIELD_MIN_ORDER_VALUE = "minOrderValue"
FIELD_MAX_DISCOUNT = "maxDiscount"
FIELD_START_DATE = "startDate"
FIELD_END_DATE = "endDate"
FIELD_USAGE_LIMIT = "usageLimit"

# Update'te code düzenlenemez
EDITABLE_FIELDS = (
    FIELD_DISCOUNT_TYPE,
    FIELD_DISCOUNT_VALUE,
    FIELD_MIN_ORDER_VALUE,
    FIELD_MAX_DISCOUNT,
    FIELD_START_DATE,
    FIELD_END_DATE,
    FIELD_USAGE_LIMIT,
)
CREATE_FIELDS = (FIELD_CODE,) + EDITABLE_FIELDS

CODE_MIN_LENGTH = 3
CODE_MAX_LENGTH = 30
CODE_PATTERN = re.compile(r"^[A-Z0-9]+$")
PERCENTAGE_MAX = 100


class _FieldContext(NamedTuple):
    discount_type: Any
    payload: Mapping[str, Any]
    mode: str
    now: datetime | None

    @property
    def tz(self) -> tzinfo:
        # Sadece tarih verilmiş değerler saatin diliminde gece yarısı sayılır
        if self.now is not None and self.now.tzinfo is not None:
            return self.now.tzinfo
        return timezone.utc


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _to_number(raw: Any) -> float:
    """int/float/sayısal metin -> float. bool, NaN ve sonsuz kabul edilmez (ValueError)."""
    if isinstance(raw, bool):
        raise ValueError("boolean is not a number")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        value = float(raw.strip())
    else:
        raise ValueError(f"unsupported type: {type(raw).__name__}")
    if not math.isfinite(value):
        raise ValueError("not a finite number")
    return value


def _to_int(raw: Any) -> int:
    value = _to_number(raw)
    if not value.is_integer():
        raise ValueError("not a whole number")
    return int(value)


def _to_datetime(raw: Any, tz: tzinfo) -> datetime:
    """datetime, date veya ISO-8601 metin ('2024-01-01', '2024-01-01T10:00:00Z')."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime(raw.year, raw.month, raw.day)
    elif isinstance(raw, str):
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported type: {type(raw).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value


def _check_code(raw: Any, ctx: _FieldContext) -> str | None:
    if _is_blank(raw):
        return "Voucher code is required"
    code = str(raw).strip()
    if len(code) < CODE_MIN_LENGTH:
        return f"Voucher code must be at least {CODE_MIN_LENGTH} characters"
    if len(code) > CODE_MAX_LENGTH:
        return f"Voucher code must be at most {CODE_MAX_LENGTH} characters"
    if not CODE_PATTERN.match(code):
        return "Voucher code may only contain uppercase letters and digits"
    return None


def _check_discount_type(raw: Any, ctx: _FieldContext) -> str | None:
    if _is_blank(raw):
        return "Discount type is required"
    if raw not in DISCOUNT_TYPES:
        return "Discount type must be percentage or fixed"
    return None


def _check_discount_value(raw: Any, ctx: _FieldContext) -> str | None:
    if _is_blank(raw):
        return "Discount value is required"
    try:
        value = _to_number(raw)
    except ValueError:
        return "Discount value must be a number"
    if value <= 0:
        return "Discount value must be greater than 0"
    # fixed için üst sınır yok; tavan alanlar arası kuraldan gelir (minOrderValue)
    if ctx.discount_type == DISCOUNT_PERCENTAGE and value > PERCENTAGE_MAX:
        return "Percentage must be less than or equal to 100"
    return None


def _check_min_order_value(raw: Any, ctx: _FieldContext) -> str | None:
    # 0 geçerli, boş geçersiz
    if _is_blank(raw):
        return "Minimum order value is required"
    try:
        value = _to_number(raw)
    except ValueError:
        return "Minimum order value must be a number"
    if value < 0:
        return "Minimum order value cannot be negative"
    return None


def _check_max_discount(raw: Any, ctx: _FieldContext) -> str | None:
    if ctx.discount_type != DISCOUNT_PERCENTAGE:
        return None
    if _is_blank(raw):
        return "Maximum discount is required for percentage vouchers"
    try:
        value = _to_number(raw)
    except ValueError:
        return "Maximum discount must be a number"
    if value <= 0:
        return "Maximum discount must be greater than 0"
    return None


def _check_start_date(raw: Any, ctx: _FieldContext) -> str | None:
    if _is_blank(raw):
        return "Start date is required"
    try:
        start = _to_datetime(raw, ctx.tz)
    except ValueError:
        return "Invalid date format"
    # Geçmiş başlangıç sadece yeni kayıtta yasak; düzenlemede eski tarih korunabilir
    if ctx.mode == MODE_CREATE and ctx.now is not None:
        if start.astimezone(ctx.tz).date() < ctx.now.date():
            return "Start date cannot be in the past"
    return None


def _check_end_date(raw: Any, ctx: _FieldContext) -> str | None:
    if _is_blank(raw):
        return "End date is required"
    try:
        end = _to_datetime(raw, ctx.tz)
    except ValueError:
        return "Invalid date format"
    start_raw = ctx.payload.get(FIELD_START_DATE)
    if _is_blank(start_raw):
        return None
    try:
        start = _to_datetime(start_raw, ctx.tz)
    except ValueError:
        # Başlangıç tarihi kendi hatasını raporlar
        return None
    if end <= start:
        return "End date must be after start date"
    return None


def _check_usage_limit(raw: Any, ctx: _FieldContext) -> str | None:
    if _is_blank(raw):
        return "Usage limit is required"
    try:
        value = _to_int(raw)
    except ValueError:
        return "Usage limit must be a whole number"
    if value < 1:
        return "Usage limit must be at least 1"
    return None


_FIELD_RULES: dict[str, Callable[[Any, _FieldContext], str | None]] = {
    FIELD_CODE: _check_code,
    FIELD_DISCOUNT_TYPE: _check_discount_type,
    FIELD_DISCOUNT_VALUE: _check_discount_value,
    FIELD_MIN_ORDER_VALUE: _check_min_order_value,
    FIELD_MAX_DISCOUNT: _check_max_discount,
    FIELD_START_DATE: _check_start_date,
    FIELD_END_DATE: _check_end_date,
    FIELD_USAGE_LIMIT: _check_usage_limit,
}


def validate_field(
    name: str,
    raw_value: Any,
    discount_type: Any,
    *,
    payload: Mapping[str, Any] | None = None,
    mode: str = MODE_CREATE,
    now: datetime | None = None,
) -> str | None:
    """
    Tek alanı doğrular; hata mesajı veya None döner.
    payload: diğer alanların ham değerleri (endDate > startDate kontrolü için).
    now verilmezse "başlangıç geçmişte olamaz" kuralı uygulanmaz.
    Bilinmeyen alan adı için None.
    """
    rule = _FIELD_RULES.get(name)
    if rule is None:
        return None
    return rule(raw_value, _FieldContext(discount_type, payload or {}, mode, now))


def validate_cross_fields(
    payload: VoucherPayload,
    mode: str = MODE_CREATE,
    current_used_count: int | None = None,
) -> dict[str, str]:
    """Alan kuralları geçtikten sonra çalışır; mevcut veriyi değiştirmez."""
    errors: dict[str, str] = {}
    # Sabit indirim, kazanmak için gereken sepet tutarını aşamaz (negatif net sipariş olmasın)
    if (
        payload.discount_type == DISCOUNT_FIXED
        and payload.min_order_value > 0
        and payload.discount_value > payload.min_order_value
    ):
        errors[FIELD_DISCOUNT_VALUE] = "Fixed discount cannot exceed the minimum order value"
    if payload.discount_type == DISCOUNT_PERCENTAGE and (
        payload.max_discount is None or payload.max_discount <= 0
    ):
        errors[FIELD_MAX_DISCOUNT] = "Maximum discount is required for percentage vouchers"
    if mode == MODE_UPDATE and current_used_count is not None and payload.usage_limit < current_used_count:
        errors[FIELD_USAGE_LIMIT] = (
            f"Usage limit cannot be less than the current used count ({current_used_count})"
        )
    return errors


def _as_raw_mapping(data: Mapping[str, Any] | BaseModel) -> Mapping[str, Any]:
    """Form verisi VoucherInput'tan geçer; code burada büyük harfe çevrilir."""
    if isinstance(data, VoucherInput):
        return data.to_raw()
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    return VoucherInput.model_validate(data).to_raw()


def _build_payload(raw: Mapping[str, Any], mode: str, tz: tzinfo) -> VoucherPayload:
    """Alan kuralları geçmiş ham veriden tipli payload üretir."""
    discount_type = raw[FIELD_DISCOUNT_TYPE]
    max_discount = None
    if discount_type == DISCOUNT_PERCENTAGE:
        max_discount = _to_number(raw[FIELD_MAX_DISCOUNT])
    return VoucherPayload(
        code=str(raw[FIELD_CODE]).strip() if mode == MODE_CREATE else None,
        discount_type=discount_type,
        discount_value=_to_number(raw[FIELD_DISCOUNT_VALUE]),
        min_order_value=_to_number(raw[FIELD_MIN_ORDER_VALUE]),
        max_discount=max_discount,
        start_date=_to_datetime(raw[FIELD_START_DATE], tz),
        end_date=_to_datetime(raw[FIELD_END_DATE], tz),
        usage_limit=_to_int(raw[FIELD_USAGE_LIMIT]),
    )


def validate_voucher_input(
    data: Mapping[str, Any] | BaseModel,
    mode: str = MODE_CREATE,
    context: ValidationContext | Mapping[str, Any] | None = None,
    *,
    now: datetime,
) -> ValidationResult:
    """
    Create/update payload'ını bütün olarak doğrular.
    Geçerliyse result.payload API'ye gönderilecek temiz veridir.
    """
    if mode not in MODES:
        raise ValueError(f"unknown validation mode: {mode!r}")
    if context is None:
        context = ValidationContext()
    elif not isinstance(context, ValidationContext):
        context = ValidationContext.model_validate(context)

    raw = _as_raw_mapping(data)
    discount_type = raw.get(FIELD_DISCOUNT_TYPE)
    fields = CREATE_FIELDS if mode == MODE_CREATE else EDITABLE_FIELDS
    errors: dict[str, str] = {}
    for name in fields:
        message = validate_field(name, raw.get(name), discount_type, payload=raw, mode=mode, now=now)
        if message:
            errors[name] = message
    if errors:
        return ValidationResult(valid=False, errors=errors)

    payload = _build_payload(raw, mode, _FieldContext(discount_type, raw, mode, now).tz)
    errors = validate_cross_fields(payload, mode, context.current_used_count)
    if errors:
        return ValidationResult(valid=False, errors=errors)
    return ValidationResult(valid=True, payload=payload)
