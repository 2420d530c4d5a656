"""Voucher: uzak katalog API'sinin döndüğü indirim kodu kaydı (yerelde saklanmaz)."""
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DiscountType = Literal["percentage", "fixed"]
DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_FIXED = "fixed"
DISCOUNT_TYPES = (DISCOUNT_PERCENTAGE, DISCOUNT_FIXED)

# Türetilmiş durum; hiçbir yerde saklanmaz, her çağrıda yeniden hesaplanır
VoucherStatus = Literal["ACTIVE", "UPCOMING", "EXPIRED", "USED_UP", "DISABLED"]
STATUS_ACTIVE = "ACTIVE"
STATUS_UPCOMING = "UPCOMING"
STATUS_EXPIRED = "EXPIRED"
STATUS_USED_UP = "USED_UP"
STATUS_DISABLED = "DISABLED"
STATUSES = (STATUS_ACTIVE, STATUS_UPCOMING, STATUS_USED_UP, STATUS_EXPIRED, STATUS_DISABLED)


class Voucher(BaseModel):
    """Kablo formatı camelCase (discountValue, usedCount...); Python tarafı snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Bazı uç noktalar Mongo tarzı "_id" döner
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    code: str
    discount_type: DiscountType
    discount_value: float
    min_order_value: float = 0
    max_discount: float | None = None  # sadece percentage için anlamlı
    start_date: datetime
    end_date: datetime
    usage_limit: int
    used_count: int = 0  # yalnızca dış kullanım (redemption) süreci artırır
    is_deleted: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("start_date", "end_date")
    @classmethod
    def aware_datetime(cls, v: datetime) -> datetime:
        """Naive tarih UTC kabul edilir; karşılaştırmalar hep timezone-aware yapılır."""
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    def as_input(self) -> dict[str, Any]:
        """Düzenleme formu için düzenlenebilir alanlar (kablo formatında)."""
        data = {
            "code": self.code,
            "discountType": self.discount_type,
            "discountValue": self.discount_value,
            "minOrderValue": self.min_order_value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "usageLimit": self.usage_limit,
        }
        if self.discount_type == DISCOUNT_PERCENTAGE and self.max_discount is not None:
            data["maxDiscount"] = self.max_discount
        return data

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
