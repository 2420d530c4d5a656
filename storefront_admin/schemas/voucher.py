from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from storefront_admin.models import DiscountType, Voucher, VoucherStatus

T = TypeVar("T")

ValidationMode = Literal["create", "update"]
SortKey = Literal["code", "startDate", "endDate", "discountValue", "usageLimit"]
SortDirection = Literal["asc", "desc"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiEnvelope(BaseModel, Generic[T]):
    """Katalog API'sinin tek yanıt zarfı: {success, message, data}."""
    success: bool
    message: str | None = None
    data: T | None = None


class VoucherInput(_CamelModel):
    """Formdan gelen ham değerler; tip/aralık kontrolü doğrulayıcıda yapılır."""
    code: Any = None
    discount_type: Any = None
    discount_value: Any = None
    min_order_value: Any = None
    max_discount: Any = None
    start_date: Any = None
    end_date: Any = None
    usage_limit: Any = None

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v: Any) -> Any:
        """Kodlar büyük harfle saklanır: boşluklar atılır, harfler büyütülür."""
        if isinstance(v, str):
            return "".join(v.split()).upper()
        return v

    def to_raw(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ValidateRequest(VoucherInput):
    """Canlı (alan alan) doğrulama: create veya update modunda."""
    mode: ValidationMode = "create"
    current_used_count: int | None = None


class ValidationContext(_CamelModel):
    current_used_count: int | None = None


class VoucherPayload(_CamelModel):
    """Doğrulamadan geçmiş, API'ye gönderilecek temiz veri."""
    code: str | None = None  # sadece create
    discount_type: DiscountType
    discount_value: float
    min_order_value: float
    max_discount: float | None = None  # sadece percentage
    start_date: datetime
    end_date: datetime
    usage_limit: int

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class ValidationResult(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
    payload: VoucherPayload | None = Field(default=None, exclude=True)


class VoucherFilters(_CamelModel):
    status_filter: VoucherStatus | Literal["all"] = "all"
    discount_type_filter: DiscountType | Literal["all"] = "all"
    search_term: str = ""


class VoucherListQuery(VoucherFilters):
    sort_key: SortKey = "code"
    direction: SortDirection = "asc"
    page: int = 1
    per_page: int = 10

    @property
    def has_active_filters(self) -> bool:
        """Varsayılandan farklı filtre/sıralama var mı? ("Temizle" butonu için)"""
        return bool(
            self.search_term
            or self.discount_type_filter != "all"
            or self.status_filter != "all"
            or self.sort_key != "code"
            or self.direction != "asc"
        )


class VoucherView(Voucher):
    """Listede gösterilen voucher + o anki türetilmiş durum."""
    status: VoucherStatus
    status_label: str


class Page(_CamelModel):
    items: list[Any]
    page: int
    per_page: int
    total: int
    total_pages: int
    visible_pages: list[int]


class VoucherListView(_CamelModel):
    items: list[VoucherView]
    page: int
    per_page: int
    total: int
    total_pages: int
    visible_pages: list[int]
    has_active_filters: bool
