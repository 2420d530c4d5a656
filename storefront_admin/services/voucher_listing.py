"""Voucher listesi: durum öncelikli sıralama, filtre ve sayfalama."""
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any, Callable

from storefront_admin.models import Voucher
from storefront_admin.schemas import Page, VoucherFilters, VoucherListQuery, VoucherListView
from storefront_admin.services.voucher_status import derive_status, status_priority, to_view

SORT_DIRECTIONS = ("asc", "desc")
MAX_VISIBLE_PAGES = 5

_SORT_ACCESSORS: dict[str, Callable[[Voucher], Any]] = {
    "code": lambda v: v.code,
    "startDate": lambda v: v.start_date,
    "endDate": lambda v: v.end_date,
    "discountValue": lambda v: v.discount_value,
    "usageLimit": lambda v: v.usage_limit,
}
SORT_KEYS = tuple(_SORT_ACCESSORS)


def sort_vouchers(
    vouchers: Iterable[Voucher],
    now: datetime,
    sort_key: str = "code",
    direction: str = "asc",
) -> list[Voucher]:
    """
    Önce durum önceliği (ACTIVE < UPCOMING < USED_UP < EXPIRED < DISABLED, her zaman artan),
    sonra seçilen alan seçilen yönde. Python sıralaması kararlı olduğu için iki geçiş yeterli:
    ikincil anahtarla sırala, ardından durumla sırala.
    """
    accessor = _SORT_ACCESSORS.get(sort_key)
    if accessor is None:
        raise ValueError(f"unknown sort key: {sort_key!r}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"unknown sort direction: {direction!r}")
    ordered = sorted(vouchers, key=accessor, reverse=direction == "desc")
    return sorted(ordered, key=lambda v: status_priority(derive_status(v, now)))


def normalize_search_term(term: str | None) -> str:
    """Kodlar büyük harfle saklanır; arama da büyük harfe çevrilir."""
    return (term or "").strip().upper()


def filter_vouchers(
    vouchers: Iterable[Voucher],
    now: datetime,
    filters: VoucherFilters | Mapping[str, Any] | None = None,
) -> list[Voucher]:
    """Durum, indirim tipi ve kod araması AND ile birleşir; 'all' / boş arama filtre uygulamaz."""
    if filters is None:
        filters = VoucherFilters()
    elif not isinstance(filters, VoucherFilters):
        filters = VoucherFilters.model_validate(filters)

    def matches(v: Voucher) -> bool:
        if filters.status_filter != "all" and derive_status(v, now) != filters.status_filter:
            return False
        if filters.discount_type_filter != "all" and v.discount_type != filters.discount_type_filter:
            return False
        if filters.search_term and filters.search_term not in v.code:
            return False
        return True

    return [v for v in vouchers if matches(v)]


def visible_pages(current: int, total_pages: int, max_visible: int = MAX_VISIBLE_PAGES) -> list[int]:
    """Sayfalama çubuğunda gösterilecek en fazla max_visible sayfa numarası."""
    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))
    start = max(1, current - 2)
    end = min(total_pages, start + max_visible - 1)
    if end - start < max_visible - 1:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


def paginate(items: Sequence[Any], page: int = 1, per_page: int = 10) -> Page:
    """1 tabanlı sayfa; aralık dışı sayfa [1, total_pages] içine çekilir."""
    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    total = len(items)
    total_pages = math.ceil(total / per_page)
    page = min(max(1, page), max(1, total_pages))
    start = (page - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=page,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
        visible_pages=visible_pages(page, total_pages),
    )


def build_voucher_list(vouchers: Iterable[Voucher], now: datetime, query: VoucherListQuery) -> VoucherListView:
    """Liste ekranı için tek geçiş: sırala -> filtrele -> sayfala. Durum her çağrıda yeniden hesaplanır."""
    ordered = sort_vouchers(vouchers, now, query.sort_key, query.direction)
    matching = filter_vouchers(ordered, now, query)
    page = paginate(matching, query.page, query.per_page)
    return VoucherListView(
        items=[to_view(v, now) for v in page.items],
        page=page.page,
        per_page=page.per_page,
        total=page.total,
        total_pages=page.total_pages,
        visible_pages=page.visible_pages,
        has_active_filters=query.has_active_filters,
    )
