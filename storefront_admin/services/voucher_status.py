"""Voucher durumu: tarih aralığı, kullanım sayacı ve silinme bayrağından türetilir."""
from datetime import datetime, timezone

from storefront_admin.models import (
    STATUS_ACTIVE,
    STATUS_DISABLED,
    STATUS_EXPIRED,
    STATUS_UPCOMING,
    STATUS_USED_UP,
    Voucher,
    VoucherStatus,
)
from storefront_admin.schemas import VoucherView

# Liste sıralamasında birincil anahtar (küçük = önce). Yön parametresi bunu tersine çevirmez.
STATUS_PRIORITY: dict[str, int] = {
    STATUS_ACTIVE: 1,
    STATUS_UPCOMING: 2,
    STATUS_USED_UP: 3,
    STATUS_EXPIRED: 4,
    STATUS_DISABLED: 5,
}


def derive_status(voucher: Voucher, now: datetime) -> VoucherStatus:
    """
    İlk eşleşen kazanır:
    silinmiş -> DISABLED, başlamamış -> UPCOMING, bitmiş -> EXPIRED,
    limit dolmuş -> USED_UP, aksi halde ACTIVE.
    Hem süresi geçmiş hem limiti dolmuş voucher EXPIRED döner.
    Naive now UTC kabul edilir (FixedClock ile aynı).
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if voucher.is_deleted:
        return STATUS_DISABLED
    if now < voucher.start_date:
        return STATUS_UPCOMING
    if now > voucher.end_date:
        return STATUS_EXPIRED
    if voucher.used_count >= voucher.usage_limit:
        return STATUS_USED_UP
    return STATUS_ACTIVE


def status_priority(status: str) -> int:
    return STATUS_PRIORITY[status]


def status_label(status: str) -> str:
    """'USED_UP' -> 'Used Up'"""
    return " ".join(word.capitalize() for word in status.split("_"))


def to_view(voucher: Voucher, now: datetime) -> VoucherView:
    status = derive_status(voucher, now)
    return VoucherView(**voucher.model_dump(), status=status, status_label=status_label(status))
