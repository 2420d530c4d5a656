from .voucher import (
    DISCOUNT_FIXED,
    DISCOUNT_PERCENTAGE,
    DISCOUNT_TYPES,
    STATUS_ACTIVE,
    STATUS_DISABLED,
    STATUS_EXPIRED,
    STATUS_UPCOMING,
    STATUS_USED_UP,
    STATUSES,
    DiscountType,
    Voucher,
    VoucherStatus,
)

__all__ = [
    "DISCOUNT_FIXED",
    "DISCOUNT_PERCENTAGE",
    "DISCOUNT_TYPES",
    "STATUS_ACTIVE",
    "STATUS_DISABLED",
    "STATUS_EXPIRED",
    "STATUS_UPCOMING",
    "STATUS_USED_UP",
    "STATUSES",
    "DiscountType",
    "Voucher",
    "VoucherStatus",
]
