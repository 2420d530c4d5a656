from .voucher import (
    ApiEnvelope,
    Page,
    SortDirection,
    SortKey,
    ValidateRequest,
    ValidationContext,
    ValidationMode,
    ValidationResult,
    VoucherFilters,
    VoucherInput,
    VoucherListQuery,
    VoucherListView,
    VoucherPayload,
    VoucherView,
)

__all__ = [
    "ApiEnvelope",
    "Page",
    "SortDirection",
    "SortKey",
    "ValidateRequest",
    "ValidationContext",
    "ValidationMode",
    "ValidationResult",
    "VoucherFilters",
    "VoucherInput",
    "VoucherListQuery",
    "VoucherListView",
    "VoucherPayload",
    "VoucherView",
]
