"""Katalog API hata sınıflandırması: sunucu mesajı aynen iletilir, yoksa kategori varsayılanı."""
from typing import Any


class CatalogError(Exception):
    """Uzak katalog API'sinden gelen tüm hataların tabanı."""

    category = "unknown"
    default_message = "An unexpected error occurred"
    # Admin API'nin bu hata için döneceği HTTP kodu (upstream kodu yoksa)
    http_status = 500

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = (message or "").strip() or self.default_message
        self.status_code = status_code
        super().__init__(self.message)

    def response_status(self) -> int:
        """Upstream 4xx kodu aynen; 5xx / kodsuz hatalar kategori koduyla (502 vb.)."""
        if self.status_code is not None and 400 <= self.status_code < 500:
            return self.status_code
        return self.http_status

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "message": self.message, "status_code": self.status_code}


class AuthorizationError(CatalogError):
    """Yetki yok (401) veya rol yetersiz (403). Rol kontrolü yukarıda yapılır; burada sadece iletilir."""

    category = "authorization"
    default_message = "You are not authorized to perform this action"
    http_status = 403

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if not (message or "").strip() and status_code == 403:
            message = "Access denied. Only admin and manager can perform this action"
        super().__init__(message, status_code)


class NotFoundError(CatalogError):
    category = "not_found"
    default_message = "Voucher not found"
    http_status = 404


class ConflictError(CatalogError):
    """Örn. aynı kodla ikinci voucher."""

    category = "conflict"
    default_message = "Voucher code already exists"
    http_status = 409


class BusinessRuleError(CatalogError):
    """Sunucu tarafı iş kuralı reddi (400/422 veya success=false). Tekrar denenmez."""

    category = "business_rule"
    default_message = "Invalid voucher data. Please check your input."
    http_status = 400


class TransientError(CatalogError):
    """Bağlantı hatası, timeout veya 5xx."""

    category = "transient"
    default_message = "Failed to connect to server. Please check your connection."
    http_status = 502

    def __init__(self, message: str | None = None, status_code: int | None = None):
        if not (message or "").strip() and status_code is not None and status_code >= 500:
            message = "Server error. Please try again later."
        super().__init__(message, status_code)


class InvalidResponseError(CatalogError):
    """Zarf ({success, message, data}) sınır doğrulamasından geçmedi."""

    category = "invalid_response"
    default_message = "Unexpected response from server"
    http_status = 502


def error_for_status(status_code: int, message: str | None = None) -> CatalogError:
    """HTTP durum kodunu hata kategorisine eşler."""
    if status_code in (401, 403):
        return AuthorizationError(message, status_code)
    if status_code == 404:
        return NotFoundError(message, status_code)
    if status_code == 409:
        return ConflictError(message, status_code)
    if status_code >= 500:
        return TransientError(message, status_code)
    return BusinessRuleError(message, status_code)
