"""
Voucher yazma uçları (create / update / disable) için IP bazlı limit (SlowAPI).
Okuma ve canlı doğrulama limitsizdir; katalog API'sine giden mutasyonlar sınırlanır.
"""
from fastapi import Request

from slowapi import Limiter

from .config import settings

FALLBACK_CLIENT_IP = "127.0.0.1"


def _get_client_ip(request: Request) -> str:
    """Yönetim paneli proxy arkasındaysa X-Forwarded-For'daki ilk adres istemcidir."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    client = request.client
    return client.host if client and client.host else FALLBACK_CLIENT_IP


limiter = Limiter(key_func=_get_client_ip)

# Örn. "60/minute"; RATE_LIMIT_PER_MINUTE ile ayarlanır
WRITE_RATE_LIMIT = f"{settings.rate_limit_per_minute}/minute"
