from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env proje kökünde: storefront_admin/core/config.py -> core -> storefront_admin -> kök
_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _ROOT / ".env"


class Settings(BaseSettings):
    # Uzak katalog/sipariş API'si (voucher CRUD buraya gider)
    catalog_api_url: str = "http://localhost:5000"
    # Boşsa Authorization başlığı gönderilmez
    catalog_api_token: str = ""
    catalog_timeout_seconds: float = 10.0
    # Sadece bağlantı hatası / timeout için; POST hiç tekrar denenmez
    catalog_max_retries: int = 2
    catalog_retry_wait_seconds: float = 0.5
    # "Bugün" hesabı (başlangıç tarihi geçmişte mi?) bu saat diliminde yapılır
    timezone: str = "UTC"
    vouchers_per_page: int = 10
    # CORS: virgülle ayrılmış origin listesi
    cors_origins: str = "*"
    # IP başına dakikada max yazma isteği (create/update/disable)
    rate_limit_per_minute: int = 60
    log_level: str = "INFO"
    environment: str = "development"

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE.is_file() else ".env",
        "extra": "ignore",
    }

    @field_validator("catalog_api_url", mode="before")
    @classmethod
    def strip_api_url(cls, v: str | None) -> str:
        """Sondaki '/' kaldırılır ki yol birleştirmede çift eğik çizgi oluşmasın."""
        return (v or "").strip().rstrip("/")

    @field_validator("catalog_api_token", "timezone", "log_level", mode="before")
    @classmethod
    def strip_text(cls, v: str | None) -> str:
        return (v or "").strip()


settings = Settings()


def is_catalog_configured() -> bool:
    """Katalog API adresi tanımlı mı?"""
    return bool(settings.catalog_api_url)
