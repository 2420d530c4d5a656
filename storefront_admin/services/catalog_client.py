"""
Uzak katalog API istemcisi (voucher CRUD).

Her yanıt {success, message, data} zarfıdır ve sınırda pydantic ile doğrulanır;
motor her zaman tipli Voucher / list[Voucher] alır. Hatalar core.errors sınıflarına çevrilir.
"""
import json
import logging
import time
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from pydantic import ValidationError

from storefront_admin.core.config import Settings, settings
from storefront_admin.core.errors import (
    BusinessRuleError,
    InvalidResponseError,
    TransientError,
    error_for_status,
)
from storefront_admin.models import Voucher
from storefront_admin.schemas import ApiEnvelope, VoucherPayload

logger = logging.getLogger(__name__)

# Bağlantı hatasında tekrar denenebilecek metodlar; POST çift kayıt üretebilir
RETRYABLE_METHODS = frozenset({"GET", "PUT", "DELETE"})


class VoucherGateway(Protocol):
    """Kalıcılık katmanı (dış sistem). Orkestratör sadece bu arayüzü bilir."""

    def get_all(self) -> list[Voucher]: ...

    def get(self, voucher_id: str) -> Voucher: ...

    def create(self, payload: VoucherPayload) -> Voucher: ...

    def update(self, voucher_id: str, payload: VoucherPayload) -> Voucher: ...

    def disable(self, voucher_id: str) -> Voucher | None: ...


def _error_message_from_body(body: bytes) -> str | None:
    """Hata gövdesinden sunucu mesajı: önce 'message', sonra 'error'."""
    try:
        data = json.loads(body.decode("utf-8") or "null")
    except (UnicodeDecodeError, ValueError):
        return None
    if isinstance(data, dict):
        for key in ("message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


class CatalogClient:
    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 10.0,
        max_retries: int = 2,
        retry_wait: float = 0.5,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.retry_wait = retry_wait

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "CatalogClient":
        return cls(
            base_url=config.catalog_api_url,
            token=config.catalog_api_token,
            timeout=config.catalog_timeout_seconds,
            max_retries=config.catalog_max_retries,
            retry_wait=config.catalog_retry_wait_seconds,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> bytes:
        """Ham yanıt gövdesini döner; HTTP hatası -> kategori hatası, bağlantı hatası -> TransientError."""
        url = f"{self.base_url}{path}"
        data = json.dumps(body).encode("utf-8") if body is not None else None
        attempts = 1 + (self.max_retries if method in RETRYABLE_METHODS else 0)
        for attempt in range(1, attempts + 1):
            req = Request(url, data=data, headers=self._headers(), method=method)
            try:
                with urlopen(req, timeout=self.timeout) as r:
                    return r.read()
            except HTTPError as e:
                message = _error_message_from_body(e.read() or b"")
                logger.warning("Catalog API %s %s -> %s: %s", method, path, e.code, message)
                raise error_for_status(e.code, message) from e
            except (URLError, OSError) as e:
                if attempt < attempts:
                    logger.warning(
                        "Catalog API %s %s connection failed (attempt %s/%s), retrying: %s",
                        method, path, attempt, attempts, e,
                    )
                    time.sleep(self.retry_wait)
                    continue
                logger.error("Catalog API %s %s unreachable: %s", method, path, e)
                raise TransientError() from e
        raise TransientError()

    def _unwrap(self, raw: bytes, data_type: Any) -> Any:
        """Zarfı doğrular; success=false ise sunucu mesajıyla BusinessRuleError."""
        try:
            envelope = ApiEnvelope[data_type].model_validate_json(raw)
        except ValidationError as e:
            logger.error("Catalog API returned an invalid envelope: %s", e)
            raise InvalidResponseError() from e
        if not envelope.success:
            raise BusinessRuleError(envelope.message)
        return envelope.data

    def _one(self, raw: bytes) -> Voucher:
        voucher = self._unwrap(raw, Voucher)
        if voucher is None:
            raise InvalidResponseError("Voucher missing from server response")
        return voucher

    def get_all(self) -> list[Voucher]:
        return self._unwrap(self._request("GET", "/vouchers"), list[Voucher]) or []

    def get(self, voucher_id: str) -> Voucher:
        return self._one(self._request("GET", f"/vouchers/{quote(str(voucher_id), safe='')}"))

    def create(self, payload: VoucherPayload) -> Voucher:
        return self._one(self._request("POST", "/vouchers", payload.to_wire()))

    def update(self, voucher_id: str, payload: VoucherPayload) -> Voucher:
        body = payload.to_wire()
        body.pop("code", None)  # code oluşturulduktan sonra değişmez
        return self._one(self._request("PUT", f"/vouchers/{quote(str(voucher_id), safe='')}", body))

    def disable(self, voucher_id: str) -> Voucher | None:
        """Sunucu tarafında soft delete (isDeleted=true). Bazı sürümler data döndürmez."""
        return self._unwrap(self._request("DELETE", f"/vouchers/{quote(str(voucher_id), safe='')}"), Voucher)
