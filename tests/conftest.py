"""Pytest fixtures: sabit saat, bellek içi sahte katalog API, test client."""
import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Ayarlar app import edilmeden önce set edilmeli
os.environ.setdefault("CATALOG_API_URL", "http://catalog.test")
os.environ.setdefault("CATALOG_MAX_RETRIES", "0")
# Yazma rate limit yüksek olsun ki tüm testler geçebilsin
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")
os.environ.setdefault("VOUCHERS_PER_PAGE", "10")

from storefront_admin.admin.deps import get_clock, get_gateway
from storefront_admin.core.clock import FixedClock
from storefront_admin.core.errors import ConflictError, NotFoundError
from storefront_admin.main import app
from storefront_admin.models import Voucher
from storefront_admin.schemas import VoucherPayload
from storefront_admin.services.notifications import NotificationQueue
from storefront_admin.services.voucher_crud import VoucherManager

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeGateway:
    """Uzak katalog API'sinin bellek içi karşılığı; çağrıları kaydeder."""

    def __init__(self, vouchers=()):
        self.vouchers: dict[str, Voucher] = {v.id: v for v in vouchers}
        self.calls: list[tuple] = []
        self.fail_with = None  # bir sonraki çağrıda fırlatılacak CatalogError
        self.disable_returns_data = True
        self._seq = 100

    def _maybe_fail(self):
        if self.fail_with is not None:
            exc, self.fail_with = self.fail_with, None
            raise exc

    def mutation_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("create", "update", "disable")]

    def get_all(self) -> list[Voucher]:
        self.calls.append(("get_all",))
        self._maybe_fail()
        return list(self.vouchers.values())

    def get(self, voucher_id: str) -> Voucher:
        self.calls.append(("get", voucher_id))
        self._maybe_fail()
        if voucher_id not in self.vouchers:
            raise NotFoundError(None, 404)
        return self.vouchers[voucher_id]

    def create(self, payload: VoucherPayload) -> Voucher:
        self.calls.append(("create", payload))
        self._maybe_fail()
        if any(v.code == payload.code for v in self.vouchers.values()):
            raise ConflictError(None, 409)
        self._seq += 1
        voucher = Voucher(id=str(self._seq), used_count=0, is_deleted=False, **payload.model_dump(exclude={"code"}), code=payload.code)
        self.vouchers[voucher.id] = voucher
        return voucher

    def update(self, voucher_id: str, payload: VoucherPayload) -> Voucher:
        self.calls.append(("update", voucher_id, payload))
        self._maybe_fail()
        if voucher_id not in self.vouchers:
            raise NotFoundError(None, 404)
        changes = payload.model_dump(exclude={"code"})
        updated = self.vouchers[voucher_id].model_copy(update=changes)
        self.vouchers[voucher_id] = updated
        return updated

    def disable(self, voucher_id: str) -> Voucher | None:
        self.calls.append(("disable", voucher_id))
        self._maybe_fail()
        if voucher_id not in self.vouchers:
            raise NotFoundError(None, 404)
        disabled = self.vouchers[voucher_id].model_copy(update={"is_deleted": True})
        self.vouchers[voucher_id] = disabled
        return disabled if self.disable_returns_data else None


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def make_voucher():
    """Varsayılanı ACTIVE bir percentage voucher; alanlar keyword ile ezilir."""

    def _make(**overrides) -> Voucher:
        data = {
            "id": "v1",
            "code": "SUMMER10",
            "discount_type": "percentage",
            "discount_value": 10,
            "min_order_value": 0,
            "max_discount": 50000,
            "start_date": NOW - timedelta(days=1),
            "end_date": NOW + timedelta(days=10),
            "usage_limit": 10,
            "used_count": 0,
            "is_deleted": False,
        }
        data.update(overrides)
        return Voucher(**data)

    return _make


@pytest.fixture
def valid_input() -> dict:
    """Geçerli create formu (NOW'a göre yarın başlar)."""
    return {
        "code": "SUMMER10",
        "discountType": "percentage",
        "discountValue": 10,
        "minOrderValue": 0,
        "maxDiscount": 50000,
        "startDate": "2024-06-16",
        "endDate": "2024-06-30",
        "usageLimit": 100,
    }


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifications() -> NotificationQueue:
    return NotificationQueue()


@pytest.fixture
def manager(gateway, clock, notifications) -> VoucherManager:
    return VoucherManager(gateway, clock, notifications)


@pytest.fixture(scope="function")
def client(gateway, clock):
    """TestClient; katalog API yerine sahte gateway, saat sabit."""
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
