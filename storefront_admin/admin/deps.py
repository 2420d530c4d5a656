"""Admin router bağımlılıkları: katalog istemcisi, saat, bildirim kuyruğu, orkestratör."""
from fastapi import Depends, Request

from storefront_admin.core.clock import Clock, SystemClock, resolve_timezone
from storefront_admin.core.config import settings
from storefront_admin.services.catalog_client import CatalogClient, VoucherGateway
from storefront_admin.services.notifications import NotificationQueue
from storefront_admin.services.voucher_crud import VoucherManager


def get_gateway(request: Request) -> VoucherGateway:
    """Lifespan'de oluşturulan istemci; yoksa (ör. lifespan'siz çağrı) ayarlardan kurulur."""
    client = getattr(request.app.state, "catalog_client", None)
    if client is None:
        client = CatalogClient.from_settings(settings)
        request.app.state.catalog_client = client
    return client


def get_clock() -> Clock:
    return SystemClock(resolve_timezone(settings.timezone))


def get_notifications() -> NotificationQueue:
    # İstek başına yeni kuyruk; FastAPI aynı istekte aynı nesneyi paylaştırır
    return NotificationQueue()


def get_voucher_manager(
    gateway: VoucherGateway = Depends(get_gateway),
    clock: Clock = Depends(get_clock),
    notifications: NotificationQueue = Depends(get_notifications),
) -> VoucherManager:
    return VoucherManager(gateway, clock, notifications)
