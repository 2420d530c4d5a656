"""Admin API: modüler router'lar, /admin altında (JSON; arayüz ayrı uygulamada)."""
from fastapi import APIRouter

from storefront_admin.admin.routers import vouchers

admin_router = APIRouter(prefix="/admin", tags=["admin"])

admin_router.include_router(vouchers.router, prefix="/vouchers", tags=["admin-vouchers"])
