"""Voucher yönetimi: liste (durum öncelikli sıralama + filtre + sayfalama), doğrulama, CRUD."""
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from storefront_admin.admin.deps import get_notifications, get_voucher_manager
from storefront_admin.core.config import settings
from storefront_admin.core.rate_limit import WRITE_RATE_LIMIT, limiter
from storefront_admin.models import DiscountType, VoucherStatus
from storefront_admin.schemas import SortDirection, SortKey, ValidateRequest, VoucherInput, VoucherListQuery
from storefront_admin.services.notifications import NotificationQueue
from storefront_admin.services.voucher_crud import OperationResult, VoucherManager
from storefront_admin.services.voucher_listing import build_voucher_list, normalize_search_term
from storefront_admin.services.voucher_status import to_view

router = APIRouter()


def _envelope(data=None, message: str | None = None, notifications: NotificationQueue | None = None, success: bool = True) -> dict:
    return {
        "success": success,
        "message": message,
        "data": data,
        "notifications": [n.model_dump() for n in notifications.drain()] if notifications else [],
    }


def _result_response(result: OperationResult, manager: VoucherManager, success_status: int = 200) -> JSONResponse:
    """Orkestratör sonucunu HTTP yanıtına çevirir."""
    data = None
    if result.voucher is not None:
        data = to_view(result.voucher, manager.clock.now()).model_dump(by_alias=True, mode="json")
    if result.outcome == "invalid":
        body = _envelope(data, result.message, manager.notifications, success=False)
        body["errors"] = result.errors
        return JSONResponse(status_code=422, content=body)
    if result.outcome == "failed":
        status_code = result.error.response_status() if result.error is not None else 502
        body = _envelope(data, result.message, manager.notifications, success=False)
        if result.error is not None:
            body["error_category"] = result.error.category
        return JSONResponse(status_code=status_code, content=body)
    return JSONResponse(status_code=success_status, content=_envelope(data, result.message, manager.notifications))


@router.get("")
@router.get("/")
def vouchers_list(
    status: VoucherStatus | Literal["all"] = Query("all"),
    discount_type: DiscountType | Literal["all"] = Query("all"),
    q: str = Query("", max_length=30),
    sort: SortKey = Query("code"),
    direction: SortDirection = Query("asc"),
    page: int = Query(1, ge=1),
    manager: VoucherManager = Depends(get_voucher_manager),
):
    query = VoucherListQuery(
        status_filter=status,
        discount_type_filter=discount_type,
        search_term=normalize_search_term(q),
        sort_key=sort,
        direction=direction,
        page=page,
        per_page=settings.vouchers_per_page,
    )
    view = build_voucher_list(manager.list_vouchers(), manager.clock.now(), query)
    return _envelope(view.model_dump(by_alias=True, mode="json"))


@router.post("/validate")
def voucher_validate(
    body: ValidateRequest,
    manager: VoucherManager = Depends(get_voucher_manager),
):
    """Form alanları değiştikçe çağrılır; hiçbir zaman katalog API'sine gitmez."""
    result = manager.validate(body.to_raw(), body.mode, body.current_used_count)
    return {"valid": result.valid, "errors": result.errors}


@router.get("/{voucher_id}")
def voucher_detail(
    voucher_id: str,
    manager: VoucherManager = Depends(get_voucher_manager),
):
    voucher = manager.get_voucher(voucher_id)
    return _envelope(to_view(voucher, manager.clock.now()).model_dump(by_alias=True, mode="json"))


@router.post("", status_code=201)
@router.post("/", status_code=201)
@limiter.limit(WRITE_RATE_LIMIT)
def voucher_create(
    request: Request,
    body: VoucherInput,
    manager: VoucherManager = Depends(get_voucher_manager),
):
    result = manager.create(body.to_raw())
    return _result_response(result, manager, success_status=201)


@router.put("/{voucher_id}")
@limiter.limit(WRITE_RATE_LIMIT)
def voucher_update(
    request: Request,
    voucher_id: str,
    body: VoucherInput,
    manager: VoucherManager = Depends(get_voucher_manager),
):
    current = manager.get_voucher(voucher_id)
    result = manager.update(current, body.to_raw())
    if result.outcome == "skipped":
        raise HTTPException(status_code=409, detail=result.message)
    return _result_response(result, manager)


@router.delete("/{voucher_id}")
@limiter.limit(WRITE_RATE_LIMIT)
def voucher_disable(
    request: Request,
    voucher_id: str,
    confirm: bool = Query(False, description="Onay kutusu: true olmadan işlem yapılmaz"),
    notifications: NotificationQueue = Depends(get_notifications),
    manager: VoucherManager = Depends(get_voucher_manager),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Disable must be confirmed (confirm=true)")
    current = manager.get_voucher(voucher_id)
    result = manager.disable(current, confirmed=True)
    if result.outcome == "skipped":
        # Zaten devre dışı: aynı duruma geçiş, hata değil
        notifications.push(result.message, "info")
    return _result_response(result, manager)
