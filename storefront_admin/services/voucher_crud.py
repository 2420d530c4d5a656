"""
Voucher CRUD akışı: doğrula -> gönder -> yanıtı normalize et -> yerel listeyi güncelle.

Durumlar (çağıran açısından): idle -> validating -> submitting -> settled.
Doğrulama hatasında ağ çağrısı yapılmaz. Devre dışı bırakma soft delete'tir, kayıt silinmez.
"""
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field

from storefront_admin.core.clock import Clock
from storefront_admin.core.errors import CatalogError
from storefront_admin.models import Voucher
from storefront_admin.schemas import ValidationContext, ValidationResult
from storefront_admin.services.catalog_client import VoucherGateway
from storefront_admin.services.notifications import NotificationQueue
from storefront_admin.services.voucher_validation import MODE_CREATE, MODE_UPDATE, validate_voucher_input

logger = logging.getLogger(__name__)

OperationState = Literal["idle", "validating", "submitting", "settled"]
Outcome = Literal["success", "invalid", "failed", "skipped"]

MSG_CREATED = "Voucher created successfully!"
MSG_UPDATED = "Voucher updated successfully!"
MSG_DISABLED = "Voucher disabled successfully"
MSG_ALREADY_DISABLED = "Voucher is already disabled"
MSG_EDIT_DISABLED = "Disabled vouchers cannot be edited"
MSG_NOT_CONFIRMED = "Disable was not confirmed"
MSG_INVALID = "Please fix the highlighted fields"


class OperationResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    action: Literal["create", "update", "disable"]
    outcome: Outcome
    states: list[OperationState]
    voucher: Voucher | None = None
    errors: dict[str, str] = Field(default_factory=dict)
    message: str | None = None
    error: CatalogError | None = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.outcome == "success"

    @property
    def state(self) -> OperationState:
        return self.states[-1]

    def apply_to(self, collection: Iterable[Voucher]) -> list[Voucher]:
        """Yeni liste döner: aynı id'li voucher değiştirilir, yoksa sona eklenir."""
        items = list(collection)
        if not self.ok or self.voucher is None:
            return items
        for i, existing in enumerate(items):
            if existing.id == self.voucher.id:
                items[i] = self.voucher
                return items
        items.append(self.voucher)
        return items


class VoucherManager:
    def __init__(self, gateway: VoucherGateway, clock: Clock, notifications: NotificationQueue | None = None):
        self.gateway = gateway
        self.clock = clock
        self.notifications = notifications if notifications is not None else NotificationQueue()

    def list_vouchers(self) -> list[Voucher]:
        return self.gateway.get_all()

    def get_voucher(self, voucher_id: str) -> Voucher:
        return self.gateway.get(voucher_id)

    def validate(
        self,
        data: Mapping[str, Any] | BaseModel,
        mode: str = MODE_CREATE,
        current_used_count: int | None = None,
    ) -> ValidationResult:
        return validate_voucher_input(
            data,
            mode,
            ValidationContext(current_used_count=current_used_count),
            now=self.clock.now(),
        )

    def _submit(
        self,
        action: str,
        states: list[OperationState],
        call: Callable[[], Voucher | None],
        success_message: str,
        fallback: Voucher | None = None,
    ) -> OperationResult:
        states.append("submitting")
        try:
            voucher = call()
        except CatalogError as e:
            states.append("settled")
            logger.warning("Voucher %s failed (%s): %s", action, e.category, e.message)
            self.notifications.error(e.message)
            return OperationResult(
                action=action, outcome="failed", states=states, voucher=fallback, message=e.message, error=e
            )
        states.append("settled")
        self.notifications.success(success_message)
        return OperationResult(
            action=action, outcome="success", states=states, voucher=voucher or fallback, message=success_message
        )

    def _rejected(self, action: str, states: list[OperationState], result: ValidationResult, voucher: Voucher | None = None) -> OperationResult:
        states.append("settled")
        logger.info("Voucher %s rejected by validation: %s", action, sorted(result.errors))
        return OperationResult(
            action=action, outcome="invalid", states=states, voucher=voucher, errors=result.errors, message=MSG_INVALID
        )

    def create(self, data: Mapping[str, Any] | BaseModel) -> OperationResult:
        """usedCount gönderilmez; sunucu 0 ile başlatır."""
        states: list[OperationState] = ["idle", "validating"]
        result = self.validate(data, MODE_CREATE)
        if not result.valid:
            return self._rejected("create", states, result)
        payload = result.payload
        return self._submit("create", states, lambda: self.gateway.create(payload), MSG_CREATED)

    def update(self, voucher: Voucher, data: Mapping[str, Any] | BaseModel) -> OperationResult:
        """Devre dışı voucher düzenlenemez: doğrulama da ağ çağrısı da yapılmaz."""
        if voucher.is_deleted:
            return OperationResult(
                action="update", outcome="skipped", states=["idle"], voucher=voucher, message=MSG_EDIT_DISABLED
            )
        states: list[OperationState] = ["idle", "validating"]
        result = self.validate(data, MODE_UPDATE, current_used_count=voucher.used_count)
        if not result.valid:
            return self._rejected("update", states, result, voucher)
        payload = result.payload
        return self._submit(
            "update", states, lambda: self.gateway.update(voucher.id, payload), MSG_UPDATED, fallback=voucher
        )

    def disable(self, voucher: Voucher, confirmed: bool = True) -> OperationResult:
        """Tekrar çağrılması güvenli: zaten devre dışıysa aynı durumda kalır, hata yok."""
        if not confirmed:
            return OperationResult(
                action="disable", outcome="skipped", states=["idle"], voucher=voucher, message=MSG_NOT_CONFIRMED
            )
        if voucher.is_deleted:
            return OperationResult(
                action="disable", outcome="skipped", states=["idle"], voucher=voucher, message=MSG_ALREADY_DISABLED
            )
        states: list[OperationState] = ["idle"]
        result = self._submit("disable", states, lambda: self.gateway.disable(voucher.id), MSG_DISABLED, fallback=voucher)
        if result.ok and result.voucher is not None:
            # Sunucu kopyası dönse de dönmese de yerelde silinmiş işaretlenir
            result.voucher = result.voucher.model_copy(update={"is_deleted": True})
        return result
