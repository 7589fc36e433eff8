from core.domain.enums import STATUS_RANK, BillingMode, DeviationKind, PaymentMethod, SubOrderStatus
from core.domain.identifiers import (
    LOCAL_ID_PREFIX,
    format_order_number,
    format_sub_order_number,
    generate_id,
    generate_local_id,
    is_local_id,
)
from core.domain.movement import (
    FinancialMovement,
    MovementDraft,
    validate_movement_amounts,
    validate_movement_scope,
)
from core.domain.order import Order
from core.domain.snapshot import LedgerSnapshot
from core.domain.sub_order import SubOrder

__all__ = [
    "generate_id",
    "generate_local_id",
    "is_local_id",
    "format_order_number",
    "format_sub_order_number",
    "LOCAL_ID_PREFIX",
    "BillingMode",
    "SubOrderStatus",
    "PaymentMethod",
    "DeviationKind",
    "STATUS_RANK",
    "Order",
    "SubOrder",
    "FinancialMovement",
    "MovementDraft",
    "validate_movement_scope",
    "validate_movement_amounts",
    "LedgerSnapshot",
]
