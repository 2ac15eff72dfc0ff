from .base import BaseModel, generate_uuid
from .platform import Platform, BalanceStatus
from .credit_movement import CreditMovement, MovementType, DEBIT_MOVEMENT_TYPES
from .stock_sale import StockSale, PaymentType, PaymentStatus
from .digital_product import DigitalProduct

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Platform",
    "BalanceStatus",
    "CreditMovement",
    "MovementType",
    "DEBIT_MOVEMENT_TYPES",
    "StockSale",
    "PaymentType",
    "PaymentStatus",
    "DigitalProduct",
]
