from .add_credits import AddCredits
from .deduct_credits import DeductCredits
from .adjust_balance import AdjustBalance
from .get_balance import GetBalance
from .list_credit_movements import ListCreditMovements
from .list_low_balance_platforms import ListLowBalancePlatforms
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    AddCreditsCommandDTO,
    DeductCreditsCommandDTO,
    AdjustBalanceCommandDTO,
    CreditOperationResponseDTO,
    BalanceResponseDTO,
    MovementFiltersDTO,
    CreditMovementDTO,
    ListCreditMovementsResponseDTO,
    LowBalancePlatformDTO,
    LowBalancePlatformsResponseDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "AddCredits",
    "DeductCredits",
    "AdjustBalance",
    "GetBalance",
    "ListCreditMovements",
    "ListLowBalancePlatforms",
    "ReconcileLedger",
    "AddCreditsCommandDTO",
    "DeductCreditsCommandDTO",
    "AdjustBalanceCommandDTO",
    "CreditOperationResponseDTO",
    "BalanceResponseDTO",
    "MovementFiltersDTO",
    "CreditMovementDTO",
    "ListCreditMovementsResponseDTO",
    "LowBalancePlatformDTO",
    "LowBalancePlatformsResponseDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
]
