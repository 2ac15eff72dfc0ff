"""ReconcileLedger Use Case

Checks the balance invariant for every platform: the recorded credit_balance
must equal the replayed sum of the platform's signed movements, starting from 0.
Read-only; discrepancies are reported, never corrected.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Dict, List
from libs.result import Result, Return
from src.app.errors import error_from_exception
from src.app.repositories.platform_repository import PlatformRepository
from src.app.repositories.credit_movement_repository import CreditMovementRepository
from src.domain.platform import Platform
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)

RECONCILIATION_FAILED = "RECONCILIATION_FAILED"


def find_discrepancies(
    platforms: List[Platform], replayed_by_platform: Dict[str, Decimal]
) -> List[LedgerDiscrepancyDTO]:
    """
    Compare recorded balances with replayed movement sums

    A platform without movements replays to 0. Sums for ids with no platform
    row are ignored.
    """
    discrepancies = []
    for platform in platforms:
        replayed = replayed_by_platform.get(platform.id, Decimal("0"))
        if platform.credit_balance == replayed:
            continue
        discrepancies.append(
            LedgerDiscrepancyDTO(
                platform_id=platform.id,
                platform_name=platform.name,
                recorded_balance=platform.credit_balance,
                replayed_balance=replayed,
                discrepancy=platform.credit_balance - replayed,
            )
        )
    return discrepancies


class ReconcileLedger:
    """
    Use Case: Replay the movement log against recorded platform balances

    Two reads regardless of platform count: all platforms, then one grouped
    signed sum over all movements.
    """

    def __init__(
        self,
        platform_repo: PlatformRepository,
        movement_repo: CreditMovementRepository,
    ):
        self.platform_repo = platform_repo
        self.movement_repo = movement_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        started = time.monotonic()
        reconciliation_time = datetime.utcnow()

        try:
            platforms = await self.platform_repo.get_all()
            replayed_by_platform = await self.movement_repo.get_signed_sums_by_platform()
        except Exception as e:
            logger.error(f"Platform ledger reconciliation failed: {e}")
            return Return.err(
                error_from_exception(e, RECONCILIATION_FAILED, "Failed to reconcile platform credit ledger")
            )

        discrepancies = find_discrepancies(platforms, replayed_by_platform)
        execution_time_ms = int((time.monotonic() - started) * 1000)

        for d in discrepancies:
            logger.warning(
                f"Platform {d.platform_id} out of balance: "
                f"recorded {d.recorded_balance} vs replayed {d.replayed_balance}"
            )

        return Return.ok(
            ReconciliationResultDTO(
                total_platforms_checked=len(platforms),
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )
        )
