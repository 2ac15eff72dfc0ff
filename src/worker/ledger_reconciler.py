"""Ledger Reconciliation Background Worker

Replays every platform's credit movements and compares the replayed sum with
the recorded credit balance. Discrepancies are logged, never corrected.

Run it from cron with --once (exit status 1 when a platform is out of balance),
or as a long-lived process that checks on a fixed interval.
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.platform_repository import SqlAlchemyPlatformRepository
from src.adapter.repositories.credit_movement_repository import SqlAlchemyCreditMovementRepository
from src.app.use_cases.credits import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def skipped_result() -> ReconciliationResultDTO:
    return ReconciliationResultDTO(
        total_platforms_checked=0,
        discrepancies_found=0,
        discrepancies=[],
        reconciliation_time=datetime.utcnow(),
        execution_time_ms=0,
    )


def exit_code(result: ReconciliationResultDTO) -> int:
    return 1 if result.discrepancies_found else 0


class LedgerReconcilerWorker:
    """
    Periodic platform ledger reconciliation

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(self, db_uri: Optional[str] = None, session_factory=None):
        """
        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Existing AsyncSession factory; no engine is created
                and shutdown leaves the caller's engine alone
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = None

        if session_factory is None:
            self.engine = create_async_engine(self.db_uri, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.async_session_factory = session_factory

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Reconcile every platform in a single session

        Raises:
            RuntimeError: The reconciliation use case returned an error
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Platform ledger reconciliation disabled by config")
            return skipped_result()

        async with self.async_session_factory() as session:
            result = await ReconcileLedger(
                platform_repo=SqlAlchemyPlatformRepository(session),
                movement_repo=SqlAlchemyCreditMovementRepository(session),
            ).execute()

        if result.is_err():
            raise RuntimeError(f"Reconciliation failed: {result.error.code} - {result.error.message}")

        self._report(result.value)
        return result.value

    @staticmethod
    def _report(result: ReconciliationResultDTO) -> None:
        if not result.discrepancies_found:
            logger.info(
                f"Platform ledgers balanced ({result.total_platforms_checked} platforms, "
                f"{result.execution_time_ms}ms)"
            )
            return

        logger.error(
            f"{result.discrepancies_found} of {result.total_platforms_checked} platform "
            f"balances disagree with their movement history"
        )
        for discrepancy in result.discrepancies:
            logger.error(
                f"Platform {discrepancy.platform_name} ({discrepancy.platform_id}): "
                f"recorded {discrepancy.recorded_balance}, replayed {discrepancy.replayed_balance}, "
                f"off by {discrepancy.discrepancy}"
            )

    async def run_forever(self, interval_seconds: Optional[int] = None):
        interval_seconds = interval_seconds or ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS
        logger.info(f"Platform ledger reconciliation every {interval_seconds}s")

        while True:
            try:
                await self.run_once()
            except Exception as e:
                # Keep looping, the next cycle retries
                logger.error(f"Platform ledger reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("Ledger reconciler stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Platform credit ledger reconciliation")
    parser.add_argument("--once", action="store_true", help="Reconcile once and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between runs (default: RECONCILIATION_INTERVAL_SECONDS)",
    )
    return parser


async def main(argv=None) -> int:
    """
    python -m src.worker.ledger_reconciler --once
    python -m src.worker.ledger_reconciler --interval 3600
    """
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)
    worker = LedgerReconcilerWorker()

    try:
        if args.once:
            return exit_code(await worker.run_once())
        await worker.run_forever(interval_seconds=args.interval)
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Ledger reconciler interrupted")
    finally:
        await worker.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
