"""Unit tests for LedgerReconcilerWorker

Tests cover:
- Worker initialization with configuration
- run_once execution, disabled mode and failures
- run_forever continuous execution
- Shutdown and cleanup
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime

from libs.result import Error, Return
from src.worker.ledger_reconciler import LedgerReconcilerWorker, exit_code, main, skipped_result
from src.app.use_cases.credits import ReconciliationResultDTO, LedgerDiscrepancyDTO


class StopLoop(Exception):
    pass


@pytest.fixture
def mock_session_factory():
    """Session factory returning an async-context-manager session"""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.fixture
def sample_discrepancy_result():
    return ReconciliationResultDTO(
        total_platforms_checked=3,
        discrepancies_found=1,
        discrepancies=[
            LedgerDiscrepancyDTO(
                platform_id="p1",
                platform_name="Netflix",
                recorded_balance=Decimal("1000.00"),
                replayed_balance=Decimal("985.50"),
                discrepancy=Decimal("14.50"),
            ),
        ],
        reconciliation_time=datetime.utcnow(),
        execution_time_ms=12,
    )


class TestLedgerReconcilerWorkerInit:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        """
        Given: No custom configuration provided
        When: Worker is initialized
        Then: Uses DB_URI from ApplicationConfig
        """
        # Arrange
        mock_app_config.DB_URI = "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.return_value = MagicMock()

        # Act
        worker = LedgerReconcilerWorker()

        # Assert
        assert worker.db_uri == "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.assert_called_once()

    @patch("src.worker.ledger_reconciler.create_async_engine")
    def test_session_factory_skips_engine(self, mock_create_engine, mock_session_factory):
        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)

        assert worker.async_session_factory is mock_session_factory
        assert worker.engine is None
        mock_create_engine.assert_not_called()


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerRunOnce:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    async def test_run_once_returns_discrepancies(
        self, mock_use_case_class, mock_app_config, mock_session_factory, sample_discrepancy_result
    ):
        """
        Given: Reconciliation is enabled and finds one discrepancy
        When: run_once is called
        Then: The use case result is returned
        """
        # Arrange
        mock_app_config.RECONCILIATION_ENABLED = True
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(return_value=Return.ok(sample_discrepancy_result))
        mock_use_case_class.return_value = mock_use_case

        # Act
        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)
        result = await worker.run_once()

        # Assert
        assert result.discrepancies_found == 1
        assert result.discrepancies[0].platform_id == "p1"
        mock_use_case.execute.assert_called_once()
        mock_session_factory.assert_called_once()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    async def test_run_once_skips_when_disabled(self, mock_app_config, mock_session_factory):
        mock_app_config.RECONCILIATION_ENABLED = False

        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)
        result = await worker.run_once()

        assert result.total_platforms_checked == 0
        assert result.execution_time_ms == 0
        mock_session_factory.assert_not_called()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    async def test_run_once_raises_on_use_case_error(
        self, mock_use_case_class, mock_app_config, mock_session_factory
    ):
        mock_app_config.RECONCILIATION_ENABLED = True
        mock_use_case = MagicMock()
        mock_use_case.execute = AsyncMock(
            return_value=Return.err(Error(code="RECONCILIATION_FAILED", message="Database connection failed"))
        )
        mock_use_case_class.return_value = mock_use_case

        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)
        with pytest.raises(RuntimeError, match="Reconciliation failed"):
            await worker.run_once()


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerRunForever:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.asyncio.sleep")
    async def test_run_forever_continues_after_failure(
        self, mock_sleep, mock_app_config, mock_session_factory
    ):
        """
        Given: run_once fails on the first cycle
        When: run_forever is running
        Then: The error is logged and the next cycle still runs
        """
        # Arrange
        mock_app_config.RECONCILIATION_ENABLED = True
        mock_sleep.side_effect = [None, StopLoop()]

        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)
        worker.run_once = AsyncMock(side_effect=[RuntimeError("boom"), MagicMock()])

        # Act
        with pytest.raises(StopLoop):
            await worker.run_forever(interval_seconds=60)

        # Assert
        assert worker.run_once.call_count == 2
        mock_sleep.assert_called_with(60)

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.asyncio.sleep")
    async def test_run_forever_uses_configured_interval(
        self, mock_sleep, mock_app_config, mock_session_factory
    ):
        mock_app_config.RECONCILIATION_ENABLED = False
        mock_app_config.RECONCILIATION_INTERVAL_SECONDS = 3600
        mock_sleep.side_effect = StopLoop()

        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)
        with pytest.raises(StopLoop):
            await worker.run_forever()

        mock_sleep.assert_called_once_with(3600)


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerShutdown:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "postgresql+asyncpg://test@localhost/db"
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine

        worker = LedgerReconcilerWorker()
        await worker.shutdown()

        mock_engine.dispose.assert_called_once()

    async def test_shutdown_without_own_engine(self, mock_session_factory):
        worker = LedgerReconcilerWorker(session_factory=mock_session_factory)

        await worker.shutdown()


@pytest.mark.asyncio
class TestLedgerReconcilerMain:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.LedgerReconcilerWorker")
    async def test_once_exits_non_zero_on_discrepancies(
        self, mock_worker_class, mock_app_config, sample_discrepancy_result
    ):
        """
        Given: A reconciliation run that finds a discrepancy
        When: The worker is started with --once
        Then: main returns exit status 1 and the worker is shut down
        """
        mock_app_config.LOG_LEVEL = "INFO"
        mock_worker = MagicMock()
        mock_worker.run_once = AsyncMock(return_value=sample_discrepancy_result)
        mock_worker.shutdown = AsyncMock()
        mock_worker_class.return_value = mock_worker

        status = await main(["--once"])

        assert status == 1
        mock_worker.shutdown.assert_called_once()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.LedgerReconcilerWorker")
    async def test_interval_runs_forever(self, mock_worker_class, mock_app_config):
        mock_app_config.LOG_LEVEL = "INFO"
        mock_worker = MagicMock()
        mock_worker.run_forever = AsyncMock(side_effect=KeyboardInterrupt())
        mock_worker.shutdown = AsyncMock()
        mock_worker_class.return_value = mock_worker

        status = await main(["--interval", "120"])

        assert status == 0
        mock_worker.run_forever.assert_called_once_with(interval_seconds=120)
        mock_worker.shutdown.assert_called_once()


def test_exit_code_zero_when_balanced():
    assert exit_code(skipped_result()) == 0
