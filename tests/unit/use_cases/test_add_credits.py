"""Unit tests for AddCredits use case

Tests cover:
- Successful top-up with balance snapshots
- Argument validation
- Unknown and inactive platforms
- Rollback on store failures
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError

from src.app.use_cases.credits import AddCredits, AddCreditsCommandDTO
from src.domain.credit_movement import MovementType
from src.domain.platform import Platform


@pytest.fixture
def mock_platform_repo():
    """Mock platform repository"""
    repo = MagicMock()
    repo.update_balance = AsyncMock()
    return repo


@pytest.fixture
def mock_movement_repo():
    """Mock credit movement repository returning the movement it was given"""
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda movement: movement)
    return repo


@pytest.fixture
def add_use_case(mock_uow, mock_platform_repo, mock_movement_repo):
    return AddCredits(
        uow=mock_uow,
        platform_repo=mock_platform_repo,
        movement_repo=mock_movement_repo,
    )


@pytest.fixture
def sample_platform():
    return Platform(
        id="platform_1",
        name="Netflix Reseller",
        credit_balance=Decimal("0.00"),
        low_balance_threshold=Decimal("100.00"),
    )


@pytest.mark.asyncio
class TestAddCreditsSuccess:

    async def test_add_credits_to_new_platform(
        self, add_use_case, mock_platform_repo, mock_movement_repo, mock_uow, sample_platform
    ):
        """
        Given: Active platform with balance 0
        When: 500 credits are added
        Then: Balance becomes 500 and a credit_added movement 0 -> 500 is recorded
        """
        # Arrange
        mock_platform_repo.get_by_id = AsyncMock(return_value=sample_platform)
        command = AddCreditsCommandDTO(
            platform_id="platform_1",
            amount=Decimal("500.00"),
            description="Initial top-up",
            reference_id="po_1",
            created_by="admin",
        )

        # Act
        result = await add_use_case.execute(command)

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.movement_type == "credit_added"
        assert response.previous_balance == Decimal("0.00")
        assert response.new_balance == Decimal("500.00")
        assert response.amount == Decimal("500.00")
        assert response.reference_id == "po_1"

        mock_platform_repo.get_by_id.assert_called_once_with("platform_1", for_update=True)
        mock_platform_repo.update_balance.assert_called_once_with("platform_1", Decimal("500.00"))

        movement = mock_movement_repo.create.call_args[0][0]
        assert movement.movement_type == MovementType.CREDIT_ADDED
        assert movement.description == "manual: Initial top-up"
        assert movement.created_by == "admin"

        mock_uow.commit.assert_called_once()
        mock_uow.rollback.assert_not_called()

    async def test_adjustment_reference_records_adjustment(
        self, add_use_case, mock_platform_repo, mock_movement_repo, sample_platform
    ):
        mock_platform_repo.get_by_id = AsyncMock(return_value=sample_platform)
        command = AddCreditsCommandDTO(
            platform_id="platform_1",
            amount=Decimal("20.00"),
            reference_type="adjustment",
        )

        result = await add_use_case.execute(command)

        assert result.is_ok()
        assert result.value.movement_type == "adjustment"
        assert mock_movement_repo.create.call_args[0][0].movement_type == MovementType.ADJUSTMENT


@pytest.mark.asyncio
class TestAddCreditsValidation:

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10.00")])
    async def test_non_positive_amount_rejected(
        self, add_use_case, mock_platform_repo, mock_uow, amount
    ):
        """
        Given: amount <= 0
        Then: INVALID_ARGUMENT, store never touched
        """
        mock_platform_repo.get_by_id = AsyncMock()

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="platform_1", amount=amount)
        )

        assert result.is_err()
        assert result.error.code == "INVALID_ARGUMENT"
        mock_platform_repo.get_by_id.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_empty_platform_id_rejected(self, add_use_case):
        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="", amount=Decimal("10"))
        )

        assert result.is_err()
        assert result.error.code == "INVALID_ARGUMENT"

    @pytest.mark.parametrize("amount", [Decimal("0.004"), Decimal("10.005"), Decimal("Infinity")])
    async def test_sub_cent_amount_rejected(self, add_use_case, mock_platform_repo, mock_uow, amount):
        """
        Given: An amount finer than the two decimal places the store keeps
        When: Credits are added
        Then: INVALID_ARGUMENT, nothing is locked or written
        """
        mock_platform_repo.get_by_id = AsyncMock()

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="platform_1", amount=amount)
        )

        assert result.is_err()
        assert result.error.code == "INVALID_ARGUMENT"
        mock_platform_repo.get_by_id.assert_not_called()
        mock_platform_repo.update_balance.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_trailing_zeros_are_whole_cents(
        self, add_use_case, mock_platform_repo, sample_platform
    ):
        mock_platform_repo.get_by_id = AsyncMock(return_value=sample_platform)

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="platform_1", amount=Decimal("12.500"))
        )

        assert result.is_ok()
        assert result.value.new_balance == Decimal("12.50")

    async def test_unknown_platform(self, add_use_case, mock_platform_repo, mock_movement_repo, mock_uow):
        mock_platform_repo.get_by_id = AsyncMock(return_value=None)

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="missing", amount=Decimal("10"))
        )

        assert result.is_err()
        assert result.error.code == "PLATFORM_NOT_FOUND"
        mock_movement_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_inactive_platform(
        self, add_use_case, mock_platform_repo, mock_movement_repo, mock_uow, sample_platform
    ):
        sample_platform.is_active = False
        mock_platform_repo.get_by_id = AsyncMock(return_value=sample_platform)

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="platform_1", amount=Decimal("10"))
        )

        assert result.is_err()
        assert result.error.code == "PLATFORM_INACTIVE"
        mock_platform_repo.update_balance.assert_not_called()
        mock_movement_repo.create.assert_not_called()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestAddCreditsStoreFailure:

    async def test_movement_insert_failure_rolls_back(
        self, add_use_case, mock_platform_repo, mock_movement_repo, mock_uow, sample_platform
    ):
        """
        Given: Movement insert raises after the balance write
        Then: Transaction rolled back, ADD_CREDITS_FAILED returned
        """
        mock_platform_repo.get_by_id = AsyncMock(return_value=sample_platform)
        mock_movement_repo.create = AsyncMock(side_effect=ValueError("constraint violated"))

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="platform_1", amount=Decimal("10"))
        )

        assert result.is_err()
        assert result.error.code == "ADD_CREDITS_FAILED"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_lock_timeout_is_transient(
        self, add_use_case, mock_platform_repo, mock_uow
    ):
        mock_platform_repo.get_by_id = AsyncMock(
            side_effect=OperationalError("SELECT ... FOR UPDATE", {}, Exception("lock timeout"))
        )

        result = await add_use_case.execute(
            AddCreditsCommandDTO(platform_id="platform_1", amount=Decimal("10"))
        )

        assert result.is_err()
        assert result.error.code == "TRANSIENT_STORE_FAILURE"
        mock_uow.rollback.assert_called_once()
