"""Credit API Routes

FastAPI routes for platform credit ledger operations.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.schemas.credit_request import (
    AddCreditsRequestSchema,
    AdjustBalanceRequestSchema,
    DeductCreditsRequestSchema,
)
from src.app.use_cases.credits import (
    AddCredits,
    AdjustBalance,
    DeductCredits,
    GetBalance,
    ListCreditMovements,
    ListLowBalancePlatforms,
    AddCreditsCommandDTO,
    AdjustBalanceCommandDTO,
    DeductCreditsCommandDTO,
    CreditOperationResponseDTO,
    BalanceResponseDTO,
    MovementFiltersDTO,
    ListCreditMovementsResponseDTO,
    LowBalancePlatformsResponseDTO,
)
from src.adapter.repositories.platform_repository import SqlAlchemyPlatformRepository
from src.adapter.repositories.credit_movement_repository import SqlAlchemyCreditMovementRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.credit_movement import MovementType
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/platforms", tags=["Credits"])

ERROR_RESPONSES = {
    400: {"description": "Invalid argument"},
    402: {
        "description": "Insufficient credits",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INSUFFICIENT_CREDIT",
                        "message": "Insufficient credit balance. Available: 50.00, Required: 100.00"
                    }
                }
            }
        }
    },
    404: {"description": "Platform not found"},
    409: {"description": "Platform is not active"},
    503: {"description": "Store temporarily unavailable, retry with backoff"},
}


def _mutation_use_cases(session: AsyncSession):
    uow = SqlAlchemyUnitOfWork(session)
    platform_repo = SqlAlchemyPlatformRepository(session)
    movement_repo = SqlAlchemyCreditMovementRepository(session)
    return (
        AddCredits(uow, platform_repo, movement_repo),
        DeductCredits(uow, platform_repo, movement_repo),
    )


@router.get(
    "/low-balance",
    response_model=LowBalancePlatformsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_low_balance_platforms(session: AsyncSession = Depends(get_session)):
    """
    List active platforms at or below their own low-balance threshold,
    lowest balance first.
    """
    use_case = ListLowBalancePlatforms(SqlAlchemyPlatformRepository(session))
    result = await use_case.execute()

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{platform_id}/credits/add",
    response_model=CreditOperationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def add_credits(
    platform_id: str,
    request: AddCreditsRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Add credits to a platform balance.

    **Returns:**
    - 200: Credits added, movement recorded
    - 404: Platform not found
    - 409: Platform is not active
    """
    add, _ = _mutation_use_cases(session)

    command = AddCreditsCommandDTO(
        platform_id=platform_id,
        amount=request.amount,
        description=request.description,
        reference_type=request.reference_type,
        reference_id=request.reference_id,
        created_by=request.created_by,
    )

    result = await add.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{platform_id}/credits/deduct",
    response_model=CreditOperationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def deduct_credits(
    platform_id: str,
    request: DeductCreditsRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Deduct credits from a platform balance.

    Use reference_type 'sale' when the deduction pays for a sale.

    **Returns:**
    - 200: Credits deducted; `is_low_balance` flags a platform needing top-up
    - 402: Balance would go negative and allow_negative is false
    - 404: Platform not found
    - 409: Platform is not active
    """
    _, deduct = _mutation_use_cases(session)

    command = DeductCreditsCommandDTO(
        platform_id=platform_id,
        amount=request.amount,
        description=request.description,
        reference_type=request.reference_type,
        reference_id=request.reference_id,
        created_by=request.created_by,
        allow_negative=request.allow_negative,
    )

    result = await deduct.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{platform_id}/credits/adjust",
    response_model=CreditOperationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
)
async def adjust_balance(
    platform_id: str,
    request: AdjustBalanceRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Correct a platform balance by a signed delta.

    Negative adjustments may take the balance below zero.
    """
    add, deduct = _mutation_use_cases(session)

    command = AdjustBalanceCommandDTO(
        platform_id=platform_id,
        delta=request.delta,
        reason=request.reason,
        created_by=request.created_by,
    )

    result = await AdjustBalance(add, deduct).execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{platform_id}/credits/balance",
    response_model=BalanceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Platform not found"}},
)
async def get_balance(platform_id: str, session: AsyncSession = Depends(get_session)):
    """Current balance and low-balance classification of a platform."""
    use_case = GetBalance(SqlAlchemyPlatformRepository(session))
    result = await use_case.execute(platform_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{platform_id}/credits/movements",
    response_model=ListCreditMovementsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_credit_movements(
    platform_id: str,
    movement_type: Optional[MovementType] = Query(default=None),
    reference_id: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    limit: int = Query(default=ApplicationConfig.MOVEMENT_PAGE_SIZE, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """
    Credit movement history of a platform, most recent first.

    **Query parameters:**
    - `movement_type`: credit_added, credit_deducted, sale_deduction or adjustment
    - `reference_id`: Only movements for this reference
    - `start_date` / `end_date`: Inclusive created_at bounds
    - `limit` / `offset`: Pagination
    """
    filters = MovementFiltersDTO(
        movement_type=movement_type,
        reference_id=reference_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )

    use_case = ListCreditMovements(SqlAlchemyCreditMovementRepository(session))
    result = await use_case.execute(platform_id, filters)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value
