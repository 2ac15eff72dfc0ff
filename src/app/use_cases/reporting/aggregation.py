"""Pure aggregation helpers for the financial reports.

Each sales grouping dimension is a function from a sale to (group id, group
name); one aggregation pass works for every dimension. Any ratio with a zero
denominator is 0.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional, Tuple

from src.app.repositories.report_repository import SaleFact
from src.domain.credit_movement import CreditMovement, MovementType, DEBIT_MOVEMENT_TYPES
from src.domain.stock_sale import PaymentStatus, PaymentType
from .dtos import GroupBy

ZERO = Decimal("0")
HUNDRED = Decimal("100")

GroupKey = Tuple[Optional[str], Optional[str]]


def safe_ratio(numerator, denominator) -> Decimal:
    if not denominator:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def percentage(numerator, denominator) -> Decimal:
    return safe_ratio(numerator, denominator) * HUNDRED


def _earliest(current: Optional[datetime], candidate: datetime) -> datetime:
    return candidate if current is None or candidate < current else current


def _latest(current: Optional[datetime], candidate: datetime) -> datetime:
    return candidate if current is None or candidate > current else current


@dataclass
class SalesAggregate:
    total_sales: int = 0
    total_quantity: int = 0
    total_revenue: Decimal = ZERO
    total_cost: Decimal = ZERO
    total_profit: Decimal = ZERO
    buying_price_sum: Decimal = ZERO
    selling_price_sum: Decimal = ZERO
    recurring_sales: int = 0
    one_time_sales: int = 0
    paid_sales: int = 0
    pending_sales: int = 0
    first_sale_date: Optional[datetime] = None
    last_sale_date: Optional[datetime] = None

    def add(self, sale: SaleFact) -> None:
        self.total_sales += 1
        self.total_quantity += sale.quantity
        self.total_revenue += sale.total_price
        self.total_cost += sale.platform_cost
        self.total_profit += sale.profit
        self.buying_price_sum += sale.platform_buying_price
        self.selling_price_sum += sale.unit_price

        if sale.payment_type == PaymentType.RECURRING.value:
            self.recurring_sales += 1
        elif sale.payment_type == PaymentType.ONE_TIME.value:
            self.one_time_sales += 1

        if sale.payment_status == PaymentStatus.PAID.value:
            self.paid_sales += 1
        elif sale.payment_status == PaymentStatus.PENDING.value:
            self.pending_sales += 1

        self.first_sale_date = _earliest(self.first_sale_date, sale.sale_date)
        self.last_sale_date = _latest(self.last_sale_date, sale.sale_date)

    @property
    def average_profit_per_sale(self) -> Decimal:
        return safe_ratio(self.total_profit, self.total_sales)

    @property
    def average_buying_price(self) -> Decimal:
        return safe_ratio(self.buying_price_sum, self.total_sales)

    @property
    def average_selling_price(self) -> Decimal:
        return safe_ratio(self.selling_price_sum, self.total_sales)

    @property
    def profit_margin_percentage(self) -> Decimal:
        return percentage(self.total_profit, self.total_revenue)

    @property
    def roi(self) -> Decimal:
        return percentage(self.total_profit, self.total_cost)


@dataclass
class MovementAggregate:
    total_credits_added: Decimal = ZERO
    total_credits_used: Decimal = ZERO
    credit_add_transactions: int = 0
    credit_use_transactions: int = 0
    sales_transactions: int = 0
    adjustment_transactions: int = 0
    net_adjustments: Decimal = ZERO
    first_transaction_date: Optional[datetime] = None
    last_transaction_date: Optional[datetime] = None

    def add(self, movement: CreditMovement) -> None:
        if movement.movement_type == MovementType.CREDIT_ADDED:
            self.total_credits_added += movement.amount
            self.credit_add_transactions += 1
        elif movement.movement_type in DEBIT_MOVEMENT_TYPES:
            self.total_credits_used += movement.amount
            self.credit_use_transactions += 1
            if movement.movement_type == MovementType.SALE_DEDUCTION:
                self.sales_transactions += 1
        elif movement.movement_type == MovementType.ADJUSTMENT:
            self.adjustment_transactions += 1
            self.net_adjustments += movement.signed_amount

        self.first_transaction_date = _earliest(self.first_transaction_date, movement.created_at)
        self.last_transaction_date = _latest(self.last_transaction_date, movement.created_at)

    @property
    def net_credit_flow(self) -> Decimal:
        return self.total_credits_added - self.total_credits_used

    @property
    def average_credit_addition(self) -> Decimal:
        return safe_ratio(self.total_credits_added, self.credit_add_transactions)

    @property
    def average_credit_usage(self) -> Decimal:
        return safe_ratio(self.total_credits_used, self.credit_use_transactions)

    @property
    def utilization_rate(self) -> Decimal:
        return percentage(self.total_credits_used, self.total_credits_added)

    def balance_to_usage_ratio(self, current_balance: Decimal) -> Decimal:
        return safe_ratio(current_balance, self.total_credits_used)


def _by_platform(sale: SaleFact) -> GroupKey:
    return sale.platform_id, sale.platform_name


def _by_product(sale: SaleFact) -> GroupKey:
    return sale.product_id, sale.product_name


def _by_category(sale: SaleFact) -> GroupKey:
    return sale.category, sale.category


def _by_month(sale: SaleFact) -> GroupKey:
    month = sale.sale_date.strftime("%Y-%m")
    return f"{month}-01", month


def _by_total(sale: SaleFact) -> GroupKey:
    return "all", "All Sales"


GROUP_KEYS: Dict[GroupBy, Callable[[SaleFact], GroupKey]] = {
    GroupBy.PLATFORM: _by_platform,
    GroupBy.PRODUCT: _by_product,
    GroupBy.CATEGORY: _by_category,
    GroupBy.MONTH: _by_month,
    GroupBy.TOTAL: _by_total,
}


def aggregate_sales(
    sales: Iterable[SaleFact],
    key_fn: Callable[[SaleFact], GroupKey],
) -> Dict[GroupKey, SalesAggregate]:
    groups: Dict[GroupKey, SalesAggregate] = {}
    for sale in sales:
        groups.setdefault(key_fn(sale), SalesAggregate()).add(sale)
    return groups


def aggregate_movements(movements: Iterable[CreditMovement]) -> Dict[str, MovementAggregate]:
    """Aggregate movements per platform id"""
    aggregates: Dict[str, MovementAggregate] = {}
    for movement in movements:
        aggregates.setdefault(movement.platform_id, MovementAggregate()).add(movement)
    return aggregates
