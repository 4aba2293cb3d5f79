"""
Group-by aggregation of contracts.

Contracts are folded into per-group totals, then a separate pure pass
derives per-group averages and ratios. Sums use correctly rounded
summation (math.fsum), so any ordering of the same records gives
identical totals.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType

from ..data.models import Contract, Project
from ..selection.dimensions import effective_agent
from ..utils.time import month_key, quarter_key, quarter_sort_key
from .ratios import finite_sum, percentage, safe_ratio

KeyFunction = Callable[[Contract], str]


@dataclass(frozen=True)
class GroupTotals:
    """Accumulated values of one group after the fold."""
    count: int = 0
    sum_premium: float = 0.0
    sum_monthly_premium: float = 0.0
    sum_commission_year1: float = 0.0
    sum_commission_recurring: float = 0.0
    products: frozenset = frozenset()
    companies: frozenset = frozenset()


EMPTY_TOTALS = GroupTotals()


@dataclass(frozen=True)
class GroupSummary:
    """Totals of one group with its derived averages and ratios."""
    key: str
    count: int
    sum_premium: float
    sum_monthly_premium: float
    sum_commission_year1: float
    sum_commission_recurring: float
    products: tuple[str, ...]
    companies: tuple[str, ...]
    product_count: int
    company_count: int
    average_premium: float
    average_commission: float
    commission_rate: float
    recurring_potential: float


class _GroupBuilder:
    """Mutable accumulator scoped to a single fold call."""

    __slots__ = ("premiums", "monthly", "year1", "recurring", "products", "companies")

    def __init__(self):
        self.premiums: list[float] = []
        self.monthly: list[float] = []
        self.year1: list[float] = []
        self.recurring: list[float] = []
        self.products: set[str] = set()
        self.companies: set[str] = set()

    def add(self, contract: Contract) -> None:
        self.premiums.append(contract.annual_premium)
        self.monthly.append(contract.monthly_premium)
        self.year1.append(contract.commission_year1)
        self.recurring.append(contract.commission_recurring)
        if contract.product:
            self.products.add(contract.product)
        if contract.company:
            self.companies.add(contract.company)

    def freeze(self) -> GroupTotals:
        return GroupTotals(
            count=len(self.premiums),
            sum_premium=finite_sum(self.premiums),
            sum_monthly_premium=finite_sum(self.monthly),
            sum_commission_year1=finite_sum(self.year1),
            sum_commission_recurring=finite_sum(self.recurring),
            products=frozenset(self.products),
            companies=frozenset(self.companies),
        )


def fold_groups(contracts: Iterable[Contract], key_fn: KeyFunction) -> Mapping[str, GroupTotals]:
    """
    Fold contracts into per-group totals.

    Args:
        contracts: Filtered contracts
        key_fn: Group key extractor

    Returns:
        Read-only mapping from group key to totals, in first-seen key order
    """
    builders: dict[str, _GroupBuilder] = {}
    for contract in contracts:
        key = key_fn(contract)
        if key not in builders:
            builders[key] = _GroupBuilder()
        builders[key].add(contract)

    return MappingProxyType({key: builder.freeze() for key, builder in builders.items()})


def total_of(contracts: Iterable[Contract]) -> GroupTotals:
    """Totals over every contract as a single group."""
    return fold_groups(contracts, lambda _contract: "*").get("*", EMPTY_TOTALS)


def summarize(key: str, totals: GroupTotals, recurring_multiplier: float = 10.0) -> GroupSummary:
    """Derive averages and ratios for one group."""
    return GroupSummary(
        key=key,
        count=totals.count,
        sum_premium=totals.sum_premium,
        sum_monthly_premium=totals.sum_monthly_premium,
        sum_commission_year1=totals.sum_commission_year1,
        sum_commission_recurring=totals.sum_commission_recurring,
        products=tuple(sorted(totals.products)),
        companies=tuple(sorted(totals.companies)),
        product_count=len(totals.products),
        company_count=len(totals.companies),
        average_premium=safe_ratio(totals.sum_premium, totals.count),
        average_commission=safe_ratio(totals.sum_commission_year1, totals.count),
        commission_rate=percentage(totals.sum_commission_year1, totals.sum_premium),
        recurring_potential=totals.sum_commission_recurring * recurring_multiplier,
    )


def summarize_groups(groups: Mapping[str, GroupTotals],
                     recurring_multiplier: float = 10.0) -> Mapping[str, GroupSummary]:
    """Map every group's totals to its summary, keeping key order."""
    return MappingProxyType({
        key: summarize(key, totals, recurring_multiplier) for key, totals in groups.items()
    })


def rank_groups(summaries: Mapping[str, GroupSummary], sort_key: str = "sum_premium",
                limit: int = 0) -> tuple[GroupSummary, ...]:
    """
    Order groups by a descending sort key for top-N views.

    The sort is stable, so ties keep first-seen order. A limit of 0 keeps
    every group.
    """
    ranked = sorted(summaries.values(), key=lambda s: getattr(s, sort_key), reverse=True)
    if limit > 0:
        ranked = ranked[:limit]
    return tuple(ranked)


def chronological(summaries: Mapping[str, GroupSummary],
                  sort_fn: Callable[[str], object] = str) -> tuple[GroupSummary, ...]:
    """Order time buckets from oldest to newest."""
    return tuple(summaries[key] for key in sorted(summaries, key=sort_fn))


# Group key extractors

def by_company(unspecified: str = "unspecified") -> KeyFunction:
    return lambda contract: contract.company or unspecified


def by_product(unspecified: str = "unspecified") -> KeyFunction:
    return lambda contract: contract.product or unspecified


def by_agent(project_index: Mapping[str, Project],
             unspecified: str = "unspecified") -> KeyFunction:
    return lambda contract: effective_agent(contract, project_index) or unspecified


def by_month(now: datetime) -> KeyFunction:
    """Calendar month of the contract; undated contracts fall in the month of ``now``."""
    return lambda contract: month_key(contract.created_at or now)


def by_quarter(now: datetime) -> KeyFunction:
    """Calendar quarter of the contract; undated contracts fall in the quarter of ``now``."""
    return lambda contract: quarter_key(contract.created_at or now)


def monthly_series(contracts: Iterable[Contract], now: datetime,
                   recurring_multiplier: float = 10.0) -> tuple[GroupSummary, ...]:
    """Month buckets in ascending ``YYYY-MM`` order."""
    groups = summarize_groups(fold_groups(contracts, by_month(now)), recurring_multiplier)
    return chronological(groups)


def quarterly_series(contracts: Iterable[Contract], now: datetime,
                     recurring_multiplier: float = 10.0) -> tuple[GroupSummary, ...]:
    """Quarter buckets in ascending (year, quarter) order."""
    groups = summarize_groups(fold_groups(contracts, by_quarter(now)), recurring_multiplier)
    return chronological(groups, quarter_sort_key)


def top_groups(contracts: Iterable[Contract], key_fn: KeyFunction,
               recurring_multiplier: float = 10.0, sort_key: str = "sum_premium",
               limit: int = 0) -> tuple[GroupSummary, ...]:
    """Fold, summarize and rank in one call."""
    groups = summarize_groups(fold_groups(contracts, key_fn), recurring_multiplier)
    return rank_groups(groups, sort_key=sort_key, limit=limit)

