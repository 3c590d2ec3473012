"""
In-memory stages of the coupon catalog: filter, sort and paginate a list of
coupons that has already been joined with store data.

Every stage is a pure function returning a new list; the input is never
mutated.
"""

import math
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional, Sequence, TypeVar

from app.api.coupons.discounts import extract_percent, is_free_shipping
from app.api.coupons.schemas import (
    CatalogTab,
    CouponCatalogFilter,
    CouponType,
    CouponWithStore,
    SortPolicy,
)

T = TypeVar('T')

PER_PAGE_OPTIONS = (5, 10, 20, 50)
ALL_PER_PAGE = 'all'

Predicate = Callable[[CouponWithStore], bool]


class Page(NamedTuple):
    items: list
    page: int
    total_pages: int


def _is_type(coupon_type: CouponType) -> Predicate:
    return lambda coupon: coupon.coupon_type == coupon_type


def _in_categories(category_ids: Sequence[int]) -> Predicate:
    wanted = set(category_ids)

    def predicate(coupon: CouponWithStore) -> bool:
        if not coupon.store:
            return False
        return bool(wanted.intersection(coupon.store.categories))

    return predicate


def build_predicates(criteria: CouponCatalogFilter) -> List[Predicate]:
    predicates: List[Predicate] = []
    if criteria.tab == CatalogTab.PROMO:
        predicates.append(_is_type(CouponType.COUPON))
    elif criteria.tab == CatalogTab.DEAL:
        predicates.append(_is_type(CouponType.DEAL))
    if criteria.categories:
        predicates.append(_in_categories(criteria.categories))
    if criteria.verified:
        predicates.append(lambda coupon: coupon.verified)
    # codes_only and deals_only together match nothing
    if criteria.codes_only:
        predicates.append(_is_type(CouponType.COUPON))
    if criteria.deals_only:
        predicates.append(_is_type(CouponType.DEAL))
    if criteria.free_shipping:
        predicates.append(lambda coupon: is_free_shipping(coupon.discount))
    return predicates


def filter_coupons(
    coupons: Sequence[CouponWithStore], criteria: CouponCatalogFilter
) -> List[CouponWithStore]:
    predicates = build_predicates(criteria)
    return [c for c in coupons if all(p(c) for p in predicates)]


def _created_at(coupon: CouponWithStore) -> datetime:
    return coupon.created_at or datetime(1970, 1, 1)


def sort_coupons(
    coupons: Sequence[CouponWithStore], policy: SortPolicy
) -> List[CouponWithStore]:
    """Stable sort; `relevance` keeps the upstream order."""
    if policy == SortPolicy.NEWEST:
        return sorted(coupons, key=_created_at, reverse=True)
    if policy == SortPolicy.DISCOUNT_DESC:
        return sorted(coupons, key=lambda c: extract_percent(c.discount), reverse=True)
    if policy == SortPolicy.DISCOUNT_ASC:
        return sorted(coupons, key=lambda c: extract_percent(c.discount))
    if policy == SortPolicy.MOST_USED:
        return sorted(coupons, key=lambda c: c.uses or 0, reverse=True)
    return list(coupons)


def parse_per_page(value: str) -> Optional[int]:
    """Translate the per-page query value; None means every item on one page."""
    if value == ALL_PER_PAGE:
        return None
    per_page = int(value)
    if per_page not in PER_PAGE_OPTIONS:
        raise ValueError(f'per_page must be one of {PER_PAGE_OPTIONS} or "all"')
    return per_page


def paginate(items: Sequence[T], page: int, per_page: Optional[int]) -> Page:
    """
    Slice one page out of `items`.

    `page` is clamped into [1, total_pages], so an out of range request
    returns the nearest valid page. There is always at least one page.
    """
    if per_page is None:
        return Page(items=list(items), page=1, total_pages=1)
    if per_page < 1:
        raise ValueError('per_page must be a positive integer')

    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return Page(items=list(items[start : start + per_page]), page=page, total_pages=total_pages)
