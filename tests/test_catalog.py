import itertools
from datetime import datetime, timedelta

import pytest

from app.api.coupons import catalog
from app.api.coupons.schemas import (
    CatalogTab,
    CouponCatalogFilter,
    CouponWithStore,
    SortPolicy,
    StoreProjection,
)

T1 = datetime(2024, 1, 1, 12, 0)


def make_coupon(id: int, categories=None, with_store: bool = True, **kwargs):
    kwargs.setdefault('title', f'Coupon {id}')
    kwargs.setdefault('coupon_type', 'coupon')
    kwargs.setdefault('status', 'active')
    kwargs.setdefault('coupon_code', 'NO_CODE' if kwargs['coupon_type'] == 'deal' else 'CODE')
    kwargs.setdefault('created_at', T1 + timedelta(minutes=id))
    store = None
    if with_store:
        store = StoreProjection(
            id=100 + id,
            name=f'Store {id}',
            slug=f'store-{id}',
            categories=categories or [],
        )
    return CouponWithStore(id=id, store_id=100 + id, store=store, **kwargs)


@pytest.fixture
def coupons():
    return [
        make_coupon(1, categories=[1], discount='50%', verified=True, uses=3),
        make_coupon(2, coupon_type='deal', discount='Free Shipping', categories=[2]),
        make_coupon(3, discount='10%', categories=[1, 2], uses=7),
        make_coupon(4, coupon_type='deal', discount='$20', verified=True, uses=1),
        make_coupon(5, discount='free shipping over $50', with_store=False),
        make_coupon(6, coupon_type='deal', discount=None, created_at=None),
    ]


def ids(items):
    return [c.id for c in items]


def test_promo_tab_and_sorting_scenario():
    promo = make_coupon(1, discount='50%', created_at=T1)
    deal = make_coupon(
        2, coupon_type='deal', discount='Free Shipping', created_at=T1 + timedelta(days=1)
    )
    pair = [promo, deal]

    filtered = catalog.filter_coupons(pair, CouponCatalogFilter(tab=CatalogTab.PROMO))
    assert ids(filtered) == [1]
    assert ids(catalog.sort_coupons(pair, SortPolicy.DISCOUNT_DESC)) == [1, 2]
    assert ids(catalog.sort_coupons(pair, SortPolicy.NEWEST)) == [2, 1]


@pytest.mark.parametrize(
    'criteria, expected',
    [
        (CouponCatalogFilter(), [1, 2, 3, 4, 5, 6]),
        (CouponCatalogFilter(tab=CatalogTab.ALL), [1, 2, 3, 4, 5, 6]),
        (CouponCatalogFilter(tab=CatalogTab.PROMO), [1, 3, 5]),
        (CouponCatalogFilter(tab=CatalogTab.DEAL), [2, 4, 6]),
        (CouponCatalogFilter(categories=[1]), [1, 3]),
        (CouponCatalogFilter(categories=[2, 99]), [2, 3]),
        (CouponCatalogFilter(categories=[]), [1, 2, 3, 4, 5, 6]),
        (CouponCatalogFilter(verified=True), [1, 4]),
        (CouponCatalogFilter(codes_only=True), [1, 3, 5]),
        (CouponCatalogFilter(deals_only=True), [2, 4, 6]),
        (CouponCatalogFilter(free_shipping=True), [2, 5]),
        (CouponCatalogFilter(tab=CatalogTab.DEAL, verified=True), [4]),
        (CouponCatalogFilter(categories=[2], free_shipping=True), [2]),
    ],
)
def test_filter_criteria(coupons, criteria, expected):
    assert ids(catalog.filter_coupons(coupons, criteria)) == expected


def test_codes_only_and_deals_only_match_nothing(coupons):
    criteria = CouponCatalogFilter(codes_only=True, deals_only=True)
    assert catalog.filter_coupons(coupons, criteria) == []


def test_category_filter_excludes_coupons_without_store(coupons):
    result = catalog.filter_coupons(coupons, CouponCatalogFilter(categories=[1, 2]))
    assert 5 not in ids(result)


def test_filter_does_not_mutate_input(coupons):
    before = ids(coupons)
    catalog.filter_coupons(coupons, CouponCatalogFilter(tab=CatalogTab.DEAL))
    assert ids(coupons) == before


@pytest.mark.parametrize(
    'criteria',
    [
        CouponCatalogFilter(tab=CatalogTab.PROMO, verified=True),
        CouponCatalogFilter(categories=[2], deals_only=True),
        CouponCatalogFilter(free_shipping=True),
    ],
)
def test_filter_is_idempotent(coupons, criteria):
    once = catalog.filter_coupons(coupons, criteria)
    assert catalog.filter_coupons(once, criteria) == once


def test_filter_is_order_independent(coupons):
    criteria = CouponCatalogFilter(tab=CatalogTab.PROMO, categories=[1])
    step_by_step = catalog.filter_coupons(
        catalog.filter_coupons(coupons, CouponCatalogFilter(categories=[1])),
        CouponCatalogFilter(tab=CatalogTab.PROMO),
    )
    assert ids(catalog.filter_coupons(coupons, criteria)) == ids(step_by_step)


def test_sort_newest_puts_missing_created_at_last(coupons):
    assert ids(catalog.sort_coupons(coupons, SortPolicy.NEWEST)) == [5, 4, 3, 2, 1, 6]


def test_sort_by_discount(coupons):
    # Non-percentage discounts count as 0 and keep their relative order
    assert ids(catalog.sort_coupons(coupons, SortPolicy.DISCOUNT_DESC)) == [1, 3, 2, 4, 5, 6]
    assert ids(catalog.sort_coupons(coupons, SortPolicy.DISCOUNT_ASC)) == [2, 4, 5, 6, 3, 1]


def test_sort_most_used(coupons):
    assert ids(catalog.sort_coupons(coupons, SortPolicy.MOST_USED)) == [3, 1, 4, 2, 5, 6]


def test_sort_relevance_keeps_order(coupons):
    reversed_coupons = list(reversed(coupons))
    result = catalog.sort_coupons(reversed_coupons, SortPolicy.RELEVANCE)
    assert ids(result) == ids(reversed_coupons)
    assert result is not reversed_coupons


@pytest.mark.parametrize('policy', list(SortPolicy))
def test_sort_is_a_permutation(coupons, policy):
    assert sorted(ids(catalog.sort_coupons(coupons, policy))) == sorted(ids(coupons))


def test_paginate_clamps_page_past_the_end():
    page = catalog.paginate(list(range(1, 24)), page=5, per_page=10)
    assert page.page == 3
    assert page.total_pages == 3
    assert page.items == [21, 22, 23]


def test_paginate_clamps_page_below_one():
    page = catalog.paginate(list(range(1, 24)), page=0, per_page=10)
    assert page.page == 1
    assert page.items == list(range(1, 11))


def test_paginate_empty_has_one_page():
    page = catalog.paginate([], page=1, per_page=5)
    assert page.items == []
    assert page.total_pages == 1
    assert page.page == 1


def test_paginate_all_items_on_one_page():
    page = catalog.paginate(list(range(7)), page=4, per_page=None)
    assert page.items == list(range(7))
    assert page.total_pages == 1
    assert page.page == 1


def test_paginate_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        catalog.paginate([1, 2], page=1, per_page=0)


@pytest.mark.parametrize(
    'count, per_page', itertools.product([0, 1, 9, 10, 11, 23, 50], catalog.PER_PAGE_OPTIONS)
)
def test_paginate_pages_cover_every_item(count, per_page):
    items = list(range(count))
    first = catalog.paginate(items, page=1, per_page=per_page)

    seen = []
    for number in range(1, first.total_pages + 1):
        page = catalog.paginate(items, page=number, per_page=per_page)
        assert len(page.items) <= per_page
        seen.extend(page.items)
    assert seen == items


@pytest.mark.parametrize(
    'value, expected',
    [('5', 5), ('10', 10), ('20', 20), ('50', 50), ('all', None)],
)
def test_parse_per_page(value, expected):
    assert catalog.parse_per_page(value) == expected


@pytest.mark.parametrize('value', ['3', '0', '100'])
def test_parse_per_page_rejects_unknown_sizes(value):
    with pytest.raises(ValueError):
        catalog.parse_per_page(value)
