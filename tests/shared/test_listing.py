import pytest

from storefront.shared.exceptions import ValidationError
from storefront.shared.listing import MAX_LIMIT, ListingPage, as_bool, as_money, parse_listing

FILTERABLE = {"name": str, "price": as_money, "stock": int, "featured": as_bool}


class TestParseListing:
    def test_defaults(self):
        query = parse_listing({}, FILTERABLE)
        assert query.filters == {}
        assert query.sort == [("created_at", -1)]
        assert (query.page, query.limit, query.skip) == (1, 10, 0)

    def test_operators(self):
        query = parse_listing({"price[gte]": "10", "price[lt]": "20.5", "stock[in]": "1,2"}, FILTERABLE)
        assert query.filters == {"price": {"$gte": 1000, "$lt": 2050}, "stock": {"$in": [1, 2]}}

    def test_plain_equality(self):
        assert parse_listing({"featured": "true"}, FILTERABLE).filters == {"featured": True}

    def test_multi_key_sort(self):
        query = parse_listing({"sort": "-price,name"}, FILTERABLE)
        assert query.sort == [("price", -1), ("name", 1)]

    def test_limit_is_capped(self):
        assert parse_listing({"limit": "1000"}, FILTERABLE).limit == MAX_LIMIT

    def test_page_skip(self):
        assert parse_listing({"page": "3", "limit": "5"}, FILTERABLE).skip == 10

    @pytest.mark.parametrize(
        "params,field",
        [
            ({"colour": "red"}, "colour"),
            ({"price[regex]": "1"}, "price[regex]"),
            ({"stock": "many"}, "stock"),
            ({"featured": "maybe"}, "featured"),
            ({"page": "two"}, "page"),
            ({"sort": "password"}, "sort"),
        ],
    )
    def test_rejects_bad_input(self, params, field):
        with pytest.raises(ValidationError) as excinfo:
            parse_listing(params, FILTERABLE)
        assert field in excinfo.value.errors

    def test_search_params_are_reserved(self):
        assert parse_listing({"search": "x", "q": "y"}, FILTERABLE).filters == {}


class TestPagination:
    def test_middle_page(self):
        page = ListingPage(items=[], total=25, page=2, limit=10)
        assert page.pagination == {"next": {"page": 3, "limit": 10}, "prev": {"page": 1, "limit": 10}}

    def test_single_page(self):
        assert ListingPage(items=[], total=3, page=1, limit=10).pagination == {}
