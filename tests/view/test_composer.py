"""Tests for coin table composition"""

import pytest

from coinscope.data.models import SortDirection, SortField, SortSpec
from coinscope.view.composer import (
    compose,
    filter_by_text,
    filter_by_watchlist,
    sort_coins,
    toggle_sort,
)


class TestTextFilter:
    """Test search filtering"""

    def test_matches_name_case_insensitive(self, sample_coins):
        """Test name substring match ignores case"""
        result = filter_by_text(sample_coins, "BITCO")
        assert [c.id for c in result] == ["bitcoin"]

    def test_matches_symbol(self, sample_coins):
        """Test symbol substring match"""
        result = filter_by_text(sample_coins, "sol")
        assert [c.id for c in result] == ["solana"]

    def test_matches_either_field(self, coin_factory):
        """Test a query matching one coin's name and another's symbol"""
        coins = [
            coin_factory("a", name="Dogecoin", symbol="DOGE"),
            coin_factory("b", name="Shiba", symbol="SHIBDOG"),
            coin_factory("c", name="Pepe", symbol="PEPE"),
        ]
        assert [c.id for c in filter_by_text(coins, "dog")] == ["a", "b"]

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_is_noop(self, sample_coins, query):
        """Test blank query keeps everything in order"""
        assert filter_by_text(sample_coins, query) == sample_coins

    def test_query_is_stripped(self, sample_coins):
        """Test surrounding whitespace is ignored"""
        assert [c.id for c in filter_by_text(sample_coins, "  eth ")] == ["ethereum"]


class TestWatchlistFilter:
    """Test watchlist filtering"""

    def test_keeps_watchlisted(self, sample_coins):
        """Test only watchlisted ids remain, in input order"""
        result = filter_by_watchlist(sample_coins, {"solana", "bitcoin"})
        assert [c.id for c in result] == ["bitcoin", "solana"]

    def test_empty_watchlist(self, sample_coins):
        """Test empty watchlist keeps nothing"""
        assert filter_by_watchlist(sample_coins, []) == []


class TestSort:
    """Test stable sorting"""

    def test_sort_desc(self, sample_coins):
        """Test descending price"""
        result = sort_coins(sample_coins, SortSpec(SortField.PRICE, SortDirection.DESC))
        assert [c.id for c in result] == ["bitcoin", "ethereum", "solana"]

    def test_sort_asc(self, sample_coins):
        """Test ascending 24h change"""
        result = sort_coins(sample_coins, SortSpec(SortField.CHANGE_24H, SortDirection.ASC))
        assert [c.id for c in result] == ["ethereum", "bitcoin", "solana"]

    @pytest.mark.parametrize("direction", [SortDirection.ASC, SortDirection.DESC])
    def test_sort_stable_both_directions(self, coin_factory, direction):
        """Test equal keys keep input order regardless of direction"""
        coins = [
            coin_factory("x1", volume_24h=5.0),
            coin_factory("y", volume_24h=1.0),
            coin_factory("x2", volume_24h=5.0),
            coin_factory("x3", volume_24h=5.0),
        ]
        result = sort_coins(coins, SortSpec(SortField.VOLUME_24H, direction))

        tied = [c.id for c in result if c.volume_24h == 5.0]
        assert tied == ["x1", "x2", "x3"]

    def test_sort_accepts_string_values(self, sample_coins):
        """Test plain string field and direction"""
        result = sort_coins(sample_coins, SortSpec("market_cap", "asc"))
        assert [c.id for c in result] == ["solana", "ethereum", "bitcoin"]


class TestCompose:
    """Test full composition"""

    def test_compose_is_permutation_without_filters(self, sample_coins):
        """Test output is a permutation of input"""
        for field in SortField:
            for direction in SortDirection:
                result = compose(sample_coins, "", False, set(), SortSpec(field, direction))
                assert sorted(c.id for c in result) == sorted(c.id for c in sample_coins)

    def test_compose_search_output_is_permutation_of_matches(self, sample_coins):
        """Test search then sort keeps exactly the matching coins"""
        result = compose(sample_coins, "e", False, set(), SortSpec(SortField.PRICE, SortDirection.ASC))
        expected = filter_by_text(sample_coins, "e")
        assert sorted(c.id for c in result) == sorted(c.id for c in expected)

    def test_compose_does_not_mutate_input(self, sample_coins):
        """Test input list is untouched"""
        before = list(sample_coins)
        result = compose(sample_coins, "", False, set(), SortSpec(SortField.PRICE, SortDirection.ASC))

        assert sample_coins == before
        assert result is not sample_coins

    def test_compose_watchlist_inactive_ignores_ids(self, sample_coins):
        """Test watchlist ids matter only when active"""
        result = compose(sample_coins, "", False, {"solana"}, SortSpec())
        assert len(result) == 3

    def test_compose_watchlist_and_search(self, sample_coins):
        """Test both filters combine"""
        result = compose(sample_coins, "o", True, {"solana", "ethereum"}, SortSpec())
        assert [c.id for c in result] == ["solana"]


class TestToggleSort:
    """Test column click behavior"""

    def test_same_field_flips(self):
        """Test clicking the active column flips direction"""
        spec = toggle_sort(SortSpec(SortField.PRICE, SortDirection.DESC), SortField.PRICE)
        assert spec == SortSpec(SortField.PRICE, SortDirection.ASC)

    def test_new_field_starts_desc(self):
        """Test clicking another column starts descending"""
        spec = toggle_sort(SortSpec(SortField.PRICE, SortDirection.ASC), SortField.VOLUME_24H)
        assert spec == SortSpec(SortField.VOLUME_24H, SortDirection.DESC)
