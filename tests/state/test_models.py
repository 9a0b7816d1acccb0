"""Tests for dashboard state and value models"""

import pytest

from coinscope.config.defaults import CompareParams, get_default_config, ViewParams
from coinscope.data.models import ComparisonSlot, Segment, SortDirection, SortField
from coinscope.state.generation import RequestGenerations
from coinscope.state.models import initial_state


class TestSegment:
    """Test ranked segment value object"""

    def test_ranks_and_label(self):
        """Test derived rank range"""
        segment = Segment(page=3, size=100)

        assert segment.key == "3:100"
        assert (segment.first_rank, segment.last_rank) == (201, 300)
        assert segment.label == "Top 300"

    @pytest.mark.parametrize("page,size", [(0, 100), (1, 0), (-2, 50)])
    def test_invalid(self, page, size):
        """Test non-positive page or size"""
        with pytest.raises(ValueError):
            Segment(page=page, size=size)


class TestComparisonSlot:
    """Test comparison slot invariants"""

    def test_assigned_skips_empty_c(self):
        """Test only filled labels are returned, in order"""
        assert ComparisonSlot(a="x", b="y").assigned() == {"A": "x", "B": "y"}
        assert list(ComparisonSlot(a="x", b="y", c="z").assigned()) == ["A", "B", "C"]

    @pytest.mark.parametrize("a,b,c", [
        ("x", "x", None),
        ("x", "y", "x"),
        ("", "y", None),
        ("x", "", None),
    ])
    def test_invalid(self, a, b, c):
        """Test missing or duplicate ids"""
        with pytest.raises(ValueError):
            ComparisonSlot(a=a, b=b, c=c)


class TestInitialState:
    """Test session start state"""

    def test_from_defaults(self):
        """Test default configuration"""
        state = initial_state(watchlist_ids=["solana"])

        assert state.segment == Segment(page=1, size=100)
        assert state.sort.field is SortField.MARKET_CAP
        assert state.sort.direction is SortDirection.DESC
        assert state.watchlist_ids == ("solana",)
        assert state.watchlist_active is False
        assert len(state.exit_plan.rows) == 3
        assert state.market.loading is False

    def test_from_custom_config(self):
        """Test configured comparison and sort defaults"""
        config = get_default_config()
        config = type(config)(
            api=config.api,
            segments=config.segments,
            view=ViewParams(default_sort_field="volume_24h", default_sort_direction="asc"),
            compare=CompareParams(default_days=30, default_a="solana", default_b="cardano"),
            exit_plan=config.exit_plan,
            storage=config.storage,
        )

        state = initial_state(config)

        assert state.comparison.slot == ComparisonSlot(a="solana", b="cardano")
        assert state.comparison.days == 30
        assert state.sort.field is SortField.VOLUME_24H
        assert state.sort.direction is SortDirection.ASC


class TestRequestGenerations:
    """Test stale-response tokens"""

    def test_newer_token_supersedes(self):
        """Test only the latest token is current"""
        generations = RequestGenerations()
        first = generations.issue("segment")
        second = generations.issue("segment")

        assert not generations.is_current("segment", first)
        assert generations.is_current("segment", second)

    def test_classes_are_independent(self):
        """Test one class does not invalidate another"""
        generations = RequestGenerations()
        segment = generations.issue("segment")
        generations.issue("comparison")

        assert generations.is_current("segment", segment)

    def test_invalidate(self):
        """Test invalidation without a new request"""
        generations = RequestGenerations()
        token = generations.issue("comparison")
        generations.invalidate("comparison")

        assert not generations.is_current("comparison", token)
        assert generations.current("comparison") == token + 1
