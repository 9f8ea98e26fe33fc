"""Tests for the revenue grid parser and the block builder."""

from datetime import datetime
from decimal import Decimal

import pytest

from finance_dashboard.models.revenue import RevenueBreakdown
from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.parsers.base import ParseError
from finance_dashboard.parsers.revenue_blocks import RevenueBlockBuilder
from finance_dashboard.parsers.revenue_parser import (
    REVENUE_HEADER,
    RevenueRowParser,
    parse_revenue_rows,
)
from finance_dashboard.utils.cells import MoneyPolicy

HEADER = ["date", "unit", "cash", "bank", "acquiring"]


class TestRevenueRowParser:
    """Tests for RevenueRowParser class."""

    def test_single_row(self) -> None:
        """Test the plain revenue-only row."""
        rows = parse_revenue_rows([HEADER, ["2024-01-15", "hotel", 1000, 500, 200]])

        assert len(rows) == 1
        row = rows[0]
        assert row.date == "2024-01-15"
        assert row.unit is BusinessUnit.HOTEL
        assert row.cash == Decimal("1000")
        assert row.bank == Decimal("500")
        assert row.acquiring == Decimal("200")
        assert row.breakdown is None
        assert row.total == Decimal("1700")

    def test_online_breakdown_adds_to_total(self) -> None:
        """Test that online sales are added on top of cash/bank/acquiring."""
        grid = [
            REVENUE_HEADER,
            ["2024-01-15", "hotel", 1000, 500, 200, {"online": 300}],
        ]
        row = parse_revenue_rows(grid)[0]

        assert row.breakdown is not None
        assert row.breakdown.online == Decimal("300")
        assert row.total == Decimal("2000")

    def test_breakdown_missing_cash_falls_back_to_row_cash(self) -> None:
        """Test breakdown defaults: cash from the row, everything else zero."""
        grid = [
            REVENUE_HEADER,
            ["2024-01-15", "hotel", 1000, 500, 200, {"bankLegal": "400", "bank_individual": 100}],
        ]
        breakdown = parse_revenue_rows(grid)[0].breakdown

        assert breakdown == RevenueBreakdown(
            bank_legal=Decimal("400"),
            bank_individual=Decimal("100"),
            online=Decimal("0"),
            acquiring_terminal=Decimal("0"),
            cash=Decimal("1000"),
        )

    def test_breakdown_object_kept(self) -> None:
        """Test that a RevenueBreakdown cell is used unchanged."""
        breakdown = RevenueBreakdown(online=Decimal("50"))
        grid = [REVENUE_HEADER, ["2024-01-15", "hotel", 0, 0, 0, breakdown]]
        assert parse_revenue_rows(grid)[0].breakdown is breakdown

    def test_non_mapping_breakdown_ignored(self) -> None:
        """Test that unrelated values in the breakdown column are ignored."""
        grid = [REVENUE_HEADER, ["2024-01-15", "hotel", 1, 0, 0, "note"]]
        assert parse_revenue_rows(grid)[0].breakdown is None

    def test_unit_synonyms_and_date_formats(self) -> None:
        """Test that units and dates are normalized."""
        grid = [
            HEADER,
            ["01.15.2024", "Отель и бани", 10, 0, 0],
            [45306, "ресторан", 20, 0, 0],
            [datetime(2024, 1, 15, 9, 0), "Бар", 30, 0, 0],
        ]
        rows = parse_revenue_rows(grid)

        assert [r.date for r in rows] == ["2024-01-15"] * 3
        assert [r.unit for r in rows] == [
            BusinessUnit.HOTEL,
            BusinessUnit.RESTAURANT,
            BusinessUnit.BAR,
        ]

    def test_malformed_date_dropped(self) -> None:
        """Test that a row with an impossible date is excluded."""
        parser = RevenueRowParser()
        rows = parser.parse(
            [
                HEADER,
                ["13.45.2024", "hotel", 1000, 0, 0],
                ["2024-01-15", "hotel", 5, 0, 0],
            ]
        )

        assert len(rows) == 1
        assert rows[0].cash == Decimal("5")
        assert parser.stats.invalid_date == 1
        assert parser.stats.records == 1

    def test_unknown_unit_dropped(self) -> None:
        """Test that a row with an unknown unit is excluded."""
        parser = RevenueRowParser()
        rows = parser.parse([HEADER, ["2024-01-15", "казино", 1000, 0, 0]])

        assert rows == []
        assert parser.stats.unknown_unit == 1

    def test_blank_rows_skipped(self) -> None:
        """Test that blank and non-sequence rows are skipped without counting as drops."""
        parser = RevenueRowParser()
        rows = parser.parse([HEADER, [], [None, "", None], None, ["2024-01-15", "spa", 1, 0, 0]])

        assert len(rows) == 1
        assert parser.stats.blank == 3
        assert parser.stats.dropped == 0

    def test_strict_policy_drops_row(self) -> None:
        """Test that a non-numeric money cell drops the row under STRICT."""
        parser = RevenueRowParser(MoneyPolicy.STRICT)
        rows = parser.parse([HEADER, ["2024-01-15", "hotel", "n/a", 500, 200]])

        assert rows == []
        assert parser.stats.invalid_amount == 1

    def test_lenient_policy_zeroes_cell(self) -> None:
        """Test that a non-numeric money cell counts as zero under LENIENT."""
        rows = parse_revenue_rows(
            [HEADER, ["2024-01-15", "hotel", "n/a", 500, 200]],
            money_policy=MoneyPolicy.LENIENT,
        )

        assert rows[0].cash == Decimal("0")
        assert rows[0].total == Decimal("700")

    def test_string_amounts(self) -> None:
        """Test that formatted amount strings are parsed."""
        rows = parse_revenue_rows([HEADER, ["2024-01-15", "hotel", "1 000,50", "", None]])
        assert rows[0].cash == Decimal("1000.50")
        assert rows[0].bank == Decimal("0")

    @pytest.mark.parametrize("grid", ["not a grid", 42, None, {"rows": []}])
    def test_invalid_grid_raises(self, grid: object) -> None:
        """Test that a structurally invalid grid raises ParseError."""
        with pytest.raises(ParseError):
            RevenueRowParser().parse(grid)  # type: ignore[arg-type]

    def test_header_only(self) -> None:
        """Test that a grid with only a header yields nothing."""
        assert parse_revenue_rows([HEADER]) == []
        assert parse_revenue_rows([]) == []


class TestRevenueBlockBuilder:
    """Tests for RevenueBlockBuilder class."""

    def test_hotel_block(self) -> None:
        """Test the six-column hotel block."""
        block = [
            ["Дата", "Безнал ЮЛ", "Безнал ФЛ", "Онлайн", "Терминал", "Наличные"],
            ["15.01.2024", 400, 100, 300, 200, 1000],
        ]
        grid = RevenueBlockBuilder().build({BusinessUnit.HOTEL: block})

        assert grid[0] == REVENUE_HEADER
        assert len(grid) == 2
        row_date, unit, cash, bank, acquiring, breakdown = grid[1]
        assert row_date == "2024-01-15"
        assert unit == "hotel"
        assert cash == Decimal("1000")
        assert bank == Decimal("500")
        assert acquiring == Decimal("200")
        assert breakdown.online == Decimal("300")

    def test_blocks_feed_revenue_parser(self) -> None:
        """Test that the built grid parses into totals including online sales."""
        blocks = {
            BusinessUnit.HOTEL: [["Дата"], ["15.01.2024", 400, 100, 300, 200, 1000]],
            BusinessUnit.POOL: [["Дата"], ["15.01.2024", "ignored", 50, 25]],
        }
        rows = parse_revenue_rows(RevenueBlockBuilder().build(blocks))

        totals = {r.unit: r.total for r in rows}
        assert totals == {
            BusinessUnit.HOTEL: Decimal("2000"),
            BusinessUnit.POOL: Decimal("75"),
        }

    def test_period_grouped_amount(self) -> None:
        """Test that "1.500,00" in a block reads as fifteen hundred."""
        block = [["Дата"], ["15.01.2024", None, "2.000,50", None, None, "1.500,00"]]
        rows = parse_revenue_rows(RevenueBlockBuilder().build({BusinessUnit.HOTEL: block}))

        assert rows[0].cash == Decimal("1500")
        assert rows[0].bank == Decimal("2000.50")

    def test_header_not_counted_as_invalid(self) -> None:
        """Test that the block header row is skipped silently."""
        builder = RevenueBlockBuilder()
        builder.build(
            {BusinessUnit.SPA: [["Дата", "Безнал"], ["итого", 1, 2, 3], ["15.01.2024", 1, 2, 3]]}
        )

        stats = builder.stats[BusinessUnit.SPA]
        assert stats.records == 1
        assert stats.invalid_date == 1
        assert stats.source == "revenue:spa"

    def test_strict_policy(self) -> None:
        """Test that a bad money cell drops the block row under STRICT."""
        builder = RevenueBlockBuilder(money_policy=MoneyPolicy.STRICT)
        grid = builder.build({BusinessUnit.SPA: [["Дата"], ["15.01.2024", "x", 2, 3]]})

        assert len(grid) == 1
        assert builder.stats[BusinessUnit.SPA].invalid_amount == 1

    def test_lenient_policy(self) -> None:
        """Test that a bad money cell reads as zero under LENIENT."""
        builder = RevenueBlockBuilder(money_policy=MoneyPolicy.LENIENT)
        grid = builder.build({BusinessUnit.SPA: [["Дата"], ["15.01.2024", "x", 2, 3]]})

        assert grid[1][3] == Decimal("0")

    def test_non_list_block_raises(self) -> None:
        """Test that a block that is not a list of rows raises ParseError."""
        with pytest.raises(ParseError):
            RevenueBlockBuilder().build({BusinessUnit.BAR: "A1:B2"})  # type: ignore[dict-item]
