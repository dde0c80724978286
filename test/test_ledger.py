"""
Unit Tests for the Paper Ledger and Position Sizing

Test Coverage:
    - Share sizing in dollars and shares mode
    - BUY/SELL fills, cash movement and skipped orders
    - Stats: trade count, realized profit, win rate
    - Partial sells in shares mode
    - Direction-change bookkeeping
    - Portfolio valuation and trade history DataFrame
    - Bot management errors
"""

import sys
from pathlib import Path

import pytest

# Add project root
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from paperbot.analysis import DirectionChangePoint, PointKind
from paperbot.execution import LedgerError, PaperLedger
from paperbot.risk.position_sizer import calculate_shares_to_buy, calculate_shares_to_sell
from paperbot.strategies import BotSettings, Decision, InvestmentType, PositionUpdate

# ==================== Fixtures ====================


@pytest.fixture
def ledger():
    """Ledger with $10,000 and a fixed clock"""
    return PaperLedger(starting_cash=10_000, clock=lambda: 1_700_000_000_000)


@pytest.fixture
def bot(ledger):
    return ledger.create_bot("Ledger Bot", "app")


def valley(index, price=9.0):
    return DirectionChangePoint(index=index, timestamp=index * 60_000, price=price, kind=PointKind.VALLEY)


# ==================== Position Sizing ====================


class TestPositionSizer:
    """Share counts for buys and sells"""

    def test_dollars_mode_caps_spend(self):
        assert calculate_shares_to_buy(2000, InvestmentType.DOLLARS, 30.0, 10_000) == 66

    def test_dollars_mode_limited_by_cash(self):
        assert calculate_shares_to_buy(2000, InvestmentType.DOLLARS, 30.0, 100) == 3

    def test_shares_mode_caps_count(self):
        assert calculate_shares_to_buy(50, InvestmentType.SHARES, 30.0, 10_000) == 50

    def test_shares_mode_limited_by_cash(self):
        assert calculate_shares_to_buy(50, InvestmentType.SHARES, 30.0, 600) == 20

    @pytest.mark.parametrize("price,cash", [(0.0, 1000), (-1.0, 1000), (10.0, 0), (10.0, -5)])
    def test_degenerate_inputs(self, price, cash):
        assert calculate_shares_to_buy(2000, InvestmentType.DOLLARS, price, cash) == 0

    def test_sell_dollars_mode_closes_position(self):
        assert calculate_shares_to_sell(2000, InvestmentType.DOLLARS, 66) == 66

    def test_sell_shares_mode_caps_count(self):
        assert calculate_shares_to_sell(10, InvestmentType.SHARES, 25) == 10
        assert calculate_shares_to_sell(10, InvestmentType.SHARES, 4) == 4

    def test_sell_nothing_held(self):
        assert calculate_shares_to_sell(10, InvestmentType.SHARES, 0) == 0


# ==================== Fills ====================


class TestFills:
    """Decisions become simulated trades"""

    def test_buy_opens_position(self, ledger, bot):
        trade = ledger.apply_decision(bot.id, Decision.buy("dip"), 30.0)

        assert trade.side == "BUY"
        assert trade.shares == 66
        assert trade.total == pytest.approx(1980.0)
        assert ledger.cash == pytest.approx(8020.0)
        assert bot.current_position.buy_price == 30.0
        assert list(bot.current_position.price_history) == [30.0]
        assert bot.stats.total_trades == 1

    def test_sell_closes_position_with_profit(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("dip"), 30.0)
        trade = ledger.apply_decision(bot.id, Decision.sell("peak"), 32.0)

        assert trade.profit == pytest.approx(132.0)
        assert bot.current_position is None
        assert ledger.cash == pytest.approx(10_132.0)
        assert bot.stats.total_trades == 2
        assert bot.stats.total_profit == pytest.approx(132.0)
        assert bot.stats.win_rate == pytest.approx(100.0)

    def test_win_rate_counts_sells_only(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        ledger.apply_decision(bot.id, Decision.sell("b"), 32.0)
        ledger.apply_decision(bot.id, Decision.buy("c"), 30.0)
        ledger.apply_decision(bot.id, Decision.sell("d"), 29.0)

        assert bot.stats.win_rate == pytest.approx(50.0)
        assert bot.stats.total_trades == 4

    def test_buy_while_holding_is_skipped(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        assert ledger.apply_decision(bot.id, Decision.buy("b"), 25.0) is None
        assert bot.current_position.buy_price == 30.0

    def test_sell_while_flat_is_skipped(self, ledger, bot):
        assert ledger.apply_decision(bot.id, Decision.sell("x"), 30.0) is None
        assert ledger.cash == 10_000

    def test_insufficient_cash_skips_buy(self):
        poor = PaperLedger(starting_cash=5.0, clock=lambda: 0)
        poor_bot = poor.create_bot("Poor", "APP")

        assert poor.apply_decision(poor_bot.id, Decision.buy("x"), 30.0) is None
        assert poor_bot.current_position is None

    def test_hold_does_nothing(self, ledger, bot):
        assert ledger.apply_decision(bot.id, Decision.hold(), 30.0) is None
        assert ledger.trades == []

    def test_partial_sell_in_shares_mode(self, ledger):
        settings = BotSettings.from_dict({"investmentType": "shares", "maxInvestmentPerTrade": 10})
        bot = ledger.create_bot("Shares", "APP", settings)

        ledger.apply_decision(bot.id, Decision.buy("a"), 10.0)
        bot.current_position.shares = 25
        trade = ledger.apply_decision(bot.id, Decision.sell("b"), 11.0)

        assert trade.shares == 10
        assert bot.current_position.shares == 15

    def test_position_update_applied(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        update = PositionUpdate(price_history=(30.0, 29.5), consecutive_falls=1)

        ledger.apply_decision(bot.id, Decision.hold("falls", update_position=update), 29.5)

        assert list(bot.current_position.price_history) == [30.0, 29.5]
        assert bot.current_position.consecutive_falls == 1


# ==================== Direction-Change Bookkeeping ====================


class TestProcessedIndex:
    """last_processed_index only moves forward on filled buys"""

    def test_filled_buy_records_index(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("v", new_direction_change=valley(7)), 9.0)
        assert bot.last_processed_index == 7

    def test_index_never_moves_backwards(self, ledger, bot):
        bot.last_processed_index = 9
        ledger.apply_decision(bot.id, Decision.buy("v", new_direction_change=valley(4)), 9.0)
        assert bot.last_processed_index == 9

    def test_skipped_buy_does_not_record(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        ledger.apply_decision(bot.id, Decision.buy("v", new_direction_change=valley(3)), 9.0)
        assert bot.last_processed_index is None


# ==================== Reporting ====================


class TestReporting:
    def test_portfolio_value_marks_to_market(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)

        value = ledger.portfolio_value({"APP": 31.0})

        assert value["holdings_value"] == pytest.approx(66 * 31.0)
        assert value["total_value"] == pytest.approx(8020.0 + 2046.0)
        assert value["profit_loss"] == pytest.approx(66.0)
        assert value["profit_loss_pct"] == pytest.approx(0.66)

    def test_missing_price_uses_buy_price(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        assert ledger.portfolio_value({})["total_value"] == pytest.approx(10_000.0)

    def test_trades_frame(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        ledger.apply_decision(bot.id, Decision.sell("b"), 32.0)

        df = ledger.trades_frame()

        assert list(df["side"]) == ["BUY", "SELL"]
        assert df.index.name == "time"
        assert df["profit"].sum() == pytest.approx(132.0)

    def test_empty_trades_frame(self, ledger):
        df = ledger.trades_frame()

        assert df.empty
        assert "price" in df.columns

    def test_statistics(self, ledger, bot):
        ledger.create_bot("Other", "XYZ")
        ledger.toggle_bot(bot.id)
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        ledger.apply_decision(bot.id, Decision.sell("b"), 29.0)

        stats = ledger.get_statistics()

        assert stats["bots"] == 2
        assert stats["active_bots"] == 1
        assert stats["total_trades"] == 2
        assert stats["total_profit"] == pytest.approx(-66.0)
        assert stats["win_rate"] == 0.0

    def test_reset(self, ledger, bot):
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)

        ledger.reset()

        assert ledger.cash == 10_000
        assert bot.current_position is None
        assert bot.stats.total_trades == 0
        assert ledger.trades == []


# ==================== Bot Management ====================


class TestBotManagement:
    def test_symbol_is_upper_cased(self, bot):
        assert bot.stock_symbol == "APP"
        assert bot.created_at == 1_700_000_000_000

    def test_unknown_bot_raises(self, ledger):
        with pytest.raises(LedgerError):
            ledger.apply_decision("missing", Decision.hold(), 1.0)

    def test_duplicate_bot_raises(self, ledger, bot):
        with pytest.raises(LedgerError):
            ledger.add_bot(bot)

    def test_toggle_and_remove(self, ledger, bot):
        assert ledger.toggle_bot(bot.id) is False
        assert ledger.toggle_bot(bot.id) is True

        ledger.remove_bot(bot.id)

        assert bot.id not in ledger.bots
        with pytest.raises(LedgerError):
            ledger.get_bot(bot.id)

    def test_bot_trades_filters_by_bot(self, ledger, bot):
        other = ledger.create_bot("Other", "XYZ")
        ledger.apply_decision(bot.id, Decision.buy("a"), 30.0)
        ledger.apply_decision(other.id, Decision.buy("b"), 40.0)

        assert [t.symbol for t in ledger.bot_trades(bot.id)] == ["APP"]
