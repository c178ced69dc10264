import pytest

from vibebot.chat.executor import CommandExecutor
from vibebot.chat.parser import CommandParser


@pytest.fixture
def run(store, broker):
    parser = CommandParser(lambda: store.indicators, trading=True)
    executor = CommandExecutor(store, broker)

    def _run(message):
        return executor.execute(parser.parse(message))

    return _run


class TestOrders:
    def test_market_buy(self, run, broker):
        res = run("buy 10 AAPL")
        assert res.success
        assert broker.calls == [
            ("place_order", {"symbol": "AAPL", "qty": 10.0, "side": "buy", "type": "market", "limit_price": None})
        ]
        assert "Order ID: ord-1" in res.details
        assert res.data["order"].id == "ord-1"

    def test_buy_defaults_to_one_share(self, run, broker):
        run("buy apple")
        assert broker.calls[0][1]["qty"] == 1

    def test_limit_buy_with_price(self, run, broker):
        res = run("buy 5 MSFT limit 410.50")
        assert res.success
        kwargs = broker.calls[0][1]
        assert kwargs["type"] == "limit"
        assert kwargs["limit_price"] == 410.50
        assert "at $410.50" in res.details

    def test_limit_without_price_rejected(self, run, broker):
        res = run("buy 10 AAPL limit")
        assert not res.success
        assert "Limit orders require a price" in res.details
        assert "place_order" not in broker.names()

    def test_fractional_limit_price_keeps_quantity(self, run, broker):
        res = run("buy 10 AAPL at $150.5 limit")
        assert res.success
        assert broker.calls == [
            ("place_order", {"symbol": "AAPL", "qty": 10.0, "side": "buy", "type": "limit", "limit_price": 150.5})
        ]

    def test_three_decimal_price_keeps_quantity(self, run, broker):
        run("buy 10 AAPL at 150.125")
        assert broker.calls[0][1]["qty"] == 10.0

    def test_sell_without_quantity_or_position(self, run, broker):
        res = run("sell TSLA at $300")
        assert res.success is False
        assert "You don't have any position in TSLA to sell." == res.details
        assert "place_order" not in broker.names()

    def test_sell_whole_position(self, run, broker, position):
        broker.positions = [position("TSLA", qty=-7.0)]
        res = run("sell TSLA")
        assert res.success
        assert broker.calls[-1] == (
            "place_order",
            {"symbol": "TSLA", "qty": 7.0, "side": "sell", "type": "market", "limit_price": None},
        )


class TestReadThroughs:
    def test_quote(self, run):
        res = run("Get MSFT quote")
        assert res.success
        assert "MSFT Current Price: $100.25" in res.details
        assert "Quote: $100.00" in res.details

    def test_quote_failure_has_own_message(self, run, broker):
        broker.fail_with = RuntimeError("404")
        res = run("Get XYZ quote")
        assert not res.success
        assert res.details == "Could not get quote for XYZ. Please check the symbol is valid."

    def test_no_positions(self, run):
        res = run("Show my positions")
        assert res.success
        assert res.details == "📊 You currently have no open positions."

    def test_positions_summary(self, run, broker, position):
        broker.positions = [position("AAPL", qty=10.0, market_value=1500.0, pl=50.0, plpc=0.0345)]
        res = run("Show my positions")
        assert "• AAPL: 10 shares @ $150.00 (+$50.00, +3.45%)" in res.details
        assert "Total Value: $1,500.00" in res.details

    def test_account(self, run):
        res = run("Show my account")
        assert "Portfolio Value: $25,000.00" in res.details
        assert "Buying Power: $20,000.00" in res.details

    def test_market_status(self, run):
        res = run("Is market open?")
        assert "🟢 OPEN" in res.details

    def test_close_position(self, run, broker, position):
        broker.positions = [position("NVDA", qty=4.0)]
        res = run("close position on NVDA")
        assert res.success
        assert "Closed 4 shares of NVDA position" in res.details

    def test_close_missing_position(self, run):
        res = run("close position on NVDA")
        assert not res.success
        assert "to close" in res.details

    def test_cancel_orders(self, run, broker):
        broker.open_orders = [object(), object()]
        res = run("cancel all orders")
        assert res.details == "❌ Cancelled 2 open orders."
        assert "cancel_all_orders" in broker.names()

    def test_cancel_nothing_open(self, run, broker):
        res = run("cancel all orders")
        assert res.data == {"cancelled_count": 0}
        assert "cancel_all_orders" not in broker.names()


def test_broker_error_is_caught(run, broker):
    broker.fail_with = ConnectionError("connection reset")
    res = run("Show my account")
    assert res.success is False
    assert res.action == "Error"
    assert "connection reset" in res.details
