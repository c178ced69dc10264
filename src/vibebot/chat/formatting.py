from __future__ import annotations

from datetime import datetime


def num(x: float) -> str:
    """14.0 -> '14', 0.02 -> '0.02'."""
    return f"{float(x):g}"


def money(x: float) -> str:
    return f"${float(x):,.2f}"


def signed_money(x: float) -> str:
    return f"{'+' if x >= 0 else '-'}${abs(float(x)):,.2f}"


def signed_pct(frac: float) -> str:
    return f"{'+' if frac >= 0 else ''}{frac * 100:.2f}%"


def when(ts: datetime | None, fmt: str = "%Y-%m-%d %H:%M %Z") -> str:
    if ts is None:
        return "n/a"
    return ts.strftime(fmt).strip()


def format_positions(positions) -> str:
    lines = []
    for p in positions:
        avg = (p.market_value / p.qty) if p.qty else 0.0
        lines.append(
            f"• {p.symbol}: {num(p.qty)} shares @ {money(avg)} "
            f"({signed_money(p.unrealized_pl)}, {signed_pct(p.unrealized_plpc)})"
        )
    total_value = sum(p.market_value for p in positions)
    total_pl = sum(p.unrealized_pl for p in positions)
    return (
        f"📊 **Your Positions ({len(positions)}):**\n\n"
        + "\n".join(lines)
        + f"\n\n💼 Total Value: {money(total_value)}\n📈 Total P&L: {signed_money(total_pl)}"
    )


def format_account(a) -> str:
    return (
        "💳 **Account Summary:**\n\n"
        f"💰 Portfolio Value: {money(a.portfolio_value)}\n"
        f"💵 Cash: {money(a.cash)}\n"
        f"🛒 Buying Power: {money(a.buying_power)}\n"
        f"📊 Equity: {money(a.equity)}\n"
        f"📈 Day Trading BP: {money(a.daytrading_buying_power)}"
    )


def format_clock(c) -> str:
    status = "🟢 OPEN" if c.is_open else "🔴 CLOSED"
    return (
        f"🏛️ **Market Status:** {status}\n\n"
        f"⏰ Current Time: {when(c.timestamp)}\n"
        f"🔓 Next Open: {when(c.next_open)}\n"
        f"🔒 Next Close: {when(c.next_close)}"
    )


def format_quote(symbol: str, quote, trade) -> str:
    return (
        f"💰 {symbol} Current Price: {money(trade.price)}\n"
        f"📊 Quote: {money(quote.price)}\n"
        f"🕐 Last Updated: {when(trade.timestamp, '%H:%M:%S')}"
    )
