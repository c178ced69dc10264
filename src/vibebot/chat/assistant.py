from __future__ import annotations

from typing import Callable

from vibebot.catalog.store import IndicatorStore
from vibebot.chat.executor import CommandExecutor
from vibebot.chat.formatting import num
from vibebot.chat.parser import CommandParser
from vibebot.chat.types import INDICATOR_COMMANDS, ActionResult, ChatReply, ParsedCommand

INDICATOR_EXAMPLES = (
    "Try commands like:\n"
    '• "Enable RSI"\n'
    '• "Set MACD period to 20"\n'
    '• "Disable Bollinger Bands"\n'
    '• "Change SMA to 50"'
)

TRADING_EXAMPLES = (
    "💡 **Try these commands:**\n"
    '📈 Trading: "Buy 10 AAPL", "Sell 5 TSLA at $300"\n'
    '📊 Data: "Get MSFT quote", "Show my positions"\n'
    '⚙️ Indicators: "Enable RSI", "Set MACD to 20"\n'
    '🏛️ Market: "Is market open?", "Show my account"'
)

TRADE_TIP = '💡 You can check your positions by saying "Show my positions" or get account info with "Show my account".'

EventLogger = Callable[..., None]


class ChatAssistant:
    """parse -> execute -> compose, one message at a time.

    The only state is the injected IndicatorStore; broker and event logger
    are optional collaborators supplied by whoever builds the assistant.
    """

    def __init__(self, store: IndicatorStore, broker=None, *, default_quantity: float = 1, log_event: EventLogger | None = None):
        self.store = store
        self.trading = broker is not None
        self.parser = CommandParser(lambda: store.indicators, trading=self.trading)
        self.executor = CommandExecutor(store, broker, default_quantity=default_quantity)
        self.log_event = log_event

    def process_message(self, message: str) -> ChatReply:
        cmd = self.parser.parse(message)
        result = self.executor.execute(cmd)
        reply = ChatReply(response=self.compose(message, cmd, result), actions=[result], command=cmd.type)
        if self.log_event is not None:
            self.log_event(message=message, command=cmd.type, actions=[a.to_dict() for a in reply.actions])
        return reply

    def compose(self, message: str, cmd: ParsedCommand, result: ActionResult) -> str:
        if result.success:
            if cmd.type not in INDICATOR_COMMANDS:
                if cmd.type in ("buy_stock", "sell_stock"):
                    return f"{result.details}\n\n{TRADE_TIP}"
                return result.details
            response = f"I've successfully {result.action.lower()}! {result.details}"
            if cmd.type in ("enable_indicator", "set_parameter"):
                n = self.store.enabled_count()
                response += (
                    f"\n\nYou now have {n} active indicator{'s' if n != 1 else ''} "
                    "in your trading bot configuration."
                )
            return response

        low = message.lower()
        if "help" in low or "what can you do" in low:
            return self.help_text()
        if "status" in low or "active" in low:
            if not (self.trading and cmd.type == "market_status"):
                return self.status_text()

        response = f"I couldn't complete that action. {result.details}"
        if cmd.type == "unknown":
            response += "\n\n" + (TRADING_EXAMPLES if self.trading else INDICATOR_EXAMPLES)
        return response

    def help_text(self) -> str:
        text = (
            "I can help you configure your trading bot! Here's what I can do:\n\n"
            "🔧 **Indicator Management:**\n"
            '• Enable/disable indicators: "Enable RSI" or "Turn off MACD"\n'
            '• Adjust parameters: "Set RSI period to 20" or "Change SMA to 50"\n\n'
        )
        if self.trading:
            text += (
                "📈 **Trading:**\n"
                '• Place orders: "Buy 10 AAPL" or "Sell 5 TSLA at $300 limit"\n'
                '• Account data: "Show my positions", "Show my account", "Is market open?"\n\n'
            )
        text += (
            "📊 **Current Status:**\n"
            f"• You have {len(self.store.indicators)} available indicators\n"
            f"• {self.store.enabled_count()} are currently active\n\n"
            "💡 **Try saying:**\n"
            '• "Enable Bollinger Bands"\n'
            '• "Set MACD fast EMA to 15"\n'
            '• "Show me my active indicators"'
        )
        return text

    def status_text(self) -> str:
        active = self.store.active()
        if not active:
            return "You don't have any active indicators yet. Try enabling some by saying 'Enable RSI' or 'Turn on MACD'."
        lines = "\n".join(f"• {ind.name} ({ind.param}: {num(st.value)})" for ind, st in active)
        return (
            f"📊 **Active Indicators ({len(active)}):**\n\n{lines}\n\n"
            'You can adjust these by saying things like "Set RSI period to 25" or disable them with "Turn off MACD".'
        )
