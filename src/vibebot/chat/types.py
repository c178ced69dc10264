from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

CommandType = Literal[
    "enable_indicator",
    "disable_indicator",
    "set_parameter",
    "add_indicator",
    "remove_indicator",
    "buy_stock",
    "sell_stock",
    "get_quote",
    "get_positions",
    "get_account",
    "market_status",
    "close_position",
    "cancel_order",
    "unknown",
]

INDICATOR_COMMANDS: frozenset[str] = frozenset(
    {"enable_indicator", "disable_indicator", "set_parameter", "add_indicator", "remove_indicator"}
)


@dataclass(frozen=True)
class ParsedCommand:
    type: CommandType
    indicator: str | None = None
    parameter: str | None = None
    value: float | None = None
    symbol: str | None = None
    quantity: float | None = None
    price: float | None = None
    order_type: Literal["market", "limit"] | None = None


UNKNOWN = ParsedCommand(type="unknown")


@dataclass(frozen=True)
class ActionResult:
    success: bool
    action: str
    details: str
    data: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "action": self.action, "details": self.details, "data": self.data}


@dataclass(frozen=True)
class ChatReply:
    response: str
    actions: list[ActionResult] = field(default_factory=list)
    command: CommandType = "unknown"
