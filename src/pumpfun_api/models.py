from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class TradeDirection(Enum):
    BUY = "buy"
    SELL = "sell"


class TransactionMode(Enum):
    EXECUTE = "execute"
    SIMULATE = "simulate"


@dataclass(frozen=True)
class ReserveState:
    virtual_token_reserves: int
    virtual_sol_reserves: int
    bonding_curve: str
    associated_bonding_curve: str


@dataclass(frozen=True)
class TradeRequest:
    direction: TradeDirection
    amount_in: int
    fee_rate: Decimal
    slippage: Decimal
    priority_fee_lamports: int = 0


@dataclass(frozen=True)
class Quote:
    direction: TradeDirection
    amount_in: int
    amount_out: int
    # max SOL cost for buys, min SOL output for sells
    bound_amount: int
    fee_amount: int
