from .api import create_app, create_app_from_config
from .config import ProgramConfig, ServiceConfig, load_config
from .errors import (
    InsufficientBalance,
    InvalidKey,
    InvalidParameter,
    InvalidReserves,
    NetworkError,
    NotFound,
    PumpApiError,
    TransactionFailed,
    UnconfirmedTransaction,
)
from .instructions import InstructionAssembler, TradeAccounts
from .models import Quote, ReserveState, TradeDirection, TradeRequest, TransactionMode
from .quote import QuoteEngine
from .trader import PumpTrader

__all__ = [
    "create_app",
    "create_app_from_config",
    "load_config",
    "ProgramConfig",
    "ServiceConfig",
    "InsufficientBalance",
    "InvalidKey",
    "InvalidParameter",
    "InvalidReserves",
    "NetworkError",
    "NotFound",
    "PumpApiError",
    "TransactionFailed",
    "UnconfirmedTransaction",
    "InstructionAssembler",
    "TradeAccounts",
    "Quote",
    "ReserveState",
    "TradeDirection",
    "TradeRequest",
    "TransactionMode",
    "QuoteEngine",
    "PumpTrader",
]
