import logging
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, Dict, Union

from .config import ProgramConfig
from .errors import InsufficientBalance, InvalidParameter
from .instructions import InstructionAssembler, InstructionSet, TradeAccounts
from .keys import keypair_from_base58
from .models import Quote, TradeDirection, TradeRequest, TransactionMode
from .price_client import PumpPriceClient
from .quote import QuoteEngine
from .submitter import RpcSubmitter

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_SLIPPAGE = Decimal("0.25")

SubmitResult = Union[str, Dict[str, Any]]


def to_decimal(name: str, value: Any) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidParameter(f"{name} is not a number: {value!r}") from None
    if not result.is_finite():
        raise InvalidParameter(f"{name} must be finite: {value!r}")
    return result


def sol_to_lamports(name: str, sol: Any) -> int:
    lamports = to_decimal(name, sol) * LAMPORTS_PER_SOL
    return int(lamports.to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class TradePlan:
    quote: Quote
    instructions: InstructionSet


class PumpTrader:
    """Runs a buy or sell end to end: reserves, quote, instructions, submission."""

    def __init__(
        self,
        program_config: ProgramConfig,
        price_client: PumpPriceClient,
        submitter: RpcSubmitter,
        mode: TransactionMode = TransactionMode.EXECUTE,
    ) -> None:
        self.program_config = program_config
        self.price_client = price_client
        self.submitter = submitter
        self.mode = mode
        self.engine = QuoteEngine()
        self.assembler = InstructionAssembler(program_config)

    def buy(self, private_key: str, mint: str, sol_in: Any, priority_fee_sol: Any = 0, slippage: Any = DEFAULT_SLIPPAGE) -> SubmitResult:
        return self.trade(TradeDirection.BUY, private_key, mint, sol_to_lamports("solIn", sol_in), priority_fee_sol, slippage)

    def sell(self, private_key: str, mint: str, token_balance: Any, priority_fee_sol: Any = 0, slippage: Any = DEFAULT_SLIPPAGE) -> SubmitResult:
        amount = to_decimal("tokenBalance", token_balance)
        if amount != amount.to_integral_value():
            raise InvalidParameter(f"tokenBalance must be a whole number of raw token units: {token_balance!r}")
        return self.trade(TradeDirection.SELL, private_key, mint, int(amount), priority_fee_sol, slippage)

    def trade(
        self,
        direction: TradeDirection,
        private_key: str,
        mint: str,
        amount_in: int,
        priority_fee_sol: Any,
        slippage: Any,
    ) -> SubmitResult:
        reserves = self.price_client.fetch_reserves(mint)
        payer = keypair_from_base58(private_key)
        owner = payer.pubkey()

        balance = self.submitter.get_balance(owner)
        if balance == 0:
            raise InsufficientBalance(f"account {owner} has no SOL balance, fund it before trading")
        logger.info("payer %s balance: %s SOL", owner, Decimal(balance) / LAMPORTS_PER_SOL)

        request = TradeRequest(
            direction=direction,
            amount_in=amount_in,
            fee_rate=self.program_config.fee_rate,
            slippage=to_decimal("slippageDecimal", DEFAULT_SLIPPAGE if slippage is None else slippage),
            priority_fee_lamports=sol_to_lamports("priorityFeeInSol", priority_fee_sol or 0),
        )
        accounts = TradeAccounts.resolve(owner, mint, reserves)
        token_account_exists = self.submitter.account_exists(accounts.token_account)
        plan = self.plan(reserves, request, accounts, token_account_exists)

        result = self.submitter.submit(plan.instructions, payer, self.mode)
        if self.mode is TransactionMode.EXECUTE:
            logger.info("%s transaction confirmed: %s", direction.value, result)
        return result

    def plan(self, reserves, request: TradeRequest, accounts: TradeAccounts, token_account_exists: bool) -> TradePlan:
        quote = self.engine.quote(reserves, request)
        logger.info(
            "%s quote: in=%d out=%d bound=%d fee=%d",
            quote.direction.value,
            quote.amount_in,
            quote.amount_out,
            quote.bound_amount,
            quote.fee_amount,
        )
        instructions = self.assembler.assemble(quote, accounts, token_account_exists, request.priority_fee_lamports)
        return TradePlan(quote=quote, instructions=instructions)
