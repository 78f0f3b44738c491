"""Constant-product pricing against the bonding curve's virtual reserves.

Buys take the fee from the SOL input before pricing; sells take it from the
SOL proceeds. Every amount that leaves this module is floored to an integer
number of lamports or raw token units, matching the on-chain program.
"""

from decimal import ROUND_FLOOR, Decimal, localcontext

from .errors import InvalidParameter, InvalidReserves
from .models import Quote, ReserveState, TradeDirection, TradeRequest

PRECISION = 60


def floor_int(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


class QuoteEngine:
    def validate(self, reserves: ReserveState, request: TradeRequest) -> None:
        if reserves.virtual_sol_reserves <= 0 or reserves.virtual_token_reserves <= 0:
            raise InvalidReserves(
                "virtual reserves must be positive "
                f"(sol={reserves.virtual_sol_reserves}, token={reserves.virtual_token_reserves})"
            )
        if not Decimal(0) <= request.slippage <= Decimal(1):
            raise InvalidParameter(f"slippage must be within [0, 1]: {request.slippage}")
        if not Decimal(0) <= request.fee_rate < Decimal(1):
            raise InvalidParameter(f"fee rate must be within [0, 1): {request.fee_rate}")
        if request.amount_in <= 0:
            raise InvalidParameter(f"amount must be positive: {request.amount_in}")
        if request.priority_fee_lamports < 0:
            raise InvalidParameter(f"priority fee must not be negative: {request.priority_fee_lamports}")

    def quote(self, reserves: ReserveState, request: TradeRequest) -> Quote:
        self.validate(reserves, request)
        if request.direction is TradeDirection.BUY:
            return self.quote_buy(reserves, request)
        return self.quote_sell(reserves, request)

    def quote_buy(self, reserves: ReserveState, request: TradeRequest) -> Quote:
        with localcontext() as ctx:
            ctx.prec = PRECISION
            fee_amount = floor_int(Decimal(request.amount_in) * request.fee_rate)
            net_in = request.amount_in - fee_amount
            # pre-trade price; reserve depletion during the swap is not simulated
            amount_out = net_in * reserves.virtual_token_reserves // reserves.virtual_sol_reserves
            max_cost = floor_int(Decimal(request.amount_in) * (1 + request.slippage))

        return Quote(
            direction=TradeDirection.BUY,
            amount_in=request.amount_in,
            amount_out=amount_out,
            bound_amount=max_cost,
            fee_amount=fee_amount,
        )

    def quote_sell(self, reserves: ReserveState, request: TradeRequest) -> Quote:
        with localcontext() as ctx:
            ctx.prec = PRECISION
            expected_out = (
                Decimal(request.amount_in) * Decimal(reserves.virtual_sol_reserves) / Decimal(reserves.virtual_token_reserves)
            )
            fee_amount = floor_int(expected_out * request.fee_rate)
            net_out = expected_out - fee_amount
            min_output = floor_int(net_out * (1 - request.slippage))

        return Quote(
            direction=TradeDirection.SELL,
            amount_in=request.amount_in,
            amount_out=floor_int(net_out),
            bound_amount=min_output,
            fee_amount=fee_amount,
        )
