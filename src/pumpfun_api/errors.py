"""Domain errors surfaced by the quote engine, clients and HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class PumpApiError(Exception):
    """Base error carrying a human readable message and the wrapped cause."""

    message: str
    cause: Optional[BaseException] = None
    # set once a transaction has been broadcast
    signature: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - representational only
        if self.cause is not None:
            return f"{self.message} (cause={self.cause})"
        return self.message


class NotFound(PumpApiError):
    """Token, bonding curve or account is absent."""


class InvalidReserves(PumpApiError):
    """Reserve figures cannot be priced against (zero on either side)."""


class InvalidParameter(PumpApiError):
    """Slippage, fee rate, amount or address out of range."""


class InvalidKey(PumpApiError):
    """Secret key material could not be decoded."""


class InsufficientBalance(PumpApiError):
    """Payer account has no funds."""


class NetworkError(PumpApiError):
    """Upstream fetch or broadcast failed."""


class TransactionFailed(PumpApiError):
    """Transaction landed but the program rejected it."""


class UnconfirmedTransaction(PumpApiError):
    """Submitted transaction did not confirm in time; it may still land."""
