from dataclasses import dataclass
from typing import List, Tuple

from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.system_program import TransferParams, transfer
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID
from spl.token.instructions import create_associated_token_account, get_associated_token_address

from .config import ProgramConfig
from .errors import InvalidParameter
from .models import Quote, ReserveState, TradeDirection

RENT_SYSVAR_ID = Pubkey.from_string("SysvarRent111111111111111111111111111111111")

BUY_DISCRIMINATOR = 16927863322537952870
SELL_DISCRIMINATOR = 12502976635542562355

U64_MAX = 2**64 - 1

InstructionSet = Tuple[Instruction, ...]


def encode_u64(value: int) -> bytes:
    if not 0 <= value <= U64_MAX:
        raise InvalidParameter(f"value does not fit in u64: {value}")
    return int(value).to_bytes(8, "little", signed=False)


def swap_data(discriminator: int, amount: int, bound: int) -> bytes:
    return encode_u64(discriminator) + encode_u64(amount) + encode_u64(bound)


def _parse_pubkey(name: str, value: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except ValueError as exc:
        raise InvalidParameter(f"{name} is not a valid public key: {value!r}", cause=exc) from exc


@dataclass(frozen=True)
class TradeAccounts:
    """Addresses a single swap touches besides the program-wide ones."""

    owner: Pubkey
    mint: Pubkey
    bonding_curve: Pubkey
    associated_bonding_curve: Pubkey
    token_account: Pubkey

    @classmethod
    def resolve(cls, owner: Pubkey, mint: str, reserves: ReserveState) -> "TradeAccounts":
        mint_key = _parse_pubkey("mint", mint)
        return cls(
            owner=owner,
            mint=mint_key,
            bonding_curve=_parse_pubkey("bonding_curve", reserves.bonding_curve),
            associated_bonding_curve=_parse_pubkey("associated_bonding_curve", reserves.associated_bonding_curve),
            token_account=get_associated_token_address(owner, mint_key),
        )


class InstructionAssembler:
    def __init__(self, config: ProgramConfig) -> None:
        self.config = config
        self.global_account = _parse_pubkey("global_account", config.global_account)
        self.fee_recipient = _parse_pubkey("fee_recipient", config.fee_recipient)
        self.program_id = _parse_pubkey("program_id", config.program_id)
        self.event_authority = _parse_pubkey("event_authority", config.event_authority)
        self.fee_collection = _parse_pubkey("fee_collection_address", config.fee_collection_address)

    def compute_budget(self, priority_fee_lamports: int) -> List[Instruction]:
        instructions = [set_compute_unit_limit(self.config.compute_unit_limit)]
        if priority_fee_lamports > 0:
            # the priority fee in lamports is used directly as the micro-lamport unit price
            instructions.append(set_compute_unit_price(priority_fee_lamports))
        return instructions

    def fee_transfer(self, accounts: TradeAccounts, lamports: int) -> Instruction:
        return transfer(TransferParams(from_pubkey=accounts.owner, to_pubkey=self.fee_collection, lamports=lamports))

    def buy_instruction(self, accounts: TradeAccounts, quote: Quote) -> Instruction:
        keys = [
            AccountMeta(self.global_account, is_signer=False, is_writable=False),
            AccountMeta(self.fee_recipient, is_signer=False, is_writable=True),
            AccountMeta(accounts.mint, is_signer=False, is_writable=False),
            AccountMeta(accounts.bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(accounts.associated_bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(accounts.token_account, is_signer=False, is_writable=True),
            AccountMeta(accounts.owner, is_signer=True, is_writable=True),
            AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(RENT_SYSVAR_ID, is_signer=False, is_writable=False),
            AccountMeta(self.event_authority, is_signer=False, is_writable=False),
            AccountMeta(self.program_id, is_signer=False, is_writable=False),
        ]
        data = swap_data(BUY_DISCRIMINATOR, quote.amount_out, quote.bound_amount)
        return Instruction(self.program_id, data, keys)

    def sell_instruction(self, accounts: TradeAccounts, quote: Quote) -> Instruction:
        keys = [
            AccountMeta(self.global_account, is_signer=False, is_writable=False),
            AccountMeta(self.fee_recipient, is_signer=False, is_writable=True),
            AccountMeta(accounts.mint, is_signer=False, is_writable=False),
            AccountMeta(accounts.bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(accounts.associated_bonding_curve, is_signer=False, is_writable=True),
            AccountMeta(accounts.token_account, is_signer=False, is_writable=True),
            AccountMeta(accounts.owner, is_signer=True, is_writable=True),
            AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(self.event_authority, is_signer=False, is_writable=False),
            AccountMeta(self.program_id, is_signer=False, is_writable=False),
            AccountMeta(self.fee_collection, is_signer=False, is_writable=True),
        ]
        data = swap_data(SELL_DISCRIMINATOR, quote.amount_in, quote.bound_amount)
        return Instruction(self.program_id, data, keys)

    def assemble(
        self,
        quote: Quote,
        accounts: TradeAccounts,
        token_account_exists: bool,
        priority_fee_lamports: int = 0,
    ) -> InstructionSet:
        """Build the full ordered instruction list for one swap.

        Compute budget comes first, then the token account creation when the
        trader has none yet. The fee transfer precedes the swap for buys and
        follows it for sells.
        """
        if priority_fee_lamports < 0:
            raise InvalidParameter(f"priority fee must not be negative: {priority_fee_lamports}")

        instructions = self.compute_budget(priority_fee_lamports)
        if not token_account_exists:
            instructions.append(create_associated_token_account(accounts.owner, accounts.owner, accounts.mint))

        if quote.direction is TradeDirection.BUY:
            instructions.append(self.fee_transfer(accounts, quote.fee_amount))
            instructions.append(self.buy_instruction(accounts, quote))
        else:
            instructions.append(self.sell_instruction(accounts, quote))
            instructions.append(self.fee_transfer(accounts, quote.fee_amount))
        return tuple(instructions)
