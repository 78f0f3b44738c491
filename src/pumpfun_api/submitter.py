import logging
from typing import Any, Dict, Sequence, Union

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment, Processed
from solana.rpc.core import RPCException, UnconfirmedTxError
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from .errors import NetworkError, TransactionFailed, UnconfirmedTransaction
from .models import TransactionMode

logger = logging.getLogger(__name__)

RPC_ERRORS = (SolanaRpcException, RPCException)


class RpcSubmitter:
    """Signs and submits instruction lists through a Solana JSON-RPC node.

    Sends are never retried here: a blind resend of a funds-moving
    transaction can land twice.
    """

    def __init__(self, endpoint: str, commitment: str = "confirmed", timeout: float = 10.0) -> None:
        self.commitment = Commitment(commitment)
        self.client = Client(endpoint, commitment=self.commitment, timeout=timeout)

    def account_exists(self, pubkey: Pubkey) -> bool:
        try:
            return self.client.get_account_info(pubkey).value is not None
        except RPC_ERRORS as exc:
            raise NetworkError(f"account lookup failed for {pubkey}", cause=exc) from exc

    def get_balance(self, pubkey: Pubkey) -> int:
        try:
            return int(self.client.get_balance(pubkey).value)
        except RPC_ERRORS as exc:
            raise NetworkError(f"balance lookup failed for {pubkey}", cause=exc) from exc

    def build_transaction(self, instructions: Sequence[Instruction], payer: Keypair) -> Transaction:
        try:
            blockhash = self.client.get_latest_blockhash().value.blockhash
        except RPC_ERRORS as exc:
            raise NetworkError("failed to fetch latest blockhash", cause=exc) from exc
        message = Message.new_with_blockhash(list(instructions), payer.pubkey(), blockhash)
        return Transaction([payer], message, blockhash)

    def submit(
        self, instructions: Sequence[Instruction], payer: Keypair, mode: TransactionMode
    ) -> Union[str, Dict[str, Any]]:
        transaction = self.build_transaction(instructions, payer)
        if mode is TransactionMode.SIMULATE:
            return self.simulate(transaction)
        return self.execute(transaction)

    def execute(self, transaction: Transaction) -> str:
        opts = TxOpts(skip_preflight=True, preflight_commitment=Processed)
        try:
            signature = self.client.send_transaction(transaction, opts=opts).value
        except RPC_ERRORS as exc:
            raise NetworkError("transaction broadcast failed", cause=exc) from exc

        logger.info("transaction sent: %s", signature)
        try:
            statuses = self.client.confirm_transaction(signature, commitment=self.commitment).value
        except UnconfirmedTxError as exc:
            raise UnconfirmedTransaction(
                f"transaction {signature} was not confirmed; it may still land", cause=exc, signature=str(signature)
            ) from exc
        except RPC_ERRORS as exc:
            raise NetworkError(f"confirmation of {signature} failed", cause=exc, signature=str(signature)) from exc

        # confirmation only waits for the commitment level; a landed transaction can still carry an error
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise TransactionFailed(f"transaction {signature} failed on-chain: {status.err}", signature=str(signature))
        return str(signature)

    def simulate(self, transaction: Transaction) -> Dict[str, Any]:
        try:
            result = self.client.simulate_transaction(transaction).value
        except RPC_ERRORS as exc:
            raise NetworkError("transaction simulation failed", cause=exc) from exc
        report = {
            "err": None if result.err is None else str(result.err),
            "logs": list(result.logs or []),
            "unitsConsumed": result.units_consumed,
        }
        logger.info("simulation finished: err=%s units=%s", report["err"], report["unitsConsumed"])
        return report
