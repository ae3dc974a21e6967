"""Assemble, sign and submit a transaction; one attempt, one outcome."""

import logging
import time
from typing import List, Sequence

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from . import rpc
from .config import CONFIRM_POLL_INTERVAL
from .errors import RpcError, SubmissionError

logger = logging.getLogger(__name__)

CONFIRMED_STATUSES = ("confirmed", "finalized")


def required_signers(instructions: Sequence[Instruction], fee_payer: Pubkey) -> List[Pubkey]:
    """Fee payer first, then every account flagged as signer, in order of appearance."""
    signers = [fee_payer]
    for ix in instructions:
        for meta in ix.accounts:
            if meta.is_signer and meta.pubkey not in signers:
                signers.append(meta.pubkey)
    return signers


def build_transaction(
    instructions: Sequence[Instruction],
    fee_payer: Keypair,
    signers: Sequence[Keypair],
    recent_blockhash: Hash,
) -> Transaction:
    """
    Sign a legacy transaction.

    Raises SubmissionError if any required signature has no keypair;
    keypairs that are not required are ignored.
    """
    available = {}
    for keypair in [fee_payer, *signers]:
        available.setdefault(keypair.pubkey(), keypair)

    required = required_signers(instructions, fee_payer.pubkey())
    missing = [str(pubkey) for pubkey in required if pubkey not in available]
    if missing:
        raise SubmissionError(f"Missing signature for required signer(s): {', '.join(missing)}")

    message = Message(list(instructions), fee_payer.pubkey())
    return Transaction([available[pubkey] for pubkey in required], message, recent_blockhash)


def _rpc_failure_message(error: RpcError) -> str:
    data = error.data if isinstance(error.data, dict) else {}
    if data.get("err") is not None:
        return f"{error.detail} ({data['err']})"
    return str(error.detail)


def confirm_transaction(
    endpoint: str,
    signature: str,
    last_valid_block_height: int,
    poll_interval: float = CONFIRM_POLL_INTERVAL,
) -> None:
    """Wait until the signature is confirmed, fails, or its blockhash expires."""
    while True:
        status = rpc.get_signature_statuses(endpoint, [signature])[0]
        if status:
            if status.get("err") is not None:
                raise SubmissionError(
                    f"Transaction {signature} failed: {status['err']}", signature=signature
                )
            if status.get("confirmationStatus") in CONFIRMED_STATUSES:
                logger.info(f"Transaction {signature} {status['confirmationStatus']}")
                return

        if rpc.get_block_height(endpoint) > last_valid_block_height:
            raise SubmissionError(
                f"Transaction {signature} was not confirmed before its blockhash expired",
                signature=signature,
            )
        time.sleep(poll_interval)


def submit(
    endpoint: str,
    instructions: Sequence[Instruction],
    fee_payer: Keypair,
    signers: Sequence[Keypair] = (),
    poll_interval: float = CONFIRM_POLL_INTERVAL,
) -> str:
    """
    Build, sign, send and confirm a transaction; returns its signature.

    Never resends: a failed or unconfirmed transaction may still have
    landed, so the caller decides what to do next.
    """
    try:
        blockhash, last_valid_block_height = rpc.get_latest_blockhash(endpoint)
    except RpcError as e:
        raise SubmissionError(f"Could not fetch a recent blockhash: {e.detail}") from e

    tx = build_transaction(instructions, fee_payer, signers, blockhash)
    signature = str(tx.signatures[0])
    logger.info(f"Sending transaction {signature} ({len(instructions)} instructions)")

    try:
        rpc.send_transaction(endpoint, bytes(tx))
    except RpcError as e:
        logs = e.data.get("logs") if isinstance(e.data, dict) else None
        for line in logs or []:
            logger.info(f"  {line}")
        raise SubmissionError(
            f"Transaction rejected: {_rpc_failure_message(e)}", signature=signature, logs=logs
        ) from e

    try:
        confirm_transaction(endpoint, signature, last_valid_block_height, poll_interval)
    except RpcError as e:
        raise SubmissionError(
            f"Could not confirm transaction {signature}: {e.detail}", signature=signature
        ) from e
    return signature
