"""
Helpers for building contract data out of real serialized transactions.
"""

import base64

from bitcoin.core import (
    CTransaction,
    CTxIn,
    CTxOut,
    COutPoint,
    CTxWitness,
    CTxInWitness,
    CScriptWitness,
    b2x,
    b2lx,
    lx,
)
from bitcoin.core.script import CScript, OP_TRUE

FUNDING_TXID = "aa" * 32
OTHER_FUNDING_TXID = "bb" * 32

PSBT = base64.b64encode(b"psbt\xff" + b"\x00").decode("ascii")

ANYONE_CAN_SPEND = CScript([OP_TRUE])

def make_transaction(inputs, outputs, locktime=0, witnesses=None):
    """
    Make a transaction.

    inputs: list of (txid hex, vout, nSequence)
    outputs: list of amounts (all paying to OP_TRUE)
    witnesses: optional list of witness stacks, one per input
    """
    vin = [
        CTxIn(COutPoint(lx(txid), vout), nSequence=sequence)
        for (txid, vout, sequence) in inputs
    ]
    vout = [CTxOut(amount, ANYONE_CAN_SPEND) for amount in outputs]

    if witnesses is None:
        witness = CTxWitness()
    else:
        witness = CTxWitness([CTxInWitness(CScriptWitness(stack)) for stack in witnesses])

    return CTransaction(vin, vout, locktime, 2, witness)

def txid_of(transaction):
    return b2lx(transaction.GetTxid())

def make_tx_entry(transaction, label=None, psbt=PSBT):
    metadata = {"color": "orange"}
    if label is not None:
        metadata["label"] = label
    return {
        "linked_psbt": {
            "psbt": psbt,
            "hex": b2x(transaction.serialize()),
            "metadata": metadata,
            "output_metadata": [None] * len(transaction.vout),
        },
    }

def make_contract_data(paths):
    """
    Make contract data from a dictionary of path name to a list of
    (transaction, label) tuples.
    """
    program = {}
    for (name, transactions) in paths.items():
        program[name] = {
            "out": name,
            "continue_apis": {"next": {"path": name}},
            "metadata": {"label": name},
            "txs": [make_tx_entry(transaction, label=label) for (transaction, label) in transactions],
        }
    return {"program": program}

def make_simple_contract():
    """
    The usual small contract:

        placeholder (FUNDING_TXID) -> A -> output 0 -> B (10 block relative lock)
                                         -> output 1 (unspent)

    returns (data, transaction_a, transaction_b)
    """
    transaction_a = make_transaction(
        [(FUNDING_TXID, 0, 0xffffffff)],
        [1000, 2000],
        witnesses=[[b"\x01", b"\x51" * 32]],
    )
    transaction_b = make_transaction(
        [(txid_of(transaction_a), 0, 10)],
        [900],
        witnesses=[[b"\x02"]],
    )
    data = make_contract_data({
        "start": [(transaction_a, "start")],
        "timeout": [(transaction_b, "timeout")],
    })
    return (data, transaction_a, transaction_b)
