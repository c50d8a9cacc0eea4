"""
Reading contract data: the per-program-path lists of alternative signings
produced by the contract compiler, turned into flat transaction records for
the graph builder.
"""

import os
import json
import base64
import binascii
from collections import namedtuple

from bitcoin.core import CTransaction
from bitcoin.core.serialize import SerializationError

from contractgraph.loggingconfig import logger
from contractgraph.config import (
    CONTRACT_FILENAME,
    PSBT_MAGIC,
    DEFAULT_TRANSACTION_LABEL,
    MAX_OUTPUTS_PER_TRANSACTION,
)
from contractgraph.exceptions import MalformedTransactionError, GroupingInvariantError
from contractgraph.helpers.formatting import x, outpoint_to_key, format_outpoint

TransactionRecord = namedtuple("TransactionRecord", ["path", "psbt", "transaction", "label"])

def parse_transaction(hex_transaction):
    """
    Deserialize a finalized transaction from hex.
    """
    try:
        return CTransaction.deserialize(x(hex_transaction))
    except (SerializationError, binascii.Error, ValueError, TypeError) as exc:
        raise MalformedTransactionError("Can't parse transaction: {}".format(exc)) from exc

def parse_psbt(base64_psbt):
    """
    Decode a base64 partially signed transaction. Only the envelope is
    checked; the contents are kept as an opaque signing artifact.
    """
    try:
        psbt = base64.b64decode(base64_psbt, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise MalformedTransactionError("Can't decode psbt: {}".format(exc)) from exc

    if not psbt.startswith(PSBT_MAGIC):
        raise MalformedTransactionError("psbt is missing the magic bytes")

    return psbt

def preprocess_data(data):
    """
    Flatten contract data into a list of TransactionRecord objects.

    returns (records, continuations, object_metadata) where the last two are
    passed through from the program entries, keyed by each entry's "out".
    """
    records = []
    continuations = {}
    object_metadata = {}

    try:
        program = data["program"]
    except (KeyError, TypeError) as exc:
        raise MalformedTransactionError("Contract data has no program") from exc

    for (path, entry) in program.items():
        try:
            out = entry["out"]
            txs = entry["txs"]
        except (KeyError, TypeError) as exc:
            raise MalformedTransactionError("Malformed program entry {}".format(path)) from exc

        continuations[out] = entry.get("continue_apis", {})
        object_metadata[out] = entry.get("metadata", {})

        # Every signing in a path is an alternative way of spending one coin.
        spent_outpoint = None

        for tx in txs:
            try:
                linked_psbt = tx["linked_psbt"]
                hex_transaction = linked_psbt["hex"]
                base64_psbt = linked_psbt["psbt"]
            except (KeyError, TypeError) as exc:
                raise MalformedTransactionError("Malformed transaction entry in {}".format(path)) from exc

            transaction = parse_transaction(hex_transaction)
            psbt = parse_psbt(base64_psbt)

            if len(transaction.vin) == 0:
                raise MalformedTransactionError("Transaction in {} has no inputs".format(path))

            for txin in transaction.vin:
                if txin.prevout.n >= MAX_OUTPUTS_PER_TRANSACTION:
                    raise MalformedTransactionError("Transaction in {} spends impossible output {}".format(
                        path, format_outpoint(*outpoint_to_key(txin.prevout))))

            outpoint = outpoint_to_key(transaction.vin[0].prevout)
            if spent_outpoint is None:
                spent_outpoint = outpoint
            elif outpoint != spent_outpoint:
                raise GroupingInvariantError(
                    "All transactions in path {} should spend the same coin ({} != {})".format(
                        path, format_outpoint(*spent_outpoint), format_outpoint(*outpoint)))

            metadata = linked_psbt.get("metadata") or {}
            label = metadata.get("label") or DEFAULT_TRANSACTION_LABEL

            records.append(TransactionRecord(path, psbt, transaction, label))

    logger.debug("Read {} transaction records from {} program paths".format(len(records), len(program)))

    return (records, continuations, object_metadata)

def load(path=None, contract_filename=CONTRACT_FILENAME):
    """
    Read and decode a contract data file.
    """
    if path is None:
        path = os.path.join(os.getcwd(), contract_filename)
    with open(path, "r") as fd:
        data = json.loads(fd.read())
    logger.info(f"Loaded contract data from {path}")
    return data
