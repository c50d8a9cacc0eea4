"""
Querying bitcoind for the confirmation status of contract transactions. This
is the only place that does network I/O; the graph engine never calls it.
"""

import bitcoin.rpc

from contractgraph.loggingconfig import logger
from contractgraph.config import CONFIRMATION_THRESHOLD
from contractgraph.helpers.formatting import txid_to_hex
from contractgraph.state import get_broadcastable

def get_bitcoin_rpc_connection():
    """
    Establish an RPC connection.
    """
    # by default uses ~/.bitcoin/bitcoin.conf so be careful.
    btcproxy = bitcoin.rpc.Proxy()

    # sanity check
    assert btcproxy._call("getblockchaininfo")["chain"] == "regtest"

    return btcproxy

def check_blockchain_has_transaction(txid, connection=None, threshold=CONFIRMATION_THRESHOLD):
    """
    Check whether a given transaction id (txid) is present in the bitcoin
    blockchain with at least `threshold` confirmations.
    """
    if connection is None:
        connection = get_bitcoin_rpc_connection()

    txid = txid_to_hex(txid)

    try:
        rawtransaction = connection._call("getrawtransaction", txid, True)
    except bitcoin.rpc.InvalidAddressOrKeyError:
        return False

    return rawtransaction.get("confirmations", 0) >= threshold

def get_confirmed_transactions(contract, connection=None, candidates=None, threshold=CONFIRMATION_THRESHOLD):
    """
    Get the txids of the contract transactions confirmed in the blockchain.
    Only candidates are checked; by default the candidates are the
    transactions that would be broadcastable if nothing were confirmed yet,
    which are the funding placeholders.
    """
    if not contract.should_update():
        return []

    if connection is None:
        connection = get_bitcoin_rpc_connection()

    if candidates is None:
        candidates = sorted(get_broadcastable(contract, set()))

    confirmed = []
    for txid in candidates:
        if check_blockchain_has_transaction(txid, connection=connection, threshold=threshold):
            confirmed.append(txid)

    logger.info("{} of {} candidate transactions confirmed".format(len(confirmed), len(candidates)))

    return confirmed

def get_contract_status(contract, connection=None, threshold=CONFIRMATION_THRESHOLD):
    """
    Check the blockchain until no more confirmed transactions are found, then
    report which transactions are confirmed and which can be broadcast.

    returns {"confirmed": set, "broadcastable": set}
    """
    if connection is None:
        connection = get_bitcoin_rpc_connection()

    confirmed = set()
    candidates = None
    while True:
        newly_confirmed = set(get_confirmed_transactions(contract, connection=connection, candidates=candidates, threshold=threshold))
        newly_confirmed -= confirmed
        if len(newly_confirmed) == 0:
            break
        confirmed |= newly_confirmed
        candidates = sorted(get_broadcastable(contract, confirmed))

    return {
        "confirmed": confirmed,
        "broadcastable": get_broadcastable(contract, confirmed),
    }
