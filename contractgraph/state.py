"""
Functions for deciding which transactions of a contract could be broadcast
right now, given which transactions are already confirmed. Only the node list
and input txids of the contract are used; the confirmations come from
bitcoind (see rpc.get_confirmed_transactions).
"""

def is_broadcastable(node, contract, confirmed_txids):
    """
    A transaction can be broadcast when it isn't confirmed yet and either all
    of its inputs come from outside of the contract, or all of its inputs are
    confirmed.
    """
    if node.txid in confirmed_txids:
        return False

    parent_txids = node.parent_txids

    inputs_not_local = all(not contract.txid_index.has(txid) for txid in parent_txids)
    if inputs_not_local:
        return True

    return all(txid in confirmed_txids for txid in parent_txids)

def get_broadcastable(contract, confirmed_txids):
    """
    Get the set of txids of every transaction in the contract that could be
    broadcast next.
    """
    confirmed_txids = set(confirmed_txids)
    return set(
        node.txid for node in contract.txn_nodes
        if is_broadcastable(node, contract, confirmed_txids)
    )
