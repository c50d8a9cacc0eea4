"""
get_status - Check the blockchain for confirmed contract transactions and
list which transactions could be broadcast next.
"""

from contractgraph.config import CONFIRMATION_THRESHOLD
from contractgraph.rpc import get_contract_status

def get_status(contract, connection=None, threshold=CONFIRMATION_THRESHOLD):
    """
    Render the confirmed and broadcastable transactions of a contract.
    """
    status = get_contract_status(contract, connection=connection, threshold=threshold)

    output_text = "Confirmed transactions:\n"
    for txid in sorted(status["confirmed"]):
        output_text += "\t{}\n".format(txid)

    output_text += "\nBroadcastable transactions:\n"
    for txid in sorted(status["broadcastable"]):
        node = contract.get_transaction(txid)
        output_text += "\t{} {}\n".format(txid, node.label)

    return output_text
