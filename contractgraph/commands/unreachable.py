"""
get_unreachable - List the transactions of a contract that can't be valid
by some future time and height.
"""

from contractgraph.loggingconfig import logger

def get_unreachable(contract, max_time, max_height, start_time=0, start_height=0):
    """
    Render the unreachable transactions as text, one per line, sorted by txid.
    """
    unreachable = contract.unreachable_within(max_time, max_height, start_time=start_time, start_height=start_height)
    logger.info("{} of {} transactions unreachable".format(len(unreachable), len(contract.txn_nodes)))

    lines = []
    for node in sorted(unreachable, key=lambda node: node.txid):
        lines.append("{} {}".format(node.txid, node.label))

    return "\n".join(lines)
