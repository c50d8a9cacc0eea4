"""
Materialize the outputs (UTXOs) of every transaction node and connect each
output to the transactions spending it.

entrypoint: link_utxo_nodes
"""

from contractgraph.loggingconfig import logger
from contractgraph.exceptions import MissingSpenderError
from contractgraph.helpers.formatting import b2x, format_outpoint
from contractgraph.models.nodes import UTXONode
from contractgraph.utils import make_segwit_v0_script, total_output_value

def infer_placeholder_output(utxo, spenders):
    """
    Guess the script and amount of a placeholder output from the transactions
    spending it. This is a visualization heuristic: before the funding
    transaction exists, its real script and amount are unknown.

    The script is built from the last witness stack element of the first
    signature variant of the first spender. The amount is the largest total
    output value of any spender, an upper bound on what the spenders need.
    """
    first_spender = spenders[0]
    if len(first_spender.witness_set) == 0:
        return False

    input_index = first_spender.find_input(utxo.txid, utxo.index)
    if input_index is None:
        return False

    stack = first_spender.witness_set.stack(0, input_index)
    if not stack:
        return False

    program = stack[-1]
    script = make_segwit_v0_script(program)
    amount = max(total_output_value(spender.bitcoin_transaction) for spender in spenders)

    txout = utxo.transaction.outputs[utxo.index]
    txout.scriptPubKey = script
    txout.nValue = amount

    logger.debug("Inferred {} for placeholder output {} (amount {})".format(
        b2x(script), format_outpoint(utxo.txid, utxo.index), amount))

    return True

def link_spenders(utxo, spenders):
    """
    Make the bidirectional links between an output and each of its spenders.
    """
    for (spend_index, spender) in enumerate(spenders):
        input_index = spender.find_input(utxo.txid, utxo.index)
        if input_index is None:
            raise MissingSpenderError("{} does not spend {}".format(
                spender.txid, format_outpoint(utxo.txid, utxo.index)))

        link = utxo.spent_by(spender, spend_index, input_index)
        spender.input_links.append(link)

def link_utxo_nodes(nodes, spend_index):
    """
    Create an output node for every output of every transaction node, link
    outputs to their spenders, and return the list of outputs worth showing.
    Placeholder outputs that nothing spends are left out of that list; they
    are only padding in the synthetic placeholder body.
    """
    visible = []

    for node in nodes:
        node.utxos = [UTXONode(node, index) for index in range(len(node.outputs))]

        for utxo in node.utxos:
            spenders = spend_index.get(node.txid, utxo.index) or []

            if node.is_placeholder:
                if len(spenders) == 0:
                    continue
                infer_placeholder_output(utxo, spenders)

            visible.append(utxo)
            link_spenders(utxo, spenders)

    logger.debug("Linked {} outputs ({} visible)".format(
        sum(len(node.utxos) for node in nodes), len(visible)))

    return visible
