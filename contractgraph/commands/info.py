"""
get_info - A function for displaying information about a contract: its
transactions, their timelocks and outputs, and the placeholders standing in
for coins funded from outside of the contract.
"""

from contractgraph.helpers.formatting import format_outpoint

def render_output(utxo, depth=0):
    """
    Describe an output node, in text.
    """
    prefix = "\t" * depth

    output_text  = prefix + "Output {}:\n".format(utxo.index)
    output_text += prefix + "\tamount: {}\n".format(utxo.amount)
    output_text += prefix + "\tscript: {}\n".format(utxo.script.hex())

    for link in utxo.spend_links:
        output_text += prefix + "\tspent by: {} (input {})\n".format(link.spender.txid, link.input_index)

    return output_text

def render_transaction(node, contract, depth=0):
    """
    Render a transaction node into text for use in the get_info command.
    """
    prefix = "\t" * depth
    timing = contract.compute_timing(node)

    output_text  = prefix + "Transaction:\n"
    output_text += prefix + "\tlabel: {}\n".format(node.label)
    output_text += prefix + "\ttxid: {}\n".format(node.txid)
    if node.is_placeholder:
        output_text += prefix + "\tplaceholder: yes\n"
    else:
        output_text += prefix + "\tsignature variants: {}\n".format(len(node.witness_set))
    output_text += prefix + "\tnum inputs: {}\n".format(len(node.inputs))
    output_text += prefix + "\tnum outputs: {}\n".format(len(node.outputs))

    if timing.unlock_height:
        output_text += prefix + "\tabsolute lock: block #{}\n".format(timing.unlock_height)
    if timing.unlock_time:
        output_text += prefix + "\tabsolute lock: time {}\n".format(timing.unlock_time)
    if timing.unlock_at_relative_height:
        output_text += prefix + "\trelative lock: {} blocks\n".format(timing.unlock_at_relative_height)
    if timing.unlock_at_relative_time:
        output_text += prefix + "\trelative lock: {} seconds\n".format(timing.unlock_at_relative_time)

    for (idx, (txid, vout)) in enumerate(node.input_outpoints):
        output_text += prefix + "\tinput {}: {}\n".format(idx, format_outpoint(txid, vout))

    visible = set(contract.utxo_nodes)
    for utxo in node.utxos:
        if utxo in visible:
            output_text += render_output(utxo, depth=depth+1)

    return output_text

def get_info(contract):
    """
    Render information about every transaction of a loaded contract.
    """
    placeholders = contract.placeholder_nodes

    output_text  = "Contract:\n"
    output_text += "\ttransactions: {}\n".format(len(contract.txn_nodes) - len(placeholders))
    output_text += "\tplaceholders: {}\n".format(len(placeholders))
    output_text += "\toutputs: {}\n".format(len(contract.utxo_nodes))
    output_text += "\n"

    for node in contract.txn_nodes:
        output_text += render_transaction(node, contract, depth=1)
        output_text += "\n"

    return output_text
