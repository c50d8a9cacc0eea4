# pip3 install graphviz
from graphviz import Digraph

def generate_graphviz(contract, output_filename="output.gv", unreachable=None, view=False):
    """
    Generate a graphviz dotfile, which can be used to create a
    pictorial/graphical representation of the contract graph.

    legend:
        squares: transactions (dashed for placeholders, grey if unreachable)
        circles: outputs because coins are circular
    """
    unreachable_txids = set(node.txid for node in (unreachable or []))

    diagram = Digraph("contract", filename=output_filename)

    diagram.attr("node", shape="square")
    for transaction in contract.txn_nodes:
        attrs = {}
        if transaction.is_placeholder:
            attrs["style"] = "dashed"
        if transaction.txid in unreachable_txids:
            attrs["color"] = "grey"
            attrs["fontcolor"] = "grey"
        label = "{}\n{}".format(transaction.label or "", transaction.txid[:16])
        diagram.node(transaction.txid, label, **attrs)

    diagram.attr("node", shape="circle")
    for utxo in contract.utxo_nodes:
        utxo_id = "{}-{}".format(utxo.txid, utxo.index)
        diagram.node(utxo_id, "{}\n{}".format(utxo.index, utxo.amount))

        diagram.edge(utxo.txid, utxo_id)

        for spender in utxo.spenders:
            diagram.edge(utxo_id, spender.txid)

    if view:
        diagram.view()

    return diagram
