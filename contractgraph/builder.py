"""
Graph construction: group transaction records into canonical transaction
nodes, then close the graph by synthesizing placeholder nodes for every input
that no loaded transaction explains.

entrypoint: build_graph
"""

from collections import OrderedDict

from bitcoin.core import CMutableTransaction, CMutableTxOut
from bitcoin.core.script import CScript

from contractgraph.loggingconfig import logger
from contractgraph.config import PLACEHOLDER_OUTPUT_VALUE, PLACEHOLDER_LABEL
from contractgraph.exceptions import GroupingInvariantError
from contractgraph.helpers.formatting import b2lx
from contractgraph.indexes import IdentifierIndex
from contractgraph.models.nodes import (
    TransactionNode,
    PlaceholderTransactionNode,
    WitnessSet,
    strip_witness,
    get_witness_stacks,
)

def group_records_by_txid(records):
    """
    Group records by the txid of their finalized transaction, keeping the
    order in which each txid was first seen.
    """
    groups = OrderedDict()
    for record in records:
        txid = b2lx(record.transaction.GetTxid())
        groups.setdefault(txid, []).append(record)
    return groups

def make_transaction_node(txid, group):
    """
    Make one canonical transaction node out of a group of alternative signings
    of the same transaction.
    """
    if len(group) == 0:
        raise GroupingInvariantError("Empty transaction group for {}".format(txid))

    witness_set = WitnessSet()
    wtxids = []
    for record in group:
        witness_set.add_variant(get_witness_stacks(record.transaction), record.psbt)
        wtxid = b2lx(record.transaction.GetHash())
        if wtxid not in wtxids:
            wtxids.append(wtxid)

    # Any member works since they only differ by witness.
    representative = group[0]
    base_transaction = strip_witness(representative.transaction)

    # The label of the last signing wins.
    label = group[-1].label

    return TransactionNode(
        base_transaction,
        witness_set=witness_set,
        wtxids=wtxids,
        label=label,
        path=representative.path,
    )

def build_transaction_nodes(records, txid_index):
    """
    Build a transaction node for every distinct txid among the records and
    register each one in the identifier index.
    """
    nodes = []
    for (txid, group) in group_records_by_txid(records).items():
        node = make_transaction_node(txid, group)
        txid_index.add(node)
        nodes.append(node)
    return nodes

def find_missing_inputs(nodes, txid_index):
    """
    Find every txid that is referenced by some input but is not in the index.

    returns an ordered dictionary of missing txid to the highest output index
    referenced
    """
    missing = OrderedDict()
    for node in nodes:
        for (txid, vout) in node.input_outpoints:
            if txid_index.has(txid):
                continue
            missing[txid] = max(vout, missing.get(txid, vout))
    return missing

def make_placeholder_node(txid, max_index):
    """
    Synthesize a transaction standing in for an unknown funding transaction.
    It has one output per referenced index, each carrying the placeholder
    amount and an empty script.
    """
    outputs = [
        CMutableTxOut(PLACEHOLDER_OUTPUT_VALUE, CScript())
        for _ in range(max_index + 1)
    ]
    body = CMutableTransaction(vin=[], vout=outputs)
    return PlaceholderTransactionNode(txid, body, label=PLACEHOLDER_LABEL)

def make_placeholder_nodes(missing, txid_index):
    placeholders = []
    for (txid, max_index) in missing.items():
        placeholder = make_placeholder_node(txid, max_index)
        logger.debug("Placeholder for {} with {} outputs".format(txid, max_index + 1))
        txid_index.add(placeholder)
        placeholders.append(placeholder)
    return placeholders

def build_graph(records):
    """
    Build the closed set of transaction nodes for a list of records: every
    input of every node resolves to a node in the returned index.

    returns (txid_index, nodes)
    """
    txid_index = IdentifierIndex()

    nodes = build_transaction_nodes(records, txid_index)
    missing = find_missing_inputs(nodes, txid_index)
    placeholders = make_placeholder_nodes(missing, txid_index)

    logger.info("Built {} transactions and {} placeholders from {} records".format(
        len(nodes), len(placeholders), len(records)))

    return (txid_index, nodes + placeholders)
