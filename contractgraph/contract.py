"""
The loaded contract: every transaction and output of one contract, the
indices over them, and the timing cache used by reachability queries.

Nothing here is shared between contracts. Reloading a contract means building
a new ContractGraph.
"""

import random

from contractgraph.loggingconfig import logger
from contractgraph.helpers.formatting import txid_to_hex
from contractgraph.indexes import IdentifierIndex, OutpointSpendIndex
from contractgraph.contractfile import preprocess_data, load
from contractgraph.builder import build_graph
from contractgraph.linker import link_utxo_nodes
from contractgraph import timing

class ContractGraph(object):
    """
    Represents a contract: the graph of candidate transactions produced by
    expanding a contract program, linked through the outputs they create and
    spend.

    Build it from contract data (see contractfile.preprocess_data for the
    format). Without data the contract is empty.
    """

    def __init__(self, data=None, rng=None):
        self.txn_nodes = []
        self.utxo_nodes = []
        self.txid_index = IdentifierIndex()
        self.spend_index = OutpointSpendIndex()
        self.timing_cache = timing.TimingCache()
        self.continuations = {}
        self.object_metadata = {}

        # Only picks which partial results get merged first.
        self.rng = rng if rng is not None else random

        self.checkable = data is not None
        if data is None:
            return

        (records, continuations, object_metadata) = preprocess_data(data)

        # Build everything before assigning so a failed load leaves nothing
        # half-built behind.
        (txid_index, txn_nodes) = build_graph(records)
        spend_index = OutpointSpendIndex.build(txn_nodes)
        utxo_nodes = link_utxo_nodes(txn_nodes, spend_index)

        self.txn_nodes = txn_nodes
        self.utxo_nodes = utxo_nodes
        self.txid_index = txid_index
        self.spend_index = spend_index
        self.continuations = continuations
        self.object_metadata = object_metadata

        logger.info("Loaded contract with {} transactions and {} outputs".format(
            len(self.txn_nodes), len(self.utxo_nodes)))

    @classmethod
    def from_file(cls, path=None, rng=None):
        """
        Convenience method: read a contract data file and build the graph.
        """
        return cls(load(path), rng=rng)

    def should_update(self):
        """
        Whether the contract is worth polling the blockchain for.
        """
        return self.checkable

    @property
    def placeholder_nodes(self):
        return [node for node in self.txn_nodes if node.is_placeholder]

    def get_transaction(self, txid):
        """
        Look up a transaction node by txid or wtxid, or None.
        """
        txid = txid_to_hex(txid)
        node = self.txid_index.get(txid)
        if node is None:
            node = self.txid_index.get_by_wtxid(txid)
        return node

    def lookup_output(self, txid, n):
        """
        Look up the output node for (txid, n), or None when either the
        transaction or the output doesn't exist.
        """
        node = self.txid_index.get(txid_to_hex(txid))
        if node is None:
            return None
        if n < 0 or n >= len(node.utxos):
            return None
        return node.utxos[n]

    def compute_timing(self, node):
        return timing.compute_timing(node, self.timing_cache)

    def all_descendants(self, node):
        return timing.all_descendants(node, self.spend_index, self.timing_cache)

    def base_transactions(self):
        return timing.get_base_transactions(self.txn_nodes, self.txid_index)

    def unreachable_within(self, max_time, max_height, start_time=0, start_height=0):
        """
        Find the transactions that can't become valid by max_time and
        max_height, when the contract starts at start_time and start_height.

        returns a set of transaction nodes
        """
        unreachable = timing.unreachable_by_time(
            self.base_transactions(),
            max_time,
            max_height,
            start_time,
            start_height,
            self.spend_index,
            self.timing_cache,
            rng=self.rng,
        )
        return set(unreachable)
