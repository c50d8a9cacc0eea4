"""
Lookup structures over the transaction nodes of one loaded contract. Both are
built once per load by insertion only; nothing is ever removed.
"""

class IdentifierIndex(object):
    """
    Maps both txids and wtxids to transaction nodes.
    """

    def __init__(self):
        self.by_txid = {}
        self.by_wtxid = {}

    def add(self, node):
        """
        Register a node under its txid and under every one of its wtxids.
        """
        self.by_txid[node.txid] = node
        for wtxid in node.wtxids:
            self.by_wtxid[wtxid] = node

    def has(self, txid):
        return txid in self.by_txid

    def get(self, txid):
        return self.by_txid.get(txid)

    def get_by_wtxid(self, wtxid):
        return self.by_wtxid.get(wtxid)

    def __len__(self):
        return len(self.by_txid)

class OutpointSpendIndex(object):
    """
    Maps an outpoint (txid, vout) to the ordered list of transaction nodes that
    spend it. Entries for the same txid are kept together so that all spenders
    of a transaction can be fetched grouped by output index.
    """

    def __init__(self):
        self._spenders = {}

    @classmethod
    def build(cls, nodes):
        """
        Record every input of every node.
        """
        index = cls()
        for node in nodes:
            index.add(node)
        return index

    def add(self, node):
        for (txid, vout) in node.input_outpoints:
            spenders = self._spenders.setdefault(txid, {}).setdefault(vout, [])
            if node not in spenders:
                spenders.append(node)

    def get(self, txid, vout):
        """
        Spenders of (txid, vout), or None when nothing spends it.
        """
        grouped = self._spenders.get(txid)
        if grouped is None:
            return None
        return grouped.get(vout)

    def get_grouped(self, txid):
        """
        A dictionary of output index to spenders for every spent output of
        txid, or None when no output of txid is spent.
        """
        return self._spenders.get(txid)

    def __contains__(self, outpoint):
        (txid, vout) = outpoint
        return self.get(txid, vout) is not None
