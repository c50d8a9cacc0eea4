"""
Classes for representing a loaded contract graph: canonical transactions,
placeholder transactions for coins funded from outside of the contract, the
outputs (UTXOs) they create, and the links between outputs and spenders.
"""

from collections import namedtuple

from bitcoin.core import CTransaction

from contractgraph.helpers.formatting import b2lx, outpoint_to_key

class SpendLink(namedtuple("SpendLink", ["utxo", "spender", "spend_index", "input_index"])):
    """
    Connects an output to one transaction spending it.

    spend_index is the position of the spender in the output's spender list,
    input_index is the input of the spender that consumes the output.
    """
    __slots__ = ()

class WitnessSet(object):
    """
    All known signature variants of one transaction. witnesses[variant][input]
    is a witness stack (a list of bytes); psbts[variant] is the signing
    artifact the variant came from.
    """

    def __init__(self, witnesses=None, psbts=None):
        self.witnesses = witnesses if witnesses is not None else []
        self.psbts = psbts if psbts is not None else []

    def add_variant(self, stacks, psbt):
        self.witnesses.append(stacks)
        self.psbts.append(psbt)

    def __len__(self):
        return len(self.witnesses)

    def stack(self, variant, input_index):
        """
        Get the witness stack for an input in a given variant, or None.
        """
        if variant >= len(self.witnesses):
            return None
        stacks = self.witnesses[variant]
        if input_index >= len(stacks):
            return None
        return stacks[input_index]

class TransactionNode(object):
    """
    Represents one canonical transaction of the contract. A transaction can
    have several valid witnesses, signed independently, but they all share the
    same txid. The bitcoin_transaction held here has its witness data
    stripped; the witnesses live in witness_set.
    """

    is_placeholder = False

    def __init__(self, bitcoin_transaction, witness_set=None, wtxids=None, label=None, path=None, txid=None):
        self.bitcoin_transaction = bitcoin_transaction
        self.witness_set = witness_set if witness_set is not None else WitnessSet()
        self.wtxids = list(wtxids) if wtxids is not None else []
        self.label = label
        self.path = path

        # Filled in by the linker.
        self.utxos = []
        self.input_links = []

        if txid is None:
            txid = b2lx(bitcoin_transaction.GetTxid())
        self._txid = txid

    @property
    def txid(self):
        """
        Display (big-endian) hex txid of the transaction.
        """
        return self._txid

    @property
    def inputs(self):
        return self.bitcoin_transaction.vin

    @property
    def outputs(self):
        return self.bitcoin_transaction.vout

    @property
    def locktime(self):
        return self.bitcoin_transaction.nLockTime

    @property
    def sequences(self):
        return [txin.nSequence for txin in self.bitcoin_transaction.vin]

    @property
    def input_outpoints(self):
        """
        A list of (txid, vout) tuples, one per input.
        """
        return [outpoint_to_key(txin.prevout) for txin in self.bitcoin_transaction.vin]

    @property
    def parent_txids(self):
        return [txid for (txid, _vout) in self.input_outpoints]

    @property
    def child_transactions(self):
        """
        Every transaction spending any of the outputs of this transaction.
        Only meaningful after linking.
        """
        children = []
        for utxo in self.utxos:
            for spender in utxo.spenders:
                if spender not in children:
                    children.append(spender)
        return children

    def find_input(self, txid, vout):
        """
        Find the index of the input spending (txid, vout), or None.
        """
        for (idx, outpoint) in enumerate(self.input_outpoints):
            if outpoint == (txid, vout):
                return idx
        return None

    def __repr__(self):
        return "<{} {}>".format(self.__class__.__name__, self.txid)

class PlaceholderTransactionNode(TransactionNode):
    """
    Stands in for a transaction that is referenced by some input of the
    contract but is not itself part of the loaded data (a coin funded from
    outside of the contract). The txid is the referenced txid, not the hash of
    the synthetic body, and the body outputs can be rewritten by the linker.
    """

    is_placeholder = True

    def __init__(self, txid, bitcoin_transaction, label=None):
        super().__init__(bitcoin_transaction, witness_set=WitnessSet(), wtxids=[], label=label, txid=txid)

class UTXONode(object):
    """
    Represents one output of a transaction node and the transactions that
    might spend it. More than one spender is normal: different program paths
    can spend the same coin in different ways.
    """

    def __init__(self, transaction, index):
        self.transaction = transaction
        self.index = index
        self.spenders = []
        self.spend_links = []

    @property
    def txid(self):
        return self.transaction.txid

    @property
    def txout(self):
        return self.transaction.outputs[self.index]

    @property
    def amount(self):
        return self.txout.nValue

    @property
    def script(self):
        return self.txout.scriptPubKey

    @property
    def is_spent(self):
        return len(self.spenders) > 0

    def spent_by(self, spender, spend_index, input_index):
        """
        Record that spender consumes this output at its input_index, and
        return the new link.
        """
        link = SpendLink(self, spender, spend_index, input_index)
        self.spend_links.append(link)
        self.spenders.append(spender)
        return link

    def __repr__(self):
        return "<UTXONode {}:{}>".format(self.txid, self.index)

def strip_witness(bitcoin_transaction):
    """
    Make a copy of a transaction without any witness data.
    """
    return CTransaction(
        bitcoin_transaction.vin,
        bitcoin_transaction.vout,
        bitcoin_transaction.nLockTime,
        bitcoin_transaction.nVersion,
    )

def get_witness_stacks(bitcoin_transaction):
    """
    Get the witness stack of every input of a transaction, as a list of lists
    of bytes. Inputs without witness data get an empty stack.
    """
    vtxinwit = bitcoin_transaction.wit.vtxinwit
    stacks = []
    for idx in range(len(bitcoin_transaction.vin)):
        if idx < len(vtxinwit):
            stacks.append(list(vtxinwit[idx].scriptWitness.stack))
        else:
            stacks.append([])
    return stacks
