import unittest

from bitcoin.core.script import CScript

from contractgraph.config import PLACEHOLDER_OUTPUT_VALUE, PLACEHOLDER_LABEL
from contractgraph.exceptions import GroupingInvariantError
from contractgraph.contractfile import preprocess_data
from contractgraph.indexes import IdentifierIndex
from contractgraph.builder import (
    build_graph,
    build_transaction_nodes,
    find_missing_inputs,
    make_transaction_node,
)

from contractgraph.tests.fixtures import (
    FUNDING_TXID,
    OTHER_FUNDING_TXID,
    make_transaction,
    make_contract_data,
    make_simple_contract,
    txid_of,
)

class GroupingTests(unittest.TestCase):
    def test_witness_variants_share_one_node(self):
        inputs = [(FUNDING_TXID, 0, 0xfffffffe)]
        variant1 = make_transaction(inputs, [5000], witnesses=[[b"\x01", b"\xaa" * 32]])
        variant2 = make_transaction(inputs, [5000], witnesses=[[b"\x02", b"\xaa" * 32]])
        self.assertEqual(txid_of(variant1), txid_of(variant2))
        self.assertNotEqual(variant1.GetHash(), variant2.GetHash())

        data = make_contract_data({
            "first": [(variant1, "spend")],
            "second": [(variant2, "spend")],
        })
        (records, _, _) = preprocess_data(data)
        (txid_index, nodes) = build_graph(records)

        real_nodes = [node for node in nodes if not node.is_placeholder]
        self.assertEqual(len(real_nodes), 1)
        node = real_nodes[0]
        self.assertEqual(node.txid, txid_of(variant1))
        self.assertEqual(len(node.witness_set), 2)
        self.assertEqual(node.witness_set.witnesses[0], [[b"\x01", b"\xaa" * 32]])
        self.assertEqual(node.witness_set.witnesses[1], [[b"\x02", b"\xaa" * 32]])
        self.assertEqual(len(node.witness_set.psbts), 2)
        self.assertEqual(len(node.wtxids), 2)

        for wtxid in node.wtxids:
            self.assertIs(txid_index.get_by_wtxid(wtxid), node)

    def test_canonical_body_has_no_witness(self):
        transaction = make_transaction([(FUNDING_TXID, 0, 0xffffffff)], [5000], witnesses=[[b"\x01"]])
        data = make_contract_data({"p": [(transaction, "p")]})
        (records, _, _) = preprocess_data(data)
        (txid_index, nodes) = build_graph(records)

        node = txid_index.get(txid_of(transaction))
        self.assertTrue(node.bitcoin_transaction.wit.is_null())
        self.assertEqual(txid_of(node.bitcoin_transaction), node.txid)

    def test_empty_group(self):
        with self.assertRaises(GroupingInvariantError):
            make_transaction_node(FUNDING_TXID, [])

class PlaceholderTests(unittest.TestCase):
    def test_closure(self):
        (data, transaction_a, transaction_b) = make_simple_contract()
        (records, _, _) = preprocess_data(data)
        (txid_index, nodes) = build_graph(records)

        for node in nodes:
            for (txid, vout) in node.input_outpoints:
                self.assertTrue(txid_index.has(txid))

    def test_placeholder_shape(self):
        spend_first = make_transaction([(FUNDING_TXID, 3, 0xffffffff)], [1000])
        spend_second = make_transaction([(FUNDING_TXID, 1, 0xffffffff), (OTHER_FUNDING_TXID, 0, 0xffffffff)], [1000])
        data = make_contract_data({
            "first": [(spend_first, "first")],
            "second": [(spend_second, "second")],
        })
        (records, _, _) = preprocess_data(data)
        (txid_index, nodes) = build_graph(records)

        self.assertEqual(len(nodes), 4)
        placeholders = [node for node in nodes if node.is_placeholder]
        self.assertEqual([node.txid for node in placeholders], [FUNDING_TXID, OTHER_FUNDING_TXID])

        funding = txid_index.get(FUNDING_TXID)
        self.assertTrue(funding.is_placeholder)
        self.assertEqual(funding.label, PLACEHOLDER_LABEL)
        self.assertEqual(len(funding.outputs), 4)
        self.assertEqual(len(funding.inputs), 0)
        self.assertEqual(len(funding.witness_set), 0)
        for txout in funding.outputs:
            self.assertEqual(txout.nValue, PLACEHOLDER_OUTPUT_VALUE)
            self.assertEqual(txout.scriptPubKey, CScript())

        self.assertEqual(len(txid_index.get(OTHER_FUNDING_TXID).outputs), 1)

    def test_find_missing_inputs(self):
        (data, transaction_a, transaction_b) = make_simple_contract()
        (records, _, _) = preprocess_data(data)
        txid_index = IdentifierIndex()
        nodes = build_transaction_nodes(records, txid_index)

        missing = find_missing_inputs(nodes, txid_index)
        self.assertEqual(dict(missing), {FUNDING_TXID: 0})
