import unittest

from contractgraph.indexes import IdentifierIndex, OutpointSpendIndex
from contractgraph.models.nodes import TransactionNode

from contractgraph.tests.fixtures import FUNDING_TXID, make_transaction

def make_node(inputs, outputs=(1000,), wtxids=None):
    return TransactionNode(make_transaction(inputs, list(outputs)), wtxids=wtxids)

class IdentifierIndexTests(unittest.TestCase):
    def test_add_and_get(self):
        node = make_node([(FUNDING_TXID, 0, 0xffffffff)], wtxids=["cc" * 32, "dd" * 32])
        index = IdentifierIndex()
        index.add(node)

        self.assertTrue(index.has(node.txid))
        self.assertIs(index.get(node.txid), node)
        self.assertIs(index.get_by_wtxid("cc" * 32), node)
        self.assertIs(index.get_by_wtxid("dd" * 32), node)
        self.assertEqual(len(index), 1)

    def test_miss(self):
        index = IdentifierIndex()
        self.assertFalse(index.has(FUNDING_TXID))
        self.assertIsNone(index.get(FUNDING_TXID))
        self.assertIsNone(index.get_by_wtxid(FUNDING_TXID))

class OutpointSpendIndexTests(unittest.TestCase):
    def test_grouped(self):
        first = make_node([(FUNDING_TXID, 0, 0xffffffff)])
        second = make_node([(FUNDING_TXID, 0, 0xfffffffe)])
        third = make_node([(FUNDING_TXID, 2, 0xffffffff)])
        index = OutpointSpendIndex.build([first, second, third])

        self.assertEqual(index.get(FUNDING_TXID, 0), [first, second])
        self.assertEqual(index.get(FUNDING_TXID, 2), [third])
        self.assertIsNone(index.get(FUNDING_TXID, 1))
        self.assertIsNone(index.get("ee" * 32, 0))

        grouped = index.get_grouped(FUNDING_TXID)
        self.assertEqual(sorted(grouped.keys()), [0, 2])
        self.assertIsNone(index.get_grouped("ee" * 32))

        self.assertIn((FUNDING_TXID, 0), index)
        self.assertNotIn((FUNDING_TXID, 1), index)

    def test_no_duplicate_spender(self):
        node = make_node([(FUNDING_TXID, 0, 0xffffffff)])
        index = OutpointSpendIndex()
        index.add(node)
        index.add(node)
        self.assertEqual(index.get(FUNDING_TXID, 0), [node])
