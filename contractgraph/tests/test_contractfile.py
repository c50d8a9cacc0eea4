import os
import json
import base64
import tempfile
import unittest

from contractgraph.exceptions import MalformedTransactionError, GroupingInvariantError
from contractgraph.contractfile import preprocess_data, parse_psbt, parse_transaction, load

from contractgraph.tests.fixtures import (
    FUNDING_TXID,
    OTHER_FUNDING_TXID,
    make_transaction,
    make_contract_data,
    make_simple_contract,
    make_tx_entry,
    txid_of,
)

class PreprocessTests(unittest.TestCase):
    def test_records_and_passthrough(self):
        (data, transaction_a, transaction_b) = make_simple_contract()
        (records, continuations, object_metadata) = preprocess_data(data)

        self.assertEqual(len(records), 2)
        self.assertEqual(txid_of(records[0].transaction), txid_of(transaction_a))
        self.assertEqual(records[0].label, "start")
        self.assertEqual(records[0].path, "start")
        self.assertTrue(records[0].psbt.startswith(b"psbt\xff"))

        self.assertEqual(continuations["timeout"], {"next": {"path": "timeout"}})
        self.assertEqual(object_metadata["start"], {"label": "start"})

    def test_default_label(self):
        transaction = make_transaction([(FUNDING_TXID, 0, 0xffffffff)], [1000])
        data = {"program": {"p": {"out": "p", "txs": [make_tx_entry(transaction)]}}}
        (records, continuations, object_metadata) = preprocess_data(data)
        self.assertEqual(records[0].label, "unlabeled")
        self.assertEqual(continuations["p"], {})

    def test_path_must_spend_same_coin(self):
        first = make_transaction([(FUNDING_TXID, 0, 0xffffffff)], [1000])
        second = make_transaction([(OTHER_FUNDING_TXID, 0, 0xffffffff)], [1000])
        data = make_contract_data({"mixed": [(first, "a"), (second, "b")]})

        with self.assertRaises(GroupingInvariantError):
            preprocess_data(data)

    def test_path_same_coin_different_vout(self):
        first = make_transaction([(FUNDING_TXID, 0, 0xffffffff)], [1000])
        second = make_transaction([(FUNDING_TXID, 1, 0xffffffff)], [1000])
        data = make_contract_data({"mixed": [(first, "a"), (second, "b")]})

        with self.assertRaises(GroupingInvariantError):
            preprocess_data(data)

    def test_missing_program(self):
        with self.assertRaises(MalformedTransactionError):
            preprocess_data({})

    def test_malformed_hex(self):
        (data, transaction_a, transaction_b) = make_simple_contract()
        data["program"]["start"]["txs"][0]["linked_psbt"]["hex"] = "zz"
        with self.assertRaises(MalformedTransactionError):
            preprocess_data(data)

    def test_impossible_output_index(self):
        transaction = make_transaction([(FUNDING_TXID, 0xffffffff, 0xffffffff)], [1000])
        data = make_contract_data({"huge": [(transaction, "huge")]})
        with self.assertRaises(MalformedTransactionError):
            preprocess_data(data)

    def test_large_output_index_accepted(self):
        transaction = make_transaction([(FUNDING_TXID, 1000, 0xffffffff)], [1000])
        data = make_contract_data({"wide": [(transaction, "wide")]})
        (records, continuations, object_metadata) = preprocess_data(data)
        self.assertEqual(len(records), 1)

    def test_truncated_transaction(self):
        with self.assertRaises(MalformedTransactionError):
            parse_transaction("02000000")

    def test_bad_psbt(self):
        with self.assertRaises(MalformedTransactionError):
            parse_psbt("not base64!")
        with self.assertRaises(MalformedTransactionError):
            parse_psbt(base64.b64encode(b"hello").decode("ascii"))

class LoadTests(unittest.TestCase):
    def test_load(self):
        (data, transaction_a, transaction_b) = make_simple_contract()
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "contract.json")
            with open(path, "w") as fd:
                fd.write(json.dumps(data))
            self.assertEqual(load(path), data)
