import json
import os
import tempfile
import unittest
from unittest import TestCase, mock

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from squads_cli.config import (
    CLUSTERS,
    DEFAULT_PROGRAM_ID,
    LOCALNET_URL,
    mask_api_key,
    resolve_rpc_endpoint,
)
from squads_cli.errors import ConfigError, KeypairLoadError
from squads_cli.keys import decode_address, load_keypair


class TestDecodeAddress(TestCase):
    def test_base58(self):
        self.assertEqual(decode_address(DEFAULT_PROGRAM_ID), Pubkey.from_string(DEFAULT_PROGRAM_ID))

    def test_surrounding_whitespace(self):
        self.assertEqual(decode_address(f"  {DEFAULT_PROGRAM_ID}\n"), Pubkey.from_string(DEFAULT_PROGRAM_ID))

    def test_hex(self):
        pubkey = Pubkey.from_string(DEFAULT_PROGRAM_ID)
        self.assertEqual(decode_address(bytes(pubkey).hex()), pubkey)

    def test_wrong_length(self):
        with self.assertRaises(ValueError) as ctx:
            decode_address("abc")
        self.assertIn("expected 32", str(ctx.exception))

    def test_empty(self):
        with self.assertRaises(ValueError):
            decode_address("")


class TestLoadKeypair(TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.keypair = Keypair.from_seed(bytes([5] * 32))

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, name: str, content: str) -> str:
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_load_wallet_file(self):
        path = self._write("id.json", json.dumps(list(bytes(self.keypair))))
        loaded = load_keypair(path)
        self.assertEqual(loaded.pubkey(), self.keypair.pubkey())

    def test_missing_file(self):
        with self.assertRaises(KeypairLoadError) as ctx:
            load_keypair(os.path.join(self.tmpdir.name, "missing.json"))
        self.assertIn("file not found", str(ctx.exception))

    def test_invalid_json(self):
        path = self._write("bad.json", "[1, 2,")
        with self.assertRaises(KeypairLoadError):
            load_keypair(path)

    def test_wrong_length(self):
        path = self._write("short.json", json.dumps([1] * 32))
        with self.assertRaises(KeypairLoadError) as ctx:
            load_keypair(path)
        self.assertIn("64", str(ctx.exception))

    def test_values_out_of_range(self):
        path = self._write("range.json", json.dumps([256] * 64))
        with self.assertRaises(KeypairLoadError):
            load_keypair(path)

    def test_not_an_array(self):
        path = self._write("object.json", json.dumps({"secret": "x"}))
        with self.assertRaises(KeypairLoadError):
            load_keypair(path)


class TestResolveRpcEndpoint(TestCase):
    def test_url_passthrough(self):
        self.assertEqual(resolve_rpc_endpoint("https://rpc.example.com"), "https://rpc.example.com")

    def test_cluster_names(self):
        self.assertEqual(resolve_rpc_endpoint("devnet"), CLUSTERS["devnet"])
        self.assertEqual(resolve_rpc_endpoint("Mainnet-Beta"), CLUSTERS["mainnet"])
        self.assertEqual(resolve_rpc_endpoint("d"), CLUSTERS["devnet"])
        self.assertEqual(resolve_rpc_endpoint("l"), LOCALNET_URL)

    @mock.patch.dict(os.environ, {"SOLANA_RPC_URL": "http://10.0.0.1:8899"})
    def test_environment_default(self):
        self.assertEqual(resolve_rpc_endpoint(), "http://10.0.0.1:8899")

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_localnet_default(self):
        self.assertEqual(resolve_rpc_endpoint(), LOCALNET_URL)

    def test_unknown_cluster(self):
        with self.assertRaises(ConfigError):
            resolve_rpc_endpoint("moonnet")

    def test_mask_api_key(self):
        self.assertEqual(
            mask_api_key("https://mainnet.helius-rpc.com/?api-key=secret"),
            "https://mainnet.helius-rpc.com/?api-key=***",
        )
        self.assertEqual(mask_api_key(LOCALNET_URL), LOCALNET_URL)


if __name__ == "__main__":
    unittest.main()
