import base64
import hashlib
import struct
import unittest
from unittest import TestCase, mock

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from squads_cli.commands import (
    fetch_program_config,
    multisig_create,
    program_config_init,
    resolve_create_key,
)
from squads_cli.config import DEFAULT_PROGRAM_ID
from squads_cli.errors import AccountFetchError, RpcError
from squads_cli.instructions import decode_compute_unit_price
from squads_cli.pda import multisig_address, program_config_address
from squads_cli.types import Generated, Member, Supplied

ENDPOINT = "http://127.0.0.1:8899"


def make_program_config_account(program_id: Pubkey, authority: Pubkey, treasury: Pubkey, fee: int = 1000) -> dict:
    """Helper to create a getAccountInfo value for a ProgramConfig account"""
    data = (
        hashlib.sha256(b"account:ProgramConfig").digest()[:8]
        + bytes(authority)
        + struct.pack("<Q", fee)
        + bytes(treasury)
        + bytes(64)
    )
    return {
        "owner": str(program_id),
        "lamports": 2_000_000,
        "executable": False,
        "data": [base64.b64encode(data).decode(), "base64"],
    }


class TestResolveCreateKey(TestCase):
    def test_supplied(self):
        keypair = Keypair()
        self.assertIs(resolve_create_key(Supplied(keypair)), keypair)

    def test_generated_is_fresh(self):
        first = resolve_create_key(Generated())
        second = resolve_create_key(Generated())
        self.assertNotEqual(first.pubkey(), second.pubkey())


class TestProgramConfigInit(TestCase):
    def setUp(self):
        self.program_id = Pubkey.from_string(DEFAULT_PROGRAM_ID)
        self.initializer = Keypair()
        self.authority = Keypair().pubkey()
        self.treasury = Keypair().pubkey()

        self.mock_submit_patcher = mock.patch("squads_cli.commands.submit", return_value="sig")
        self.mock_submit = self.mock_submit_patcher.start()

    def tearDown(self):
        self.mock_submit_patcher.stop()

    def test_result(self):
        result = program_config_init(
            ENDPOINT, self.program_id, self.initializer, self.authority, self.treasury, 1000
        )

        self.assertEqual(result.address, program_config_address(self.program_id)[0])
        self.assertEqual(result.signature, "sig")
        self.assertEqual(result.label, "Program config")

    def test_submitted_instructions(self):
        program_config_init(
            ENDPOINT, self.program_id, self.initializer, self.authority, self.treasury, 1000
        )

        endpoint, instructions, fee_payer = self.mock_submit.call_args[0]
        self.assertEqual(endpoint, ENDPOINT)
        self.assertIs(fee_payer, self.initializer)
        self.assertEqual(len(instructions), 2)
        self.assertEqual(decode_compute_unit_price(instructions[0]), 5000)
        self.assertEqual(instructions[1].program_id, self.program_id)

    def test_priority_fee_override(self):
        program_config_init(
            ENDPOINT, self.program_id, self.initializer, self.authority, self.treasury, 1000,
            priority_fee=42,
        )

        instructions = self.mock_submit.call_args[0][1]
        self.assertEqual(decode_compute_unit_price(instructions[0]), 42)


class TestMultisigCreate(TestCase):
    def setUp(self):
        self.program_id = Pubkey.from_string(DEFAULT_PROGRAM_ID)
        self.creator = Keypair()
        self.treasury = Keypair().pubkey()
        self.members = [Member(Keypair().pubkey(), 1), Member(Keypair().pubkey(), 3)]

        self.mock_submit_patcher = mock.patch("squads_cli.commands.submit", return_value="sig")
        self.mock_submit = self.mock_submit_patcher.start()

        self.mock_account_patcher = mock.patch("squads_cli.rpc.get_account_info")
        self.mock_account = self.mock_account_patcher.start()
        self.mock_account.return_value = make_program_config_account(
            self.program_id, Keypair().pubkey(), self.treasury
        )

    def tearDown(self):
        self.mock_submit_patcher.stop()
        self.mock_account_patcher.stop()

    def test_generated_create_key(self):
        result = multisig_create(
            ENDPOINT, self.program_id, self.creator, self.members, 2, Generated()
        )

        self.assertEqual(result.label, "Multisig")
        self.assertEqual(result.address, multisig_address(result.create_key, self.program_id)[0])

        endpoint, instructions, fee_payer, signers = self.mock_submit.call_args[0]
        self.assertIs(fee_payer, self.creator)
        self.assertEqual([s.pubkey() for s in signers], [result.create_key])

    def test_generated_addresses_differ_per_run(self):
        first = multisig_create(ENDPOINT, self.program_id, self.creator, self.members, 2, Generated())
        second = multisig_create(ENDPOINT, self.program_id, self.creator, self.members, 2, Generated())
        self.assertNotEqual(first.address, second.address)

    def test_supplied_create_key_is_deterministic(self):
        create_key = Keypair.from_seed(bytes([4] * 32))
        result = multisig_create(
            ENDPOINT, self.program_id, self.creator, self.members, 2, Supplied(create_key)
        )
        self.assertEqual(result.address, multisig_address(create_key.pubkey(), self.program_id)[0])
        self.assertEqual(result.create_key, create_key.pubkey())

    def test_treasury_comes_from_program_config(self):
        multisig_create(ENDPOINT, self.program_id, self.creator, self.members, 2, Generated())

        instructions = self.mock_submit.call_args[0][1]
        self.assertEqual(decode_compute_unit_price(instructions[0]), 5000)
        treasury_meta = instructions[1].accounts[1]
        self.assertEqual(treasury_meta.pubkey, self.treasury)
        self.assertTrue(treasury_meta.is_writable)

        fetched = self.mock_account.call_args[0][1]
        self.assertEqual(fetched, str(program_config_address(self.program_id)[0]))

    def test_missing_program_config(self):
        self.mock_account.return_value = None

        with self.assertRaises(AccountFetchError) as ctx:
            multisig_create(ENDPOINT, self.program_id, self.creator, self.members, 2, Generated())
        self.assertIn("program-config-init", str(ctx.exception))
        self.mock_submit.assert_not_called()

    def test_program_config_wrong_owner(self):
        self.mock_account.return_value["owner"] = "11111111111111111111111111111111"

        with self.assertRaises(AccountFetchError):
            multisig_create(ENDPOINT, self.program_id, self.creator, self.members, 2, Generated())
        self.mock_submit.assert_not_called()

    def test_program_config_fetch_failure(self):
        self.mock_account.side_effect = RpcError("getAccountInfo", "connection refused")

        with self.assertRaises(AccountFetchError):
            fetch_program_config(ENDPOINT, self.program_id)


if __name__ == "__main__":
    unittest.main()
