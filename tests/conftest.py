"""
Shared fixtures: wallet stores and a mock beacon node.
"""

import json

import httpx
import pytest

from ethdo.wallet import ScratchStore

# Standard BIP-39 test mnemonic
TEST_MNEMONIC = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"

TEST_SECRET_KEY = "25295f0d1d592a90b333e26e85149708208e9f8e8bc18f6c77bd62f8ad7a6866"

GENESIS_VALIDATORS_ROOT = "0x4b363db94e286120d76eb905340fdd4e54bfe9f06bf33ff6cf5ad27f511bfe95"


def validator_entry(pubkey: str, index: int = 1, status: str = "active_ongoing") -> dict:
    return {
        "index": str(index),
        "balance": "32000000000",
        "status": status,
        "validator": {
            "pubkey": pubkey,
            "withdrawal_credentials": "0x00" + "11" * 31,
            "effective_balance": "32000000000",
            "slashed": False,
            "activation_eligibility_epoch": "0",
            "activation_epoch": "0",
            "exit_epoch": "18446744073709551615",
            "withdrawable_epoch": "18446744073709551615",
        },
    }


def _validators(request: httpx.Request) -> dict:
    ids = json.loads(request.content)["ids"]
    return {"data": [validator_entry(pubkey) for pubkey in ids]}


def _validator(request: httpx.Request) -> dict:
    pubkey = request.url.path.rsplit("/", 1)[-1]
    return {"data": validator_entry(pubkey)}


@pytest.fixture
def beacon_responses():
    """Responses of the mock beacon node, keyed by (method, path). Tests may modify."""
    return {
        ("GET", "/eth/v1/config/spec"): {"data": {
            "CONFIG_NAME": "mainnet",
            "GENESIS_FORK_VERSION": "0x00000000",
            "SECONDS_PER_SLOT": "12",
            "SLOTS_PER_EPOCH": "32",
            "MIN_GENESIS_TIME": "1606824000",
            "DEPOSIT_CONTRACT_ADDRESS": "0x00000000219ab540356cBB839Cbe05303d7705Fa",
        }},
        ("GET", "/eth/v1/beacon/genesis"): {"data": {
            "genesis_time": "1606824023",
            "genesis_validators_root": GENESIS_VALIDATORS_ROOT,
            "genesis_fork_version": "0x00000000",
        }},
        ("GET", "/eth/v1/node/version"): {"data": {"version": "Lighthouse/v4.5.0-441fc16 x86_64-linux"}},
        ("GET", "/eth/v1/node/syncing"): {"data": {"head_slot": "100", "sync_distance": "0", "is_syncing": False}},
        ("GET", "/eth/v1/beacon/states/head/fork"): {"data": {
            "previous_version": "0x00000000",
            "current_version": "0x01000000",
            "epoch": "74240",
        }},
        ("POST", "/eth/v1/beacon/states/head/validators"): _validators,
        ("POST", "/eth/v1/beacon/pool/voluntary_exits"): httpx.Response(200),
    }


@pytest.fixture
def beacon_requests():
    """Requests received by the mock beacon node."""
    return []


@pytest.fixture
def beacon_transport(beacon_responses, beacon_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        beacon_requests.append(request)
        if request.method == "GET" and request.url.path.startswith("/eth/v1/beacon/states/head/validators/"):
            return httpx.Response(200, json=_validator(request))
        response = beacon_responses.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"code": 404, "message": "Not found"})
        if callable(response):
            response = response(request)
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    return httpx.MockTransport(handler)


@pytest.fixture
def store():
    return ScratchStore()
