"""Shared fixtures for the RugGuard test suite."""

from __future__ import annotations

from typing import Any

import pytest

from rugguard.core.config import Settings
from rugguard.core.types import AccountState, Call, DetectionRequest, Trace

TOKENS = 10**18

HOLDER = "0x1234567890123456789012345678901234567890"


# ── Calldata builders ────────────────────────────────────────────────────────


def word(value: int | str) -> str:
    """ABI-encode one uint256 or address as a 32-byte hex word."""
    if isinstance(value, str):
        return value.lower().removeprefix("0x").rjust(64, "0")
    return f"{value:064x}"


def calldata(selector: str, *args: int | str) -> str:
    return selector + "".join(word(a) for a in args)


TRANSFER_OWNERSHIP = calldata("0xf2fde38b", HOLDER)
RENOUNCE_OWNERSHIP = "0x715018a6"
BLACKLIST = calldata("0xf9f92be4", HOLDER)
WHITELIST = calldata("0xe43252d7", HOLDER)
PAUSE = "0x8456cb59"
SELFDESTRUCT = "0x9cb8a26a"
UPGRADE = calldata("0x3659cfe6", HOLDER)
BURN = calldata("0x42966c68", 10 * TOKENS)
REMOVE_LIQUIDITY = calldata("0xbaa2abde", HOLDER, 500 * TOKENS)
LOCK = calldata("0x5c975abb", 3600)
APPROVE = calldata("0x095ea7b3", HOLDER, 10 * TOKENS)


def mint(amount: int) -> str:
    return calldata("0x40c10f19", HOLDER, amount)


def set_fee(bps: int) -> str:
    return calldata("0x69fe0e2d", bps)


# ── Trace builders ───────────────────────────────────────────────────────────


def make_call(input_data: str, **overrides: Any) -> Call:
    fields: dict[str, Any] = {
        "from": "0x0000000000000000000000000000000000000123",
        "to": "0x0000000000000000000000000000000000000456",
        "input": input_data,
        "output": "0x",
        "gasUsed": "50000",
        "value": "0",
    }
    fields.update(overrides)
    return Call.model_validate(fields)


def make_request(
    calls: list[str] | None = None,
    pre: dict[str, str | None] | None = None,
    post: dict[str, str | None] | None = None,
) -> DetectionRequest:
    """Build a detection request from call inputs and address → balance maps."""
    trace = Trace(
        block_number=1,
        from_="0x0000000000000000000000000000000000000123",
        to="0x0000000000000000000000000000000000000456",
        transaction_hash="0x123",
        gas="100000",
        gas_used="50000",
        calls=[make_call(c) for c in (calls or [])],
        pre={a: AccountState(balance=b, nonce=1) for a, b in (pre or {}).items()},
        post={a: AccountState(balance=b, nonce=1) for a, b in (post or {}).items()},
    )
    return DetectionRequest(chain_id=1, hash="0x123", trace=trace)


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def request_payload() -> dict[str, Any]:
    """A detection request as the platform posts it (camelCase JSON)."""
    return {
        "id": "req-1",
        "chainId": 1,
        "hash": "0xabc",
        "protocolName": "DemoToken",
        "protocolAddress": "0x0000000000000000000000000000000000000456",
        "trace": {
            "blockNumber": 19_000_000,
            "from": "0x0000000000000000000000000000000000000123",
            "to": "0x0000000000000000000000000000000000000456",
            "transactionHash": "0xabc",
            "input": "0x",
            "output": "0x",
            "gas": "100000",
            "gasUsed": "50000",
            "value": "0",
            "calls": [],
            "logs": [],
            "pre": {},
            "post": {},
        },
    }
