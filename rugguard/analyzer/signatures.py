"""Known rugpull-capable function selectors.

The table is plain data: every rule carries its selector, severity, the ABI
layout of its arguments and, optionally, a threshold check on one decoded
argument. ``evaluate_rule`` is the interpreter that applies a rule to a
call's input data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, to_checksum_address

from rugguard.core.config import Settings
from rugguard.core.types import Severity

SELECTOR_HEX_LENGTH = 10  # "0x" + 4 bytes


@dataclass(frozen=True)
class ParameterCheck:
    """Threshold check on one decoded integer argument.

    The check holds when the argument is strictly greater than the threshold.
    The threshold is read from ``Settings`` by name; when ``scaled`` is set
    it is expressed in whole tokens and multiplied by ``10**token_decimals``.
    """

    index: int
    threshold_setting: str
    scaled: bool = False

    def threshold(self, settings: Settings) -> int:
        value = int(getattr(settings, self.threshold_setting))
        if self.scaled:
            value *= 10**settings.token_decimals
        return value

    def holds(self, parameters: tuple[Any, ...], settings: Settings) -> bool:
        return int(parameters[self.index]) > self.threshold(settings)


@dataclass(frozen=True)
class SignatureRule:
    """One suspicious function signature."""

    key: str
    selector: str
    name: str
    severity: Severity
    description: str
    parameter_types: tuple[str, ...] = ()
    check: ParameterCheck | None = None

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.parameter_types)})"


@dataclass(frozen=True)
class RuleOutcome:
    """Result of applying a rule to one call.

    ``parameters`` is set only when the arguments decoded and the check held.
    """

    emit: bool
    parameters: list[Any] | None = None


SIGNATURE_RULES: tuple[SignatureRule, ...] = (
    # Ownership and access control
    SignatureRule(
        key="OWNERSHIP_TRANSFER",
        selector="0xf2fde38b",
        name="transferOwnership",
        severity=Severity.HIGH,
        description="Ownership transfer detected - potential rugpull preparation",
    ),
    SignatureRule(
        key="RENOUNCE_OWNERSHIP",
        selector="0x715018a6",
        name="renounceOwnership",
        severity=Severity.MEDIUM,
        description="Ownership renouncement - could be legitimate but verify",
    ),
    # Blacklisting and restrictions
    SignatureRule(
        key="BLACKLIST",
        selector="0xf9f92be4",
        name="addToBlacklist",
        severity=Severity.HIGH,
        description="Address blacklisting capability - can prevent withdrawals",
    ),
    SignatureRule(
        key="WHITELIST",
        selector="0xe43252d7",
        name="addToWhitelist",
        severity=Severity.MEDIUM,
        description="Whitelist modification - could restrict trading",
    ),
    # Contract state control
    SignatureRule(
        key="PAUSE",
        selector="0x8456cb59",
        name="pause",
        severity=Severity.MEDIUM,
        description="Contract can be paused - might prevent withdrawals",
    ),
    SignatureRule(
        key="SELFDESTRUCT",
        selector="0x9cb8a26a",
        name="selfdestruct",
        severity=Severity.HIGH,
        description="Contract can self-destruct - all funds could be lost",
    ),
    SignatureRule(
        key="UPGRADE",
        selector="0x3659cfe6",
        name="upgradeTo",
        severity=Severity.MEDIUM,
        description="Contract is upgradeable - functionality can be changed",
    ),
    # Token operations
    SignatureRule(
        key="MINT",
        selector="0x40c10f19",
        name="mint",
        severity=Severity.HIGH,
        description="Minting capability - could dilute token value",
        parameter_types=("address", "uint256"),
        check=ParameterCheck(index=1, threshold_setting="suspicious_mint_threshold", scaled=True),
    ),
    SignatureRule(
        key="BURN",
        selector="0x42966c68",
        name="burn",
        severity=Severity.MEDIUM,
        description="Burning capability - verify if authorized",
    ),
    SignatureRule(
        key="SET_FEE",
        selector="0x69fe0e2d",
        name="setFee",
        severity=Severity.HIGH,
        description="Fee modification capability - could be used for value extraction",
        parameter_types=("uint256",),
        check=ParameterCheck(index=0, threshold_setting="max_acceptable_fee_bps"),
    ),
    # Liquidity control
    SignatureRule(
        key="REMOVE_LIQUIDITY",
        selector="0xbaa2abde",
        name="removeLiquidity",
        severity=Severity.HIGH,
        description="Liquidity removal detected - potential rugpull in progress",
    ),
    SignatureRule(
        key="LOCK_TOKENS",
        selector="0x5c975abb",
        name="lock",
        severity=Severity.MEDIUM,
        description="Token locking detected - verify lock duration",
    ),
)

RULES_BY_KEY: dict[str, SignatureRule] = {r.key: r for r in SIGNATURE_RULES}
RULES_BY_SELECTOR: dict[str, SignatureRule] = {r.selector: r for r in SIGNATURE_RULES}

HIGH_RISK_SELECTORS: frozenset[str] = frozenset(
    r.selector for r in SIGNATURE_RULES if r.severity == Severity.HIGH
)


def selector_of(calldata: str) -> str:
    """Return the lowercase ``0x``-prefixed 4-byte selector of ``calldata``.

    Shorter inputs are returned normalised but truncated, so they never
    match a rule.
    """
    text = calldata.strip().lower()
    if not text.startswith("0x"):
        text = "0x" + text
    return text[:SELECTOR_HEX_LENGTH]


def match_rule(calldata: str) -> SignatureRule | None:
    """Look up the rule for the selector of ``calldata``."""
    return RULES_BY_SELECTOR.get(selector_of(calldata))


def has_arguments(calldata: str) -> bool:
    text = calldata.strip()
    if not text.lower().startswith("0x"):
        text = "0x" + text
    return len(text) > SELECTOR_HEX_LENGTH


def decode_parameters(rule: SignatureRule, calldata: str) -> tuple[Any, ...]:
    """Decode the argument words of ``calldata`` with the rule's layout.

    Raises:
        DecodingError: the data is too short or badly padded.
        ValueError: the data is not valid hex.
    """
    payload = decode_hex(calldata.strip())[4:]
    return tuple(decode(list(rule.parameter_types), payload))


def render_parameters(rule: SignatureRule, values: tuple[Any, ...]) -> list[Any]:
    """Make decoded values JSON-safe: integers as decimal strings."""
    rendered: list[Any] = []
    for abi_type, value in zip(rule.parameter_types, values):
        if abi_type == "address":
            rendered.append(to_checksum_address(value))
        elif isinstance(value, bool):
            rendered.append(value)
        elif isinstance(value, int):
            rendered.append(str(value))
        elif isinstance(value, bytes):
            rendered.append("0x" + value.hex())
        else:
            rendered.append(value)
    return rendered


def evaluate_rule(rule: SignatureRule, calldata: str, settings: Settings) -> RuleOutcome:
    """Decide whether a call matching ``rule`` produces a finding.

    Rules without a check always emit. For checked rules: no argument data
    or undecodable data emits without parameters; decoded data emits with
    parameters only when the check holds.
    """
    if rule.check is None or not has_arguments(calldata):
        return RuleOutcome(emit=True)

    try:
        values = decode_parameters(rule, calldata)
    except (DecodingError, ValueError):
        return RuleOutcome(emit=True)

    if not rule.check.holds(values, settings):
        return RuleOutcome(emit=False)
    return RuleOutcome(emit=True, parameters=render_parameters(rule, values))
