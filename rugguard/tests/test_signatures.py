"""Tests for rugguard.analyzer.signatures — rule table and calldata interpreter."""

from __future__ import annotations

import pytest
from eth_abi.exceptions import DecodingError

from conftest import HOLDER, TOKENS, mint, set_fee
from rugguard.analyzer.signatures import (
    HIGH_RISK_SELECTORS,
    RULES_BY_KEY,
    SIGNATURE_RULES,
    ParameterCheck,
    decode_parameters,
    evaluate_rule,
    has_arguments,
    match_rule,
    selector_of,
)
from rugguard.core.config import Settings
from rugguard.core.types import Severity


class TestRuleTable:
    def test_selectors_unique(self):
        selectors = [r.selector for r in SIGNATURE_RULES]
        assert len(selectors) == len(set(selectors))

    def test_selectors_are_lowercase_4_bytes(self):
        for rule in SIGNATURE_RULES:
            assert rule.selector.startswith("0x")
            assert len(rule.selector) == 10
            assert rule.selector == rule.selector.lower()

    def test_high_severity_rules(self):
        high = {r.key for r in SIGNATURE_RULES if r.severity == Severity.HIGH}
        assert high == {
            "OWNERSHIP_TRANSFER",
            "BLACKLIST",
            "SELFDESTRUCT",
            "MINT",
            "SET_FEE",
            "REMOVE_LIQUIDITY",
        }
        assert len(HIGH_RISK_SELECTORS) == 6

    def test_only_mint_and_fee_are_checked(self):
        checked = {r.key for r in SIGNATURE_RULES if r.check is not None}
        assert checked == {"MINT", "SET_FEE"}

    def test_signature_text(self):
        assert RULES_BY_KEY["MINT"].signature == "mint(address,uint256)"
        assert RULES_BY_KEY["PAUSE"].signature == "pause()"


class TestSelectorMatching:
    def test_selector_is_case_insensitive(self):
        assert selector_of("0xF2FDE38B" + "00" * 32) == "0xf2fde38b"
        assert match_rule("0xF2FDE38B").key == "OWNERSHIP_TRANSFER"

    def test_selector_without_prefix(self):
        assert selector_of("40c10f19") == "0x40c10f19"

    def test_short_input_never_matches(self):
        assert match_rule("0x") is None
        assert match_rule("0xf2fd") is None

    def test_unknown_selector(self):
        assert match_rule("0xa9059cbb" + "00" * 64) is None

    def test_has_arguments(self):
        assert not has_arguments("0x8456cb59")
        assert has_arguments(set_fee(1))


class TestParameterCheck:
    def test_scaled_threshold(self, settings: Settings):
        check = ParameterCheck(index=1, threshold_setting="suspicious_mint_threshold", scaled=True)
        assert check.threshold(settings) == 1_000_000 * TOKENS

    def test_unscaled_threshold(self, settings: Settings):
        check = ParameterCheck(index=0, threshold_setting="max_acceptable_fee_bps")
        assert check.threshold(settings) == 1000

    def test_strictly_greater(self, settings: Settings):
        check = ParameterCheck(index=0, threshold_setting="max_acceptable_fee_bps")
        assert check.holds((1001,), settings)
        assert not check.holds((1000,), settings)


class TestEvaluateRule:
    def test_unchecked_rule_always_emits(self, settings: Settings):
        rule = RULES_BY_KEY["OWNERSHIP_TRANSFER"]
        outcome = evaluate_rule(rule, "0xf2fde38b", settings)
        assert outcome.emit
        assert outcome.parameters is None

    def test_large_mint_emits_with_parameters(self, settings: Settings):
        amount = 2_000_000 * TOKENS
        outcome = evaluate_rule(RULES_BY_KEY["MINT"], mint(amount), settings)
        assert outcome.emit
        assert outcome.parameters is not None
        assert outcome.parameters[0].lower() == HOLDER
        assert outcome.parameters[1] == str(amount)

    def test_mint_at_threshold_is_suppressed(self, settings: Settings):
        outcome = evaluate_rule(RULES_BY_KEY["MINT"], mint(1_000_000 * TOKENS), settings)
        assert not outcome.emit

    def test_small_mint_is_suppressed(self, settings: Settings):
        outcome = evaluate_rule(RULES_BY_KEY["MINT"], mint(500 * TOKENS), settings)
        assert not outcome.emit

    def test_high_fee_emits(self, settings: Settings):
        outcome = evaluate_rule(RULES_BY_KEY["SET_FEE"], set_fee(3000), settings)
        assert outcome.emit
        assert outcome.parameters == ["3000"]

    def test_acceptable_fee_is_suppressed(self, settings: Settings):
        outcome = evaluate_rule(RULES_BY_KEY["SET_FEE"], set_fee(1000), settings)
        assert not outcome.emit

    def test_threshold_follows_settings(self):
        strict = Settings(_env_file=None, max_acceptable_fee_bps=100)
        outcome = evaluate_rule(RULES_BY_KEY["SET_FEE"], set_fee(500), strict)
        assert outcome.emit

    def test_no_arguments_fails_open(self, settings: Settings):
        outcome = evaluate_rule(RULES_BY_KEY["MINT"], "0x40c10f19", settings)
        assert outcome.emit
        assert outcome.parameters is None

    def test_truncated_arguments_fail_open(self, settings: Settings):
        # Only the address word; the amount word is missing.
        data = "0x40c10f19" + "00" * 12 + HOLDER[2:]
        outcome = evaluate_rule(RULES_BY_KEY["MINT"], data, settings)
        assert outcome.emit
        assert outcome.parameters is None

    def test_invalid_hex_fails_open(self, settings: Settings):
        outcome = evaluate_rule(RULES_BY_KEY["SET_FEE"], "0x69fe0e2dzz", settings)
        assert outcome.emit
        assert outcome.parameters is None


class TestDecodeParameters:
    def test_decodes_address_and_amount(self):
        values = decode_parameters(RULES_BY_KEY["MINT"], mint(7))
        assert values[0].lower() == HOLDER
        assert values[1] == 7

    def test_short_data_raises(self):
        with pytest.raises(DecodingError):
            decode_parameters(RULES_BY_KEY["SET_FEE"], "0x69fe0e2d" + "00" * 4)
