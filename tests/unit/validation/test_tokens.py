import logging
import math

import pytest

from code_kit.validation.tokens import check_token_limits, estimate_tokens, within_budget


@pytest.mark.parametrize("text", ["", "a", "abcd", "abcde", "x" * 1001, "héllo wörld"])
def test_estimate_is_ceil_of_quarter_length(text: str) -> None:
    assert estimate_tokens(text) == math.ceil(len(text) / 4)


def test_estimate_empty_is_zero() -> None:
    assert estimate_tokens("") == 0


class TestWithinBudget:
    # max_tokens=100 -> threshold 80 tokens -> 320 characters
    def test_exactly_at_threshold(self) -> None:
        assert within_budget("x" * 320, 100) is True

    def test_just_below_threshold(self) -> None:
        assert within_budget("x" * 316, 100) is True

    def test_just_above_threshold(self) -> None:
        # 321 chars -> 81 tokens
        assert within_budget("x" * 321, 100) is False

    def test_custom_safety_margin(self) -> None:
        assert within_budget("x" * 400, 100, safety_margin=1.0) is True
        assert within_budget("x" * 401, 100, safety_margin=1.0) is False


class TestCheckTokenLimits:
    def test_boundaries(self) -> None:
        assert check_token_limits("x" * 320, 100) is True
        assert check_token_limits("x" * 321, 100) is False

    def test_default_limit(self) -> None:
        # 4000 * 0.8 = 3200 tokens -> 12800 characters
        assert check_token_limits("x" * 12800) is True
        assert check_token_limits("x" * 12801) is False

    def test_warns_when_over_budget(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="code_kit.validation.tokens"):
            check_token_limits("x" * 400, 100)

        assert "estimated: 100, limit: 100" in caplog.text

    def test_silent_when_within_budget(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="code_kit.validation.tokens"):
            check_token_limits("short", 100)

        assert caplog.records == []
