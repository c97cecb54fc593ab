"""Unit tests for CredentialPolicy.

Tests cover:
- Scoring (length tiers, classes, entropy, penalties, clamping)
- Classification breakpoints
- Hard-rule validation, independent of the score
- Breach lookup with timeout and error degradation
- assess() combining all of the above
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from school_auth.domain.enums.password_strength import PasswordStrength
from school_auth.domain.policies.credential_policy import CredentialPolicy


def make_policy(compromised: bool = False, **kwargs) -> CredentialPolicy:
    checker = AsyncMock()
    checker.is_compromised.return_value = compromised
    return CredentialPolicy(breach_checker=checker, logger=Mock(), **kwargs)


@pytest.mark.unit
class TestCredentialPolicyScore:
    @pytest.mark.parametrize(
        "password, expected_score, expected_strength",
        [
            ("Str0ng!Passw0rd#2024", 100, PasswordStrength.VERY_STRONG),
            ("password", 25, PasswordStrength.WEAK),
            ("abc", 0, PasswordStrength.VERY_WEAK),
            ("", 0, PasswordStrength.VERY_WEAK),
        ],
    )
    def test_reference_scores(self, password, expected_score, expected_strength):
        policy = make_policy()

        score = policy.score(password)

        assert score == expected_score
        assert policy.classify(score) is expected_strength

    def test_repetition_penalty(self):
        policy = make_policy()

        assert policy.score("Zyxw9!aaa") < policy.score("Zyxw9!abq")

    def test_score_is_clamped(self):
        policy = make_policy()

        assert 0 <= policy.score("aaa111") <= 100
        assert policy.score("Xq7!" * 10) == 100

    @pytest.mark.parametrize(
        "score, strength",
        [
            (0, PasswordStrength.VERY_WEAK),
            (19, PasswordStrength.VERY_WEAK),
            (20, PasswordStrength.WEAK),
            (40, PasswordStrength.FAIR),
            (60, PasswordStrength.GOOD),
            (80, PasswordStrength.STRONG),
            (94, PasswordStrength.STRONG),
            (95, PasswordStrength.VERY_STRONG),
        ],
    )
    def test_classify_breakpoints(self, score, strength):
        assert CredentialPolicy.classify(score) is strength

    def test_sequence_detection_is_case_insensitive(self):
        assert CredentialPolicy.contains_common_sequence("xxQWErty")
        assert not CredentialPolicy.contains_common_sequence("Zq8!mP")


@pytest.mark.unit
class TestCredentialPolicyValidate:
    def test_valid_password(self):
        validation = make_policy().validate("Str0ngPassword")

        assert validation.is_valid
        assert validation.violations == ()

    def test_empty_password(self):
        validation = make_policy().validate("")

        assert not validation.is_valid
        assert validation.violations == ("Password is required",)

    def test_reports_every_violated_rule(self):
        validation = make_policy().validate("short")

        assert not validation.is_valid
        assert len(validation.violations) == 3
        assert any("at least 8" in v for v in validation.violations)
        assert any("uppercase" in v for v in validation.violations)
        assert any("digit" in v for v in validation.violations)

    def test_maximum_length(self):
        validation = make_policy().validate("Aa1" + "x" * 126)

        assert not validation.is_valid
        assert any("at most 128" in v for v in validation.violations)

    def test_valid_but_weak_and_strong_but_invalid(self):
        policy = make_policy()

        assert policy.validate("Aaaaaaa1").is_valid
        assert policy.score("Aaaaaaa1") < 60
        assert not policy.validate("!!correct horse battery staple!!").is_valid
        assert policy.score("!!correct horse battery staple!!") >= 60


@pytest.mark.unit
class TestCredentialPolicyBreachLookup:
    async def test_delegates_to_checker(self):
        policy = make_policy(compromised=True)

        assert await policy.is_compromised("Password1") is True

    async def test_empty_password_skips_lookup(self):
        checker = AsyncMock()
        policy = CredentialPolicy(breach_checker=checker, logger=Mock())

        assert await policy.is_compromised("") is False
        checker.is_compromised.assert_not_called()

    async def test_timeout_reports_not_compromised(self):
        async def slow(_plaintext: str) -> bool:
            await asyncio.sleep(1)
            return True

        checker = Mock()
        checker.is_compromised = slow
        logger = Mock()
        policy = CredentialPolicy(
            breach_checker=checker, logger=logger, timeout_seconds=0.01
        )

        assert await policy.is_compromised("Password1") is False
        logger.warning.assert_called_once()
        assert logger.warning.call_args.args[0] == "breach_check_timeout"

    async def test_checker_error_reports_not_compromised(self):
        checker = AsyncMock()
        checker.is_compromised.side_effect = ConnectionError("down")
        logger = Mock()
        policy = CredentialPolicy(breach_checker=checker, logger=logger)

        assert await policy.is_compromised("Password1") is False
        assert logger.warning.call_args.args[0] == "breach_check_failed"

    async def test_assess_combines_everything(self):
        policy = make_policy(compromised=True)

        assessment = await policy.assess("password")

        assert assessment.score == 25
        assert assessment.strength is PasswordStrength.WEAK
        assert not assessment.is_valid
        assert assessment.is_compromised
        assert "Use at least 12 characters" in assessment.suggestions
