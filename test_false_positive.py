"""Test that genuine payment notifications don't trigger false positives."""
import pytest

from vigilantlink.classifier import classify
from vigilantlink.models import Classification


GENUINE_MESSAGES = [
    "You received ₹500 from John Doe via UPI. Transaction ID: 123456789",
    "You paid ₹250 to Sharma Stores. Transaction successful.",
    "Your A/c balance is ₹12,430 as of today.",
    "Hi, are we still meeting for lunch tomorrow?",
    "Call me back on 9876543210 tomorrow",
]


@pytest.mark.parametrize("message", GENUINE_MESSAGES)
def test_genuine_message_is_safe(message):
    verdict = classify(message)
    assert verdict.classification == Classification.SAFE
    assert verdict.riskScore == 0
    assert verdict.detectedPatterns == []


def test_received_confirmation():
    verdict = classify(GENUINE_MESSAGES[0])
    assert verdict.analysis.safeIndicators == 1
    assert verdict.analysis.paymentKeywords == 2
    assert verdict.analysis.suspiciousKeywords == 0
    assert verdict.analysis.hasPhoneNumber is False


def test_bare_phone_number_flagged_but_not_scored():
    verdict = classify("Call me back on 9876543210 tomorrow")
    assert verdict.analysis.hasPhoneNumber is True
    assert verdict.analysis.suspiciousKeywords == 0
    assert verdict.riskScore == 0


def test_stacked_safe_indicators_floor_at_zero():
    msg = "Transaction successful. Balance ₹500. received ₹5 from A, paid ₹5 to B"
    verdict = classify(msg)
    assert verdict.analysis.safeIndicators == 4
    assert verdict.riskScore == 0
    assert verdict.classification == Classification.SAFE


def test_empty_message():
    verdict = classify("")
    assert verdict.model_dump(mode="json") == {
        "classification": "safe",
        "riskScore": 0,
        "detectedPatterns": [],
        "analysis": {
            "suspiciousKeywords": 0,
            "paymentKeywords": 0,
            "safeIndicators": 0,
            "hasLinks": False,
            "hasPhoneNumber": False,
        },
    }


def test_classification_is_idempotent():
    msg = "Congratulations! KBC winner, scan https://bit.ly/x or call 9876543210"
    assert classify(msg).model_dump_json() == classify(msg).model_dump_json()


@pytest.mark.parametrize("message", [
    "₹" * 1000,
    "\x00\n\t",
    "scan verify claim reward cashback refund winner urgent " * 50 + "pay ₹1 get ₹9",
    "received ₹1 from " * 40,
    "verify \ud800 payment",
    "\udfff\ud800",
])
def test_score_always_in_range(message):
    verdict = classify(message)
    assert 0 <= verdict.riskScore <= 100
    assert isinstance(verdict.riskScore, int)
