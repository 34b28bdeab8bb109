"""
Rule-based risk classifier for UPI payment messages.

Scores a message in two phases. First every catalogue rule and heuristic
adds or subtracts evidence, upgrading the running classification but
never lowering it. Then the accumulated score is thresholded: >= 70 is
high risk, >= 30 is a warning, and a low score backed by a safe
confirmation (or a negative score) is safe. The threshold phase is
authoritative and may lower the running classification.

The classifier holds no per-call state and can be shared across threads.
"""

from typing import Optional

from vigilantlink.models import Analysis, Classification, Verdict
from vigilantlink.patterns import (
    LINK_PATTERN,
    PHONE_PATTERN,
    PatternCatalogue,
    compile_pattern,
    default_catalogue,
    utf8_safe,
)


COMBINATION_LABEL = "Multiple suspicious keywords with payment context"
LINK_LABEL = "Contains external links"
PHONE_LABEL = "Phone number in suspicious context"


class Classifier:
    """Pure function from message text to Verdict."""

    HIGH_RISK_THRESHOLD: int = 70
    WARNING_THRESHOLD: int = 30

    COMBINATION_WEIGHT: int = 30
    LINK_WEIGHT: int = 25
    PHONE_WEIGHT: int = 15

    # Combination heuristic minimums
    MIN_SUSPICIOUS: int = 2
    MIN_PAYMENT: int = 1

    def __init__(self, catalogue: Optional[PatternCatalogue] = None) -> None:
        self.catalogue = catalogue or default_catalogue
        self._link_re = compile_pattern(LINK_PATTERN)
        self._phone_re = compile_pattern(PHONE_PATTERN)

    def classify(self, message: str) -> Verdict:
        """Classify a message. Total over all strings, never raises."""
        message = utf8_safe(message or "")
        catalogue = self.catalogue

        risk_score = 0
        detected = []
        classification = Classification.SAFE

        for rule in catalogue.high_risk:
            if rule.matches(message):
                risk_score += rule.weight
                detected.append(rule.description)
                classification = Classification.HIGH_RISK

        for rule in catalogue.warning:
            if rule.matches(message):
                risk_score += rule.weight
                detected.append(rule.description)
                classification = classification.upgrade(Classification.WARNING)

        safe_indicators = 0
        for rule in catalogue.safe_indicators:
            if rule.matches(message):
                safe_indicators += 1
                risk_score += rule.weight

        lowered = message.lower()
        suspicious_count = sum(1 for kw in catalogue.suspicious_keywords if kw in lowered)
        payment_count = sum(1 for kw in catalogue.payment_keywords if kw in lowered)

        if suspicious_count >= self.MIN_SUSPICIOUS and payment_count >= self.MIN_PAYMENT:
            risk_score += self.COMBINATION_WEIGHT
            detected.append(COMBINATION_LABEL)
            classification = classification.upgrade(Classification.WARNING)

        has_links = self._link_re.search(message) is not None
        if has_links:
            risk_score += self.LINK_WEIGHT
            detected.append(LINK_LABEL)
            classification = classification.upgrade(Classification.WARNING)

        # Reported regardless of the keyword gate below
        has_phone = self._phone_re.search(message) is not None
        if has_phone and suspicious_count > 0:
            risk_score += self.PHONE_WEIGHT
            detected.append(PHONE_LABEL)

        if risk_score >= self.HIGH_RISK_THRESHOLD:
            classification = Classification.HIGH_RISK
        elif risk_score >= self.WARNING_THRESHOLD:
            classification = Classification.WARNING
        elif safe_indicators > 0 or risk_score < 0:
            classification = Classification.SAFE
            risk_score = max(0, risk_score)

        risk_score = min(100, max(0, risk_score))

        return Verdict(
            classification=classification,
            riskScore=risk_score,
            detectedPatterns=detected,
            analysis=Analysis(
                suspiciousKeywords=suspicious_count,
                paymentKeywords=payment_count,
                safeIndicators=safe_indicators,
                hasLinks=has_links,
                hasPhoneNumber=has_phone,
            ),
        )


# Module-level singleton
classifier = Classifier()


def classify(message: str) -> Verdict:
    """Classify with the default catalogue."""
    return classifier.classify(message)
