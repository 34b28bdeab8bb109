"""Static rule catalogue for UPI payment-message scoring.

Three rule tables (high risk, warning, safe indicators) plus two keyword
sets used for co-occurrence scoring. Every pattern is compiled once, at
catalogue construction, with RE2 so matching stays linear in the message
length whatever the input looks like.

Patterns are matched case-insensitively against the raw message. Case
folding is ASCII-only and `.` never crosses \\n, \\r, U+2028 or U+2029.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple

import re2


class RuleCategory(str, Enum):
    HIGH_RISK = "HighRisk"
    WARNING = "Warning"
    SAFE_INDICATOR = "SafeIndicator"


# Score contribution per matching rule
CATEGORY_WEIGHTS = {
    RuleCategory.HIGH_RISK: 80,
    RuleCategory.WARNING: 40,
    RuleCategory.SAFE_INDICATOR: -20,
}


# `.` stops at every line terminator, not only \n
_ANY_BUT_LINE_END = r"[^\n\r\x{2028}\x{2029}]"


def _translate(pattern: str) -> str:
    """Rewrite a pattern for RE2 with ASCII-only case folding.

    Letters outside escapes become `[aA]` (or `aA` inside a class) and a
    bare `.` becomes a class excluding all line terminators. Escapes and
    `(?...)` group prefixes are copied through unchanged.
    """
    out = []
    in_class = False
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "\\" and i + 1 < n:
            end = i + 2
            if end < n and pattern[end] == "{":
                end = pattern.find("}", end) + 1 or n
            out.append(pattern[i:end])
            i = end
            continue
        if not in_class and pattern.startswith("(?", i):
            ends = [j for j in (pattern.find(c, i + 2) for c in ":)>") if j != -1]
            end = min(ends) + 1 if ends else n
            out.append(pattern[i:end])
            i = end
            continue
        if ch == "[" and not in_class:
            in_class = True
            out.append(ch)
        elif ch == "]" and in_class:
            in_class = False
            out.append(ch)
        elif ch == "." and not in_class:
            out.append(_ANY_BUT_LINE_END)
        elif ch.isascii() and ch.isalpha():
            pair = ch.lower() + ch.upper()
            out.append(pair if in_class else "[" + pair + "]")
        else:
            out.append(ch)
        i += 1
    return "".join(out)


def compile_pattern(pattern: str) -> Any:
    """Compile a case-insensitive RE2 pattern. Raises on unsupported syntax."""
    return re2.compile(_translate(pattern))


def utf8_safe(text: str) -> str:
    """Replace lone surrogates so the text can be handed to RE2."""
    return text.encode("utf-8", "surrogatepass").decode("utf-8", "replace")


@dataclass(frozen=True)
class PatternRule:
    """A single catalogue rule: regex, label, category."""

    pattern: str
    description: str
    category: RuleCategory
    _compiled: Any = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", compile_pattern(self.pattern))

    @property
    def weight(self) -> int:
        return CATEGORY_WEIGHTS[self.category]

    def matches(self, text: str) -> bool:
        return self._compiled.search(text) is not None


def _rules(category: RuleCategory, table: List[Tuple[str, str]]) -> Tuple[PatternRule, ...]:
    return tuple(PatternRule(p, d, category) for p, d in table)


HIGH_RISK_PATTERNS = [
    (r'scan.*to.*receive.*cashback',    "Fake cashback scan trap"),
    (r'refund.*credited.*verify',       "Fake refund verification scam"),
    (r'congratulations.*won.*scan',     "Fake lottery/prize scam"),
    (r'urgent.*verify.*account',        "Account verification phishing"),
    (r'click.*link.*claim.*reward',     "Reward claim phishing"),
    (r'pay.*₹1.*get.*₹\d+',             "Pay small amount scam"),
    (r'kbc.*winner.*scan',              "KBC lottery scam"),
    (r'government.*subsidy.*verify',    "Fake government scheme"),
]

WARNING_PATTERNS = [
    (r'cashback.*pay',                  "Suspicious cashback offer"),
    (r'reward.*upi',                    "UPI reward scheme"),
    (r'verify.*payment',                "Payment verification request"),
    (r'update.*kyc',                    "KYC update request"),
    (r'limited.*time.*offer',           "Urgency-based offer"),
    (r'scan.*qr.*code',                 "QR code scan request"),
]

SAFE_INDICATOR_PATTERNS = [
    (r'received.*₹\d+.*from',           "Payment received confirmation"),
    (r'paid.*₹\d+.*to',                 "Payment sent confirmation"),
    (r'transaction.*successful',        "Transaction success message"),
    (r'balance.*₹\d+',                  "Balance inquiry response"),
]

# Lowercase substrings; counted, not matched as words
SUSPICIOUS_KEYWORDS = (
    "scan", "verify", "claim", "reward", "cashback", "refund", "winner",
    "congratulations", "urgent", "limited time", "expire", "activate",
)

PAYMENT_KEYWORDS = ("pay", "upi", "paytm", "gpay", "phonepe", "₹", "rupees")

LINK_PATTERN = r'https?://|bit\.ly|tinyurl'
PHONE_PATTERN = r'\b\d{10}\b'


@dataclass(frozen=True)
class PatternCatalogue:
    """Immutable bundle of rules and keyword sets. Safe to share across threads."""

    high_risk: Tuple[PatternRule, ...]
    warning: Tuple[PatternRule, ...]
    safe_indicators: Tuple[PatternRule, ...]
    suspicious_keywords: Tuple[str, ...] = SUSPICIOUS_KEYWORDS
    payment_keywords: Tuple[str, ...] = PAYMENT_KEYWORDS

    @classmethod
    def from_tables(
        cls,
        high_risk: List[Tuple[str, str]],
        warning: List[Tuple[str, str]],
        safe_indicators: List[Tuple[str, str]],
        suspicious_keywords: Tuple[str, ...] = SUSPICIOUS_KEYWORDS,
        payment_keywords: Tuple[str, ...] = PAYMENT_KEYWORDS,
    ) -> "PatternCatalogue":
        """Build a catalogue from (pattern, description) tables."""
        return cls(
            high_risk=_rules(RuleCategory.HIGH_RISK, high_risk),
            warning=_rules(RuleCategory.WARNING, warning),
            safe_indicators=_rules(RuleCategory.SAFE_INDICATOR, safe_indicators),
            suspicious_keywords=tuple(k.lower() for k in suspicious_keywords),
            payment_keywords=tuple(k.lower() for k in payment_keywords),
        )

    @property
    def rules(self) -> Tuple[PatternRule, ...]:
        """All rules in evaluation order."""
        return self.high_risk + self.warning + self.safe_indicators

    def __len__(self) -> int:
        return len(self.rules)


# Module-level default, built once at import
default_catalogue = PatternCatalogue.from_tables(
    HIGH_RISK_PATTERNS,
    WARNING_PATTERNS,
    SAFE_INDICATOR_PATTERNS,
)
