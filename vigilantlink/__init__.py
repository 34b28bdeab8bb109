"""
VigilantLink — UPI Payment-Message Risk Classifier
===================================================

Modules:
    - main.py       : FastAPI application (analyze, reports, stats, patterns)
    - classifier.py : Two-phase rule scoring engine (evidence, then thresholds)
    - patterns.py   : Immutable RE2-compiled rule catalogue and keyword sets
    - models.py     : Pydantic schemas and the ordered Classification enum
    - store.py      : Thread-safe report stores (in-memory, JSON file)
    - auth.py       : Optional x-api-key identity, anonymous fallback
    - config.py     : Environment settings (.env aware)
"""

from vigilantlink.classifier import Classifier, classify
from vigilantlink.models import Classification, Verdict

__all__ = ["Classifier", "Classification", "Verdict", "classify"]
