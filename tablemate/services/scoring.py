"""Deterministic receipt trust scoring and fraud flag detection.

Two pure functions turn the five trust factors of a receipt into the
values stored with it:

* ``calculate_trust_score`` – a weighted sum of the factors. Each factor
  is clamped to [0, 1] (missing factors count as 0.7) and so is the
  result, so malformed upstream values can never push the score out of
  range.
* ``detect_fraud_flags`` – independent threshold checks, each mapping to
  at most one ``FraudFlag``. Several flags may fire together; a whole
  dollar amount over 1000 raises both the unusual-amount and the
  round-amount flag.

``derive_status`` applies the verification rule used when a receipt is
first stored. The weights and thresholds live here rather than in any
prompt so that externally suggested scores are never trusted directly.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from tablemate.models.enums import FraudFlag, ReceiptStatus
from tablemate.models.schemas import DEFAULT_FACTOR_VALUE, TrustFactors
from tablemate.utils.helpers import clamp_unit

FactorsLike = Union[TrustFactors, Mapping[str, Any]]

FACTOR_WEIGHTS: Dict[str, float] = {
    "image_quality": 0.25,
    "data_completeness": 0.30,
    "format_consistency": 0.20,
    "amount_reasonableness": 0.15,
    "timestamp_validity": 0.10,
}

# factor name -> (minimum acceptable value, flag raised below it)
FACTOR_THRESHOLDS = [
    ("image_quality", 0.6, FraudFlag.POOR_IMAGE_QUALITY),
    ("data_completeness", 0.7, FraudFlag.MISSING_CRITICAL_INFO),
    ("format_consistency", 0.8, FraudFlag.INCONSISTENT_FORMATTING),
    ("timestamp_validity", 0.8, FraudFlag.SUSPICIOUS_TIMESTAMP),
]

MAX_USUAL_AMOUNT = 1000.0
MIN_USUAL_AMOUNT = 0.01
ROUND_AMOUNT_THRESHOLD = 100.0

VERIFIED_SCORE_THRESHOLD = 0.8


def _factor_value(factors: FactorsLike, name: str) -> float:
    if isinstance(factors, TrustFactors):
        raw = getattr(factors, name, None)
    else:
        raw = factors.get(name) if factors is not None else None
    return clamp_unit(raw, DEFAULT_FACTOR_VALUE)


def calculate_trust_score(factors: FactorsLike) -> float:
    """Return the weighted trust score in [0, 1] for ``factors``."""
    score = math.fsum(
        _factor_value(factors, name) * weight for name, weight in FACTOR_WEIGHTS.items()
    )
    return max(0.0, min(1.0, score))


def detect_fraud_flags(factors: FactorsLike, amount: Optional[float] = None) -> List[FraudFlag]:
    """Return the fraud flags raised by ``factors`` and ``amount``.

    Flags come back in a fixed check order so that persisted lists are
    stable, but callers should treat the result as a set.
    """
    flags: List[FraudFlag] = []
    for name, minimum, flag in FACTOR_THRESHOLDS:
        if _factor_value(factors, name) < minimum:
            flags.append(flag)

    if amount is not None and (amount > MAX_USUAL_AMOUNT or amount < MIN_USUAL_AMOUNT):
        flags.append(FraudFlag.UNUSUAL_AMOUNT_PATTERN)

    if amount is not None and float(amount).is_integer() and amount > ROUND_AMOUNT_THRESHOLD:
        flags.append(FraudFlag.ROUND_AMOUNT_SUSPICIOUS)

    return flags


def derive_status(trust_score: float, fraud_flags: Iterable[Any]) -> ReceiptStatus:
    """Verification status assigned when a receipt is created."""
    if trust_score > VERIFIED_SCORE_THRESHOLD:
        return ReceiptStatus.VERIFIED
    if any(True for _ in fraud_flags):
        return ReceiptStatus.FLAGGED
    return ReceiptStatus.PENDING
