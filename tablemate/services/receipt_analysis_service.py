"""Receipt analysis service.

This service turns raw receipt image bytes into a ``ReceiptAnalysis``.
The image is normalised and handed to the injected ``AnalysisClient``
together with the receipt prompt. Whatever comes back is treated as
untrusted: every trust factor and the confidence are clamped to [0, 1],
amounts and dates are parsed defensively, and the trust score and fraud
flags are recomputed locally with :mod:`tablemate.services.scoring`.

Should the external call be unavailable, fail, time out or answer with
something unusable, the service returns a simulated result instead so
that uploads are never blocked. Simulated results always carry the
``ai_analysis_unavailable`` flag and ``simulated=True`` so that callers
can tell them apart from a real analysis.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from tablemate.models.enums import FraudFlag
from tablemate.models.schemas import ReceiptAnalysis, TrustFactors
from tablemate.services.analysis_client import AnalysisClient, AnalysisRequest, run_analysis
from tablemate.services.scoring import calculate_trust_score, detect_fraud_flags
from tablemate.utils.helpers import clamp_unit, parse_amount, parse_iso_datetime, to_naive_utc, utcnow
from tablemate.utils.image_processing import preprocess_image
from tablemate.utils.prompts import get_receipt_analysis_prompt

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8

# Simulated analysis used when the model cannot be reached
FALLBACK_MERCHANTS = ["Coffee Shop", "Restaurant", "Grocery Store", "Fast Food", "Cafe"]
FALLBACK_AMOUNT_RANGE = (5, 54)
FALLBACK_ITEMS = ["Item analysis unavailable"]
FALLBACK_CONFIDENCE = 0.6
FALLBACK_FACTORS = TrustFactors(
    image_quality=0.75,
    data_completeness=0.80,
    format_consistency=0.85,
    amount_reasonableness=0.90,
    timestamp_validity=0.95,
)


def _clean_items(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    items: List[str] = []
    for entry in raw:
        if isinstance(entry, dict):
            entry = entry.get("name") or entry.get("description")
        if entry is None:
            continue
        text = str(entry).strip()
        if text:
            items.append(text)
    return items


def _clean_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


class ReceiptAnalysisService:
    """Analyse receipt images and score their trustworthiness."""

    def __init__(
        self,
        client: Optional[AnalysisClient] = None,
        rng: Optional[random.Random] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = client
        self.rng = rng or random.Random()
        self.timeout = timeout

    async def analyze(self, image_data: bytes) -> ReceiptAnalysis:
        """Analyse ``image_data``; never raises because of the external service."""
        logger.info("Analysing receipt image bytes=%d", len(image_data))
        request = AnalysisRequest(
            instructions=get_receipt_analysis_prompt(),
            text="Analyze this receipt for authenticity and extract the key information.",
            image=preprocess_image(image_data),
            max_tokens=1000,
        )
        result = await run_analysis(self.client, request, "receipt_analysis", timeout=self.timeout)
        if result is None:
            return self.simulate()
        return self.from_model_output(result)

    def from_model_output(self, result: Dict[str, Any]) -> ReceiptAnalysis:
        """Repair a model answer and recompute score and flags locally."""
        factors = TrustFactors.from_raw(result.get("trust_factors", result.get("trustFactors")))
        amount = parse_amount(result.get("amount"))
        transaction_date = parse_iso_datetime(result.get("date", result.get("transaction_date")))
        merchant = result.get("merchant_name", result.get("merchantName"))

        fraud_flags = detect_fraud_flags(factors, amount)
        return ReceiptAnalysis(
            merchant_name=_clean_text(merchant),
            # negative totals still raise the unusual amount flag above
            amount=amount if amount is not None and amount >= 0 else None,
            transaction_date=to_naive_utc(transaction_date),
            items=_clean_items(result.get("items")),
            trust_factors=factors,
            trust_score=calculate_trust_score(factors),
            fraud_flags=fraud_flags,
            confidence=clamp_unit(result.get("confidence"), DEFAULT_CONFIDENCE),
        )

    def simulate(self) -> ReceiptAnalysis:
        """Build the clearly labelled stand-in result used on fallback."""
        low, high = FALLBACK_AMOUNT_RANGE
        amount = float(self.rng.randint(low, high))
        factors = FALLBACK_FACTORS.model_copy()
        fraud_flags = detect_fraud_flags(factors, amount)
        if FraudFlag.AI_ANALYSIS_UNAVAILABLE not in fraud_flags:
            fraud_flags.append(FraudFlag.AI_ANALYSIS_UNAVAILABLE)
        return ReceiptAnalysis(
            merchant_name=self.rng.choice(FALLBACK_MERCHANTS),
            amount=amount,
            transaction_date=utcnow(),
            items=list(FALLBACK_ITEMS),
            trust_factors=factors,
            trust_score=calculate_trust_score(factors),
            fraud_flags=fraud_flags,
            confidence=FALLBACK_CONFIDENCE,
            simulated=True,
        )
