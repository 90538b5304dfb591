"""API routes for receipt upload and retrieval."""

from __future__ import annotations

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from tablemate.api.dependencies import get_receipt_analysis_service, get_storage
from tablemate.core.config import settings
from tablemate.core.observability import sentry_breadcrumb, sentry_set_tags
from tablemate.models.schemas import ReceiptRead, ReceiptUpdate
from tablemate.services.receipt_analysis_service import ReceiptAnalysisService
from tablemate.services.repository import Storage
from tablemate.services.scoring import derive_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts", tags=["receipts"])


@router.get("", response_model=List[ReceiptRead])
async def list_receipts(storage: Storage = Depends(get_storage)) -> List[ReceiptRead]:
    """List receipts, newest first."""
    return await storage.receipts.list()


@router.get("/{receipt_id}", response_model=ReceiptRead)
async def get_receipt(receipt_id: int, storage: Storage = Depends(get_storage)) -> ReceiptRead:
    receipt = await storage.receipts.get(receipt_id)
    if receipt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receipt not found")
    return receipt


@router.post("", response_model=ReceiptRead)
async def upload_receipt(
    receipt: Optional[UploadFile] = File(None),
    storage: Storage = Depends(get_storage),
    analysis: ReceiptAnalysisService = Depends(get_receipt_analysis_service),
) -> ReceiptRead:
    """Upload a receipt image, analyse it and store the result."""
    if receipt is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if not (receipt.content_type or "").startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image files are allowed")

    contents = await receipt.read()
    if not contents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")
    if len(contents) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File too large")

    sentry_set_tags({"route": "receipts.upload", "content_type": receipt.content_type})
    result = await analysis.analyze(contents)
    record = await storage.receipts.create(
        dict(
            filename=f"receipt_{int(time.time() * 1000)}.jpg",
            original_filename=receipt.filename or "receipt.jpg",
            merchant_name=result.merchant_name,
            amount=result.amount,
            transaction_date=result.transaction_date,
            items=result.items,
            trust_score=result.trust_score,
            fraud_flags=result.fraud_flags,
            confidence=result.confidence,
            trust_factors=result.trust_factors,
            status=derive_status(result.trust_score, result.fraud_flags),
        )
    )
    sentry_breadcrumb(
        category="receipt",
        message="receipt.stored",
        data={"receipt_id": record.id, "status": record.status.value, "simulated": result.simulated},
    )
    logger.info(
        "Receipt %s stored status=%s score=%.3f flags=%s",
        record.id,
        record.status.value,
        record.trust_score,
        [f.value for f in record.fraud_flags],
    )
    return record


@router.patch("/{receipt_id}", response_model=ReceiptRead)
async def update_receipt(
    receipt_id: int,
    payload: ReceiptUpdate,
    storage: Storage = Depends(get_storage),
) -> ReceiptRead:
    """Staff correction of merchant name or status."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    receipt = await storage.receipts.update(receipt_id, changes)
    if receipt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receipt not found")
    return receipt
