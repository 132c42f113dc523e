"""POST /v1/splits/{split_id}/payments - Record a payment against a member's share"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from splitledger.api.v1.schemas import PaymentRequest, PaymentResponse
from splitledger.api.dependencies import get_request_id
from splitledger.domain.exceptions import DomainException
from splitledger.domain.models import PaymentMethod
from splitledger.infrastructure.database.session import get_db
from splitledger.infrastructure.database.repositories import SplitRepository

router = APIRouter()


@router.post("/splits/{split_id}/payments", response_model=PaymentResponse)
def record_payment(
    split_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Record that a member paid their share outside the ledger.

    The payment is stored and the share marked paid; the next dues or
    settlement computation reflects the change.
    """
    request_id = get_request_id(request)
    repo = SplitRepository(db)

    try:
        payment = repo.record_payment(
            split_id,
            request_body.participant,
            amount=request_body.amount,
            method=request_body.method,
            transaction_hash=request_body.transaction_hash,
        )
        if payment is None:
            db.rollback()
            raise HTTPException(status_code=404, detail="No unpaid share for participant on this split")
        db.commit()

    except HTTPException:
        raise

    except DomainException as e:
        db.rollback()
        logging.warning(f"Payment rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "split_id": split_id,
            "participant": request_body.participant,
            "payment_id": payment.id,
            "method": payment.method,
        },
    )
    return PaymentResponse(
        payment_id=payment.id,
        split_id=split_id,
        participant=payment.from_participant,
        amount=payment.amount,
        method=PaymentMethod(payment.method),
        status=payment.status,
        transaction_hash=payment.transaction_hash,
    )
