"""GET /v1/dues/{participant} - What a user owes and is owed, with recommended transfers"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from splitledger.api.v1.schemas import DuesResponse
from splitledger.api.dependencies import get_display_name, get_request_id, get_split_repository
from splitledger.infrastructure.database.repositories import SplitRepository
from splitledger.domain.dues import compute_user_dues, group_splits_by_group
from splitledger.domain.models import SplitScope
from splitledger.domain.naming import DisplayName
from splitledger.infrastructure.observability.metrics import record_dues_report
from splitledger.infrastructure.observability.logging import log_dues_report

router = APIRouter()


@router.get("/dues/{participant}", response_model=DuesResponse)
def get_user_dues(
    participant: str,
    request: Request,
    repo: SplitRepository = Depends(get_split_repository),
    display_name: DisplayName = Depends(get_display_name),
):
    """
    Compute a participant's dues across every group they belong to.

    Flow:
    1. Snapshot all non-settled splits involving the participant
    2. Settle each group separately and the pooled set globally
    3. Return totals, per-group transfers and global transfers

    Groups that cannot be settled come back with `error` set instead of
    failing the whole response.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        splits = repo.fetch_active_splits(SplitScope.for_participant(participant))
        report = compute_user_dues(
            participant,
            group_splits_by_group(splits),
            display_name=display_name,
        )
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_dues_report(report)
    log_dues_report(request_id, report, duration_ms)

    return DuesResponse.from_domain(report)
