"""GET /v1/groups/{group_id}/settlement - Recommended transfers that settle a group"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from splitledger.api.v1.schemas import SettlementResponse
from splitledger.api.dependencies import get_display_name, get_request_id, get_split_repository
from splitledger.infrastructure.database.repositories import SplitRepository
from splitledger.domain.settlement import compute_group_settlement
from splitledger.domain.exceptions import DataIntegrityError, PrecisionOverflowError
from splitledger.domain.models import SplitScope
from splitledger.domain.naming import DisplayName
from splitledger.infrastructure.observability.metrics import record_settlement, record_settlement_failure
from splitledger.infrastructure.observability.logging import log_group_settlement

router = APIRouter()


@router.get("/groups/{group_id}/settlement", response_model=SettlementResponse)
def get_group_settlement(
    group_id: str,
    request: Request,
    perspective: Optional[str] = Query(None, description="Participant to phrase descriptions for"),
    repo: SplitRepository = Depends(get_split_repository),
    display_name: DisplayName = Depends(get_display_name),
):
    """
    Net balances of a group and the transfers that zero them.

    Returns:
        Balance per participant and ordered transactions
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        splits = repo.fetch_active_splits(SplitScope.for_group(group_id))
        result = compute_group_settlement(splits, perspective=perspective, display_name=display_name)

    except (DataIntegrityError, PrecisionOverflowError) as e:
        record_settlement_failure("group", e)
        logging.warning(f"Group {group_id} cannot be settled: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_settlement(result)
    log_group_settlement(request_id, group_id, len(result.transactions), duration_ms)

    return SettlementResponse.from_domain(group_id, result)
