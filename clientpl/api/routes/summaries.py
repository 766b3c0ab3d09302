import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from clientpl.api.deps import get_summary_service
from clientpl.api.encoding import to_wire
from clientpl.core.summaries.service import ClientSummaryService, LedgerFetchError

router = APIRouter(prefix="/api", tags=["summaries"])
logger = logging.getLogger(__name__)


@router.get("/data")
async def get_client_summaries(
    service: ClientSummaryService = Depends(get_summary_service),
):
    """
    Compute a P&L summary for every client and return it with the group list.

    Clients that are not plain users, or have no group membership list, are
    returned as stored.
    """
    try:
        run = await service.compute_all()
    except LedgerFetchError:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch master sheet data"},
        )
    except Exception as exc:
        logger.exception("Error fetching data")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch data", "details": str(exc)},
        )

    return JSONResponse(content=to_wire(run.to_payload()))
