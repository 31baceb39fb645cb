from fastapi import APIRouter, Depends

from app.dependencies import get_summary_coordinator
from app.schemas.summary import SummarizeRequest, SummarizeResponse
from app.services.summary_service import SummaryCoordinator

router = APIRouter(tags=["summarize"])


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize(req: SummarizeRequest, coordinator: SummaryCoordinator = Depends(get_summary_coordinator)):
    """Summarize extracted document text.

    Upstream failures come back as a 200 with a notice in ``summary``.
    """
    result = await coordinator.summarize(
        req.file_content,
        file_name=req.file_name,
        language=req.language or "en",
        custom_prompt=req.custom_prompt or "",
        file_id=req.file_id,
    )
    return SummarizeResponse(summary=result.text)
