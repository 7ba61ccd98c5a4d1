"""Question answering endpoint."""

from fastapi import APIRouter, Depends

from voxrelay.api.deps import get_completion_service
from voxrelay.api.schemas import AskRequest, AskResponse
from voxrelay.services.completion import CompletionService

router = APIRouter(tags=["assistant"])


@router.post("/ask-ai", response_model=AskResponse)
async def ask_ai(
    req: AskRequest,
    service: CompletionService = Depends(get_completion_service),
) -> AskResponse:
    result = await service.answer(req.question, req.pdf_text)
    return AskResponse(answer=result.text)
