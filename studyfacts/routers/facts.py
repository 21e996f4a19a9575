"""Fact extraction routes."""

from fastapi import APIRouter, HTTPException

from studyfacts.schemas.facts import ApiResponse, FactExtractionRequest, FactExtractionResponse
from studyfacts.services.facts import FactExtractionInputError, extract_study_facts


router = APIRouter(prefix="/facts")


@router.post("/extract", response_model=ApiResponse[FactExtractionResponse])
def extract_facts(payload: FactExtractionRequest) -> ApiResponse[FactExtractionResponse]:
    """Extract study facts from already-decoded document text."""

    try:
        result = extract_study_facts(payload.text, payload.settings)
    except FactExtractionInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ApiResponse(
        data=FactExtractionResponse.from_result(
            result,
            chars=len(payload.text or ""),
            file_name=payload.file_name,
            images=payload.images,
        )
    )
