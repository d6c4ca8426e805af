"""
Discovery Handler

Search the curated source registry and import an entry in one click.
Search is public; import needs an account like any other submission.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import CurrentAccount
from src.api.dependencies.services import get_discovery_service
from src.api.handlers.submission_handler import build_submission_response
from src.shared.schemas.content import SubmissionResponse
from src.shared.schemas.discovery import (
    AppSourceResponse,
    DiscoverRequest,
    DiscoverResponse,
    DiscoveryResult,
    ImportRequest,
)
from src.shared.services.discovery_service import DiscoveryService


router = APIRouter()


@router.post("", response_model=DiscoverResponse)
async def discover(
    request: DiscoverRequest,
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    """Ranked registry entries for free-text keywords."""
    ranked = await discovery.search(request.keywords)
    results = [
        DiscoveryResult(
            source=AppSourceResponse.model_validate(entry.source),
            rank=entry.rank,
        )
        for entry in ranked
    ]
    return DiscoverResponse(results=results, total=len(results))


@router.post(
    "/import",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def import_source(
    request: ImportRequest,
    user: CurrentAccount,
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    """Run a registry entry through the repository or scrape pipeline."""
    result = await discovery.import_source(
        user.id,
        request.source_id,
        agreement_accepted=request.agreement_accepted,
        title=request.title,
        description=request.description,
    )
    return build_submission_response(result)
