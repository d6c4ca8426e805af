"""
Submission Handler

Content submission endpoint.

ARCHITECTURE:
=============
    Handler → SubmissionService → Pipeline / Repository → Model

The handler stages the multipart upload to scratch space and hands the
service a plain file; everything after that is business logic.

Form Fields:
============
    title               required
    description         optional
    agreement_accepted  must be true
    file                .zip bundle or video, or
    external_link       repository URL, page URL or plain link
    import_method       "repository" / "url_scrape" to ingest the link,
                        omitted to store it as a plain link item
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from src.api.dependencies import CurrentAccount
from src.api.dependencies.services import get_submission_service
from src.config.settings import settings
from src.shared.models.enums import ImportMethod
from src.shared.schemas.content import ContentItemResponse, SubmissionResponse
from src.shared.services.submission_service import (
    SubmissionRequest,
    SubmissionResult,
    SubmissionService,
)
from src.shared.utils.uploads import stage_upload


router = APIRouter()


def build_submission_response(result: SubmissionResult) -> SubmissionResponse:
    message = (
        "Submitted for review. An administrator will approve it shortly."
        if result.requires_review
        else "Published successfully."
    )
    return SubmissionResponse(
        item=ContentItemResponse.from_item(result.item),
        slug=result.item.slug,
        requires_review=result.requires_review,
        bundle_size=result.bundle_size,
        message=message,
    )


@router.post(
    "",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_content(
    user: CurrentAccount,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    agreement_accepted: bool = Form(False),
    external_link: Optional[str] = Form(None),
    import_method: Optional[ImportMethod] = Form(None),
    thumbnail_url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    submissions: SubmissionService = Depends(get_submission_service),
):
    """
    Submit an archive, a video, a remote reference or a plain link.

    Small valid bundles are published immediately; larger ones and all
    links wait for moderation.
    """
    upload = None
    if file is not None and file.filename:
        upload = await stage_upload(
            file,
            Path(settings.UPLOAD_TEMP_DIR),
            settings.UPLOAD_MAX_BYTES,
        )

    request = SubmissionRequest(
        title=(title or "").strip(),
        description=description,
        agreement_accepted=agreement_accepted,
        upload=upload,
        external_link=(external_link or "").strip() or None,
        import_method=import_method,
        thumbnail_url=thumbnail_url,
    )
    result = await submissions.submit(user.id, request)
    return build_submission_response(result)
