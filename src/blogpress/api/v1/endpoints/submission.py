# src/blogpress/api/v1/endpoints/submission.py
"""Author submission endpoints: start, verify, finish."""

from __future__ import annotations

from fastapi import APIRouter, status

from blogpress.api.v1.dependencies import SubmissionPipelineDep
from blogpress.schemas.submission import (
    SubmissionFinishRequest,
    SubmissionResponse,
    SubmissionStartRequest,
    SubmissionVerifyRequest,
)

router = APIRouter(prefix="/blogs/submission", tags=["submission"])


@router.post("/start", response_model=SubmissionResponse)
def start_submission(
    draft: SubmissionStartRequest,
    pipeline: SubmissionPipelineDep,
) -> SubmissionResponse:
    """Hold the draft and mail a verification code to the author."""
    return pipeline.start(draft)


@router.post("/verify", response_model=SubmissionResponse)
def verify_submission(
    request: SubmissionVerifyRequest,
    pipeline: SubmissionPipelineDep,
) -> SubmissionResponse:
    return pipeline.verify(request.email, request.otp)


@router.post("/finish", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def finish_submission(
    request: SubmissionFinishRequest,
    pipeline: SubmissionPipelineDep,
) -> SubmissionResponse:
    """Create the pending blog from the verified draft."""
    return pipeline.finish(request.email)
