import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from vitae.api.v1.errors import get_services, raise_capability_error, raise_domain_error
from vitae.core.container import Services
from vitae.core.rate_limit import rate_limit
from vitae.core.security import require_owner
from vitae.domain import DomainError
from vitae.ports import CapabilityError
from vitae.schemas.resumes import (
    CreateResumeRequest,
    ResumeListResponse,
    ResumeResponse,
    TailorResumeRequest,
    UpdateResumeStatusRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/resumes", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
@rate_limit()
async def create_resume(
    request: Request,
    payload: CreateResumeRequest,
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    try:
        resume = services.resumes.create_resume(
            owner_id,
            payload.job_description,
            job_title=payload.job_title,
            company_name=payload.company_name,
            job_url=payload.job_url,
            target_language=payload.target_language,
        )
    except DomainError as exc:
        raise_domain_error(exc)
    return ResumeResponse.from_domain(resume)


@router.get("/resumes", response_model=ResumeListResponse)
@rate_limit()
async def list_resumes(
    request: Request,
    status_filter: Optional[str] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    try:
        resumes, total = services.resumes.list_resumes(owner_id, status_filter, limit=limit, offset=offset)
    except DomainError as exc:
        raise_domain_error(exc)
    return ResumeListResponse(resumes=[ResumeResponse.from_domain(r) for r in resumes], total=total)


@router.get("/resumes/{resume_id}", response_model=ResumeResponse)
@rate_limit()
async def get_resume(
    request: Request,
    resume_id: str,
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    try:
        resume = services.resumes.get_resume(resume_id, owner_id)
    except DomainError as exc:
        raise_domain_error(exc)
    return ResumeResponse.from_domain(resume)


@router.delete("/resumes/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
@rate_limit()
async def delete_resume(
    request: Request,
    resume_id: str,
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    try:
        await services.resumes.delete_resume(resume_id, owner_id)
    except DomainError as exc:
        raise_domain_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/resumes/{resume_id}/tailor", response_model=ResumeResponse)
@rate_limit("10/minute")
async def tailor_resume(
    request: Request,
    resume_id: str,
    payload: Optional[TailorResumeRequest] = None,
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    max_bullets = payload.max_bullets if payload else None
    try:
        resume = await services.resumes.tailor_resume(resume_id, owner_id, max_bullets)
    except DomainError as exc:
        raise_domain_error(exc)
    except CapabilityError as exc:
        logger.warning("tailor_request_failed resume_id=%s code=%s: %s", resume_id, exc.code, exc)
        raise_capability_error(exc)
    return ResumeResponse.from_domain(resume)


@router.patch("/resumes/{resume_id}/status", response_model=ResumeResponse)
@rate_limit()
async def update_resume_status(
    request: Request,
    resume_id: str,
    payload: UpdateResumeStatusRequest,
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    try:
        resume = services.resumes.update_status(resume_id, owner_id, payload.status, payload.notes)
    except DomainError as exc:
        raise_domain_error(exc)
    return ResumeResponse.from_domain(resume)


@router.get("/resumes/{resume_id}/pdf")
@rate_limit()
async def download_resume_pdf(
    request: Request,
    resume_id: str,
    template: str = Query(default="jake", max_length=64),
    force_regenerate: bool = Query(default=False),
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = request
    try:
        document = await services.resumes.download_pdf(resume_id, owner_id, template, force_regenerate)
    except DomainError as exc:
        raise_domain_error(exc)
    except CapabilityError as exc:
        logger.warning("pdf_request_failed resume_id=%s code=%s: %s", resume_id, exc.code, exc)
        raise_capability_error(exc)

    return Response(
        content=document.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"',
            "Cache-Control": "no-cache",
            "X-Cache": "HIT" if document.cached else "MISS",
        },
    )
