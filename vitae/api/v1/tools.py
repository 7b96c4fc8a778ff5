from fastapi import APIRouter, Depends, Request

from vitae.api.v1.errors import get_services, raise_capability_error
from vitae.core.container import Services
from vitae.core.rate_limit import rate_limit
from vitae.core.security import require_owner
from vitae.core.template_catalog import load_template_catalog
from vitae.ports import CapabilityError
from vitae.schemas.resumes import ParsedJobResponse, ParseJobRequest, TemplateInfo

router = APIRouter()


@router.post("/tools/parse-job", response_model=ParsedJobResponse)
@rate_limit("20/minute")
async def parse_job(
    request: Request,
    payload: ParseJobRequest,
    owner_id: str = Depends(require_owner),
    services: Services = Depends(get_services),
):
    _ = (request, owner_id)
    try:
        job = await services.resumes.parse_job_url(payload.url)
    except CapabilityError as exc:
        raise_capability_error(exc)
    return ParsedJobResponse.from_domain(job)


@router.get("/templates", response_model=list[TemplateInfo])
async def list_templates():
    return [
        TemplateInfo(
            name=spec.name,
            display_name=spec.display_name,
            description=spec.description,
            font_size=spec.font_size,
            show_summary=spec.show_summary,
        )
        for spec in load_template_catalog().values()
    ]
