from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException, Request, status

from vitae.core.container import Services
from vitae.domain import DomainError, ValidationErrors
from vitae.ports import CapabilityError, JobParserError


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "NOT_READY", "message": "Service is starting up."},
        )
    return services


def raise_domain_error(exc: DomainError) -> NoReturn:
    detail: dict = {"code": exc.code, "message": exc.message}
    if isinstance(exc, ValidationErrors):
        detail["errors"] = exc.to_dict()
    raise HTTPException(status_code=exc.status_code, detail=detail) from exc


def raise_capability_error(exc: CapabilityError) -> NoReturn:
    status_code = status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, JobParserError) and exc.code == "INVALID_URL":
        status_code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=status_code, detail={"code": exc.code, "message": exc.message}) from exc
