from __future__ import annotations

from dataclasses import dataclass


class DomainError(Exception):
    code = "DOMAIN_ERROR"
    status_code = 400

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return "domain error"


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = 404


class ResumeNotFound(NotFoundError):
    code = "RESUME_NOT_FOUND"

    def default_message(self) -> str:
        return "resume not found"


class UserNotFound(NotFoundError):
    code = "USER_NOT_FOUND"

    def default_message(self) -> str:
        return "user not found"


class ExperienceNotFound(NotFoundError):
    code = "EXPERIENCE_NOT_FOUND"

    def default_message(self) -> str:
        return "experience not found"


class NoBulletsAvailable(DomainError):
    code = "NO_BULLETS"
    status_code = 422

    def default_message(self) -> str:
        return "no bullets available for resume generation"


class ResumeNotReady(DomainError):
    code = "RESUME_NOT_READY"
    status_code = 422

    def default_message(self) -> str:
        return "resume is not ready for PDF generation"


class InvalidStatusTransition(DomainError):
    code = "INVALID_STATUS_TRANSITION"
    status_code = 409

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"invalid status transition: {current} -> {target}")


class InvalidResumeStatus(DomainError):
    code = "INVALID_STATUS"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid resume status: {value!r}")


class ConcurrentModification(DomainError):
    code = "CONFLICT"
    status_code = 409

    def default_message(self) -> str:
        return "resume was modified concurrently, reload and retry"


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationErrors(DomainError):
    """Field-level validation failures surfaced to the caller for correction."""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        if len(self.errors) == 1:
            message = str(self.errors[0])
        else:
            message = "multiple validation errors: " + "; ".join(str(err) for err in self.errors)
        super().__init__(message)

    def to_dict(self) -> list[dict[str, str]]:
        return [{"field": err.field, "message": err.message} for err in self.errors]


class InvalidMatchScore(ValidationErrors):
    def __init__(self, value: object = None):
        self.value = value
        super().__init__([FieldError("score", "match score must be between 0 and 100")])


class EmptyJobDescription(ValidationErrors):
    def __init__(self):
        super().__init__([FieldError("job_description", "job description cannot be empty")])
