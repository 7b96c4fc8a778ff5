from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from vitae.domain.errors import InvalidMatchScore, InvalidResumeStatus


class ResumeStatus(str, Enum):
    DRAFT = "draft"
    GENERATED = "generated"
    REVIEWED = "reviewed"
    SUBMITTED = "submitted"
    INTERVIEW = "interview"
    REJECTED = "rejected"
    ACCEPTED = "accepted"

    @classmethod
    def parse(cls, raw: str) -> "ResumeStatus":
        try:
            return cls((raw or "").strip().lower())
        except ValueError as exc:
            raise InvalidResumeStatus(raw) from exc

    def can_transition_to(self, target: "ResumeStatus") -> bool:
        return target in _STATUS_EDGES[self]

    @property
    def is_terminal(self) -> bool:
        return not _STATUS_EDGES[self]


_STATUS_EDGES: dict[ResumeStatus, frozenset[ResumeStatus]] = {
    ResumeStatus.DRAFT: frozenset({ResumeStatus.GENERATED}),
    ResumeStatus.GENERATED: frozenset({ResumeStatus.REVIEWED}),
    ResumeStatus.REVIEWED: frozenset({ResumeStatus.SUBMITTED}),
    ResumeStatus.SUBMITTED: frozenset({ResumeStatus.INTERVIEW, ResumeStatus.REJECTED}),
    ResumeStatus.INTERVIEW: frozenset({ResumeStatus.ACCEPTED}),
    ResumeStatus.REJECTED: frozenset(),
    ResumeStatus.ACCEPTED: frozenset(),
}


class ExperienceType(str, Enum):
    WORK = "work"
    EDUCATION = "education"
    CERTIFICATION = "certification"
    PROJECT = "project"
    FREELANCE = "freelance"
    VOLUNTEER = "volunteer"
    OPEN_SOURCE = "open_source"
    HACKATHON = "hackathon"
    SIDE_PROJECT = "side_project"
    EVENT_ORGANIZATION = "event_organization"
    PUBLICATION = "publication"
    AWARD = "award"


class LanguageProficiency(str, Enum):
    NATIVE = "native"
    FLUENT = "fluent"
    ADVANCED = "advanced"
    INTERMEDIATE = "intermediate"
    BASIC = "basic"


@dataclass(frozen=True)
class MatchScore:
    """Resume-to-job fit, an integer in [0, 100]."""

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidMatchScore(self.value)
        if self.value < 0 or self.value > 100:
            raise InvalidMatchScore(self.value)

    def __int__(self) -> int:
        return self.value

