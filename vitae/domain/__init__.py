from .errors import (
    ConcurrentModification,
    DomainError,
    EmptyJobDescription,
    ExperienceNotFound,
    FieldError,
    InvalidMatchScore,
    InvalidResumeStatus,
    InvalidStatusTransition,
    NoBulletsAvailable,
    NotFoundError,
    ResumeNotFound,
    ResumeNotReady,
    UserNotFound,
    ValidationErrors,
)
from .job import JobAnalysis, ParsedJob
from .library import Bullet, Education, Experience, Project, Skill, SpokenLanguage, User
from .resume import Resume, ResumeAnalysis, ResumeContent, TailoredBullet, TailoredExperience
from .values import ExperienceType, LanguageProficiency, MatchScore, ResumeStatus

__all__ = [
    "Bullet",
    "ConcurrentModification",
    "DomainError",
    "Education",
    "EmptyJobDescription",
    "Experience",
    "ExperienceNotFound",
    "ExperienceType",
    "FieldError",
    "InvalidMatchScore",
    "InvalidResumeStatus",
    "InvalidStatusTransition",
    "JobAnalysis",
    "LanguageProficiency",
    "MatchScore",
    "NoBulletsAvailable",
    "NotFoundError",
    "ParsedJob",
    "Project",
    "Resume",
    "ResumeAnalysis",
    "ResumeContent",
    "ResumeNotFound",
    "ResumeNotReady",
    "ResumeStatus",
    "Skill",
    "SpokenLanguage",
    "TailoredBullet",
    "TailoredExperience",
    "User",
    "ValidationErrors",
]
