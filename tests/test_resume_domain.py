import itertools
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from vitae.domain import (  # noqa: E402
    EmptyJobDescription,
    InvalidMatchScore,
    InvalidResumeStatus,
    InvalidStatusTransition,
    MatchScore,
    Resume,
    ResumeContent,
    ResumeStatus,
    User,
    ValidationErrors,
)

ALLOWED_EDGES = {
    ("draft", "generated"),
    ("generated", "reviewed"),
    ("reviewed", "submitted"),
    ("submitted", "interview"),
    ("submitted", "rejected"),
    ("interview", "accepted"),
}


class ResumeStatusMachineTests(unittest.TestCase):
    def test_only_listed_edges_are_allowed(self):
        for current, target in itertools.product(ResumeStatus, ResumeStatus):
            resume = Resume.new("user-1", "Backend role")
            resume.status = current
            if (current.value, target.value) in ALLOWED_EDGES:
                resume.transition_to(target)
                self.assertEqual(resume.status, target)
            else:
                with self.assertRaises(InvalidStatusTransition):
                    resume.transition_to(target)
                self.assertEqual(resume.status, current)

    def test_terminal_states(self):
        self.assertTrue(ResumeStatus.ACCEPTED.is_terminal)
        self.assertTrue(ResumeStatus.REJECTED.is_terminal)
        self.assertFalse(ResumeStatus.SUBMITTED.is_terminal)

    def test_parse_status(self):
        self.assertEqual(ResumeStatus.parse(" Reviewed "), ResumeStatus.REVIEWED)
        with self.assertRaises(InvalidResumeStatus):
            ResumeStatus.parse("archived")


class ResumeEntityTests(unittest.TestCase):
    def test_new_resume_starts_in_draft_with_zero_score(self):
        resume = Resume.new("user-1", "  Build APIs  ", job_title="Engineer", company_name="")
        self.assertEqual(resume.status, ResumeStatus.DRAFT)
        self.assertEqual(resume.score, 0)
        self.assertEqual(resume.job_description, "Build APIs")
        self.assertEqual(resume.job_title, "Engineer")
        self.assertIsNone(resume.company_name)

    def test_empty_job_description_is_rejected(self):
        with self.assertRaises(EmptyJobDescription) as ctx:
            Resume.new("user-1", "   ")
        self.assertIn("job description cannot be empty", str(ctx.exception))

    def test_unsupported_language_is_a_field_error(self):
        with self.assertRaises(ValidationErrors) as ctx:
            Resume.new("user-1", "Backend role", target_language="it")
        self.assertEqual(ctx.exception.errors[0].field, "target_language")

    def test_multiple_errors_are_joined(self):
        resume = Resume(user_id="", job_description="", target_language="xx")
        with self.assertRaises(ValidationErrors) as ctx:
            resume.validate()
        self.assertTrue(str(ctx.exception).startswith("multiple validation errors: "))
        self.assertEqual(len(ctx.exception.errors), 3)

    def test_can_generate_pdf_depends_only_on_content(self):
        for status in ResumeStatus:
            resume = Resume.new("user-1", "Backend role")
            resume.status = status
            self.assertFalse(resume.can_generate_pdf())
            resume.generated_content = ResumeContent(summary="x")
            self.assertTrue(resume.can_generate_pdf())

    def test_set_generated_content_moves_draft_to_generated(self):
        resume = Resume.new("user-1", "Backend role")
        resume.set_generated_content(ResumeContent(summary="x"))
        self.assertEqual(resume.status, ResumeStatus.GENERATED)

    def test_set_generated_content_keeps_later_status(self):
        resume = Resume.new("user-1", "Backend role")
        resume.status = ResumeStatus.SUBMITTED
        resume.set_generated_content(ResumeContent(summary="x"))
        self.assertEqual(resume.status, ResumeStatus.SUBMITTED)

    def test_set_job_details_ignores_blank_values(self):
        resume = Resume.new("user-1", "Backend role", job_title="Engineer")
        resume.set_job_details(title="", company="Initech", url="  ")
        self.assertEqual(resume.job_title, "Engineer")
        self.assertEqual(resume.company_name, "Initech")
        self.assertIsNone(resume.job_url)

    def test_selected_bullets_are_deduplicated(self):
        resume = Resume.new("user-1", "Backend role")
        resume.select_bullets(["a", "b", "a", "", "c"])
        self.assertEqual(resume.selected_bullets, ["a", "b", "c"])
        resume.add_selected_bullet("b")
        resume.add_selected_bullet("d")
        resume.remove_selected_bullet("a")
        self.assertEqual(resume.selected_bullets, ["b", "c", "d"])

    def test_job_display_name(self):
        resume = Resume.new("user-1", "Backend role")
        self.assertEqual(resume.job_display_name(), "Untitled Resume")
        resume.set_job_details(company="Initech")
        self.assertEqual(resume.job_display_name(), "Position at Initech")
        resume.set_job_details(title="Engineer")
        self.assertEqual(resume.job_display_name(), "Engineer at Initech")

    def test_user_display_name_fallbacks(self):
        self.assertEqual(User(name="Ana").display_name(), "Ana")
        self.assertEqual(User(email="a@x.io").display_name(), "a@x.io")
        self.assertEqual(User().display_name(), "Anonymous User")


class MatchScoreTests(unittest.TestCase):
    def test_bounds(self):
        self.assertEqual(MatchScore(0).value, 0)
        self.assertEqual(MatchScore(100).value, 100)
        for bad in (-1, 101):
            with self.assertRaises(InvalidMatchScore):
                MatchScore(bad)

    def test_set_score_rejects_out_of_range(self):
        resume = Resume.new("user-1", "Backend role")
        with self.assertRaises(InvalidMatchScore):
            resume.set_score(150)
        self.assertEqual(resume.score, 0)


if __name__ == "__main__":
    unittest.main()
