import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from vitae.domain import (  # noqa: E402
    Education,
    LanguageProficiency,
    Project,
    Resume,
    ResumeContent,
    Skill,
    SpokenLanguage,
    TailoredBullet,
    TailoredExperience,
    User,
)
from vitae.services.resume_renderer import (  # noqa: E402
    RenderInput,
    group_skills,
    render_markdown_bold,
    render_resume_html,
)


def _user(**overrides):
    data = dict(
        id="user-1",
        name="Ana <Souza>",
        email="ana@example.com",
        phone="+1 555 0100",
        summary="Profile summary.",
        linkedin_url="https://www.linkedin.com/in/anasouza/",
        github_url="https://github.com/anasouza",
        portfolio_url="https://anasouza.dev/about",
    )
    data.update(overrides)
    return User(**data)


def _resume(content=None, language="en"):
    resume = Resume.new("user-1", "Backend role", target_language=language)
    if content is not None:
        resume.set_generated_content(content)
    return resume


def _content(**overrides):
    data = dict(
        summary="Engineer with **7+ years** in Go.",
        experiences=[
            TailoredExperience(
                experience_id="exp-1",
                title="Backend Engineer",
                organization="Acme & Co",
                start_date="2021-03-01",
                end_date="2023-06-30",
                is_current=True,
                bullets=[
                    TailoredBullet(bullet_id="b1", original_content="orig", tailored_content="Cut latency by **40%**"),
                    TailoredBullet(bullet_id="b2", original_content="Original <b>kept</b>", tailored_content=""),
                ],
            )
        ],
        skills=["Go", "PostgreSQL", "Terraform", "Figma"],
    )
    data.update(overrides)
    return ResumeContent(**data)


class MarkdownBoldTests(unittest.TestCase):
    def test_escape_then_bold(self):
        self.assertEqual(
            str(render_markdown_bold("**<script>** & more")),
            "<strong>&lt;script&gt;</strong> &amp; more",
        )

    def test_unclosed_marker_is_left_alone(self):
        self.assertEqual(str(render_markdown_bold("a ** b")), "a ** b")


class SkillGroupingTests(unittest.TestCase):
    def test_preferred_order_then_encounter_order(self):
        skills = [
            Skill(user_id="u", name="Figma", category="Design"),
            Skill(user_id="u", name="postgresql", category="Databases"),
            Skill(user_id="u", name="Go", category="Languages"),
            Skill(user_id="u", name="Terraform", category="Infra"),
        ]
        rows = group_skills(["Figma", "Go", "PostgreSQL", "Terraform", "Rust"], skills)
        self.assertEqual(
            rows,
            [
                ("Languages", ["Go"]),
                ("Databases", ["PostgreSQL"]),
                ("Other", ["Rust"]),
                ("Design", ["Figma"]),
                ("Infra", ["Terraform"]),
            ],
        )


class RenderResumeTests(unittest.TestCase):
    def test_full_document_sections_in_order(self):
        html = render_resume_html(
            RenderInput(
                user=_user(),
                resume=_resume(_content()),
                education=[
                    Education(
                        user_id="user-1",
                        institution="USP",
                        degree="BSc",
                        field_of_study="Computer Science",
                        start_date=date(2013, 2, 1),
                        gpa="3.8",
                        honors=["Cum Laude"],
                    )
                ],
                projects=[
                    Project(
                        user_id="user-1",
                        name="pgwatch",
                        tech_stack=["Go", "PostgreSQL"],
                        repository_url="https://github.com/anasouza/pgwatch",
                        start_date=date(2022, 5, 1),
                        bullets=["Metrics **collector**"],
                    )
                ],
                languages=[SpokenLanguage(user_id="user-1", language="Portuguese", proficiency=LanguageProficiency.NATIVE)],
                skills=[Skill(user_id="user-1", name="Go", category="Languages")],
            )
        )
        order = [
            html.index('class="resume-header"'),
            html.index(">Professional Summary<"),
            html.index(">Education<"),
            html.index(">Technical Skills<"),
            html.index(">Experience<"),
            html.index(">Projects<"),
            html.index(">Languages<"),
        ]
        self.assertEqual(order, sorted(order))
        self.assertIn("Ana &lt;Souza&gt;", html)
        self.assertIn("<strong>7+ years</strong>", html)
        self.assertIn("Acme &amp; Co", html)
        self.assertIn("Original &lt;b&gt;kept&lt;/b&gt;", html)
        self.assertIn("BSc in Computer Science", html)
        self.assertIn("Feb 2013 – Present", html)
        self.assertIn("GPA: 3.80 | Cum Laude", html)
        self.assertIn('<span class="project-tech">| Go, PostgreSQL</span>', html)
        self.assertIn("[Source]", html)
        self.assertNotIn("[Demo]", html)
        self.assertIn("May 2022 – Present", html)
        self.assertIn('<span class="language-level">Native</span>', html)
        self.assertIn('<span class="skill-category">Languages:</span> <span class="skill-items">Go</span>', html)

    def test_header_contacts(self):
        html = render_resume_html(RenderInput(user=_user(), resume=_resume(_content())))
        self.assertIn('<a href="mailto:ana@example.com">ana@example.com</a>', html)
        self.assertIn(">linkedin.com/in/anasouza<", html)
        self.assertIn(">github.com/anasouza<", html)
        self.assertIn(">anasouza.dev<", html)
        self.assertIn('<span class="contact-separator">|</span>', html)

    def test_current_experience_renders_present_even_with_end_date(self):
        html = render_resume_html(RenderInput(user=_user(), resume=_resume(_content())))
        self.assertIn("Mar 2021 – Present", html)
        self.assertNotIn("Jun 2023", html)

    def test_empty_sections_are_omitted(self):
        html = render_resume_html(RenderInput(user=_user(summary=""), resume=_resume()))
        for heading in ("Projects", "Education", "Experience", "Technical Skills", "Languages", "Professional Summary"):
            self.assertNotIn(f">{heading}<", html)
        self.assertIn('class="resume-header"', html)

    def test_summary_falls_back_to_profile_and_can_be_hidden(self):
        html = render_resume_html(RenderInput(user=_user(), resume=_resume()))
        self.assertIn("Profile summary.", html)
        hidden = render_resume_html(RenderInput(user=_user(), resume=_resume(_content()), show_summary=False))
        self.assertNotIn(">Professional Summary<", hidden)

    def test_locale_labels_and_dates(self):
        html = render_resume_html(RenderInput(user=_user(), resume=_resume(_content(), language="pt-BR")))
        self.assertIn(">Experiência Profissional<", html)
        self.assertIn("03/2021 – Atual", html)
        self.assertIn('<html lang="pt-br">', html)

    def test_font_size_is_applied(self):
        html = render_resume_html(RenderInput(user=_user(), resume=_resume(_content()), font_size=10.5))
        self.assertIn("font-size: 10.5pt;", html)


if __name__ == "__main__":
    unittest.main()
