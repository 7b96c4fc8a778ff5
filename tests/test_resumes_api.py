import os
import sys
import unittest
from pathlib import Path

os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.pop("API_KEY", None)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fastapi.testclient import TestClient  # noqa: E402

from fakes import PDF_BYTES, Harness  # noqa: E402
from vitae.main import create_app  # noqa: E402
from vitae.ports import AIProviderError  # noqa: E402


class ResumesApiTests(unittest.TestCase):
    def setUp(self):
        self.h = Harness()
        self.client = TestClient(create_app(services=self.h.services))
        self.headers = {"X-User-ID": self.h.user.id}

    def _create(self, **payload):
        body = {"job_description": "Senior Backend Engineer. Go, PostgreSQL."}
        body.update(payload)
        response = self.client.post("/v1/resumes", json=body, headers=self.headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_owner_header_is_required(self):
        response = self.client.get("/v1/resumes")
        self.assertEqual(response.status_code, 401)

    def test_create_and_get(self):
        created = self._create(company_name="Initech")
        self.assertEqual(created["status"], "draft")
        self.assertEqual(created["score"], 0)
        self.assertFalse(created["can_generate_pdf"])
        self.assertEqual(created["display_name"], "Position at Initech")

        response = self.client.get(f"/v1/resumes/{created['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], created["id"])

    def test_create_for_unknown_user_is_not_found(self):
        response = self.client.post(
            "/v1/resumes",
            json={"job_description": "Role"},
            headers={"X-User-ID": "ghost"},
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["code"], "USER_NOT_FOUND")

    def test_blank_job_description_is_rejected(self):
        response = self.client.post("/v1/resumes", json={"job_description": "   "}, headers=self.headers)
        self.assertEqual(response.status_code, 422)

    def test_other_users_resume_is_hidden(self):
        created = self._create()
        response = self.client.get(f"/v1/resumes/{created['id']}", headers={"X-User-ID": "intruder"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["code"], "RESUME_NOT_FOUND")

    def test_tailor_then_download_pdf(self):
        created = self._create()
        self.h.ai.failing_bullets = {"user-1-b2"}

        response = self.client.post(
            f"/v1/resumes/{created['id']}/tailor", json={"max_bullets": 5}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["status"], "generated")
        self.assertEqual(body["score"], 82)
        self.assertTrue(body["can_generate_pdf"])
        self.assertEqual(body["company_name"], "Initech")

        pdf = self.client.get(f"/v1/resumes/{created['id']}/pdf", headers=self.headers)
        self.assertEqual(pdf.status_code, 200, pdf.text)
        self.assertEqual(pdf.content, PDF_BYTES)
        self.assertEqual(pdf.headers["content-type"], "application/pdf")
        self.assertEqual(pdf.headers["content-disposition"], 'attachment; filename="Resume_Initech.pdf"')
        self.assertEqual(pdf.headers["cache-control"], "no-cache")
        self.assertEqual(pdf.headers["x-cache"], "MISS")

        fetched = self.client.get(f"/v1/resumes/{created['id']}", headers=self.headers).json()
        self.assertEqual(fetched["status"], "reviewed")

    def test_tailor_without_body_uses_default(self):
        created = self._create()
        response = self.client.post(f"/v1/resumes/{created['id']}/tailor", headers=self.headers)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(self.h.ai.max_bullets_seen, 15)

    def test_tailor_without_bullets(self):
        h = Harness(bullets=0)
        client = TestClient(create_app(services=h.services))
        resume = h.add_resume()
        response = client.post(f"/v1/resumes/{resume.id}/tailor", json={}, headers=self.headers)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["code"], "NO_BULLETS")

    def test_tailor_summary_failure_is_bad_gateway(self):
        created = self._create()
        self.h.ai.summary_error = AIProviderError("down")
        response = self.client.post(f"/v1/resumes/{created['id']}/tailor", json={}, headers=self.headers)
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"]["code"], "AI_ERROR")

    def test_pdf_not_ready(self):
        created = self._create()
        response = self.client.get(f"/v1/resumes/{created['id']}/pdf", headers=self.headers)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["code"], "RESUME_NOT_READY")

    def test_status_updates_follow_the_machine(self):
        resume = self.h.add_generated_resume()

        bad = self.client.patch(
            f"/v1/resumes/{resume.id}/status", json={"status": "accepted"}, headers=self.headers
        )
        self.assertEqual(bad.status_code, 409)
        self.assertEqual(self.h.resumes.get(resume.id).status.value, "generated")

        ok = self.client.patch(
            f"/v1/resumes/{resume.id}/status",
            json={"status": "reviewed", "notes": "Sent to referral"},
            headers=self.headers,
        )
        self.assertEqual(ok.status_code, 200, ok.text)
        self.assertEqual(ok.json()["status"], "reviewed")
        self.assertEqual(ok.json()["notes"], "Sent to referral")

        unknown = self.client.patch(
            f"/v1/resumes/{resume.id}/status", json={"status": "archived"}, headers=self.headers
        )
        self.assertEqual(unknown.status_code, 400)
        self.assertEqual(unknown.json()["detail"]["code"], "INVALID_STATUS")

    def test_list_and_delete(self):
        first = self._create()
        self._create()
        listing = self.client.get("/v1/resumes", params={"status": "draft"}, headers=self.headers)
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.json()["total"], 2)

        deleted = self.client.delete(f"/v1/resumes/{first['id']}", headers=self.headers)
        self.assertEqual(deleted.status_code, 204)
        missing = self.client.get(f"/v1/resumes/{first['id']}", headers=self.headers)
        self.assertEqual(missing.status_code, 404)

    def test_parse_job(self):
        response = self.client.post(
            "/v1/tools/parse-job", json={"url": "https://jobs.example.com/1"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["title"], "Backend Engineer")
        self.assertEqual(response.json()["url"], "https://jobs.example.com/1")

    def test_templates_catalog(self):
        response = self.client.get("/v1/templates")
        self.assertEqual(response.status_code, 200)
        names = [item["name"] for item in response.json()]
        self.assertIn("jake", names)
        self.assertIn("minimal", names)


if __name__ == "__main__":
    unittest.main()
