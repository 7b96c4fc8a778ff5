import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fakes import PDF_BYTES, Harness  # noqa: E402
from vitae.domain import Resume, ResumeNotFound, ResumeNotReady, ResumeStatus  # noqa: E402
from vitae.ports import PDFEngineError  # noqa: E402
from vitae.services.pdf_delivery import cache_key, pdf_filename  # noqa: E402


class FilenameTests(unittest.TestCase):
    def test_prefers_company_then_title_then_fallback(self):
        resume = Resume.new("u", "role", job_title="Backend Engineer", company_name='Acme / "Labs": EU')
        self.assertEqual(pdf_filename(resume), "Resume_Acme_Labs_EU.pdf")
        resume.company_name = None
        self.assertEqual(pdf_filename(resume), "Resume_Backend_Engineer.pdf")
        resume.job_title = "***"
        self.assertEqual(pdf_filename(resume), "Resume.pdf")

    def test_cache_key(self):
        self.assertEqual(cache_key("u1", "r1"), "resumes/u1/r1.pdf")


class DocumentDeliveryTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.h = Harness()
        self.delivery = self.h.services.delivery

    async def test_generate_uses_template_options_and_skips_cache(self):
        resume = self.h.add_generated_resume()

        content = await self.delivery.generate(resume, "minimal")

        self.assertEqual(content, PDF_BYTES)
        html, template_name, options = self.h.pdf.calls[0]
        self.assertEqual(template_name, "minimal")
        self.assertIn("font-size: 10.5pt", html)
        self.assertEqual(options.paper_width, 8.5)
        self.assertEqual(self.h.storage.objects, {})
        self.assertEqual(self.delivery.pending_writes, 0)

    async def test_second_download_is_served_from_cache(self):
        resume = self.h.add_generated_resume(company_name="Initech")

        first = await self.delivery.download(resume.id, "jake")
        await self.delivery.drain()
        second = await self.delivery.download(resume.id, "jake")

        self.assertEqual(len(self.h.pdf.calls), 1)
        self.assertFalse(first.cached)
        self.assertTrue(second.cached)
        self.assertEqual(second.content, PDF_BYTES)
        self.assertEqual(first.filename, "Resume_Initech.pdf")

    async def test_cleared_cache_forces_exactly_one_regeneration(self):
        resume = self.h.add_generated_resume()
        await self.delivery.download(resume.id)
        await self.delivery.drain()

        self.h.storage.objects.clear()
        await self.delivery.download(resume.id)
        await self.delivery.drain()
        await self.delivery.download(resume.id)

        self.assertEqual(len(self.h.pdf.calls), 2)

    async def test_empty_cached_object_counts_as_miss(self):
        resume = self.h.add_generated_resume()
        self.h.storage.objects[cache_key(resume.user_id, resume.id)] = b""

        document = await self.delivery.download(resume.id)

        self.assertFalse(document.cached)
        self.assertEqual(len(self.h.pdf.calls), 1)

    async def test_cache_write_failure_is_invisible(self):
        self.h.storage.fail_puts = True
        resume = self.h.add_generated_resume()

        with self.assertLogs("vitae.services.pdf_delivery", level="WARNING") as logs:
            document = await self.delivery.download(resume.id)
            await self.delivery.drain()

        self.assertEqual(document.content, PDF_BYTES)
        self.assertEqual(self.delivery.pending_writes, 0)
        self.assertTrue(any("pdf_cache_write_failed" in line for line in logs.output))

    async def test_not_ready_without_content(self):
        resume = self.h.add_resume()
        with self.assertRaises(ResumeNotReady):
            await self.delivery.download(resume.id)
        self.assertEqual(self.h.pdf.calls, [])

    async def test_generation_marks_reviewed_and_sets_url(self):
        resume = self.h.add_generated_resume()

        await self.delivery.download(resume.id)

        stored = self.h.resumes.get(resume.id)
        self.assertEqual(stored.status, ResumeStatus.REVIEWED)
        self.assertEqual(stored.pdf_url, f"http://files.test/resumes/{resume.user_id}/{resume.id}.pdf")

    async def test_cache_hit_leaves_resume_untouched(self):
        resume = self.h.add_generated_resume()
        self.h.storage.objects[cache_key(resume.user_id, resume.id)] = PDF_BYTES

        await self.delivery.download(resume.id)

        stored = self.h.resumes.get(resume.id)
        self.assertEqual(stored.status, ResumeStatus.GENERATED)
        self.assertIsNone(stored.pdf_url)
        self.assertEqual(self.h.resumes.update_calls, 0)

    async def test_later_status_is_not_changed_by_generation(self):
        resume = self.h.add_generated_resume(status=ResumeStatus.SUBMITTED)

        await self.delivery.download(resume.id)

        self.assertEqual(self.h.resumes.get(resume.id).status, ResumeStatus.SUBMITTED)

    async def test_force_regenerate_skips_cache(self):
        resume = self.h.add_generated_resume()
        self.h.storage.objects[cache_key(resume.user_id, resume.id)] = b"old"

        document = await self.delivery.download(resume.id, force_regenerate=True)

        self.assertEqual(document.content, PDF_BYTES)
        self.assertEqual(len(self.h.pdf.calls), 1)

    async def test_template_options_reach_the_engine(self):
        resume = self.h.add_generated_resume()

        await self.delivery.download(resume.id, "minimal")

        html, template_name, options = self.h.pdf.calls[0]
        self.assertEqual(template_name, "minimal")
        self.assertNotIn(">Professional Summary<", html)
        self.assertIn("font-size: 10.5pt;", html)

        await self.delivery.download(resume.id, "does-not-exist", force_regenerate=True)
        self.assertEqual(self.h.pdf.calls[1][1], "jake")
        self.assertAlmostEqual(self.h.pdf.calls[1][2].margin_top, 0.4)

    async def test_rasterization_failure_propagates(self):
        self.h.pdf.error = PDFEngineError("gotenberg down")
        resume = self.h.add_generated_resume()

        with self.assertRaises(PDFEngineError):
            await self.delivery.download(resume.id)
        self.assertEqual(self.h.storage.objects, {})

    async def test_foreign_owner_sees_not_found(self):
        resume = self.h.add_generated_resume()
        with self.assertRaises(ResumeNotFound):
            await self.delivery.download(resume.id, owner_id="intruder")


class ResumeLifecycleTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.h = Harness()
        self.service = self.h.services.resumes

    async def test_delete_cascades_cached_document(self):
        resume = self.h.add_generated_resume()
        await self.service.download_pdf(resume.id, self.h.user.id)
        await self.h.services.delivery.drain()

        await self.service.delete_resume(resume.id, self.h.user.id)

        self.assertEqual(self.h.storage.objects, {})
        with self.assertRaises(ResumeNotFound):
            self.h.resumes.get(resume.id)

    async def test_delete_right_after_download_leaves_no_document(self):
        resume = self.h.add_generated_resume()
        key = cache_key(resume.user_id, resume.id)
        await self.service.download_pdf(resume.id, self.h.user.id)
        self.assertEqual(self.h.services.delivery.pending_writes, 1)

        await self.service.delete_resume(resume.id, self.h.user.id)
        await self.h.services.delivery.drain()

        self.assertNotIn(key, self.h.storage.objects)
        self.assertEqual(self.h.services.delivery.pending_writes, 0)

    async def test_retailor_right_after_download_leaves_no_stale_document(self):
        resume = self.h.add_generated_resume()
        key = cache_key(resume.user_id, resume.id)
        await self.service.download_pdf(resume.id, self.h.user.id)

        await self.service.tailor_resume(resume.id, self.h.user.id)
        await self.h.services.delivery.drain()

        self.assertNotIn(key, self.h.storage.objects)

    async def test_delete_ignores_storage_failure(self):
        self.h.storage.fail_deletes = True
        resume = self.h.add_generated_resume()

        await self.service.delete_resume(resume.id, self.h.user.id)

        self.assertNotIn(resume.id, self.h.resumes.items)

    async def test_tailoring_invalidates_cached_document(self):
        resume = self.h.add_resume()
        key = cache_key(resume.user_id, resume.id)
        self.h.storage.objects[key] = b"stale"

        await self.service.tailor_resume(resume.id, self.h.user.id)

        self.assertNotIn(key, self.h.storage.objects)


if __name__ == "__main__":
    unittest.main()
