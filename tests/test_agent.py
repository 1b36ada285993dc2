import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobflow import agent, report, tracker  # noqa: E402
from jobflow.models import Job, JobStatus  # noqa: E402

ALERT = (
    "<table>"
    '<tr><td>Acme - <a href="https://jobs.acme.com/1?utm_source=alert">Backend Engineer</a></td></tr>'
    '<tr><td><a href="https://jobs.example.com/2">Nurse Practitioner at Mercy General</a></td></tr>'
    '<tr><td><a href="https://example.com/unsubscribe">Unsubscribe</a></td></tr>'
    "</table>"
)


class RunTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.inbox = root / "inbox"
        self.inbox.mkdir()
        for target, value in (
            (tracker, ("APPLICATIONS_CSV", root / "applications.csv")),
            (report, ("REPORTS_DIR", root / "reports")),
        ):
            patcher = mock.patch.object(target, *value)
            patcher.start()
            self.addCleanup(patcher.stop)
        patcher = mock.patch.object(agent, "ensure_dirs")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _profile(self, roles):
        return mock.patch.object(agent, "load_profile", return_value={"target_roles": roles})

    def test_scan_imports_and_reports(self):
        (self.inbox / "alert.html").write_text(ALERT, encoding="utf-8")
        with self._profile([]):
            result = agent.run(inbox_dir=self.inbox, mode="fast")

        self.assertEqual(result["messages_scanned"], 1)
        self.assertEqual(result["leads_found"], 1)
        jobs = tracker.get_jobs()
        self.assertEqual(jobs[0].application_url, "https://jobs.acme.com/1")
        self.assertEqual(jobs[0].company, "Acme")
        self.assertTrue(Path(result["report_path"]).exists())
        self.assertIn("Backend Engineer", result["report_preview"])

    def test_target_roles_drive_matching_and_rescan_adds_nothing(self):
        (self.inbox / "alert.html").write_text(ALERT, encoding="utf-8")
        with self._profile(["nurse"]):
            first = agent.run(inbox_dir=self.inbox, mode="fast", write_report=False)
            second = agent.run(inbox_dir=self.inbox, mode="fast", write_report=False)

        self.assertEqual(first["jobs_added"], 1)
        self.assertEqual(second["jobs_added"], 0)
        self.assertEqual([j.company for j in tracker.get_jobs()], ["Mercy General"])
        self.assertIsNone(first["report_path"])

    def test_tailor_updates_tracked_job(self):
        (self.inbox / "alert.html").write_text(ALERT, encoding="utf-8")
        with self._profile([]):
            agent.run(inbox_dir=self.inbox, mode="fast", write_report=False)
        job_id = tracker.get_jobs()[0].id

        with self._profile([]), \
                mock.patch.object(agent, "load_master_resume", return_value="JANE\nSUMMARY\nx\nSKILLS\n- Go"), \
                mock.patch("jobflow.llm.groq_settings", return_value=("", "model")):
            result = agent.tailor(job_id)

        stored = tracker.get_job(job_id)
        self.assertEqual(stored.status, JobStatus.REVIEW)
        self.assertIn("RE: Application for Backend Engineer", stored.cover_letter)
        self.assertIn("PROFESSIONAL SUMMARY FOR ACME", stored.customized_resume)
        self.assertEqual(len(result["interview_questions"]), 3)
        with self.assertRaises(KeyError):
            agent.tailor("missing")

    def test_add_job_by_url(self):
        details = {"title": "Unknown Role", "company": "Unknown Company", "url": "https://jobs.acme.com/9"}
        with mock.patch.object(agent, "fetch_job_details", return_value=details) as fetch:
            job = agent.add_job(" https://jobs.acme.com/9?utm_source=alert ")
            again = agent.add_job("https://jobs.acme.com/9")

        fetch.assert_called_with("https://jobs.acme.com/9")
        self.assertTrue(job.id.startswith("manual-"))
        self.assertEqual(job.application_url, "https://jobs.acme.com/9")
        self.assertEqual((job.status, job.source, job.match_score), (JobStatus.SAVED, "Manual", 0))
        self.assertIsNone(again)
        self.assertEqual([j.id for j in tracker.get_jobs()], [job.id])
        with self.assertRaises(ValueError):
            agent.add_job("mailto:jobs@acme.com")

    def test_empty_inbox(self):
        with self._profile([]):
            result = agent.run(inbox_dir=self.inbox)
        self.assertEqual(result["leads_found"], 0)
        self.assertIsNone(result["report_path"])


class ScanReportTests(unittest.TestCase):
    def test_report_sections(self):
        lead = Job(id="gmail-m1-abcde", title="Designer", company="Pending Review", location="Remote/Hybrid",
                   description="", match_score=80, application_url="https://www.dribbble.com/jobs/1")
        tracked = [lead, Job(id="x", title="t", company="c", location="l", description="d",
                             status=JobStatus.APPLIED_MANUAL)]
        text = report.build_scan_report([lead], [lead], tracked)

        self.assertIn("**1** leads found (fast mode) | **1** new | **1** need a company check", text)
        self.assertIn("[Dribbble](https://www.dribbble.com/jobs/1)", text)
        self.assertIn("- **Applied:** 1", text)


if __name__ == "__main__":
    unittest.main()
