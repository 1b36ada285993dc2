import sys
import tempfile
import unittest
from email.message import EmailMessage
from pathlib import Path
from unittest import mock

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobflow.models import ExtractedJobLead, JobStatus, RawMessage  # noqa: E402
from jobflow.scanner import clean_application_url, load_messages, scan_messages  # noqa: E402


class CleanApplicationUrlTests(unittest.TestCase):
    def test_strips_campaign_params(self):
        url = "https://jobs.example.com/view/42?utm_source=email&ref=alert&utm_medium=mail&utm_campaign=x"
        self.assertEqual(clean_application_url(url), "https://jobs.example.com/view/42?ref=alert")

    def test_untouched_without_tracking(self):
        for url in ("https://x.com/a?b=1%202", "https://x.com/a", "not a url", "#"):
            self.assertEqual(clean_application_url(url), url)


class ScanMessagesTests(unittest.TestCase):
    def test_first_message_wins_across_batch(self):
        messages = [
            RawMessage("m1", '<a href="https://x.com/1">Backend Engineer</a>'),
            RawMessage("m2", '<a href="https://x.com/1">Frontend Engineer</a>'
                             '<a href="https://x.com/2?utm_source=mail">Data Analyst</a>'),
        ]
        jobs = scan_messages(messages, [])

        self.assertEqual([j.application_url for j in jobs], ["https://x.com/1", "https://x.com/2"])
        self.assertEqual(jobs[0].title, "Backend Engineer")
        self.assertTrue(jobs[0].id.startswith("gmail-m1-"))
        self.assertTrue(jobs[1].id.startswith("gmail-m2-"))
        for j in jobs:
            self.assertEqual(j.status, JobStatus.DETECTED)
            self.assertEqual(j.source, "Gmail")

    def test_ai_mode_sorted_by_score(self):
        def fake(html, resume, keywords):
            return [
                ExtractedJobLead(title="Okay fit", application_url="https://a.com/1", match_score=40),
                ExtractedJobLead(title="Great fit", application_url="https://a.com/2", match_score=95),
            ]

        with mock.patch("jobflow.scanner.analyze_jobs_with_ai", side_effect=fake) as ai:
            jobs = scan_messages([RawMessage("m1", "<p>x</p>")], ["Engineer"], mode="ai", resume="cv")

        ai.assert_called_once_with("<p>x</p>", "cv", ["Engineer"])
        self.assertEqual([j.title for j in jobs], ["Great fit", "Okay fit"])

    def test_failing_message_is_skipped(self):
        calls = {"n": 0}

        def flaky(html, keywords):
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("boom")
            return [ExtractedJobLead(title="Coder", application_url="https://c.com/1")]

        with mock.patch("jobflow.scanner.extract_job_leads", side_effect=flaky):
            jobs = scan_messages([RawMessage("bad", ""), RawMessage("good", "")])
        self.assertEqual(len(jobs), 1)
        self.assertTrue(jobs[0].id.startswith("gmail-good-"))

    def test_placeholder_company_flagged_in_notes(self):
        jobs = scan_messages([RawMessage("m1", '<div><a href="https://x.com/1">Designer</a></div>')])
        self.assertEqual(jobs[0].company, "Pending Review")
        self.assertIn("confirm", jobs[0].notes)

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            scan_messages([], mode="turbo")


class LoadMessagesTests(unittest.TestCase):
    def test_reads_eml_and_html_exports(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            msg = EmailMessage()
            msg["Subject"] = "3 new jobs for you"
            msg["From"] = "Alerts <jobs@example.com>"
            msg.set_content("plain version")
            msg.add_alternative('<a href="https://x.com/1">QA Engineer</a>', subtype="html")
            (root / "a_alert.eml").write_bytes(msg.as_bytes())
            (root / "b_saved.html").write_text('<a href="https://x.com/2">Coder</a>', encoding="utf-8")
            (root / "notes.txt").write_text("ignored", encoding="utf-8")

            messages = load_messages(root)

        self.assertEqual([m.message_id for m in messages], ["a_alert", "b_saved"])
        self.assertIn("QA Engineer", messages[0].html)
        self.assertEqual(messages[0].subject, "3 new jobs for you")
        self.assertEqual(len(scan_messages(messages)), 2)

    def test_plain_text_eml_is_wrapped(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "plain.eml"
            msg = EmailMessage()
            msg.set_content("Hello <friend>")
            path.write_bytes(msg.as_bytes())
            messages = load_messages(path)
        self.assertTrue(messages[0].html.startswith("<pre>"))
        self.assertIn("&lt;friend&gt;", messages[0].html)

    def test_missing_path(self):
        self.assertEqual(load_messages(Path("/nonexistent/inbox")), [])


if __name__ == "__main__":
    unittest.main()
