import sys
import unittest
from datetime import date, datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobflow.models import Job, JobStatus  # noqa: E402
from jobflow.report import build_scan_report  # noqa: E402
from jobflow.stats import compute_stats, funnel, weekly_activity  # noqa: E402


def _job(status, detected_at="2026-10-19T08:00:00"):
    return Job(id=status.name, title="t", company="c", location="l", description="d",
               status=status, detected_at=detected_at)


class StatsTests(unittest.TestCase):
    def setUp(self):
        self.jobs = [
            _job(JobStatus.DETECTED),
            _job(JobStatus.SAVED, "2026-10-13T10:00:00"),
            _job(JobStatus.APPLIED_AUTO, "2026-10-18T10:00:00"),
            _job(JobStatus.APPLIED_MANUAL, "2026-10-18T11:00:00"),
            _job(JobStatus.INTERVIEW),
            _job(JobStatus.OFFER, "not a date"),
            _job(JobStatus.REJECTED, "2026-09-01T00:00:00"),
        ]

    def test_compute_stats_ignores_detected(self):
        stats = compute_stats(self.jobs)
        self.assertEqual((stats.active, stats.applied, stats.interviews, stats.offers), (6, 2, 1, 1))
        self.assertEqual(stats.submitted, 5)
        self.assertEqual(stats.application_rate, 0.83)
        self.assertEqual(stats.conversion_rate, 0.4)

    def test_rates_without_applications(self):
        stats = compute_stats([_job(JobStatus.SAVED)])
        self.assertEqual((stats.application_rate, stats.conversion_rate), (0.0, 0.0))
        self.assertEqual(compute_stats([]).application_rate, 0.0)

    def test_rates_stay_bounded_when_interviews_outnumber_applications(self):
        jobs = [_job(JobStatus.APPLIED_MANUAL)] + [_job(JobStatus.INTERVIEW) for _ in range(3)]
        stats = compute_stats(jobs)
        self.assertEqual(stats.application_rate, 1.0)
        self.assertEqual(stats.conversion_rate, 0.75)

        text = build_scan_report([], [], jobs)
        self.assertIn("- **Application rate:** 100%", text)
        self.assertIn("- **Conversion rate:** 75%", text)

    def test_funnel(self):
        self.assertEqual(
            funnel(self.jobs),
            [("Saved", 6), ("Applied", 2), ("Interview", 1), ("Offer", 1)],
        )

    def test_weekly_activity(self):
        activity = weekly_activity(self.jobs, today=date(2026, 10, 19))
        self.assertEqual(len(activity), 7)
        self.assertEqual(activity[0], ("Tue", 1))   # Oct 13
        self.assertEqual(activity[-2], ("Sun", 2))  # Oct 18
        self.assertEqual(activity[-1], ("Mon", 1))  # Oct 19, detected lead excluded
        self.assertEqual(sum(c for _, c in activity), 4)

    def test_weekly_activity_buckets_by_local_date(self):
        late_evening = datetime(2026, 10, 18, 23, 30).astimezone()
        stamp = late_evening.astimezone(timezone.utc).isoformat()
        activity = weekly_activity([_job(JobStatus.SAVED, stamp)], today=date(2026, 10, 19))
        self.assertEqual(activity[-2], ("Sun", 1))
        self.assertEqual(activity[-1], ("Mon", 0))


if __name__ == "__main__":
    unittest.main()
