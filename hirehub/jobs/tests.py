import json
from datetime import timedelta
from unittest import mock

from django.core.exceptions import PermissionDenied, ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import Client, SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.models import User
from .models import ApplicationEvent, Interviewer, Job, JobApplication, SavedJob
from .scoring import clean_skills, match_skills
from .workflow import (
    DuplicateApplication,
    InvalidTransition,
    bulk_set_status,
    schedule_interview,
    set_status,
    submit_application,
)


def _post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def _resume_file(name="cv.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 demo resume", content_type="application/pdf")


class MatchScoringTests(SimpleTestCase):
    def test_job_without_skills_scores_zero(self):
        result = match_skills([], ["python", "django"])
        self.assertEqual(result.score, 0)
        self.assertEqual(result.matched, [])
        self.assertEqual(result.missing, [])

    def test_no_candidate_skills_means_everything_missing(self):
        result = match_skills(["Python", "SQL"], [])
        self.assertEqual(result.score, 0)
        self.assertEqual(result.missing, ["Python", "SQL"])

    def test_score_rounds_half_up(self):
        self.assertEqual(match_skills(["a", "b", "c"], ["a"]).score, 33)
        self.assertEqual(match_skills(["a", "b", "c"], ["a", "b"]).score, 67)
        # 1/8 = 12.5
        self.assertEqual(match_skills(list("abcdefgh"), ["a"]).score, 13)
        self.assertEqual(match_skills(["a", "b"], ["a", "b"]).score, 100)

    def test_comparison_ignores_case_and_surrounding_whitespace(self):
        result = match_skills(["  Python ", "React", "Docker"], ["PYTHON", " docker"])
        self.assertEqual(result.matched, ["Python", "Docker"])
        self.assertEqual(result.missing, ["React"])
        self.assertEqual(result.score, 67)

    def test_matched_and_missing_partition_the_job_skills(self):
        job_skills = ["Go", "Kubernetes", "Terraform", "AWS"]
        result = match_skills(job_skills, ["aws", "go", "rust"])
        self.assertEqual(len(result.matched) + len(result.missing), len(job_skills))
        self.assertEqual(set(result.matched) & set(result.missing), set())
        self.assertEqual(result.matched, ["Go", "AWS"])
        self.assertEqual(result.missing, ["Kubernetes", "Terraform"])

    def test_no_substring_matching(self):
        result = match_skills(["Java"], ["JavaScript"])
        self.assertEqual(result.score, 0)
        self.assertEqual(result.missing, ["Java"])

    def test_repeated_job_skills_count_as_listed(self):
        result = match_skills(["Python", "python", "SQL"], ["python"])
        self.assertEqual(result.matched, ["Python", "python"])
        self.assertEqual(result.score, 67)

    def test_clean_skills_accepts_comma_string(self):
        self.assertEqual(clean_skills(" Python, ,Django ,"), ["Python", "Django"])
        self.assertEqual(clean_skills(None), [])

    def test_end_to_end_example(self):
        result = match_skills(["React", "TypeScript", "Node.js"], ["react", "node.js", "css"])
        self.assertEqual(result.to_dict(), {"score": 67, "matched": ["React", "Node.js"], "missing": ["TypeScript"]})


class WorkflowTestBase(TestCase):
    def setUp(self):
        self.hr = User.objects.create_user(username="hr", password="pass", role="hr", email="hr@example.com")
        self.other_hr = User.objects.create_user(username="hr2", password="pass", role="hr", email="hr2@example.com")
        self.admin = User.objects.create_user(username="boss", password="pass", role="admin", email="boss@example.com")
        self.seeker = User.objects.create_user(
            username="seeker", password="pass", role="job_seeker", email="seeker@example.com"
        )
        self.job = Job.objects.create(
            created_by=self.hr,
            title="Backend Developer",
            description="APIs and PostgreSQL",
            location="Remote",
            required_skills=["Python", "Django", "SQL"],
        )

    def _apply(self, email="ada@example.com", skills=("python", "django"), **kwargs):
        application, _match = submit_application(
            self.job, name=kwargs.pop("name", "Ada Lovelace"), email=email, skills=list(skills), **kwargs
        )
        return application


class SubmitApplicationTests(WorkflowTestBase):
    def test_submit_stores_score_and_normalized_email(self):
        application, match = submit_application(
            self.job, name="Ada", email="  Ada@Example.COM ", phone="+44 7700 900123", skills="Python, SQL"
        )
        self.assertEqual(match.score, 67)
        self.assertEqual(application.resume_match_score, 67)
        self.assertEqual(application.email, "ada@example.com")
        self.assertEqual(application.status, "submitted")
        self.assertEqual(application.skills, ["Python", "SQL"])
        self.assertTrue(ApplicationEvent.objects.filter(application=application, status="submitted").exists())

    def test_second_application_with_same_email_is_rejected(self):
        self._apply(email="ada@example.com")
        with self.assertRaises(DuplicateApplication):
            self._apply(email="ADA@example.com")
        self.assertEqual(JobApplication.objects.filter(job=self.job).count(), 1)

    def test_logged_in_applicant_cannot_apply_twice_with_another_email(self):
        self._apply(email="first@example.com", applicant=self.seeker)
        with self.assertRaises(DuplicateApplication):
            self._apply(email="second@example.com", applicant=self.seeker)

    def test_race_on_unique_constraint_is_reported_as_duplicate(self):
        self._apply(email="ada@example.com")
        # the pre-check misses the concurrent row; the constraint still catches it
        with mock.patch("django.db.models.query.QuerySet.exists", return_value=False):
            with self.assertRaises(DuplicateApplication):
                self._apply(email="ada@example.com")
        self.assertEqual(JobApplication.objects.filter(job=self.job).count(), 1)

    def test_closed_job_rejects_applications(self):
        self.job.status = "closed"
        self.job.save()
        with self.assertRaises(ValidationError):
            self._apply()


class SetStatusTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.application = self._apply()

    def test_shortlist_saves_and_records_event(self):
        set_status(self.application.id, "shortlisted", actor=self.hr)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, "shortlisted")
        self.assertTrue(self.application.events.filter(status="shortlisted").exists())

    def test_same_status_is_a_no_op(self):
        before = JobApplication.objects.get(pk=self.application.pk)
        events_before = ApplicationEvent.objects.count()

        set_status(self.application.id, "submitted", actor=self.hr)

        after = JobApplication.objects.get(pk=self.application.pk)
        self.assertEqual(after.updated_at, before.updated_at)
        self.assertEqual(ApplicationEvent.objects.count(), events_before)

    def test_interviewing_needs_schedule(self):
        with self.assertRaises(ValidationError):
            set_status(self.application.id, "interviewing", actor=self.hr)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, "submitted")

    def test_terminal_status_cannot_move(self):
        set_status(self.application.id, "rejected", actor=self.hr)
        with self.assertRaises(InvalidTransition):
            set_status(self.application.id, "shortlisted", actor=self.hr)
        # re-applying the terminal status is still fine
        set_status(self.application.id, "rejected", actor=self.hr)

    def test_offer_only_after_interview(self):
        with self.assertRaises(InvalidTransition):
            set_status(self.application.id, "offered", actor=self.hr)

    def test_unknown_stored_status_is_shown_verbatim_and_cannot_move(self):
        JobApplication.objects.filter(pk=self.application.pk).update(status="on_hold")
        self.application.refresh_from_db()
        self.assertEqual(self.application.status_label(), "on_hold")
        with self.assertRaises(InvalidTransition):
            set_status(self.application.id, "shortlisted", actor=self.hr)

    def test_invalid_target_status(self):
        with self.assertRaises(ValidationError):
            set_status(self.application.id, "hired", actor=self.hr)

    def test_only_owner_or_admin_can_change(self):
        with self.assertRaises(PermissionDenied):
            set_status(self.application.id, "shortlisted", actor=self.other_hr)
        with self.assertRaises(PermissionDenied):
            set_status(self.application.id, "shortlisted", actor=self.seeker)
        set_status(self.application.id, "shortlisted", actor=self.admin)
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, "shortlisted")

    def test_missing_application(self):
        with self.assertRaises(JobApplication.DoesNotExist):
            set_status(424242, "shortlisted", actor=self.hr)


class ScheduleInterviewTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.application = self._apply()
        self.interviewer = Interviewer.objects.create(name="Jordan", email="jordan@example.com", timezone="Europe/Berlin")

    def test_missing_time_is_rejected_and_nothing_changes(self):
        with self.assertRaises(ValidationError) as ctx:
            schedule_interview(self.application.id, {"meeting_link": "https://meet.example.com/x"}, actor=self.hr)
        self.assertEqual(ctx.exception.message_dict["scheduled_at"], ["Please pick an interview date and time."])
        self.application.refresh_from_db()
        self.assertEqual(self.application.status, "submitted")
        self.assertEqual(self.application.meeting_link, "")

    def test_schedule_writes_all_fields(self):
        schedule_interview(
            self.application.id,
            {
                "scheduled_at": "2030-01-15 10:30",
                "interviewer": self.interviewer.pk,
                "meeting_link": "https://meet.example.com/abc",
                "interview_mode": "video",
                "interviewer_notes": "Focus on SQL",
                "send_assessment": True,
            },
            actor=self.hr,
        )
        app = JobApplication.objects.get(pk=self.application.pk)
        self.assertEqual(app.status, "interviewing")
        self.assertIsNotNone(app.scheduled_at)
        self.assertEqual(app.interviewer, self.interviewer)
        self.assertEqual(app.meeting_link, "https://meet.example.com/abc")
        self.assertEqual(app.interview_mode, "video")
        self.assertEqual(app.interview_duration_minutes, 30)
        self.assertEqual(app.interview_sent_by, self.hr)
        self.assertEqual(len(app.test_token), 64)
        self.assertIsNotNone(app.test_sent_at)

        self.interviewer.refresh_from_db()
        self.assertEqual(self.interviewer.last_scheduled_at, app.scheduled_at)
        self.assertEqual(self.interviewer.last_scheduled_timezone, "Europe/Berlin")

    def test_reschedule_keeps_interviewing(self):
        schedule_interview(self.application.id, {"scheduled_at": "2030-01-15 10:30"}, actor=self.hr)
        schedule_interview(
            self.application.id, {"scheduled_at": "2030-01-16 09:00", "interview_duration_minutes": 45}, actor=self.hr
        )
        app = JobApplication.objects.get(pk=self.application.pk)
        self.assertEqual(app.status, "interviewing")
        self.assertEqual(timezone.localtime(app.scheduled_at).day, 16)
        self.assertEqual(app.interview_duration_minutes, 45)

    def test_reschedule_clears_omitted_optional_fields(self):
        schedule_interview(
            self.application.id,
            {
                "scheduled_at": "2030-01-15 10:30",
                "interviewer": self.interviewer.pk,
                "meeting_link": "https://meet.example.com/abc",
                "interview_mode": "video",
                "interviewer_notes": "Focus on SQL",
            },
            actor=self.hr,
        )
        schedule_interview(self.application.id, {"scheduled_at": "2030-01-16 09:00"}, actor=self.hr)
        app = JobApplication.objects.get(pk=self.application.pk)
        self.assertIsNone(app.interviewer)
        self.assertEqual(app.meeting_link, "")
        self.assertEqual(app.interview_mode, "")
        self.assertEqual(app.interviewer_notes, "")

    def test_meeting_link_without_scheme_defaults_to_https(self):
        payload = {"scheduled_at": "2030-01-15 10:30", "meeting_link": "meet.example.com/abc"}
        schedule_interview(self.application.id, payload, actor=self.hr)
        app = JobApplication.objects.get(pk=self.application.pk)
        self.assertEqual(app.meeting_link, "https://meet.example.com/abc")

    def test_failure_mid_update_leaves_record_untouched(self):
        with mock.patch("jobs.workflow.record_application_event", side_effect=DatabaseError("boom")):
            with self.assertRaises(DatabaseError):
                schedule_interview(
                    self.application.id,
                    {"scheduled_at": "2030-01-15 10:30", "meeting_link": "https://meet.example.com/abc"},
                    actor=self.hr,
                )
        app = JobApplication.objects.get(pk=self.application.pk)
        self.assertEqual(app.status, "submitted")
        self.assertIsNone(app.scheduled_at)
        self.assertEqual(app.meeting_link, "")

    def test_cannot_schedule_rejected_application(self):
        set_status(self.application.id, "rejected", actor=self.hr)
        with self.assertRaises(InvalidTransition):
            schedule_interview(self.application.id, {"scheduled_at": "2030-01-15 10:30"}, actor=self.hr)


class BulkStatusTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.apps = [self._apply(email=f"c{i}@example.com", name=f"Candidate {i}") for i in range(3)]

    def test_partial_failure_keeps_successes(self):
        ids = [a.id for a in self.apps] + [99901, 99902]
        result = bulk_set_status(ids, "shortlisted", actor=self.hr)

        self.assertEqual(result.updated_count, 3)
        self.assertEqual(result.failed_count, 2)
        self.assertEqual(result.outcome, "some")
        self.assertEqual(set(result.failed), {99901, 99902})
        self.assertEqual(JobApplication.objects.filter(status="shortlisted").count(), 3)

    def test_all_failed(self):
        result = bulk_set_status([99901], "rejected", actor=self.hr)
        self.assertEqual(result.outcome, "none")
        self.assertEqual(result.to_dict()["failed_count"], 1)

    def test_invalid_transition_counts_as_failure(self):
        set_status(self.apps[0].id, "rejected", actor=self.hr)
        result = bulk_set_status([a.id for a in self.apps], "shortlisted", actor=self.hr)
        self.assertEqual(result.updated, [self.apps[1].id, self.apps[2].id])
        self.assertIn(self.apps[0].id, result.failed)

    def test_only_shortlist_and_reject_are_bulk_actions(self):
        with self.assertRaises(ValidationError):
            bulk_set_status([self.apps[0].id], "offered", actor=self.hr)

    def test_empty_selection(self):
        with self.assertRaises(ValidationError):
            bulk_set_status([], "rejected", actor=self.hr)

    def test_database_error_on_one_item_is_reported_not_raised(self):
        with mock.patch("jobs.workflow._check_can_manage", side_effect=[None, DatabaseError("deadlock"), None]):
            result = bulk_set_status([a.id for a in self.apps], "rejected", actor=self.hr)
        self.assertEqual(result.updated, [self.apps[0].id, self.apps[2].id])
        self.assertEqual(result.failed, {self.apps[1].id: "deadlock"})
        self.assertEqual(result.outcome, "some")
        self.apps[1].refresh_from_db()
        self.assertEqual(self.apps[1].status, "submitted")


class RankingTests(WorkflowTestBase):
    def test_ranked_puts_best_match_first_and_newest_on_ties(self):
        now = timezone.now()
        rows = [
            ("none@example.com", None, now),
            ("old50@example.com", 50, now - timedelta(days=3)),
            ("new50@example.com", 50, now - timedelta(days=1)),
            ("top@example.com", 90, now - timedelta(days=10)),
        ]
        for email, score, created in rows:
            app = self._apply(email=email)
            JobApplication.objects.filter(pk=app.pk).update(resume_match_score=score, created_at=created)

        ordered = list(JobApplication.objects.ranked().values_list("email", flat=True))
        self.assertEqual(ordered, ["top@example.com", "new50@example.com", "old50@example.com", "none@example.com"])


class JobViewsTests(WorkflowTestBase):
    def test_public_list_shows_active_jobs_only(self):
        Job.objects.create(created_by=self.hr, title="Draft role", status="draft")
        resp = self.client.get(reverse("job_list"))
        self.assertEqual(resp.status_code, 200)
        titles = [j["title"] for j in resp.json()["jobs"]]
        self.assertEqual(titles, ["Backend Developer"])

    def test_hr_creates_job(self):
        self.client.force_login(self.hr)
        resp = _post_json(
            self.client,
            reverse("create_job"),
            {"title": "Data Analyst", "job_type": "contract", "required_skills": ["SQL", " Python "], "status": "active"},
        )
        self.assertEqual(resp.status_code, 201)
        job = Job.objects.get(title="Data Analyst")
        self.assertEqual(job.created_by, self.hr)
        self.assertEqual(job.required_skills, ["SQL", "Python"])

    def test_seeker_cannot_create_job(self):
        self.client.force_login(self.seeker)
        resp = _post_json(self.client, reverse("create_job"), {"title": "Nope"})
        self.assertEqual(resp.status_code, 403)

    def test_edit_with_inverted_experience_range_is_rejected(self):
        self.client.force_login(self.hr)
        resp = _post_json(
            self.client, reverse("edit_job", args=[self.job.id]), {"experience_min": 5, "experience_max": 2}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("experience_max", resp.json()["fields"])
        self.job.refresh_from_db()
        self.assertIsNone(self.job.experience_min)
        self.assertIsNone(self.job.experience_max)

    def test_partial_edit_keeps_other_fields(self):
        self.client.force_login(self.hr)
        resp = _post_json(self.client, reverse("edit_job", args=[self.job.id]), {"location": "Berlin"})
        self.assertEqual(resp.status_code, 200)
        self.job.refresh_from_db()
        self.assertEqual(self.job.location, "Berlin")
        self.assertEqual(self.job.title, "Backend Developer")
        self.assertEqual(self.job.required_skills, ["Python", "Django", "SQL"])

    def test_other_hr_cannot_edit(self):
        self.client.force_login(self.other_hr)
        resp = _post_json(self.client, reverse("edit_job", args=[self.job.id]), {"location": "Berlin"})
        self.assertEqual(resp.status_code, 403)

    def test_match_preview(self):
        resp = _post_json(self.client, reverse("match_preview", args=[self.job.id]), {"skills": "python, sql"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"score": 67, "matched": ["Python", "SQL"], "missing": ["Django"]})

    def test_apply_then_duplicate_is_conflict(self):
        data = {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "phone": "+44 7700 900123",
            "skills": "Python, Django",
            "resume": _resume_file(),
        }
        resp = self.client.post(reverse("apply_job", args=[self.job.id]), data)
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["match"]["score"], 67)
        self.assertEqual(body["application"]["match_score"], 67)

        data["email"] = "ADA@example.com"
        data["resume"] = _resume_file()
        resp = self.client.post(reverse("apply_job", args=[self.job.id]), data)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(JobApplication.objects.count(), 1)

    def test_apply_rejects_bad_phone_and_file_type(self):
        data = {
            "name": "Ada",
            "email": "ada@example.com",
            "phone": "call me",
            "resume": SimpleUploadedFile("cv.png", b"png", content_type="image/png"),
        }
        resp = self.client.post(reverse("apply_job", args=[self.job.id]), data)
        self.assertEqual(resp.status_code, 400)
        fields = resp.json()["fields"]
        self.assertIn("phone", fields)
        self.assertIn("resume", fields)

    def test_hr_list_is_ranked(self):
        low = self._apply(email="low@example.com", skills=["sql"])
        high = self._apply(email="high@example.com", skills=["python", "django", "sql"])
        self.client.force_login(self.hr)
        resp = self.client.get(reverse("application_list"))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([a["id"] for a in body["applications"]], [high.id, low.id])
        self.assertEqual(body["counts"]["all"], 2)

    def test_hr_list_hides_other_hr_jobs(self):
        self._apply()
        self.client.force_login(self.other_hr)
        resp = self.client.get(reverse("application_list"))
        self.assertEqual(resp.json()["applications"], [])

    def test_seeker_cannot_set_status(self):
        application = self._apply()
        self.client.force_login(self.seeker)
        resp = _post_json(
            self.client, reverse("update_application_status", args=[application.id]), {"status": "shortlisted"}
        )
        self.assertEqual(resp.status_code, 403)
        application.refresh_from_db()
        self.assertEqual(application.status, "submitted")

    def test_anonymous_gets_401(self):
        application = self._apply()
        resp = _post_json(
            self.client, reverse("update_application_status", args=[application.id]), {"status": "shortlisted"}
        )
        self.assertEqual(resp.status_code, 401)

    def test_status_endpoint(self):
        application = self._apply()
        self.client.force_login(self.hr)
        url = reverse("update_application_status", args=[application.id])
        resp = _post_json(self.client, url, {"status": "shortlisted"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["application"]["status"], "shortlisted")

        resp = _post_json(self.client, url, {"status": "offered"})
        self.assertEqual(resp.status_code, 400)

    def test_status_endpoint_other_hr_is_forbidden(self):
        application = self._apply()
        self.client.force_login(self.other_hr)
        resp = _post_json(
            self.client, reverse("update_application_status", args=[application.id]), {"status": "rejected"}
        )
        self.assertEqual(resp.status_code, 403)

    def test_schedule_endpoint_requires_time(self):
        application = self._apply()
        self.client.force_login(self.hr)
        resp = _post_json(self.client, reverse("schedule_interview", args=[application.id]), {})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["fields"]["scheduled_at"], ["Please pick an interview date and time."])

    def test_bulk_endpoint_reports_partial_outcome(self):
        a = self._apply(email="a@example.com")
        b = self._apply(email="b@example.com")
        self.client.force_login(self.hr)
        resp = _post_json(
            self.client,
            reverse("bulk_update_status"),
            {"application_ids": [a.id, b.id, 99901], "status": "rejected"},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["outcome"], "some")
        self.assertEqual(body["updated_count"], 2)
        self.assertEqual(body["failed_count"], 1)
        self.assertIn("99901", body["failed"])

    def test_status_lookup_by_token(self):
        application = self._apply()
        resp = self.client.get(reverse("application_status_lookup", args=[application.application_token]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status_label"], "Submitted")

    def test_applicant_sees_own_application_without_timeline(self):
        application = self._apply(applicant=self.seeker, email="seeker@example.com")
        self.client.force_login(self.seeker)
        resp = self.client.get(reverse("application_detail", args=[application.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["can_manage"])
        self.assertNotIn("events", resp.json()["application"])

        resp = self.client.get(reverse("my_applications"))
        self.assertEqual([a["id"] for a in resp.json()["applications"]], [application.id])


class CsrfFlowTests(WorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.csrf_client = Client(enforce_csrf_checks=True)

    def _token(self):
        return self.csrf_client.cookies["csrftoken"].value

    def _post(self, url, payload, token=None):
        extra = {"HTTP_X_CSRFTOKEN": token} if token else {}
        return self.csrf_client.post(url, data=json.dumps(payload), content_type="application/json", **extra)

    def test_job_list_sets_csrf_cookie(self):
        resp = self.csrf_client.get(reverse("job_list"))
        self.assertEqual(resp.status_code, 200)
        self.assertIn("csrftoken", resp.cookies)

    def test_login_and_status_change_with_csrf_header(self):
        resp = self.csrf_client.get(reverse("csrf_token"))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["csrfToken"])

        resp = self._post(reverse("login"), {"username": "hr", "password": "pass"}, token=self._token())
        self.assertEqual(resp.status_code, 200)

        application = self._apply()
        url = reverse("update_application_status", args=[application.id])
        self.assertEqual(self._post(url, {"status": "shortlisted"}).status_code, 403)

        # login rotates the token
        resp = self._post(url, {"status": "shortlisted"}, token=self._token())
        self.assertEqual(resp.status_code, 200)
        application.refresh_from_db()
        self.assertEqual(application.status, "shortlisted")


class SavedJobTests(WorkflowTestBase):
    def test_toggle_saves_then_unsaves(self):
        self.client.force_login(self.seeker)
        url = reverse("toggle_saved_job", args=[self.job.id])

        resp = self.client.post(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"job_id": self.job.id, "saved": True})
        self.assertEqual(SavedJob.objects.filter(jobseeker__user=self.seeker).count(), 1)

        resp = self.client.post(url)
        self.assertFalse(resp.json()["saved"])
        self.assertFalse(SavedJob.objects.exists())

    def test_saved_list_returns_job_details(self):
        self.client.force_login(self.seeker)
        self.client.post(reverse("toggle_saved_job", args=[self.job.id]))
        resp = self.client.get(reverse("saved_jobs"))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["total"], 1)
        self.assertEqual(data["saved_jobs"][0]["job"]["title"], "Backend Developer")

    def test_cannot_save_inactive_job(self):
        draft = Job.objects.create(created_by=self.hr, title="Draft role", status="draft")
        self.client.force_login(self.seeker)
        resp = self.client.post(reverse("toggle_saved_job", args=[draft.id]))
        self.assertEqual(resp.status_code, 404)

    def test_hr_cannot_save_jobs(self):
        self.client.force_login(self.hr)
        resp = self.client.post(reverse("toggle_saved_job", args=[self.job.id]))
        self.assertEqual(resp.status_code, 403)


class MyInterviewsTests(WorkflowTestBase):
    def test_lists_only_interviewing_applications_with_job(self):
        other_job = Job.objects.create(created_by=self.hr, title="Data Engineer", required_skills=["SQL"])
        scheduled = self._apply(applicant=self.seeker, email="seeker@example.com")
        submit_application(other_job, name="Seeker", email="seeker@example.com", skills=["SQL"], applicant=self.seeker)
        self._apply(email="someone@example.com")
        schedule_interview(scheduled.id, {"scheduled_at": "2030-01-15 10:30", "interview_mode": "video"}, actor=self.hr)

        self.client.force_login(self.seeker)
        resp = self.client.get(reverse("my_interviews"))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["total"], 1)
        interview = data["interviews"][0]
        self.assertEqual(interview["id"], scheduled.id)
        self.assertEqual(interview["interview_mode"], "video")
        self.assertEqual(interview["job"]["title"], "Backend Developer")

    def test_requires_job_seeker(self):
        self.client.force_login(self.hr)
        self.assertEqual(self.client.get(reverse("my_interviews")).status_code, 403)
