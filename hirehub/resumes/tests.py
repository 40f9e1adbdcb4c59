from unittest import mock

import requests
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from accounts.models import User, JobSeekerProfile
from jobs.models import Job
from .extraction import (
    CorruptedResume,
    InvalidResumeType,
    PasswordProtectedResume,
    ResumeExtractionClient,
    ResumeParseError,
    ResumeServiceUnavailable,
    ResumeTooLarge,
    error_from_payload,
    validate_resume_upload,
)
from .models import Resume


def _pdf(name="cv.pdf", content=b"%PDF-1.4 resume"):
    return SimpleUploadedFile(name, content, content_type="application/pdf")


def _response(status_code, payload=None):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class ErrorMappingTests(SimpleTestCase):
    def test_codes_map_to_distinct_errors(self):
        cases = {
            "corrupted": CorruptedResume,
            "invalid_type": InvalidResumeType,
            "password_protected": PasswordProtectedResume,
        }
        messages = set()
        for code, cls in cases.items():
            error = error_from_payload({"error": "nope", "code": code})
            self.assertIsInstance(error, cls)
            self.assertEqual(error.code, code)
            messages.add(error.user_message)
        self.assertEqual(len(messages), 3)

    def test_message_is_sniffed_when_code_is_missing(self):
        self.assertIsInstance(error_from_payload({"error": "File is password protected"}), PasswordProtectedResume)
        self.assertIsInstance(error_from_payload({"error": "Invalid PDF structure"}), CorruptedResume)
        self.assertIsInstance(error_from_payload({"error": "Invalid file type"}), InvalidResumeType)
        self.assertIs(type(error_from_payload({"error": "something else"})), ResumeParseError)
        self.assertIs(type(error_from_payload("oops")), ResumeParseError)


class UploadValidationTests(SimpleTestCase):
    def test_pdf_and_docx_are_accepted(self):
        validate_resume_upload(_pdf(), max_bytes=1024)
        docx = SimpleUploadedFile(
            "cv.docx", b"PK", content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )
        validate_resume_upload(docx, max_bytes=1024)

    def test_generic_content_type_falls_back_to_extension(self):
        validate_resume_upload(SimpleUploadedFile("cv.pdf", b"x", content_type="application/octet-stream"), max_bytes=10)
        with self.assertRaises(InvalidResumeType):
            validate_resume_upload(SimpleUploadedFile("cv.exe", b"x", content_type="application/octet-stream"), max_bytes=10)

    def test_too_large(self):
        with self.assertRaises(ResumeTooLarge):
            validate_resume_upload(_pdf(content=b"x" * 20), max_bytes=10)


class ExtractionClientTests(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock(spec=requests.Session)
        self.client_ = ResumeExtractionClient(url="http://parser.test/parse", timeout=5, session=self.session)

    def test_success_returns_parsed_fields(self):
        self.session.post.return_value = _response(
            200, {"name": " Ada ", "email": "ADA@example.com", "skills": ["Python", " SQL ", ""], "education": [{"degree": "BSc"}]}
        )
        parsed = self.client_.extract(_pdf())
        self.assertEqual(parsed.name, "Ada")
        self.assertEqual(parsed.email, "ada@example.com")
        self.assertEqual(parsed.skills, ["Python", "SQL"])
        self.assertEqual(parsed.education, [{"degree": "BSc"}])

        _args, kwargs = self.session.post.call_args
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(kwargs["files"]["resume"][0], "cv.pdf")

    def test_client_error_is_mapped(self):
        self.session.post.return_value = _response(400, {"error": "Encrypted", "code": "password_protected"})
        with self.assertRaises(PasswordProtectedResume):
            self.client_.extract(_pdf())

    def test_network_failure_and_server_error_mean_unavailable(self):
        self.session.post.side_effect = requests.exceptions.ConnectionError("down")
        with self.assertRaises(ResumeServiceUnavailable):
            self.client_.extract(_pdf())

        self.session.post.side_effect = None
        self.session.post.return_value = _response(502)
        with self.assertRaises(ResumeServiceUnavailable):
            self.client_.extract(_pdf())

    def test_invalid_type_is_rejected_before_calling_service(self):
        with self.assertRaises(InvalidResumeType):
            self.client_.extract(SimpleUploadedFile("cv.png", b"png", content_type="image/png"))
        self.session.post.assert_not_called()


class ResumeViewsTests(TestCase):
    def setUp(self):
        self.hr = User.objects.create_user(username="hr", password="pass", role="hr", email="hr@example.com")
        self.job = Job.objects.create(created_by=self.hr, title="Frontend", required_skills=["React", "TypeScript", "Node.js"])

    @mock.patch("requests.Session.post")
    def test_parse_returns_fields_and_match(self, post):
        post.return_value = _response(200, {"name": "Ada", "skills": ["react", "node.js", "css"]})
        resp = self.client.post(reverse("parse_resume"), {"resume": _pdf(), "job_id": self.job.id})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["parsed"]["name"], "Ada")
        self.assertEqual(body["match"], {"score": 67, "matched": ["React", "Node.js"], "missing": ["TypeScript"]})

    @mock.patch("requests.Session.post")
    def test_parse_falls_back_to_declared_skills(self, post):
        post.return_value = _response(200, {"name": "Ada", "skills": []})
        resp = self.client.post(
            reverse("parse_resume"), {"resume": _pdf(), "job_id": self.job.id, "skills": "TypeScript"}
        )
        self.assertEqual(resp.json()["match"]["score"], 33)

    @mock.patch("requests.Session.post")
    def test_parse_error_codes_reach_the_client(self, post):
        post.return_value = _response(422, {"error": "bad", "code": "corrupted"})
        resp = self.client.post(reverse("parse_resume"), {"resume": _pdf()})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "corrupted")
        self.assertEqual(resp.json()["error"], CorruptedResume.user_message)

        post.side_effect = requests.exceptions.Timeout("slow")
        resp = self.client.post(reverse("parse_resume"), {"resume": _pdf()})
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["code"], "unavailable")

    def test_parse_rejects_wrong_type(self):
        resp = self.client.post(
            reverse("parse_resume"), {"resume": SimpleUploadedFile("cv.txt", b"hi", content_type="text/plain")}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "invalid_type")

    @mock.patch("requests.Session.post")
    def test_upload_keeps_one_resume_and_stores_skills(self, post):
        seeker = User.objects.create_user(username="ada", password="pass", role="job_seeker", email="ada@example.com")
        self.client.force_login(seeker)
        post.return_value = _response(200, {"skills": ["Python"], "education": [{"degree": "BSc"}]})

        self.client.post(reverse("upload_resume"), {"file": _pdf("old.pdf"), "title": "Old"})
        resp = self.client.post(reverse("upload_resume"), {"file": _pdf("new.pdf"), "title": "New"})
        self.assertEqual(resp.status_code, 201)
        self.assertIsNone(resp.json()["parse_error"])

        profile = JobSeekerProfile.objects.get(user=seeker)
        resumes = Resume.objects.filter(jobseeker=profile)
        self.assertEqual(resumes.count(), 1)
        self.assertEqual(resumes.get().skills, ["Python"])
        self.assertEqual(resumes.get().education, "BSc")
        self.assertTrue(profile.resume)

    @mock.patch("requests.Session.post")
    def test_upload_is_stored_even_when_parsing_fails(self, post):
        seeker = User.objects.create_user(username="ada", password="pass", role="job_seeker", email="ada@example.com")
        self.client.force_login(seeker)
        post.side_effect = requests.exceptions.ConnectionError("down")

        resp = self.client.post(reverse("upload_resume"), {"file": _pdf()})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["parse_error"]["code"], "unavailable")
        self.assertEqual(Resume.objects.count(), 1)

    @mock.patch("requests.Session.post")
    def test_replaced_resume_file_is_removed_after_commit(self, post):
        seeker = User.objects.create_user(username="ada", password="pass", role="job_seeker", email="ada@example.com")
        self.client.force_login(seeker)
        post.return_value = _response(200, {"skills": ["Python"]})

        self.client.post(reverse("upload_resume"), {"file": _pdf("old.pdf")})
        old = Resume.objects.get()
        self.assertTrue(default_storage.exists(old.file.name))

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            resp = self.client.post(reverse("upload_resume"), {"file": _pdf("new.pdf")})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(len(callbacks), 1)

        new = Resume.objects.get()
        self.assertFalse(default_storage.exists(old.file.name))
        self.assertTrue(default_storage.exists(new.file.name))
        self.assertEqual(JobSeekerProfile.objects.get(user=seeker).resume.name, new.file.name)
