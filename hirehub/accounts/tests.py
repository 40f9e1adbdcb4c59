import json

from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from .models import User, JobSeekerProfile, Skill
from .utils import profile_completeness, round_percent


def _post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


class RoundPercentTests(SimpleTestCase):
    def test_half_rounds_up(self):
        self.assertEqual(round_percent(1, 8), 13)
        self.assertEqual(round_percent(1, 3), 33)
        self.assertEqual(round_percent(2, 3), 67)

    def test_zero_total(self):
        self.assertEqual(round_percent(0, 0), 0)


class ProfileCompletenessTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="ada", password="pass", role="job_seeker", email="ada@example.com")
        self.profile = JobSeekerProfile.objects.create(user=self.user)

    def test_empty_profile_is_zero(self):
        self.assertEqual(profile_completeness(self.profile), 0)

    def test_full_name_and_one_skill_is_twenty(self):
        self.profile.full_name = "Ada Lovelace"
        self.profile.save()
        Skill.objects.create(profile=self.profile, name="Python")
        self.assertEqual(profile_completeness(self.profile), 20)

    def test_blank_strings_do_not_count(self):
        self.profile.full_name = "   "
        self.assertEqual(profile_completeness(self.profile, skills=[]), 0)

    def test_everything_filled_is_hundred(self):
        for name, value in {
            "full_name": "Ada Lovelace",
            "phone": "+44 7700 900123",
            "location": "London",
            "bio": "Analyst",
            "job_title": "Engineer",
            "company_name": "Analytical Engines",
            "school_name": "Home",
            "degree": "Mathematics",
            "resume": "resumes/ada.pdf",
        }.items():
            setattr(self.profile, name, value)
        self.assertEqual(profile_completeness(self.profile, skills=["Python"]), 100)


class AuthViewsTests(TestCase):
    def test_register_creates_seeker_with_profile(self):
        resp = _post_json(
            self.client,
            reverse("register_jobseeker"),
            {"username": "grace", "email": "Grace@Example.com", "password": "Str0ng-Passw0rd!", "full_name": "Grace Hopper"},
        )
        self.assertEqual(resp.status_code, 201)
        user = User.objects.get(username="grace")
        self.assertEqual(user.role, "job_seeker")
        self.assertEqual(user.email, "grace@example.com")
        self.assertEqual(user.seeker_profile.full_name, "Grace Hopper")

    def test_register_rejects_taken_email(self):
        User.objects.create_user(username="x", password="pass", role="hr", email="grace@example.com")
        resp = _post_json(
            self.client,
            reverse("register_jobseeker"),
            {"username": "grace", "email": "grace@example.com", "password": "Str0ng-Passw0rd!"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("email", resp.json()["fields"])

    def test_login_and_logout(self):
        User.objects.create_user(username="hr", password="pass12345", role="hr", email="hr@example.com")
        resp = _post_json(self.client, reverse("login"), {"username": "hr", "password": "wrong"})
        self.assertEqual(resp.status_code, 400)

        resp = _post_json(self.client, reverse("login"), {"username": "hr", "password": "pass12345"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["role"], "hr")
        self.assertIn("_auth_user_id", self.client.session)

        resp = self.client.post(reverse("logout"))
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("_auth_user_id", self.client.session)


class ProfileViewsTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="ada", password="pass", role="job_seeker", email="ada@example.com")
        self.client.force_login(self.user)

    def test_profile_get_creates_profile_and_reports_completeness(self):
        resp = self.client.get(reverse("profile"))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()["profile"]
        # full_name defaults to the username
        self.assertEqual(body["full_name"], "ada")
        self.assertEqual(body["completeness"], 10)

    def test_partial_update(self):
        self.client.get(reverse("profile"))
        resp = _post_json(self.client, reverse("profile"), {"location": "London", "bio": "Analyst"})
        self.assertEqual(resp.status_code, 200)
        profile = JobSeekerProfile.objects.get(user=self.user)
        self.assertEqual(profile.location, "London")
        self.assertEqual(profile.full_name, "ada")
        self.assertEqual(resp.json()["profile"]["completeness"], 30)

    def test_duplicate_skill_is_case_insensitive(self):
        resp = _post_json(self.client, reverse("add_skill"), {"name": "Python"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["skill"]["proficiency_level"], "intermediate")

        resp = _post_json(self.client, reverse("add_skill"), {"name": " python "})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(Skill.objects.filter(profile__user=self.user).count(), 1)

    def test_delete_skill_only_own(self):
        resp = _post_json(self.client, reverse("add_skill"), {"name": "SQL", "proficiency_level": "expert"})
        skill_id = resp.json()["skill"]["id"]

        other = User.objects.create_user(username="bob", password="pass", role="job_seeker", email="bob@example.com")
        self.client.force_login(other)
        resp = self.client.post(reverse("delete_skill", args=[skill_id]))
        self.assertEqual(resp.status_code, 404)

        self.client.force_login(self.user)
        resp = self.client.post(reverse("delete_skill", args=[skill_id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(Skill.objects.filter(id=skill_id).exists())

    def test_experience_dates_are_checked(self):
        resp = _post_json(
            self.client,
            reverse("add_experience"),
            {"title": "Engineer", "company": "ACME", "start_date": "2022-05-01", "end_date": "2021-01-01"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertIn("end_date", resp.json()["fields"])

    def test_add_and_delete_education(self):
        resp = _post_json(
            self.client, reverse("add_education"), {"school": "MIT", "degree": "BSc", "start_year": 2015, "end_year": 2019}
        )
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post(reverse("delete_education", args=[resp.json()["id"]]))
        self.assertEqual(resp.status_code, 200)

    def test_hr_cannot_use_seeker_profile(self):
        hr = User.objects.create_user(username="hr", password="pass", role="hr", email="hr@example.com")
        self.client.force_login(hr)
        self.assertEqual(self.client.get(reverse("profile")).status_code, 403)
