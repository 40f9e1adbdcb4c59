import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from accounts.models import JobSeekerProfile, Skill
from jobs.models import ApplicationStatus, Interviewer, Job, JobApplication, JobType
from jobs.workflow import schedule_interview, set_status, submit_application

User = get_user_model()

SKILL_POOL = [
    "Python",
    "Django",
    "PostgreSQL",
    "React",
    "JavaScript",
    "Docker",
    "AWS",
    "Linux",
    "SQL",
    "Figma",
    "TypeScript",
    "Node.js",
    "Git",
    "REST",
    "CI/CD",
]

JOB_TEMPLATES = [
    ("Backend Developer", "Build and maintain APIs, background jobs, and PostgreSQL schemas."),
    ("Frontend Engineer", "Develop responsive interfaces with modern JavaScript and API integrations."),
    ("Full Stack Developer", "Own features end-to-end across Django, REST APIs, and frontend modules."),
    ("Data Analyst", "Turn product and hiring data into dashboards and actionable insights."),
    ("DevOps Engineer", "Automate CI/CD pipelines, deployments, and runtime monitoring."),
    ("Product Designer", "Prototype user journeys and design system components with Figma."),
]

LOCATIONS = ["London", "Manchester", "Berlin", "Toronto", "Remote"]


class Command(BaseCommand):
    help = "Seed demo data (HR users, interviewers, job seekers, jobs, scored applications)."

    def add_arguments(self, parser):
        parser.add_argument("--prefix", type=str, default="demo")
        parser.add_argument("--hr-users", type=int, default=3)
        parser.add_argument("--jobseekers", type=int, default=12)
        parser.add_argument("--jobs-per-hr", type=int, default=4)
        parser.add_argument("--applications-per-seeker", type=int, default=3)
        parser.add_argument("--password", type=str, default="DemoPass123!")
        parser.add_argument("--seed", type=int, default=42)
        parser.add_argument("--wipe", action="store_true", help="Delete existing users starting with prefix before seeding.")

    def _skills(self, rnd, minimum=3, maximum=6):
        return rnd.sample(SKILL_POOL, rnd.randint(minimum, maximum))

    def _make_user(self, username, email, role, password):
        user, _ = User.objects.get_or_create(username=username, defaults={"email": email, "role": role})
        # Keep demo credentials predictable.
        user.email = email
        user.role = role
        user.is_active = True
        user.set_password(password)
        user.save()
        return user

    def _advance(self, rnd, application, actor):
        """Push a fresh application somewhere along the pipeline."""
        target = rnd.choices(
            ["submitted", "shortlisted", "interviewing", "offered", "rejected"],
            weights=[40, 20, 20, 5, 15],
            k=1,
        )[0]
        if target == ApplicationStatus.SUBMITTED:
            return
        if target in {ApplicationStatus.SHORTLISTED, ApplicationStatus.REJECTED}:
            set_status(application.id, target, actor=actor)
            return

        interviewer = Interviewer.objects.filter(is_active=True).order_by("?").first()
        when = timezone.now() + timedelta(days=rnd.randint(1, 10), hours=rnd.randint(0, 8))
        schedule_interview(
            application.id,
            {
                "scheduled_at": when.strftime("%Y-%m-%d %H:%M"),
                "interviewer": interviewer.pk if interviewer else "",
                "interview_mode": rnd.choice(["video", "phone", "onsite"]),
                "meeting_link": "https://meet.example.com/demo",
            },
            actor=actor,
        )
        if target == ApplicationStatus.OFFERED:
            set_status(application.id, target, actor=actor)

    @transaction.atomic
    def handle(self, *args, **opts):
        rnd = random.Random(opts["seed"])
        prefix = (opts["prefix"] or "demo").strip().lower()
        hr_n = max(1, int(opts["hr_users"]))
        seekers_n = max(1, int(opts["jobseekers"]))
        jobs_per_hr = max(1, int(opts["jobs_per_hr"]))
        apps_per_seeker = max(0, int(opts["applications_per_seeker"]))
        password = opts["password"]

        if opts["wipe"]:
            JobApplication.objects.filter(email__startswith=f"{prefix}_").delete()
            User.objects.filter(username__startswith=f"{prefix}_").delete()

        for name, tz in [("Avery Stone", "Europe/London"), ("Jordan Lee", "America/Toronto"), ("Sam Keller", "Europe/Berlin")]:
            Interviewer.objects.get_or_create(
                email=f"{prefix}_{name.split()[0].lower()}@example.com",
                defaults={"name": name, "timezone": tz},
            )

        created_jobs = []
        hr_creds = []
        for i in range(1, hr_n + 1):
            username = f"{prefix}_hr_{i}"
            user = self._make_user(username, f"{username}@example.com", User.Role.HR, password)
            hr_creds.append((username, password))

            for j in range(1, jobs_per_hr + 1):
                title_base, description = JOB_TEMPLATES[(i + j - 2) % len(JOB_TEMPLATES)]
                salary_min = rnd.randint(35_000, 95_000)
                exp_min = rnd.randint(0, 4)
                job, _ = Job.objects.get_or_create(
                    created_by=user,
                    title=f"{title_base} - Team {i}.{j}",
                    defaults={
                        "description": description,
                        "location": rnd.choice(LOCATIONS),
                        "job_type": rnd.choice(JobType.values),
                        "required_skills": self._skills(rnd),
                        "experience_min": exp_min,
                        "experience_max": exp_min + rnd.randint(1, 5),
                        "salary_min": salary_min,
                        "salary_max": salary_min + rnd.randint(8_000, 35_000),
                    },
                )
                created_jobs.append(job)

        seeker_creds = []
        applications_created = 0
        for i in range(1, seekers_n + 1):
            username = f"{prefix}_seeker_{i}"
            email = f"{username}@example.com"
            user = self._make_user(username, email, User.Role.JOB_SEEKER, password)
            seeker_creds.append((username, password))

            profile, _ = JobSeekerProfile.objects.get_or_create(
                user=user,
                defaults={
                    "full_name": f"Demo Seeker {i}",
                    "phone": f"+44 7700 9{i:05d}",
                    "location": rnd.choice(LOCATIONS),
                },
            )
            skills = self._skills(rnd)
            for name in skills:
                Skill.objects.get_or_create(profile=profile, name=name)

            for job in rnd.sample(created_jobs, k=min(apps_per_seeker, len(created_jobs))):
                if JobApplication.objects.filter(job=job, email=email).exists():
                    continue
                application, _match = submit_application(
                    job,
                    name=profile.full_name,
                    email=email,
                    phone=profile.phone,
                    skills=skills,
                    cover_letter="I am interested in this role and believe my background is a strong fit.",
                    applicant=user,
                )
                applications_created += 1
                self._advance(rnd, application, job.created_by)

        self.stdout.write(self.style.SUCCESS("Seeded demo data successfully."))
        self.stdout.write(f"Created/updated HR users: {hr_n}")
        self.stdout.write(f"Created/updated job seekers: {seekers_n}")
        self.stdout.write(f"Jobs: {len(created_jobs)}, new applications: {applications_created}")
        self.stdout.write("")
        self.stdout.write("Sample credentials:")
        for username, pwd in hr_creds[:3]:
            self.stdout.write(f"  {username} / {pwd}")
        for username, pwd in seeker_creds[:3]:
            self.stdout.write(f"  {username} / {pwd}")
