from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Resume",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.FileField(upload_to="resumes/")),
                ("title", models.CharField(blank=True, max_length=200)),
                ("skills", models.JSONField(blank=True, default=list)),
                ("education", models.CharField(blank=True, max_length=255)),
                ("parsed_data", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("jobseeker", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="resumes", to="accounts.jobseekerprofile")),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
    ]
