import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("forum_accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FundingApplication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(help_text="Applicant email, stored lower-cased.", max_length=254)),
                ("name", models.CharField(max_length=200)),
                ("organisation", models.CharField(blank=True, default="", max_length=200)),
                ("accepted_terms", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "location",
                    models.CharField(help_text="Where the applicant is travelling from.", max_length=200),
                ),
                ("role", models.CharField(max_length=200)),
                ("day1", models.BooleanField(default=False, verbose_name="Attending day 1")),
                ("day2", models.BooleanField(default=False, verbose_name="Attending day 2")),
                ("why_attend", models.TextField()),
                ("travel_support", models.TextField(blank=True, default="")),
                (
                    "amount",
                    models.CharField(blank=True, default="", help_text="Requested amount as entered.", max_length=100),
                ),
                (
                    "background_info",
                    models.JSONField(blank=True, default=list, help_text="Background categories the applicant selected."),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "profile",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="funding_applications",
                        to="forum_accounts.profile",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SpeakerProposal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(help_text="Applicant email, stored lower-cased.", max_length=254)),
                ("name", models.CharField(max_length=200)),
                ("organisation", models.CharField(blank=True, default="", max_length=200)),
                ("accepted_terms", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(help_text="Speaker's job title or role.", max_length=200)),
                ("bio", models.TextField()),
                ("linkedin", models.CharField(blank=True, default="", max_length=300)),
                ("twitter", models.CharField(blank=True, default="", max_length=300)),
                ("bluesky", models.CharField(blank=True, default="", max_length=300)),
                ("website", models.CharField(blank=True, default="", max_length=300)),
                (
                    "format",
                    models.CharField(help_text="Preferred session format, e.g. talk or panel.", max_length=100),
                ),
                ("abstract", models.TextField()),
                ("travel_support", models.TextField(blank=True, default="")),
                ("anything_else", models.TextField(blank=True, default="")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("accepted", "Accepted"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "profile",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="speaker_proposals",
                        to="forum_accounts.profile",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
    ]
