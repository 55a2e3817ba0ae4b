import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("forum_accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "reference",
                    models.CharField(
                        help_text='Unique order reference, e.g. "AISF-A1B2C3D4".', max_length=100, unique=True
                    ),
                ),
                ("purchaser_email", models.EmailField(max_length=254)),
                ("purchaser_name", models.CharField(max_length=200)),
                ("total_amount", models.PositiveIntegerField(default=0, help_text="Total charged, in cents.")),
                ("discount_amount", models.PositiveIntegerField(default=0, help_text="Discount applied, in cents.")),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("card", "Card"), ("invoice", "Invoice")], default="card", max_length=20
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("paid", "Paid"), ("cancelled", "Cancelled")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("stripe_session_id", models.CharField(blank=True, max_length=200, null=True, unique=True)),
                (
                    "stripe_payment_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Stripe PaymentIntent id, set once the card charge succeeds.",
                        max_length=200,
                    ),
                ),
                ("stripe_refund_id", models.CharField(blank=True, default="", max_length=200)),
                ("invoice_number", models.CharField(blank=True, default="", max_length=100)),
                ("invoice_due_date", models.DateField(blank=True, null=True)),
                ("organisation", models.CharField(blank=True, default="", max_length=200)),
                ("abn", models.CharField(blank=True, default="", max_length=20, verbose_name="ABN")),
                ("po_number", models.CharField(blank=True, default="", max_length=100, verbose_name="PO number")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="StripeEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("stripe_id", models.CharField(max_length=200, unique=True)),
                ("kind", models.CharField(max_length=200)),
                ("livemode", models.BooleanField(default=False)),
                ("payload", models.JSONField(default=dict)),
                ("customer_id", models.CharField(blank=True, default="", max_length=200)),
                ("processed", models.BooleanField(default=False)),
                ("api_version", models.CharField(blank=True, default="", max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="EventProcessingException",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("data", models.TextField(blank=True, default="")),
                ("message", models.CharField(max_length=500)),
                ("traceback", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exceptions",
                        to="forum_registration.stripeevent",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254)),
                ("ticket_type", models.CharField(max_length=200)),
                (
                    "ticket_price",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Per-seat price in cents; the amount refunded when this ticket is cancelled.",
                        null=True,
                    ),
                ),
                ("amount_paid", models.PositiveIntegerField(default=0, help_text="Amount paid in cents.")),
                ("discount_amount", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("paid", "Paid"),
                            ("cancelled", "Cancelled"),
                            ("refunded", "Refunded"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "stripe_payment_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Stripe PaymentIntent id for legacy single-ticket purchases.",
                        max_length=200,
                    ),
                ),
                ("stripe_refund_id", models.CharField(blank=True, default="", max_length=200)),
                ("dietary_requirements", models.CharField(blank=True, default="", max_length=500)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="forum_registration.order",
                    ),
                ),
                (
                    "profile",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="registrations",
                        to="forum_accounts.profile",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("status", "refunded"), _negated=True),
                            models.Q(("stripe_refund_id", ""), _negated=True),
                            _connector="OR",
                        ),
                        name="registration_refunded_has_refund_id",
                    )
                ],
            },
        ),
    ]
