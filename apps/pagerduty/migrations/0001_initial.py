from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("tickets", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PagerDutyScrip",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "description",
                    models.CharField(default="Create or Update PagerDuty Incident", max_length=255),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "queues",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Queues this scrip applies to. Leave empty to apply globally.",
                        related_name="pagerduty_scrips",
                        to="tickets.queue",
                    ),
                ),
            ],
            options={
                "verbose_name": "PagerDuty scrip",
                "ordering": ["description"],
            },
        ),
    ]
