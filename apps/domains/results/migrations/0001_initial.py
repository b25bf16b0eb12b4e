import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _counter():
    return models.PositiveIntegerField(default=0)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("exams", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ExamAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("attempt_index", models.PositiveIntegerField(help_text="1부터 시작")),
                ("started_at", models.DateTimeField()),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("completed", models.BooleanField(default=False)),
                ("score", models.IntegerField(default=0)),
                (
                    "exam",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to="exams.exam",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="exam_attempts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "results_exam_attempt",
                "ordering": ["-started_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("exam", "student", "attempt_index"),
                        name="uniq_exam_attempt_index",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("completed", False)),
                        fields=("exam", "student"),
                        name="uniq_active_exam_attempt",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AttemptAnswer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("answer_text", models.TextField(blank=True)),
                ("is_correct", models.BooleanField(blank=True, null=True)),
                (
                    "attempt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="results.examattempt",
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempt_answers",
                        to="exams.examquestion",
                    ),
                ),
            ],
            options={
                "db_table": "results_attempt_answer",
                "ordering": ["question__number"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("attempt", "question"),
                        name="uniq_attempt_answer_per_question",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SessionReport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("heads_turned", _counter()),
                ("head_tilts", _counter()),
                ("look_aways", _counter()),
                ("face_visibility_issues", _counter()),
                ("multiple_people", _counter()),
                ("mobile_detected", _counter()),
                ("audio_incidents", _counter()),
                ("tab_switches", _counter()),
                ("window_switches", _counter()),
                ("is_valid_test", models.BooleanField(blank=True, null=True)),
                ("invalid_reason", models.TextField(blank=True, null=True)),
                ("finalized_at", models.DateTimeField(blank=True, null=True)),
                (
                    "attempt",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_report",
                        to="results.examattempt",
                    ),
                ),
            ],
            options={
                "db_table": "results_session_report",
            },
        ),
    ]
