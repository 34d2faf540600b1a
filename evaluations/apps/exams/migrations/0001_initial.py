import django.db.models.deletion
from django.db import migrations, models


def _timestamps():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def _id():
    return ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID"))


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ExamModel",
            fields=[
                _id(),
                *_timestamps(),
                ("description", models.CharField(max_length=64)),
                ("starting_at", models.DateTimeField()),
                ("duration", models.DurationField()),
                ("state", models.CharField(
                    choices=[("UPCOMING", "UPCOMING"), ("IN_PROGRESS", "IN_PROGRESS"), ("FINISHED", "FINISHED")],
                    default="UPCOMING",
                    max_length=20,
                )),
            ],
            options={"db_table": "evaluations_exam", "ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="ExamOwnerModel",
            fields=[
                _id(),
                *_timestamps(),
                ("owner", models.CharField(max_length=64)),
                ("exam", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="owners",
                    to="evaluations.exammodel",
                )),
            ],
            options={"db_table": "evaluations_exam_owner"},
        ),
        migrations.AddConstraint(
            model_name="examownermodel",
            constraint=models.UniqueConstraint(fields=("exam", "owner"), name="uniq_exam_owner"),
        ),
        migrations.CreateModel(
            name="ExerciseModel",
            fields=[
                _id(),
                *_timestamps(),
                ("question", models.TextField()),
                ("language", models.CharField(
                    choices=[("JAVA", "JAVA"), ("C", "C"), ("CPP", "CPP"), ("PYTHON", "PYTHON"), ("RUBY", "RUBY")],
                    max_length=10,
                )),
                ("awarded_score", models.PositiveIntegerField()),
                ("solution_template", models.TextField(blank=True, null=True)),
                ("exam", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="exercises",
                    to="evaluations.exammodel",
                )),
            ],
            options={"db_table": "evaluations_exercise", "ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="TestCaseModel",
            fields=[
                _id(),
                *_timestamps(),
                ("visibility", models.CharField(
                    choices=[("PUBLIC", "PUBLIC"), ("PRIVATE", "PRIVATE")],
                    max_length=10,
                )),
                ("timeout", models.PositiveIntegerField(help_text="milliseconds")),
                ("inputs", models.JSONField(default=list)),
                ("expected_outputs", models.JSONField(default=list)),
                ("program_arguments", models.JSONField(default=list)),
                ("stdin", models.JSONField(blank=True, null=True)),
                ("exercise", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="test_cases",
                    to="evaluations.exercisemodel",
                )),
            ],
            options={"db_table": "evaluations_test_case", "ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="ExerciseSolutionModel",
            fields=[
                _id(),
                *_timestamps(),
                ("answer", models.TextField(blank=True)),
                ("compiler_flags", models.CharField(blank=True, max_length=255, null=True)),
                ("exercise", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="solutions",
                    to="evaluations.exercisemodel",
                )),
            ],
            options={"db_table": "evaluations_exercise_solution", "ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="ExerciseSolutionResultModel",
            fields=[
                _id(),
                *_timestamps(),
                ("result", models.CharField(
                    choices=[
                        ("APPROVED", "APPROVED"),
                        ("FAILED", "FAILED"),
                        ("TIMED_OUT", "TIMED_OUT"),
                        ("NOT_COMPILED", "NOT_COMPILED"),
                        ("UNKNOWN_ERROR", "UNKNOWN_ERROR"),
                    ],
                    max_length=20,
                )),
                ("detail", models.TextField(blank=True, null=True)),
                ("solution", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="results",
                    to="evaluations.exercisesolutionmodel",
                )),
                ("test_case", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="results",
                    to="evaluations.testcasemodel",
                )),
            ],
            options={"db_table": "evaluations_exercise_solution_result", "ordering": ["id"]},
        ),
        migrations.AddConstraint(
            model_name="exercisesolutionresultmodel",
            constraint=models.UniqueConstraint(
                fields=("solution", "test_case"),
                name="uniq_solution_result_per_test_case",
            ),
        ),
    ]
