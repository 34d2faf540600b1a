# evaluations/apps/exams/models.py
from django.db import models

STATE_CHOICES = [
    ("UPCOMING", "UPCOMING"),
    ("IN_PROGRESS", "IN_PROGRESS"),
    ("FINISHED", "FINISHED"),
]

LANGUAGE_CHOICES = [
    ("JAVA", "JAVA"),
    ("C", "C"),
    ("CPP", "CPP"),
    ("PYTHON", "PYTHON"),
    ("RUBY", "RUBY"),
]

VISIBILITY_CHOICES = [
    ("PUBLIC", "PUBLIC"),
    ("PRIVATE", "PRIVATE"),
]

RESULT_CHOICES = [
    ("APPROVED", "APPROVED"),
    ("FAILED", "FAILED"),
    ("TIMED_OUT", "TIMED_OUT"),
    ("NOT_COMPILED", "NOT_COMPILED"),
    ("UNKNOWN_ERROR", "UNKNOWN_ERROR"),
]


class TimestampModel(models.Model):
    """
    생성 / 수정 시간 자동 기록 추상 모델
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ExamModel(TimestampModel):
    """
    시험 (상태 전이는 도메인 엔티티에서만)
    """
    description = models.CharField(max_length=64)
    starting_at = models.DateTimeField()
    duration = models.DurationField()
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default="UPCOMING")

    class Meta:
        db_table = "evaluations_exam"
        ordering = ["id"]


class ExamOwnerModel(TimestampModel):
    exam = models.ForeignKey(ExamModel, on_delete=models.CASCADE, related_name="owners")
    owner = models.CharField(max_length=64)

    class Meta:
        db_table = "evaluations_exam_owner"
        constraints = [
            models.UniqueConstraint(fields=["exam", "owner"], name="uniq_exam_owner"),
        ]


class ExerciseModel(TimestampModel):
    exam = models.ForeignKey(ExamModel, on_delete=models.CASCADE, related_name="exercises")
    question = models.TextField()
    language = models.CharField(max_length=10, choices=LANGUAGE_CHOICES)
    awarded_score = models.PositiveIntegerField()
    solution_template = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "evaluations_exercise"
        ordering = ["id"]


class TestCaseModel(TimestampModel):
    """
    inputs / expected_outputs / program_arguments: 문자열 리스트 (JSON)
    stdin: null이면 inputs가 표준입력
    """
    exercise = models.ForeignKey(ExerciseModel, on_delete=models.CASCADE, related_name="test_cases")
    visibility = models.CharField(max_length=10, choices=VISIBILITY_CHOICES)
    timeout = models.PositiveIntegerField(help_text="milliseconds")
    inputs = models.JSONField(default=list)
    expected_outputs = models.JSONField(default=list)
    program_arguments = models.JSONField(default=list)
    stdin = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "evaluations_test_case"
        ordering = ["id"]


class ExerciseSolutionModel(TimestampModel):
    exercise = models.ForeignKey(ExerciseModel, on_delete=models.CASCADE, related_name="solutions")
    answer = models.TextField(blank=True)
    compiler_flags = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        db_table = "evaluations_exercise_solution"
        ordering = ["id"]


class ExerciseSolutionResultModel(TimestampModel):
    """
    채점 결과 fact. (solution, test_case)당 1건 (first-write-wins)
    """
    solution = models.ForeignKey(ExerciseSolutionModel, on_delete=models.CASCADE, related_name="results")
    test_case = models.ForeignKey(TestCaseModel, on_delete=models.CASCADE, related_name="results")
    result = models.CharField(max_length=20, choices=RESULT_CHOICES)
    detail = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "evaluations_exercise_solution_result"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["solution", "test_case"],
                name="uniq_solution_result_per_test_case",
            ),
        ]
