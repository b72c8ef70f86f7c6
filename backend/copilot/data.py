from __future__ import annotations
import time
from typing import Iterable, List, Optional

from .models import (
	Assessment,
	AssessmentResult,
	Dataset,
	Question,
	QuestionType,
	Role,
	User,
)

_DAY = 24 * 60 * 60


def _seed_users() -> List[User]:
	return [
		User(user_id="principal-1", name="Mr. Ahmed Al-Fahim", email="principal.ahmed@school.ae", role=Role.PRINCIPAL),
		# Teachers
		User(user_id="teacher-1", name="Ms. Fatima", email="ms.fatima@school.ae", role=Role.TEACHER, class_id="class-1", subject="Science"),
		User(user_id="teacher-3", name="Mr. Khalid", email="mr.khalid@school.ae", role=Role.TEACHER, class_id="class-1", subject="Math"),
		# Parents
		User(user_id="parent-1", name="Mr. Abdullah", email="abdullah@email.com", role=Role.PARENT, child_ids=("student-1",)),
		User(user_id="parent-2", name="Mrs. Al Hamad", email="alhamad@email.com", role=Role.PARENT, child_ids=("student-2",)),
		User(user_id="parent-3", name="Mr. Al Qasimi", email="alqasimi@email.com", role=Role.PARENT, child_ids=("student-3",)),
		User(user_id="parent-4", name="Mrs. Al Nuaimi", email="alnuaimi@email.com", role=Role.PARENT, child_ids=("student-4",)),
		User(user_id="parent-5", name="Mr. Al Falahi", email="alfalahi@email.com", role=Role.PARENT, child_ids=("student-5",)),
		# Students
		User(user_id="student-1", name="Zayed Al Maktoum", email="zayed@email.com", role=Role.STUDENT, class_id="class-1", has_iep=True),
		User(user_id="student-2", name="Noora Al Hamad", email="noora@email.com", role=Role.STUDENT, class_id="class-1"),
		User(user_id="student-3", name="Sultan Al Qasimi", email="sultan@email.com", role=Role.STUDENT, class_id="class-1"),
		User(user_id="student-4", name="Aisha Al Nuaimi", email="aisha@email.com", role=Role.STUDENT, class_id="class-1"),
		User(user_id="student-5", name="Rashid Al Falahi", email="rashid@email.com", role=Role.STUDENT, class_id="class-1"),
	]


def _seed_assessments() -> List[Assessment]:
	return [
		Assessment(
			assessment_id="assessment-1",
			title="Chapter 1",
			subject="Science",
			grade="5",
			teacher_id="teacher-1",
			class_id="class-1",
			questions=(
				Question(question_text="What is photosynthesis?", type=QuestionType.SHORT_ANSWER),
				Question(
					question_text="Which planet is known as the Red Planet?",
					type=QuestionType.MULTIPLE_CHOICE,
					options=("Earth", "Mars", "Jupiter", "Saturn"),
					correct_option_index=1,
				),
			),
		),
		Assessment(
			assessment_id="assessment-2",
			title="Chapter 1",
			subject="Math",
			grade="5",
			teacher_id="teacher-3",
			class_id="class-1",
			questions=(
				Question(question_text='What is 1/2 + 1/4? The answer should be in the format "x/y".', type=QuestionType.SHORT_ANSWER),
				Question(
					question_text="Simplify the fraction 6/8.",
					type=QuestionType.MULTIPLE_CHOICE,
					options=("1/2", "3/4", "2/3", "1/4"),
					correct_option_index=1,
				),
			),
		),
	]


def _seed_results(now: float) -> List[AssessmentResult]:
	science = [92, 78, 65, 45, 88]
	math = [81, 74, 68, 59, 87]
	rows: List[AssessmentResult] = []
	for idx, score in enumerate(science, start=1):
		rows.append(AssessmentResult(
			result_id=f"result-1-{idx}", assessment_id="assessment-1", student_id=f"student-{idx}",
			score=score, timestamp=now - 3 * _DAY,
		))
	for idx, score in enumerate(math, start=1):
		rows.append(AssessmentResult(
			result_id=f"result-2-{idx}", assessment_id="assessment-2", student_id=f"student-{idx}",
			score=score, timestamp=now - 7 * _DAY,
		))
	return rows


class DataStore:
	"""In-memory school data. Mutations happen here; readers get snapshots."""

	def __init__(
		self,
		assessments: Optional[Iterable[Assessment]] = None,
		results: Optional[Iterable[AssessmentResult]] = None,
		users: Optional[Iterable[User]] = None,
	) -> None:
		self.assessments: List[Assessment] = list(assessments or [])
		self.results: List[AssessmentResult] = list(results or [])
		self.users: List[User] = list(users or [])

	@classmethod
	def with_demo_data(cls) -> "DataStore":
		return cls(_seed_assessments(), _seed_results(time.time()), _seed_users())

	def snapshot(self) -> Dataset:
		return Dataset(
			assessments=tuple(self.assessments),
			results=tuple(self.results),
			users=tuple(self.users),
		)

	def add_assessment(self, assessment: Assessment) -> None:
		if any(a.assessment_id == assessment.assessment_id for a in self.assessments):
			raise ValueError(f"assessment {assessment.assessment_id!r} already exists")
		self.assessments.append(assessment)

	def upsert_result(self, result: AssessmentResult) -> AssessmentResult:
		# One current result per (assessment, student)
		for idx, existing in enumerate(self.results):
			if existing.assessment_id == result.assessment_id and existing.student_id == result.student_id:
				self.results[idx] = result
				return result
		self.results.append(result)
		return result

	def results_for(self, assessment_id: str) -> List[AssessmentResult]:
		return [r for r in self.results if r.assessment_id == assessment_id]


store = DataStore.with_demo_data()
