from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
	TEACHER = "teacher"
	PRINCIPAL = "principal"
	PARENT = "parent"
	STUDENT = "student"


class QuestionType(str, Enum):
	MULTIPLE_CHOICE = "multipleChoice"
	SHORT_ANSWER = "shortAnswer"


class PerformanceTier(str, Enum):
	MASTERED = "Mastered"
	DEVELOPING = "Developing"
	NEEDS_SUPPORT = "Needs Support"


TIER_THRESHOLDS: Dict[PerformanceTier, float] = {
	PerformanceTier.MASTERED: 85,
	PerformanceTier.DEVELOPING: 50,
}


def tier_of(score: float) -> PerformanceTier:
	if score >= TIER_THRESHOLDS[PerformanceTier.MASTERED]:
		return PerformanceTier.MASTERED
	if score >= TIER_THRESHOLDS[PerformanceTier.DEVELOPING]:
		return PerformanceTier.DEVELOPING
	return PerformanceTier.NEEDS_SUPPORT


class _Frozen(BaseModel):
	model_config = ConfigDict(frozen=True)


class Question(_Frozen):
	question_text: str
	type: QuestionType
	options: Optional[Tuple[str, ...]] = None
	correct_option_index: Optional[int] = None


class Assessment(_Frozen):
	assessment_id: str
	title: str
	subject: str
	grade: str
	teacher_id: str
	class_id: str
	questions: Tuple[Question, ...] = ()
	# Epoch seconds. Optional: demo data identifies assessments by id only.
	created_at: Optional[float] = None


class AssessmentResult(_Frozen):
	result_id: str
	assessment_id: str
	student_id: str
	# Percentage, nominally 0-100; renderers clamp anything outside
	score: float
	timestamp: float = 0


class User(_Frozen):
	user_id: str
	name: str
	role: Role
	email: Optional[str] = None
	class_id: Optional[str] = None
	grade: Optional[str] = None
	subject: Optional[str] = None
	child_ids: Tuple[str, ...] = ()
	has_iep: bool = False


class Dataset(_Frozen):
	"""Read-only snapshot handed to the copilot; the data store keeps mutating its own lists."""

	assessments: Tuple[Assessment, ...] = ()
	results: Tuple[AssessmentResult, ...] = ()
	users: Tuple[User, ...] = ()

	@property
	def students(self) -> List[User]:
		return [u for u in self.users if u.role == Role.STUDENT]

	def assessment_by_id(self) -> Dict[str, Assessment]:
		return {a.assessment_id: a for a in self.assessments}


class Speaker(str, Enum):
	USER = "user"
	ASSISTANT = "assistant"


class Source(str, Enum):
	LOCAL = "local"
	GENERATED = "generated"


class Entry(_Frozen):
	speaker: Speaker
	text: str


class Answer(_Frozen):
	source: Source
	text: str
	failed: bool = Field(default=False, description="True when generation failed and text is an apology")
