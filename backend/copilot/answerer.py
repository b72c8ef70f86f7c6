from __future__ import annotations
import re
from collections import Counter
from typing import Dict, List, Optional, Sequence

from .context import UNKNOWN_SUBJECT, best_and_worst, mean, percent, subject_stats
from .models import Assessment, AssessmentResult, PerformanceTier, User, tier_of

STUDENT_TIP = "Tip: short daily practice on the weakest topic, then a quick re-test next week."
SUBJECT_TIP = "Tip: focus weak students with short practice sets and track re-tests next week."
ASK_FOR_SUGGESTIONS = 'Use "Get AI suggestions" for an action plan.'
NO_RESULTS = "No results recorded yet."

_WORD = re.compile(r"[a-z0-9]+")
_CLASS_OR_GRADE = re.compile(r"\b(class|grade)[\s-]*(\d+)\b")
_DIGITS = re.compile(r"\d+")
# Particles shared by many family names; they never identify a student on their own
_NAME_PARTICLES = frozenset({"al", "el", "bin", "bint", "ibn", "abu", "bu", "de", "da", "del", "van", "von"})
_MIN_SUBJECT_PREFIX = 4
# Lookup words that must not be read as the start of a subject label ("class" vs "Classics")
_NOT_SUBJECT_WORDS = frozenset({
	"class", "grade", "show", "list", "overall", "average", "score", "scores",
	"result", "results", "summary", "report", "teacher", "student", "subject",
})


def _lines(*parts: Optional[str]) -> str:
	return "\n".join(p for p in parts if p)


def _tokens(text: str) -> List[str]:
	return _WORD.findall(text.lower())


def _subject_of(result: AssessmentResult, by_id: Dict[str, Assessment]) -> str:
	a = by_id.get(result.assessment_id)
	return a.subject if a and a.subject else UNKNOWN_SUBJECT


def _match_student(question: str, roster: Sequence[User]) -> Optional[User]:
	words = set(_tokens(question))
	best: Optional[User] = None
	best_overlap = 0
	for student in roster:
		name_tokens = {t for t in _tokens(student.name) if t not in _NAME_PARTICLES}
		overlap = len(name_tokens & words)
		if overlap > best_overlap:
			best, best_overlap = student, overlap
	return best


def _match_subject(question: str, assessments: Sequence[Assessment]) -> Optional[str]:
	ql = question.lower()
	# Prefix matches only when the question is not already a class/grade lookup
	if _CLASS_OR_GRADE.search(ql):
		words: List[str] = []
	else:
		words = [w for w in _tokens(question) if len(w) >= _MIN_SUBJECT_PREFIX and w not in _NOT_SUBJECT_WORDS]
	seen: List[str] = []
	for a in assessments:
		if a.subject and a.subject not in seen:
			seen.append(a.subject)
	for subject in seen:
		label = subject.lower()
		if label in ql or any(label.startswith(w) for w in words):
			return subject
	return None


def _grade_of(student: User, assessments: Sequence[Assessment]) -> str:
	if student.grade:
		return str(student.grade)
	for a in assessments:
		if a.class_id and a.class_id == student.class_id and a.grade:
			return str(a.grade)
	m = _DIGITS.search(student.class_id or "")
	return m.group(0) if m else ""


def _class_number(student: User) -> str:
	m = _DIGITS.search(student.class_id or "")
	return m.group(0) if m else ""


def _student_summary(student: User, assessments: Sequence[Assessment], results: Sequence[AssessmentResult]) -> str:
	mine = [r for r in results if r.student_id == student.user_id]
	if not mine:
		return _lines(f"Student: {student.name}", NO_RESULTS, STUDENT_TIP)
	best, worst = best_and_worst(subject_stats(assessments, mine))
	return _lines(
		f"Student: {student.name}",
		f"Overall average: {percent(mean(r.score for r in mine))}",
		f"Best subject: {best.subject} ({percent(best.average)})" if best else None,
		f"Needs attention: {worst.subject} ({percent(worst.average)})" if worst else None,
		STUDENT_TIP,
	)


def _subject_summary(subject: str, assessments: Sequence[Assessment], results: Sequence[AssessmentResult]) -> str:
	by_id = {a.assessment_id: a for a in assessments}
	scores = [r.score for r in results if _subject_of(r, by_id) == subject]
	return _lines(
		f"Subject: {subject}",
		f"Average: {percent(mean(scores))}" if scores else NO_RESULTS,
		f"Assessments graded: {len(scores)}",
		SUBJECT_TIP,
	)


def _class_summary(label: str, students: Sequence[User], results: Sequence[AssessmentResult]) -> str:
	ids = {s.user_id for s in students}
	scores = [r.score for r in results if r.student_id in ids]
	tiers = Counter(tier_of(s) for s in scores)
	return _lines(
		f"Class: {label}",
		f"Students: {len(students)}",
		f"Average: {percent(mean(scores))}" if scores else NO_RESULTS,
		" / ".join(f"{t.value} {tiers.get(t, 0)}" for t in PerformanceTier) if scores else None,
		ASK_FOR_SUGGESTIONS,
	)


def _school_summary(assessments: Sequence[Assessment], results: Sequence[AssessmentResult]) -> str:
	if not results:
		return _lines(f"Overall average: {percent(0)}", NO_RESULTS, ASK_FOR_SUGGESTIONS)
	best, worst = best_and_worst(subject_stats(assessments, results))
	return _lines(
		f"Overall average: {percent(mean(r.score for r in results))}",
		f"Best subject: {best.subject} ({percent(best.average)})" if best else None,
		f"Needs attention: {worst.subject} ({percent(worst.average)})" if worst else None,
		ASK_FOR_SUGGESTIONS,
	)


def answer_locally(
	question: str,
	assessments: Sequence[Assessment],
	results: Sequence[AssessmentResult],
	roster: Sequence[User],
) -> str:
	"""Answer a data question from the snapshot; always returns some text."""
	student = _match_student(question, roster)
	if student is not None:
		return _student_summary(student, assessments, results)

	subject = _match_subject(question, assessments)
	if subject is not None:
		return _subject_summary(subject, assessments, results)

	m = _CLASS_OR_GRADE.search(question.lower())
	if m:
		kind, number = m.group(1), m.group(2)
		if kind == "class":
			members = [s for s in roster if _class_number(s) == number]
		else:
			members = [s for s in roster if _grade_of(s, assessments) == number]
		if members:
			return _class_summary(f"{kind.title()} {number}", members, results)

	return _school_summary(assessments, results)
