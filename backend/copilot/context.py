from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Assessment, AssessmentResult, Dataset, User

MAX_CONTEXT_CHARS = 500
LATEST_ASSESSMENTS = 3
# Per-item caps so one long title or a huge roster can't eat the whole budget
_MAX_TITLE_CHARS = 60
_MAX_GRADE_LABELS = 12

UNKNOWN_SUBJECT = "General"


def percent(value: Optional[float]) -> str:
	"""Render ``value`` as a whole percentage clamped to 0-100 (half rounds up)."""
	try:
		number = float(value if value is not None else 0)
	except (TypeError, ValueError):
		number = 0.0
	if math.isnan(number):
		number = 0.0
	number = max(0.0, min(100.0, number))
	return f"{int(math.floor(number + 0.5))}%"


def mean(values: Iterable[float]) -> float:
	items = [float(v) for v in values]
	return sum(items) / len(items) if items else 0.0


@dataclass(frozen=True)
class SubjectStat:
	subject: str
	average: float
	count: int


def subject_stats(assessments: Sequence[Assessment], results: Sequence[AssessmentResult]) -> List[SubjectStat]:
	"""Per-subject averages in order of first appearance; subjects without results are absent."""
	by_id = {a.assessment_id: a for a in assessments}
	sums: Dict[str, List[float]] = {}
	for r in results:
		a = by_id.get(r.assessment_id)
		subject = (a.subject if a and a.subject else UNKNOWN_SUBJECT)
		sums.setdefault(subject, []).append(float(r.score))
	return [SubjectStat(subject=s, average=mean(v), count=len(v)) for s, v in sums.items()]


def best_and_worst(stats: Sequence[SubjectStat]) -> Tuple[Optional[SubjectStat], Optional[SubjectStat]]:
	"""Best and weakest subject; ``worst`` is None when it would repeat ``best``."""
	ranked = sorted((s for s in stats if s.count > 0), key=lambda s: s.average, reverse=True)
	if not ranked:
		return None, None
	best, worst = ranked[0], ranked[-1]
	if worst.subject == best.subject or percent(worst.average) == percent(best.average):
		return best, None
	return best, worst


def latest_assessments(assessments: Sequence[Assessment], limit: int = LATEST_ASSESSMENTS) -> List[Assessment]:
	# Without created_at, ids are compared as strings: "assessment-10" sorts before "assessment-9".
	ordered = sorted(
		assessments,
		key=lambda a: (a.created_at is not None, a.created_at or 0.0, a.assessment_id),
		reverse=True,
	)
	return ordered[:limit]


def _clip(text: str, limit: int) -> str:
	return text if len(text) <= limit else text[: limit - 1].rstrip() + "…"


@dataclass(frozen=True)
class SchoolContext:
	overall_average: float
	results_count: int
	grades: Tuple[str, ...] = ()
	latest: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

	def render(self, limit: int = MAX_CONTEXT_CHARS) -> str:
		parts = [
			f"School average: {percent(self.overall_average)}",
			f"Results recorded: {self.results_count}",
		]
		if self.grades:
			shown = list(self.grades[:_MAX_GRADE_LABELS])
			if len(self.grades) > len(shown):
				shown.append(f"+{len(self.grades) - len(shown)} more")
			parts.append(f"Grades: {', '.join(shown)}")
		if self.latest:
			latest = "; ".join(f"{_clip(title, _MAX_TITLE_CHARS)} ({subject or 'Subject'})" for title, subject in self.latest)
			parts.append(f"Latest assessments: {latest}")
		return _clip(" | ".join(parts), limit)


def summarize_school(
	assessments: Sequence[Assessment],
	results: Sequence[AssessmentResult],
	roster: Sequence[User],
) -> SchoolContext:
	grades: List[str] = []
	for u in roster:
		if u.class_id and u.class_id not in grades:
			grades.append(u.class_id)
	return SchoolContext(
		overall_average=mean(r.score for r in results),
		results_count=len(results),
		grades=tuple(grades),
		latest=tuple((a.title, a.subject) for a in latest_assessments(assessments)),
	)


def build_context(
	assessments: Sequence[Assessment],
	results: Sequence[AssessmentResult],
	roster: Sequence[User],
) -> str:
	return summarize_school(assessments, results, roster).render()


def build_summary(dataset: Dataset) -> Dict[str, Any]:
	"""The ``summary`` object sent alongside a question to the suggestion endpoint."""
	return {
		"overview": build_context(dataset.assessments, dataset.results, dataset.students),
		"counts": {"assessments": len(dataset.assessments), "results": len(dataset.results)},
	}
