from __future__ import annotations
import re
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from .models import Dataset, PerformanceTier, tier_of

TIER_KEYS: Dict[PerformanceTier, str] = {
	PerformanceTier.MASTERED: "mastered",
	PerformanceTier.DEVELOPING: "developing",
	PerformanceTier.NEEDS_SUPPORT: "support",
}

_LABELS = {
	"mastered": "Mastered group",
	"developing": "Developing group",
	"support": "Needs Support group",
}

_TEMPLATES: Dict[str, Dict[str, List[str]]] = {
	"general": {
		"mastered": [
			"Choice board: pick 1 of a short video explainer, 3 challenge questions with answers, or a quick how-to guide.",
			"Peer coach: help a buddy from the Developing group for 10 minutes (use the worked example first).",
			"Exit ticket: 3 mixed problems to confirm understanding.",
		],
		"developing": [
			"Mini-lesson: model 2 worked examples, then do 5 guided questions (I do, we do, you do).",
			"Use hints/sentence starters; check after each 2 questions.",
			"Short quiz (5 items) tomorrow to check progress.",
		],
		"support": [
			"Re-teach in 3 small steps with visuals/manipulatives.",
			"Do 4 scaffolded problems (very small jumps).",
			"Parent note: 1 tip for practice at home (5 mins).",
		],
	},
	"math": {
		"mastered": [
			"Create a real-life word problem for this skill and solve it.",
			"Teach-back: record a 60-sec demo showing two methods.",
		],
		"developing": [
			"Fluency: 5 practice problems with worked example on top.",
			"Error-fix: review 2 common mistakes and fix them.",
		],
		"support": [
			"Concrete to pictorial to abstract: use blocks/shapes first, then pictures, then numbers.",
			"Do 3 very small-step problems with number lines or grids.",
		],
	},
	"science": {
		"mastered": [
			"Design a mini-investigation or demo showing the concept.",
			"Create a one-pager with a diagram and labels.",
		],
		"developing": [
			"Close-read a short text + diagram, then answer 4 guided questions.",
			"Do a table-fill activity (observe, record, explain).",
		],
		"support": [
			"Hands-on demo with teacher; fill a simple 'observe / because' frame.",
			"Match pictures to keywords, then 2 short questions.",
		],
	},
}

_CHAPTER = re.compile(r"chapter\s*(\d+)", re.IGNORECASE)


class TierGroup(BaseModel):
	student_names: List[str] = []
	scores: List[float] = []


class ActivitySuggestions(BaseModel):
	mastered: str
	developing: str
	support: str


def chapter_of(title: Optional[str]) -> str:
	m = _CHAPTER.search(title or "")
	return f"Chapter {m.group(1)}" if m else "this topic"


def subject_family(subject: str) -> str:
	s = (subject or "").lower()
	if "math" in s:
		return "math"
	if "science" in s:
		return "science"
	return "general"


def _group_average(scores: Sequence[float]) -> float:
	if not scores:
		return 0.0
	return round(sum(scores) / len(scores), 1)


def _bullets(items: Sequence[str]) -> str:
	return "\n".join(f"• {x}" for x in items)


def suggest_activities_for_groups(
	subject: str,
	assessment_title: Optional[str],
	groups: Dict[str, TierGroup],
) -> ActivitySuggestions:
	family = subject_family(subject)
	bank = _TEMPLATES[family]
	topic = chapter_of(assessment_title)

	def build(tier: str) -> str:
		group = groups.get(tier) or TierGroup()
		avg = _group_average(group.scores)
		if family == "general":
			lines = list(bank[tier][:3])
		else:
			lines = list(bank[tier][:2]) + [_TEMPLATES["general"][tier][0]]
		if tier != "mastered":
			if avg < 50:
				lines.append("Keep questions very short; check after each step.")
			elif avg >= 70:
				lines.append("End with a 3-item exit ticket.")
		elif avg >= 90:
			lines.append("Optional challenge: extend to next topic.")
		names = f" ({', '.join(group.student_names)})" if group.student_names else ""
		return f"{subject} - {topic} - {_LABELS[tier]}{names}\nAvg: {avg:g}%\n{_bullets(lines)}"

	return ActivitySuggestions(mastered=build("mastered"), developing=build("developing"), support=build("support"))


def group_results_by_tier(dataset: Dataset, assessment_id: str) -> Dict[str, TierGroup]:
	names = {u.user_id: u.name for u in dataset.users}
	groups: Dict[str, TierGroup] = {key: TierGroup() for key in TIER_KEYS.values()}
	for r in dataset.results:
		if r.assessment_id != assessment_id:
			continue
		group = groups[TIER_KEYS[tier_of(r.score)]]
		group.student_names.append(names.get(r.student_id, r.student_id))
		group.scores.append(r.score)
	return groups
