"""Decide whether a copilot question is a data lookup or needs generated advice.

The keyword sets are plain data (``ROUTING_RULES``) so they can be tuned and
tested without touching the control flow in :class:`QuestionRouter`.
"""
from __future__ import annotations
import logging
import re
from enum import Enum
from typing import FrozenSet, Pattern, Sequence, Tuple

logger = logging.getLogger(__name__)


class Route(str, Enum):
	LOCAL = "local"
	GENERATE = "generate"


class Intent(str, Enum):
	ADVICE = "advice"
	DATA = "data"


GREETINGS: FrozenSet[str] = frozenset({"hi", "hello", "hey", "hiya", "greetings", "salam", "salaam", "marhaba"})

# Utterances this short are delegated so the reply can be conversational
MAX_SHORT_TOKENS = 2

ROUTING_RULES: Tuple[Tuple[Pattern[str], Intent], ...] = (
	(re.compile(
		r"\b(how|what|which|why|suggest\w*|recommend\w*|plan\w*|strateg\w*|intervention\w*|tips?"
		r"|actions?|improv\w*|increas\w*|boost\w*|reduc\w*|fix\w*|help\w*|write|draft|explain\w*|ideas?)\b"
	), Intent.ADVICE),
	(re.compile(r"\?\s*$"), Intent.ADVICE),
	# "grade N" and bare subject names are deliberately not data keywords; see DESIGN.md
	(re.compile(
		r"\b(overall|averages?|attendance|best subject|weak\w*|top|bottom|rank\w*|sections?"
		r"|teachers?|subjects?|scores?|results?|summary)\b"
	), Intent.DATA),
	(re.compile(r"\bclass[\s-]*\d+"), Intent.DATA),
	(re.compile(r"\bhow\s+is\b|\bshow\b|\blist\b|\bwhat\s+is\s+(the\s+)?(average|score|summary)\b"), Intent.DATA),
)


class QuestionRouter:
	def __init__(
		self,
		rules: Sequence[Tuple[Pattern[str], Intent]] = ROUTING_RULES,
		greetings: FrozenSet[str] = GREETINGS,
	) -> None:
		self.rules = tuple(rules)
		self.greetings = greetings

	def intents(self, text: str) -> FrozenSet[Intent]:
		return frozenset(intent for pattern, intent in self.rules if pattern.search(text))

	def classify(self, question: str) -> Route:
		text = (question or "").strip().lower()
		if not text:
			return Route.LOCAL
		tokens = text.split()
		if tokens[0].strip(",.!?") in self.greetings or len(tokens) <= MAX_SHORT_TOKENS:
			return Route.GENERATE
		found = self.intents(text)
		# Data wins over advice: literal lookups must never be generated
		route = Route.GENERATE if Intent.ADVICE in found and Intent.DATA not in found else Route.LOCAL
		logger.debug("routed question (%d tokens, intents=%s) to %s", len(tokens), sorted(i.value for i in found), route.value)
		return route


default_router = QuestionRouter()


def classify(question: str) -> Route:
	return default_router.classify(question)
