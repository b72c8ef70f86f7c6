from __future__ import annotations
import logging
from typing import Callable, List, Optional

from .answerer import answer_locally
from .context import build_summary
from .errors import ConfigurationError, UpstreamError
from .models import Answer, Dataset, Entry, Source, Speaker
from .openai_client import OpenAIClient
from .routing import QuestionRouter, Route, default_router

logger = logging.getLogger(__name__)

GREETING = "Welcome — ask anything about students, teachers, classes, or subjects."
ACTION_PLAN_QUESTION = "Give an action plan based on this summary."
APOLOGY = "Sorry, I could not answer that."


class Copilot:
	"""Routes a question to the local answerer or to the generation client."""

	def __init__(
		self,
		router: QuestionRouter = default_router,
		client_factory: Callable[[], OpenAIClient] = OpenAIClient,
	) -> None:
		self.router = router
		self.client_factory = client_factory

	async def _generate(self, question: str, dataset: Dataset) -> Answer:
		summary = build_summary(dataset)
		client = self.client_factory()
		try:
			text = await client.generate(question, summary)
			return Answer(source=Source.GENERATED, text=text)
		except (UpstreamError, ConfigurationError) as err:
			logger.warning("generation failed: %s", err.message)
			return Answer(source=Source.GENERATED, text=f"{APOLOGY} {err.message}", failed=True)
		finally:
			await client.aclose()

	async def ask(self, question: str, dataset: Dataset, *, force_generate: bool = False) -> Optional[Answer]:
		q = (question or "").strip()
		if not q:
			return None
		if force_generate or self.router.classify(q) == Route.GENERATE:
			return await self._generate(q, dataset)
		text = answer_locally(q, dataset.assessments, dataset.results, dataset.students)
		return Answer(source=Source.LOCAL, text=text)


class Conversation:
	"""Session transcript: append-only, reset back to the greeting."""

	def __init__(self, copilot: Optional[Copilot] = None) -> None:
		self.copilot = copilot or Copilot()
		self.entries: List[Entry] = []
		self.reset()

	def reset(self) -> None:
		self.entries = [Entry(speaker=Speaker.ASSISTANT, text=GREETING)]

	def _reply(self, answer: Answer) -> Answer:
		text = answer.text
		if answer.source == Source.GENERATED and not answer.failed:
			text = f"Suggestions:\n{text}"
		self.entries.append(Entry(speaker=Speaker.ASSISTANT, text=text))
		return answer

	async def ask(self, question: str, dataset: Dataset, *, force_generate: bool = False) -> Optional[Answer]:
		q = (question or "").strip()
		if not q:
			return None
		self.entries.append(Entry(speaker=Speaker.USER, text=q))
		answer = await self.copilot.ask(q, dataset, force_generate=force_generate)
		return self._reply(answer)

	async def request_action_plan(self, dataset: Dataset) -> Answer:
		answer = await self.copilot.ask(ACTION_PLAN_QUESTION, dataset, force_generate=True)
		return self._reply(answer)
