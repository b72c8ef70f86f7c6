import httpx
import pytest

from copilot.data import DataStore
from copilot.models import Assessment, AssessmentResult, Dataset, Role, User
from copilot.openai_client import OpenAIClient


@pytest.fixture
def demo_dataset() -> Dataset:
	return DataStore.with_demo_data().snapshot()


@pytest.fixture
def make_dataset():
	"""Build a small dataset from ``{assessment_id: (subject, [scores])}``."""

	def _make(subjects, students=5, class_id="class-1", grade="5"):
		users = [
			User(user_id=f"s{i}", name=f"Student{i} Testname{i}", role=Role.STUDENT, class_id=class_id)
			for i in range(1, students + 1)
		]
		assessments = []
		results = []
		for aid, (subject, scores) in subjects.items():
			assessments.append(Assessment(
				assessment_id=aid, title="Chapter 1", subject=subject, grade=grade,
				teacher_id="t1", class_id=class_id,
			))
			for i, score in enumerate(scores, start=1):
				results.append(AssessmentResult(
					result_id=f"{aid}-{i}", assessment_id=aid, student_id=f"s{i}", score=score,
				))
		return Dataset(assessments=tuple(assessments), results=tuple(results), users=tuple(users))

	return _make


@pytest.fixture
def make_client():
	"""OpenAIClient whose HTTP calls are answered by ``handler(request) -> httpx.Response``."""

	def _make(handler, api_key="sk-test", **kwargs):
		http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
		return OpenAIClient(api_key=api_key, base_url="https://llm.test/v1/chat/completions", http_client=http_client, **kwargs)

	return _make
