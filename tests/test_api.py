import httpx
import pytest
from fastapi.testclient import TestClient

from copilot.main import app
from copilot.orchestrator import GREETING, Conversation, Copilot
from copilot.routers import copilot as copilot_routes
from copilot.routers import suggest


@pytest.fixture
def upstream(make_client):
	"""Point every generation call at a swappable mock handler."""
	state = {"handler": lambda request: httpx.Response(200, json={"output_text": "Plan: re-test on Friday."}), "api_key": "sk-test"}

	def factory():
		return make_client(lambda request: state["handler"](request), api_key=state["api_key"])

	async def _client():
		client = factory()
		try:
			yield client
		finally:
			await client.aclose()

	conversation = Conversation(Copilot(client_factory=factory))
	app.dependency_overrides[suggest.get_client] = _client
	app.dependency_overrides[copilot_routes.get_conversation] = lambda: conversation
	yield state
	app.dependency_overrides.clear()


@pytest.fixture
def client(upstream):
	with TestClient(app) as c:
		yield c


def test_health_and_info(client):
	assert client.get("/health").json() == {"status": "ok"}
	assert "openai_configured" in client.get("/info").json()


def test_suggest_success(client):
	res = client.post("/api/copilot-suggest", json={"question": "What should we do?", "summary": {"overview": "x"}})
	assert res.status_code == 200
	assert res.json() == {"suggestions": "Plan: re-test on Friday."}


@pytest.mark.parametrize(
	"payload",
	[
		{"summary": {"overview": "x"}},
		{"question": 42, "summary": {}},
		{"question": "ok"},
		{"question": "ok", "summary": "not an object"},
	],
)
def test_suggest_rejects_bad_payloads(client, payload):
	res = client.post("/api/copilot-suggest", json=payload)
	assert res.status_code == 400
	assert res.json() == {"error": "Invalid payload"}


def test_suggest_rejects_wrong_method(client):
	res = client.get("/api/copilot-suggest")
	assert res.status_code == 405
	assert "error" in res.json()


def test_suggest_missing_credential(client, upstream):
	upstream["api_key"] = ""
	res = client.post("/api/copilot-suggest", json={"question": "q", "summary": {}})
	assert res.status_code == 500
	assert res.json() == {"error": "Missing OPENAI_API_KEY"}


@pytest.mark.parametrize(
	"status,fragment",
	[(401, "credential"), (429, "quota"), (500, "server exploded"), (418, "server exploded")],
)
def test_suggest_reflects_upstream_status(client, upstream, status, fragment):
	upstream["handler"] = lambda request: httpx.Response(status, json={"error": {"message": "server exploded"}})
	res = client.post("/api/copilot-suggest", json={"question": "q", "summary": {}})
	assert res.status_code == status
	assert fragment in res.json()["error"]


def test_ask_local_and_generated(client):
	local = client.post("/copilot/ask", json={"question": "Math subject overview"}).json()
	assert local["source"] == "local"
	assert "Subject: Math" in local["text"]

	generated = client.post("/copilot/ask", json={"question": "How can I improve Grade 5 science?"}).json()
	assert generated == {"source": "generated", "text": "Plan: re-test on Friday."}

	forced = client.post("/copilot/ask", json={"question": "Math subject overview", "force_generate": True}).json()
	assert forced["source"] == "generated"


def test_ask_empty_question_leaves_transcript_alone(client):
	assert client.post("/copilot/ask", json={"question": "  "}).json() == {"source": None, "text": ""}
	entries = client.get("/copilot/transcript").json()["entries"]
	assert entries == [{"speaker": "assistant", "text": GREETING}]


def test_ask_generation_failure_is_not_an_http_error(client, upstream):
	upstream["handler"] = lambda request: httpx.Response(429, json={})
	res = client.post("/copilot/ask", json={"question": "hi"})
	assert res.status_code == 200
	assert res.json()["text"].startswith("Sorry, I could not answer that.")


def test_transcript_action_plan_and_reset(client):
	client.post("/copilot/ask", json={"question": "Math subject overview"})
	client.post("/copilot/action-plan")
	entries = client.get("/copilot/transcript").json()["entries"]
	assert [e["speaker"] for e in entries] == ["assistant", "user", "assistant", "assistant"]
	assert entries[-1]["text"] == "Suggestions:\nPlan: re-test on Friday."

	reset = client.post("/copilot/reset").json()["entries"]
	assert reset == [{"speaker": "assistant", "text": GREETING}]


def test_activities(client):
	res = client.post("/copilot/activities", json={"assessment_id": "assessment-1"})
	assert res.status_code == 200
	body = res.json()
	assert body["mastered"].startswith("Science - Chapter 1 - Mastered group (Zayed Al Maktoum, Rashid Al Falahi)")
	assert "Avg: 90%" in body["mastered"]

	missing = client.post("/copilot/activities", json={"assessment_id": "nope"})
	assert missing.status_code == 404
	assert missing.json() == {"error": "assessment not found"}


def test_cors_allow_list_drops_wildcard(monkeypatch):
	from copilot import main

	monkeypatch.setattr(main.settings, "cors_origins", "https://school.example, *, http://localhost:5173")
	assert main._allowed_origins() == ["https://school.example", "http://localhost:5173"]


def test_cors_reflects_only_listed_origins(client):
	from copilot import main

	allowed = main._allowed_origins()
	res = client.get("/health", headers={"Origin": "https://evil.example"})
	assert res.headers.get("access-control-allow-origin") in (None, *allowed)
	assert res.headers.get("access-control-allow-origin") != "*"


def test_suggest_never_answers_with_a_redirect(client, upstream):
	upstream["handler"] = lambda request: httpx.Response(301, headers={"location": "https://elsewhere.test/"})
	res = client.post("/api/copilot-suggest", json={"question": "q", "summary": {}})
	assert res.status_code == 502
	assert "error" in res.json()
