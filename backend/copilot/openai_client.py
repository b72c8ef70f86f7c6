from __future__ import annotations
import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import httpx

from .errors import ConfigurationError, ParseError, UpstreamError
from .settings import settings

logger = logging.getLogger(__name__)

NO_SUGGESTIONS = "No suggestions available right now."

SYSTEM_PROMPT = " ".join([
	"You are Smart Assessment's improvement copilot for a school principal.",
	"Use the provided metrics ONLY (do not invent data).",
	"Return clear, actionable suggestions grouped by Short-term (this week), Medium-term (this term), and Long-term (this year).",
	"Where possible, include measurable KPIs and small implementation checklists.",
	"Tone: helpful, decisive, professional. Bullet points are welcome. Keep it under 250 words.",
])

_STATUS_MESSAGES: Dict[int, str] = {
	401: "credential rejected, check configuration",
	429: "quota or rate limit reached",
}

Summary = Union[str, Mapping[str, Any]]


def build_user_message(question: str, summary: Summary) -> str:
	metrics = summary if isinstance(summary, str) else json.dumps(summary, indent=2, ensure_ascii=False)
	return f"QUESTION: {question}\n\nMETRICS JSON:\n{metrics}"


def _decode_body(response: httpx.Response) -> Any:
	"""JSON body when the server says it is JSON and it parses; otherwise the raw text."""
	content_type = response.headers.get("content-type", "")
	text = response.text
	if "json" not in content_type.lower():
		return text
	try:
		return json.loads(text or "{}")
	except ValueError:
		return text


def _error_message(body: Any) -> str:
	if isinstance(body, dict):
		err = body.get("error")
		if isinstance(err, dict) and isinstance(err.get("message"), str) and err["message"].strip():
			return err["message"].strip()
		if isinstance(err, str) and err.strip():
			return err.strip()
		if isinstance(body.get("message"), str) and body["message"].strip():
			return body["message"].strip()
		return "upstream error"
	if isinstance(body, str) and body.strip():
		return body.strip()
	return "upstream error"


# Response envelopes seen from the upstream API, newest first
def _from_output_text(data: Dict[str, Any]) -> Any:
	return data["output_text"]


def _from_output_items(data: Dict[str, Any]) -> Any:
	return data["output"][0]["content"][0]["text"]


def _from_chat_choices(data: Dict[str, Any]) -> Any:
	return data["choices"][0]["message"]["content"]


EXTRACTORS: Tuple[Tuple[str, Callable[[Dict[str, Any]], Any]], ...] = (
	("output_text", _from_output_text),
	("output", _from_output_items),
	("choices", _from_chat_choices),
)


def extract_text(body: Any) -> str:
	if not isinstance(body, dict):
		raise ParseError("response body is not a JSON object")
	for name, extractor in EXTRACTORS:
		try:
			value = extractor(body)
		except (KeyError, IndexError, TypeError):
			continue
		if isinstance(value, str) and value.strip():
			logger.debug("read generated text from %r envelope", name)
			return value.strip()
	raise ParseError("no known response shape matched")


class OpenAIClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.api_key = api_key if api_key is not None else settings.openai_api_key
		self.model = model or settings.openai_model
		self.base_url = base_url or settings.openai_base_url
		self.temperature = settings.openai_temperature
		self.timeout = timeout if timeout is not None else settings.timeout_seconds
		self._client = http_client or httpx.AsyncClient(timeout=self.timeout)

	@property
	def configured(self) -> bool:
		return bool(self.api_key)

	def _payload(self, question: str, summary: Summary) -> Dict[str, Any]:
		messages: List[Dict[str, str]] = [
			{"role": "system", "content": SYSTEM_PROMPT},
			{"role": "user", "content": build_user_message(question, summary)},
		]
		return {"model": self.model, "temperature": self.temperature, "messages": messages}

	async def generate(self, question: str, summary: Summary) -> str:
		if not self.api_key:
			raise ConfigurationError("Missing OPENAI_API_KEY")
		headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
		try:
			r = await self._client.post(self.base_url, headers=headers, json=self._payload(question, summary))
		except httpx.TimeoutException as err:
			logger.warning("generation request timed out after %ss", self.timeout)
			raise UpstreamError("request timed out", status_code=504) from err
		except httpx.RequestError as err:
			logger.warning("generation request failed: %s", err.__class__.__name__)
			raise UpstreamError(f"could not reach the suggestion service ({err.__class__.__name__})", status_code=502) from err

		body = _decode_body(r)
		if not r.is_success:
			message = _STATUS_MESSAGES.get(r.status_code) or _error_message(body)
			logger.warning("generation upstream returned HTTP %s", r.status_code)
			# Redirects are not followed; never hand a 3xx without Location back to callers
			raise UpstreamError(message, status_code=r.status_code if r.status_code >= 400 else 502)
		if isinstance(body, str):
			# 2xx without a JSON body is still a failed call
			raise UpstreamError(body.strip() or "upstream error", status_code=502)
		try:
			return extract_text(body)
		except ParseError as err:
			logger.info("generation response unreadable (%s); using fallback text", err.message)
			return NO_SUGGESTIONS

	async def aclose(self) -> None:
		await self._client.aclose()
