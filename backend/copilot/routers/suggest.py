from __future__ import annotations
import logging
from typing import Any, AsyncIterator, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, StrictStr

from ..errors import CopilotError
from ..openai_client import OpenAIClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["copilot"])


class SuggestRequest(BaseModel):
	question: StrictStr
	summary: Dict[str, Any]


class SuggestResponse(BaseModel):
	suggestions: str


async def get_client() -> AsyncIterator[OpenAIClient]:
	client = OpenAIClient()
	try:
		yield client
	finally:
		await client.aclose()


@router.post("/copilot-suggest", response_model=SuggestResponse)
async def copilot_suggest(req: SuggestRequest, client: OpenAIClient = Depends(get_client)):
	try:
		text = await client.generate(req.question, req.summary)
		return SuggestResponse(suggestions=text)
	except CopilotError:
		raise
	except Exception as e:
		logger.exception("copilot-suggest failed")
		raise HTTPException(status_code=500, detail=str(e) or "Unknown error")
