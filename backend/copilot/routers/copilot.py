from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..activities import ActivitySuggestions, group_results_by_tier, suggest_activities_for_groups
from ..data import store
from ..models import Dataset, Entry, Source
from ..orchestrator import Conversation

router = APIRouter(prefix="/copilot", tags=["copilot"])

# Single in-memory session, like the dashboard's chat panel
_conversation = Conversation()


def get_conversation() -> Conversation:
	return _conversation


def get_dataset() -> Dataset:
	return store.snapshot()


class AskRequest(BaseModel):
	question: str = ""
	force_generate: bool = False


class AskResponse(BaseModel):
	source: Optional[Source] = None
	text: str = ""


class TranscriptResponse(BaseModel):
	entries: List[Entry]


class ActivitiesRequest(BaseModel):
	assessment_id: str


@router.post("/ask", response_model=AskResponse)
async def ask(
	req: AskRequest,
	conversation: Conversation = Depends(get_conversation),
	dataset: Dataset = Depends(get_dataset),
):
	answer = await conversation.ask(req.question, dataset, force_generate=req.force_generate)
	if answer is None:
		# Empty question: nothing asked, nothing recorded
		return AskResponse()
	return AskResponse(source=answer.source, text=answer.text)


@router.post("/action-plan", response_model=AskResponse)
async def action_plan(
	conversation: Conversation = Depends(get_conversation),
	dataset: Dataset = Depends(get_dataset),
):
	answer = await conversation.request_action_plan(dataset)
	return AskResponse(source=answer.source, text=answer.text)


@router.get("/transcript", response_model=TranscriptResponse)
async def transcript(conversation: Conversation = Depends(get_conversation)):
	return TranscriptResponse(entries=list(conversation.entries))


@router.post("/reset", response_model=TranscriptResponse)
async def reset(conversation: Conversation = Depends(get_conversation)):
	conversation.reset()
	return TranscriptResponse(entries=list(conversation.entries))


@router.post("/activities", response_model=ActivitySuggestions)
async def activities(req: ActivitiesRequest, dataset: Dataset = Depends(get_dataset)):
	assessment = dataset.assessment_by_id().get(req.assessment_id)
	if assessment is None:
		raise HTTPException(status_code=404, detail="assessment not found")
	groups = group_results_by_tier(dataset, assessment.assessment_id)
	return suggest_activities_for_groups(assessment.subject, assessment.title, groups)
