from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from ..errors import NotFoundError
from ..hints import spoken_hint
from ..kv import KeyValueStore, get_store
from ..sessions import (
	DEFAULT_COUNT,
	QuestionItem,
	create_session,
	load_session,
	pick_question,
	update_session,
)

router = APIRouter(prefix="/api/session", tags=["session"])


class CreateSessionRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	topic: Optional[str] = None
	class_size: int = Field(default=0, ge=0, alias="classSize")
	count: int = DEFAULT_COUNT


class UpdateSessionRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	questions: Optional[List[QuestionItem]] = None
	increment_joined: bool = Field(default=False, alias="incrementJoined")


@router.post("")
async def create(req: CreateSessionRequest, store: KeyValueStore = Depends(get_store)):
	session = await create_session(store, req.topic or "general", req.class_size, req.count)
	return {"ok": True, "classId": session.class_id, "session": session.to_public()}


@router.get("")
async def read(classId: Optional[str] = Query(default=None), store: KeyValueStore = Depends(get_store)):
	session = await load_session(store, classId or "")
	return {"ok": True, "session": session.to_public()}


@router.put("")
async def update(
	req: UpdateSessionRequest,
	classId: Optional[str] = Query(default=None),
	store: KeyValueStore = Depends(get_store),
):
	session = await update_session(
		store,
		classId or "",
		questions=req.questions,
		increment_joined=req.increment_joined,
	)
	return {"ok": True, "session": session.to_public()}


@router.get("/student")
async def student_question(
	classId: Optional[str] = Query(default=None),
	number: int = Query(...),
	store: KeyValueStore = Depends(get_store),
):
	session = await load_session(store, classId or "")
	if not session.questions:
		raise NotFoundError("Session not found or has no questions")
	index, item = pick_question(session, number)
	return {
		"ok": True,
		"classId": session.class_id,
		"studentNumber": number,
		"index": index,
		"item": item.model_dump(by_alias=True),
		"hintSpeech": spoken_hint(item.hint),
	}
