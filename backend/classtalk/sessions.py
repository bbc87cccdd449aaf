"""Class sessions: the record a teacher shares with students by class code.

A session is stored as one JSON blob (camelCase keys) under
``session:<classId>``. Updates are read-modify-write followed by a single SET,
so concurrent writers race and the last one wins.
"""

from __future__ import annotations
import logging
import secrets
import string
import time
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import BadRequestError, NotFoundError
from .kv import KeyValueStore

logger = logging.getLogger("classtalk.sessions")

CLASS_CODE_ALPHABET = string.ascii_uppercase + string.digits
CLASS_CODE_GROUP = 4
MIN_COUNT = 1
MAX_COUNT = 10
DEFAULT_COUNT = 5


class QuestionItem(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")

	text: str = ""
	hint: Optional[str] = None
	grammar_tag: Optional[str] = Field(default=None, alias="grammarTag")

	@field_validator("text", mode="before")
	@classmethod
	def _text_str(cls, v):
		return "" if v is None else str(v).strip()

	@field_validator("hint", "grammar_tag", mode="before")
	@classmethod
	def _optional_str(cls, v):
		if v is None:
			return None
		v = str(v).strip()
		return v or None


class Session(BaseModel):
	model_config = ConfigDict(populate_by_name=True, extra="ignore")

	class_id: str = Field(alias="classId")
	topic: str
	class_size: int = Field(default=0, alias="classSize")
	count: int = DEFAULT_COUNT
	created_at: int = Field(alias="createdAt")  # epoch milliseconds
	students_joined: int = Field(default=0, alias="studentsJoined")
	questions: List[QuestionItem] = Field(default_factory=list)

	def to_public(self) -> dict:
		return self.model_dump(by_alias=True)


def is_usable_question(text: str) -> bool:
	"""Non-empty, ends with "?" and has at least two words."""
	text = (text or "").strip()
	return bool(text) and text.endswith("?") and len(text.split()) >= 2


def clamp_count(value, default: int = DEFAULT_COUNT) -> int:
	"""Clamp to 1..10; a missing, zero or unparseable count means ``default``."""
	try:
		n = int(value)
	except (TypeError, ValueError):
		n = default
	if n == 0:
		n = default
	return max(MIN_COUNT, min(MAX_COUNT, n))


def generate_class_code() -> str:
	def part() -> str:
		return "".join(secrets.choice(CLASS_CODE_ALPHABET) for _ in range(CLASS_CODE_GROUP))
	return f"{part()}-{part()}"


def normalize_class_id(class_id: Optional[str]) -> str:
	return (class_id or "").strip().upper()


def session_key(class_id: str) -> str:
	return f"session:{class_id}"


async def create_session(store: KeyValueStore, topic: str, class_size: int, count: int) -> Session:
	session = Session(
		class_id=generate_class_code(),
		topic=(topic or "").strip() or "general",
		class_size=max(0, int(class_size or 0)),
		count=clamp_count(count),
		created_at=int(time.time() * 1000),
	)
	await store.set(session_key(session.class_id), session.model_dump_json(by_alias=True))
	logger.info("Created session %s (topic=%r, class_size=%d, count=%d)", session.class_id, session.topic, session.class_size, session.count)
	return session


async def load_session(store: KeyValueStore, class_id: str) -> Session:
	class_id = normalize_class_id(class_id)
	if not class_id:
		raise BadRequestError("Missing classId")
	raw = await store.get(session_key(class_id))
	if not raw:
		raise NotFoundError("Not found")
	return Session.model_validate_json(raw)


async def update_session(
	store: KeyValueStore,
	class_id: str,
	*,
	questions: Optional[List[QuestionItem]] = None,
	increment_joined: bool = False,
) -> Session:
	session = await load_session(store, class_id)
	if questions is not None:
		session.questions = list(questions)
	if increment_joined:
		session.students_joined += 1
	await store.set(session_key(session.class_id), session.model_dump_json(by_alias=True))
	logger.info(
		"Updated session %s (questions=%d, students_joined=%d)",
		session.class_id,
		len(session.questions),
		session.students_joined,
	)
	return session


def student_index(student_number: int, question_count: int) -> int:
	"""Index of the question for 1-based ``student_number``, wrapping around."""
	if question_count <= 0:
		raise NotFoundError("Session has no questions")
	if student_number < 1:
		raise BadRequestError("Student number must be 1 or greater")
	return (student_number - 1) % question_count


def pick_question(session: Session, student_number: int) -> Tuple[int, QuestionItem]:
	idx = student_index(student_number, len(session.questions))
	return idx, session.questions[idx]
