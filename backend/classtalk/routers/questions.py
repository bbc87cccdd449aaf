from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from ..errors import BadRequestError, ResponseParseError
from ..llm_client import ChatClient
from ..sessions import QuestionItem, clamp_count, is_usable_question
from ..settings import settings

router = APIRouter(prefix="/api", tags=["questions"])
logger = logging.getLogger("classtalk.questions")

BEGINNER_LEVELS = {"PRE-A1", "A1", "A2"}


class GenerateQuestionsRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	topic: str = ""
	level: str = "A2"
	count: Optional[int] = None
	teacher_instruction: Optional[str] = Field(default=None, alias="teacherInstruction")
	avoid: Optional[Union[str, List[str]]] = None
	rule_pattern: Optional[str] = Field(default=None, alias="rulePattern")
	rule_items: Optional[Union[str, List[str]]] = Field(default=None, alias="ruleItems")


def _split_list(value: Optional[Union[str, List[str]]], sep: str = r"[,\n]") -> List[str]:
	if not value:
		return []
	if isinstance(value, str):
		value = re.split(sep, value)
	return [str(v).strip() for v in value if str(v).strip()]


def is_beginner_level(level: str) -> bool:
	label = (level or "").strip().upper()
	if label in BEGINNER_LEVELS:
		return True
	return "BEGINNER" in label or "ELEMENTARY" in label


def _hint_policy(level: str) -> str:
	if is_beginner_level(level):
		lang = settings.hint_language
		return (
			"Hint format (exactly three lines separated by newlines):\n"
			f"line 1: a natural {lang} translation of the question\n"
			"line 2: a very simple English definition of the hardest word in the question\n"
			f"line 3: a {lang} translation of that definition\n"
			"Keep the English very simple."
		)
	return (
		"Hint format: one English sentence paraphrasing the question in simpler words, "
		"followed by one or two short related follow-up questions the student could also talk about."
	)


def build_generation_prompt(
	topic: str,
	level: str,
	count: int,
	*,
	teacher_instruction: Optional[str] = None,
	avoid: Optional[List[str]] = None,
	rule_pattern: Optional[str] = None,
	rule_items: Optional[List[str]] = None,
) -> str:
	lines = [
		"You are an English teacher.",
		f"Generate {count} discussion questions for ESL students.",
		"",
		f"Topic: {topic}",
		f"Level: {level}",
		"",
		"Every question must be a single complete question of at least two words ending with '?'.",
		"Use vocabulary and grammar appropriate for the level.",
		_hint_policy(level),
		"grammarTag: a short label for the main grammar point the question practises (e.g. 'past simple', 'present perfect').",
	]
	if rule_pattern:
		lines.append("")
		lines.append(f"Every question must follow this fill-in-the-blank pattern: {rule_pattern}")
		if rule_items:
			lines.append(
				"Fill the blank with these items, one per question, cycling through them in order: "
				+ ", ".join(rule_items)
			)
	if teacher_instruction:
		lines.append("")
		lines.append(f"Additional instruction from the teacher: {teacher_instruction}")
	if avoid:
		lines.append("")
		lines.append("Do not repeat or closely imitate these questions or themes:")
		lines.extend(f"- {a}" for a in avoid)
	lines.extend([
		"",
		"Return JSON only in this format:",
		'{"items": [{"text": "...", "hint": "...", "grammarTag": "..."}]}',
	])
	return "\n".join(lines)


def _extract_json_object(text: str) -> Dict[str, Any]:
	try:
		return json.loads(text)
	except Exception:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except Exception:
			pass
	first = text.find("{")
	last = text.rfind("}")
	if first != -1 and last != -1 and last > first:
		try:
			return json.loads(text[first : last + 1])
		except Exception:
			pass
	raise ResponseParseError("AI returned invalid JSON", raw=text)


def normalize_items(data: Any) -> List[QuestionItem]:
	if isinstance(data, dict):
		raw_items = data.get("items") or data.get("questions") or []
	elif isinstance(data, list):
		raw_items = data
	else:
		raw_items = []
	items: List[QuestionItem] = []
	for entry in raw_items if isinstance(raw_items, list) else []:
		if isinstance(entry, str):
			entry = {"text": entry}
		if not isinstance(entry, dict):
			continue
		items.append(
			QuestionItem(
				text=entry.get("text") or entry.get("question") or "",
				hint=entry.get("hint") or entry.get("followUp"),
				grammar_tag=entry.get("grammarTag") or entry.get("grammar_tag"),
			)
		)
	return items


def select_questions(items: List[QuestionItem], count: int) -> List[QuestionItem]:
	return [it for it in items if is_usable_question(it.text)][:count]


@router.post("/generate-questions")
async def generate_questions(req: GenerateQuestionsRequest):
	topic = (req.topic or "").strip()
	if not topic:
		raise BadRequestError("Missing topic")
	level = (req.level or "").strip() or "A2"
	count = clamp_count(req.count)
	prompt = build_generation_prompt(
		topic,
		level,
		count,
		teacher_instruction=(req.teacher_instruction or "").strip() or None,
		avoid=_split_list(req.avoid, sep=r"\n"),  # whole questions may contain commas
		rule_pattern=(req.rule_pattern or "").strip() or None,
		rule_items=_split_list(req.rule_items),
	)
	client = ChatClient()
	try:
		raw = await client.generate(prompt)
	finally:
		await client.aclose()
	data = _extract_json_object(raw)
	candidates = normalize_items(data)
	items = select_questions(candidates, count)
	logger.info(
		"Generated questions topic=%r level=%s requested=%d returned=%d kept=%d",
		topic, level, count, len(candidates), len(items),
	)
	if not items:
		raise ResponseParseError("No valid questions returned", raw=raw)
	return {"ok": True, "items": [it.model_dump(by_alias=True) for it in items]}
