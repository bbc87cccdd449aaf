from __future__ import annotations
from typing import Optional


def spoken_hint(hint: Optional[str]) -> Optional[str]:
	"""English part of a hint, the text the student page reads aloud.

	Beginner hints are three lines (translation / definition / translation),
	so the definition on line two is spoken. Older hints were a single
	"EN / JP" line; the part before the slash is spoken.
	"""
	lines = [ln.strip() for ln in (hint or "").splitlines() if ln.strip()]
	if not lines:
		return None
	if len(lines) >= 3:
		return lines[1]
	if len(lines) == 1 and "/" in lines[0]:
		head = lines[0].split("/", 1)[0].strip()
		return head or None
	return lines[0]
