import pytest

from classtalk.hints import spoken_hint


def test_three_line_hint_speaks_english_definition():
	hint = "旅行は好きですか？\ntravel: to go to another place\n旅行：別の場所へ行くこと"
	assert spoken_hint(hint) == "travel: to go to another place"


def test_three_line_hint_ignores_blank_lines():
	hint = "\n日本語\n\n  English line  \n日本語\n"
	assert spoken_hint(hint) == "English line"


def test_legacy_slash_hint_speaks_first_segment():
	assert spoken_hint("Talk about a trip / 旅行について話す") == "Talk about a trip"


@pytest.mark.parametrize("hint", [None, "", "   \n  "])
def test_empty_hint(hint):
	assert spoken_hint(hint) is None


def test_plain_hint_is_spoken_as_is():
	assert spoken_hint("Think about your last holiday.") == "Think about your last holiday."


def test_two_line_hint_speaks_first_line():
	assert spoken_hint("Say where you went.\nWho did you go with?") == "Say where you went."
