"""
Unit tests for near-JSON repair
"""
import json

import pytest

from app.services.extraction.repair import normalize_single_quotes, remove_trailing_commas, repair


class TestTrailingCommas:
    def test_before_closers(self):
        """Commas directly before ] and } are removed"""
        assert remove_trailing_commas('[{"a":1,},]') == '[{"a":1}]'

    def test_whitespace_between(self):
        """Whitespace between the comma and closer is kept"""
        assert remove_trailing_commas("[1, 2,\n]") == "[1, 2\n]"

    def test_comma_runs(self):
        """Repeated separators before a closer all go"""
        assert remove_trailing_commas("[1,, ,]") == "[1 ]"

    def test_string_contents_untouched(self):
        """A comma-bracket sequence inside a string is not a trailing comma"""
        text = '[{"answer":"a, ]"}]'
        assert remove_trailing_commas(text) == text

    def test_inner_separators_kept(self):
        """Ordinary separators stay"""
        text = '[{"a":1},{"b":2}]'
        assert remove_trailing_commas(text) == text


class TestSingleQuotes:
    def test_keys_and_values(self):
        """Single-quoted field keys and values become JSON strings"""
        text = "[{'question':'Q1','answer':'A1','difficulty':'medium'}]"
        assert normalize_single_quotes(text) == '[{"question":"Q1","answer":"A1","difficulty":"medium"}]'

    def test_apostrophe_in_single_quoted_value(self):
        """An apostrophe inside a value does not end it"""
        text = "[{'question': 'What's up?', 'answer': 'Nothing'}]"
        assert json.loads(normalize_single_quotes(text)) == [{"question": "What's up?", "answer": "Nothing"}]

    def test_double_quote_inside_value_escaped(self):
        """Embedded double quotes are escaped in the converted value"""
        text = "[{'question': 'Say \"hi\"', 'answer': 'ok'}]"
        assert json.loads(normalize_single_quotes(text))[0]["question"] == 'Say "hi"'

    def test_no_trigger_no_change(self):
        """Without single-quoted field names nothing is touched"""
        text = """[{"question":"Q","answer":"It's 'quoted'"}]"""
        assert normalize_single_quotes(text) == text

    def test_double_quoted_text_never_touched(self):
        """Apostrophes inside double-quoted strings survive even when triggered"""
        text = """[{"question":"What is a 'question'?","answer":"A: 'x'"}]"""
        assert normalize_single_quotes(text) == text

    def test_unknown_single_quoted_key_left_alone(self):
        """Only the known field names are converted as keys"""
        text = "[{'question':'Q','extra' : 1}]"
        assert normalize_single_quotes(text) == """[{"question":"Q",'extra' : 1}]"""


class TestRepair:
    def test_combined(self):
        """Single quotes and trailing commas together decode"""
        text = "[{'question':'Q1','answer':'A1',},]"
        assert json.loads(repair(text)) == [{"question": "Q1", "answer": "A1"}]

    @pytest.mark.parametrize("text", [
        '[{"question":"Q1","answer":"A1","difficulty":"easy"}]',
        "[{'question':'Q1','answer':'A1',},]",
        "[{'question': 'What's up?', 'answer': 'it\\'s \"fine\"'}]",
        "[1,, ,]",
        "[{'question':'cut off",
        """[{"question":"a 'question'","answer":"x, ]",}]""",
    ])
    def test_idempotent(self, text):
        """Repairing repaired text changes nothing"""
        once = repair(text)
        assert repair(once) == once
