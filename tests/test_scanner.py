"""
Unit tests for array location and truncation salvage
"""
import json

from app.services.extraction.scanner import locate_array, read_string, salvage_array


class TestReadString:
    def test_double_quoted(self):
        """End index is just past the closing quote"""
        assert read_string('"abc" tail', 0) == (5, True)

    def test_escaped_quote(self):
        """Backslash-escaped quotes do not close the string"""
        text = r'"a \" b" x'
        assert read_string(text, 0) == (8, True)

    def test_unterminated(self):
        """A string running off the end is reported open"""
        assert read_string('"abc', 0) == (4, False)

    def test_single_quote_apostrophe(self):
        """An apostrophe followed by a letter does not close a single-quoted string"""
        text = "'What's up?', 'x'"
        end, closed = read_string(text, 0)
        assert closed
        assert text[:end] == "'What's up?'"


class TestLocateArray:
    def test_not_found(self):
        """No opening bracket at all"""
        assert locate_array("I cannot help with that.") is None

    def test_surrounding_prose(self):
        """Prose before and after the array is skipped"""
        text = 'Sure! [{"question":"Q","answer":"A"}] Hope that helps.'
        span = locate_array(text)
        assert not span.truncated
        assert span.slice(text) == '[{"question":"Q","answer":"A"}]'

    def test_nested_arrays(self):
        """Depth counting finds the outer close, not the first ]"""
        text = "x [1, [2, 3], 4] y [5]"
        assert locate_array(text).slice(text) == "[1, [2, 3], 4]"

    def test_brackets_inside_strings(self):
        """Delimiters inside string literals do not move the depth count"""
        payload = json.dumps([
            {"question": "What does ] do?", "answer": "It closes [ arrays } and { objects"},
        ])
        text = f"Result: {payload} (end)"
        assert locate_array(text).slice(text) == payload

    def test_first_array_wins(self):
        """The first top-level array is taken, even if a later one exists"""
        text = "[1] and then [2]"
        assert locate_array(text).slice(text) == "[1]"

    def test_truncated(self):
        """No zero crossing marks the span truncated"""
        text = 'ok [{"question":"Q1"}, {"question":"Q2'
        span = locate_array(text)
        assert span.truncated
        assert span.start == 3
        assert span.end == len(text)


class TestSalvageArray:
    def test_drops_partial_record(self):
        """Only the complete leading records survive"""
        text = '[{"question":"Q1","answer":"A1"},{"question":"Q2","ans'
        assert salvage_array(text, 0) == '[{"question":"Q1","answer":"A1"}]'

    def test_trailing_separator_stripped(self):
        """A dangling comma after the last full record is removed"""
        text = '[{"a":1},\n  {"b":'
        assert salvage_array(text, 0) == '[{"a":1}]'

    def test_nested_objects_kept_whole(self):
        """A nested object closing does not count as a record end"""
        text = '[{"q":"x","meta":{"k":1}},{"q":"y","meta":{"k"'
        assert salvage_array(text, 0) == '[{"q":"x","meta":{"k":1}}]'

    def test_brace_inside_cut_string(self):
        """A } inside the truncated string is ignored"""
        text = '[{"q":"a"},{"q":"has } brace'
        assert salvage_array(text, 0) == '[{"q":"a"}]'

    def test_offset_start(self):
        """Salvage starts from the given array start"""
        text = 'noise {"x":1} [{"q":"a"},{"q'
        assert salvage_array(text, text.index("[")) == '[{"q":"a"}]'

    def test_no_complete_record(self):
        """Nothing to keep gives None rather than an exception"""
        assert salvage_array('[{"question":"Q1"', 0) is None
        assert salvage_array("[", 0) is None
