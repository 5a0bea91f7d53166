import pytest

from fehkit.wrap import wrap_string


def test_zero_width_only_splits_lines():
    assert wrap_string("one two\nthree", 0, len) == ["one two", "three"]


def test_fitting_text_is_unchanged():
    assert wrap_string("short text", 100, len) == ["short text"]


def test_words_wrap_at_limit():
    assert wrap_string("aaa bbb ccc", 7, len) == ["aaa bbb", "ccc"]


def test_overlong_word_gets_own_line():
    assert wrap_string("abcdefghij xy", 5, len) == ["abcdefghij", "xy"]


def test_widened_limit_persists_for_later_lines():
    result = wrap_string("abcdefghij\naaaa aaaa", 5, len)
    assert result == ["abcdefghij", "aaaa aaaa"]


@pytest.mark.parametrize("width", [3, 5, 8, 12, 20])
def test_words_preserved_and_lines_within_limit(width):
    text = "the quick brown fox jumps over the lazy dog"
    result = wrap_string(text, width, len)
    assert " ".join(result).split() == text.split()
    assert all(len(line) <= width for line in result)


def test_empty_paragraph_kept():
    assert wrap_string("abc def\n\nghi", 3, len) == ["abc", "def", "", "ghi"]


def test_uses_measure_callable():
    def wide(s):
        return 2 * len(s)

    result = wrap_string("ab cd", 8, wide)
    assert result == ["ab", "cd"]