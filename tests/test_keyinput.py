import os
import termios

import pytest

from fehkit.keyinput import StdinDecoder, raw_terminal
from fehkit.keys import KEYSYMS, Modifier


def test_plain_letter():
    assert StdinDecoder().feed("a") == (0, ord("a"))


def test_space_return_backspace():
    decoder = StdinDecoder()
    assert decoder.feed(" ") == (0, KEYSYMS["space"])
    assert decoder.feed("\n") == (0, KEYSYMS["Return"])
    assert decoder.feed("\x7f") == (0, KEYSYMS["BackSpace"])
    assert decoder.feed("\b") == (0, KEYSYMS["BackSpace"])


@pytest.mark.parametrize("letter, name", [("A", "Up"), ("B", "Down"), ("C", "Right"), ("D", "Left")])
def test_arrow_sequences(letter, name):
    decoder = StdinDecoder()
    assert decoder.feed("\x1b") is None
    assert decoder.feed("[") is None
    assert decoder.feed(letter) == (0, KEYSYMS[name])


def test_escape_gives_alt():
    decoder = StdinDecoder()
    assert decoder.feed("\x1b") is None
    assert decoder.feed("q") == (int(Modifier.MOD1), ord("q"))
    assert decoder.feed("q") == (0, ord("q"))


def test_unknown_escape_sequence_is_dropped():
    decoder = StdinDecoder()
    decoder.feed("\x1b")
    decoder.feed("[")
    assert decoder.feed("Z") is None
    assert decoder.feed("n") == (0, ord("n"))


def test_unnamed_character_gives_nothing():
    assert StdinDecoder().feed("!") is None


def test_feed_rejects_multiple_characters():
    with pytest.raises(ValueError):
        StdinDecoder().feed("ab")


def test_raw_terminal_restores_settings():
    master, slave = os.openpty()
    try:
        before = termios.tcgetattr(slave)
        with raw_terminal(slave):
            inside = termios.tcgetattr(slave)
            assert not inside[3] & termios.ECHO
            assert not inside[3] & termios.ICANON
            assert inside[2] & termios.CSIZE == termios.CS8
        assert termios.tcgetattr(slave) == before
    finally:
        os.close(master)
        os.close(slave)


def test_raw_terminal_on_pipe_fails():
    read_end, write_end = os.pipe()
    try:
        with pytest.raises(OSError, match="tcgetattr failed"):
            with raw_terminal(read_end):
                pass
    finally:
        os.close(read_end)
        os.close(write_end)