import pytest

from fehkit.keyconfig import KeyBindings, config_paths, load_bindings
from fehkit.keys import KEYSYMS, NO_SYMBOL, KeySpecWarning, Modifier, keysym_from_name


def test_defaults_present():
    kb = KeyBindings()
    quit_binding = kb.lookup("quit")
    assert quit_binding.keysyms[:2] == [KEYSYMS["Escape"], KEYSYMS["q"]]
    assert kb.lookup("no_such_action") is None


def test_load_overrides_slots():
    kb = KeyBindings()
    kb.load(["quit C-x"])
    binding = kb.lookup("quit")
    assert binding.matches(Modifier.CONTROL, keysym_from_name("x"), 0)
    assert binding.keysyms[1] == NO_SYMBOL
    assert not binding.matches(0, KEYSYMS["Escape"], 0)


def test_comment_and_blank_lines_ignored():
    kb = KeyBindings()
    kb.load(["# quit x", "", "   \n"])
    assert kb.lookup("quit").keysyms[0] == KEYSYMS["Escape"]


def test_shift_dropped_for_printable():
    kb = KeyBindings()
    kb.load(["next_img S-a"])
    binding = kb.lookup("next_img")
    assert binding.keysyms[0] == ord("a")
    assert binding.keystates[0] == 0


def test_invalid_action_warns():
    kb = KeyBindings()
    with pytest.warns(KeySpecWarning, match="Invalid action"):
        kb.load(["bogus_action x"])


def test_invalid_modifier_warns():
    kb = KeyBindings()
    with pytest.warns(KeySpecWarning, match="invalid modifier"):
        kb.load(["quit Q-x"])
    assert kb.lookup("quit").keysyms[0] == ord("x")


def test_action_for_dispatch_order():
    kb = KeyBindings()
    assert kb.action_for(0, KEYSYMS["Up"], 0) == "zoom_in"
    assert kb.action_for(0, KEYSYMS["Right"], 0) == "next_img"
    assert kb.action_for(0, KEYSYMS["Escape"], 0) == "quit"
    assert kb.action_for(Modifier.CONTROL, KEYSYMS["Delete"], 0) == "delete"
    assert kb.action_for(0, KEYSYMS["F12"], 0) is None


def test_config_paths_prefers_xdg():
    env = {"XDG_CONFIG_HOME": "/cfg", "HOME": "/home/u"}
    assert config_paths(env) == ["/cfg/feh/keys", "/etc/feh/keys"]
    assert config_paths({"HOME": "/home/u"})[0] == "/home/u/.config/feh/keys"
    assert config_paths({}) == []


def test_load_bindings_reads_user_file(tmp_path):
    keys_dir = tmp_path / "feh"
    keys_dir.mkdir()
    (keys_dir / "keys").write_text("close C-w\n")
    kb = load_bindings({"XDG_CONFIG_HOME": str(tmp_path)})
    assert kb.action_for(Modifier.CONTROL, ord("w"), 0) == "close"


def test_load_bindings_without_env_uses_defaults():
    kb = load_bindings({})
    assert len(kb) == len(KeyBindings())
    assert kb.lookup("close").keysyms[0] == ord("x")