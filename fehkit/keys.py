"""Key and button bindings: keysyms, modifiers and the default keymap."""

from __future__ import annotations

import enum
import string
import warnings
from dataclasses import dataclass, field

NO_SYMBOL = 0
SLOTS = 3


class KeySpecWarning(UserWarning):
    """Issued for key specifications that cannot be fully understood."""


class Modifier(enum.IntFlag):
    """X11 modifier masks understood in key specifications."""

    NONE = 0
    SHIFT = 1 << 0
    CONTROL = 1 << 2
    MOD1 = 1 << 3
    MOD4 = 1 << 6


_MODIFIER_PREFIXES = {
    "C": Modifier.CONTROL,
    "S": Modifier.SHIFT,
    "1": Modifier.MOD1,
    "4": Modifier.MOD4,
}

_PUNCTUATION_NAMES = {
    "space": 0x20, "exclam": 0x21, "quotedbl": 0x22, "numbersign": 0x23,
    "dollar": 0x24, "percent": 0x25, "ampersand": 0x26, "apostrophe": 0x27,
    "quoteright": 0x27, "parenleft": 0x28, "parenright": 0x29,
    "asterisk": 0x2A, "plus": 0x2B, "comma": 0x2C, "minus": 0x2D,
    "period": 0x2E, "slash": 0x2F, "colon": 0x3A, "semicolon": 0x3B,
    "less": 0x3C, "equal": 0x3D, "greater": 0x3E, "question": 0x3F,
    "at": 0x40, "bracketleft": 0x5B, "backslash": 0x5C,
    "bracketright": 0x5D, "asciicircum": 0x5E, "underscore": 0x5F,
    "grave": 0x60, "quoteleft": 0x60, "braceleft": 0x7B, "bar": 0x7C,
    "braceright": 0x7D, "asciitilde": 0x7E,
}

_FUNCTION_NAMES = {
    "BackSpace": 0xFF08, "Tab": 0xFF09, "Linefeed": 0xFF0A, "Clear": 0xFF0B,
    "Return": 0xFF0D, "Pause": 0xFF13, "Scroll_Lock": 0xFF14,
    "Sys_Req": 0xFF15, "Escape": 0xFF1B, "Delete": 0xFFFF,
    "Home": 0xFF50, "Left": 0xFF51, "Up": 0xFF52, "Right": 0xFF53,
    "Down": 0xFF54, "Prior": 0xFF55, "Page_Up": 0xFF55, "Next": 0xFF56,
    "Page_Down": 0xFF56, "End": 0xFF57, "Begin": 0xFF58,
    "Select": 0xFF60, "Print": 0xFF61, "Execute": 0xFF62, "Insert": 0xFF63,
    "Undo": 0xFF65, "Redo": 0xFF66, "Menu": 0xFF67, "Find": 0xFF68,
    "Cancel": 0xFF69, "Help": 0xFF6A, "Break": 0xFF6B, "Num_Lock": 0xFF7F,
    "KP_Space": 0xFF80, "KP_Tab": 0xFF89, "KP_Enter": 0xFF8D,
    "KP_Home": 0xFF95, "KP_Left": 0xFF96, "KP_Up": 0xFF97,
    "KP_Right": 0xFF98, "KP_Down": 0xFF99, "KP_Prior": 0xFF9A,
    "KP_Page_Up": 0xFF9A, "KP_Next": 0xFF9B, "KP_Page_Down": 0xFF9B,
    "KP_End": 0xFF9C, "KP_Begin": 0xFF9D, "KP_Insert": 0xFF9E,
    "KP_Delete": 0xFF9F, "KP_Equal": 0xFFBD, "KP_Multiply": 0xFFAA,
    "KP_Add": 0xFFAB, "KP_Separator": 0xFFAC, "KP_Subtract": 0xFFAD,
    "KP_Decimal": 0xFFAE, "KP_Divide": 0xFFAF,
    "Shift_L": 0xFFE1, "Shift_R": 0xFFE2, "Control_L": 0xFFE3,
    "Control_R": 0xFFE4, "Caps_Lock": 0xFFE5, "Meta_L": 0xFFE7,
    "Meta_R": 0xFFE8, "Alt_L": 0xFFE9, "Alt_R": 0xFFEA,
    "Super_L": 0xFFEB, "Super_R": 0xFFEC,
}
_FUNCTION_NAMES.update({f"KP_{d}": 0xFFB0 + d for d in range(10)})
_FUNCTION_NAMES.update({f"F{n}": 0xFFBD + n for n in range(1, 36)})

KEYSYMS: dict[str, int] = {
    **{c: ord(c) for c in string.ascii_letters + string.digits},
    **_PUNCTUATION_NAMES,
    **_FUNCTION_NAMES,
}


def keysym_from_name(name: str) -> int:
    """Translate an X keysym name into its numeric value, or NO_SYMBOL."""
    if name in KEYSYMS:
        return KEYSYMS[name]
    if len(name) > 2 and name[:2] in ("0x", "0X"):
        try:
            return int(name[2:], 16)
        except ValueError:
            return NO_SYMBOL
    if len(name) > 2 and name[:2] == "U+":
        try:
            codepoint = int(name[2:], 16)
        except ValueError:
            return NO_SYMBOL
        if 0x20 <= codepoint <= 0x7E or 0xA0 <= codepoint <= 0xFF:
            return codepoint
        if codepoint <= 0x10FFFF:
            return 0x01000000 | codepoint
    return NO_SYMBOL


def ignore_shift(keysym: int) -> bool:
    """True for printable, non-space ASCII keysyms whose Shift state is implied."""
    return 0x21 <= keysym <= 0x7E


def parse_key_spec(spec: str) -> tuple[int, Modifier]:
    """Parse a spec like ``C-S-Left`` into ``(keysym, modifiers)``."""
    if not spec:
        return NO_SYMBOL, Modifier.NONE
    mods = Modifier.NONE
    cur = spec
    while len(cur) >= 2 and cur[1] == "-":
        prefix = cur[0]
        if prefix in _MODIFIER_PREFIXES:
            mods |= _MODIFIER_PREFIXES[prefix]
        else:
            warnings.warn(
                f'keys: invalid modifier {prefix} in "{spec}"', KeySpecWarning, stacklevel=2
            )
        cur = cur[2:]
    keysym = keysym_from_name(cur)
    if ignore_shift(keysym):
        mods &= ~Modifier.SHIFT
    if keysym == NO_SYMBOL:
        warnings.warn(f"keys: Invalid keysym: {cur}", KeySpecWarning, stacklevel=2)
    return keysym, mods


@dataclass
class KeyBinding:
    """An action with up to three key slots and an optional mouse button."""

    name: str
    keysyms: list[int] = field(default_factory=lambda: [NO_SYMBOL] * SLOTS)
    keystates: list[int] = field(default_factory=lambda: [0] * SLOTS)
    state: int = 0
    button: int = 0

    def matches(self, state: int, keysym: int, button: int) -> bool:
        """Whether a key press (or, without keysym, a button press) triggers this binding."""
        if keysym != NO_SYMBOL:
            for slot_sym, slot_state in zip(self.keysyms, self.keystates):
                if slot_sym == keysym and slot_state == state:
                    return True
                if slot_sym == NO_SYMBOL:
                    return False
            return False
        return self.state == state and self.button == button

    def set_slot(self, index: int, keysym: int, state: int) -> None:
        """Assign one of the three key slots."""
        if not 0 <= index < SLOTS:
            raise IndexError(f"key slot {index} out of range")
        self.keysyms[index] = keysym
        self.keystates[index] = int(state)


_C = Modifier.CONTROL
_A = Modifier.MOD1

_DEFAULTS: tuple[tuple[str, tuple[tuple[int, str], ...]], ...] = (
    ("menu_close", ((0, "Escape"),)),
    ("menu_parent", ((0, "Left"),)),
    ("menu_down", ((0, "Down"),)),
    ("menu_up", ((0, "Up"),)),
    ("menu_child", ((0, "Right"),)),
    ("menu_select", ((0, "Return"), (0, "space"))),
    ("scroll_left", ((0, "KP_Left"), (_C, "Left"))),
    ("scroll_right", ((0, "KP_Right"), (_C, "Right"))),
    ("scroll_down", ((0, "KP_Down"), (_C, "Down"))),
    ("scroll_up", ((0, "KP_Up"), (_C, "Up"))),
    ("scroll_left_page", ((_A, "Left"),)),
    ("scroll_right_page", ((_A, "Right"),)),
    ("scroll_down_page", ((_A, "Down"),)),
    ("scroll_up_page", ((_A, "Up"),)),
    ("prev_img", ((0, "Left"), (0, "p"), (0, "BackSpace"))),
    ("next_img", ((0, "Right"), (0, "n"), (0, "space"))),
    ("jump_back", ((0, "Page_Up"), (0, "KP_Page_Up"))),
    ("jump_fwd", ((0, "Page_Down"), (0, "KP_Page_Down"))),
    ("prev_dir", ((0, "bracketleft"),)),
    ("next_dir", ((0, "bracketright"),)),
    ("jump_random", ((0, "z"),)),
    ("quit", ((0, "Escape"), (0, "q"))),
    ("close", ((0, "x"),)),
    ("remove", ((0, "Delete"),)),
    ("delete", ((_C, "Delete"),)),
    ("jump_first", ((0, "Home"), (0, "KP_Home"))),
    ("jump_last", ((0, "End"), (0, "KP_End"))),
    ("action_0", ((0, "Return"), (0, "0"), (0, "KP_0"))),
    *((f"action_{d}", ((0, str(d)), (0, f"KP_{d}"))) for d in range(1, 10)),
    ("zoom_in", ((0, "Up"), (0, "KP_Add"))),
    ("zoom_out", ((0, "Down"), (0, "KP_Subtract"))),
    ("zoom_default", ((0, "KP_Multiply"), (0, "asterisk"))),
    ("zoom_fit", ((0, "KP_Divide"), (0, "slash"))),
    ("zoom_fill", ((0, "exclam"),)),
    ("size_to_image", ((0, "w"),)),
    ("render", ((0, "KP_Begin"), (0, "R"))),
    ("toggle_actions", ((0, "a"),)),
    ("toggle_aliasing", ((0, "A"),)),
    ("toggle_auto_zoom", ((0, "Z"),)),
    ("toggle_filenames", ((0, "d"),)),
    ("toggle_info", ((0, "i"),)),
    ("toggle_pointer", ((0, "o"),)),
    ("toggle_caption", ((0, "c"),)),
    ("toggle_pause", ((0, "h"),)),
    ("toggle_menu", ((0, "m"),)),
    ("toggle_fullscreen", ((0, "f"),)),
    ("reload_image", ((0, "r"),)),
    ("save_image", ((0, "s"),)),
    ("save_filelist", ((0, "L"),)),
    ("orient_1", ((0, "greater"),)),
    ("orient_3", ((0, "less"),)),
    ("flip", ((0, "underscore"),)),
    ("mirror", ((0, "bar"),)),
    ("reload_minus", ((0, "minus"),)),
    ("reload_plus", ((0, "plus"),)),
    ("toggle_keep_vp", ((0, "k"),)),
    ("toggle_fixed_geometry", ((0, "g"),)),
    ("pan", ()),
    ("zoom", ()),
    ("blur", ()),
    ("rotate", ()),
)


def default_bindings() -> list[KeyBinding]:
    """Return a fresh list of the built-in bindings, in action order."""
    bindings = []
    for name, slots in _DEFAULTS:
        binding = KeyBinding(name)
        for index, (mods, keyname) in enumerate(slots):
            binding.set_slot(index, KEYSYMS[keyname], mods)
        bindings.append(binding)
    return bindings