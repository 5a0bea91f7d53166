"""The active key bindings table and its configuration file."""

from __future__ import annotations

import os
import warnings
from collections.abc import Iterable, Iterator, Mapping

from fehkit.keys import (
    NO_SYMBOL,
    SLOTS,
    KeyBinding,
    KeySpecWarning,
    default_bindings,
    parse_key_spec,
)

SYSTEM_CONFIG = "/etc/feh/keys"

# Order in which image-window actions are tested against an event.
_DISPATCH_ORDER = (
    "next_img", "prev_img",
    "scroll_right", "scroll_left", "scroll_down", "scroll_up",
    "scroll_right_page", "scroll_left_page", "scroll_down_page", "scroll_up_page",
    "jump_back", "jump_fwd", "next_dir", "prev_dir",
    "quit", "delete", "remove", "jump_first", "jump_last",
    *(f"action_{d}" for d in range(10)),
    "zoom_in", "zoom_out", "zoom_default", "zoom_fit", "zoom_fill",
    "render", "toggle_actions", "toggle_aliasing", "toggle_auto_zoom",
    "toggle_filenames", "toggle_info", "toggle_pointer", "jump_random",
    "toggle_caption", "reload_image", "toggle_pause", "save_image",
    "save_filelist", "size_to_image", "toggle_menu", "close",
    "orient_1", "orient_3", "flip", "mirror", "toggle_fullscreen",
    "reload_plus", "reload_minus", "toggle_keep_vp", "toggle_fixed_geometry",
)


class KeyBindings:
    """All action bindings, starting from the built-in defaults."""

    def __init__(self) -> None:
        self._bindings = default_bindings()

    def __iter__(self) -> Iterator[KeyBinding]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def lookup(self, name: str) -> KeyBinding | None:
        """Return the binding for an action name, or None."""
        return next((b for b in self._bindings if b.name == name), None)

    def load(self, lines: Iterable[str]) -> None:
        """Apply ``action key1 key2 key3`` lines from a keys file."""
        for raw in lines:
            tokens = raw.split()[: SLOTS + 1]
            if not tokens or raw.startswith("#"):
                continue
            action, *specs = tokens
            specs += [""] * (SLOTS - len(specs))
            binding = self.lookup(action)
            if binding is None:
                warnings.warn(f"keys: Invalid action: {action}", KeySpecWarning, stacklevel=2)
                continue
            for index, spec in enumerate(specs):
                if not spec:
                    binding.set_slot(index, NO_SYMBOL, binding.keystates[index])
                    continue
                keysym, mods = parse_key_spec(spec)
                binding.set_slot(index, keysym, mods)

    def action_for(self, state: int, keysym: int, button: int) -> str | None:
        """Name of the image-window action triggered by an event, or None."""
        for name in _DISPATCH_ORDER:
            binding = self.lookup(name)
            if binding is not None and binding.matches(state, keysym, button):
                return name
        return None


def config_paths(environ: Mapping[str, str] | None = None) -> list[str]:
    """Candidate keys files, in the order they are tried."""
    env = os.environ if environ is None else environ
    confhome = env.get("XDG_CONFIG_HOME")
    home = env.get("HOME")
    if confhome:
        user = f"{confhome}/feh/keys"
    elif home:
        user = f"{home}/.config/feh/keys"
    else:
        return []
    return [user, SYSTEM_CONFIG]


def load_bindings(environ: Mapping[str, str] | None = None) -> KeyBindings:
    """Defaults, overridden by the first keys file that can be opened."""
    bindings = KeyBindings()
    for path in config_paths(environ):
        try:
            with open(path, encoding="utf-8", errors="replace") as conf:
                bindings.load(conf)
        except OSError:
            continue
        break
    return bindings