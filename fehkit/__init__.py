"""Image listing, index sheets, image loading, key bindings and overlay text helpers."""

__version__ = "0.1.0"