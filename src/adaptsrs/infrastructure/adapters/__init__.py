# Infrastructure Adapters Package
from .anki_text import parse_anki_export, render_anki_export

__all__ = ["parse_anki_export", "render_anki_export"]
