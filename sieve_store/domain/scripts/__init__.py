"""Sieve script domain exports"""

from .models import NO_SCRIPT_NAME, Script, ScriptSummary, content_size
from .repository import ScriptStore

__all__ = [
    "NO_SCRIPT_NAME",
    "Script",
    "ScriptStore",
    "ScriptSummary",
    "content_size",
]
