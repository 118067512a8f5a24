from textengine.config import Config
from textengine.console import Console
from textengine.engine import Engine
from textengine.errors import (
    DisabledDecisionError,
    DuplicateIdError,
    ErrorKind,
    MalformedMarkerError,
    MalformedScriptError,
    NotFoundError,
    ScriptIOError,
    TextEngineError,
)
from textengine.markers import parse_line
from textengine.models import Decision, Dialog, Token, Tree
from textengine.parser import parse_script, parse_text

__all__ = [
    "Config",
    "Console",
    "Decision",
    "Dialog",
    "DisabledDecisionError",
    "DuplicateIdError",
    "Engine",
    "ErrorKind",
    "MalformedMarkerError",
    "MalformedScriptError",
    "NotFoundError",
    "ScriptIOError",
    "TextEngineError",
    "Token",
    "Tree",
    "parse_line",
    "parse_script",
    "parse_text",
]
