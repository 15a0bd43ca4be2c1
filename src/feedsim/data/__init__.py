"""Static configuration data: audience segments and author personas."""

from .audiences import AUDIENCES, AUDIENCE_IDS, Audience
from .personas import PERSONAS, Persona, get_persona

__all__ = [
    "AUDIENCES",
    "AUDIENCE_IDS",
    "Audience",
    "PERSONAS",
    "Persona",
    "get_persona",
]
