"""Author personas a user can post as."""

from typing import NamedTuple


class Persona(NamedTuple):
    id: str
    name: str
    subtitle: str
    technical: bool


_PERSONA_BASE = [
    ("tech-founder", "Tech Founder", "Building the future, one pivot at a time"),
    ("software-engineer", "Software Engineer", "Shipping code, breaking prod"),
    ("ai-researcher", "AI/ML Researcher", "Pushing the boundaries of intelligence"),
    ("venture-capitalist", "VC / Investor", "Funding the future"),
    ("cs-student", "CS Student", "Learning to build the future"),
    ("tech-reporter", "Tech Reporter", "Breaking the stories that matter"),
    ("product-manager", "Product Manager", "Shipping features, managing roadmaps"),
    ("tech-executive", "Tech Executive", "Leading teams, driving strategy"),
    ("content-creator", "Content Creator", "Building an audience, one post at a time"),
    ("indie-hacker", "Indie Hacker", "Building in public, shipping fast"),
    ("designer", "Designer", "Crafting experiences, pixel by pixel"),
    ("data-scientist", "Data Scientist", "Finding signal in the noise"),
    ("cybersecurity-pro", "Security Professional", "Defending the digital frontier"),
    ("consultant", "Management Consultant", "Solving problems, building slides"),
    ("marketer", "Marketing Professional", "Growing brands, driving conversions"),
    ("educator", "Educator / Course Creator", "Teaching the skills that matter"),
]

_TECHNICAL_PERSONA_IDS = frozenset({
    "tech-founder",
    "software-engineer",
    "ai-researcher",
    "cs-student",
    "indie-hacker",
    "data-scientist",
    "cybersecurity-pro",
})

PERSONAS: tuple[Persona, ...] = tuple(
    Persona(pid, name, subtitle, pid in _TECHNICAL_PERSONA_IDS)
    for pid, name, subtitle in _PERSONA_BASE
)


def get_persona(persona_id: str) -> Persona | None:
    """Look up a persona by id.  Returns ``None`` if not found."""
    for persona in PERSONAS:
        if persona.id == persona_id:
            return persona
    return None
