"""Audience segments a post can reach.

Each audience carries a short ``interests`` phrase whose embedding stands in
for what that segment cares about.
"""

from typing import NamedTuple


class Audience(NamedTuple):
    id: str
    label: str
    interests: str


AUDIENCES: tuple[Audience, ...] = (
    Audience(
        "tech",
        "Tech Enthusiasts",
        "software engineering programming code AI machine learning technology gadgets computers",
    ),
    Audience(
        "casual",
        "Casual Users",
        "entertainment fun memes humor lifestyle daily life social media trends",
    ),
    Audience(
        "news",
        "News Followers",
        "breaking news politics current events journalism media reports updates",
    ),
    Audience(
        "creators",
        "Creators",
        "content creation video youtube streaming design art creative work audience building",
    ),
    Audience(
        "investors",
        "Investors",
        "stocks market investing finance portfolio returns venture capital funding",
    ),
    Audience(
        "founders",
        "Founders",
        "startups entrepreneurship business building company growth product market fit",
    ),
    Audience(
        "students",
        "Students",
        "learning education university college studying career advice internships skills",
    ),
    Audience(
        "bots",
        "Bots / Inactive",
        "random spam automated generic content noise",
    ),
)

AUDIENCE_IDS: tuple[str, ...] = tuple(a.id for a in AUDIENCES)
