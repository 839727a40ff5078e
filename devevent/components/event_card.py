from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)

CARD_FIELDS = ("title", "image", "slug", "location", "date", "time")


def render_event_card(*, title: str, image: str, slug: str, location: str, date: str, time: str) -> Markup:
    """Render one event summary as a card linking to ``/events/{slug}``."""
    macro = _environment.get_template("components/event_card.html").module.event_card
    return Markup(macro(title=title, image=image, slug=slug, location=location, date=date, time=time))


def card_fields(event: dict) -> dict:
    return {field: event[field] for field in CARD_FIELDS}
