"""Jinja2 environment for module sections and full pages."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def _youtube_embed(url: str) -> str:
    """Turn a watch/short link into an embeddable URL."""
    return url.replace("watch?v=", "embed/").replace("youtu.be/", "www.youtube.com/embed/")


def _money(value: Any) -> str:
    if value is None:
        return ""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    return f"{number:,.0f}" if number.is_integer() else f"{number:,.2f}"


env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters["youtube_embed"] = _youtube_embed
env.filters["money"] = _money


def render_template(name: str, **context: Any) -> str:
    """Render a template from the package templates directory."""
    return env.get_template(name).render(**context)
