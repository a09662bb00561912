"""Module registry - content schema, defaults and render rule per module kind.

Each kind registers itself with ``register_module``; the composer dispatches
through ``MODULE_REGISTRY`` and never switches on kind names. A render rule
returns ``None`` when the content has nothing worth showing, which omits the
section from the page.
"""

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from sitefront.engine.catalog import product_card, ranking_slice
from sitefront.engine.templating import render_template
from sitefront.models import Product
from sitefront.schemas.content import (
    ComparisonRow,
    FaqItem,
    Feature,
    PainPoint,
    SiteTheme,
    Testimonial,
    as_dict,
    decode_items,
    decode_strings,
    text_field,
)

logger = logging.getLogger(__name__)

DEFAULT_SHOW_COUNT = 10


@dataclass
class RenderContext:
    """Everything a render rule may read besides its own content."""

    theme: SiteTheme
    products: list[Product] = field(default_factory=list)


@dataclass
class RenderedSection:
    """One rendered block of the page."""

    kind: str
    html: str
    item_count: int = 0


RenderRule = Callable[[dict, RenderContext], RenderedSection | None]


@dataclass
class ModuleDefinition:
    kind: str
    default_order: int
    default_content: dict
    render: RenderRule


MODULE_REGISTRY: dict[str, ModuleDefinition] = {}


def register_module(kind: str, order: int, defaults: dict) -> Callable[[RenderRule], RenderRule]:
    """Register a render rule and the default content for a module kind."""

    def decorator(func: RenderRule) -> RenderRule:
        if kind in MODULE_REGISTRY:
            raise ValueError(f"Module kind already registered: {kind}")
        MODULE_REGISTRY[kind] = ModuleDefinition(
            kind=kind, default_order=order, default_content=defaults, render=func
        )
        return func

    return decorator


def get_definition(kind: str) -> ModuleDefinition | None:
    return MODULE_REGISTRY.get(kind)


def default_modules() -> list[dict]:
    """Module rows seeded for a new site, in display order."""
    definitions = sorted(MODULE_REGISTRY.values(), key=lambda d: d.default_order)
    return [
        {
            "kind": d.kind,
            "enabled": True,
            "display_order": d.default_order,
            "content": copy.deepcopy(d.default_content),
        }
        for d in definitions
    ]


def render_module(kind: str, content: Any, ctx: RenderContext) -> RenderedSection | None:
    """Render one module instance; unknown kinds yield None."""
    definition = MODULE_REGISTRY.get(kind)
    if definition is None:
        return None
    return definition.render(as_dict(content), ctx)


def render_generic(kind: str, content: Any, ctx: RenderContext) -> RenderedSection | None:
    """Key/value display for kinds without a registered rule."""
    pairs = [
        (str(k), v if isinstance(v, str) else repr(v))
        for k, v in as_dict(content).items()
    ]
    if not pairs:
        return None
    html = render_template("modules/generic.html", kind=kind, pairs=pairs, theme=ctx.theme)
    return RenderedSection(kind=kind, html=html, item_count=len(pairs))


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


# ---------------------------------------------------------------------------
# Render rules
# ---------------------------------------------------------------------------


@register_module(
    "hero",
    order=1,
    defaults={
        "badge": "2025 Buyer's Guide",
        "title": "Find the product that fits you best",
        "subtitle": "We tested 50+ products and picked the TOP 10 for you",
        "highlight": "🔬 Hands-on testing | ⭐ Honest scores | 💰 Best prices",
        "ctaText": "See the full ranking →",
        "ctaLink": "#products",
        "backgroundImage": "",
    },
)
def render_hero(content: dict, ctx: RenderContext) -> RenderedSection:
    hero = {
        "badge": text_field(content, "badge"),
        "title": text_field(content, "title", "Find the product that fits you best"),
        "subtitle": text_field(content, "subtitle"),
        "highlight": text_field(content, "highlight"),
        "cta_text": text_field(content, "ctaText"),
        "cta_link": text_field(content, "ctaLink", "#products"),
        "youtube_url": text_field(content, "youtubeUrl"),
        "background_image": text_field(content, "backgroundImage"),
    }
    html = render_template("modules/hero.html", hero=hero, theme=ctx.theme)
    return RenderedSection(kind="hero", html=html, item_count=1)


@register_module(
    "painPoints",
    order=2,
    defaults={
        "title": "Do these problems sound familiar?",
        "image": "",
        "points": [
            {"icon": "😫", "text": "Too many options and no idea how to choose?"},
            {"icon": "💸", "text": "Worried about paying for something that doesn't fit?"},
            {"icon": "🤔", "text": "Can't tell which online reviews to trust?"},
        ],
    },
)
def render_pain_points(content: dict, ctx: RenderContext) -> RenderedSection | None:
    points = decode_items(content.get("points"), PainPoint)
    if not points:
        return None
    html = render_template(
        "modules/pain_points.html",
        title=text_field(content, "title", "Do these problems sound familiar?"),
        image=text_field(content, "image"),
        points=points,
        theme=ctx.theme,
    )
    return RenderedSection(kind="painPoints", html=html, item_count=len(points))


@register_module(
    "story",
    order=3,
    defaults={
        "title": "Our story",
        "image": "",
        "paragraphs": [
            "We used to be just as lost as you are...",
            "After countless hours of research and testing, we built this review site.",
            "We hope it helps more people find the product that really suits them.",
        ],
    },
)
def render_story(content: dict, ctx: RenderContext) -> RenderedSection | None:
    paragraphs = decode_strings(content.get("paragraphs"))
    if not paragraphs:
        single = text_field(content, "text")
        paragraphs = [single] if single else []
    if not paragraphs:
        return None
    html = render_template(
        "modules/story.html",
        title=text_field(content, "title", "Our story"),
        image=text_field(content, "image"),
        paragraphs=paragraphs,
        theme=ctx.theme,
    )
    return RenderedSection(kind="story", html=html, item_count=len(paragraphs))


@register_module(
    "method",
    order=4,
    defaults={
        "title": "How we review",
        "subtitle": "Rigorous, expert and objective",
        "features": [
            {"icon": "🔬", "title": "Hands-on testing", "description": "Every product is used and tested in person"},
            {"icon": "📊", "title": "Data analysis", "description": "We combine user reviews with hard data"},
            {"icon": "💯", "title": "Objective scores", "description": "No manufacturer fees, we stay neutral"},
        ],
    },
)
def render_method(content: dict, ctx: RenderContext) -> RenderedSection | None:
    features = decode_items(content.get("features"), Feature)
    if not features:
        return None
    html = render_template(
        "modules/method.html",
        title=text_field(content, "title", "How we review"),
        subtitle=text_field(content, "subtitle"),
        image=text_field(content, "image"),
        features=features,
        theme=ctx.theme,
    )
    return RenderedSection(kind="method", html=html, item_count=len(features))


@register_module(
    "comparison",
    order=5,
    defaults={
        "title": "Which one is right for you?",
        "subtitle": "Find your answer fast based on what you need",
        "rows": [],
    },
)
def render_comparison(content: dict, ctx: RenderContext) -> RenderedSection | None:
    rows = decode_items(content.get("rows"), ComparisonRow)
    if not rows:
        return None
    html = render_template(
        "modules/comparison.html",
        title=text_field(content, "title", "Which one is right for you?"),
        subtitle=text_field(content, "subtitle"),
        rows=rows,
        theme=ctx.theme,
    )
    return RenderedSection(kind="comparison", html=html, item_count=len(rows))


@register_module(
    "products",
    order=6,
    defaults={
        "title": "TOP 10 Product Ranking",
        "subtitle": "Our hand-picked best products",
        "showCount": DEFAULT_SHOW_COUNT,
    },
)
def render_products(content: dict, ctx: RenderContext) -> RenderedSection:
    # Data comes from the catalog, so this renders even with empty content
    show_count = _positive_int(content.get("showCount"), DEFAULT_SHOW_COUNT)
    products = [product_card(p) for p in ranking_slice(ctx.products, show_count)]
    html = render_template(
        "modules/products.html",
        title=text_field(content, "title", "TOP 10 Product Ranking"),
        subtitle=text_field(content, "subtitle"),
        products=products,
        theme=ctx.theme,
    )
    return RenderedSection(kind="products", html=html, item_count=len(products))


@register_module(
    "testimonials",
    order=7,
    defaults={
        "title": "What our readers say",
        "subtitle": "See what other people think",
        "items": [],
    },
)
def render_testimonials(content: dict, ctx: RenderContext) -> RenderedSection | None:
    items = decode_items(content.get("items"), Testimonial)
    if not items:
        return None
    html = render_template(
        "modules/testimonials.html",
        title=text_field(content, "title", "What our readers say"),
        subtitle=text_field(content, "subtitle"),
        items=items,
        theme=ctx.theme,
    )
    return RenderedSection(kind="testimonials", html=html, item_count=len(items))


@register_module(
    "faq",
    order=8,
    defaults={
        "title": "Frequently asked questions",
        "subtitle": "Answers to common questions",
        "items": [],
    },
)
def render_faq(content: dict, ctx: RenderContext) -> RenderedSection | None:
    items = decode_items(content.get("items"), FaqItem)
    if not items:
        return None
    html = render_template(
        "modules/faq.html",
        title=text_field(content, "title", "Frequently asked questions"),
        subtitle=text_field(content, "subtitle"),
        items=items,
        theme=ctx.theme,
    )
    return RenderedSection(kind="faq", html=html, item_count=len(items))
