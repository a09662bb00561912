"""Module content and site theme schemas.

Content documents are stored as arbitrary JSON. These models are only used
when rendering: each list item is validated on its own and dropped if it does
not fit, so a partially broken document still renders what it can.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class _Item(BaseModel):
    """Lenient item: unknown keys kept, scalars coerced to text."""

    model_config = {"extra": "allow", "coerce_numbers_to_str": True, "str_strip_whitespace": True}

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class PainPoint(_Item):
    icon: str = "😫"
    text: str = Field(min_length=1)


class Feature(_Item):
    icon: str = "✨"
    title: str = Field(min_length=1)
    description: str = ""


class ComparisonRow(_Item):
    icon: str = "👤"
    type: str = Field(min_length=1)
    recommendation: str = ""
    reason: str = ""


class Testimonial(_Item):
    name: str = ""
    title: str = ""
    content: str = Field(min_length=1)
    avatar: str = "👤"
    rating: int | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def _clamp_rating(cls, v: Any) -> int | None:
        try:
            value = int(float(v))
        except (TypeError, ValueError):
            return None
        return max(0, min(5, value))


class FaqItem(_Item):
    question: str = Field(min_length=1)
    answer: str = ""


class Spec(_Item):
    label: str = Field(min_length=1)
    value: str = ""


class Material(_Item):
    layer: str = Field(min_length=1)
    description: str = ""


class SubScore(_Item):
    label: str = Field(min_length=1)
    score: float
    description: str | None = None


class Price(_Item):
    original: float | None = None
    current: float | None = None
    currency: str = "USD"

    @property
    def discounted(self) -> bool:
        return (
            self.original is not None
            and self.current is not None
            and self.original > self.current
        )


class SiteColors(BaseModel):
    model_config = {"extra": "allow"}

    primary: str = "#1e3a5f"
    secondary: str = "#2d4a6f"
    accent: str = "#3b82f6"
    headerBg: str = "#1e3a5f"
    headerText: str = "#ffffff"
    footerBg: str = "#111827"
    footerText: str = "#9ca3af"
    buttonBg: str = "#22c55e"
    buttonText: str = "#ffffff"
    buttonHover: str = "#16a34a"


class SiteTypography(BaseModel):
    model_config = {"extra": "allow"}

    headingWeight: str = "700"
    bodyWeight: str = "400"
    headingItalic: bool = False
    bodyItalic: bool = False


class SiteTheme(BaseModel):
    """Presentation settings pulled out of ``Site.config``."""

    name: str = ""
    logo: str = ""
    colors: SiteColors = SiteColors()
    typography: SiteTypography = SiteTypography()
    footer_disclaimer: str = ""
    footer_copyright: str = ""


def as_dict(value: Any) -> dict:
    """Return value if it is a mapping, else an empty dict."""
    return value if isinstance(value, dict) else {}


def text_field(content: dict, key: str, default: str = "") -> str:
    """Read a display string, falling back when missing or not text."""
    value = content.get(key)
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def decode_items(raw: Any, model: type[T]) -> list[T]:
    """Validate each element of ``raw`` against ``model``, skipping bad ones."""
    if not isinstance(raw, list):
        return []
    items: list[T] = []
    for i, element in enumerate(raw):
        if isinstance(element, BaseModel):
            element = element.model_dump()
        try:
            items.append(model.model_validate(element))
        except ValidationError:
            logger.debug("Dropping malformed %s at index %d", model.__name__, i)
    return items


def decode_strings(raw: Any) -> list[str]:
    """Non-empty strings from a list; anything else is ignored."""
    if not isinstance(raw, list):
        return []
    return [s for s in raw if isinstance(s, str) and s.strip()]


def _section(config: dict, key: str, model: type[T]) -> T:
    try:
        return model.model_validate(as_dict(config.get(key)))
    except ValidationError:
        logger.warning("Invalid %s in site config, using defaults", key)
        return model()


def theme_from_config(config: Any, site_name: str, year: int) -> SiteTheme:
    """Build the theme from a site config document, defaulting every field."""
    config = as_dict(config)
    footer = as_dict(config.get("footer"))
    name = text_field(config, "name", site_name)
    return SiteTheme(
        name=name,
        logo=text_field(config, "logo"),
        colors=_section(config, "colors", SiteColors),
        typography=_section(config, "typography", SiteTypography),
        footer_disclaimer=text_field(footer, "disclaimer"),
        footer_copyright=text_field(footer, "copyright", f"© {year} {site_name}"),
    )
