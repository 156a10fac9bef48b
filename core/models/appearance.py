# =============================================================================
# core/models/appearance.py - Site Appearance Schemas
# =============================================================================
# The appearance record is the site's single configuration row: header
# media and titles, logo, per-category images and icons, homepage banner,
# company contact block, social links and the map embed.
#
# Exactly one row is expected in the appearance table. When there is none
# (or it cannot be read) the site runs on DEFAULT_APPEARANCE.
# =============================================================================

from pydantic import Field

from .base import DomainModel, PartialUpdate

DEFAULT_HEADER_IMAGE = (
    "https://images.unsplash.com/photo-1528825871115-3581a5387919"
    "?auto=format&fit=crop&q=80"
)
DEFAULT_HEADER_TITLE = "Bienvenue chez AC Fruit"
DEFAULT_HEADER_SUBTITLE = "Découvrez nos fruits d'exception"


def _empty_category_map() -> dict[str, str]:
    return {"abricots": "", "peches": "", "nectarines": ""}


class SocialMedia(DomainModel):
    instagram: str = ""
    linkedin: str = ""
    youtube: str = ""
    facebook: str = ""


class Appearance(DomainModel):
    """Site-wide appearance and company information."""

    header_image: str = DEFAULT_HEADER_IMAGE
    header_video: str = ""
    use_video: bool = False
    header_title: str = DEFAULT_HEADER_TITLE
    header_subtitle: str = DEFAULT_HEADER_SUBTITLE
    logo: str = ""
    category_images: dict[str, str] = Field(default_factory=_empty_category_map)
    category_icons: dict[str, str] = Field(default_factory=_empty_category_map)
    homepage_banner: str = ""
    company_name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    maps_embed_url: str = ""


class AppearanceUpdate(PartialUpdate):
    """Partial update of the appearance record."""
    header_image: str | None = None
    header_video: str | None = None
    use_video: bool | None = None
    header_title: str | None = None
    header_subtitle: str | None = None
    logo: str | None = None
    category_images: dict[str, str] | None = None
    category_icons: dict[str, str] | None = None
    homepage_banner: str | None = None
    company_name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    social_media: SocialMedia | None = None
    maps_embed_url: str | None = None


DEFAULT_APPEARANCE = Appearance()
