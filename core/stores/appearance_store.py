# =============================================================================
# core/stores/appearance_store.py - Appearance Store
# =============================================================================
# Holds the site's single appearance record and mirrors it to the
# `appearance` table.
#
# - Load reads the first row. No row, or a failed read, leaves the store on
#   the default appearance.
# - Update merges the changes into the current record, then looks for an
#   existing row: it is updated if there is one, otherwise a row is inserted.
# =============================================================================

import logging
from typing import Any

from core.models.appearance import (
    DEFAULT_APPEARANCE,
    Appearance,
    AppearanceUpdate,
    SocialMedia,
)
from core.models.base import changed_fields, merge
from core.stores.base import UPDATE_ERROR, BaseStore

logger = logging.getLogger(__name__)

# Text columns written as NULL when empty
NULLABLE_TEXT = (
    "header_video",
    "logo",
    "homepage_banner",
    "company_name",
    "address",
    "phone",
    "email",
    "website",
    "maps_embed_url",
)


def appearance_from_row(row: dict[str, Any]) -> Appearance:
    """
    Build an Appearance from the table row.

    Empty columns fall back to the defaults one field at a time.
    """
    default = DEFAULT_APPEARANCE
    social_media = row.get("social_media")

    return Appearance(
        header_image=row.get("header_image") or default.header_image,
        header_video=row.get("header_video") or "",
        use_video=bool(row.get("use_video")),
        header_title=row.get("header_title") or default.header_title,
        header_subtitle=row.get("header_subtitle") or default.header_subtitle,
        logo=row.get("logo") or "",
        category_images=row.get("category_images") or dict(default.category_images),
        category_icons=row.get("category_icons") or dict(default.category_icons),
        homepage_banner=row.get("homepage_banner") or "",
        company_name=row.get("company_name") or "",
        address=row.get("address") or "",
        phone=row.get("phone") or "",
        email=row.get("email") or "",
        website=row.get("website") or "",
        social_media=SocialMedia(**social_media) if social_media else SocialMedia(),
        maps_embed_url=row.get("maps_embed_url") or "",
    )


def appearance_columns(appearance: Appearance) -> dict[str, Any]:
    """Translate a full Appearance into an `appearance` row."""
    row = appearance.model_dump(by_alias=False)
    for column in NULLABLE_TEXT:
        row[column] = row[column] or None
    return row


class AppearanceStore(BaseStore):
    """The appearance singleton, synchronized with the `appearance` table."""

    table = "appearance"

    def __init__(self, db):
        super().__init__(db)
        self.appearance: Appearance = DEFAULT_APPEARANCE

    def load_appearance(self) -> None:
        """
        Load the appearance row.

        On failure the error is recorded and the defaults are used. Never
        raises.
        """
        self._begin_load()
        try:
            logger.info("Loading appearance from Supabase")
            row = self._db.select_first(self.table)

            if row:
                self.appearance = appearance_from_row(row)
            else:
                logger.info("No appearance row found, using defaults")
                self.appearance = DEFAULT_APPEARANCE
            self.loading = False

        except Exception as e:
            self._fail_load(e)
            self.appearance = DEFAULT_APPEARANCE

    def update_appearance(self, changes: AppearanceUpdate) -> Appearance:
        """
        Merge changes into the appearance and save the full record.

        Returns:
            The appearance now held

        Raises:
            SupabaseClientError: If the existence check or the write fails
        """
        with self._mutation("updating appearance", UPDATE_ERROR):
            updated = merge(self.appearance, changed_fields(changes))
            row = appearance_columns(updated)

            existing = self._db.select_first(self.table, columns="id")
            if existing:
                self._db.update_row(self.table, str(existing["id"]), row)
            else:
                self._db.insert_row(self.table, row)

            self.appearance = updated
            return updated
