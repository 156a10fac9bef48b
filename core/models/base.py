# =============================================================================
# core/models/base.py - Shared Model Configuration
# =============================================================================
# Base classes and helpers shared by every catalog model:
# - DomainModel: snake_case attributes, camelCase on the wire
# - changed_fields(): the set fields of a partial-update model
# - merge(): the shallow merge applied to local records
#
# A store takes ONE changes dict from changed_fields() and uses it twice:
# merged into the local record with merge(), and translated to columns for
# the remote update. Both sides see exactly the same field set.
# =============================================================================

from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """
    Base for all catalog models.

    Python code uses snake_case attribute names; JSON produced for clients
    uses the camelCase names (technicalSheet, startDate, ...). Both forms
    are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PartialUpdate(DomainModel):
    """
    Base for partial-update models.

    Every field of a subclass is optional. Only the fields the caller
    actually set are applied. An explicit None is a real value only for the
    fields listed in `nullable_fields`; on any other field it is rejected.
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "PartialUpdate":
        nulled = sorted(
            name for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.nullable_fields
        )
        if nulled:
            raise ValueError(f"Champ obligatoire: {', '.join(nulled)}")
        return self


M = TypeVar("M", bound=BaseModel)


def changed_fields(update: BaseModel) -> dict[str, Any]:
    """
    Return the fields explicitly set on a partial-update model.

    Values are the attribute values themselves (nested models stay models),
    so the result can be fed straight into merge().
    """
    return {name: getattr(update, name) for name in update.model_fields_set}


def merge(record: M, changes: dict[str, Any]) -> M:
    """
    Shallow-merge changes into a record.

    Fields present in changes replace the record's values; every other field
    is left untouched. Nested models are replaced whole, not merged.
    """
    if not changes:
        return record
    return record.model_copy(update=changes)
