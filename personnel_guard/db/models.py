"""
Shared model helpers.
"""

from uuid import uuid4

from django.db import models

from ..errors import ValidationError


def new_object_id() -> str:
    """Random 32-character hex primary key."""
    return uuid4().hex


class AppendOnlyModel(models.Model):
    """
    Abstract base for history and audit rows.

    Rows can be inserted once; updating or deleting an existing row raises
    ``ValidationError``. Queryset-level ``update()``/``delete()`` bypass this
    guard and must not be used on these tables.
    """

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(
                f"{self.__class__.__name__} rows are immutable",
                code="immutable_record",
            )
        kwargs["force_insert"] = True
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f"{self.__class__.__name__} rows cannot be deleted",
            code="immutable_record",
        )
