"""Translation of ORM failures into persistence domain errors.

The mapping lives in ``PERSISTENCE_ERROR_TRANSLATIONS``: each entry pairs a
Django exception type with a translator that returns the domain error, or
``None`` when the failure is not one it recognises.  Unrecognised failures
propagate unchanged.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import structlog
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError, models, transaction

from modules.core.exceptions import RecordNotFoundError, UniqueConstraintError

logger = structlog.get_logger(__name__)

Translator = Callable[[Exception, Optional[models.Model]], Optional[Exception]]


def conflicting_unique_fields(entity: models.Model) -> list[str]:
    """Return the unique fields of ``entity`` whose value is already taken."""
    manager = type(entity)._default_manager
    conflicts = []
    for field in entity._meta.concrete_fields:
        if not field.unique or field.primary_key:
            continue
        value = getattr(entity, field.attname)
        if value is None:
            continue
        queryset = manager.filter(**{field.attname: value})
        if entity.pk is not None:
            queryset = queryset.exclude(pk=entity.pk)
        if queryset.exists():
            conflicts.append(field.name)
    return conflicts


def _translate_integrity_error(
    exc: Exception, entity: Optional[models.Model]
) -> Optional[Exception]:
    if entity is None:
        return None
    fields = conflicting_unique_fields(entity)
    if not fields:
        return None
    return UniqueConstraintError(fields)


def _translate_does_not_exist(
    exc: Exception, entity: Optional[models.Model]
) -> Optional[Exception]:
    return RecordNotFoundError(str(exc) or "Record not found.")


PERSISTENCE_ERROR_TRANSLATIONS: tuple[tuple[type[Exception], Translator], ...] = (
    (IntegrityError, _translate_integrity_error),
    (ObjectDoesNotExist, _translate_does_not_exist),
)


def translate_persistence_error(
    exc: Exception, entity: Optional[models.Model] = None
) -> Optional[Exception]:
    """Map ``exc`` to a domain error, or ``None`` if it has no translation."""
    for error_type, translator in PERSISTENCE_ERROR_TRANSLATIONS:
        if isinstance(exc, error_type):
            return translator(exc, entity)
    return None


@contextmanager
def translate_persistence_errors(
    entity: Optional[models.Model] = None,
) -> Iterator[None]:
    """Run a write inside a savepoint and translate ORM failures.

    The savepoint is rolled back before translation, so the unique-field
    look-ups in ``conflicting_unique_fields`` run on a usable connection.
    """
    try:
        with transaction.atomic():
            yield
    except (IntegrityError, ObjectDoesNotExist) as exc:
        translated = translate_persistence_error(exc, entity)
        if translated is None:
            raise
        logger.info(
            "persistence.error_translated",
            source=type(exc).__name__,
            target=type(translated).__name__,
        )
        raise translated from exc
