"""
Record filter applying field visibility and masking to officer records.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from django.db import DatabaseError, transaction

from ...errors import AuditWriteError
from ..audit import AccessType, AuditRecorder, audit_recorder
from ..context import Actor
from .defaults import SENSITIVITY_GROUPS
from .manager import VisibilityResolver, visibility_resolver
from .masking import get_masker
from .types import DEFAULT_FILTER_OPTIONS, FieldVisibility, FilterOptions

logger = logging.getLogger(__name__)


def _as_record(record: Any) -> Optional[dict[str, Any]]:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return dict(record)
    if hasattr(record, "to_record"):
        return record.to_record()
    raise TypeError(f"Cannot filter object of type {type(record).__name__}")


class RecordFilter:
    """
    Applies visibility decisions and masking to officer records.

    Example:
        >>> record_filter = RecordFilter()
        >>> record_filter.filter_record(officer, actor)["personal_mobile"]
        '017*****678'
    """

    def __init__(
        self,
        resolver: Optional[VisibilityResolver] = None,
        recorder: Optional[AuditRecorder] = None,
        unmask_service: Any = None,
    ) -> None:
        self.resolver = resolver or visibility_resolver
        self.recorder = recorder or audit_recorder
        if unmask_service is None:
            from ..unmask.manager import unmask_service as default_service

            unmask_service = default_service
        self.unmask_service = unmask_service

    def _unmask_decision(self, actor: Actor, field_name: str) -> dict[str, Any]:
        using = getattr(getattr(self.unmask_service, "engine", None), "using", "default")
        try:
            with transaction.atomic(using=using):
                decision = self.unmask_service.can_request_unmask(actor, field_name)
        except DatabaseError as exc:
            logger.warning("Unmask decision unavailable for %s: %s", field_name, exc)
            return {"allowed": False, "reason": "Unmask service unavailable"}
        return decision.as_dict()

    def _record_access(
        self,
        actor: Actor,
        source: Mapping[str, Any],
        accessed: list[tuple[str, Optional[str], AccessType]],
        options: FilterOptions,
    ) -> None:
        for field_name, masked_value, access_type in accessed:
            try:
                self.recorder.record(
                    actor,
                    source,
                    field_name,
                    masked_value,
                    access_type,
                    correlation_id=options.correlation_id,
                    access_reason=options.access_reason,
                )
            except AuditWriteError as exc:
                logger.error(
                    "Failed to record access to %s.%s: %s",
                    source.get("id"),
                    field_name,
                    exc,
                )

    def filter_record(
        self,
        record: Any,
        actor: Optional[Actor] = None,
        options: Optional[FilterOptions] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Return a copy of ``record`` with fields removed or masked for ``actor``.

        Args:
            record: Officer instance or record mapping; never mutated.
            actor: Viewer, or None for anonymous access.
            options: Masking and audit switches.

        Returns:
            The filtered record, or None when an unpublished profile is viewed
            anonymously.
        """
        options = options or DEFAULT_FILTER_OPTIONS
        source = _as_record(record)
        if source is None:
            return None
        if actor is None and not source.get("profile_published"):
            return None

        filtered = dict(source)
        accessed: list[tuple[str, Optional[str], AccessType]] = []
        masked_groups: list[Any] = []

        for group in SENSITIVITY_GROUPS:
            visibility = self.resolver.resolve_group_visibility(actor, group, source)
            if visibility == FieldVisibility.HIDDEN:
                for field_name in group.fields:
                    filtered.pop(field_name, None)
                continue

            group_masked = False
            for field_name in group.fields:
                value = source.get(field_name)
                masker = get_masker(field_name)
                if masker is None or value in (None, ""):
                    continue
                masked_value = masker(value)
                if options.apply_masking:
                    filtered[field_name] = masked_value
                    filtered[f"_{field_name}_masked"] = True
                    group_masked = True
                if group.maskable:
                    access_type = AccessType.VIEW if options.apply_masking else AccessType.VIEW_FULL
                    accessed.append((field_name, masked_value, access_type))

            if group_masked and group.maskable:
                masked_groups.append(group)

        if actor is not None and options.apply_masking:
            unmask_info = {
                group.unmask_key: self._unmask_decision(actor, group.policy_field)
                for group in masked_groups
                if filtered.get(f"_{group.policy_field}_masked")
            }
            if unmask_info:
                filtered["_unmask_info"] = unmask_info

        if options.log_access and actor is not None and accessed:
            self._record_access(actor, source, accessed, options)

        return filtered

    def filter_records(
        self,
        records: Optional[Iterable[Any]],
        actor: Optional[Actor] = None,
        options: Optional[FilterOptions] = None,
    ) -> list[dict[str, Any]]:
        """Filter every record, dropping the ones the actor may not see."""
        if records is None:
            return []
        results = []
        for record in records:
            filtered = self.filter_record(record, actor, options)
            if filtered is not None:
                results.append(filtered)
        return results


_default_filter: Optional[RecordFilter] = None


def get_record_filter() -> RecordFilter:
    global _default_filter
    if _default_filter is None:
        _default_filter = RecordFilter()
    return _default_filter


def filter_record(
    record: Any, actor: Optional[Actor] = None, options: Optional[FilterOptions] = None
) -> Optional[dict[str, Any]]:
    return get_record_filter().filter_record(record, actor, options)


def filter_records(
    records: Optional[Iterable[Any]],
    actor: Optional[Actor] = None,
    options: Optional[FilterOptions] = None,
) -> list[dict[str, Any]]:
    return get_record_filter().filter_records(records, actor, options)
