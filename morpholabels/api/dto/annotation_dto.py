"""
Conversion between the backend wire records of labels and :class:`~morpholabels.entities.annotation.Annotation`.

Wire records are the JSON objects the labels endpoints read and write::

    {"annotation_id": 12, "label": "femur", "type": "rect",
     "x": 5, "y": 5, "w": 40, "h": 20, "tx": 15, "ty": -5, "tw": 1, "th": 1,
     "showDefaultText": 1, "locked": 0, "link_id": 3,
     "user_name": "...", "created_on": ..., "updated_on": ...,
     "context_type": "...", "context_id": ...}

Both directions fill in the same defaults: a value that is missing or reads
as zero falls back to its default, except ``showDefaultText`` which only
falls back when missing.
"""

from collections.abc import Mapping, Sequence
from typing import Any
import logging
from morpholabels.entities.annotation import Annotation
from morpholabels.utils.number_utils import Number, coerce_number, number_or

_LOGGER = logging.getLogger(__name__)

DEFAULT_SHAPE_TYPE = 'rect'
TEXT_OFFSET = 10
"""Offset of the label text box from the annotation anchor: right of ``x``, above ``y``."""

_MISSING = object()


def _is_sequence(items: Any) -> bool:
    return isinstance(items, Sequence) and not isinstance(items, (str, bytes, bytearray))


def _text_anchor(explicit: Any, base: Any, offset: Number) -> Number:
    anchor = coerce_number(explicit)
    if anchor:
        return anchor
    # An explicit null base reads as 0; a missing or unreadable one gives no anchor.
    base = 0 if base is None else coerce_number(base)
    if base is not None and base + offset:
        return base + offset
    return TEXT_OFFSET


def _text_box(record: Mapping[str, Any]) -> dict[str, Number]:
    return {
        'tx': _text_anchor(record.get('tx'), record.get('x', _MISSING), TEXT_OFFSET),
        'ty': _text_anchor(record.get('ty'), record.get('y', _MISSING), -TEXT_OFFSET),
        'tw': number_or(record.get('tw'), 1),
        'th': number_or(record.get('th'), 1),
    }


def _show_default_text(value: Any) -> Number:
    number = coerce_number(value)
    return 1 if number is None else number


def wire_to_domain(records: Any) -> list[Annotation]:
    """
    Convert wire records received from the server into annotations.

    Args:
        records: The decoded JSON array of wire records.

    Returns:
        One annotation per record. A non-array input gives an empty list, and
        items that are not JSON objects are skipped.
    """
    if not _is_sequence(records):
        return []

    annotations = []
    for record in records:
        if not isinstance(record, Mapping):
            _LOGGER.warning(f"Skipping label record that is not an object: {record!r}")
            continue
        annotations.append(Annotation(
            annotation_id=record.get('annotation_id'),
            label=record.get('label') or '',
            description=record.get('description') or '',
            shape_type=record.get('type') or DEFAULT_SHAPE_TYPE,
            x=number_or(record.get('x'), 0),
            y=number_or(record.get('y'), 0),
            w=number_or(record.get('w'), 1),
            h=number_or(record.get('h'), 1),
            points=record.get('points'),
            **_text_box(record),
            show_default_text=_show_default_text(record.get('showDefaultText')),
            locked=number_or(record.get('locked'), 0),
            user_name=record.get('user_name'),
            created_on=record.get('created_on'),
            updated_on=record.get('updated_on'),
            link_id=record.get('link_id'),
            context_type=record.get('context_type'),
            context_id=record.get('context_id'),
        ))
    return annotations


def domain_to_wire(annotations: Any) -> list[dict[str, Any]]:
    """
    Convert annotations into wire records for the server.

    Args:
        annotations: Annotations, or mappings readable as annotations.

    Returns:
        One wire record per annotation. A non-sequence input gives an empty list,
        and items that are neither annotations nor mappings are skipped.
    """
    if not _is_sequence(annotations):
        return []

    records = []
    for item in annotations:
        if isinstance(item, Mapping):
            item = Annotation.model_validate(item)
        elif not isinstance(item, Annotation):
            _LOGGER.warning(f"Skipping item that is not an annotation: {item!r}")
            continue
        ann = item
        # Unset coordinates are missing, not null, for the text anchor.
        anchor_fields = ann.model_dump(include={'x', 'y', 'tx', 'ty', 'tw', 'th'}, exclude_none=True)
        record: dict[str, Any] = {
            'annotation_id': ann.annotation_id or None,
            'label': ann.label or '',
            'type': ann.shape_type or DEFAULT_SHAPE_TYPE,
            'x': number_or(ann.x, 0),
            'y': number_or(ann.y, 0),
            **_text_box(anchor_fields),
            'showDefaultText': _show_default_text(ann.show_default_text),
            'locked': number_or(ann.locked, 0),
        }
        # Shape-specific fields only for known shape types.
        geometry = ann.geometry
        if geometry is not None:
            record.update(geometry.wire_fields())

        for key in ('link_id', 'context_type', 'context_id'):
            value = getattr(ann, key)
            if value is not None:
                record[key] = value
        records.append(record)
    return records
