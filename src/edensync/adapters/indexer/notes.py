"""Encode and decode the ARC-69 JSON notes that carry throw and harvest data."""

from __future__ import annotations

import base64
import binascii
import json
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import Arc69Note, HarvestProperties, ThrowProperties

if TYPE_CHECKING:
    from edensync.domain.model import HarvestDraft, ThrowDraft

ARC69_STANDARD = "arc69"
EDEN_NOTE_VERSION = 1
EDEN_EXTERNAL_URL = "https://edenpods.earth"


def _encode(kind: str, properties: dict[str, object]) -> bytes:
    document = {
        "standard": ARC69_STANDARD,
        "description": f"Eden Pods - {kind}",
        "external_url": EDEN_EXTERNAL_URL,
        "properties": {**properties, "eden_type": kind, "eden_version": EDEN_NOTE_VERSION},
    }
    return json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def build_throw_note(draft: ThrowDraft) -> bytes:
    properties = ThrowProperties(
        pod_type_id=draft.pod_type_id,
        pod_type_name=draft.pod_type_name,
        pod_type_icon=draft.pod_type_icon,
        throw_date=draft.thrown_at,
        location_label=draft.location_label,
        growth_model_id=draft.growth_model_id,
        thrown_by=draft.thrown_by,
    )
    payload = properties.model_dump(
        by_alias=True, mode="json", exclude={"eden_type", "eden_version"}
    )
    return _encode("throw", payload)


def build_harvest_note(draft: HarvestDraft) -> bytes:
    properties = HarvestProperties(
        throw_asa_id=draft.throw_ledger_id,
        plant_id=draft.plant_id,
        quantity_class=draft.quantity,
        harvested_at=draft.harvested_at,
        notes=draft.notes,
    )
    payload = properties.model_dump(
        by_alias=True, mode="json", exclude={"eden_type", "eden_version"}
    )
    return _encode("harvest", payload)


def parse_note(note: str | bytes | None) -> dict[str, object] | None:
    """Return the properties of an edensync ARC-69 note, or ``None`` for anything else.

    Indexer responses carry notes base64-encoded; raw bytes are accepted as-is.
    """

    if not note:
        return None
    try:
        raw = base64.b64decode(note, validate=True) if isinstance(note, str) else note
        document = Arc69Note.model_validate_json(raw)
    except (binascii.Error, ValueError, ValidationError):
        return None
    if not isinstance(document.properties.get("eden_type"), str):
        return None
    return document.properties


__all__ = ["build_harvest_note", "build_throw_note", "parse_note"]
