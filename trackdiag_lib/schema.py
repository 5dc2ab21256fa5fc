# --- trackdiag_lib/schema.py ---
import json
import logging
from dataclasses import asdict, fields
from typing import Any, Dict, Iterable, List

from .errors import InvalidPayloadError
from .manual import format_markers, parse_km, parse_markers
from .models import ICON_SIGNAL, SIDE_TOP, DiagramInput, Marker

log_markers = logging.getLogger("trackdiag.markers")

MARKER_KEYS = {f.name for f in fields(Marker)}


def build_payload(diagram: DiagramInput) -> Dict[str, Any]:
    """
    Builds the exchange record for a diagram.

    Text fields are trimmed, items are split into non-empty lines and markers
    are parsed from the marker text.
    """
    return {
        "title": diagram.title.strip(),
        "items": diagram.item_list,
        "from": diagram.from_label.strip(),
        "to": diagram.to_label.strip(),
        "segment": diagram.segment_label.strip(),
        "topTrack": diagram.top_track_label.strip(),
        "bottomTrack": diagram.bottom_track_label.strip(),
        "markers": [asdict(m) for m in parse_markers(diagram.markers_text)],
    }


def markers_from_records(records: Iterable[Any]) -> List[Marker]:
    """
    Builds markers from `{km, label, side, icon}` records.

    Records without a usable km are dropped like unparsable marker lines.
    Anything that is not a record of known fields raises InvalidPayloadError.
    """
    markers = []
    for i, record in enumerate(records):
        if not isinstance(record, dict) or "km" not in record:
            raise InvalidPayloadError(f"Marker record {i} must be an object with a 'km' field.")
        unknown = set(record) - MARKER_KEYS
        if unknown:
            raise InvalidPayloadError(
                f"Marker record {i} has unknown fields: {', '.join(sorted(unknown))}."
            )
        km = parse_km(str(record["km"])) if record["km"] is not None else None
        if km is None:
            log_markers.debug("Dropping marker record %d: km=%r", i, record["km"])
            continue
        markers.append(
            Marker(
                km=km,
                label=str(record.get("label") or ""),
                side=str(record.get("side") or SIDE_TOP),
                icon=str(record.get("icon") or ICON_SIGNAL),
            )
        )
    return markers


def payload_to_input(data: Dict[str, Any]) -> DiagramInput:
    """
    Rebuilds an editable DiagramInput from an exchange record.

    `items` and `markers` may be lists (as exported) or the editable text.
    """
    if not isinstance(data, dict):
        raise InvalidPayloadError("Diagram payload must be a JSON object.")

    items = data.get("items") or ""
    if isinstance(items, list):
        items = "\n".join(str(item) for item in items)
    markers = data.get("markers") or ""
    if isinstance(markers, list):
        markers = format_markers(markers_from_records(markers), precision=None)

    return DiagramInput(
        title=_text(data, "title"),
        items=str(items),
        from_label=_text(data, "from"),
        to_label=_text(data, "to"),
        segment_label=_text(data, "segment"),
        top_track_label=_text(data, "topTrack"),
        bottom_track_label=_text(data, "bottomTrack"),
        markers_text=str(markers),
    )


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def save_json(diagram: DiagramInput, output_path: str) -> None:
    """
    Serializes a diagram's exchange record to a JSON file.

    Args:
        diagram: The DiagramInput to export.
        output_path: The path to the output .json file.
    """
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(build_payload(diagram), f, indent=2, ensure_ascii=False)


def load_json(input_path: str) -> DiagramInput:
    """
    Deserializes an exported JSON file into a DiagramInput.

    Args:
        input_path: The path to the input .json file.

    Returns:
        A DiagramInput whose marker text re-parses to the exported markers.
    """
    with open(input_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return payload_to_input(data)
