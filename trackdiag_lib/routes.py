# --- trackdiag_lib/routes.py ---
import json
import logging
import os
import uuid
from dataclasses import asdict

from flask import Blueprint, Response, current_app, jsonify, request

from . import api
from .errors import (
    DocumentReadError,
    FragmentSourceUnavailableError,
    InvalidPayloadError,
    NoMarkersError,
)
from .models import DiagramInput, example_input
from .schema import build_payload, payload_to_input

bp = Blueprint("diagram", __name__)
log = logging.getLogger("trackdiag.web")


@bp.errorhandler(InvalidPayloadError)
def handle_invalid_payload(e):
    log.warning("Rejected request payload: %s", e)
    return jsonify({"error": str(e)}), 400


def _state_from_diagram(diagram: DiagramInput) -> dict:
    return {
        "title": diagram.title,
        "items": diagram.items,
        "from": diagram.from_label,
        "to": diagram.to_label,
        "segment": diagram.segment_label,
        "topTrack": diagram.top_track_label,
        "bottomTrack": diagram.bottom_track_label,
        "markers": diagram.markers_text,
    }


def _scene_from_request():
    data = request.get_json(silent=True)
    if data is None:
        return None, (jsonify({"error": "Missing request body"}), 400)
    config_service = current_app.config_service
    try:
        scene = api.build_scene(
            payload_to_input(data), config_service.styles, config_service.labels
        )
    except NoMarkersError as e:
        return None, (jsonify({"error": str(e)}), 422)
    return scene, None


@bp.route("/example", methods=["GET"])
def get_example():
    """Returns the bundled example state."""
    return jsonify(_state_from_diagram(example_input()))


@bp.route("/render", methods=["POST"])
def render_svg():
    """Lays out the posted state and returns the diagram as SVG."""
    scene, error = _scene_from_request()
    if error:
        return error
    svg = api.render_svg(scene, current_app.config_service.styles)
    return Response(svg, mimetype="image/svg+xml", headers={"X-Render-Status": scene.status})


@bp.route("/render.png", methods=["POST"])
def render_png():
    """Lays out the posted state and returns the diagram as PNG."""
    scene, error = _scene_from_request()
    if error:
        return error
    png = api.render_png(scene, current_app.config_service.styles)
    return Response(
        png,
        mimetype="image/png",
        headers={"Content-Disposition": "attachment; filename=track-diagram.png"},
    )


@bp.route("/export", methods=["POST"])
def export_payload():
    """Returns the exchange record for the posted state."""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Missing request body"}), 400
    payload = build_payload(payload_to_input(data))
    return Response(
        json.dumps(payload, indent=2, ensure_ascii=False),
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=track-data.json"},
    )


@bp.route("/parse-sentence", methods=["POST"])
def parse_sentence():
    """Fills from/to of the posted state from a 'between X and Y' sentence."""
    data = request.get_json(silent=True) or {}
    diagram = payload_to_input(data.get("state", {}))
    matched = api.apply_between_sentence(diagram, data.get("sentence", ""))
    return jsonify({"state": _state_from_diagram(diagram), "matched": matched})


@bp.route("/import", methods=["POST"])
def import_pdf():
    """Extracts an uploaded PDF into the posted (or an empty) state."""
    if "file" not in request.files or request.files["file"].filename == "":
        return jsonify({"error": "Select a PDF to import."}), 400
    file = request.files["file"]

    try:
        state = json.loads(request.form.get("state") or "{}")
    except json.JSONDecodeError:
        return jsonify({"error": "Malformed 'state' field"}), 400
    diagram = payload_to_input(state)

    upload_dir = current_app.config["UPLOAD_DIR"]
    os.makedirs(upload_dir, exist_ok=True)
    tmp_path = os.path.join(upload_dir, f"{uuid.uuid4().hex}.pdf")
    file.save(tmp_path)
    log.info("Uploaded PDF saved to temporary path: %s", tmp_path)

    try:
        result, status = api.import_document(diagram, tmp_path)
    except FragmentSourceUnavailableError as e:
        return jsonify({"error": str(e)}), 503
    except DocumentReadError as e:
        return jsonify({"error": str(e)}), 422
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)

    return jsonify(
        {
            "state": _state_from_diagram(diagram),
            "status": status,
            "diagnostics": {
                "stats": result.stats_text,
                "pageCount": result.page_count,
                "totalItems": result.total_items,
                "pages": [result.page_text(i) for i in range(result.page_count)],
            },
            "markers": [asdict(m) for m in result.markers],
        }
    )
