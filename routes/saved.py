# routes/saved.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from models.saved_verse import VerseRef
from models.scripture import get_book
from schemas.request_schemas import HighlightPayload, VerseRefPayload, validation_message
from utils.annotations import FILTERS
from utils.app_state import get_state
from utils.errors import StorageQuotaExceeded
import logging

logger = logging.getLogger(__name__)
saved_bp = Blueprint('saved_bp', __name__)


def _verse_ref(payload):
    book = get_book(payload.bookId)
    return VerseRef(
        book_id=book.id,
        book_name=payload.bookName or book.name_for(payload.lang),
        chapter=payload.chapter,
        verse_number=payload.verseNumber,
        text=payload.text,
        language=payload.lang,
    )


def _parse(schema):
    """Validate the JSON body against schema. Returns (payload, error_response)."""
    data = request.get_json(silent=True)
    if data is None:
        return None, (jsonify({"error": "Invalid JSON payload"}), 400)
    try:
        return schema.model_validate(data), None
    except ValidationError as e:
        return None, (jsonify({"error": validation_message(e)}), 400)


def _entry_response(key, entry):
    return jsonify({"key": key, "saved": entry.to_json() if entry else None}), 200


@saved_bp.route("/", methods=['GET'])
def list_saved():
    filter_name = request.args.get('filter', 'all')
    if filter_name not in FILTERS:
        return jsonify({"error": f"filter must be one of {', '.join(FILTERS)}"}), 400
    items = get_state().annotations.items(filter_name)
    return jsonify([item.to_json() for item in items]), 200


@saved_bp.route("/bookmark", methods=['POST'])
def toggle_bookmark():
    payload, error = _parse(VerseRefPayload)
    if error:
        return error
    try:
        ref = _verse_ref(payload)
        entry = get_state().annotations.toggle_bookmark(ref)
        return _entry_response(ref.key, entry)
    except KeyError:
        return jsonify({"error": f"Unknown book: {payload.bookId}"}), 404
    except StorageQuotaExceeded as e:
        logger.error(f"Error saving bookmark: {str(e)}")
        return jsonify({"error": "Storage is full"}), 507
    except Exception as e:
        logger.error(f"Error toggling bookmark: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to update bookmark"}), 500


@saved_bp.route("/highlight", methods=['PUT'])
def apply_highlight():
    payload, error = _parse(HighlightPayload)
    if error:
        return error
    try:
        ref = _verse_ref(payload)
        entry = get_state().annotations.set_highlight(ref, payload.color)
        return _entry_response(ref.key, entry)
    except KeyError:
        return jsonify({"error": f"Unknown book: {payload.bookId}"}), 404
    except StorageQuotaExceeded as e:
        logger.error(f"Error saving highlight: {str(e)}")
        return jsonify({"error": "Storage is full"}), 507
    except Exception as e:
        logger.error(f"Error applying highlight: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to update highlight"}), 500


@saved_bp.route("/highlight", methods=['DELETE'])
def remove_highlight():
    payload, error = _parse(VerseRefPayload)
    if error:
        return error
    try:
        ref = _verse_ref(payload)
        entry = get_state().annotations.clear_highlight(ref)
        return _entry_response(ref.key, entry)
    except KeyError:
        return jsonify({"error": f"Unknown book: {payload.bookId}"}), 404
    except Exception as e:
        logger.error(f"Error removing highlight: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to update highlight"}), 500


@saved_bp.route("/<key>", methods=['DELETE'])
def delete_saved(key):
    try:
        if not get_state().annotations.delete(key):
            return jsonify({"error": "Saved verse not found"}), 404
        return jsonify({"message": "Saved verse deleted successfully"}), 200
    except Exception as e:
        logger.error(f"Error deleting saved verse {key}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to delete saved verse"}), 500
