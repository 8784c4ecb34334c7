# routes/prayer.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from schemas.request_schemas import PrayerCreate, validation_message
from utils.app_state import get_state
from utils.errors import StorageQuotaExceeded
import logging

prayer_bp = Blueprint('prayer', __name__)
logger = logging.getLogger(__name__)


@prayer_bp.route('/', methods=['GET'])
def get_prayers():
    return jsonify([prayer.to_json() for prayer in get_state().prayers.list()])


@prayer_bp.route('/', methods=['POST'])
def add_prayer():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        payload = PrayerCreate.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        prayer = get_state().prayers.add(payload.title, payload.content)
        return jsonify(prayer.to_json()), 201
    except StorageQuotaExceeded as e:
        logger.error(f"Error saving prayer: {str(e)}")
        return jsonify({"error": "Storage is full"}), 507
    except Exception as e:
        logger.error(f"Error adding prayer: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to add prayer"}), 500


@prayer_bp.route('/<prayer_id>/toggle', methods=['POST'])
def toggle_answered(prayer_id):
    try:
        prayer = get_state().prayers.toggle_answered(prayer_id)
    except StorageQuotaExceeded as e:
        logger.error(f"Error saving prayer {prayer_id}: {str(e)}")
        return jsonify({"error": "Storage is full"}), 507
    if prayer is None:
        return jsonify({"error": "Prayer not found"}), 404
    return jsonify(prayer.to_json())


@prayer_bp.route('/<prayer_id>', methods=['DELETE'])
def delete_prayer(prayer_id):
    if not get_state().prayers.delete(prayer_id):
        return jsonify({"error": "Prayer not found"}), 404
    return jsonify({"message": "Prayer deleted successfully"})
