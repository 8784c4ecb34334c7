# routes/settings.py
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from schemas.request_schemas import SettingsUpdate, validation_message
from utils.app_state import get_state
from utils.errors import StorageQuotaExceeded
import logging

settings_bp = Blueprint('settings', __name__)
logger = logging.getLogger(__name__)


@settings_bp.route('/', methods=['GET'])
def get_settings():
    return jsonify(get_state().settings.to_json())


@settings_bp.route('/', methods=['PATCH'])
def update_settings():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        payload = SettingsUpdate.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    state = get_state()
    settings = state.settings
    try:
        if payload.language is not None:
            settings.language = payload.language
            # The reader follows the app language; its next load picks it up
            state.session.set_language(payload.language)
        if payload.fontSize is not None:
            settings.font_size = payload.fontSize
        if payload.darkMode is not None:
            settings.dark_mode = payload.darkMode
    except StorageQuotaExceeded as e:
        logger.error(f"Error saving settings: {str(e)}")
        return jsonify({"error": "Storage is full"}), 507

    logger.info(f"Settings updated: {payload.model_dump(exclude_none=True)}")
    return jsonify(settings.to_json())


@settings_bp.route('/clear-cache', methods=['POST'])
def clear_cache():
    removed = get_state().cache.clear()
    return jsonify({"removed": removed})
