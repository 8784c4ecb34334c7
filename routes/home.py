# routes/home.py
from flask import Blueprint, jsonify, request, Response
from models.scripture import Language
from routes.bible import AUDIO_ERROR
from utils.app_state import get_state
from utils.content import pcm_to_wav
import logging

home_bp = Blueprint('home', __name__)
logger = logging.getLogger(__name__)


def _language_arg():
    lang = request.args.get('lang')
    if lang is None:
        return get_state().settings.language
    return Language(lang)


@home_bp.route('/devotional', methods=['GET'])
def get_devotional():
    try:
        language = _language_arg()
    except ValueError:
        return jsonify({"error": "lang must be 'en' or 'ta'"}), 400
    devotional = get_state().content.daily_devotion(language)
    return jsonify(devotional.to_json())


@home_bp.route('/devotional/audio', methods=['GET'])
def get_devotional_audio():
    """Read today's devotional verse aloud (audio/wav)."""
    try:
        language = _language_arg()
    except ValueError:
        return jsonify({"error": "lang must be 'en' or 'ta'"}), 400

    state = get_state()
    devotional = state.content.daily_devotion(language)
    try:
        pcm = state.content.generate_speech(devotional.verse_text, language)
    except Exception as e:
        logger.error(f"TTS failed: {str(e)}", exc_info=True)
        return jsonify({"error": AUDIO_ERROR}), 502
    return Response(pcm_to_wav(pcm), mimetype='audio/wav')
