# routes/bible.py
from flask import Blueprint, jsonify, request, Response
from pydantic import ValidationError
from models.scripture import BIBLE_BOOKS, Language, Testament, books_in
from schemas.request_schemas import CommentaryPayload, NavigatePayload, SpeechPayload, validation_message
from utils.app_state import get_state
from utils.content import pcm_to_wav
import logging

bible_bp = Blueprint('bible', __name__)
logger = logging.getLogger(__name__)

AUDIO_ERROR = "Unable to play audio right now. Please try again later."


def _session_response(applied, **extra):
    session = get_state().session
    body = {"applied": applied, **extra, "state": session.to_json()}
    return jsonify(body)


@bible_bp.route('/books', methods=['GET'])
def get_books():
    testament = request.args.get('testament')
    lang = request.args.get('lang', get_state().session.language.value)
    try:
        language = Language(lang)
        books = books_in(Testament(testament)) if testament else BIBLE_BOOKS
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify([book.to_json(language) for book in books])


@bible_bp.route('/state', methods=['GET'])
def get_reader_state():
    return jsonify(get_state().session.to_json())


@bible_bp.route('/navigate', methods=['POST'])
def navigate():
    """Change language / testament / book / chapter (in that order) and load the result."""
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        payload = NavigatePayload.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    session = get_state().session
    try:
        if payload.lang:
            session.set_language(payload.lang)
        if payload.testament:
            session.select_testament(payload.testament)
        if payload.bookId:
            session.select_book(payload.bookId)
        if payload.chapter:
            session.select_chapter(payload.chapter)
    except KeyError:
        return jsonify({"error": f"Unknown book: {payload.bookId}"}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    applied = session.load()
    return _session_response(applied)


@bible_bp.route('/next', methods=['POST'])
def next_chapter():
    session = get_state().session
    moved = session.go_to_next_chapter()
    applied = session.load() if moved else False
    return _session_response(applied, moved=moved)


@bible_bp.route('/prev', methods=['POST'])
def prev_chapter():
    session = get_state().session
    moved = session.go_to_prev_chapter()
    applied = session.load() if moved else False
    return _session_response(applied, moved=moved)


@bible_bp.route('/load', methods=['POST'])
def load_chapter():
    """Load the current chapter; also the 'Try Again' action after an error."""
    applied = get_state().session.retry()
    return _session_response(applied)


@bible_bp.route('/commentary', methods=['POST'])
def verse_commentary():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        payload = CommentaryPayload.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    state = get_state()
    session = state.session
    try:
        verse = session.select_verse(payload.verseNumber)
    except LookupError as e:
        return jsonify({"error": str(e)}), 404

    reference = session.verse_reference(verse)
    commentary = state.content.get_verse_commentary(reference, verse.text, session.language)
    saved = state.annotations.get(session.verse_ref(verse))
    return jsonify({
        "reference": reference,
        "verse": verse.to_json(),
        "commentary": commentary,
        "key": session.verse_ref(verse).key,
        "isBookmarked": bool(saved and saved.is_bookmarked),
        "highlightColor": saved.highlight_color if saved else None,
    })


@bible_bp.route('/speech', methods=['POST'])
def verse_speech():
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        payload = SpeechPayload.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": validation_message(e)}), 400

    try:
        pcm = get_state().content.generate_speech(payload.text, payload.lang)
    except Exception as e:
        logger.error(f"TTS failed: {str(e)}", exc_info=True)
        return jsonify({"error": AUDIO_ERROR}), 502
    return Response(pcm_to_wav(pcm), mimetype='audio/wav')
