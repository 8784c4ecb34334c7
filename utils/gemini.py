# utils/gemini.py
import base64
import logging
from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


class GeminiProvider:
    """Thin wrapper over the google-genai client for text/JSON and speech requests.

    Errors from the SDK (google.genai.errors.APIError) propagate unchanged so
    the retry wrapper can classify them.
    """

    def __init__(self, api_key, text_model, speech_model):
        self.api_key = api_key
        self.text_model = text_model
        self.speech_model = speech_model
        self._client = None
        # Defer initialization to first access

    def _get_or_init_client(self):
        if self._client is None:
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY not found")
            logger.info("Initializing Gemini client...")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @property
    def client(self):
        return self._get_or_init_client()

    def generate_text(self, prompt, system_instruction=None, response_schema=None, max_output_tokens=None):
        """Return the response text, or None when the model produced nothing."""
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json" if response_schema is not None else None,
            response_schema=response_schema,
            max_output_tokens=max_output_tokens,
        )
        response = self.client.models.generate_content(
            model=self.text_model,
            contents=prompt,
            config=config,
        )
        return response.text

    def generate_speech(self, prompt, voice_name):
        """Return raw 16-bit mono PCM at 24kHz, or None when no audio came back."""
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name),
                ),
            ),
        )
        response = self.client.models.generate_content(
            model=self.speech_model,
            contents=prompt,
            config=config,
        )

        try:
            data = response.candidates[0].content.parts[0].inline_data.data
        except (AttributeError, IndexError, TypeError):
            return None
        if not data:
            return None
        # The SDK usually decodes inline data already; raw REST payloads are base64
        if isinstance(data, str):
            data = base64.b64decode(data)
        return data
