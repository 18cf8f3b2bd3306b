from .gemini import TextGenerator
from .google_tts import SpeechSynthesizer

__all__ = [
    'TextGenerator',
    'SpeechSynthesizer',
]
