"""Domain error types."""


class TranscriptionError(Exception):
    """Base class for every failure surfaced by lazy-whisper."""


class NotInitializedError(TranscriptionError, RuntimeError):
    """Raised when transcription is requested before a model is loaded."""


class ModelLoadError(TranscriptionError):
    """Raised when a speech model cannot be fetched or loaded."""


class ModelResolutionError(ModelLoadError):
    """Raised when a whisper model cannot be resolved to a local path."""


class AudioFetchError(TranscriptionError, OSError):
    """Raised when audio bytes cannot be fetched from a URL or file."""


class AudioFormatError(TranscriptionError, ValueError):
    """Raised when an audio payload is empty, malformed, or unsupported."""


class InvalidArgumentError(TranscriptionError, ValueError):
    """Raised for malformed parameters such as a non-positive sample rate."""


class InferenceError(TranscriptionError):
    """Raised when the inference engine fails on otherwise valid audio."""
