"""lazy-whisper -- lazily loaded Whisper speech-to-text for URLs and audio blobs."""

__version__ = '0.1.0'
