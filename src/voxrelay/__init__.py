"""voxrelay - AI gateway for PDF question answering and audio transcription."""

__version__ = "0.1.0"
