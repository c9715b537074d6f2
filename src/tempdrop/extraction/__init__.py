from .audio_extractor import AudioExtractor, MediaInfo, format_duration

__all__ = ["AudioExtractor", "MediaInfo", "format_duration"]
