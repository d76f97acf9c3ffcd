"""Unity localization translator - extract, translate and re-inject Term/data dumps."""

__version__ = "1.0.0"
