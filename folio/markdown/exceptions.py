# folio/markdown/exceptions.py
"""
Errors raised by the decoders used during compilation.

None of these are allowed to abort a compile. The stage that calls a
decoder catches the error, logs it and falls back to a visible default.
"""


class FolioError(Exception):
    """Base class for all compiler errors."""


class MetadataDecodeError(FolioError):
    """The front-matter block could not be decoded into a mapping."""


class FenceMiniLanguageDecodeError(FolioError):
    """A ``chart`` or ``network`` fence body could not be decoded."""

    def __init__(self, language: str, message: str):
        super().__init__(f"{language}: {message}")
        self.language = language
