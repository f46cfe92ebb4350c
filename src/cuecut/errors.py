"""Error types raised by the splitting pipeline"""


class CueCutError(Exception):
    """Base class for every error the pipeline reports to the user"""


class InputError(CueCutError):
    """An input path is neither a directory nor a CUE sheet"""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self):
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class FormatError(CueCutError):
    """
    Malformed sheet text.

    Args:
        message: What is wrong with the sheet
        path: Sheet path, if the text came from a file
        line: 1-based line number of the offending line
    """

    def __init__(self, message, path=None, line=None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self):
        location = self.path or "<sheet>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.message}"


class _TrackError(CueCutError):
    def __init__(self, message, path=None, track=None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.track = track

    def __str__(self):
        parts = []
        if self.path:
            parts.append(str(self.path))
        if self.track is not None:
            parts.append(f"track {self.track}")
        parts.append(self.message)
        return ": ".join(parts)


class ValidationError(_TrackError):
    """Parseable sheet whose track boundaries are inconsistent"""


class TemplateError(_TrackError):
    """Invalid naming template, or a template that renders an unusable path"""


class ExtractionError(_TrackError):
    """The extraction collaborator failed for one track"""
