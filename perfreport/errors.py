"""Exceptions raised while building a performance report."""


class ReportError(Exception):
    """Base class for report generation errors."""


class MalformedInputError(ReportError):
    """A benchmark result is missing a field the report needs."""

    def __init__(self, index: int, field: str):
        self.index = index
        self.field = field
        super().__init__(f"Result #{index} is missing required field '{field}'")


class UnsupportedLocaleError(ReportError):
    """A language switch was requested for an unknown locale code."""

    def __init__(self, lang):
        self.lang = lang
        super().__init__(f"Unsupported locale: {lang!r}")


class UnsupportedFormatError(ReportError):
    """An output format other than json, csv or html was requested."""

    def __init__(self, fmt: str):
        self.fmt = fmt
        super().__init__(
            f"Unsupported report format: {fmt}. Supported formats: json, csv, html"
        )
