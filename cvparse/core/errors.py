class CVParseError(Exception):
    """Base class for failures raised by the parsing core."""


class NoTextExtractedError(CVParseError):
    """
    The uploaded document produced zero usable lines.

    This is the only hard failure of the pipeline: every other problem
    degrades to placeholder values instead of raising.
    """

    def __init__(self, detail: str = "Could not parse this file: no extractable text found."):
        super().__init__(detail)
        self.detail = detail
