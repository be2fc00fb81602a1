"""Fatal analysis errors.

Only these errors escape an analyzer run. Missing or malformed document parts
are reported as findings instead.
"""


class DocumentAnalysisError(Exception):
    """Base class for errors that abort an analysis run."""

    user_message = "Failed to analyze document. Please ensure it is a valid file."


class UnsupportedFileTypeError(DocumentAnalysisError):
    """Raised before analysis when the declared MIME type is not accepted."""

    user_message = "Unsupported file type. Upload a PDF or DOCX document."

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type or 'unknown'}")


class CorruptDocumentError(DocumentAnalysisError):
    """Raised when the top-level container (ZIP archive or PDF) cannot be opened."""

    def __init__(self, file_type: str, reason: str):
        self.file_type = file_type
        self.reason = reason
        super().__init__(f"Could not open {file_type} document: {reason}")
