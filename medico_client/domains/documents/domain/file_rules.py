"""File Rules.

Local gate applied before any upload call: file name, size limit and
accepted MIME types. Also infers MIME types from extensions and formats
sizes for display.
"""

from dataclasses import dataclass, field

from medico_client.core.domain.exceptions import ValidationException

# Extension -> MIME type
EXTENSION_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".dcm": "application/dicom",
    ".dicom": "application/dicom",
}


def mime_type_from_name(file_name: str) -> str | None:
    """Infer the MIME type from the file extension, None when unknown."""
    dot = file_name.rfind(".")
    if dot < 0:
        return None
    return EXTENSION_MIME_TYPES.get(file_name[dot:].lower())


def format_file_size(size_bytes: int) -> str:
    """Human readable size: ``0 Bytes``, ``1.5 KB``, ``100 MB``."""
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1
    value = round(size_bytes / 1024**exponent, 2)
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[exponent]}"


@dataclass
class FileValidator:
    """Validate a candidate upload.

    Example:
        >>> FileValidator(max_size_bytes=100 * 1024 * 1024).validate("scan.pdf", 1024, "application/pdf")
    """

    max_size_bytes: int
    allowed_mime_types: list[str] = field(default_factory=lambda: sorted(set(EXTENSION_MIME_TYPES.values())))

    @property
    def max_size_label(self) -> str:
        return f"{self.max_size_bytes // (1024 * 1024)}MB"

    def resolve_mime_type(self, file_name: str, mime_type: str | None) -> str:
        """Declared type if given, otherwise inferred from the extension.

        Raises:
            ValidationException: If no type is declared and the extension is unknown.
        """
        if mime_type:
            return mime_type.strip().lower()
        inferred = mime_type_from_name(file_name)
        if inferred is None:
            raise ValidationException(
                "Unsupported file type. Please upload PDF, JPEG, PNG or DICOM files.",
                field="mime_type",
            )
        return inferred

    def validate(self, file_name: str, size_bytes: int, mime_type: str) -> None:
        """Raise ``ValidationException`` for the first rule the file breaks."""
        if not file_name or not file_name.strip():
            raise ValidationException("Please select a file to upload.", field="file_name")

        if size_bytes <= 0:
            raise ValidationException("The selected file is empty.", field="size_bytes")

        if size_bytes > self.max_size_bytes:
            raise ValidationException(
                f"File is too large ({format_file_size(size_bytes)}). "
                f"Maximum size is {self.max_size_label}.",
                field="size_bytes",
                details={"size_bytes": size_bytes, "max_size_bytes": self.max_size_bytes},
            )

        if mime_type not in self.allowed_mime_types:
            raise ValidationException(
                f"Unsupported file type '{mime_type}'. Please upload PDF, JPEG, PNG or DICOM files.",
                field="mime_type",
            )
