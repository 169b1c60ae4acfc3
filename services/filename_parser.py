"""Guess client and project names from external file names."""

import re
from dataclasses import dataclass

_EXTENSION = re.compile(r"\.[^/.]+$")
_PREFIXED = re.compile(r"^(invoice|proposal)", re.IGNORECASE)
_PREFIXED_SEPARATORS = re.compile(r"[-_\s]+")
_WHITESPACE = re.compile(r"\s+")

FILE_TYPES = {
    "pdf": "PDF Document",
    "doc": "Word Document",
    "docx": "Word Document",
    "xls": "Excel Spreadsheet",
    "xlsx": "Excel Spreadsheet",
    "ppt": "PowerPoint Presentation",
    "pptx": "PowerPoint Presentation",
    "txt": "Text File",
    "jpg": "Image",
    "jpeg": "Image",
    "png": "Image",
    "gif": "Image",
    "zip": "Archive",
    "rar": "Archive",
}


@dataclass(frozen=True)
class ParsedFileName:
    """Best-effort guess; either field may be None."""

    client_name: str | None = None
    project_name: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.client_name and self.project_name)


def _present(value: str | None) -> str | None:
    return value if value else None


def parse_file_name(file_name: str) -> ParsedFileName:
    """
    Parse a file name into (client_name, project_name).

    Rules, first match wins:
      "Invoice_Acme_Roof_2024.pdf"  -> ("Acme", "Roof")
      "Acme - Roof Replacement.pdf" -> ("Acme", "Roof Replacement")
      "Acme Roof"                   -> ("Acme Roof", "Roof")
      "report.pdf"                  -> (None, None)
    """
    stem = _EXTENSION.sub("", file_name)
    client_name = None
    project_name = None

    if _PREFIXED.match(stem):
        parts = _PREFIXED_SEPARATORS.split(stem)
        if len(parts) >= 3:
            client_name = parts[1].strip()
            project_name = parts[2].strip()
    elif "-" in stem or "_" in stem:
        separator = "-" if "-" in stem else "_"
        parts = stem.split(separator)
        client_name = parts[0].strip()
        project_name = " ".join(parts[1:]).strip()
    else:
        words = _WHITESPACE.split(stem)
        if len(words) >= 2:
            client_name = " ".join(words[:2])
            project_name = " ".join(words[2:]) or words[1]

    return ParsedFileName(
        client_name=_present(client_name),
        project_name=_present(project_name),
    )


def get_file_type(file_name: str) -> str:
    """Human-readable file type from the extension, "Unknown" when unmapped."""
    extension = file_name.rsplit(".", 1)[-1].lower()
    return FILE_TYPES.get(extension, "Unknown")
