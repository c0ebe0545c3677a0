# filedrop/services/naming.py
from uuid import uuid4


def split_extension(filename: str) -> tuple[str, str | None]:
    """'report.tar.gz' -> ('report.tar', 'gz'); geen of lege suffix -> None."""
    stem, dot, ext = filename.rpartition(".")
    if not dot or not stem or not ext:
        return filename, None
    return stem, ext


def build_stored_name(original_filename: str, identifier: str, category: str) -> str:
    """
    Bestandsnaam op disk: '{stem}-{identifier}-{category}-{uuid4}[.{ext}]'.
    identifier/category moeten al gesanitized zijn.
    """
    stem, ext = split_extension(original_filename)
    # uuid4 komt uit os.urandom
    name = f"{stem}-{identifier}-{category}-{uuid4()}"
    return f"{name}.{ext}" if ext else name
