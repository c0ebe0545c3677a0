# filedrop/services/sanitizer.py
"""Maak door de client aangeleverde namen veilig als padcomponent."""
from pathlib import PurePosixPath

PLACEHOLDER = "unnamed"
MAX_LENGTH = 64
MAX_EXTENSION_LENGTH = 16

# Windows device names; ook met extensie (bv. "CON.txt") gereserveerd
RESERVED_NAMES = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)


def _truncate(name: str) -> str:
    if len(name) <= MAX_LENGTH:
        return name
    stem, dot, ext = name.rpartition(".")
    if dot and stem and len(ext) <= MAX_EXTENSION_LENGTH:
        return stem[: MAX_LENGTH - len(ext) - 1] + "." + ext
    return name[:MAX_LENGTH]


def sanitize(raw: str) -> str:
    """
    Strip pad, null bytes en alles buiten [A-Za-z0-9._-].
    Faalt nooit: een lege uitkomst wordt PLACEHOLDER.
    """
    # alleen de laatste padcomponent telt, ook bij Windows-scheidingstekens
    name = PurePosixPath(raw.replace("\\", "/")).name
    name = "".join(
        ch if (ch.isascii() and ch.isalnum()) or ch in (".", "-", "_") else "_"
        for ch in name
    )
    name = name.lstrip(".")
    name = _truncate(name).rstrip(". ")

    if not name:
        return PLACEHOLDER
    if name.split(".", 1)[0].upper() in RESERVED_NAMES:
        name = f"_{name}"
    return name
