import re

from .config import COMPONENT_NAME_MAX_LENGTH

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")
_EXTENSION = re.compile(r"\.[^.]+$")


def _suffix(mode: str | None) -> str:
    return "Icon" if mode == "icon" else "Logo"


def generate_component_name(
    filename: str,
    custom_name: str | None = None,
    mode: str | None = "icon",
    max_length: int = COMPONENT_NAME_MAX_LENGTH,
) -> str:
    """
    Build a PascalCase component identifier.

    A user supplied name wins when anything alphanumeric survives
    sanitization; otherwise the name is derived from the filename.

    Args:
        filename: Original upload filename (extension is ignored)
        custom_name: Optional user supplied name
        mode: "icon" or "logo", selects the default prefix
        max_length: Maximum length of the identifier

    Returns:
        A non-empty identifier starting with an uppercase letter
        (user supplied names may start with a digit)
    """
    if custom_name and custom_name.strip():
        sanitized = _NON_ALNUM.sub("", custom_name.strip())
        if sanitized:
            return (sanitized[0].upper() + sanitized[1:])[:max_length]

    suffix = _suffix(mode)
    stem = _EXTENSION.sub("", filename or "")
    base_name = "".join(word.capitalize() for word in _NON_ALNUM.split(stem) if word)

    if not re.match(r"[A-Z]", base_name):
        base_name = f"{suffix}{base_name}"

    return base_name[:max_length]
