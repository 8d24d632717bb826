import logging

logger = logging.getLogger(__name__)

REMOTE_SUFFIX = ".git"


def is_remote_location(location: str) -> bool:
    """Remote locations are repository URLs ending in ``.git``."""
    return location.endswith(REMOTE_SUFFIX)


def get_package_name(location: str) -> str:
    """
    Derive a package name from its location.

    The name is the last path segment. For remote locations everything from
    the first ``.git`` onwards is dropped; for local paths ending in a
    separator the second-to-last segment is used instead.

    Args:
        location: Repository URL or local checkout path

    Returns:
        Package name, possibly empty for degenerate locations
    """
    components = location.split("/")
    last_component = components[-1]

    if is_remote_location(location):
        return last_component.split(REMOTE_SUFFIX)[0]

    if not last_component and len(components) > 1:
        return components[-2]

    return last_component


def parse_location(text: str) -> str:
    """
    Validate a package location string.

    Args:
        text: Candidate location

    Returns:
        The location unchanged

    Raises:
        ValueError: If the location is empty, contains whitespace or control
            characters, or does not yield a usable package name
    """
    if not text:
        raise ValueError("Empty package location")

    if any(c.isspace() or not c.isprintable() for c in text):
        raise ValueError(f"Invalid characters in package location: {text!r}")

    name = get_package_name(text)
    if name in ("", ".", ".."):
        raise ValueError(f"Could not derive a package name from {text!r}")

    logger.debug(f"Parsed location {text!r} as package '{name}'")
    return text
