"""ID generators for screens, elements and options.

Identifiers only need to be unique within an editing session so that
selection state stays addressable; they are never parsed.
"""

from __future__ import annotations

import secrets
import string

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 7


def generate_id(length: int = ID_LENGTH, alphabet: str = ID_ALPHABET) -> str:
    """Generate a short random identifier.

    Example:
        >>> generate_id()  # e.g., "k3x9q2a"
    """
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_screen_id() -> str:
    """Generate a screen ID, e.g. "screen_kxqpzab".

    Screen IDs are emitted into the external document, which only accepts
    letters and underscores, so the suffix is letters only.
    """
    return f"screen_{generate_id(alphabet=string.ascii_lowercase)}"


def generate_element_id() -> str:
    """Generate an element ID, e.g. "element_k3x9q2a"."""
    return f"element_{generate_id()}"


def generate_option_id() -> str:
    """Generate an option ID, e.g. "opt_k3x9q2a"."""
    return f"opt_{generate_id()}"
