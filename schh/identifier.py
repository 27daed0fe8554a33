"""Session identifier canonicalization and construction.

Every screen session schh manages is named ``schh_<host>_<label>``, where
both parts are canonical tokens. Building (by concatenation) and parsing
(by prefix) stay exact inverses only if ids are produced here.
"""

SESSION_NAMESPACE = "schh"
MAX_TOKEN_LENGTH = 120
MAX_SESSION_ID_LENGTH = 240


class InvalidIdentityError(ValueError):
    """Raised when a host/session pair cannot form a valid session id."""

    pass


def canonicalize(text: str) -> str:
    """Reduce arbitrary text to a token safe for screen session names.

    Rules:
    - a-z, 0-9, "-" and "_" pass through
    - A-Z are lowercased
    - "." becomes "-"
    - anything else is dropped

    Examples:
    - "Web1.Prod" -> "web1-prod"
    - "my session!" -> "mysession"
    - "ünïcode" -> "ncode"

    The result is truncated to MAX_TOKEN_LENGTH emitted characters.
    """
    chars = []
    for char in text:
        if len(chars) >= MAX_TOKEN_LENGTH:
            break
        if "a" <= char <= "z" or "0" <= char <= "9" or char in "-_":
            chars.append(char)
        elif "A" <= char <= "Z":
            chars.append(char.lower())
        elif char == ".":
            chars.append("-")
    return "".join(chars)


def session_prefix(host_name: str) -> str:
    """Namespace prefix shared by all sessions of a host.

    Returns an empty string when the host name has no usable characters.
    """
    host_token = canonicalize(host_name)
    if not host_token:
        return ""
    return f"{SESSION_NAMESPACE}_{host_token}_"


def build_session_id(host_name: str, session_name: str) -> str:
    """Compose the screen session id for a host and a session label.

    Raises
    ------
    InvalidIdentityError
        If either part canonicalizes to nothing, or the id would reach
        MAX_SESSION_ID_LENGTH characters.
    """
    prefix = session_prefix(host_name)
    label_token = canonicalize(session_name)
    if not prefix or not label_token:
        raise InvalidIdentityError("invalid host or session name")

    session_id = f"{prefix}{label_token}"
    if len(session_id) >= MAX_SESSION_ID_LENGTH:
        raise InvalidIdentityError("session identifier too long")
    return session_id
