import secrets
import string
import time

ALPHABET = string.ascii_lowercase + string.digits  # a-z0-9


def generate_short_id(length: int = 9) -> str:
    """
    Generate a cryptographically secure short alphanumeric ID using lowercase letters and digits.

    Example:
        generate_short_id() -> "k3m9x7q2w"
    """
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def _base36(number: int) -> str:
    digits = string.digits + string.ascii_uppercase
    if number == 0:
        return '0'
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return ''.join(reversed(out))


def generate_session_id() -> str:
    """Visitor session id used when the browser did not send one."""
    return f"sess_{int(time.time() * 1000)}_{generate_short_id()}"


def generate_reference_number(prefix: str = "TE") -> str:
    """Human-readable reference such as ``TE-M2K4ZQ1A`` built from the current time."""
    return f"{prefix}-{_base36(int(time.time() * 1000))}"
