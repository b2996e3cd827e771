import random
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(length=6):
    """Generate a short, shareable room code.

    Uniqueness is not checked here; the caller retries on collision.
    """
    return ''.join(random.choices(CODE_ALPHABET, k=length))
