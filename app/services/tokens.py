import secrets

MAGIC_HASH_BYTES = 32  # 256 bits, 64 hex characters


def generate_magic_hash() -> str:
    """Unguessable, URL-safe token used as the one-click cancellation credential."""
    return secrets.token_hex(MAGIC_HASH_BYTES)
