"""TLS context creation for the HTTPS listener."""

import ssl
from pathlib import Path


class TLSConfigError(Exception):
    """Certificate or private key could not be loaded."""


def create_ssl_context(cert_file: Path, key_file: Path) -> ssl.SSLContext:
    """Build a server-side SSL context from a PEM certificate and key.

    Args:
        cert_file: Path to the certificate (chain) file
        key_file: Path to the private key file

    Returns:
        SSL context ready to pass to the listener

    Raises:
        TLSConfigError: If either file is missing or cannot be loaded
    """
    for path in (cert_file, key_file):
        if not path.is_file():
            raise TLSConfigError(f"TLS file not found: {path}")

    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    try:
        context.load_cert_chain(certfile=cert_file, keyfile=key_file)
    except (OSError, ssl.SSLError) as e:
        raise TLSConfigError(
            f"Failed to load certificate {cert_file} with key {key_file}: {e}",
        ) from e
    return context
