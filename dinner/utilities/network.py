import logging
import socket
from typing import Optional

import httpx

from dinner.utilities.config import FETCH_TIMEOUT_SECONDS
from dinner.utilities.constants import FETCH_USER_AGENT

"""Network helper utilities.

`get_local_ip` returns a usable LAN address for the startup banner in
`dinner.main`. `fetch_page` downloads a recipe page for the importer.
"""

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The page could not be downloaded (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def get_local_ip() -> str:
    """Return a non-loopback local IP address if possible, otherwise '127.0.0.1'.

    The implementation uses a UDP socket to ask the OS which interface would
    be selected to reach a public IP; it does not send any data on the wire.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # Doesn't actually send data but forces the OS to pick a source IP
        s.connect(("8.8.8.8", 80))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = "127.0.0.1"
    finally:
        s.close()
    return ip


def fetch_page(url: str, http: Optional[httpx.Client] = None) -> str:
    """GET a page as text with the importer's User-Agent. Raises FetchError."""
    client = http or httpx.Client(timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True)
    try:
        resp = client.get(url, headers={"User-Agent": FETCH_USER_AGENT})
    except httpx.HTTPError as e:
        logger.warning("Fetching %s failed: %s", url, e)
        raise FetchError(f"Fetch failed: {e}") from e
    finally:
        if http is None:
            client.close()
    if not resp.is_success:
        raise FetchError(f"Fetch failed: {resp.status_code}", resp.status_code)
    return resp.text
