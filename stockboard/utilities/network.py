"""LAN address helpers for the startup banner.

Peers sharing a board (a partner's phone on the same Wi-Fi, say) reach the
app through the LAN address, so `stockboard.main` prints it next to the
localhost one.
"""
import socket
from typing import Optional, Tuple

LOOPBACK = ("127.0.0.1", "localhost")


def get_local_ip(route_host: str = "8.8.8.8") -> str:
    """Address of the interface the OS would route `route_host` through.

    Connecting a UDP socket sends nothing; '127.0.0.1' when there is no route.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        try:
            s.connect((route_host, 80))
            return str(s.getsockname()[0])
        except OSError:
            return "127.0.0.1"


def server_urls(port: int) -> Tuple[str, Optional[str]]:
    '''(localhost url, LAN url or None when only loopback is available).'''
    local_ip = get_local_ip()
    lan_url = None if local_ip in LOOPBACK else f"http://{local_ip}:{port}"
    return f"http://localhost:{port}", lan_url
