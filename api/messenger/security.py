"""HTTP client for webhook delivery, with an optional private-network guard."""

import asyncio
import ipaddress
import logging
import socket

import httpx

logger = logging.getLogger(__name__)

_BLOCKED_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

_BLOCKED_HOSTNAMES = {
    "localhost",
    "metadata",
    "metadata.google.internal",
}


def _is_ip_blocked(ip_str: str) -> bool:
    try:
        ip = ipaddress.ip_address(ip_str)
        return any(ip in network for network in _BLOCKED_NETWORKS)
    except ValueError:
        return True


async def is_private_host(hostname: str) -> bool:
    """True if the hostname is blocked or resolves to a private/reserved address."""
    if hostname.lower() in _BLOCKED_HOSTNAMES:
        return True
    loop = asyncio.get_running_loop()
    try:
        addr_infos = await loop.getaddrinfo(hostname, None, family=socket.AF_UNSPEC, type=socket.SOCK_STREAM)
    except socket.gaierror:
        return False  # let the connection attempt report the DNS failure
    return any(_is_ip_blocked(sockaddr[0]) for _, _, _, _, sockaddr in addr_infos)


class GuardedTransport(httpx.AsyncHTTPTransport):
    """Async transport that can refuse hosts on private networks."""

    def __init__(self, block_private_hosts: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.block_private_hosts = block_private_hosts

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        hostname = request.url.host
        if self.block_private_hosts and hostname and await is_private_host(hostname):
            raise httpx.ConnectError(f"Blocked private host: {hostname}", request=request)
        return await super().handle_async_request(request)


def safe_http_client(
    timeout: float = 10,
    verify_ssl: bool = True,
    block_private_hosts: bool = False,
    **kwargs,
) -> httpx.AsyncClient:
    transport = GuardedTransport(block_private_hosts=block_private_hosts, verify=verify_ssl)
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=False,
        transport=transport,
        **kwargs,
    )
