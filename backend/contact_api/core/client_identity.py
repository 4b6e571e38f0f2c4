from typing import Optional

from fastapi import Request

UNKNOWN_CLIENT = "unknown"


def client_id_from(forwarded: Optional[str], remote_address: Optional[str]) -> str:
    """First hop of X-Forwarded-For, else the socket peer, else "unknown"."""
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return remote_address or UNKNOWN_CLIENT


def resolve_client_id(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    remote_address = request.client.host if request.client else None
    return client_id_from(forwarded, remote_address)
