# parking_gate/security.py
"""
Caller identity for user-facing endpoints.
Authentication happens upstream (the app's identity provider + gateway); the
gateway forwards the verified user id in X-User-Id. Identity is never taken
from the request body.
"""

import ipaddress
from typing import Optional

from fastapi import Header

from parking_gate.errors import Unauthenticated

USER_HEADER = "X-User-Id"


def get_current_user_id(x_user_id: Optional[str] = Header(default=None, alias=USER_HEADER)) -> str:
    """FastAPI dependency: the verified caller's user id."""
    if not x_user_id or not x_user_id.strip():
        raise Unauthenticated("User must be signed in")
    return x_user_id.strip()


def host_in_networks(host: Optional[str], networks: list) -> bool:
    """True if host is an IP address inside any of the networks (see Settings.HARDWARE_NETWORKS)."""
    if not host:
        return False
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return any(address in net for net in networks)
