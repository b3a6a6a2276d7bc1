import socket

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings

router = APIRouter(tags=["System"])


def get_local_ip_address() -> str:
    """First non-loopback IPv4 address of this host, or 127.0.0.1."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # No packets are sent for a UDP connect; it only selects a route
        sock.connect(("10.255.255.255", 1))
        return sock.getsockname()[0]
    except OSError:
        return "127.0.0.1"
    finally:
        sock.close()


@router.get("/health")
async def health_check():
    """Health check endpoint for load balancer"""
    return {"status": "OK", "message": "PortfolioForge API is running"}


@router.get("/api/server-info")
async def server_info(settings: Settings = Depends(get_settings)):
    ip = get_local_ip_address()
    url = settings.public_base_url.rstrip("/") or f"http://{ip}:{settings.port}"
    return {"ip": ip, "port": settings.port, "url": url}
