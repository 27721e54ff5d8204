# chaoscrypt/core/limiter.py
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from chaoscrypt.core.config import RATE_LIMITS

logger = logging.getLogger(__name__)

def get_rate_limit_key(request: Request) -> str:
    """
    Rate limiting key: client IP address plus a User-Agent hash so that
    several automated tools behind one address are grouped separately.
    """
    ip = get_remote_address(request)

    user_agent = request.headers.get("user-agent", "unknown")
    user_agent_hash = hash(user_agent) % 10000  # Simple hash for grouping

    return f"anon:{ip}:{user_agent_hash}"

def log_rate_limit_violation(request: Request, limit: str):
    """
    Log rate limit violations. Encryption cost grows with the number of
    iterations per symbol, so repeated hits on the cipher endpoints are
    worth flagging.
    """
    ip = get_remote_address(request)
    user_agent = request.headers.get("user-agent", "unknown")
    endpoint = str(request.url.path)

    log_level = logging.WARNING
    if endpoint.endswith(("/encrypt", "/decrypt")):
        log_level = logging.ERROR

    logger.log(
        log_level,
        f"Rate limit exceeded: {limit} | IP: {ip} | Endpoint: {endpoint} | UA: {user_agent[:100]}"
    )

limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[RATE_LIMITS["default"]],
)
