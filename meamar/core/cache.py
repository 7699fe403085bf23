from typing import Any, Optional
import hashlib
import json
import logging
import redis
from meamar.core.config import settings

logger = logging.getLogger(__name__)

redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)

def set_cache(key: str, value: Any, expire: int = 3600) -> bool:
    """
    Set a cache value with expiration time (default 1 hour)
    """
    try:
        redis_client.setex(key, expire, json.dumps(value))
        return True
    except redis.RedisError:
        logger.warning("Redis write failed", extra={"key": key}, exc_info=True)
        return False

def get_cache(key: str) -> Optional[Any]:
    """
    Get a cached value
    """
    try:
        data = redis_client.get(key)
        return json.loads(data) if data else None
    except redis.RedisError:
        logger.warning("Redis read failed", extra={"key": key}, exc_info=True)
        return None

def delete_cache(key: str) -> bool:
    """
    Delete a cached value
    """
    try:
        redis_client.delete(key)
        return True
    except redis.RedisError:
        logger.warning("Redis delete failed", extra={"key": key}, exc_info=True)
        return False

def _revocation_key(token: str) -> str:
    return "revoked:" + hashlib.sha256(token.encode()).hexdigest()

def revoke_token(token: str, ttl: int) -> bool:
    """Mark a session token as logged out until it would have expired anyway"""
    return set_cache(_revocation_key(token), True, expire=max(ttl, 1))

def is_token_revoked(token: str) -> bool:
    return bool(get_cache(_revocation_key(token)))

def store_login_state(state: str, expire: int) -> bool:
    return set_cache(f"login_state:{state}", True, expire=expire)

def consume_login_state(state: str) -> bool:
    """Returns True once for a state issued by /login, False afterwards"""
    found = bool(get_cache(f"login_state:{state}"))
    if found:
        delete_cache(f"login_state:{state}")
    return found
