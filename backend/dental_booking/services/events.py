"""
backend/dental_booking/services/events.py

Event emitter: pushes events to the Redis list `events:p2p` for
notification consumers (confirmation e-mail, dentist dashboard).
"""

import json
import time
import logging
from typing import Optional

from redis import Redis

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

P2P_QUEUE = "events:p2p"


def emit_event(event_type: str, payload: dict, redis: Optional[Redis] = None) -> bool:
    """
    Emit a p2p event.

    Delivery is best effort: a Redis failure is logged and never fails the
    caller's operation. Returns True when the event was queued.
    """
    client = redis if redis is not None else redis_client
    if client is None:
        logger.debug(f"Redis not configured, event dropped: {event_type}")
        return False

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        client.rpush(P2P_QUEUE, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {P2P_QUEUE}")
        return True
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
        return False
