from typing import AsyncIterable, AsyncIterator

from cors_relay.core.logging_config import setup_logging

logger = setup_logging()


async def cap_bytes(chunks: AsyncIterable[bytes], max_bytes: int) -> AsyncIterator[bytes]:
    """Yield *chunks* in order until their running total would pass *max_bytes*.

    The chunk that crosses the cap is dropped and nothing more is pulled from
    *chunks*, so at most ``max_bytes`` bytes are ever yielded. Truncation is
    logged, not raised: the consumer just sees the sequence end early.
    The caller owns *chunks* and is responsible for closing its source.
    """
    sent = 0
    async for chunk in chunks:
        if not chunk:
            continue
        sent += len(chunk)
        if sent > max_bytes:
            logger.warning("Stream truncated at byte cap", max_bytes=max_bytes, forwarded=sent - len(chunk))
            return
        yield chunk
