"""Pairing code service.

Issues short-lived, single-use pairing codes bound to a phone number and
verifies them. The ``pairs`` collection is read and written as a whole;
both operations run inside a store transaction so concurrent requests in
this process cannot lose an append or consume a code twice.
"""

import secrets
from datetime import UTC, datetime, timedelta

from pydantic import ValidationError

from pairgate.config import settings
from pairgate.errors import (
    CodeGenerationError,
    InvalidInput,
    NotFoundOrExpired,
    StoreUnavailable,
)
from pairgate.logging_config import get_logger
from pairgate.models.pairing_code import PairingCode
from pairgate.store import PAIRS, JsonFileStore

logger = get_logger(__name__)

CODE_LENGTH = 8
# Exclude ambiguous characters (0/O, 1/I)
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MIN_NUMBER_LENGTH = 10
CODE_GENERATION_ATTEMPTS = 3


def _generate_code() -> str:
    """Generate a random pairing code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


async def load_pairs(store: JsonFileStore) -> list[PairingCode]:
    """Load every stored pairing code in insertion order.

    Raises:
        StoreUnavailable: If the collection cannot be read or is malformed.
    """
    raw = await store.load(PAIRS, default=[])
    if not isinstance(raw, list):
        raise StoreUnavailable("Pairing code collection is not a list")
    try:
        return [PairingCode.model_validate(item) for item in raw]
    except ValidationError as exc:
        logger.error("Malformed pairing code record", error=str(exc))
        raise StoreUnavailable("Pairing code collection is malformed") from exc


async def _save_pairs(store: JsonFileStore, pairs: list[PairingCode]) -> None:
    await store.save(PAIRS, [pair.to_record() for pair in pairs])


async def issue_pair_code(
    store: JsonFileStore,
    number: str | None,
    now: datetime | None = None,
) -> tuple[PairingCode, str]:
    """Issue a new pairing code for a phone number.

    Regenerates a code that collides with a currently active one.

    Args:
        store: Record store holding the ``pairs`` collection.
        number: Caller-supplied phone number (at least 10 characters).
        now: Issue time; defaults to the current UTC time.

    Returns:
        Tuple of (stored record, confirmation message).

    Raises:
        InvalidInput: If the number is missing or too short.
        CodeGenerationError: If no unused code was found.
        StoreUnavailable: If the collection cannot be read or written.
    """
    if not isinstance(number, str) or len(number) < MIN_NUMBER_LENGTH:
        raise InvalidInput("Invalid phone number")

    now = now or datetime.now(UTC)
    ttl_hours = settings.pair_code_ttl_hours

    async with store.transaction(PAIRS):
        pairs = await load_pairs(store)
        active_codes = {pair.code for pair in pairs if pair.is_active(now)}

        for _attempt in range(CODE_GENERATION_ATTEMPTS):
            code = _generate_code()
            if code not in active_codes:
                break
            logger.warning("Generated pair code collides with an active code")
        else:
            raise CodeGenerationError()

        record = PairingCode(
            code=code,
            number=number,
            created=now,
            expires=now + timedelta(hours=ttl_hours),
        )
        pairs.append(record)
        await _save_pairs(store, pairs)

    logger.info(
        "Pair code generated",
        pair_id=record.id,
        code=record.code,
        number=number,
        expires=record.expires.isoformat(),
    )

    return record, f"Pair code generated for {number}. Valid for {ttl_hours} hours."


async def verify_pair_code(
    store: JsonFileStore,
    code: str | None,
    now: datetime | None = None,
) -> PairingCode:
    """Consume an active pairing code.

    The first active record with a matching code, in insertion order, is
    marked used and the whole collection is written back.

    Raises:
        NotFoundOrExpired: If no active record matches. Unknown, used and
            expired codes are deliberately not told apart.
        StoreUnavailable: If the collection cannot be read or written.
    """
    now = now or datetime.now(UTC)

    async with store.transaction(PAIRS):
        pairs = await load_pairs(store)
        pair = next(
            (p for p in pairs if p.code == code and p.is_active(now)),
            None,
        )
        if pair is None:
            logger.debug("Invalid or expired pair code")
            raise NotFoundOrExpired()

        pair.used = True
        pair.used_at = now
        await _save_pairs(store, pairs)

    logger.info(
        "Pair code verified",
        pair_id=pair.id,
        number=pair.number,
    )

    return pair
