"""Tests for pair code issuance and verification."""

import asyncio
import json
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from pairgate.errors import CodeGenerationError, InvalidInput, NotFoundOrExpired, StoreUnavailable
from pairgate.services.pairing import (
    CODE_ALPHABET,
    CODE_LENGTH,
    _generate_code,
    issue_pair_code,
    load_pairs,
    verify_pair_code,
)
from pairgate.store import PAIRS

NUMBER = "15551234567"
T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _record(code: str, created: datetime, used: bool = False) -> dict:
    return {
        "id": f"id-{code}-{created.isoformat()}",
        "code": code,
        "number": NUMBER,
        "created": created.isoformat(),
        "expires": (created + timedelta(hours=24)).isoformat(),
        "used": used,
    }


class TestCodeFormat:
    def test_alphabet_excludes_ambiguous_characters(self):
        assert len(CODE_ALPHABET) == 32
        assert len(set(CODE_ALPHABET)) == 32
        for ch in "01OI":
            assert ch not in CODE_ALPHABET

    def test_generated_codes_use_alphabet(self):
        for _ in range(500):
            code = _generate_code()
            assert len(code) == CODE_LENGTH == 8
            assert set(code) <= set(CODE_ALPHABET)


class TestIssuePairCode:
    async def test_issue_persists_active_record(self, store):
        record, message = await issue_pair_code(store, NUMBER, now=T0)

        assert len(record.code) == 8
        assert set(record.code) <= set(CODE_ALPHABET)
        assert record.number == NUMBER
        assert record.created == T0
        assert record.expires == T0 + timedelta(hours=24)
        assert record.used is False
        assert message == f"Pair code generated for {NUMBER}. Valid for 24 hours."

        pairs = await load_pairs(store)
        assert [p.id for p in pairs] == [record.id]

    async def test_issue_writes_on_disk_field_names(self, store, data_dir):
        await issue_pair_code(store, NUMBER, now=T0)

        raw = json.loads((data_dir / "pairs.json").read_text())
        assert len(raw) == 1
        assert set(raw[0]) == {"id", "code", "number", "created", "expires", "used"}

    async def test_issue_appends_in_order(self, store):
        first, _ = await issue_pair_code(store, NUMBER, now=T0)
        second, _ = await issue_pair_code(store, "15550000000", now=T0)

        pairs = await load_pairs(store)
        assert [p.id for p in pairs] == [first.id, second.id]

    @pytest.mark.parametrize("number", [None, "", "12345", "123456789", 15551234567])
    async def test_invalid_number_rejected_without_side_effect(self, store, number):
        with pytest.raises(InvalidInput) as exc_info:
            await issue_pair_code(store, number)

        assert exc_info.value.message == "Invalid phone number"
        assert await store.exists(PAIRS) is False

    async def test_invalid_number_leaves_existing_collection_unchanged(self, store):
        await issue_pair_code(store, NUMBER, now=T0)

        with pytest.raises(InvalidInput):
            await issue_pair_code(store, "12345", now=T0)

        assert len(await load_pairs(store)) == 1

    async def test_ten_character_number_accepted(self, store):
        record, _ = await issue_pair_code(store, "1234567890")
        assert record.number == "1234567890"

    async def test_regenerates_code_colliding_with_active_code(self, store):
        await store.save(PAIRS, [_record("ABCDEFGH", T0)])

        with patch(
            "pairgate.services.pairing._generate_code",
            side_effect=["ABCDEFGH", "HGFEDCBA"],
        ):
            record, _ = await issue_pair_code(store, NUMBER, now=T0)

        assert record.code == "HGFEDCBA"

    async def test_collision_with_expired_code_tolerated(self, store):
        await store.save(PAIRS, [_record("ABCDEFGH", T0 - timedelta(days=2))])

        with patch(
            "pairgate.services.pairing._generate_code",
            return_value="ABCDEFGH",
        ):
            record, _ = await issue_pair_code(store, NUMBER, now=T0)

        assert record.code == "ABCDEFGH"
        assert len(await load_pairs(store)) == 2

    async def test_gives_up_after_repeated_collisions(self, store):
        await store.save(PAIRS, [_record("ABCDEFGH", T0)])

        with patch(
            "pairgate.services.pairing._generate_code",
            return_value="ABCDEFGH",
        ):
            with pytest.raises(CodeGenerationError):
                await issue_pair_code(store, NUMBER, now=T0)

        assert len(await load_pairs(store)) == 1

    async def test_corrupt_collection_raises_store_unavailable(self, store, data_dir):
        (data_dir / "pairs.json").write_text("{not json")

        with pytest.raises(StoreUnavailable):
            await issue_pair_code(store, NUMBER)


class TestVerifyPairCode:
    async def test_round_trip(self, store):
        record, _ = await issue_pair_code(store, NUMBER, now=T0)

        pair = await verify_pair_code(store, record.code, now=T0 + timedelta(hours=1))
        assert pair.number == NUMBER

        with pytest.raises(NotFoundOrExpired):
            await verify_pair_code(store, record.code, now=T0 + timedelta(hours=2))

    async def test_verification_marks_record_used(self, store, data_dir):
        record, _ = await issue_pair_code(store, NUMBER, now=T0)
        used_at = T0 + timedelta(minutes=5)

        await verify_pair_code(store, record.code, now=used_at)

        pairs = await load_pairs(store)
        assert pairs[0].used is True
        assert pairs[0].used_at == used_at
        raw = json.loads((data_dir / "pairs.json").read_text())
        assert "usedAt" in raw[0]

    async def test_succeeds_just_before_expiry(self, store):
        record, _ = await issue_pair_code(store, NUMBER, now=T0)

        pair = await verify_pair_code(
            store, record.code, now=T0 + timedelta(hours=24) - timedelta(seconds=1)
        )
        assert pair.number == NUMBER

    @pytest.mark.parametrize("after", [timedelta(hours=24), timedelta(days=3)])
    async def test_fails_at_or_after_expiry(self, store, after):
        record, _ = await issue_pair_code(store, NUMBER, now=T0)

        with pytest.raises(NotFoundOrExpired):
            await verify_pair_code(store, record.code, now=T0 + after)

        pairs = await load_pairs(store)
        assert pairs[0].used is False

    async def test_unknown_code_on_empty_collection(self, store):
        for _ in range(3):
            with pytest.raises(NotFoundOrExpired) as exc_info:
                await verify_pair_code(store, "ZZZZZZZZ")
            assert exc_info.value.status_code == 404

        assert await store.exists(PAIRS) is False

    async def test_missing_code_is_not_found(self, store):
        await issue_pair_code(store, NUMBER)

        with pytest.raises(NotFoundOrExpired):
            await verify_pair_code(store, None)

    async def test_rejection_reasons_are_indistinguishable(self, store):
        used, _ = await issue_pair_code(store, NUMBER, now=T0)
        await verify_pair_code(store, used.code, now=T0)
        expired, _ = await issue_pair_code(store, NUMBER, now=T0 - timedelta(days=2))

        messages = set()
        for code in (used.code, expired.code, "ZZZZZZZZ"):
            with pytest.raises(NotFoundOrExpired) as exc_info:
                await verify_pair_code(store, code, now=T0)
            messages.add(exc_info.value.message)

        assert messages == {"Invalid or expired pair code"}

    async def test_first_active_duplicate_is_consumed(self, store):
        await store.save(
            PAIRS,
            [
                _record("ABCDEFGH", T0 - timedelta(days=2)),
                _record("ABCDEFGH", T0),
                _record("ABCDEFGH", T0 + timedelta(minutes=1)),
            ],
        )

        await verify_pair_code(store, "ABCDEFGH", now=T0 + timedelta(hours=1))

        pairs = await load_pairs(store)
        assert [p.used for p in pairs] == [False, True, False]

    async def test_accepts_millisecond_timestamps(self, store):
        await store.save(
            PAIRS,
            [
                {
                    "id": "legacy",
                    "code": "LEGACY22",
                    "number": NUMBER,
                    "created": "2026-01-01T12:00:00.000Z",
                    "expires": "2026-01-02T12:00:00.000Z",
                    "used": False,
                }
            ],
        )

        pair = await verify_pair_code(store, "LEGACY22", now=T0 + timedelta(hours=1))
        assert pair.id == "legacy"


class TestConcurrency:
    async def test_concurrent_issues_do_not_lose_appends(self, store):
        results = await asyncio.gather(
            *(issue_pair_code(store, f"1555000{i:04d}") for i in range(20))
        )

        pairs = await load_pairs(store)
        assert len(pairs) == 20
        assert {p.id for p in pairs} == {record.id for record, _ in results}

    async def test_concurrent_verifications_consume_once(self, store):
        record, _ = await issue_pair_code(store, NUMBER)

        results = await asyncio.gather(
            *(verify_pair_code(store, record.code) for _ in range(5)),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, NotFoundOrExpired)]
        assert len(successes) == 1
        assert len(failures) == 4
