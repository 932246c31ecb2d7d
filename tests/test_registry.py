"""Tests for the link registry."""

import asyncio

import pytest

from linkshort.database.models import Link, Visit
from linkshort.errors import (
    Conflict,
    DuplicateCodeError,
    ExhaustedRetries,
    InvalidInput,
    NotFound,
    StoreError,
    StoreUnavailable,
)
from linkshort.registry import LinkRegistry, MAX_GENERATION_ATTEMPTS
from linkshort.shortcode import ShortCodeGenerator


class TestCreate:
    """Test link creation."""

    async def test_create_generated_code(self, service, test_store, sample_urls):
        """Generated code is well formed and was free before the call."""
        link = await service.create_link(sample_urls[0])

        assert ShortCodeGenerator.validate_format(link.code)
        assert link.url == sample_urls[0]
        assert link.clicks == 0
        assert link.last_clicked_at is None
        assert link.created_at.tzinfo is not None
        assert await test_store.code_exists(link.code)

    async def test_create_with_custom_code(self, service, sample_urls):
        """Test creating with custom code."""
        link = await service.create_link(sample_urls[0], custom_code="test123")

        assert link.code == "test123"

    async def test_empty_custom_code_means_generated(self, service, sample_urls):
        link = await service.create_link(sample_urls[0], custom_code="")

        assert ShortCodeGenerator.validate_format(link.code)

    async def test_create_duplicate_custom_code(self, service, sample_urls):
        """Test duplicate custom code rejection."""
        await service.create_link(sample_urls[0], custom_code="dupe123")

        with pytest.raises(Conflict):
            await service.create_link(sample_urls[1], custom_code="dupe123")

    async def test_custom_codes_are_case_sensitive(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_code="abcDEF")
        link = await service.create_link(sample_urls[1], custom_code="ABCdef")

        assert link.code == "ABCdef"

    @pytest.mark.parametrize("url", ["ftp://example.com", "not-a-url", "", None])
    async def test_invalid_url(self, service, url):
        """Test invalid URL rejection."""
        with pytest.raises(InvalidInput):
            await service.create_link(url)

    @pytest.mark.parametrize("code", ["abc", "abcdefghi", "abc-12", "abc 123", "ab.cde"])
    async def test_invalid_custom_code(self, service, test_store, sample_urls, code):
        with pytest.raises(InvalidInput):
            await service.create_link(sample_urls[0], custom_code=code)

        assert await test_store.count_links() == 0

    async def test_invalid_url_checked_before_code(self, service):
        with pytest.raises(InvalidInput, match="http"):
            await service.create_link("ftp://example.com", custom_code="bad")


class TestGeneratedCodeRetries:
    """Test the bounded retry loop for random codes."""

    async def test_skips_colliding_candidates(self, test_store, logger, sequence_generator, sample_urls):
        generator = sequence_generator(["taken1", "taken1", "fresh1"])
        registry = LinkRegistry(store=test_store, generator=generator, logger=logger)
        await registry.create(sample_urls[0], custom_code="taken1")

        link = await registry.create(sample_urls[1])

        assert link.code == "fresh1"
        assert generator.calls == 3

    async def test_exhausted_after_max_attempts(self, test_store, logger, sequence_generator, sample_urls):
        generator = sequence_generator(["taken1"])
        registry = LinkRegistry(store=test_store, generator=generator, logger=logger)
        await registry.create(sample_urls[0], custom_code="taken1")

        with pytest.raises(ExhaustedRetries):
            await registry.create(sample_urls[1])

        assert generator.calls == MAX_GENERATION_ATTEMPTS
        assert await test_store.count_links() == 1

    async def test_max_attempts_is_configurable(self, test_store, logger, sequence_generator, sample_urls):
        generator = sequence_generator(["taken1"])
        registry = LinkRegistry(store=test_store, generator=generator, logger=logger, max_attempts=3)
        await registry.create(sample_urls[0], custom_code="taken1")

        with pytest.raises(ExhaustedRetries):
            await registry.create(sample_urls[1])

        assert generator.calls == 3

    async def test_succeeds_on_last_attempt(self, test_store, logger, sequence_generator, sample_urls):
        codes = ["taken1"] * (MAX_GENERATION_ATTEMPTS - 1) + ["last01"]
        generator = sequence_generator(codes)
        registry = LinkRegistry(store=test_store, generator=generator, logger=logger)
        await registry.create(sample_urls[0], custom_code="taken1")

        link = await registry.create(sample_urls[1])

        assert link.code == "last01"


class RacingStore:
    """Wraps a store so that the existence check always misses, as if another writer raced us."""

    def __init__(self, inner):
        self.inner = inner

    async def code_exists(self, code):
        return False

    def __getattr__(self, name):
        return getattr(self.inner, name)


class TestInsertRace:
    """The unique constraint settles races that the existence check misses."""

    async def test_custom_code_race_is_conflict(self, test_store, logger, sample_urls):
        registry = LinkRegistry(store=RacingStore(test_store), logger=logger)
        await registry.create(sample_urls[0], custom_code="racer1")

        with pytest.raises(Conflict):
            await registry.create(sample_urls[1], custom_code="racer1")

        link = await test_store.get_link_by_code("racer1")
        assert link.url == sample_urls[0]

    async def test_generated_code_race_retries(self, test_store, logger, sequence_generator, sample_urls):
        generator = sequence_generator(["racer1", "racer2"])
        registry = LinkRegistry(store=RacingStore(test_store), generator=generator, logger=logger)
        await test_store.insert_link(registry._new_link("racer1", sample_urls[0]))

        link = await registry.create(sample_urls[1])

        assert link.code == "racer2"

    async def test_concurrent_creates_same_custom_code(self, service, test_store, sample_urls):
        """Exactly one of many concurrent creators wins."""
        results = await asyncio.gather(
            *[service.create_link(sample_urls[i % 3], custom_code="shared1") for i in range(10)],
            return_exceptions=True,
        )

        winners = [r for r in results if isinstance(r, Link)]
        losers = [r for r in results if isinstance(r, Conflict)]
        assert len(winners) == 1
        assert len(losers) == 9
        assert await test_store.count_links() == 1


class TestLookup:
    """Test get, list and delete."""

    async def test_round_trip(self, service, sample_urls):
        created = await service.create_link(sample_urls[1])

        fetched = await service.get_link(created.code)

        assert fetched.code == created.code
        assert fetched.url == sample_urls[1]
        assert fetched.id == created.id
        assert fetched.visits == []

    async def test_get_not_found(self, service):
        with pytest.raises(NotFound):
            await service.get_link("nope123")

    async def test_get_returns_recent_visits_newest_first(self, test_store, logger, sample_urls):
        registry = LinkRegistry(store=test_store, logger=logger, visit_history_limit=3)
        link = await registry.create(sample_urls[0])
        for minute in range(5):
            visit = Visit(
                id=f"visit-{minute}",
                link_id=link.id,
                created_at=link.created_at.replace(microsecond=0).replace(second=minute),
            )
            await test_store.record_click(link.id, visit)

        fetched = await registry.get(link.code)

        assert [v.id for v in fetched.visits] == ["visit-4", "visit-3", "visit-2"]
        assert fetched.clicks == 5

    async def test_list_newest_first(self, service, sample_urls):
        first = await service.create_link(sample_urls[0])
        await asyncio.sleep(0.001)
        second = await service.create_link(sample_urls[1])

        links = await service.list_links()

        assert [link.code for link in links] == [second.code, first.code]
        assert all(link.visits is None for link in links)

    async def test_list_empty(self, service):
        assert await service.list_links() == []

    async def test_delete_cascades_visits(self, service, test_store, sample_urls):
        link = await service.create_link(sample_urls[0])
        await service.resolve(link.code)
        await service.resolve(link.code)

        await service.delete_link(link.code)

        with pytest.raises(NotFound):
            await service.get_link(link.code)
        assert await test_store.list_visits(link.id, 100) == []
        assert await test_store.count_visits_since(link.created_at) == 0

    async def test_delete_not_found(self, service):
        with pytest.raises(NotFound):
            await service.delete_link("nope123")

    async def test_deleted_code_can_be_reused(self, service, sample_urls):
        await service.create_link(sample_urls[0], custom_code="reuse1")
        await service.delete_link("reuse1")

        link = await service.create_link(sample_urls[1], custom_code="reuse1")

        assert link.url == sample_urls[1]


class FailingStore:
    """Store whose every call fails like an unreachable database."""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise StoreError("connection refused on 10.0.0.5:5432")
        return fail


class TestStoreFailures:
    """Store failures surface as StoreUnavailable without internal detail."""

    @pytest.mark.parametrize(
        "operation, args",
        [
            ("create", ("https://example.com",)),
            ("create", ("https://example.com", "custom1")),
            ("get", ("abc123",)),
            ("list", ()),
            ("delete", ("abc123",)),
        ],
    )
    async def test_translated(self, logger, operation, args):
        registry = LinkRegistry(store=FailingStore(), logger=logger)

        with pytest.raises(StoreUnavailable) as exc_info:
            await getattr(registry, operation)(*args)

        assert "10.0.0.5" not in str(exc_info.value)

    async def test_duplicate_error_is_store_error(self):
        assert issubclass(DuplicateCodeError, StoreError)

    @pytest.mark.parametrize("operation", ["get", "delete"])
    @pytest.mark.parametrize("code", ["\x00abc12", "abc", "abcdefghi", "abc/123"])
    async def test_malformed_code_is_not_found_without_lookup(self, logger, operation, code):
        """A code no link can have never reaches the store."""
        registry = LinkRegistry(store=FailingStore(), logger=logger)

        with pytest.raises(NotFound):
            await getattr(registry, operation)(code)


class TestNonStringInput:
    """Input from loosely typed callers is rejected as InvalidInput."""

    @pytest.mark.parametrize("url", [123, ["https://example.com"], {"href": "https://example.com"}])
    async def test_non_string_url(self, service, url):
        with pytest.raises(InvalidInput, match="URL is required"):
            await service.create_link(url)

    @pytest.mark.parametrize("code", [1234567, 0, ["abc123"], False])
    async def test_non_string_custom_code(self, service, test_store, sample_urls, code):
        with pytest.raises(InvalidInput, match="6-8"):
            await service.create_link(sample_urls[0], custom_code=code)

        assert await test_store.count_links() == 0
