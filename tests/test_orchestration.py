import pytest

from conftest import (
    NO_RESULTS_PAGE,
    TOO_MANY_RESULTS_PAGE,
    UNKNOWN_LAYOUT_PAGE,
    AsyncFakeTransport,
    FakeTransport,
    license_card,
    results_page,
)
from siareg import Query, Role, Sector, search, search_sync
from siareg.contexts.registry.models import EXPIRY_SENTINEL
from siareg.contexts.scraping.errors import (
    EmptyQueryError,
    NoLicenseContainersFound,
    RecordUnparseable,
    ServerRejected,
    TransportError,
    TransportFailed,
)


def _run(query, outcomes, fetch_config, diagnostics, sleep_recorder):
    transport = FakeTransport(outcomes)
    licenses = search_sync(
        query,
        transport=transport,
        config=fetch_config,
        diagnostics=diagnostics,
        sleep=sleep_recorder,
    )
    return licenses, transport


class TestSearchSync:
    def test_no_results_is_an_empty_list(self, fetch_config, diagnostics, sleep_recorder):
        licenses, transport = _run(
            Query().with_last_name("Nobody"),
            [(200, NO_RESULTS_PAGE)],
            fetch_config,
            diagnostics,
            sleep_recorder,
        )

        assert licenses == []
        assert len(transport.calls) == 1

    def test_too_many_results_is_an_empty_list(self, fetch_config, diagnostics, sleep_recorder):
        licenses, _ = _run(
            Query().with_last_name("Smith"),
            [(200, TOO_MANY_RESULTS_PAGE)],
            fetch_config,
            diagnostics,
            sleep_recorder,
        )

        assert licenses == []

    def test_single_result(self, fetch_config, diagnostics, sleep_recorder):
        licenses, _ = _run(
            Query().with_license_no("1234567890123456"),
            [(200, results_page(license_card(role="Front Line")))],
            fetch_config,
            diagnostics,
            sleep_recorder,
        )

        assert len(licenses) == 1
        assert licenses[0].role is Role.FRONTLINE
        assert licenses[0].sector is Sector.DOOR_SUPERVISION
        assert licenses[0].license_number == "1234567890123456"

    def test_license_query_goes_to_license_endpoint(self, fetch_config, diagnostics, sleep_recorder):
        _, transport = _run(
            Query().with_license_no("1234567890123456"),
            [(200, NO_RESULTS_PAGE)],
            fetch_config,
            diagnostics,
            sleep_recorder,
        )

        assert transport.calls == [
            (fetch_config.search_license_url, {"LicenseNo": "1234567890123456"})
        ]

    def test_name_query_goes_to_name_endpoint(self, fetch_config, diagnostics, sleep_recorder):
        _, transport = _run(
            Query().with_last_name("Smith").with_first_name("John"),
            [(200, NO_RESULTS_PAGE)],
            fetch_config,
            diagnostics,
            sleep_recorder,
        )

        url, fields = transport.calls[0]
        assert url == fetch_config.search_name_url
        assert fields["Surname"] == "Smith"
        assert fields["FirstName"] == "John"

    def test_empty_query_is_rejected_before_sending(self, fetch_config, diagnostics, sleep_recorder):
        transport = FakeTransport([])

        with pytest.raises(EmptyQueryError):
            search_sync(Query(), transport=transport, config=fetch_config, sleep=sleep_recorder)

        assert transport.calls == []

    def test_results_keep_page_order(self, fetch_config, diagnostics, sleep_recorder):
        page = results_page(
            license_card(first_name="ALICE", license_number="1111"),
            license_card(first_name="BOB", license_number="2222", expiry="31 February 2024"),
        )
        licenses, _ = _run(
            Query().with_last_name("Smith"), [(200, page)], fetch_config, diagnostics, sleep_recorder
        )

        assert [lic.first_name for lic in licenses] == ["ALICE", "BOB"]
        assert licenses[1].expiry == EXPIRY_SENTINEL

    def test_unknown_layout_propagates(self, fetch_config, diagnostics, sleep_recorder):
        with pytest.raises(NoLicenseContainersFound):
            _run(
                Query().with_last_name("Smith"),
                [(200, UNKNOWN_LAYOUT_PAGE)],
                fetch_config,
                diagnostics,
                sleep_recorder,
            )

    def test_unparseable_card_propagates(self, fetch_config, diagnostics, sleep_recorder):
        page = results_page("<div class='well'><p>redesigned</p></div>")

        with pytest.raises(RecordUnparseable):
            _run(Query().with_last_name("Smith"), [(200, page)], fetch_config, diagnostics, sleep_recorder)

    def test_exhausted_retries_propagate(self, fetch_config, diagnostics, sleep_recorder):
        with pytest.raises(TransportFailed):
            _run(
                Query().with_last_name("Smith"),
                [TransportError("unreachable")] * 4,
                fetch_config,
                diagnostics,
                sleep_recorder,
            )

        with pytest.raises(ServerRejected):
            _run(
                Query().with_last_name("Smith"),
                [(429, "")] * 4,
                fetch_config,
                diagnostics,
                sleep_recorder,
            )

    def test_query_alias(self, fetch_config, sleep_recorder):
        transport = FakeTransport([(200, results_page(license_card()))])

        licenses = (
            Query()
            .with_last_name("Smith")
            .search_sync(transport=transport, config=fetch_config, sleep=sleep_recorder)
        )

        assert len(licenses) == 1


class TestSearchAsync:
    @pytest.mark.asyncio
    async def test_no_results_is_an_empty_list(self, fetch_config, async_sleep_recorder):
        transport = AsyncFakeTransport([(200, NO_RESULTS_PAGE)])

        licenses = await search(
            Query().with_last_name("Nobody"),
            transport=transport,
            config=fetch_config,
            sleep=async_sleep_recorder,
        )

        assert licenses == []

    @pytest.mark.asyncio
    async def test_single_result_after_retry(self, fetch_config, diagnostics, async_sleep_recorder):
        transport = AsyncFakeTransport(
            [TransportError("reset"), (200, results_page(license_card(sector="Bogus Category")))]
        )

        licenses = await search(
            Query().with_license_no("1234567890123456"),
            transport=transport,
            config=fetch_config,
            diagnostics=diagnostics,
            sleep=async_sleep_recorder,
        )

        assert len(licenses) == 1
        assert licenses[0].sector is Sector.UNKNOWN
        assert diagnostics.messages == ["Unrecognised license sector"]
        assert async_sleep_recorder.delays == [1.0]

    @pytest.mark.asyncio
    async def test_query_alias(self, fetch_config, async_sleep_recorder):
        transport = AsyncFakeTransport([(200, TOO_MANY_RESULTS_PAGE)])

        licenses = await Query().with_last_name("Smith").search(
            transport=transport, config=fetch_config, sleep=async_sleep_recorder
        )

        assert licenses == []

    @pytest.mark.asyncio
    async def test_empty_query_is_rejected(self, fetch_config):
        with pytest.raises(EmptyQueryError):
            await search(Query(), transport=AsyncFakeTransport([]), config=fetch_config)
