import io
import unittest
from datetime import datetime
from unittest.mock import MagicMock, patch
from urllib import error

from store_fixtures import TempStoreMixin, sale

from salesdash.core.errors import FetchError
from salesdash.services import seed_service
from salesdash.services.analytics_service import list_transactions
from salesdash.services.seed_service import (
    decode_seed_payload,
    fetch_seed_records,
    initialize_store,
    parse_seed_records,
    validate_seed_url,
)

FEED_URL = "https://feeds.example.com/product_transaction.json"


def _mock_response(body, status=200):
    response = MagicMock()
    response.getcode.return_value = status
    response.read.return_value = body
    urlopen_result = MagicMock()
    urlopen_result.__enter__.return_value = response
    return urlopen_result


class SeedParsingTest(unittest.TestCase):
    def test_feed_shape_is_converted_once(self):
        records = parse_seed_records(
            [
                {
                    "id": 7,
                    "title": "Fjallraven Backpack",
                    "price": "109.95",
                    "description": None,
                    "category": "men's clothing",
                    "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
                    "sold": False,
                    "dateOfSale": "2021-12-01T02:00:00+05:30",
                }
            ]
        )
        record = records[0]
        self.assertEqual(record.source_id, 7)
        self.assertEqual(record.price, 109.95)
        self.assertEqual(record.description, "")
        # Offsets are normalised to UTC before storage.
        self.assertEqual(record.date_of_sale, datetime(2021, 11, 30, 20, 30))
        self.assertIsNone(record.date_of_sale.tzinfo)

    def test_invalid_element_names_its_index(self):
        items = [sale("Fine", 10, 1), sale("Negative", -5, 1)]
        with self.assertRaisesRegex(FetchError, "Seed record 1"):
            parse_seed_records(items)

    def test_missing_date_is_rejected(self):
        item = sale("No Date", 10, 1)
        del item["dateOfSale"]
        with self.assertRaises(FetchError):
            parse_seed_records([item])

    def test_payload_must_be_json_array(self):
        self.assertEqual(decode_seed_payload(b"[]"), [])
        with self.assertRaises(FetchError):
            decode_seed_payload(b'{"title": "x"}')
        with self.assertRaises(FetchError):
            decode_seed_payload(b"not json")

    def test_url_must_be_http(self):
        self.assertEqual(validate_seed_url(FEED_URL), FEED_URL)
        for url in ("file:///tmp/feed.json", "feed.json", "", None):
            with self.subTest(url=url):
                with self.assertRaises(FetchError):
                    validate_seed_url(url)


class FetchSeedRecordsTest(unittest.TestCase):
    def test_returns_decoded_array(self):
        with patch.object(
            seed_service.request,
            "urlopen",
            return_value=_mock_response(b'[{"title": "a"}]'),
        ) as urlopen:
            items = fetch_seed_records(FEED_URL, timeout=5)

        self.assertEqual(items, [{"title": "a"}])
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 5)

    def test_http_error_includes_status_and_body(self):
        http_error = error.HTTPError(FEED_URL, 503, "Service Unavailable", None, io.BytesIO(b"down"))
        with patch.object(seed_service.request, "urlopen", side_effect=http_error):
            with self.assertRaisesRegex(FetchError, "HTTP 503 down"):
                fetch_seed_records(FEED_URL)

    def test_transport_error_is_wrapped(self):
        with patch.object(seed_service.request, "urlopen", side_effect=error.URLError("timed out")):
            with self.assertRaisesRegex(FetchError, "timed out"):
                fetch_seed_records(FEED_URL)

    def test_non_success_status_is_rejected(self):
        with patch.object(
            seed_service.request,
            "urlopen",
            return_value=_mock_response(b"[]", status=302),
        ):
            with self.assertRaises(FetchError):
                fetch_seed_records(FEED_URL)


class InitializeStoreTest(TempStoreMixin, unittest.TestCase):
    def test_replaces_all_records(self):
        self.seed(sale("Old", 10, 5))

        feed = [sale("New A", 20, 5), sale("New B", 30, 5, sold=True)]
        with patch.object(seed_service, "fetch_seed_records", return_value=feed) as fetch:
            result = initialize_store(self.store, url=FEED_URL, timeout=3)

        fetch.assert_called_once_with(FEED_URL, timeout=3)
        self.assertEqual(result.inserted, 2)
        self.assertEqual(result.message, "Database initialized successfully")
        titles = [r.title for r in list_transactions(self.store, 5).transactions]
        self.assertEqual(titles, ["New A", "New B"])

    def test_running_twice_gives_same_end_state(self):
        feed = [sale("A", 20, 5), sale("B", 30, 6)]
        with patch.object(seed_service, "fetch_seed_records", return_value=feed):
            initialize_store(self.store, url=FEED_URL)
            initialize_store(self.store, url=FEED_URL)
        self.assertEqual(self.store.record_count(), 2)

    def test_fetch_failure_keeps_existing_records(self):
        self.seed(sale("Old", 10, 5))
        with patch.object(seed_service, "fetch_seed_records", side_effect=FetchError("offline")):
            with self.assertRaises(FetchError):
                initialize_store(self.store, url=FEED_URL)
        self.assertEqual(self.store.record_count(), 1)

    def test_invalid_feed_keeps_existing_records(self):
        self.seed(sale("Old", 10, 5))
        with patch.object(seed_service, "fetch_seed_records", return_value=[sale("Bad", -1, 5)]):
            with self.assertRaises(FetchError):
                initialize_store(self.store, url=FEED_URL)
        self.assertEqual(self.store.record_count(), 1)


if __name__ == "__main__":
    unittest.main()
