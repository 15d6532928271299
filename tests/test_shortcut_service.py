"""Tests for shortcut_service.py: link helpers, metadata decoding and fetching.

No network: every ShortcutService gets a stub opener serving canned responses.
"""

import asyncio
import http.client
import io
import json
import os
import plistlib
import sys
import tempfile
import unittest
import urllib.error
from pathlib import Path
from unittest import mock

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from config import SummarizerConfig
from errors import (
    DecodingFailed,
    InvalidResponse,
    InvalidURL,
    NetworkError,
    ParsingFailed,
    ResourceNotFound,
)
from shortcut_service import (
    FetchedShortcut,
    ShortcutData,
    ShortcutService,
    construct_asset_url,
    extract_shortcut_id,
    load_shortcut_data,
    load_shortcut_data_file,
    normalize_shortcut_link,
    shortcut_data_from_record,
    urllib_opener,
)

RECORD_ID = "86cd1eeabddc44188607238acd4cc7ef"
RECORD_URL = f"https://www.icloud.com/shortcuts/api/records/{RECORD_ID}"
ASSET_URL = "https://cvws.icloud-content.com/B/abc/${f}?o=1"


def _record(record_id=RECORD_ID, name="Upcoming Notes"):
    return {
        "recordName": record_id,
        "fields": {
            "name": {"value": name},
            "icon_color": {"value": 4282601983},
            "icon_glyph": {"value": 59446},
            "icon": {"value": {"downloadURL": "https://cvws.icloud-content.com/icon.png"}},
            "shortcut": {"value": {"downloadURL": ASSET_URL}},
        },
    }


_WORKFLOW = plistlib.dumps(
    {
        "WFWorkflowActions": [
            {
                "WFWorkflowActionIdentifier": "is.workflow.actions.alert",
                "WFWorkflowActionParameters": {"WFAlertActionTitle": "Hello"},
            }
        ]
    }
)


class StubOpener:
    """Serves canned (status, body) pairs by URL and records requests."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, url, timeout_s, user_agent):
        self.calls.append((url, timeout_s, user_agent))
        response = self.responses.get(url)
        if response is None:
            return 404, b""
        if isinstance(response, Exception):
            raise response
        return response


def _service(responses, config=None):
    opener = StubOpener(responses)
    return ShortcutService(config or SummarizerConfig(), opener=opener), opener


class TestLinkHelpers(unittest.TestCase):

    def test_extract_id(self):
        self.assertEqual(extract_shortcut_id(f"https://www.icloud.com/shortcuts/{RECORD_ID}"), RECORD_ID)
        self.assertEqual(extract_shortcut_id(f"https://www.icloud.com/shortcuts/{RECORD_ID}/"), RECORD_ID)
        self.assertEqual(extract_shortcut_id(RECORD_URL), RECORD_ID)
        self.assertEqual(extract_shortcut_id(f"  {RECORD_ID}  "), RECORD_ID)
        self.assertIsNone(extract_shortcut_id(""))

    def test_normalize_link(self):
        self.assertEqual(
            normalize_shortcut_link(RECORD_URL), f"https://www.icloud.com/shortcuts/{RECORD_ID}"
        )
        link = f"https://www.icloud.com/shortcuts/{RECORD_ID}"
        self.assertEqual(normalize_shortcut_link(link), link)

    def test_asset_url(self):
        self.assertEqual(
            construct_asset_url(ASSET_URL),
            "https://cvws.icloud-content.com/B/abc/shortcut.plist?o=1",
        )
        self.assertIsNone(construct_asset_url(None))


class TestShortcutData(unittest.TestCase):

    def test_from_record(self):
        data = shortcut_data_from_record(_record(), RECORD_URL)
        self.assertEqual(data.id, RECORD_ID)
        self.assertEqual(data.name, "Upcoming Notes")
        self.assertEqual(data.icon_glyph, 59446)
        self.assertEqual(data.icon, "keyboard.fill")
        self.assertEqual(data.icloud_link, f"https://www.icloud.com/shortcuts/{RECORD_ID}")
        self.assertTrue(data.shortcut_url.endswith("shortcut.plist?o=1"))

    def test_record_missing_fields(self):
        with self.assertRaises(DecodingFailed):
            shortcut_data_from_record({"recordName": "x", "fields": {}}, "x")
        with self.assertRaises(DecodingFailed):
            shortcut_data_from_record(["not", "a", "record"], "x")

    def test_json_round_trip(self):
        data = shortcut_data_from_record(_record(), RECORD_URL)
        d = data.to_dict()
        self.assertIn("i_cloud_link", d)
        self.assertEqual(ShortcutData.from_dict(d), data)

    def test_load_single_and_array(self):
        obj = {
            "id": "a",
            "name": "A",
            "icon_color": 1,
            "icon_glyph": 59392,
            "i_cloud_link": "https://www.icloud.com/shortcuts/a",
        }
        self.assertEqual(len(load_shortcut_data(json.dumps(obj))), 1)
        self.assertEqual(len(load_shortcut_data(json.dumps([obj, dict(obj, id="b")]))), 2)
        self.assertIsNone(load_shortcut_data(json.dumps(obj))[0].icon_url)

    def test_load_invalid(self):
        with self.assertRaises(DecodingFailed):
            load_shortcut_data("{not json")
        with self.assertRaises(DecodingFailed):
            load_shortcut_data(json.dumps({"id": "a"}))

    def test_load_file(self):
        with self.assertRaises(ResourceNotFound):
            load_shortcut_data_file("/nonexistent/shortcuts.json")
        fd, path = tempfile.mkstemp(suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump([shortcut_data_from_record(_record(), RECORD_URL).to_dict()], f)
            (data,) = load_shortcut_data_file(path)
            self.assertEqual(data.id, RECORD_ID)
        finally:
            os.unlink(path)


class TestShortcutService(unittest.TestCase):

    def test_fetch_metadata(self):
        service, opener = _service({RECORD_URL: (200, json.dumps(_record()).encode())})
        data = service.fetch_metadata(RECORD_ID)
        self.assertEqual(data.name, "Upcoming Notes")
        self.assertEqual(data.icloud_link, f"https://www.icloud.com/shortcuts/{RECORD_ID}")
        url, timeout, agent = opener.calls[0]
        self.assertEqual(url, RECORD_URL)
        self.assertEqual(timeout, 30.0)
        self.assertEqual(agent, "ShortcutSummarizer/1.0")

    def test_fetch_with_actions(self):
        plist_url = construct_asset_url(ASSET_URL)
        service, _ = _service(
            {
                RECORD_URL: (200, json.dumps(_record()).encode()),
                plist_url: (200, _WORKFLOW),
            }
        )
        fetched = service.fetch_shortcut(f"https://www.icloud.com/shortcuts/{RECORD_ID}", with_actions=True)
        self.assertIsInstance(fetched, FetchedShortcut)
        self.assertEqual([a.subtitle for a in fetched.actions], ["Hello"])
        self.assertEqual(fetched.to_dict()["actions"][0]["display_name"], "Show Alert")

    def test_fetch_without_actions(self):
        service, opener = _service({RECORD_URL: (200, json.dumps(_record()).encode())})
        fetched = service.fetch_shortcut(RECORD_ID)
        self.assertIsNone(fetched.actions)
        self.assertNotIn("actions", fetched.to_dict())
        self.assertEqual(len(opener.calls), 1)

    def test_not_found(self):
        service, _ = _service({})
        with self.assertRaises(ResourceNotFound):
            service.fetch_metadata(RECORD_ID)

    def test_server_error(self):
        service, _ = _service({RECORD_URL: (500, b"")})
        with self.assertRaises(InvalidResponse) as ctx:
            service.fetch_metadata(RECORD_ID)
        self.assertEqual(ctx.exception.status_code, 500)

    def test_network_error(self):
        service, _ = _service({RECORD_URL: OSError("connection reset")})
        with self.assertRaises(NetworkError):
            service.fetch_metadata(RECORD_ID)

    def test_truncated_read_is_network_error(self):
        service, _ = _service({RECORD_URL: http.client.IncompleteRead(b"")})
        with self.assertRaises(NetworkError):
            service.fetch_metadata(RECORD_ID)

    def test_bad_json(self):
        service, _ = _service({RECORD_URL: (200, b"<html>")})
        with self.assertRaises(DecodingFailed):
            service.fetch_metadata(RECORD_ID)

    def test_invalid_urls(self):
        service, _ = _service({})
        with self.assertRaises(InvalidURL):
            service.fetch_metadata("   ")
        with self.assertRaises(InvalidURL):
            service.fetch_workflow_actions("ftp://example.com/shortcut.plist")


class TestFetchAll(unittest.TestCase):

    def test_order_and_isolation(self):
        other_id = "ffff0000ffff0000ffff0000ffff0000"
        service, _ = _service(
            {
                RECORD_URL: (200, json.dumps(_record()).encode()),
                f"https://www.icloud.com/shortcuts/api/records/{other_id}": (
                    200,
                    json.dumps(_record(other_id, "Second")).encode(),
                ),
            },
            SummarizerConfig(max_concurrency=2),
        )
        links = [RECORD_ID, "missing0000", other_id]
        results = asyncio.run(service.fetch_all(links))
        self.assertEqual(len(results), 3)
        self.assertEqual(results[0].data.name, "Upcoming Notes")
        self.assertIsInstance(results[1], ResourceNotFound)
        self.assertEqual(results[2].data.name, "Second")

    def test_truncated_read_isolated(self):
        other_id = "ffff0000ffff0000ffff0000ffff0000"
        service, _ = _service(
            {
                RECORD_URL: (200, json.dumps(_record()).encode()),
                f"https://www.icloud.com/shortcuts/api/records/{other_id}": http.client.IncompleteRead(b""),
            }
        )
        results = asyncio.run(service.fetch_all([RECORD_ID, other_id]))
        self.assertEqual(results[0].data.name, "Upcoming Notes")
        self.assertIsInstance(results[1], NetworkError)

    def test_unreadable_workflow_isolated(self):
        other_id = "ffff0000ffff0000ffff0000ffff0000"
        bad_asset = "https://cvws.icloud-content.com/B/bad/${f}?o=1"
        other = _record(other_id, "Second")
        other["fields"]["shortcut"]["value"]["downloadURL"] = bad_asset
        service, _ = _service(
            {
                RECORD_URL: (200, json.dumps(_record()).encode()),
                construct_asset_url(ASSET_URL): (200, _WORKFLOW),
                f"https://www.icloud.com/shortcuts/api/records/{other_id}": (200, json.dumps(other).encode()),
                construct_asset_url(bad_asset): (
                    200,
                    b'<?xml version="1.0"?><plist version="1.0"><dict><key>d</key><date>nope</date></dict></plist>',
                ),
            }
        )
        results = asyncio.run(service.fetch_all([RECORD_ID, other_id], with_actions=True))
        self.assertEqual([a.subtitle for a in results[0].actions], ["Hello"])
        self.assertIsInstance(results[1], ParsingFailed)

    def test_unexpected_error_isolated(self):
        service, _ = _service({RECORD_URL: (200, json.dumps(_record()).encode())})
        other_id = "ffff0000ffff0000ffff0000ffff0000"
        real_fetch = service.fetch_shortcut

        def fetch_shortcut(link, with_actions=False):
            if link == other_id:
                raise RuntimeError("boom")
            return real_fetch(link, with_actions)

        service.fetch_shortcut = fetch_shortcut
        with self.assertLogs("shortcut_service", level="WARNING") as logs:
            results = asyncio.run(service.fetch_all([RECORD_ID, other_id]))
        self.assertEqual(results[0].data.name, "Upcoming Notes")
        self.assertIsInstance(results[1], NetworkError)
        self.assertIsInstance(results[1].underlying, RuntimeError)
        self.assertIn(f"[{other_id}] Fetch failed", logs.output[0])

    def test_sync_wrapper(self):
        service, _ = _service({})
        self.assertEqual(service.fetch_all_sync([]), [])


class TestUrllibOpener(unittest.TestCase):

    def test_http_error_status_returned_and_closed(self):
        body = io.BytesIO(b"not found")
        error = urllib.error.HTTPError(RECORD_URL, 404, "Not Found", {}, body)
        with mock.patch("urllib.request.urlopen", side_effect=error):
            self.assertEqual(urllib_opener(RECORD_URL, 5.0, "Agent/1.0"), (404, b""))
        self.assertTrue(body.closed)

    def test_success(self):
        response = mock.MagicMock()
        response.__enter__.return_value = response
        response.status = 200
        response.read.return_value = b"payload"
        with mock.patch("urllib.request.urlopen", return_value=response) as urlopen:
            self.assertEqual(urllib_opener(RECORD_URL, 5.0, "Agent/1.0"), (200, b"payload"))
        request = urlopen.call_args[0][0]
        self.assertEqual(request.get_header("User-agent"), "Agent/1.0")
        self.assertEqual(urlopen.call_args[1]["timeout"], 5.0)


if __name__ == "__main__":
    unittest.main()
