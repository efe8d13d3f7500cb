"""
Unit tests for the remote store clients.
"""

import unittest
from unittest.mock import patch, MagicMock
import sys
import os

import requests

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from remote_store import (
    RemoteStoreError,
    SheetRemoteStore,
    WebAppRemoteStore,
    build_remote_store,
    validate_envelope,
)

URL = "https://script.example.com/macros/s/abc/exec"

def _response(payload=None, json_error=None, http_error=None):
    response = MagicMock()
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if http_error is not None:
        response.raise_for_status.side_effect = http_error
    return response

class TestValidateEnvelope(unittest.TestCase):

    def test_success(self):
        movies = [{"title": "Heat", "year": 1995}]
        self.assertEqual(validate_envelope({"success": True, "movies": movies}), movies)

    def test_failure_envelope(self):
        with self.assertRaises(RemoteStoreError) as ctx:
            validate_envelope({"success": False, "error": "Sheet not found", "movies": []})
        self.assertEqual(str(ctx.exception), "Sheet not found")

    def test_malformed_envelopes(self):
        for payload in (None, [], "ok", {"movies": []}, {"success": "true", "movies": []},
                        {"success": True}, {"success": True, "movies": {"title": "Heat"}}):
            with self.subTest(payload=payload):
                with self.assertRaises(RemoteStoreError):
                    validate_envelope(payload)

class TestWebAppRemoteStore(unittest.TestCase):

    def setUp(self):
        self.store = WebAppRemoteStore(URL, timeout=5)

    @patch('remote_store.requests.get')
    def test_fetch_movies(self, mock_get):
        movies = [{"title": "Heat", "score": 2, "year": 1995}]
        mock_get.return_value = _response({"success": True, "movies": movies})

        self.assertEqual(self.store.fetch_movies(), movies)
        mock_get.assert_called_once_with(URL, timeout=5.0)

    @patch('remote_store.requests.get')
    def test_fetch_transport_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")
        with self.assertRaises(RemoteStoreError):
            self.store.fetch_movies()

    @patch('remote_store.requests.get')
    def test_fetch_http_error(self, mock_get):
        mock_get.return_value = _response(http_error=requests.HTTPError("500 Server Error"))
        with self.assertRaises(RemoteStoreError):
            self.store.fetch_movies()

    @patch('remote_store.requests.get')
    def test_fetch_malformed_json(self, mock_get):
        mock_get.return_value = _response(json_error=ValueError("Expecting value"))
        with self.assertRaises(RemoteStoreError):
            self.store.fetch_movies()

    @patch('remote_store.requests.get')
    def test_fetch_failure_envelope(self, mock_get):
        mock_get.return_value = _response({"success": False, "error": "boom", "movies": []})
        with self.assertRaises(RemoteStoreError):
            self.store.fetch_movies()

    @patch('remote_store.requests.post')
    def test_append_movie(self, mock_post):
        mock_post.return_value = _response({"success": True})
        movie = {"title": "Heat", "score": 2, "notes": "", "date": "1995-12-15"}

        self.assertEqual(self.store.append_movie(movie), {"success": True})
        mock_post.assert_called_once_with(URL, json=movie, timeout=5.0)

    @patch('remote_store.requests.post')
    def test_append_movie_passes_error_envelope(self, mock_post):
        mock_post.return_value = _response({"success": False, "error": "Sheet locked"})
        self.assertEqual(
            self.store.append_movie({"title": "Heat"}),
            {"success": False, "error": "Sheet locked"}
        )

    @patch('remote_store.requests.post')
    def test_append_movie_transport_failure(self, mock_post):
        mock_post.side_effect = requests.Timeout("timed out")
        result = self.store.append_movie({"title": "Heat"})
        self.assertFalse(result["success"])
        self.assertIn("timed out", result["error"])

    @patch('remote_store.requests.post')
    def test_append_movie_non_object_response(self, mock_post):
        mock_post.return_value = _response(["ok"])
        self.assertFalse(self.store.append_movie({"title": "Heat"})["success"])

class TestSheetRemoteStore(unittest.TestCase):

    @patch('remote_store.sheet_store.read_all_movies')
    def test_fetch_movies(self, mock_read):
        spreadsheet = MagicMock()
        mock_read.return_value = {"success": True, "movies": [{"title": "Heat", "year": 1995}]}

        store = SheetRemoteStore(lambda: spreadsheet)

        self.assertEqual(store.fetch_movies(), [{"title": "Heat", "year": 1995}])
        mock_read.assert_called_once_with(spreadsheet)

    @patch('remote_store.sheet_store.read_all_movies')
    def test_fetch_failure_envelope(self, mock_read):
        mock_read.return_value = {"success": False, "error": "quota", "movies": []}
        with self.assertRaises(RemoteStoreError):
            SheetRemoteStore(MagicMock).fetch_movies()

    def test_fetch_without_credentials(self):
        with self.assertRaises(RemoteStoreError):
            SheetRemoteStore(lambda: None).fetch_movies()

    def test_fetch_open_error(self):
        opener = MagicMock(side_effect=Exception("SpreadsheetNotFound"))
        with self.assertRaises(RemoteStoreError):
            SheetRemoteStore(opener).fetch_movies()

    @patch('remote_store.sheet_store.append_movie')
    def test_append_movie(self, mock_append):
        spreadsheet = MagicMock()
        mock_append.return_value = {"success": True}

        result = SheetRemoteStore(lambda: spreadsheet).append_movie({"title": "Heat", "year": 1995})

        self.assertEqual(result, {"success": True})
        mock_append.assert_called_once_with(spreadsheet, {"title": "Heat", "year": 1995})

    def test_append_movie_without_credentials(self):
        result = SheetRemoteStore(lambda: None).append_movie({"title": "Heat"})
        self.assertFalse(result["success"])

class TestBuildRemoteStore(unittest.TestCase):

    def test_url_selects_web_app(self):
        store = build_remote_store(url=URL, spreadsheet_id="sheet-key")
        self.assertIsInstance(store, WebAppRemoteStore)
        self.assertEqual(store.url, URL)

    @patch('remote_store.sheet_store.open_spreadsheet')
    def test_spreadsheet_id_selects_sheet_store(self, mock_open):
        store = build_remote_store(url="", spreadsheet_id="sheet-key")
        self.assertIsInstance(store, SheetRemoteStore)

        mock_open.return_value = None
        with self.assertRaises(RemoteStoreError):
            store.fetch_movies()
        mock_open.assert_called_once_with("sheet-key")

    def test_nothing_configured(self):
        self.assertIsNone(build_remote_store(url="", spreadsheet_id=""))

if __name__ == '__main__':
    unittest.main()
