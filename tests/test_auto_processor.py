"""Tests for the pending-submission poller."""
from unittest.mock import MagicMock

import pytest
import requests

from scorer.workers import auto_processor


class TestRunOnce:
    """Test suite for run_once."""

    def test_success(self, api_key):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200, json=lambda: {"status": "ok", "count": 2})
        assert auto_processor.run_once(session) == {"status": "ok", "count": 2}
        _, kwargs = session.post.call_args
        assert kwargs["headers"] == {"Authorization": f"Bearer {api_key}"}

    def test_unexpected_status(self):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=500, text="boom")
        assert auto_processor.run_once(session) is None

    def test_connection_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        assert auto_processor.run_once(session) is None

    def test_non_json_body(self):
        """An HTML page with status 200 is logged and skipped, not raised."""
        response = MagicMock(status_code=200, text="<html>gateway</html>")
        response.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        session = MagicMock()
        session.post.return_value = response
        assert auto_processor.run_once(session) is None

    def test_non_object_body(self):
        session = MagicMock()
        session.post.return_value = MagicMock(status_code=200, json=lambda: ["unexpected"])
        assert auto_processor.run_once(session) is None

    def test_unauthorized_body_not_parsed(self):
        response = MagicMock(status_code=403, text="Invalid token")
        session = MagicMock()
        session.post.return_value = response
        assert auto_processor.run_once(session) is None
        response.json.assert_not_called()


class TestMain:
    """Test suite for the polling loop."""

    def test_loop_survives_failed_poll(self, monkeypatch):
        calls = []

        def fake_run_once(session):
            calls.append(session)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return None

        def fake_sleep(_seconds):
            if len(calls) >= 2:
                raise KeyboardInterrupt

        monkeypatch.setattr(auto_processor, "run_once", fake_run_once)
        monkeypatch.setattr(auto_processor.time, "sleep", fake_sleep)
        with pytest.raises(KeyboardInterrupt):
            auto_processor.main()
        assert len(calls) == 2
