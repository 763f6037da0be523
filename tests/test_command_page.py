"""
tests/test_command_page.py

Command page behaviour through Streamlit's AppTest harness. HTTP calls are
replaced so the page never reaches a live API.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import requests
from streamlit.testing.v1 import AppTest

from analytics.aggregator import aggregate
from analytics.classifier import FileDescriptor
from analytics.insights import FALLBACK_MESSAGE

APP_DIR = Path(__file__).resolve().parents[1] / "app"
PAGE = APP_DIR / "pages" / "02_Command.py"


@pytest.fixture()
def page(monkeypatch, small_regions) -> AppTest:
    monkeypatch.syspath_prepend(str(APP_DIR))
    summary = aggregate(
        [FileDescriptor("biometric_jan.csv", 1024)],
        small_regions,
        np.random.default_rng(5),
    )
    at = AppTest.from_file(str(PAGE), default_timeout=30)
    at.session_state["summary"] = summary.to_dict()
    return at


def _button(at: AppTest, label: str):
    return next(b for b in at.button if b.label == label)


class TestInsightPanel:
    def test_unreachable_api_shows_fallback(self, page, monkeypatch) -> None:
        def unreachable(*args, **kwargs):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(requests, "post", unreachable)
        page.run()
        assert not page.exception

        _button(page, "Generate social trends").click().run()

        assert not page.exception
        assert FALLBACK_MESSAGE in [i.value for i in page.info]
        assert page.session_state["insight"] == {"text": FALLBACK_MESSAGE, "fallback": True}

    def test_reply_is_shown(self, page, monkeypatch) -> None:
        class _Reply:
            def raise_for_status(self) -> None:
                pass

            def json(self) -> dict:
                return {"text": "Youth enrolment is rising.", "fallback": False}

        monkeypatch.setattr(requests, "post", lambda *args, **kwargs: _Reply())
        page.run()
        _button(page, "Generate social trends").click().run()

        assert not page.exception
        assert any("Youth enrolment is rising." in m.value for m in page.markdown)
        assert FALLBACK_MESSAGE not in [i.value for i in page.info]
