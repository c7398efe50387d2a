"""テスト共通フィクスチャ。"""

from __future__ import annotations

import pytest

from tests.support import RecordingUi


@pytest.fixture
def recording_ui() -> RecordingUi:
    return RecordingUi()
