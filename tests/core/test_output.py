"""Tests for the unified output helpers."""

import sys
import threading
from pathlib import Path
from unittest.mock import patch

from loguru import logger

from mlradio.core.output import log, setup_loguru


class TestLog:
    """Tests for log()."""

    def test_prints_escaped_message_with_level_style(self) -> None:
        """User text is printed with markup escaped and the level's colour."""
        with patch("mlradio.core.output.safe_print") as printer:
            log("Unknown category [tv]", level="warning")

        printer.assert_called_once_with(r"Unknown category \[tv]", style="yellow")

    def test_info_has_no_style(self) -> None:
        """Info messages are printed unstyled."""
        with patch("mlradio.core.output.safe_print") as printer:
            log("Stopped")

        printer.assert_called_once_with("Stopped", style=None)

    def test_silent_thread_only_logs(self) -> None:
        """Threads flagged silent_logging don't print."""
        with patch("mlradio.core.output.safe_print") as printer:
            worker = threading.Thread(target=log, args=("from background",))
            worker.silent_logging = True
            worker.start()
            worker.join(timeout=2.0)

        printer.assert_not_called()


class TestSetupLoguru:
    """Tests for setup_loguru()."""

    def test_writes_to_log_file(self, tmp_path: Path) -> None:
        """Messages end up in the rotating file sink."""
        log_file = tmp_path / "logs" / "mlradio.log"
        try:
            setup_loguru(log_file, level="DEBUG")
            logger.debug("hello from the test")
            logger.complete()
        finally:
            logger.remove()
            logger.add(sys.stderr)

        content = log_file.read_text(encoding="utf-8")
        assert "Loguru initialized" in content
        assert "hello from the test" in content
