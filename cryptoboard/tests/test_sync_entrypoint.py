"""Command-line sync entry point tests"""

import pytest

from cryptoboard.sync_entrypoint import parse_batch_size


class TestSyncEntrypoint:
    def test_batch_size_argument(self):
        assert parse_batch_size(["sync"]) is None
        assert parse_batch_size(["sync", "100"]) == 100

    def test_invalid_batch_size_exits(self):
        with pytest.raises(SystemExit):
            parse_batch_size(["sync", "abc"])
