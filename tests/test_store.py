"""
Tests for the append-only mapping store.
"""
import logging
import signal

import pytest

from shortener_app.exceptions import StoreError
from shortener_app.models.url import URLMapping
from shortener_app.storage.store import URLStore, format_record, parse_record


class TestRecordFormat:

    def test_format_record(self):
        mapping = URLMapping(alias="aB3xY", long_url="https://example.com/a?b=c")
        assert format_record(mapping) == "aB3xY https://example.com/a?b=c\n"

    def test_parse_record(self):
        assert parse_record("aB3xY https://example.com") == URLMapping(
            alias="aB3xY", long_url="https://example.com"
        )

    @pytest.mark.parametrize("line", [
        "nodelimiter",
        " https://example.com",
        "aB3xY ",
        "aB3xY https://example.com extra",
    ])
    def test_parse_rejects_corrupt_lines(self, line):
        assert parse_record(line) is None


class TestURLStore:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "urls.txt"

        store = URLStore(path, fsync=False)
        store.close()

        assert path.exists()
        assert path.read_text() == ""

    def test_append_then_load(self, tmp_path):
        path = tmp_path / "urls.txt"
        store = URLStore(path, fsync=False)

        store.append(URLMapping("abcde", "https://example.com"))
        store.append(URLMapping("fghij", "http://python.org/doc"))

        assert path.read_text(encoding="utf-8") == (
            "abcde https://example.com\nfghij http://python.org/doc\n"
        )
        assert list(store.load()) == [
            URLMapping("abcde", "https://example.com"),
            URLMapping("fghij", "http://python.org/doc"),
        ]
        store.close()

    def test_load_skips_malformed_lines(self, tmp_path, caplog):
        path = tmp_path / "urls.txt"
        path.write_bytes(
            b"abcde https://example.com\n"
            b"\n"
            b"garbage\n"
            b"x y z\n"
            b"\xff\xfe bad\n"
            b"fghij https://example.org\r\n"
        )

        store = URLStore(path, fsync=False)
        with caplog.at_level(logging.WARNING):
            mappings = list(store.load())
        store.close()

        assert mappings == [
            URLMapping("abcde", "https://example.com"),
            URLMapping("fghij", "https://example.org"),
        ]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 3

    def test_failed_append_is_rolled_back(self, tmp_path, monkeypatch):
        path = tmp_path / "urls.txt"
        store = URLStore(path, fsync=True)
        store.append(URLMapping("abcde", "https://example.com"))

        def failing_fsync(fd):
            raise OSError("disk full")

        monkeypatch.setattr("shortener_app.storage.store.os.fsync", failing_fsync)

        with pytest.raises(StoreError):
            store.append(URLMapping("fghij", "https://example.org"))

        store.close()
        assert path.read_text() == "abcde https://example.com\n"

    def test_failed_write_leaves_nothing_for_next_append(self, tmp_path):
        """A write refused by the OS must not resurface with a later record"""
        resource = pytest.importorskip("resource")
        path = tmp_path / "urls.txt"
        store = URLStore(path, fsync=False)
        store.append(URLMapping("aaaaa", "https://first.example"))  # 28 bytes

        previous_handler = signal.signal(signal.SIGXFSZ, signal.SIG_IGN)
        soft, hard = resource.getrlimit(resource.RLIMIT_FSIZE)
        resource.setrlimit(resource.RLIMIT_FSIZE, (40, hard))
        try:
            with pytest.raises(StoreError):
                store.append(URLMapping("ghost", "https://failed.example/" + "x" * 40))
        finally:
            resource.setrlimit(resource.RLIMIT_FSIZE, (soft, hard))
            signal.signal(signal.SIGXFSZ, previous_handler)

        assert path.read_text() == "aaaaa https://first.example\n"

        store.append(URLMapping("bbbbb", "https://second.example"))
        store.close()

        assert path.read_text() == (
            "aaaaa https://first.example\n"
            "bbbbb https://second.example\n"
        )

    def test_append_after_close_raises_store_error(self, tmp_path):
        store = URLStore(tmp_path / "urls.txt", fsync=False)
        store.close()

        assert store.closed
        with pytest.raises(StoreError):
            store.append(URLMapping("abcde", "https://example.com"))

    def test_unopenable_path_raises_store_error(self, tmp_path):
        # A directory cannot be opened as the store file
        with pytest.raises(StoreError):
            URLStore(tmp_path, fsync=False)
