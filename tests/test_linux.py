import io

import pytest

from wxkeyscan.linux import find_wechat_pid, parse_maps, scan_keys, scan_region
from wxkeyscan.pattern import CHUNK_SIZE
from wxkeyscan.salts import KeyEntry


def make_pattern(key: bytes, salt: bytes) -> bytes:
    return b"x'" + key + salt + b"'"


def make_process(proc_root, pid, comm):
    pid_dir = proc_root / str(pid)
    pid_dir.mkdir(parents=True)
    (pid_dir / "comm").write_text(comm)
    return pid_dir


class _FlakyMemory(io.BytesIO):
    """Memory whose first read fails, like an unmapped page in /proc/<pid>/mem."""

    def __init__(self, data):
        super().__init__(data)
        self.failed = False

    def read(self, size=-1):
        if not self.failed:
            self.failed = True
            raise OSError("input/output error")
        return super().read(size)


# find_wechat_pid


def test_find_wechat_pid_by_comm(tmp_path):
    make_process(tmp_path, 45, "bash\n")
    make_process(tmp_path, 123, "WeChat\n")
    (tmp_path / "self").mkdir()
    assert find_wechat_pid(tmp_path) == 123


def test_find_wechat_pid_weixin(tmp_path):
    make_process(tmp_path, 77, "weixin\n")
    assert find_wechat_pid(tmp_path) == 77


def test_find_wechat_pid_ignores_non_numeric_dirs(tmp_path):
    make_process(tmp_path, "abc", "wechat\n")
    assert find_wechat_pid(tmp_path) is None


def test_find_wechat_pid_missing_root(tmp_path):
    assert find_wechat_pid(tmp_path / "absent") is None


def test_find_wechat_pid_ignores_dir_without_comm(tmp_path):
    (tmp_path / "10").mkdir()
    make_process(tmp_path, 20, "wechat")
    assert find_wechat_pid(tmp_path) == 20


# parse_maps


def test_parse_maps_selects_rw_regions(tmp_path):
    pid_dir = tmp_path / "123"
    pid_dir.mkdir()
    (pid_dir / "maps").write_text(
        "00400000-00452000 r-xp 00000000 08:02 173521 /usr/bin/app\n"
        "00651000-00652000 rw-p 00051000 08:02 173521 /usr/bin/app\n"
        "7f0000000000-7f0000021000 rw-s 00000000 00:00 0\n"
        "garbage\n"
        "zz-yy rw-p 00000000 00:00 0\n"
    )
    assert parse_maps(123, tmp_path) == [
        (0x00651000, 0x00652000),
        (0x7F0000000000, 0x7F0000021000),
    ]


def test_parse_maps_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_maps(999, tmp_path)


# scan_region


def test_scan_region_finds_pattern():
    key, salt = b"a" * 64, b"b" * 32
    data = b"\xff" * 10 + make_pattern(key, salt) + b"\x00" * 10
    assert scan_region(io.BytesIO(data), 0, len(data)) == [("a" * 64, "b" * 32)]


def test_scan_region_respects_start():
    data = make_pattern(b"a" * 64, b"b" * 32) + b"\x00" * 200
    assert scan_region(io.BytesIO(data), 10, len(data)) == []


def test_scan_region_pattern_across_chunk_boundary():
    data = bytearray(CHUNK_SIZE + 500)
    pattern = make_pattern(b"c" * 64, b"d" * 32)
    pos = CHUNK_SIZE - 50
    data[pos : pos + len(pattern)] = pattern
    assert scan_region(io.BytesIO(bytes(data)), 0, len(data)) == [("c" * 64, "d" * 32)]


def test_scan_region_dedups_pattern_in_overlap():
    data = bytearray(CHUNK_SIZE + 500)
    pattern = make_pattern(b"1" * 64, b"2" * 32)
    pos = CHUNK_SIZE - len(pattern)
    data[pos : pos + len(pattern)] = pattern
    assert scan_region(io.BytesIO(bytes(data)), 0, len(data)) == [("1" * 64, "2" * 32)]


def test_scan_region_empty_range():
    data = make_pattern(b"a" * 64, b"b" * 32)
    assert scan_region(io.BytesIO(data), 50, 50) == []


def test_scan_region_skips_failed_read():
    data = bytearray(CHUNK_SIZE + 500)
    pattern = make_pattern(b"e" * 64, b"f" * 32)
    early = make_pattern(b"0" * 64, b"9" * 32)
    data[0 : len(early)] = early
    pos = CHUNK_SIZE + 100
    data[pos : pos + len(pattern)] = pattern
    mem = _FlakyMemory(bytes(data))
    assert scan_region(mem, 0, len(data)) == [("e" * 64, "f" * 32)]


# scan_keys


def test_scan_keys_end_to_end(tmp_path):
    proc_root = tmp_path / "proc"
    key_hex = "ab" * 32
    salt_bytes = bytes(range(16))
    salt_hex = salt_bytes.hex()

    memory = b"\x00" * 64 + make_pattern(key_hex.upper().encode(), salt_hex.encode()) + b"\x00" * 64
    pid_dir = make_process(proc_root, 321, "WeChat\n")
    (pid_dir / "maps").write_text(f"00000000-{len(memory):08x} rw-p 00000000 00:00 0\n")
    (pid_dir / "mem").write_bytes(memory)

    db_dir = tmp_path / "db"
    (db_dir / "message").mkdir(parents=True)
    (db_dir / "message" / "message_0.db").write_bytes(salt_bytes + b"\x00" * 100)

    assert scan_keys(db_dir, proc_root) == [
        KeyEntry(db_name="message/message_0.db", enc_key=key_hex, salt=salt_hex)
    ]


def test_scan_keys_unmatched_key(tmp_path):
    proc_root = tmp_path / "proc"
    memory = make_pattern(b"a" * 64, b"b" * 32)
    pid_dir = make_process(proc_root, 5, "wechat")
    (pid_dir / "maps").write_text(f"00000000-{len(memory):08x} rw-p 00000000 00:00 0\n")
    (pid_dir / "mem").write_bytes(memory)
    db_dir = tmp_path / "db"
    db_dir.mkdir()
    (db_dir / "other.db").write_bytes(b"\x11" * 16)
    assert scan_keys(db_dir, proc_root) == []


def test_scan_keys_no_process(tmp_path):
    make_process(tmp_path, 1, "init")
    with pytest.raises(RuntimeError, match="WeChat"):
        scan_keys(tmp_path, tmp_path)


def test_scan_keys_missing_mem(tmp_path):
    pid_dir = make_process(tmp_path, 8, "wechat")
    (pid_dir / "maps").write_text("")
    with pytest.raises(FileNotFoundError, match="run as root"):
        scan_keys(tmp_path / "db", tmp_path)