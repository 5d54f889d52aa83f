# wxkeyscan

Locate the SQLCipher keys that a running WeChat 4.x client on Linux holds in
memory, and pair each one with the encrypted database it unlocks.

WeChat keeps every database key in its process memory as a SQLCipher raw-key
literal of the form `x'<64 hex key><32 hex salt>'`. The salt is also stored
in the first 16 bytes of each encrypted `.db` file. `wxkeyscan` reads those
salts from disk, searches the client's read-write memory for the literals,
and returns the keys whose salt matches a database.

Reading another process's memory needs root privileges.

## Installation

Install the package into your Python environment with your usual package
tool. It has no dependencies beyond the standard library.

## Scanning for keys

```python
from pathlib import Path

from wxkeyscan.scanner import scan_keys

for entry in scan_keys(Path("/path/to/wechat/db_storage")):
    print(entry.db_name, entry.salt, entry.enc_key)
```

Each result is a `wxkeyscan.salts.KeyEntry` (a frozen dataclass) with:

- `db_name` – the database path relative to the directory you passed,
  always with `/` separators, e.g. `message/message_0.db`
- `enc_key` – the key as 64 lower-case hex characters
- `salt` – the salt as 32 lower-case hex characters

Progress messages are printed to standard error.

`wxkeyscan.scanner.scan_keys` raises `RuntimeError` when run on any platform
other than Linux. On Linux it calls `wxkeyscan.linux.scan_keys`, which:

- finds the process through `/proc`: the lowest-numbered PID whose `comm` is
  `wechat` or `weixin` (case-insensitive), raising `RuntimeError` if there is
  none;
- reads the mappings whose permissions start with `rw` from
  `/proc/<pid>/maps`, raising `OSError` if the file cannot be read;
- reads those mappings from `/proc/<pid>/mem` in 2 MiB chunks that overlap by
  99 bytes, so a literal straddling two chunks is still found, raising
  `OSError` if the file cannot be opened.

`wxkeyscan.linux.scan_keys(db_dir, proc_root)` does the same against another
proc root, which is handy for testing. `find_wechat_pid(proc_root)`,
`parse_maps(pid, proc_root)` and `scan_region(mem, start, end)` in the same
module expose the individual steps.

## Building blocks

The pieces the scanner is made of can be used on their own.

```python
from pathlib import Path

from wxkeyscan.pattern import search_pattern
from wxkeyscan.salts import collect_db_salts, match_keys, read_db_salt

salt = read_db_salt(Path("message/message_0.db"))   # None for plain SQLite
db_salts = collect_db_salts(Path("db_storage"))     # [(salt_hex, rel_path), ...]

with open("memory.dump", "rb") as dump:
    candidates = search_pattern(dump.read())        # [(key_hex, salt_hex), ...]

entries = match_keys(candidates, db_salts)
```

- `wxkeyscan.pattern.search_pattern(buf)` finds every `x'…'` literal holding
  exactly 96 hex characters, lower-cases it, and returns the unique
  `(key, salt)` pairs in the order they appear.
- `wxkeyscan.pattern.merge_unique(results, found)` returns `results` followed
  by the pairs of `found` not already present.
- `wxkeyscan.pattern.is_hex_char(c)` tells whether a byte value is an ASCII
  hex digit.
- `wxkeyscan.salts.read_db_salt(path)` returns the first 16 bytes of a file as
  hex, or `None` if the file is shorter than that, cannot be read, or starts
  with the plain SQLite header.
- `wxkeyscan.salts.collect_db_salts(db_dir)` walks a directory tree and
  returns `(salt_hex, relative_path)` for every encrypted `.db` file.
- `wxkeyscan.salts.match_keys(raw_keys, db_salts)` pairs each candidate key
  with the first database that has the same salt, dropping keys with no
  match.

## What it does not do

- It only scans processes on Linux; on macOS, Windows and other platforms
  `scan_keys` raises `RuntimeError`.
- It finds keys but does not decrypt databases or read chat history.
- It is a library only; it installs no command-line program.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.