"""
Netrc lookups for Bugsnag CLI.

The netrc file is parsed at most once per process; lookups match the
host of the API endpoint and the login.
"""

import logging
import os
import platform
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


class NetrcError(Exception):
    """Base error for netrc lookups."""


class NetrcParseError(NetrcError):
    """The netrc file could not be read or parsed."""


class NetrcEntryNotFound(NetrcError, LookupError):
    """No entry matches the requested machine and login."""

    def __init__(self, message: str = "netrc config: entry not found"):
        super().__init__(message)


@dataclass(frozen=True)
class NetrcEntry:
    machine: str
    login: str
    password: str


def netrc_path() -> Path:
    """Location of the netrc file: ``$NETRC`` or the file in the home directory."""
    override = os.environ.get("NETRC")
    if override:
        return Path(override)
    name = "_netrc" if platform.system() == "Windows" else ".netrc"
    return Path.home() / name


def _tokens(text: str) -> Iterator[str]:
    lines = iter(text.splitlines())
    for line in lines:
        fields = line.split()
        i = 0
        while i < len(fields):
            if fields[i].startswith("#"):
                break
            if fields[i] == "macdef":
                # Macro bodies run until the next blank line.
                for body_line in lines:
                    if not body_line.strip():
                        break
                break
            yield fields[i]
            i += 1


def parse_netrc(text: str) -> List[NetrcEntry]:
    """
    Parse netrc content into entries.

    Args:
        text: Content of a netrc file

    Returns:
        Entries that define a machine, a login and a password, in file order

    Raises:
        NetrcParseError: If a keyword has no value
    """
    entries: List[NetrcEntry] = []
    machine: Optional[str] = None
    login: Optional[str] = None
    password: Optional[str] = None

    def flush() -> None:
        if machine and login and password:
            entries.append(NetrcEntry(machine=machine, login=login, password=password))

    tokens = _tokens(text)
    for token in tokens:
        if token == "default":
            break
        if token not in ("machine", "login", "password", "account"):
            continue

        value = next(tokens, None)
        if value is None:
            raise NetrcParseError(f"netrc: missing value for '{token}'")

        if token == "machine":
            flush()
            machine, login, password = value, None, None
        elif token == "login":
            login = value
        elif token == "password":
            password = value

    flush()
    return entries


_lock = threading.Lock()
_loaded = False
_entries: List[NetrcEntry] = []
_error: Optional[NetrcParseError] = None


def load_netrc() -> List[NetrcEntry]:
    """Load and cache the netrc entries, parsing the file exactly once.

    A missing file yields no entries.

    Raises:
        NetrcParseError: If the file was unreadable or malformed
    """
    global _loaded, _entries, _error

    with _lock:
        if not _loaded:
            path = netrc_path()
            try:
                _entries = parse_netrc(path.read_text(encoding="utf-8"))
                logger.debug(f"Loaded {len(_entries)} netrc entries from {path}")
            except FileNotFoundError:
                _entries = []
            except OSError as e:
                _error = NetrcParseError(f"netrc: unable to read {path}: {e}")
            except NetrcParseError as e:
                _error = e
            _loaded = True

    if _error is not None:
        raise _error
    return _entries


def reset_netrc_cache() -> None:
    """Forget the parsed netrc file so the next lookup reads it again."""
    global _loaded, _entries, _error
    with _lock:
        _loaded = False
        _entries = []
        _error = None


def read_netrc(api_endpoint: str, login: str) -> NetrcEntry:
    """
    Find the netrc entry for an API endpoint and login.

    Args:
        api_endpoint: Absolute URL; only its host (and port) is matched
        login: Login the entry must carry

    Returns:
        The matching entry

    Raises:
        NetrcEntryNotFound: If no entry matches
        NetrcParseError: If the netrc file is unreadable or malformed
        ValueError: If ``api_endpoint`` is not an absolute URL
    """
    entries = load_netrc()

    parts = urlsplit(api_endpoint)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"netrc: invalid URI for request: {api_endpoint!r}")
    host = parts.netloc.rpartition("@")[2]

    for entry in entries:
        if entry.machine == host and entry.login == login:
            return entry

    raise NetrcEntryNotFound()
