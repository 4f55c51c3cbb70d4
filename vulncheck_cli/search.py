"""Offline search over locally stored index files."""

from __future__ import annotations

import json
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, TypeVar

from vulncheck_cli.models import PackageURL
from vulncheck_cli.query import Query, QueryError, compile_query

# Package URL type of Go modules, whose versions are matched by suffix.
_GO_MODULE_TYPE = "go" "lang"


@dataclass
class IPType:
    """Classification of an IP intelligence finding."""

    id: str = ""
    kind: str = ""
    finding: str = ""


def _str(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"expected array, got {type(value).__name__}")
    return [_str(v) for v in value]


@dataclass
class IPEntry:
    """A record of the IP intelligence indices."""

    ip: str = ""
    port: int = 0
    ssl: bool = False
    last_seen: str = ""
    asn: str = ""
    country: str = ""
    country_code: str = ""
    city: str = ""
    cve: list[str] = field(default_factory=list)
    matches: list[str] = field(default_factory=list)
    hostnames: list[str] = field(default_factory=list)
    type: IPType = field(default_factory=IPType)
    feed_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IPEntry:
        port = data.get("port") or 0
        if isinstance(port, bool) or not isinstance(port, (int, float)) or port != int(port):
            raise TypeError("port must be an integer")
        kind = data.get("type") or {}
        if not isinstance(kind, Mapping):
            raise TypeError("type must be an object")
        return cls(
            ip=_str(data.get("ip")),
            port=int(port),
            ssl=bool(data.get("ssl", False)),
            last_seen=_str(data.get("lastSeen")),
            asn=_str(data.get("asn")),
            country=_str(data.get("country")),
            country_code=_str(data.get("country_code")),
            city=_str(data.get("city")),
            cve=_str_list(data.get("cve")),
            matches=_str_list(data.get("matches")),
            hostnames=_str_list(data.get("hostnames")),
            type=IPType(_str(kind.get("id")), _str(kind.get("kind")), _str(kind.get("finding"))),
            feed_ids=_str_list(data.get("feed_ids")),
        )


@dataclass
class PurlEntry:
    """A record of the package URL indices."""

    name: str = ""
    version: str = ""
    purl: list[str] = field(default_factory=list)
    licenses: list[str] = field(default_factory=list)
    cves: list[str] = field(default_factory=list)
    vulnerabilities: list[dict[str, Any]] = field(default_factory=list)
    artifacts: dict[str, Any] = field(default_factory=dict)
    published_date: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PurlEntry:
        vulns = data.get("vulnerabilities") or []
        artifacts = data.get("artifacts") or {}
        if not isinstance(vulns, list) or not all(isinstance(v, dict) for v in vulns):
            raise TypeError("vulnerabilities must be an array of objects")
        if not isinstance(artifacts, dict):
            raise TypeError("artifacts must be an object")
        return cls(
            name=_str(data.get("name")),
            version=_str(data.get("version")),
            purl=_str_list(data.get("purl")),
            licenses=_str_list(data.get("licenses")),
            cves=_str_list(data.get("cves")),
            vulnerabilities=list(vulns),
            artifacts=dict(artifacts),
            published_date=_str(data.get("published_date")),
        )


@dataclass
class Stats:
    """Counters gathered while searching an index."""

    total_files: int = 0
    total_lines: int = 0
    matched_lines: int = 0
    duration: float = 0.0
    query: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add(self, files: int = 0, lines: int = 0, matched: int = 0) -> None:
        with self._lock:
            self.total_files += files
            self.total_lines += lines
            self.matched_lines += matched


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def query_ip_intel(country: str, asn: str, cidr: str, country_code: str, hostname: str, id: str) -> str:
    """Build the filter expression for an IP intelligence lookup."""
    conditions = []
    if country:
        conditions.append(f".country == {_quote(country)}")
    if asn:
        conditions.append(f".asn == {_quote(asn)}")
    if cidr:
        conditions.append(f".ip == {_quote(cidr)}")
    if country_code:
        conditions.append(f".country_code == {_quote(country_code)}")
    if hostname:
        conditions.append(f".hostnames | any(. == {_quote(hostname)})")
    if id:
        conditions.append(f".type.id == {_quote(id)}")
    return " and ".join(conditions) if conditions else "true"


def query_purl(instance: PackageURL) -> str:
    """Build the filter expression for a package URL lookup."""
    separator = ":" if instance.type == "maven" else "/"
    if instance.namespace == "alpine":
        conditions = [f".package_name == {_quote(instance.name)}"]
    elif instance.namespace:
        conditions = [f".name == {_quote(instance.namespace + separator + instance.name)}"]
    else:
        conditions = [f".name == {_quote(instance.name)}"]

    if instance.version:
        version = _quote(instance.version)
        if instance.type == _GO_MODULE_TYPE:
            conditions.append(
                f"(.version | index({version})) != null and "
                f"(.version | rindex({version})) == "
                f"(.version | length - {len(instance.version.encode())})"
            )
        else:
            conditions.append(f".version == {version}")
    return " and ".join(conditions)


def parse_query(query: str) -> dict[str, str]:
    """Extract the field/value pairs of a simple equality query."""
    fields: dict[str, str] = {}
    if query.startswith("any(") and query.endswith(")"):
        inner = query[len("any("):]
        inner = inner[: -1] if inner.endswith(")") else inner
        parts = inner.split(" | ")
        if len(parts) == 2:
            fields[parts[0].strip(".[]")] = parts[1].strip(". =").strip('"')
    else:
        for part in query.split(" and "):
            kv = part.split(" == ")
            if len(kv) == 2:
                fields[kv[0].strip(". ")] = kv[1].strip('"')
    return fields


_MISSING = object()


def _lookup(document: Any, path: str) -> Any:
    current = document
    for key in path.split("."):
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            return _MISSING
    return current


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return repr(value)
    return json.dumps(value, separators=(",", ":"))


def quick_filter(line: bytes | str, query: str) -> bool:
    """Cheaply test whether a raw line could satisfy a query."""
    try:
        document = json.loads(line)
    except (ValueError, UnicodeDecodeError):
        return False
    for path, value in parse_query(query).items():
        found = _lookup(document, path)
        if found is _MISSING:
            continue
        if isinstance(found, list):
            if any(_as_text(item) == value for item in found):
                return True
        elif _as_text(found) == value:
            return True
    return False


def list_index_files(directory: str | os.PathLike[str]) -> list[str]:
    """Return every ``.json`` file below a directory, in lexical walk order."""
    directory = os.fspath(directory)
    os.stat(directory)
    found = []

    def fail(error: OSError) -> None:
        raise error

    for root, dirs, files in os.walk(directory, onerror=fail):
        dirs.sort()
        for name in sorted(files):
            if os.path.splitext(name)[1] == ".json":
                found.append(os.path.join(root, name))
    return sorted(found)


_Entry = TypeVar("_Entry", IPEntry, PurlEntry)


def _process_line(line: bytes, compiled: Query, build: Callable[[Mapping[str, Any]], _Entry]) -> _Entry | None:
    try:
        record = json.loads(line)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValueError(f"error parsing JSON: {exc}") from exc
    if not isinstance(record, dict):
        raise ValueError("error parsing JSON: record is not an object")
    try:
        matched = compiled.matches(record)
    except QueryError as exc:
        raise ValueError(f"error processing line: {exc}") from exc
    if not matched:
        return None
    try:
        return build(record)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"error unmarshaling entry: {exc}") from exc


def _process(
    path: str,
    query: str,
    compiled: Query,
    stats: Stats,
    build: Callable[[Mapping[str, Any]], _Entry],
) -> tuple[list[_Entry], list[Exception]]:
    results: list[_Entry] = []
    errors: list[Exception] = []
    try:
        handle = open(path, "rb")
    except OSError as exc:
        return results, [OSError(f"failed to open file {path}: {exc}")]
    stats.add(files=1)
    with handle:
        for raw in handle:
            line = raw.rstrip(b"\n")
            if line.endswith(b"\r"):
                line = line[:-1]
            stats.add(lines=1)
            if not quick_filter(line, query):
                continue
            try:
                entry = _process_line(line, compiled, build)
            except ValueError as exc:
                errors.append(ValueError(f"error processing line in file {path}: {exc}"))
                continue
            if entry is not None:
                results.append(entry)
                stats.add(matched=1)
    return results, errors


def process_file(path: str, query: str, compiled: Query, stats: Stats) -> tuple[list[IPEntry], list[Exception]]:
    """Search one IP intelligence file; return matching entries and line errors."""
    return _process(path, query, compiled, stats, IPEntry.from_dict)


def process_purl_file(path: str, query: str, compiled: Query, stats: Stats) -> tuple[list[PurlEntry], list[Exception]]:
    """Search one package URL index file; return matching entries and line errors."""
    return _process(path, query, compiled, stats, PurlEntry.from_dict)


def _search(index_dir: str, query: str, worker: Callable) -> tuple[list, Stats]:
    start = time.monotonic()
    files = list_index_files(index_dir)
    try:
        compiled = compile_query(query)
    except QueryError as exc:
        raise QueryError(f"failed to parse query: {exc}") from exc
    stats = Stats(query=query)
    results: list = []
    if files:
        with ThreadPoolExecutor() as pool:
            for entries, _errors in pool.map(lambda f: worker(f, query, compiled, stats), files):
                results.extend(entries)
    stats.duration = time.monotonic() - start
    return results, stats


def ip_index(index_dir: str | os.PathLike[str], query: str) -> tuple[list[IPEntry], Stats]:
    """Search an IP intelligence index directory."""
    return _search(os.fspath(index_dir), query, process_file)


def index_purl(index_dir: str | os.PathLike[str], query: str) -> tuple[list[PurlEntry], Stats]:
    """Search a package URL index directory."""
    return _search(os.fspath(index_dir), query, process_purl_file)