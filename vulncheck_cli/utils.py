"""String, date, archive and filesystem helpers."""

from __future__ import annotations

import math
import os
import re
import shutil
import stat as stat_module
import time
import zipfile
from datetime import datetime, timedelta, timezone
from urllib.parse import unquote, urlsplit


def normalize_string(s: str) -> str:
    """Lower-case a string and turn spaces and underscores into hyphens."""
    return s.lower().replace(" ", "-").replace("_", "-")


def extract_file(url: str) -> str:
    """Return the archive file path named by an index backup URL.

    Raises ValueError for a malformed URL or one that does not name a zip file.
    """
    if url.startswith(":"):
        raise ValueError(f'parse "{url}": missing protocol scheme')
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        raise ValueError(f'parse "{url}": invalid control character in URL')
    path = unquote(urlsplit(url).path, errors="strict")
    if path.startswith("/"):
        path = path[1:]
    if not path.endswith(".zip"):
        raise ValueError("invalid file format")
    return path


_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(\.\d+)?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)


def _zone_name(moment: datetime, offset_seconds: int, utc_marker: bool) -> str:
    if utc_marker:
        return "UTC"
    local = time.localtime(moment.timestamp())
    if local.tm_gmtoff == offset_seconds and local.tm_zone:
        return local.tm_zone
    minutes = offset_seconds // 60
    sign = "-" if minutes < 0 else "+"
    minutes = abs(minutes)
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def parse_date(date: str) -> str:
    """Format an RFC 3339 timestamp for display; return "" if it does not parse."""
    match = _RFC3339.fullmatch(date)
    if not match:
        return ""
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    zone = match.group(8)
    if zone == "Z":
        offset_seconds = 0
    else:
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours >= 24 or minutes >= 60:
            return ""
        offset_seconds = (hours * 3600 + minutes * 60) * (-1 if zone[0] == "-" else 1)
    try:
        moment = datetime(
            year, month, day, hour, minute, second,
            tzinfo=timezone(timedelta(seconds=offset_seconds)),
        )
    except ValueError:
        return ""

    hour12 = moment.hour % 12 or 12
    meridiem = "pm" if moment.hour >= 12 else "am"
    zone_name = _zone_name(moment, offset_seconds, zone == "Z")
    return (
        f"{moment:%B} {moment.day}, {moment.year}, "
        f"{hour12}:{moment.minute:02d}:{moment.second:02d} {meridiem}, {zone_name}"
    )


def _extract_member(archive: zipfile.ZipFile, member: zipfile.ZipInfo, dest: str) -> None:
    joined = f"{dest}{os.sep}{member.filename}" if dest else member.filename
    path = os.path.normpath(joined)
    if not path.startswith(os.path.normpath(dest) + os.sep):
        raise ValueError(f"illegal file path: {path}")

    if member.is_dir():
        os.makedirs(path, mode=0o755, exist_ok=True)
        return
    os.makedirs(os.path.dirname(path), mode=0o755, exist_ok=True)
    with archive.open(member) as source, open(path, "wb") as target:
        shutil.copyfileobj(source, target)


def unzip(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Extract a zip archive into a directory, refusing paths that escape it."""
    dest = os.fspath(dest)
    try:
        archive = zipfile.ZipFile(src)
    except (OSError, zipfile.BadZipFile) as exc:
        raise OSError(f"failed to open zip file: {exc}") from exc

    with archive:
        try:
            os.makedirs(dest, mode=0o755, exist_ok=True)
        except OSError as exc:
            raise OSError(f"failed to create destination directory: {exc}") from exc
        for member in archive.infolist():
            try:
                _extract_member(archive, member, dest)
            except ValueError as exc:
                raise ValueError(f"failed to extract file: {exc}") from exc
            except OSError as exc:
                raise OSError(f"failed to extract file: {exc}") from exc


def get_directory_size(path: str | os.PathLike[str]) -> int:
    """Return the total size in bytes of every non-directory entry under a path."""
    root_info = os.lstat(path)
    if not stat_module.S_ISDIR(root_info.st_mode):
        return root_info.st_size

    errors: list[OSError] = []
    total = 0
    for root, dirs, files in os.walk(path, onerror=errors.append):
        if errors:
            raise errors[0]
        entries = files + [d for d in dirs if os.path.islink(os.path.join(root, d))]
        for name in entries:
            total += os.lstat(os.path.join(root, name)).st_size
    if errors:
        raise errors[0]
    return total


_SIZE_SUFFIXES = ("B", "kB", "MB", "GB", "TB", "PB", "EB")


def get_size_human(size: int) -> str:
    """Render a byte count with SI units, e.g. ``83 MB``."""
    if size < 10:
        return f"{size} B"
    base = 1000.0
    exponent = math.floor(math.log(size) / math.log(base))
    suffix = _SIZE_SUFFIXES[exponent]
    value = math.floor(size / base**exponent * 10 + 0.5) / 10
    if value < 10:
        return f"{value:.1f} {suffix}"
    return f"{value:.0f} {suffix}"