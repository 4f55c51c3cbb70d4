import os
import zipfile

import pytest

from vulncheck_cli.utils import (
    extract_file,
    get_directory_size,
    get_size_human,
    normalize_string,
    parse_date,
    unzip,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("snake_case", "snake-case"),
        ("kebab-case", "kebab-case"),
        ("Title Case", "title-case"),
        ("UPPERCASE", "uppercase"),
        ("lowercase", "lowercase"),
    ],
)
def test_normalize_string(value, expected):
    assert normalize_string(value) == expected


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com/path/to/file.zip", "path/to/file.zip"),
        ("https://example.com/path/to/file.zip?param=value", "path/to/file.zip"),
    ],
)
def test_extract_file_valid(url, expected):
    assert extract_file(url) == expected


@pytest.mark.parametrize(
    "url", ["://invalid-url", "https://example.com/path/to/file.txt"]
)
def test_extract_file_invalid(url):
    with pytest.raises(ValueError):
        extract_file(url)


def test_extract_file_rejects_non_zip_message():
    with pytest.raises(ValueError, match="invalid file format"):
        extract_file("https://example.com/path/to/file.txt")


@pytest.mark.parametrize(
    "date, expected",
    [
        ("2023-05-15T14:30:00Z", "May 15, 2023, 2:30:00 pm, UTC"),
        ("2023-05-15T02:30:00Z", "May 15, 2023, 2:30:00 am, UTC"),
        ("2023-05-15", ""),
        ("", ""),
    ],
)
def test_parse_date(date, expected):
    assert parse_date(date) == expected


def test_parse_date_rejects_out_of_range():
    assert parse_date("2023-13-15T14:30:00Z") == ""


def _make_zip(path, entries):
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)


def test_unzip(tmp_path):
    zip_path = tmp_path / "test.zip"
    _make_zip(
        zip_path,
        {"file1.txt": "Content of file 1", "dir/file2.txt": "Content of file 2"},
    )
    dest = tmp_path / "dest"
    dest.mkdir()

    unzip(zip_path, dest)

    assert (dest / "file1.txt").read_text() == "Content of file 1"
    assert (dest / "dir" / "file2.txt").read_text() == "Content of file 2"


def test_unzip_creates_destination(tmp_path):
    zip_path = tmp_path / "test.zip"
    _make_zip(zip_path, {"a/": "", "a/b.txt": "b"})
    dest = tmp_path / "new" / "dest"

    unzip(zip_path, dest)

    assert (dest / "a").is_dir()
    assert (dest / "a" / "b.txt").read_text() == "b"


def test_unzip_rejects_path_escape(tmp_path):
    zip_path = tmp_path / "evil.zip"
    _make_zip(zip_path, {"../escape.txt": "x"})
    dest = tmp_path / "dest"

    with pytest.raises(ValueError, match="illegal file path"):
        unzip(zip_path, dest)
    assert not (tmp_path / "escape.txt").exists()


def test_unzip_rejects_non_zip(tmp_path):
    bogus = tmp_path / "bogus.zip"
    bogus.write_text("not a zip")
    with pytest.raises(OSError, match="failed to open zip file"):
        unzip(bogus, tmp_path / "dest")


def test_get_directory_size(tmp_path):
    (tmp_path / "a.bin").write_bytes(b"x" * 10)
    nested = tmp_path / "sub" / "deeper"
    nested.mkdir(parents=True)
    (nested / "b.bin").write_bytes(b"y" * 25)
    assert get_directory_size(tmp_path) == 35


def test_get_directory_size_of_file(tmp_path):
    target = tmp_path / "one.bin"
    target.write_bytes(b"z" * 7)
    assert get_directory_size(target) == 7


def test_get_directory_size_missing(tmp_path):
    with pytest.raises(OSError):
        get_directory_size(os.path.join(tmp_path, "missing"))


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 B"),
        (9, "9 B"),
        (1000, "1.0 kB"),
        (82854982, "83 MB"),
    ],
)
def test_get_size_human(size, expected):
    assert get_size_human(size) == expected