"""Tabular rendering of indices, lookups and scan results."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from vulncheck_cli.models import PackageURL, ScanResultVulnerability

BORDER = "#6667ab"
KEV_YES = "#34d399"
KEV_NO = "#ff0000"


def term_width() -> int:
    """Return the terminal width, or 0 when it cannot be determined."""
    try:
        return os.get_terminal_size(0).columns
    except (OSError, ValueError):
        return 0


def term_height() -> int:
    """Return the terminal height, or 0 when it cannot be determined."""
    try:
        return os.get_terminal_size(0).lines
    except (OSError, ValueError):
        return 0


def _get(item: Any, *names: str) -> Any:
    for name in names:
        if isinstance(item, Mapping):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    return ""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _render(headers: Iterable[str], rows: Iterable[Iterable[Any]]) -> None:
    width = term_width()
    console = Console(width=width if width > 0 else None, highlight=False)
    table = Table(box=box.SQUARE, border_style=BORDER, expand=width > 0, show_lines=False)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*(cell if isinstance(cell, Text) else Text(_text(cell)) for cell in row))
    console.print(table)


def _index_matches(index: Any, search: str) -> bool:
    if not search:
        return True
    return search in _text(_get(index, "name")) or search in _text(_get(index, "description"))


def indices_rows(indices: Iterable[Any], search: str) -> list[tuple[str, str, str]]:
    """Return name, description and link of each index matching ``search``."""
    return [
        (
            _text(_get(index, "name")),
            _text(_get(index, "description")),
            _text(_get(index, "href")),
        )
        for index in indices
        if _index_matches(index, search)
    ]


def indices_list(indices: Iterable[Any], search: str) -> None:
    """Print the indices matching ``search`` as a table."""
    _render(("Name", "Description", "Href"), indices_rows(indices, search))


def cpe_meta(cpe: Any) -> None:
    """Print the components of a CPE."""
    fields = ("part", "vendor", "product", "version", "update", "edition")
    _render(
        ("Part", "Vendor", "Product", "Version", "Update", "Edition"),
        [[_get(cpe, name) for name in fields]],
    )


def purl_meta(purl: Any) -> None:
    """Print the components of a package URL as reported by the API."""
    qualifiers = _get(purl, "qualifiers") or []
    _render(
        ("Type", "Namespace", "Nme", "Version", "Qualifiers", "Subpath"),
        [[
            _get(purl, "type"),
            _get(purl, "namespace"),
            _get(purl, "name"),
            _get(purl, "version"),
            ",".join(_text(q) for q in qualifiers),
            _get(purl, "subpath"),
        ]],
    )


def purl_instance(purl: PackageURL) -> None:
    """Print the components of a parsed package URL; qualifiers are not listed."""
    _render(
        ("Type", "Namespace", "Name", "Version", "Qualifiers", "Subpath"),
        [[purl.type, purl.namespace, purl.name, purl.version, "", purl.subpath]],
    )


def purl_vulns(vulns: Iterable[Any]) -> None:
    """Print the detections and fixed versions of package vulnerabilities."""
    _render(
        ("Detection", "Fixed Version"),
        [
            [_get(vuln, "detection"), _get(vuln, "fixed_version", "fixedVersion")]
            for vuln in vulns
        ],
    )


def scan_results(results: Iterable[ScanResultVulnerability]) -> None:
    """Print the vulnerabilities found by a scan."""
    rows = []
    for result in results:
        kev = Text("✔", style=KEV_YES) if result.in_kev else Text("✘", style=KEV_NO)
        rows.append([
            result.cve,
            result.name,
            result.version,
            kev,
            result.cvss_base_score,
            result.cvss_temporal_score,
            result.fixed_versions,
        ])
    _render(
        ("CVE", "Name", "Version", "VulnCheck KEV", "CVSS Base", "CVSS Temporal", "Fixed"),
        rows,
    )


def single_column_results(results: Iterable[str], title: str) -> None:
    """Print a list of values under one heading."""
    _render((title,), [[result] for result in results])