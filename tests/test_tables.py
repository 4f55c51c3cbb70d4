import os
from dataclasses import dataclass

import pytest

from vulncheck_cli import tables
from vulncheck_cli.models import PackageURL, ScanResultVulnerability


@pytest.fixture
def wide_terminal(monkeypatch):
    monkeypatch.setattr(os, "get_terminal_size", lambda *a: os.terminal_size((200, 50)))


@dataclass
class _Index:
    name: str
    description: str
    href: str


INDICES = [
    {"name": "ipintel-3d", "description": "IP intel", "href": "/v3/index/ipintel-3d"},
    {"name": "vulncheck-kev", "description": "Known exploited", "href": "/v3/index/vulncheck-kev"},
]


def test_term_size_unknown(monkeypatch):
    def fail(*args):
        raise OSError("not a terminal")

    monkeypatch.setattr(os, "get_terminal_size", fail)
    assert tables.term_width() == 0
    assert tables.term_height() == 0


def test_term_size_known(monkeypatch):
    monkeypatch.setattr(os, "get_terminal_size", lambda *a: os.terminal_size((120, 40)))
    assert tables.term_width() == 120
    assert tables.term_height() == 40


def test_indices_rows_without_search():
    rows = tables.indices_rows(INDICES, "")
    assert rows == [(i["name"], i["description"], i["href"]) for i in INDICES]


def test_indices_rows_search_name_and_description():
    assert [r[0] for r in tables.indices_rows(INDICES, "kev")] == ["vulncheck-kev"]
    assert [r[0] for r in tables.indices_rows(INDICES, "IP intel")] == ["ipintel-3d"]
    assert tables.indices_rows(INDICES, "nothing-matches") == []


def test_indices_rows_search_is_case_sensitive():
    assert tables.indices_rows(INDICES, "KEV") == []


def test_indices_rows_from_objects():
    index = _Index("cisa-kev", "CISA list", "/v3/index/cisa-kev")
    assert tables.indices_rows([index], "cisa") == [("cisa-kev", "CISA list", "/v3/index/cisa-kev")]


def test_indices_list_prints_filtered(capsys, wide_terminal):
    tables.indices_list(INDICES, "kev")
    out = capsys.readouterr().out
    assert "Href" in out
    assert "vulncheck-kev" in out
    assert "ipintel-3d" not in out


def test_cpe_meta(capsys, wide_terminal):
    cpe = {"part": "a", "vendor": "apache", "product": "log4j", "version": "2.14.1",
           "update": "*", "edition": "*"}
    tables.cpe_meta(cpe)
    out = capsys.readouterr().out
    for header in ("Part", "Vendor", "Product", "Edition"):
        assert header in out
    assert "apache" in out and "log4j" in out and "2.14.1" in out


def test_purl_meta_joins_qualifiers(capsys, wide_terminal):
    purl = {"type": "npm", "namespace": "", "name": "lodash", "version": "4.17.21",
            "qualifiers": ["arch=x86", "os=linux"], "subpath": ""}
    tables.purl_meta(purl)
    out = capsys.readouterr().out
    assert "Nme" in out
    assert "lodash" in out
    assert "arch=x86,os=linux" in out


def test_purl_instance_omits_qualifiers(capsys, wide_terminal):
    purl = PackageURL(type="maven", namespace="org.apache", name="log4j", version="2.14.1",
                      qualifiers={"classifier": "sources"})
    tables.purl_instance(purl)
    out = capsys.readouterr().out
    assert "org.apache" in out and "log4j" in out
    assert "sources" not in out


def test_purl_vulns(capsys, wide_terminal):
    tables.purl_vulns([{"detection": "CVE-2021-23337", "fixed_version": "4.17.21"}])
    out = capsys.readouterr().out
    assert "Fixed Version" in out
    assert "CVE-2021-23337" in out and "4.17.21" in out


def test_scan_results_marks_kev(capsys, wide_terminal):
    results = [
        ScanResultVulnerability(name="log4j", version="2.14.1", cve="CVE-2021-44228", in_kev=True),
        ScanResultVulnerability(name="lodash", version="4.17.20", cve="CVE-2021-23337"),
    ]
    tables.scan_results(results)
    out = capsys.readouterr().out
    assert "VulnCheck KEV" in out
    assert "CVE-2021-44228" in out and "CVE-2021-23337" in out
    assert out.count("✔") == 1
    assert out.count("✘") == 1


def test_single_column_results(capsys, wide_terminal):
    tables.single_column_results(["1.2.3.4", "5.6.7.8"], "IP")
    out = capsys.readouterr().out
    assert "IP" in out
    assert "1.2.3.4" in out and "5.6.7.8" in out
    assert out.index("1.2.3.4") < out.index("5.6.7.8")