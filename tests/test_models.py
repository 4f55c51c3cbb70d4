import json

from vulncheck_cli.models import (
    PackageURL,
    PurlDetail,
    ScanResult,
    ScanResultVulnerability,
)


def _sample_vulnerability():
    return ScanResultVulnerability(
        name="lodash",
        version="4.17.20",
        cve="CVE-2021-23337",
        in_kev=True,
        cvss_base_score="7.2",
        cvss_temporal_score="6.5",
        fixed_versions="4.17.21",
        purl_detail=PurlDetail(
            purl="pkg:npm/lodash@4.17.20",
            package_type="npm",
            cataloger="javascript-lock-cataloger",
            locations=["/app/package-lock.json"],
            sbom_ref="ref-1",
        ),
    )


def test_purl_detail_uses_wire_keys():
    data = PurlDetail(package_type="npm", sbom_ref="ref-1").to_dict()
    assert set(data) == {"purl", "type", "cataloger", "locations", "sbom_ref"}
    assert data["type"] == "npm"
    assert data["sbom_ref"] == "ref-1"


def test_purl_detail_round_trip():
    detail = _sample_vulnerability().purl_detail
    assert PurlDetail.from_dict(detail.to_dict()) == detail


def test_vulnerability_round_trip_through_json():
    vuln = _sample_vulnerability()
    text = json.dumps(vuln.to_dict())
    assert ScanResultVulnerability.from_dict(json.loads(text)) == vuln


def test_vulnerability_wire_keys():
    data = _sample_vulnerability().to_dict()
    assert data["in_kev"] is True
    assert data["purl_detail"]["type"] == "npm"
    assert "purl_detail" in data and "fixed_versions" in data


def test_missing_fields_take_defaults():
    vuln = ScanResultVulnerability.from_dict({"cve": "CVE-2021-23337"})
    assert vuln.cve == "CVE-2021-23337"
    assert vuln.in_kev is False
    assert vuln.purl_detail == PurlDetail()
    assert vuln.purl_detail.locations == []


def test_scan_result_round_trip():
    result = ScanResult(vulnerabilities=[_sample_vulnerability(), ScanResultVulnerability()])
    restored = ScanResult.from_dict(result.to_dict())
    assert restored == result
    assert len(restored.vulnerabilities) == 2


def test_scan_result_null_vulnerabilities():
    assert ScanResult.from_dict({"vulnerabilities": None}).vulnerabilities == []
    assert ScanResult.from_dict(None) == ScanResult()


def test_package_url_defaults_are_independent():
    first = PackageURL(type="npm", name="lodash")
    second = PackageURL()
    first.qualifiers["arch"] = "x86"
    assert second.qualifiers == {}
    assert first.name == "lodash"