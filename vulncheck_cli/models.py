"""Data models shared across scanning and lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class PackageURL:
    """The components of a package URL."""

    type: str = ""
    namespace: str = ""
    name: str = ""
    version: str = ""
    qualifiers: dict[str, str] = field(default_factory=dict)
    subpath: str = ""


@dataclass
class PurlDetail:
    """Where a scanned package URL was found."""

    purl: str = ""
    package_type: str = ""
    cataloger: str = ""
    locations: list[str] = field(default_factory=list)
    sbom_ref: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "purl": self.purl,
            "type": self.package_type,
            "cataloger": self.cataloger,
            "locations": list(self.locations),
            "sbom_ref": self.sbom_ref,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> PurlDetail:
        data = data or {}
        return cls(
            purl=data.get("purl") or "",
            package_type=data.get("type") or "",
            cataloger=data.get("cataloger") or "",
            locations=list(data.get("locations") or []),
            sbom_ref=data.get("sbom_ref") or "",
        )


@dataclass
class ScanResultVulnerability:
    """One vulnerability found for a scanned package."""

    name: str = ""
    version: str = ""
    cve: str = ""
    in_kev: bool = False
    cvss_base_score: str = ""
    cvss_temporal_score: str = ""
    fixed_versions: str = ""
    purl_detail: PurlDetail = field(default_factory=PurlDetail)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "cve": self.cve,
            "in_kev": self.in_kev,
            "cvss_base_score": self.cvss_base_score,
            "cvss_temporal_score": self.cvss_temporal_score,
            "fixed_versions": self.fixed_versions,
            "purl_detail": self.purl_detail.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ScanResultVulnerability:
        data = data or {}
        return cls(
            name=data.get("name") or "",
            version=data.get("version") or "",
            cve=data.get("cve") or "",
            in_kev=bool(data.get("in_kev", False)),
            cvss_base_score=data.get("cvss_base_score") or "",
            cvss_temporal_score=data.get("cvss_temporal_score") or "",
            fixed_versions=data.get("fixed_versions") or "",
            purl_detail=PurlDetail.from_dict(data.get("purl_detail")),
        )


@dataclass
class ScanResult:
    """The vulnerabilities found by a scan."""

    vulnerabilities: list[ScanResultVulnerability] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"vulnerabilities": [v.to_dict() for v in self.vulnerabilities]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ScanResult:
        data = data or {}
        return cls(
            vulnerabilities=[
                ScanResultVulnerability.from_dict(item)
                for item in data.get("vulnerabilities") or []
            ]
        )