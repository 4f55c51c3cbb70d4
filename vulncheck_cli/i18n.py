"""User-facing message catalogue."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Copy:
    """All user-facing strings; templates use ``%`` placeholders."""

    about_info: str = ""
    interactive_only: str = ""
    root_long: str = ""

    auth_short: str = ""
    auth_status_short: str = ""
    auth_status_long: str = ""
    auth_login_short: str = ""
    auth_login_long: str = ""
    auth_login_example: str = ""
    auth_login_error_ci: str = ""
    auth_logout_short: str = ""
    auth_logout_token_removed: str = ""
    auth_logout_error_failed: str = ""
    auth_logout_error_invalid_token: str = ""

    auth_login_token: str = ""
    auth_login_web: str = ""

    flag_save_results: str = ""
    flag_specify_file: str = ""
    flag_specify_sbom_file: str = ""
    flag_specify_sbom_input: str = ""
    saving_results_start: str = ""
    saving_results_end: str = ""

    token_short: str = ""

    list_tokens_short: str = ""
    list_tokens_full: str = ""

    browse_tokens_short: str = ""
    browse_tokens: str = ""

    create_token_short: str = ""
    create_token_label_required: str = ""
    create_token_success: str = ""

    remove_token_short: str = ""
    remove_token_success: str = ""
    remove_token_id_required: str = ""

    indices_short: str = ""

    list_indices_short: str = ""
    list_indices_search: str = ""
    list_indices_full: str = ""

    browse_indices_short: str = ""
    browse_indices_search: str = ""
    browse_indices_full: str = ""

    index_short: str = ""
    index_list_short: str = ""
    index_browse_short: str = ""
    index_error_required: str = ""

    backup_short: str = ""
    backup_url_short: str = ""
    backup_download_short: str = ""
    backup_download_info: str = ""
    backup_download_progress: str = ""
    backup_download_complete: str = ""

    cpe_short: str = ""
    cpe_example: str = ""
    cpe_no_cves: str = ""
    cpe_cves_found: str = ""
    cpe_error_scheme_required: str = ""

    purl_short: str = ""
    purl_example: str = ""
    purl_no_vulns: str = ""
    purl_vuln_found: str = ""
    purl_vulns_found: str = ""
    purl_error_scheme_required: str = ""

    rule_short: str = ""
    rule_error_required: str = ""
    rule_example: str = ""
    rule_error_rule_name_required: str = ""

    tag_short: str = ""
    tag_example: str = ""
    tag_error_tag_name_required: str = ""

    pdns_short: str = ""
    pdns_example: str = ""
    pdns_error_list_name_required: str = ""

    scan_short: str = ""
    scan_example: str = ""
    scan_error_directory_required: str = ""
    scan_sbom_start: str = ""
    scan_sbom_load: str = ""
    scan_sbom_end: str = ""
    scan_sbom_loaded: str = ""
    scan_extract_purl_start: str = ""
    scan_extract_purl_end: str = ""
    scan_scan_purl_start: str = ""
    scan_scan_purl_start_offline: str = ""
    scan_scan_purl_progress: str = ""
    scan_scan_purl_progress_offline: str = ""
    scan_scan_purl_end: str = ""
    scan_scan_purl_end_offline: str = ""
    scan_vuln_meta_start: str = ""
    scan_vuln_meta_end: str = ""
    scan_no_cves_found: str = ""
    scan_benchmark: str = ""

    error_no_token: str = ""
    error_unauthorized: str = ""


EN = Copy(
    about_info=(
        "The VulnCheck CLI is a command-line interface for the VulnCheck API\n"
        "For more information on our products, please visit https://vulncheck.com\n"
        "For API Documentation, please visit https://docs.vulncheck.com\n"
    ),
    interactive_only=(
        "This command is interactive and cannot run in a CI environment, "
        "please try %s instead"
    ),
    root_long="Work seamlessly with the VulnCheck API.",
    auth_short="Authenticate vulncheck with the VulnCheck portal",
    auth_status_short="Check authentication status",
    auth_status_long=(
        "Check if you're currently authenticated and if so, display the account information"
    ),
    auth_login_short="Authenticate with the VulnCheck portal",
    auth_login_long=(
        "Authenticate with a VulnCheck account.\n"
        "\n"
        "The default authentication mode is a web-based browser flow.\n"
        "\n"
        "Alternatively, use `token` to specify an issued token directly.\n"
        "\n"
        "Alternatively, vulncheck will use the authentication token found in the "
        "`VC_TOKEN` environment variable.\n"
        'This method is most suitable for "headless" use of vulncheck such as in automation.\n'
    ),
    auth_login_example=(
        "# Start interactive authentication\n"
        "$ vulncheck auth login\n"
        "\n"
        "# Authenticate with vulncheck.com by passing in a token\n"
        "$ vulncheck auth login token vulncheck_******************\n"
    ),
    auth_login_error_ci=(
        "This command is interactive and cannot be run in a CI environment, "
        "use the VC_TOKEN environment variable instead"
    ),
    auth_login_token="Connect a VulnCheck account using an authentication token",
    auth_login_web="Log in with a VulnCheck account using a web browser",
    auth_logout_short="Invalidate and remove your current authentication token",
    auth_logout_token_removed="Token invalidated and removed",
    auth_logout_error_failed="Failed to remove token",
    auth_logout_error_invalid_token="Token was invalid, removing from config",
    flag_save_results="Save Results as a file",
    flag_specify_file="Specify the file to save the results to",
    flag_specify_sbom_file="Specify the file to save your SBOM scan to",
    flag_specify_sbom_input=(
        "Specify an existing SBOM file to scan instead of creating one from a folder"
    ),
    saving_results_start="Saving Results to %s",
    saving_results_end="Results saved to %s",
    token_short="Manage Tokens",
    list_tokens_short="List tokens",
    list_tokens_full="Listing %d tokens",
    browse_tokens="Browsing %d tokens, ESC or q to quit, c to create a token",
    browse_tokens_short="Browse tokens interactively",
    create_token_short="Create a token",
    create_token_success="Token %s created successfully: %s",
    create_token_label_required="Token Label missing or invalid",
    remove_token_short="Remove a token",
    remove_token_success="Token %s removed successfully",
    remove_token_id_required="Token ID missing or invalid",
    indices_short="View indices",
    list_indices_short="List indices",
    list_indices_search='Listing %d indices searching for "%s"',
    list_indices_full="Listing %d indices",
    browse_indices_short="Browse indices",
    browse_indices_search='Listing %d indices searching for "%s"',
    browse_indices_full="Listing %d indices",
    index_short="Browse or list an index",
    index_list_short="List documents of a specified index",
    index_browse_short="Browse documents of an index interactively",
    index_error_required="index name is required",
    backup_short="Download a backup of a specified index",
    backup_url_short="Get the temporary signed URL of the backup of an index",
    backup_download_short="Download the backup of an index",
    backup_download_info="Downloading backup of %s, created on %s",
    backup_download_progress="Downloading backup as %s",
    backup_download_complete="Backup downloaded successfully",
    cpe_short="Look up a specified cpe for any related CVEs",
    cpe_example='vulncheck cpe "%s"',
    cpe_no_cves="No CVEs were found for cpe %s",
    cpe_cves_found="%d CVEs were found for cpe %s",
    cpe_error_scheme_required="cpe scheme is required",
    purl_short="Look up a specified PURL for any CVEs or vulnerabilities",
    purl_example='vulncheck purl "%s"',
    purl_error_scheme_required="purl scheme is required",
    purl_no_vulns="No Vulnerabilities were found for purl %s",
    purl_vuln_found="1 Vulnerability were found for purl %s",
    purl_vulns_found="%d Vulnerabilities were found for purl %s",
    rule_short="Look up a specified rule for Initial Access Intelligence",
    rule_error_required="rule name is required",
    rule_example='vulncheck rule "%s" \nvulncheck rule "%s"',
    rule_error_rule_name_required="rule name is required",
    tag_short="List IP Intelligence Tags",
    tag_example='vulncheck tag "%s"',
    tag_error_tag_name_required="tag name is required",
    pdns_short="List IP Intelligence Protective DNS records",
    pdns_example='vulncheck pdns "%s"',
    pdns_error_list_name_required="list name is required",
    scan_short="Scan a directory for vulnerabilities",
    scan_example="vulncheck scan /path/to/directory",
    scan_sbom_start="Generating SBOM",
    scan_sbom_load="Loading SBOM file %s",
    scan_sbom_end="SBOM created",
    scan_sbom_loaded="SBOM file loadded",
    scan_extract_purl_start="Extracting PURLs",
    scan_extract_purl_end="%d PURLs extracted",
    scan_scan_purl_start="Scanning PURLs",
    scan_scan_purl_start_offline="[OFFLINE] Scanning PURLs",
    scan_scan_purl_progress="Scanning PURLs [%d/%d]",
    scan_scan_purl_progress_offline="[OFFLINE] Scanning PURLs [%d/%d]",
    scan_scan_purl_end="Scanning PURLs: %d vulns found in %d packages",
    scan_scan_purl_end_offline="[OFFLINE] Scanning PURLs: %d vulns found in %d packages",
    scan_vuln_meta_start="Fetching vulnerability metadata",
    scan_vuln_meta_end="Vulnerability metadata fetched",
    scan_no_cves_found="No vulnerabilities found in %d packages",
    scan_benchmark="Scan completed in %s",
    scan_error_directory_required="Error: Directory is required",
    error_unauthorized="Error: Unauthorized, Try authenticating with: vulncheck auth login",
    error_no_token=(
        "No token found. Please run `vulncheck auth login` to authenticate "
        "or populate the environment variable `VC_TOKEN`."
    ),
)

_current = Copy()


def init_copy() -> Copy:
    """Select the message catalogue; English is the only language."""
    global _current
    _current = EN
    return _current


def current_copy() -> Copy:
    """Return the active message catalogue."""
    return _current