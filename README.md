# vulncheck-cli

A Python library of building blocks for tools that work with the VulnCheck
API and with index backups that have been downloaded from it.

## What it contains

| Module | Purpose |
| --- | --- |
| `vulncheck_cli.environment` | Chooses production or development endpoints with `VC_ENV` |
| `vulncheck_cli.i18n` | The catalogue of user-facing messages (`Copy`, `EN`) |
| `vulncheck_cli.models` | Dataclasses for scan results and package URLs |
| `vulncheck_cli.session` | Version text and release-page links |
| `vulncheck_cli.utils` | String, date, zip and directory-size helpers |
| `vulncheck_cli.query` | A small jq-style filter language |
| `vulncheck_cli.search` | Offline search over newline-delimited JSON index files |
| `vulncheck_cli.console` | Styled status lines, JSON output and a JSON pager |
| `vulncheck_cli.tables` | Tables for indices, CPEs, PURLs and scan results |
| `vulncheck_cli.download` | Downloads with a progress bar, and a standalone progress bar |
| `vulncheck_cli.inquiry` | Host naming and the local listener for the browser login handshake |

## Requirements

- Python 3.10 or newer
- `rich` and `requests`

## Usage

### Environments

```python
from vulncheck_cli.environment import init_environment, current_environment

env = init_environment()    # reads VC_ENV
print(env.name, env.api, env.web)
```

`production` and `prod` select the production endpoints. `development`, `dev`
and `local` select the local ones. If the value is unset or unknown, the
current selection stays as it is. Production is the starting selection.

### Messages

```python
from vulncheck_cli.i18n import init_copy

copy = init_copy()
print(copy.cpe_cves_found % (3, "cpe:2.3:a:example:product"))
```

English is the only catalogue. `current_copy()` returns an empty `Copy` until
`init_copy()` has been called.

### Versions

```python
from vulncheck_cli.session import version_format, changelog_url

print(version_format("1.4.0", "2020-12-15"))
changelog_url("deadbeef")   # the "latest release" page
```

A release-shaped version such as `1.4.0`, `v0.3.2` or `0.3.2-pre.1` links to
the tag page for that release. Any other version links to the latest release.

### Searching a downloaded index

```python
from vulncheck_cli.search import query_ip_intel, ip_index

query = query_ip_intel("United States", "", "", "", "", "")
entries, stats = ip_index("indices/ipintel-30d", query)

print(f"{stats.matched_lines} of {stats.total_lines} lines in {stats.total_files} files")
for entry in entries:
    print(entry.ip, entry.port, entry.country)
```

- `query_purl(PackageURL(...))` builds the query for a package URL.
  `index_purl(directory, query)` runs it and returns `PurlEntry` records.
- Every `.json` file below the directory is searched, one file per worker
  thread.
- `quick_filter` first rejects lines that cannot match. The compiled query
  then decides the rest.
- Lines that fail to parse are skipped.
- A malformed query raises `QueryError`.

`process_file` and `process_purl_file` search a single file. Each returns the
matching entries together with the errors found line by line.

### The query language

```python
from vulncheck_cli.query import compile_query

q = compile_query('.hostnames | any(. == "example.com")')
q.matches({"hostnames": ["example.com"]})   # True
```

The language supports the following:

- Paths: `.`, `.a.b`, `.[]`, `.[expr]` and `?`.
- Operators: `|`, `,`, `and`, `or`, comparisons and arithmetic.
- Literals: `true`, `false`, `null` and `empty`.
- Functions: `length`, `not`, `tostring`, `ascii_downcase`, `keys`, `any`,
  `all`, `select`, `index`, `rindex`, `startswith`, `endswith` and `contains`.

### Utilities

```python
from vulncheck_cli.utils import (
    normalize_string, extract_file, parse_date, unzip, get_directory_size, get_size_human,
)

normalize_string("Title Case")                          # "title-case"
extract_file("https://example.com/path/to/file.zip")    # "path/to/file.zip"
parse_date("2023-05-15T14:30:00Z")                      # "May 15, 2023, 2:30:00 pm, UTC"

unzip("backup.zip", "indices/example")
print(get_size_human(get_directory_size("indices/example")))   # e.g. "83 MB"
```

- `extract_file` raises `ValueError` for a malformed URL or for one that does
  not name a `.zip` file.
- `parse_date` returns `""` for input that is not RFC 3339.
- `unzip` refuses archive entries that would land outside the destination
  directory.

### Terminal output

```python
from vulncheck_cli import console, tables

console.success("Token invalidated successfully")
console.stat("Matched", "42")
console.print_json({"cve": "CVE-2021-44228"})
console.json_file({"cve": "CVE-2021-44228"}, "results.json")
raise console.error("index name %s is unknown", "example")
```

- `console.error` and `console.danger` return exceptions. They do not raise
  them.
- `console.viewport(index, data)` pages highlighted JSON.
- `tables.scan_results`, `tables.indices_list`, `tables.cpe_meta`,
  `tables.purl_meta`, `tables.purl_instance`, `tables.purl_vulns` and
  `tables.single_column_results` each print a table sized to the terminal.

### Downloads and progress

```python
from vulncheck_cli.download import download, Progress

download("https://example.com/backup.zip", "backup.zip")

with Progress(100) as bar:
    for done in range(0, 101, 10):
        bar.update(done)
```

`download` raises `DownloadError` in three cases:

- the server does not answer with status 200;
- the server sends no content length;
- the file cannot be written.

### Login handshake helpers

`inquiry.listen_for(path, action, timeout)` listens on port 8678. It accepts
one `POST` of `{"hash": "..."}` to `/path` and calls `action` with the value.
It then returns the value, or `""` if nothing arrives before the timeout. CORS
headers name the web origin of the current environment.

The module also provides three helpers:

- `listen_for_token()` waits on `/token`.
- `get_name()` returns the machine's name with non-ASCII characters removed.
- `is_port_available(":8678")` checks whether the port can be used.

## What this package does not do

The package has no command to run and no API client. It does not do any of
the following:

- authenticate or store tokens;
- call the VulnCheck API for lookups or index listings;
- generate an SBOM from a directory;
- offer interactive table browsers.

It provides only the pieces listed above, for use by your own code.

## Running the tests

Install the `test` extra, then run `pytest` from the project root.