# Clone Gate - Find copy-paste code and gate builds on report findings
# Copyright (C) 2025  Jonathan Louis
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Site page - the HTML rendering of a duplication run.

Consumes match groups directly (it does not go through the renderer
dispatcher) and shows each file relative to the source root it belongs to.
Fully offline: CSS is embedded, nothing is fetched.
"""

from datetime import datetime
from pathlib import Path
from typing import List
import html
import logging

from .catalog import SourceCatalog
from .errors import IOFailure
from .models import MatchGroup


logger = logging.getLogger(__name__)


SITE_PAGE_NAME = "cpd.html"

# Maximum fragment lines shown per duplication
_MAX_FRAGMENT_LINES = 25

_CSS = """
:root {
    --bg: #ffffff; --bg-alt: #f5f5f5; --text: #1a1a1a; --text-muted: #666;
    --border: #e0e0e0; --accent: #0066cc; --code-bg: #f8f8f8; --code-border: #ddd;
}
* { box-sizing: border-box; }
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: var(--bg); color: var(--text); margin: 0; padding: 20px; line-height: 1.6; }
.container { max-width: 1200px; margin: 0 auto; }
h1 { margin: 0 0 20px; font-size: 1.8em; }
.stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(150px, 1fr));
    gap: 15px; margin-bottom: 30px; }
.stat-card { background: var(--bg-alt); padding: 15px; border-radius: 8px; text-align: center; }
.stat-value { font-size: 2em; font-weight: bold; color: var(--accent); }
.stat-label { color: var(--text-muted); font-size: 0.9em; }
.duplication { background: var(--bg-alt); border-radius: 8px; margin-bottom: 20px;
    border: 1px solid var(--border); padding: 0 20px 20px; }
table { width: 100%; border-collapse: collapse; margin-bottom: 15px; font-size: 0.9em; }
th, td { padding: 10px; text-align: left; border-bottom: 1px solid var(--border); }
th { background: var(--bg); font-weight: 600; }
pre { margin: 0; padding: 15px; background: var(--code-bg); border-radius: 8px;
    overflow-x: auto; font-family: 'SF Mono', Monaco, 'Courier New', monospace; font-size: 0.85em;
    border: 1px solid var(--code-border); }
footer { text-align: center; padding: 30px; color: var(--text-muted); font-size: 0.9em; }
"""


def render_site_page(matches: List[MatchGroup], catalog: SourceCatalog, minimum_tokens: int) -> str:
    """Build the HTML page for a run."""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M")
    total_lines = sum(m.line_count * len(m.occurrences) for m in matches)

    parts = []
    parts.append(f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Duplicate Code Report</title>
    <style>{_CSS}</style>
</head>
<body>
<div class="container">
    <h1>Duplicate Code Report</h1>

    <div class="stats">
        <div class="stat-card"><div class="stat-value">{len(catalog)}</div><div class="stat-label">Files</div></div>
        <div class="stat-card"><div class="stat-value">{len(matches)}</div><div class="stat-label">Duplications</div></div>
        <div class="stat-card"><div class="stat-value">~{total_lines:,}</div><div class="stat-label">Duplicated Lines</div></div>
        <div class="stat-card"><div class="stat-value">{minimum_tokens}</div><div class="stat-label">Minimum Tokens</div></div>
    </div>
""")

    if not matches:
        parts.append("    <p>CPD found no problems in your source code.</p>\n")

    for index, match in enumerate(matches, start=1):
        parts.append(f"""    <section class="duplication" id="duplication-{index}">
        <h2>Duplication {index}: {match.line_count} lines, {match.token_count} tokens</h2>
        <table>
            <thead><tr><th>File</th><th>Line</th></tr></thead>
            <tbody>
""")
        for occurrence in match.occurrences:
            name = html.escape(catalog.display_name(occurrence.source_id))
            parts.append(
                f"                <tr><td><code>{name}</code></td><td>{occurrence.start_line}</td></tr>\n"
            )
        parts.append("""            </tbody>
        </table>
""")

        code_lines = match.fragment.split("\n")
        code_content = "\n".join(code_lines[:_MAX_FRAGMENT_LINES])
        if len(code_lines) > _MAX_FRAGMENT_LINES:
            code_content += "\n// ... (truncated)"
        parts.append(f"""        <pre><code>{html.escape(code_content)}</code></pre>
    </section>
""")

    parts.append(f"""    <footer>
        Generated by <strong>clone-gate</strong> on {timestamp}
    </footer>
</div>
</body>
</html>
""")

    return "".join(parts)


def write_site_page(
    matches: List[MatchGroup],
    catalog: SourceCatalog,
    site_directory: Path,
    minimum_tokens: int,
) -> Path:
    """
    Write cpd.html into the site directory.

    Raises:
        IOFailure: the page cannot be written
    """
    page = Path(site_directory) / SITE_PAGE_NAME
    try:
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(render_site_page(matches, catalog, minimum_tokens), encoding="utf-8")
    except OSError as e:
        raise IOFailure(f"Unable to write {page}: {e}", page) from e

    logger.info("Wrote %s", page)
    return page
