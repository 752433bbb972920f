#!/usr/bin/env python3
"""Style Snatcher: pull a color palette and font list out of a page's CSS."""

from __future__ import annotations

import argparse
import html
import json
import logging
import math
import re
import socket
import ssl
import sys
from collections import Counter
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urljoin, urlparse
from urllib.request import Request, urlopen

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20
MAX_LINKED_STYLESHEETS = 5
MAX_COLORS = 7
MAX_FONTS = 5
UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)

DEFAULT_COLORS = ["#2563eb", "#0891b2", "#059669"]
DEFAULT_FONTS = ["Inter", "Roboto", "Arial"]

# "#transparent" and the 3-digit forms never match a canonical #rrggbb value.
COMMON_COLORS = frozenset(["#ffffff", "#fff", "#000000", "#000", "#transparent", "#fefefe", "#010101"])
GENERIC_FONTS = frozenset(["serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"])
FONT_QUOTES = "\"'‘’“”"
FONT_SAMPLE = "The quick brown fox jumps over the lazy dog."

HEX_PATTERN = re.compile(r"#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})\b", re.ASCII)
RGB_PATTERN = re.compile(r"rgba?\s*\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})(?:\s*,\s*[\d.]+)?\s*\)", re.ASCII)
HSL_PATTERN = re.compile(r"hsla?\s*\(\s*(\d+\.?\d*|\.\d+)\s*,\s*(\d+\.?\d*|\.\d+)%\s*,\s*(\d+\.?\d*|\.\d+)%", re.ASCII)
FONT_FAMILY_PATTERN = re.compile(r"font-family\s*:\s*([^;{}]+)", re.I)


@dataclass
class StyleSnapshot:
    url: str
    colors: List[str] = field(default_factory=list)
    fonts: List[str] = field(default_factory=list)
    title: str = ""

    def css_variables(self) -> str:
        return generate_css_variables(self.colors, self.fonts)

    def to_dict(self) -> Dict[str, object]:
        return {
            "url": self.url,
            "title": self.title,
            "colors": list(self.colors),
            "fonts": list(self.fonts),
            "css": self.css_variables(),
        }


# --- color normalization -----------------------------------------------------


def normalize_hex(value: str) -> str:
    """Return the ``#rrggbb`` form of a 3- or 6-digit hex literal."""
    h = value.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(ch * 2 for ch in h)
    return "#" + h.lower()


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#%02x%02x%02x" % (r, g, b)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hsl_to_rgb(h: float, s: float, l: float) -> Tuple[int, int, int]:
    """Convert hue in degrees and saturation/lightness in percent to 0-255 channels.

    A hue of 360 wraps around to red instead of falling outside every sector.
    """
    h = h % 360
    s /= 100
    l /= 100

    c = (1 - abs(2 * l - 1)) * s
    x = c * (1 - abs((h / 60) % 2 - 1))
    m = l - c / 2

    sector = int(h // 60)
    r, g, b = [
        (c, x, 0.0),
        (x, c, 0.0),
        (0.0, c, x),
        (0.0, x, c),
        (x, 0.0, c),
        (c, 0.0, x),
    ][sector]

    return (
        _round_half_up((r + m) * 255),
        _round_half_up((g + m) * 255),
        _round_half_up((b + m) * 255),
    )


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def is_valid_rgb_value(value: int) -> bool:
    return 0 <= value <= 255


def is_valid_hsl_value(h: float, s: float, l: float) -> bool:
    return 0 <= h <= 360 and 0 <= s <= 100 and 0 <= l <= 100


def is_common_color(value: str) -> bool:
    return value.lower() in COMMON_COLORS


# --- color extraction --------------------------------------------------------


def scan_colors(css_text: str) -> Counter:
    """Count every hex, rgb() and hsl() literal in ``css_text`` by canonical value.

    Literals are scanned format by format (hex, then rgb, then hsl) so that
    ties keep the order in which each value was first seen.
    """
    counts: Counter = Counter()

    for m in HEX_PATTERN.finditer(css_text):
        counts[normalize_hex(m.group(0))] += 1

    for m in RGB_PATTERN.finditer(css_text):
        r, g, b = (int(v) for v in m.groups())
        if is_valid_rgb_value(r) and is_valid_rgb_value(g) and is_valid_rgb_value(b):
            counts[rgb_to_hex(r, g, b)] += 1

    for m in HSL_PATTERN.finditer(css_text):
        h, s, l = (float(v) for v in m.groups())
        if is_valid_hsl_value(h, s, l):
            counts[hsl_to_hex(h, s, l)] += 1

    return counts


def extract_colors(css_text: str, limit: int = MAX_COLORS) -> List[str]:
    counts = scan_colors(css_text)
    for color in [c for c in counts if is_common_color(c)]:
        del counts[color]
    ranked = [color for color, _ in counts.most_common(limit)]
    log.debug("found %d distinct colors, keeping %d", len(counts), len(ranked))
    return ranked if ranked else list(DEFAULT_COLORS)


# --- font extraction ---------------------------------------------------------


def parse_font_stack(font_stack: str) -> List[str]:
    fonts: List[str] = []
    for entry in font_stack.split(","):
        name = entry.strip().strip(FONT_QUOTES).strip()
        if name:
            fonts.append(name)
    return fonts


def is_generic_font(name: str) -> bool:
    return name.lower() in GENERIC_FONTS


def scan_fonts(css_text: str) -> Counter:
    counts: Counter = Counter()
    for m in FONT_FAMILY_PATTERN.finditer(css_text):
        for name in parse_font_stack(m.group(1)):
            if not is_generic_font(name):
                counts[name] += 1
    return counts


def extract_fonts(css_text: str, limit: int = MAX_FONTS) -> List[str]:
    counts = scan_fonts(css_text)
    ranked = [name for name, _ in counts.most_common(limit)]
    log.debug("found %d distinct font families, keeping %d", len(counts), len(ranked))
    return ranked if ranked else list(DEFAULT_FONTS)


# --- variable document -------------------------------------------------------


def color_var_name(index: int) -> str:
    if index == 0:
        return "primary"
    if index == 1:
        return "secondary"
    if index == 2:
        return "accent"
    return f"color-{index + 1}"


def font_var_name(index: int) -> str:
    if index == 0:
        return "primary"
    if index == 1:
        return "secondary"
    return f"font-{index + 1}"


def generate_css_variables(colors: List[str], fonts: List[str]) -> str:
    lines = [":root {", "  /* Color Palette */"]
    for i, color in enumerate(colors):
        lines.append(f"  --{color_var_name(i)}-color: {color};")
    lines.append("")
    lines.append("  /* Typography */")
    for i, font in enumerate(fonts):
        lines.append(f"  --font-{font_var_name(i)}: {font}, sans-serif;")
    lines.append("}")
    return "\n".join(lines) + "\n"


# --- style text collection ---------------------------------------------------


class StyleIndex(HTMLParser):
    def __init__(self) -> None:
        super().__init__()
        self.style_blocks: List[str] = []
        self.stylesheets: List[str] = []
        self.inline_styles: List[str] = []
        self.title_text = ""

        self._in_style = False
        self._style_buf: List[str] = []
        self._in_title = False
        self._title_buf: List[str] = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        attr_map = {k.lower(): (v or "") for k, v in attrs}

        if "style" in attr_map:
            self.inline_styles.append(attr_map["style"])

        if tag == "link":
            rel = attr_map.get("rel", "").lower().split()
            href = attr_map.get("href", "").strip()
            if "stylesheet" in rel and href:
                self.stylesheets.append(href)

        if tag == "style":
            self._in_style = True
            self._style_buf = []
        elif tag == "title":
            self._in_title = True
            self._title_buf = []

    def handle_endtag(self, tag: str) -> None:
        if tag == "style" and self._in_style:
            self._in_style = False
            self.style_blocks.append("".join(self._style_buf))
        elif tag == "title" and self._in_title:
            self._in_title = False
            title = " ".join("".join(self._title_buf).split())
            if title:
                self.title_text = title

    def handle_data(self, data: str) -> None:
        if self._in_style:
            self._style_buf.append(data)
        elif self._in_title:
            self._title_buf.append(data)


def is_valid_url(url: str) -> bool:
    try:
        p = urlparse(url)
    except ValueError:
        return False
    return p.scheme in {"http", "https"} and bool(p.netloc)


def proxied(url: str, proxy: Optional[str]) -> str:
    if not proxy:
        return url
    return proxy.replace("{url}", quote(url, safe=""))


def fetch_text(url: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    req = Request(
        url,
        headers={
            "User-Agent": UA,
            "Accept": "text/html,text/css,application/xhtml+xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "no-cache",
        },
    )
    try:
        with urlopen(req, timeout=timeout) as res:
            charset = res.headers.get_content_charset() or "utf-8"
            body = res.read()
    except (ssl.SSLCertVerificationError, URLError) as exc:
        retry = isinstance(exc, ssl.SSLCertVerificationError) or isinstance(
            getattr(exc, "reason", None), ssl.SSLCertVerificationError
        )
        if not retry:
            raise
        log.warning("certificate check failed for %s, retrying unverified", url)
        with urlopen(req, timeout=timeout, context=ssl._create_unverified_context()) as res:
            charset = res.headers.get_content_charset() or "utf-8"
            body = res.read()
    return body.decode(charset, errors="replace")


def gather_style_text(
    url: str,
    index: StyleIndex,
    timeout: int = DEFAULT_TIMEOUT,
    max_stylesheets: int = MAX_LINKED_STYLESHEETS,
    proxy: Optional[str] = None,
) -> str:
    parts: List[str] = [block + "\n" for block in index.style_blocks]

    for href in index.stylesheets[:max_stylesheets]:
        full = urljoin(url, href)
        try:
            parts.append(fetch_text(proxied(full, proxy), timeout=timeout) + "\n")
        except Exception as exc:
            log.warning("skipping stylesheet %s: %s", full, exc)

    parts.extend(style + ";" for style in index.inline_styles)
    return "".join(parts)


def collect_style_text(
    url: str,
    timeout: int = DEFAULT_TIMEOUT,
    max_stylesheets: int = MAX_LINKED_STYLESHEETS,
    proxy: Optional[str] = None,
) -> Tuple[str, StyleIndex]:
    html_text = fetch_text(proxied(url, proxy), timeout=timeout)
    index = StyleIndex()
    index.feed(html_text)
    index.close()
    log.info(
        "%s: %d <style> blocks, %d linked stylesheets, %d inline styles",
        url,
        len(index.style_blocks),
        len(index.stylesheets),
        len(index.inline_styles),
    )
    return gather_style_text(url, index, timeout, max_stylesheets, proxy), index


def analyze(css_text: str, url: str = "", title: str = "") -> StyleSnapshot:
    return StyleSnapshot(url=url, colors=extract_colors(css_text), fonts=extract_fonts(css_text), title=title)


def snatch(
    url: str,
    timeout: int = DEFAULT_TIMEOUT,
    max_stylesheets: int = MAX_LINKED_STYLESHEETS,
    proxy: Optional[str] = None,
) -> StyleSnapshot:
    css_text, index = collect_style_text(url, timeout, max_stylesheets, proxy)
    return analyze(css_text, url=url, title=index.title_text)


# --- reports -----------------------------------------------------------------


def esc(value: str) -> str:
    return html.escape(value, quote=True)


def site_label(url: str) -> str:
    host = urlparse(url).netloc if url else ""
    return host or "Local stylesheet"


def render_color_swatch(color: str) -> str:
    return (
        '<div class="color-swatch" role="button" tabindex="0" '
        f'aria-label="Copy color {esc(color)}" data-copy="{esc(color)}" style="background-color:{esc(color)}">'
        f'<div class="color-code">{esc(color.upper())}</div>'
        "</div>"
    )


def render_font_item(font: str, index: int) -> str:
    prefix = ""
    if index == 0:
        prefix = "Primary: "
    elif index == 1:
        prefix = "Secondary: "
    return (
        '<div class="font-item">'
        f'<div class="font-name">{esc(prefix + font)}</div>'
        f'<div class="font-sample" style="font-family:{esc(font)}, sans-serif">{esc(FONT_SAMPLE)}</div>'
        "</div>"
    )


REPORT_STYLE = """
    :root {
      --bg: #f8fafc;
      --ink: #0f172a;
      --muted: #64748b;
      --line: #e2e8f0;
      --panel: #ffffff;
      --danger: #b91c1c;
    }
    * { box-sizing: border-box; }
    body { margin: 0; background: var(--bg); color: var(--ink); font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif; }
    .wrap { max-width: 960px; margin: 40px auto 64px; padding: 0 20px; }
    .site-card { text-align: center; border: 1px solid var(--line); background: var(--panel); border-radius: 12px; padding: 16px 20px; }
    .site-card-title { margin: 0 0 6px; font-size: clamp(26px, 4vw, 44px); font-weight: 700; letter-spacing: -0.02em; }
    .site-card-url { font-size: 13px; color: #334155; word-break: break-all; text-decoration: none; }
    .section-title { margin: 28px 0 14px; color: var(--muted); text-transform: uppercase; letter-spacing: .12em; font-size: 13px; font-weight: 600; }
    .palette { display: grid; grid-template-columns: repeat(auto-fit, minmax(120px, 1fr)); gap: 12px; }
    .color-swatch { height: 120px; border-radius: 10px; border: 1px solid rgba(0,0,0,.08); display: flex; align-items: flex-end; cursor: pointer; }
    .color-code { width: 100%; background: rgba(255,255,255,.9); font-size: 13px; font-family: ui-monospace, Menlo, Consolas, monospace; padding: 6px 8px; border-radius: 0 0 10px 10px; }
    .typography { display: grid; gap: 12px; }
    .font-item { background: var(--panel); border: 1px solid var(--line); border-radius: 10px; padding: 12px 14px; }
    .font-name { font-size: 13px; color: var(--muted); margin-bottom: 6px; }
    .font-sample { font-size: 22px; }
    .css-block { background: #0f172a; color: #e2e8f0; border-radius: 10px; padding: 16px; font-size: 13px; overflow-x: auto; }
    .error-card { border: 1px solid #fecaca; background: #fef2f2; border-radius: 10px; padding: 14px; }
    .error-title { color: var(--danger); font-weight: 700; margin-bottom: 6px; }
    .raw { margin-top: 12px; padding: 10px; border: 1px solid var(--line); border-radius: 8px; background: var(--panel); font-family: ui-monospace, Menlo, Consolas, monospace; font-size: 12px; word-break: break-word; }
"""

COPY_SCRIPT = """
    document.querySelectorAll('[data-copy]').forEach(function (el) {
      el.addEventListener('click', function () { navigator.clipboard.writeText(el.dataset.copy); });
    });
    document.getElementById('copyCssBtn').addEventListener('click', function () {
      navigator.clipboard.writeText(document.getElementById('cssVariables').textContent);
    });
"""


def render_report(snapshot: StyleSnapshot) -> str:
    title = snapshot.title or site_label(snapshot.url)
    swatches = "".join(render_color_swatch(c) for c in snapshot.colors)
    font_items = "".join(render_font_item(f, i) for i, f in enumerate(snapshot.fonts))
    page_link = ""
    if snapshot.url:
        page_link = f'<a class="site-card-url" href="{esc(snapshot.url)}" target="_blank" rel="noreferrer">{esc(snapshot.url)}</a>'

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Style Snatcher Report</title>
  <style>{REPORT_STYLE}</style>
</head>
<body>
  <main class="wrap">
    <div class="site-card">
      <h1 class="site-card-title">{esc(title)}</h1>
      {page_link}
    </div>

    <p class="section-title">Color Palette</p>
    <div class="palette" id="colorPalette">{swatches}</div>

    <p class="section-title">Typography</p>
    <div class="typography" id="typography">{font_items}</div>

    <p class="section-title">CSS Variables <button type="button" id="copyCssBtn">Copy</button></p>
    <pre class="css-block" id="cssVariables">{esc(snapshot.css_variables())}</pre>
  </main>
  <script>{COPY_SCRIPT}</script>
</body>
</html>
"""


def classify_fetch_error(exc: BaseException) -> Tuple[str, List[str]]:
    if isinstance(exc, HTTPError):
        if exc.code == 403:
            headers = exc.headers or {}
            if headers.get("cf-mitigated"):
                return (
                    "The site answered with a bot challenge (HTTP 403).",
                    [
                        "A challenge page was served instead of the real content.",
                        "Try another page on the same site, or use --proxy.",
                    ],
                )
            return (
                "Access denied (HTTP 403).",
                ["This URL blocks automated fetches.", "Try a less protected public page."],
            )
        if exc.code == 404:
            return ("Page not found (HTTP 404).", ["Check the URL for typos."])
        if exc.code == 429:
            return (
                "Rate limited (HTTP 429).",
                ["The server asked us to slow down.", "Wait a few minutes and run again."],
            )
        if exc.code >= 500:
            return (
                f"The site's server failed (HTTP {exc.code}).",
                ["This is usually temporary on their side.", "Retry later."],
            )
        return (f"Request failed (HTTP {exc.code}).", ["Check the URL and try again."])

    if isinstance(exc, URLError) and isinstance(exc.reason, (socket.timeout, TimeoutError)):
        exc = exc.reason
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return (
            "The site took too long to respond.",
            ["Retry with a larger --timeout.", "Check that the site is up."],
        )

    if isinstance(exc, URLError):
        return (
            "Unreachable host.",
            [
                "DNS or network lookup failed for this domain.",
                "Double-check the URL spelling.",
                "Make sure the URL is correct and publicly accessible.",
            ],
        )

    return (
        "Failed to analyze website.",
        ["Make sure the URL is correct and publicly accessible.", f"Details: {exc}"],
    )


def render_error_report(url: str, summary: str, hints: List[str], raw_error: str) -> str:
    hint_items = "".join(f"<li>{esc(hint)}</li>" for hint in hints)
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Style Snatcher Report - Error</title>
  <style>{REPORT_STYLE}</style>
</head>
<body>
  <main class="wrap">
    <div class="site-card">
      <h1 class="site-card-title">{esc(site_label(url))}</h1>
      <a class="site-card-url" href="{esc(url)}" target="_blank" rel="noreferrer">{esc(url)}</a>
    </div>
    <p class="section-title">Report Status</p>
    <div class="error-card">
      <div class="error-title">Could not snatch styles</div>
      <div>{esc(summary)}</div>
      <ul>{hint_items}</ul>
      <div class="raw">{esc(raw_error)}</div>
    </div>
  </main>
</body>
</html>
"""


# --- command line ------------------------------------------------------------


def render_output(snapshot: StyleSnapshot, fmt: str) -> str:
    if fmt == "css":
        return snapshot.css_variables()
    if fmt == "json":
        return json.dumps(snapshot.to_dict(), indent=2) + "\n"
    return render_report(snapshot)


def read_css_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def run(
    url: str,
    output: Optional[Path],
    fmt: str = "html",
    timeout: int = DEFAULT_TIMEOUT,
    max_stylesheets: int = MAX_LINKED_STYLESHEETS,
    proxy: Optional[str] = None,
    css_path: Optional[str] = None,
) -> StyleSnapshot:
    if css_path:
        snapshot = analyze(read_css_source(css_path), url=url)
    else:
        snapshot = snatch(url, timeout=timeout, max_stylesheets=max_stylesheets, proxy=proxy)

    text = render_output(snapshot, fmt)
    if output is None:
        sys.stdout.write(text)
    else:
        output.write_text(text, encoding="utf-8")
    return snapshot


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Extract a color palette and fonts from a page's CSS")
    ap.add_argument("url", nargs="?", default="", help="Page URL (https://...) to inspect")
    ap.add_argument("-o", "--output", help="Output file (default: report file for html, stdout otherwise)")
    ap.add_argument("-f", "--format", choices=["html", "css", "json"], default="html", help="Output format")
    ap.add_argument("--css", dest="css_path", help="Analyze a local stylesheet instead of a URL ('-' for stdin)")
    ap.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT, help="Network timeout in seconds")
    ap.add_argument(
        "--max-stylesheets",
        type=int,
        default=MAX_LINKED_STYLESHEETS,
        help="Number of linked stylesheets to fetch",
    )
    ap.add_argument("--proxy", help="Proxy URL template, e.g. 'https://api.allorigins.win/raw?url={url}'")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    url = (args.url or "").strip()
    if not args.css_path:
        if not url:
            ap.error("Please enter a website URL")
        if not is_valid_url(url):
            ap.error("Please enter a valid URL (e.g., https://example.com)")

    output: Optional[Path] = Path(args.output) if args.output else None
    if output is None and args.format == "html":
        output = Path("style-snatcher-report.html")

    try:
        run(
            url,
            output,
            fmt=args.format,
            timeout=args.timeout,
            max_stylesheets=args.max_stylesheets,
            proxy=args.proxy,
            css_path=args.css_path,
        )
    except Exception as exc:
        if args.css_path:
            log.error("could not read %s: %s", args.css_path, exc)
            return 1
        summary, hints = classify_fetch_error(exc)
        if args.format != "html" or output is None:
            log.error("%s %s", summary, " ".join(hints))
            return 1
        output.write_text(render_error_report(url, summary, hints, str(exc)), encoding="utf-8")
        log.info("Report written to %s (error report)", output)
        return 0

    if output is not None:
        log.info("Report written to %s", output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
