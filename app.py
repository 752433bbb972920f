#!/usr/bin/env python3
"""Style Snatcher web application."""

from __future__ import annotations

import logging
import os
from typing import Optional

from flask import Flask, jsonify, request

import style_snatcher

log = logging.getLogger(__name__)

app = Flask(__name__, static_folder=".", static_url_path="")
app.config.from_mapping(
    SNATCH_PROXY=os.environ.get("STYLE_SNATCHER_PROXY") or None,
    SNATCH_TIMEOUT=int(os.environ.get("STYLE_SNATCHER_TIMEOUT", style_snatcher.DEFAULT_TIMEOUT)),
    SNATCH_MAX_STYLESHEETS=style_snatcher.MAX_LINKED_STYLESHEETS,
)


def requested_url() -> str:
    payload = request.get_json(silent=True) or {}
    return (payload.get("url") or request.form.get("url") or request.args.get("url") or "").strip()


def url_error(url: str) -> Optional[str]:
    if not url:
        return "Please enter a website URL"
    if not style_snatcher.is_valid_url(url):
        return "Please enter a valid URL (e.g., https://example.com)"
    return None


def snatch(url: str) -> style_snatcher.StyleSnapshot:
    return style_snatcher.snatch(
        url,
        timeout=app.config["SNATCH_TIMEOUT"],
        max_stylesheets=app.config["SNATCH_MAX_STYLESHEETS"],
        proxy=app.config["SNATCH_PROXY"],
    )


@app.get("/")
def index():
    return app.send_static_file("index.html")


@app.route("/api/report", methods=["GET", "POST"])
def generate_report():
    url = requested_url()
    error = url_error(url)
    if error:
        return jsonify({"error": error}), 400

    try:
        snapshot = snatch(url)
    except Exception as exc:
        log.warning("report for %s failed: %s", url, exc)
        summary, hints = style_snatcher.classify_fetch_error(exc)
        html = style_snatcher.render_error_report(url, summary, hints, str(exc))
        return html, 502, {"Content-Type": "text/html; charset=utf-8"}
    return style_snatcher.render_report(snapshot), 200, {"Content-Type": "text/html; charset=utf-8"}


@app.route("/api/palette", methods=["GET", "POST"])
def palette():
    url = requested_url()
    error = url_error(url)
    if error:
        return jsonify({"error": error}), 400

    try:
        snapshot = snatch(url)
    except Exception as exc:
        log.warning("palette for %s failed: %s", url, exc)
        summary, hints = style_snatcher.classify_fetch_error(exc)
        return jsonify({"error": summary, "hints": hints}), 502
    return jsonify(snapshot.to_dict())


@app.post("/api/extract")
def extract():
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        css_text = str(payload.get("css") or "")
    else:
        css_text = request.get_data(as_text=True)

    snapshot = style_snatcher.analyze(css_text)
    return jsonify({"colors": snapshot.colors, "fonts": snapshot.fonts, "css": snapshot.css_variables()})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "8000")), debug=False)
