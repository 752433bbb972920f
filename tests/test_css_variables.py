"""
Tests for the CSS variable document, the snapshot object and the HTML report.
"""

from __future__ import annotations

from style_snatcher import (
    StyleSnapshot,
    analyze,
    color_var_name,
    font_var_name,
    generate_css_variables,
    render_report,
)


class TestVariableNames:
    """Tests for positional variable naming."""

    def test_color_names(self) -> None:
        assert [color_var_name(i) for i in range(6)] == [
            "primary",
            "secondary",
            "accent",
            "color-4",
            "color-5",
            "color-6",
        ]

    def test_font_names(self) -> None:
        assert [font_var_name(i) for i in range(4)] == ["primary", "secondary", "font-3", "font-4"]


class TestGenerateCssVariables:
    """Tests for the :root variable document."""

    def test_documented_example(self) -> None:
        css = generate_css_variables(["#ff0000", "#00ff00", "#0000ff", "#111111"], ["Georgia", "Verdana"])
        for line in (
            "primary-color: #ff0000;",
            "secondary-color: #00ff00;",
            "accent-color: #0000ff;",
            "color-4-color: #111111;",
            "font-primary: Georgia, sans-serif;",
            "font-secondary: Verdana, sans-serif;",
        ):
            assert line in css

    def test_full_layout(self) -> None:
        css = generate_css_variables(["#2563eb", "#0891b2"], ["Inter", "Roboto", "Arial"])
        assert css == (
            ":root {\n"
            "  /* Color Palette */\n"
            "  --primary-color: #2563eb;\n"
            "  --secondary-color: #0891b2;\n"
            "\n"
            "  /* Typography */\n"
            "  --font-primary: Inter, sans-serif;\n"
            "  --font-secondary: Roboto, sans-serif;\n"
            "  --font-font-3: Arial, sans-serif;\n"
            "}\n"
        )

    def test_empty_lists(self) -> None:
        assert generate_css_variables([], []) == ":root {\n  /* Color Palette */\n\n  /* Typography */\n}\n"

    def test_pure(self) -> None:
        colors = ["#123456"]
        fonts = ["Lato"]
        assert generate_css_variables(colors, fonts) == generate_css_variables(colors, fonts)
        assert colors == ["#123456"]
        assert fonts == ["Lato"]


class TestStyleSnapshot:
    """Tests for the caller-held result object."""

    def test_analyze(self) -> None:
        snapshot = analyze("a{color:#abc;font-family:Lato}", url="https://example.com", title="Example")
        assert snapshot.colors == ["#aabbcc"]
        assert snapshot.fonts == ["Lato"]
        assert snapshot.url == "https://example.com"

    def test_to_dict(self) -> None:
        snapshot = StyleSnapshot(url="https://example.com", colors=["#aabbcc"], fonts=["Lato"], title="Example")
        data = snapshot.to_dict()
        assert data["colors"] == ["#aabbcc"]
        assert data["fonts"] == ["Lato"]
        assert data["title"] == "Example"
        assert data["css"] == snapshot.css_variables()
        assert "--primary-color: #aabbcc;" in data["css"]


class TestRenderReport:
    """Tests for the HTML report."""

    def test_swatches_and_fonts(self) -> None:
        snapshot = StyleSnapshot(url="https://example.com/", colors=["#2563eb", "#0891b2"], fonts=["Georgia", "Verdana", "Lato"])
        html = render_report(snapshot)
        assert "#2563EB" in html
        assert "background-color:#2563eb" in html
        assert "Primary: Georgia" in html
        assert "Secondary: Verdana" in html
        assert ">Lato<" in html
        assert "font-family:Georgia, sans-serif" in html
        assert "--primary-color: #2563eb;" in html

    def test_title_falls_back_to_host(self) -> None:
        html = render_report(StyleSnapshot(url="https://example.com/page", colors=[], fonts=[]))
        assert "<h1 class=\"site-card-title\">example.com</h1>" in html

    def test_escapes_font_names(self) -> None:
        html = render_report(StyleSnapshot(url="", colors=[], fonts=["<script>"]))
        assert "<script>," not in html
        assert "&lt;script&gt;" in html
