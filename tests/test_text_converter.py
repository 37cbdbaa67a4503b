"""
Tests for HTML to plain text conversion.
"""

from term_intel.extraction import HtmlTextConverter


class TestHtmlTextConverter:
    def test_visible_text_only(self, sample_html):
        text = HtmlTextConverter().to_plain_text(sample_html)

        assert "quantum entanglement - Search" in text
        assert "Entangled particles remain correlated" in text
        assert "tracking" not in text
        assert "color: red" not in text
        assert "Hidden navigation" not in text

    def test_whitespace_collapsed(self):
        html = "<p>Hello\n\n   <b>world</b></p>\t<p>again</p>"

        assert HtmlTextConverter().to_plain_text(html) == "Hello world again"

    def test_empty_input(self):
        converter = HtmlTextConverter()

        assert converter.to_plain_text("") == ""
        assert converter.to_plain_text("   \n") == ""

    def test_nested_removed_tags(self):
        html = (
            '<div aria-hidden="true"><script>x()</script>hidden</div>'
            "<svg><style>.a{}</style></svg><p>shown</p>"
        )

        assert HtmlTextConverter().to_plain_text(html) == "shown"

    def test_hidden_class(self):
        html = '<span class="sr-only">skip</span><span class="result">keep</span>'

        assert HtmlTextConverter().to_plain_text(html) == "keep"

    def test_malformed_markup(self):
        html = "<div><p>unclosed <b>bold<p>next"

        text = HtmlTextConverter().to_plain_text(html)

        assert "unclosed" in text
        assert "next" in text

    def test_entities_decoded(self):
        assert HtmlTextConverter().to_plain_text("<p>A &amp; B</p>") == "A & B"
