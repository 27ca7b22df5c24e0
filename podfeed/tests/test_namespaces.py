"""Unit tests for namespace-prefix normalization.

Network-free; every document is inline.
"""

from __future__ import annotations

import unittest

from podfeed.errors import MalformedXmlError
from podfeed.feeds.namespaces import (
    End,
    Other,
    Start,
    Text,
    check_well_formed,
    iter_events,
    normalize,
    normalize_pattern,
    rename,
)

PLAIN_DOC = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<!-- generated -->\n"
    '<rss version="2.0">\n'
    "  <channel>\n"
    "    <title>A &amp; B</title>\n"
    "    <empty/>\n"
    '    <x a="1 > 0" b=\'q\'><![CDATA[<raw> & stuff]]></x>\n'
    "    <link>http://example.com:8080/feed</link>\n"
    "  </channel>\n"
    "</rss>\n"
)


class TestNormalize(unittest.TestCase):
    def test_rewrites_prefixed_start_and_end_tags(self) -> None:
        xml = "<root><foo:bar>Content</foo:bar><baz:qux>More Content</baz:qux></root>"
        expected = (
            "<root><foo___placeholder___bar>Content</foo___placeholder___bar>"
            "<baz___placeholder___qux>More Content</baz___placeholder___qux></root>"
        )
        self.assertEqual(normalize(xml, "___placeholder___"), expected)

    def test_document_without_prefixes_is_unchanged(self) -> None:
        self.assertEqual(normalize(PLAIN_DOC, "__ns__"), PLAIN_DOC)

    def test_self_closing_element_is_renamed(self) -> None:
        xml = '<channel><itunes:image href="http://x/a.jpg"/></channel>'
        self.assertEqual(
            normalize(xml, "__ns__"),
            '<channel><itunes__ns__image href="http://x/a.jpg"/></channel>',
        )

    def test_attributes_are_left_alone(self) -> None:
        xml = '<rss xmlns:itunes="urn:x"><itunes:author a:b="c:d">x</itunes:author></rss>'
        self.assertEqual(
            normalize(xml, "__ns__"),
            '<rss xmlns:itunes="urn:x"><itunes__ns__author a:b="c:d">x</itunes__ns__author></rss>',
        )

    def test_only_first_colon_is_replaced(self) -> None:
        self.assertEqual(normalize("<a:b:c>x</a:b:c>", "_"), "<a_b:c>x</a_b:c>")
        self.assertEqual(rename("a:b:c", "_"), "a_b:c")
        self.assertEqual(rename("plain", "_"), "plain")

    def test_end_tag_trailing_whitespace_is_kept(self) -> None:
        self.assertEqual(normalize("<foo:bar>x</foo:bar >", "__"), "<foo__bar>x</foo__bar >")

    def test_text_with_colons_is_untouched(self) -> None:
        xml = "<a:b>see: http://x:80/y</a:b>"
        self.assertEqual(normalize(xml, "__"), "<a__b>see: http://x:80/y</a__b>")

    def test_default_replacement(self) -> None:
        self.assertEqual(normalize("<a:b/>"), "<a__placeholder__b/>")

    def test_accepts_utf8_bytes(self) -> None:
        xml = "<itunes:title>Café</itunes:title>".encode("utf-8")
        self.assertEqual(normalize(xml, "__"), "<itunes__title>Café</itunes__title>")

    def test_idempotent(self) -> None:
        xml = "<rss><itunes:a>1</itunes:a><b><c:d/></b></rss>"
        once = normalize(xml, "__ns__")
        self.assertEqual(normalize(once, "__ns__"), once)

    def test_output_keeps_tree_shape(self) -> None:
        xml = "<rss><x:a><b>t</b><x:c k='v'/></x:a><x:a>u</x:a></rss>"
        out = normalize(xml, "__")
        check_well_formed(out)

        def names(doc: str) -> list[tuple[str, str]]:
            return [(type(e).__name__, e.name) for e in iter_events(doc) if isinstance(e, (Start, End))]

        expected = [(kind, rename(name, "__")) for kind, name in names(xml)]
        self.assertEqual(names(out), expected)
        self.assertEqual(
            [e.raw for e in iter_events(out) if isinstance(e, Text)],
            [e.raw for e in iter_events(xml) if isinstance(e, Text)],
        )


class TestMalformed(unittest.TestCase):
    def test_mismatched_tags_raise(self) -> None:
        with self.assertRaises(MalformedXmlError) as ctx:
            normalize("<a><b></a>", "__")
        self.assertEqual(ctx.exception.line, 1)

    def test_unclosed_document_raises(self) -> None:
        with self.assertRaises(MalformedXmlError):
            normalize("<foo:bar>text", "__")

    def test_invalid_utf8_raises(self) -> None:
        with self.assertRaises(MalformedXmlError):
            normalize(b"<a>\xff\xfe</a>", "__")

    def test_empty_input_raises(self) -> None:
        with self.assertRaises(MalformedXmlError):
            normalize("", "__")


class TestIterEvents(unittest.TestCase):
    def test_event_kinds_in_order(self) -> None:
        events = list(iter_events("<a:b>t<!--c--><x/></a:b>"))
        self.assertEqual(
            events,
            [
                Start("a:b", "<a:b>"),
                Text("t"),
                Other("<!--c-->"),
                Start("x", "<x/>", self_closing=True),
                End("a:b", "</a:b>"),
            ],
        )

    def test_raw_pieces_reassemble_input(self) -> None:
        self.assertEqual("".join(e.raw for e in iter_events(PLAIN_DOC)), PLAIN_DOC)

    def test_is_lazy_and_single_pass(self) -> None:
        events = iter_events("<a>b</a>")
        self.assertEqual(next(events), Start("a", "<a>"))
        self.assertEqual(len(list(events)), 2)
        self.assertEqual(list(events), [])

    def test_doctype_with_internal_subset_is_other(self) -> None:
        xml = '<!DOCTYPE rss [<!ENTITY e "x>y">]><rss>&e;</rss>'
        events = list(iter_events(xml))
        self.assertIsInstance(events[0], Other)
        self.assertEqual(events[0].raw, '<!DOCTYPE rss [<!ENTITY e "x>y">]>')
        self.assertEqual(normalize(xml, "__"), xml)

    def test_doctype_subset_comment_and_pi_with_quotes(self) -> None:
        xml = (
            "<!DOCTYPE rss [<!-- it's fine --><?note say \"hi?>"
            '<!ENTITY e "v">]><rss><itunes:a>&e;</itunes:a></rss>'
        )
        events = list(iter_events(xml))
        self.assertEqual(events[0], Other("<!DOCTYPE rss [<!-- it's fine --><?note say \"hi?><!ENTITY e \"v\">]>"))
        self.assertEqual(
            normalize(xml, "__"),
            "<!DOCTYPE rss [<!-- it's fine --><?note say \"hi?>"
            '<!ENTITY e "v">]><rss><itunes__a>&e;</itunes__a></rss>',
        )


class TestNormalizePattern(unittest.TestCase):
    def test_pattern_colons_follow_element_names(self) -> None:
        self.assertEqual(
            normalize_pattern("rss.channel.itunes:author", "__ns__"),
            "rss.channel.itunes__ns__author",
        )

    def test_each_step_follows_first_colon_rule(self) -> None:
        self.assertEqual(normalize_pattern("a:b:c.d:e", "_"), "a_b:c.d_e")
        self.assertEqual(normalize_pattern("plain.path", "_"), "plain.path")


if __name__ == "__main__":
    unittest.main()
