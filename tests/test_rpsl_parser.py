"""
Tests for the RPSL reader and attribute value parsers

This module tests:
- Object splitting, comments and continuation lines
- Object keys and structural errors
- Policy attribute tokenization
- AS number, prefix range and set name parsing
"""

import io
import unittest

from rpsl_bgp.rpsl import (
    AddressPrefixRange, ObjectType, RpslObjectReader, is_as_number,
    parse_as_number, parse_object, read_objects
)
from rpsl_bgp.rpsl.attrs import split_list_value, split_range_operator
from rpsl_bgp.rpsl.objects import RpslAttribute
from rpsl_bgp.utils.error_handling import AttributeParseError, ObjectParseError


SAMPLE_DATABASE = """\
% This is a whois dump
% with a header comment

route-set:      RS-EXAMPLE
descr:          Example set  # inline comment
members:        10.0.0.0/8,
                192.0.2.0/24
+               198.51.100.0/24
mbrs-by-ref:    ANY

route:          10.0.0.0/8
origin:         AS65000
mnt-by:         MNTR-EXAMPLE

this is not rpsl
at all

aut-num:        AS65000
as-name:        EXAMPLE
# comment inside an object
export:         to AS65001 at 192.0.2.1 announce RS-EXAMPLE
"""


class TestRpslObjectReader(unittest.TestCase):
    """Test reading object batches."""

    def test_reads_valid_objects_and_skips_invalid(self):
        reader = RpslObjectReader()
        objects = reader.read_all(SAMPLE_DATABASE)

        self.assertEqual([obj.type for obj in objects],
                         [ObjectType.ROUTE_SET, ObjectType.ROUTE, ObjectType.AUT_NUM])
        self.assertEqual(len(reader.skipped), 1)
        self.assertIn("this is not rpsl", reader.skipped[0].object_text)

    def test_skipped_object_is_logged_with_excerpt(self):
        reader = RpslObjectReader(excerpt_lines=1)

        with self.assertLogs('rpsl_bgp.rpsl.parser', level='WARNING') as logs:
            reader.read_all("bad line one\nbad line two\n")

        self.assertIn("Unable to parse following object, skipping...", logs.output[0])
        self.assertIn("bad line one", logs.output[0])
        self.assertNotIn("bad line two", logs.output[0])

    def test_continuation_lines(self):
        route_set = read_objects(SAMPLE_DATABASE)[0]

        self.assertEqual(route_set.get_list_values("members"),
                         ["10.0.0.0/8", "192.0.2.0/24", "198.51.100.0/24"])
        self.assertEqual(route_set.get_value("descr"), "Example set")

    def test_reads_file_objects(self):
        objects = read_objects(io.StringIO(SAMPLE_DATABASE))

        self.assertEqual(len(objects), 3)

    def test_comment_only_blocks_are_ignored(self):
        reader = RpslObjectReader()

        self.assertEqual(reader.read_all("% just\n% comments\n"), [])
        self.assertEqual(reader.skipped, [])


class TestRpslObject(unittest.TestCase):
    """Test object construction, keys and equality."""

    def test_route_key_combines_prefix_and_origin(self):
        obj = parse_object("route: 10.0.0.0/8\norigin: AS65000\n")

        self.assertEqual(obj.type, "route")
        self.assertEqual(obj.key, "10.0.0.0/8AS65000")

    def test_attribute_names_are_lowercased(self):
        obj = parse_object("Route-Set: RS-FOO\nMembers: 10.0.0.0/8\n")

        self.assertEqual(obj.type, ObjectType.ROUTE_SET)
        self.assertTrue(obj.contains_attribute("members"))

    def test_route_without_origin_is_invalid(self):
        with self.assertRaises(ObjectParseError):
            parse_object("route: 10.0.0.0/8\nmnt-by: MNTR-A\n")

    def test_duplicate_key_attribute_is_invalid(self):
        with self.assertRaises(ObjectParseError):
            parse_object("route: 10.0.0.0/8\norigin: AS1\norigin: AS2\n")

    def test_continuation_without_attribute_is_invalid(self):
        with self.assertRaises(ObjectParseError):
            parse_object(" continuation\nroute-set: RS-FOO\n")

    def test_equality_by_attributes(self):
        text = "route-set: RS-FOO\nmembers: 10.0.0.0/8\n"

        self.assertEqual(parse_object(text), parse_object(text))
        self.assertEqual(len({parse_object(text), parse_object(text)}), 1)

    def test_token_list(self):
        attr = RpslAttribute("export", "to AS2 1.1.1.1 at 3.3.3.3 action pref=100; announce { 10.0.0.0/8 }")

        self.assertEqual(attr.token_list(), [
            ("to", ["AS2", "1.1.1.1"]),
            ("at", ["3.3.3.3"]),
            ("action", ["pref=100"]),
            ("announce", ["10.0.0.0/8"]),
        ])

    def test_token_list_drops_leading_values(self):
        attr = RpslAttribute("export", "garbage to AS2 at 3.3.3.3")

        self.assertEqual(attr.token_list()[0], ("to", ["AS2"]))


class TestAttributeParsers(unittest.TestCase):
    """Test attribute value parsing."""

    def test_parse_as_number(self):
        self.assertEqual(parse_as_number("AS65000"), 65000)
        self.assertEqual(parse_as_number("as1"), 1)
        self.assertEqual(parse_as_number("AS1.10"), 65546)
        self.assertEqual(parse_as_number("AS4294967295"), 4294967295)

    def test_parse_invalid_as_number(self):
        for value in ["65000", "AS-FOO", "AS4294967296", "AS70000.1", ""]:
            with self.subTest(value=value):
                with self.assertRaises(AttributeParseError):
                    parse_as_number(value)
        self.assertFalse(is_as_number("RS-FOO"))

    def test_prefix_range(self):
        prefix = AddressPrefixRange.parse("10.0.0.0/8^16-24")

        self.assertEqual(str(prefix), "10.0.0.0/8^16-24")
        self.assertEqual(prefix.version, 4)
        self.assertEqual(AddressPrefixRange.parse("2001:DB8::/32").version, 6)
        self.assertEqual(str(AddressPrefixRange.parse("2001:DB8::/32")), "2001:db8::/32")

    def test_invalid_prefix_ranges(self):
        for value in ["10.0.0.0", "10.0.0.1/8", "10.0.0.0/8^33", "10.0.0.0/8^4",
                      "10.0.0.0/8^24-16", "10.0.0.0/8^x", "RS-FOO"]:
            with self.subTest(value=value):
                self.assertIsNone(AddressPrefixRange.try_parse(value))

    def test_with_operator_keeps_own_operator(self):
        plain = AddressPrefixRange.parse("10.0.0.0/8")
        ranged = AddressPrefixRange.parse("10.0.0.0/8^-")

        self.assertEqual(str(plain.with_operator("^+")), "10.0.0.0/8^+")
        self.assertEqual(str(ranged.with_operator("^+")), "10.0.0.0/8^-")

    def test_split_helpers(self):
        self.assertEqual(split_list_value("a, b,c  d"), ["a", "b", "c", "d"])
        self.assertEqual(split_range_operator("RS-FOO^+"), ("RS-FOO", "^+"))
        self.assertEqual(split_range_operator("RS-FOO"), ("RS-FOO", ""))


if __name__ == '__main__':
    unittest.main()
