"""
Tests for the policy document index
"""

import unittest

from rpsl_bgp.document import RpslDocument, route_object_from_rpsl
from rpsl_bgp.rpsl import parse_object
from rpsl_bgp.utils.error_handling import ObjectParseError


DOCUMENT = """
route-set: RS-FOO
members: 10.0.0.0/8

as-set: AS-BAR
members: AS65001

route: 10.0.0.0/8
origin: AS65001
mnt-by: mntr-a, MNTR-B
member-of: rs-foo

route6: 2001:db8::/32
origin: AS65001

route: 10.0.0.1/8
origin: AS65002

aut-num: AS65000
as-name: EXAMPLE
export: to AS65001 at 192.0.2.1 announce RS-FOO

aut-num: AS65009
export: to AS65001 at 192.0.2.1 announce RS-FOO

unparseable line
"""


class TestRpslDocument(unittest.TestCase):
    """Test indexing and lenient/strict error handling."""

    def setUp(self):
        self.doc = RpslDocument.parse(DOCUMENT)

    def test_indexes_sets_case_insensitively(self):
        self.assertIsNotNone(self.doc.get_route_set("rs-foo"))
        self.assertIsNotNone(self.doc.get_route_set("AS-BAR"))
        self.assertEqual(list(self.doc.route_sets), ["RS-FOO"])
        self.assertEqual(list(self.doc.as_sets), ["AS-BAR"])

    def test_indexes_routes(self):
        routes = self.doc.get_routes("10.0.0.0/8")

        self.assertEqual(len(routes), 1)
        self.assertEqual(routes[0].origin, 65001)
        self.assertEqual(routes[0].maintainers, ("MNTR-A", "MNTR-B"))
        self.assertEqual(routes[0].maintainer, "MNTR-A")
        self.assertEqual(len(self.doc.routes_member_of("RS-FOO")), 1)
        self.assertEqual(len(self.doc.routes_originated_by(65001)), 2)
        self.assertEqual(len(self.doc.all_routes()), 2)

    def test_indexes_aut_nums_after_sets(self):
        aut_num = self.doc.get_aut_num(65000)

        self.assertEqual(aut_num.name, "EXAMPLE")
        self.assertEqual(len(aut_num.get_table_for_as(65001)), 1)
        self.assertIsNone(self.doc.get_aut_num(65009))

    def test_lenient_mode_records_errors(self):
        # unparseable text, invalid route prefix, aut-num without as-name
        self.assertEqual(len(self.doc.errors), 3)
        self.assertTrue(all(isinstance(e, ObjectParseError) for e in self.doc.errors))

    def test_statistics(self):
        self.assertEqual(self.doc.statistics(), {
            'route-sets': 1,
            'as-sets': 1,
            'routes': 2,
            'aut-nums': 1,
            'errors': 3,
        })

    def test_strict_mode_raises(self):
        with self.assertRaises(ObjectParseError):
            RpslDocument.parse(DOCUMENT, strict=True)

    def test_strict_mode_raises_on_object_build_failure(self):
        with self.assertRaises(ObjectParseError):
            RpslDocument.parse("aut-num: AS1\nexport: to AS2 at 1.1.1.1 announce ANY\n", strict=True)

    def test_aut_num_order_does_not_matter(self):
        doc = RpslDocument.parse(
            "aut-num: AS1\nas-name: FIRST\nexport: to AS2 at 1.1.1.1 announce RS-LATER\n\n"
            "route-set: RS-LATER\nmembers: 10.0.0.0/8\n"
        )

        self.assertEqual(doc.get_aut_num(1).get_table_for_as(2).prefixes(), ["10.0.0.0/8"])

    def test_duplicate_sets_keep_first(self):
        doc = RpslDocument.parse(
            "route-set: RS-DUP\nmembers: 10.0.0.0/8\n\n"
            "route-set: rs-dup\nmembers: 192.0.2.0/24\n"
        )

        self.assertEqual(doc.resolve("RS-DUP"), doc.get_route_set("RS-DUP").resolve(doc))
        self.assertEqual(doc.get_route_set("RS-DUP").members, ("10.0.0.0/8",))

    def test_route_object_from_rpsl(self):
        route = route_object_from_rpsl(parse_object(
            "route6: 2001:db8::/32\norigin: AS1\nmember-of: rs-v6, RS-ALL\n"
        ))

        self.assertEqual(str(route.prefix), "2001:db8::/32")
        self.assertEqual(route.member_of, frozenset(["RS-V6", "RS-ALL"]))
        self.assertIsNone(route.maintainer)

    def test_route_object_requires_route_type(self):
        with self.assertRaises(ObjectParseError):
            route_object_from_rpsl(parse_object("route-set: RS-FOO\n"))


if __name__ == '__main__':
    unittest.main()
