from unittest import TestCase

from rawdav.lib.debug import xmlstring
from rawdav.lib.python_utilities import to_header_str
from rawdav.lib.python_utilities import to_local
from rawdav.lib.python_utilities import to_wire


class TestUtils(TestCase):
    def test_to_wire(self):
        # fmt: off
        self.assertEqual(to_wire('blatti'), b'blatti')
        self.assertEqual(to_wire(b'blatti'), b'blatti')
        self.assertEqual(to_wire(bytearray(b'blatti')), b'blatti')
        self.assertEqual(to_wire('blåbær'), 'blåbær'.encode('utf-8'))
        self.assertEqual(to_wire(''), b'')
        self.assertEqual(to_wire(b''), b'')
        self.assertEqual(to_wire(None), None)
        # fmt: on

    def test_to_wire_keeps_line_endings(self):
        self.assertEqual(to_wire(b"a\nb\r\n"), b"a\nb\r\n")

    def test_to_local(self):
        self.assertEqual(to_local(b"a\r\nb"), "a\nb")
        self.assertEqual(to_local(None), None)

    def test_to_header_str(self):
        self.assertEqual(to_header_str(b"X-A: \xe6\xf8\xe5"), "X-A: æøå")

    def test_xmlstring(self):
        pretty = xmlstring(b"<a><b>c</b></a>")
        self.assertEqual(pretty, "<a>\n  <b>c</b>\n</a>\n")
        self.assertEqual(xmlstring(b"not xml"), "not xml")
        self.assertEqual(xmlstring("a reason"), "a reason")
