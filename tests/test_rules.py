# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import unittest
import logging

from upsync import rules
from upsync import ListItem, ObjectType, ExtensionRule, NameRule, FolderNameRule, RegexRule, SizeRule, GlobRule, is_all_allowed

logger = logging.getLogger("upsync.tests")

def F(path, size=0):
	return ListItem(path, path.rstrip("/").rsplit("/", 1)[-1], ObjectType.FILE, size)

def D(path):
	return ListItem(path, path.rstrip("/").rsplit("/", 1)[-1], ObjectType.DIRECTORY)

class TestRules(unittest.TestCase):

	def test_is_all_allowed(self):
		item = F("/www/a.txt", 10)
		self.assertTrue(is_all_allowed(None, item))
		self.assertTrue(is_all_allowed([], item))
		self.assertTrue(is_all_allowed([ExtensionRule(True, ["txt"]), SizeRule(SizeRule.Operator.LESS_THAN, 100)], item))
		self.assertFalse(is_all_allowed([ExtensionRule(True, ["txt"]), SizeRule(SizeRule.Operator.LESS_THAN, 5)], item))

	def test_base_rule(self):
		with self.assertRaises(NotImplementedError):
			rules.Rule().is_allowed(F("/a"))

	def test_extension_rule(self):
		r = ExtensionRule(True, [".HTML", "css"])
		self.assertTrue(r.is_allowed(F("/www/index.html")))
		self.assertTrue(r.is_allowed(F("/www/a/Main.CSS")))
		self.assertFalse(r.is_allowed(F("/www/a.js")))
		self.assertFalse(r.is_allowed(F("/www/Makefile")))
		self.assertTrue(r.is_allowed(D("/www/js/")))

		r = ExtensionRule(False, ["tmp"])
		self.assertFalse(r.is_allowed(F("/www/a.tmp")))
		self.assertTrue(r.is_allowed(F("/www/a.tmp.txt")))
		self.assertTrue(r.is_allowed(D("/www/a.tmp/")))

	def test_name_rule(self):
		r = NameRule(False, ["Thumbs.db", ".DS_Store"])
		self.assertFalse(r.is_allowed(F("/www/img/Thumbs.db")))
		self.assertTrue(r.is_allowed(F("/www/img/thumbs.db")))
		self.assertTrue(r.is_allowed(D("/www/.DS_Store/")))

		r = NameRule(True, ["index.html"])
		self.assertTrue(r.is_allowed(F("/www/index.html")))
		self.assertFalse(r.is_allowed(F("/www/about.html")))

	def test_folder_name_rule(self):
		r = FolderNameRule(False, ["node_modules"])
		self.assertFalse(r.is_allowed(D("/www/node_modules/")))
		self.assertFalse(r.is_allowed(D("/www/node_modules/x/")))
		self.assertFalse(r.is_allowed(F("/www/node_modules/x/a.js")))
		self.assertTrue(r.is_allowed(F("/www/node_modules")))
		self.assertTrue(r.is_allowed(D("/www/src/")))

		r = FolderNameRule(True, ["www"])
		self.assertTrue(r.is_allowed(F("/www/a.txt")))
		self.assertFalse(r.is_allowed(F("/srv/a.txt")))

	def test_regex_rule(self):
		r = RegexRule(False, r"^~.*\.tmp$")
		self.assertFalse(r.is_allowed(F("/www/~lock.tmp")))
		self.assertTrue(r.is_allowed(F("/www/lock.tmp")))
		self.assertTrue(r.is_allowed(D("/www/~a.tmp/")))

		r = RegexRule(True, r"/assets/", whole_path=True)
		self.assertTrue(r.is_allowed(F("/www/assets/a.png")))
		self.assertFalse(r.is_allowed(F("/www/a.png")))

	def test_size_rule(self):
		Op = SizeRule.Operator
		cases = [
			(Op.LESS_THAN,             (10,),    {9: True,  10: False, 11: False}),
			(Op.LESS_THAN_OR_EQUAL,    (10,),    {9: True,  10: True,  11: False}),
			(Op.GREATER_THAN,          (10,),    {9: False, 10: False, 11: True}),
			(Op.GREATER_THAN_OR_EQUAL, (10,),    {9: False, 10: True,  11: True}),
			(Op.EQUAL_TO,              (10,),    {9: False, 10: True,  11: False}),
			(Op.NOT_EQUAL_TO,          (10,),    {9: True,  10: False, 11: True}),
			(Op.WITHIN_RANGE,          (10, 11), {9: False, 10: True,  11: True}),
			(Op.OUTSIDE_RANGE,         (10, 11), {9: True,  10: False, 11: False}),
		]
		for op, args, expected in cases:
			r = SizeRule(op, *args)
			for size, allowed in expected.items():
				with self.subTest(op=op, size=size):
					self.assertEqual(r.is_allowed(F("/a", size)), allowed)
			self.assertTrue(r.is_allowed(D("/d/")))

		with self.assertRaises(ValueError):
			SizeRule(Op.WITHIN_RANGE, 10)
		with self.assertRaises(ValueError):
			SizeRule(Op.OUTSIDE_RANGE, 10, 5)

	def test_glob_rule(self):
		r = GlobRule(False, "*.tmp", "/www/private/**", "cache/")
		self.assertFalse(r.is_allowed(F("/www/a.tmp")))
		self.assertFalse(r.is_allowed(F("/www/a/b/.c.tmp")))
		self.assertFalse(r.is_allowed(F("/www/private/a/b.txt")))
		self.assertTrue(r.is_allowed(F("/www/public/a/b.txt")))
		self.assertFalse(r.is_allowed(D("/www/cache/")))
		self.assertFalse(r.is_allowed(D("/www/a/cache/")))
		self.assertTrue(r.is_allowed(D("/www/cached/")))
		self.assertTrue(r.is_allowed(D("/www/private/")))

		r = GlobRule(True, "*.HTML", ignore_case=True)
		self.assertTrue(r.is_allowed(F("/www/index.html")))
		self.assertFalse(r.is_allowed(F("/www/a.css")))
		# no directory patterns, so directories pass
		self.assertTrue(r.is_allowed(D("/www/css/")))

		r = GlobRule(True, "*.HTML")
		self.assertFalse(r.is_allowed(F("/www/index.html")))

		self.assertTrue(GlobRule(False, "x").is_allowed(ListItem("/www/x", "x", ObjectType.LINK)))

		with self.assertRaises(ValueError):
			GlobRule(True)
		with self.assertRaises(ValueError):
			GlobRule(True, "//")
