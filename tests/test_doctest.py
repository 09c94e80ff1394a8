# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import doctest
import logging

from upsync import core, helpers, log, results, rules

logger = logging.getLogger("upsync.tests")

def load_tests(loader, tests, ignore):
	logger.info("Adding doctests to unittest.")
	tests.addTests(doctest.DocTestSuite(core))
	tests.addTests(doctest.DocTestSuite(helpers))
	tests.addTests(doctest.DocTestSuite(log))
	tests.addTests(doctest.DocTestSuite(results))
	tests.addTests(doctest.DocTestSuite(rules))
	return tests
