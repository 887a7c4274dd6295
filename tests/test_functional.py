# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Functional tests for the command-line interface.

Runs the full generate / show / check / dates flow against a temporary
YAML store using the built-in themes.
"""

import io
import logging
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

import yaml

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from sanaharava import main


class TestCommandLine(unittest.TestCase):
    """End-to-end CLI runs."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.games_dir = os.path.join(self.tmpdir.name, "games")
        self.config_path = os.path.join(self.tmpdir.name, "config.yaml")
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({
                'puzzle': {'language': 'english'},
                'generation': {'placement_strategy': 'serpentine'},
                'storage': {'backend': 'yaml', 'directory': self.games_dir},
                'logging': {
                    'directory': os.path.join(self.tmpdir.name, "logs"),
                    'enable_console': False,
                },
            }, f)

        self.key_patch = patch('game_service.discover_api_key', return_value=None)
        self.key_patch.start()

    def tearDown(self):
        self.key_patch.stop()
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            if isinstance(handler, logging.FileHandler):
                root_logger.removeHandler(handler)
                handler.close()
        self.tmpdir.cleanup()

    def run_cli(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            code = main(["--config", self.config_path] + list(argv))
        return code, output.getvalue()

    def test_full_flow(self):
        code, out = self.run_cli("generate", "--date", "2024-11-01")
        self.assertEqual(code, 0)
        self.assertIn("Game 2024-11-01 (6x5)", out)

        with open(os.path.join(self.games_dir, "2024-11-01.yaml"), encoding='utf-8') as f:
            stored = yaml.safe_load(f)
        words = stored['solutionWords']
        self.assertEqual(sum(len(w) for w in words), 30)

        code, out = self.run_cli("show", "--date", "2024-11-01", "--solution")
        self.assertEqual(code, 0)
        self.assertIn(", ".join(words), out)

        code, out = self.run_cli("check-word", words[0].lower(), "--date", "2024-11-01")
        self.assertEqual(code, 0)
        self.assertIn("valid (solution)", out)

        code, out = self.run_cli("check-complete", *words)
        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("complete (30/30 letters)"))

        code, out = self.run_cli("check-complete", words[0])
        self.assertTrue(out.startswith("not complete"))

        code, out = self.run_cli("dates")
        self.assertEqual(out.split(), ["2024-11-01"])

    def test_generate_twice_fails(self):
        self.assertEqual(self.run_cli("generate", "--date", "2024-11-01")[0], 0)
        self.assertEqual(self.run_cli("generate", "--date", "2024-11-01")[0], 1)

    def test_unknown_game(self):
        code, _ = self.run_cli("show", "--date", "1999-01-01")
        self.assertEqual(code, 1)

    def test_invalid_configuration(self):
        with patch('sys.stderr', new_callable=io.StringIO):
            code, _ = self.run_cli("generate", "--rows", "1")
        self.assertEqual(code, 1)


if __name__ == '__main__':
    unittest.main()
