"""
Test suite for the pilcrow command line interface and file pipeline.

Author: xwest
"""

import os
import shutil
import sys
import tempfile
import unittest

from click.testing import CliRunner

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from pilcrow.cli import main
from pilcrow.driver import compile_file, parse_file, read_source, tokenize_file
from pilcrow.errors import UnsupportedFeature
from pilcrow.lexer import LexerError
from pilcrow.parser import ParseError


class FileTestCase(unittest.TestCase):
    """Writes source files into a scratch directory."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_source(self, source, name="program.pil"):
        path = os.path.join(self.temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
        return path

    def write_bytes(self, data, name="program.pil"):
        path = os.path.join(self.temp_dir, name)
        with open(path, "wb") as f:
            f.write(data)
        return path


class TestDriver(FileTestCase):
    """Test cases for the file pipeline."""

    def test_read_source(self):
        path = self.write_source("let x = 1;\n")
        self.assertEqual(read_source(path), "let x = 1;\n")

    def test_read_missing_file(self):
        with self.assertRaises(OSError):
            read_source(os.path.join(self.temp_dir, "missing.pil"))

    def test_read_invalid_utf8(self):
        path = self.write_bytes(b"let x = \xff;")
        with self.assertRaises(OSError) as ctx:
            read_source(path)
        self.assertEqual(ctx.exception.filename, path)
        self.assertEqual(ctx.exception.strerror, "File is not valid UTF-8")

    def test_parse_file(self):
        path = self.write_source("let x = 5;\n")
        self.assertEqual(parse_file(path).dump(), '(Program (Let (ID "x") (Literal "5")))')

    def test_tokenize_file_reports_filename(self):
        path = self.write_source("let x = @;")
        with self.assertRaises(LexerError) as ctx:
            tokenize_file(path)
        self.assertEqual(ctx.exception.location.filename, path)

    def test_compile_is_unsupported(self):
        path = self.write_source("let x = 5;")
        with self.assertRaises(UnsupportedFeature) as ctx:
            compile_file(path)
        self.assertEqual(ctx.exception.name, "Compile mode")


class TestCommandLine(FileTestCase):
    """Test cases for the pilcrow command."""

    def setUp(self):
        super().setUp()
        self.runner = CliRunner()

    def test_prints_syntax_tree(self):
        path = self.write_source("let x = 5; // five\n")
        result = self.runner.invoke(main, [path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), '(Program (Let (ID "x") (Literal "5")))')

    def test_prints_tokens(self):
        path = self.write_source("let x")
        result = self.runner.invoke(main, ["--tokens", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.splitlines(), ["EOL", "LetToken", "Space", '(ID "x")'])

    def test_compile_mode_fails(self):
        path = self.write_source("let x = 5;")
        result = self.runner.invoke(main, ["-c", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Compile mode is not implemented", result.output)

    def test_missing_file(self):
        path = os.path.join(self.temp_dir, "missing.pil")
        result = self.runner.invoke(main, [path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Could not read", result.output)

    def test_file_not_utf8(self):
        path = self.write_bytes(b"let x = \xff;")
        result = self.runner.invoke(main, [path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Could not read", result.output)
        self.assertIn("not valid UTF-8", result.output)

    def test_deep_nesting_is_reported(self):
        depth = max(500, sys.getrecursionlimit())
        path = self.write_source("x = " + "(" * depth + "1" + ")" * depth + ";")
        result = self.runner.invoke(main, [path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Nesting too deep", result.output)

    def test_syntax_error(self):
        path = self.write_source("let x 5;")
        result = self.runner.invoke(main, [path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Expected '=' in let statement", result.output)

    def test_lexer_error(self):
        path = self.write_source("let x = $;")
        result = self.runner.invoke(main, [path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Token not found", result.output)

    def test_verbose(self):
        path = self.write_source("let x = 5;")
        result = self.runner.invoke(main, ["-v", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('(Let (ID "x") (Literal "5"))', result.output)

    def test_missing_argument(self):
        result = self.runner.invoke(main, [])
        self.assertEqual(result.exit_code, 2)


class TestErrorsAreTyped(unittest.TestCase):

    def test_hierarchy(self):
        from pilcrow.errors import PilcrowError
        for error_type in (LexerError, ParseError, UnsupportedFeature):
            self.assertTrue(issubclass(error_type, PilcrowError))


if __name__ == '__main__':
    unittest.main()
