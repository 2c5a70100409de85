"""
Pipeline entry points for the Pilcrow front end.

Reads source files and runs them through the lexer and parser. This is the
only module that touches the filesystem; read failures surface as OSError
from here, never from the lexer.

Author: xwest
"""

import errno
import logging
from pathlib import Path
from typing import List, Union

from .errors import UnsupportedFeature
from .lexer import Token, tokenize
from .parser import SyntaxNode, parse

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_source(path: PathLike) -> str:
    """
    Read a whole source file into memory.

    Raises:
        OSError: If the file cannot be opened, read or decoded as UTF-8
    """
    logger.info("Attempting to open %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except UnicodeDecodeError as e:
        raise OSError(
            errno.EILSEQ, "File is not valid UTF-8", str(path)
        ) from e
    logger.info("%s read successfully", path)
    return source


def tokenize_file(path: PathLike) -> List[Token]:
    """Tokenize a source file, layout and comments included."""
    return tokenize(read_source(path), str(path))


def parse_file(path: PathLike) -> SyntaxNode:
    """
    Convenience function to parse a source file.

    Raises:
        OSError: If the file cannot be read
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    return parse(tokenize_file(path))


def compile_file(path: PathLike) -> None:
    """Compile mode has no backend yet."""
    raise UnsupportedFeature(
        "Compile mode",
        help_text=f"Run without --compile to print the syntax tree of {path}.",
    )
