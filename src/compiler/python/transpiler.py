"""Transpiler: discovery pass, rewrite pass, output.

A unit either translates completely or fails as a whole; the output file
is only written once translation has succeeded.
"""

from __future__ import annotations
import logging
import os

from .discovery import discover_mixins
from .errors import LoadError, TranslationError, format_error
from .lowering import Lowering
from .session import TranslationSession, TranspilerConfig

logger = logging.getLogger("oxc")


def load_source(path: str) -> str:
    """Read a source unit. Raises LoadError if it is unreadable or empty."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError as e:
        raise LoadError(f"File '{path}' not found", path) from e
    except OSError as e:
        raise LoadError(f"Cannot read '{path}': {e.strerror or e}", path) from e
    except UnicodeDecodeError as e:
        raise LoadError(f"File '{path}' is not valid UTF-8 (byte {e.start})", path) from e
    if not source.strip():
        raise LoadError(f"File '{path}' is empty", path)
    return source


class Transpiler:
    def __init__(self, config: TranspilerConfig | None = None):
        self.config = config or TranspilerConfig()

    def run(self, source: str, filename: str = "<stdin>") -> TranslationSession:
        """Translate source and return the finished session."""
        session = TranslationSession(self.config, filename)
        try:
            session.registry = discover_mixins(source)
        except Exception as e:
            raise TranslationError(f"internal error during mixin discovery: {e}") from e
        Lowering(session).run(source)
        for warn in session.warnings:
            logger.debug("%s: %s", filename, warn)
        return session

    def translate(self, source: str, filename: str = "<stdin>") -> str:
        return self.run(source, filename).render()

    def process_file(self, input_path: str, output_path: str) -> bool:
        try:
            source = load_source(input_path)
        except LoadError as e:
            logger.error("error: %s", e)
            return False

        filename = os.path.basename(input_path)
        try:
            output = self.translate(source, input_path)
        except TranslationError as e:
            logger.error(format_error(source, filename, e.message, e.line, e.col))
            return False

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(output)
        except OSError as e:
            logger.error("error: cannot write '%s': %s", output_path, e.strerror or e)
            return False

        if self.config.verbose:
            logger.info("translated %s → %s", input_path, output_path)
        return True
