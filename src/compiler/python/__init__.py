"""oxc Python compiler package."""

__version__ = "0.0.1"

from .errors import LoadError as LoadError, TranslationError as TranslationError
from .session import TranslationSession as TranslationSession, TranspilerConfig as TranspilerConfig
from .transpiler import Transpiler as Transpiler, load_source as load_source
from .types import translate_type as translate_type
