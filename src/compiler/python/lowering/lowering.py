"""Lowering assembly: combines all lowering mixins into the final Lowering class."""

from .core import LoweringBase
from .declarations import DeclarationsMixin
from .functions import FunctionsMixin
from .statements import StatementsMixin
from .control_flow import ControlFlowMixin
from .native import NativeMixin


class Lowering(
    NativeMixin,
    ControlFlowMixin,
    StatementsMixin,
    FunctionsMixin,
    DeclarationsMixin,
    LoweringBase,
):
    """Line-by-line lowering of Onyx source to C."""
    pass


__all__ = ["Lowering"]
