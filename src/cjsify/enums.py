"""
Enumerations for cjsify.

This module defines the classifications shared by the analysis and rewrite
passes.
"""

from enum import Enum


class ProvideKind(str, Enum):
  """
  Syntactic kind of the expression assigned to a namespace property.

  Decides how the Module Rewriter exports the property.
  """

  FUNCTION = "function"  # function expression, safe to hoist, gets a type marker
  OBJECT = "object"  # object literal, safe to hoist
  ARRAY = "array"  # array literal, safe to hoist
  LITERAL = "literal"  # string / number / boolean / null / regex
  OTHER = "other"  # anything else, may turn out to be a function at runtime

  @property
  def is_hoistable(self) -> bool:
    """True when the value can be bound to a module local before export."""
    return self in (ProvideKind.FUNCTION, ProvideKind.OBJECT, ProvideKind.ARRAY)


class ExclusionReason(str, Enum):
  """
  Why a file was dropped from the output set.
  """

  COMPUTED_ASSIGNMENT = "computed assignment"
  COMPUTED_EXPRESSION = "computed expression"
  NAMESPACE_REFERENCED = "namespace still referenced"
