"""
Parameter resolution for xcbridge.

Key concepts:
    - RequirementRule: AllOf / OneOf / ExclusivePair, declared per tool
    - ParameterResolver: merges caller arguments over session defaults and
      checks the result against the rules and the tool's schema
    - Resolution: the result; carries either params or a typed failure
"""

from xcbridge.resolve.resolver import ParameterResolver, Resolution, sanitize_args
from xcbridge.resolve.rules import AllOf, ExclusivePair, OneOf, RequirementRule

__all__ = [
    "AllOf",
    "ExclusivePair",
    "OneOf",
    "ParameterResolver",
    "RequirementRule",
    "Resolution",
    "sanitize_args",
]
