"""
Tag models for the knowledge node network.

A tag is one of three variants:
- Fact: a ground assertion, ``pred(arg1,arg2)``
- Recommendation: an externally-directed suggestion, ``@pred(arg1,arg2)``
- Rule: an implication, ``premise -> conclusion``

Tags are frozen pydantic models, so equality and hashing are structural and
tags can be used as dictionary keys throughout the network.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Fact(BaseModel):
    """A ground symbolic assertion."""

    kind: Literal["fact"] = "fact"
    predicate: str = Field(..., min_length=1, description="Predicate name")
    args: tuple[str, ...] = Field(
        default=(), description="Raw argument strings (may contain comparators)"
    )

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.predicate}({','.join(self.args)})"


class Recommendation(BaseModel):
    """A suggestion tag, written with a leading ``@``."""

    kind: Literal["recommendation"] = "recommendation"
    predicate: str = Field(..., min_length=1, description="Predicate name")
    args: tuple[str, ...] = Field(default=(), description="Raw argument strings")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"@{self.predicate}({','.join(self.args)})"


Conclusion = Annotated[Union[Fact, Recommendation], Field(discriminator="kind")]


class Rule(BaseModel):
    """An implication from a Fact to a Fact or Recommendation."""

    kind: Literal["rule"] = "rule"
    premise: Fact
    conclusion: Conclusion

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.premise} -> {self.conclusion}"


Tag = Annotated[Union[Fact, Recommendation, Rule], Field(discriminator="kind")]

