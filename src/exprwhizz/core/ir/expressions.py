"""
Expression tree types for the ExprWhizz IR.

Four node variants make up a tree:
- Value: a float literal (leaf)
- Symbol: a variable reference (leaf)
- UnaryNegate: arithmetic negation of one operand
- BinaryExpr: +, -, *, /, ^ and = (assignment)

Nodes are immutable; every node is owned by exactly one parent, and a
tree never shares nodes with another tree.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class ExprOp(StrEnum):
    """Interior node operators; values are the rendered operator symbols."""

    NEGATE = "neg"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POWER = "^"
    ASSIGN = "="


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Value(BaseModel):
    """A numeric literal."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)


class Symbol(BaseModel):
    """A reference to a variable in the session's VariableStore."""

    name: str = Field(description="Variable name")

    model_config = ConfigDict(frozen=True)


class UnaryNegate(BaseModel):
    """Negation: -operand."""

    operand: Expr

    model_config = ConfigDict(frozen=True)


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: ExprOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    @field_validator("op")
    @classmethod
    def _not_unary(cls, op: ExprOp) -> ExprOp:
        if op == ExprOp.NEGATE:
            raise ValueError("NEGATE is a unary operator")
        return op


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Value | Symbol | UnaryNegate | BinaryExpr

# Rebuild models for recursive forward references
UnaryNegate.model_rebuild()
BinaryExpr.model_rebuild()
