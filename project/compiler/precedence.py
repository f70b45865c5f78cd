from enum import IntEnum


class Order(IntEnum):
    """Binding strength of the outermost operator of a generated Python expression.

    Larger values bind tighter. Calls, attribute access and subscripts share
    one level, so `f(x).y[0]` never needs parentheses around its parts.
    """
    NONE = 0
    CONDITIONAL = 10
    LOGICAL_OR = 20
    LOGICAL_AND = 30
    LOGICAL_NOT = 40
    RELATIONAL = 50
    ADDITIVE = 60
    MULTIPLICATIVE = 70
    UNARY_SIGN = 80
    EXPONENTIATION = 90
    MEMBER = 100
    FUNCTION_CALL = 100
    ATOMIC = 110


def needs_parens(child: int, required: int) -> bool:
    # equal strength is left-associative and never wrapped
    return child < required


def wrap(code: str, child: int, required: int) -> str:
    if needs_parens(child, required):
        return '(' + code + ')'
    return code


def tighter(order: int) -> int:
    """Order to request for the right operand of a non-associative operator."""
    return order + 1


def is_bare_name(code: str, order: int) -> bool:
    # a plain identifier can be evaluated twice without caching it first
    return order == Order.ATOMIC and code.isidentifier()
