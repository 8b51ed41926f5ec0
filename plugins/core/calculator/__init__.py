"""Calculator plugin - evaluates arithmetic typed after the ``=`` keyword."""

import ast
import operator

keyword = "="
action = "copy"

# Integer powers whose result would exceed this many bits are rejected
MAX_POWER_BITS = 10000


def _power(base, exponent):
    if isinstance(base, int) and isinstance(exponent, int):
        if abs(base).bit_length() * abs(exponent) > MAX_POWER_BITS:
            raise ValueError(f"power too large: {base} ** {exponent}")
    return operator.pow(base, exponent)


_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: _power,
    ast.USub: operator.neg,
    ast.UAdd: operator.pos,
}


def _evaluate(node):
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _OPERATORS:
        return _OPERATORS[type(node.op)](_evaluate(node.left), _evaluate(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _OPERATORS:
        return _OPERATORS[type(node.op)](_evaluate(node.operand))
    raise ValueError(f"unsupported expression: {ast.dump(node)}")


def execute(query):
    if not query.strip():
        return None
    try:
        text = str(_evaluate(ast.parse(query, mode="eval")))
    except (SyntaxError, ValueError, ZeroDivisionError, OverflowError):
        return {"items": []}
    return {
        "items": [
            {
                "title": text,
                "subtitle": f"= {query}",
                "icon": {"path": "icon.png"},
                "arg": text,
            }
        ]
    }
