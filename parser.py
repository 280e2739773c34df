from __future__ import annotations
from typing import Any, List, Optional

import numeric
from expression import (
    Expression,
    Node,
    VARIABLE,
    POWER,
    MULTIPLICATION,
    ADDITION,
    SUBTRACTION,
    DIVISION,
    INTEGRAL,
)

# =====================
# Expression parser
# =====================

# function names the tree can represent, with their node type
_funcs = {"integral": INTEGRAL, "int": INTEGRAL}


class ExprTok:
    def __init__(self, kind: str, lex: str = "", num: Any = None):
        self.kind, self.lex, self.num = kind, lex, num
        self.arity = 0


def expr_tokenize(expr: str) -> List[ExprTok]:
    s = expr
    i, n = 0, len(s)
    toks: List[ExprTok] = []
    prev: Optional[ExprTok] = None
    while i < n:
        c = s[i]
        if c.isspace():
            i += 1
            continue
        if c in "+-*/^(),":
            k = c
            i += 1
            if k == "-" and (
                prev is None or prev.kind in ("+", "-", "*", "/", "^", "(", ",", "NEG")
            ):
                k = "NEG"
            # implicit multiplication when an opening parenthesis follows an operand
            if k == "(" and prev and prev.kind in ("ID", "NUM", ")"):
                toks.append(ExprTok("*", "*"))
            t = ExprTok(k, k)
            toks.append(t)
            prev = t
            continue
        if c.isdigit() or (c == "." and i + 1 < n and s[i + 1].isdigit()):
            j = i
            has_dot = False
            while j < n and (s[j].isdigit() or (s[j] == "." and not has_dot)):
                has_dot = has_dot or s[j] == "."
                j += 1
            num_str = s[i:j]
            if prev and prev.kind in ("ID", "NUM", ")"):
                toks.append(ExprTok("*", "*"))
            toks.append(ExprTok("NUM", num_str, numeric.parse_number(num_str)))
            i = j
            prev = toks[-1]
            continue
        if c.isalpha() or c == "_":
            j = i + 1
            while j < n and (s[j].isalnum() or s[j] == "_"):
                j += 1
            name = s[i:j]
            k = j
            while k < n and s[k].isspace():
                k += 1
            is_func = k < n and s[k] == "(" and name.lower() in _funcs
            if prev and prev.kind in ("ID", "NUM", ")"):
                toks.append(ExprTok("*", "*"))
            toks.append(ExprTok("FUNC" if is_func else "ID", name))
            i = j
            prev = toks[-1]
            continue
        raise ValueError(f"Unexpected char {c}")
    return toks


_expr_prec = {"^": 5, "NEG": 4, "*": 3, "/": 3, "+": 2, "-": 2}
_expr_right_assoc = {"NEG", "^"}


def expr_to_rpn(toks: List[ExprTok]) -> List[ExprTok]:
    out: List[ExprTok] = []
    op: List[ExprTok] = []
    arity: List[int] = []
    for t in toks:
        if t.kind in ("NUM", "ID"):
            out.append(t)
        elif t.kind == "FUNC":
            op.append(t)
            arity.append(1)
        elif t.kind == ",":
            while op and op[-1].kind != "(":
                out.append(op.pop())
            if not arity:
                raise ValueError("Argument separator outside a function call")
            arity[-1] += 1
        elif t.kind == "NEG":
            # prefix operator, nothing to its left can be popped
            op.append(t)
        elif t.kind in _expr_prec:
            while (
                op
                and op[-1].kind not in ("(", "FUNC")
                and (
                    (
                        t.kind in _expr_right_assoc
                        and _expr_prec[t.kind] < _expr_prec[op[-1].kind]
                    )
                    or (
                        t.kind not in _expr_right_assoc
                        and _expr_prec[t.kind] <= _expr_prec[op[-1].kind]
                    )
                )
            ):
                out.append(op.pop())
            op.append(t)
        elif t.kind == "(":
            op.append(t)
        elif t.kind == ")":
            while op and op[-1].kind != "(":
                out.append(op.pop())
            if not op:
                raise ValueError("Mismatched parens")
            op.pop()
            if op and op[-1].kind == "FUNC":
                f = op.pop()
                f.arity = arity.pop()
                out.append(f)
        else:
            raise ValueError("Unknown token kind")
    while op:
        if op[-1].kind in ("(", "FUNC"):
            raise ValueError("Mismatched parens")
        out.append(op.pop())
    return out


def rpn_to_expression(rpn: List[ExprTok]) -> Expression:
    e = Expression()
    stack: List[str] = []

    def data(nid: str) -> Node:
        return e.g.nodes[nid]["data"]

    def add_op(kind: str, children: List[str]) -> str:
        # products and sums are kept n-ary
        if kind in (MULTIPLICATION, ADDITION):
            flat: List[str] = []
            for c in children:
                if data(c).type == kind:
                    flat.extend(data(c).children)
                    e.g.remove_node(c)
                else:
                    flat.append(c)
            children = flat
        return e._add(Node(kind, children=children))

    binary = {"+": ADDITION, "-": SUBTRACTION, "*": MULTIPLICATION, "/": DIVISION, "^": POWER}
    for t in rpn:
        if t.kind == "NUM":
            if t.num is None:
                raise ValueError(f"Bad number {t.lex}")
            literal = t.num if isinstance(t.num, int) else t.lex
            stack.append(e._add(Node(VARIABLE, literal)))
        elif t.kind == "ID":
            stack.append(e._add(Node(VARIABLE, t.lex)))
        elif t.kind == "NEG":
            if not stack:
                raise ValueError("neg missing operand")
            a = stack.pop()
            d = data(a)
            if d.type == VARIABLE and numeric.is_numerical(d.value):
                v = d.value
                d.value = -v if isinstance(v, int) else (v[1:] if str(v).startswith("-") else f"-{v}")
                stack.append(a)
            else:
                stack.append(add_op(MULTIPLICATION, [e._add(Node(VARIABLE, -1)), a]))
        elif t.kind in binary:
            if len(stack) < 2:
                raise ValueError("binary op missing operands")
            b = stack.pop()
            a = stack.pop()
            stack.append(add_op(binary[t.kind], [a, b]))
        elif t.kind == "FUNC":
            kind = _funcs[t.lex.lower()]
            if kind == INTEGRAL and t.arity != 2:
                raise ValueError(f"{t.lex} expects 2 arguments, got {t.arity}")
            if len(stack) < t.arity:
                raise ValueError("function missing argument")
            args = stack[len(stack) - t.arity:]
            del stack[len(stack) - t.arity:]
            stack.append(add_op(kind, args))
        else:
            raise ValueError("Unknown RPN token")
    if len(stack) != 1:
        raise ValueError("Invalid expression")
    e.root = stack[-1]
    return e


def parse_expression(expr: str) -> Expression:
    toks = expr_tokenize(expr)
    if not toks:
        raise ValueError("Empty expression")
    rpn = expr_to_rpn(toks)
    return rpn_to_expression(rpn)
