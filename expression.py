from __future__ import annotations
import networkx as nx
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import numeric

VARIABLE = 'variable'
POWER = 'power'
MULTIPLICATION = 'multiplication'
ADDITION = 'addition'
SUBTRACTION = 'subtraction'
DIVISION = 'division'
INTEGRAL = 'integral'

TYPES = (VARIABLE, POWER, MULTIPLICATION, ADDITION, SUBTRACTION, DIVISION, INTEGRAL)

# named child slots; multiplication and addition are n-ary and positional
SLOTS: Dict[str, Tuple[str, ...]] = {
	POWER: ('base', 'power'),
	SUBTRACTION: ('minuend', 'subtrahend'),
	DIVISION: ('numerator', 'denominator'),
	INTEGRAL: ('input', 'respect_to'),
}
COMMUTATIVE = (ADDITION, MULTIPLICATION)

_prec = {ADDITION: 2, SUBTRACTION: 2, MULTIPLICATION: 3, DIVISION: 3, POWER: 4}

@dataclass
class Node:
	type: str
	value: Any = None  # literal of a variable leaf
	children: List[str] = field(default_factory=list)  # ordered child node ids

class Expression:
	"""Expression tree stored as an arena of nodes in a networkx.DiGraph.

	Edges point from child to parent. An Expression is a (graph, root) pair,
	so a sub-expression returned by part()/parts() is a view sharing the
	arena of its parent; replace() and remove() rewrite child ids in place.
	"""
	def __init__(self, g: Optional[nx.DiGraph] = None, root: Optional[str] = None) -> None:
		self.g = g if g is not None else nx.DiGraph()
		self.root = root
	def _nid(self) -> str:
		# the counter lives on the graph so every view of one arena shares it
		n = self.g.graph.get('next_id', 0) + 1
		self.g.graph['next_id'] = n
		return f"n{n}"
	def _add(self, node: Node) -> str:
		n = self._nid()
		self.g.add_node(n, data=node)
		for c in node.children:
			self.g.add_edge(c, n)
		return n
	def _view(self, nid: str) -> Expression:
		return Expression(self.g, nid)
	def _copy_subdag(self, nid: str, out: Expression, memo: Dict[str, str]) -> str:
		if nid in memo: return memo[nid]
		data: Node = self.g.nodes[nid]['data']
		child_copies = [ self._copy_subdag(c, out, memo) for c in data.children ]
		n = out._add(Node(data.type, data.value, child_copies))
		memo[nid] = n
		return n
	def _adopt(self, operand: Any) -> str:
		if isinstance(operand, Expression):
			if operand.root is None:
				raise ValueError('empty expression')
			return operand._copy_subdag(operand.root, self, {})
		if numeric.is_number(operand) or isinstance(operand, str):
			return self._add(Node(VARIABLE, operand))
		raise TypeError(f"Cannot build an expression from {type(operand).__name__}")
	def _drop(self, nid: str) -> None:
		# a child's subtree is every node with a path into it
		self.g.remove_nodes_from(nx.ancestors(self.g, nid) | {nid})

	# -----------------
	# Construction
	# -----------------
	@staticmethod
	def _compose(kind: str, operands: List[Any]) -> Expression:
		e = Expression()
		ids = [ e._adopt(op) for op in operands ]
		e.root = e._add(Node(kind, children=ids))
		return e
	@staticmethod
	def variable(value: Any) -> Expression:
		e = Expression()
		e.root = e._add(Node(VARIABLE, value))
		return e
	@staticmethod
	def power(base: Any, exponent: Any) -> Expression:
		return Expression._compose(POWER, [base, exponent])
	@staticmethod
	def multiplication(*parts: Any) -> Expression:
		return Expression._compose(MULTIPLICATION, list(parts))
	@staticmethod
	def addition(*parts: Any) -> Expression:
		return Expression._compose(ADDITION, list(parts))
	@staticmethod
	def subtraction(minuend: Any, subtrahend: Any) -> Expression:
		return Expression._compose(SUBTRACTION, [minuend, subtrahend])
	@staticmethod
	def division(numerator: Any, denominator: Any) -> Expression:
		return Expression._compose(DIVISION, [numerator, denominator])
	@staticmethod
	def integral(integrand: Any, respect_to: Any) -> Expression:
		return Expression._compose(INTEGRAL, [integrand, respect_to])

	# -----------------
	# Access
	# -----------------
	@property
	def node(self) -> Node:
		if self.root is None:
			raise RuntimeError('no expression')
		return self.g.nodes[self.root]['data']
	@property
	def type(self) -> str:
		return self.node.type
	@property
	def value(self) -> Any:
		return self.node.value
	def is_leaf(self) -> bool:
		return self.type == VARIABLE
	def parts(self) -> List[Expression]:
		return [ self._view(c) for c in self.node.children ]
	def part_or_default(self, slot: str, default: Any = None) -> Any:
		names = SLOTS.get(self.type, ())
		if slot not in names:
			return default
		idx = names.index(slot)
		children = self.node.children
		if idx >= len(children):
			return default
		return self._view(children[idx])
	def part(self, slot: str) -> Expression:
		p = self.part_or_default(slot)
		if p is None:
			raise KeyError(f"{self.type} has no part '{slot}'")
		return p
	def copy(self) -> Expression:
		out = Expression()
		out.root = self._copy_subdag(self.root, out, {})
		return out

	# -----------------
	# Structural equality
	# -----------------
	def equals(self, other: Any, exact: bool = True) -> bool:
		"""Compare tag, literal and children recursively.

		Exact mode requires identical child order. Otherwise children of an
		addition or multiplication may match in any order.
		"""
		if not isinstance(other, Expression) or other.root is None or self.root is None:
			return False
		return _nodes_equal(self.g, self.root, other.g, other.root, exact)

	# -----------------
	# In-place edits
	# -----------------
	def replace(self, child: Expression | str, new: Any) -> Expression:
		cid = child.root if isinstance(child, Expression) else child
		data = self.node
		if cid not in data.children:
			raise ValueError(f"{cid} is not a part of this {data.type}")
		nid = self._adopt(new)
		data.children[data.children.index(cid)] = nid
		self.g.add_edge(nid, self.root)
		self._drop(cid)
		return self._view(nid)
	def remove(self, child: Expression | str) -> None:
		cid = child.root if isinstance(child, Expression) else child
		data = self.node
		if cid not in data.children:
			raise ValueError(f"{cid} is not a part of this {data.type}")
		data.children.remove(cid)
		self._drop(cid)
	def remove_one(self) -> Expression:
		"""Drop one multiplicative identity from a product.

		A product left with a single part collapses to (a copy of) that part.
		Anything that is not a multiplication comes back unchanged.
		"""
		if self.type != MULTIPLICATION:
			return self
		parts = self.parts()
		if len(parts) > 1:
			for p in parts:
				v = numeric.numerical(p)
				if numeric.is_number(v) and v == 1:
					self.remove(p)
					break
		parts = self.parts()
		if len(parts) == 1:
			return parts[0].copy()
		return self
	def flatten_power(self) -> Expression:
		"""Return a copy with nested powers merged: (x^a)^b -> x^(a*b)."""
		if self.type != POWER:
			return self.copy()
		exponent = numeric.numerical(self.part('power'))
		base = self.part('base')
		while base.type == POWER:
			exponent = _product(numeric.numerical(base.part('power')), exponent)
			base = base.part('base')
		return Expression.power(base, exponent)

	# -----------------
	# Stringification
	# -----------------
	def _node_to_string(self, nid: str) -> str:
		data: Node = self.g.nodes[nid]['data']
		if data.type == VARIABLE:
			v = data.value
			return numeric.to_string(v) if numeric.is_number(v) else str(v)
		def wrap(child: str, is_right: bool = False) -> str:
			cd: Node = self.g.nodes[child]['data']
			s = self._node_to_string(child)
			if cd.type == VARIABLE:
				# negative literals are parenthesised on the right and under ^
				if s.startswith('-') and (is_right or data.type == POWER):
					return f"({s})"
				return s
			if cd.type == INTEGRAL:
				return s
			cp, pp = _prec[cd.type], _prec[data.type]
			need = cp < pp or (is_right and cp == pp) or (data.type == POWER and cp == pp)
			return f"({s})" if need else s
		ids = data.children
		if data.type == INTEGRAL:
			return f"integral({','.join(self._node_to_string(c) for c in ids)})"
		if data.type == MULTIPLICATION:
			return "*".join(wrap(c, is_right=i > 0) for i, c in enumerate(ids))
		if data.type == ADDITION:
			return "+".join(wrap(c) for c in ids)
		left, right = wrap(ids[0]), wrap(ids[1], is_right=True)
		if data.type == SUBTRACTION:
			return f"{left} - {right}"
		if data.type == DIVISION:
			return f"{left}/{right}"
		return f"{left}^{right}"
	def to_string(self) -> str:
		if self.root is None:
			return ''
		return self._node_to_string(self.root)
	def __str__(self) -> str:
		return self.to_string()
	def __repr__(self) -> str:
		return f"Expression({self.to_string()!r})"

def _product(a: Any, b: Any) -> Any:
	if numeric.is_number(a) and numeric.is_number(b):
		return numeric.demote(a * b)
	return Expression.multiplication(a, b)

def _literals_equal(a: Any, b: Any) -> bool:
	na, nb = numeric.numerical(a), numeric.numerical(b)
	if numeric.is_number(na) and numeric.is_number(nb):
		return na == nb
	if numeric.is_number(na) or numeric.is_number(nb):
		return False
	return str(a) == str(b)

def _nodes_equal(ga: nx.DiGraph, a: str, gb: nx.DiGraph, b: str, exact: bool) -> bool:
	da: Node = ga.nodes[a]['data']
	db: Node = gb.nodes[b]['data']
	if da.type != db.type or len(da.children) != len(db.children):
		return False
	if da.type == VARIABLE:
		return _literals_equal(da.value, db.value)
	if exact or da.type not in COMMUTATIVE:
		return all(_nodes_equal(ga, x, gb, y, exact) for x, y in zip(da.children, db.children))
	unused = list(db.children)
	for x in da.children:
		match = next((y for y in unused if _nodes_equal(ga, x, gb, y, exact)), None)
		if match is None:
			return False
		unused.remove(match)
	return True
