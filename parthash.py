#!/usr/bin/env python3
"""
Parthash

A reversible codec between named-choice configuration models and the
shortest canonical token that decodes back to them.

A schema is a tree of three node kinds. Every node owns a cardinality and
the integer range [0, cardinality) is in exact bijection with its models.

- Leaf   (unit type):    cardinality 1, only model is None
- Tuple  (product type): cardinality = Π child cardinalities
- Choice (sum type):     cardinality = Σ child cardinalities

===============================================================================
NUMERAL SYSTEM
===============================================================================

Integers are rendered over a fixed 64-symbol radix using a BIJECTIVE,
variable-length numeral system. The non-negative integers are partitioned
into length bands:

  Band L holds exactly 64^L integers and corresponds to all strings of
  exactly L symbols. It starts at

      offset(L) = Σ_{i<L} 64^i      offset(0)=0, offset(1)=1, offset(2)=65

  encode(n):  find L with offset(L) ≤ n < offset(L+1), write n - offset(L)
              as exactly L base-64 digits, most significant first.
  decode(s):  read s as a big-endian base-64 numeral, add offset(len(s)).

Every length owns its own integer range, so there is no leading-zero
ambiguity: one string per integer and one integer per string.

  encode(0)  = ""        (band 0 has a single member)
  encode(64) = "0"       (last member of band 1)
  encode(65) = "11"      (first member of band 2)

===============================================================================
COMPOSITION
===============================================================================

  Tuple:   child i has place value Π_{j>i} cardinality(c_j)  (mixed radix)
           hash  = Σ place(i) * hash_i
           unhash peels children left to right with divmod.

  Choice:  child i has offset Σ_{j<i} cardinality(c_j)     (tagged union)
           hash  = offset(i) + hash_i
           unhash finds the branch whose range contains the index.

===============================================================================
MODELS
===============================================================================

  Unit            None                 accepted by Leaf
  Fields          {"field": model}     accepted by Tuple (sparse allowed)
                                       and Choice (zero or one entry)
  Branch          "branch"             accepted by Choice: shorthand for
                                       that branch at its zero state

Hashing accepts every equivalent shape. Unhashing always produces the
CANONICAL shape: fully populated tuples, bare keys for single-state
branches, single-entry mappings otherwise.
"""

import json
import weakref
from bisect import bisect_right
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import click


class PartError(Exception):
    """Base class for every failure raised by the codec."""
    pass


class PartTypeError(PartError, TypeError):
    """Raised when a model or value has the wrong shape for a node or format."""
    pass


class PartReferenceError(PartError, LookupError):
    """Raised when a model names a field or branch the node does not have."""
    pass


class PartRangeError(PartError, ValueError):
    """Raised when an index falls outside [0, cardinality)."""
    pass


class InvalidSymbolError(PartError, ValueError):
    """Raised when a hash contains a symbol outside the radix."""
    pass


class SchemaError(PartError, ValueError):
    """Raised when a schema description cannot be turned into a tree."""
    pass


class CoherenceError(PartError):
    """Raised when a schema fails self-verification."""
    pass


class Format(Enum):
    """Representation of a hash on either side of hash/unhash."""
    STRING = "string"
    BIGINT = "bigint"

    @classmethod
    def of(cls, value: Union[str, 'Format']) -> 'Format':
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise PartTypeError(
                f"Unknown format: {value!r} (expected 'string' or 'bigint')"
            ) from None


def _check_index(n: Any, where: str = "") -> int:
    """Validate a raw integer index: a real int, not a bool, not negative."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise PartTypeError(f"{where}Expected an integer, got {type(n).__name__}")
    if n < 0:
        raise PartRangeError(f"{where}Index {n} is negative")
    return n


# ═══════════════════════════════════════════════════════════════════════════════
# NUMERAL CODEC
# ═══════════════════════════════════════════════════════════════════════════════

class Numeral:
    """
    Bijective variable-length base-64 numeral system.

    The radix is fixed per instance. The default keeps the digit zero LAST
    so it is never the first symbol a reader confuses with the letter O.
    """

    RADIX = "123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ-_0"
    DIGIT_BITS = 6
    BASE = 1 << DIGIT_BITS

    def __init__(self, radix: str = RADIX):
        if not isinstance(radix, str) or len(radix) != self.BASE:
            raise ValueError(f"Radix must be a string of exactly {self.BASE} symbols")
        if len(set(radix)) != self.BASE:
            raise ValueError("Radix symbols must be distinct")
        self.radix = radix
        self._values = {symbol: value for value, symbol in enumerate(radix)}

    # ═══════════════════════════════════════════════════════════════════════════
    # LENGTH BANDS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def band_size(cls, length: int) -> int:
        """Number of integers (and strings) of exactly `length` symbols."""
        if length < 0:
            raise ValueError("Band length must be non-negative")
        return 1 << (cls.DIGIT_BITS * length)

    @classmethod
    def band_offset(cls, length: int) -> int:
        """First integer of band `length`: Σ_{i<length} 64^i."""
        return (cls.band_size(length) - 1) // (cls.BASE - 1)

    @classmethod
    def _split(cls, n: int) -> List[int]:
        """Return [length, remainder] with n = band_offset(length) + remainder."""
        length = 0
        size = 1
        while n >= size:
            n -= size
            length += 1
            size <<= cls.DIGIT_BITS
        return [length, n]

    @classmethod
    def band(cls, n: int) -> int:
        """Length band of `n`, i.e. the number of symbols in its encoding."""
        return cls._split(_check_index(n, "Encode Error: "))[0]

    # ═══════════════════════════════════════════════════════════════════════════
    # ENCODE / DECODE
    # ═══════════════════════════════════════════════════════════════════════════

    def encode(self, n: int) -> str:
        """Render a non-negative integer as its unique string."""
        length, remainder = self._split(_check_index(n, "Encode Error: "))
        symbols = []
        for _ in range(length):
            remainder, digit = divmod(remainder, self.BASE)
            symbols.append(self.radix[digit])
        return "".join(reversed(symbols))

    def decode(self, text: str) -> int:
        """Read a string back into its integer."""
        if not isinstance(text, str):
            raise PartTypeError(f"Decode Error: Expected a string, got {type(text).__name__}")
        remainder = 0
        for position, symbol in enumerate(text):
            value = self._values.get(symbol)
            if value is None:
                raise InvalidSymbolError(
                    f"Decode Error: Symbol {symbol!r} at position {position} is not in the radix."
                )
            remainder = remainder * self.BASE + value
        return self.band_offset(len(text)) + remainder


NUMERAL = Numeral()
encode = NUMERAL.encode
decode = NUMERAL.decode


# ═══════════════════════════════════════════════════════════════════════════════
# MODELS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Unit:
    """The only model of a leaf (written as None)."""


UNIT = Unit()


@dataclass(frozen=True)
class Fields:
    """A field mapping: sparse tuple fields, or a zero/one entry branch selector."""
    entries: Dict[Any, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Branch:
    """
    A branch selector for a choice.

    With `shorthand` set, the model is ignored and the branch is taken at
    its own zero state (this is what a bare key string means).
    """
    key: str
    model: Any = None
    shorthand: bool = False


Model = Union[Unit, Fields, Branch]


def as_model(value: Any, node: Optional['Node'] = None) -> Model:
    """Classify a raw Python value (None, str, mapping) as a typed model."""
    if isinstance(value, (Unit, Fields, Branch)):
        return value
    if value is None:
        return UNIT
    if isinstance(value, str):
        return Branch(value, shorthand=True)
    if isinstance(value, Mapping):
        return Fields(dict(value))
    where = f' for {node.kind.value} "{node.path}"' if node is not None else ""
    raise PartTypeError(
        f'Hash Error: Cannot compute a hash{where} from a model of type "{type(value).__name__}".'
    )


def _shape(model: Model) -> str:
    if isinstance(model, Unit):
        return "null"
    if isinstance(model, Fields):
        return "mapping"
    return "string" if model.shorthand else "branch"


# ═══════════════════════════════════════════════════════════════════════════════
# SCHEMA NODES
# ═══════════════════════════════════════════════════════════════════════════════

class NodeKind(Enum):
    LEAF = "leaf"
    TUPLE = "tuple"
    CHOICE = "choice"


@dataclass(frozen=True, eq=False, repr=False)
class Node:
    """
    One node of a schema tree.

    `weights` holds the per-child place values of a tuple or the per-child
    offsets of a choice. Only `key`, `kind` and `children` are given; the
    cardinality and tables are derived from them in __post_init__, after
    which the node is frozen and its children are attached to it.
    The parent link is a weak reference used for `path` only.
    """
    key: str
    kind: NodeKind
    children: Sequence[Union[str, 'Node']] = ()
    cardinality: int = field(init=False)
    weights: Sequence[int] = field(init=False)
    _positions: Dict[str, int] = field(init=False)
    _parent: Optional[weakref.ref] = field(init=False, default=None)
    index: Optional[int] = field(init=False, default=None)

    EXHAUSTIVE_THRESHOLD = 4096
    DEFAULT_SAMPLE_SIZE = 256
    PATH_SEPARATOR = "/"

    def __post_init__(self):
        if not isinstance(self.key, str):
            raise TypeError(f"Node key must be a string, got {type(self.key).__name__}")
        if not isinstance(self.kind, NodeKind):
            raise TypeError(f"Node kind must be a NodeKind, got {self.kind!r}")
        if isinstance(self.children, (str, Mapping)):
            raise TypeError(f'Children of "{self.key}" must be a sequence of keys or nodes')

        nodes = tuple(_coerce_child(child) for child in self.children)
        if self.kind is NodeKind.LEAF and nodes:
            raise ValueError(f'Leaf "{self.key}" cannot have children')

        positions: Dict[str, int] = {}
        for position, child in enumerate(nodes):
            if child.key in positions:
                raise ValueError(f'Duplicate child key "{child.key}" under "{self.key}"')
            if child.index is not None:
                raise ValueError(f'Node "{child.path}" is already attached to a parent')
            positions[child.key] = position

        weights = [0] * len(nodes)
        if self.kind is NodeKind.CHOICE:
            cardinality = 0
            for position, child in enumerate(nodes):
                weights[position] = cardinality
                cardinality += child.cardinality
            if cardinality == 0:
                raise ValueError(f'Choice "{self.key}" must have at least one child')
        else:
            cardinality = 1
            for position in range(len(nodes) - 1, -1, -1):
                weights[position] = cardinality
                cardinality *= nodes[position].cardinality

        object.__setattr__(self, 'children', nodes)
        object.__setattr__(self, 'cardinality', cardinality)
        object.__setattr__(self, 'weights', tuple(weights))
        object.__setattr__(self, '_positions', positions)

        for position, child in enumerate(nodes):
            child._attach(self, position)

    def _attach(self, parent: 'Node', index: int) -> None:
        object.__setattr__(self, '_parent', weakref.ref(parent))
        object.__setattr__(self, 'index', index)

    @property
    def parent(self) -> Optional['Node']:
        return self._parent() if self._parent is not None else None

    @property
    def path(self) -> str:
        parent = self.parent
        if parent is None:
            return self.key
        return f"{parent.path}{self.PATH_SEPARATOR}{self.key}"

    @property
    def max_length(self) -> int:
        """Number of symbols in the longest string hash of this node."""
        return Numeral.band(self.cardinality - 1)

    def __getitem__(self, item: Union[str, int]) -> 'Node':
        if isinstance(item, int) and not isinstance(item, bool):
            return self.children[item]
        return self.children[self._positions[item]]

    def __iter__(self) -> Iterator['Node']:
        return iter(self.children)

    def __len__(self) -> int:
        return len(self.children)

    def __repr__(self) -> str:
        return f"{self.kind.value.capitalize()}({self.key!r}, cardinality={self.cardinality})"

    def walk(self) -> Iterator['Node']:
        """Pre-order traversal of this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def _check_range(self, n: int, verb: str) -> int:
        if not 0 <= n < self.cardinality:
            raise PartRangeError(
                f'{verb} Error: {self.kind.value.capitalize()} "{self.path}" does not support '
                f'index {n} (max {self.cardinality - 1}).'
            )
        return n

    # ═══════════════════════════════════════════════════════════════════════════
    # HASH
    # ═══════════════════════════════════════════════════════════════════════════

    def hash(self, model: Any, format: Union[str, Format] = Format.STRING,
             numeral: Optional[Numeral] = None) -> Union[int, str]:
        """Encode a model as a string hash or, with format="bigint", as its index."""
        fmt = Format.of(format)
        n = self._hash(model)
        return (numeral or NUMERAL).encode(n) if fmt is Format.STRING else n

    def _hash(self, value: Any) -> int:
        model = as_model(value, self)
        if self.kind is NodeKind.LEAF:
            return self._hash_leaf(model)
        elif self.kind is NodeKind.TUPLE:
            return self._hash_tuple(model)
        elif self.kind is NodeKind.CHOICE:
            return self._hash_choice(model)
        raise ValueError(f"Unknown node kind: {self.kind}")

    def _hash_leaf(self, model: Model) -> int:
        if not isinstance(model, Unit):
            raise PartTypeError(
                f'Hash Error: Leaf "{self.path}" does not support hashing any model besides '
                f'null (got a {_shape(model)} model).'
            )
        return 0

    def _hash_tuple(self, model: Model) -> int:
        if not isinstance(model, Fields):
            raise PartTypeError(
                f'Hash Error: Tuple "{self.path}" does not support computing a hash from a '
                f'{_shape(model)} model.'
            )
        if not model.entries:
            return 0

        n = 0
        for key, submodel in model.entries.items():
            position = self._positions.get(key)
            if position is None:
                raise PartReferenceError(
                    f'Hash Error: Tuple "{self.path}" does not have a child called "{key}".'
                )
            n += self.children[position]._hash(submodel) * self.weights[position]

        return self._check_range(n, "Hash")

    def _hash_choice(self, model: Model) -> int:
        if isinstance(model, Fields):
            keys = list(model.entries)
            if not keys:
                return 0
            if len(keys) != 1:
                raise PartReferenceError(
                    f'Hash Error: Choice "{self.path}" does not support multiple key assignments '
                    f'(attempted to set "{", ".join(str(k) for k in keys)}").'
                )
            model = Branch(keys[0], model.entries[keys[0]])
        elif not isinstance(model, Branch):
            raise PartTypeError(
                f'Hash Error: Choice "{self.path}" does not support computing a hash from a '
                f'{_shape(model)} model.'
            )

        position = self._positions.get(model.key)
        if position is None:
            available = '", "'.join(child.key for child in self.children)
            raise PartReferenceError(
                f'Hash Error: Choice "{self.path}" does not have a child with key '
                f'"{model.key}" (available keys are "{available}").'
            )

        local = 0 if model.shorthand else self.children[position]._hash(model.model)
        return self._check_range(self.weights[position] + local, "Hash")

    # ═══════════════════════════════════════════════════════════════════════════
    # UNHASH
    # ═══════════════════════════════════════════════════════════════════════════

    def unhash(self, value: Union[str, int], format: Union[str, Format] = Format.STRING,
               numeral: Optional[Numeral] = None) -> Any:
        """Decode a string hash (or, with format="bigint", an index) to its canonical model."""
        fmt = Format.of(format)
        if fmt is Format.STRING:
            if not isinstance(value, str):
                raise PartTypeError(
                    f'Unhash Error: {self.kind.value.capitalize()} "{self.path}" expected a '
                    f'string hash, got {type(value).__name__}.'
                )
            n = (numeral or NUMERAL).decode(value)
        else:
            if isinstance(value, bool) or not isinstance(value, int):
                raise PartTypeError(
                    f'Unhash Error: {self.kind.value.capitalize()} "{self.path}" expected a '
                    f'bigint, got {type(value).__name__}.'
                )
            n = value
        return self._unhash(n)

    def _unhash(self, n: int) -> Any:
        self._check_range(n, "Unhash")

        if self.kind is NodeKind.LEAF:
            return None

        if self.kind is NodeKind.TUPLE:
            model = {}
            for child, place_value in zip(self.children, self.weights):
                local, n = divmod(n, place_value)
                model[child.key] = child._unhash(local)
            return model

        position = bisect_right(self.weights, n) - 1
        child = self.children[position]
        if child.cardinality == 1:
            return child.key
        return {child.key: child._unhash(n - self.weights[position])}

    def zero(self) -> Any:
        """Canonical model of index 0."""
        return self._unhash(0)

    # ═══════════════════════════════════════════════════════════════════════════
    # COHERENCE VERIFICATION
    # ═══════════════════════════════════════════════════════════════════════════

    def _verify_laws(self) -> bool:
        """Verify the product/sum law and the derived table of this node."""
        cards = [child.cardinality for child in self.children]

        if self.kind is NodeKind.LEAF:
            if self.cardinality != 1 or self.children:
                raise CoherenceError(f'Leaf "{self.path}" is not a unit type')
            return True

        if self.kind is NodeKind.TUPLE:
            product = 1
            for i in range(len(cards) - 1, -1, -1):
                if self.weights[i] != product:
                    raise CoherenceError(f'Place value of "{self.children[i].path}" is {self.weights[i]}, expected {product}')
                product *= cards[i]
            if product != self.cardinality:
                raise CoherenceError(f'Product law failed at "{self.path}"')
            return True

        total = 0
        for i, card in enumerate(cards):
            if self.weights[i] != total:
                raise CoherenceError(f'Offset of "{self.children[i].path}" is {self.weights[i]}, expected {total}')
            total += card
        if total != self.cardinality:
            raise CoherenceError(f'Sum law failed at "{self.path}"')
        return True

    def _verification_indices(self, sample_size: Optional[int]) -> List[int]:
        """Exhaustive for small nodes, otherwise boundaries, band edges and an even sample."""
        if self.cardinality <= self.EXHAUSTIVE_THRESHOLD:
            return list(range(self.cardinality))

        indices = set()
        for i in range(16):
            indices.add(i)
            indices.add(self.cardinality - 1 - i)

        length = 1
        while Numeral.band_offset(length) < self.cardinality:
            edge = Numeral.band_offset(length)
            indices.add(edge)
            indices.add(edge - 1)
            length += 1

        if self.kind is NodeKind.CHOICE:
            for offset in self.weights:
                indices.add(offset)
                if offset:
                    indices.add(offset - 1)

        k = sample_size if sample_size is not None else self.DEFAULT_SAMPLE_SIZE
        for i in range(k):
            indices.add((i * self.cardinality) // k)

        return sorted(indices)

    def _verify_index(self, n: int, max_length: int) -> bool:
        model = self._unhash(n)
        if self._hash(model) != n:
            raise CoherenceError(f'Round trip failed at {n} for "{self.path}": {model!r}')

        text = NUMERAL.encode(n)
        if len(text) > max_length:
            raise CoherenceError(f'Hash {text!r} of {n} is longer than {max_length} symbols')
        if NUMERAL.decode(text) != n:
            raise CoherenceError(f'Numeral round trip failed at {n}')
        if self.hash(model) != text or self.unhash(text) != model:
            raise CoherenceError(f'String round trip failed at {n} for "{self.path}"')
        return True

    def verify(self, sample_size: Optional[int] = None) -> bool:
        """Verify the bijection between [0, cardinality) and the models of this tree."""
        for node in self.walk():
            node._verify_laws()

        max_length = self.max_length
        for n in self._verification_indices(sample_size):
            self._verify_index(n, max_length)

        for edge in (-1, self.cardinality):
            try:
                self._unhash(edge)
            except PartRangeError:
                continue
            raise CoherenceError(f'Index {edge} was accepted by "{self.path}"')

        return True

    # ═══════════════════════════════════════════════════════════════════════════
    # SCHEMA DESCRIPTION
    # ═══════════════════════════════════════════════════════════════════════════

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable description (leaf children as bare keys)."""
        description: Dict[str, Any] = {
            "key": self.key,
            "type": self.kind.value,
        }
        if self.kind is not NodeKind.LEAF:
            description["cardinality"] = str(self.cardinality)
            description["children"] = [
                child.key if child.kind is NodeKind.LEAF else child.to_dict()
                for child in self.children
            ]
        return description

    def emit_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def write(self, path: str, indent: int = 2) -> None:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.emit_json(indent=indent))


# ═══════════════════════════════════════════════════════════════════════════════
# CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════════════

def _coerce_child(child: Union[str, Node]) -> Node:
    if isinstance(child, str):
        return Leaf(child)
    if isinstance(child, Node):
        return child
    raise TypeError(f"Children must be keys or nodes, got {type(child).__name__}")


def Leaf(key: str) -> Node:
    """A unit type: cardinality 1, only model is None."""
    return Node(key=key, kind=NodeKind.LEAF)


def Tuple(key: str, children: Sequence[Union[str, Node]]) -> Node:
    """A product type over named fields."""
    return Node(key=key, kind=NodeKind.TUPLE, children=children)


def Choice(key: str, children: Sequence[Union[str, Node]]) -> Node:
    """A sum type over mutually exclusive branches."""
    return Node(key=key, kind=NodeKind.CHOICE, children=children)


_BUILDERS = {
    NodeKind.TUPLE.value: Tuple,
    NodeKind.CHOICE.value: Choice,
}


def from_dict(data: Union[str, Mapping]) -> Node:
    """Rebuild a schema tree from a description produced by Node.to_dict()."""
    if isinstance(data, str):
        return Leaf(data)
    if not isinstance(data, Mapping):
        raise SchemaError(f"Schema entries must be keys or objects, got {type(data).__name__}")

    key = data.get("key")
    kind = data.get("type")
    if not isinstance(key, str):
        raise SchemaError(f"Schema entry is missing a string key: {data!r}")

    if kind == NodeKind.LEAF.value:
        node = Leaf(key)
    elif kind in _BUILDERS:
        children = data.get("children")
        if not isinstance(children, list):
            raise SchemaError(f'Schema entry "{key}" needs a list of children')
        try:
            node = _BUILDERS[kind](key, [from_dict(child) for child in children])
        except (TypeError, ValueError) as e:
            if isinstance(e, PartError):
                raise
            raise SchemaError(str(e)) from e
    else:
        raise SchemaError(f'Schema entry "{key}" has unknown type {kind!r}')

    expected = data.get("cardinality")
    if expected is not None and str(expected) != str(node.cardinality):
        raise SchemaError(
            f'Schema entry "{key}" declares cardinality {expected}, computed {node.cardinality}'
        )
    return node


def load(path: str) -> Node:
    """Read a JSON schema description from disk."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SchemaError(f"{path} is not valid JSON: {e}") from e
    return from_dict(data)


# ═══════════════════════════════════════════════════════════════════════════════
# ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════

FORMAT_CHOICE = click.Choice([f.value for f in Format])


def _load_or_exit(schema: str) -> Node:
    try:
        return load(schema)
    except PartError as e:
        click.echo(f"  ✗ {e}", err=True)
        raise SystemExit(1)


@click.group()
def main():
    """
    Parthash - reversible hashes for named-choice configuration models.

    SCHEMA is a JSON description as written by Node.to_dict().
    """


@main.command()
@click.argument('schema', type=click.Path(exists=True, dir_okay=False))
@click.option('--tree', is_flag=True, help='List every node with its cardinality')
def inspect(schema: str, tree: bool):
    """Show cardinality and hash length of a schema."""
    root = _load_or_exit(schema)

    click.echo(f"Key:          {root.key}")
    click.echo(f"Kind:         {root.kind.value}")
    click.echo(f"Cardinality:  {root.cardinality:,}")
    click.echo(f"Max length:   {root.max_length} symbol(s)")

    if tree:
        click.echo()
        for node in root.walk():
            click.echo(f"  {node.path:<40} {node.kind.value:<7} {node.cardinality}")


@main.command(name='hash')
@click.argument('schema', type=click.Path(exists=True, dir_okay=False))
@click.argument('model')
@click.option('-f', '--format', 'fmt', default=Format.STRING.value, type=FORMAT_CHOICE,
              help='Output representation')
def hash_command(schema: str, model: str, fmt: str):
    """
    Hash MODEL against SCHEMA.

    MODEL is a JSON object or string. Any other text, including JSON
    literals such as 1 or true, is taken as a bare branch key; null is
    only read as null for a leaf schema.
    """
    root = _load_or_exit(schema)

    try:
        value = json.loads(model)
    except json.JSONDecodeError:
        value = model

    if value is None and root.kind is NodeKind.LEAF:
        pass
    elif not isinstance(value, (str, Mapping)):
        value = model

    try:
        click.echo(root.hash(value, fmt))
    except PartError as e:
        click.echo(f"  ✗ {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument('schema', type=click.Path(exists=True, dir_okay=False))
@click.argument('value')
@click.option('-f', '--format', 'fmt', default=Format.STRING.value, type=FORMAT_CHOICE,
              help='Representation of VALUE')
def unhash(schema: str, value: str, fmt: str):
    """Decode VALUE against SCHEMA and print the canonical model as JSON."""
    root = _load_or_exit(schema)

    if fmt == Format.BIGINT.value:
        try:
            value = int(value)
        except ValueError:
            raise click.BadParameter(f"{value!r} is not an integer", param_hint="VALUE")

    try:
        click.echo(json.dumps(root.unhash(value, fmt), ensure_ascii=False))
    except PartError as e:
        click.echo(f"  ✗ {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument('schema', type=click.Path(exists=True, dir_okay=False))
@click.option('--sample-size', type=int, default=None,
              help='Sample size for schemas too large to check exhaustively')
@click.option('--verbose', is_flag=True, help='Show detailed output')
def verify(schema: str, sample_size: Optional[int], verbose: bool):
    """Verify the hash/unhash bijection of a schema."""
    root = _load_or_exit(schema)

    if verbose:
        click.echo(f"Schema:       {root.path}")
        click.echo(f"Cardinality:  {root.cardinality:,}")
        mode = "exhaustive" if root.cardinality <= root.EXHAUSTIVE_THRESHOLD else "sampled"
        click.echo(f"Mode:         {mode}")
        click.echo()
        click.echo("Verifying coherence...")

    try:
        root.verify(sample_size=sample_size)
    except CoherenceError as e:
        click.echo(f"  ✗ Coherence failed: {e}", err=True)
        raise SystemExit(1)

    click.echo("  ✓ All coherence checks passed")


if __name__ == "__main__":
    main()
