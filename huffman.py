import heapq
import itertools
import math
from typing import Dict, Hashable, Iterable, List, Tuple, Union


# Errors

class HuffmanError(Exception):
    pass

class EmptyInputError(HuffmanError):
    pass

class MalformedTreeError(HuffmanError):
    pass

class UnknownSymbolError(HuffmanError):
    def __init__(self, symbol):
        super().__init__(f"No code for symbol {symbol!r}")
        self.symbol = symbol

class TruncatedStreamError(HuffmanError):
    pass

class InvalidBitError(HuffmanError):
    pass


# Tree nodes

class HuffmanLeaf: # Leaf of the Huffman tree, carries a symbol
    def __init__(self, symbol, weight):
        self.symbol = symbol
        self.weight = weight

    def __repr__(self):
        return f"HuffmanLeaf({self.symbol!r}, {self.weight!r})"


class HuffmanInternal: # Internal node, carries only the merged weight
    def __init__(self, weight, left, right):
        self.weight = weight
        self.left = left
        self.right = right

    def __repr__(self):
        return f"HuffmanInternal({self.weight!r}, {self.left!r}, {self.right!r})"


HuffmanNode = Union[HuffmanLeaf, HuffmanInternal]


class PriorityQueue:
    """
    Min-queue of tree nodes ordered by weight
    Equal weights come out in insertion order, which keeps trees reproducible
    """

    def __init__(self):
        self._heap = []
        self._order = itertools.count()

    def push(self, item: HuffmanNode, weight) -> None:
        heapq.heappush(self._heap, (weight, next(self._order), item))

    def pop_min(self) -> HuffmanNode:
        return heapq.heappop(self._heap)[2] # IndexError when empty

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self):
        return len(self._heap)


# Frequencies

def freq_table(symbols: Iterable[Hashable]) -> Dict[Hashable, int]:
    ft: Dict[Hashable, int] = {}
    for s in symbols:
        ft[s] = ft.get(s, 0) + 1
    return ft

def populate_frequencies(base: dict, other: dict) -> dict:
    """
    Copy of base with a zero entry for every symbol of other that base lacks
    """
    result = dict(base)
    for symbol in other:
        if symbol not in result:
            result[symbol] = 0
    return result


# Tree and codes

def build_huffman_tree(frequency_table: dict) -> HuffmanNode: # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise EmptyInputError("frequency table is empty, nothing to encode")

    priority_queue = PriorityQueue()
    for symbol, frequency in frequency_table.items():
        priority_queue.push(HuffmanLeaf(symbol, frequency), frequency)

    # Single symbol: the leaf is the root, no merge
    if len(priority_queue) == 1:
        return priority_queue.pop_min()

    while len(priority_queue) > 1:
        left = priority_queue.pop_min() # first popped goes left
        right = priority_queue.pop_min()
        merged = HuffmanInternal(left.weight + right.weight, left, right)
        priority_queue.push(merged, merged.weight)

    return priority_queue.pop_min()

def generate_huffman_codes(root: HuffmanNode) -> Dict[Hashable, str]: # root: root of the Huffman tree
    # A lone leaf still needs one bit so that decode can count it
    if isinstance(root, HuffmanLeaf):
        return {root.symbol: "0"}

    codes: Dict[Hashable, str] = {}
    stack: List[Tuple[HuffmanNode, str]] = [(root, "")]
    while stack:
        node, path = stack.pop()
        if isinstance(node, HuffmanLeaf):
            codes[node.symbol] = path
            continue
        if not isinstance(node, HuffmanInternal) or node.left is None or node.right is None:
            raise MalformedTreeError(f"internal node at path {path!r} does not have two children")
        # right pushed first so the left subtree is visited first
        stack.append((node.right, path + "1"))
        stack.append((node.left, path + "0"))
    return codes

def build_huffman_codes(frequency_table: dict) -> Tuple[Dict[Hashable, str], HuffmanNode]:
    root = build_huffman_tree(frequency_table)
    return generate_huffman_codes(root), root


# Codec

def huffman_encode(symbols: Iterable[Hashable], code_map: dict) -> str: # symbols: input sequence, code_map: dict of symbol -> Huffman code
    parts = []
    for symbol in symbols:
        code = code_map.get(symbol)
        if code is None:
            raise UnknownSymbolError(symbol)
        parts.append(code)
    return "".join(parts)

def huffman_decode(bitstring: str, root: HuffmanNode) -> list: # bitstring: the encoded string of '0's and '1's, root: root of the Huffman tree
    decoded = []

    if isinstance(root, HuffmanLeaf):
        for index, bit in enumerate(bitstring):
            if bit != "0":
                raise InvalidBitError(f"bit {bit!r} at {index} on a single-symbol tree")
            decoded.append(root.symbol)
        return decoded

    current_node = root
    for index, bit in enumerate(bitstring):
        if not isinstance(current_node, HuffmanInternal):
            raise MalformedTreeError(f"cannot descend from {current_node!r}")
        if bit == "0":
            current_node = current_node.left
        elif bit == "1":
            current_node = current_node.right
        else:
            raise InvalidBitError(f"bit {bit!r} at {index} is not '0' or '1'")

        if current_node is None:
            raise MalformedTreeError(f"missing child reached at bit {index}")
        if isinstance(current_node, HuffmanLeaf): # reached a leaf
            decoded.append(current_node.symbol)
            current_node = root # reset to the root for the next symbol

    if current_node is not root:
        raise TruncatedStreamError("bitstream ended in the middle of a code")
    return decoded

def decode_text(bitstring: str, root: HuffmanNode) -> str:
    return "".join(huffman_decode(bitstring, root))


# Lengths

def huffman_length(frequency_table: dict, code_map: dict):
    """
    Number of bits an encode of the table's symbols would produce
    Symbols with zero frequency never get encoded, so they may lack a code
    """
    total = 0
    for symbol, frequency in frequency_table.items():
        code = code_map.get(symbol)
        if code is None:
            if not frequency:
                continue
            raise UnknownSymbolError(symbol)
        total += frequency * len(code)
    return total

def fixed_bit_width(frequency_table: dict) -> int:
    n = len(frequency_table)
    if n == 0:
        raise EmptyInputError("frequency table is empty, no fixed width")
    return max(1, math.ceil(math.log2(n)))

def fixed_length(frequency_table: dict):
    return sum(frequency_table.values()) * fixed_bit_width(frequency_table)
