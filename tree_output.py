"""
Text rendering and JSON persistence for Huffman trees

Reads the tree and code table only, never changes them
"""

import json
from pathlib import Path
from typing import Dict, Optional, Tuple

from huffman import HuffmanInternal, HuffmanLeaf, HuffmanNode, MalformedTreeError

SPECIAL_NAMES = {"\n": "LF", "\r": "CR", " ": "SP"}
INTERNAL_MARK = "•"


def symbol_label(symbol) -> str:
    if isinstance(symbol, str):
        return SPECIAL_NAMES.get(symbol, symbol)
    return repr(symbol)

def visualize_tree(root: HuffmanNode, codes: Optional[Dict] = None) -> str:
    codes = codes or {}
    lines = []
    # (node, prefix, is_left); the root is drawn like a left child
    stack = [(root, "", True)]
    while stack:
        node, prefix, is_left = stack.pop()
        if node is None:
            continue
        connector = "├── " if is_left else "└── "

        if isinstance(node, HuffmanLeaf):
            code = codes.get(node.symbol)
            detail = f"{node.weight}, {code}" if code else f"{node.weight}"
            lines.append(f"{prefix}{connector}{symbol_label(node.symbol)} ({detail})")
            continue

        lines.append(f"{prefix}{connector}{INTERNAL_MARK} ({node.weight})")
        new_prefix = prefix + ("│   " if is_left else "    ")
        stack.append((node.right, new_prefix, False))
        stack.append((node.left, new_prefix, True))

    return "".join(line + "\n" for line in lines)


def tree_to_dict(root: HuffmanNode) -> dict:
    """
    Plain nested dict of the tree, safe for json.dump
    Leaves: {"weight", "symbol"}; internal nodes: {"weight", "left", "right"}
    """
    out: dict = {}
    stack = [(root, out)]
    while stack:
        node, target = stack.pop()
        target["weight"] = node.weight
        if isinstance(node, HuffmanLeaf):
            target["symbol"] = node.symbol
            continue
        if not isinstance(node, HuffmanInternal) or node.left is None or node.right is None:
            raise MalformedTreeError(f"cannot serialize {node!r}")
        target["left"] = {}
        target["right"] = {}
        stack.append((node.right, target["right"]))
        stack.append((node.left, target["left"]))
    return out

def tree_from_dict(data: dict) -> HuffmanNode:
    if not isinstance(data, dict):
        raise MalformedTreeError(f"expected a node object, got {data!r}")

    # Post-order rebuild without recursion: children are finished before parents
    built = {}
    stack = [(data, False)]
    while stack:
        item, expanded = stack.pop()
        if not isinstance(item, dict) or "weight" not in item:
            raise MalformedTreeError(f"node without weight: {item!r}")

        if "symbol" in item:
            if "left" in item or "right" in item:
                raise MalformedTreeError(f"leaf with children: {item!r}")
            built[id(item)] = HuffmanLeaf(item["symbol"], item["weight"])
            continue

        left, right = item.get("left"), item.get("right")
        if not isinstance(left, dict) or not isinstance(right, dict):
            raise MalformedTreeError(f"internal node without two children: {item!r}")
        if expanded:
            built[id(item)] = HuffmanInternal(item["weight"], built[id(left)], built[id(right)])
        else:
            stack.append((item, True))
            stack.append((right, False))
            stack.append((left, False))

    return built[id(data)]


def write_outputs(outdir: Path, codes: Dict, root: HuffmanNode, mod: str = "") -> Tuple[Path, Path]:
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    suffix = f"-{mod}" if mod else ""

    json_path = outdir / f"output{suffix}.json"
    tree_path = outdir / f"output{suffix}-tree.txt"

    with json_path.open("w", encoding="utf-8") as f:
        json.dump({"codes": codes, "tree": tree_to_dict(root)}, f, indent=4, ensure_ascii=False)
    tree_path.write_text(visualize_tree(root, codes), encoding="utf-8")
    return json_path, tree_path
