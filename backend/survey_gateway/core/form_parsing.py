"""Form Parsing - turns urlencoded key/value pairs into nested objects.

Invariants:
    - "a[b][c]=1" yields {"a": {"b": {"c": "1"}}}
    - "tags[]=x&tags[]=y" yields {"tags": ["x", "y"]}
    - Numeric indexes ("items[0]=x") build lists in key order
    - A repeated plain key collects its values into a list
    - Keys without brackets stay flat; values are always strings
    - Nesting stops after MAX_DEPTH bracket segments; the rest of the key is one literal segment
"""

import re
from typing import Any, Iterable

_SEGMENT = re.compile(r"\[([^\[\]]*)\]")
MAX_DEPTH = 5


def split_key(key: str) -> list[str]:
    """Split "a[b][]" into ["a", "b", ""].

    At most MAX_DEPTH bracket segments are split; whatever follows is kept
    as one literal segment, so "a[b][c][d][e][f][g]" ends in "[g]".
    """
    head, bracket, _ = key.partition("[")
    if not bracket or not head:
        return [key]
    segments = []
    pos = len(head)
    while pos < len(key) and len(segments) < MAX_DEPTH:
        match = _SEGMENT.match(key, pos)
        # Unbalanced brackets: treat the whole key as a flat name
        if match is None:
            return [key]
        segments.append(match.group(1))
        pos = match.end()
    if pos < len(key):
        segments.append(key[pos:])
    return [head, *segments]


def parse_nested_form(pairs: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Fold urlencoded pairs into a nested dict."""
    result: dict[str, Any] = {}
    for key, value in pairs:
        _assign(result, split_key(key), value)
    return _finalize(result)


def _assign(target: dict, path: list[str], value: str) -> None:
    head, rest = path[0], path[1:]
    if not rest:
        if head in target:
            existing = target[head]
            target[head] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            target[head] = value
        return

    if rest[0] == "" and len(rest) == 1:
        bucket = target.setdefault(head, [])
        if not isinstance(bucket, list):
            bucket = target[head] = [bucket]
        bucket.append(value)
        return

    child = target.get(head)
    if not isinstance(child, dict):
        child = target[head] = {} if child is None else {"": child}
    _assign(child, rest, value)


def _finalize(node: Any) -> Any:
    """Convert dicts whose keys are all digits into ordered lists."""
    if isinstance(node, list):
        return [_finalize(v) for v in node]
    if not isinstance(node, dict):
        return node
    converted = {k: _finalize(v) for k, v in node.items()}
    if converted and all(k.isdigit() for k in converted):
        return [converted[k] for k in sorted(converted, key=int)]
    return converted
