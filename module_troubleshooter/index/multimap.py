"""
Group-by helpers producing key -> ordered list mappings.
"""

from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


def group_by(items: Iterable[V], key_fn: Callable[[V], K]) -> Dict[K, List[V]]:
    """
    Group items by a single key.
    
    Args:
        items: Items to group, in the order they should appear in each group
        key_fn: Function returning the key of an item
        
    Returns:
        New dictionary from key to the items sharing it, keys in first-seen order
    """
    groups: Dict[K, List[V]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def group_by_each(items: Iterable[V], keys_fn: Callable[[V], Iterable[K]]) -> Dict[K, List[V]]:
    """
    Group items under every key they declare.
    
    An item declaring the same key twice is listed once for that key.
    
    Args:
        items: Items to group
        keys_fn: Function returning all keys of an item
        
    Returns:
        New dictionary from key to the items declaring it
    """
    groups: Dict[K, List[V]] = {}
    for item in items:
        for key in dict.fromkeys(keys_fn(item)):
            groups.setdefault(key, []).append(item)
    return groups
