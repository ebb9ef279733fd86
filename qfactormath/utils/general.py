"""
General utility functions for the qfactormath package.
"""

from typing import Any, Callable, Iterable, List, Mapping, Optional, TypeVar, Union

T = TypeVar('T')


def sign(x: float) -> int:
    """
    Sign of a number as -1, 0 or 1.
    
    Args:
        x: Number
        
    Returns:
        -1 for negative, 1 for positive, 0 for zero
    """
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def duplicates(coll: Iterable[T]) -> List[T]:
    """Items that occur more than once, in order of their second occurrence."""
    seen = set()
    result = []
    for item in coll:
        if item in seen and item not in result:
            result.append(item)
        seen.add(item)
    return result


def mean(values: List[float]) -> float:
    """Arithmetic mean, 0.0 for an empty list."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def as_lookup(source: Union[None, Mapping[Any, T], Callable[[Any], Optional[T]]]) -> Callable[[Any], Optional[T]]:
    """
    Normalize a mapping or callable into a lookup function.
    
    Args:
        source: Mapping, callable, or None
        
    Returns:
        Function returning the looked-up value or None
    """
    if source is None:
        return lambda key: None
    if callable(source):
        return source
    return lambda key: source.get(key, source.get(str(key)))
