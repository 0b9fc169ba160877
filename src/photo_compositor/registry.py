"""
Registry pattern utility for key to function tables.

The filter and blend tables are built with ``new_registry``::

    FILTER_FUNC, register = new_registry(attribute="kind")

    @register(FilterKind.INVERT)
    def invert(color):
        return 255.0 - color

    FILTER_FUNC[FilterKind.INVERT] is invert
    invert.kind == FilterKind.INVERT
"""

from typing import Any, Callable, Tuple, TypeVar, Union

T = TypeVar("T")


def new_registry(attribute: Union[str, None] = None) -> Tuple[dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name to set on registered objects.
                     The key will be stored as this attribute on the object.
    :return: Tuple of (registry_dict, register_decorator)
    """
    registry = {}

    def register(*keys: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            for key in keys:
                registry[key] = func
            if attribute:
                setattr(func, attribute, keys[0])
            return func

        return decorator

    return registry, register
