from typing import Any, Tuple, Type, Union

Expected = Union[Type, Tuple[Type, ...], list]


class ErrorHandling:
    @staticmethod
    def accepted_types(expected: Expected, label: str = "check_types") -> Tuple[Type, ...]:
        if isinstance(expected, type):
            return (expected,)
        if isinstance(expected, (tuple, list)) and all(isinstance(t, type) for t in expected):
            return tuple(expected)
        raise TypeError(f"[{label}] Invalid 'expected' type: {type(expected)}")

    @staticmethod
    def check_types(arg: Any, expected: Expected, label: str = "check_types") -> Any:
        """
        Checks a schema or settings value (or every item of a list value) against
        the accepted types. bool only passes where bool is accepted, so
        `required: 1` or `search_threshold = true` are rejected.

        Args:
            arg (Any): Value to check. Lists are checked item by item.
            expected (type | tuple | list): Accepted type(s).
            label (str): Field name used in the error message.

        Returns:
            The value unchanged.

        Raises:
            TypeError: If the value, or any list item, has another type.
        """
        accepted = ErrorHandling.accepted_types(expected, label)
        for item in (arg if isinstance(arg, list) else [arg]):
            ok = isinstance(item, accepted) and not (isinstance(item, bool) and bool not in accepted)
            if not ok:
                names = ", ".join(t.__name__ for t in accepted)
                raise TypeError(f"[{label}] Expected type(s): {names}; got {type(item).__name__}")
        return arg


check_types = ErrorHandling.check_types
