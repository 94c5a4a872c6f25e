"""
Tests for the error taxonomy and eager argument validation.
"""

import numpy as np
import pytest

from primecert.errors import (
    InternalError,
    InvalidArgument,
    PrimeError,
    RandomSourceExhausted,
    Unrepresentable,
    validate_integer,
)


class TestTaxonomy:
    """Error classes map onto the builtin exceptions callers already catch."""

    def test_all_derive_from_prime_error(self):
        for cls in (InvalidArgument, Unrepresentable, RandomSourceExhausted, InternalError):
            assert issubclass(cls, PrimeError)

    def test_builtin_bases(self):
        assert issubclass(InvalidArgument, ValueError)
        assert issubclass(Unrepresentable, OverflowError)
        assert issubclass(RandomSourceExhausted, RuntimeError)
        assert issubclass(InternalError, RuntimeError)


class TestValidateInteger:
    """validate_integer rejects anything that is not a suitable integer."""

    def test_accepts_plain_and_numpy_ints(self):
        assert validate_integer(0) == 0
        assert validate_integer(10 ** 40) == 10 ** 40
        value = validate_integer(np.int64(17))
        assert value == 17 and type(value) is int

    @pytest.mark.parametrize("bad", [2.0, "7", None, True, False, 1 + 0j])
    def test_rejects_non_integers(self, bad):
        with pytest.raises(InvalidArgument):
            validate_integer(bad)

    def test_rejects_negative(self):
        with pytest.raises(InvalidArgument, match="nonnegative"):
            validate_integer(-1)

    def test_minimum(self):
        assert validate_integer(2, minimum=2) == 2
        with pytest.raises(InvalidArgument):
            validate_integer(1, 'bits', minimum=2)

    def test_maximum_is_unrepresentable(self):
        assert validate_integer(100, maximum=100) == 100
        with pytest.raises(Unrepresentable):
            validate_integer(101, 'digits', maximum=100)

    def test_message_names_parameter(self):
        with pytest.raises(InvalidArgument, match="digits"):
            validate_integer(-3, 'digits')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
