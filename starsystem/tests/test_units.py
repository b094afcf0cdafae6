import numpy as np
import pytest

from starsystem.errors import ConfigurationError, UnitMismatchError
from starsystem.units import AU, Acceleration, Length, Mass, Velocity


def test_unit_conversion_to_base():
    assert Length(1.5, "km").value == 1500.0
    assert Length(1, "au").value == AU
    np.testing.assert_allclose(Velocity([1, 0, 2], "km/s").value, [1000.0, 0.0, 2000.0])
    assert Mass(2, "t").to("kg") == 2000.0


def test_unknown_unit_rejected():
    with pytest.raises(UnitMismatchError):
        Mass(1.0, "m")


def test_mixing_dimensions_rejected():
    with pytest.raises(UnitMismatchError):
        Length(1.0) + Mass(1.0)
    with pytest.raises(UnitMismatchError):
        Velocity([1, 0, 0]) + Acceleration([1, 0, 0])
    with pytest.raises(UnitMismatchError):
        Length([1, 2, 3]) + 4.0
    with pytest.raises(UnitMismatchError):
        Length(1.0) * Mass(2.0)
    with pytest.raises(UnitMismatchError):
        Length(Mass(2.0))


def test_shape_and_finiteness_validated():
    with pytest.raises(ConfigurationError):
        Mass([1.0, 2.0, 3.0])
    with pytest.raises(ConfigurationError):
        Velocity(1.0)
    with pytest.raises(ConfigurationError):
        Length([1.0, float("nan"), 0.0])
    with pytest.raises(ConfigurationError):
        Mass(float("inf"))


def test_scaling_and_direction():
    offset = Length([3.0, 4.0, 0.0])
    distance = offset.norm()
    assert isinstance(distance, Length)
    assert distance.value == 5.0
    np.testing.assert_allclose(offset / distance, [0.6, 0.8, 0.0])
    doubled = 2 * Velocity([1.0, -1.0, 0.5])
    assert isinstance(doubled, Velocity)
    np.testing.assert_allclose(doubled.value, [2.0, -2.0, 1.0])
    np.testing.assert_allclose((-Acceleration([1.0, 0.0, 0.0])).value, [-1.0, 0.0, 0.0])


def test_vector_value_is_read_only():
    position = Length([1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        position.value[0] = 10.0
