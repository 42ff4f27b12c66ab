import pytest

from proxyprint.units import Vec2, cm, density_to_dpi, dpi, inches, mm, points


def test_centimetre_is_ten_millimetres():
    assert cm(1) == pytest.approx(mm(10))


def test_seventy_two_points_make_an_inch():
    assert points(72) == pytest.approx(inches(1), rel=1e-5)


def test_inch_matches_source_definition():
    assert inches(1) == pytest.approx(0.0254)


def test_dpi_round_trip():
    assert density_to_dpi(dpi(300)) == pytest.approx(300)


def test_density_times_length_gives_pixels():
    assert dpi(600) * inches(2) == pytest.approx(1200)


def test_add_then_sub_round_trip():
    a = Vec2(1.5, -2.0)
    b = Vec2(3.25, 7.0)
    assert (a + b) - b == a


def test_scalar_add_applies_to_both_components():
    a = Vec2(1.0, 2.0)
    assert a + 3 == Vec2(a.x + 3, a.y + 3)
    assert 3 + a == a + 3


def test_scalar_multiplication_matches_repeated_add():
    a = Vec2(1.5, 2.5)
    assert a * 2 == a + a
    assert 2 * a == a * 2


def test_componentwise_mul_div_round_trip():
    a = Vec2(3.0, 5.0)
    b = Vec2(2.0, 4.0)
    assert (a * b) / b == a


def test_rsub_scalar():
    a = Vec2(1.0, 2.0)
    assert 5 - a == -(a - 5)


def test_swapped():
    a = Vec2(1.0, 2.0)
    assert a.swapped() == Vec2(a.y, a.x)
    assert a.swapped().swapped() == a


def test_unpacking():
    x, y = Vec2(4.0, 9.0)
    assert (x, y) == (4.0, 9.0)


def test_divide_by_zero_component_raises():
    with pytest.raises(ZeroDivisionError):
        Vec2(1.0, 1.0) / Vec2(1.0, 0.0)


def test_bad_operand_raises():
    with pytest.raises(TypeError):
        Vec2(1.0, 1.0) + "x"