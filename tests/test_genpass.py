import pytest

from ferrolab.rcli.genpass import LOWER, NUMBER, SYMBOL, UPPER, generate_password


def test_default_password_has_sixteen_characters_from_all_classes():
    password = generate_password()
    assert len(password) == 16
    assert set(password) <= set(UPPER + LOWER + NUMBER + SYMBOL)


@pytest.mark.parametrize("_", range(20))
def test_every_enabled_class_is_present(_):
    password = generate_password(4, True, True, True, True)
    assert len(password) == 4
    assert set(password) & set(UPPER)
    assert set(password) & set(LOWER)
    assert set(password) & set(NUMBER)
    assert set(password) & set(SYMBOL)


def test_only_numbers():
    password = generate_password(20, False, False, True, False)
    assert len(password) == 20
    assert set(password) <= set(NUMBER)


def test_ambiguous_characters_never_appear():
    password = generate_password(255)
    assert len(password) == 255
    assert not set(password) & set("lLO0")


def test_too_short_for_the_classes_raises():
    with pytest.raises(ValueError):
        generate_password(3)


def test_no_classes_with_positive_length_raises():
    with pytest.raises(ValueError):
        generate_password(5, False, False, False, False)


def test_no_classes_with_zero_length_gives_empty_password():
    assert generate_password(0, False, False, False, False) == ""


@pytest.mark.parametrize("length", [-1, 256])
def test_length_out_of_range_raises(length):
    with pytest.raises(ValueError):
        generate_password(length)