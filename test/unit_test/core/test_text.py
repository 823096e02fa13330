import pytest

from productlobby.core.text import is_valid_email, slugify


@pytest.mark.parametrize(
    "text, slug",
    [
        ("Waterproof Trail Runners", "waterproof-trail-runners"),
        ("  Vegan   Leather_Boots! ", "vegan-leather-boots"),
        ("100% Recycled -- Packaging", "100-recycled-packaging"),
        ("???", ""),
    ],
)
def test_slugify(text, slug):
    assert slugify(text) == slug


@pytest.mark.parametrize(
    "value, valid",
    [
        ("ana@example.com", True),
        ("first.last@sub.example.org", True),
        ("", False),
        ("no-at-sign.com", False),
        ("two@@example.com", False),
        ("spaces in@example.com", False),
        ("missing@tld", False),
    ],
)
def test_is_valid_email(value, valid):
    assert is_valid_email(value) is valid
