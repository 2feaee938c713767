"""Free text sanitizing and tag cleaning"""

import pytest

from wishlist_app.utils.validators import clean_tags, sanitize_text

@pytest.mark.parametrize("raw, cleaned", [
    ("Tom & Jerry < 3", "Tom & Jerry < 3"),
    ("<b>bold</b> move", "bold move"),
    ("  a &amp; b​  ", "a & b"),
])
def test_sanitize_text(raw, cleaned):
    assert sanitize_text(raw) == cleaned

def test_sanitize_text_limits_final_length():
    assert sanitize_text("&" * 10, max_length=10) == "&" * 10
    assert sanitize_text("<i>" + "x" * 10 + "</i>", max_length=10) == "x" * 10

    with pytest.raises(ValueError):
        sanitize_text("x" * 11, max_length=10)

def test_clean_tags_keeps_first_seen_order():
    assert clean_tags([" b ", "a", "b", ""]) == ["b", "a"]

    with pytest.raises(ValueError):
        clean_tags(["x" * 51])
