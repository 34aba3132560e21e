import pytest

from wallpack.framework.naming import normalize_image_name, normalize_pack_name, slugify


def test_normalize_pack_name():
    assert normalize_pack_name("my-cool-pack") == "My.cool.pack"
    assert normalize_pack_name("summer-vibes") == "Summer.vibes"


def test_normalize_pack_name_collapses_punctuation():
    assert normalize_pack_name("  Summer   Vibes!! 2024 ") == "Summer.vibes.2024"


def test_normalize_image_name():
    assert normalize_image_name("My.cool.pack", "Blue Hour", "jdoe") == "My.cool.pack--jdoe--BlueHour"
    assert normalize_image_name("Summer.vibes", "blue hour", "jdoe") == "Summer.vibes--jdoe--BlueHour"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Blue Hour", "blue-hour"),
        ("  --Hello,   World--  ", "hello-world"),
        ("Café Crème", "cafe-creme"),
        ("already-slugged", "already-slugged"),
        ("!!!", ""),
    ],
)
def test_slugify(text, expected):
    assert slugify(text) == expected


def test_distinct_titles_that_slugify_alike_collide():
    first = normalize_image_name("P", "Blue Hour", "u")
    second = normalize_image_name("P", "blue-hour!", "u")
    assert first == second


def test_distinct_usernames_do_not_collide():
    assert normalize_image_name("P", "Blue Hour", "a") != normalize_image_name("P", "Blue Hour", "b")


def test_slugify_transliterates_non_latin_text():
    assert slugify("Straße") == "strasse"
    assert slugify("星空") != ""
    assert slugify("星空") != slugify("海")


def test_non_latin_titles_get_distinct_entry_names():
    first = normalize_image_name("Summer.vibes", "星空", "li")
    second = normalize_image_name("Summer.vibes", "海", "li")

    assert first != "Summer.vibes--li--"
    assert first != second
    assert normalize_image_name("Summer.vibes", "Straße", "li") == "Summer.vibes--li--Strasse"
