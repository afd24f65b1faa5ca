from tunefolder.models import Folder, Section, Tune, TuneSet


def test_tune_stores_fields():
    tune = Tune(filename="", slug="The-Kesh", abc="X:1\nT:The Kesh")
    assert tune.filename == ""
    assert tune.slug == "The-Kesh"
    assert tune.abc.startswith("X:1")


def test_tune_set_defaults():
    tune_set = TuneSet(name="Jigs 1 - Some jigs", slug="Jigs-1-Some-jigs")
    assert tune_set.notes == []
    assert tune_set.content == []
    assert tune_set.tags == []
    assert tune_set.next_slug is None
    assert tune_set.previous_slug is None


def test_section_defaults():
    section = Section(name="Jigs")
    assert section.content == []


def test_folder_sets_flattens_sections_in_order():
    a = TuneSet(name="Jigs 1 - A", slug="a")
    b = TuneSet(name="Jigs 2 - B", slug="b")
    c = TuneSet(name="Reels 1 - C", slug="c")
    folder = Folder(
        name="Book",
        content=[Section(name="Jigs", content=[a, b]), Section(name="Reels", content=[c])],
    )
    assert [s.slug for s in folder.sets()] == ["a", "b", "c"]


def test_empty_folder_has_no_sets():
    assert Folder(name="Book").sets() == []
