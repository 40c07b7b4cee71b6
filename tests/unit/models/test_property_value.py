from docmap.models.enums import Cardinality
from docmap.models.value import EmptyValue, ManyValues, SingleValue, from_array


def test_single_valued_array_lifts_first_element() -> None:
    assert from_array(Cardinality.OPTIONAL, ("a", "b")) == SingleValue("a")
    assert from_array(Cardinality.REQUIRED, ("a",)) == SingleValue("a")


def test_missing_or_empty_single_valued_array_is_empty() -> None:
    assert from_array(Cardinality.OPTIONAL, None) == EmptyValue()
    assert from_array(Cardinality.OPTIONAL, ()) == EmptyValue()


def test_repeated_array_is_never_absent() -> None:
    assert from_array(Cardinality.REPEATED, None) == ManyValues(())
    assert from_array(Cardinality.REPEATED, ()) == ManyValues(())
    assert from_array(Cardinality.REPEATED, (1, 2)) == ManyValues((1, 2))


def test_array_and_attribute_forms() -> None:
    assert EmptyValue().to_array() is None
    assert EmptyValue().to_attribute() is None
    assert SingleValue("x").to_array() == ("x",)
    assert SingleValue("x").to_attribute() == "x"
    assert ManyValues(()).to_array() == ()
    assert ManyValues((1, 2)).to_attribute() == [1, 2]


def test_map_preserves_variant() -> None:
    assert EmptyValue().map(str.upper) == EmptyValue()
    assert SingleValue("x").map(str.upper) == SingleValue("X")
    assert ManyValues(("a", "b")).map(str.upper) == ManyValues(("A", "B"))
