import pytest

from amethyst.domain import NamedApi, NO_API, SingleApi
from amethyst.errors import (
    DuplicateNameError,
    InvalidDefinitionError,
    MissingNameError,
    NotFoundError,
)
from amethyst.registry import SubjectRegistry, inferred_name


@pytest.fixture
def registry():
    return SubjectRegistry()


def test_subject_is_registered(registry):
    options = {"api": {"greet": lambda self: "hello"}}
    registry.register("greeter", options)

    assert "greeter" in registry
    assert registry.lookup("greeter") is options
    assert registry.names() == ["greeter"]
    assert len(registry) == 1


def test_options_are_stored_verbatim(registry):
    options = {}
    registry.register("greeter", options)

    def greet(self):
        return "hello"

    options["api"] = greet

    assert registry.definition("greeter").api == SingleApi(greet)


def test_duplicate_name_raises_and_keeps_first_definition(registry):
    first = {"loaded": lambda self: 1}
    registry.register("x", first)

    with pytest.raises(DuplicateNameError, match="A subject named 'x' already exists"):
        registry.register("x", {"loaded": lambda self: 2})

    assert registry.lookup("x") is first


@pytest.mark.parametrize("name", [None, ""])
def test_missing_name_raises(registry, name):
    with pytest.raises(MissingNameError, match="Subject has no name"):
        registry.register(name, {})

    assert len(registry) == 0


def test_non_string_name_raises(registry):
    with pytest.raises(InvalidDefinitionError, match="must be a string"):
        registry.register(42, {})


@pytest.mark.parametrize("options", [None, [], "options", 3])
def test_options_must_be_a_mapping(registry, options):
    with pytest.raises(InvalidDefinitionError, match="must be a mapping"):
        registry.register("x", options)

    assert "x" not in registry


def test_validate_does_not_register(registry):
    registry.validate("x", {})

    assert "x" not in registry


def test_lookup_of_unknown_name_raises(registry):
    with pytest.raises(NotFoundError, match="Subject 'nope' not found"):
        registry.lookup("nope")


def test_unhashable_names_are_never_registered(registry):
    assert [] not in registry

    with pytest.raises(NotFoundError):
        registry.lookup([])


def test_definition_normalizes_options(registry):
    registry.register("load_only", {"loaded": lambda self: None})
    registry.register("mapped", {"api": {"x": 1}, "subjects": {"load_only": "load_only"}})

    assert registry.definition("load_only").api is NO_API

    mapped = registry.definition("mapped")
    assert mapped.api == NamedApi({"x": 1})
    assert [ref.name for ref in mapped.dependencies] == ["load_only"]


def test_items_lists_everything_registered(registry):
    a, b = {}, {}
    registry.register("a", a)
    registry.register("b", b)

    assert dict(registry.items()) == {"a": a, "b": b}


def test_name_can_be_inferred_from_factory_name():
    def make_draggable():
        pass

    def resizable():
        pass

    assert inferred_name(make_draggable) == "draggable"
    assert inferred_name(resizable) == "resizable"
