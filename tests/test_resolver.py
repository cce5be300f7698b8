from types import SimpleNamespace

import pytest

from amethyst.domain import DependencyRef
from amethyst.errors import DependencyCycleError, InvalidDefinitionError, NotFoundError
from amethyst.loader import Loader
from amethyst.registry import SubjectRegistry
from amethyst.resolver import DependencyResolver


@pytest.fixture
def loader():
    return Loader()


def recorder(events, name):
    def loaded(self, *args):
        events.append((name, args))
        return name

    return loaded


def test_dependencies_load_before_parent(loader):
    events = []
    loader.save(
        {"name": "child", "options": {"loaded": recorder(events, "child"), "api": {"x": 1}}},
        {
            "name": "parent",
            "options": {
                "loaded": recorder(events, "parent"),
                "api": {"y": 2},
                "subjects": {"child": "child"},
            },
        },
    )
    host = SimpleNamespace()

    handles = loader.load(host, "parent")

    assert events == [("child", ()), ("parent", ())]
    assert handles == ["parent"]
    assert host.child.x == 1
    assert host.parent.y == 2


def test_dependency_args_are_passed_to_loaded(loader):
    events = []
    loader.save(
        {"name": "spread", "options": {"loaded": recorder(events, "spread")}},
        {"name": "single", "options": {"loaded": recorder(events, "single")}},
        {
            "name": "parent",
            "options": {
                "subjects": {
                    "spread": ["spread", [1, 2]],
                    "single": ["single", "only"],
                }
            },
        },
    )

    loader.load(SimpleNamespace(), "parent")

    assert events == [("spread", (1, 2)), ("single", ("only",))]


def test_nested_dependencies_load_depth_first(loader):
    events = []
    loader.save(
        {"name": "leaf", "options": {"loaded": recorder(events, "leaf")}},
        {"name": "middle", "options": {"loaded": recorder(events, "middle"), "subjects": {"leaf": "leaf"}}},
        {"name": "sibling", "options": {"loaded": recorder(events, "sibling")}},
        {
            "name": "root",
            "options": {
                "loaded": recorder(events, "root"),
                "subjects": {"middle": "middle", "sibling": "sibling"},
            },
        },
    )

    loader.load(SimpleNamespace(), "root")

    assert [name for name, _ in events] == ["leaf", "middle", "sibling", "root"]


def test_shared_dependency_loads_once_per_dependant(loader):
    events = []
    loader.save(
        {"name": "base", "options": {"loaded": recorder(events, "base")}},
        {"name": "left", "options": {"subjects": {"base": "base"}}},
        {"name": "right", "options": {"subjects": {"base": "base"}}},
        {"name": "top", "options": {"subjects": {"left": "left", "right": "right"}}},
    )

    Loader(loader.registry, detect_cycles=True).load(SimpleNamespace(), "top")

    assert events == [("base", ()), ("base", ())]


def test_missing_dependency_raises_before_anything_loads(loader):
    events = []
    loader.save(
        {"name": "present", "options": {"loaded": recorder(events, "present")}},
        {
            "name": "parent",
            "options": {
                "loaded": recorder(events, "parent"),
                "subjects": {"present": "present", "absent": None},
            },
        },
    )
    host = SimpleNamespace()

    with pytest.raises(
        NotFoundError,
        match="Subject 'absent' required by 'parent' not found",
    ):
        loader.load(host, "parent")

    assert events == []
    assert vars(host) == {}


def test_cycle_detected_when_enabled():
    loader = Loader(detect_cycles=True)
    loader.save(
        {"name": "a", "options": {"subjects": {"b": "b"}}},
        {"name": "b", "options": {"subjects": {"a": "a"}}},
    )

    with pytest.raises(DependencyCycleError, match="Dependency cycle detected: a -> b -> a"):
        loader.load(SimpleNamespace(), "a")


def test_self_dependency_detected_when_enabled():
    loader = Loader(detect_cycles=True)
    loader.save({"name": "a", "options": {"subjects": {"a": "a"}}})

    with pytest.raises(DependencyCycleError, match="a -> a"):
        loader.load(SimpleNamespace(), "a")


def test_cycle_recurses_without_detection(loader):
    loader.save(
        {"name": "a", "options": {"subjects": {"b": "b"}}},
        {"name": "b", "options": {"subjects": {"a": "a"}}},
    )

    with pytest.raises(RecursionError):
        loader.load(SimpleNamespace(), "a")


def test_resolve_builds_plan():
    registry = SubjectRegistry()
    registry.register("child", {})
    registry.register("parent", {"subjects": {"child": ["child", [1]]}})

    plan = DependencyResolver(registry).resolve(DependencyRef("parent", ("x",)))

    assert plan.name == "parent"
    assert plan.args == ("x",)
    assert [(dependency.name, dependency.args) for dependency in plan.dependencies] == [
        ("child", (1,))
    ]
    assert plan.dependencies[0].dependencies == ()


def test_dependency_key_names_the_subject_loaded_and_attached(loader):
    events = []
    loader.save(
        {"name": "timer", "options": {"loaded": recorder(events, "timer"), "api": {"period": 5}}},
        {"name": "clock", "options": {"subjects": {"timer": None}}},
    )
    host = SimpleNamespace()

    loader.load(host, "clock")

    assert events == [("timer", ())]
    assert host.timer.period == 5


def test_dependency_naming_a_different_subject_than_its_key_raises(loader):
    loader.save({"name": "clock", "options": {}})

    with pytest.raises(
        InvalidDefinitionError,
        match="Dependency 'timer' of subject 'alarm' names a different subject, 'clock'",
    ):
        loader.save({"name": "alarm", "options": {"subjects": {"timer": "clock"}}})

    assert "alarm" not in loader.registry
