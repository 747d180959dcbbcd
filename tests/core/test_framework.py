"""Tests for declarative properties and one-to-many relations."""

import pytest

from nexmap.errors import UnconfiguredPropertyError
from nexmap.mapper import BelongsTo, Entity, HasMany, Property


class Target(Entity):
    name = Property()
    weight = Property(default=1)
    source = BelongsTo()


class Source(Entity):
    targets = HasMany()


class Loose(Entity):
    """Entity with no reciprocal reference to any owner."""


class Member(Entity):
    guarded = BelongsTo()


class Guarded(Entity):
    members = HasMany()

    def has_member(self, obj):
        return "custom"


class Item(Entity):
    picky = BelongsTo()


class Picky(Entity):
    items = HasMany(check="_check_items", on_add="_added", on_remove="_removed")

    def __init__(self, id=None, **options):
        self.log = []
        super().__init__(id, **options)

    def _check_items(self, objects, replace):
        for obj in objects:
            if str(obj.id).startswith("bad"):
                raise ValueError(f"rejected {obj.id}")

    def _added(self, obj):
        self.log.append(("add", obj.id))

    def _removed(self, obj):
        self.log.append(("remove", obj.id))


class Bundle(Entity):
    parts = HasMany(singularize=False)


class Part(Entity):
    bundle = BelongsTo(update="parts")


# ─────────────────────────────────────────────────────────────────────────────
# Properties
# ─────────────────────────────────────────────────────────────────────────────


class TestProperties:
    """Tests for Property and Entity.properties()."""

    def test_constructor_sets_options(self):
        target = Target("t1", name="first")
        assert target.id == "t1"
        assert target.name == "first"

    def test_default_value(self):
        assert Target("t1").weight == 1
        assert Target("t1").name is None

    def test_properties_returns_snapshot(self):
        target = Target("t1")
        snapshot = target.properties(name="renamed", weight=3)
        assert snapshot == {"id": "t1", "name": "renamed", "weight": 3}
        assert target.name == "renamed"

    def test_unknown_option_raises(self):
        target = Target("t1", name="kept")
        with pytest.raises(UnconfiguredPropertyError, match="colour"):
            target.properties(name="changed", colour="red")

    def test_unknown_option_sets_nothing(self):
        target = Target("t1", name="kept")
        with pytest.raises(UnconfiguredPropertyError):
            target.properties(name="changed", colour="red")
        assert target.name == "kept"

    def test_unknown_constructor_option_raises(self):
        with pytest.raises(UnconfiguredPropertyError):
            Target("t1", colour="red")

    def test_error_is_attribute_error(self):
        with pytest.raises(AttributeError):
            Target("t1", colour="red")

    def test_error_names_owner_and_property(self):
        with pytest.raises(UnconfiguredPropertyError) as exc_info:
            Target("t1", colour="red")
        assert exc_info.value.owner == "Target"
        assert exc_info.value.name == "colour"

    def test_relations_are_settable(self):
        assert Target.settable("source")
        assert Source.settable("targets")
        assert not Target.settable("colour")
        assert not Target.settable("key")

    def test_relation_option_in_constructor(self):
        source = Source("s1")
        target = Target("t1", source=source)
        assert source.has_target(target)

    def test_key_and_repr(self):
        assert Target.key() == "target"
        assert repr(Target("t1")) == "Target(id='t1')"


# ─────────────────────────────────────────────────────────────────────────────
# Generated methods
# ─────────────────────────────────────────────────────────────────────────────


class TestGeneratedMethods:
    """Tests for the methods installed by HasMany."""

    @pytest.mark.parametrize(
        "name",
        [
            "add_target",
            "delete_target",
            "get_target_by_id",
            "has_target",
            "number_of_targets",
            "each_target",
            "each_target_with_id",
        ],
    )
    def test_method_installed(self, name):
        assert callable(getattr(Source, name))
        assert getattr(Source, name).__name__ == name

    def test_unsingularized_names(self):
        for name in ("add_parts", "delete_parts", "get_parts_by_id", "number_of_parts"):
            assert hasattr(Bundle, name)
        assert not hasattr(Bundle, "add_part")

    def test_explicit_method_not_overwritten(self):
        guarded = Guarded("g1")
        assert guarded.has_member(Member("m1")) == "custom"
        assert hasattr(Guarded, "add_member")

    def test_class_access_returns_descriptor(self):
        assert isinstance(Source.targets, HasMany)
        assert isinstance(Target.source, BelongsTo)


# ─────────────────────────────────────────────────────────────────────────────
# Relation mutations
# ─────────────────────────────────────────────────────────────────────────────


class TestAdd:
    """Tests for add_<member>()."""

    def test_add_sets_back_reference(self):
        source, target = Source("s1"), Target("t1")
        assert source.add_target(target) is source
        assert target.source is source
        assert source.targets == [target]

    def test_add_through_member_side(self):
        source, target = Source("s1"), Target("t1")
        target.source = source
        assert source.has_target(target)
        assert source.number_of_targets() == 1

    def test_readd_is_noop(self):
        source, target = Source("s1"), Target("t1")
        source.add_target(target)
        source.add_target(target)
        assert source.number_of_targets() == 1
        assert target.source is source

    def test_move_to_other_owner(self):
        first, second, target = Source("s1"), Source("s2"), Target("t1")
        first.add_target(target)
        second.add_target(target)
        assert target.source is second
        assert not first.has_target(target)
        assert first.number_of_targets() == 0

    def test_move_through_member_side(self):
        first, second, target = Source("s1"), Source("s2"), Target("t1")
        target.source = first
        target.source = second
        assert not first.has_target(target)
        assert second.has_target(target)

    def test_same_id_displaces_previous_member(self):
        source = Source("s1")
        old, new = Target("x"), Target("x")
        source.add_target(old).add_target(new)
        assert source.get_target_by_id("x") is new
        assert source.number_of_targets() == 1
        assert old.source is None
        assert new.source is source

    def test_member_without_reciprocal_raises(self):
        source = Source("s1")
        with pytest.raises(UnconfiguredPropertyError):
            source.add_target(Loose("l1"))
        assert source.number_of_targets() == 0

    def test_custom_update_key(self):
        bundle, part = Bundle("b1"), Part("p1")
        part.bundle = bundle
        assert bundle.has_parts(part)
        assert part.bundle is bundle


class TestDelete:
    """Tests for delete_<member>() and clearing the back reference."""

    def test_delete_returns_member(self):
        source, target = Source("s1"), Target("t1")
        source.add_target(target)
        assert source.delete_target(target) is target
        assert target.source is None
        assert not source.has_target("t1")

    def test_delete_non_member_returns_none(self):
        assert Source("s1").delete_target(Target("t1")) is None

    def test_delete_same_id_other_object_is_noop(self):
        source, target = Source("s1"), Target("x")
        source.add_target(target)
        assert source.delete_target(Target("x")) is None
        assert source.get_target_by_id("x") is target

    def test_unset_through_member_side(self):
        source, target = Source("s1"), Target("t1")
        source.add_target(target)
        target.source = None
        assert source.number_of_targets() == 0
        assert target.source is None


class TestQueries:
    """Tests for lookup and iteration methods."""

    @pytest.fixture
    def source(self):
        source = Source("s1")
        for target_id in ("a", "b", "c"):
            source.add_target(Target(target_id))
        return source

    def test_get_by_id(self, source):
        assert source.get_target_by_id("b").id == "b"
        assert source.get_target_by_id("zzz") is None

    def test_has_by_object_and_id(self, source):
        assert source.has_target("a")
        assert source.has_target(source.get_target_by_id("a"))
        assert not source.has_target(Target("a"))
        assert not source.has_target("zzz")

    def test_each_with_callback(self, source):
        seen = []
        assert source.each_target(lambda t: seen.append(t.id)) is None
        assert seen == ["a", "b", "c"]

    def test_each_as_iterator(self, source):
        assert [t.id for t in source.each_target()] == ["a", "b", "c"]

    def test_each_with_id(self, source):
        pairs = []
        source.each_target_with_id(lambda key, t: pairs.append((key, t)))
        assert [key for key, _ in pairs] == ["a", "b", "c"]
        assert all(key == t.id for key, t in pairs)
        assert [key for key, _ in source.each_target_with_id()] == ["a", "b", "c"]

    def test_view_is_a_copy(self, source):
        view = source.targets
        view.clear()
        assert source.number_of_targets() == 3


class TestReplace:
    """Tests for assigning the whole relation."""

    def test_replace_detaches_old_members(self):
        source = Source("s1")
        old, new = Target("old"), Target("new")
        source.add_target(old)
        source.targets = [new]
        assert source.targets == [new]
        assert old.source is None
        assert new.source is source

    def test_replace_with_empty(self):
        source = Source("s1")
        target = Target("t1")
        source.add_target(target)
        source.targets = []
        assert source.number_of_targets() == 0
        assert target.source is None

    def test_invalid_replacement_keeps_members(self):
        source = Source("s1")
        target = Target("t1")
        source.add_target(target)
        with pytest.raises(UnconfiguredPropertyError):
            source.targets = [Target("t2"), Loose("l1")]
        assert source.targets == [target]
        assert target.source is source

    def test_replace_keeps_shared_members_attached(self):
        source = Source("s1")
        a, b, c = Target("a"), Target("b"), Target("c")
        source.targets = [a, b]
        source.targets = [c, b]
        assert source.targets == [c, b]
        assert a.source is None
        assert b.source is source


class TestHooks:
    """Tests for check, on_add and on_remove hooks."""

    def test_check_rejects_before_change(self):
        picky = Picky("p1")
        picky.add_item(Item("good"))
        with pytest.raises(ValueError, match="bad1"):
            picky.add_item(Item("bad1"))
        assert [item.id for item in picky.items] == ["good"]

    def test_rejected_member_keeps_previous_owner(self):
        first, second = Picky("p1"), Picky("p2")
        item = Item("bad1")
        with pytest.raises(ValueError):
            second.add_item(item)
        assert item.picky is None
        assert first.number_of_items() == 0

    def test_check_rejects_replacement(self):
        picky = Picky("p1")
        picky.add_item(Item("good"))
        with pytest.raises(ValueError):
            picky.items = [Item("fine"), Item("bad2")]
        assert [item.id for item in picky.items] == ["good"]

    def test_add_and_remove_hooks(self):
        picky = Picky("p1")
        item = Item("i1")
        picky.add_item(item)
        picky.delete_item(item)
        assert picky.log == [("add", "i1"), ("remove", "i1")]

    def test_replace_skips_hooks_for_kept_members(self):
        picky = Picky("p1")
        kept, dropped = Item("kept"), Item("dropped")
        picky.items = [kept, dropped]
        picky.log.clear()
        picky.items = [kept]
        assert picky.log == [("remove", "dropped")]

    def test_hooks_fire_on_move(self):
        first, second = Picky("p1"), Picky("p2")
        item = Item("i1")
        first.add_item(item)
        item.picky = second
        assert first.log == [("add", "i1"), ("remove", "i1")]
        assert second.log == [("add", "i1")]
