import pytest
from typeguard import TypeCheckError

from rvframework import FormArray, FormControl, FormGroup, Status, StructuralError, Validator, ValidatorError
from rvframework.validators import max_value, min_length, required


def _address() -> FormGroup:
    return FormGroup(
        {
            "street": FormControl("Main Street", [required]),
            "city": FormControl("", [required]),
        }
    )


class TestFormControl:
    def test_initial_status(self):
        assert FormControl("x", [required]).status == Status.VALID
        assert FormControl(None, [required]).status == Status.INVALID
        assert FormControl(None).status == Status.VALID

    def test_errors_empty_iff_valid(self):
        control = FormControl("", [required])
        assert control.invalid and control.errors == {"required": True}
        control.set_value("x")
        assert control.valid and control.errors == {}

    def test_recompute_is_idempotent(self):
        control = FormControl("ab", [required, min_length(3)])
        control.update_value_and_validity()
        first = (control.status, control.errors)
        control.update_value_and_validity()
        assert (control.status, control.errors) == first

    def test_dirty_on_first_change(self):
        control = FormControl("a")
        control.set_value("a")
        assert control.pristine
        control.set_value("b")
        assert control.dirty
        control.set_value("a")
        assert control.dirty
        control.mark_as_pristine()
        assert control.pristine
        control.set_value("a")
        assert control.pristine

    def test_touched(self):
        control = FormControl("a")
        assert control.untouched
        control.mark_as_touched()
        assert control.touched
        control.mark_as_untouched()
        assert control.untouched

    def test_value_type_is_checked(self):
        control = FormControl[int](1, value_type=int)
        control.set_value(2)
        with pytest.raises(TypeCheckError):
            control.set_value("two")
        assert control.value == 2

    def test_guarded_validator_is_skipped(self):
        only_if_long = Validator(lambda view: {"never": True}, guard=lambda view: len(view.value) > 3)
        control = FormControl("abc", [only_if_long])
        assert control.valid
        control.set_value("abcd")
        assert control.errors == {"never": True}

    def test_set_validators_recomputes(self):
        control = FormControl("")
        assert control.valid
        control.set_validators([required])
        assert control.errors == {"required": True}
        control.add_validators(min_length(2))
        assert set(control.errors) == {"required", "minlength"}
        control.remove_validators(required)
        assert set(control.errors) == {"minlength"}
        control.clear_validators()
        assert control.valid

    def test_failing_validator_propagates_and_keeps_status(self):
        def explode(view):
            if view.value == "boom":
                raise ValueError("boom")
            return None

        control = FormControl("", [required, explode])
        sibling = FormControl("", [required])
        FormGroup({"control": control, "sibling": sibling})
        with pytest.raises(ValidatorError) as exc_info:
            control.set_value("boom")
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert exc_info.value.validator_name == "explode"
        assert exc_info.value.path == ("control",)
        assert control.errors == {"required": True}
        assert control.value == ""
        assert control.pristine
        assert sibling.errors == {"required": True}

    def test_disable(self):
        control = FormControl("", [required])
        control.disable()
        assert control.status == Status.DISABLED
        assert control.errors == {}
        control.enable()
        assert control.status == Status.INVALID

    def test_constructed_disabled(self):
        assert FormControl("", [required], disabled=True).status == Status.DISABLED


class TestFormGroup:
    def test_invalid_child_makes_group_invalid(self):
        group = FormGroup({"address": _address(), "name": FormControl("Bob")})
        assert group.status == Status.INVALID
        assert group.errors == {"address": {"city": {"required": True}}}
        assert group.own_errors == {}
        assert group.get("address.city").errors == {"required": True}
        group.get("address.city").set_value("Berlin")
        assert group.valid
        assert group.value == {"address": {"street": "Main Street", "city": "Berlin"}, "name": "Bob"}

    def test_errors_of_enabled_children_are_aggregated(self):
        form = FormGroup(
            {
                "name": FormControl("", [required]),
                "powers": FormArray([FormControl("flight"), FormControl("", [required])]),
            },
            [Validator(lambda view: {"incomplete": True} if view.value.get("name") == "" else None)],
        )
        assert form.errors == {
            "name": {"required": True},
            "powers": {"1": {"required": True}},
            "incomplete": True,
        }
        assert form.own_errors == {"incomplete": True}
        assert form["powers"].errors == {"1": {"required": True}}
        assert form["powers"].own_errors == {}

        form["name"].disable()
        assert form.errors == {"powers": {"1": {"required": True}}}

        form.get("powers.1").set_value("x-ray vision")
        assert form.errors == {}
        assert form.valid

    def test_valid_iff_no_errors_and_nothing_pending(self):
        form = FormGroup({"address": _address(), "aliases": FormArray([FormControl("", [required])])})
        for path in ("", "address", "address.street", "address.city", "aliases", "aliases.0"):
            control = form.get(path)
            assert control.valid == (len(control.errors) == 0 and not control.pending)
        assert form.invalid
        assert form.errors == {"address": {"city": {"required": True}}, "aliases": {"0": {"required": True}}}

    def test_failing_child_validator_keeps_the_group_in_line(self):
        def no_boom(view):
            if view.value == "boom":
                raise ValueError("boom")
            return None

        group = FormGroup({"first": FormControl("a"), "second": FormControl("b", [no_boom])})
        with pytest.raises(ValidatorError):
            group.set_value({"first": "c", "second": "boom"})
        assert group["first"].value == "c"
        assert group["second"].value == "b"
        assert group.value == {"first": "c", "second": "b"}

    def test_disabled_child_is_excluded(self):
        group = FormGroup({"name": FormControl("", [required]), "nickname": FormControl("")})
        assert group.invalid
        group["name"].disable()
        assert group.valid
        assert group.value == {"nickname": ""}
        assert group.raw_value == {"name": "", "nickname": ""}
        group["name"].enable()
        assert group.invalid

    def test_disable_propagates_down(self):
        group = FormGroup({"address": _address()})
        group.disable()
        assert group.status == Status.DISABLED
        assert group.get("address").status == Status.DISABLED
        assert group.get("address.city").status == Status.DISABLED
        assert group.value == {"address": {"street": "Main Street", "city": ""}}
        group.enable()
        assert group.get("address.city").status == Status.INVALID
        assert group.status == Status.INVALID

    def test_interaction_state_propagates_up(self):
        group = FormGroup({"address": _address(), "name": FormControl("")})
        group.get("address.street").mark_as_touched()
        assert group.touched
        assert group["address"].touched
        assert group["name"].untouched

        group["name"].set_value("Alice")
        assert group.dirty
        group["name"].mark_as_pristine()
        assert group.pristine

    def test_directly_marked_composite_stays_dirty(self):
        group = FormGroup({"name": FormControl("")})
        group.mark_as_dirty()
        group["name"].set_value("x")
        group["name"].mark_as_pristine()
        assert group.dirty

    def test_reset_cascades(self):
        group = FormGroup({"address": _address(), "name": FormControl("Bob")})
        group.get("address.city").set_value("Berlin")
        group.mark_all_as_touched()
        assert group.dirty and group.get("address.street").touched

        group.reset()
        assert group.pristine and group.untouched
        assert group.get("address.city").pristine
        assert group.get("address.street").untouched
        assert group.value == {"address": {"street": "Main Street", "city": ""}, "name": "Bob"}
        assert group.invalid

        group.reset({"address": {"city": "Paris"}})
        assert group.value == {"address": {"street": "Main Street", "city": "Paris"}, "name": "Bob"}
        assert group.valid
        assert group.pristine

    def test_reset_of_child_updates_parent(self):
        group = FormGroup({"name": FormControl("", [required]), "age": FormControl(3)})
        group["name"].set_value("x")
        group["age"].mark_as_touched()
        group["name"].reset()
        assert group.pristine
        assert group.touched
        assert group.invalid

    def test_set_value_requires_all_keys(self):
        group = FormGroup({"a": FormControl(1), "b": FormControl(2)})
        with pytest.raises(StructuralError):
            group.set_value({"a": 3})
        with pytest.raises(StructuralError):
            group.set_value({"a": 3, "b": 4, "c": 5})
        group.set_value({"a": 3, "b": 4})
        assert group.value == {"a": 3, "b": 4}
        group.patch_value({"b": 5, "c": 6})
        assert group.value == {"a": 3, "b": 5}

    def test_add_and_remove_control(self):
        group = FormGroup({"name": FormControl("Bob")})
        group.add_control("email", FormControl("", [required]))
        assert group.invalid
        assert group["email"].path == ("email",)
        group.remove_control("email")
        assert group.valid
        assert "email" not in group

    def test_controls_cannot_be_shared(self):
        control = FormControl("x")
        FormGroup({"a": control})
        with pytest.raises(StructuralError):
            FormGroup({"b": control})

    def test_no_cycles(self):
        group = FormGroup({})
        with pytest.raises(StructuralError):
            group.add_control("self", group)

    def test_get_returns_none_for_unknown_path(self):
        group = FormGroup({"address": _address()})
        assert group.get("address.zip") is None
        assert group.get("nothing.here") is None
        assert group.get(("address", "city")) is group.get("address.city")


class TestFormArray:
    def test_dynamic_children(self):
        aliases = FormArray([FormControl("Robin")], [Validator(lambda view: None if view.value else {"empty": True})])
        assert aliases.valid
        aliases.append(FormControl("", [required]))
        assert aliases.invalid
        assert aliases.value == ["Robin", ""]
        assert aliases[1].path == (1,)

        removed = aliases.remove_at(1)
        assert removed.parent is None
        assert aliases.valid

        aliases.clear()
        assert aliases.errors == {"empty": True}
        assert len(aliases) == 0

    def test_insert_and_set_control(self):
        numbers = FormArray([FormControl(1), FormControl(2)])
        numbers.insert(0, FormControl(0))
        assert numbers.value == [0, 1, 2]
        numbers.set_control(-1, FormControl(20, [max_value(10)]))
        assert numbers.value == [0, 1, 20]
        assert numbers.invalid
        with pytest.raises(StructuralError):
            numbers.remove_at(3)

    def test_set_value(self):
        numbers = FormArray([FormControl(1), FormControl(2)])
        with pytest.raises(StructuralError):
            numbers.set_value([1])
        numbers.set_value([3, 4])
        assert numbers.value == [3, 4]
        assert numbers.dirty
        numbers.patch_value([5])
        assert numbers.value == [5, 4]

    def test_array_in_group(self):
        form = FormGroup({"aliases": FormArray([FormControl("a"), FormControl("b")])})
        form.get("aliases.1").set_value("")
        assert form.value == {"aliases": ["a", ""]}
        assert form.get("aliases.1").path == ("aliases", 1)
        assert form.dirty
