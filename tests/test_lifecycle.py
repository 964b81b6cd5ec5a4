"""Tests for entry point resolution and dispatch.

This module verifies which host method becomes the validation entry point,
when construction fails on setup defects, and how soft and strict
dispatch behave.
"""

import copy
import pickle
from abc import ABC, abstractmethod

import pytest

from tests.fixtures.sample_hosts import Kraken, SoftKraken, StrictFoo, ValidyFoo
from validy import (
    AmbiguousEntryPointError,
    EntryPointMode,
    InvalidBindingError,
    MissingEntryPointError,
    ValidationFailedError,
    Validator,
    Validy,
)
from validy.core import validator as validator_module
from validy.core.lifecycle import resolve_entry_point, user_implementation
from validy.models import serialize_errors


class TestResolution:
    """Tests for resolve_entry_point."""

    def test_soft_canonical(self) -> None:
        entry_point = resolve_entry_point(ValidyFoo)

        assert entry_point.soft_name == "validate"
        assert entry_point.mode is EntryPointMode.SOFT

    def test_strict_canonical(self) -> None:
        assert resolve_entry_point(StrictFoo).mode is EntryPointMode.STRICT

    def test_explicit_binding(self) -> None:
        entry_point = resolve_entry_point(Kraken)

        assert entry_point.names == ("kraken", "kraken_strict")
        assert entry_point.mode is EntryPointMode.STRICT

    def test_counterpart_is_synthesized(self) -> None:
        """Test the missing spelling exists but is not a host implementation."""
        assert callable(ValidyFoo.validate_strict)
        assert user_implementation(ValidyFoo, "validate_strict") is None
        assert user_implementation(ValidyFoo, "validate").__name__ == "validate"

    def test_dispatcher_keeps_metadata(self) -> None:
        assert ValidyFoo.validate.__name__ == "validate"
        assert ValidyFoo.validate.__qualname__ == "ValidyFoo.validate"


class TestSetupDefects:
    """Tests for construction failures caused by host wiring."""

    def test_missing_entry_point(self) -> None:
        class NoEntry(Validy):
            pass

        with pytest.raises(MissingEntryPointError) as exc_info:
            NoEntry()

        assert exc_info.value.context["host"].endswith("NoEntry")

    def test_missing_declared_entry_point(self) -> None:
        class Declared(Validy, method="check!"):
            def validate(self):
                pass

        with pytest.raises(MissingEntryPointError) as exc_info:
            Declared()

        assert "must be implemented" in str(exc_info.value)
        assert exc_info.value.context["names"] == ["check", "check_strict"]

    def test_ambiguous_entry_point(self) -> None:
        class Both(Validy):
            def validate(self):
                pass

            def validate_strict(self):
                pass

        with pytest.raises(AmbiguousEntryPointError):
            Both()

    def test_missing_entry_point_fails_before_init(self) -> None:
        calls = []

        class NoEntry(Validy):
            def __init__(self):
                calls.append("init")

        with pytest.raises(MissingEntryPointError):
            NoEntry()

        assert calls == []

    def test_invalid_method_declaration(self) -> None:
        with pytest.raises(InvalidBindingError) as exc_info:
            class BadName(Validy, method="not valid!"):
                def validate(self):
                    pass

        assert exc_info.value.__cause__ is not None
        assert exc_info.value.context["errors"]

    def test_setters_without_method(self) -> None:
        with pytest.raises(InvalidBindingError):
            class Orphan(Validy, setters=("foo",)):
                def validate(self):
                    pass

    def test_binding_disambiguates_both_names(self) -> None:
        """Test an explicit binding accepts both spellings; soft body wins."""

        class Both(Validy, method="check!"):
            def __init__(self):
                self.calls = []

            def check(self):
                self.calls.append("soft")

            def check_strict(self):
                self.calls.append("strict")

        instance = Both()

        assert instance.calls == ["soft"]
        instance.check_strict()
        assert instance.calls == ["soft", "soft"]


class TestInheritance:
    """Tests for entry points across class hierarchies."""

    def test_entry_point_in_subclass(self) -> None:
        """Test an abstract base can defer its entry point to a subclass."""

        class Base(Validy):
            pass

        class Concrete(Base):
            def __init__(self, foo=None):
                self.foo = foo

            def validate(self):
                self.required("foo")

        assert Concrete(1).is_valid() is True
        assert Concrete().is_valid() is False

    def test_subclass_overrides_body(self) -> None:
        class Stricter(ValidyFoo):
            def validate(self):
                super().validate()
                self.optional("extra").type(str)

        instance = Stricter(4)
        instance.extra = 5

        assert instance.validate() is False
        assert instance.errors == {"error": "'5' is not a type str"}

    def test_binding_is_inherited(self) -> None:
        class Child(Kraken):
            pass

        with pytest.raises(ValidationFailedError):
            Child("1")


class TestDispatch:
    """Tests for soft and strict entry point calls."""

    def test_soft_call_returns_flag(self) -> None:
        assert ValidyFoo(4).validate() is True
        assert ValidyFoo(1).validate() is False

    def test_strict_call_on_soft_host_raises(self) -> None:
        instance = ValidyFoo(1)

        with pytest.raises(ValidationFailedError) as exc_info:
            instance.validate_strict()

        assert str(exc_info.value) == "error: foo must be bigger than 2"
        assert exc_info.value.errors == {"error": "foo must be bigger than 2"}

    def test_strict_call_on_valid_host(self) -> None:
        assert ValidyFoo(4).validate_strict() is True

    def test_soft_call_on_strict_host_does_not_raise(self) -> None:
        instance = StrictFoo(1)
        instance.foo = "1"

        assert instance.validate() is False
        assert instance.errors == {"error": "'1' is not a type int"}

    def test_idempotent_soft_pass(self) -> None:
        instance = ValidyFoo(1, 11)
        first = instance.errors
        instance.validate()

        assert instance.errors == first

    def test_pass_recovers_after_fix(self) -> None:
        instance = ValidyFoo(1)
        instance.foo = 5

        assert instance.validate() is True
        assert instance.errors == {}

    def test_nested_call_does_not_restart_pass(self) -> None:
        """Test calling the other spelling from the body neither reruns nor raises."""

        class Recursive(Validy):
            def __init__(self):
                self.nested = None

            def validate(self):
                self.add_error(error="boom")
                self.nested = self.validate_strict()

        instance = Recursive()

        assert instance.nested is False
        assert instance.errors == {"error": "boom"}

    def test_super_call_runs_parent_body(self) -> None:
        class Stricter(ValidyFoo):
            def validate(self):
                super().validate()
                self.optional("extra").type(str)

        assert Stricter(1).errors == {"error": "foo must be bigger than 2"}

    def test_separator_from_settings(self, monkeypatch) -> None:
        monkeypatch.setenv("VALIDY_ERROR_SEPARATOR", "; ")

        class Twice(Validy):
            def validate_strict(self):
                self.add_error(a="x", b="y")

        with pytest.raises(ValidationFailedError) as exc_info:
            Twice()

        assert str(exc_info.value) == "a: x; b: y"

    def test_message_uses_errors_of_failed_pass(self, monkeypatch) -> None:
        """Test a pass finishing after the lock is released cannot change the message."""
        instance = ValidyFoo(1)

        def concurrent_pass(message, *args, **kwargs) -> None:
            if "pass finished" in message:
                instance.validator.state.reset()

        monkeypatch.setattr(validator_module.logger, "debug", concurrent_pass)

        with pytest.raises(ValidationFailedError) as exc_info:
            instance.validate_strict()

        assert instance.errors == {}
        assert exc_info.value.errors == {"error": "foo must be bigger than 2"}
        assert str(exc_info.value) == serialize_errors(exc_info.value.errors)


class TestComposition:
    """Tests for a host holding a Validator without the mixin."""

    def test_standalone_host(self, settings) -> None:
        class Account:
            def __init__(self, owner):
                self.validator = Validator(self, settings=settings)
                self.owner = owner
                self.validator.finish_construction()

            def validate(self):
                self.validator.required("owner").type(str)

        assert Account("ann").validator.is_valid() is True
        assert Account(None).validator.errors == {"error": "owner required!"}

    def test_standalone_strict_host(self, settings) -> None:
        class Account:
            def __init__(self, owner):
                self.validator = Validator(self, settings=settings)
                self.owner = owner
                self.validator.finish_construction()

            def validate_strict(self):
                self.validator.required("owner")

        with pytest.raises(ValidationFailedError):
            Account(None)


class TestCopying:
    """Tests for copying and pickling hosts."""

    def test_copy_gets_own_validator(self) -> None:
        original = ValidyFoo(4)
        clone = copy.copy(original)

        assert clone.validator is not original.validator
        assert clone.validator.host is clone
        assert clone.is_valid() is True

    def test_copy_validates_its_own_attributes(self) -> None:
        original = ValidyFoo(4)
        clone = copy.copy(original)
        clone.foo = 1

        assert clone.validate() is False
        assert clone.errors == {"error": "foo must be bigger than 2"}
        assert original.is_valid() is True
        assert original.errors == {}

    def test_copy_keeps_recorded_errors_independently(self) -> None:
        original = ValidyFoo(1)
        clone = copy.copy(original)
        original.foo = 4
        original.validate()

        assert original.errors == {}
        assert clone.errors == {"error": "foo must be bigger than 2"}

    def test_copied_setter_revalidates_clone_only(self) -> None:
        original = SoftKraken(5)
        clone = copy.copy(original)
        clone.foo = 0

        assert clone.is_invalid() is True
        assert original.is_valid() is True
        assert original.foo == 5

    def test_deepcopy(self) -> None:
        original = ValidyFoo(4)
        clone = copy.deepcopy(original)
        clone.foo = 1

        assert clone.validator.host is clone
        assert clone.validate() is False
        assert original.is_valid() is True

    def test_pickle_round_trip(self) -> None:
        original = ValidyFoo(1)
        restored = pickle.loads(pickle.dumps(original))

        assert restored.validator.host is restored
        assert restored.errors == {"error": "foo must be bigger than 2"}
        restored.foo = 4
        assert restored.validate() is True
        assert original.is_invalid() is True

    def test_pickled_strict_setter_still_raises(self) -> None:
        restored = pickle.loads(pickle.dumps(Kraken(7)))

        with pytest.raises(ValidationFailedError):
            restored.foo = "x"


class TestAbstractHosts:
    """Tests for hosts that are also abstract base classes."""

    def test_mix_with_abc(self) -> None:
        class Shape(Validy, ABC):
            @abstractmethod
            def area(self):
                ...

            def validate(self):
                self.condition(lambda: self.area() > 0, "area must be positive")

        class Square(Shape):
            def __init__(self, side):
                self.side = side

            def area(self):
                return self.side * self.side

        assert Square(2).is_valid() is True
        assert Square(0).errors == {"error": "area must be positive"}

        with pytest.raises(TypeError):
            Shape()
