"""Unit tests for Binding matching."""

import pytest

from staged_controller.pipeline.binding import Binding


def handler(request, call_next):
    return call_next(request)


class TestBinding:
    """Test Binding dataclass."""

    def test_binding_is_frozen(self):
        binding = Binding(handler=handler, method="GET", path="/items")

        with pytest.raises(AttributeError):
            binding.path = "/other"

    def test_binding_equality(self):
        assert Binding(handler=handler, method="GET", path="/items") == Binding(
            handler=handler, method="GET", path="/items"
        )
        assert Binding(handler=handler, method="GET", path="/items") != Binding(
            handler=handler, method="PUT", path="/items"
        )


class TestBindingMatch:
    """Test Binding.match."""

    def test_exact_path(self):
        binding = Binding(handler=handler, method="GET", path="/items")

        assert binding.match("GET", "/items") == {}
        assert binding.match("GET", "/items/1") is None
        assert binding.match("GET", "/other") is None

    def test_method_must_match(self):
        binding = Binding(handler=handler, method="DELETE", path="/items")

        assert binding.match("DELETE", "/items") == {}
        assert binding.match("delete", "/items") == {}
        assert binding.match("GET", "/items") is None

    def test_path_params(self):
        binding = Binding(handler=handler, method="GET", path="/items/{id}")

        assert binding.match("GET", "/items/abc") == {"id": "abc"}
        assert binding.match("GET", "/items") is None
        assert binding.match("GET", "/items/abc/def") is None

    def test_path_param_convertors(self):
        binding = Binding(handler=handler, method="GET", path="/items/{id:int}")

        assert binding.match("GET", "/items/42") == {"id": 42}
        assert binding.match("GET", "/items/abc") is None

    def test_any_method_any_path(self):
        binding = Binding(handler=handler)

        assert binding.match("POST", "/anything/at/all") == {}

    def test_prefix(self):
        binding = Binding(handler=handler, path="/items", prefix=True)

        assert binding.match("GET", "/items") == {}
        assert binding.match("PUT", "/items/1") == {}
        assert binding.match("GET", "/items/1/parts") == {}
        assert binding.match("GET", "/itemsx") is None
        assert binding.match("GET", "/other") is None

    def test_prefix_with_params(self):
        binding = Binding(handler=handler, path="/shops/{shop}", prefix=True)

        assert binding.match("GET", "/shops/north/items") == {"shop": "north"}

    def test_prefix_with_trailing_slash(self):
        binding = Binding(handler=handler, path="/vegetables/", prefix=True)

        assert binding.match("GET", "/vegetables") == {}
        assert binding.match("GET", "/vegetables/7") == {}
        assert binding.match("GET", "/vegetablesx") is None
