import pytest

from openapi_to_graphql.errors import NameCollisionError
from openapi_to_graphql.generator.naming import (
    TYPE_NAMESPACE,
    NameResolver,
    camel_case,
    pascal_case,
    sanitize,
)


class TestSanitize:
    def test_valid_name_unchanged(self):
        assert sanitize("petName") == "petName"

    def test_invalid_characters_replaced(self):
        assert sanitize("pet-name") == "pet_name"
        assert sanitize("X-Request-ID") == "X_Request_ID"
        assert sanitize("a  b") == "a_b"

    def test_leading_digit(self):
        assert sanitize("1") == "_1"
        assert sanitize("2fa") == "_2fa"

    def test_lone_dash(self):
        assert sanitize("-") == "_"

    def test_double_underscore_prefix_is_reserved(self):
        assert sanitize("__typename") == "_typename"

    def test_empty_falls_back(self):
        assert sanitize("") == "unnamed"
        assert sanitize("", fallback="Type") == "Type"

    def test_case_preserved(self):
        assert sanitize("HTTPStatus") == "HTTPStatus"


class TestCaseHelpers:
    def test_pascal_case(self):
        assert pascal_case("pet-store items") == "PetStoreItems"
        assert pascal_case("petId") == "PetId"

    def test_camel_case(self):
        assert camel_case("pets id get") == "petsIdGet"
        assert camel_case("") == ""


class TestNameResolver:
    def test_first_assignment_keeps_name(self):
        names = NameResolver()
        assert names.resolve("Pet", TYPE_NAMESPACE) == "Pet"

    def test_collisions_get_increasing_suffixes(self):
        names = NameResolver()
        assert names.resolve("Status", TYPE_NAMESPACE) == "Status"
        assert names.resolve("Status", TYPE_NAMESPACE) == "Status2"
        assert names.resolve("Status", TYPE_NAMESPACE) == "Status3"

    def test_distinct_candidates_with_same_sanitized_form(self):
        names = NameResolver()
        assert names.resolve("pet-name", "Pet.fields") == "pet_name"
        assert names.resolve("pet_name", "Pet.fields") == "pet_name2"
        assert names.resolve("pet name", "Pet.fields") == "pet_name3"

    def test_suffix_skips_taken_names(self):
        names = NameResolver()
        names.resolve("Pet2", TYPE_NAMESPACE)
        names.resolve("Pet", TYPE_NAMESPACE)
        assert names.resolve("Pet", TYPE_NAMESPACE) == "Pet3"

    def test_namespaces_are_independent(self):
        names = NameResolver()
        assert names.resolve("id", "Pet.fields") == "id"
        assert names.resolve("id", "User.fields") == "id"
        assert names.resolve("id", TYPE_NAMESPACE) == "id"

    def test_reserved_names(self):
        names = NameResolver()
        names.reserve(TYPE_NAMESPACE, "Query", "String")
        assert names.is_taken("Query", TYPE_NAMESPACE)
        assert names.resolve("Query", TYPE_NAMESPACE) == "Query2"
        assert names.resolve("String", TYPE_NAMESPACE) == "String2"

    def test_error_policy(self):
        names = NameResolver(collision_policy="error")
        names.resolve("Pet", TYPE_NAMESPACE)
        with pytest.raises(NameCollisionError):
            names.resolve("Pet", TYPE_NAMESPACE)

    def test_suffixes_exhausted(self):
        names = NameResolver(max_suffix=3)
        for expected in ("a", "a2", "a3"):
            assert names.resolve("a", "ns") == expected
        with pytest.raises(NameCollisionError):
            names.resolve("a", "ns")

    def test_fresh_resolver_has_no_state(self):
        first = NameResolver()
        first.resolve("Pet", TYPE_NAMESPACE)
        second = NameResolver()
        assert second.resolve("Pet", TYPE_NAMESPACE) == "Pet"
