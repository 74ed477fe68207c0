import pytest
from graphql import (
    GraphQLBoolean,
    GraphQLEnumType,
    GraphQLFloat,
    GraphQLInputObjectType,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLString,
    GraphQLUnionType,
)

from openapi_to_graphql.errors import CycleError, UnsupportedSchemaConstructError
from openapi_to_graphql.generator.naming import NameResolver
from openapi_to_graphql.generator.scalars import GraphQLBigInt, GraphQLByte, GraphQLDateTime, GraphQLJSON
from openapi_to_graphql.generator.type_mapper import INPUT, OUTPUT, TypeMapper
from openapi_to_graphql.options import TranslationOptions
from openapi_to_graphql.parser.base import (
    AnySchema,
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    ScalarSchema,
    UnionSchema,
)


def _mapper(**options) -> TypeMapper:
    return TypeMapper(NameResolver(), TranslationOptions(**options))


def _pet() -> ObjectSchema:
    return ObjectSchema(
        name="Pet",
        properties={"id": ScalarSchema(kind="integer"), "name": ScalarSchema(kind="string")},
        required=["id"],
    )


class TestScalars:
    @pytest.mark.parametrize(
        "schema, expected",
        [
            (ScalarSchema(kind="string"), GraphQLString),
            (ScalarSchema(kind="integer"), GraphQLInt),
            (ScalarSchema(kind="number"), GraphQLFloat),
            (ScalarSchema(kind="boolean"), GraphQLBoolean),
            (ScalarSchema(kind="string", format="date-time"), GraphQLDateTime),
            (ScalarSchema(kind="string", format="byte"), GraphQLByte),
            (ScalarSchema(kind="string", format="binary"), GraphQLString),
            (ScalarSchema(kind="integer", format="int64"), GraphQLBigInt),
            (ScalarSchema(kind="integer", maximum=2**40), GraphQLBigInt),
            (ScalarSchema(kind="integer", minimum=0, maximum=100), GraphQLInt),
        ],
    )
    def test_primitive_mapping(self, schema, expected):
        assert _mapper().map(schema, OUTPUT, "X") is expected

    def test_custom_scalars_disabled(self):
        mapper = _mapper(custom_scalars=False)
        assert mapper.map(ScalarSchema(kind="string", format="date-time"), OUTPUT, "X") is GraphQLString
        assert mapper.map(ScalarSchema(kind="integer", format="int64"), OUTPUT, "X") is GraphQLString

    def test_custom_scalars_are_registered(self):
        mapper = _mapper()
        mapper.map(ScalarSchema(kind="string", format="date-time"), OUTPUT, "X")
        assert mapper.types["DateTime"] is GraphQLDateTime
        assert "String" not in mapper.types

    def test_unknown_kind(self):
        with pytest.raises(UnsupportedSchemaConstructError):
            _mapper().map(ScalarSchema(kind="decimal"), OUTPUT, "X")

    def test_any_schema_is_json(self):
        assert _mapper().map(AnySchema(), OUTPUT, "X") is GraphQLJSON


class TestObjects:
    def test_required_fields_are_non_null(self):
        mapper = _mapper()
        pet = mapper.map(_pet(), OUTPUT, "Ignored")
        mapper.finalize()
        assert isinstance(pet, GraphQLObjectType)
        assert pet.name == "Pet"
        assert str(pet.fields["id"].type) == "Int!"
        assert str(pet.fields["name"].type) == "String"

    def test_mapping_twice_returns_same_type(self):
        mapper = _mapper()
        schema = _pet()
        assert mapper.map(schema, OUTPUT, "A") is mapper.map(schema, OUTPUT, "B")

    def test_input_and_output_are_distinct(self):
        mapper = _mapper()
        schema = _pet()
        output = mapper.map(schema, OUTPUT, "X")
        input_ = mapper.map(schema, INPUT, "X")
        mapper.finalize()
        assert isinstance(input_, GraphQLInputObjectType)
        assert input_.name == "PetInput"
        assert output is not input_
        assert str(input_.fields["id"].type) == "Int!"

    def test_distinct_schemas_with_same_name(self):
        mapper = _mapper()
        first = mapper.map(ObjectSchema(name="Status", properties={"a": ScalarSchema(kind="string")}), OUTPUT, "X")
        second = mapper.map(ObjectSchema(name="Status", properties={"b": ScalarSchema(kind="string")}), OUTPUT, "X")
        assert (first.name, second.name) == ("Status", "Status2")

    def test_anonymous_object_named_from_hint(self):
        mapper = _mapper()
        owner = ObjectSchema(properties={"name": ScalarSchema(kind="string")})
        pet = ObjectSchema(name="Pet", properties={"owner": owner})
        pet_type = mapper.map(pet, OUTPUT, "X")
        mapper.finalize()
        assert pet_type.fields["owner"].type.name == "PetOwner"

    def test_renamed_properties_keep_source_name(self):
        mapper = _mapper()
        schema = ObjectSchema(name="Pet", properties={"pet-name": ScalarSchema(kind="string")})
        output = mapper.map(schema, OUTPUT, "X")
        input_ = mapper.map(schema, INPUT, "X")
        mapper.finalize()
        assert output.fields["pet_name"].extensions["source_name"] == "pet-name"
        assert input_.fields["pet_name"].out_name == "pet-name"

    def test_free_form_object_is_json(self):
        assert _mapper().map(ObjectSchema(additional_properties=True), OUTPUT, "X") is GraphQLJSON

    def test_additional_properties_field(self):
        mapper = _mapper()
        schema = ObjectSchema(name="Meta", properties={"id": ScalarSchema(kind="string")}, additional_properties=True)
        meta = mapper.map(schema, OUTPUT, "X")
        mapper.finalize()
        assert list(meta.fields) == ["id", "additionalProperties"]
        assert meta.fields["additionalProperties"].type is GraphQLJSON

    def test_nullable_required_property(self):
        mapper = _mapper()
        schema = ObjectSchema(name="Pet", properties={"tag": ScalarSchema(kind="string", nullable=True)}, required=["tag"])
        pet = mapper.map(schema, OUTPUT, "X")
        mapper.finalize()
        assert pet.fields["tag"].type is GraphQLString

    def test_self_reference_through_array(self):
        mapper = _mapper()
        pet = ObjectSchema(name="Pet", properties={"name": ScalarSchema(kind="string")})
        pet.properties["friends"] = ArraySchema(items=pet)
        pet_type = mapper.map(pet, OUTPUT, "X")
        mapper.finalize()
        friends = pet_type.fields["friends"].type
        assert isinstance(friends, GraphQLList)
        assert friends.of_type is pet_type
        assert str(friends) == "[Pet]"

    def test_mutual_recursion(self):
        mapper = _mapper()
        author = ObjectSchema(name="Author")
        book = ObjectSchema(name="Book", properties={"author": author})
        author.properties["books"] = ArraySchema(items=book)
        author_type = mapper.map(author, OUTPUT, "X")
        mapper.finalize()
        book_type = mapper.types["Book"]
        assert book_type.fields["author"].type is author_type
        assert author_type.fields["books"].type.of_type is book_type


class TestArrays:
    def test_list_of_scalars(self):
        list_type = _mapper().map(ArraySchema(items=ScalarSchema(kind="string")), OUTPUT, "X")
        assert str(list_type) == "[String]"

    def test_required_array_is_non_null_list(self):
        field_type = _mapper().field_type(ArraySchema(items=ScalarSchema(kind="integer")), OUTPUT, "X", True)
        assert str(field_type) == "[Int]!"

    def test_missing_items(self):
        assert str(_mapper().map(ArraySchema(), OUTPUT, "X")) == "[JSON]"

    def test_array_containing_itself(self):
        loop = ArraySchema(name="Loop")
        loop.items = loop
        with pytest.raises(CycleError):
            _mapper().map(loop, OUTPUT, "X")

    def test_anonymous_item_object_named_from_hint(self):
        mapper = _mapper()
        items = ObjectSchema(properties={"x": ScalarSchema(kind="string")})
        list_type = mapper.map(ArraySchema(items=items), OUTPUT, "PetsGetResponse")
        assert list_type.of_type.name == "PetsGetResponseItem"


class TestEnums:
    def test_values_sanitized(self):
        mapper = _mapper()
        enum_type = mapper.map(EnumSchema(name="Weird", values=["1", "-", "a-b", "true", None]), OUTPUT, "X")
        assert isinstance(enum_type, GraphQLEnumType)
        assert list(enum_type.values) == ["_1", "_", "a_b", "true_"]
        assert enum_type.values["a_b"].value == "a-b"

    def test_shared_between_input_and_output(self):
        mapper = _mapper()
        schema = EnumSchema(name="Status", values=["on", "off"])
        assert mapper.map(schema, OUTPUT, "X") is mapper.map(schema, INPUT, "Y")

    def test_colliding_values(self):
        enum_type = _mapper().map(EnumSchema(name="E", values=["a-b", "a_b"]), OUTPUT, "X")
        assert list(enum_type.values) == ["a_b", "a_b2"]

    def test_integer_values(self):
        enum_type = _mapper().map(EnumSchema(name="Code", values=[200, 404]), OUTPUT, "X")
        assert enum_type.values["_404"].value == 404

    def test_no_values(self):
        with pytest.raises(UnsupportedSchemaConstructError):
            _mapper().map(EnumSchema(name="Empty", values=[None]), OUTPUT, "X")


class TestUnions:
    def _animals(self):
        cat = ObjectSchema(name="Cat", properties={"meows": ScalarSchema(kind="boolean")})
        dog = ObjectSchema(name="Dog", properties={"barks": ScalarSchema(kind="boolean")})
        return cat, dog

    def test_union_of_objects(self):
        mapper = _mapper()
        cat, dog = self._animals()
        union = mapper.map(UnionSchema(name="Animal", members=[cat, dog]), OUTPUT, "X")
        assert isinstance(union, GraphQLUnionType)
        assert union.name == "Animal"
        assert [t.name for t in union.types] == ["Cat", "Dog"]

    def test_union_with_scalar_member_falls_back(self):
        cat, _ = self._animals()
        schema = UnionSchema(name="CatOrName", members=[cat, ScalarSchema(kind="string")])
        assert _mapper().map(schema, OUTPUT, "X") is GraphQLJSON

    def test_union_in_input_falls_back(self):
        cat, dog = self._animals()
        assert _mapper().map(UnionSchema(name="Animal", members=[cat, dog]), INPUT, "X") is GraphQLJSON

    def test_single_member_union(self):
        mapper = _mapper()
        cat, _ = self._animals()
        assert mapper.map(UnionSchema(members=[cat]), OUTPUT, "X").name == "Cat"

    def test_union_without_members_falls_back(self):
        mapper = _mapper()
        assert mapper.map(UnionSchema(name="Nothing", nullable=True), OUTPUT, "X") is GraphQLJSON
        assert mapper.field_type(UnionSchema(nullable=True), OUTPUT, "Y", True) is GraphQLJSON

    def test_nested_unions_are_flattened(self):
        mapper = _mapper()
        cat, dog = self._animals()
        bird = ObjectSchema(name="Bird", properties={"sings": ScalarSchema(kind="boolean")})
        pets = UnionSchema(name="Pets", members=[cat, dog])
        union = mapper.map(UnionSchema(name="Animal", members=[pets, bird, cat]), OUTPUT, "X")
        assert [t.name for t in union.types] == ["Cat", "Dog", "Bird"]

    def test_union_containing_itself(self):
        cat, _ = self._animals()
        union = UnionSchema(name="Loop", members=[cat])
        union.members.append(union)
        with pytest.raises(CycleError):
            _mapper().map(union, OUTPUT, "X")

    def test_union_referenced_from_member(self):
        mapper = _mapper()
        cat, dog = self._animals()
        animal = UnionSchema(name="Animal", members=[cat, dog])
        cat.properties["enemy"] = animal
        union = mapper.map(animal, OUTPUT, "X")
        mapper.finalize()
        assert mapper.types["Cat"].fields["enemy"].type is union


class TestFieldType:
    def test_required_wraps_non_null(self):
        field_type = _mapper().field_type(ScalarSchema(kind="string"), OUTPUT, "X", True)
        assert isinstance(field_type, GraphQLNonNull)

    def test_optional_stays_nullable(self):
        assert _mapper().field_type(ScalarSchema(kind="string"), OUTPUT, "X", False) is GraphQLString
