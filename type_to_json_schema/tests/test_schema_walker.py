import unittest
from pathlib import Path
from unittest import TestCase

from type_to_json_schema.pipeline import (
    CollaboratorError,
    JsonSchemaDraft,
    NullableHandling,
    SchemaGenerationError,
    SchemaGenerator,
    SchemaGeneratorConfig,
    UnknownTypeError,
)
from type_to_json_schema.pipeline.type_model import TypeModelDocument, TypeRef

TEST_DATA = Path(__file__).parent / "test_data"

NULL_VARIANT = {"type": "null", "title": "Not included"}


class TestSchemaWalker(TestCase):
    """Test schema generation from the shared type model"""

    def setUp(self):
        self.model = TypeModelDocument.from_file(TEST_DATA / "type_model.json")

    def _generate(self, root, config=None, **kwargs):
        return SchemaGenerator(self.model, config or SchemaGeneratorConfig()).generate(root, **kwargs)

    def test_document_header(self):
        schema = self._generate("test.BoringClass")

        self.assertEqual(schema["$schema"], "http://json-schema.org/draft-04/schema#")
        self.assertEqual(schema["title"], "Boring Class")
        self.assertNotIn("description", schema)
        self.assertNotIn("definitions", schema)
        self.assertEqual(
            schema,
            {
                "$schema": "http://json-schema.org/draft-04/schema#",
                "title": "Boring Class",
                "type": "object",
                "additionalProperties": False,
                "properties": {"data": {"type": "string"}},
            },
        )

    def test_title_and_description(self):
        schema = self._generate(TypeRef("test.BoringClass"), title="My Title", description="Some description")
        self.assertEqual(schema["title"], "My Title")
        self.assertEqual(schema["description"], "Some description")

        schema = self._generate("test.BoringClass", title="")
        self.assertNotIn("title", schema)

    def test_type_level_description_overrides_callers(self):
        schema = self._generate("test.ManyTypes", description="From caller")
        self.assertEqual(schema["description"], "A bit of everything")

    def test_draft_urls(self):
        expected = {
            JsonSchemaDraft.DRAFT_04: "http://json-schema.org/draft-04/schema#",
            JsonSchemaDraft.DRAFT_06: "http://json-schema.org/draft-06/schema#",
            JsonSchemaDraft.DRAFT_07: "http://json-schema.org/draft-07/schema#",
            JsonSchemaDraft.DRAFT_2019_09: "https://json-schema.org/draft/2019-09/schema",
        }
        for draft, url in expected.items():
            schema = self._generate("test.BoringClass", SchemaGeneratorConfig(draft=draft))
            self.assertEqual(schema["$schema"], url)

    def test_unknown_properties_allowed(self):
        schema = self._generate("test.Forest", SchemaGeneratorConfig(fail_on_unknown_properties=False))
        self.assertTrue(schema["additionalProperties"])
        self.assertTrue(schema["definitions"]["TreeNode"]["additionalProperties"])

    def test_many_types(self):
        schema = self._generate("test.ManyTypes")

        self.assertEqual(schema["title"], "Many Types")
        self.assertEqual(
            schema["properties"],
            {
                "someString": {"type": "string", "default": "hello"},
                "someInt": {"type": "integer"},
                "someNumber": {"type": "number"},
                "color": {"type": "string", "enum": ["RED", "GREEN", "BLUE"]},
                "tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
                "scores": {"type": "object", "additionalProperties": {"type": "integer"}},
                "anything": {},
                "created": {"type": "string", "format": "date-time"},
                "birthday": {"type": "string", "format": "date", "description": "Day of birth"},
                "website": {"type": "string", "format": "uri", "examples": ["https://example.com"]},
                "maybeText": {"type": "string"},
            },
        )
        self.assertEqual(schema["required"], ["someInt"])
        self.assertNotIn("definitions", schema)

    def test_custom_type_to_format_mapping(self):
        config = SchemaGeneratorConfig(custom_type_to_format_mapping={"date-time": "datetime-local", "test.Color": "color"})
        properties = self._generate("test.ManyTypes", config)["properties"]

        self.assertEqual(properties["created"], {"type": "string", "format": "datetime-local"})
        self.assertEqual(properties["color"]["format"], "color")
        self.assertEqual(properties["birthday"]["format"], "date")

    def test_json_editor_wraps_optional_properties(self):
        model = TypeModelDocument.from_dict(
            {
                "types": {
                    "e.Holder": {
                        "properties": [
                            {"name": "child1", "type": "optional<e.Child>"},
                            {"name": "optionalList", "type": "optional<list<e.Child>>"},
                            {"name": "plain", "type": "string"},
                        ]
                    },
                    "e.Child": {"properties": [{"name": "value", "type": "string"}]},
                }
            }
        )
        properties = SchemaGenerator(model, SchemaGeneratorConfig.json_editor()).generate("e.Holder")["properties"]

        self.assertEqual(properties["child1"]["oneOf"], [NULL_VARIANT, {"$ref": "#/definitions/Child"}])
        self.assertEqual(properties["child1"]["title"], "Child 1")
        self.assertEqual(properties["child1"]["propertyOrder"], 1)
        self.assertEqual(properties["optionalList"]["oneOf"][0], NULL_VARIANT)
        self.assertEqual(properties["optionalList"]["oneOf"][1]["items"], {"$ref": "#/definitions/Child"})
        self.assertEqual(properties["optionalList"]["title"], "Optional List")
        self.assertEqual(properties["plain"], {"type": "string", "title": "Plain", "propertyOrder": 3})

        strict = SchemaGenerator(model).generate("e.Holder")["properties"]
        self.assertEqual(strict["child1"], {"$ref": "#/definitions/Child"})

    def test_nullable_mode(self):
        properties = self._generate("test.ManyTypes", SchemaGeneratorConfig.nullable())["properties"]

        self.assertEqual(properties["someString"], {"oneOf": [NULL_VARIANT, {"type": "string", "default": "hello"}]})
        self.assertEqual(properties["someInt"], {"type": "integer"})
        self.assertEqual(properties["maybeText"], {"oneOf": [NULL_VARIANT, {"type": "string"}]})
        self.assertEqual(properties["anything"], {"oneOf": [NULL_VARIANT, {}]})

    def test_nullable_mode_keeps_not_null_properties_unwrapped(self):
        schema = self._generate("test.Validated", SchemaGeneratorConfig(nullable_handling=NullableHandling.NULLABLE))
        properties = schema["properties"]

        self.assertEqual(properties["stringUsingNotNull"], {"type": "string"})
        self.assertEqual(properties["stringUsingSize"]["oneOf"][1], {"type": "string", "minLength": 1, "maxLength": 20})
        self.assertEqual(schema["required"], ["stringUsingNotNull", "stringUsingNotBlank", "intRange", "notEmptyList"])

    def test_optional_property_is_never_required(self):
        model = TypeModelDocument.from_dict(
            {"types": {"t.Holder": {"properties": [{"name": "count", "type": "optional<integer>", "required": True}]}}}
        )
        schema = SchemaGenerator(model, SchemaGeneratorConfig.nullable()).generate("t.Holder")

        self.assertEqual(schema["properties"]["count"], {"oneOf": [NULL_VARIANT, {"type": "integer"}]})
        self.assertNotIn("required", schema)

    def test_form_field_extensions(self):
        schema = self._generate("test.ManyTypes", SchemaGeneratorConfig.json_editor())
        properties = schema["properties"]

        self.assertEqual(properties["someString"]["title"], "Some String")
        self.assertEqual(properties["someString"]["propertyOrder"], 1)
        self.assertEqual(properties["maybeText"]["title"], "Maybe Text")
        self.assertEqual(properties["maybeText"]["propertyOrder"], 11)
        self.assertEqual(properties["tags"]["format"], "checkbox")
        self.assertTrue(properties["tags"]["uniqueItems"])
        self.assertEqual(properties["created"]["format"], "datetime")
        self.assertEqual(properties["birthday"]["format"], "date")

    def test_form_field_title_on_outer_node(self):
        config = SchemaGeneratorConfig(form_field_extensions=True, nullable_handling=NullableHandling.NULLABLE)
        properties = self._generate("test.ManyTypes", config)["properties"]

        self.assertEqual(properties["someNumber"]["title"], "Some Number")
        self.assertEqual(properties["someNumber"]["propertyOrder"], 3)
        self.assertEqual(properties["someNumber"]["oneOf"], [NULL_VARIANT, {"type": "number"}])

    def test_explicit_property_title(self):
        model = TypeModelDocument.from_dict(
            {"types": {"t.Titled": {"properties": [{"name": "firstName", "type": "string", "title": "Given name"}]}}}
        )
        for config in (SchemaGeneratorConfig(), SchemaGeneratorConfig.json_editor()):
            schema = SchemaGenerator(model, config).generate("t.Titled")
            self.assertEqual(schema["properties"]["firstName"]["title"], "Given name")

    def test_type_level_title(self):
        model = TypeModelDocument.from_dict(
            {"types": {"t.Titled": {"title": "Nice title", "properties": [{"name": "value", "type": "t.Other"}]}, "t.Other": {"title": "Other thing"}}}
        )
        schema = SchemaGenerator(model).generate("t.Titled")

        self.assertEqual(schema["title"], "Nice title")
        self.assertEqual(schema["definitions"]["Other"]["title"], "Other thing")


class TestRecursiveAndGenericTypes(TestCase):
    """Test definitions sharing, recursion and parameterized types"""

    def setUp(self):
        self.generator = SchemaGenerator(TypeModelDocument.from_file(TEST_DATA / "type_model.json"))

    def test_shared_recursive_definition(self):
        schema = self.generator.generate("test.Forest")

        self.assertEqual(schema["properties"]["first"], {"$ref": "#/definitions/TreeNode"})
        self.assertEqual(schema["properties"]["second"], {"$ref": "#/definitions/TreeNode"})
        self.assertEqual(
            schema["definitions"],
            {
                "TreeNode": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "name": {"type": "string"},
                        "children": {"type": "array", "items": {"$ref": "#/definitions/TreeNode"}},
                    },
                }
            },
        )

    def test_self_referencing_root(self):
        schema = self.generator.generate("test.TreeNode")

        self.assertEqual(schema["properties"]["children"]["items"], {"$ref": "#/definitions/TreeNode"})
        self.assertEqual(schema["definitions"]["TreeNode"]["properties"], schema["properties"])

    def test_generic_definitions(self):
        schema = self.generator.generate("test.GenericHolder")

        self.assertEqual(
            schema["properties"],
            {
                "stringThing": {"$ref": "#/definitions/GenericClass(string)"},
                "boringThing": {"$ref": "#/definitions/GenericClass(BoringClass)"},
                "twoThing": {"$ref": "#/definitions/GenericClassTwo(string,GenericClass(BoringClass))"},
            },
        )
        definitions = schema["definitions"]
        self.assertEqual(
            list(definitions),
            [
                "GenericClass(string)",
                "GenericClass(BoringClass)",
                "BoringClass",
                "GenericClassTwo(string,GenericClass(BoringClass))",
            ],
        )
        self.assertEqual(definitions["GenericClass(string)"]["properties"], {"data": {"type": "string"}})
        self.assertEqual(definitions["GenericClass(BoringClass)"]["properties"], {"data": {"$ref": "#/definitions/BoringClass"}})
        self.assertEqual(
            definitions["GenericClassTwo(string,GenericClass(BoringClass))"]["properties"],
            {"first": {"type": "string"}, "second": {"$ref": "#/definitions/GenericClass(BoringClass)"}},
        )

    def test_raw_generic_uses_any(self):
        schema = self.generator.generate("test.GenericClass")
        self.assertEqual(schema["properties"], {"data": {}})

    def test_container_root(self):
        schema = self.generator.generate("list<test.TreeNode>", title="Trees")

        self.assertEqual(schema["title"], "Trees")
        self.assertEqual(schema["type"], "array")
        self.assertEqual(schema["items"], {"$ref": "#/definitions/TreeNode"})
        self.assertIn("TreeNode", schema["definitions"])

    def test_name_collision(self):
        model = TypeModelDocument.from_dict(
            {
                "types": {
                    "shop.Item": {"properties": [{"name": "sku", "type": "string"}]},
                    "legacy.Item": {"properties": [{"name": "code", "type": "integer"}]},
                    "shop.Catalog": {
                        "properties": [
                            {"name": "current", "type": "shop.Item"},
                            {"name": "old", "type": "legacy.Item"},
                            {"name": "again", "type": "shop.Item"},
                        ]
                    },
                }
            }
        )
        schema = SchemaGenerator(model).generate("shop.Catalog")

        self.assertEqual(schema["properties"]["current"], {"$ref": "#/definitions/Item"})
        self.assertEqual(schema["properties"]["old"], {"$ref": "#/definitions/Item_1"})
        self.assertEqual(schema["properties"]["again"], {"$ref": "#/definitions/Item"})
        self.assertEqual(schema["definitions"]["Item_1"]["properties"], {"code": {"type": "integer"}})

    def test_each_generation_starts_fresh(self):
        first = self.generator.generate("test.Forest")
        second = self.generator.generate("test.Forest")

        self.assertEqual(first, second)
        self.assertIsNot(first["definitions"], second["definitions"])


class TestConstraintsAndInjections(TestCase):
    """Test constraint translation and injections inside generated schemas"""

    def setUp(self):
        self.model = TypeModelDocument.from_file(TEST_DATA / "type_model.json")

    def _generate(self, root, **config):
        return SchemaGenerator(self.model, SchemaGeneratorConfig.from_dict(config)).generate(root)

    def test_validated(self):
        schema = self._generate("test.Validated")

        self.assertEqual(
            schema["properties"],
            {
                "stringUsingNotNull": {"type": "string"},
                "stringUsingNotBlank": {"type": "string", "minLength": 1, "pattern": r"^.*\S+.*$"},
                "stringUsingSize": {"type": "string", "minLength": 1, "maxLength": 20},
                "stringUsingPatternList": {"type": "string", "pattern": "^(?=^_stringUsing.*)(?=.*PatternList$).*$"},
                "intRange": {"type": "integer", "minimum": 1, "maximum": 10},
                "price": {"type": "number", "minimum": 1.5, "maximum": 99.99},
                "email": {"type": "string", "format": "email"},
                "notEmptyList": {"type": "array", "items": {"type": "string"}, "minItems": 1},
                "sizedMap": {"type": "object", "additionalProperties": {"type": "string"}, "maxProperties": 3},
                "strictOnly": {"type": "string"},
            },
        )
        self.assertEqual(schema["required"], ["stringUsingNotNull", "stringUsingNotBlank", "intRange", "notEmptyList"])

    def test_validation_groups(self):
        schema = self._generate("test.Validated", active_validation_groups=["Strict"])
        self.assertEqual(schema["required"], ["intRange", "strictOnly"])
        self.assertEqual(schema["properties"]["stringUsingSize"], {"type": "string"})

        schema = self._generate("test.Validated", active_validation_groups=["Default", "Strict"])
        self.assertEqual(
            schema["required"],
            ["stringUsingNotNull", "stringUsingNotBlank", "intRange", "notEmptyList", "strictOnly"],
        )

    def test_injections(self):
        schema = self._generate("test.Injected", named_fragments={"colors": {"enum": ["red", "green"]}})

        self.assertEqual(schema["$comment"], "type level")
        self.assertEqual(
            schema["properties"],
            {
                "merged": {"type": "string", "pattern": "^[a-z]+$", "options": {"hidden": True}},
                "replaced": {"type": "string", "format": "color"},
                "pathOverrides": {
                    "type": "string",
                    "options": {"inputAttributes": {"placeholder": "type here"}, "hidden": False},
                    "maxLength": 8,
                },
                "fromSupplier": {"type": "string", "enum": ["red", "green"]},
                "groupedInjection": {"type": "string"},
            },
        )

    def test_grouped_injection(self):
        schema = self._generate(
            "test.Injected",
            named_fragments={"colors": {"enum": ["red"]}},
            active_validation_groups=["Default", "Admin"],
        )
        self.assertEqual(schema["properties"]["groupedInjection"], {"type": "string", "readOnly": True})

    def test_override_replaces_nullable_wrapper(self):
        schema = self._generate("test.Injected", named_fragments={"colors": {}}, nullable_handling="nullable")
        self.assertEqual(schema["properties"]["replaced"], {"type": "string", "format": "color"})
        self.assertEqual(schema["properties"]["merged"]["oneOf"][0], NULL_VARIANT)

    def test_missing_supplier_fails(self):
        with self.assertRaises(SchemaGenerationError):
            self._generate("test.Injected")

    def test_unknown_root_type(self):
        with self.assertRaises(UnknownTypeError) as cm:
            self._generate("test.Missing")
        self.assertEqual(cm.exception.type_name, "test.Missing")

    def test_unknown_property_type_propagates(self):
        model = TypeModelDocument.from_dict({"types": {"t.Broken": {"properties": [{"name": "x", "type": "t.Nope"}]}}})
        with self.assertRaises(CollaboratorError):
            SchemaGenerator(model).generate("t.Broken")


if __name__ == "__main__":
    unittest.main()
