"""OpenAPI / Swagger document loader.

Parses OpenAPI 3.x and Swagger 2.0 documents into the document model,
resolving every local $ref on the way. A schema node reached through several
references becomes a single SchemaDefinition object.
"""

import logging
from pathlib import Path

from openapi_to_graphql.errors import CycleError, DocumentLoadError, UnsupportedSchemaConstructError
from openapi_to_graphql.parser.base import (
    PRIMITIVE_KINDS,
    AnySchema,
    ArraySchema,
    EnumSchema,
    ObjectSchema,
    OpenApiDocument,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    ScalarSchema,
    SchemaDefinition,
    UnionSchema,
)
from openapi_to_graphql.parser.detect import detect_version, read_document

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

# Swagger 2.0 non-body parameters carry their schema inline
PARAMETER_SCHEMA_KEYS = ("type", "format", "items", "enum", "minimum", "maximum", "x-nullable")

# Keys that make an allOf member more than an annotation
STRUCTURAL_KEYS = ("$ref", "type", "properties", "additionalProperties", "items", "enum", "oneOf", "anyOf", "allOf")


def load_document(file_path: Path) -> OpenApiDocument:
    """Parse an OpenAPI/Swagger file into an OpenApiDocument."""
    return build_document(read_document(file_path))


def build_document(data: dict) -> OpenApiDocument:
    """Convert an already parsed OpenAPI/Swagger mapping into an OpenApiDocument."""
    return _DocumentBuilder(data).build()


class _DocumentBuilder:
    def __init__(self, data: dict):
        self.data = data
        self.version = detect_version(data)
        self._schemas: dict[int, SchemaDefinition] = {}  # id(source node) -> converted schema
        self._converting: set[int] = set()
        self._merges: dict[int, tuple[ObjectSchema, list[SchemaDefinition]]] = {}
        self._merging: set[int] = set()
        self._synthetic: list[dict] = []  # keeps generated nodes alive while their ids are cache keys
        self._component_names = {
            id(node): str(name) for name, node in self._component_schemas().items() if isinstance(node, dict)
        }

    def build(self) -> OpenApiDocument:
        info = self.data.get("info") or {}
        schemas = {str(name): self.schema(node) for name, node in self._component_schemas().items()}

        paths = {}
        for path, item in (self.data.get("paths") or {}).items():
            paths[str(path)] = self._path_item(str(path), self._deref(item) or {})

        self._finish_merges()
        return OpenApiDocument(
            title=str(info.get("title", "")),
            version=str(info.get("version", "")),
            spec_version=self.version,
            endpoint=self._endpoint(),
            paths=paths,
            schemas=schemas,
        )

    # -- references -----------------------------------------------------------

    def _pointer(self, ref: str):
        if not ref.startswith("#"):
            raise DocumentLoadError(f"External $ref is not supported: {ref}")
        node = self.data
        for part in ref[1:].split("/")[1:]:
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                raise DocumentLoadError(f"Unresolvable $ref: {ref}")
        return node

    def _deref(self, node):
        """Follow a chain of $ref pointers to the node it ends on."""
        seen: list[str] = []
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen:
                raise CycleError(f"$ref loop: {' -> '.join(seen + [ref])}")
            seen.append(ref)
            node = self._pointer(ref)
        return node

    def _component_schemas(self) -> dict:
        if self.version == "swagger2":
            return self.data.get("definitions") or {}
        return (self.data.get("components") or {}).get("schemas") or {}

    # -- schemas --------------------------------------------------------------

    def schema(self, node) -> SchemaDefinition:
        """Convert a schema node, returning the cached object for nodes seen before."""
        if node is True:
            return AnySchema()
        node = self._deref(node)
        if not isinstance(node, dict):
            raise UnsupportedSchemaConstructError(f"Schema must be a mapping, got {node!r}")

        key = id(node)
        if key in self._schemas:
            return self._schemas[key]
        if key in self._converting:
            raise CycleError(f"Schema {self._label(node)} refers to itself through allOf")

        self._converting.add(key)
        try:
            return self._convert(node)
        finally:
            self._converting.discard(key)

    def _synthetic_schema(self, node: dict) -> SchemaDefinition:
        self._synthetic.append(node)
        return self.schema(node)

    def _optional_schema(self, node) -> SchemaDefinition:
        """Convert `node`, or an empty schema (any value) when it is missing."""
        if node is None:
            return self._synthetic_schema({})
        return self.schema(node)

    def _register(self, node: dict, schema: SchemaDefinition) -> SchemaDefinition:
        self._schemas[id(node)] = schema
        return schema

    def _label(self, node: dict) -> str:
        return node.get("title") or self._component_names.get(id(node)) or "<inline>"

    def _convert(self, node: dict) -> SchemaDefinition:
        schema_type, type_nullable = _normalize_type(node.get("type"))
        common = {
            "name": node.get("title") or self._component_names.get(id(node)),
            "description": node.get("description") or "",
            "nullable": type_nullable or bool(node.get("nullable") or node.get("x-nullable")),
        }
        has_union = "oneOf" in node or "anyOf" in node

        if has_union and "allOf" in node:
            raise UnsupportedSchemaConstructError(
                f"Schema {self._label(node)} combines oneOf/anyOf with allOf"
            )
        if has_union and "properties" in node:
            raise UnsupportedSchemaConstructError(
                f"Schema {self._label(node)} combines oneOf/anyOf with properties"
            )

        if "allOf" in node:
            return self._all_of(node, common)
        if has_union:
            return self._union(node, common)
        if "enum" in node:
            values = node["enum"]
            if not isinstance(values, list):
                raise UnsupportedSchemaConstructError(f"Schema {self._label(node)} has a non-list enum")
            return self._register(node, EnumSchema(values=list(values), **common))
        if isinstance(schema_type, list):
            logger.debug("Schema %s allows several types %s, treating it as any value", self._label(node), schema_type)
            return self._register(node, AnySchema(**common))
        if schema_type == "object" or "properties" in node or "additionalProperties" in node:
            obj = self._register(node, ObjectSchema(**common))
            self._fill_object(obj, node)
            return obj
        if schema_type == "array" or "items" in node:
            array = self._register(node, ArraySchema(**common))
            if "items" in node:
                array.items = self.schema(node["items"])
            return array
        if schema_type in PRIMITIVE_KINDS:
            return self._register(
                node,
                ScalarSchema(
                    kind=schema_type,
                    format=node.get("format"),
                    minimum=node.get("minimum"),
                    maximum=node.get("maximum"),
                    **common,
                ),
            )
        if schema_type == "file":
            return self._register(node, ScalarSchema(kind="string", format="binary", **common))
        if schema_type is None:
            return self._register(node, AnySchema(**common))
        raise UnsupportedSchemaConstructError(f"Schema {self._label(node)} has unknown type {schema_type!r}")

    def _fill_object(self, obj: ObjectSchema, node: dict) -> None:
        for prop_name, prop_node in (node.get("properties") or {}).items():
            obj.properties[str(prop_name)] = self.schema(prop_node)
        required = node.get("required")
        if isinstance(required, list):
            obj.required.extend(str(r) for r in required if str(r) not in obj.required)
        additional = node.get("additionalProperties", False)
        if additional is True or isinstance(additional, dict):
            obj.additional_properties = True

    def _union(self, node: dict, common: dict) -> SchemaDefinition:
        keyword = "oneOf" if "oneOf" in node else "anyOf"
        members = node[keyword]
        if not isinstance(members, list) or not members:
            raise UnsupportedSchemaConstructError(f"Schema {self._label(node)} has an empty {keyword}")

        union = self._register(node, UnionSchema(**common))
        for member_node in members:
            target = self._deref(member_node)
            if isinstance(target, dict) and target.get("type") == "null":
                union.nullable = True
                continue
            union.members.append(self.schema(member_node))
        return union

    def _all_of(self, node: dict, common: dict) -> SchemaDefinition:
        members = node["allOf"]
        if not isinstance(members, list) or not members:
            raise UnsupportedSchemaConstructError(f"Schema {self._label(node)} has an empty allOf")

        substantive = [m for m in members if any(k in (self._deref(m) or {}) for k in STRUCTURAL_KEYS)]
        if len(substantive) == 1 and "properties" not in node:
            # allOf: [{$ref: X}] plus annotations is an alias of X
            return self._register(node, self.schema(substantive[0]))

        obj = self._register(node, ObjectSchema(**common))
        parts = [self.schema(m) for m in substantive]
        own = ObjectSchema()
        self._fill_object(own, node)
        parts.append(own)
        self._merges[id(obj)] = (obj, parts)
        return obj

    def _finish_merges(self) -> None:
        for key in list(self._merges):
            self._merge(key)

    def _merge(self, key: int) -> None:
        if key not in self._merges:
            return
        obj, parts = self._merges[key]
        if key in self._merging:
            raise CycleError(f"Schema {obj.name or '<inline>'} includes itself through allOf")

        self._merging.add(key)
        for part in parts:
            if id(part) in self._merges:
                self._merge(id(part))
            if isinstance(part, ObjectSchema):
                obj.properties.update(part.properties)
                obj.required.extend(r for r in part.required if r not in obj.required)
                obj.additional_properties = obj.additional_properties or part.additional_properties
                obj.description = obj.description or part.description
            elif not isinstance(part, AnySchema):
                raise UnsupportedSchemaConstructError(
                    f"Schema {obj.name or '<inline>'} merges a non-object {type(part).__name__} through allOf"
                )
        self._merging.discard(key)
        del self._merges[key]

    # -- operations -----------------------------------------------------------

    def _path_item(self, path: str, item: dict) -> PathItem:
        shared = item.get("parameters") or []
        operations = {}
        for method, raw in item.items():
            if str(method).lower() not in HTTP_METHODS or not isinstance(raw, dict):
                continue
            operations[method.upper()] = self._operation(path, method.upper(), raw, shared)
        return PathItem(path=path, operations=operations)

    def _operation(self, path: str, method: str, raw: dict, shared: list) -> Operation:
        merged: dict[tuple, dict] = {}
        for param in [*shared, *(raw.get("parameters") or [])]:
            param = self._deref(param)
            if not isinstance(param, dict) or "name" not in param:
                raise DocumentLoadError(f"{method} {path}: parameter without a name: {param!r}")
            merged[(param["name"], param.get("in"))] = param

        parameters = []
        body = None
        form_fields = []
        for param in merged.values():
            location = param.get("in", "query")
            if location == "body":
                body = RequestBody(
                    schema=self._optional_schema(param.get("schema")),
                    required=bool(param.get("required")),
                    content_type=self._consumes(raw, prefer_form=False),
                    description=param.get("description") or "",
                )
            elif location == "formData":
                form_fields.append(param)
            else:
                parameters.append(
                    Parameter(
                        name=str(param["name"]),
                        location=location,
                        required=location == "path" or bool(param.get("required")),
                        schema=self._parameter_schema(param),
                        description=param.get("description") or "",
                        deprecated=bool(param.get("deprecated")),
                    )
                )

        if form_fields:
            body = RequestBody(
                schema=self._synthetic_schema({
                    "type": "object",
                    "properties": {str(p["name"]): self._parameter_node(p) for p in form_fields},
                    "required": [str(p["name"]) for p in form_fields if p.get("required")],
                }),
                required=any(p.get("required") for p in form_fields),
                content_type=self._consumes(raw, prefer_form=True),
            )
        elif self.version == "openapi3":
            body = self._request_body(raw.get("requestBody"))

        return Operation(
            method=method,
            path=path,
            operation_id=raw.get("operationId"),
            summary=raw.get("summary") or "",
            description=raw.get("description") or "",
            deprecated=bool(raw.get("deprecated")),
            tags=tuple(raw.get("tags") or ()),
            parameters=tuple(parameters),
            request_body=body,
            responses=self._responses(raw),
        )

    def _parameter_schema(self, param: dict) -> SchemaDefinition:
        if "schema" in param:
            return self.schema(param["schema"])
        if "content" in param:
            _, media = _pick_media(param["content"] or {})
            return self._optional_schema((media or {}).get("schema"))
        return self._synthetic_schema(self._parameter_node(param))

    def _parameter_node(self, param: dict) -> dict:
        node = {key: param[key] for key in PARAMETER_SCHEMA_KEYS if key in param}
        node.setdefault("type", "string")
        self._synthetic.append(node)
        return node

    def _request_body(self, raw) -> RequestBody | None:
        if not raw:
            return None
        body = self._deref(raw)
        content_type, media = _pick_media(body.get("content") or {})
        if media is None:
            return None
        return RequestBody(
            schema=self._optional_schema(media.get("schema")),
            required=bool(body.get("required")),
            content_type=content_type,
            description=body.get("description") or "",
        )

    def _responses(self, raw: dict) -> dict[str, Response]:
        result = {}
        for status, response in (raw.get("responses") or {}).items():
            response = self._deref(response) or {}
            status = str(status)
            schema = None
            content_type = None
            if self.version == "swagger2":
                if response.get("schema") is not None:
                    schema = self.schema(response["schema"])
                    content_type = self._produces(raw)
            else:
                content_type, media = _pick_media(response.get("content") or {})
                if media is not None:
                    schema = self._optional_schema(media.get("schema"))
            result[status] = Response(
                status=status,
                description=response.get("description") or "",
                schema=schema,
                content_type=content_type,
            )
        return result

    def _consumes(self, raw: dict, prefer_form: bool) -> str:
        consumes = raw.get("consumes") or self.data.get("consumes") or []
        if prefer_form:
            for content_type in FORM_CONTENT_TYPES:
                if content_type in consumes:
                    return content_type
            return FORM_CONTENT_TYPES[0]
        return _pick_content_type(consumes) or JSON_CONTENT_TYPE

    def _produces(self, raw: dict) -> str:
        produces = raw.get("produces") or self.data.get("produces") or []
        return _pick_content_type(produces) or JSON_CONTENT_TYPE

    def _endpoint(self) -> str | None:
        if self.version == "swagger2":
            host = self.data.get("host")
            if not host:
                return None
            scheme = (self.data.get("schemes") or ["https"])[0]
            return f"{scheme}://{host}{self.data.get('basePath', '')}"

        servers = self.data.get("servers") or []
        if not servers or not isinstance(servers[0], dict) or not servers[0].get("url"):
            return None
        url = str(servers[0]["url"])
        for name, variable in (servers[0].get("variables") or {}).items():
            url = url.replace("{" + name + "}", str((variable or {}).get("default", "")))
        return url


def _normalize_type(value) -> tuple:
    """Split an OpenAPI `type` into (type or list of types, allows null)."""
    if value is None:
        return None, False
    types = value if isinstance(value, list) else [value]
    non_null = [t for t in types if t != "null"]
    nullable = len(non_null) < len(types)
    if not non_null:
        return None, nullable
    if len(non_null) == 1:
        return non_null[0], nullable
    return non_null, nullable


def _pick_content_type(content_types) -> str | None:
    """Choose JSON first, then any +json type, then form types, then whatever comes first."""
    content_types = list(content_types)
    if not content_types:
        return None
    for content_type in content_types:
        if content_type.split(";")[0].strip() == JSON_CONTENT_TYPE:
            return content_type
    for content_type in content_types:
        if content_type.split(";")[0].strip().endswith("+json"):
            return content_type
    for content_type in FORM_CONTENT_TYPES:
        if content_type in content_types:
            return content_type
    return content_types[0]


def _pick_media(content: dict) -> tuple[str | None, dict | None]:
    content_type = _pick_content_type(content)
    if content_type is None:
        return None, None
    return content_type, content[content_type] or {}
