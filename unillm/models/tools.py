"""Function-calling and structured-output descriptors.

Schemas are passed through to vendors as-is. Nothing here validates JSON Schema
semantics (for example that every ``required`` name exists in ``properties``);
vendors report such problems in their own error responses.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ParameterProperty(BaseModel):
    """A single parameter of a function tool."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True, frozen=True)

    property_type: str = Field(alias="type")
    description: str
    items: "ParameterProperty | None" = None  # element type when property_type is "array"
    enum_list: list[str] | None = Field(default=None, alias="enum")


class ParametersSchema(BaseModel):
    """Parameters object of a function tool."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True, frozen=True)

    schema_type: str = Field(default="object", alias="type")
    properties: dict[str, ParameterProperty] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class FunctionTool(BaseModel):
    """Function definition exposed to the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: ParametersSchema = Field(default_factory=ParametersSchema)


class Tool(BaseModel):
    """A tool the model may call."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True, frozen=True)

    tool_type: str = Field(default="function", alias="type")
    function: FunctionTool

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire names, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StructuredOutputFormat(BaseModel):
    """Structured output constraint attached to chat requests.

    Follows OpenAI's ``response_format.json_schema`` object. Only ``name`` is
    required, so documents parsed from user input or files need at least a
    ``"name"`` key. ``schema`` holds arbitrary JSON and is forwarded unchanged.
    """

    name: str
    description: str | None = None
    schema_: Any | None = Field(default=None, alias="schema")
    strict: bool | None = None

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True, frozen=True)

    @property
    def schema(self) -> Any | None:  # type: ignore[override]
        return self.schema_

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire names, omitting unset optionals.

        Only top-level keys are dropped; nulls inside ``schema`` are kept.
        """
        data = self.model_dump(by_alias=True)
        return {key: value for key, value in data.items() if value is not None}


class FunctionCall(BaseModel):
    """Function invocation reported by the model.

    ``arguments`` is the raw JSON-encoded string from the vendor; callers parse it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: str


class ToolCall(BaseModel):
    """Tool call reported in a chat response."""

    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True, frozen=True)

    id: str
    call_type: str = Field(default="function", alias="type")
    function: FunctionCall
