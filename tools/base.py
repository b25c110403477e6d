"""Tool definitions bound to a platform client.

A ToolDef pairs a Pydantic input schema with an async executor. The schema
produces the JSON schema advertised to the model and validates the
arguments the model sends back before anything touches the platform.
"""

from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from client.types import LLMToolDeclaration, LLMToolParameters

ToolExecutor = Callable[[Any], Awaitable[Any]]


class ToolArgumentsError(ValueError):
    """Arguments supplied for a tool do not match its input schema."""

    def __init__(self, tool_name: str, validation_error: ValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
            for err in validation_error.errors()
        )
        super().__init__(f"Invalid arguments for tool '{tool_name}': {problems}")
        self.tool_name = tool_name


class ToolDef:
    """A named platform operation the model may invoke."""

    def __init__(
        self,
        name: str,
        description: str,
        input_schema: type[BaseModel],
        execute: ToolExecutor,
        requires_approval: bool = False,
    ):
        self.name = name
        self.description = description
        self.input_schema = input_schema
        self.execute = execute
        self.requires_approval = requires_approval

    def get_function_schema(self) -> dict[str, Any]:
        """Generate function schema from input schema."""
        schema = self.input_schema.model_json_schema()

        # Remove title if present (not needed for function calling)
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)

        return schema

    @property
    def parameters(self) -> LLMToolParameters:
        schema = self.get_function_schema()
        return LLMToolParameters(
            properties=schema.get("properties", {}),
            required=schema.get("required", []),
        )

    def get_declaration(self) -> LLMToolDeclaration:
        return LLMToolDeclaration(
            name=self.name, description=self.description, parameters=self.parameters
        )

    def validate(self, args: dict[str, Any]) -> BaseModel:
        try:
            return self.input_schema(**args)
        except ValidationError as e:
            raise ToolArgumentsError(self.name, e) from e

    async def run(self, args: dict[str, Any]) -> Any:
        """Validate the arguments and execute against the platform."""
        return await self.execute(self.validate(args))

    def __repr__(self) -> str:
        return f"ToolDef(name={self.name!r}, requires_approval={self.requires_approval})"
