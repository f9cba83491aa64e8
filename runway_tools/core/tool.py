import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Type, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from runway_tools.core.errors import InvalidParameterError, ToolError, ToolNotFoundError
from runway_tools.core.logger import Logger
from runway_tools.core.message import FAILURE_FIELDS, Message, failure_message

_SIMPLE_TYPES = {
    "Any": object,
    "str": str,
    "int": int,
    "float": (int, float),
    "bool": bool,
}

_OPEN_FUNCTION_TYPES = {
    "Any": "object",
    "str": "string",
    "int": "integer",
    "float": "number",
    "bool": "boolean",
}


class Param(BaseModel):
    """Param is used to describe the specification of a parameter for a tool.

    Besides the name and type, a param can declare the constraints that are checked
    before the tool runs: an enumeration, numeric bounds (rejected, or clamped when
    `clamp` is set), list length bounds and a pydantic model every list item must
    satisfy.
    """

    name: str = Field(description="The name of the parameter.")
    type: str = Field(
        description="""The type of the parameter:
        str, int, float, bool, Any, Dict[KeyType, ValueType], List[ElementType].
        """
    )
    required: bool = Field(default=True, description="Whether the parameter is required.")
    description: str = Field(description="A description of the parameter.")
    example: str = Field(default="", description="An example value for the parameter.")
    enum: Optional[List[Any]] = Field(default=None, description="The allowed values of the parameter.")
    default: Any = Field(default=None, description="The value used when the parameter is not provided.")
    minimum: Optional[Union[int, float]] = Field(default=None, description="The inclusive lower bound.")
    maximum: Optional[Union[int, float]] = Field(default=None, description="The inclusive upper bound.")
    clamp: bool = Field(default=False, description="Clamp out of range numbers instead of rejecting them.")
    min_items: Optional[int] = Field(default=None, description="The minimum length of a list parameter.")
    max_items: Optional[int] = Field(default=None, description="The maximum length of a list parameter.")
    item_model: Optional[Type[BaseModel]] = Field(default=None, description="The model of each list item.")
    item_label: str = Field(default="Item", description="How list items are named in error messages.")

    @property
    def is_list(self) -> bool:
        return self.type.startswith("List[")

    def to_open_function_format(self) -> Dict[str, Dict[str, Any]]:
        """Convert the parameter to the Open Function format."""
        if self.is_list:
            type_str = "array"
        elif self.type.startswith("Dict["):
            type_str = "object"
        else:
            type_str = _OPEN_FUNCTION_TYPES[self.type]
        property_dict: Dict[str, Any] = {
            "type": type_str,
            "description": self.description,
        }
        if self.example:
            property_dict["example"] = str(self.example)
        if self.enum is not None:
            property_dict["enum"] = list(self.enum)
        if self.default is not None:
            property_dict["default"] = self.default
        if self.minimum is not None:
            property_dict["minimum"] = self.minimum
        if self.maximum is not None:
            property_dict["maximum"] = self.maximum
        if self.item_model is not None:
            property_dict["items"] = _item_schema(self.item_model)
        if self.min_items is not None:
            property_dict["minItems"] = self.min_items
        if self.max_items is not None:
            property_dict["maxItems"] = self.max_items

        return {self.name: property_dict}

    def to_json_obj(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "description": self.description,
            "example": self.example,
        }

    def __str__(self) -> str:
        return json.dumps(self.to_json_obj(), indent=4)

    @field_validator("type")
    def check_type(cls, v: str) -> str:
        dict_type_regex = (
            r"^Dict\[(\w+|Dict\[\w+, \w+\]|List\[[\w\[\]]+\]), (\w+|Dict\[\w+, \w+\]|List\[[\w\[\]]+\])\]$"
        )
        list_type_regex = r"^List\[(\w+|Dict\[\w+, \w+\]|List\[[\w\[\]]+\])\]$"

        if v in _SIMPLE_TYPES or re.match(dict_type_regex, v) or re.match(list_type_regex, v):
            return v

        raise ValueError(
            f"type must be one of {list(_SIMPLE_TYPES)}, 'Dict[KeyType, ValueType]',"
            f" 'List[ElementType]', or their nested combinations, got '{v}'"
        )

    def matches_type(self, value: Any) -> bool:
        if self.is_list:
            return isinstance(value, list)
        if self.type.startswith("Dict["):
            return isinstance(value, dict)
        if isinstance(value, bool) and self.type in ("int", "float"):
            return False
        if self.type == "int" and isinstance(value, float):
            return value.is_integer()
        return isinstance(value, _SIMPLE_TYPES[self.type])


def _item_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Render a list item model as a plain JSON schema object."""
    schema = model.model_json_schema()
    properties = {}
    for name, prop in schema.get("properties", {}).items():
        variants = [variant for variant in prop.get("anyOf", [prop]) if variant.get("type") != "null"]
        rendered = {"type": variants[0].get("type", "string")}
        if prop.get("description"):
            rendered["description"] = prop["description"]
        properties[name] = rendered
    return {"type": "object", "properties": properties, "required": schema.get("required", [])}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


class AbstractTool(BaseModel, ABC):
    """The base class of the tool.
    A tool is one operation the orchestration host can call by name, for example
    generating an image or checking the status of a task.
    """

    tool_name: str = Field(..., description="The name of the tool.")
    descriptions: List[str] = Field(
        ...,
        min_length=3,
        description="""The descriptions of the tool. The first description is the one shown
        to the host during discovery, the others describe the tool from different perspectives.
        """,
    )

    class Config:
        protected_namespaces = ()

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._logger = Logger(__name__)

    def __str__(self):
        return self.tool_name

    @field_validator("tool_name")
    def check_tool_name(cls, v: str) -> str:
        if not v:
            raise ValueError("The tool_name must not be empty.")
        return v

    @field_validator("descriptions")
    def check_descriptions(cls, v: List[str]) -> List[str]:
        if len(v) < 3:
            raise ValueError("The descriptions must have at least 3 items. The more the better.")
        return v

    def get_descriptions(self) -> List[str]:
        return self.descriptions

    def get_spec(self) -> str:
        """Return the input and output specification of the tool as a JSON string."""
        input_json_obj = [param.to_json_obj() for param in self.input_spec()]
        output_json_obj = [param.to_json_obj() for param in self.output_spec()]
        spec_json_obj = {
            "input_message": input_json_obj,
            "output_message": output_json_obj,
        }
        return json.dumps(spec_json_obj, indent=4)

    @abstractmethod
    def input_spec(self) -> List[Param]:
        """Return the specification of the input parameters."""
        pass

    @abstractmethod
    def output_spec(self) -> List[Param]:
        """Return the specification of the fields of a successful result."""
        pass

    def to_open_function_format(self) -> Dict[str, Any]:
        """Return the specification of the tool in the format expected by the open function."""
        input_properties = {}
        for param in self.input_spec():
            input_properties.update(param.to_open_function_format())

        output_properties = {}
        for param in self.output_spec():
            output_properties.update(param.to_open_function_format())

        return {
            "type": "function",
            "function": {
                "name": self.tool_name,
                "description": self.descriptions[0],
                "parameters": {
                    "type": "object",
                    "properties": input_properties,
                    "required": [param.name for param in self.input_spec() if param.required],
                },
                "responses": {
                    "type": "object",
                    "properties": output_properties,
                },
            },
        }

    def _validate_input_message(self, input_message: Message) -> Dict[str, Any]:
        """Validate the input message against the input spec and return the normalized arguments.

        The checks run in four passes and stop at the first violation:
        required parameters, types and list items, enumerations, then numeric and
        length bounds. Defaults are filled in for the parameters that were not given.

        Raises:
            InvalidParameterError: If the input message is invalid.
        """
        input_spec = self.input_spec()
        arguments: Dict[str, Any] = {}
        for param in input_spec:
            value = input_message.get(param.name)
            if isinstance(value, str) and not value.strip() and not param.required:
                value = None
            if param.is_list and value == [] and not param.required:
                value = None
            arguments[param.name] = value

        unknown = set(input_message.content) - set(arguments)
        if unknown:
            self._logger.debug(f"{self.tool_name}: ignoring unknown arguments {sorted(unknown)}")

        for param in input_spec:
            if not param.required:
                continue
            value = arguments[param.name]
            if param.is_list and (not isinstance(value, list) or not value):
                raise InvalidParameterError(f"{param.name} must be a non-empty array")
            if _is_blank(value):
                raise InvalidParameterError(f"{param.name} is required")

        for param in input_spec:
            value = arguments[param.name]
            if value is None:
                continue
            if not param.matches_type(value):
                raise InvalidParameterError(f"{param.name} must be of type '{param.type}'")
            if param.type == "int":
                arguments[param.name] = int(value)
            if param.is_list and param.item_model is not None:
                arguments[param.name] = self._validate_items(param, value)

        for param in input_spec:
            value = arguments[param.name]
            if value is not None and param.enum is not None and value not in param.enum:
                allowed = ", ".join(str(option) for option in param.enum)
                raise InvalidParameterError(f"{param.name} must be one of: {allowed}")

        for param in input_spec:
            value = arguments[param.name]
            if value is None:
                continue
            if param.is_list:
                if param.min_items is not None and len(value) < param.min_items:
                    raise InvalidParameterError(f"{param.name} must contain at least {param.min_items} item(s)")
                if param.max_items is not None and len(value) > param.max_items:
                    raise InvalidParameterError(f"{param.name} must contain at most {param.max_items} items")
            elif param.minimum is not None or param.maximum is not None:
                arguments[param.name] = self._check_bounds(param, value)

        for param in input_spec:
            if arguments[param.name] is None and param.default is not None:
                arguments[param.name] = param.default
        return arguments

    @staticmethod
    def _validate_items(param: Param, items: List[Any]) -> List[Dict[str, Any]]:
        required_fields = [name for name, field in param.item_model.model_fields.items() if field.is_required()]
        normalized = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise InvalidParameterError(f"{param.item_label} at index {index} must be an object")
            for field_name in required_fields:
                if _is_blank(item.get(field_name)):
                    raise InvalidParameterError(
                        f"{param.item_label} at index {index} must have a '{field_name}' property"
                    )
            try:
                normalized.append(param.item_model.model_validate(item).model_dump(exclude_none=True))
            except ValidationError as e:
                reason = e.errors()[0]["msg"]
                raise InvalidParameterError(f"{param.item_label} at index {index} is invalid: {reason}")
        return normalized

    @staticmethod
    def _check_bounds(param: Param, value: Union[int, float]) -> Union[int, float]:
        if param.clamp:
            if param.minimum is not None:
                value = max(value, param.minimum)
            if param.maximum is not None:
                value = min(value, param.maximum)
            return value
        if param.minimum is not None and value < param.minimum:
            raise InvalidParameterError(f"{param.name} must be at least {param.minimum}")
        if param.maximum is not None and value > param.maximum:
            raise InvalidParameterError(f"{param.name} must be at most {param.maximum}")
        return value

    def _validate_output_message(self, output_message: Message) -> None:
        """Validate the result envelope against the output spec.

        A failed result may only carry the failure fields. A successful result must
        not carry an error and its fields must match the declared types.

        Raises:
            ValueError: If the output message is invalid.
        """
        if not output_message.is_envelope:
            raise ValueError(f"{self.tool_name}: The output message must contain a boolean 'success' field.")
        if not output_message.succeeded:
            extra = set(output_message.content) - {"success", *FAILURE_FIELDS}
            if "error" not in output_message.content or extra:
                raise ValueError(f"{self.tool_name}: Malformed failure result {output_message.content}.")
            return
        if "error" in output_message.content:
            raise ValueError(f"{self.tool_name}: A successful result must not contain an 'error' field.")
        for param in self.output_spec():
            value = output_message.get(param.name)
            if value is None:
                if param.required:
                    raise ValueError(f"The output message must contain the field '{param.name}'.")
                continue
            if not param.matches_type(value):
                raise ValueError(
                    f"{self.tool_name}: The field '{param.name}' must be of type '{param.type}',"
                    f" but is '{type(value)}'."
                )


class BaseTool(AbstractTool):
    async def __call__(self, input: Message) -> Message:
        """Run one invocation. Every failure is returned as a failure envelope."""
        self._logger.tool_log(f"{self.tool_name} invoked with {sorted(input.content)}")
        try:
            arguments = self._validate_input_message(input)
            output_message = await self._execute(Message(content=arguments))
            self._validate_output_message(output_message)
        except ToolError as e:
            self._logger.tool_log(f"{self.tool_name} failed: {e}")
            return e.to_message()
        except Exception as e:
            self._logger.error(f"{self.tool_name} raised {type(e).__name__}: {e}")
            return failure_message(f"An error occurred while running {self.tool_name}", message=str(e))
        return output_message

    @abstractmethod
    async def _execute(self, input: Message) -> Message:
        """Execute the tool and return the result envelope.
        The derived class must implement this method to define the behavior of the tool.

        Args:
            input (Message): The validated arguments, with defaults filled in.

        Returns:
            Message: The result envelope.
        """
        pass


class ToolManager:
    """Tool manager is the catalog of the tools available to the host.
    The tools are indexed by name and kept in registration order, which is also the
    order of the discovery output.
    """

    def __init__(self, load_runway_tools: bool = True, client_provider=None):
        """Register the Runway tools by default."""
        self._logger = Logger(__name__)
        self.tools: Dict[str, BaseTool] = {}
        if load_runway_tools:
            from runway_tools.tools import create_runway_tools

            self.add_tools(create_runway_tools(client_provider=client_provider))

    def add_tool(self, tool: BaseTool):
        """Register a tool. Tool names must be unique."""
        if tool.tool_name in self.tools:
            raise ValueError(f"Tool {tool.tool_name} is already registered.")
        self._logger.debug(f"Registering tool {tool.tool_name}")
        self.tools[tool.tool_name] = tool

    def add_tools(self, tools: Sequence[BaseTool]):
        for tool in tools:
            self.add_tool(tool)

    def get_tool(self, tool_name: str) -> BaseTool:
        """Get the tool by the given name."""
        tool = self.tools.get(tool_name, None)
        if not tool:
            raise ToolNotFoundError(tool_name, list(self.tools.keys()))
        return tool

    def list_tools(self) -> List[str]:
        return list(self.tools.keys())

    def describe_tools(self) -> List[Dict[str, Any]]:
        """Return the open function descriptors of all the tools, in registration order."""
        return [tool.to_open_function_format() for tool in self.tools.values()]

    async def invoke_tool(self, tool_name: str, input: Optional[Dict[str, Any]] = None) -> Message:
        """Invoke the tool by the given name with the input.

        Args:
            tool_name: The name of the tool to invoke.
            input: The input params to the tool. It will be packed into a Message object.

        """
        try:
            tool = self.get_tool(tool_name)
        except ToolNotFoundError as e:
            self._logger.warning(e.message)
            return e.to_message()
        return await tool(Message(content=dict(input or {})))
