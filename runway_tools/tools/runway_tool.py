"""
Base classes for the tools that call the Runway API.

Every Runway tool follows the same path: the arguments are validated against the
input spec, the shared client is acquired, one vendor operation is called and the
vendor response is reshaped into a flat result envelope. Vendor errors never leave
the tool; they are classified and returned as failure envelopes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from runway_tools.core.client import RunwayClientProvider, get_client_provider
from runway_tools.core.errors import (
    ErrorKind,
    ToolError,
    classify_vendor_error,
    task_failure_details,
)
from runway_tools.core.message import Message, failure_message, success_message
from runway_tools.core.tool import BaseTool, Param
from runway_tools.core.utils import first_output, task_field, to_plain, to_vendor_params

SEED_MAX = 2147483647


class ReferenceImage(BaseModel):
    """An image the prompt can refer to with the @tag syntax."""

    uri: str = Field(..., min_length=1, description="Image URL or base64 data URI (data:image/jpeg;base64,...)")
    tag: Optional[str] = Field(
        default=None, description="Optional tag name for referencing this image in the prompt with @ syntax"
    )


def seed_param(media: str) -> Param:
    return Param(
        name="seed",
        type="int",
        required=False,
        description=f"Optional seed for reproducible results. Use the same seed to get similar {media}.",
        example="42",
        minimum=0,
        maximum=SEED_MAX,
    )


def reference_images_param(required: bool, description: str, min_items: Optional[int] = None) -> Param:
    return Param(
        name="referenceImages",
        type="List[Dict[str, str]]",
        required=required,
        description=description,
        example='[{"uri": "https://example.com/cat.jpg", "tag": "cat"}]',
        min_items=min_items,
        max_items=4,
        item_model=ReferenceImage,
        item_label="Reference image",
    )


class RunwayTool(BaseTool, ABC):
    """A tool backed by one Runway API operation.

    The client provider is resolved at call time, so tools built before the
    configuration is loaded still pick up the process-wide provider.
    """

    class Config:
        arbitrary_types_allowed = True

    client_provider: Optional[RunwayClientProvider] = Field(
        default=None, exclude=True, description="The provider of the Runway client. Defaults to the shared one."
    )
    generic_error: str = Field(
        default="An error occurred while calling the Runway API",
        description="The error reported for failures that have no more specific classification.",
    )
    task_failed_error: str = Field(
        default="Runway task failed", description="The error reported when the task reaches the FAILED state."
    )

    def get_client_provider(self) -> RunwayClientProvider:
        return self.client_provider or get_client_provider()

    async def _execute(self, input: Message) -> Message:
        provider = self.get_client_provider()
        provider.require_credential()
        try:
            async with provider.acquire() as client:
                return await self._call_vendor(client, input)
        except ToolError:
            raise
        except Exception as e:
            self._logger.error(f"{self.tool_name}: {type(e).__name__}: {e}")
            return self._failure_for(e, input)

    @abstractmethod
    async def _call_vendor(self, client: Any, input: Message) -> Message:
        """Call the vendor operation of this tool and shape the successful result."""
        pass

    def _failure_for(self, exc: Exception, input: Message) -> Message:
        """Turn an error raised at the vendor boundary into a failure envelope."""
        kind = classify_vendor_error(exc)
        task_id = input.get("taskId")
        if kind == ErrorKind.TASK_FAILED:
            details = to_plain(task_failure_details(exc))
            return failure_message(
                self.task_failed_error,
                details=details,
                task_id=task_field(details, "id", task_id),
            )
        if kind == ErrorKind.NOT_FOUND and task_id is not None:
            return failure_message("Task not found", task_id=task_id)
        if kind == ErrorKind.NOT_CANCELABLE and task_id is not None:
            return failure_message(
                "Task cannot be canceled",
                message="Task may already be completed or failed.",
                task_id=task_id,
            )
        return failure_message(self.generic_error, message=str(exc), task_id=task_id)


class RunwayGenerationTool(RunwayTool, ABC):
    """A tool that creates a Runway task and waits until it reaches a terminal state.

    A concrete generation tool only declares its input spec and a few fields:

    - vendor_operation: the client resource that creates the task, e.g. "text_to_image".
    - output_field: the name of the primary output locator, e.g. "imageUrl".
    - echo_fields: the arguments repeated in the successful result.
    - vendor_field_names: argument names that do not follow the camelCase to
      snake_case convention of the SDK.
    """

    vendor_operation: str = Field(..., description="The client resource that creates the task.")
    output_field: str = Field(default="output", description="The name of the primary output locator.")
    echo_fields: List[str] = Field(default_factory=list, description="Arguments repeated in the result.")
    vendor_field_names: Dict[str, str] = Field(
        default_factory=dict, description="Argument names mapped to SDK keyword names."
    )

    def output_spec(self) -> List[Param]:
        outputs = [
            Param(name="success", type="bool", description="Whether the generation succeeded.", example="true"),
            Param(name="taskId", type="str", required=False, description="The ID of the Runway task."),
            Param(name="status", type="str", required=False, description="The final status of the task."),
            Param(name="output", type="List[str]", required=False, description="The URLs of all generated outputs."),
            Param(
                name=self.output_field,
                type="str",
                required=False,
                description="The URL of the first generated output, or null if there is none.",
            ),
            Param(name="createdAt", type="str", required=False, description="When the task was created."),
        ]
        declared = {param.name for param in outputs}
        for param in self.input_spec():
            if param.name in self.echo_fields and param.name not in declared:
                outputs.append(
                    Param(name=param.name, type=param.type, required=False, description=param.description)
                )
        return outputs

    def _build_request(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return to_vendor_params(arguments, self.vendor_field_names)

    async def _call_vendor(self, client: Any, input: Message) -> Message:
        params = self._build_request(input.content)
        resource = getattr(client, self.vendor_operation)
        self._logger.task_log(f"{self.tool_name}: creating {self.vendor_operation} task")
        created = await resource.create(**params)
        self._logger.task_log(f"{self.tool_name}: waiting for task {task_field(created, 'id')}")
        task = await created.wait_for_task_output()
        self._logger.task_log(f"{self.tool_name}: task {task_field(task, 'id')} is {task_field(task, 'status')}")
        return self._shape_result(task, input)

    def _shape_result(self, task: Any, input: Message) -> Message:
        output = task_field(task, "output")
        fields = {
            "taskId": task_field(task, "id"),
            "status": task_field(task, "status"),
            "output": output,
            self.output_field: first_output(output),
            "createdAt": task_field(task, "createdAt"),
        }
        for name in self.echo_fields:
            fields[name] = task_field(task, name, input.get(name))
        return success_message(**fields)
