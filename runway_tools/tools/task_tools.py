"""
Task management tools: status lookup, listing and cancellation of Runway tasks.
"""

from enum import Enum
from typing import Any, List, Optional

from runway_tools.core.message import Message, failure_message, success_message
from runway_tools.core.tool import Param
from runway_tools.core.utils import task_field, utc_now_iso

from .runway_tool import RunwayTool


class TaskStatus(Enum):
    """Runway task states. A task only moves forward and never leaves a terminal state."""

    PENDING = "PENDING"
    THROTTLED = "THROTTLED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"

    @classmethod
    def parse(cls, value: Any) -> Optional["TaskStatus"]:
        if value is None:
            return None
        name = str(value).upper()
        if name == "CANCELLED":
            name = "CANCELED"
        try:
            return cls[name]
        except KeyError:
            return None

    @property
    def rank(self) -> int:
        return {"PENDING": 0, "THROTTLED": 0, "RUNNING": 1}.get(self.value, 2)

    @property
    def is_terminal(self) -> bool:
        return self.rank == 2


LISTABLE_STATUSES = ["PENDING", "RUNNING", "SUCCEEDED", "FAILED", "CANCELED"]


def task_id_param(description: str) -> Param:
    return Param(
        name="taskId",
        type="str",
        required=True,
        description=description,
        example="17f20503-6c24-4c16-946b-35dbbce2af2f",
    )


class GetTaskStatus(RunwayTool):
    tool_name: str = "GetTaskStatus"
    descriptions: List[str] = [
        "Get the status and details of a Runway API task by its ID. Check if a generation is complete, failed, or still in progress.",
        "Look up the progress and output of a task created by one of the generation tools.",
        "Poll a Runway task until it reaches SUCCEEDED, FAILED or CANCELED.",
    ]
    generic_error: str = "An error occurred while retrieving the task status"

    def input_spec(self) -> List[Param]:
        return [
            task_id_param(
                "The unique ID of the task to check. This is returned when you create a generation task."
            )
        ]

    def output_spec(self) -> List[Param]:
        return [
            Param(name="success", type="bool", description="Whether the task was found.", example="true"),
            Param(name="taskId", type="str", required=False, description="The ID of the task."),
            Param(name="status", type="str", required=False, description="The current status of the task."),
            Param(name="isTerminal", type="bool", required=False, description="Whether the status is final."),
            Param(name="createdAt", type="str", required=False, description="When the task was created."),
            Param(name="updatedAt", type="str", required=False, description="When the task last changed."),
            Param(name="output", type="List[str]", required=False, description="The URLs of the outputs."),
            Param(name="failureReason", type="str", required=False, description="Why the task failed."),
            Param(name="failureCode", type="str", required=False, description="The vendor failure code."),
            Param(name="progress", type="float", required=False, description="Progress between 0 and 1."),
            Param(
                name="estimatedTimeRemaining",
                type="float",
                required=False,
                description="Estimated seconds until the task finishes.",
            ),
        ]

    async def _call_vendor(self, client: Any, input: Message) -> Message:
        task = await client.tasks.retrieve(input.get("taskId"))
        status = task_field(task, "status")
        parsed = TaskStatus.parse(status)
        return success_message(
            taskId=task_field(task, "id", input.get("taskId")),
            status=status,
            isTerminal=parsed.is_terminal if parsed else None,
            createdAt=task_field(task, "createdAt"),
            updatedAt=task_field(task, "updatedAt"),
            output=task_field(task, "output"),
            failureReason=task_field(task, "failureReason", task_field(task, "failure")),
            failureCode=task_field(task, "failureCode"),
            model=task_field(task, "model"),
            promptText=task_field(task, "promptText"),
            promptImage=task_field(task, "promptImage"),
            ratio=task_field(task, "ratio"),
            duration=task_field(task, "duration"),
            progress=task_field(task, "progress"),
            estimatedTimeRemaining=task_field(task, "estimatedTimeRemaining"),
        )


class ListTasks(RunwayTool):
    """The Runway API has no endpoint to list tasks, so this tool always reports
    the capability as unsupported once its arguments and the credential are valid.
    """

    tool_name: str = "ListTasks"
    descriptions: List[str] = [
        "List recent tasks from the Runway API. Useful for tracking generation history and finding task IDs.",
        "Browse previously created generation tasks.",
        "Find task IDs by status to check them with GetTaskStatus.",
    ]
    generic_error: str = "An error occurred while listing tasks"

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="limit",
                type="int",
                required=False,
                description="The number of tasks to retrieve (maximum 100).",
                example="10",
                minimum=1,
                maximum=100,
                clamp=True,
                default=10,
            ),
            Param(
                name="status",
                type="str",
                required=False,
                description="Filter tasks by their status.",
                example="SUCCEEDED",
                enum=LISTABLE_STATUSES,
            ),
            Param(
                name="cursor",
                type="str",
                required=False,
                description="Pagination cursor for getting more results. Use the nextCursor from a previous response.",
            ),
        ]

    def output_spec(self) -> List[Param]:
        return [Param(name="success", type="bool", description="Always false, listing is not supported.")]

    async def _execute(self, input: Message) -> Message:
        # The credential is still required, but no client is created.
        self.get_client_provider().require_credential()
        return await self._call_vendor(None, input)

    async def _call_vendor(self, client: Any, input: Message) -> Message:
        request = {key: value for key, value in input.content.items() if value is not None}
        return failure_message(
            "Task listing not supported",
            message=(
                "The Runway API does not provide a list tasks endpoint. You need to track task IDs from "
                "generation responses and use GetTaskStatus to check individual tasks."
            ),
            details={
                "suggestion": (
                    "Use GetTaskStatus with task IDs returned from generation methods "
                    "(GenerateImage, GenerateVideoFromText, etc.)"
                ),
                "request": request,
            },
        )


class CancelTask(RunwayTool):
    tool_name: str = "CancelTask"
    descriptions: List[str] = [
        "Cancel a running or pending task using the Runway API. This will stop the generation process and free up resources.",
        "Stop a generation that is no longer needed.",
        "Only PENDING or RUNNING tasks can be canceled; finished tasks report that they cannot be canceled.",
    ]
    generic_error: str = "An error occurred while canceling the task"

    def input_spec(self) -> List[Param]:
        return [
            task_id_param(
                "The unique ID of the task to cancel. Only tasks in PENDING or RUNNING status can be canceled."
            )
        ]

    def output_spec(self) -> List[Param]:
        return [
            Param(name="success", type="bool", description="Whether the cancellation was accepted.", example="true"),
            Param(name="taskId", type="str", required=False, description="The ID of the canceled task."),
            Param(name="status", type="str", required=False, description="The status after cancellation."),
            Param(name="message", type="str", required=False, description="A human readable confirmation."),
            Param(name="canceledAt", type="str", required=False, description="When the cancellation happened."),
        ]

    async def _call_vendor(self, client: Any, input: Message) -> Message:
        task_id = input.get("taskId")
        result = await client.tasks.delete(task_id)
        self._logger.task_log(f"Cancellation requested for task {task_id}")
        return success_message(
            taskId=task_id,
            status=task_field(result, "status", TaskStatus.CANCELED.value),
            message="Task cancellation requested",
            canceledAt=task_field(result, "canceledAt", utc_now_iso()),
        )
