"""Shared fixtures: an in-memory stand-in for the Runway client and providers wired to it."""

import functools
import inspect
import itertools
from types import SimpleNamespace

import pytest
from runwayml import AsyncRunwayML

from runway_tools.core.client import RunwayClientProvider, set_client_provider
from runway_tools.core.config import RunwayConfig

TERMINAL_STATUSES = ("SUCCEEDED", "FAILED", "CANCELED")
NO_OPTIONS = {"base_url": None, "timeout": None, "max_retries": None}


@functools.lru_cache(maxsize=None)
def sdk_signature(path):
    """Return the signature of a method of the real Runway client, e.g. "video_to_video.create".

    The fake binds every call against it, so a keyword the SDK does not accept fails
    with the same TypeError the real client raises.
    """
    target = AsyncRunwayML(api_key="signature-only")
    for name in path.split("."):
        target = getattr(target, name)
    return inspect.signature(target)


class FakeAPIError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class FakeTaskFailedError(Exception):
    def __init__(self, task_details):
        super().__init__("Task failed")
        self.task_details = task_details


class FakeCreatedTask:
    def __init__(self, client, task):
        self._client = client
        self._task = task
        self.id = task.id

    async def wait_for_task_output(self):
        self._client.waits += 1
        if self._task.status == "FAILED":
            raise FakeTaskFailedError({"id": self._task.id, "status": "FAILED", "failure": self._task.failure})
        return self._task


class FakeGenerationResource:
    def __init__(self, client, name):
        self._client = client
        self._name = name

    async def create(self, **kwargs):
        sdk_signature(f"{self._name}.create").bind(**kwargs)
        self._client.calls.append((self._name, kwargs))
        if self._client.create_error is not None:
            raise self._client.create_error
        task = self._client.add_task(
            statuses=[self._client.next_status],
            output=self._client.next_output,
            failure="Content moderation rejected the prompt" if self._client.next_status == "FAILED" else None,
        )
        return FakeCreatedTask(self._client, task)


class FakeTasks:
    def __init__(self, client):
        self._client = client

    def _find(self, task_id):
        task = self._client.tasks_by_id.get(task_id)
        if task is None:
            raise FakeAPIError(f"Error code: 404 - Task {task_id} not found", 404)
        return task

    async def retrieve(self, task_id):
        sdk_signature("tasks.retrieve").bind(task_id)
        self._client.calls.append(("tasks.retrieve", {"id": task_id}))
        task = self._find(task_id)
        if task.schedule:
            task.status = task.schedule.pop(0)
            task.updated_at = f"2026-10-18T12:00:{len(self._client.calls):02d}Z"
        return task

    async def delete(self, task_id):
        sdk_signature("tasks.delete").bind(task_id)
        self._client.calls.append(("tasks.delete", {"id": task_id}))
        task = self._find(task_id)
        if task.status in TERMINAL_STATUSES:
            raise FakeAPIError("Error code: 400 - Task cannot be canceled in its current state", 400)
        task.status = "CANCELED"
        task.schedule = []
        return None


class FakeRunwayClient:
    """Records every vendor call and keeps tasks in memory.

    A task created through `add_task` walks through its list of statuses, one step
    per retrieve call, and then stays on the last one.
    """

    def __init__(self):
        self.calls = []
        self.waits = 0
        self.tasks_by_id = {}
        self.next_status = "SUCCEEDED"
        self.next_output = ["https://cdn.example/img1.png"]
        self.create_error = None
        self._ids = itertools.count(1)
        self.text_to_image = FakeGenerationResource(self, "text_to_image")
        self.text_to_video = FakeGenerationResource(self, "text_to_video")
        self.image_to_video = FakeGenerationResource(self, "image_to_video")
        self.video_to_video = FakeGenerationResource(self, "video_to_video")
        self.video_upscale = FakeGenerationResource(self, "video_upscale")
        self.tasks = FakeTasks(self)

    def add_task(self, statuses, task_id=None, output=None, failure=None):
        task_id = task_id or f"task-{next(self._ids)}"
        task = SimpleNamespace(
            id=task_id,
            status=statuses[0],
            schedule=list(statuses),
            output=output,
            failure=failure,
            created_at="2026-10-18T12:00:00Z",
            updated_at="2026-10-18T12:00:00Z",
            progress=None,
        )
        self.tasks_by_id[task_id] = task
        return task

    def fail_next_task(self):
        self.next_status = "FAILED"
        self.next_output = None

    def raise_on_create(self, message, status_code=None):
        self.create_error = FakeAPIError(message, status_code) if status_code else RuntimeError(message)


@pytest.fixture
def fake_client():
    return FakeRunwayClient()


@pytest.fixture
def client_factory(fake_client):
    def factory(**kwargs):
        factory.created.append(kwargs)
        return fake_client

    factory.created = []
    return factory


@pytest.fixture
def provider(client_factory):
    config = RunwayConfig(env_file=None, api_key="test-key", **NO_OPTIONS)
    return RunwayClientProvider(config=config, client_factory=client_factory)


@pytest.fixture
def provider_without_key(client_factory):
    config = RunwayConfig(env_file=None, api_key=None, **NO_OPTIONS)
    return RunwayClientProvider(config=config, client_factory=client_factory)


@pytest.fixture(autouse=True)
def reset_shared_provider():
    yield
    set_client_provider(None)
