"""
Runway tools exposed to the orchestration host.

The order of RUNWAY_TOOL_CLASSES is the order in which the tools are registered
and reported during discovery.
"""

from typing import List, Optional

from runway_tools.core.client import RunwayClientProvider

from .image_tools import GenerateImage, GenerateImageWithReferences
from .runway_tool import ReferenceImage, RunwayGenerationTool, RunwayTool
from .task_tools import CancelTask, GetTaskStatus, ListTasks, TaskStatus
from .video_tools import GenerateVideoFromImage, GenerateVideoFromText, GenerateVideoFromVideo, UpscaleVideo

RUNWAY_TOOL_CLASSES = [
    # Image generation
    GenerateImage,
    GenerateImageWithReferences,
    # Video generation
    GenerateVideoFromText,
    GenerateVideoFromImage,
    GenerateVideoFromVideo,
    # Video enhancement
    UpscaleVideo,
    # Task management
    GetTaskStatus,
    ListTasks,
    CancelTask,
]


def create_runway_tools(client_provider: Optional[RunwayClientProvider] = None) -> List[RunwayTool]:
    """Instantiate every Runway tool, sharing the given client provider."""
    return [tool_class(client_provider=client_provider) for tool_class in RUNWAY_TOOL_CLASSES]


__all__ = [
    "RUNWAY_TOOL_CLASSES",
    "create_runway_tools",
    "ReferenceImage",
    "RunwayTool",
    "RunwayGenerationTool",
    "TaskStatus",
    "GenerateImage",
    "GenerateImageWithReferences",
    "GenerateVideoFromText",
    "GenerateVideoFromImage",
    "GenerateVideoFromVideo",
    "UpscaleVideo",
    "GetTaskStatus",
    "ListTasks",
    "CancelTask",
]
