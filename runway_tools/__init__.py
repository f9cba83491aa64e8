# noqa: D104
"""runway-tools - Runway generative media operations as tools for LLM orchestration hosts."""

__version__ = "0.1.0"

# Expose the core classes
from .core.client import RunwayClientProvider, get_client_provider, set_client_provider
from .core.config import RunwayConfig
from .core.logger import Logger
from .core.message import Message
from .core.tool import BaseTool, Param, ToolManager

# Expose the tools
from .tools import RUNWAY_TOOL_CLASSES, create_runway_tools
