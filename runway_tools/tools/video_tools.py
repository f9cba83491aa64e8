"""
Video generation and enhancement tools backed by the Runway API.
"""

from typing import Any, Dict, List

from runway_tools.core.tool import Param

from .runway_tool import RunwayGenerationTool, reference_images_param, seed_param

VIDEO_MODELS = ["gen4_turbo"]
VIDEO_RATIOS = ["1280:720", "720:1280", "1024:1024", "1920:1080", "1080:1920"]
UPSCALE_MODELS = ["upscale_video"]


def _video_model_params() -> List[Param]:
    return [
        Param(
            name="model",
            type="str",
            required=False,
            description="The model to use for video generation.",
            example="gen4_turbo",
            enum=VIDEO_MODELS,
            default="gen4_turbo",
        ),
        Param(
            name="ratio",
            type="str",
            required=False,
            description="The aspect ratio of the generated video.",
            example="1280:720",
            enum=VIDEO_RATIOS,
            default="1280:720",
        ),
        Param(
            name="duration",
            type="float",
            required=False,
            description="The duration of the video in seconds.",
            example="5",
            minimum=5,
            maximum=10,
            default=5,
        ),
        seed_param("videos"),
    ]


class GenerateVideoFromText(RunwayGenerationTool):
    tool_name: str = "GenerateVideoFromText"
    descriptions: List[str] = [
        "Generate a video using the Runway Gen4 Turbo API from text prompts only.",
        "Create a short video clip from a written description of the scene and motion.",
        "Text-to-video generation that returns the URL of the generated video.",
    ]
    vendor_operation: str = "text_to_video"
    output_field: str = "videoUrl"
    echo_fields: List[str] = ["model", "promptText", "ratio", "duration", "seed"]
    generic_error: str = "An error occurred while generating the video from text"
    task_failed_error: str = "Video generation task failed"

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="promptText",
                type="str",
                required=True,
                description="The text prompt for generating the video. Be descriptive about the desired motion and scene.",
                example="A drone shot over a foggy pine forest at sunrise",
            ),
            *_video_model_params(),
        ]


class GenerateVideoFromImage(RunwayGenerationTool):
    tool_name: str = "GenerateVideoFromImage"
    descriptions: List[str] = [
        "Generate a video from an image using the Runway Gen4 Turbo API. Animate existing images with optional text guidance.",
        "Bring a still picture to life; the image becomes the first frame of the video.",
        "Image-to-video generation that returns the URL of the generated video.",
    ]
    vendor_operation: str = "image_to_video"
    output_field: str = "videoUrl"
    echo_fields: List[str] = ["model", "promptImage", "promptText", "ratio", "duration", "seed"]
    generic_error: str = "An error occurred while generating the video from image"
    task_failed_error: str = "Video generation task failed"

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="promptImage",
                type="str",
                required=True,
                description=(
                    "The image URL or base64 data URI to use as the base for video generation. "
                    "This will be the starting frame of the video."
                ),
                example="https://example.com/assets/bunny.jpg",
            ),
            Param(
                name="promptText",
                type="str",
                required=False,
                description=(
                    "Optional text prompt to guide the video generation. "
                    "Describe the motion or animation you want to see."
                ),
                example="The bunny is eating a carrot",
            ),
            *_video_model_params(),
        ]


class GenerateVideoFromVideo(RunwayGenerationTool):
    """Restyle an existing video, optionally guided by tagged reference images."""

    tool_name: str = "GenerateVideoFromVideo"
    descriptions: List[str] = [
        'Generate a video from an existing video using the Runway API with reference images. Perfect for "restyled first frame" workflows where you want to transform an existing video using reference images for styling.',
        "Transform the look of a video while keeping its original motion.",
        "Video-to-video generation that returns the URL of the restyled video.",
    ]
    vendor_operation: str = "video_to_video"
    output_field: str = "videoUrl"
    echo_fields: List[str] = ["model", "promptVideo", "promptText", "referenceImages", "ratio", "duration", "seed"]
    vendor_field_names: Dict[str, str] = {"referenceImages": "references"}
    generic_error: str = "An error occurred while generating the video from video"
    task_failed_error: str = "Video-to-video generation task failed"

    def _build_request(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        params = super()._build_request(arguments)
        if "references" in params:
            params["references"] = [{"type": "image", **reference} for reference in params["references"]]
        return params

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="promptVideo",
                type="str",
                required=True,
                description=(
                    "The input video URL or base64 data URI to transform. "
                    "This will be the base video that gets restyled."
                ),
                example="https://example.com/assets/street.mp4",
            ),
            Param(
                name="promptText",
                type="str",
                required=True,
                description=(
                    "Text prompt describing the desired transformation. Use @ syntax to reference tagged images "
                    '(e.g., "Transform the first frame to look like @styleRef while maintaining the original motion").'
                ),
                example="Transform the street to look like @styleRef",
            ),
            reference_images_param(
                required=False,
                description=(
                    'Array of reference image objects for styling. Each object should have "uri" (image URL or '
                    'data URI) and optionally "tag" (for @ syntax referencing).'
                ),
            ),
            *_video_model_params(),
        ]


class UpscaleVideo(RunwayGenerationTool):
    tool_name: str = "UpscaleVideo"
    descriptions: List[str] = [
        "Upscale a video to higher resolution using the Runway Video Upscale API. Improves video quality and resolution.",
        "Enhance a low resolution video.",
        "Video upscaling that returns the URL of the improved video.",
    ]
    vendor_operation: str = "video_upscale"
    output_field: str = "videoUrl"
    echo_fields: List[str] = ["model", "promptVideo"]
    vendor_field_names: Dict[str, str] = {"promptVideo": "video_uri"}
    generic_error: str = "An error occurred while upscaling the video"
    task_failed_error: str = "Video upscaling task failed"

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="promptVideo",
                type="str",
                required=True,
                description=(
                    "The video URL or base64 data URI to upscale. "
                    "Should be a video file that you want to improve in quality."
                ),
                example="https://example.com/assets/clip.mp4",
            ),
            Param(
                name="model",
                type="str",
                required=False,
                description="The model to use for video upscaling.",
                example="upscale_video",
                enum=UPSCALE_MODELS,
                default="upscale_video",
            ),
        ]
