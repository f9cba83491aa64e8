"""
Image generation tools backed by the Runway Gen4 Image API.
"""

from typing import Any, Dict, List

from runway_tools.core.tool import Param

from .runway_tool import RunwayGenerationTool, reference_images_param, seed_param

IMAGE_MODELS = ["gen4_image"]
IMAGE_RATIOS = ["1920:1080", "1080:1920", "1024:1024", "1280:720", "720:1280", "1536:640", "640:1536"]
IMAGE_STYLES = ["photorealistic", "cinematic", "artistic", "illustration", "concept_art"]


def _image_model_params() -> List[Param]:
    return [
        Param(
            name="model",
            type="str",
            required=False,
            description="The model to use for image generation.",
            example="gen4_image",
            enum=IMAGE_MODELS,
            default="gen4_image",
        ),
        Param(
            name="ratio",
            type="str",
            required=False,
            description="The aspect ratio of the generated image.",
            example="1920:1080",
            enum=IMAGE_RATIOS,
            default="1920:1080",
        ),
        seed_param("images"),
    ]


class GenerateImage(RunwayGenerationTool):
    tool_name: str = "GenerateImage"
    descriptions: List[str] = [
        "Generate an image using the Runway Gen4 Image API with text prompts.",
        "Create a still picture from a written description.",
        "Text-to-image generation that returns the URL of the generated image.",
    ]
    vendor_operation: str = "text_to_image"
    output_field: str = "imageUrl"
    echo_fields: List[str] = ["model", "promptText", "ratio", "seed", "style"]
    generic_error: str = "An error occurred while generating the image"
    task_failed_error: str = "Image generation task failed"

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="promptText",
                type="str",
                required=True,
                description="The text prompt for generating the image. Be descriptive and specific.",
                example="a red fox in snow",
            ),
            *_image_model_params(),
            Param(
                name="style",
                type="str",
                required=False,
                description="Optional style preset for the image generation.",
                example="cinematic",
                enum=IMAGE_STYLES,
            ),
        ]

    def _build_request(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        # The SDK has no keyword for the style preset, it travels in the request body.
        params = super()._build_request(arguments)
        style = params.pop("style", None)
        if style:
            params["extra_body"] = {"style": style}
        return params


class GenerateImageWithReferences(RunwayGenerationTool):
    tool_name: str = "GenerateImageWithReferences"
    descriptions: List[str] = [
        'Generate an image using the Runway Gen4 Image API with reference images. Use @ syntax in prompts to reference tagged images (e.g., "@cat sitting on @chair").',
        "Compose a new image that combines up to four reference images.",
        "Keep characters, objects or styles consistent by tagging reference images in the prompt.",
    ]
    vendor_operation: str = "text_to_image"
    output_field: str = "imageUrl"
    echo_fields: List[str] = ["model", "promptText", "ratio", "seed", "referenceImages"]
    generic_error: str = "An error occurred while generating the image with references"
    task_failed_error: str = "Image generation task failed"

    def input_spec(self) -> List[Param]:
        return [
            Param(
                name="promptText",
                type="str",
                required=True,
                description=(
                    "The text prompt for generating the image. Use @ syntax to reference tagged images "
                    '(e.g., "@EiffelTower painted in the style of @StarryNight").'
                ),
                example="@cat sitting on @chair",
            ),
            reference_images_param(
                required=True,
                min_items=1,
                description=(
                    'Array of reference image objects. Each object should have "uri" (image URL or data URI) '
                    'and optionally "tag" (for @ syntax referencing).'
                ),
            ),
            *_image_model_params(),
        ]
