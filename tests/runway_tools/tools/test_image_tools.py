"""Run the test with the following command:
    pytest tests/runway_tools/tools/test_image_tools.py
"""

import pytest

from runway_tools.core.message import Message
from runway_tools.tools import GenerateImage, GenerateImageWithReferences


class TestGenerateImage:
    @pytest.fixture
    def tool(self, provider):
        return GenerateImage(client_provider=provider)

    @pytest.mark.asyncio
    async def test_generate_image(self, tool, fake_client):
        result = await tool(Message(content={"promptText": "a red fox in snow"}))

        assert result.content == {
            "success": True,
            "taskId": "task-1",
            "status": "SUCCEEDED",
            "output": ["https://cdn.example/img1.png"],
            "imageUrl": "https://cdn.example/img1.png",
            "createdAt": "2026-10-18T12:00:00Z",
            "model": "gen4_image",
            "promptText": "a red fox in snow",
            "ratio": "1920:1080",
            "seed": None,
            "style": None,
        }
        assert fake_client.calls == [
            ("text_to_image", {"model": "gen4_image", "prompt_text": "a red fox in snow", "ratio": "1920:1080"})
        ]
        assert fake_client.waits == 1

    @pytest.mark.asyncio
    async def test_optional_parameters_are_forwarded(self, tool, fake_client):
        result = await tool(
            Message(
                content={
                    "promptText": "a red fox in snow",
                    "ratio": "1024:1024",
                    "seed": 7,
                    "style": "cinematic",
                }
            )
        )

        assert result.get("success") is True
        assert result.get("seed") == 7
        assert result.get("style") == "cinematic"
        assert fake_client.calls == [
            (
                "text_to_image",
                {
                    "model": "gen4_image",
                    "prompt_text": "a red fox in snow",
                    "ratio": "1024:1024",
                    "seed": 7,
                    "extra_body": {"style": "cinematic"},
                },
            )
        ]

    @pytest.mark.asyncio
    async def test_no_output(self, tool, fake_client):
        fake_client.next_output = []
        result = await tool(Message(content={"promptText": "a red fox in snow"}))
        assert result.get("success") is True
        assert result.get("imageUrl") is None

    @pytest.mark.asyncio
    async def test_task_failed(self, tool, fake_client):
        fake_client.fail_next_task()
        result = await tool(Message(content={"promptText": "a red fox in snow"}))

        assert result.content == {
            "success": False,
            "error": "Image generation task failed",
            "taskId": "task-1",
            "details": {"id": "task-1", "status": "FAILED", "failure": "Content moderation rejected the prompt"},
        }

    @pytest.mark.asyncio
    async def test_vendor_error(self, tool, fake_client):
        fake_client.raise_on_create("Error code: 400 - invalid ratio", status_code=400)
        result = await tool(Message(content={"promptText": "a red fox in snow"}))

        assert result.content == {
            "success": False,
            "error": "An error occurred while generating the image",
            "message": "Error code: 400 - invalid ratio",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content, error",
        [
            ({}, "promptText is required"),
            ({"promptText": ""}, "promptText is required"),
            ({"promptText": "fox", "ratio": "4:3"}, "ratio must be one of: " + ", ".join(
                ["1920:1080", "1080:1920", "1024:1024", "1280:720", "720:1280", "1536:640", "640:1536"]
            )),
            ({"promptText": "fox", "model": "gen3a_turbo"}, "model must be one of: gen4_image"),
            ({"promptText": "fox", "seed": -1}, "seed must be at least 0"),
            ({"promptText": "fox", "seed": 2147483648}, "seed must be at most 2147483647"),
            ({"promptText": "fox", "style": "anime"}, "style must be one of: "
             "photorealistic, cinematic, artistic, illustration, concept_art"),
        ],
    )
    async def test_rejected_locally(self, tool, fake_client, client_factory, content, error):
        result = await tool(Message(content=content))
        assert result.content == {"success": False, "error": error}
        assert fake_client.calls == []
        assert client_factory.created == []


class TestGenerateImageWithReferences:
    @pytest.fixture
    def tool(self, provider):
        return GenerateImageWithReferences(client_provider=provider)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 2, 3, 4])
    async def test_accepts_one_to_four_references(self, tool, fake_client, count):
        references = [{"uri": f"https://example.com/{i}.jpg", "tag": f"ref{i}"} for i in range(count)]
        result = await tool(Message(content={"promptText": "@ref0 on a beach", "referenceImages": references}))

        assert result.get("success") is True
        assert result.get("imageUrl") == "https://cdn.example/img1.png"
        assert result.get("referenceImages") == references
        assert fake_client.calls[0][1]["reference_images"] == references

    @pytest.mark.asyncio
    async def test_tag_is_optional(self, tool, fake_client):
        references = [{"uri": "data:image/png;base64,AAAA"}]
        result = await tool(Message(content={"promptText": "a cat", "referenceImages": references}))
        assert result.get("success") is True
        assert fake_client.calls[0][1]["reference_images"] == [{"uri": "data:image/png;base64,AAAA"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "references, error",
        [
            (None, "referenceImages must be a non-empty array"),
            ([], "referenceImages must be a non-empty array"),
            ("https://example.com/cat.jpg", "referenceImages must be a non-empty array"),
            ([{"tag": "cat"}], "Reference image at index 0 must have a 'uri' property"),
            (
                [{"uri": "https://example.com/a.jpg"}, {"uri": ""}],
                "Reference image at index 1 must have a 'uri' property",
            ),
            ([{"uri": f"https://example.com/{i}.jpg"} for i in range(5)], "referenceImages must contain at most 4 items"),
        ],
    )
    async def test_reference_validation(self, tool, fake_client, references, error):
        content = {"promptText": "@cat sitting on @chair"}
        if references is not None:
            content["referenceImages"] = references
        result = await tool(Message(content=content))

        assert result.content == {"success": False, "error": error}
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_prompt_checked_first(self, tool):
        result = await tool(Message(content={"referenceImages": []}))
        assert result.get("error") == "promptText is required"

    @pytest.mark.asyncio
    async def test_task_failed(self, tool, fake_client):
        fake_client.fail_next_task()
        result = await tool(
            Message(content={"promptText": "a cat", "referenceImages": [{"uri": "https://example.com/cat.jpg"}]})
        )
        assert result.get("error") == "Image generation task failed"
        assert result.get("taskId") == "task-1"

    @pytest.mark.asyncio
    async def test_vendor_error(self, tool, fake_client):
        fake_client.raise_on_create("connection reset")
        result = await tool(
            Message(content={"promptText": "a cat", "referenceImages": [{"uri": "https://example.com/cat.jpg"}]})
        )
        assert result.content == {
            "success": False,
            "error": "An error occurred while generating the image with references",
            "message": "connection reset",
        }
