from setuptools import setup, find_packages
from pathlib import Path

# Read from requirements.txt
with open("requirements.txt", "r") as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith("#")]

repo = Path(__file__).resolve().parent
long_description = (repo / "README.md").read_text(encoding="utf-8")

setup(
    name="runway-tools",
    version="0.1.0",
    packages=find_packages(include=["runway_tools", "runway_tools.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23", "httpx>=0.23"],
    },
    description="""
    Runway generative media operations (image and video generation, upscaling and
    task management) exposed as tools for LLM orchestration hosts.
    """,
    long_description=long_description,
    license="MIT",
    python_requires=">=3.10",
    keywords="runway, tools, function calling, image generation, video generation",
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
