from pathlib import Path

import pytest

from bvh_sdk_python.loader.bvh_parser import parse_bvh_text
from bvh_sdk_python.loader.types import BvhMotion

SAMPLES_DIR = Path(__file__).parent / "samples"


@pytest.fixture
def sample_path() -> Path:
    path = SAMPLES_DIR / "two_legs.bvh"
    assert path.exists(), f"Sample BVH not found: {path}"
    return path


@pytest.fixture
def sample_text(sample_path) -> str:
    return sample_path.read_text()


@pytest.fixture
def parsed_sample(sample_text) -> BvhMotion:
    """Parse the multi-joint sample file."""
    return parse_bvh_text(sample_text)


@pytest.fixture
def single_joint_text() -> str:
    return "\n".join([
        "HIERARCHY",
        "ROOT hip",
        "{",
        "OFFSET 0 0 0",
        "CHANNELS 3 Xrotation Yrotation Zrotation",
        "End Site",
        "{",
        "OFFSET 0 0 0",
        "}",
        "}",
        "MOTION",
        "Frames: 1",
        "Frame Time: 0.0333333",
        "90 0 0",
    ])
