[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lidarview"
version = "0.1.0"
description = "Velodyne HDL-32 packet decoding, pcap replay and the scene maths of simple 3-D demos"
requires-python = ">=3.10"
dependencies = []
keywords = ["lidar", "velodyne", "hdl-32", "point cloud", "pcap", "visualization"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lidarview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
