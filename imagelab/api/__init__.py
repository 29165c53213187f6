"""Interface adapters for ImageLab.

- `http_api`: FastAPI endpoints for the three image operations.
- `cli`: argparse command-line entrypoint.
- `multimodal`: upload preprocessing shared by both adapters.
"""
