"""FastAPI service exposing the pipeline board to the browser UI."""
