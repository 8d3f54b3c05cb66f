"""Reading workflow documents."""

import json
from pathlib import Path
from typing import Any, Dict, Union

import pydantic
import structlog

from flowlint.exceptions import WorkflowFormatError
from .schemas import Workflow

logger = structlog.get_logger()


def parse_workflow(data: Dict[str, Any], source: str = None) -> Workflow:
    """Validate a decoded workflow document."""
    if not isinstance(data, dict):
        raise WorkflowFormatError("Workflow document must be a JSON object", source=source)
    try:
        return Workflow.model_validate(data)
    except pydantic.ValidationError as e:
        raise WorkflowFormatError(f"Invalid workflow document: {e}", source=source) from e


def load_json(path: Union[str, Path]) -> Any:
    """Read a JSON file, raising WorkflowFormatError when it can't be read."""
    path = Path(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise WorkflowFormatError(f"File not found: {path}", source=str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise WorkflowFormatError(f"Cannot read {path}: {e}", source=str(path)) from e
    except json.JSONDecodeError as e:
        raise WorkflowFormatError(f"Invalid JSON in {path}: {e}", source=str(path)) from e


def load_workflow(path: Union[str, Path]) -> Workflow:
    """Load and validate a workflow JSON file."""
    workflow = parse_workflow(load_json(path), source=str(path))
    logger.debug("Loaded workflow", path=str(path), nodes=len(workflow.nodes))
    return workflow
