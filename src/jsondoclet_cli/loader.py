"""Type model loading for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError as PydanticValidationError

from jsondoclet_cli.errors import (
    handle_file_not_found,
    handle_validation_error,
    handle_yaml_error,
)

if TYPE_CHECKING:
    from jsondoclet import TypeModel


def load_type_model(file_path: str) -> TypeModel:
    """Load a type model file, turning loader failures into CLIErrors.

    Args:
        file_path: Path to the type model YAML.

    Returns:
        Validated TypeModel.

    Raises:
        CLIError: Exit code 2 if the file is missing, 1 if it is not
            valid YAML or not a valid type model.
    """
    # Import here to avoid heavy imports at CLI startup
    from jsondoclet import TypeModel

    path = Path(file_path)
    try:
        return TypeModel.from_yaml(path)
    except FileNotFoundError:
        handle_file_not_found(file_path)
    except yaml.YAMLError as e:
        handle_yaml_error(e, file_path)
    except PydanticValidationError as e:
        handle_validation_error(e, file_path)
