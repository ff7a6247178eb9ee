from pathlib import Path

from pydantic import ValidationError

from gradecube.errors import ParameterError
from gradecube.params.schema import GradingParameters


def load_parameters(path: Path) -> GradingParameters:
    """Load and validate a grading-parameter JSON file. Raises ParameterError on failure.

    Missing fields default to neutral; out-of-range values are clamped.
    """
    try:
        return GradingParameters.model_validate_json(
            path.read_text(encoding="utf-8")
        )
    except ValidationError as e:
        field_errors = "; ".join(
            f"{' -> '.join(str(x) for x in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ParameterError(path, f"Schema validation failed: {field_errors}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParameterError(path, str(e)) from e
