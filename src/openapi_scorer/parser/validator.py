"""Structural validation of a raw OpenAPI mapping before it is scored.

Only checks the minimal shape the scorer relies on; it is not a full
OpenAPI schema validator.
"""

from pydantic import BaseModel

from .base import HTTP_METHODS


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = []
    warnings: list[str] = []


def validate_spec(spec: dict) -> ValidationResult:
    """Check the document's required fields, paths and components.

    Returns a ValidationResult; ``is_valid`` is False when any error was found.
    """
    errors: list[str] = []
    warnings: list[str] = []

    version = spec.get("openapi")
    if not version:
        errors.append("Missing required field: openapi")
    elif not str(version).startswith("3."):
        errors.append(f"Unsupported OpenAPI version: {version}. Only 3.x is supported.")

    info = spec.get("info")
    if not info:
        errors.append("Missing required field: info")
    elif isinstance(info, dict):
        if not info.get("title"):
            errors.append("Missing required field: info.title")
        if not info.get("version"):
            errors.append("Missing required field: info.version")

    paths = spec.get("paths")
    if paths is None:
        errors.append("Missing required field: paths")
    elif not isinstance(paths, dict):
        errors.append("Field paths must be a mapping")
    else:
        if not paths:
            warnings.append("No paths defined in the specification")
        errors.extend(validate_paths(paths))

    components = spec.get("components")
    if isinstance(components, dict):
        errors.extend(validate_components(components))

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_paths(paths: dict) -> list[str]:
    errors = []
    for path, item in paths.items():
        if not str(path).startswith("/"):
            errors.append(f'Path "{path}" must start with a forward slash')
        if not isinstance(item, dict):
            continue
        for method in HTTP_METHODS:
            operation = item.get(method)
            if operation:
                errors.extend(_validate_operation(path, method, operation))
    return errors


def _validate_operation(path: str, method: str, operation) -> list[str]:
    label = f"{method.upper()} {path}"
    if not isinstance(operation, dict):
        return [f"Operation {label} must be a mapping"]

    errors = []
    if operation.get("responses") is None:
        errors.append(f'Operation {label} is missing required "responses" field')
    if "parameters" in operation and not isinstance(operation["parameters"], list):
        errors.append(f"Operation {label} has invalid parameters format (must be array)")
    return errors


def validate_components(components: dict) -> list[str]:
    errors = []
    schemas = components.get("schemas")
    for name, schema in (schemas.items() if isinstance(schemas, dict) else ()):
        if not isinstance(schema, dict):
            errors.append(f'Invalid schema definition for "{name}"')

    schemes = components.get("securitySchemes")
    for name, scheme in (schemes.items() if isinstance(schemes, dict) else ()):
        if not isinstance(scheme, dict):
            errors.append(f'Invalid security scheme definition for "{name}"')
        elif not scheme.get("type"):
            errors.append(f'Security scheme "{name}" is missing required "type" field')
    return errors
