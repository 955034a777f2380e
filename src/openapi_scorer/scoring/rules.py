"""Per-criterion detection rules.

Each ``score_*`` function takes a Document and the criterion's weight and
returns a CriterionResult. Rules only read the document; missing optional
fields are reported as issues, never raised.
"""

from collections.abc import Callable

from openapi_scorer.parser.base import Document, PathItem
from openapi_scorer.scoring.models import CriterionResult, Issue, Severity

SCHEMA_TYPES = "Schema & Types"
DOCUMENTATION = "Descriptions & Documentation"
PATHS_OPERATIONS = "Paths & Operations"
RESPONSE_CODES = "Response Codes"
EXAMPLES = "Examples & Samples"
SECURITY = "Security"
BEST_PRACTICES = "Best Practices"

TYPE_KEYWORDS = ("type", "$ref", "allOf", "oneOf", "anyOf")

# Success codes each method is conventionally expected to return.
METHOD_SUCCESS_CODES = {
    "post": (("201", "200"), "POST operation should typically return 201 (Created) or 200",
             "Consider using 201 for resource creation"),
    "delete": (("204", "200"), "DELETE operation should typically return 204 (No Content) or 200",
               "Consider using 204 for successful deletion with no content"),
}


def calculate_deduction(issues: list[Issue]) -> int:
    return sum(issue.penalty for issue in issues)


def _result(criterion: str, weight: float, issues: list[Issue], score: float | None = None) -> CriterionResult:
    if score is None:
        score = max(0, weight - calculate_deduction(issues))
    return CriterionResult(
        criterion=criterion,
        score=score,
        max_score=weight,
        weight=weight,
        weighted_score=score,
        issues=tuple(issues),
    )


# --- Schema & Types ---------------------------------------------------------


def score_schema_types(document: Document, weight: float) -> CriterionResult:
    issues: list[Issue] = []
    schemas = document.components.schemas if document.components else None

    if not schemas:
        issues.append(Issue(
            path="/components/schemas",
            location="components",
            description="No reusable schemas defined in components",
            severity=Severity.MEDIUM,
            suggestion="Define reusable schemas in components/schemas to promote consistency",
            criterion=SCHEMA_TYPES,
        ))
    else:
        for name, schema in schemas.items():
            issues.extend(_check_schema_types(name, schema))

    for path, method, operation in document.iter_operations():
        if operation.request_body is not None and not operation.request_body.has_schema():
            issues.append(Issue(
                path=path,
                operation=method,
                location="requestBody",
                description="Request body lacks proper schema definition",
                severity=Severity.MEDIUM,
                suggestion="Define schema for request body content",
                criterion=SCHEMA_TYPES,
            ))
        for status_code, response in operation.responses.items():
            if not response.has_schema():
                issues.append(Issue(
                    path=path,
                    operation=method,
                    location=f"responses.{status_code}",
                    description=f"Response {status_code} lacks proper schema definition",
                    severity=Severity.MEDIUM,
                    suggestion="Define schema for response content",
                    criterion=SCHEMA_TYPES,
                ))

    return _result(SCHEMA_TYPES, weight, issues)


def _check_schema_types(name: str, schema: object) -> list[Issue]:
    if not isinstance(schema, dict):
        schema = {}
    issues = []
    path = f"/components/schemas/{name}"

    if all(schema.get(key) is None for key in TYPE_KEYWORDS):
        issues.append(Issue(
            path=path,
            location="schema",
            description=f'Schema "{name}" lacks type definition',
            severity=Severity.MEDIUM,
            suggestion="Specify a type (object, string, number, etc.) for the schema",
            criterion=SCHEMA_TYPES,
        ))

    # an empty `properties` or `additionalProperties: {}` still defines the shape
    if (
        schema.get("type") == "object"
        and schema.get("properties") is None
        and schema.get("additionalProperties") in (None, False)
    ):
        issues.append(Issue(
            path=path,
            location="schema",
            description=f'Object schema "{name}" has no defined properties',
            severity=Severity.MEDIUM,
            suggestion="Define properties for object schemas or use additionalProperties",
            criterion=SCHEMA_TYPES,
        ))
    return issues


# --- Descriptions & Documentation ------------------------------------------


def score_documentation(document: Document, weight: float) -> CriterionResult:
    issues: list[Issue] = []

    if not document.info.description:
        issues.append(Issue(
            path="/info",
            location="info.description",
            description="API description is missing",
            severity=Severity.MEDIUM,
            suggestion="Add a comprehensive description of your API in info.description",
            criterion=DOCUMENTATION,
        ))

    for path, method, operation in document.iter_operations():
        if not operation.summary and not operation.description:
            issues.append(Issue(
                path=path,
                operation=method,
                location="operation",
                description="Operation lacks summary and description",
                severity=Severity.MEDIUM,
                suggestion="Add summary and/or description to explain the operation",
                criterion=DOCUMENTATION,
            ))
        for param in operation.parameters:
            if not param.description:
                issues.append(Issue(
                    path=path,
                    operation=method,
                    location=f"parameters.{param.name}",
                    description=f'Parameter "{param.name}" lacks description',
                    severity=Severity.LOW,
                    suggestion="Add description to explain the parameter purpose",
                    criterion=DOCUMENTATION,
                ))

    return _result(DOCUMENTATION, weight, issues)


# --- Paths & Operations -----------------------------------------------------


def score_paths_operations(document: Document, weight: float) -> CriterionResult:
    if not document.paths:
        issue = Issue(
            path="/paths",
            location="paths",
            description="No paths defined",
            severity=Severity.CRITICAL,
            suggestion="Define at least one path in your API specification",
            criterion=PATHS_OPERATIONS,
        )
        return _result(PATHS_OPERATIONS, weight, [issue], score=0)

    issues: list[Issue] = []
    issues.extend(_check_path_naming(document.paths))
    issues.extend(_check_crud_consistency(document.paths))
    issues.extend(_check_overlapping_paths(document.paths))
    return _result(PATHS_OPERATIONS, weight, issues)


def _check_path_naming(paths: dict[str, PathItem]) -> list[Issue]:
    issues = []
    for path in paths:
        if "_" in path:
            issues.append(Issue(
                path=path,
                location="path",
                description="Path uses underscores, consider using hyphens for consistency",
                severity=Severity.LOW,
                suggestion="Use kebab-case (hyphens) instead of snake_case (underscores)",
                criterion=PATHS_OPERATIONS,
            ))
        if path.endswith("/") and path != "/":
            issues.append(Issue(
                path=path,
                location="path",
                description="Path has trailing slash",
                severity=Severity.LOW,
                suggestion="Remove trailing slash from path",
                criterion=PATHS_OPERATIONS,
            ))
    return issues


def resource_name(path: str) -> str | None:
    """Last non-parameter segment of a path, e.g. ``users`` for ``/users/{id}``."""
    segments = [s for s in path.split("/") if s and not s.startswith("{")]
    return segments[-1] if segments else None


def _check_crud_consistency(paths: dict[str, PathItem]) -> list[Issue]:
    resources: dict[str, list[str]] = {}
    for path in paths:
        name = resource_name(path)
        if name is not None:
            resources.setdefault(name, []).append(path)

    issues = []
    for name, resource_paths in resources.items():
        if len(resource_paths) != 1:
            continue
        path = resource_paths[0]
        if len(list(paths[path].operations())) == 1:
            issues.append(Issue(
                path=path,
                location="operations",
                description=f'Resource "{name}" only has one operation',
                severity=Severity.LOW,
                suggestion="Consider implementing full CRUD operations for resources",
                criterion=PATHS_OPERATIONS,
            ))
    return issues


def paths_overlap(first: str, second: str) -> bool:
    """True when both templates can match the same concrete URL.

    Segment counts must be equal, and at each position the segments are equal
    or at least one of them is a ``{parameter}``.
    """
    first_segments = [s for s in first.split("/") if s]
    second_segments = [s for s in second.split("/") if s]
    if len(first_segments) != len(second_segments):
        return False
    return all(
        a == b or a.startswith("{") or b.startswith("{")
        for a, b in zip(first_segments, second_segments)
    )


def _check_overlapping_paths(paths: dict[str, PathItem]) -> list[Issue]:
    keys = list(paths)
    issues = []
    for i, first in enumerate(keys):
        for second in keys[i + 1:]:
            if paths_overlap(first, second):
                issues.append(Issue(
                    path=first,
                    location="path",
                    description=f"Path overlaps with {second}",
                    severity=Severity.MEDIUM,
                    suggestion="Ensure paths are distinct and non-overlapping",
                    criterion=PATHS_OPERATIONS,
                ))
    return issues


# --- Response Codes ---------------------------------------------------------


def score_response_codes(document: Document, weight: float) -> CriterionResult:
    issues: list[Issue] = []

    for path, method, operation in document.iter_operations():
        codes = list(operation.responses)

        if not any(code.startswith("2") or code == "default" for code in codes):
            issues.append(Issue(
                path=path,
                operation=method,
                location="responses",
                description="No success response (2xx) defined",
                severity=Severity.HIGH,
                suggestion="Define at least one 2xx success response",
                criterion=RESPONSE_CODES,
            ))

        if not any(code.startswith(("4", "5")) for code in codes):
            issues.append(Issue(
                path=path,
                operation=method,
                location="responses",
                description="No error responses (4xx/5xx) defined",
                severity=Severity.MEDIUM,
                suggestion="Define appropriate error responses (400, 404, 500, etc.)",
                criterion=RESPONSE_CODES,
            ))

        if method in METHOD_SUCCESS_CODES:
            expected, description, suggestion = METHOD_SUCCESS_CODES[method]
            if not any(code in codes for code in expected):
                issues.append(Issue(
                    path=path,
                    operation=method,
                    location="responses",
                    description=description,
                    severity=Severity.LOW,
                    suggestion=suggestion,
                    criterion=RESPONSE_CODES,
                ))

    return _result(RESPONSE_CODES, weight, issues)


# --- Examples & Samples -----------------------------------------------------


def score_examples(document: Document, weight: float) -> CriterionResult:
    issues: list[Issue] = []

    for path, method, operation in document.iter_operations():
        has_examples = operation.request_body is not None and operation.request_body.has_examples()
        if not has_examples:
            has_examples = any(response.has_examples() for response in operation.responses.values())

        if not has_examples:
            issues.append(Issue(
                path=path,
                operation=method,
                location="examples",
                description="Operation lacks examples",
                severity=Severity.LOW,
                suggestion="Add examples to request/response bodies for better documentation",
                criterion=EXAMPLES,
            ))

    return _result(EXAMPLES, weight, issues)


# --- Security ---------------------------------------------------------------


def score_security(document: Document, weight: float) -> CriterionResult:
    issues: list[Issue] = []
    schemes = document.components.security_schemes if document.components else None

    if not schemes:
        issues.append(Issue(
            path="/components/securitySchemes",
            location="components",
            description="No security schemes defined",
            severity=Severity.HIGH,
            suggestion="Define appropriate security schemes (OAuth2, API Key, etc.)",
            criterion=SECURITY,
        ))

    has_global_security = bool(document.security)
    if not has_global_security:
        issues.append(Issue(
            path="/security",
            location="root",
            description="No global security requirements defined",
            severity=Severity.MEDIUM,
            suggestion="Define global security requirements or ensure operations have individual security",
            criterion=SECURITY,
        ))

        for path, method, operation in document.iter_operations():
            if not operation.security:
                issues.append(Issue(
                    path=path,
                    operation=method,
                    location="security",
                    description="Operation has no security requirements",
                    severity=Severity.MEDIUM,
                    suggestion="Define security requirements for the operation",
                    criterion=SECURITY,
                ))

    return _result(SECURITY, weight, issues)


# --- Best Practices ---------------------------------------------------------


def score_best_practices(document: Document, weight: float) -> CriterionResult:
    issues: list[Issue] = []

    if not document.info.version or document.info.version == "1.0.0":
        issues.append(Issue(
            path="/info/version",
            location="info",
            description="API version should be meaningful, not default",
            severity=Severity.LOW,
            suggestion="Use semantic versioning (e.g., 1.2.3) or date-based versioning",
            criterion=BEST_PRACTICES,
        ))

    if not document.servers:
        issues.append(Issue(
            path="/servers",
            location="root",
            description="No servers defined",
            severity=Severity.MEDIUM,
            suggestion="Define at least one server URL",
            criterion=BEST_PRACTICES,
        ))

    issues.extend(_check_tags_usage(document))

    if document.components is None:
        issues.append(Issue(
            path="/components",
            location="components",
            description="No components defined for reuse",
            severity=Severity.LOW,
            suggestion="Extract common schemas, responses, and parameters to components",
            criterion=BEST_PRACTICES,
        ))

    return _result(BEST_PRACTICES, weight, issues)


def _check_tags_usage(document: Document) -> list[Issue]:
    defined = {tag.name for tag in document.tags or []}
    used: dict[str, None] = {}
    untagged = 0

    for _, _, operation in document.iter_operations():
        if not operation.tags:
            untagged += 1
        for tag in operation.tags:
            used.setdefault(tag, None)

    issues = []
    for tag in used:
        if tag not in defined:
            issues.append(Issue(
                path="/tags",
                location="tags",
                description=f'Tag "{tag}" is used but not defined',
                severity=Severity.LOW,
                suggestion="Define all tags in the tags array with descriptions",
                criterion=BEST_PRACTICES,
            ))

    if untagged > 0:
        issues.append(Issue(
            path="/paths",
            location="operations",
            description=f"{untagged} operations are not tagged",
            severity=Severity.LOW,
            suggestion="Add tags to operations for better organization",
            criterion=BEST_PRACTICES,
        ))
    return issues


Evaluator = Callable[[Document, float], CriterionResult]

# Keyed by ScoringWeights field name.
EVALUATORS: dict[str, Evaluator] = {
    "schema_types": score_schema_types,
    "documentation": score_documentation,
    "paths_operations": score_paths_operations,
    "response_codes": score_response_codes,
    "examples": score_examples,
    "security": score_security,
    "best_practices": score_best_practices,
}
