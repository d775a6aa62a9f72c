"""
Session-aware parameter resolution.

For every tool call the resolver decides the effective parameters by
combining the caller's arguments, the session defaults, and the tool's
requirement rules.

Resolution Steps:
    1. Sanitize: drop None and blank-string arguments (they mean "not provided"),
       then rename field-name keys to wire names when a model is given
    2. Contradiction: both keys of an exclusive pair supplied by the caller
       -> MutuallyExclusiveParametersError, before anything else
    3. Prune: for each exclusive pair the caller touched, drop both keys
       from the defaults used for this call
    4. Merge: defaults first, caller arguments on top
    5. Requirements: AllOf/OneOf in declaration order; the first failing
       rule becomes a MissingRequirementError
    6. Schema: validate the merged mapping against the tool's model
       -> SchemaValidationError with one issue per field

Only the first requirement failure is reported per call.

Failures are returned inside a Resolution, never raised. Resolution reads
the session store and never writes to it.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import BaseModel

from xcbridge.errors import (
    MissingRequirementError,
    MutuallyExclusiveParametersError,
    ResolutionError,
    SchemaValidationError,
)
from xcbridge.logging_config import get_logger
from xcbridge.resolve.rules import AllOf, OneOf, RequirementRule, is_present, pairs_from
from xcbridge.schema import to_wire_names, validate_params
from xcbridge.session.store import SessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving one call's parameters.

    Attributes:
        params: Validated model instance (or merged dict when no model
            was given); None on failure
        failure: The resolution failure; None on success
        merged: The merged mapping that was checked
        pruned: Session default keys suppressed by exclusive pairs
    """

    params: Any = None
    failure: ResolutionError | None = None
    merged: dict[str, Any] = field(default_factory=dict)
    pruned: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.failure is None


def sanitize_args(args: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop arguments whose value is None or a blank string."""
    if not args:
        return {}
    return {
        key: value
        for key, value in args.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }


def find_contradiction(
    args: Mapping[str, Any],
    pairs: tuple[tuple[str, str], ...],
) -> list[str] | None:
    """The first exclusive pair whose keys are both present in args, if any."""
    for first, second in pairs:
        if is_present(args, first) and is_present(args, second):
            return [first, second]
    return None


def effective_defaults(
    defaults: Mapping[str, Any],
    args: Mapping[str, Any],
    pairs: tuple[tuple[str, str], ...],
) -> tuple[dict[str, Any], tuple[str, ...]]:
    """
    Session defaults that may take part in this call's merge.

    For each pair where the caller supplied either key, both keys are removed
    from the defaults. Pairs are handled independently.

    Returns:
        (defaults to merge, keys that were dropped)
    """
    effective = dict(defaults)
    pruned: list[str] = []
    for first, second in pairs:
        if is_present(args, first) or is_present(args, second):
            for key in (first, second):
                if key in effective:
                    del effective[key]
                    pruned.append(key)
    return effective, tuple(pruned)


def first_unmet(
    rules: tuple[RequirementRule, ...],
    params: Mapping[str, Any],
) -> tuple[AllOf | OneOf, list[str]] | None:
    """The first AllOf/OneOf rule that fails, with the keys to suggest."""
    for rule in rules:
        if not isinstance(rule, (AllOf, OneOf)):
            continue
        missing = rule.unmet(params)
        if missing:
            return rule, missing
    return None


class ParameterResolver:
    """
    Resolves tool-call parameters against a session store.

    Usage:
        resolver = ParameterResolver(store)
        resolution = resolver.resolve(
            {"scheme": "App"},
            requirements=(OneOf(("projectPath", "workspacePath")),),
            exclusive_pairs=(("projectPath", "workspacePath"),),
            model=BuildParams,
        )
        if resolution.ok:
            run(resolution.params)

    Attributes:
        store: Session defaults to merge under explicit arguments
        session_defaults_enabled: Selects failure wording only
    """

    def __init__(self, store: SessionStore, session_defaults_enabled: bool = True) -> None:
        self.store = store
        self.session_defaults_enabled = session_defaults_enabled

    def resolve(
        self,
        args: Mapping[str, Any] | None,
        requirements: tuple[RequirementRule, ...] = (),
        exclusive_pairs: tuple[tuple[str, str], ...] = (),
        model: type[BaseModel] | None = None,
        tool: str = "",
        use_session_defaults: bool = True,
    ) -> Resolution:
        """
        Produce the effective parameters for one call.

        Args:
            args: Raw caller arguments (may be None or empty)
            requirements: The tool's ordered rule set
            exclusive_pairs: Factory-level exclusive pairs
            model: Pydantic model to validate the merged mapping against
            tool: Tool name, recorded on failures
            use_session_defaults: Merge session defaults (False for tools
                that manage the session themselves)

        Returns:
            Resolution with params on success or failure set
        """
        explicit = sanitize_args(args)
        if model is not None:
            explicit = to_wire_names(explicit, model)
        pairs = pairs_from(requirements, exclusive_pairs)

        conflict = find_contradiction(explicit, pairs)
        if conflict is not None:
            logger.debug("%s: mutually exclusive arguments %s", tool, conflict)
            return Resolution(
                failure=MutuallyExclusiveParametersError(tool=tool, keys=conflict),
                merged=explicit,
            )

        defaults = self.store.get_all() if use_session_defaults else {}
        usable, pruned = effective_defaults(defaults, explicit, pairs)
        if pruned:
            logger.debug("%s: pruned session defaults %s", tool, list(pruned))

        merged = {**usable, **explicit}

        unmet = first_unmet(requirements, merged)
        if unmet is not None:
            rule, missing = unmet
            logger.debug("%s: requirement not met: %s", tool, rule.message)
            return Resolution(
                failure=MissingRequirementError(
                    tool=tool,
                    rule_message=rule.message,
                    missing=missing,
                    session_defaults_enabled=self.session_defaults_enabled,
                ),
                merged=merged,
                pruned=pruned,
            )

        if model is None:
            return Resolution(params=merged, merged=merged, pruned=pruned)

        result = validate_params(model, merged)
        if not result.success:
            logger.debug("%s: schema validation failed (%d issues)", tool, len(result.issues))
            return Resolution(
                failure=SchemaValidationError(tool=tool, issues=result.issues),
                merged=merged,
                pruned=pruned,
            )

        return Resolution(params=result.value, merged=merged, pruned=pruned)
