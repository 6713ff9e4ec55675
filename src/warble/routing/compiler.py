"""Route pattern compiler.

Turns a pattern string into an ordered tuple of segments plus a
specificity score::

    "deploy {env} --force"        -> [Literal("deploy"), Parameter("env"), Option("force")]
    "round {value:double} --mode {mode}"
    "backup {*files}"
    "tag --label,-l {label}*"     -> repeated option with a short alias
    "exec -- {*command}"          -> everything after ``--`` is positional

A broken pattern raises ``PatternError`` listing every problem found in
it. Compiling a whole table never stops at the first bad pattern (see
``warble.routing.table.compile_routes``).
"""

import logging
import re

from warble.errors import PatternError
from warble.routing.route import CompiledRoute
from warble.routing.segments import END_OF_OPTIONS, Literal, Option, Parameter, Segment

logger = logging.getLogger("warble.routing")

# Specificity weights. The contract is the ordering
# literal > required parameter > optional element > catch-all.
SPECIFICITY_LITERAL = 100
SPECIFICITY_REQUIRED_OPTION = 50
SPECIFICITY_TYPED_PARAMETER = 20
SPECIFICITY_PARAMETER = 10
SPECIFICITY_OPTIONAL_OPTION = 5
SPECIFICITY_OPTIONAL_PARAMETER = 5
SPECIFICITY_CATCH_ALL = 1

_OPTION_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")
_TYPE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


def tokenize(pattern: str) -> list[str]:
    """Split a pattern on whitespace, keeping ``{...}`` groups whole.

    Braces may contain spaces (``{env|Target environment}``). An option
    description (``--dry-run|Preview changes``) keeps the words after it
    up to the next one starting with ``-`` or ``{``.
    """
    tokens: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in pattern:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(depth - 1, 0)
        if ch.isspace() and depth == 0:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return _join_option_descriptions(tokens)


def _join_option_descriptions(tokens: list[str]) -> list[str]:
    joined: list[str] = []
    in_description = False
    for token in tokens:
        if in_description and not token.startswith(("-", "{")):
            joined[-1] = f"{joined[-1]} {token}"
            continue
        in_description = token.startswith("-") and "|" in token
        joined.append(token)
    return joined


def parse_pattern(pattern: str) -> list[Segment]:
    """Parse a pattern into segments.

    Raises ``PatternError`` with every reason found.
    """
    segments, reasons = _parse(pattern)
    if reasons:
        raise PatternError(pattern, reasons)
    return segments


def compile_pattern(
    pattern: str,
    handler: object = None,
    *,
    group_prefix: str | None = None,
    description: str | None = None,
) -> CompiledRoute:
    """Compile one pattern into a ``CompiledRoute``.

    With a *group_prefix* the effective pattern is ``"<prefix> <pattern>"``
    and the prefix is kept on the route for display.
    """
    effective = pattern.strip()
    if group_prefix:
        effective = f"{group_prefix.strip()} {effective}".strip()

    segments = parse_pattern(effective)
    specificity = compute_specificity(segments)
    logger.debug(
        "Compiled %r -> %d segments, specificity %d", effective, len(segments), specificity
    )
    return CompiledRoute(
        pattern=effective,
        segments=tuple(segments),
        specificity=specificity,
        handler=handler,
        group_prefix=group_prefix.strip() if group_prefix else None,
        description=description,
    )


def compute_specificity(segments: list[Segment] | tuple[Segment, ...]) -> int:
    """Score a segment sequence. More required structure scores higher."""
    score = 0
    for segment in segments:
        match segment:
            case Literal():
                score += SPECIFICITY_LITERAL
            case Parameter(is_catch_all=True):
                score += SPECIFICITY_CATCH_ALL
            case Parameter(is_optional=True):
                score += SPECIFICITY_OPTIONAL_PARAMETER
            case Parameter(type_constraint=str()):
                score += SPECIFICITY_TYPED_PARAMETER
            case Parameter():
                score += SPECIFICITY_PARAMETER
            case Option() as option:
                score += (
                    SPECIFICITY_OPTIONAL_OPTION
                    if option.is_flag_optional
                    else SPECIFICITY_REQUIRED_OPTION
                )
                if option.expects_value:
                    if option.parameter_is_optional:
                        score += SPECIFICITY_OPTIONAL_PARAMETER
                    elif option.parameter_type:
                        score += SPECIFICITY_TYPED_PARAMETER
                    else:
                        score += SPECIFICITY_PARAMETER
    return score


def flag_parameter_name(form: str) -> str:
    """Name a boolean flag's value: ``dry-run`` -> ``dry_run``."""
    return form.replace("-", "_")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse(pattern: str) -> tuple[list[Segment], list[str]]:
    reasons: list[str] = []
    segments: list[Segment] = []
    tokens = tokenize(pattern)

    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1

        if token == END_OF_OPTIONS:
            segments.append(Literal(END_OF_OPTIONS))
        elif token.startswith("-"):
            value_token: str | None = None
            if i < len(tokens) and tokens[i].startswith("{"):
                value_token = tokens[i]
                i += 1
            option = _parse_option(token, value_token, reasons)
            if option is not None:
                segments.append(option)
        elif token.startswith("{"):
            parameter = _parse_parameter(token, reasons)
            if parameter is not None:
                segments.append(parameter)
        elif token.startswith("<") and token.endswith(">"):
            reasons.append(
                f"{token} is not a parameter; write {{{token[1:-1]}}} instead of <param>"
            )
        elif "{" in token or "}" in token:
            reasons.append(f"unbalanced braces in {token!r}")
        else:
            segments.append(Literal(token))

    _check_semantics(segments, reasons)
    return segments, reasons


def _parse_parameter(token: str, reasons: list[str]) -> Parameter | None:
    if not token.endswith("}"):
        reasons.append(f"unbalanced braces in {token!r}")
        return None

    inner = token[1:-1]
    description: str | None = None
    if "|" in inner:
        inner, description = inner.split("|", 1)
        description = description.strip() or None
    inner = inner.strip()

    is_catch_all = inner.startswith("*")
    if is_catch_all:
        inner = inner[1:]

    name, has_type, type_part = inner.partition(":")
    is_optional = False
    if name.endswith("?"):
        name = name[:-1]
        is_optional = True

    type_constraint: str | None = None
    if has_type:
        if type_part.endswith("?"):
            type_part = type_part[:-1]
            is_optional = True
        if not _TYPE_NAME.match(type_part):
            reasons.append(f"invalid type constraint {type_part!r} for parameter '{name}'")
        type_constraint = type_part

    if not name.isidentifier():
        reasons.append(f"invalid parameter name {name!r} in {token!r}")
    if is_catch_all and is_optional:
        reasons.append(f"catch-all parameter '{name}' cannot be optional")

    return Parameter(
        name=name,
        type_constraint=type_constraint,
        is_optional=is_optional,
        is_catch_all=is_catch_all,
        description=description,
    )


def _parse_option(token: str, value_token: str | None, reasons: list[str]) -> Option | None:
    body, _, description = token.partition("|")
    description = description.strip() or None
    is_flag_optional = body.endswith("?")
    if is_flag_optional:
        body = body[:-1]

    long_form: str | None = None
    short_form: str | None = None
    if body.startswith("--"):
        long_form, has_alias, alias = body[2:].partition(",")
        if has_alias:
            if alias.startswith("-") and not alias.startswith("--"):
                short_form = alias[1:]
            else:
                reasons.append(f"expected '-x' after ',' in option {token!r}")
    else:
        short_form = body[1:]

    for form in (long_form, short_form):
        if form is not None and not _OPTION_NAME.match(form):
            reasons.append(f"invalid option name {token!r}")
            return None

    primary = long_form or short_form or ""
    if value_token is None:
        return Option(
            long_form=long_form,
            short_form=short_form,
            expects_value=False,
            parameter_name=flag_parameter_name(primary),
            is_optional=True,
            is_flag_optional=is_flag_optional,
            description=description,
        )

    is_repeated = value_token.endswith("}*")
    if is_repeated:
        value_token = value_token[:-1]
    value = _parse_parameter(value_token, reasons)
    if value is None:
        return None
    if value.is_catch_all:
        reasons.append(f"option {token!r} cannot take a catch-all value {{*{value.name}}}")

    return Option(
        long_form=long_form,
        short_form=short_form,
        expects_value=True,
        parameter_name=value.name,
        parameter_type=value.type_constraint,
        parameter_is_optional=value.is_optional,
        is_repeated=is_repeated,
        is_optional=is_flag_optional or is_repeated,
        is_flag_optional=is_flag_optional,
        description=description or value.description,
    )


# ---------------------------------------------------------------------------
# Semantic checks
# ---------------------------------------------------------------------------


def _check_semantics(segments: list[Segment], reasons: list[str]) -> None:
    _check_duplicate_names(segments, reasons)
    _check_optional_before_required(segments, reasons)
    _check_catch_all(segments, reasons)
    _check_option_aliases(segments, reasons)
    _check_end_of_options(segments, reasons)


def _check_duplicate_names(segments: list[Segment], reasons: list[str]) -> None:
    seen: set[str] = set()
    reported: set[str] = set()
    for segment in segments:
        match segment:
            case Parameter(name=name) | Option(parameter_name=str() as name):
                if name in seen and name not in reported:
                    reasons.append(f"duplicate parameter name '{name}'")
                    reported.add(name)
                seen.add(name)


def _check_optional_before_required(segments: list[Segment], reasons: list[str]) -> None:
    optional: Parameter | None = None
    for segment in segments:
        if not isinstance(segment, Parameter) or segment.is_catch_all:
            continue
        if segment.is_optional:
            optional = optional or segment
        elif optional is not None:
            reasons.append(
                f"optional parameter '{optional.name}' cannot precede "
                f"required parameter '{segment.name}'"
            )
            return


def _check_catch_all(segments: list[Segment], reasons: list[str]) -> None:
    catch_alls = [s for s in segments if isinstance(s, Parameter) and s.is_catch_all]
    if not catch_alls:
        return
    if len(catch_alls) > 1:
        names = ", ".join(f"'{p.name}'" for p in catch_alls)
        reasons.append(f"only one catch-all parameter is allowed (found {names})")

    first = catch_alls[0]
    index = segments.index(first)
    for following in segments[index + 1 :]:
        if isinstance(following, Literal | Parameter) and following is not first:
            reasons.append(
                f"catch-all parameter '{first.name}' must be the last positional segment "
                f"(found {following.display()} after it)"
            )
            break

    optional = [s.name for s in segments if isinstance(s, Parameter) and s.is_optional]
    if optional:
        names = ", ".join(f"'{name}'" for name in optional)
        reasons.append(
            f"catch-all parameter '{first.name}' cannot be combined with optional parameters ({names})"
        )


def _check_option_aliases(segments: list[Segment], reasons: list[str]) -> None:
    shorts: set[str] = set()
    longs: set[str] = set()
    for segment in segments:
        if not isinstance(segment, Option):
            continue
        if segment.short_form is not None:
            if segment.short_form in shorts:
                reasons.append(f"duplicate short option alias '-{segment.short_form}'")
            shorts.add(segment.short_form)
        if segment.long_form is not None:
            if segment.long_form in longs:
                reasons.append(f"duplicate option '--{segment.long_form}'")
            longs.add(segment.long_form)


def _check_end_of_options(segments: list[Segment], reasons: list[str]) -> None:
    indexes = [
        i for i, s in enumerate(segments) if isinstance(s, Literal) and s.is_end_of_options
    ]
    if not indexes:
        return
    if len(indexes) > 1:
        reasons.append("end-of-options separator '--' may appear only once")

    after = segments[indexes[0] + 1 :]
    for segment in after:
        if isinstance(segment, Option):
            reasons.append(
                f"option '{segment.primary_token}' cannot follow the end-of-options separator '--'"
            )
    if not any(isinstance(s, Parameter) for s in after):
        reasons.append("end-of-options separator '--' must be followed by a parameter")
