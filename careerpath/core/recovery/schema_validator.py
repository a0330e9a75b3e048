"""
SchemaValidator - Backfill a parsed object against a TargetSchema.

The parsed object has unknown shape. The validator walks the declared
fields, replaces anything missing or of the wrong kind with the field's
default, and drops array entries that lack a required subfield. Dropped
entries are never patched with guessed values. The result always satisfies
the schema structurally, so the web client can render it without guards.
"""
import copy
import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from careerpath.core.models.recovery import ValidationOutcome
from careerpath.core.models.schema import FieldKind, FieldSpec, Subfield, TargetSchema

logger = logging.getLogger(__name__)

_NUMERIC_NOISE_RE = re.compile(r"[,\s$€£₹]")
_WHITESPACE_RE = re.compile(r"\s+")


def is_number(value: Any) -> bool:
    """True for int/float (not bool) and for numeric strings like '$120,000'."""
    if isinstance(value, bool):
        return False
    # ints of any size are valid JSON numbers; only floats can be nan/inf
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        cleaned = _NUMERIC_NOISE_RE.sub("", value)
        if not cleaned:
            return False
        try:
            return math.isfinite(float(cleaned))
        except ValueError:
            return False
    return False


def _has_value(value: Any) -> bool:
    return value is not None and value != "" and value != [] and value != {}


_KIND_CHECKS = {
    "string": lambda v: isinstance(v, str) and bool(v.strip()),
    "number": is_number,
    "boolean": lambda v: isinstance(v, bool),
    "list": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
    "any": _has_value,
}


def satisfies(entry: Dict[str, Any], subfield: Subfield) -> bool:
    """Whether any alternative name of subfield holds a value of its kind."""
    check = _KIND_CHECKS[subfield.kind]
    return any(check(entry.get(name)) for name in subfield.names)


# --- field post-processors ----------------------------------------------------

def clean_text(value: Any) -> str:
    """Unescape literal \\n and \\" sequences, collapse whitespace, trim."""
    if not isinstance(value, str):
        value = str(value)
    value = value.replace("\\n", "\n").replace('\\"', '"')
    return _WHITESPACE_RE.sub(" ", value).strip()


def flatten_names(values: Any) -> Any:
    """
    Reduce role descriptors to plain strings.

    Objects become their name/title/role, falling back to compact JSON;
    other scalars become str(); None entries are dropped.
    """
    if not isinstance(values, list):
        return values

    flattened = []
    for item in values:
        if item is None:
            continue
        if isinstance(item, str):
            flattened.append(item)
        elif isinstance(item, dict):
            label = item.get("name") or item.get("title") or item.get("role")
            flattened.append(str(label) if label else json.dumps(item, sort_keys=True))
        else:
            flattened.append(str(item))
    return flattened


@dataclass
class _Context:
    backfilled: List[str] = field(default_factory=list)
    missing_required: List[str] = field(default_factory=list)
    dropped: int = 0


class SchemaValidator:
    """
    Structural validation with backfill.

    Usage:
        outcome = SchemaValidator().validate(parsed, schema)
        render(outcome.data)
    """

    def validate(self, data: Any, schema: TargetSchema) -> ValidationOutcome:
        """
        Validate and backfill data against schema. Never raises.

        Args:
            data: Parsed object of unknown shape (not mutated)
            schema: Expected shape

        Returns:
            ValidationOutcome with the backfilled copy and change records
        """
        if isinstance(data, dict):
            result = copy.deepcopy(data)
        else:
            logger.warning(f"{schema.name}: expected an object, got {type(data).__name__}; using defaults")
            result = {}

        ctx = _Context()
        self._validate_fields(result, schema.fields, "", ctx)

        if ctx.backfilled:
            logger.info(f"{schema.name}: backfilled {len(ctx.backfilled)} field(s): "
                        f"{', '.join(ctx.backfilled)}")
        if ctx.dropped:
            logger.info(f"{schema.name}: dropped {ctx.dropped} malformed array entries")

        return ValidationOutcome(
            data=result,
            backfilled=ctx.backfilled,
            missing_required=ctx.missing_required,
            dropped=ctx.dropped,
        )

    def _validate_fields(
        self,
        obj: Dict[str, Any],
        specs: Mapping[str, FieldSpec],
        prefix: str,
        ctx: _Context,
    ) -> None:
        for name, spec in specs.items():
            obj[name] = self._validate_value(obj.get(name), spec, f"{prefix}{name}", ctx)

    def _validate_value(self, value: Any, spec: FieldSpec, path: str, ctx: _Context) -> Any:
        if not self._kind_matches(value, spec):
            ctx.backfilled.append(path)
            if spec.required:
                ctx.missing_required.append(path)
            return spec.default_value()

        if spec.post_process is not None:
            value = spec.post_process(value)

        if spec.kind == FieldKind.OBJECT_LIST:
            return self._filter_entries(value, spec, path, ctx)

        if spec.kind == FieldKind.STRING_LIST:
            kept = []
            for item in value:
                if isinstance(item, str):
                    kept.append(item)
                elif is_number(item):
                    kept.append(str(item))
            ctx.dropped += len(value) - len(kept)
            return kept

        if spec.kind == FieldKind.OBJECT and spec.fields:
            self._validate_fields(value, spec.fields, f"{path}.", ctx)

        return value

    def _filter_entries(
        self,
        entries: List[Any],
        spec: FieldSpec,
        path: str,
        ctx: _Context,
    ) -> List[Dict[str, Any]]:
        kept = []
        for entry in entries:
            if not isinstance(entry, dict):
                ctx.dropped += 1
                continue
            unmet = [s.label for s in spec.required_subfields if not satisfies(entry, s)]
            if unmet:
                logger.debug(f"Dropping {path} entry missing {', '.join(unmet)}")
                ctx.dropped += 1
                continue
            if spec.fields:
                self._validate_fields(entry, spec.fields, f"{path}[{len(kept)}].", ctx)
            kept.append(entry)
        return kept

    def _kind_matches(self, value: Any, spec: FieldSpec) -> bool:
        if spec.kind in (FieldKind.STRING_LIST, FieldKind.OBJECT_LIST):
            return isinstance(value, list)
        if spec.kind == FieldKind.OBJECT:
            return isinstance(value, dict)

        if value is None or isinstance(value, (list, dict)):
            return False
        if spec.scalar_type == "string":
            return isinstance(value, str)
        if spec.scalar_type == "number":
            return is_number(value)
        if spec.scalar_type == "boolean":
            return isinstance(value, bool)
        return True
