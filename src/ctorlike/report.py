"""Report generation for ctorlike."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .analysis import FinderResult, PseudoConstructor, Rejection
from .config import AnalyzerConfig

REPORT_SCHEMA_VERSION = 1


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def result_to_dict(
    result: FinderResult, config: AnalyzerConfig | None = None
) -> dict[str, Any]:
    """
    Convert a FinderResult to a dictionary for JSON serialization.

    Args:
        result: The analysis result.
        config: Config used for the run (for the annotation name in messages).

    Returns:
        Dictionary representation.
    """
    annotation = (config or AnalyzerConfig()).annotation_simple_name
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "generated_at": _utc_now(),
        "module": result.module.name,
        "constructors": [
            {
                "target": str(target),
                "functions": [_constructor_to_dict(pc) for pc in constructors],
            }
            for target, constructors in result.constructors.items()
            if constructors
        ],
        "rejected": [_rejection_to_dict(r, annotation) for r in result.rejected],
    }


def _constructor_to_dict(pc: PseudoConstructor) -> dict[str, Any]:
    """Convert an accepted PseudoConstructor to a dictionary."""
    return {
        "ref": str(pc.function.ref),
        "name": pc.function.name,
        "helper": str(pc.helper) if pc.helper is not None else None,
        "pattern": pc.pattern,
        "source_sets": sorted(pc.function.source_sets),
        "generics": list(pc.function.generics),
    }


def _rejection_to_dict(rejection: Rejection, annotation: str) -> dict[str, Any]:
    """Convert a Rejection to a dictionary."""
    return {
        "ref": str(rejection.function.ref),
        "name": rejection.function.name,
        "reason": rejection.reason.name,
        "message": rejection.reason.message_for_logging(rejection.function, annotation),
        "source_sets": sorted(rejection.function.source_sets),
    }


def write_report(
    result: FinderResult, path: str | Path, config: AnalyzerConfig | None = None
) -> None:
    """
    Write a JSON report.

    Args:
        result: The analysis result.
        path: Path to write the document.
        config: Config used for the run.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = result_to_dict(result, config)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def write_markdown_report(result: FinderResult, path: str | Path) -> None:
    """
    Write a human-readable markdown summary.

    Args:
        result: The analysis result.
        path: Path to write the document.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    accepted = [pcs for pcs in result.constructors.values() if pcs]
    accepted_count = sum(len(pcs) for pcs in accepted)

    lines = [
        "# Pseudo-constructor Report",
        "",
        f"**Module:** `{result.module.name}`",
        f"**Generated:** {_utc_now()}",
        "",
        "## Summary",
        "",
        f"- **Accepted:** {accepted_count}",
        f"- **Rejected:** {len(result.rejected)}",
        "",
    ]

    if accepted:
        lines.extend(["## Constructors", ""])
        for target, constructors in result.constructors.items():
            if not constructors:
                continue
            classlike = result.module.find_classlike(target)
            kind = f" ({classlike.kind.value})" if classlike is not None else ""
            lines.append(f"### `{target.qualified_name}`{kind}")
            lines.append("")
            for pc in constructors:
                helper = f" via `{pc.helper.qualified_name}`" if pc.helper else ""
                lines.append(f"- `{pc.function.ref.qualified_name}` ({pc.pattern}){helper}")
            lines.append("")

    if result.rejected:
        lines.extend(["## Rejected", ""])
        for rejection in result.rejected:
            lines.append(
                f"- `{rejection.function.ref.qualified_name}`: "
                f"{rejection.reason.name} ({rejection.reason.message})"
            )
        lines.append("")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
