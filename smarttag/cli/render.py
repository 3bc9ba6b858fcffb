"""Console rendering of plans and results."""

from __future__ import annotations

from smarttag.output.console import ConsoleProtocol, Style
from smarttag.release.model import PreparedRelease, SmartReleaseResult, TagReleaseResult
from smarttag.release.strategy import CreateRelease, FreezeStatic, MoveSmart
from smarttag.release.tags import TagInventory


def render_inventory(console: ConsoleProtocol, inventory: TagInventory) -> None:
    console.header("Releases")
    if not inventory.releases:
        console.print("(none)", Style.DIM)
    for r in inventory.releases:
        console.print(r.name)

    console.header("Pre-releases")
    if not inventory.prereleases:
        console.print("(none)", Style.DIM)
    for r in inventory.prereleases:
        console.print(r.name)

    console.header("Moving tags")
    if not inventory.moving:
        console.print("(none)", Style.DIM)
    for name in inventory.moving:
        console.print(name)

    if inventory.other:
        console.header("Other tags")
        for name in inventory.other:
            console.print(name, Style.DIM)


def render_plan(console: ConsoleProtocol, prepared: PreparedRelease, *, target_ref: str) -> None:
    plan = prepared.plan
    console.header(f"Plan: {prepared.release_tag}")
    if plan is None:
        console.info("pre-release: moving tags are left untouched")
    else:
        baseline = plan.baseline.name if plan.baseline is not None else "none"
        console.print(f"bump: {plan.bump} (from {baseline})", Style.DIM)

    for warning in prepared.warnings:
        console.warning(warning)

    creates = plan.smart_tags_to_create if plan is not None else ()
    for mutation in prepared.mutations(target_ref=target_ref):
        match mutation:
            case CreateRelease(name=name, target_ref=ref):
                console.print(f"create  {name} -> {ref}")
            case MoveSmart(name=name):
                verb = "create" if mutation in creates else "move"
                console.print(f"{verb:<7} {name} -> {mutation.target_ref}")
            case FreezeStatic(name=name):
                console.print(f"freeze  {name}", Style.DIM)


def render_tag_result(console: ConsoleProtocol, result: TagReleaseResult) -> None:
    for name in result.created:
        console.print(f"created {name}")
    for moved in result.moved:
        console.print(f"moved   {moved.name} ({moved.previous[:8]} -> {moved.new})")
    for name in result.frozen:
        console.print(f"frozen  {name}", Style.DIM)

    if result.failure is None:
        pushed = "pushed" if result.pushed else "not pushed"
        console.success(f"{result.version} tagged ({pushed}, {result.duration_seconds:.1f}s)")
        return

    failure = result.failure
    console.error(f"{failure.step} failed at {failure.tag}: {failure.message}")
    if result.touched:
        console.print("tags already written: " + ", ".join(result.touched), Style.DIM)


def render_smart_result(console: ConsoleProtocol, result: SmartReleaseResult) -> None:
    if result.tags is not None:
        render_tag_result(console, result.tags)

    if result.status == "success":
        url = result.release.url if result.release is not None else ""
        console.success(f"{result.version} published {url}".rstrip())
        return

    if result.status == "partial":
        console.warning(f"{result.version}: tags applied but release not published")
    else:
        detail = result.error.pretty() if result.error is not None else "unknown error"
        console.error(f"{result.version}: {result.failed_step} failed: {detail}")

    rollback = result.rollback
    if rollback.draft_deleted is True:
        console.print("draft release deleted", Style.DIM)
    if rollback.tags_to_inspect:
        console.print("inspect tags: " + ", ".join(rollback.tags_to_inspect), Style.DIM)
    if rollback.release_to_inspect is not None:
        console.print(f"inspect release: {rollback.release_to_inspect}", Style.DIM)
