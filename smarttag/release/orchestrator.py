"""Release orchestration: validate, plan, tag, and optionally publish.

The flow for a Git-only release is ``prepare_release`` (no side effects)
followed by ``apply_release``. ``create_smart_release`` wraps that in a
hosted release: draft first, tags second, publish last, deleting the draft
if the tags could not be written.

Callers must serialize runs against one repository; nothing here locks.
"""

from __future__ import annotations

import time

from smarttag.core.config import template_error
from smarttag.core.result import Err, Ok, Result
from smarttag.output.console import ConsoleProtocol, Style
from smarttag.release.errors import ReleaseError
from smarttag.release.model import (
    MovedTag,
    PreparedRelease,
    ReleaseOptions,
    RollbackInfo,
    SmartReleaseResult,
    TagFailure,
    TagReleaseResult,
    TagStep,
)
from smarttag.release.ports import ReleaseHost, VersionControlBackend
from smarttag.release.strategy import compute_strategy
from smarttag.release.tags import classify_tags
from smarttag.release.validation import ValidationErrorKind, validate_target
from smarttag.release.version import parse_release_target

__all__ = [
    "apply_release",
    "create_release",
    "create_smart_release",
    "prepare_release",
]

_GRAMMAR_HINT = "Expected: vMAJOR.MINOR.PATCH[-alpha|-beta|-rc[.N]]"


def prepare_release(
    target: str,
    *,
    repo: VersionControlBackend,
    options: ReleaseOptions,
) -> Result[PreparedRelease, ReleaseError]:
    """Decide what a release of target would do, without writing anything."""
    parsed = parse_release_target(target)
    if isinstance(parsed, Err):
        return Err(
            ReleaseError(kind="invalid_version", message=parsed.error.message, hint=_GRAMMAR_HINT)
        )
    version = parsed.value

    problem = template_error(options.tag_message)
    if problem is not None:
        return Err(
            ReleaseError(
                kind="invalid_template",
                message=f"tag message: {problem}",
                hint="Only the {tag} placeholder is available.",
            )
        )

    head = repo.has_commits()
    if isinstance(head, Err):
        return Err(
            ReleaseError(
                kind="not_a_repository",
                message=head.error.message,
                hint="Run inside a git repository with at least one commit.",
            )
        )

    names = repo.list_tags()
    if isinstance(names, Err):
        return Err(ReleaseError(kind="list_tags_failed", message=names.error.message))

    inventory = classify_tags(names.value)
    existing = inventory.records

    validation = validate_target(
        version,
        existing,
        allow_force=options.force,
        max_major_jump=options.max_major_jump,
        max_minor_jump=options.max_minor_jump,
    )
    if not validation.is_valid:
        kind = (
            "duplicate_version"
            if validation.error_kind is ValidationErrorKind.DUPLICATE_VERSION
            else "version_regression"
        )
        return Err(
            ReleaseError(
                kind=kind,
                message=validation.message or f"invalid release target: {version.to_tag()}",
                hint="Pick a higher version, or pass --force to override.",
            )
        )

    # Pre-releases never touch moving tags, so the strategy is not consulted.
    plan = None
    if not version.is_prerelease:
        plan = compute_strategy(version, existing, moving_tags=inventory.moving)

    return Ok(
        PreparedRelease(
            version=version,
            existing=existing,
            validation=validation,
            plan=plan,
        )
    )


def _failed(
    prepared: PreparedRelease,
    *,
    step: TagStep,
    tag: str,
    message: str,
    created: list[str],
    moved: list[MovedTag],
    pushed: list[str],
    started: float,
) -> TagReleaseResult:
    return TagReleaseResult(
        version=prepared.release_tag,
        created=tuple(created),
        moved=tuple(moved),
        pushed=tuple(pushed),
        warnings=prepared.warnings,
        failure=TagFailure(step=step, tag=tag, message=message),
        duration_seconds=time.monotonic() - started,
    )


def apply_release(
    prepared: PreparedRelease,
    *,
    repo: VersionControlBackend,
    console: ConsoleProtocol,
    options: ReleaseOptions,
) -> TagReleaseResult:
    """Write the prepared tags, then push them if requested.

    Stops at the first failing step. Tags already written stay in place and
    are listed in the result; undoing them is left to the caller.
    """
    started = time.monotonic()
    tag = prepared.release_tag
    created: list[str] = []
    moved: list[MovedTag] = []
    pushed: list[str] = []

    for warning in prepared.warnings:
        console.warning(warning)

    # Only a forced run can overwrite an existing release tag.
    overwritten: str | None = None
    if options.force:
        lookup = repo.get_tag_commit(tag)
        if isinstance(lookup, Ok):
            overwritten = lookup.value

    console.print(f"git tag --annotate {tag} {options.target_ref}", Style.DIM)
    result = repo.create_tag(
        tag,
        options.target_ref,
        message=options.tag_message.format(tag=tag),
        force=options.force,
    )
    if isinstance(result, Err):
        return _failed(
            prepared,
            step="create_release",
            tag=tag,
            message=result.error.message,
            created=created,
            moved=moved,
            pushed=pushed,
            started=started,
        )
    if overwritten is None:
        created.append(tag)
    else:
        moved.append(MovedTag(name=tag, previous=overwritten, new=options.target_ref))

    plan = prepared.plan
    moves = plan.smart_moves if plan is not None else ()
    for move in moves:
        previous: str | None = None
        lookup = repo.get_tag_commit(move.name)
        if isinstance(lookup, Ok):
            previous = lookup.value
        elif lookup.error.kind != "not_found":
            return _failed(
                prepared,
                step="move",
                tag=move.name,
                message=lookup.error.message,
                created=created,
                moved=moved,
                pushed=pushed,
                started=started,
            )

        console.print(f"git tag --force {move.name} {move.target_ref}", Style.DIM)
        result = repo.create_tag(move.name, move.target_ref, force=True)
        if isinstance(result, Err):
            return _failed(
                prepared,
                step="move",
                tag=move.name,
                message=result.error.message,
                created=created,
                moved=moved,
                pushed=pushed,
                started=started,
            )

        if previous is None:
            created.append(move.name)
        else:
            moved.append(MovedTag(name=move.name, previous=previous, new=move.target_ref))

    frozen = tuple(f.name for f in plan.tags_to_freeze) if plan is not None else ()
    for name in frozen:
        console.print(f"freeze {name}", Style.DIM)

    if options.push:
        console.print(f"git push {tag}", Style.DIM)
        result = repo.push_tags([tag], force=options.force)
        if isinstance(result, Err):
            return _failed(
                prepared,
                step="push",
                tag=tag,
                message=result.error.message,
                created=created,
                moved=moved,
                pushed=pushed,
                started=started,
            )
        pushed.append(tag)

        # Moving tags rewrite an existing remote ref, so they always need --force.
        names = [m.name for m in moves]
        if names:
            console.print(f"git push --force {' '.join(names)}", Style.DIM)
            result = repo.push_tags(names, force=True)
            if isinstance(result, Err):
                return _failed(
                    prepared,
                    step="push",
                    tag=names[0],
                    message=result.error.message,
                    created=created,
                    moved=moved,
                    pushed=pushed,
                    started=started,
                )
            pushed.extend(names)

    return TagReleaseResult(
        version=tag,
        created=tuple(created),
        moved=tuple(moved),
        frozen=frozen,
        pushed=tuple(pushed),
        warnings=prepared.warnings,
        duration_seconds=time.monotonic() - started,
    )


def create_release(
    target: str,
    *,
    repo: VersionControlBackend,
    console: ConsoleProtocol,
    options: ReleaseOptions,
) -> Result[TagReleaseResult, ReleaseError]:
    """Create the release tag for target and update its moving tags.

    Err means nothing was written (bad version, not a repository, duplicate,
    regression). Ok carries the run's outcome, which may still be a failure
    part-way through; check ``succeeded``.
    """
    prepared = prepare_release(target, repo=repo, options=options)
    if isinstance(prepared, Err):
        return prepared
    return Ok(apply_release(prepared.value, repo=repo, console=console, options=options))


def create_smart_release(
    target: str,
    *,
    repo: VersionControlBackend,
    host: ReleaseHost,
    console: ConsoleProtocol,
    options: ReleaseOptions,
    title: str | None = None,
    notes: str = "",
) -> SmartReleaseResult:
    """Draft a hosted release, write the tags, then publish.

    - draft fails: nothing else happens.
    - tags fail: the draft is deleted; written tags are reported, not removed.
    - publish fails: the draft is kept and the result is "partial".
    """
    started = time.monotonic()

    prepared_r = prepare_release(target, repo=repo, options=options)
    if isinstance(prepared_r, Err):
        return SmartReleaseResult(
            version=target.strip(),
            status="failed",
            failed_step="prepare",
            error=prepared_r.error,
            duration_seconds=time.monotonic() - started,
        )
    prepared = prepared_r.value
    tag = prepared.release_tag

    if not options.push:
        console.warning("tags are not pushed; publishing may create the tag on the host instead")

    console.print(f"gh release create {tag} --draft", Style.DIM)
    draft = host.create_draft_release(
        tag,
        title or f"Release {tag}",
        notes,
        prerelease=prepared.is_prerelease,
    )
    if isinstance(draft, Err):
        console.error(f"draft release failed: {draft.error.message}")
        return SmartReleaseResult(
            version=tag,
            status="failed",
            failed_step="draft",
            error=ReleaseError(kind="host_failed", message=draft.error.message),
            duration_seconds=time.monotonic() - started,
        )
    release = draft.value

    tags = apply_release(prepared, repo=repo, console=console, options=options)
    if not tags.succeeded:
        failure = tags.failure
        console.error(f"tagging failed; deleting draft release {release.release_id}")
        deleted = host.delete_release(release.release_id)
        delete_error = deleted.error.message if isinstance(deleted, Err) else None
        leftover = None if delete_error is None else release.url or release.release_id
        if delete_error is not None:
            console.error(f"draft release could not be deleted: {delete_error}")
        return SmartReleaseResult(
            version=tag,
            status="failed",
            draft_created=True,
            release=release,
            tags=tags,
            failed_step="tags",
            error=ReleaseError(
                kind="tag_failed",
                message=failure.message if failure is not None else "tagging failed",
            ),
            rollback=RollbackInfo(
                draft_deleted=delete_error is None,
                draft_delete_error=delete_error,
                tags_to_inspect=tags.touched,
                release_to_inspect=leftover,
            ),
            duration_seconds=time.monotonic() - started,
        )

    mark_latest = options.mark_latest and not prepared.is_prerelease
    console.print(f"gh release edit {release.release_id} --draft=false", Style.DIM)
    published = host.publish_release(release.release_id, mark_as_latest=mark_latest)
    if isinstance(published, Err):
        console.warning(f"release left as draft: {published.error.message}")
        return SmartReleaseResult(
            version=tag,
            status="partial",
            draft_created=True,
            tags_applied=True,
            release=release,
            tags=tags,
            failed_step="publish",
            error=ReleaseError(kind="host_failed", message=published.error.message),
            rollback=RollbackInfo(release_to_inspect=release.url or release.release_id),
            duration_seconds=time.monotonic() - started,
        )

    return SmartReleaseResult(
        version=tag,
        status="success",
        draft_created=True,
        tags_applied=True,
        published=True,
        release=release,
        tags=tags,
        duration_seconds=time.monotonic() - started,
    )
