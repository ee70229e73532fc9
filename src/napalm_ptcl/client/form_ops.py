"""Read-merge-submit: the protocol every PTCL settings write follows.

The console's CGI handlers treat a POST as the complete new state of the
form, so a write that only sent the changed fields would reset everything
else.  Each write therefore:

1. fetches the form page and harvests every field the browser would send;
2. overlays the form defaults (missing fields only), the caller's changes
   and the operation's fixed flags;
3. validates the caller's values (inside *build*);
4. posts the complete field set to the form action.

There is no read-back after the POST.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from napalm_ptcl.client.errors import (
    RouterParseError,
    RouterResponseError,
    SubmissionError,
    TransportError,
    ValidationError,
)
from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.model.result import OperationResult, WriteStage
from napalm_ptcl.parser.forms import FormSchema, field_values, harvest_form, merge_form_fields
from napalm_ptcl.utils.form_diff import diff_form_fields, render_changes

logger = logging.getLogger(__name__)

DeltaBuilder = Callable[[Mapping[str, str]], Mapping[str, str]]


def read_merge_submit(
    fetcher: PageFetcher,
    form: FormSchema,
    build: DeltaBuilder,
    *,
    fixed: Mapping[str, str] | None = None,
    success_message: str,
    dry_run: bool = False,
) -> OperationResult:
    """Apply one settings change through *form*.

    Args:
        fetcher: Page fetcher bound to the session.
        form: Form to read and post.
        build: Called with the harvested fields; returns the field delta.
            Raises :exc:`.ValidationError` to reject the caller's values.
        fixed: Fields this operation always sends (buttons, action flags).
        success_message: Message of the successful result.
        dry_run: Stop after validation and report the planned changes.

    Returns:
        The :class:`.OperationResult`.  Failures before the POST leave the
        device untouched; a failed POST carries a :exc:`.SubmissionError`
        whose ``sent`` flag says whether the device may have applied it.

    Raises:
        SessionExpiredError: At any stage; never converted into a result.
    """
    stage = WriteStage.FETCHING_CURRENT
    logger.debug("Write via %s: %s", form.page, stage.value)
    try:
        current = harvest_form(fetcher.fetch(form.page), form)
    except TransportError as exc:
        return OperationResult.failed(f"Failed to read current settings: {exc}", stage, exc)
    except RouterParseError as exc:
        return OperationResult.failed(str(exc), stage, exc)

    stage = WriteStage.VALIDATING
    try:
        delta = build(field_values(current))
    except ValidationError as exc:
        logger.debug("Rejected %s change: %s", exc.field, exc)
        return OperationResult.failed(str(exc), stage, exc)

    merged = merge_form_fields(current, form.defaults, delta, fixed or {})
    changes = diff_form_fields(field_values(current), field_values(merged))
    logger.debug("Planned changes for %s:\n%s", form.action, render_changes(changes))
    if dry_run:
        return OperationResult(
            success=True,
            message=f"Dry run: {len(changes)} field(s) would change",
            stage=WriteStage.DONE,
            changes=changes,
        )

    stage = WriteStage.SUBMITTING
    try:
        fetcher.submit(form.action, merged)
    except TransportError as exc:
        sent = isinstance(exc, RouterResponseError) or getattr(exc, "sent", False)
        err = SubmissionError(path=form.action, cause=exc, sent=sent)
        return OperationResult.failed(str(err), stage, err, changes)

    logger.info("Applied %d field change(s) via %s", len(changes), form.action)
    return OperationResult(
        success=True,
        message=success_message,
        stage=WriteStage.DONE,
        changes=changes,
    )
