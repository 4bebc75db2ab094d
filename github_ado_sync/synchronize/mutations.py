"""Builds the ordered work item patch operations for each GitHub issue event."""

from dataclasses import dataclass, field

import structlog

from github_ado_sync.configuration.models import SyncConfig
from github_ado_sync.schemas.github_event import GitHubIssue, GitHubIssueEvent, GitHubUser
from github_ado_sync.schemas.work_item import PatchOperation, TagSet, WorkItem
from github_ado_sync.synchronize.fields import (
    build_assignee,
    build_history_entry,
    build_issue_tags,
    label_tag,
    map_labels_to_tags,
    sanitize_cross_link,
)
from github_ado_sync.synchronize.models import IssueAction
from github_ado_sync.utils.constants import (
    DELETED_RESOLUTION_REASON,
    FIELD_AREA_PATH,
    FIELD_ASSIGNED_TO,
    FIELD_CREATED_BY,
    FIELD_DESCRIPTION,
    FIELD_HISTORY,
    FIELD_ITERATION_PATH,
    FIELD_REPRO_STEPS,
    FIELD_STATE,
    FIELD_TAGS,
    FIELD_TITLE,
    RELATION_HYPERLINK,
    RELATION_PARENT,
)
from github_ado_sync.utils.markup import TextConverter

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass
class MutationSet:
    """Field operations for one event plus the single audit history entry it appends."""

    action: IssueAction
    history: str
    operations: list[PatchOperation] = field(default_factory=list)

    @property
    def requires_existing_work_item(self) -> bool:
        """Every event except issue creation mutates a work item that must already exist."""
        return self.action != IssueAction.OPENED

    def to_patch(self) -> list[PatchOperation]:
        """The operations to submit, history entry last."""
        return [*self.operations, PatchOperation.field("add", FIELD_HISTORY, self.history)]


class MutationContext:
    """Everything a builder reads: the event, the configuration, and the text converter."""

    def __init__(self, event: GitHubIssueEvent, config: SyncConfig, converter: TextConverter) -> None:
        """Initialize the context; the event must carry an issue."""
        if event.issue is None:
            raise ValueError("Work item mutations require an event with an issue")
        self.event = event
        self.config = config
        self.converter = converter

    @property
    def issue(self) -> GitHubIssue:
        """The issue the event concerns."""
        return self.event.issue  # type: ignore[return-value]

    @property
    def repository(self) -> str:
        """Full name of the repository the issue belongs to."""
        if self.event.repository is not None:
            return self.event.repository.full_name
        if self.config.repository:
            return self.config.repository
        raise ValueError("Cannot determine the GitHub repository of the event")

    @property
    def actor(self) -> GitHubUser:
        """The user who triggered the event, falling back to the issue author."""
        return self.event.actor or self.issue.user

    def history(self, action: str, actor: GitHubUser | None = None) -> str:
        return build_history_entry(self.issue, self.repository, action, actor or self.actor)

    def closing_note(self) -> str:
        """Suffix recording when the issue was closed, when GitHub reports it."""
        if self.issue.closed_at is None:
            return ""
        return f" (closed at {self.issue.closed_at.isoformat()})"


def build_create_mutations(context: MutationContext) -> MutationSet:
    """Build the operations for a new work item mirroring the issue.

    New work items start in the default state of their type, so no state is set.
    """
    issue = context.issue
    ado = context.config.ado
    html = context.converter.to_html(issue.body)
    tags = build_issue_tags(context.repository, issue.number, issue.label_names)

    operations = [
        PatchOperation.field("add", FIELD_TITLE, issue.title),
        PatchOperation.field("add", FIELD_DESCRIPTION, html),
        PatchOperation.field("add", FIELD_REPRO_STEPS, html),
        PatchOperation.field("add", FIELD_TAGS, tags.serialize()),
        PatchOperation.relation(RELATION_HYPERLINK, sanitize_cross_link(issue.url)),
    ]
    if ado.parent_url:
        operations.append(PatchOperation.relation(RELATION_PARENT, ado.parent_url))

    assignee = build_assignee(issue, ado.handles, use_default_fallback=True, default_assignee=ado.assigned_to)
    if assignee:
        operations.append(PatchOperation.field("add", FIELD_ASSIGNED_TO, assignee))
    if ado.area_path:
        operations.append(PatchOperation.field("add", FIELD_AREA_PATH, ado.area_path))
    if ado.iteration_path:
        operations.append(PatchOperation.field("add", FIELD_ITERATION_PATH, ado.iteration_path))
    if ado.bypass_rules:
        operations.append(PatchOperation.field("add", FIELD_CREATED_BY, issue.user.login))

    return MutationSet(IssueAction.OPENED, context.history("created"), operations)


def build_state_mutations(context: MutationContext, action: IssueAction) -> MutationSet:
    """Build the state transition for a close, reopen, or delete."""
    state_key = {
        IssueAction.CLOSED: "closed",
        IssueAction.REOPENED: "reopened",
        IssueAction.DELETED: "deleted",
    }[action]
    phrase = {
        IssueAction.CLOSED: "closed",
        IssueAction.REOPENED: "reopened",
        IssueAction.DELETED: "removed",
    }[action]
    ado = context.config.ado

    operations = [PatchOperation.field("add", FIELD_STATE, ado.states[state_key])]
    if action == IssueAction.DELETED:
        operations.append(PatchOperation.field("add", ado.resolution_field, DELETED_RESOLUTION_REASON))

    return MutationSet(action, context.history(phrase) + context.closing_note(), operations)


def build_edit_mutations(context: MutationContext) -> MutationSet:
    """Replace title, description, and repro steps with the issue's current content."""
    issue = context.issue
    html = context.converter.to_html(issue.body)
    operations = [
        PatchOperation.field("replace", FIELD_TITLE, issue.title),
        PatchOperation.field("replace", FIELD_DESCRIPTION, html),
        PatchOperation.field("replace", FIELD_REPRO_STEPS, html),
    ]
    return MutationSet(IssueAction.EDITED, context.history("edited"), operations)


def _label_name(context: MutationContext) -> str:
    if context.event.label is None:
        raise ValueError(f"Event '{context.event.action}' carries no label")
    return context.event.label.name


def _current_tags(context: MutationContext, work_item: WorkItem | None) -> TagSet:
    if work_item is not None:
        return work_item.tags
    return build_issue_tags(context.repository, context.issue.number)


def build_label_mutations(context: MutationContext, work_item: WorkItem | None) -> MutationSet:
    """Append the label's tag to the work item's current tags."""
    name = _label_name(context)
    tags = map_labels_to_tags(_current_tags(context, work_item), [name])
    operations = [PatchOperation.field("replace", FIELD_TAGS, tags.serialize())]
    return MutationSet(IssueAction.LABELED, context.history(f"addition of label '{name}'"), operations)


def build_unlabel_mutations(context: MutationContext, work_item: WorkItem | None) -> MutationSet:
    """Remove the label's tag, in any casing, from the work item's current tags."""
    name = _label_name(context)
    tags = _current_tags(context, work_item)
    tags.discard(label_tag(name), ignore_case=True)
    operations = [PatchOperation.field("replace", FIELD_TAGS, tags.serialize())]
    return MutationSet(IssueAction.UNLABELED, context.history(f"removal of label '{name}'"), operations)


def build_assign_mutations(context: MutationContext) -> MutationSet:
    """Assign the mapped principal, or clear the assignment when none can be resolved."""
    issue = context.issue
    ado = context.config.ado
    assignee = build_assignee(issue, ado.handles, use_default_fallback=False)
    if assignee:
        operation = PatchOperation.field("add", FIELD_ASSIGNED_TO, assignee)
    else:
        operation = PatchOperation.field("remove", FIELD_ASSIGNED_TO)
    login = issue.assignee.login if issue.assignee is not None else None
    return MutationSet(IssueAction.ASSIGNED, context.history(f"assigned to '{login}'"), [operation])


def build_unassign_mutations(context: MutationContext) -> MutationSet:
    """Always clear the assignment."""
    removed = context.event.assignee or context.issue.assignee
    login = removed.login if removed is not None else None
    operations = [PatchOperation.field("remove", FIELD_ASSIGNED_TO)]
    return MutationSet(IssueAction.UNASSIGNED, context.history(f"removal of assignment to '{login}'"), operations)


def build_comment_mutations(context: MutationContext) -> MutationSet:
    """Record the comment in the work item history without touching any field."""
    comment = context.event.comment
    if comment is None:
        raise ValueError("Comment event carries no comment")
    html = context.converter.to_html(comment.body)
    history = (
        context.history("comment added", actor=comment.user)
        + "<br />"
        + f'Comment #<a href="{comment.html_url}" target="_blank">{comment.id}</a>:<br /><br />{html}'
    )
    return MutationSet(IssueAction.COMMENTED, history)


def build_mutation_set(context: MutationContext, work_item: WorkItem | None = None) -> MutationSet | None:
    """Build the mutation set for the event in `context`.

    An issue carrying the exclude label always produces the delete mutation,
    whatever the event. Returns None for actions that are not synchronized.
    """
    if context.issue.has_label(context.config.exclude_label):
        logger.info(
            "Issue carries the exclude label, removing work item",
            issue_number=context.issue.number,
            exclude_label=context.config.exclude_label,
        )
        return build_state_mutations(context, IssueAction.DELETED)

    try:
        action = IssueAction(context.event.action)
    except ValueError:
        logger.info("Event action is not synchronized", action=context.event.action, issue_number=context.issue.number)
        return None
    if context.event.comment is not None and action != IssueAction.COMMENTED:
        logger.info("Comment edits and deletions are not synchronized", action=action.value, issue_number=context.issue.number)
        return None

    if action == IssueAction.OPENED:
        return build_create_mutations(context)
    if action in (IssueAction.CLOSED, IssueAction.REOPENED, IssueAction.DELETED):
        return build_state_mutations(context, action)
    if action == IssueAction.EDITED:
        return build_edit_mutations(context)
    if action == IssueAction.LABELED:
        return build_label_mutations(context, work_item)
    if action == IssueAction.UNLABELED:
        return build_unlabel_mutations(context, work_item)
    if action == IssueAction.ASSIGNED:
        return build_assign_mutations(context)
    if action == IssueAction.UNASSIGNED:
        return build_unassign_mutations(context)
    return build_comment_mutations(context)
