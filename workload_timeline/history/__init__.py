"""Edit history and remote collaborator interfaces."""

from .edit_log import EditLog, EditResult, relation_delete_intent
from .gateway import IssueSource, MutationGateway
from .session import TimelineSession

__all__ = ['EditLog', 'EditResult', 'relation_delete_intent', 'IssueSource', 'MutationGateway', 'TimelineSession']
