"""topicnotes: note-taking core with a hierarchical topic tree."""

from topicnotes.errors import (
    InvalidNote,
    InvalidTopicName,
    MutationDeclined,
    NoteNotFound,
    NotesError,
    SyncError,
    TopicUnchanged,
)
from topicnotes.mutations import delete_topic, rename_topic
from topicnotes.navigation import NavigationChange, NavigationStack
from topicnotes.note import Note, NoteFile
from topicnotes.store import NoteStore
from topicnotes.topics import TopicForest, TopicNode, build_topic_forest

__all__ = [
    "Note",
    "NoteFile",
    "TopicForest",
    "TopicNode",
    "build_topic_forest",
    "NavigationStack",
    "NavigationChange",
    "rename_topic",
    "delete_topic",
    "NoteStore",
    "NotesError",
    "MutationDeclined",
    "InvalidTopicName",
    "TopicUnchanged",
    "InvalidNote",
    "NoteNotFound",
    "SyncError",
]
