import marimo

__generated_with = "0.10.12"
app = marimo.App(width="medium", app_title="Topic Notes")


# ---------------------------------------------------------------------------
# Bootstrap: backend, store, reactive state
# ---------------------------------------------------------------------------


@app.cell
def _():
    import marimo as mo

    return (mo,)


@app.cell
async def _():
    import os
    from pathlib import Path

    from topicnotes.db import NotesDB
    from topicnotes.errors import MutationDeclined, SyncError, TopicUnchanged
    from topicnotes.parser import load_notes_file
    from topicnotes.store import NoteStore
    from topicnotes.sync.http import NotesApiClient
    from topicnotes.sync.memory import InMemoryBackend

    if os.getenv("NOTES_API_URL"):
        backend = NotesApiClient()
    else:
        seed = Path(__file__).parent / "sample_notes.yaml"
        backend = InMemoryBackend(load_notes_file(seed))

    store = NoteStore(backend)
    await store.load()

    notes_db = NotesDB(store.notes)
    store.subscribe(lambda s: notes_db.refresh(s.notes))
    return MutationDeclined, SyncError, TopicUnchanged, notes_db, store


@app.cell
def _(mo, store):
    get_version, set_version = mo.state(0)
    get_error, set_error = mo.state("")

    def bump(_=None):
        set_version(lambda v: v + 1)

    store.subscribe(bump)
    return bump, get_error, get_version, set_error


# ---------------------------------------------------------------------------
# Header: search + view switch
# ---------------------------------------------------------------------------


@app.cell
def _(mo):
    search = mo.ui.text(placeholder="Search notes…", label="", full_width=True)
    view = mo.ui.radio(options=["favorites", "topics"], value="favorites", inline=True)
    mo.vstack([search, view])
    return search, view


@app.cell
def _(get_error, mo):
    mo.callout(mo.md(get_error()), kind="danger") if get_error() else mo.md("")
    return


# ---------------------------------------------------------------------------
# Topic navigation
# ---------------------------------------------------------------------------


@app.cell
def _(bump, get_version, mo, store):
    get_version()
    nav = store.navigation

    def _enter(node):
        nav.enter(node)
        bump()

    def _back():
        nav.back()
        bump()

    def _label(node):
        subs = len(node.children)
        label = f"{node.name} · {node.count} {'note' if node.count == 1 else 'notes'}"
        if subs:
            label += f" · {subs} {'subtopic' if subs == 1 else 'subtopics'}"
        return label

    topic_buttons = [
        mo.ui.button(label=_label(n), on_click=lambda _, n=n: _enter(n), kind="neutral", full_width=True)
        for n in nav.topics
    ]
    back_button = mo.ui.button(label=f"← {nav.truncated_path}", on_click=lambda _: _back(), kind="ghost")

    _items = [] if nav.at_root else [back_button]
    if topic_buttons:
        _items.append(mo.md("### Topics" if nav.at_root else "### Subtopics"))
    topics_panel = mo.vstack(_items + topic_buttons, gap="4px")
    return (topics_panel,)


# ---------------------------------------------------------------------------
# Note list
# ---------------------------------------------------------------------------


@app.cell
def _(get_version, mo, search, store, view):
    from topicnotes.preview import format_file_size

    get_version()
    query = search.value.strip()
    selected_topic = store.navigation.path or None

    if query or (view.value == "topics" and selected_topic):
        notes = store.search(query, topic=selected_topic if not query else None)
        empty = "_No notes found. Try adjusting your search or filter._"
    elif view.value == "favorites":
        notes = store.favorites()
        empty = "_No favorite notes yet._"
    else:
        notes = []
        empty = ""

    def _card(note):
        star = "★ " if note.is_favorite else ""
        files = "".join(f"\n- 📎 {f.name} ({format_file_size(f.size)})" for f in note.files)
        link = f"\n\n[{note.link}]({note.link})" if note.link else ""
        return mo.md(
            f"**{star}{note.title}**  \n`{note.topic}` · {note.date.isoformat()}\n\n{note.content}{link}{files}"
        )

    notes_panel = mo.vstack([_card(n) for n in notes]) if notes else mo.md(empty)
    return (notes_panel,)


# ---------------------------------------------------------------------------
# Topic rename / delete
# ---------------------------------------------------------------------------


@app.cell
def _(get_version, mo, store):
    get_version()
    current = store.navigation.path
    rename_form = mo.ui.text(value=current.rpartition("/")[2], label="Rename topic").form(
        submit_button_label="Save"
    )
    delete_form = mo.ui.checkbox(
        label=f'Delete "{current}" and all notes in it (cannot be undone)'
    ).form(submit_button_label="Delete")
    topic_actions = mo.vstack([rename_form, delete_form]) if current else mo.md("")
    return delete_form, rename_form, topic_actions


@app.cell
async def _(MutationDeclined, SyncError, TopicUnchanged, rename_form, set_error, store):
    if rename_form.value is not None and store.navigation.path:
        try:
            await store.rename_topic(store.navigation.path, rename_form.value)
            set_error("")
        except TopicUnchanged:
            set_error("")
        except (MutationDeclined, SyncError) as exc:
            set_error(f"Failed to rename topic: {exc}")
    return


@app.cell
async def _(SyncError, delete_form, set_error, store):
    if delete_form.value and store.navigation.path:
        try:
            await store.delete_topic(store.navigation.path)
            set_error("")
        except SyncError as exc:
            set_error(f"Failed to delete topic: {exc}")
    return


# ---------------------------------------------------------------------------
# New note
# ---------------------------------------------------------------------------


@app.cell
def _(mo):
    note_form = (
        mo.md(
            """
            **New note**

            {title}

            {topic}

            {content}

            {link}
            """
        )
        .batch(
            title=mo.ui.text(label="Title"),
            topic=mo.ui.text(label="Topic (e.g. Work/Projects)"),
            content=mo.ui.text_area(label="Content"),
            link=mo.ui.text(label="Link"),
        )
        .form(submit_button_label="Add note")
    )
    return (note_form,)


@app.cell
async def _(MutationDeclined, SyncError, note_form, set_error, store):
    from topicnotes.preview import fetch_video_thumbnail

    if note_form.value is not None:
        draft = note_form.value
        try:
            thumbnail = await fetch_video_thumbnail(draft["link"])
            await store.create_note(
                draft["title"],
                draft["content"],
                draft["topic"],
                link=draft["link"],
                show_preview=thumbnail is not None,
                image=thumbnail,
            )
            set_error("")
        except (MutationDeclined, SyncError) as exc:
            set_error(f"Failed to create note: {exc}")
    return


# ---------------------------------------------------------------------------
# Topic map
# ---------------------------------------------------------------------------


@app.cell
def _(get_version, mo, store):
    from topicnotes.graph import build_topic_graph_spec

    get_version()
    if len(store.forest):
        chart = build_topic_graph_spec(
            store.forest, highlight=store.navigation.path or None, width=720, height=480
        )
        graph_panel = mo.ui.altair_chart(chart)
    else:
        graph_panel = mo.md("_No topics yet._")
    return (graph_panel,)


# ---------------------------------------------------------------------------
# Table view (NotesDB)
# ---------------------------------------------------------------------------


@app.cell
def _(get_version, mo, notes_db, search, store, view):
    get_version()
    table_df = notes_db.table_view(
        topic=store.navigation.path or None,
        search=search.value.strip() or None,
        favorites_only=view.value == "favorites",
    )
    table_panel = mo.vstack(
        [
            mo.ui.table(table_df),
            mo.accordion({"Notes per topic": mo.ui.table(notes_db.topic_counts())}),
        ]
    )
    return (table_panel,)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@app.cell
def _(graph_panel, mo, note_form, notes_panel, table_panel, topic_actions, topics_panel, view):
    main = (
        mo.vstack([topics_panel, topic_actions, notes_panel])
        if view.value == "topics"
        else notes_panel
    )
    tabs = mo.ui.tabs({"Notes": main, "Topic map": graph_panel, "Table": table_panel})
    mo.vstack([tabs, mo.divider(), note_form])
    return


if __name__ == "__main__":
    app.run()
