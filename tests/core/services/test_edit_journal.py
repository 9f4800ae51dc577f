import json

from icon_toolkit.core.models.edit_journal import EditJournal


def test_replay_on_fresh_icon_set(editing_service, edit_journal, make_icon_set, hidden_icon_set_data):
    icon_set = make_icon_set(hidden_icon_set_data)
    editing_service.rename_icon(icon_set, "baz", "foo")
    editing_service.remove_icons(icon_set, ["alias1"])
    edited = icon_set.export(validate=False)

    # Journal survives JSON persistence
    restored = EditJournal.deserialize(json.loads(json.dumps(edit_journal.serialize())))
    assert len(restored) == 2

    fresh = make_icon_set(hidden_icon_set_data)
    report = restored.replay_edits(fresh, editing_service)
    assert report == {"applied": 2, "skipped": 0, "errors": []}
    assert fresh.export(validate=False) == edited
    # Replayed edits are not recorded a second time
    assert len(edit_journal) == 2


def test_replay_collects_failures(editing_service, make_icon_set, basic_icon_set_data):
    journal = EditJournal()
    journal.record_edit("rename", {"old_name": "missing", "new_name": "x"})
    journal.record_edit("rename", {"old_name": "bar"})
    journal.record_edit("remove", {"names": "bar"})
    journal.record_edit("explode", {})
    journal.record_edit("remove", {"names": ["bar"]})

    report = journal.replay_edits(make_icon_set(basic_icon_set_data), editing_service)
    assert report["applied"] == 1
    assert report["skipped"] == 4
    assert report["errors"][0].startswith("[0] rename failed")
    assert report["errors"][1].startswith("[1] rename: invalid payload")
    assert report["errors"][3] == "[3] unsupported operation 'explode'"


def test_deserialize_skips_malformed_items():
    journal = EditJournal.deserialize([
        {"operation": "remove", "details": {"names": ["a"]}, "timestamp": 1.0},
        {"operation": "remove", "details": "bad", "timestamp": 1.0},
        "garbage",
    ])
    assert len(journal) == 1
    assert len(EditJournal.deserialize("not a list")) == 0


def test_clear_journal(edit_journal):
    edit_journal.record_edit("remove", {"names": ["a"]})
    edit_journal.clear_journal()
    assert edit_journal.serialize() == []
