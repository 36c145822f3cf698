"""Tests for the Script value object and its state transitions."""

from datetime import datetime, timezone

from sieve_store.domain.scripts import NO_SCRIPT_NAME, Script, ScriptSummary, content_size

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestScript:
    """Script: immutable record of one stored sieve script."""

    def test_create_derives_size_from_encoded_content(self):
        script = Script.create("alice", "main", "Hello World")
        assert script.size == 11
        assert not script.active
        assert script.activated_at is None

    def test_size_counts_bytes_not_characters(self):
        assert content_size("héllo") == 6
        assert Script.create("alice", "main", "€").size == 3

    def test_activate_sets_timestamp(self):
        script = Script.create("alice", "main", "x").activate(NOW)
        assert script.active
        assert script.activated_at == NOW

    def test_deactivate_clears_timestamp(self):
        script = Script.create("alice", "main", "x").activate(NOW).deactivate()
        assert not script.active
        assert script.activated_at is None

    def test_with_content_keeps_activation(self):
        script = Script.create("alice", "main", "x").activate(NOW).with_content("longer")
        assert script.content == "longer"
        assert script.size == 6
        assert script.active
        assert script.activated_at == NOW

    def test_renamed_keeps_everything_but_the_name(self):
        original = Script.create("alice", "main", "x").activate(NOW)
        renamed = original.renamed("other")
        assert renamed.name == "other"
        assert (renamed.owner, renamed.content, renamed.size) == ("alice", "x", 1)
        assert renamed.active and renamed.activated_at == NOW

    def test_summary(self):
        script = Script.create("alice", "main", "x")
        assert script.summary() == ScriptSummary(name="main", active=False)

    def test_no_script_name_is_never_a_valid_name(self):
        assert NO_SCRIPT_NAME == ""
