"""Tests for the tagged YAML document loader."""

import pytest

from stage_graph.loader import PIPELINE_TAGS, DocumentParseError, build_loader, load_document


class TestLoadDocument:
    def test_tags_are_stripped_to_plain_mappings(self, ingest_document):
        tree = load_document(ingest_document)
        pipeline = tree["pipeline"]
        assert isinstance(pipeline, dict)
        assert pipeline["name"] == "Ingest"
        assert [stage["name"] for stage in pipeline["runs"]] == ["Fetch", "Clean", "Watch"]
        assert pipeline["runs"][1]["inputs"] == "*raw_data"

    def test_key_order_is_preserved(self):
        tree = load_document("zeta: {name: Z}\nalpha: {name: A}\nmid: {name: M}\n")
        assert list(tree) == ["zeta", "alpha", "mid"]

    @pytest.mark.parametrize("tag", ["!Conditional", "!Loop", "!MonitoringService"])
    def test_every_mapping_tag_is_accepted(self, tag):
        tree = load_document(f"step: {tag}\n  name: tagged\n  runs: []\n")
        assert tree == {"step": {"name": "tagged", "runs": []}}

    def test_scalar_tags_keep_their_text(self):
        tree = load_document(
            "stage: !BasicStage\n"
            "  script: !FilePath /opt/jobs/run.sh\n"
            "  when: !Expression \"x > 1\"\n"
            "  notes: !MultiLine |\n"
            "    first\n"
            "    second\n"
        )
        stage = tree["stage"]
        assert stage["script"] == "/opt/jobs/run.sh"
        assert stage["when"] == "x > 1"
        assert stage["notes"] == "first\nsecond\n"

    def test_tagged_root_document(self):
        tree = load_document("--- !GenericPipeline\nbuild: {name: Build}\n")
        assert tree == {"build": {"name": "Build"}}

    def test_native_aliases_are_resolved(self):
        tree = load_document(
            "shared: &shared\n"
            "  name: Shared\n"
            "copy: *shared\n"
        )
        assert tree["copy"] == {"name": "Shared"}

    @pytest.mark.parametrize("text", ["", "   \n\t\n", "# only a comment\n"])
    def test_empty_documents_load_as_none(self, text):
        assert load_document(text) is None


class TestParseErrors:
    def test_malformed_syntax_raises_with_location(self):
        with pytest.raises(DocumentParseError) as excinfo:
            load_document("stage: name: broken\n")
        assert excinfo.value.line == 1
        assert excinfo.value.column is not None
        assert excinfo.value.to_dict()["message"]

    def test_unclosed_flow_sequence(self):
        with pytest.raises(DocumentParseError):
            load_document("stage:\n  runs: [one, two\n")

    def test_unknown_tag_is_a_parse_error(self):
        with pytest.raises(DocumentParseError):
            load_document("stage: !CustomStep {name: X}\n")

    def test_parse_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            load_document("a: [")


class TestDuplicateKeys:
    def test_duplicate_top_level_keys_raise(self):
        with pytest.raises(DocumentParseError, match="duplicate key 'a'") as excinfo:
            load_document("a: {name: A}\na: {name: B}\n")
        assert excinfo.value.line == 2

    def test_duplicate_stage_fields_raise(self):
        with pytest.raises(DocumentParseError):
            load_document("stage: !BasicStage\n  name: A\n  name: B\n")

    def test_merge_keys_may_be_overridden(self):
        tree = load_document("base: &b {name: Base, runs: []}\nstage:\n  <<: *b\n  name: Override\n")
        assert tree["stage"] == {"name": "Override", "runs": []}


class TestExtraTags:
    def test_extra_tags_are_accepted_when_configured(self):
        tree = load_document("stage: !CustomStep {name: X}\n", extra_tags=("!CustomStep",))
        assert tree == {"stage": {"name": "X"}}

    def test_extra_tags_do_not_leak_into_default_loader(self):
        build_loader(("!Scratch",))
        with pytest.raises(DocumentParseError):
            load_document("stage: !Scratch {name: X}\n")

    def test_known_tags_reuse_the_default_loader(self):
        assert build_loader(PIPELINE_TAGS[:2]) is build_loader()
