"""Tests for GitLab record models and content renderers."""

from __future__ import annotations

import base64

import pytest
import yaml

from gitkeeper.gitlab import (
    Commit,
    CommitSummary,
    ContentRenderer,
    Project,
    RepositoryFile,
    TextRenderer,
    YamlRenderer,
)


class TestRecords:
    def test_extra_fields_are_kept(self):
        project = Project.model_validate(
            {"id": 1, "name": "a", "namespace": {"id": 7, "path": "infra"}}
        )
        assert project.model_dump()["namespace"] == {"id": 7, "path": "infra"}

    def test_commit_summary_from_commit(self):
        commit = Commit(id="f" * 40, short_id="ffffffff", title="fix", author_name="Sam")
        assert CommitSummary.from_commit(commit) == CommitSummary(
            commit_id="ffffffff", commit_message="fix", commit_author="Sam"
        )

    def test_file_text_plain(self):
        assert RepositoryFile(file_path="a.txt", content="hi").text == "hi"

    def test_file_text_base64(self):
        encoded = base64.b64encode("naïve: true\n".encode()).decode()
        file = RepositoryFile(file_path="a.yaml", encoding="base64", content=encoded)
        assert file.text == "naïve: true\n"

    def test_file_text_bad_base64(self):
        file = RepositoryFile(file_path="a.bin", encoding="base64", content="abc")
        with pytest.raises(ValueError, match="a.bin"):
            _ = file.text


class TestRenderers:
    def test_renderers_satisfy_protocol(self):
        assert isinstance(YamlRenderer({}), ContentRenderer)
        assert isinstance(TextRenderer(""), ContentRenderer)

    def test_yaml_single_document_keeps_key_order(self):
        manifest = {"apiVersion": "v1", "kind": "ConfigMap", "data": {"b": "2", "a": "1"}}

        text = YamlRenderer(manifest).render().decode()

        assert text.splitlines()[0] == "apiVersion: v1"
        assert text.index("b: '2'") < text.index("a: '1'")
        assert yaml.safe_load(text) == manifest

    def test_yaml_explicit_start(self):
        assert YamlRenderer({"a": 1}, explicit_start=True).render() == b"---\na: 1\n"

    def test_yaml_multiple_documents(self):
        text = YamlRenderer({"kind": "Service"}, {"kind": "Deployment"}).render().decode()

        assert text.count("---") == 2
        assert [d["kind"] for d in yaml.safe_load_all(text)] == ["Service", "Deployment"]

    def test_yaml_requires_a_document(self):
        with pytest.raises(ValueError):
            YamlRenderer()

    def test_yaml_unserializable_raises(self):
        with pytest.raises(yaml.YAMLError):
            YamlRenderer({"obj": object()}).render()

    def test_text_renderer(self):
        assert TextRenderer("héllo").render() == "héllo".encode()
