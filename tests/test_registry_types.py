"""Skill / RegistryIndex 解析测试."""

import pytest

from vibe_skills.errors import ErrorType, RegistryParseError
from vibe_skills.registry import RegistryIndex, Skill


class TestSkill:
    def test_from_dict_full_entry(self):
        skill = Skill.from_dict(
            {
                "name": "ef-core",
                "stack": "dotnet",
                "description": "EF guidance",
                "path": "dotnet/ef-core/SKILL.md",
                "files": ["templates/dbcontext.cs"],
            }
        )
        assert skill.full_name == "dotnet/ef-core"
        assert skill.directory == "dotnet/ef-core"
        assert skill.files == ["templates/dbcontext.cs"]

    def test_description_and_files_are_optional(self):
        skill = Skill.from_dict({"name": "a", "stack": "s", "path": "s/a/SKILL.md"})
        assert skill.description == ""
        assert skill.files == []

    def test_missing_required_fields(self):
        with pytest.raises(RegistryParseError, match="missing stack, path") as exc_info:
            Skill.from_dict({"name": "a"})
        assert exc_info.value.error_type is ErrorType.PARSE

    def test_files_must_be_a_list(self):
        with pytest.raises(RegistryParseError, match="'files' must be a list"):
            Skill.from_dict({"name": "a", "stack": "s", "path": "p", "files": "x.md"})

    @pytest.mark.parametrize("field_name", ["name", "stack"])
    @pytest.mark.parametrize("value", ["..", ".", "a/b", "/abs/dir", "a\\b"])
    def test_rejects_unsafe_name_and_stack(self, field_name, value):
        entry = {"name": "a", "stack": "s", "path": "s/a/SKILL.md", field_name: value}
        with pytest.raises(RegistryParseError, match=f"invalid skill {field_name}"):
            Skill.from_dict(entry)

    @pytest.mark.parametrize(
        "entry",
        [
            {"name": "a", "stack": "s", "path": "../../etc/SKILL.md"},
            {"name": "a", "stack": "s", "path": "/etc/SKILL.md"},
            {"name": "a", "stack": "s", "path": "s/a/SKILL.md", "files": ["../../.bashrc"]},
        ],
    )
    def test_rejects_unsafe_paths(self, entry):
        with pytest.raises(RegistryParseError, match="unsafe file path"):
            Skill.from_dict(entry)

    def test_to_dict_omits_empty_files(self):
        skill = Skill(name="a", stack="s", path="s/a/SKILL.md")
        assert "files" not in skill.to_dict()

    def test_matches_name_and_full_name(self):
        skill = Skill(name="a", stack="s", path="s/a/SKILL.md")
        assert skill.matches("a")
        assert skill.matches("s/a")
        assert not skill.matches("other/a")


class TestRegistryIndex:
    def test_parses_skills_in_order(self):
        index = RegistryIndex.from_dict(
            {
                "version": "2",
                "skills": [
                    {"name": "b", "stack": "s", "path": "s/b/SKILL.md"},
                    {"name": "a", "stack": "s", "path": "s/a/SKILL.md"},
                ],
            }
        )
        assert index.version == "2"
        assert [s.name for s in index.skills] == ["b", "a"]

    def test_missing_skills_is_empty(self):
        assert RegistryIndex.from_dict({"version": "1"}).skills == []

    @pytest.mark.parametrize("data", [[], "skills", {"skills": {"a": 1}}, {"skills": [1]}])
    def test_rejects_malformed_index(self, data):
        with pytest.raises(RegistryParseError):
            RegistryIndex.from_dict(data)
