"""结构化错误测试."""

import json

import httpx
import pytest

from vibe_skills.errors import (
    ErrorType,
    InstallError,
    RegistryFetchError,
    SkillAlreadyInstalledError,
    SkillNotFoundError,
    SkillsError,
    classify_error,
)


class TestSkillsError:
    def test_subclass_types(self):
        assert SkillNotFoundError("x").error_type is ErrorType.NOT_FOUND
        assert SkillAlreadyInstalledError("x").error_type is ErrorType.ALREADY_EXISTS
        assert InstallError("disk full").error_type is ErrorType.IO

    def test_explicit_type_overrides_class_default(self):
        err = SkillsError("boom", error_type=ErrorType.NETWORK)
        assert err.error_type is ErrorType.NETWORK
        assert SkillsError("plain").error_type is ErrorType.VALIDATION

    def test_hint(self):
        assert "--force" in SkillAlreadyInstalledError("x").hint
        assert SkillsError("plain").hint == ""

    def test_to_json(self):
        data = json.loads(SkillNotFoundError("ef-core").to_json())
        assert data == {
            "error": True,
            "error_type": "not_found",
            "message": "skill not found: ef-core",
            "hint": SkillNotFoundError("ef-core").hint,
            "details": {"name": "ef-core"},
        }


class TestClassifyError:
    def test_passthrough(self):
        err = InstallError("x")
        assert classify_error(err) is err

    def test_httpx_error(self):
        request = httpx.Request("GET", "https://example.test")
        err = classify_error(httpx.ConnectTimeout("timed out", request=request))
        assert isinstance(err, RegistryFetchError)
        assert err.message == "timed out"

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (FileNotFoundError("gone"), ErrorType.NOT_FOUND),
            (PermissionError("denied"), ErrorType.IO),
            (ValueError("bad"), ErrorType.VALIDATION),
        ],
    )
    def test_builtin_errors(self, exc, expected):
        assert classify_error(exc).error_type is expected

    def test_empty_message_uses_class_name(self):
        assert classify_error(RuntimeError()).message == "RuntimeError"
