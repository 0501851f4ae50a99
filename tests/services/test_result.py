"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from minictl.domain.errors import ConfigFileError, StartupError
from minictl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="start", data={"config_file": "hbase-site.xml"})
        assert result.ok is True
        assert result.op == "start"
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="stop", data={"stopped": True}, meta={"x": 1})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["stopped"] is True
        assert parsed["meta"]["x"] == 1

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_failure_from_exception(self) -> None:
        try:
            try:
                raise OSError("Address already in use")
            except OSError as exc:
                raise StartupError("Unable to start cluster") from exc
        except StartupError as err:
            result = ServiceResult.failure("start", err, warnings=["w"])

        assert result.ok is False
        assert result.warnings == ["w"]
        assert result.error is not None
        assert result.error.code == "STARTUP_FAILED"
        assert result.error.message == "Unable to start cluster"
        assert result.error.detail == {
            "cause": "Address already in use",
            "cause_type": "OSError",
        }


class TestServiceError:
    def test_default_detail(self) -> None:
        assert ServiceError(code="E001", message="bad").detail == {}

    def test_from_exception_without_cause(self) -> None:
        error = ServiceError.from_exception(ConfigFileError("Unable to write"))
        assert error.code == "IO_ERROR"
        assert error.detail == {}
