"""Tests for classpath publishing."""

from __future__ import annotations

import os

import pytest

from minictl.infrastructure.environment import current_classpath, publish_classpath


def test_current_classpath_defaults_to_empty() -> None:
    assert current_classpath("MINICTL_TEST_CP", environ={}) == ""


def test_publish_into_given_mapping() -> None:
    env: dict[str, str] = {}
    publish_classpath("/a:/b", "CP", environ=env)
    assert env == {"CP": "/a:/b"}


def test_publish_into_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINICTL_TEST_CP", "old")
    publish_classpath("/new.jar", "MINICTL_TEST_CP")
    assert os.environ["MINICTL_TEST_CP"] == "/new.jar"
    assert current_classpath("MINICTL_TEST_CP") == "/new.jar"
