from __future__ import annotations

import os
from pathlib import Path

import pytest

from nextclass.utils.env import load_env_file
from nextclass.utils.ids import generate_job_id


def test_env_file_values_do_not_override_existing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
  env_file = tmp_path / ".env"
  env_file.write_text("# comment\nexport NEXTCLASS_TEST_A='quoted value'\nNEXTCLASS_TEST_B=from-file\nbroken line\n", encoding="utf-8")
  monkeypatch.delenv("NEXTCLASS_TEST_A", raising=False)
  monkeypatch.setenv("NEXTCLASS_TEST_B", "from-env")

  load_env_file(env_file)

  assert os.environ["NEXTCLASS_TEST_A"] == "quoted value"
  assert os.environ["NEXTCLASS_TEST_B"] == "from-env"
  monkeypatch.delenv("NEXTCLASS_TEST_A")


def test_job_ids_are_unique() -> None:
  assert len({generate_job_id() for _ in range(100)}) == 100
