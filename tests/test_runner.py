"""
Check runner: link -> announce -> init -> checks -> unlink, on every exit path.
"""

from __future__ import annotations

import io
import os

import pytest

from compat_harness.core.errors import HarnessError, LinkCollision
from compat_harness.core.types import STAGE_CHECK, STAGE_INIT
from compat_harness.link_slot import LinkSlot
from compat_harness.runner import CheckRunner
from tests.fakes.backends import INIT_CMD, VARIABLE, make_backend, make_settings
from tests.fakes.executor import FakeExecutor

pytestmark = pytest.mark.skipif(os.name == "nt", reason="symlinks need POSIX")


@pytest.fixture
def slot(tmp_path):
    return LinkSlot(tmp_path / "slot" / "backend")


@pytest.fixture(autouse=True)
def _slot_parent(tmp_path):
    (tmp_path / "slot").mkdir()


def _runner(slot, settings, ex, out=None):
    return CheckRunner(slot, settings, executor=ex, base_env={"PATH": "/usr/bin"}, out=out or io.StringIO())


def test_passing_version(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    ex = FakeExecutor()
    outcome = _runner(slot, make_settings([v1]), ex).run(v1)
    assert outcome.passed
    assert outcome.exit_code == 0
    assert outcome.stage == STAGE_CHECK
    assert outcome.descriptor == v1
    assert not os.path.lexists(slot.path)


def test_failing_version_still_unlinks(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    ex = FakeExecutor(failing_checks={"v1"}, check_rc=101)
    outcome = _runner(slot, make_settings([v1]), ex).run(v1)
    assert not outcome.passed
    assert outcome.exit_code == 101
    assert not os.path.lexists(slot.path)


def test_check_sees_linked_backend_through_selection_variable(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    ex = FakeExecutor()
    _runner(slot, make_settings([v1]), ex).run(v1)
    (check,) = ex.of_kind("check")
    assert check.active == "v1"
    assert check.env[VARIABLE] == str(slot.path)
    assert check.env["PATH"].split(os.pathsep)[0] == str(slot.path / "bin")


def test_progress_line_names_queried_version(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    out = io.StringIO()
    outcome = _runner(slot, make_settings([v1]), FakeExecutor(), out=out).run(v1)
    assert out.getvalue() == "Testing with backend (v1)\n"
    assert outcome.version_string == "backend (v1)"


def test_progress_line_falls_back_to_label(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    out = io.StringIO()
    ex = FakeExecutor(version_error=True)
    outcome = _runner(slot, make_settings([v1]), ex, out=out).run(v1)
    assert "Testing with v1" in out.getvalue()
    assert outcome.passed


def test_no_version_executable_uses_label(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    out = io.StringIO()
    ex = FakeExecutor()
    _runner(slot, make_settings([v1], version_executable=None), ex, out=out).run(v1)
    assert out.getvalue() == "Testing with v1\n"
    assert [c.kind for c in ex.calls] == ["check"]


def test_init_runs_before_checks_against_linked_backend(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    ex = FakeExecutor()
    _runner(slot, make_settings([v1], init=[INIT_CMD]), ex).run(v1)
    kinds = [c.kind for c in ex.calls if c.kind != "other"]
    assert kinds == ["init", "check"]
    assert ex.of_kind("init")[0].active == "v1"


def test_failing_init_skips_checks_and_unlinks(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    ex = FakeExecutor(failing_inits={"v1"})
    outcome = _runner(slot, make_settings([v1], init=[INIT_CMD]), ex).run(v1)
    assert not outcome.passed
    assert outcome.stage == STAGE_INIT
    assert outcome.exit_code == 3
    assert ex.of_kind("check") == []
    assert not os.path.lexists(slot.path)


def test_exception_in_check_propagates_and_unlinks(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    ex = FakeExecutor(raise_on_check=HarnessError("could not start"))
    with pytest.raises(HarnessError, match="could not start"):
        _runner(slot, make_settings([v1]), ex).run(v1)
    assert not os.path.lexists(slot.path)


def test_occupied_slot_is_fatal_and_runs_nothing(tmp_path, slot):
    v1 = make_backend(tmp_path / "b", "v1")
    stale = make_backend(tmp_path / "b", "stale")
    os.symlink(str(stale.bin_root), str(slot.path))
    ex = FakeExecutor()
    with pytest.raises(LinkCollision):
        _runner(slot, make_settings([v1]), ex).run(v1)
    assert ex.calls == []
    assert os.readlink(slot.path) == str(stale.bin_root)


def test_requires_check_command(tmp_path, slot):
    with pytest.raises(HarnessError, match="check.command"):
        CheckRunner(slot, make_settings(check=()), executor=FakeExecutor())
