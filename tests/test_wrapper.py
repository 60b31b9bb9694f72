"""
Release wrapper: default backend baked in, operator override wins, idempotent re-wrap.
"""

from __future__ import annotations

import os
import stat
import subprocess
from pathlib import Path

import pytest

from compat_harness.core.errors import ConfigurationError, HarnessError
from compat_harness.pipeline import run_release_wrapper
from compat_harness.wrapper import is_generated_wrapper, render_wrapper, wrapped_path, write_wrapper
from tests.fakes.backends import make_settings

VAR = "NIXPKGS_VET_NIX_PACKAGE"


def _program(tmp_path, body="echo \"backend=${%s}\" \"$@\"\n" % VAR):
    p = tmp_path / "bin" / "tool"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text("#!/bin/sh\n" + body)
    p.chmod(0o755)
    return p


def test_render_defaults_only_when_unset(tmp_path):
    text = render_wrapper(tmp_path / ".tool-wrapped", {VAR: "/nix/store/abc-nix"})
    assert text.startswith("#!/bin/sh\n")
    assert f'if [ -z "${{{VAR}+x}}" ]; then' in text
    assert f"  {VAR}=/nix/store/abc-nix" in text
    assert f"  export {VAR}" in text
    assert text.rstrip().endswith('"$@"')


def test_render_quotes_values():
    text = render_wrapper(Path("/opt/my tool/.t-wrapped"), {VAR: "/path with space/$x"})
    assert "'/path with space/$x'" in text
    assert "exec '/opt/my tool/.t-wrapped' \"$@\"" in text


def test_render_rejects_bad_variable_name(tmp_path):
    with pytest.raises(ConfigurationError):
        render_wrapper(tmp_path / "x", {"BAD-NAME": "1"})


def test_write_wrapper_moves_original_and_writes_script(tmp_path):
    program = _program(tmp_path)
    original = program.read_text()
    wrapped = write_wrapper(program, {VAR: "/nix/v1"})
    assert wrapped == wrapped_path(program.absolute())
    assert wrapped.name == ".tool-wrapped"
    assert wrapped.read_text() == original
    assert "/nix/v1" in program.read_text()
    assert program.stat().st_mode & stat.S_IXUSR


def test_rewrap_does_not_wrap_twice(tmp_path):
    program = _program(tmp_path)
    original = program.read_text()
    write_wrapper(program, {VAR: "/nix/v1"})
    wrapped = write_wrapper(program, {VAR: "/nix/v2"})
    assert wrapped.read_text() == original
    assert "/nix/v2" in program.read_text()
    assert "/nix/v1" not in program.read_text()
    assert not (program.parent / "..tool-wrapped-wrapped").exists()


def test_missing_program(tmp_path):
    with pytest.raises(HarnessError, match="not found"):
        write_wrapper(tmp_path / "nope", {VAR: "/nix/v1"})


@pytest.mark.skipif(os.name == "nt", reason="needs /bin/sh")
class TestWrapperExecution:
    """Run the generated wrapper with sh."""

    def _run(self, program, env_extra=None):
        env = {k: v for k, v in os.environ.items() if k != VAR}
        env.update(env_extra or {})
        r = subprocess.run([str(program), "a b", "c"], capture_output=True, text=True, env=env, timeout=10)
        assert r.returncode == 0, r.stderr
        return r.stdout.strip()

    def test_default_applies_without_setup(self, tmp_path):
        program = _program(tmp_path)
        write_wrapper(program, {VAR: "/nix/store/v1"})
        assert self._run(program) == "backend=/nix/store/v1 a b c"

    def test_operator_override_wins(self, tmp_path):
        program = _program(tmp_path)
        write_wrapper(program, {VAR: "/nix/store/v1"})
        assert self._run(program, {VAR: "/custom/nix"}) == "backend=/custom/nix a b c"

    def test_default_is_absolute_from_other_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "result-nix").mkdir()
        program = _program(tmp_path)
        monkeypatch.chdir(tmp_path)
        settings = make_settings()
        run_release_wrapper(settings, program=program, default_backend=Path("result-nix"))
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)
        env = {k: v for k, v in os.environ.items() if k != settings.backend.variable}
        script = f'#!/bin/sh\n[ -d "${settings.backend.variable}" ] && echo ok\n'
        (program.parent / ".tool-wrapped").write_text(script)
        r = subprocess.run([str(program)], capture_output=True, text=True, env=env, timeout=10)
        assert r.stdout.strip() == "ok"


def test_rewrap_after_reinstall_keeps_new_build(tmp_path):
    program = _program(tmp_path, body="echo build1\n")
    write_wrapper(program, {VAR: "/nix/v1"})
    _program(tmp_path, body="echo build2\n")
    wrapped = write_wrapper(program, {VAR: "/nix/v2"})
    assert "build2" in wrapped.read_text()
    assert "/nix/v2" in program.read_text()


def test_wrapper_without_original_is_an_error(tmp_path):
    program = _program(tmp_path)
    wrapped = write_wrapper(program, {VAR: "/nix/v1"})
    wrapped.unlink()
    with pytest.raises(HarnessError, match="missing"):
        write_wrapper(program, {VAR: "/nix/v1"})


def test_generated_wrapper_is_recognised(tmp_path):
    program = _program(tmp_path)
    assert not is_generated_wrapper(program)
    wrapped = write_wrapper(program, {VAR: "/nix/v1"})
    assert is_generated_wrapper(program)
    assert not is_generated_wrapper(wrapped)
    assert not is_generated_wrapper(tmp_path / "absent")
