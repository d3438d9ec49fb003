"""Global pytest configuration and fixtures for all tests."""

import subprocess
import sys
import tempfile
from pathlib import Path
import pytest

# Add parent directory to path to import the main module
sys.path.insert(0, str(Path(__file__).parent.parent))

from helm_release_validate import utils
from manifests import RENDERED_MANIFEST


class FakeProcess:
    """Stand-in for subprocess.Popen as used for helm template."""

    def __init__(self, returncode: int, stdout: str, stderr: str):
        self.returncode = returncode
        self._stdout = stdout
        self._stderr = stderr

    def communicate(self):
        return self._stdout, self._stderr


class FakeTools:
    """Records external tool invocations instead of running them.

    - helm pull creates the unpacked chart directory
    - kubeval returns kubeval_exit
    - any command starting with fail_on exits 1
    """

    def __init__(self):
        self.calls = []
        self.kubeval_exit = 0
        self.fail_on = None
        self.rendered = RENDERED_MANIFEST
        self.template_stderr = ""
        self.template_exit = 0
        self.missing = set()

    def which(self, name):
        return None if name in self.missing else f"/usr/local/bin/{name}"

    def run(self, cmd, check=False, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)

        if cmd[:2] == ["helm", "pull"]:
            destination = Path(cmd[cmd.index("--destination") + 1])
            chart_name = cmd[2].split("/", 1)[1]
            (destination / chart_name).mkdir(parents=True, exist_ok=True)
            (destination / chart_name / "Chart.yaml").write_text(f"name: {chart_name}\n")

        returncode = 0
        if cmd[0] == "kubeval":
            returncode = self.kubeval_exit
        elif self.fail_on and cmd[:len(self.fail_on)] == list(self.fail_on):
            returncode = 1

        if check and returncode != 0:
            raise subprocess.CalledProcessError(returncode, cmd)
        return subprocess.CompletedProcess(cmd, returncode)

    def popen(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        return FakeProcess(self.template_exit, self.rendered, self.template_stderr)

    def commands(self, tool: str) -> list[list[str]]:
        """All recorded invocations of the given binary."""
        return [cmd for cmd in self.calls if cmd[0] == tool]


@pytest.fixture
def fake_tools(monkeypatch):
    """Replace helm, kubeval and git with a recorder."""
    tools = FakeTools()
    monkeypatch.setattr(subprocess, "run", tools.run)
    monkeypatch.setattr(subprocess, "Popen", tools.popen)
    monkeypatch.setattr(utils.shutil, "which", tools.which)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return tools


@pytest.fixture
def tmp_workdirs(monkeypatch, tmp_path):
    """Point tempfile at a per-test directory so working directories can be inspected."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def write_manifest(tmp_path):
    """Write a manifest document to a file and return its path."""
    def _write(content: str, name: str = "helmrelease.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path
    return _write
