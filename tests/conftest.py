"""Pytest fixtures for the test builder."""

import subprocess
from pathlib import Path

import pytest

from testbuild import toolchain as toolchain_module
from testbuild.console import Colors
from testbuild.toolchain import Toolchain

TOOLCHAIN_ENV = [
    "CSC",
    "UNITY_EDITOR_DATA",
    "UNITY_ROOT",
    "ANDROID_NDK_ROOT",
    "ANDROID_NDK_HOME",
    "ANDROID_SDK_ROOT",
    "ANDROID_HOME",
]


def touch(path, text=""):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def make_tool(path):
    """Create a file that passes the executable check"""
    path = touch(path, "#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture(autouse=True)
def restore_colors(monkeypatch):
    """main() may switch colours off; undo that after every test."""
    for name in ("GREEN", "RED", "BLUE", "CYAN", "YELLOW", "END", "BOLD"):
        monkeypatch.setattr(Colors, name, getattr(Colors, name))


@pytest.fixture
def isolated_env(monkeypatch):
    """No toolchain env vars, nothing on PATH, no well-known install folders."""
    for name in TOOLCHAIN_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(toolchain_module.shutil, "which", lambda name: None)
    monkeypatch.setattr(toolchain_module, "UNITY_DATA_PATTERNS", [])
    monkeypatch.setattr(toolchain_module, "VISUAL_STUDIO_CSC_PATTERNS", [])
    return monkeypatch


@pytest.fixture
def fake_unity(tmp_path):
    """Create a Unity editor Data folder with IL2CPP, AOT libs, mcs and Android support."""
    data = tmp_path / "Unity" / "2022.3.10f1" / "Editor" / "Data"
    make_tool(data / "il2cpp" / "build" / "deploy" / "il2cpp")
    libs = data / "MonoBleedingEdge" / "lib" / "mono" / "unityaot-linux"
    for name in ("mscorlib.dll", "System.dll", "System.Core.dll"):
        touch(libs / name)
    make_tool(data / "MonoBleedingEdge" / "bin" / "mcs")
    player = data / "PlaybackEngines" / "AndroidPlayer"
    touch(player / "NDK" / "source.properties", "Pkg.Desc = Android NDK\nPkg.Revision = 23.1.7779620\n")
    (player / "SDK" / "platform-tools").mkdir(parents=True)
    return data


@pytest.fixture
def toolchain(fake_unity):
    player = fake_unity / "PlaybackEngines" / "AndroidPlayer"
    return Toolchain(
        csc=fake_unity / "MonoBleedingEdge" / "bin" / "mcs",
        editor_data=fake_unity,
        il2cpp=fake_unity / "il2cpp" / "build" / "deploy" / "il2cpp",
        class_libraries=fake_unity / "MonoBleedingEdge" / "lib" / "mono" / "unityaot-linux",
        android_ndk=player / "NDK",
        android_sdk=player / "SDK",
    )


class FakeTools:
    """Stands in for subprocess.run: records calls and writes the files the tools would."""

    def __init__(self, fail_on=None, skip_output=False):
        self.calls = []
        self.fail_on = fail_on
        self.skip_output = skip_output

    def __call__(self, cmd, **kwargs):
        self.calls.append((list(cmd), kwargs))

        if self.fail_on and any(self.fail_on in arg for arg in cmd):
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="error CS1002: ; expected")

        if not self.skip_output:
            for arg in cmd:
                if arg.startswith("-out:"):
                    touch(arg[len("-out:"):])
                elif arg.startswith("--outputpath="):
                    output = Path(arg[len("--outputpath="):])
                    touch(output, "native")
                    touch(output.with_suffix(".pdb"))
                    touch(output.with_suffix(".ilk"))
                elif arg.startswith("--generatedcppdir="):
                    touch(Path(arg[len("--generatedcppdir="):]) / "Bulk_Generics_0.cpp")

        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    def commands_for(self, tool):
        return [cmd for cmd, _ in self.calls if Path(cmd[0]).name == tool]


@pytest.fixture
def fake_tools(monkeypatch):
    tools = FakeTools()
    monkeypatch.setattr(subprocess, "run", tools)
    return tools
