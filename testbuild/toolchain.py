"""
Toolchain locator

Finds the C# compiler, the Unity editor with its IL2CPP deploy folder and
AOT class libraries, and the Android NDK/SDK. Every probe checks its
environment variable first, then PATH where that makes sense, then the
usual install locations.
"""

import glob
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from testbuild.console import fail, print_warning

ON_WINDOWS = os.name == "nt"
WINDOWS_SUFFIXES = (".exe", ".bat")

# Folders that hold the editor "Data" directory (Contents on macOS)
UNITY_DATA_PATTERNS = [
    r"C:\Program Files\Unity\Hub\Editor\*\Editor\Data",
    r"C:\Program Files\Unity*\Editor\Data",
    "/Applications/Unity/Hub/Editor/*/Unity.app/Contents",
    "/Applications/Unity*/Unity.app/Contents",
    "~/Unity/Hub/Editor/*/Editor/Data",
    "/opt/unity/Editor/Data",
]

VISUAL_STUDIO_CSC_PATTERNS = [
    r"C:\Program Files\Microsoft Visual Studio\*\*\MSBuild\Current\Bin\Roslyn\csc.exe",
    r"C:\Program Files (x86)\Microsoft Visual Studio\*\*\MSBuild\Current\Bin\Roslyn\csc.exe",
    r"C:\Program Files (x86)\Microsoft Visual Studio\*\*\MSBuild\*\Bin\Roslyn\csc.exe",
]

IL2CPP_RELATIVE = [
    "il2cpp/build/deploy/il2cpp.exe",
    "il2cpp/build/deploy/il2cpp",
    "il2cpp/build/il2cpp.exe",
    "il2cpp/build/il2cpp",
]

CLASS_LIBRARY_RELATIVE = [
    "MonoBleedingEdge/lib/mono/unityaot-win32",
    "MonoBleedingEdge/lib/mono/unityaot-linux",
    "MonoBleedingEdge/lib/mono/unityaot-macos",
    "MonoBleedingEdge/lib/mono/unityaot",
]

MONO_COMPILER_RELATIVE = [
    "MonoBleedingEdge/bin/mcs.bat",
    "MonoBleedingEdge/bin/mcs",
]


@dataclass
class Toolchain:
    csc: Path
    editor_data: Path
    il2cpp: Path
    class_libraries: Path
    android_ndk: Optional[Path] = None
    android_sdk: Optional[Path] = None


def _version_key(path):
    # "2022.3.10f1" must sort after "2022.3.9f1"
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", str(path))]


def _host_order(relatives):
    """Put binaries this host can run ahead of the ones it cannot"""
    def is_windows_binary(rel):
        return rel.lower().endswith(WINDOWS_SUFFIXES)
    return sorted(relatives, key=lambda rel: is_windows_binary(rel) != ON_WINDOWS)


def is_executable(path):
    if path is None or not Path(path).is_file():
        return False
    return ON_WINDOWS or os.access(path, os.X_OK)


def find_first(patterns):
    """Return the newest existing match of the first pattern that matches"""
    for pattern in patterns:
        matches = glob.glob(os.path.expanduser(str(pattern)))
        matches = [m for m in matches if os.path.exists(m)]
        if matches:
            return Path(sorted(matches, key=_version_key)[-1])
    return None


def _from_env(*names):
    for name in names:
        value = os.environ.get(name)
        if not value:
            continue
        path = Path(value).expanduser()
        if path.exists():
            return path
        print_warning(f"{name} points to a missing path: {path}")
    return None


def _android_player_dirs(editor_data):
    # macOS keeps PlaybackEngines next to Unity.app rather than inside it
    return [
        editor_data / "PlaybackEngines" / "AndroidPlayer",
        editor_data.parent.parent / "PlaybackEngines" / "AndroidPlayer",
    ]


def find_unity_editor_data():
    data = _from_env("UNITY_EDITOR_DATA")
    if data:
        return data

    root = _from_env("UNITY_ROOT")
    if root:
        for candidate in (root / "Editor" / "Data", root / "Unity.app" / "Contents", root / "Data", root):
            if (candidate / "il2cpp").is_dir():
                return candidate
        print_warning(f"UNITY_ROOT has no il2cpp folder: {root}")

    return find_first(UNITY_DATA_PATTERNS)


def find_il2cpp(editor_data):
    return find_first(str(editor_data / rel) for rel in _host_order(IL2CPP_RELATIVE))


def find_class_libraries(editor_data):
    for rel in CLASS_LIBRARY_RELATIVE:
        candidate = editor_data / rel
        if (candidate / "mscorlib.dll").is_file():
            return candidate
    return None


def find_csharp_compiler(editor_data=None):
    compiler = _from_env("CSC")
    if compiler:
        return compiler

    for name in ("csc", "mcs"):
        found = shutil.which(name)
        if found:
            return Path(found)

    compiler = find_first(VISUAL_STUDIO_CSC_PATTERNS)
    if compiler:
        return compiler

    if editor_data:
        return find_first(str(editor_data / rel) for rel in _host_order(MONO_COMPILER_RELATIVE))
    return None


def _is_ndk(path):
    return path is not None and (path / "source.properties").is_file()


def find_android_ndk(editor_data=None):
    ndk = _from_env("ANDROID_NDK_ROOT", "ANDROID_NDK_HOME")
    if _is_ndk(ndk):
        return ndk
    if ndk:
        print_warning(f"Not an Android NDK (no source.properties): {ndk}")

    if editor_data:
        for player in _android_player_dirs(editor_data):
            if _is_ndk(player / "NDK"):
                return player / "NDK"
    return None


def find_android_sdk(editor_data=None):
    sdk = _from_env("ANDROID_SDK_ROOT", "ANDROID_HOME")
    if sdk:
        return sdk

    if editor_data:
        for player in _android_player_dirs(editor_data):
            if (player / "SDK").is_dir():
                return player / "SDK"
    return None


def read_ndk_revision(ndk):
    """Read Pkg.Revision from the NDK's source.properties"""
    properties = Path(ndk) / "source.properties"
    if not properties.is_file():
        return None
    for line in properties.read_text().splitlines():
        key, _, value = line.partition("=")
        if key.strip() == "Pkg.Revision":
            return value.strip()
    return None


def locate_toolchain(need_android=True):
    """Resolve every tool the build needs, or stop with an install hint"""
    editor_data = find_unity_editor_data()
    if not editor_data:
        fail("Unity editor not found!",
             hint="Install Unity with IL2CPP support or set UNITY_ROOT / UNITY_EDITOR_DATA")

    il2cpp = find_il2cpp(editor_data)
    if not is_executable(il2cpp):
        fail(f"No runnable IL2CPP found under {editor_data}",
             hint="Install the IL2CPP build support module for this editor")

    class_libraries = find_class_libraries(editor_data)
    if not class_libraries:
        fail(f"Unity AOT class libraries (mscorlib.dll) not found under {editor_data}")

    csc = find_csharp_compiler(editor_data)
    if not is_executable(csc):
        fail("C# compiler not found or not executable!",
             hint="Install Visual Studio or Mono, or set CSC to the compiler path")

    toolchain = Toolchain(csc=csc, editor_data=editor_data, il2cpp=il2cpp,
                          class_libraries=class_libraries)

    if need_android:
        toolchain.android_ndk = find_android_ndk(editor_data)
        if not toolchain.android_ndk:
            fail("Android NDK not found!",
                 hint="Install Android build support in Unity Hub or set ANDROID_NDK_ROOT")
        toolchain.android_sdk = find_android_sdk(editor_data)
        if not toolchain.android_sdk:
            fail("Android SDK not found!",
                 hint="Install Android build support in Unity Hub or set ANDROID_SDK_ROOT")

    return toolchain
