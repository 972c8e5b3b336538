"""Run IL2CPP on a compiled assembly for each build target."""

import os
import shutil
from pathlib import Path

from testbuild.console import print_header, print_info, print_success
from testbuild.runner import run_command


def stage_directory(work_dir, assembly_name, target):
    return Path(work_dir) / "native" / assembly_name / target.folder


def il2cpp_arguments(toolchain, target, assembly, stage_dir, configuration="Release"):
    assembly = Path(assembly)
    stage_dir = Path(stage_dir)
    output = stage_dir / "bin" / target.binary_name(assembly.stem)

    cmd = [
        str(toolchain.il2cpp),
        "--convert-to-cpp",
        "--compile-cpp",
        f"--platform={target.platform}",
        f"--architecture={target.architecture}",
        f"--configuration={configuration}",
        "--dotnetprofile=unityaot",
        f"--directory={assembly.parent}",
        f"--generatedcppdir={stage_dir / 'cpp'}",
        f"--cachedirectory={stage_dir / 'cache'}",
        f"--outputpath={output}",
    ]

    if target.is_android:
        cmd.append(f"--tool-chain-path={toolchain.android_ndk}")

    return cmd


def il2cpp_environment(toolchain, target):
    """Android builds also pick the NDK/SDK up from the environment"""
    if not target.is_android:
        return None
    env = dict(os.environ)
    env["ANDROID_NDK_ROOT"] = str(toolchain.android_ndk)
    if toolchain.android_sdk:
        env["ANDROID_SDK_ROOT"] = str(toolchain.android_sdk)
    return env


def build_native(toolchain, target, assembly, work_dir, configuration="Release",
                 verbose=False, dry_run=False):
    name = Path(assembly).stem
    stage_dir = stage_directory(work_dir, name, target)

    if not dry_run:
        # bin must only ever hold output of this invocation
        bin_dir = stage_dir / "bin"
        if bin_dir.exists():
            shutil.rmtree(bin_dir)
        bin_dir.mkdir(parents=True)

    print_info(f"IL2CPP {name} for {target.platform} {target.architecture}...")
    cmd = il2cpp_arguments(toolchain, target, assembly, stage_dir, configuration)
    run_command(cmd, verbose=verbose, dry_run=dry_run, env=il2cpp_environment(toolchain, target))

    print_success(f"Built {target.folder} into {stage_dir}")
    return stage_dir


def build_all_targets(toolchain, targets, assembly, work_dir, configuration="Release",
                      verbose=False, dry_run=False):
    """Build one assembly for every target, one after another"""
    print_header(f"Native build: {Path(assembly).stem}")
    stages = {}
    for target in targets:
        stages[target] = build_native(toolchain, target, assembly, work_dir, configuration,
                                      verbose=verbose, dry_run=dry_run)
    return stages
