"""Move IL2CPP output into the final layout and drop intermediates."""

import shutil
from pathlib import Path

from testbuild.console import fail, print_info, print_success

KEEP_SUFFIXES = (".dll", ".exe", ".so", ".pdb", ".map", ".sym")


def reset_directory(path):
    """Remove and recreate a directory"""
    path = Path(path)
    if path.exists():
        print_info(f"Cleaning {path}")
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def relocate_artifacts(stage_bin, final_dir, expected_binary, keep_suffixes=KEEP_SUFFIXES):
    """Move kept files from stage_bin into final_dir and delete the rest"""
    stage_bin = Path(stage_bin)
    final_dir = Path(final_dir)

    if not (stage_bin / expected_binary).is_file():
        fail(f"Expected binary not produced: {stage_bin / expected_binary}")

    final_dir.mkdir(parents=True, exist_ok=True)
    moved = []

    for item in sorted(stage_bin.iterdir()):
        if item.is_file() and item.suffix.lower() in keep_suffixes:
            destination = final_dir / item.name
            if destination.exists():
                destination.unlink()
            shutil.move(str(item), str(destination))
            moved.append(destination)
        elif item.is_dir():
            shutil.rmtree(item)
        else:
            item.unlink()

    print_success(f"Moved {len(moved)} file(s) to {final_dir}")
    return moved


def clean_stage(stage_dir):
    """Delete generated C++, the IL2CPP cache and leftover staging output"""
    stage_dir = Path(stage_dir)
    if stage_dir.exists():
        shutil.rmtree(stage_dir)


def describe_artifacts(paths):
    rows = []
    for path in paths:
        path = Path(path)
        if path.exists():
            rows.append((path, path.stat().st_size / (1024 * 1024)))
    return rows
